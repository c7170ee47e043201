"""
Map a free-text subject name to its curriculum corpus file.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from rapidfuzz import fuzz, process

from lesson_planner.config import settings

logger = logging.getLogger(__name__)

SUBJECT_CORPORA: dict[str, str] = {
    "คณิตศาสตร์": "math.csv",
    "วิทยาศาสตร์": "science.csv",
    "ภาษาไทย": "thai.csv",
    "ภาษาอังกฤษ": "english.csv",
    "สุขศึกษา": "health.csv",
    "สังคมศึกษา": "social_study.csv",
    "ศิลปะ": "art.csv",
    "การงานอาชีพ": "career_academic.csv",
}

# Scorer returns similarity in [0, 100], the same scale as rapidfuzz scorers
Scorer = Callable[..., float]


@dataclass(frozen=True)
class CorpusRef:
    corpus_id: str
    matched_subject: str | None
    similarity: float
    strategy: str  # "exact" | "fuzzy" | "default"


def resolve_corpus(
    subject: str,
    *,
    threshold: float | None = None,
    scorer: Scorer = fuzz.ratio,
    default_corpus: str | None = None,
) -> CorpusRef:
    """
    Resolve a subject to a corpus file name.

    Exact lookup first, then the closest known subject name when its
    similarity (0..1, rounded to 4 places) is at least the threshold,
    otherwise the generic curriculum corpus.
    """
    threshold = settings.subject_match_threshold if threshold is None else threshold
    default_corpus = default_corpus or settings.default_corpus
    subject = (subject or "").strip()

    if subject in SUBJECT_CORPORA:
        return CorpusRef(SUBJECT_CORPORA[subject], subject, 1.0, "exact")

    if subject:
        best = process.extractOne(subject, list(SUBJECT_CORPORA), scorer=scorer)
        if best is not None:
            name, score, _idx = best
            similarity = round(score / 100.0, 4)
            if similarity >= threshold:
                logger.info(
                    f"📝 Fuzzy matched '{subject}' to '{name}' ({similarity:.0%} similarity)"
                )
                return CorpusRef(SUBJECT_CORPORA[name], name, similarity, "fuzzy")
            logger.debug(f"   Best match '{name}' for '{subject}' below threshold ({similarity:.2f})")

    logger.warning(f"⚠️  No matching subject found for: '{subject}', using general curriculum")
    return CorpusRef(default_corpus, None, 0.0, "default")
