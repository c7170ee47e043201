"""
Curriculum retrieval over subject-specific CSV corpora.

Each corpus is read once, normalized, split into overlapping windows,
embedded and stored in its own Qdrant collection. Indexes are cached per
corpus id for the life of the process.
"""

import asyncio
import csv
import logging
import time
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from qdrant_client import QdrantClient
from qdrant_client.http.models import Distance, PointStruct, VectorParams

from lesson_planner.config import Settings, settings as default_settings
from lesson_planner.core.exceptions import CorpusUnavailable, GenerationFailed
from lesson_planner.core.qdrant_client import get_qdrant_client
from lesson_planner.utils.subject_mapping import CorpusRef, resolve_corpus
from lesson_planner.utils.text_chunking import chunk_text, normalize_text

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    def embed_texts(self, texts: list[str]) -> list[list[float]]: ...


@dataclass(frozen=True)
class CurriculumIndex:
    corpus_id: str
    collection_name: str
    passage_count: int
    source_path: Path


@dataclass(frozen=True)
class RetrievedPassage:
    text: str
    score: float
    row: int


def _row_to_text(row: dict[str, str]) -> str:
    lines = [f"{header}: {value}" for header, value in row.items() if header and value and value.strip()]
    return "\n".join(lines)


class CurriculumRetriever:
    def __init__(
        self,
        embedder: Embedder | None = None,
        client: QdrantClient | None = None,
        data_dir: str | Path | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or default_settings
        self._embedder = embedder
        self._client = client
        self.data_dir = Path(data_dir or self.settings.curriculum_data_dir)
        # Shared across requests; duplicate builds on a cold cache are harmless
        self._indexes: dict[str, CurriculumIndex] = {}

    @property
    def embedder(self) -> Embedder:
        if self._embedder is None:
            from lesson_planner.services.embedding_service import get_embedding_service

            self._embedder = get_embedding_service()
        return self._embedder

    @property
    def client(self) -> QdrantClient:
        if self._client is None:
            self._client = get_qdrant_client()
        return self._client

    def fork(self) -> "CurriculumRetriever":
        """Fresh retriever over the same corpora, embedder and Qdrant client, with an empty index cache."""
        return CurriculumRetriever(
            embedder=self._embedder,
            client=self._client,
            data_dir=self.data_dir,
            settings=self.settings,
        )

    def resolve_corpus(self, subject: str) -> CorpusRef:
        return resolve_corpus(
            subject,
            threshold=self.settings.subject_match_threshold,
            default_corpus=self.settings.default_corpus,
        )

    async def index_for_subject(self, subject: str) -> CurriculumIndex:
        ref = self.resolve_corpus(subject)
        return await self.index(ref.corpus_id)

    async def index(self, corpus_id: str) -> CurriculumIndex:
        """
        Build (or return the cached) index for a corpus file.

        Raises:
            CorpusUnavailable: If the file is missing, unreadable or has no rows
            GenerationFailed: If building the index exceeds its timeout
        """
        cached = self._indexes.get(corpus_id)
        if cached is not None:
            logger.debug(f"   Using cached index for {corpus_id}")
            return cached

        start_time = time.time()
        logger.info(f"📚 Building curriculum index for {corpus_id}...")

        passages = self._load_passages(corpus_id)
        texts = [text for text, _row in passages]

        try:
            vectors = await asyncio.wait_for(
                asyncio.to_thread(self.embedder.embed_texts, texts),
                timeout=self.settings.index_build_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise GenerationFailed(
                f"Embedding corpus {corpus_id} timed out after {self.settings.index_build_timeout_seconds}s"
            ) from e

        collection_name = f"curriculum_{Path(corpus_id).stem}_{uuid.uuid4().hex[:8]}"
        await asyncio.to_thread(
            self.client.create_collection,
            collection_name=collection_name,
            vectors_config=VectorParams(size=len(vectors[0]), distance=Distance.COSINE),
        )
        await asyncio.to_thread(
            self.client.upsert,
            collection_name=collection_name,
            points=[
                PointStruct(
                    id=idx,
                    vector=list(vector),
                    payload={"text": text, "row": row, "corpus_id": corpus_id},
                )
                for idx, ((text, row), vector) in enumerate(zip(passages, vectors))
            ],
        )

        index = CurriculumIndex(
            corpus_id=corpus_id,
            collection_name=collection_name,
            passage_count=len(passages),
            source_path=self.data_dir / corpus_id,
        )
        self._indexes[corpus_id] = index

        duration = time.time() - start_time
        logger.info(f"✅ Indexed {len(passages)} passages from {corpus_id} in {duration:.2f}s")
        return index

    async def release(self) -> None:
        """Drop every collection this retriever built and empty its cache."""
        indexes = list(self._indexes.values())
        self._indexes.clear()
        for index in indexes:
            await asyncio.to_thread(self.client.delete_collection, collection_name=index.collection_name)
        if indexes:
            logger.debug(f"   Released {len(indexes)} curriculum index(es)")

    def _load_passages(self, corpus_id: str) -> list[tuple[str, int]]:
        path = self.data_dir / corpus_id
        if not path.is_file():
            logger.error(f"❌ Curriculum corpus not found: {path}")
            raise CorpusUnavailable(corpus_id, "file not found")

        try:
            with path.open(encoding="utf-8-sig", newline="") as handle:
                rows = list(csv.DictReader(handle))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error(f"❌ Could not read curriculum corpus {path}: {e}")
            raise CorpusUnavailable(corpus_id, str(e)) from e

        passages: list[tuple[str, int]] = []
        for row_idx, row in enumerate(rows):
            text = normalize_text(_row_to_text(row))
            if not text:
                continue
            for chunk in chunk_text(
                text,
                chunk_size=self.settings.chunk_size,
                chunk_overlap=self.settings.chunk_overlap,
            ):
                passages.append((chunk, row_idx))

        if not passages:
            raise CorpusUnavailable(corpus_id, "corpus has no rows")

        logger.info(f"📄 Loaded {len(rows)} rows ({len(passages)} chunks) from {path.name}")
        return passages

    async def query(self, index: CurriculumIndex, text: str, k: int | None = None) -> AsyncIterator[RetrievedPassage]:
        """
        Yield the k nearest passages in descending similarity.

        Scoring runs on first iteration; each call scores again.
        """
        k = k or self.settings.retrieval_top_k
        logger.debug(f"🔍 Querying {index.corpus_id} (k={k}): {text[:200]}")

        vectors = await asyncio.to_thread(self.embedder.embed_texts, [normalize_text(text)])
        response = await asyncio.to_thread(
            self.client.query_points,
            collection_name=index.collection_name,
            query=list(vectors[0]),
            limit=k,
            with_payload=True,
        )
        hits = response.points

        for hit in hits:
            payload = hit.payload or {}
            yield RetrievedPassage(text=payload.get("text", ""), score=float(hit.score), row=int(payload.get("row", -1)))

    async def search(self, index: CurriculumIndex, text: str, k: int | None = None) -> list[RetrievedPassage]:
        return [passage async for passage in self.query(index, text, k)]
