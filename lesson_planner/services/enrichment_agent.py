"""
Enrichment agent.

Gathers teaching-process examples, lesson details and UDL / inclusive
strategies to ground activity design. Each category degrades independently:
web search -> built-in exemplars -> LLM distillation -> reasoning-only LLM
pass -> static defaults. perform_enhanced_search never raises.
"""

import asyncio
import json
import logging
import time
from collections.abc import Sequence

from lesson_planner.agents.models import EnrichmentBundle, StudentType
from lesson_planner.agents.prompts import render
from lesson_planner.config import Settings, settings as default_settings
from lesson_planner.services.llm_gateway import LLMGateway
from lesson_planner.services.strategy_library import (
    DEFAULT_INCLUSIVE_STRATEGIES,
    DEFAULT_TEACHING_PROCESSES,
    DEFAULT_UDL_STRATEGIES,
    default_lesson_details,
    fallback_results,
)
from lesson_planner.services.web_search import SearchResult, WebSearchClient, WebSearchError
from lesson_planner.utils.json_parser import extract_json

logger = logging.getLogger(__name__)


def teaching_process_queries(subject: str, lesson_topic: str, level: str) -> list[str]:
    return [
        f"กระบวนการการจัดกิจกรรมการสอน {subject} {lesson_topic} ระดับ{level}",
        f"teaching methodology {subject} {lesson_topic} grade {level}",
        f"5E model lesson plan {subject}",
        f"problem based learning {subject} Thailand",
        f"active learning strategies {subject}",
    ]


def strategy_queries(subject: str, lesson_topic: str) -> list[str]:
    return [
        f"UDL Universal Design Learning {subject} {lesson_topic} strategies",
        f"inclusive classroom strategies {subject} Thailand",
        f"differentiated instruction {subject} special needs",
        f"ห้องเรียนแบบรวม {subject} {lesson_topic}",
        f"การออกแบบการเรียนรู้ที่เปิดกว้าง {subject}",
        f"multiple intelligence teaching {subject}",
        f"accessible education {subject} diverse learners",
    ]


def lesson_detail_queries(subject: str, lesson_topic: str, level: str) -> list[str]:
    return [
        f"{subject} {lesson_topic} ระดับ{level} รายละเอียดบทเรียน",
        f"{subject} {lesson_topic} เนื้อหาสำคัญ มัธยมศึกษา",
        f"{lesson_topic} concepts {subject} grade {level}",
        f"{lesson_topic} learning objectives {subject}",
        f"หลักสูตร {subject} {lesson_topic} สาระสำคัญ",
    ]


def format_student_types(student_types: Sequence[StudentType]) -> str:
    if not student_types:
        return "ไม่ระบุประเภทนักเรียน"
    return ", ".join(f"{s.type} ({s.percentage:g}%)" for s in student_types)


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


class EnrichmentAgent:
    def __init__(
        self,
        gateway: LLMGateway,
        search_client: WebSearchClient | None = None,
        settings: Settings | None = None,
    ):
        self.gateway = gateway
        self.settings = settings or default_settings
        self.search_client = search_client or WebSearchClient(settings=self.settings)

    # ===== SEARCH =====

    async def _search_all(self, queries: list[str], stagger: float) -> list[SearchResult]:
        """
        Run queries one after another, spaced by the stagger delay.

        Unconfigured search never touches the network and goes straight to the
        built-in library; a failing provider call falls back per query, and so
        does a provider that finds nothing for any query.
        """
        results: list[SearchResult] = []
        if not self.search_client.is_configured:
            for query in queries:
                results.extend(fallback_results(query))
            return results

        for idx, query in enumerate(queries):
            if idx and stagger > 0:
                await asyncio.sleep(stagger)
            try:
                results.extend(await self.search_client.search(query))
            except WebSearchError as e:
                logger.warning(f"⚠️  Search failed for '{query}', using built-in examples: {e}")
                results.extend(fallback_results(query))

        if not results:
            logger.info("   Search returned no results, using built-in examples")
            for query in queries:
                results.extend(fallback_results(query))
        return results

    @staticmethod
    def _snippets(results: list[SearchResult]) -> list[dict[str, str]]:
        return [{"title": r.title, "content": r.content, "url": r.url} for r in results]

    async def _complete(self, template_id: str, variables: dict) -> str:
        prompt = render(template_id, variables)
        return await self.gateway.complete(
            prompt.system, prompt.user, prompt.response_format, temperature=prompt.temperature
        )

    # ===== TEACHING PROCESSES =====

    async def search_teaching_process_examples(
        self, subject: str, lesson_topic: str, level: str
    ) -> tuple[list[str], str]:
        variables = {"subject": subject, "lesson_topic": lesson_topic, "level": level}
        try:
            results = await self._search_all(
                teaching_process_queries(subject, lesson_topic, level),
                self.settings.search_stagger_seconds,
            )
            if results:
                raw = await self._complete(
                    "enrichment-teaching-process",
                    {**variables, "search_results": self._snippets(results)},
                )
                examples = _string_list(extract_json(raw, expected_type="array"))
                if examples:
                    return examples, "search"
        except Exception as e:
            logger.warning(f"⚠️  Teaching process enrichment failed, using reasoning fallback: {e}")

        try:
            raw = await self._complete("enrichment-teaching-process-reasoning", variables)
            examples = _string_list(extract_json(raw, expected_type="array"))
            if examples:
                return examples, "reasoning"
        except Exception as e:
            logger.warning(f"⚠️  Teaching process reasoning failed, using defaults: {e}")

        return list(DEFAULT_TEACHING_PROCESSES), "fallback"

    # ===== UDL / INCLUSIVE STRATEGIES =====

    @staticmethod
    def _parse_strategies(raw: str) -> tuple[list[str], list[str]]:
        data = extract_json(raw, expected_type="object")
        return _string_list(data.get("udlStrategies")), _string_list(data.get("inclusiveStrategies"))

    async def search_udl_strategies(
        self, subject: str, lesson_topic: str, student_types: Sequence[StudentType]
    ) -> tuple[list[str], list[str], str]:
        variables = {
            "subject": subject,
            "lesson_topic": lesson_topic,
            "student_types": format_student_types(student_types),
        }
        try:
            results = await self._search_all(
                strategy_queries(subject, lesson_topic),
                self.settings.search_stagger_seconds * 0.8,
            )
            if results:
                raw = await self._complete(
                    "enrichment-strategies", {**variables, "search_results": self._snippets(results)}
                )
                udl, inclusive = self._parse_strategies(raw)
                if udl and inclusive:
                    return udl, inclusive, "search"
        except Exception as e:
            logger.warning(f"⚠️  UDL strategy enrichment failed, using reasoning fallback: {e}")

        try:
            raw = await self._complete("enrichment-strategies-reasoning", variables)
            udl, inclusive = self._parse_strategies(raw)
            if udl and inclusive:
                return udl, inclusive, "reasoning"
        except Exception as e:
            logger.warning(f"⚠️  UDL strategy reasoning failed, using defaults: {e}")

        return list(DEFAULT_UDL_STRATEGIES), list(DEFAULT_INCLUSIVE_STRATEGIES), "fallback"

    # ===== LESSON DETAILS =====

    async def get_lesson_details(self, subject: str, lesson_topic: str, level: str) -> tuple[str, str]:
        variables = {"subject": subject, "lesson_topic": lesson_topic, "level": level}
        try:
            results = await self._search_all(
                lesson_detail_queries(subject, lesson_topic, level),
                self.settings.search_stagger_seconds * 0.6,
            )
            if results:
                details = await self._complete(
                    "enrichment-lesson-details", {**variables, "search_results": self._snippets(results)}
                )
                if details.strip():
                    return details.strip(), "search"
        except Exception as e:
            logger.warning(f"⚠️  Lesson details enrichment failed, using reasoning fallback: {e}")

        try:
            details = await self._complete("enrichment-lesson-details-reasoning", variables)
            if details.strip():
                return details.strip(), "reasoning"
        except Exception as e:
            logger.warning(f"⚠️  Lesson details reasoning failed, using defaults: {e}")

        return default_lesson_details(subject, lesson_topic, level), "fallback"

    # ===== ENTRY POINT =====

    async def perform_enhanced_search(
        self,
        subject: str,
        lesson_topic: str,
        level: str,
        student_types: Sequence[StudentType] = (),
    ) -> EnrichmentBundle:
        """
        Gather the full enrichment bundle. Never raises; every field is non-empty.
        """
        start_time = time.time()
        logger.info(f"🤖 Starting enrichment for: {subject} - {lesson_topic}")
        if not self.search_client.is_configured:
            logger.info("   Web search not configured, using built-in strategy library")

        try:
            (processes, process_source), (details, details_source), (udl, inclusive, strategy_source) = (
                await asyncio.gather(
                    self.search_teaching_process_examples(subject, lesson_topic, level),
                    self.get_lesson_details(subject, lesson_topic, level),
                    self.search_udl_strategies(subject, lesson_topic, student_types),
                )
            )
            bundle = EnrichmentBundle(
                teaching_process_examples=processes,
                lesson_details=details,
                udl_strategies=udl,
                inclusive_strategies=inclusive,
                source={
                    "teaching_process_examples": process_source,
                    "lesson_details": details_source,
                    "strategies": strategy_source,
                },
            )
        except Exception as e:
            logger.error(f"❌ Enrichment failed, using comprehensive defaults: {e}", exc_info=True)
            bundle = self.default_bundle(subject, lesson_topic, level)

        duration = time.time() - start_time
        logger.info(
            f"✅ Enrichment ready in {duration:.2f}s: {len(bundle.teaching_process_examples)} processes, "
            f"{len(bundle.udl_strategies)} UDL, {len(bundle.inclusive_strategies)} inclusive "
            f"(sources: {json.dumps(bundle.source)})"
        )
        return bundle

    @staticmethod
    def default_bundle(subject: str, lesson_topic: str, level: str) -> EnrichmentBundle:
        return EnrichmentBundle(
            teaching_process_examples=list(DEFAULT_TEACHING_PROCESSES),
            lesson_details=default_lesson_details(subject, lesson_topic, level),
            udl_strategies=list(DEFAULT_UDL_STRATEGIES),
            inclusive_strategies=list(DEFAULT_INCLUSIVE_STRATEGIES),
            source={
                "teaching_process_examples": "fallback",
                "lesson_details": "fallback",
                "strategies": "fallback",
            },
        )
