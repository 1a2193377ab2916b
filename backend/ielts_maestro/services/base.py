from __future__ import annotations
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Protocol, Tuple

from ..extraction import extract_assessment
from ..llm_client import UpstreamError
from ..models import SectionAssessment
from ..schemas import AssessmentOutcome, AssessmentResult, CounterResult, GenerationResult
from ..store import AssessmentStore, AttemptStore, BestEffort, attempt_key, best_effort

logger = logging.getLogger(__name__)

# Submissions per section after which the demo is over
DEMO_SUBMISSION_LIMIT = 2

ASSESSMENT_MAX_TOKENS = 1500
ASSESSMENT_TEMPERATURE = 0.3


class InvalidVariant(ValueError):
    """The variant tag is not one the section knows."""


class LLMInvoker(Protocol):
    async def invoke(self, system: str, prompt: str, *, max_tokens: int, temperature: float) -> str:
        ...


@dataclass(frozen=True)
class PromptTemplate:
    system: str
    user: str
    max_tokens: int
    temperature: float


class SectionService(ABC):
    """
    Generation and assessment for one exam section.

    Subclasses provide the variant names, the generation templates, the
    static fallback assignments and the examiner instructions per variant.
    """

    section: str = ""
    tag_field: str = ""
    variants: Tuple[str, ...] = ()
    generation_prompts: Dict[str, PromptTemplate] = {}
    fallback_assignments: Dict[str, str] = {}

    def __init__(self, client: LLMInvoker, attempts: AttemptStore, assessments: AssessmentStore) -> None:
        self.client = client
        self.attempts = attempts
        self.assessments = assessments

    def check_variant(self, variant: str) -> str:
        if variant not in self.variants:
            options = " or ".join(f'"{v}"' for v in self.variants)
            raise InvalidVariant(f"Invalid {self.tag_field}. Must be {options}")
        return variant

    def label(self, variant: str) -> str:
        # "task1" -> "Task 1"
        return f"{variant[:-1].capitalize()} {variant[-1]}"

    # ---- generation ----

    async def generate(self, variant: str) -> GenerationResult:
        variant = self.check_variant(variant)
        template = self.generation_prompts[variant]
        try:
            raw = await self.client.invoke(
                template.system,
                template.user,
                max_tokens=template.max_tokens,
                temperature=template.temperature,
            )
        except UpstreamError as err:
            logger.warning("Using fallback %s %s assignment due to API error: %s", self.section, variant, err)
            return self.fallback(variant)
        return self.postprocess(variant, raw)

    def postprocess(self, variant: str, raw: str) -> GenerationResult:
        return GenerationResult(assignment_text=raw.strip(), used_fallback=False)

    def fallback(self, variant: str) -> GenerationResult:
        return GenerationResult(
            assignment_text=self.fallback_assignments[variant],
            used_fallback=True,
            upstream_failed=True,
        )

    def track_attempt(self, session_id: str, timestamp: Optional[datetime] = None) -> BestEffort[CounterResult]:
        key = attempt_key(self.section, session_id)
        outcome = best_effort(
            lambda: self.attempts.upsert_increment(key, timestamp=timestamp),
            what=f"{self.section} attempt tracking",
        )
        if outcome.ok:
            logger.info("%s attempt tracked. Session ID: %s, Count: %s", self.section, session_id, outcome.value.counter)
        return outcome

    # ---- assessment ----

    @abstractmethod
    def assessment_system_prompt(self, variant: str) -> str:
        ...

    @abstractmethod
    def assessment_user_prompt(self, assignment: str, user_response: str, variant: str) -> str:
        ...

    async def assess(self, session_id: str, assignment: str, user_response: str, variant: str) -> AssessmentOutcome:
        variant = self.check_variant(variant)
        # UpstreamError propagates: an assessment is never fabricated
        raw = await self.client.invoke(
            self.assessment_system_prompt(variant),
            self.assessment_user_prompt(assignment, user_response, variant),
            max_tokens=ASSESSMENT_MAX_TOKENS,
            temperature=ASSESSMENT_TEMPERATURE,
        )
        result = extract_assessment(raw, variant)
        recorded = best_effort(
            lambda: self._record(session_id, assignment, user_response, variant, result),
            what=f"{self.section} assessment save",
        )
        counter = recorded.value if recorded.ok else 1
        return AssessmentOutcome(
            result=result,
            counter=counter,
            demo_complete=counter >= DEMO_SUBMISSION_LIMIT,
        )

    def _record(
        self,
        session_id: str,
        assignment: str,
        user_response: str,
        variant: str,
        result: AssessmentResult,
    ) -> int:
        # Read-modify-write; concurrent submissions for one session can interleave
        payload = json.dumps(result.to_payload(self.tag_field))
        record = self.assessments.find_by_key(self.section, session_id)
        if record is None:
            record = SectionAssessment(
                section=self.section,
                session_id=session_id,
                counter=1,
            )
        else:
            record.counter += 1
        record.variant = variant
        record.assignment = assignment
        record.user_response = user_response
        record.assessment_json = payload
        self.assessments.save(record)
        return record.counter
