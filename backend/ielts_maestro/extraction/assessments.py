from __future__ import annotations
import json
import logging
import re

from pydantic import ValidationError

from ..schemas import AssessmentResult, DiagnosticAssessment, StructuredAssessment

logger = logging.getLogger(__name__)


NOT_FOUND_ERROR = "Could not extract structured assessment"
PARSE_ERROR = "Error parsing assessment data"

# Greedy on both sides: from the first "{" to the last "}" as long as the
# "assessment" key sits somewhere in between.
_ASSESSMENT_RE = re.compile(r"\{[\s\S]*\"assessment\"[\s\S]*\}")


def extract_assessment(raw_text: str, variant_tag: str) -> AssessmentResult:
    """
    Read the evaluation object out of the examiner model's answer.

    Scores are never invented: when no well-formed object is found the raw
    text is returned untouched inside a DiagnosticAssessment.
    """
    raw_text = raw_text or ""
    match = _ASSESSMENT_RE.search(raw_text)
    if not match:
        logger.warning("No assessment object found in response (%s)", variant_tag)
        return DiagnosticAssessment(text_response=raw_text, error=NOT_FOUND_ERROR, variant=variant_tag)
    try:
        data = json.loads(match.group(0))
    except (ValueError, RecursionError) as err:
        logger.warning("Error parsing assessment data (%s): %s", variant_tag, err)
        return DiagnosticAssessment(text_response=raw_text, error=PARSE_ERROR, variant=variant_tag)
    if not isinstance(data, dict):
        return DiagnosticAssessment(text_response=raw_text, error=PARSE_ERROR, variant=variant_tag)
    data.pop("variant", None)
    try:
        return StructuredAssessment.model_validate({**data, "variant": variant_tag})
    except ValidationError as err:
        logger.warning("Assessment failed shape validation (%s): %s", variant_tag, err.errors()[:3])
        return DiagnosticAssessment(text_response=raw_text, error=PARSE_ERROR, variant=variant_tag)
