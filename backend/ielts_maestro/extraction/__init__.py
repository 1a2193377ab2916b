from .assessments import NOT_FOUND_ERROR, PARSE_ERROR, extract_assessment
from .charts import CHART_PALETTE, extract_chart_payload
from .fallbacks import get_fallback_chart

__all__ = [
    "CHART_PALETTE",
    "NOT_FOUND_ERROR",
    "PARSE_ERROR",
    "extract_assessment",
    "extract_chart_payload",
    "get_fallback_chart",
]
