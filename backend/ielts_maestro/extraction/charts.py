"""
Chart extraction for Writing Task 1.

The model is asked to write the assignment text and then append a
``{"graphData": {...}}`` object. In practice the object arrives wrapped in
prose, fenced, truncated or followed by commentary, so extraction runs two
strategies in order and falls back to the built-in chart when neither yields
a usable description. ``extract_chart_payload`` never raises.
"""

from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..schemas import ChartDescription, ChartExtraction
from .fallbacks import get_fallback_chart

logger = logging.getLogger(__name__)


CHART_PALETTE: List[str] = ["#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF", "#FF9F40"]

DEFAULT_CHART_TYPE = "line"
DEFAULT_TITLE = "Data Visualization"
DEFAULT_X_LABEL = "X Axis"
DEFAULT_Y_LABEL = "Y Axis"

# Non-greedy: stops at the first "}" followed by a closing "}", so a
# graphData body containing "}}" before its end is cut short and fails to parse.
_GRAPH_DATA_RE = re.compile(r"\{\s*\"graphData\"\s*:\s*\{[\s\S]*?\}\s*\}")
_TRAILING_FENCE_RE = re.compile(r"```(?:json)?\s*$")


def _parse_from_first_brace(raw_text: str) -> Optional[Tuple[int, Any]]:
    start = raw_text.find("{")
    if start < 0:
        logger.warning("No JSON object found in chart response")
        return None
    try:
        parsed = json.loads(raw_text[start:])
    except (ValueError, RecursionError) as err:
        logger.warning("Chart JSON from first brace did not parse: %s", err)
        return None
    if not isinstance(parsed, dict) or "graphData" not in parsed:
        logger.warning("Parsed chart JSON has no graphData key")
        return None
    return start, parsed["graphData"]


def _parse_from_regex(raw_text: str) -> Optional[Tuple[int, Any]]:
    match = _GRAPH_DATA_RE.search(raw_text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError) as err:
        logger.warning("Regex-narrowed chart JSON did not parse: %s", err)
        return None
    if not isinstance(parsed, dict) or "graphData" not in parsed:
        return None
    return match.start(), parsed["graphData"]


def _assignment_prefix(raw_text: str, end: int) -> str:
    prefix = raw_text[:end].rstrip()
    return _TRAILING_FENCE_RE.sub("", prefix).strip()


def normalize_chart(candidate: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in the fields the model is allowed to omit."""
    chart = dict(candidate)
    chart["type"] = chart.get("type") or DEFAULT_CHART_TYPE
    if isinstance(chart["type"], str):
        chart["type"] = chart["type"].strip().lower()
    chart["title"] = chart.get("title") or DEFAULT_TITLE

    x_axis = chart.get("xAxis")
    x_axis = dict(x_axis) if isinstance(x_axis, dict) else {}
    x_axis["values"] = x_axis.get("values") or []
    x_axis["label"] = x_axis.get("label") or DEFAULT_X_LABEL
    chart["xAxis"] = x_axis

    y_axis = chart.get("yAxis")
    y_axis = dict(y_axis) if isinstance(y_axis, dict) else {}
    y_axis["label"] = y_axis.get("label") or DEFAULT_Y_LABEL
    y_axis.setdefault("min", None)
    y_axis.setdefault("max", None)
    chart["yAxis"] = y_axis

    datasets = chart.get("datasets")
    if isinstance(datasets, list):
        filled = []
        for index, dataset in enumerate(datasets):
            if not isinstance(dataset, dict):
                filled.append(dataset)
                continue
            dataset = dict(dataset)
            if not dataset.get("color"):
                dataset["color"] = CHART_PALETTE[index % len(CHART_PALETTE)]
            if not dataset.get("label"):
                dataset["label"] = f"Series {index + 1}"
            filled.append(dataset)
        chart["datasets"] = filled
    return chart


def validate_chart(chart: Dict[str, Any]) -> Optional[ChartDescription]:
    datasets = chart.get("datasets")
    values = chart.get("xAxis", {}).get("values")
    if not isinstance(datasets, list) or not datasets or not isinstance(values, list):
        logger.warning("Chart is missing datasets or xAxis values")
        return None
    try:
        described = ChartDescription.model_validate(chart)
    except ValidationError as err:
        logger.warning("Chart failed shape validation: %s", err.errors()[:3])
        return None
    # Lengths are reported but not enforced
    for dataset in described.datasets:
        if len(dataset.data) != len(described.x_axis.values):
            logger.warning(
                "Dataset %r has %d points for %d xAxis values",
                dataset.label,
                len(dataset.data),
                len(described.x_axis.values),
            )
    return described


def extract_chart_payload(raw_text: str) -> ChartExtraction:
    raw_text = raw_text or ""
    found = _parse_from_first_brace(raw_text) or _parse_from_regex(raw_text)
    if found is None:
        logger.warning("Using fallback graph data - no graphData could be parsed")
        return ChartExtraction(assignment_text=raw_text, chart=get_fallback_chart(), used_fallback=True)

    start, candidate = found
    assignment_text = _assignment_prefix(raw_text, start)
    chart = validate_chart(normalize_chart(candidate)) if isinstance(candidate, dict) else None
    if chart is None:
        logger.warning("Using fallback graph data - graphData was invalid")
        return ChartExtraction(assignment_text=assignment_text, chart=get_fallback_chart(), used_fallback=True)
    return ChartExtraction(assignment_text=assignment_text, chart=chart, used_fallback=False)
