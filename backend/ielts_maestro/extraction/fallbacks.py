from __future__ import annotations
from typing import Any, Dict

from ..schemas import ChartDescription


def _fallback_chart_data() -> Dict[str, Any]:
    # Built per call so no caller can alter the shared definition
    return {
        "type": "line",
        "title": "Global Tourism Growth (2010-2020)",
        "xAxis": {
            "label": "Year",
            "values": ["2010", "2012", "2014", "2016", "2018", "2020"],
        },
        "yAxis": {
            "label": "Number of Tourists (millions)",
            "min": 0,
            "max": 150,
        },
        "datasets": [
            {"label": "Europe", "color": "#FF6384", "data": [63, 78, 92, 107, 126, 83]},
            {"label": "Asia Pacific", "color": "#36A2EB", "data": [42, 55, 71, 89, 112, 56]},
            {"label": "Americas", "color": "#FFCE56", "data": [35, 41, 48, 56, 69, 43]},
        ],
    }


def get_fallback_chart() -> ChartDescription:
    """Return a fresh copy of the built-in line chart, used whenever no usable chart can be produced."""
    return ChartDescription.model_validate(_fallback_chart_data())
