import json
from typing import Any, Dict, List

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ielts_maestro import models  # noqa: F401  (registers tables on Base)
from ielts_maestro.db import Base
from ielts_maestro.store import AssessmentStore, AttemptStore


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


class FakeLLM:
    """Stands in for AnthropicClient; replays queued answers or errors in order."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def invoke(self, system: str, prompt: str, *, max_tokens: int, temperature: float) -> str:
        self.calls.append(
            {"system": system, "prompt": prompt, "max_tokens": max_tokens, "temperature": temperature}
        )
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def db_down() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("database is unavailable"))


class BrokenAttemptStore(AttemptStore):
    def __init__(self) -> None:
        pass

    def upsert_increment(self, key, *, timestamp=None):
        raise db_down()


class BrokenAssessmentStore(AssessmentStore):
    def __init__(self) -> None:
        pass

    def find_by_key(self, section, session_id):
        raise db_down()

    def save(self, record):
        raise db_down()


GRAPH_DATA = {
    "type": "bar",
    "title": "Household spending",
    "xAxis": {"label": "Year", "values": ["2000", "2010", "2020"]},
    "yAxis": {"label": "Percent", "min": 0, "max": 50},
    "datasets": [
        {"label": "Food", "color": "#123456", "data": [30, 25, 20]},
        {"label": "Housing", "data": [20, 28, 35]},
    ],
}


def chart_response(prefix: str = "The chart below shows household spending.", graph_data=None) -> str:
    return f"{prefix}\n\n" + json.dumps({"graphData": graph_data or GRAPH_DATA})


def assessment_response(criteria=("taskAchievement",), overall: float = 6.5, **extra) -> str:
    body = {
        "assessment": {
            name: {
                "score": overall,
                "feedback": f"{name} feedback",
                "strengths": ["clear overview"],
                "areasForImprovement": ["more data"],
            }
            for name in criteria
        },
        "overallBandScore": overall,
        "specificImprovements": ["Compare the highest and lowest values."],
        "summary": "A competent response.",
    }
    body.update(extra)
    return "Here is my evaluation of the response.\n\n" + json.dumps(body, indent=2) + "\n\nGood luck!"
