from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..llm_client import UpstreamError
from ..schemas import CounterResult, GenerationResult
from ..services import InvalidVariant, SectionService
from ..store import BestEffort

logger = logging.getLogger(__name__)


class SessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")


class AttemptRequest(SessionRequest):
    timestamp: Optional[datetime] = None


class AssessmentRequest(SessionRequest):
    assignment: Optional[str] = None
    user_response: Optional[str] = Field(default=None, alias="userResponse")


def require_session(session_id: Optional[str]) -> str:
    session_id = (session_id or "").strip()
    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID is required")
    return session_id


def attempt_payload(title: str, result: GenerationResult, tracked: BestEffort[CounterResult]) -> Dict[str, Any]:
    message = "Using fallback assignment due to API error" if result.upstream_failed else f"{title} assignment retrieved"
    payload: Dict[str, Any] = {
        "success": True,
        "message": message,
        "assignment": result.assignment_text,
    }
    if result.chart is not None:
        payload["graphData"] = result.chart.to_payload()
    # Tracking is best-effort; None means the counter could not be read
    payload["count"] = tracked.value.counter if tracked.ok else None
    payload["isNew"] = tracked.value.is_new if tracked.ok else False
    return payload


async def generate_second(service: SectionService, req: SessionRequest, variant: str, title: str) -> Dict[str, Any]:
    require_session(req.session_id)
    result = await service.generate(variant)
    message = (
        "Using fallback assignment due to API error"
        if result.upstream_failed
        else f"{title} {service.label(variant)} assignment retrieved"
    )
    return {"success": True, "message": message, "assignment": result.assignment_text}


async def run_assessment(
    service: SectionService,
    req: AssessmentRequest,
    variant: str,
    title: str,
) -> Dict[str, Any]:
    if not req.session_id or not req.user_response or not req.assignment:
        raise HTTPException(status_code=400, detail="Session ID, user response, and assignment are required")
    try:
        outcome = await service.assess(req.session_id, req.assignment, req.user_response, variant)
    except InvalidVariant as err:
        raise HTTPException(status_code=400, detail=str(err))
    except UpstreamError as err:
        logger.error("Error assessing %s response: %s", service.section, err)
        raise HTTPException(
            status_code=500,
            detail={"message": f"Error assessing {service.section} response", "error": str(err)},
        )
    return {
        "success": True,
        "message": f"{title} {service.label(variant)} assessment completed",
        "assessment": outcome.result.to_payload(service.tag_field),
        service.tag_field: variant,
        "counter": outcome.counter,
        "demoComplete": outcome.demo_complete,
    }
