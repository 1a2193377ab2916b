from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..llm_client import AnthropicClient, get_llm_client
from ..services import ListeningService
from ..store import AssessmentStore, AttemptStore
from .common import (
    AssessmentRequest,
    AttemptRequest,
    SessionRequest,
    attempt_payload,
    generate_second,
    require_session,
    run_assessment,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["listening"])


class ListeningAssessmentRequest(AssessmentRequest):
    part_type: str = Field(default="part1", alias="partType")


def get_listening_service(
    client: AnthropicClient = Depends(get_llm_client),
    db: Session = Depends(get_db),
) -> ListeningService:
    return ListeningService(client, AttemptStore(db), AssessmentStore(db))


@router.post("/listening-attempt")
async def listening_attempt(req: AttemptRequest, service: ListeningService = Depends(get_listening_service)):
    session_id = require_session(req.session_id)
    logger.info("Received listening attempt for sessionId: %s", session_id)
    result = await service.generate("part1")
    tracked = service.track_attempt(session_id, req.timestamp)
    return attempt_payload("Listening", result, tracked)


@router.post("/listening-part2")
async def listening_part2(req: SessionRequest, service: ListeningService = Depends(get_listening_service)):
    return await generate_second(service, req, "part2", "Listening")


@router.post("/listening-assessment")
async def listening_assessment(req: ListeningAssessmentRequest, service: ListeningService = Depends(get_listening_service)):
    return await run_assessment(service, req, req.part_type, "Listening")
