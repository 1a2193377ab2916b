from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..llm_client import AnthropicClient, get_llm_client
from ..services import ReadingService
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

router = APIRouter(prefix="/api", tags=["reading"])


class ReadingAssessmentRequest(AssessmentRequest):
    text_type: str = Field(default="text1", alias="textType")


def get_reading_service(
    client: AnthropicClient = Depends(get_llm_client),
    db: Session = Depends(get_db),
) -> ReadingService:
    return ReadingService(client, AttemptStore(db), AssessmentStore(db))


@router.post("/reading-attempt")
async def reading_attempt(req: AttemptRequest, service: ReadingService = Depends(get_reading_service)):
    session_id = require_session(req.session_id)
    logger.info("Received reading attempt for sessionId: %s", session_id)
    result = await service.generate("text1")
    tracked = service.track_attempt(session_id, req.timestamp)
    return attempt_payload("Reading", result, tracked)


@router.post("/reading-text2")
async def reading_text2(req: SessionRequest, service: ReadingService = Depends(get_reading_service)):
    return await generate_second(service, req, "text2", "Reading")


@router.post("/reading-assessment")
async def reading_assessment(req: ReadingAssessmentRequest, service: ReadingService = Depends(get_reading_service)):
    return await run_assessment(service, req, req.text_type, "Reading")
