from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from ..db import get_db
from ..llm_client import AnthropicClient, get_llm_client
from ..services import WritingService
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

router = APIRouter(prefix="/api", tags=["writing"])


class WritingAssessmentRequest(AssessmentRequest):
    task_type: str = Field(default="task1", alias="taskType")


def get_writing_service(
    client: AnthropicClient = Depends(get_llm_client),
    db: Session = Depends(get_db),
) -> WritingService:
    return WritingService(client, AttemptStore(db), AssessmentStore(db))


@router.post("/writing-attempt")
async def writing_attempt(req: AttemptRequest, service: WritingService = Depends(get_writing_service)):
    session_id = require_session(req.session_id)
    logger.info("Received writing attempt for sessionId: %s", session_id)
    result = await service.generate("task1")
    tracked = service.track_attempt(session_id, req.timestamp)
    return attempt_payload("Writing", result, tracked)


@router.post("/writing-task2")
async def writing_task2(req: SessionRequest, service: WritingService = Depends(get_writing_service)):
    return await generate_second(service, req, "task2", "Writing")


@router.post("/writing-assessment")
async def writing_assessment(req: WritingAssessmentRequest, service: WritingService = Depends(get_writing_service)):
    return await run_assessment(service, req, req.task_type, "Writing")
