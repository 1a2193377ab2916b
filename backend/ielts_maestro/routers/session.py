from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..store import AttemptStore, SessionRegistry, attempt_key
from .common import AttemptRequest, SessionRequest, require_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["session"])


@router.post("/track-session")
def track_session(req: SessionRequest, db: Session = Depends(get_db)):
	session_id = require_session(req.session_id)
	try:
		count = SessionRegistry(db).track(session_id)
	except SQLAlchemyError as err:
		logger.error("Error tracking session %s: %s", session_id, err)
		raise HTTPException(status_code=500, detail="Error tracking session")
	return {"success": True, "message": "Session tracked successfully", "count": count}


@router.post("/speaking-attempt")
def speaking_attempt(req: AttemptRequest, db: Session = Depends(get_db)):
	# Speaking has no generated content yet; only the attempt is counted
	session_id = require_session(req.session_id)
	try:
		result = AttemptStore(db).upsert_increment(attempt_key("speaking", session_id), timestamp=req.timestamp)
	except SQLAlchemyError as err:
		logger.error("Error tracking speaking attempt: %s", err)
		raise HTTPException(
			status_code=500,
			detail={"message": "Error tracking speaking attempt", "error": str(err)},
		)
	logger.info("speaking attempt tracked. Session ID: %s, Count: %s", session_id, result.counter)
	return {
		"success": True,
		"message": "speaking attempt tracked successfully",
		"count": result.counter,
		"isNew": result.is_new,
	}
