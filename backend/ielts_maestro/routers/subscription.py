from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..store import DuplicateSubscription, SubscriptionStore
from .common import SessionRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["subscription"])


class SubscribeRequest(SessionRequest):
	email: Optional[str] = None
	section: Optional[str] = None


@router.post("/subscribe")
def subscribe(req: SubscribeRequest, db: Session = Depends(get_db)):
	email = (req.email or "").strip()
	section = (req.section or "").strip()
	if not email or not req.session_id or not section:
		raise HTTPException(status_code=400, detail="Email, session ID, and section are required")
	try:
		SubscriptionStore(db).add(email, req.session_id, section)
	except DuplicateSubscription:
		raise HTTPException(status_code=409, detail="You are already subscribed with this email")
	except SQLAlchemyError as err:
		logger.error("Error saving subscription: %s", err)
		raise HTTPException(
			status_code=500,
			detail={"message": "Error processing subscription request", "error": str(err)},
		)
	return {"success": True, "message": "Subscription completed successfully"}
