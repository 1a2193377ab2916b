from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", include_in_schema=False, response_class=PlainTextResponse)
def root():
	return "IELTS Maestro API is running"


@router.get("/api/health")
def health():
	return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}
