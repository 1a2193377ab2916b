import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import Base, engine
from .settings import settings
from .routers import health
from .routers import session
from .routers import writing
from .routers import reading
from .routers import listening
from .routers import subscription

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("ielts_maestro")

app = FastAPI(title="IELTS Maestro API")

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
	allow_headers=["Content-Type", "Authorization"],
)

app.include_router(health.router)
app.include_router(session.router)
app.include_router(writing.router)
app.include_router(reading.router)
app.include_router(listening.router)
app.include_router(subscription.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
	logger.info("%s %s", request.method, request.url.path)
	return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
	detail = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
	return JSONResponse(status_code=exc.status_code, content={"success": False, **detail})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
	return JSONResponse(
		status_code=400,
		content={"success": False, "message": "Invalid request body", "error": str(exc.errors())},
	)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
	logger.exception("Unhandled error on %s %s", request.method, request.url.path)
	content = {"success": False, "message": "Internal server error"}
	if settings.environment != "production":
		content["error"] = str(exc)
	return JSONResponse(status_code=500, content=content)


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
	logger.info("Anthropic key configured: %s", bool(settings.anthropic_api_key))


def run() -> None:
	uvicorn.run("ielts_maestro.main:app", host="0.0.0.0", port=settings.port)
