"""HuntHub API - FastAPI app entry point."""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hunthub.core.config import get_settings
from hunthub.core.errors import AppError
from hunthub.db.base import Base
from hunthub.db.session import engine
from hunthub.routers import hunts, play

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # dev convenience; production schema comes from alembic
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Treasure hunt authoring, publishing and play",
    lifespan=lifespan,
)


def _error_response(request: Request, status_code: int, error: str, message: str, details: Any = None):
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-Id": request_id} if request_id else {}
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "request_id": request_id, "details": details},
        headers=headers,
    )


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    request.state.request_id = request_id
    logger.info("start %s %s [%s]", request.method, request.url.path, request_id)
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    logger.info("end %s %s -> %s [%s]", request.method, request.url.path, response.status_code, request_id)
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error, exc.message)
    return _error_response(request, exc.status_code, exc.error, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _error_response(request, 422, "validation_error", "Request validation failed", details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(request, exc.status_code, "http_error", str(exc.detail))


app.include_router(hunts.router)
app.include_router(play.router)


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.app_name}
