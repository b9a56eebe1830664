import logging
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root wherever uvicorn is started from
_PROJ_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJ_ROOT / ".env")

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlmodel import Session

from giftx.admin import admin_router
from giftx.api.realtime import router as realtime_router
from giftx.api.track import router as track_router
from giftx.core.config import cors_origins_list, settings
from giftx.core.database import engine, init_db
from giftx.core.rate_limit import get_client_ip, limiter
from giftx.logging import setup_logging
from giftx.models import ErrorLog
from giftx.realtime import ActiveUsersObserver, get_hub

setup_logging(level=settings.log_level)
log = logging.getLogger("giftx")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Long-lived observer behind GET /admin/live
    app.state.active_users = ActiveUsersObserver(
        get_hub(), settings.presence_channel, settings.presence_observer_key
    ).start()
    log.info(
        "giftx analytics started: env=%s channel=%s admin_api=%s",
        settings.environment,
        settings.presence_channel,
        "yes" if settings.admin_secret else "NO (set ADMIN_SECRET)",
    )
    yield
    app.state.active_users.stop()


app = FastAPI(
    title="GiftX Analytics API",
    description="Visitor tracking, heatmap events and live presence for the GiftX marketplace",
    lifespan=lifespan,
)
app.state.limiter = limiter


def _error_response(request: Request, status_code: int, message: str, **extra) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    body = {"error": message, "status_code": status_code, **extra}
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=status_code, content=body)


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    log.warning("rate limit exceeded: ip=%s path=%s limit=%s", get_client_ip(request), request.url.path, exc.detail)
    return _error_response(request, 429, "Too many requests", detail=str(exc.detail))


app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errs = exc.errors()
    log.warning(
        "Request validation error (422): path=%s method=%s detail=%s",
        request.url.path,
        request.method,
        errs,
    )
    first = errs[0].get("msg") if errs else None
    return _error_response(request, 422, first or "Invalid request.", detail=jsonable_encoder(errs))


@app.exception_handler(StarletteHTTPException)
def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail if isinstance(exc.detail, str) else str(exc.detail))


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled exception: path=%s %s", request.url.path, exc, exc_info=True)
    try:
        with Session(engine) as db:
            db.add(ErrorLog(
                endpoint=request.url.path,
                method=request.method,
                error_message=str(exc)[:2000],
                stack_trace=traceback.format_exc()[:10000],
            ))
            db.commit()
    except Exception as e:
        log.warning("ErrorLog write failed: %s", e)
    return _error_response(request, 500, "Unexpected server error.")


@app.middleware("http")
async def request_id_and_latency(request: Request, call_next):
    request.state.request_id = str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = request.state.request_id
    log.info(
        "request_id=%s method=%s path=%s status=%s latency_ms=%.2f",
        request.state.request_id,
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_list(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(track_router)
app.include_router(realtime_router)
app.include_router(admin_router)


@app.get("/health")
def health():
    database = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        log.warning("health: database check failed: %s", e)
        database = "error"
    return {
        "status": "ok",
        "database": database,
        "admin_configured": bool(settings.admin_secret),
    }
