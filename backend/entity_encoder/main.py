import json
import logging
import time
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from . import config
from .entities import ENTITY_TABLE
from .metrics import metrics
from .models.responses import HealthOut
from .routes import encode, entities

logger = logging.getLogger("entity_encoder")

_start_time = time.time()

# Attributes set through logging's extra= that the JSON formatter passes on
_REQUEST_FIELDS = ("method", "path", "status", "duration_ms")


class JsonFormatter(logging.Formatter):
    """One JSON object per log line; request fields are included when present."""

    def format(self, record):
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _REQUEST_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging():
    """Install the root handler according to EE_LOG_LEVEL and EE_LOG_FORMAT."""
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if config.LOG_FORMAT == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    logging.basicConfig(level=level, handlers=[handler])


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """Time every /api/ request, feed the metrics collector and optionally log it."""

    def __init__(self, app, log_requests: bool = False):
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not path.startswith("/api/"):
            return await call_next(request)

        started = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - started

        if path != "/api/metrics":
            metrics.record_request(request.method, path, response.status_code, elapsed)
        if self.log_requests:
            duration_ms = round(elapsed * 1000, 1)
            logger.info(
                "%s %s %d %.1fms", request.method, path, response.status_code, duration_ms,
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("%s %s started (%d named entities, max_text_length=%d)",
                config.APP_NAME, config.APP_VERSION, len(ENTITY_TABLE), config.MAX_TEXT_LENGTH)
    yield
    logger.info("%s stopped", config.APP_NAME)


app = FastAPI(
    title=config.APP_NAME,
    description="Encode text for HTML using named character references",
    version=config.APP_VERSION,
    lifespan=lifespan,
)
app.add_middleware(RequestMetricsMiddleware, log_requests=config.REQUEST_LOG)
app.include_router(encode.router)
app.include_router(entities.router)


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into {field, message, type} entries."""
    errors = []
    for err in exc.errors():
        errors.append({
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        })
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = _validation_errors(exc)
    logger.warning("Validation error on %s %s: %d problem(s)",
                   request.method, request.url.path, len(errors))
    return JSONResponse(status_code=422, content={"detail": "Validation error", "errors": errors})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """500 with a fixed body; the exception only goes to the log."""
    logger.error("Unhandled exception on %s %s: %r\n%s",
                 request.method, request.url.path, exc, traceback.format_exc())
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/api/health", tags=["system"], response_model=HealthOut, summary="Health check")
async def health():
    """Service health: version, uptime and the size of the entity table."""
    return {
        "status": "ok",
        "app": config.APP_NAME,
        "version": config.APP_VERSION,
        "uptime_seconds": int(time.time() - _start_time),
        "entity_count": len(ENTITY_TABLE),
    }


@app.get("/api/metrics", tags=["system"], summary="Prometheus-compatible metrics")
async def prometheus_metrics():
    """Request and encoder metrics in Prometheus text exposition format."""
    metrics.set_gauge("ee_uptime_seconds", float(int(time.time() - _start_time)),
                      "Application uptime in seconds")
    metrics.set_gauge("ee_entity_table_size", float(len(ENTITY_TABLE)),
                      "Number of named entities in the lookup table")
    return Response(content=metrics.export(), media_type="text/plain; version=0.0.4; charset=utf-8")
