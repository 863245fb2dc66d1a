from __future__ import annotations

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from humanlab.api.v1.router import router as v1_router
from humanlab.core.config import get_settings
from humanlab.core.errors import TextValidationError
from humanlab.core.logging import configure_logging, get_logger
from humanlab.schemas.common import ErrorResponse, HealthResponse
from humanlab.utils.trace import get_trace_id, trace_context_middleware

settings = get_settings()
configure_logging()
logger = get_logger(__name__)

if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.environment)


app = FastAPI(title=settings.app_name, default_response_class=ORJSONResponse)
app.middleware("http")(trace_context_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError):
    return ORJSONResponse(
        status_code=422,
        content=ErrorResponse(error=str(exc), trace_id=get_trace_id()).model_dump(),
    )


@app.exception_handler(TextValidationError)
async def text_validation_exception_handler(_: Request, exc: TextValidationError):
    return ORJSONResponse(
        status_code=400,
        content=ErrorResponse(error=exc.message, trace_id=get_trace_id()).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(_: Request, exc: Exception):
    logger.exception("unhandled_exception", error_type=type(exc).__name__, trace_id=get_trace_id())
    return ORJSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error", trace_id=get_trace_id()).model_dump(),
    )


Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.on_event("startup")
async def startup_event() -> None:
    logger.info(
        "startup_complete",
        environment=settings.environment,
        detection_configured=bool(settings.winston_api_key.get_secret_value()),
        anthropic_configured=bool(settings.anthropic_api_key.get_secret_value()),
        gemini_configured=bool(settings.gemini_api_key.get_secret_value()),
    )


@app.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(status="ok")


app.include_router(v1_router, prefix=settings.api_prefix)
