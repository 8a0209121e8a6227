import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import purge_expired_sessions
from .config import (
    ALLOWED_ORIGIN_REGEX,
    ALLOWED_ORIGINS,
    ENVIRONMENT,
    LOG_LEVEL,
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    SECURITY_HEADERS_ENABLED,
)
from .database import Base, SessionLocal, engine
from .domain.cash_flow.router import router as cash_flow_router
from .domain.clients.router import router as clients_router
from .domain.events.router import router as events_router
from .domain.payments.router import router as payments_router
from .rate_limiter import create_rate_limiter
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables ready")

    db = SessionLocal()
    try:
        purge_expired_sessions(db)
    finally:
        db.close()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Buffet Admin API", version="1.0.0", lifespan=lifespan)


def format_validation_errors(exc: RequestValidationError) -> list[dict]:
    details = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix so field names match the payload
        loc = [str(part) for part in error.get("loc", ())[1:]]
        details.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return details


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    in_body = any(e.get("loc", ("",))[0] == "body" for e in exc.errors())
    message = "Invalid request body" if in_body else "Invalid query parameters"
    logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": message, "details": format_validation_errors(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = exc.detail
    elif exc.status_code == 404 and exc.detail == "Not Found":
        content = {"error": "Route not found", "message": f"Cannot {request.method} {request.url.path}"}
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or f"req-{uuid.uuid4().hex[:12]}"
    request.state.correlation_id = correlation_id
    started = time.perf_counter()

    response = await call_next(request)

    duration_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Correlation-ID"] = correlation_id
    log = logger.warning if response.status_code >= 400 else logger.info
    log(
        f"{request.method} {request.url.path} - {response.status_code} "
        f"({duration_ms:.1f}ms, correlationId: {correlation_id})"
    )
    return response


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_origin_regex=ALLOWED_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Cookie", "X-Correlation-ID"],
    expose_headers=["Set-Cookie", "X-Correlation-ID"],
)

api_rate_limit = create_rate_limiter(
    limit=RATE_LIMIT_REQUESTS, window_seconds=RATE_LIMIT_WINDOW_SECONDS, key_prefix="api"
)

# Routes
for router in (auth_router, clients_router, events_router, payments_router, cash_flow_router):
    app.include_router(router, dependencies=[Depends(api_rate_limit)])


@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ENVIRONMENT,
    }
