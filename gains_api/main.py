import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gains_api.api.router import api_router
from gains_api.config import settings, validate_startup_settings
from gains_api.core.database import close_db, init_db
from gains_api.services.gateways.http_client import close_gateway_client


def setup_logging() -> None:
    """Configure application logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    setup_logging()
    validate_startup_settings(settings)
    logger.info("Gains API starting up")

    if not settings.database_enabled:
        logger.warning("DATABASE_URL not set; influencer ledger endpoints are unavailable")
    if not settings.webhook_auth_enabled:
        logger.warning("REVENUECAT_WEBHOOK_SECRET not set; webhook accepts unauthenticated calls")
    if settings.debug:
        await init_db()

    yield

    await close_gateway_client()
    await close_db()
    logger.info("Gains API shutting down")


app = FastAPI(
    title="Gains API",
    description="Gains AI backend: AI gateway relay and influencer code ledger",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log failed requests and every webhook delivery, skipping OPTIONS preflight."""
    if request.method == "OPTIONS":
        return await call_next(request)

    response = await call_next(request)

    path = request.url.path
    if response.status_code >= 400 or "webhook" in path:
        logger.info(f"{request.method} {path} → {response.status_code}")

    return response


# ─────────────────────────────────────────────────────────────────────────────
# Error envelope: every failure is answered as {"error": ...}
# ─────────────────────────────────────────────────────────────────────────────


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": jsonable_errors(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or exc.__class__.__name__},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Validation errors reduced to location and message."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


app.include_router(api_router)


@app.get("/")
async def health_check():
    """Liveness endpoint."""
    return {"status": "ok", "message": "Gains AI Backend API"}
