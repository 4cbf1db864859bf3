"""
FastAPI Application

Main application entry point for the SecuraScan Razorpay webhook relay.
Provides the webhook endpoint, health checks, and the local listener.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.config import settings
from app.routes import health, webhook
from app.services.firestore_service import firestore_service
from app.services.razorpay_service import EVENT_ID_HEADER
from app.utils.logging_config import (
    get_logger,
    set_correlation_id,
    setup_logging,
)

# Setup logging
setup_logging(log_level=settings.log_level)
logger = get_logger(__name__)


def startup() -> None:
    """Validate configuration and build the Firestore client once per process"""
    for missing in settings.validate_required_secrets():
        logger.error(
            f"Missing required configuration: {missing}",
            extra={"setting": missing},
        )

    firestore_service.initialize()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    Initializes the Firestore client at startup.
    """
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        extra={
            "environment": settings.environment,
            "execution_mode": settings.execution_mode,
        },
    )

    startup()

    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Relays Razorpay payment link webhooks to Firestore user records",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# Correlation ID middleware
@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """Add correlation ID to all requests for tracing"""
    correlation_id = request.headers.get("X-Correlation-ID") or request.headers.get(
        EVENT_ID_HEADER
    )
    correlation_id = set_correlation_id(correlation_id)

    response = await call_next(request)

    response.headers["X-Correlation-ID"] = correlation_id

    return response


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(
        f"Unexpected exception: {exc}",
        extra={"error": str(exc), "type": type(exc).__name__},
    )

    return PlainTextResponse("Internal server error.", status_code=500)


# Include routers
app.include_router(webhook.router)
app.include_router(health.router)


# Root endpoint
@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness message"""
    return "SecuraScan Backend Server is running."


def run() -> None:
    """Bind the local listener unless a hosting runtime invokes the app per request"""
    if settings.is_serverless:
        logger.warning(
            "Execution mode is serverless; not binding a local listener",
            extra={"execution_mode": settings.execution_mode},
        )
        return

    import uvicorn

    logger.info(f"Server listening on port {settings.port}")
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
