"""
Health Check Endpoints

Provides liveness and readiness status for the relay.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.config import settings
from app.services.firestore_service import firestore_service
from app.services.razorpay_service import razorpay_service
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if application is running.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": _now(),
            "version": settings.app_version,
        },
    )


@router.get("/health/ready")
async def readiness_check():
    """
    Readiness check endpoint.
    Verifies that the webhook secret is configured and the Firestore
    client was initialized.
    """
    dependencies: Dict[str, Any] = {
        "razorpay_webhook_secret": {
            "status": "healthy" if razorpay_service.webhook_secret else "unhealthy",
            "configured": bool(razorpay_service.webhook_secret),
        },
        "firestore": {
            "status": "healthy" if firestore_service.is_connected() else "unhealthy",
            "connected": firestore_service.is_connected(),
            "collection": firestore_service.collection_path,
        },
    }

    overall_healthy = all(d["status"] == "healthy" for d in dependencies.values())
    if not overall_healthy:
        logger.warning("Readiness check failed", extra={"dependencies": dependencies})

    return JSONResponse(
        status_code=200 if overall_healthy else 503,
        content={
            "status": "ready" if overall_healthy else "not_ready",
            "timestamp": _now(),
            "dependencies": dependencies,
        },
    )


@router.get("/health/live")
async def liveness_check():
    """
    Liveness check endpoint.
    Returns 200 if application is alive.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "alive",
            "timestamp": _now(),
        },
    )
