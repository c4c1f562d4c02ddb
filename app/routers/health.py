"""Health check endpoints."""

from fastapi import APIRouter, Request

from app.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "family-health-vault",
        "environment": settings.ENVIRONMENT,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check for Kubernetes/Docker."""
    store = getattr(request.app.state, "store", None)
    return {
        "status": "ready" if store is not None else "starting",
        "store": type(store).__name__ if store is not None else None,
    }
