"""Health check endpoints."""

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict:
    """Readiness check - reports the storage provider in use."""
    books = await run_in_threadpool(request.app.state.store.get_all)
    return {
        "status": "ready",
        "provider": request.app.state.provider_name,
        "books": len(books),
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - verifies service is running."""
    return {"status": "alive"}
