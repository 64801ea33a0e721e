from datetime import datetime, timezone

from fastapi import APIRouter, Request

from storycase.core.config import get_settings


router = APIRouter()


@router.get("/health", summary="Service health check", tags=["health"])
async def health_check(request: Request) -> dict:
    """
    Readiness check. Reports which text-generation provider serves /generate.
    """
    settings = get_settings()
    service = request.app.state.generation_service

    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.environment,
        "provider": service.provider.name,
        "time": datetime.now(timezone.utc).isoformat(),
    }
