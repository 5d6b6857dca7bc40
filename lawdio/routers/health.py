"""
Health check endpoint.
"""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from lawdio import __version__
from lawdio.config import Settings
from lawdio.dependencies.services import get_notes_storage, get_settings
from lawdio.models.schemas import HealthCheckResponse
from lawdio.services.storage import NotesStorage

router = APIRouter()


@router.get("", response_model=HealthCheckResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    storage: NotesStorage = Depends(get_notes_storage),
):
    """
    Report configuration-level status.  Never calls the upstream provider.

    Returns:
        HealthCheckResponse, "degraded" when no API key is configured
    """
    overall_status = "healthy" if settings.llm_configured else "degraded"

    return HealthCheckResponse(
        status=overall_status,
        llm_configured=settings.llm_configured,
        tts_enabled=settings.TTS_ENABLED,
        notes_backend=storage.backend_name,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
    )
