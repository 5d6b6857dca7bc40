"""Schema models for Lawdio."""
from lawdio.models.schemas import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    HealthCheckResponse,
    SessionNotesExportRequest,
    SessionNotesExportResponse,
)

__all__ = [
    "AskRequest",
    "AskResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "SessionNotesExportRequest",
    "SessionNotesExportResponse",
]
