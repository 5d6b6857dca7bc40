"""
Pydantic schemas for request/response validation.

Field names are snake_case in Python and camelCase on the wire.
Request fields are typed loosely; the services own the validation rules
so that bad input maps to 400 with a specific message.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema that serializes and accepts camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Ask Schemas
class AskRequest(CamelModel):
    """Schema for a tutoring question."""

    question: Optional[Any] = None


class AskResponse(CamelModel):
    """Schema for a tutoring answer."""

    answer_text: str
    audio_base64: Optional[str] = None
    warning: Optional[str] = None


# Session Notes Schemas
class SessionNotesExportRequest(CamelModel):
    """Schema for exporting session notes to a Word document."""

    case_id: Optional[Any] = None
    notes: Optional[Any] = None


class SessionNotesExportResponse(CamelModel):
    """Schema for the export result."""

    download_url: str


# Error Schemas
class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error: str


# Health Schemas
class HealthCheckResponse(CamelModel):
    """Schema for health check endpoint."""

    status: str
    llm_configured: bool
    tts_enabled: bool
    notes_backend: str
    timestamp: datetime
    version: str
