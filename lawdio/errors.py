"""
Error taxonomy shared by services and routers.

Every error carries the HTTP status it maps to and a client-safe message.
Underlying causes are logged where they are caught, never returned.
"""
from __future__ import annotations

from fastapi import status


class LawdioError(Exception):
    """Base class for errors that map onto a JSON ``{"error": ...}`` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LawdioError):
    """Bad or missing client input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NoteNotFoundError(LawdioError):
    """Requested notes file does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StorageError(LawdioError):
    """Document serialization or filesystem write failed."""

    default_message = "Server error generating document"


class UpstreamError(LawdioError):
    """The text-generation or speech provider call failed."""

    default_message = "Server error getting answer"
