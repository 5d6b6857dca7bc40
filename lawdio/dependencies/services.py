"""
Service dependencies for FastAPI routes.

Services are constructed once by ``create_app`` and kept on ``app.state``;
these dependencies hand them to request handlers.  Tests replace them through
``app.dependency_overrides``.
"""
from __future__ import annotations

from fastapi import Request

from lawdio.config import Settings
from lawdio.services.exporter import SessionNotesExporter
from lawdio.services.storage import NotesStorage
from lawdio.services.tutor import TutorService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notes_storage(request: Request) -> NotesStorage:
    return request.app.state.notes_storage


def get_exporter(request: Request) -> SessionNotesExporter:
    return request.app.state.exporter


def get_tutor_service(request: Request) -> TutorService:
    """The tutor exists only once the lifespan handler has opened the HTTP client."""
    tutor = getattr(request.app.state, "tutor", None)
    if tutor is None:
        raise RuntimeError("Tutor service is not initialised; is the app lifespan running?")
    return tutor
