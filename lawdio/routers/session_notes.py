"""
Session notes export.

POST /api/session-notes/export — write notes to a .docx, return its download URL.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from lawdio.dependencies.services import get_exporter
from lawdio.models.schemas import (
    ErrorResponse,
    SessionNotesExportRequest,
    SessionNotesExportResponse,
)
from lawdio.services.exporter import SessionNotesExporter

router = APIRouter()


@router.post(
    "/export",
    response_model=SessionNotesExportResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def export_session_notes(
    payload: Optional[SessionNotesExportRequest] = None,
    exporter: SessionNotesExporter = Depends(get_exporter),
) -> SessionNotesExportResponse:
    """One new document per call; identical note sets are not deduplicated."""
    case_id = payload.case_id if payload else None
    notes = payload.notes if payload else None
    result = await exporter.export(case_id, notes)
    return SessionNotesExportResponse(download_url=result.download_url)
