"""
Read-only access to exported notes.

GET /notes/{filename} — raw file bytes from notes storage.
"""
import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from lawdio.dependencies.services import get_notes_storage
from lawdio.services.storage import NotesStorage

router = APIRouter()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
mimetypes.add_type(DOCX_MEDIA_TYPE, ".docx")


@router.get("/{filename}", response_class=Response)
async def get_note_file(
    filename: str,
    storage: NotesStorage = Depends(get_notes_storage),
) -> Response:
    data = await storage.get(filename)
    media_type, _ = mimetypes.guess_type(filename)
    return Response(content=data, media_type=media_type or "application/octet-stream")
