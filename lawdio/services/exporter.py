"""
Session-notes export to Word documents.

Builds a .docx from an ordered list of notes with python-docx, writes it to
notes storage under ``lawdio-notes-<safeCaseId>-<epoch-millis>.docx`` and
returns the download URL.
"""
from __future__ import annotations

import dataclasses
import io
import logging
import re
import threading
import time
from typing import Any, Callable, List, Optional, Sequence

from docx import Document
from docx.document import Document as DocxDocument

from lawdio.errors import StorageError, ValidationError
from lawdio.services.storage import NotesStorage

logger = logging.getLogger(__name__)

DEFAULT_CASE_ID = "lawdio-case"
DOCUMENT_TITLE = "Lawdio Notes"

_UNSAFE_CASE_ID_CHARS = re.compile(r"[^A-Za-z0-9\-_]")
MAX_CASE_ID_LENGTH = 100

# Characters python-docx rejects because XML 1.0 cannot carry them
_XML_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


@dataclasses.dataclass
class ExportResult:
    download_url: str
    filename: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def sanitize_case_id(value: Any, default: str = DEFAULT_CASE_ID) -> str:
    """
    Replace every character outside [A-Za-z0-9-_] with a hyphen and cap the
    result at MAX_CASE_ID_LENGTH so the filename stays within OS limits.
    """
    raw = str(value) if value else default
    return _UNSAFE_CASE_ID_CHARS.sub("-", raw)[:MAX_CASE_ID_LENGTH]


def clean_note_text(note: Any) -> str:
    """Drop control characters that cannot be stored in a .docx paragraph."""
    return _XML_INVALID_CHARS.sub("", str(note))


def build_filename(safe_case_id: str, timestamp_ms: int) -> str:
    return f"lawdio-notes-{safe_case_id}-{timestamp_ms}.docx"


def build_notes_document(safe_case_id: str, notes: Sequence[Any]) -> DocxDocument:
    """
    Heading, one blank paragraph, then ``"<n>. <note>"`` per note in order.
    """
    doc = Document()
    doc.add_heading(f"{DOCUMENT_TITLE} – {safe_case_id}", level=1)
    doc.add_paragraph("")
    for index, note in enumerate(notes, start=1):
        doc.add_paragraph(f"{index}. {clean_note_text(note)}")
    return doc


def render_document(doc: DocxDocument) -> bytes:
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


class MillisecondClock:
    """
    Epoch-millisecond timestamps that never repeat within the process.

    If the wall clock has not advanced since the last call (or went
    backwards) the previous value is bumped by one.
    """

    def __init__(self, time_fn: Callable[[], float] = time.time) -> None:
        self._time_fn = time_fn
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            current = int(self._time_fn() * 1000)
            if current <= self._last:
                current = self._last + 1
            self._last = current
            return current


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------

class SessionNotesExporter:
    """Turns a list of session notes into a stored .docx file."""

    def __init__(
        self,
        storage: NotesStorage,
        default_case_id: str = DEFAULT_CASE_ID,
        clock: Optional[MillisecondClock] = None,
    ) -> None:
        self.storage = storage
        self.default_case_id = default_case_id
        self.clock = clock or MillisecondClock()

    async def export(self, case_id: Any, notes: Any) -> ExportResult:
        """
        Validate, render and store one notes document.

        Raises:
            ValidationError: ``notes`` is missing, empty or not a list.
            StorageError: the document could not be serialized or written.
        """
        if not isinstance(notes, (list, tuple)) or len(notes) == 0:
            raise ValidationError("No notes provided")

        safe_case_id = sanitize_case_id(case_id, self.default_case_id)
        note_list: List[Any] = list(notes)

        try:
            data = render_document(build_notes_document(safe_case_id, note_list))
        except Exception as exc:
            logger.error(
                "Error generating session notes doc for case %s: %s",
                safe_case_id,
                exc,
                exc_info=True,
            )
            raise StorageError() from exc

        filename = build_filename(safe_case_id, self.clock.now())
        download_url = await self.storage.put(filename, data)

        logger.info(
            "Exported %d notes for case %s → %s", len(note_list), safe_case_id, filename
        )
        return ExportResult(download_url=download_url, filename=filename)
