"""Tests for POST /api/session-notes/export and GET /notes/{filename}."""
import io
import re

import pytest
from docx import Document
from httpx import ASGITransport, AsyncClient

from lawdio.errors import StorageError
from lawdio.services.storage import FileNotesStorage

FILENAME_RE = re.compile(r"^/notes/lawdio-notes-(?P<case>[A-Za-z0-9\-_]+)-(?P<ts>\d+)\.docx$")


def _paragraph_texts(data: bytes):
    return [p.text for p in Document(io.BytesIO(data)).paragraphs]


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_export_returns_download_url(client: AsyncClient, notes_storage):
    resp = await client.post(
        "/api/session-notes/export",
        json={"caseId": "My Case/2024!", "notes": ["Offer", "Acceptance", "Consideration"]},
    )
    assert resp.status_code == 200
    url = resp.json()["downloadUrl"]
    match = FILENAME_RE.match(url)
    assert match is not None
    assert match.group("case") == "My-Case-2024-"
    assert len(notes_storage.files) == 1


@pytest.mark.asyncio
async def test_exported_document_content(client: AsyncClient):
    notes = ["Duty of care", "Breach", "Causation", "Damage"]
    resp = await client.post(
        "/api/session-notes/export", json={"caseId": "tort-101", "notes": notes}
    )
    url = resp.json()["downloadUrl"]

    download = await client.get(url)
    assert download.status_code == 200
    assert download.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )

    doc = Document(io.BytesIO(download.content))
    texts = [p.text for p in doc.paragraphs]
    assert texts[0] == "Lawdio Notes – tort-101"
    assert doc.paragraphs[0].style.name == "Heading 1"
    assert texts[1] == ""
    assert texts[2:] == ["1. Duty of care", "2. Breach", "3. Causation", "4. Damage"]


@pytest.mark.asyncio
async def test_export_default_case_id(client: AsyncClient, notes_storage):
    resp = await client.post("/api/session-notes/export", json={"notes": ["only note"]})
    assert resp.status_code == 200
    assert FILENAME_RE.match(resp.json()["downloadUrl"]).group("case") == "lawdio-case"

    (data,) = notes_storage.files.values()
    assert _paragraph_texts(data)[0] == "Lawdio Notes – lawdio-case"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"caseId": "x", "notes": []},
        {"caseId": "x"},
        {"notes": "not a list"},
        {"notes": None},
        {},
    ],
)
async def test_export_rejects_missing_notes(client: AsyncClient, notes_storage, body):
    resp = await client.post("/api/session-notes/export", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "No notes provided"}
    assert notes_storage.files == {}


@pytest.mark.asyncio
async def test_export_without_body(client: AsyncClient, notes_storage):
    resp = await client.post("/api/session-notes/export")
    assert resp.status_code == 400
    assert resp.json()["error"] == "No notes provided"
    assert notes_storage.files == {}


@pytest.mark.asyncio
async def test_export_malformed_json(client: AsyncClient, notes_storage):
    resp = await client.post(
        "/api/session-notes/export",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}
    assert notes_storage.files == {}


@pytest.mark.asyncio
async def test_repeated_export_creates_distinct_files(client: AsyncClient, notes_storage):
    body = {"caseId": "same", "notes": ["a", "b"]}
    first = await client.post("/api/session-notes/export", json=body)
    second = await client.post("/api/session-notes/export", json=body)

    assert first.status_code == second.status_code == 200
    assert first.json()["downloadUrl"] != second.json()["downloadUrl"]
    assert len(notes_storage.files) == 2


@pytest.mark.asyncio
async def test_export_storage_failure_returns_500(make_app, notes_storage):
    class BrokenStorage(type(notes_storage)):
        async def put(self, name, data):
            raise StorageError() from OSError("disk full at /secret/path")

    app = make_app(storage=BrokenStorage())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.post("/api/session-notes/export", json={"notes": ["x"]})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Server error generating document"}
    assert "/secret/path" not in resp.text


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_files_served_byte_for_byte(make_app, tmp_path):
    storage = FileNotesStorage(str(tmp_path / "notes"))
    app = make_app(storage=storage)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.post(
            "/api/session-notes/export", json={"caseId": "disk", "notes": ["on disk"]}
        )
        url = resp.json()["downloadUrl"]
        download = await ac.get(url)

    on_disk = (tmp_path / "notes" / url.rsplit("/", 1)[1]).read_bytes()
    assert download.status_code == 200
    assert download.content == on_disk


@pytest.mark.asyncio
async def test_unknown_note_returns_404(client: AsyncClient):
    resp = await client.get("/notes/lawdio-notes-nope-1.docx")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_export_note_with_control_characters(client: AsyncClient):
    resp = await client.post(
        "/api/session-notes/export",
        json={"caseId": "pasted", "notes": ["form\x0cfeed", "esc\x1b[1m", "nul\x00"]},
    )
    assert resp.status_code == 200

    download = await client.get(resp.json()["downloadUrl"])
    assert download.status_code == 200
    assert _paragraph_texts(download.content)[2:] == ["1. formfeed", "2. esc[1m", "3. nul"]


@pytest.mark.asyncio
async def test_export_long_case_id_on_disk(make_app, tmp_path):
    app = make_app(storage=FileNotesStorage(str(tmp_path / "notes")))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.post(
            "/api/session-notes/export", json={"caseId": "c" * 300, "notes": ["long id"]}
        )

    assert resp.status_code == 200
    assert FILENAME_RE.match(resp.json()["downloadUrl"]).group("case") == "c" * 100
