import pytest
from fastapi.testclient import TestClient

from drive_voyager.drive_server.drive_utils import FOLDER_MIME_TYPE
from drive_voyager.drive_server.main import create_drive_app


def folder(folder_id, name=None):
    return {"id": folder_id, "name": name or folder_id, "mimeType": FOLDER_MIME_TYPE}


def document(file_id, name=None, mime_type="application/pdf"):
    return {"id": file_id, "name": name or file_id, "mimeType": mime_type}


class FakeDriveClient:
    """In-memory stand-in for DriveClient.

    ``items`` maps ids to metadata, ``children`` maps folder ids to the
    records ``list_files`` returns. Every call is recorded in ``calls``;
    setting ``fail_on_call`` makes the N-th call (1-based) raise.
    """

    def __init__(self, items=None, children=None, contents=None):
        self.items = items or {}
        self.children = children or {}
        self.contents = contents or {}
        self.calls = []
        self.fail_on_call = None

    def _record(self, name, arg):
        self.calls.append((name, arg))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise RuntimeError(f"simulated upstream failure on {name}({arg})")

    def list_files(self, folder_id):
        self._record("list_files", folder_id)
        return [dict(child) for child in self.children.get(folder_id, [])]

    def get_file_metadata(self, file_id):
        self._record("get_file_metadata", file_id)
        if file_id not in self.items:
            raise LookupError(f"File not found: {file_id}")
        return dict(self.items[file_id])

    def iter_file_content(self, file_id, chunk_size=4):
        self._record("iter_file_content", file_id)
        if file_id not in self.contents:
            raise LookupError(f"File not found: {file_id}")
        data = self.contents[file_id]
        for start in range(0, len(data), chunk_size):
            yield data[start:start + chunk_size]

    def count(self, name):
        return sum(1 for call_name, _ in self.calls if call_name == name)


@pytest.fixture
def fake_drive():
    """A small drive: root -> (report.pdf, Sub -> notes.txt)."""
    return FakeDriveClient(
        items={
            "root": folder("root", "Root"),
            "sub": folder("sub", "Sub"),
            "report": document("report", "report.pdf"),
            "notes": document("notes", "notes.txt", "text/plain"),
        },
        children={
            "root": [document("report", "report.pdf"), folder("sub", "Sub")],
            "sub": [document("notes", "notes.txt", "text/plain")],
        },
        contents={"report": b"%PDF-1.4 fake report body"},
    )


@pytest.fixture
def client(fake_drive):
    return TestClient(create_drive_app(fake_drive))
