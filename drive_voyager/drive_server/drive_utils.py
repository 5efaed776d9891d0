import io
import logging
import threading
from typing import Any, Dict, Iterator, List

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseDownload

SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
METADATA_FIELDS = "id, name, mimeType"
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    """Quote a value for use inside a Drive query string."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def children_query(folder_id: str) -> str:
    return f"{_quote(folder_id)} in parents and trashed=false"


class DriveClient:
    """Wrapper around Google Drive API for read-only operations.

    When built with credentials, every thread gets its own authorized HTTP
    transport; httplib2 connections cannot be shared between threads.
    """

    def __init__(self, service, credentials=None):
        self.service = service
        self.credentials = credentials
        self._local = threading.local()

    @classmethod
    def from_service_account_info(cls, info: Dict[str, Any]) -> "DriveClient":
        creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        logger.info("Google Drive client initialized for %s", info.get("client_email", "<unknown>"))
        return cls(build("drive", "v3", credentials=creds, cache_discovery=False), creds)

    @classmethod
    def from_service_account_file(cls, path: str) -> "DriveClient":
        creds = service_account.Credentials.from_service_account_file(path, scopes=SCOPES)
        logger.info("Google Drive client initialized from key file %s", path)
        return cls(build("drive", "v3", credentials=creds, cache_discovery=False), creds)

    def _new_http(self):
        return google_auth_httplib2.AuthorizedHttp(self.credentials, http=httplib2.Http())

    def _http(self):
        if self.credentials is None:
            return None
        http = getattr(self._local, "http", None)
        if http is None:
            http = self._local.http = self._new_http()
        return http

    def _execute(self, request) -> Dict:
        http = self._http()
        return request.execute() if http is None else request.execute(http=http)

    def list_files(self, folder_id: str) -> List[Dict]:
        """Return the non-trashed children of a folder as ``{id, name, mimeType}`` records."""
        logger.debug("Listing children of folder '%s'", folder_id)
        results = self._execute(
            self.service.files().list(q=children_query(folder_id), fields=f"files({METADATA_FIELDS})")
        )
        return results.get("files", [])

    def get_file_metadata(self, file_id: str) -> Dict:
        return self._execute(self.service.files().get(fileId=file_id, fields=METADATA_FIELDS))

    def iter_file_content(self, file_id: str, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the raw bytes of a file, one downloaded chunk at a time.

        Nothing is fetched until the first chunk is requested, so errors from
        the API (missing file, no permission) surface on that first ``next()``.
        """
        request = self.service.files().get_media(fileId=file_id)
        if self.credentials is not None:
            # Chunks may be pulled from different worker threads; the download owns its transport.
            request.http = self._new_http()
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request, chunksize=chunk_size)
        done = False
        while not done:
            _, done = downloader.next_chunk()
            chunk = buffer.getvalue()
            buffer.seek(0)
            buffer.truncate()
            yield chunk
        logger.debug("Finished streaming file '%s'", file_id)
