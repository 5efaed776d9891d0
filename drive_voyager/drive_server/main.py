import itertools
import logging
import re
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from ..base_server import create_app
from .drive_utils import DriveClient
from .tree import build_folder_tree

WELCOME_MESSAGE = "Welcome to Drive-Voyager!"
MISSING_FOLDER_ID = "folderId query parameter is required"

CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")

logger = logging.getLogger(__name__)


def get_drive_client(request: Request) -> DriveClient:
    return request.app.state.drive_client


def require_folder_id(folder_id: Optional[str] = Query(None, alias="folderId")) -> str:
    if not folder_id:
        raise HTTPException(status_code=400, detail=MISSING_FOLDER_ID)
    return folder_id


def content_disposition(filename: str) -> str:
    """Build an ``attachment`` Content-Disposition header value for ``filename``."""
    filename = CONTROL_CHARACTERS.sub("_", filename)
    escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
    try:
        escaped.encode("ascii")
    except UnicodeEncodeError:
        fallback = escaped.encode("ascii", "replace").decode("ascii")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
    return f'attachment; filename="{escaped}"'


def create_drive_app(drive_client: DriveClient) -> FastAPI:
    """Build the Drive Voyager API around an already authenticated client."""
    app = create_app("Drive Voyager", "0.1.0", welcome=WELCOME_MESSAGE)
    app.state.drive_client = drive_client

    @app.get("/files")
    def list_files(
        folder_id: str = Depends(require_folder_id),
        client: DriveClient = Depends(get_drive_client),
    ):
        """List the immediate children of a folder."""
        try:
            return client.list_files(folder_id)
        except Exception:
            logger.exception("Error listing files in folder '%s'", folder_id)
            raise HTTPException(status_code=500, detail="Error listing files")

    @app.get("/all-files")
    def all_files(
        folder_id: str = Depends(require_folder_id),
        client: DriveClient = Depends(get_drive_client),
    ):
        """Return a folder with all of its subfolders and files nested."""
        try:
            return build_folder_tree(client, folder_id)
        except Exception:
            logger.exception("Error listing folder tree for '%s'", folder_id)
            raise HTTPException(status_code=500, detail="Error listing folder tree")

    @app.get("/download/{file_id}")
    def download(
        file_id: str,
        filename: Optional[str] = None,
        client: DriveClient = Depends(get_drive_client),
    ):
        """Stream a file to the caller, suggesting ``filename`` or the file id as its name."""
        try:
            chunks = client.iter_file_content(file_id)
            # Pull the first chunk here so API errors still map to a status code.
            first = next(chunks, b"")
        except Exception:
            logger.exception("Error downloading file '%s'", file_id)
            raise HTTPException(status_code=500, detail="Error downloading file")

        return StreamingResponse(
            itertools.chain([first], chunks),
            media_type="application/octet-stream",
            headers={"Content-Disposition": content_disposition(filename or file_id)},
        )

    return app
