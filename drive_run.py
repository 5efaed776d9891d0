"""
    Drive Voyager exposes a read-only slice of Google Drive over HTTP. It authenticates
    once with a service account and then answers three kinds of request:
    - Folder listing - the immediate children of a folder (GET /files?folderId=...)
    - Folder tree - a folder with all of its subfolders and files nested (GET /all-files?folderId=...)
    - Download - a file's bytes streamed back as an attachment (GET /download/<fileId>?filename=...)

    Configuration comes from the environment or a .env file; see drive_voyager/config.py.
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from drive_voyager.config import Settings, load_settings
from drive_voyager.drive_server.drive_utils import DriveClient
from drive_voyager.drive_server.main import create_drive_app
from drive_voyager.exceptions import ConfigurationError


def setup_logging(level: str = "INFO"):
    """Configures the root logger to write to the console."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)

    # Reducing "noise" from third-party libraries
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def init_drive_client(settings: Settings) -> DriveClient:
    if settings.GOOGLE_SERVICE_ACCOUNT_KEY is not None:
        return DriveClient.from_service_account_info(settings.GOOGLE_SERVICE_ACCOUNT_KEY)
    return DriveClient.from_service_account_file(settings.GOOGLE_SERVICE_ACCOUNT_JSON)


def main():
    load_dotenv()
    setup_logging()

    try:
        settings = load_settings()
        setup_logging(settings.LOG_LEVEL)
        drive_client = init_drive_client(settings)
    except (ConfigurationError, ValueError, OSError) as exc:
        logging.critical("Cannot start Drive Voyager: %s", exc)
        sys.exit(1)

    app = create_drive_app(drive_client)
    logging.info("Server is running on http://localhost:%d", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
