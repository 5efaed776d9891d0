from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse


def create_app(title: str, version: str = "0.1.0", welcome: Optional[str] = None) -> FastAPI:
    """Build a FastAPI application with the routes every Drive Voyager service shares.

    ``/health`` reports the service name and version. When ``welcome`` is given,
    ``/`` answers with it as plain text.
    """
    app = FastAPI(title=title, version=version)

    @app.get("/health")
    def health():
        return {"status": "ok", "service": title, "version": version}

    if welcome is not None:

        @app.get("/", response_class=PlainTextResponse)
        def index():
            return welcome

    return app
