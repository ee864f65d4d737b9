"""Read-only web dashboard for the loaded configuration and the backup logs."""
from __future__ import annotations

import logging
import socket
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse, PlainTextResponse

from .logs import latest_log_content, list_log_files
from .modes import RunContext

LOGGER = logging.getLogger(__name__)

INDEX_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>restic-manager</title></head>
<body>
<h1>restic-manager</h1>
<ul>
<li><a href="/api/config">Configuration (JSON)</a></li>
<li><a href="/api/config/yaml">Configuration (YAML)</a></li>
<li><a href="/api/logs">Logs</a></li>
<li><a href="/api/status">Status</a></li>
</ul>
</body>
</html>
"""


class ServerBindError(Exception):
    """Raised when the dashboard cannot listen on the requested address."""


def create_app(context: RunContext, log_dir: Optional[Path] = None) -> FastAPI:
    """Build the dashboard application.

    Every route only reads ``context`` and the log directory; nothing here
    writes files or starts restic.
    """

    log_directory = Path(log_dir) if log_dir is not None else Path(context.config.logging.directory)
    started_at = datetime.now().replace(microsecond=0).isoformat()
    app = FastAPI(title="restic-manager", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return INDEX_HTML

    @app.get("/api/config")
    def get_config() -> Dict:
        return context.config.to_dict()

    @app.get("/api/config/yaml", response_class=PlainTextResponse)
    def get_config_yaml() -> str:
        return context.config_text

    @app.get("/api/logs")
    def get_logs(lines: Optional[int] = Query(default=None, ge=0)) -> Dict:
        files = list_log_files(log_directory)
        return {
            "files": [item.to_dict() for item in files],
            "latest_content": latest_log_content(files, lines),
        }

    @app.get("/api/status")
    def get_status() -> Dict:
        backup = context.config.backup
        return {
            "status": "running",
            "mode": context.mode.value,
            "config_path": str(context.config_path),
            "started_at": started_at,
            "schedule": {"frequency": backup.frequency, "time": backup.time},
        }

    return app


def bind_socket(host: str, port: int) -> socket.socket:
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except socket.gaierror as exc:
        raise ServerBindError(f"Cannot resolve '{host}': {exc}") from exc
    family = infos[0][0]
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise ServerBindError(f"Cannot listen on {host}:{port}: {exc}") from exc
    return sock


def serve(app: FastAPI, host: str, port: int) -> None:
    """Serve *app* until the process is interrupted."""

    sock = bind_socket(host, port)
    port = sock.getsockname()[1]
    LOGGER.info("Dashboard listening on http://%s:%d", host, port)
    print(f"Web UI available at http://{host}:{port}")
    print("   Press Ctrl+C to stop the server")
    server = uvicorn.Server(uvicorn.Config(app, log_level="warning"))
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


__all__ = ["ServerBindError", "bind_socket", "create_app", "serve"]
