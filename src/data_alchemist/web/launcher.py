"""Standalone launcher for the Data Alchemist web API.

Runs uvicorn on a free local port unless one is given.

Usage:
    python -m data_alchemist serve [--port 8000]
"""

from __future__ import annotations

import logging
import socket

import uvicorn

_log = logging.getLogger(__name__)


def find_free_port(start: int = 8400, end: int = 8500, host: str = "127.0.0.1") -> int:
    """Return the first free TCP port in [start, end)."""
    for port in range(start, end):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((host, port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"No free port between {start} and {end}.")


def serve(host: str = "127.0.0.1", port: int | None = None, log_level: str = "info") -> None:
    """Block serving the API until interrupted."""
    port = port if port is not None else find_free_port(host=host)
    _log.info("Serving Data Alchemist API on http://%s:%d", host, port)
    uvicorn.run("data_alchemist.web.app:app", host=host, port=port, log_level=log_level)
