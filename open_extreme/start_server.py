"""
Entrypoint that resolves the bind address before booting uvicorn.

Some hosting providers invoke the start command without shell expansion, so
``--port $PORT`` arrives as the literal string ``"$PORT"``.  This module reads
the environment directly and falls back to a default on malformed input.
"""

from __future__ import annotations

import logging
import os

import uvicorn

from .config import get_settings
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


DEFAULT_PORT = 8000
MAX_PORT = 65535


def resolve_port(raw: str | None, default: int = DEFAULT_PORT) -> int:
    """Port from ``PORT``; blank, non-numeric or out-of-range values use ``default``."""

    token = (raw or "").strip()
    if not token:
        return default
    try:
        port = int(token)
    except ValueError:
        logger.warning("ignoring non-numeric PORT", extra={"raw": raw, "default": default})
        return default
    if not 0 < port <= MAX_PORT:
        logger.warning("ignoring out-of-range PORT", extra={"raw": raw, "default": default})
        return default
    return port


def main() -> None:
    setup_logging(get_settings().log_level)
    port = resolve_port(os.environ.get("PORT"))
    host = os.environ.get("HOST", "0.0.0.0")
    logger.info("starting screener", extra={"host": host, "port": port})
    uvicorn.run("open_extreme.server:app", host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
