"""Root logger setup shared by the CLI and the web app."""

from __future__ import annotations

import logging
import sys
import time
from typing import IO, Any, Dict, Optional

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class AuditLogFormatter(logging.Formatter):
    """`2024-01-01T00:00:00Z [warn] nsaudit.tool: message`"""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(tag)s] %(name)s: %(message)s", datefmt="%Y-%m-%dT%H:%M:%SZ")

    def format(self, record: logging.LogRecord) -> str:
        record.tag = "warn" if record.levelno == logging.WARNING else record.levelname.lower()
        return super().format(record)


def init_logging(cfg: Optional[Dict[str, Any]] = None) -> None:
    """Point the root logger at one stream handler; cfg keys: level (default info), stream (default stderr)."""
    cfg = cfg or {}
    stream: IO[str] = cfg.get("stream") or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(AuditLogFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(_LEVELS.get(str(cfg.get("level", "info")).lower(), logging.INFO))
