"""Logging setup. Everything goes to stderr; stdout is reserved for the response."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler

from filestate.codec.encoder import encode


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return encode(payload)


def setup_logging(level: str = "WARNING", fmt: str = "json") -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if fmt == "rich":
        h = RichHandler(console=Console(stderr=True), show_path=False)
    else:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(JsonFormatter())
    root.addHandler(h)
