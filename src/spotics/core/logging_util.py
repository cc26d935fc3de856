import json as _json
import logging
import sys
from typing import Any, Dict

from rich.console import Console
from rich.logging import RichHandler

# Fields passed through `extra=` that are copied into JSON log lines
_EXTRA_FIELDS = ("provider", "path", "status")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = str(getattr(record, field))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(payload, ensure_ascii=False)


def setup_logging(
    *, json_logs: bool = False, verbose: bool | None = None, quiet: bool | None = None
) -> None:
    """Configure root logging on stderr.

    Stdout is reserved for lyrics output. DEBUG with verbose, WARNING with
    quiet, INFO otherwise.
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    if quiet:
        level = max(level, logging.WARNING)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if json_logs:
        handler: logging.Handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # aiohttp is chatty at DEBUG
    logging.getLogger("aiohttp").setLevel(max(level, logging.INFO))
