import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from di_platform.interfaces.logging import LEVELS, LoggingInterface

_COLORS = {
    "INFO": "\033[32m",   # green
    "WARN": "\033[33m",   # yellow
    "ERROR": "\033[31m",  # red
    "DEBUG": "\033[36m",  # cyan
}
_RESET = "\033[0m"


class PrettyLogger(LoggingInterface):
    """Colorized human-readable logger writing to stderr.

    Entries below *min_level* are dropped.
    """

    def __init__(self, min_level: str = "INFO", stream: TextIO | None = None) -> None:
        if min_level not in LEVELS:
            raise ValueError(f"Unknown log level: '{min_level}' (available: {', '.join(LEVELS)})")
        self._threshold = LEVELS.index(min_level)
        self._stream = stream

    def info(self, msg: str, **ctx: Any) -> None:
        self._log("INFO", msg, ctx)

    def warn(self, msg: str, **ctx: Any) -> None:
        self._log("WARN", msg, ctx)

    def error(self, msg: str, **ctx: Any) -> None:
        self._log("ERROR", msg, ctx)

    def debug(self, msg: str, **ctx: Any) -> None:
        self._log("DEBUG", msg, ctx)

    def _log(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        if LEVELS.index(level) < self._threshold:
            return
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        color = _COLORS.get(level, "")
        extra = f"  {ctx}" if ctx else ""
        print(f"{color}{ts} [{level}]{_RESET} {msg}{extra}", file=self._stream or sys.stderr)
