from typing import Any

from di_platform.interfaces.logging import LoggingInterface


class NullLogger(LoggingInterface):
    """Discards everything. The container default."""

    def info(self, msg: str, **ctx: Any) -> None:
        pass

    def warn(self, msg: str, **ctx: Any) -> None:
        pass

    def error(self, msg: str, **ctx: Any) -> None:
        pass

    def debug(self, msg: str, **ctx: Any) -> None:
        pass
