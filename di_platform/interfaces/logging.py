from abc import ABC, abstractmethod
from typing import Any

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


class LoggingInterface(ABC):
    """Logger injected into the container.

    Registrations are logged at INFO, constructor selection and compiled
    construction functions at DEBUG, and failed resolutions at ERROR. Context
    is passed as keywords (``type=``, ``constructor=``, ``name=``).
    """

    @abstractmethod
    def info(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def warn(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def error(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def debug(self, msg: str, **ctx: Any) -> None: ...
