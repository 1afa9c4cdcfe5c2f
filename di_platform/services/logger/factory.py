from __future__ import annotations

from di_platform.interfaces.logging import LoggingInterface
from di_platform.services.logger.memory_logger import MemoryLogger
from di_platform.services.logger.null_logger import NullLogger
from di_platform.services.logger.pretty_logger import PrettyLogger


class LoggerFactory:
    """Creates and caches logger instances by implementation name."""

    _registry: dict[str, type[LoggingInterface]] = {
        "null": NullLogger,
        "pretty": PrettyLogger,
        "memory": MemoryLogger,
    }

    def __init__(self, default_impl: str = "null") -> None:
        self._check(default_impl)
        self._default_impl = default_impl
        self._instances: dict[str, LoggingInterface] = {}

    def create(self, impl_name: str | None = None) -> LoggingInterface:
        """Return the logger for *impl_name*, creating it on first use."""
        name = impl_name or self._default_impl
        if name not in self._instances:
            self._check(name)
            self._instances[name] = self._registry[name]()
        return self._instances[name]

    def _check(self, name: str) -> None:
        if name not in self._registry:
            raise ValueError(
                f"Unknown logger implementation: '{name}' "
                f"(available: {', '.join(self._registry)})"
            )
