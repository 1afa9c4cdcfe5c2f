"""Root-level pytest fixtures shared by unit and end-to-end tests."""

from __future__ import annotations

import pytest

from di_platform.config.container import Container
from di_platform.services.logger.memory_logger import MemoryLogger


@pytest.fixture
def memory_logger() -> MemoryLogger:
    return MemoryLogger()


@pytest.fixture
def container(memory_logger: MemoryLogger) -> Container:
    """Fresh container logging into ``memory_logger``."""
    return Container(logger=memory_logger)
