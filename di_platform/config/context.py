import os


class ContainerConfig:
    """Environment-based container settings with optional overrides.

    Recognised keys:

    - ``DI_LOG_IMPL``: logger implementation (``null``, ``pretty``, ``memory``).
    """

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self._env = dict(os.environ)
        if overrides:
            self._env.update(overrides)

    def get(self, key: str, default: str = "") -> str:
        return self._env.get(key, default)

    @property
    def log_impl(self) -> str:
        return self.get("DI_LOG_IMPL", "null") or "null"

    def __repr__(self) -> str:
        return f"ContainerConfig(log_impl={self.log_impl!r})"
