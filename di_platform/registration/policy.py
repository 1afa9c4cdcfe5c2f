from __future__ import annotations

from typing import Any


class PolicySet:
    """Policies attached to one registration, keyed by policy class."""

    def __init__(self) -> None:
        self._policies: dict[type, Any] = {}

    def set(self, policy_type: type, policy: Any) -> None:
        self._policies[policy_type] = policy

    def get(self, policy_type: type, default: Any = None) -> Any:
        return self._policies.get(policy_type, default)

    def __contains__(self, policy_type: type) -> bool:
        return policy_type in self._policies

    def __repr__(self) -> str:
        return f"PolicySet({[t.__name__ for t in self._policies]})"
