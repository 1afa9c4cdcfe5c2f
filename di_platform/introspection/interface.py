from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from di_platform.introspection.constructor_info import ConstructorInfo


class TypeIntrospectorInterface(ABC):
    """Narrow view of runtime type metadata used by constructor selection."""

    @abstractmethod
    def list_constructors(self, tp: Any) -> list[ConstructorInfo]:
        """All declared constructors of *tp*, including private and static ones."""
        ...

    def public_constructors(self, tp: Any) -> list[ConstructorInfo]:
        """Public, non-static constructors. Ordinal positions index this list."""
        return [c for c in self.list_constructors(tp) if c.is_public and not c.is_static]

    @abstractmethod
    def is_assignable_from(self, target: Any, source: Any) -> bool:
        """True if a value of type *source* can be passed where *target* is declared."""
        ...

    @abstractmethod
    def is_generic_definition(self, tp: Any) -> bool: ...

    @abstractmethod
    def is_generic(self, tp: Any) -> bool: ...

    @abstractmethod
    def generic_family_of(self, tp: Any) -> Any | None: ...

    @abstractmethod
    def is_array(self, tp: Any) -> bool: ...

    @abstractmethod
    def closing_arguments(self, tp: Any) -> dict[TypeVar, Any]:
        """Map the family's type variables to the arguments closing *tp*."""
        ...
