"""Per-resolution state carrier and the callable shapes of the build pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from di_platform.config.container import Container

# context -> one argument
Resolver = Callable[["ResolutionContext"], Any]
# context -> constructed instance
ConstructionFunction = Callable[["ResolutionContext"], Any]
# type to build -> (context -> ordered argument list)
ArgumentFactory = Callable[[Any], Callable[["ResolutionContext"], list[Any]]]
# type to build -> construction function
ResolverFactory = Callable[[Any], ConstructionFunction]


class ResolutionContext:
    """State for one resolution request.

    Construction code only passes it along; argument resolvers use
    :meth:`resolve` to request their dependencies.
    """

    def __init__(
        self,
        container: Container,
        type_key: Any,
        name: str | None = None,
        parent: ResolutionContext | None = None,
    ) -> None:
        self._container = container
        self.type_key = type_key
        self.name = name
        self.parent = parent

    @property
    def path(self) -> list[Any]:
        """Requested types, outermost first."""
        chain: list[Any] = []
        node: ResolutionContext | None = self
        while node is not None:
            chain.append(node.type_key)
            node = node.parent
        chain.reverse()
        return chain

    def resolve(self, type_key: Any, name: str | None = None) -> Any:
        """Resolve a dependency of the type being built."""
        return self._container._resolve(type_key, name, parent=self)

    def __repr__(self) -> str:
        return f"ResolutionContext({self.type_key!r}, name={self.name!r})"
