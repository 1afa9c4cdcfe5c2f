"""Read-only metadata describing the constructors a type exposes.

A Python class has one ``__init__``, so "constructors" are gathered from
two places:

- each ``@typing.overload`` of ``__init__`` (or the plain ``__init__`` when
  it is not overloaded), invoked by calling the type itself. Classes that
  only define ``__new__`` (``NamedTuple`` and other immutable types) are
  read from ``__new__`` instead;
- alternate constructors declared on the class as ``classmethod`` or
  ``staticmethod`` and marked with :func:`constructor`.
"""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence, TypeVar, Union, get_args, get_origin

if TYPE_CHECKING:
    from di_platform.introspection.interface import TypeIntrospectorInterface

CONSTRUCTOR_MARKER = "__di_constructor__"

F = TypeVar("F")


def constructor(func: F) -> F:
    """Mark a classmethod (or staticmethod) as an alternate constructor.

    Works above or below the ``@classmethod`` decorator.
    """
    target = getattr(func, "__func__", func)
    setattr(target, CONSTRUCTOR_MARKER, True)
    return func


def describe_type(tp: Any) -> str:
    """Short human-readable name for a class, alias or TypeVar."""
    if tp is Ellipsis:
        return "..."
    if isinstance(tp, TypeVar):
        return tp.__name__
    args = get_args(tp)
    origin = get_origin(tp)
    if origin in (Union, types.UnionType):
        return " | ".join(describe_type(a) for a in args)
    if origin is not None and args:
        return f"{describe_type(origin)}[{', '.join(describe_type(a) for a in args)}]"
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    annotation: Any
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    has_annotation: bool = True

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY


@dataclass(frozen=True)
class ConstructorInfo:
    """One candidate constructor of ``declaring_type``.

    ``kind`` is ``"init"`` for ``__init__`` or ``__new__`` (and their overloads),
    ``"classmethod"`` or ``"staticmethod"`` for marked alternate constructors.
    """

    declaring_type: Any
    name: str
    parameters: tuple[ParameterInfo, ...]
    kind: str = "init"
    is_public: bool = True
    is_static: bool = False

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return tuple(p.annotation for p in self.parameters)

    def invoke(self, args: Sequence[Any]) -> Any:
        """Call the constructor with *args* ordered like ``parameters``."""
        if len(args) != len(self.parameters):
            raise TypeError(
                f"{self} takes {len(self.parameters)} argument(s), got {len(args)}"
            )
        positional: list[Any] = []
        keyword: dict[str, Any] = {}
        for param, value in zip(self.parameters, args):
            if param.is_keyword_only:
                keyword[param.name] = value
            else:
                positional.append(value)

        if self.kind == "init":
            return self.declaring_type(*positional, **keyword)
        return getattr(self.declaring_type, self.name)(*positional, **keyword)

    def __str__(self) -> str:
        params = ", ".join(
            f"{p.name}: {describe_type(p.annotation)}" for p in self.parameters
        )
        owner = describe_type(self.declaring_type)
        if self.kind == "init":
            return f"{owner}({params})"
        return f"{owner}.{self.name}({params})"


@dataclass(frozen=True)
class OrdinalBinding:
    """Position of a constructor among the public constructors of an open
    generic definition. Relocated on each closed type by index alone."""

    origin: Any
    index: int

    def locate(self, closed_type: Any, introspector: TypeIntrospectorInterface) -> ConstructorInfo:
        constructors = introspector.public_constructors(closed_type)
        if self.index >= len(constructors):
            raise TypeError(
                f"{describe_type(closed_type)} exposes {len(constructors)} public "
                f"constructor(s); expected one at position {self.index} "
                f"like {describe_type(self.origin)}"
            )
        return constructors[self.index]
