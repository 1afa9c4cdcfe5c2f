"""Descriptors for the arguments a registration wants passed to a constructor."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar, get_origin

from di_platform.build.context import ResolutionContext, Resolver
from di_platform.introspection.constructor_info import describe_type
from di_platform.introspection.interface import TypeIntrospectorInterface
from di_platform.introspection.reflection_introspector import ReflectionIntrospector, substitute

# Stands for "any array" when used as a descriptor type.
ARRAY_MARKER = Sequence

_DEFAULT_INTROSPECTOR = ReflectionIntrospector()


class _NotSet:
    def __repr__(self) -> str:
        return "NOTSET"


NOTSET: Any = _NotSet()


def is_type_like(value: Any) -> bool:
    """True for classes, parameterised aliases and type variables."""
    return isinstance(value, (type, TypeVar)) or get_origin(value) is not None


class InjectionParameter:
    """One desired constructor argument: a type, a value, or both.

    ``InjectionParameter(int)`` matches by type and resolves an ``int`` from
    the container. ``InjectionParameter(int, 5)`` and
    ``InjectionParameter.from_value(5)`` always pass ``5``. A value that is
    itself a class is declared as ``type``.
    """

    def __init__(
        self,
        parameter_type: Any,
        value: Any = NOTSET,
        introspector: TypeIntrospectorInterface | None = None,
    ) -> None:
        if parameter_type is None:
            raise ValueError("parameter_type must not be None")
        if value is None:
            raise ValueError("value must not be None")
        self._introspector = introspector or _DEFAULT_INTROSPECTOR
        self._parameter_type = parameter_type
        self._has_value = value is not NOTSET
        self._value = value if self._has_value else parameter_type

    @classmethod
    def from_value(
        cls, value: Any, introspector: TypeIntrospectorInterface | None = None
    ) -> InjectionParameter:
        """Describe *value*, using its runtime type as the parameter type."""
        if value is None:
            raise ValueError("value must not be None")
        parameter_type = type if is_type_like(value) else type(value)
        return cls(parameter_type, value, introspector=introspector)

    @property
    def parameter_type(self) -> Any:
        return self._parameter_type

    @property
    def value(self) -> Any:
        return self._value

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def effective_type(self) -> Any:
        """The type used for matching: the held type when declared as ``type``."""
        if self._parameter_type is type and is_type_like(self._value):
            return self._value
        return self._parameter_type

    def matches_type(self, candidate: Any) -> bool:
        """True if this descriptor is compatible with a parameter typed *candidate*.

        Any of these is enough, checked in order: plain assignability; both
        sides in the array family (element types are not compared); an open
        generic definition against a parameter of the same family; a
        type-valued descriptor holding exactly *candidate*.
        """
        introspector = self._introspector
        effective = self.effective_type

        if introspector.is_assignable_from(candidate, effective):
            return True

        declares_array = (
            introspector.is_array(effective)
            or self._parameter_type is ARRAY_MARKER
            or (self._parameter_type is type and self._value is ARRAY_MARKER)
        )
        if declares_array and (introspector.is_array(candidate) or candidate is ARRAY_MARKER):
            return True

        if (
            introspector.is_generic_definition(effective)
            and introspector.is_generic(candidate)
            and introspector.generic_family_of(effective) == introspector.generic_family_of(candidate)
        ):
            return True

        if self._parameter_type is type and self._value is candidate:
            return True

        return False

    def get_resolver(self, type_to_build: Any) -> Resolver:
        """Per-call argument producer for a constructor of *type_to_build*."""
        if self._has_value:
            value = self._value
            return lambda context: value

        target = substitute(
            self.effective_type, self._introspector.closing_arguments(type_to_build)
        )

        def resolve(context: ResolutionContext) -> Any:
            return context.resolve(target)

        return resolve

    def __repr__(self) -> str:
        if self._has_value:
            return f"InjectionParameter({describe_type(self._parameter_type)}, {self._value!r})"
        return f"InjectionParameter({describe_type(self._parameter_type)})"


def to_parameter(
    arg: Any, introspector: TypeIntrospectorInterface | None = None
) -> InjectionParameter:
    """Convert a raw registration argument into a descriptor."""
    if isinstance(arg, InjectionParameter):
        return arg
    if is_type_like(arg):
        return InjectionParameter(arg, introspector=introspector)
    return InjectionParameter.from_value(arg, introspector=introspector)
