from __future__ import annotations

from typing import Any, Sequence

from di_platform.build.context import ArgumentFactory, ResolutionContext
from di_platform.introspection.interface import TypeIntrospectorInterface
from di_platform.introspection.reflection_introspector import ReflectionIntrospector
from di_platform.registration.injection_parameter import InjectionParameter, to_parameter
from di_platform.registration.policy import PolicySet


class InjectionMember:
    """Base for objects that configure how a registration is built."""

    def add_policies(
        self,
        registered_type: Any,
        name: str | None,
        implementation_type: Any,
        policies: PolicySet,
    ) -> None:
        """Add this member's policies to a registration. No-op by default."""


class InjectionMemberWithParameters(InjectionMember):
    """Injection member that carries an ordered list of argument descriptors."""

    def __init__(self, *args: Any, introspector: TypeIntrospectorInterface | None = None) -> None:
        self.introspector = introspector or ReflectionIntrospector()
        self.parameters: tuple[InjectionParameter, ...] = tuple(
            to_parameter(arg, self.introspector) for arg in args
        )

    def matches(self, parameter_types: Sequence[Any]) -> bool:
        """Same count, and each descriptor matches the parameter in its position."""
        if len(parameter_types) != len(self.parameters):
            return False
        return all(p.matches_type(t) for p, t in zip(self.parameters, parameter_types))

    def create_argument_factory(self) -> ArgumentFactory:
        """Factory producing, per type to build, the ordered argument producer."""
        parameters = self.parameters

        def for_type(type_to_build: Any):
            resolvers = tuple(p.get_resolver(type_to_build) for p in parameters)

            def arguments(context: ResolutionContext) -> list[Any]:
                return [resolve(context) for resolve in resolvers]

            return arguments

        return for_type

    def signature(self) -> str:
        return ", ".join(repr(p) for p in self.parameters)
