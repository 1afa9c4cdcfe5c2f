"""Selects the constructor a registration is built with and compiles the
function that builds it."""

from __future__ import annotations

from typing import Any, Callable

from di_platform.build.context import ConstructionFunction, ResolutionContext, ResolverFactory
from di_platform.errors import (
    AmbiguousConstructorError,
    ConstructionError,
    NoMatchingConstructorError,
    RegistrationError,
)
from di_platform.introspection.constructor_info import ConstructorInfo, OrdinalBinding, describe_type
from di_platform.introspection.interface import TypeIntrospectorInterface
from di_platform.registration.injection_member import InjectionMemberWithParameters
from di_platform.registration.injection_parameter import InjectionParameter
from di_platform.registration.policy import PolicySet


class InjectionConstructor(InjectionMemberWithParameters):
    """Configures which constructor the container calls.

    ``InjectionConstructor()`` looks for the parameterless constructor;
    ``InjectionConstructor(int, "name")`` for the one constructor whose
    parameters accept an ``int`` and a ``str`` value. Zero or several
    matches are registration errors.
    """

    def __init__(self, *args: Any, introspector: TypeIntrospectorInterface | None = None) -> None:
        super().__init__(*args, introspector=introspector)
        self._constructor: ConstructorInfo | None = None
        self._pinned = False

    @classmethod
    def from_constructor(
        cls, info: ConstructorInfo, introspector: TypeIntrospectorInterface | None = None
    ) -> InjectionConstructor:
        """Use *info* directly; its arguments are resolved by declared type."""
        member = cls(introspector=introspector)
        member.parameters = tuple(
            InjectionParameter(p.annotation, introspector=member.introspector)
            for p in info.parameters
        )
        member._constructor = info
        member._pinned = True
        return member

    @property
    def constructor(self) -> ConstructorInfo | None:
        return self._constructor

    def add_policies(
        self,
        registered_type: Any,
        name: str | None,
        implementation_type: Any,
        policies: PolicySet,
    ) -> None:
        target = implementation_type if implementation_type is not None else registered_type

        if self._pinned:
            self._check_declared_by(target)
        elif self._constructor is not None:
            raise RegistrationError(
                f"InjectionConstructor is already bound to {self._constructor}; "
                f"use a separate instance for each registration"
            )
        else:
            self._constructor = self.select(target)

        policies.set(InjectionConstructor, self)

    def select(self, target: Any) -> ConstructorInfo:
        """Return the only public constructor of *target* matching the descriptors."""
        found = [
            ctor
            for ctor in self.introspector.public_constructors(target)
            if self.matches(ctor.parameter_types)
        ]
        if not found:
            raise NoMatchingConstructorError(
                f"The type {describe_type(target)} does not have a constructor "
                f"that takes the parameters ({self.signature()})."
            )
        if len(found) > 1:
            raise AmbiguousConstructorError(
                f"The type {describe_type(target)} has multiple constructors "
                f"{found[0]}, {found[1]}, etc. satisfying signature ({self.signature()}). "
                f"Unable to disambiguate."
            )
        return found[0]

    def create_resolver_factory(self) -> ResolverFactory:
        """Factory returning, for a concrete type, the function that builds it.

        Constructors selected on an open generic definition are found again on
        each closed type by their position among its public constructors.
        """
        selected = self._constructor
        if selected is None:
            raise RegistrationError(
                "InjectionConstructor has no constructor; add it to a registration first"
            )
        dependencies = self.create_argument_factory()
        introspector = self.introspector

        if introspector.is_generic_definition(selected.declaring_type):
            constructors = introspector.public_constructors(selected.declaring_type)
            binding = OrdinalBinding(selected.declaring_type, constructors.index(selected))

            def for_closed_type(type_to_build: Any) -> ConstructionFunction:
                arguments = dependencies(type_to_build)
                return _construction_function(
                    type_to_build, binding.locate(type_to_build, introspector), arguments
                )

            return for_closed_type

        def for_type(type_to_build: Any) -> ConstructionFunction:
            return _construction_function(type_to_build, selected, dependencies(type_to_build))

        return for_type

    def _check_declared_by(self, target: Any) -> None:
        pinned = self._constructor
        declaring = pinned.declaring_type
        if declaring == target:
            return
        introspector = self.introspector
        if (
            introspector.is_generic_definition(declaring)
            and introspector.generic_family_of(target) == declaring
        ):
            return
        if (
            introspector.is_generic_definition(target)
            and introspector.generic_family_of(declaring) == target
        ):
            self._rebind_to_definition(target)
            return
        raise RegistrationError(f"{pinned} is not a constructor of {describe_type(target)}")

    def _rebind_to_definition(self, definition: Any) -> None:
        # constructor read from a closed alias: take the same ordinal on the definition
        pinned = self._constructor
        try:
            index = self.introspector.public_constructors(pinned.declaring_type).index(pinned)
        except ValueError:
            raise RegistrationError(
                f"{pinned} is not a public constructor of {describe_type(definition)}"
            ) from None
        open_ctor = self.introspector.public_constructors(definition)[index]
        self.parameters = tuple(
            InjectionParameter(p.annotation, introspector=self.introspector)
            for p in open_ctor.parameters
        )
        self._constructor = open_ctor

    def __repr__(self) -> str:
        return f"InjectionConstructor({self.signature()})"


def _construction_function(
    type_to_build: Any,
    ctor: ConstructorInfo,
    arguments: Callable[[ResolutionContext], list[Any]],
) -> ConstructionFunction:
    def construct(context: ResolutionContext) -> Any:
        try:
            return ctor.invoke(arguments(context))
        except Exception as exc:
            raise ConstructionError(type_to_build, exc) from exc

    return construct
