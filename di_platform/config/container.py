from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar, get_args, get_origin

from di_platform.build.context import ConstructionFunction, ResolutionContext, ResolverFactory
from di_platform.config.context import ContainerConfig
from di_platform.errors import AmbiguousConstructorError, ContainerError, ResolutionError
from di_platform.interfaces.logging import LoggingInterface
from di_platform.introspection.constructor_info import describe_type
from di_platform.introspection.interface import TypeIntrospectorInterface
from di_platform.introspection.reflection_introspector import ReflectionIntrospector
from di_platform.registration.injection_constructor import InjectionConstructor
from di_platform.registration.injection_member import InjectionMember
from di_platform.registration.policy import PolicySet
from di_platform.services.logger.factory import LoggerFactory
from di_platform.services.logger.null_logger import NullLogger

T = TypeVar("T")

Key = tuple[Any, "str | None"]

# Never auto-wired: these need an explicit registration.
_NO_AUTOWIRE_MODULES = {"builtins", "typing", "collections.abc"}


@dataclass
class _Registration:
    registered_type: Any
    name: str | None
    implementation_type: Any
    policies: PolicySet = field(default_factory=PolicySet)
    lock: threading.Lock = field(default_factory=threading.Lock)
    resolver_factory: ResolverFactory | None = None
    pipelines: dict[Any, ConstructionFunction] = field(default_factory=dict)


class Container:
    """Constructor-injecting DI container.

    Instances and factories are handed out as registered. Registered and
    unregistered classes are built through their selected constructor; the
    compiled construction function is cached per concrete type, instances are
    never cached.
    """

    def __init__(
        self,
        logger: LoggingInterface | None = None,
        introspector: TypeIntrospectorInterface | None = None,
    ) -> None:
        self._logger = logger or NullLogger()
        self._introspector = introspector or ReflectionIntrospector()
        self._instances: dict[Key, Any] = {}
        self._factories: dict[Key, Callable[[ResolutionContext], Any]] = {}
        self._registrations: dict[Key, _Registration] = {}
        self._implicit: dict[Key, _Registration] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ContainerConfig | None = None) -> Container:
        """Build a container whose logger is chosen by *config*."""
        config = config or ContainerConfig()
        return cls(logger=LoggerFactory(default_impl=config.log_impl).create())

    def register_instance(self, type_key: Any, instance: Any, name: str | None = None) -> None:
        """Register a pre-built instance keyed by its type."""
        self._instances[(type_key, name)] = instance
        self._logger.debug("Registered instance", type=describe_type(type_key), name=name)

    def register_factory(
        self,
        type_key: Any,
        factory: Callable[[ResolutionContext], Any],
        name: str | None = None,
    ) -> None:
        """Register a callable invoked with the resolution context on every resolve."""
        self._factories[(type_key, name)] = factory
        self._logger.debug("Registered factory", type=describe_type(type_key), name=name)

    def register_type(
        self,
        registered_type: Any,
        *members: InjectionMember,
        implementation: Any = None,
        name: str | None = None,
    ) -> None:
        """Register *implementation* (default: *registered_type*) to be constructed.

        Each injection member adds its policies now, so constructor selection
        errors surface here rather than at resolve time.
        """
        registration = _Registration(
            registered_type=registered_type,
            name=name,
            implementation_type=implementation if implementation is not None else registered_type,
        )
        with registration.lock:
            for member in members:
                member.add_policies(registered_type, name, implementation, registration.policies)

        with self._lock:
            self._registrations[(registered_type, name)] = registration

        self._logger.info(
            "Registered type",
            registered=describe_type(registered_type),
            implementation=describe_type(registration.implementation_type),
            name=name,
        )
        selected = registration.policies.get(InjectionConstructor)
        if selected is not None:
            self._logger.debug("Selected constructor", constructor=str(selected.constructor))

    def resolve(self, type_key: type[T] | Any, name: str | None = None) -> T:
        """Return an instance of *type_key*, building it and its dependencies."""
        try:
            return self._resolve(type_key, name, parent=None)
        except ContainerError as exc:
            self._logger.error(
                "Resolution failed", type=describe_type(type_key), name=name, error=str(exc)
            )
            raise

    def has(self, type_key: Any, name: str | None = None) -> bool:
        """Check whether a type is registered."""
        key = (type_key, name)
        return key in self._instances or key in self._factories or key in self._registrations

    def _resolve(self, type_key: Any, name: str | None, parent: ResolutionContext | None) -> Any:
        context = ResolutionContext(self, type_key, name, parent)
        key = (type_key, name)
        if key in self._instances:
            return self._instances[key]
        if key in self._factories:
            return self._factories[key](context)

        registration, concrete = self._find_registration(type_key, name)
        if registration is None:
            registration, concrete = self._implicit_registration(type_key, name), type_key
        return self._pipeline(registration, concrete)(context)

    def _find_registration(self, type_key: Any, name: str | None) -> tuple[_Registration | None, Any]:
        registration = self._registrations.get((type_key, name))
        if registration is not None:
            return registration, registration.implementation_type

        # Closed generic: fall back to an open registration of its family.
        origin = get_origin(type_key)
        if origin is not None:
            registration = self._registrations.get((origin, name))
            if registration is not None:
                implementation = registration.implementation_type
                if self._introspector.is_generic_definition(implementation):
                    return registration, implementation[get_args(type_key)]
                return registration, implementation
        return None, None

    def _implicit_registration(self, type_key: Any, name: str | None) -> _Registration:
        key = (type_key, name)
        registration = self._implicit.get(key)
        if registration is None:
            with self._lock:
                registration = self._implicit.setdefault(
                    key, _Registration(type_key, name, type_key)
                )
        return registration

    def _pipeline(self, registration: _Registration, concrete: Any) -> ConstructionFunction:
        construct = registration.pipelines.get(concrete)
        if construct is not None:
            return construct
        with registration.lock:
            construct = registration.pipelines.get(concrete)
            if construct is None:
                construct = self._resolver_factory(registration, concrete)(concrete)
                registration.pipelines[concrete] = construct
                self._logger.debug("Compiled construction function", type=describe_type(concrete))
        return construct

    def _resolver_factory(self, registration: _Registration, concrete: Any) -> ResolverFactory:
        if registration.resolver_factory is not None:
            return registration.resolver_factory
        member = registration.policies.get(InjectionConstructor)
        if member is not None:
            registration.resolver_factory = member.create_resolver_factory()
            return registration.resolver_factory
        # No explicit constructor: auto-wire the concrete type.
        return self._autowire(concrete).create_resolver_factory()

    def _autowire(self, concrete: Any) -> InjectionConstructor:
        cls = get_origin(concrete) or concrete
        if (
            not isinstance(cls, type)
            or cls.__module__ in _NO_AUTOWIRE_MODULES
            or inspect.isabstract(cls)
        ):
            raise ResolutionError(f"No registration found for type {describe_type(concrete)!r}")

        constructors = self._introspector.public_constructors(concrete)
        if len(constructors) != 1:
            raise AmbiguousConstructorError(
                f"{describe_type(concrete)} has {len(constructors)} public constructors; "
                f"register it with an InjectionConstructor to choose one"
            )
        info = constructors[0]
        for param in info.parameters:
            if not param.has_annotation:
                raise ResolutionError(
                    f"Parameter '{param.name}' of {describe_type(concrete)}.{info.name} "
                    f"has no type hint"
                )
        return InjectionConstructor.from_constructor(info, introspector=self._introspector)
