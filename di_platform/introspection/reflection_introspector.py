"""Default introspector built on ``inspect`` and ``typing``."""

from __future__ import annotations

import inspect
import types
from typing import Annotated, Any, Callable, TypeVar, Union, get_args, get_origin, get_overloads, get_type_hints

from di_platform.introspection.constructor_info import (
    CONSTRUCTOR_MARKER,
    ConstructorInfo,
    ParameterInfo,
    describe_type,
)
from di_platform.introspection.interface import TypeIntrospectorInterface

ARRAY_TYPES: tuple[type, ...] = (list, tuple)

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_UNION_ORIGINS = (Union, types.UnionType)
_NON_FAMILY_ORIGINS = (*_UNION_ORIGINS, Annotated)


class ReflectionIntrospector(TypeIntrospectorInterface):
    """Reads constructors from ``__init__`` (or ``__new__``) overloads and
    ``@constructor`` alternates; closed aliases reuse their origin's
    constructors with type variables substituted."""

    def list_constructors(self, tp: Any) -> list[ConstructorInfo]:
        origin = get_origin(tp)
        cls = origin if origin is not None else tp
        if not isinstance(cls, type):
            raise TypeError(f"{describe_type(tp)} is not a class")
        mapping = self.closing_arguments(tp)

        constructors: list[ConstructorInfo] = []
        name, init = "__init__", cls.__init__
        if init is object.__init__ and inspect.isfunction(cls.__new__):
            name, init = "__new__", cls.__new__
        overloads = get_overloads(init) if inspect.isfunction(init) else []
        for func in overloads or [init]:
            constructors.append(
                ConstructorInfo(
                    declaring_type=tp,
                    name=name,
                    parameters=self._parameters(func, mapping, skip_first=True),
                )
            )

        for name, attr in vars(cls).items():
            if not isinstance(attr, (classmethod, staticmethod)):
                continue
            func = attr.__func__
            if not getattr(func, CONSTRUCTOR_MARKER, False):
                continue
            is_static = isinstance(attr, staticmethod)
            constructors.append(
                ConstructorInfo(
                    declaring_type=tp,
                    name=name,
                    parameters=self._parameters(func, mapping, skip_first=not is_static),
                    kind="staticmethod" if is_static else "classmethod",
                    is_public=not name.startswith("_"),
                    is_static=is_static,
                )
            )
        return constructors

    def is_assignable_from(self, target: Any, source: Any) -> bool:
        if target is Any or target is object or target == source:
            return True

        if isinstance(target, TypeVar):
            if target.__constraints__:
                return any(self.is_assignable_from(c, source) for c in target.__constraints__)
            if target.__bound__ is not None:
                return self.is_assignable_from(target.__bound__, source)
            return True
        if isinstance(source, TypeVar):
            return False

        target_origin = get_origin(target)
        if target_origin is Annotated:
            return self.is_assignable_from(get_args(target)[0], source)
        if target_origin in _UNION_ORIGINS:
            return any(self.is_assignable_from(arm, source) for arm in get_args(target))

        source_origin = get_origin(source)
        if source_origin is Annotated:
            return self.is_assignable_from(target, get_args(source)[0])

        if target_origin is not None:
            if not (isinstance(target_origin, type) and isinstance(source_origin, type)):
                return False
            return _is_subclass(source_origin, target_origin) and get_args(source) == get_args(target)

        if not isinstance(target, type):
            return False
        source_cls = source_origin if source_origin is not None else source
        if not isinstance(source_cls, type):
            return False
        return _is_subclass(source_cls, target)

    def is_generic_definition(self, tp: Any) -> bool:
        if get_origin(tp) is not None or not isinstance(tp, type):
            return False
        return any(isinstance(p, TypeVar) for p in getattr(tp, "__parameters__", ()))

    def is_generic(self, tp: Any) -> bool:
        return self.generic_family_of(tp) is not None

    def generic_family_of(self, tp: Any) -> Any | None:
        if self.is_generic_definition(tp):
            return tp
        origin = get_origin(tp)
        if isinstance(origin, type) and origin not in _NON_FAMILY_ORIGINS and get_args(tp):
            return origin
        return None

    def is_array(self, tp: Any) -> bool:
        return (get_origin(tp) or tp) in ARRAY_TYPES

    def closing_arguments(self, tp: Any) -> dict[TypeVar, Any]:
        origin = get_origin(tp)
        if origin is None:
            return {}
        params = getattr(origin, "__parameters__", ())
        return dict(zip(params, get_args(tp)))

    def _parameters(
        self,
        func: Callable[..., Any],
        mapping: dict[TypeVar, Any],
        skip_first: bool,
    ) -> tuple[ParameterInfo, ...]:
        try:
            hints = get_type_hints(func) if inspect.isfunction(func) else {}
        except Exception as exc:
            raise TypeError(
                f"Cannot read type hints for {getattr(func, '__qualname__', func)}: {exc}"
            ) from exc
        hints.pop("return", None)

        params = list(inspect.signature(func).parameters.values())
        if skip_first and params:
            params = params[1:]

        result: list[ParameterInfo] = []
        for param in params:
            if param.kind in _SKIPPED_KINDS:
                continue
            annotated = param.name in hints
            result.append(
                ParameterInfo(
                    name=param.name,
                    annotation=substitute(hints[param.name], mapping) if annotated else Any,
                    kind=param.kind,
                    has_annotation=annotated,
                )
            )
        return tuple(result)


def substitute(annotation: Any, mapping: dict[TypeVar, Any]) -> Any:
    """Replace type variables in *annotation* with their closing arguments."""
    if not mapping:
        return annotation
    if isinstance(annotation, TypeVar):
        return mapping.get(annotation, annotation)
    params = getattr(annotation, "__parameters__", ())
    if get_origin(annotation) is not None and params:
        return annotation[tuple(mapping.get(p, p) for p in params)]
    return annotation


def _is_subclass(source: type, target: type) -> bool:
    try:
        return issubclass(source, target)
    except TypeError:
        # non-runtime protocols and other classes that refuse subclass checks
        return False
