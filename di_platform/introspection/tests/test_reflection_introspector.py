from collections.abc import Sequence
from typing import Any, Generic, NamedTuple, Optional, Protocol, TypeVar, overload

import pytest

from di_platform.introspection.constructor_info import OrdinalBinding, constructor, describe_type
from di_platform.introspection.reflection_introspector import ReflectionIntrospector

T = TypeVar("T")
N = TypeVar("N", bound=int)


class Plain:
    def __init__(self, count: int, label: str = "x") -> None:
        self.count = count
        self.label = label


class NoInit:
    pass


class Overloaded:
    @overload
    def __init__(self, value: int) -> None: ...

    @overload
    def __init__(self, value: str) -> None: ...

    def __init__(self, value):  # noqa: ANN001
        self.value = value


class WithAlternates:
    def __init__(self, value: int) -> None:
        self.value = value

    @constructor
    @classmethod
    def parse(cls, text: str) -> "WithAlternates":
        return cls(int(text))

    @classmethod
    @constructor
    def _from_float(cls, value: float) -> "WithAlternates":
        return cls(int(value))

    @constructor
    @staticmethod
    def build(raw: bytes) -> "WithAlternates":
        return WithAlternates(len(raw))

    @classmethod
    def not_marked(cls, value: int) -> "WithAlternates":
        return cls(value)


class KwOnly:
    def __init__(self, a: int, *args: Any, b: str, **extra: Any) -> None:
        self.a = a
        self.b = b


class Untyped:
    def __init__(self, dep) -> None:  # noqa: ANN001
        self.dep = dep


class Broken:
    def __init__(self, dep: "DoesNotExist") -> None:  # noqa: F821
        self.dep = dep


class Box(Generic[T]):
    def __init__(self, item: T) -> None:
        self.item = item

    @constructor
    @classmethod
    def repeated(cls, item: T, count: int) -> "Box[T]":
        return cls(item)


class Other(Generic[T]):
    pass


class Base:
    pass


class Derived(Base):
    pass


class Token:
    __slots__ = ("value",)

    def __new__(cls, value: int) -> "Token":
        self = object.__new__(cls)
        self.value = value
        return self


class Point(NamedTuple):
    x: int
    y: int = 0


class Pair(NamedTuple, Generic[T]):
    first: T
    second: T


class Shape(Protocol):
    def area(self) -> float: ...


@pytest.fixture
def introspector() -> ReflectionIntrospector:
    return ReflectionIntrospector()


def test_plain_init_parameters(introspector: ReflectionIntrospector):
    (ctor,) = introspector.list_constructors(Plain)
    assert ctor.name == "__init__"
    assert ctor.parameter_types == (int, str)
    assert [p.name for p in ctor.parameters] == ["count", "label"]


def test_inherited_object_init_is_parameterless(introspector: ReflectionIntrospector):
    (ctor,) = introspector.list_constructors(NoInit)
    assert ctor.parameters == ()
    assert isinstance(ctor.invoke([]), NoInit)


def test_overloads_listed_in_declaration_order(introspector: ReflectionIntrospector):
    ctors = introspector.list_constructors(Overloaded)
    assert [c.parameter_types for c in ctors] == [(int,), (str,)]


def test_alternate_constructors_and_flags(introspector: ReflectionIntrospector):
    ctors = introspector.list_constructors(WithAlternates)
    assert [c.name for c in ctors] == ["__init__", "parse", "_from_float", "build"]

    by_name = {c.name: c for c in ctors}
    assert by_name["_from_float"].is_public is False
    assert by_name["build"].is_static is True
    assert by_name["build"].parameter_types == (bytes,)

    public = introspector.public_constructors(WithAlternates)
    assert [c.name for c in public] == ["__init__", "parse"]


def test_invoke_alternate_constructor(introspector: ReflectionIntrospector):
    parse = introspector.public_constructors(WithAlternates)[1]
    assert parse.invoke(["7"]).value == 7


def test_unannotated_parameter_is_any(introspector: ReflectionIntrospector):
    (ctor,) = introspector.list_constructors(Untyped)
    param = ctor.parameters[0]
    assert param.annotation is Any
    assert param.has_annotation is False


def test_var_args_skipped_keyword_only_passed_by_name(introspector: ReflectionIntrospector):
    (ctor,) = introspector.list_constructors(KwOnly)
    assert [p.name for p in ctor.parameters] == ["a", "b"]
    built = ctor.invoke([1, "x"])
    assert (built.a, built.b) == (1, "x")


def test_invoke_checks_argument_count(introspector: ReflectionIntrospector):
    (ctor,) = introspector.list_constructors(Plain)
    with pytest.raises(TypeError, match="takes 2 argument"):
        ctor.invoke([1])


def test_unreadable_hints_raise(introspector: ReflectionIntrospector):
    with pytest.raises(TypeError, match="Cannot read type hints"):
        introspector.list_constructors(Broken)


def test_non_class_rejected(introspector: ReflectionIntrospector):
    with pytest.raises(TypeError, match="is not a class"):
        introspector.list_constructors(T)


def test_closed_alias_substitutes_type_variables(introspector: ReflectionIntrospector):
    ctors = introspector.public_constructors(Box[int])
    assert [c.parameter_types for c in ctors] == [(int,), (int, int)]
    assert all(c.declaring_type == Box[int] for c in ctors)


def test_closed_init_sets_orig_class(introspector: ReflectionIntrospector):
    ctor = introspector.public_constructors(Box[str])[0]
    built = ctor.invoke(["a"])
    assert built.item == "a"
    assert built.__orig_class__ == Box[str]


@pytest.mark.parametrize(
    "target, source, expected",
    [
        (object, int, True),
        (Any, str, True),
        (int, bool, True),
        (bool, int, False),
        (Base, Derived, True),
        (Derived, Base, False),
        (Optional[int], int, True),
        (int | str, str, True),
        (int | str, bytes, False),
        (list[int], list[int], True),
        (list[int], list[str], False),
        (Sequence, list, True),
        (Box, Box[int], True),
        (Box[int], Box, False),
        (Box[int], Box[int], True),
        (T, str, True),
        (N, bool, True),
        (N, str, False),
        (int, T, False),
        (T, T, True),
    ],
)
def test_is_assignable_from(introspector: ReflectionIntrospector, target, source, expected):
    assert introspector.is_assignable_from(target, source) is expected


def test_non_runtime_protocol_is_not_assignable(introspector: ReflectionIntrospector):
    assert introspector.is_assignable_from(Shape, int) is False


def test_generic_queries(introspector: ReflectionIntrospector):
    assert introspector.is_generic_definition(Box)
    assert not introspector.is_generic_definition(Box[int])
    assert not introspector.is_generic_definition(int)

    assert introspector.is_generic(Box)
    assert introspector.is_generic(Box[int])
    assert introspector.is_generic(list[int])
    assert not introspector.is_generic(int | str)

    assert introspector.generic_family_of(Box) is Box
    assert introspector.generic_family_of(Box[int]) is Box
    assert introspector.generic_family_of(int) is None

    assert introspector.closing_arguments(Box[int]) == {T: int}
    assert introspector.closing_arguments(Box) == {}


def test_is_array(introspector: ReflectionIntrospector):
    assert introspector.is_array(list)
    assert introspector.is_array(list[int])
    assert introspector.is_array(tuple[str, ...])
    assert not introspector.is_array(str)
    assert not introspector.is_array(Box[int])


def test_ordinal_binding_relocates_on_closed_type(introspector: ReflectionIntrospector):
    binding = OrdinalBinding(Box, 1)
    located = binding.locate(Box[str], introspector)
    assert located.name == "repeated"
    assert located.parameter_types == (str, int)


def test_ordinal_binding_out_of_range(introspector: ReflectionIntrospector):
    with pytest.raises(TypeError, match="expected one at position 5"):
        OrdinalBinding(Box, 5).locate(Box[int], introspector)


def test_describe_type():
    assert describe_type(Box[int]) == "Box[int]"
    assert describe_type(T) == "T"
    assert describe_type(int | None) == "int | NoneType"
    assert str(ReflectionIntrospector().list_constructors(Plain)[0]) == "Plain(count: int, label: str)"


def test_new_only_class_is_read_from_new(introspector: ReflectionIntrospector):
    (ctor,) = introspector.public_constructors(Token)
    assert ctor.name == "__new__"
    assert ctor.parameter_types == (int,)
    assert str(ctor) == "Token(value: int)"
    assert ctor.invoke([5]).value == 5


def test_named_tuple_fields_are_constructor_parameters(introspector: ReflectionIntrospector):
    (ctor,) = introspector.public_constructors(Point)
    assert [p.name for p in ctor.parameters] == ["x", "y"]
    assert ctor.parameter_types == (int, int)
    assert ctor.invoke([1, 2]) == Point(1, 2)


def test_generic_named_tuple_is_closed(introspector: ReflectionIntrospector):
    (ctor,) = introspector.public_constructors(Pair[str])
    assert ctor.parameter_types == (str, str)
