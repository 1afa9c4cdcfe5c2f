"""Command line inspection of constructor selection.

    python -m di_platform ctors <dotted.Class> [--arg <dotted.Type>]... [--select]

Lists the public constructors of a class with their ordinal positions. With
``--arg`` (repeatable, in parameter order) or ``--select`` (no arguments) it
also runs selection and reports the chosen constructor.
"""

from __future__ import annotations

import importlib
import sys
from typing import Any

from di_platform.introspection.constructor_info import describe_type
from di_platform.introspection.reflection_introspector import ReflectionIntrospector
from di_platform.registration.injection_constructor import InjectionConstructor

USAGE = "Usage: python -m di_platform ctors <dotted.Class> [--arg <dotted.Type>]... [--select]"


def resolve_class(dotted_path: str) -> Any:
    """Import a class from a dotted module.ClassName path.

    Bare names resolve in ``builtins``; ``Name[A, B]`` subscripts the class
    with each (non-nested) argument.
    """
    base, bracket, rest = dotted_path.partition("[")
    if bracket:
        if not rest.endswith("]"):
            raise ValueError(f"Unbalanced brackets in '{dotted_path}'")
        args = tuple(resolve_class(a.strip()) for a in rest[:-1].split(",") if a.strip())
        return resolve_class(base)[args if len(args) > 1 else args[0]]

    module_path, _, class_name = dotted_path.rpartition(".")
    module = importlib.import_module(module_path or "builtins")
    try:
        return getattr(module, class_name)
    except AttributeError as exc:
        raise ValueError(f"Module '{module.__name__}' has no attribute '{class_name}'") from exc


def parse_ctors_args(raw_args: list[str]) -> tuple[str, list[str], bool]:
    """Return (target, arg type paths, select flag)."""
    target: str | None = None
    arg_paths: list[str] = []
    select = False

    i = 0
    while i < len(raw_args):
        arg = raw_args[i]
        if arg == "--arg":
            if i + 1 >= len(raw_args):
                raise ValueError("--arg needs a type")
            arg_paths.append(raw_args[i + 1])
            i += 2
            continue
        if arg == "--select":
            select = True
        elif arg.startswith("--"):
            raise ValueError(f"Unknown flag: {arg}")
        elif target is None:
            target = arg
        else:
            raise ValueError(f"Unexpected argument: {arg}")
        i += 1

    if target is None:
        raise ValueError(USAGE)
    return target, arg_paths, select or bool(arg_paths)


def run_ctors(raw_args: list[str]) -> int:
    target_path, arg_paths, select = parse_ctors_args(raw_args)
    target = resolve_class(target_path)
    introspector = ReflectionIntrospector()

    kind = " (open generic)" if introspector.is_generic_definition(target) else ""
    print(f"\n  {describe_type(target)}{kind}\n")
    constructors = introspector.public_constructors(target)
    for index, ctor in enumerate(constructors):
        print(f"    [{index}] {ctor}")
    print()

    if select:
        member = InjectionConstructor(*(resolve_class(p) for p in arg_paths))
        chosen = member.select(target)
        print(f"  Selected: [{constructors.index(chosen)}] {chosen}\n")
    return 0


def run_cli(argv: list[str] | None = None) -> None:
    args = argv if argv is not None else sys.argv[1:]
    try:
        if not args or args[0] != "ctors":
            raise ValueError(USAGE)
        sys.exit(run_ctors(args[1:]))
    except (ValueError, TypeError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
