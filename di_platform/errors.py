"""Exception hierarchy shared by registration and resolution."""

from __future__ import annotations

from typing import Any

from di_platform.introspection.constructor_info import describe_type


class ContainerError(Exception):
    """Base class for every error raised by di_platform."""


class RegistrationError(ContainerError, ValueError):
    """A registration is misconfigured. Raised while policies are added."""


class AmbiguousConstructorError(RegistrationError):
    """More than one public constructor satisfies the declared parameters."""


class NoMatchingConstructorError(RegistrationError):
    """No public constructor satisfies the declared parameters."""


class ResolutionError(ContainerError, TypeError):
    """The container has no way to produce the requested type."""


class ConstructionError(ContainerError):
    """Producing arguments for, or invoking, a constructor failed.

    The original failure is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, type_to_build: Any, cause: BaseException) -> None:
        self.type_to_build = type_to_build
        self.cause = cause
        super().__init__(f"Error creating type {describe_type(type_to_build)}: {cause}")
