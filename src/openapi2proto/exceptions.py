"""Exception hierarchy for openapi2proto.

All exceptions inherit from :class:`Openapi2ProtoError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`openapi2proto.exit_codes`.
The top-level error handler in :func:`openapi2proto.app.main` catches
``Openapi2ProtoError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    Openapi2ProtoError                (exit 1)
    +-- ConfigError                   (exit 1)
    +-- SpecParseError                (exit 7)
    +-- ReferenceError_               (exit 8)
    |   +-- UrlError
    |   +-- InvalidRefError
    |   +-- LoadError
    |   +-- PointerMissError
    |   +-- CycleError
    |   +-- ResolveError
    +-- TypeGraphError                (exit 9)
        +-- UnknownTypeError
        +-- UnresolvedReferenceError
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from openapi2proto.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_REFERENCE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_TYPE_GRAPH_ERROR,
)


class Openapi2ProtoError(Exception):
    """Base exception for all openapi2proto errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`openapi2proto.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(Openapi2ProtoError):
    """Raised for configuration problems (invalid project config, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(Openapi2ProtoError):
    """Raised when the top-level OpenAPI document cannot be decoded or validated."""

    exit_code = EXIT_SPEC_PARSE_ERROR


# --- Reference resolution ---


class ReferenceError_(Openapi2ProtoError):
    """Base class for every failure raised while resolving ``$ref`` pointers.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ReferenceError``.
    """

    exit_code = EXIT_REFERENCE_ERROR


class UrlError(ReferenceError_):
    """Raised when a ``$ref`` string is not valid URL syntax."""

    def __init__(self, ref: str, reason: str):
        super().__init__(f"failed to parse URL {ref!r}: {reason}")
        self.ref = ref
        self.reason = reason


class InvalidRefError(ReferenceError_):
    """Raised when a ``$ref`` key holds something other than a string."""

    def __init__(self, value: object):
        super().__init__(
            f"'$ref' key contains non-string element ({type(value).__name__})"
        )
        self.value = value


class LoadError(ReferenceError_):
    """Raised when an external document cannot be read, fetched, or decoded.

    Args:
        locator: The file path or URL that failed.
        message: What went wrong.
    """

    def __init__(self, locator: str, message: str):
        super().__init__(f"{message} (locator: {locator})")
        self.locator = locator


class PointerMissError(ReferenceError_):
    """Raised when a JSON pointer fragment does not resolve against its document."""

    def __init__(self, pointer: str, segment: str, reason: str = "not found"):
        super().__init__(
            f"failed to resolve document fragment {pointer!r}: "
            f"segment {segment!r} {reason}"
        )
        self.pointer = pointer
        self.segment = segment


class CycleError(ReferenceError_):
    """Raised when an external ``$ref`` chain leads back to itself."""

    def __init__(self, locator: str, fragment: str):
        super().__init__(f"circular reference to {locator}#{fragment}")
        self.locator = locator
        self.fragment = fragment


class ResolveError(ReferenceError_):
    """Wraps any resolution failure with the tree path where it happened.

    Attributes:
        path: Keys and list indices from the document root down to the
            node holding the failing ``$ref``.
        cause: The underlying :class:`ReferenceError_`.
    """

    def __init__(self, path: Sequence[Union[str, int]], cause: Exception):
        self.path = list(path)
        self.cause = cause
        super().__init__(f"failed to resolve {self.pointer}: {cause}")

    @property
    def pointer(self) -> str:
        """The failing location rendered as a JSON pointer (``""`` for the root)."""
        return "".join(
            "/" + str(segment).replace("~", "~0").replace("/", "~1")
            for segment in self.path
        )


# --- Protobuf type graph ---


class TypeGraphError(Openapi2ProtoError):
    """Raised when the protobuf type graph is assembled inconsistently."""

    exit_code = EXIT_TYPE_GRAPH_ERROR


class UnknownTypeError(TypeGraphError):
    """Raised when a type name is looked up that was never defined."""

    def __init__(self, name: str):
        super().__init__(f"unknown type {name!r}")
        self.name = name


class UnresolvedReferenceError(TypeGraphError):
    """Raised by the bind phase when placeholders name undefined types."""

    def __init__(self, names: Sequence[str]):
        self.names = sorted(set(names))
        super().__init__(
            "unresolved type references: " + ", ".join(self.names)
        )
