"""Parse and classify ``$ref`` strings.

A ``$ref`` value is a URL reference: an optional document locator (relative
path or absolute URL) followed by an optional ``#`` fragment holding a JSON
pointer.  Two kinds of reference are deliberately *not* external:

* pure in-document pointers (``#/components/schemas/Pet``), left for the
  translation layer which owns the document's schema registry, and
* vendored well-known types (``google/protobuf/any.proto#Any``), resolved
  later against the protobuf well-known types.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit, urlunsplit

from openapi2proto.exceptions import UrlError

REF_KEY = "$ref"
VENDORED_PREFIX = "google/protobuf/"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class Ref:
    """A ``$ref`` split into its document locator and fragment.

    Attributes:
        locator: The URL or path with the fragment removed.
        fragment: The percent-decoded JSON pointer (may be empty).
    """

    locator: str
    fragment: str

    def __str__(self) -> str:
        if not self.fragment:
            return self.locator
        return f"{self.locator}#{self.fragment}"


def parse_ref(ref: str) -> Ref:
    """Split *ref* into a :class:`Ref`.

    Args:
        ref: The raw ``$ref`` string, e.g. ``"schemas/pet.yaml#/Pet"``.

    Returns:
        The parsed reference.

    Raises:
        UrlError: If *ref* contains control characters, malformed percent
            escapes, or an invalid network location.
    """
    if _CONTROL_CHARS.search(ref):
        raise UrlError(ref, "invalid control character in URL")
    if _BAD_ESCAPE.search(ref):
        raise UrlError(ref, "invalid URL escape")

    try:
        parts = urlsplit(ref)
        # Accessing .port validates it
        parts.port
    except ValueError as exc:
        raise UrlError(ref, str(exc)) from exc

    locator = urlunsplit(parts._replace(fragment=""))
    return Ref(locator=locator, fragment=unquote(parts.fragment))


def is_external(ref: str) -> bool:
    """Return ``True`` if *ref* names another document that must be fetched.

    Vendored ``google/protobuf/`` references and in-document ``#...``
    pointers are not external; everything else (relative paths,
    ``path#fragment``, ``http(s)://`` URLs) is.
    """
    if ref.startswith(VENDORED_PREFIX):
        return False
    return not ref.startswith("#")
