"""Load a top-level OpenAPI document into a validated :class:`~openapi2proto.models.Spec`.

The pipeline is: fetch (file or URL) -> decode by extension -> normalize ->
resolve external ``$ref`` pointers -> pydantic validation.  Relative
references in a local spec file resolve against the file's own directory
unless an explicit base directory is given.
"""

from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlsplit

from pydantic import ValidationError

from openapi2proto.exceptions import LoadError, SpecParseError
from openapi2proto.models import Spec
from openapi2proto.output import debug
from openapi2proto.parser.loader import load_document
from openapi2proto.parser.normalize import Value
from openapi2proto.parser.resolver import Resolver


def load_raw(source: str) -> Value:
    """Fetch and decode the document at *source* without resolving refs.

    Raises:
        SpecParseError: If the document cannot be read or decoded, or is not
            a mapping.
    """
    try:
        document = load_document(source)
    except LoadError as exc:
        raise SpecParseError(f"Failed to load spec {source}: {exc}") from exc
    if not isinstance(document, dict):
        kind = type(document).__name__ if document is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return document


def default_dir(source: str) -> Optional[str]:
    """Directory that relative refs in *source* resolve against.

    Local files use their parent directory; URLs have none.
    """
    if urlsplit(source).scheme in ("http", "https"):
        return None
    return os.path.dirname(source) or None


def resolve_document(
    source: str,
    dir: Optional[str] = None,
    resolver: Optional[Resolver] = None,
) -> Value:
    """Load *source* and return it with every external ref resolved.

    Args:
        source: Path or ``http(s)`` URL of the OpenAPI document.
        dir: Base directory for relative refs; defaults to
            :func:`default_dir` of *source*.
        resolver: Resolver to use; a default one is created when omitted.

    Raises:
        SpecParseError: If the document cannot be loaded.
        ResolveError: If a reference cannot be resolved.
    """
    raw = load_raw(source)
    base = dir if dir is not None else default_dir(source)
    debug(f"Resolving {source} relative to {base or '.'}")
    return (resolver or Resolver()).resolve(raw, dir=base)


def load_spec(source: str, dir: Optional[str] = None) -> Spec:
    """Load, resolve and validate an OpenAPI document.

    Example::

        spec = load_spec("api/openapi.yaml")
        spec.file_name  # "api/openapi.yaml"

    Raises:
        SpecParseError: If the document cannot be loaded or fails validation.
        ResolveError: If a reference cannot be resolved.
    """
    tree = resolve_document(source, dir=dir)
    try:
        spec = Spec.model_validate(tree)
    except ValidationError as exc:
        raise SpecParseError(f"Invalid OpenAPI document {source}: {exc}") from exc
    spec.file_name = source
    return spec
