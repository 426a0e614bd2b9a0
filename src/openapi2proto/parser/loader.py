"""Load external documents referenced by ``$ref`` from disk or over HTTP.

This module handles all I/O for the resolver.  A locator without a URL
scheme is a filesystem path (joined under the configured base directory);
``http`` and ``https`` locators are fetched with a GET that follows redirects.
The decoding format is chosen by the locator's file extension:
``.yaml``/``.yml`` decode as YAML (timestamps stay strings), everything else
as JSON.  Every successfully decoded document is
passed through :func:`~openapi2proto.parser.normalize.normalize` so callers
never see non-string mapping keys.

The public functions are:

* :func:`load_document` -- fetch, decode and normalize one locator.
* :func:`decode_document` -- decode already-fetched text by format.
"""

from __future__ import annotations

import json
import os
import posixpath
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import httpx
import yaml

from openapi2proto.exceptions import LoadError
from openapi2proto.output import info
from openapi2proto.parser.normalize import Value, normalize

YAML_SUFFIXES = (".yaml", ".yml")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class DocumentLoader(yaml.SafeLoader):
    """``SafeLoader`` that keeps timestamps such as ``2024-01-01`` as strings.

    Decoded trees may only hold JSON-compatible scalars, so the implicit
    timestamp resolver is removed and an explicit ``!!timestamp`` tag
    constructs a plain string.
    """


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DocumentLoader.add_constructor(_TIMESTAMP_TAG, yaml.SafeLoader.construct_yaml_str)


def load_document(locator: str, base_dir: Optional[str] = None) -> Value:
    """Load the document named by *locator*.

    Args:
        locator: A relative or absolute file path, or an ``http(s)`` URL,
            with any fragment already stripped.
        base_dir: Directory that relative (and absolute) file paths are
            joined under.  ``None`` uses the path as-is.

    Returns:
        The decoded, normalized document.

    Raises:
        LoadError: If the file cannot be read, the HTTP request fails or
            returns a non-2xx status, the scheme is unsupported, or the
            content cannot be decoded.
    """
    parts = urlsplit(locator)
    if parts.scheme == "":
        path = unquote(parts.path)
        content = _read_file(locator, path, base_dir)
    elif parts.scheme in ("http", "https"):
        path = parts.path
        content = _fetch_url(locator)
    else:
        raise LoadError(locator, f"cannot handle reference scheme {parts.scheme!r}")

    return normalize(decode_document(content, path, locator))


def decode_document(content: str, path: str, locator: Optional[str] = None) -> object:
    """Decode *content* as YAML or JSON depending on the suffix of *path*.

    Args:
        content: Raw document text.
        path: File path or URL path used to pick the format.
        locator: Used in error messages; defaults to *path*.

    Returns:
        The decoded tree, not yet normalized.

    Raises:
        LoadError: If the content does not decode.
    """
    locator = locator if locator is not None else path
    suffix = posixpath.splitext(path)[1].lower()
    if suffix in YAML_SUFFIXES:
        try:
            return yaml.load(content, Loader=DocumentLoader)
        except yaml.YAMLError as exc:
            raise LoadError(locator, f"failed to decode YAML: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise LoadError(locator, f"failed to decode JSON: {exc}") from exc


def join_base_dir(path: str, base_dir: Optional[str]) -> str:
    """Join *path* under *base_dir*.

    Absolute paths are joined too rather than replacing the base directory,
    so ``join_base_dir("/x.yaml", "/specs")`` is ``/specs/x.yaml``.
    """
    if not base_dir:
        return path
    return os.path.normpath(os.path.join(base_dir, path.lstrip("/")))


def _read_file(locator: str, path: str, base_dir: Optional[str]) -> str:
    """Read a local file relative to *base_dir*."""
    info(f"loading local file {path}")
    file_path = Path(join_base_dir(path, base_dir))
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(locator, f"failed to read local file {file_path}: {exc}") from exc


def _fetch_url(url: str) -> str:
    """GET *url*, following redirects, and return the body text of a 2xx response."""
    info(f"Fetching {url}")
    try:
        response = httpx.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise LoadError(
            url, f"failed to fetch remote file: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise LoadError(url, f"failed to fetch remote file: {exc}") from exc
    return response.text
