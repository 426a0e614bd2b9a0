"""Resolve external ``$ref`` JSON References in OpenAPI documents.

OpenAPI documents are frequently split across files (``$ref:
"schemas/pet.yaml#/Pet"``) or point at remote documents.  This module walks
a decoded document and returns a **new** tree in which every external
``$ref`` mapping is replaced by the content it points to, recursively.

Only external references are dereferenced.  In-document pointers
(``#/components/schemas/Pet``) and vendored well-known types
(``google/protobuf/...``) are returned unchanged; the translation layer owns
those.

Every top-level :meth:`Resolver.resolve` call gets its own
:class:`ResolutionCache`, so each distinct locator is loaded at most once
per call no matter how many references point at it.  References found
inside a fetched document are resolved against the *caller's* base
directory, not the fetched document's own directory.

Circular external chains are detected via the stack of ``(locator,
fragment)`` pairs currently being resolved and fail with
:class:`~openapi2proto.exceptions.CycleError`.

Example::

    from openapi2proto.parser.resolver import resolve

    tree = {"schema": {"$ref": "refs.yaml#/Bar"}}
    resolved = resolve(tree, dir="/specs")
    # {"schema": {"type": "integer"}}
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Iterator, Optional, Union

from openapi2proto.exceptions import (
    CycleError,
    InvalidRefError,
    ReferenceError_,
    ResolveError,
)
from openapi2proto.parser.loader import load_document
from openapi2proto.parser.normalize import Value, normalize
from openapi2proto.parser.pointer import evaluate
from openapi2proto.parser.refs import REF_KEY, Ref, is_external, parse_ref

logger = logging.getLogger(__name__)

Loader = Callable[[str, Optional[str]], Value]
"""Signature of a document loader: ``(locator, base_dir) -> normalized tree``."""

PathSegment = Union[str, int]


class ResolutionCache:
    """Documents already loaded during one resolve call, keyed by locator."""

    def __init__(self) -> None:
        self._documents: dict[str, Value] = {}

    def __contains__(self, locator: object) -> bool:
        return locator in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def get(self, locator: str) -> Value:
        return self._documents[locator]

    def store(self, locator: str, document: Value) -> None:
        self._documents[locator] = document


class Resolver:
    """Dereferences external ``$ref`` pointers.

    Args:
        loader: Callable used to fetch a locator. Defaults to
            :func:`~openapi2proto.parser.loader.load_document`; tests inject
            fakes here.
    """

    def __init__(self, loader: Optional[Loader] = None) -> None:
        self._loader: Loader = loader or load_document

    def resolve(self, tree: Any, dir: Optional[str] = None) -> Value:  # noqa: ANN401
        """Return a normalized copy of *tree* with external refs resolved.

        Args:
            tree: A decoded document in the decoder's native shape (mapping
                keys need not be strings).
            dir: Base directory for relative filesystem locators. ``None``
                uses locators as-is.

        Returns:
            The fully normalized, externally dereferenced tree.

        Raises:
            ResolveError: If any reference fails; ``path`` locates the
                failing node and ``cause`` holds the underlying error.
        """
        context = _ResolveContext(self._loader, dir, ResolutionCache())
        return context.walk(normalize(tree), [])


def resolve(
    tree: Any,  # noqa: ANN401
    dir: Optional[str] = None,
    loader: Optional[Loader] = None,
) -> Value:
    """Resolve external refs in *tree* with a fresh :class:`Resolver`.

    See :meth:`Resolver.resolve`.
    """
    return Resolver(loader).resolve(tree, dir=dir)


class _ResolveContext:
    """State owned by a single :meth:`Resolver.resolve` call."""

    def __init__(self, loader: Loader, dir: Optional[str], cache: ResolutionCache) -> None:
        self.loader = loader
        self.dir = dir
        self.cache = cache
        # (locator, fragment) pairs on the current resolution stack
        self.active: set[tuple[str, str]] = set()

    def walk(self, value: Value, path: list[PathSegment]) -> Value:
        if isinstance(value, list):
            return [self.walk(item, path + [index]) for index, item in enumerate(value)]

        if isinstance(value, dict):
            if REF_KEY in value:
                return self._resolve_ref_node(value, path)
            return {key: self.walk(item, path + [key]) for key, item in value.items()}

        return value

    def _resolve_ref_node(self, node: dict[str, Value], path: list[PathSegment]) -> Value:
        """Replace a ``$ref`` mapping by its target, or keep it if not external."""
        raw = node[REF_KEY]
        try:
            if not isinstance(raw, str):
                raise InvalidRefError(raw)
            if not is_external(raw):
                return copy.deepcopy(node)
            ref = parse_ref(raw)
            target = evaluate(self._document(ref.locator), ref.fragment)
        except ReferenceError_ as exc:
            raise ResolveError(path, exc) from exc

        return self._descend(ref, target, path)

    def _descend(self, ref: Ref, target: Value, path: list[PathSegment]) -> Value:
        """Resolve the extracted fragment, which may hold further refs."""
        key = (ref.locator, ref.fragment)
        if key in self.active:
            exc = CycleError(ref.locator, ref.fragment)
            raise ResolveError(path, exc) from exc

        self.active.add(key)
        try:
            return self.walk(target, path)
        finally:
            self.active.discard(key)

    def _document(self, locator: str) -> Value:
        """Return the document for *locator*, loading it on first use."""
        if locator in self.cache:
            logger.debug("Reusing cached document %s", locator)
            return self.cache.get(locator)

        document = self.loader(locator, self.dir)
        self.cache.store(locator, document)
        return document
