"""Two-phase construction of a type graph with deferred references.

While the translation layer walks an OpenAPI document it meets type names
before their definitions (``Pet.owner`` -> ``Owner``) and names that
participate in cycles (``Node.children`` -> ``Node``).  It asks the registry
for those names with :meth:`TypeRegistry.get`, receiving the concrete type
when it already exists and a :class:`~openapi2proto.protobuf.types.Reference`
placeholder otherwise.

Once every definition has been visited, :meth:`TypeRegistry.bind` checks
that all placeholder names were eventually defined and binds each
placeholder to :meth:`TypeRegistry.lookup`.  Binding happens once, after the
registry is complete, so no placeholder ever observes partially built state.

Example::

    registry = TypeRegistry()
    node = Message("Node")
    node.add_field(Field("children", registry.get("Node"), 1, repeated=True))
    registry.define(node)
    registry.bind()
    node.fields[0].type.resolve() is node  # True
"""

from __future__ import annotations

import logging
from typing import Iterator

from openapi2proto.exceptions import (
    TypeGraphError,
    UnknownTypeError,
    UnresolvedReferenceError,
)
from openapi2proto.protobuf.types import Reference, Type

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Name -> type registry that hands out and later binds placeholders."""

    def __init__(self) -> None:
        self._types: dict[str, Type] = {}
        self._placeholders: list[Reference] = []
        self._bound = False

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[Type]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def define(self, typ: Type) -> None:
        """Register *typ* under its name.

        Raises:
            TypeGraphError: If the name is already defined, or if *typ* is a
                placeholder.
        """
        if isinstance(typ, Reference):
            raise TypeGraphError(f"cannot define placeholder {typ.name!r}")
        if typ.name in self._types:
            raise TypeGraphError(f"type {typ.name!r} is already defined")
        self._types[typ.name] = typ

    def lookup(self, name: str) -> Type:
        """Return the defined type called *name*.

        Raises:
            UnknownTypeError: If nothing was defined under *name*.
        """
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def reference(self, name: str) -> Reference:
        """Return a new placeholder for *name*, bound by :meth:`bind`."""
        if self._bound:
            # Registry is complete; late placeholders bind immediately
            return Reference(name, self.lookup)
        placeholder = Reference(name)
        self._placeholders.append(placeholder)
        return placeholder

    def get(self, name: str) -> Type:
        """Return the type called *name*, or a placeholder if not yet defined."""
        if name in self._types:
            return self._types[name]
        return self.reference(name)

    def unresolved(self) -> list[str]:
        """Names handed out as placeholders that are still undefined."""
        return sorted(
            {ref.name for ref in self._placeholders if ref.name not in self._types}
        )

    @property
    def placeholders(self) -> list[Reference]:
        return list(self._placeholders)

    def bind(self) -> None:
        """Bind every outstanding placeholder to :meth:`lookup`.

        Raises:
            UnresolvedReferenceError: If any placeholder names an undefined
                type; nothing is bound in that case.
        """
        missing = self.unresolved()
        if missing:
            raise UnresolvedReferenceError(missing)

        pending = [ref for ref in self._placeholders if not ref.is_bound]
        for ref in pending:
            ref.bind(self.lookup)
        self._bound = True
        logger.debug("Bound %d type references", len(pending))
