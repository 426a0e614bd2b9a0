"""The protobuf declaration graph handed to the ``.proto`` emitter.

A protocol buffers file is modelled as a :class:`Package` -- itself a
container of declarations -- holding :class:`Enum`, :class:`Message`,
:class:`Extension` and :class:`Service` types.  Field types may also be
:class:`Builtin` scalars, :class:`Map` types, or :class:`Reference`
placeholders.

A :class:`Reference` stands in for a named type that has not been built yet
(a forward reference, or one half of a circular dependency).  It is never
emitted itself: consumers call :meth:`Reference.resolve` to obtain the
concrete type when they need to inspect it.

Sibling declarations are emitted in :attr:`Type.priority` order (enums,
messages, extensions, services).  The order is applied by a stable sort in
:meth:`Container.sorted_children`, never at insertion time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from openapi2proto.exceptions import TypeGraphError

PRIORITY_ENUM = 0
PRIORITY_MESSAGE = 1
PRIORITY_EXTENSION = 2
PRIORITY_SERVICE = 3


class Type(ABC):
    """Base class of every node in the type graph."""

    _parent: Optional[Container] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Fully qualified or local name used when the type is referenced."""

    @property
    def priority(self) -> int:
        """Sort key for sibling declarations."""
        return PRIORITY_MESSAGE

    @property
    def parent(self) -> Optional[Container]:
        """The container this type is declared in, if any."""
        return self._parent

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Container(Type):
    """A type that owns nested declarations.

    Each child belongs to exactly one container; adding a type that is
    already declared elsewhere raises :class:`TypeGraphError`.
    """

    def __init__(self) -> None:
        self._children: list[Type] = []

    def add_type(self, child: Type) -> None:
        if child is self:
            raise TypeGraphError(f"{self.name} cannot contain itself")
        if child.parent is not None:
            raise TypeGraphError(
                f"{child.name} is already declared in {child.parent.name}"
            )
        child._parent = self
        self._children.append(child)

    @property
    def children(self) -> list[Type]:
        """Children in insertion order."""
        return list(self._children)

    def sorted_children(self) -> list[Type]:
        """Children in emission order (stable by :attr:`Type.priority`)."""
        return sorted(self._children, key=lambda child: child.priority)


class Builtin(Type):
    """A scalar type such as ``int32`` or ``string``."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Builtin) and other._name == self._name

    def __hash__(self) -> int:
        return hash(("builtin", self._name))


class Enum(Type):
    def __init__(self, name: str, comment: str = "") -> None:
        self._name = name
        self.comment = comment
        self._elements: list[Any] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return PRIORITY_ENUM

    @property
    def elements(self) -> list[Any]:
        return list(self._elements)

    def add_element(self, element: Any) -> None:  # noqa: ANN401
        self._elements.append(element)


class Field:
    """A single field of a :class:`Message`.

    Args:
        name: Field name as written in the ``.proto`` file.
        type: Declared type; may be a :class:`Reference`.
        index: Field number.
        repeated: Whether the field is ``repeated``.
        comment: Leading comment.
    """

    def __init__(
        self,
        name: str,
        type: Type,
        index: int,
        repeated: bool = False,
        comment: str = "",
    ) -> None:
        self.name = name
        self.type = type
        self.index = index
        self.repeated = repeated
        self.comment = comment

    def __repr__(self) -> str:
        return f"Field({self.name!r}, {self.type!r}, {self.index})"


class Message(Container):
    """A composite type holding fields and, optionally, nested declarations."""

    def __init__(self, name: str, comment: str = "") -> None:
        super().__init__()
        self._name = name
        self.comment = comment
        self._fields: list[Field] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> list[Field]:
        return list(self._fields)

    def add_field(self, field: Field) -> None:
        self._fields.append(field)


class Map(Type):
    """A ``map<key, value>`` field type."""

    def __init__(self, key: Type, value: Type) -> None:
        self.key = key
        self.value = value

    @property
    def name(self) -> str:
        return f"map<{self.key.name}, {self.value.name}>"


class ExtensionField:
    """A field contributed to a base message by an :class:`Extension`."""

    def __init__(self, name: str, type: str, number: int) -> None:
        self.name = name
        self.type = type
        self.number = number

    def __repr__(self) -> str:
        return f"ExtensionField({self.name!r}, {self.type!r}, {self.number})"


class Extension(Type):
    """``extend <base> { ... }``; named after the message it extends."""

    def __init__(self, base: str) -> None:
        self.base = base
        self._fields: list[ExtensionField] = []

    @property
    def name(self) -> str:
        return self.base

    @property
    def priority(self) -> int:
        return PRIORITY_EXTENSION

    @property
    def fields(self) -> list[ExtensionField]:
        return list(self._fields)

    def add_field(self, field: ExtensionField) -> None:
        self._fields.append(field)


class HTTPAnnotation:
    """The ``google.api.http`` option of an RPC."""

    def __init__(self, method: str, path: str, body: str = "") -> None:
        self.method = method
        self.path = path
        self.body = body


class RPCOption:
    """A custom ``option (name) = value`` on an RPC."""

    def __init__(self, name: str, value: Any) -> None:  # noqa: ANN401
        self.name = name
        self.value = value


class RPC:
    """An RPC endpoint of a :class:`Service`.

    ``parameter`` and ``response`` may be :class:`Reference` placeholders.
    """

    def __init__(
        self,
        name: str,
        parameter: Type,
        response: Type,
        comment: str = "",
    ) -> None:
        self.name = name
        self.parameter = parameter
        self.response = response
        self.comment = comment
        self._options: list[Any] = []

    @property
    def options(self) -> list[Any]:
        return list(self._options)

    def add_option(self, option: Any) -> None:  # noqa: ANN401
        """Attach an :class:`HTTPAnnotation` or :class:`RPCOption`."""
        self._options.append(option)


class Service(Type):
    def __init__(self, name: str) -> None:
        self._name = name
        self._rpcs: list[RPC] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return PRIORITY_SERVICE

    @property
    def rpcs(self) -> list[RPC]:
        return list(self._rpcs)

    def add_rpc(self, rpc: RPC) -> None:
        self._rpcs.append(rpc)


Resolver = Callable[[str], Type]
"""Callback turning a type name into its concrete :class:`Type`."""


class Reference(Type):
    """A placeholder for a named type that is resolved on demand.

    Used to express forward references and circular dependencies found
    while building the graph.  The resolver may be given at construction or
    bound exactly once later via :meth:`bind` (see
    :class:`~openapi2proto.protobuf.registry.TypeRegistry`).
    """

    def __init__(self, name: str, resolver: Optional[Resolver] = None) -> None:
        self._name = name
        self._resolver = resolver

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_bound(self) -> bool:
        return self._resolver is not None

    def bind(self, resolver: Resolver) -> None:
        if self._resolver is not None:
            raise TypeGraphError(f"reference {self._name!r} is already bound")
        self._resolver = resolver

    def resolve(self) -> Type:
        """Return the concrete type this reference names.

        Raises:
            TypeGraphError: If no resolver has been bound, or whatever the
                resolver raises for an unknown name.
        """
        if self._resolver is None:
            raise TypeGraphError(f"reference {self._name!r} is not bound")
        return self._resolver(self._name)


class GlobalOption:
    """A file-level ``option name = value;``."""

    def __init__(self, name: str, value: str) -> None:
        self.name = name
        self.value = value


class Package(Container):
    """The root of a ``.proto`` file: package name, imports, options, declarations."""

    def __init__(self, name: str) -> None:
        super().__init__()
        self._name = name
        self._imports: list[str] = []
        self._options: list[GlobalOption] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def imports(self) -> list[str]:
        return list(self._imports)

    def add_import(self, path: str) -> None:
        """Add an import once; repeated imports are ignored."""
        if path not in self._imports:
            self._imports.append(path)

    @property
    def options(self) -> list[GlobalOption]:
        return list(self._options)

    def add_option(self, option: GlobalOption) -> None:
        self._options.append(option)


BOOL_TYPE = Builtin("bool")
BYTES_TYPE = Builtin("bytes")
DOUBLE_TYPE = Builtin("double")
FLOAT_TYPE = Builtin("float")
INT32_TYPE = Builtin("int32")
INT64_TYPE = Builtin("int64")
STRING_TYPE = Builtin("string")

# Boxed types
ANY_TYPE = Message("google.protobuf.Any")
BOOL_VALUE_TYPE = Message("google.protobuf.BoolValue")
BYTES_VALUE_TYPE = Message("google.protobuf.BytesValue")
DOUBLE_VALUE_TYPE = Message("google.protobuf.DoubleValue")
FLOAT_VALUE_TYPE = Message("google.protobuf.FloatValue")
INT32_VALUE_TYPE = Message("google.protobuf.Int32Value")
INT64_VALUE_TYPE = Message("google.protobuf.Int64Value")
NULL_VALUE_TYPE = Message("google.protobuf.NullValue")
STRING_VALUE_TYPE = Message("google.protobuf.StringValue")

EMPTY_MESSAGE = Message("google.protobuf.Empty")

WELL_KNOWN_TYPES = {
    typ.name: typ
    for typ in (
        ANY_TYPE,
        BOOL_VALUE_TYPE,
        BYTES_VALUE_TYPE,
        DOUBLE_VALUE_TYPE,
        FLOAT_VALUE_TYPE,
        INT32_VALUE_TYPE,
        INT64_VALUE_TYPE,
        NULL_VALUE_TYPE,
        STRING_VALUE_TYPE,
        EMPTY_MESSAGE,
    )
}
"""Well-known message types by fully qualified name."""
