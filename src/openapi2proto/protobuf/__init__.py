"""Protobuf type graph -- declarations, containers, and deferred references.

* :mod:`~openapi2proto.protobuf.types` -- the type variants and the
  :class:`~openapi2proto.protobuf.types.Package` root container.
* :mod:`~openapi2proto.protobuf.registry` -- two-phase build that binds
  :class:`~openapi2proto.protobuf.types.Reference` placeholders once every
  definition is known.
"""

from openapi2proto.protobuf.registry import TypeRegistry
from openapi2proto.protobuf.types import (
    Builtin,
    Container,
    Enum,
    Extension,
    ExtensionField,
    Field,
    GlobalOption,
    HTTPAnnotation,
    Map,
    Message,
    Package,
    Reference,
    RPC,
    RPCOption,
    Service,
    Type,
)

__all__ = [
    "Builtin",
    "Container",
    "Enum",
    "Extension",
    "ExtensionField",
    "Field",
    "GlobalOption",
    "HTTPAnnotation",
    "Map",
    "Message",
    "Package",
    "Reference",
    "RPC",
    "RPCOption",
    "Service",
    "Type",
    "TypeRegistry",
]
