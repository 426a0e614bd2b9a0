"""OpenAPI document parser -- load, normalize, and resolve external ``$ref`` pointers.

This sub-package is responsible for the first half of the openapi2proto
pipeline: turning a raw OpenAPI document (JSON or YAML, local file or remote
URL) into a tree in which every external reference has been inlined, and
from there into a validated :class:`~openapi2proto.models.Spec`.

Typical usage::

    from openapi2proto.parser import load_spec, resolve

    spec = load_spec("api/openapi.yaml")
    tree = resolve({"$ref": "common.yaml#/Error"}, dir="api")

Sub-modules:

* :mod:`~openapi2proto.parser.normalize` -- string-keyed canonical trees.
* :mod:`~openapi2proto.parser.refs` -- ``$ref`` parsing and classification.
* :mod:`~openapi2proto.parser.pointer` -- RFC 6901 JSON pointers.
* :mod:`~openapi2proto.parser.loader` -- file/HTTP I/O and format detection.
* :mod:`~openapi2proto.parser.resolver` -- recursive external ``$ref``
  resolution with a per-call document cache.
* :mod:`~openapi2proto.parser.spec` -- top-level document loading.
"""

from openapi2proto.parser.normalize import normalize
from openapi2proto.parser.resolver import Resolver, resolve
from openapi2proto.parser.spec import load_spec, resolve_document

__all__ = ["normalize", "Resolver", "resolve", "load_spec", "resolve_document"]
