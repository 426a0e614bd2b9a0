"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi2proto.exceptions.Openapi2ProtoError` subclass.
Wrapper scripts can inspect the exit code to tell a broken spec file apart
from a dangling ``$ref`` without parsing stderr.

Example::

    $ openapi2proto resolve api.yaml
    $ echo $?
    8   # EXIT_REFERENCE_ERROR -- an external $ref could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be decoded or validated."""

EXIT_REFERENCE_ERROR = 8
"""A ``$ref`` could not be parsed, fetched, or located."""

EXIT_TYPE_GRAPH_ERROR = 9
"""The protobuf type graph could not be built or bound."""
