"""openapi2proto -- Turn OpenAPI 3.x documents into Protocol Buffers declarations.

This package holds the front half of the conversion: it loads an OpenAPI
document, inlines every external ``$ref`` (local files or HTTP URLs), and
models the protobuf declaration graph that the emitter walks, including the
deferred references needed for forward and circular type dependencies.

Typical workflow::

    openapi2proto resolve api/openapi.yaml --yaml   # inline external refs
    openapi2proto inspect api/openapi.yaml          # list endpoints

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for settings and OpenAPI documents.
    config: Settings precedence and XDG data directory.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Normalization, ``$ref`` resolution, and spec loading.
    protobuf: The protobuf type graph.
"""

__version__ = "0.1.0"
