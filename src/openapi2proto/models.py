"""Canonical Pydantic models shared across openapi2proto modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- :class:`Settings`, the effective options for one
run, assembled by :func:`~openapi2proto.config.resolve_settings`.

**OpenAPI document models** -- validated from a tree that has already been
externally dereferenced by :mod:`openapi2proto.parser.resolver`:
    :class:`Spec`, :class:`Info`, :class:`Server`, :class:`Components`,
    :class:`Extension`, :class:`ExtensionField`, :class:`PathItem`,
    :class:`Endpoint`, :class:`Parameter`, :class:`RequestBody`,
    :class:`MediaTypeObject`, :class:`Response`, and :class:`Schema`.

In-document references (``#/components/...``) survive resolution, so
:class:`Schema`, :class:`Parameter` and :class:`RequestBody` keep a ``ref``
field populated from ``$ref``. Unknown keys are ignored.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Configuration ---


class Settings(BaseModel):
    """Effective options for resolving a document.

    Loaded from ``./openapi2proto.json`` and overridden by the
    ``OPENAPI2PROTO_DIR`` environment variable and the ``--dir`` flag.
    See :func:`~openapi2proto.config.resolve_settings`.
    """

    model_config = ConfigDict(extra="ignore")

    dir: Optional[str] = Field(
        default=None,
        description="Base directory for relative $ref file locators",
    )


# --- OpenAPI document ---


class _OpenAPIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _stringify_number(value: Any) -> Any:  # noqa: ANN401
    # YAML reads ``version: 1.0`` or ``openapi: 3.0`` as a float
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Schema(_OpenAPIModel):
    """A (partial) OpenAPI Schema Object.

    A boolean schema validates too: ``true`` becomes an empty schema and
    ``false`` (e.g. ``additionalProperties: false``) a schema whose
    :attr:`is_nil` is set.
    """

    is_nil: bool = Field(default=False, exclude=True)

    # if present, takes precedence over every other field
    ref: Optional[str] = Field(default=None, alias="$ref")

    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    enum: list[Any] = Field(default_factory=list)

    proto_tag: Optional[int] = Field(default=None, alias="x-proto-tag")

    # objects
    required: list[str] = Field(default_factory=list)
    properties: dict[str, Schema] = Field(default_factory=dict)
    additional_properties: Optional[Schema] = Field(
        default=None, alias="additionalProperties"
    )

    # arrays
    items: Optional[Schema] = None

    any_of: list[Schema] = Field(default_factory=list, alias="anyOf")

    # validation
    pattern: Optional[str] = None
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    min_length: Optional[int] = Field(default=None, alias="minLength")
    maximum: Optional[float] = None
    minimum: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def _boolean_schema(cls, data: Any) -> Any:  # noqa: ANN401
        if isinstance(data, bool):
            return {} if data else {"is_nil": True}
        return data


class Info(_OpenAPIModel):
    title: str = ""
    description: str = ""
    version: str = ""

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:  # noqa: ANN401
        return _stringify_number(value)


class Server(_OpenAPIModel):
    url: str = ""


class ExtensionField(_OpenAPIModel):
    """A field added to a base message through ``x-extensions``."""

    name: str
    type: str
    number: int


class Extension(_OpenAPIModel):
    """A protobuf extension of ``base`` declared in ``x-extensions``."""

    base: str
    fields: list[ExtensionField] = Field(default_factory=list)


class Parameter(_OpenAPIModel):
    """A (partial) OpenAPI Parameter Object."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    name: str = ""
    in_: Optional[str] = Field(default=None, alias="in")
    description: str = ""
    required: bool = False
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    proto_tag: Optional[int] = Field(default=None, alias="x-proto-tag")


class MediaTypeObject(_OpenAPIModel):
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class RequestBody(_OpenAPIModel):
    ref: Optional[str] = Field(default=None, alias="$ref")
    description: str = ""
    required: bool = False
    content: dict[str, MediaTypeObject] = Field(default_factory=dict)


class Response(_OpenAPIModel):
    description: str = ""
    content: dict[str, MediaTypeObject] = Field(default_factory=dict)


class Endpoint(_OpenAPIModel):
    """One operation on a path.

    ``path`` and ``verb`` are not part of the document; :class:`Spec` fills
    them in after validation.
    """

    path: str = Field(default="", exclude=True)
    verb: str = Field(default="", exclude=True)

    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    tags: list[str] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)
    operation_id: str = Field(default="", alias="operationId")
    custom_options: dict[str, Any] = Field(default_factory=dict, alias="x-options")

    def has_tag(self, tag: str) -> bool:
        """Return ``True`` if *tag* is among the endpoint's tags."""
        return tag in self.tags


HTTP_VERBS = ("get", "put", "post", "patch", "delete")


class PathItem(_OpenAPIModel):
    """All endpoints and shared parameters available on a single path."""

    get: Optional[Endpoint] = None
    put: Optional[Endpoint] = None
    post: Optional[Endpoint] = None
    patch: Optional[Endpoint] = None
    delete: Optional[Endpoint] = None
    parameters: list[Parameter] = Field(default_factory=list)

    def endpoints(self) -> Iterator[Endpoint]:
        """Yield the declared endpoints in ``get, put, post, patch, delete`` order."""
        for verb in HTTP_VERBS:
            endpoint = getattr(self, verb)
            if endpoint is not None:
                yield endpoint


class Components(_OpenAPIModel):
    schemas: dict[str, Schema] = Field(default_factory=dict)
    parameters: dict[str, Parameter] = Field(default_factory=dict)


class Spec(_OpenAPIModel):
    """An OpenAPI 3.x document, as far as protobuf generation needs it.

    Example::

        spec = Spec.model_validate(resolved_tree)
        for endpoint in spec.endpoints():
            print(endpoint.verb, endpoint.path)
    """

    file_name: str = Field(default="", exclude=True)
    openapi: str = ""
    info: Info = Field(default_factory=Info)
    servers: list[Server] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)
    extensions: list[Extension] = Field(default_factory=list, alias="x-extensions")
    global_options: dict[str, Any] = Field(
        default_factory=dict, alias="x-global-options"
    )

    @field_validator("openapi", mode="before")
    @classmethod
    def _stringify_openapi(cls, value: Any) -> Any:  # noqa: ANN401
        return _stringify_number(value)

    @model_validator(mode="after")
    def _label_endpoints(self) -> Spec:
        for path, item in self.paths.items():
            for verb in HTTP_VERBS:
                endpoint = getattr(item, verb)
                if endpoint is not None:
                    endpoint.path = path
                    endpoint.verb = verb
        return self

    def endpoints(self) -> Iterator[Endpoint]:
        """Yield every endpoint in path order."""
        for item in self.paths.values():
            yield from item.endpoints()
