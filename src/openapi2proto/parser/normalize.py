"""Normalize decoded JSON/YAML trees into the canonical value shape.

YAML decoders happily produce mappings keyed by integers, booleans, floats,
or even ``None`` (``3: three``, ``yes: ok``).  Everything downstream --
JSON-pointer evaluation, ``$ref`` detection, pydantic validation -- assumes
string keys, so every tree is passed through :func:`normalize` before it is
resolved.

The canonical shape is the :data:`Value` alias: ``None``, ``bool``, ``int``,
``float``, ``str``, ``list[Value]`` or ``dict[str, Value]``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Union

Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]

INVALID_KEY = "(invalid)"


def normalize(raw: Any) -> Value:  # noqa: ANN401
    """Return a copy of *raw* in which every mapping is keyed by strings.

    Mappings are rebuilt with :func:`stringify_key` applied to each key,
    lists and tuples become lists (order preserved), and scalars pass through
    unchanged.  The input is never modified and normalization never fails.

    Args:
        raw: A tree as returned by ``json.loads`` or ``yaml.safe_load``.

    Returns:
        The canonical tree.

    Example::

        >>> normalize({3: "three", True: ["yes"]})
        {'3': 'three', 'true': ['yes']}
    """
    if isinstance(raw, Mapping):
        return {stringify_key(key): normalize(value) for key, value in raw.items()}
    if isinstance(raw, (list, tuple)):
        return [normalize(item) for item in raw]
    return raw


def stringify_key(key: Any) -> str:  # noqa: ANN401
    """Render a mapping key as a string.

    Strings pass through, booleans become ``"true"``/``"false"``, integers
    render in base 10 and floats use their shortest round-trip decimal form
    without an exponent.  Any other key renders as ``"(invalid)"``.
    """
    if isinstance(key, str):
        return key
    # bool before int: True is an int in Python
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        return _format_float(key)
    return INVALID_KEY


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
