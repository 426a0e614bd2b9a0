"""RFC 6901 JSON pointer evaluation over normalized value trees."""

from __future__ import annotations

from openapi2proto.exceptions import PointerMissError
from openapi2proto.parser.normalize import Value


def unescape(segment: str) -> str:
    """Decode a single pointer segment (``~1`` -> ``/``, then ``~0`` -> ``~``)."""
    return segment.replace("~1", "/").replace("~0", "~")


def evaluate(document: Value, pointer: str) -> Value:
    """Return the node of *document* addressed by *pointer*.

    An empty pointer addresses the whole document.  Otherwise the pointer
    must start with ``/``; each segment selects a mapping key or a list index
    written as a canonical non-negative integer.

    Args:
        document: A normalized tree.
        pointer: The JSON pointer, already percent-decoded.

    Returns:
        The addressed node (not a copy).

    Raises:
        PointerMissError: If the pointer is malformed, a key is absent, an
            index is out of range or non-numeric, or a scalar is traversed.
    """
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise PointerMissError(pointer, pointer, "is not a valid JSON pointer")

    current = document
    for raw in pointer[1:].split("/"):
        segment = unescape(raw)
        if isinstance(current, dict):
            if segment not in current:
                raise PointerMissError(pointer, segment)
            current = current[segment]
        elif isinstance(current, list):
            if not _is_index(segment):
                raise PointerMissError(pointer, segment, "is not an array index")
            index = int(segment)
            if index >= len(current):
                raise PointerMissError(pointer, segment, "is out of range")
            current = current[index]
        else:
            raise PointerMissError(
                pointer, segment, f"cannot navigate into {type(current).__name__}"
            )
    return current


def _is_index(segment: str) -> bool:
    if not segment.isdigit() or not segment.isascii():
        return False
    return segment == "0" or not segment.startswith("0")
