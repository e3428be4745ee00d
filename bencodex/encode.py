"""Bencodex encoder: produces the single canonical encoding of a value."""

from collections.abc import Mapping
from typing import BinaryIO, Optional

from .errors import NestingTooDeep, Unsupported
from .types import (
    MARK_COLON,
    MARK_DICT,
    MARK_END,
    MARK_FALSE,
    MARK_INT,
    MARK_LIST,
    MARK_NULL,
    MARK_TEXT,
    MARK_TRUE,
    Value,
    int_to_digits,
    sorted_items,
    text_bytes,
)


def encode(value: Value, *, max_depth: Optional[int] = None) -> bytes:
    """Return the canonical encoding of ``value``."""
    out = bytearray()
    try:
        _encode_value(out, value, 0, max_depth)
    except RecursionError:
        raise NestingTooDeep("nesting exceeds the interpreter recursion limit") from None
    return bytes(out)


def dump(value: Value, fp: BinaryIO, *, max_depth: Optional[int] = None) -> int:
    """Write the encoding of ``value`` to ``fp``; return the byte count.

    The value is encoded in full before anything is written, so a value that
    fails to encode leaves ``fp`` untouched.
    """
    data = encode(value, max_depth=max_depth)
    fp.write(data)
    return len(data)


def _encode_binary(out: bytearray, b: bytes) -> None:
    out += int_to_digits(len(b))
    out.append(MARK_COLON)
    out += b


def _encode_text(out: bytearray, s: str) -> None:
    b = text_bytes(s)
    out.append(MARK_TEXT)
    out += int_to_digits(len(b))
    out.append(MARK_COLON)
    out += b


def _enter(depth: int, max_depth: Optional[int]) -> None:
    if max_depth is not None and depth > max_depth:
        raise NestingTooDeep(f"nesting deeper than {max_depth}")


def _encode_value(out: bytearray, v, depth: int, max_depth: Optional[int]) -> None:
    if v is None:
        out.append(MARK_NULL)
    elif v is True:
        out.append(MARK_TRUE)
    elif v is False:
        out.append(MARK_FALSE)
    elif isinstance(v, int):
        out.append(MARK_INT)
        out += int_to_digits(v)
        out.append(MARK_END)
    elif isinstance(v, (bytes, bytearray, memoryview)):
        _encode_binary(out, bytes(v))
    elif isinstance(v, str):
        _encode_text(out, v)
    elif isinstance(v, (list, tuple)):
        _enter(depth + 1, max_depth)
        out.append(MARK_LIST)
        for item in v:
            _encode_value(out, item, depth + 1, max_depth)
        out.append(MARK_END)
    elif isinstance(v, Mapping):
        _enter(depth + 1, max_depth)
        out.append(MARK_DICT)
        # canonical key order, never insertion order
        for k, item in sorted_items(v):
            if isinstance(k, bytes):
                _encode_binary(out, k)
            else:
                _encode_text(out, k)
            _encode_value(out, item, depth + 1, max_depth)
        out.append(MARK_END)
    else:
        raise Unsupported(f"cannot encode {type(v).__name__}")
