"""Bencodex JSON representation.

JSON has no byte strings and loses integer precision, so values are mapped
onto JSON like this::

    null / true / false   same literals
    integer               decimal string, e.g. "-456"
    binary                "0x" + lowercase hex ("b64:" + base64 also read)
    text                  "\\ufeff" + text
    list                  array
    dictionary            object, keys in the binary/text string forms above

Dictionaries are written in canonical key order.
"""

import base64
import binascii
import json
import re
from typing import Any, Optional

from .errors import InvalidFormat, Unsupported
from .types import Kind, Value, int_from_digits, int_to_digits, is_key, kind_of, sorted_items, text_bytes

TEXT_PREFIX = "\ufeff"
HEX_PREFIX = "0x"
B64_PREFIX = "b64:"

_INTEGER = re.compile(r"(0|-?[1-9][0-9]*)\Z")


def _key_to_json(key) -> str:
    if isinstance(key, bytes):
        return HEX_PREFIX + key.hex()
    text_bytes(key)
    return TEXT_PREFIX + key


def to_json_value(value: Value) -> Any:
    """Map a Bencodex value onto plain JSON-compatible objects."""
    kind = kind_of(value)
    if kind in (Kind.NULL, Kind.BOOLEAN):
        return value
    if kind is Kind.INTEGER:
        return int_to_digits(value).decode("ascii")
    if kind is Kind.BINARY:
        return HEX_PREFIX + bytes(value).hex()
    if kind is Kind.TEXT:
        return _key_to_json(value)
    if kind is Kind.LIST:
        return [to_json_value(item) for item in value]
    return {_key_to_json(k): to_json_value(v) for k, v in sorted_items(value)}


def _from_json_string(s: str):
    if s.startswith(TEXT_PREFIX):
        return s[len(TEXT_PREFIX):]
    if s.startswith(HEX_PREFIX):
        try:
            return bytes.fromhex(s[len(HEX_PREFIX):])
        except ValueError:
            raise InvalidFormat(f"bad hex in binary string {s!r}") from None
    if s.startswith(B64_PREFIX):
        try:
            return base64.b64decode(s[len(B64_PREFIX):], validate=True)
        except binascii.Error:
            raise InvalidFormat(f"bad base64 in binary string {s!r}") from None
    if _INTEGER.match(s):
        if s.startswith("-"):
            return -int_from_digits(s[1:].encode("ascii"))
        return int_from_digits(s.encode("ascii"))
    raise InvalidFormat(f"string {s!r} is not a text, binary or integer representation")


def from_json_value(obj: Any) -> Value:
    """Inverse of :func:`to_json_value`.

    Bare JSON integers are read as Bencodex integers; JSON floats have no
    Bencodex counterpart.
    """
    if obj is None or isinstance(obj, bool):
        return obj
    if isinstance(obj, int):
        return obj
    if isinstance(obj, str):
        return _from_json_string(obj)
    if isinstance(obj, list):
        return [from_json_value(item) for item in obj]
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            key = _from_json_string(k)
            if not is_key(key):
                raise InvalidFormat(f"object key {k!r} is neither binary nor text")
            # "0x61" and "b64:YQ==" spell the same key
            if key in out:
                raise InvalidFormat(f"object key {k!r} repeats key {key!r}")
            out[key] = from_json_value(v)
        return out
    raise Unsupported(f"no Bencodex kind for JSON {type(obj).__name__}")


def dumps(value: Value, indent: Optional[int] = None) -> str:
    return json.dumps(to_json_value(value), ensure_ascii=False, indent=indent)


def _unique_object(pairs) -> dict:
    out = {}
    for k, v in pairs:
        if k in out:
            raise InvalidFormat(f"object key {k!r} repeats")
        out[k] = v
    return out


def loads(text: str) -> Value:
    try:
        obj = json.loads(text, object_pairs_hook=_unique_object)
    except json.JSONDecodeError as e:
        raise InvalidFormat(f"invalid JSON: {e.msg}", e.pos) from None
    return from_json_value(obj)
