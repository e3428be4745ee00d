"""Bencodex value model.

Values are plain Python objects::

    Null        None
    Boolean     bool
    Integer     int (any magnitude)
    Binary      bytes (bytearray / memoryview accepted when encoding)
    Text        str
    List        list (tuple accepted when encoding)
    Dictionary  dict with bytes or str keys (any Mapping when encoding)

A dictionary key is either ``bytes`` (binary key) or ``str`` (text key).
The two never compare equal, so ``b"a"`` and ``"a"`` are distinct keys.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

from .errors import InvalidUtf8, NestingTooDeep, Unsupported

MARK_NULL = ord("n")
MARK_TRUE = ord("t")
MARK_FALSE = ord("f")
MARK_INT = ord("i")
MARK_TEXT = ord("u")
MARK_LIST = ord("l")
MARK_DICT = ord("d")
MARK_END = ord("e")
MARK_COLON = ord(":")
MARK_MINUS = ord("-")
DIGITS = b"0123456789"

Key = Union[bytes, str]
Value = Union[None, bool, int, bytes, str, List[Any], Dict[Key, Any]]


class Kind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    BINARY = "binary"
    TEXT = "text"
    LIST = "list"
    DICTIONARY = "dictionary"


def kind_of(value: Any) -> Kind:
    if value is None:
        return Kind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BINARY
    if isinstance(value, str):
        return Kind.TEXT
    if isinstance(value, (list, tuple)):
        return Kind.LIST
    if isinstance(value, Mapping):
        return Kind.DICTIONARY
    raise Unsupported(f"no Bencodex kind for {type(value).__name__}")


def is_key(obj: Any) -> bool:
    return isinstance(obj, (bytes, str))


def text_bytes(s: str) -> bytes:
    """UTF-8 bytes of ``s``; lone surrogates raise :class:`InvalidUtf8`."""
    try:
        return s.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidUtf8(f"text is not well-formed UTF-8: {e.reason}") from None


def key_order(key: Key) -> Tuple[int, bytes]:
    """Sort key implementing the canonical dictionary key order.

    Binary keys sort before text keys; within a kind keys compare by their
    raw bytes (UTF-8 for text), unsigned and lexicographic.
    """
    if isinstance(key, bytes):
        return 0, key
    if isinstance(key, str):
        return 1, text_bytes(key)
    raise Unsupported(f"dictionary key must be bytes or str, not {type(key).__name__}")


def sorted_items(mapping: Mapping) -> List[Tuple[Key, Any]]:
    """Entries of ``mapping`` in canonical key order."""
    return sorted(mapping.items(), key=lambda kv: key_order(kv[0]))


def deep_copy(value: Value) -> Value:
    """Return a copy of ``value`` sharing no mutable state with it."""
    try:
        return _deep_copy(value)
    except RecursionError:
        raise NestingTooDeep("nesting exceeds the interpreter recursion limit") from None


def _deep_copy(value):
    kind = kind_of(value)
    if kind is Kind.BINARY:
        return bytes(value)
    if kind is Kind.LIST:
        out = []
        for item in value:
            out.append(_deep_copy(item))
        return out
    if kind is Kind.DICTIONARY:
        out = {}
        for k, v in value.items():
            key_order(k)
            out[k] = _deep_copy(v)
        return out
    return value


def release(value: Value) -> None:
    """Tear down the containers owned by ``value``, children first.

    Memory itself is reclaimed by the garbage collector; this empties every
    list and dict reachable from ``value`` so a released tree can no longer
    be observed through stale references. A tree too deep to walk raises
    :class:`NestingTooDeep` before anything is cleared.
    """
    try:
        _release(value)
    except RecursionError:
        raise NestingTooDeep("nesting exceeds the interpreter recursion limit") from None


def _release(value) -> None:
    kind = kind_of(value)
    if kind is Kind.LIST:
        for item in value:
            _release(item)
        if isinstance(value, list):
            value.clear()
    elif kind is Kind.DICTIONARY:
        for item in value.values():
            _release(item)
        if isinstance(value, dict):
            value.clear()


def equal(a: Value, b: Value) -> bool:
    """Structural equality that keeps kinds apart (``True`` is not ``1``)."""
    try:
        return _equal(a, b)
    except RecursionError:
        raise NestingTooDeep("nesting exceeds the interpreter recursion limit") from None


def _equal(a, b) -> bool:
    kind = kind_of(a)
    if kind is not kind_of(b):
        return False
    if kind is Kind.LIST:
        if len(a) != len(b):
            return False
        for x, y in zip(a, b):
            if not _equal(x, y):
                return False
        return True
    if kind is Kind.DICTIONARY:
        if len(a) != len(b):
            return False
        for k, v in a.items():
            if k not in b or not _equal(v, b[k]):
                return False
        return True
    if kind is Kind.BINARY:
        return bytes(a) == bytes(b)
    return a == b


# int() and str() refuse numerals longer than sys.int_max_str_digits, so long
# numerals are converted in fixed-size chunks.
_CHUNK = 1000
_CHUNK_POW = 10 ** _CHUNK


def int_from_digits(digits: bytes) -> int:
    """Parse a run of ASCII decimal digits (no sign) of any length."""
    if len(digits) <= _CHUNK:
        return int(digits)
    head = len(digits) % _CHUNK or _CHUNK
    n = int(digits[:head])
    for i in range(head, len(digits), _CHUNK):
        n = n * _CHUNK_POW + int(digits[i:i + _CHUNK])
    return n


def int_to_digits(n: int) -> bytes:
    """Minimal base-10 ASCII form of ``n``, with a leading ``-`` if negative."""
    n = int(n)
    if n < 0:
        return b"-" + int_to_digits(-n)
    if n < _CHUNK_POW:
        return str(n).encode("ascii")
    parts = []
    while n:
        n, r = divmod(n, _CHUNK_POW)
        parts.append(r)
    out = [str(parts[-1]).encode("ascii")]
    out += [f"{r:0{_CHUNK}d}".encode("ascii") for r in reversed(parts[:-1])]
    return b"".join(out)
