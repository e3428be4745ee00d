"""Bencodex decoder.

Marker-byte dispatch over a byte source that only moves forward. Every
non-canonical form is rejected: leading zeros and ``-0`` in integers, leading
zeros in length prefixes, invalid UTF-8 text, and dictionary keys that are
not strictly increasing in canonical key order (binary keys before text
keys, bytewise within a kind, no duplicates).
"""

from typing import BinaryIO, Optional, Tuple

from .errors import (
    InvalidFormat,
    InvalidUtf8,
    MalformedBinary,
    MalformedDictionary,
    MalformedInteger,
    NestingTooDeep,
    TrailingData,
    UnexpectedEof,
)
from .types import (
    DIGITS,
    MARK_COLON,
    MARK_DICT,
    MARK_END,
    MARK_FALSE,
    MARK_INT,
    MARK_LIST,
    MARK_MINUS,
    MARK_NULL,
    MARK_TEXT,
    MARK_TRUE,
    Value,
    int_from_digits,
    key_order,
)

_ZERO = ord("0")


class BufferSource:
    """Byte source over an in-memory bytes-like object."""

    def __init__(self, data, offset: int = 0):
        self.buf = bytes(data)
        self.pos = offset

    def read_byte(self) -> int:
        if self.pos >= len(self.buf):
            raise UnexpectedEof("unexpected end of input", self.pos)
        b = self.buf[self.pos]
        self.pos += 1
        return b

    def read_exact(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self.buf):
            raise UnexpectedEof(
                f"short read: wanted {n} bytes, {len(self.buf) - self.pos} left", self.pos)
        out = self.buf[self.pos:end]
        self.pos = end
        return out

    def at_end(self) -> bool:
        return self.pos >= len(self.buf)


class StreamSource:
    """Byte source over a binary file-like object with ``read(n)``.

    Exact reads are done in bounded chunks, so a forged length prefix only
    costs as much memory as the stream actually delivers.
    """

    CHUNK = 1 << 16

    def __init__(self, fp: BinaryIO):
        self.fp = fp
        self.pos = 0

    def read_byte(self) -> int:
        b = self.fp.read(1)
        if not b:
            raise UnexpectedEof("unexpected end of input", self.pos)
        self.pos += 1
        return b[0]

    def read_exact(self, n: int) -> bytes:
        parts = []
        remaining = n
        while remaining:
            chunk = self.fp.read(min(remaining, self.CHUNK))
            if not chunk:
                raise UnexpectedEof(f"short read: wanted {n} bytes, got {n - remaining}", self.pos)
            parts.append(chunk)
            remaining -= len(chunk)
            self.pos += len(chunk)
        return b"".join(parts)


class Parser:
    """Recursive-descent parser over a byte source.

    ``max_depth`` bounds how many lists/dictionaries may be nested; ``None``
    leaves nesting limited only by the interpreter's recursion limit.
    """

    def __init__(self, source, max_depth: Optional[int] = None):
        self.src = source
        self.max_depth = max_depth

    def parse(self) -> Value:
        try:
            return self.value(self.src.read_byte(), 0)
        except RecursionError:
            raise NestingTooDeep(
                "nesting exceeds the interpreter recursion limit", self.src.pos) from None

    def value(self, marker: int, depth: int) -> Value:
        # container bodies are read inline: one frame per nesting level
        if marker == MARK_NULL:
            return None
        if marker == MARK_TRUE:
            return True
        if marker == MARK_FALSE:
            return False
        if marker == MARK_INT:
            return self.integer()
        if marker in DIGITS:
            return self.binary(marker)
        if marker == MARK_TEXT:
            return self.text()
        if marker == MARK_LIST:
            self.enter(depth + 1)
            items = []
            b = self.src.read_byte()
            while b != MARK_END:
                items.append(self.value(b, depth + 1))
                b = self.src.read_byte()
            return items
        if marker == MARK_DICT:
            self.enter(depth + 1)
            out = {}
            prev = None
            while True:
                key, prev = self.dictionary_key(prev)
                if key is None:
                    return out
                b = self.src.read_byte()
                if b == MARK_END:
                    raise InvalidFormat(f"key {key!r} has no value", self.src.pos - 1)
                out[key] = self.value(b, depth + 1)
        raise InvalidFormat(f"unknown marker byte 0x{marker:02x}", self.src.pos - 1)

    def integer(self) -> int:
        start = self.src.pos - 1
        negative = False
        digits = bytearray()
        b = self.src.read_byte()
        if b == MARK_MINUS:
            negative = True
            b = self.src.read_byte()
        while b != MARK_END:
            if b not in DIGITS:
                raise MalformedInteger(f"unexpected byte 0x{b:02x} in integer", self.src.pos - 1)
            digits.append(b)
            b = self.src.read_byte()
        if not digits:
            raise MalformedInteger("integer has no digits", start)
        if digits[0] == _ZERO:
            if negative:
                raise MalformedInteger("negative integer starts with 0", start)
            if len(digits) > 1:
                raise MalformedInteger("integer has a leading zero", start)
        n = int_from_digits(bytes(digits))
        return -n if negative else n

    def length(self, b: int, error) -> int:
        start = self.src.pos - 1
        digits = bytearray()
        while b != MARK_COLON:
            if b not in DIGITS:
                raise error(f"unexpected byte 0x{b:02x} in length prefix", self.src.pos - 1)
            digits.append(b)
            b = self.src.read_byte()
        if not digits:
            raise error("empty length prefix", start)
        if digits[0] == _ZERO and len(digits) > 1:
            raise error("length prefix has a leading zero", start)
        return int_from_digits(bytes(digits))

    def binary(self, first_digit: int) -> bytes:
        n = self.length(first_digit, MalformedBinary)
        return self.src.read_exact(n)

    def text(self) -> str:
        n = self.length(self.src.read_byte(), InvalidFormat)
        start = self.src.pos
        raw = self.src.read_exact(n)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8(f"invalid UTF-8 in text: {e.reason}", start + e.start) from None

    def enter(self, depth: int) -> None:
        if self.max_depth is not None and depth > self.max_depth:
            raise NestingTooDeep(f"nesting deeper than {self.max_depth}", self.src.pos - 1)

    def dictionary_key(self, prev):
        """Read the next key, checking it sorts after ``prev``.

        Returns ``(None, prev)`` at the dictionary's terminator.
        """
        start = self.src.pos
        b = self.src.read_byte()
        if b == MARK_END:
            return None, prev
        if b == MARK_TEXT:
            key = self.text()
        elif b in DIGITS:
            key = self.binary(b)
        else:
            raise MalformedDictionary(f"byte 0x{b:02x} cannot start a dictionary key", start)
        order = key_order(key)
        if prev is not None and order <= prev:
            if order == prev:
                raise MalformedDictionary(f"duplicate key {key!r}", start)
            if order[0] < prev[0]:
                raise MalformedDictionary(f"binary key {key!r} after a text key", start)
            raise MalformedDictionary(f"key {key!r} out of canonical order", start)
        return key, order


def decode(data, *, strict: bool = False, max_depth: Optional[int] = None) -> Value:
    """Decode the first Bencodex value in ``data``.

    Bytes after the value are ignored unless ``strict`` is set, in which case
    they raise :class:`TrailingData`.
    """
    if isinstance(data, str):
        raise TypeError("decode() expects bytes, not str")
    source = BufferSource(data)
    value = Parser(source, max_depth).parse()
    if strict and not source.at_end():
        raise TrailingData(f"{len(source.buf) - source.pos} bytes after value", source.pos)
    return value


def decode_prefix(data, offset: int = 0, *, max_depth: Optional[int] = None) -> Tuple[Value, int]:
    """Decode one value starting at ``offset``; return it with the offset just past it."""
    source = BufferSource(data, offset)
    value = Parser(source, max_depth).parse()
    return value, source.pos


def load(fp: BinaryIO, *, max_depth: Optional[int] = None) -> Value:
    """Decode one value from a binary stream, consuming exactly its bytes."""
    return Parser(StreamSource(fp), max_depth).parse()
