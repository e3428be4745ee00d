"""Bencodex: a canonical extension of bencoding.

>>> encode({b"a": 1, b"b": 2, "c": 3})
b'd1:ai1e1:bi2eu1:ci3ee'
>>> decode(b"lnti42e5:hellou5:worlde")
[None, True, 42, b'hello', 'world']
"""

__version__ = "0.1.0"

from .decode import decode, decode_prefix, load
from .encode import dump, encode
from .errors import (
    BencodexError,
    InvalidFormat,
    InvalidUtf8,
    MalformedBinary,
    MalformedDictionary,
    MalformedInteger,
    NestingTooDeep,
    TrailingData,
    UnexpectedEof,
    Unsupported,
)
from .types import Key, Kind, Value, deep_copy, equal, is_key, key_order, kind_of, release

__all__ = [
    "decode",
    "decode_prefix",
    "load",
    "encode",
    "dump",
    "BencodexError",
    "InvalidFormat",
    "InvalidUtf8",
    "MalformedBinary",
    "MalformedDictionary",
    "MalformedInteger",
    "NestingTooDeep",
    "TrailingData",
    "UnexpectedEof",
    "Unsupported",
    "Key",
    "Kind",
    "Value",
    "deep_copy",
    "equal",
    "is_key",
    "key_order",
    "kind_of",
    "release",
]
