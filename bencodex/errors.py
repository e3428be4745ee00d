"""Error taxonomy shared by the Bencodex decoder and encoder."""

from typing import Optional


class BencodexError(Exception):
    """Base class of every codec error.

    ``offset`` is the position in the input at which a decode error was
    detected, or ``None`` for encode errors and unknown positions.
    """

    def __init__(self, message: str = "", offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})" if message else f"at byte {offset}"
        super().__init__(message)


class UnexpectedEof(BencodexError): pass
class InvalidFormat(BencodexError): pass
class MalformedInteger(BencodexError): pass
class MalformedBinary(BencodexError): pass
class MalformedDictionary(BencodexError): pass
class InvalidUtf8(BencodexError): pass
class Unsupported(BencodexError): pass
class NestingTooDeep(BencodexError): pass
class TrailingData(BencodexError): pass


__all__ = [
    "BencodexError",
    "UnexpectedEof",
    "InvalidFormat",
    "MalformedInteger",
    "MalformedBinary",
    "MalformedDictionary",
    "InvalidUtf8",
    "Unsupported",
    "NestingTooDeep",
    "TrailingData",
]
