#!/usr/bin/env python3
"""
flitevox: Decode Errors
=======================

Every failure while decoding a CST voice file aborts the whole decode.
All errors derive from DecodeError, which is a ValueError so callers that
already guard against malformed input with ``except ValueError`` keep
working.

License: MIT
"""

from typing import Optional


class DecodeError(ValueError):
    """Base class for all decode failures"""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.message = message
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


class UnexpectedEndOfInput(DecodeError):
    """Fewer bytes remain than the current read requires"""

    def __init__(self, needed: int, available: int, offset: Optional[int] = None):
        self.needed = needed
        self.available = available
        super().__init__(
            f"Unexpected end of input: needed {needed} bytes, {available} available",
            offset
        )


class InvalidHeaderMagic(DecodeError):
    """Buffer does not start with the CST voice signature"""

    def __init__(self, found: bytes, offset: Optional[int] = None):
        self.found = found
        super().__init__(f"Invalid CST voice header (magic: {found!r})", offset)


class DeclaredSizeMismatch(DecodeError):
    """A length prefix disagrees with what the field actually holds"""

    def __init__(self, expected: int, actual: int, offset: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Declared size mismatch: expected {expected}, declared {actual}",
            offset
        )


class NonUtf8Payload(DecodeError):
    """String payload is not valid UTF-8"""


class IntegerTextParseFailure(DecodeError):
    """Text field does not hold a decimal integer of the requested width"""

    def __init__(self, text: str, bits: int, offset: Optional[int] = None):
        self.text = text
        self.bits = bits
        super().__init__(f"Cannot parse {text!r} as u{bits}", offset)


class WrongStringTermination(DecodeError):
    """Last byte of a length-prefixed string is not the null terminator"""

    def __init__(self, size: int, offset: Optional[int] = None):
        self.size = size
        super().__init__(f"String of declared length {size} is not null terminated", offset)


class UnexpectedFieldName(DecodeError):
    """Record field name in the stream differs from the declared one"""

    def __init__(self, expected: str, found: str, offset: Optional[int] = None):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected field {expected!r}, found {found!r}", offset)


class TrailingBytesAfterTopLevelValue(DecodeError):
    """Input continues after the top-level value was fully decoded"""

    def __init__(self, remaining: int, offset: Optional[int] = None):
        self.remaining = remaining
        super().__init__(f"{remaining} trailing bytes after top-level value", offset)


class CustomDecodeError(DecodeError):
    """Free-form failure raised by shape-specific decode logic"""


__all__ = [
    'DecodeError',
    'UnexpectedEndOfInput',
    'InvalidHeaderMagic',
    'DeclaredSizeMismatch',
    'NonUtf8Payload',
    'IntegerTextParseFailure',
    'WrongStringTermination',
    'UnexpectedFieldName',
    'TrailingBytesAfterTopLevelValue',
    'CustomDecodeError',
]
