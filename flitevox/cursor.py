#!/usr/bin/env python3
"""
flitevox: Byte Cursor
=====================

Positional reader over an immutable byte buffer. The cursor only ever
moves forward.

Wire primitives:
- count:  4-byte little-endian unsigned integer
- string: count L (including one trailing null) + L bytes, last byte 0x00
- raw numeric: one 4-byte slot, byte order chosen by the file header;
  u8/u16 fields still occupy the full slot and are truncated

License: MIT
"""

import logging
import struct
from enum import Enum
from typing import Optional, Union

import numpy as np

from .errors import (
    UnexpectedEndOfInput,
    NonUtf8Payload,
    WrongStringTermination,
)

logger = logging.getLogger(__name__)

# Every raw binary numeric field occupies one slot of this size
RAW_SLOT_SIZE = 4
COUNT_SIZE = 4


class RawKind(Enum):
    """Logical types stored in a raw 4-byte slot"""
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    I32 = "i32"
    F32 = "f32"


# numpy dtype code for the slot, and mask applied after interpretation
_RAW_LAYOUT = {
    RawKind.U8: ('u4', 0xFF),
    RawKind.U16: ('u4', 0xFFFF),
    RawKind.U32: ('u4', None),
    RawKind.I32: ('i4', None),
    RawKind.F32: ('f4', None),
}


class ByteCursor:
    """
    Forward-only reader over a CST voice buffer.

    The buffer is copied into an immutable ``bytes`` object on construction,
    so values decoded from it never depend on the caller keeping the
    original alive.
    """

    __slots__ = ("_data", "_pos")

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def startswith(self, prefix: bytes) -> bool:
        """Check the unread bytes against a prefix without consuming them."""
        return self._data.startswith(prefix, self._pos)

    def peek(self, n: int) -> bytes:
        """Return up to n unread bytes without consuming them."""
        return self._data[self._pos:self._pos + n]

    def read_fixed(self, n: int) -> bytes:
        """
        Consume exactly n bytes.

        Raises:
            UnexpectedEndOfInput: If fewer than n bytes remain
        """
        if n < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {n}")
        if n > self.remaining:
            raise UnexpectedEndOfInput(n, self.remaining, self._pos)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def read_count(self) -> int:
        """Consume a 4-byte little-endian length or element count."""
        return struct.unpack('<I', self.read_fixed(COUNT_SIZE))[0]

    def read_length_prefixed_string(self) -> str:
        """
        Consume a count-prefixed, null-terminated UTF-8 string.

        Returns:
            The text without its terminator

        Raises:
            UnexpectedEndOfInput: If the count or payload is truncated
            WrongStringTermination: If the last payload byte is not 0
            NonUtf8Payload: If the payload is not valid UTF-8
        """
        start = self._pos
        size = self.read_count()
        payload = self.read_fixed(size)
        if size == 0 or payload[-1] != 0:
            raise WrongStringTermination(size, start)
        try:
            text = payload[:-1].decode('utf-8')
        except UnicodeDecodeError as e:
            raise NonUtf8Payload(f"String payload is not UTF-8: {e}", start) from e
        logger.debug(f"string @{start}: {text!r}")
        return text

    def peek_count(self) -> Optional[int]:
        """Return the next count field without consuming it, or None if truncated."""
        head = self.peek(COUNT_SIZE)
        if len(head) < COUNT_SIZE:
            return None
        return struct.unpack('<I', head)[0]

    def peek_terminated_length(self) -> int:
        """
        Measure the null-terminated run that follows the next count field.

        Returns:
            Run length including the terminator, or -1 if no terminator
            exists before the end of the buffer. The cursor does not move.
        """
        body = self._pos + COUNT_SIZE
        if body > len(self._data):
            return -1
        nul = self._data.find(b'\x00', body)
        if nul < 0:
            return -1
        return nul - body + 1

    def read_raw_numeric(self, kind: RawKind, byteswap: bool) -> Union[int, float]:
        """
        Consume one raw 4-byte slot and interpret it as ``kind``.

        Args:
            kind: Logical type of the field
            byteswap: True when the file was written big-endian

        Returns:
            Python int (truncated to the logical width) or float
        """
        code, mask = _RAW_LAYOUT[kind]
        slot = self.read_fixed(RAW_SLOT_SIZE)
        dtype = np.dtype(('>' if byteswap else '<') + code)
        value = np.frombuffer(slot, dtype=dtype)[0].item()
        if mask is not None:
            value &= mask
        return value
