#!/usr/bin/env python3
"""
flitevox: Value Dispatcher
==========================

The Decoder is the single decode surface for CST voice data. Each semantic
request (boolean, text integer, raw numeric, string, sequence, tuple,
record, map, enum) is routed to the sub-encoding the format uses for it:

- Text mode: booleans, strings, text integers and names. The header gate
  is validated first.
- Raw mode: i32/u8/u16/u32/f32 in 4-byte slots, byte order taken from the
  already-validated header.
- Compound: sequences carry an inline count, tuples and records take their
  arity from the caller's shape, maps run to the end of the input.

Example:
    >>> from flitevox import from_bytes
    >>> from_bytes(data, (bool, str, str))
    (False, 'lang', 'eng')

License: MIT
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from .cursor import COUNT_SIZE, ByteCursor, RawKind
from .gate import HeaderGate
from .schema import ShapeRegistry
from .errors import (
    CustomDecodeError,
    DeclaredSizeMismatch,
    IntegerTextParseFailure,
    TrailingBytesAfterTopLevelValue,
    UnexpectedFieldName,
)

logger = logging.getLogger(__name__)

BOOL_DECLARED_SIZE = 1
TEXT_UINT_WIDTHS = (8, 16, 32, 64, 128)

_DECIMAL_LITERAL = re.compile(r'\+?[0-9]+\Z')


@dataclass
class DecoderOptions:
    """
    Decode policy.

    Attributes:
        verify_field_names: Require each record field name in the stream to
            match the declared name. False selects the legacy positional
            convention: names are consumed but mismatches are only logged.
        strict_trailing_bytes: Fail if input remains after the top-level value.
        max_sequence_length: Upper bound for inline element counts.
    """
    verify_field_names: bool = True
    strict_trailing_bytes: bool = False
    max_sequence_length: int = 10_000_000


class Decoder:
    """
    Capability interface used by shapes and hand-written catalog decoders.

    One Decoder decodes one buffer; its position and byte order are private
    and never shared.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview],
                 options: Optional[DecoderOptions] = None):
        self.options = options if options is not None else DecoderOptions()
        self.cursor = ByteCursor(data)
        self.gate = HeaderGate(self.cursor)

    @property
    def position(self) -> int:
        return self.cursor.position

    def validate_header(self) -> None:
        self.gate.validate()

    # ------------------------------------------------------------------
    # Text mode
    # ------------------------------------------------------------------

    def decode_bool(self) -> bool:
        """
        Decode a text-mode boolean.

        Wire: count (must be 1), one data byte, one terminator byte.
        """
        self.gate.validate()
        start = self.cursor.position
        size = self.cursor.read_count()
        if size != BOOL_DECLARED_SIZE:
            raise DeclaredSizeMismatch(BOOL_DECLARED_SIZE, size, start)
        payload = self.cursor.read_fixed(BOOL_DECLARED_SIZE + 1)
        return payload[0] != 0

    def decode_string(self) -> str:
        self.gate.validate()
        return self.cursor.read_length_prefixed_string()

    def decode_text_uint(self, bits: int = 32) -> int:
        """
        Decode an unsigned integer stored as decimal ASCII text.

        Args:
            bits: Width of the target integer (8, 16, 32, 64 or 128)

        Raises:
            DeclaredSizeMismatch: If the digit run and the length prefix disagree
            IntegerTextParseFailure: If the text is not a decimal that fits
        """
        if bits not in TEXT_UINT_WIDTHS:
            raise ValueError(f"Unsupported unsigned width: {bits}")
        self.gate.validate()

        start = self.cursor.position
        declared = self.cursor.peek_count()
        # A count running past the input is left to the read below (end of input)
        if declared is not None and declared + COUNT_SIZE <= self.cursor.remaining:
            measured = self.cursor.peek_terminated_length()
            if measured >= 0 and measured != declared:
                raise DeclaredSizeMismatch(measured, declared, start)

        text = self.cursor.read_length_prefixed_string()
        if not _DECIMAL_LITERAL.match(text):
            raise IntegerTextParseFailure(text, bits, start)
        value = int(text)
        if value >= 1 << bits:
            raise IntegerTextParseFailure(text, bits, start)
        return value

    def decode_enum(self, enum_cls: Type[Enum]) -> Enum:
        """
        Decode a variant name and resolve it against ``enum_cls``.

        Variants carry no payload in this format.
        """
        start = self.cursor.position
        name = self.decode_string()
        try:
            return enum_cls(name)
        except ValueError:
            expected = ', '.join(repr(member.value) for member in enum_cls)
            raise CustomDecodeError(
                f"Unknown {enum_cls.__name__} variant {name!r}, expected one of {expected}",
                start
            )

    # ------------------------------------------------------------------
    # Raw mode
    # ------------------------------------------------------------------

    def decode_raw_numeric(self, kind: RawKind) -> Union[int, float]:
        """Decode a raw 4-byte slot using the byte order fixed by the header."""
        if not self.gate.validated:
            raise CustomDecodeError(
                f"Raw {kind.value} field read before the header was validated",
                self.cursor.position
            )
        return self.cursor.read_raw_numeric(kind, self.gate.byteswap)

    def decode_raw_i32(self) -> int:
        return self.decode_raw_numeric(RawKind.I32)

    def decode_raw_f32(self) -> float:
        return self.decode_raw_numeric(RawKind.F32)

    # ------------------------------------------------------------------
    # Compound values
    # ------------------------------------------------------------------

    def decode_seq(self, element) -> List[Any]:
        """Decode a dynamic sequence: inline 4-byte count, then the elements."""
        start = self.cursor.position
        count = self.cursor.read_count()
        logger.debug(f"sequence @{start}: {count} x {element!r}")
        return self.decode_array(element, count, start)

    def decode_array(self, element, count: int, offset: Optional[int] = None) -> List[Any]:
        """
        Decode exactly ``count`` elements whose count is already known.

        Used directly for arrays sized by previously decoded data.
        """
        if count < 0:
            raise CustomDecodeError(f"Negative element count {count}", offset)
        if count > self.options.max_sequence_length:
            raise CustomDecodeError(
                f"Element count {count} exceeds maximum ({self.options.max_sequence_length})",
                self.cursor.position if offset is None else offset
            )
        return [element.decode(self) for _ in range(count)]

    def decode_tuple(self, elements: Sequence[Any]) -> Tuple[Any, ...]:
        """Decode len(elements) positional values; no count in the stream."""
        return tuple(element.decode(self) for element in elements)

    def decode_record(self, fields: Sequence[Tuple[str, Any]]) -> Dict[str, Any]:
        """
        Decode declared fields, each as a name string followed by its value.

        Raises:
            UnexpectedFieldName: If a name differs from the declared one
                (only when ``verify_field_names`` is set)
        """
        values: Dict[str, Any] = {}
        for name, shape in fields:
            start = self.cursor.position
            found = self.decode_string()
            if found != name:
                if self.options.verify_field_names:
                    raise UnexpectedFieldName(name, found, start)
                logger.warning(
                    f"Field {name!r} written as {found!r} at offset {start}; "
                    f"decoding positionally"
                )
            values[name] = shape.decode(self)
        return values

    def decode_map(self, key, value) -> Dict[Any, Any]:
        """Decode key/value pairs until the input is exhausted."""
        result: Dict[Any, Any] = {}
        while not self.cursor.at_end:
            start = self.cursor.position
            k = key.decode(self)
            result[k] = value.decode(self)
            if self.cursor.position == start:
                raise CustomDecodeError(
                    "Map entry consumed no input; key and value shapes must read bytes",
                    start
                )
        return result

    def decode_any(self) -> Any:
        raise CustomDecodeError(
            "CST voice data is not self-describing; decode against a known shape",
            self.cursor.position
        )

    def finish(self) -> None:
        """Apply the trailing-bytes policy after the top-level value."""
        remaining = self.cursor.remaining
        if remaining and self.options.strict_trailing_bytes:
            raise TrailingBytesAfterTopLevelValue(remaining, self.cursor.position)
        if remaining:
            logger.debug(f"{remaining} bytes left after top-level value")


def from_bytes(data: Union[bytes, bytearray, memoryview], target: Any,
               options: Optional[DecoderOptions] = None) -> Any:
    """
    Decode one top-level value from a CST voice buffer.

    Args:
        data: Complete buffer, starting with the file signature
        target: Shape, registered Python type, Enum subclass, or tuple of those
        options: Decode policy (defaults to DecoderOptions())

    Returns:
        The decoded value

    Raises:
        DecodeError: On any malformed input
    """
    shape = ShapeRegistry.resolve(target)
    decoder = Decoder(data, options)
    decoder.validate_header()
    value = shape.decode(decoder)
    decoder.finish()
    return value
