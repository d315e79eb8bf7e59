#!/usr/bin/env python3
"""
flitevox: Header Gate
=====================

One-time validation of the CST voice signature and endianness marker.

Binary layout:
    - signature: 25 bytes ('CMU_FLITE_CG_VOXDATA-v2.0')
    - separator: 1 byte (0x00)
    - endianness marker: 4 bytes, little-endian count (1 = native)

License: MIT
"""

import logging
from enum import Enum

from .cursor import ByteCursor
from .errors import InvalidHeaderMagic

logger = logging.getLogger(__name__)

CST_FLITE_HEADER = b'CMU_FLITE_CG_VOXDATA-v2.0'
HEADER_SEPARATOR = b'\x00'
NATIVE_ENDIAN_MARKER = 1


class ByteOrder(Enum):
    """Byte order of raw numeric fields, fixed once per decode"""
    UNSET = "unset"
    NATIVE = "native"    # little-endian
    SWAPPED = "swapped"  # big-endian


class HeaderGate:
    """
    Validates the voice file signature exactly once per decode.

    The first ``validate()`` consumes the signature, separator and marker
    and records the byte order; later calls return immediately.
    """

    def __init__(self, cursor: ByteCursor):
        self._cursor = cursor
        self._byte_order = ByteOrder.UNSET

    @property
    def byte_order(self) -> ByteOrder:
        return self._byte_order

    @property
    def validated(self) -> bool:
        return self._byte_order is not ByteOrder.UNSET

    @property
    def byteswap(self) -> bool:
        return self._byte_order is ByteOrder.SWAPPED

    def validate(self) -> None:
        """
        Check and consume the file signature on first use.

        Raises:
            InvalidHeaderMagic: If the signature or separator is missing
            UnexpectedEndOfInput: If the endianness marker is truncated
        """
        if self.validated:
            return

        cursor = self._cursor
        start = cursor.position
        if not cursor.startswith(CST_FLITE_HEADER + HEADER_SEPARATOR):
            raise InvalidHeaderMagic(cursor.peek(len(CST_FLITE_HEADER)), start)
        cursor.read_fixed(len(CST_FLITE_HEADER) + len(HEADER_SEPARATOR))

        marker = cursor.read_count()
        if marker == NATIVE_ENDIAN_MARKER:
            self._byte_order = ByteOrder.NATIVE
        else:
            self._byte_order = ByteOrder.SWAPPED
            logger.warning(
                f"Endianness marker is {marker:#x}; reading raw fields as big-endian"
            )
        logger.debug(f"Header validated, byte order: {self._byte_order.value}")
