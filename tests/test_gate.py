#!/usr/bin/env python3
"""
flitevox Header Gate Test Suite
===============================

Tests for signature validation and byte order detection.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from flitevox.cursor import ByteCursor
from flitevox.gate import HeaderGate, ByteOrder, CST_FLITE_HEADER
from flitevox.errors import InvalidHeaderMagic, UnexpectedEndOfInput

from wire_helpers import preamble, SIGNATURE


class TestHeaderGate:
    """Test HeaderGate validation"""

    def test_signature_constant(self):
        """Test the signature is the 25-byte clustergen marker"""
        assert CST_FLITE_HEADER == SIGNATURE
        assert len(CST_FLITE_HEADER) == 25

    def test_native_marker(self):
        """Test marker 1 selects native (little-endian) order"""
        cursor = ByteCursor(preamble(1) + b'rest')
        gate = HeaderGate(cursor)
        assert gate.byte_order is ByteOrder.UNSET
        gate.validate()
        assert gate.byte_order is ByteOrder.NATIVE
        assert not gate.byteswap
        assert cursor.position == 30

    def test_swapped_marker(self):
        """Test any other marker value selects swapped order"""
        gate = HeaderGate(ByteCursor(preamble(0x01000000)))
        gate.validate()
        assert gate.byte_order is ByteOrder.SWAPPED
        assert gate.byteswap

    def test_idempotent(self):
        """Test that repeated validation consumes nothing more"""
        cursor = ByteCursor(preamble(1) + preamble(1))
        gate = HeaderGate(cursor)
        gate.validate()
        position = cursor.position
        gate.validate()
        gate.validate()
        assert cursor.position == position
        assert gate.validated

    def test_invalid_magic(self):
        """Test that a wrong signature is rejected"""
        data = b'CMU_FLITE_CG_VOXDATA-v1.0\x00\x01\x00\x00\x00'
        gate = HeaderGate(ByteCursor(data))
        with pytest.raises(InvalidHeaderMagic, match="Invalid CST voice header"):
            gate.validate()
        assert not gate.validated

    def test_missing_separator(self):
        """Test that the signature must be followed by a null byte"""
        gate = HeaderGate(ByteCursor(SIGNATURE + b'X\x01\x00\x00\x00'))
        with pytest.raises(InvalidHeaderMagic):
            gate.validate()

    def test_empty_buffer(self):
        gate = HeaderGate(ByteCursor(b''))
        with pytest.raises(InvalidHeaderMagic):
            gate.validate()

    def test_truncated_marker(self):
        """Test that a missing endianness marker is an end-of-input error"""
        gate = HeaderGate(ByteCursor(SIGNATURE + b'\x00\x01'))
        with pytest.raises(UnexpectedEndOfInput):
            gate.validate()
