#!/usr/bin/env python3
"""
flitevox Byte Cursor Test Suite
===============================

Tests for positional reads, string framing and raw 4-byte slots.
"""

import pytest
import struct
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from flitevox.cursor import ByteCursor, RawKind, RAW_SLOT_SIZE
from flitevox.errors import (
    DecodeError,
    UnexpectedEndOfInput,
    NonUtf8Payload,
    WrongStringTermination,
)


class TestReadFixed:
    """Test fixed-size reads"""

    def test_reads_and_advances(self):
        """Test that read_fixed returns bytes and moves forward"""
        cursor = ByteCursor(b'abcdef')
        assert cursor.read_fixed(2) == b'ab'
        assert cursor.position == 2
        assert cursor.remaining == 4
        assert cursor.read_fixed(4) == b'cdef'
        assert cursor.at_end

    def test_short_read_raises(self):
        """Test that reading past the end fails without moving"""
        cursor = ByteCursor(b'abc')
        with pytest.raises(UnexpectedEndOfInput) as exc_info:
            cursor.read_fixed(4)
        assert exc_info.value.needed == 4
        assert exc_info.value.available == 3
        assert cursor.position == 0

    def test_errors_are_value_errors(self):
        """Test that decode errors stay catchable as ValueError"""
        cursor = ByteCursor(b'')
        with pytest.raises(ValueError, match="Unexpected end of input"):
            cursor.read_fixed(1)

    def test_buffer_is_copied(self):
        """Test that later mutation of the source does not affect the cursor"""
        source = bytearray(b'\x01\x00\x00\x00')
        cursor = ByteCursor(source)
        source[0] = 9
        assert cursor.read_count() == 1


class TestReadCount:
    """Test 4-byte little-endian counts"""

    def test_little_endian(self):
        cursor = ByteCursor(struct.pack('<I', 0x01020304))
        assert cursor.read_count() == 0x01020304

    def test_truncated_count(self):
        cursor = ByteCursor(b'\x01\x00')
        with pytest.raises(UnexpectedEndOfInput):
            cursor.read_count()

    def test_peek_count_does_not_move(self):
        cursor = ByteCursor(b'\x05\x00\x00\x00')
        assert cursor.peek_count() == 5
        assert cursor.position == 0
        assert ByteCursor(b'\x05').peek_count() is None


class TestReadString:
    """Test length-prefixed strings"""

    def test_basic_string(self):
        """Test that the terminator is counted and stripped"""
        cursor = ByteCursor(b'\x09\x00\x00\x00language\x00')
        assert cursor.read_length_prefixed_string() == 'language'
        assert cursor.at_end

    def test_empty_string(self):
        """Test a string holding only its terminator"""
        cursor = ByteCursor(b'\x01\x00\x00\x00\x00')
        assert cursor.read_length_prefixed_string() == ''

    def test_utf8_payload(self):
        payload = 'café'.encode('utf-8') + b'\x00'
        cursor = ByteCursor(struct.pack('<I', len(payload)) + payload)
        assert cursor.read_length_prefixed_string() == 'café'

    def test_missing_terminator(self):
        """Test that a nonzero last byte is rejected with its size"""
        cursor = ByteCursor(b'\x03\x00\x00\x00abc')
        with pytest.raises(WrongStringTermination) as exc_info:
            cursor.read_length_prefixed_string()
        assert exc_info.value.size == 3

    def test_zero_length(self):
        """Test that a zero count has no room for a terminator"""
        cursor = ByteCursor(b'\x00\x00\x00\x00')
        with pytest.raises(WrongStringTermination):
            cursor.read_length_prefixed_string()

    def test_non_utf8(self):
        cursor = ByteCursor(b'\x03\x00\x00\x00\xff\xfe\x00')
        with pytest.raises(NonUtf8Payload):
            cursor.read_length_prefixed_string()

    def test_truncated_payload(self):
        cursor = ByteCursor(b'\x09\x00\x00\x00lang')
        with pytest.raises(UnexpectedEndOfInput):
            cursor.read_length_prefixed_string()

    def test_peek_terminated_length(self):
        """Test measuring the terminated run after a count"""
        cursor = ByteCursor(b'\x02\x00\x00\x00255\x00')
        assert cursor.peek_terminated_length() == 4
        assert cursor.position == 0
        assert ByteCursor(b'\x02\x00\x00\x00ab').peek_terminated_length() == -1


class TestReadRawNumeric:
    """Test raw 4-byte slot interpretation"""

    def test_i32_native(self):
        cursor = ByteCursor(struct.pack('<i', -2))
        assert cursor.read_raw_numeric(RawKind.I32, byteswap=False) == -2

    def test_i32_swapped(self):
        cursor = ByteCursor(struct.pack('>i', 0x3e80))
        assert cursor.read_raw_numeric(RawKind.I32, byteswap=True) == 0x3e80

    def test_f32(self):
        """Test float slot matches the little-endian bit pattern"""
        cursor = ByteCursor(bytes([0, 0, 0x2c, 0x43]))
        value = cursor.read_raw_numeric(RawKind.F32, byteswap=False)
        assert isinstance(value, float)
        assert value == 172.0

    def test_f32_swapped(self):
        cursor = ByteCursor(struct.pack('>f', 27.0))
        assert cursor.read_raw_numeric(RawKind.F32, byteswap=True) == 27.0

    def test_u8_consumes_full_slot(self):
        """Test that narrow fields still consume 4 bytes and are truncated"""
        cursor = ByteCursor(struct.pack('<I', 0x1234) + b'\xff')
        assert cursor.read_raw_numeric(RawKind.U8, byteswap=False) == 0x34
        assert cursor.position == RAW_SLOT_SIZE

    def test_u16_truncation(self):
        cursor = ByteCursor(struct.pack('<I', 0x00ABCDEF))
        assert cursor.read_raw_numeric(RawKind.U16, byteswap=False) == 0xCDEF

    def test_u16_swapped(self):
        cursor = ByteCursor(struct.pack('>I', 7))
        assert cursor.read_raw_numeric(RawKind.U16, byteswap=True) == 7

    def test_returns_python_int(self):
        cursor = ByteCursor(struct.pack('<I', 0xFFFFFFFF))
        value = cursor.read_raw_numeric(RawKind.U32, byteswap=False)
        assert type(value) is int
        assert value == 0xFFFFFFFF

    def test_truncated_slot(self):
        cursor = ByteCursor(b'\x01\x00')
        with pytest.raises(DecodeError):
            cursor.read_raw_numeric(RawKind.U8, byteswap=False)
