#!/usr/bin/env python3
"""
flitevox: Tagged Values (CstVal)
================================

Decision-tree nodes carry a tagged value. The tag is a raw i32; the payload
that follows depends on it:

    tag 0  CONS        raw i32
    tag 1  INT         raw i32
    tag 3  FLOAT       raw f32
    tag 5  STRING      length-prefixed text (the one text-mode payload)
    tag 7  FIRST_FREE  raw i32
    other  OTHER       raw i32

License: MIT
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .schema import Custom


class CstValType(Enum):
    """CstVal payload kinds, valued by their wire tag"""
    CONS = 0
    INT = 1
    FLOAT = 3
    STRING = 5
    FIRST_FREE = 7
    OTHER = -1


@dataclass(frozen=True)
class CstVal:
    """A decoded tagged value; ``tag`` keeps the raw discriminant"""
    kind: CstValType
    value: Union[int, float, str]
    tag: int

    @classmethod
    def other(cls, tag: int, value: int) -> 'CstVal':
        return cls(CstValType.OTHER, value, tag)


def _kind_for_tag(tag: int) -> CstValType:
    try:
        return CstValType(tag)
    except ValueError:
        return CstValType.OTHER


def decode_cst_val(decoder) -> CstVal:
    """
    Decode one tagged value at the decoder's position.

    Unknown tags still consume exactly one raw i32 payload.

    Raises:
        UnexpectedEndOfInput: If the tag or payload is truncated
    """
    tag = decoder.decode_raw_i32()
    kind = _kind_for_tag(tag)

    if kind is CstValType.STRING:
        value = decoder.decode_string()
    elif kind is CstValType.FLOAT:
        value = decoder.decode_raw_f32()
    else:
        # CONS, INT, FIRST_FREE and unknown tags all carry an i32
        value = decoder.decode_raw_i32()

    return CstVal(kind, value, tag)


CST_VAL = Custom(decode_cst_val, name="CstVal")
