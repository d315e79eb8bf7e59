"""
flitevox: CST Voice File Decoder
================================

Decode flite clustergen voice files (``.flitevox``, the CST voice database
format) into Python values.

The format mixes length-prefixed text fields, raw 4-byte binary fields,
tagged values and arrays sized by earlier data, and is not
self-describing: every decode is driven by a shape the caller knows.

Example:
    >>> from flitevox import decode_voice
    >>> voice = decode_voice(open('cmu_us_slt.flitevox', 'rb').read())
    >>> voice.header.features.language
    'eng'

    >>> from flitevox import from_bytes
    >>> from flitevox.schema import Record, STRING
    >>> from_bytes(data, Record([('language', STRING)]))
    {'language': 'eng'}

License: MIT
"""

from .errors import (
    DecodeError,
    UnexpectedEndOfInput,
    InvalidHeaderMagic,
    DeclaredSizeMismatch,
    NonUtf8Payload,
    IntegerTextParseFailure,
    WrongStringTermination,
    UnexpectedFieldName,
    TrailingBytesAfterTopLevelValue,
    CustomDecodeError,
)

from .cursor import ByteCursor, RawKind, RAW_SLOT_SIZE
from .gate import HeaderGate, ByteOrder, CST_FLITE_HEADER
from .decoder import Decoder, DecoderOptions, from_bytes
from .cstval import CstVal, CstValType, decode_cst_val
from .contextual import decode_contextual_array, decode_two_phase

from .voice import (
    Gender,
    EndOfFeatures,
    Features,
    Header,
    TreeNode,
    Tree,
    Body,
    Voice,
    decode_header,
    decode_body,
    decode_voice,
    read_voice_file,
    voice_info,
)

__all__ = [
    # Errors
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

    # Core
    'ByteCursor',
    'RawKind',
    'RAW_SLOT_SIZE',
    'HeaderGate',
    'ByteOrder',
    'CST_FLITE_HEADER',
    'Decoder',
    'DecoderOptions',
    'from_bytes',
    'CstVal',
    'CstValType',
    'decode_cst_val',
    'decode_contextual_array',
    'decode_two_phase',

    # Voice catalog
    'Gender',
    'EndOfFeatures',
    'Features',
    'Header',
    'TreeNode',
    'Tree',
    'Body',
    'Voice',
    'decode_header',
    'decode_body',
    'decode_voice',
    'read_voice_file',
    'voice_info',
]

__version__ = '0.2.0'
__license__ = 'MIT'
