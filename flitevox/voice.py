#!/usr/bin/env python3
"""
flitevox: Voice Catalog
=======================

Typed targets for the leading sections of a flite clustergen voice
(``.flitevox``) and the orchestrator that decodes them.

File layout:
    - signature, separator, endianness marker (see gate.py)
    - features: name/value text pairs, closed by 'end_of_features'
    - voice name
    - body: db_types, num_types, sample_rate, f0_mean, f0_stddev,
      then num_f0_models F0 trees

The header is decoded first and handed to the body decode, which needs
``num_f0_models`` to know how many F0 trees follow.

License: MIT
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .contextual import decode_contextual_array, decode_two_phase
from .cstval import CST_VAL, CstVal
from .decoder import Decoder, DecoderOptions
from .schema import (
    Custom,
    EnumOf,
    Record,
    SeqOf,
    ShapeRegistry,
    TupleOf,
    STRING,
    TEXT_U32,
    RAW_U8,
    RAW_U16,
    RAW_I32,
    RAW_F32,
)

logger = logging.getLogger(__name__)


class Gender(Enum):
    """Speaker gender as written in the features block"""
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        # Older voices write 'none' for an unspecified gender
        if value == "none":
            return cls.UNKNOWN
        return None


class EndOfFeatures(Enum):
    """Marker closing the features block"""
    END_OF_FEATURES = "end_of_features"


@dataclass(frozen=True)
class Features:
    """Voice metadata from the features block"""
    language: str
    country: str
    variant: str
    age: int
    gender: Gender
    build_date: str
    description: str
    eng_shared: int
    copyright: str
    num_dur_models: int
    num_param_models: int
    model_shape: int
    num_f0_models: int
    end_of_features: EndOfFeatures = EndOfFeatures.END_OF_FEATURES


@dataclass(frozen=True)
class Header:
    features: Features
    name: str


@dataclass(frozen=True)
class TreeNode:
    """One CART node: feature index, operator, subtree index, comparison value"""
    feature: int
    op: int
    subtree: int
    value: CstVal


@dataclass(frozen=True)
class Tree:
    node: TreeNode
    feature_names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Body:
    """
    First body section of a clustergen voice.

    ``f0_trees`` holds one F0 tree (a list of Tree) per F0 model; its length
    always equals the header's ``num_f0_models``.
    """
    db_types: List[str]
    num_types: int
    sample_rate: int
    f0_mean: float
    f0_stddev: float
    f0_trees: List[List[Tree]] = field(default_factory=list)


@dataclass(frozen=True)
class Voice:
    header: Header
    body: Body

    @property
    def name(self) -> str:
        return self.header.name


# ============================================================================
# Shapes
# ============================================================================

FEATURE_FIELDS = (
    ('language', STRING),
    ('country', STRING),
    ('variant', STRING),
    ('age', TEXT_U32),
    ('gender', EnumOf(Gender)),
    ('build_date', STRING),
    ('description', STRING),
    ('eng_shared', TEXT_U32),
    ('copyright', STRING),
    ('num_dur_models', TEXT_U32),
    ('num_param_models', TEXT_U32),
    ('model_shape', TEXT_U32),
    ('num_f0_models', TEXT_U32),
)

FEATURES_RECORD = Record(FEATURE_FIELDS)
END_OF_FEATURES = EnumOf(EndOfFeatures)


def decode_features(decoder) -> Features:
    """Decode the features record and its closing marker."""
    values = FEATURES_RECORD.decode(decoder)
    marker = END_OF_FEATURES.decode(decoder)
    return Features(end_of_features=marker, **values)


FEATURES_SHAPE = Custom(decode_features, name="Features")
HEADER_SHAPE = TupleOf(FEATURES_SHAPE, STRING, factory=Header)

TREE_NODE_SHAPE = TupleOf(RAW_U8, RAW_U8, RAW_U16, CST_VAL, factory=TreeNode)
TREE_SHAPE = TupleOf(TREE_NODE_SHAPE, SeqOf(STRING), factory=Tree)
F0_TREE_SHAPE = SeqOf(TREE_SHAPE)

# Body fields before the F0 trees are positional, no names in the stream
BODY_PREFIX_SHAPE = TupleOf(SeqOf(STRING), RAW_I32, RAW_I32, RAW_F32, RAW_F32)

ShapeRegistry.register(Features, FEATURES_SHAPE)
ShapeRegistry.register(Header, HEADER_SHAPE)
ShapeRegistry.register(TreeNode, TREE_NODE_SHAPE)
ShapeRegistry.register(Tree, TREE_SHAPE)
ShapeRegistry.register(CstVal, CST_VAL)


# ============================================================================
# Orchestration
# ============================================================================

def decode_header(decoder: Decoder) -> Header:
    decoder.validate_header()
    return HEADER_SHAPE.decode(decoder)


def decode_body(decoder: Decoder, header: Header) -> Body:
    """
    Decode the body section using the already-decoded header.

    Args:
        decoder: Decoder positioned right after the header
        header: Decoded header, read only

    Returns:
        Body with exactly ``header.features.num_f0_models`` F0 trees
    """
    db_types, num_types, sample_rate, f0_mean, f0_stddev = BODY_PREFIX_SHAPE.decode(decoder)
    f0_trees = decode_contextual_array(
        decoder, F0_TREE_SHAPE, header.features.num_f0_models, source="num_f0_models"
    )
    return Body(
        db_types=db_types,
        num_types=num_types,
        sample_rate=sample_rate,
        f0_mean=f0_mean,
        f0_stddev=f0_stddev,
        f0_trees=f0_trees,
    )


def decode_voice(data: Union[bytes, bytearray, memoryview],
                 options: Optional[DecoderOptions] = None) -> Voice:
    """
    Decode header and body from a complete voice buffer.

    Args:
        data: Voice file contents
        options: Decode policy

    Returns:
        Decoded Voice

    Raises:
        DecodeError: On any malformed input; no partial result is returned
    """
    decoder = Decoder(data, options)
    decoder.validate_header()
    header, body = decode_two_phase(decoder, HEADER_SHAPE, decode_body)
    decoder.finish()
    logger.info(
        f"Decoded voice '{header.name}': {len(body.db_types)} db types, "
        f"{len(body.f0_trees)} F0 trees"
    )
    return Voice(header=header, body=body)


# Soft limit for warning about large files (256MB)
LARGE_FILE_WARNING_SIZE = 256 * 1024 * 1024


def read_voice_file(path: Union[Path, str],
                    options: Optional[DecoderOptions] = None) -> Voice:
    """
    Read a .flitevox file and decode it.

    Raises:
        FileNotFoundError: If the path doesn't exist
        DecodeError: If the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    file_size = path.stat().st_size
    if file_size > LARGE_FILE_WARNING_SIZE:
        logger.warning(
            f"Large voice file ({file_size / (1024**2):.1f} MB). "
            f"The whole file is held in memory while decoding."
        )

    return decode_voice(path.read_bytes(), options)


def voice_info(voice: Voice) -> Dict[str, Any]:
    """Flat summary of a decoded voice for display."""
    features = voice.header.features
    body = voice.body
    return {
        'name': voice.header.name,
        'language': features.language,
        'country': features.country,
        'variant': features.variant,
        'age': features.age,
        'gender': features.gender.value,
        'build_date': features.build_date,
        'description': features.description,
        'eng_shared': features.eng_shared,
        'copyright': features.copyright,
        'num_dur_models': features.num_dur_models,
        'num_param_models': features.num_param_models,
        'model_shape': features.model_shape,
        'num_f0_models': features.num_f0_models,
        'db_types': len(body.db_types),
        'num_types': body.num_types,
        'sample_rate': body.sample_rate,
        'f0_mean': body.f0_mean,
        'f0_stddev': body.f0_stddev,
        'f0_tree_sizes': [len(tree) for tree in body.f0_trees],
    }
