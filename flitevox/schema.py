#!/usr/bin/env python3
"""
flitevox: Target Shapes
=======================

A shape describes what the caller expects at the current position of the
stream and drives the Decoder through its capability interface. The CST
format is not self-describing, so every value is decoded against a shape
known in advance.

Example:
    >>> from flitevox import from_bytes
    >>> from flitevox.schema import Record, STRING
    >>> from_bytes(data, Record([('language', STRING)]))
    {'language': 'eng'}

License: MIT
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

from .cursor import RawKind


class Shape(ABC):
    """Base class for decode targets"""

    @abstractmethod
    def decode(self, decoder) -> Any:
        """Decode one value of this shape from the decoder's stream"""
        pass


class Boolean(Shape):
    """Text-mode boolean (declared size 1, one data byte)"""

    def decode(self, decoder) -> bool:
        return decoder.decode_bool()

    def __repr__(self):
        return "Boolean()"


class Text(Shape):
    """Length-prefixed UTF-8 string"""

    def decode(self, decoder) -> str:
        return decoder.decode_string()

    def __repr__(self):
        return "Text()"


class TextUInt(Shape):
    """Unsigned integer written as decimal ASCII text"""

    def __init__(self, bits: int = 32):
        self.bits = bits

    def decode(self, decoder) -> int:
        return decoder.decode_text_uint(self.bits)

    def __repr__(self):
        return f"TextUInt({self.bits})"


class Raw(Shape):
    """Numeric field stored in a raw 4-byte slot"""

    def __init__(self, kind: RawKind):
        self.kind = kind

    def decode(self, decoder):
        return decoder.decode_raw_numeric(self.kind)

    def __repr__(self):
        return f"Raw({self.kind.name})"


class SeqOf(Shape):
    """Dynamic sequence with an inline element count"""

    def __init__(self, element: Shape):
        self.element = element

    def decode(self, decoder) -> list:
        return decoder.decode_seq(self.element)

    def __repr__(self):
        return f"SeqOf({self.element!r})"


class TupleOf(Shape):
    """
    Fixed-arity positional group; no count is read from the stream.

    Args:
        elements: Shape of each position
        factory: Optional callable receiving the values positionally
    """

    def __init__(self, *elements: Shape, factory: Optional[Callable[..., Any]] = None):
        self.elements = elements
        self.factory = factory

    def decode(self, decoder) -> Any:
        values = decoder.decode_tuple(self.elements)
        if self.factory is not None:
            return self.factory(*values)
        return values

    def __repr__(self):
        return f"TupleOf{self.elements!r}"


class Record(Shape):
    """
    Named fields, each written as a name string followed by its value.

    Args:
        fields: Ordered (name, shape) pairs
        factory: Optional callable receiving the values as keyword arguments
    """

    def __init__(self, fields: Sequence[Tuple[str, Shape]],
                 factory: Optional[Callable[..., Any]] = None):
        self.fields = tuple(fields)
        self.factory = factory

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def decode(self, decoder) -> Any:
        values = decoder.decode_record(self.fields)
        if self.factory is not None:
            return self.factory(**values)
        return values

    def __repr__(self):
        return f"Record({list(self.field_names)!r})"


class MapOf(Shape):
    """Key/value pairs read until the input is exhausted"""

    def __init__(self, key: Shape, value: Shape):
        self.key = key
        self.value = value

    def decode(self, decoder) -> Dict[Any, Any]:
        return decoder.decode_map(self.key, self.value)

    def __repr__(self):
        return f"MapOf({self.key!r}, {self.value!r})"


class EnumOf(Shape):
    """Enum resolved from a variant name string"""

    def __init__(self, enum_cls: Type[Enum]):
        self.enum_cls = enum_cls

    def decode(self, decoder) -> Enum:
        return decoder.decode_enum(self.enum_cls)

    def __repr__(self):
        return f"EnumOf({self.enum_cls.__name__})"


class AnyValue(Shape):
    """Unconstrained value; always rejected by the decoder"""

    def decode(self, decoder) -> Any:
        return decoder.decode_any()


class Custom(Shape):
    """Hand-written decode logic wrapped as a shape"""

    def __init__(self, decode_fn: Callable[[Any], Any], name: str = "custom"):
        self.decode_fn = decode_fn
        self.name = name

    def decode(self, decoder) -> Any:
        return self.decode_fn(decoder)

    def __repr__(self):
        return f"Custom({self.name})"


BOOL = Boolean()
STRING = Text()
TEXT_U8 = TextUInt(8)
TEXT_U16 = TextUInt(16)
TEXT_U32 = TextUInt(32)
TEXT_U64 = TextUInt(64)
TEXT_U128 = TextUInt(128)
RAW_U8 = Raw(RawKind.U8)
RAW_U16 = Raw(RawKind.U16)
RAW_U32 = Raw(RawKind.U32)
RAW_I32 = Raw(RawKind.I32)
RAW_F32 = Raw(RawKind.F32)
ANY = AnyValue()


# ============================================================================
# Shape Registry
# ============================================================================

class ShapeRegistry:
    """
    Maps Python types to default shapes so callers can write
    ``from_bytes(data, (bool, str, str))``.

    New target types are registered without touching the decoder.
    """
    _registry: Dict[type, Shape] = {}

    @classmethod
    def register(cls, target: type, shape: Shape) -> None:
        cls._registry[target] = shape

    @classmethod
    def resolve(cls, target: Any) -> Shape:
        """
        Turn a shape, registered type, Enum subclass or tuple of those
        into a Shape.

        Raises:
            TypeError: If no shape is known for the target
        """
        if isinstance(target, Shape):
            return target
        if isinstance(target, tuple):
            return TupleOf(*(cls.resolve(t) for t in target))
        if isinstance(target, type):
            if target in cls._registry:
                return cls._registry[target]
            if issubclass(target, Enum):
                return EnumOf(target)
        raise TypeError(f"No CST shape registered for {target!r}")

    @classmethod
    def register_defaults(cls):
        """Register shapes for builtin types"""
        cls._registry[bool] = BOOL
        cls._registry[str] = STRING
        cls._registry[int] = TEXT_U32
        cls._registry[float] = RAW_F32
        cls._registry[dict] = MapOf(STRING, STRING)


ShapeRegistry.register_defaults()
