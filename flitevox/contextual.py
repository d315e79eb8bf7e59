#!/usr/bin/env python3
"""
flitevox: Contextual Arrays
===========================

Some arrays in a voice file have no inline count: their length comes from
a value decoded earlier (the body's F0 trees are sized by the header's
``num_f0_models``). Such values are always decoded in two explicit phases:
decode the dependency, then pass it to the dependent decode as an argument.

License: MIT
"""

import logging
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)


def decode_contextual_array(decoder, element, count: int, source: str = "context") -> List[Any]:
    """
    Decode an array whose length was taken from already-decoded data.

    Args:
        decoder: Active Decoder
        element: Shape of each element
        count: Number of elements, supplied by the caller
        source: Where the count came from (for logging)

    Returns:
        List of exactly ``count`` decoded elements; nothing is consumed
        when count is 0
    """
    logger.debug(f"contextual array @{decoder.position}: {count} elements sized by {source}")
    return decoder.decode_array(element, count, decoder.position)


def decode_two_phase(decoder, dependency, dependent: Callable[[Any, Any], Any]) -> Tuple[Any, Any]:
    """
    Decode a value, then a second value whose shape depends on the first.

    Args:
        decoder: Active Decoder
        dependency: Shape of the value decoded first
        dependent: Callable ``(decoder, first_value) -> second_value``; it must
            treat the first value as read-only

    Returns:
        ``(first_value, second_value)``
    """
    context = dependency.decode(decoder)
    return context, dependent(decoder, context)
