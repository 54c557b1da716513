"""
Utility functions for type-compatibility checks.

Specificity is measured as the distance between a concrete argument type and
the type an op declares for that slot: 0 for an exact match, growing as the
declared type gets more general.
"""

import inspect
import logging
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


def type_distance(concrete: Optional[type], declared: Optional[type]) -> Optional[int]:
    """
    Distance from `concrete` up to `declared` in the type partial order.

    Args:
        concrete: The supplied type, or None for a wildcard
        declared: The declared slot type, or None for "anything"

    Returns:
        Number of MRO steps (0 = exact), or None if not assignable.
        Virtual subclasses (ABC registration) count as the broadest match.
    """
    if concrete is None:
        return 0
    if declared is None or declared is object:
        return len(concrete.__mro__) - 1
    if not issubclass(concrete, declared):
        return None
    mro = concrete.__mro__
    if declared in mro:
        return mro.index(declared)
    return len(mro)


def is_assignable(concrete: Optional[type], declared: Optional[type]) -> bool:
    return type_distance(concrete, declared) is not None


def concrete_type(value: Any) -> Optional[type]:
    """The class of a value, the value itself if it is a class, None for None."""
    if value is None:
        return None
    return value if inspect.isclass(value) else type(value)


def specificity(arg_types: Sequence[Optional[type]], declared: Sequence[Optional[type]]) -> Optional[int]:
    """
    Combined specificity score of supplied types against declared slot types.

    Returns:
        Negated total distance (higher is more specific), or None if any slot
        is incompatible or the counts differ
    """
    if len(arg_types) != len(declared):
        return None
    total = 0
    for concrete, slot in zip(arg_types, declared):
        distance = type_distance(concrete, slot)
        if distance is None:
            return None
        total += distance
    return -total
