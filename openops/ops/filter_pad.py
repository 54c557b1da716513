"""
Padding intervals for FFT based filters.

Given an input interval and the dimensions it must be padded to, compute the
interval to extend the input over. Centered padding splits the extra extent
between both sides; origin padding keeps the input's minimum and grows the
maximum only.
"""

import logging
import math
from collections.abc import Sequence
from typing import Any, List

from openops.constants.constants import Priority
from openops.data.img import ArrayImg, Interval
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.special_op import AbstractBinaryFunctionOp

logger = logging.getLogger(__name__)


def _check_dimensions(input: Any, padded_dimensions: Sequence) -> List[int]:
    padded = [int(d) for d in padded_dimensions]
    if len(padded) != input.num_dimensions():
        raise ValueError(
            f"Padded dimensions {tuple(padded)} do not match a {input.num_dimensions()}-d input"
        )
    return padded


@plugin(Ops.Filter.PaddingIntervalCentered, priority=Priority.HIGH,
        inputs=(ArrayImg, Sequence), output=Interval)
class PaddingIntervalCentered(AbstractBinaryFunctionOp):
    """
    Interval padding the input symmetrically to the given dimensions.

    When the extra extent along an axis is odd, the maximum side gets the
    additional element. A padded dimension smaller than the input's shrinks
    the interval instead.
    """

    def calculate2(self, input: Any, padded_dimensions: Sequence) -> Interval:
        padded = _check_dimensions(input, padded_dimensions)
        minimum, maximum = [], []
        for d, size in enumerate(padded):
            difference = size - input.dimension(d)
            half = math.trunc(difference / 2)
            minimum.append(input.min(d) - half)
            maximum.append(input.max(d) + half + (difference % 2))
        interval = Interval(tuple(minimum), tuple(maximum))
        logger.debug("Centered padding of %s to %s: %s", input.dimensions(), tuple(padded), interval)
        return interval


@plugin(Ops.Filter.PaddingIntervalOrigin, inputs=(ArrayImg, Sequence), output=Interval)
class PaddingIntervalOrigin(AbstractBinaryFunctionOp):
    """Interval padding the input to the given dimensions, anchored at its minimum."""

    def calculate2(self, input: Any, padded_dimensions: Sequence) -> Interval:
        padded = _check_dimensions(input, padded_dimensions)
        minimum = tuple(input.min(d) for d in range(len(padded)))
        maximum = tuple(lo + size - 1 for lo, size in zip(minimum, padded))
        return Interval(minimum, maximum)
