"""
Statistics ops.

Each statistic has a generic implementation over any iterable of real values
(element types or plain numbers) and a faster one for ArrayImg, which the
matcher prefers for images because it declares the more specific input type.
"""

import logging
from collections.abc import Iterable
from typing import Any

import numpy as np

from openops.data.img import ArrayImg
from openops.data.types import DoubleType, NumericType, RealType
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.special_op import AbstractUnaryHybridCF

logger = logging.getLogger(__name__)


def real_values(values: Any) -> np.ndarray:
    """Flatten an iterable of element types or numbers into a float64 array."""
    if isinstance(values, (np.ndarray, ArrayImg)):
        return np.asarray(values, dtype=np.float64).ravel()
    return np.fromiter(
        (v.get_real_double() if isinstance(v, NumericType) else float(v) for v in values),
        dtype=np.float64,
    )


def _mean(values: np.ndarray) -> float:
    if values.size == 0:
        return float("nan")
    return float(values.mean())


def _std_dev(values: np.ndarray) -> float:
    # Sample standard deviation; fewer than two values have no spread
    if values.size < 2:
        return 0.0
    return float(values.std(ddof=1))


class _RealStatistic(AbstractUnaryHybridCF):

    def create_output(self, input: Any) -> RealType:
        return DoubleType()


@plugin(Ops.Stats.Mean, inputs=(Iterable,), output=RealType)
class IterableMean(_RealStatistic):
    """Arithmetic mean of an iterable."""

    def compute1(self, input: Any, output: RealType) -> None:
        output.set_real(_mean(real_values(input)))


@plugin(Ops.Stats.Mean, inputs=(ArrayImg,), output=RealType)
class ImgMean(_RealStatistic):

    def compute1(self, input: ArrayImg, output: RealType) -> None:
        output.set_real(_mean(input.data.astype(np.float64, copy=False).ravel()))


@plugin(Ops.Stats.StdDev, inputs=(Iterable,), output=RealType)
class IterableStdDev(_RealStatistic):
    """Sample standard deviation of an iterable."""

    def compute1(self, input: Any, output: RealType) -> None:
        output.set_real(_std_dev(real_values(input)))


@plugin(Ops.Stats.StdDev, inputs=(ArrayImg,), output=RealType)
class ImgStdDev(_RealStatistic):

    def compute1(self, input: ArrayImg, output: RealType) -> None:
        output.set_real(_std_dev(input.data.astype(np.float64, copy=False).ravel()))
