"""
Threshold ops.

Local thresholds compare every pixel with a statistic of its neighborhood.
The neighborhood walk is shared (LocalThreshold); the per-pixel decision is a
binary computer (neighborhood, center) -> BitType supplied by each method, so
the same method op can be reused wherever a neighborhood is at hand.

Global thresholds compute one threshold for the whole image.
"""

import logging
import math
from abc import abstractmethod
from typing import Any, Optional

import numpy as np
from skimage.filters import threshold_otsu

from openops.data.img import ArrayImg, equal_dimensions
from openops.data.types import BitType, DoubleType, RealType
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.helpers import Computers
from openops.special.special_op import (AbstractBinaryComputerOp, AbstractUnaryHybridCF,
                                        Contingent, independent_copy)

logger = logging.getLogger(__name__)

# numpy.pad modes accepted as out-of-bounds strategies
OUT_OF_BOUNDS_MODES = ("reflect", "symmetric", "edge", "constant", "wrap")


class LocalThresholdMethod(AbstractBinaryComputerOp):
    """Decides a single pixel: compute2(neighborhood, center, output)."""

    @abstractmethod
    def compute2(self, neighborhood: Any, center: RealType, output: BitType) -> None:
        pass


class LocalThreshold(AbstractUnaryHybridCF, Contingent):
    """
    Binarizes an image with a local threshold method.

    Args:
        radius: Half-width of the (hyper-)rectangular neighborhood
        out_of_bounds: How the neighborhood is extended past the image border
    """

    _method: Optional[LocalThresholdMethod] = None

    def __init__(self, radius: int = 1, out_of_bounds: str = "reflect"):
        if radius < 0:
            raise ValueError(f"Neighborhood radius must be non-negative, got {radius}")
        if out_of_bounds not in OUT_OF_BOUNDS_MODES:
            raise ValueError(f"Unknown out-of-bounds mode '{out_of_bounds}', "
                             f"expected one of {OUT_OF_BOUNDS_MODES}")
        self.radius = radius
        self.out_of_bounds = out_of_bounds

    @abstractmethod
    def method_op(self) -> LocalThresholdMethod:
        """Create the per-pixel decision op."""
        pass

    def initialize(self) -> None:
        self._method = self.method_op()
        self._method.set_environment(self.ops())

    def create_output(self, input: ArrayImg) -> ArrayImg:
        return ArrayImg.create(input.dimensions(), BitType)

    def compute1(self, input: ArrayImg, output: ArrayImg) -> None:
        self.ensure_initialized()
        if input.size == 0:
            return
        method = self._method
        r = self.radius
        padded = np.pad(input.data.astype(np.float64), r, mode=self.out_of_bounds)
        width = 2 * r + 1

        centers = input.cursor()
        targets = output.cursor()
        while centers.has_next():
            center = centers.next()
            target = targets.next()
            window = padded[tuple(slice(p, p + width) for p in centers.position())]
            method.compute2(window, center, target)

    def conforms(self) -> bool:
        if self.in1() is None or self.out() is None:
            return True
        return equal_dimensions(self.in1(), self.out())

    def get_independent_instance(self) -> "LocalThreshold":
        return independent_copy(self, _method=None, _initialized=False)


class SauvolaMethod(LocalThresholdMethod):
    """
    Sauvola's decision: center >= mean * (1 + k * (sqrt(std_dev) / r - 1)).

    The mean and standard deviation sub-ops are looked up on first use and
    write into scratch buffers owned by this instance.
    """

    def __init__(self, k: float = 0.5, r: float = 0.5):
        self.k = k
        self.r = r
        self._mean = None
        self._std_dev = None
        self._mean_value = DoubleType()
        self._std_dev_value = DoubleType()

    def compute2(self, neighborhood: Any, center: RealType, output: BitType) -> None:
        if self._mean is None:
            self._mean = Computers.unary(self.ops(), Ops.Stats.Mean, DoubleType, neighborhood)
        if self._std_dev is None:
            self._std_dev = Computers.unary(self.ops(), Ops.Stats.StdDev, DoubleType, neighborhood)

        self._mean.compute1(neighborhood, self._mean_value)
        self._std_dev.compute1(neighborhood, self._std_dev_value)
        mean = self._mean_value.get_real_double()
        std_dev = self._std_dev_value.get_real_double()

        threshold = mean * (1.0 + self.k * ((math.sqrt(std_dev) / self.r) - 1.0))
        output.set(center.get_real_double() >= threshold)

    def get_independent_instance(self) -> "SauvolaMethod":
        return independent_copy(self, _mean=None, _std_dev=None,
                                _mean_value=DoubleType(), _std_dev_value=DoubleType())


@plugin(Ops.Threshold.LocalSauvolaThreshold, inputs=(ArrayImg,), output=ArrayImg)
class LocalSauvolaThreshold(LocalThreshold):
    """
    Local Sauvola threshold, intended for images normalized to [0, 1].

    Args:
        k: Weight of the standard deviation term
        r: Dynamic range of the standard deviation
        radius: Neighborhood half-width
        out_of_bounds: Border extension mode
    """

    def __init__(self, k: float = 0.5, r: float = 0.5, radius: int = 1,
                 out_of_bounds: str = "reflect"):
        super().__init__(radius=radius, out_of_bounds=out_of_bounds)
        self.k = k
        self.r = r

    def method_op(self) -> LocalThresholdMethod:
        return SauvolaMethod(self.k, self.r)


class MeanMethod(LocalThresholdMethod):
    """Decision: center > mean - c."""

    def __init__(self, c: float = 0.0):
        self.c = c
        self._mean = None
        self._mean_value = DoubleType()

    def compute2(self, neighborhood: Any, center: RealType, output: BitType) -> None:
        if self._mean is None:
            self._mean = Computers.unary(self.ops(), Ops.Stats.Mean, DoubleType, neighborhood)
        self._mean.compute1(neighborhood, self._mean_value)
        output.set(center.get_real_double() > self._mean_value.get_real_double() - self.c)

    def get_independent_instance(self) -> "MeanMethod":
        return independent_copy(self, _mean=None, _mean_value=DoubleType())


@plugin(Ops.Threshold.LocalMeanThreshold, inputs=(ArrayImg,), output=ArrayImg)
class LocalMeanThreshold(LocalThreshold):

    def __init__(self, c: float = 0.0, radius: int = 1, out_of_bounds: str = "reflect"):
        super().__init__(radius=radius, out_of_bounds=out_of_bounds)
        self.c = c

    def method_op(self) -> LocalThresholdMethod:
        return MeanMethod(self.c)


@plugin(Ops.Threshold.Otsu, inputs=(ArrayImg,), output=ArrayImg)
class OtsuThreshold(AbstractUnaryHybridCF, Contingent):
    """Global Otsu threshold; pixels above the threshold are foreground."""

    def create_output(self, input: ArrayImg) -> ArrayImg:
        return ArrayImg.create(input.dimensions(), BitType)

    def compute1(self, input: ArrayImg, output: ArrayImg) -> None:
        data = input.data
        if data.size == 0 or np.all(data == data.flat[0]):
            # A single intensity has no between-class variance to maximize
            output.data[...] = False
            return
        threshold = threshold_otsu(data)
        logger.debug("Otsu threshold of %s: %s", input, threshold)
        np.greater(data, threshold, out=output.data)

    def conforms(self) -> bool:
        if self.in1() is None or self.out() is None:
            return True
        return equal_dimensions(self.in1(), self.out())
