"""
Arithmetic ops on elements and images.

Integer results saturate at the bounds of the output type instead of
wrapping around; NaN stores 0 in integer outputs.
"""

import logging
from typing import Any

import numpy as np

from openops.data.img import ArrayImg, equal_dimensions
from openops.data.types import RealType
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.special_op import (AbstractBinaryHybridCF, AbstractUnaryHybridCFI,
                                        Contingent)

logger = logging.getLogger(__name__)


@plugin(Ops.Math.Add, inputs=(RealType,), output=RealType)
class AddConstant(AbstractUnaryHybridCFI):
    """
    Adds a constant to a real element.

    Args:
        value: The constant to add (may be negative)
    """

    def __init__(self, value: float = 0.0):
        self.value = value

    def create_output(self, input: RealType) -> RealType:
        return input.create_variable()

    def compute1(self, input: RealType, output: RealType) -> None:
        output.set_real(input.get_real_double() + self.value)

    def mutate(self, arg: RealType) -> None:
        arg.set_real(arg.get_real_double() + self.value)


@plugin(Ops.Math.Add, inputs=(ArrayImg,), output=ArrayImg)
class AddConstantToImage(AbstractUnaryHybridCFI, Contingent):
    """Adds a constant to every element of an image, vectorized."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def create_output(self, input: ArrayImg) -> ArrayImg:
        return input.factory().create(input.dimensions(), input.element_type)

    def compute1(self, input: ArrayImg, output: ArrayImg) -> None:
        shifted = input.data.astype(np.float64) + self.value
        np.copyto(output.data, _saturate(shifted, output), casting="unsafe")

    def mutate(self, arg: ArrayImg) -> None:
        shifted = arg.data.astype(np.float64) + self.value
        np.copyto(arg.data, _saturate(shifted, arg), casting="unsafe")

    def conforms(self) -> bool:
        if self.in1() is None or self.out() is None:
            return True
        return equal_dimensions(self.in1(), self.out())


def _saturate(values: np.ndarray, target: ArrayImg) -> np.ndarray:
    if np.issubdtype(target.dtype, np.integer):
        info = np.iinfo(target.dtype)
        return np.clip(np.rint(np.nan_to_num(values, nan=0.0)), info.min, info.max)
    return values


@plugin(Ops.Math.Subtract, inputs=(RealType, RealType), output=RealType)
class SubtractReal(AbstractBinaryHybridCF):
    """output = input1 - input2, in the type of the first input."""

    def create_output(self, input1: RealType, input2: RealType) -> RealType:
        return input1.create_variable()

    def compute2(self, input1: RealType, input2: RealType, output: RealType) -> None:
        output.set_real(input1.get_real_double() - input2.get_real_double())
