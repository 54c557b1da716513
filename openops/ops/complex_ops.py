"""Ops on complex elements."""

import math

from openops.data.types import ComplexDoubleType, ComplexType
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.special_op import AbstractUnaryHybridCF


@plugin(Ops.Math.ComplexLog, inputs=(ComplexType,), output=ComplexType)
class ComplexLog(AbstractUnaryHybridCF):
    """
    Principal natural logarithm: log|z| + i * arg(z), with arg(z) in (-pi, pi].

    The logarithm of zero has a real part of -inf.
    """

    def create_output(self, input: ComplexType) -> ComplexType:
        return ComplexDoubleType()

    def compute1(self, input: ComplexType, output: ComplexType) -> None:
        modulus = input.get_power_double()
        real = math.log(modulus) if modulus > 0 else float("-inf")
        output.set_complex_number(real, _principal(input.get_phase_double()))


def _principal(angle: float) -> float:
    angle = math.remainder(angle, 2 * math.pi)
    return math.pi if angle == -math.pi else angle
