"""
Capability taxonomy for special ops.

A special op is described by its *shape*: an arity (0, 1 or 2 typed inputs)
and the set of flavors it exposes. The three base flavors are:

- computer: computes a result from the inputs and stores it into a
  preallocated output supplied by the caller. The inputs are read-only, the
  output must not be one of the inputs, and the output's initial contents must
  not affect the result.
- function: computes a result from the inputs and returns it as a newly
  allocated output. The inputs are read-only.
- inplace: mutates the contents of its argument in-place. There is no separate
  output slot.

Hybrid shapes union two or three base flavors for the same arity (CF, CI,
CFI and the binary CFI1 variant, which mutates only its first input).

Lower-arity contracts are special cases of higher-arity ones: a binary op is
usable wherever a unary op of the same flavors is expected, with its second
input held fixed. This is why `satisfies` compares arities with ``>=`` while
the reported arity of an op is always its declared one.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Union

from openops.constants.constants import Arity, Flavor

C = Flavor.COMPUTER
F = Flavor.FUNCTION
I = Flavor.INPLACE

_FLAVOR_CODES = {C: "C", F: "F", I: "I"}


@dataclass(frozen=True)
class OperationShape:
    """
    Tagged (arity, flavors) pair describing what an op can do.

    Attributes:
        arity: Number of typed inputs
        flavors: The flavors exposed by the op
        mutates_first_only: For binary inplace capable shapes, whether only the
            first input may be mutated (the CFI1 variant)
    """
    arity: Arity
    flavors: FrozenSet[Flavor]
    mutates_first_only: bool = False

    def __post_init__(self):
        if not self.flavors:
            raise ValueError("An operation shape needs at least one flavor")
        if Flavor.INPLACE in self.flavors and self.arity == Arity.NULLARY:
            raise ValueError("Inplace ops need at least one input to mutate")

    @property
    def is_hybrid(self) -> bool:
        return len(self.flavors) > 1

    @property
    def name(self) -> str:
        prefix = ("Nullary", "Unary", "Binary")[self.arity]
        if not self.is_hybrid:
            (flavor,) = self.flavors
            return f"{prefix}{flavor.value.capitalize()}Op"
        codes = "".join(_FLAVOR_CODES[f] for f in (C, F, I) if f in self.flavors)
        if self.mutates_first_only:
            codes += "1"
        return f"{prefix}Hybrid{codes}"

    def has(self, flavor: Flavor) -> bool:
        return flavor in self.flavors

    def satisfies(self, required: "OperationShape") -> bool:
        """
        Check whether an op of this shape can be used where `required` is expected.

        All required flavors must be present, and this op's arity must be at
        least the required arity (extra inputs are held fixed). A shape that
        can only mutate its first input does not satisfy a binary inplace
        requirement that may mutate either.
        """
        if (self.mutates_first_only and not required.mutates_first_only
                and required.arity == Arity.BINARY and Flavor.INPLACE in required.flavors):
            return False
        return self.arity >= required.arity and required.flavors <= self.flavors

    def __str__(self) -> str:
        return self.name


def shape(arity: Union[int, Arity], *flavors: Flavor, mutates_first_only: bool = False) -> OperationShape:
    """Build an OperationShape from an arity and flavors."""
    return OperationShape(Arity(arity), frozenset(flavors), mutates_first_only)


NULLARY_COMPUTER = shape(0, C)
NULLARY_FUNCTION = shape(0, F)
NULLARY_HYBRID_CF = shape(0, C, F)

UNARY_COMPUTER = shape(1, C)
UNARY_FUNCTION = shape(1, F)
UNARY_INPLACE = shape(1, I)
UNARY_HYBRID_CF = shape(1, C, F)
UNARY_HYBRID_CI = shape(1, C, I)
UNARY_HYBRID_CFI = shape(1, C, F, I)

BINARY_COMPUTER = shape(2, C)
BINARY_FUNCTION = shape(2, F)
BINARY_INPLACE = shape(2, I)
BINARY_HYBRID_CF = shape(2, C, F)
BINARY_HYBRID_CFI1 = shape(2, C, F, I, mutates_first_only=True)
BINARY_HYBRID_CFI = shape(2, C, F, I)

ALL_SHAPES = (
    NULLARY_COMPUTER, NULLARY_FUNCTION, NULLARY_HYBRID_CF,
    UNARY_COMPUTER, UNARY_FUNCTION, UNARY_INPLACE,
    UNARY_HYBRID_CF, UNARY_HYBRID_CI, UNARY_HYBRID_CFI,
    BINARY_COMPUTER, BINARY_FUNCTION, BINARY_INPLACE,
    BINARY_HYBRID_CF, BINARY_HYBRID_CFI1, BINARY_HYBRID_CFI,
)

# The least demanding shape per flavor; any op exposing the flavor satisfies it
FLAVOR_SHAPES = {
    Flavor.COMPUTER: NULLARY_COMPUTER,
    Flavor.FUNCTION: NULLARY_FUNCTION,
    Flavor.INPLACE: UNARY_INPLACE,
}


def shape_of(obj) -> Optional[OperationShape]:
    """
    Get the declared shape of an op class or instance, or of a shape itself.

    Returns:
        The OperationShape, or None if the object declares none
    """
    if isinstance(obj, OperationShape):
        return obj
    return getattr(obj, "SHAPE", None)


def normalize_shapes(special_types: Optional[Iterable]) -> FrozenSet[OperationShape]:
    """
    Normalize a collection of shapes and/or capability classes to shapes.

    Raises:
        TypeError: If an entry declares no shape
    """
    if not special_types:
        return frozenset()
    if isinstance(special_types, OperationShape) or isinstance(special_types, type):
        special_types = (special_types,)

    shapes = set()
    for special_type in special_types:
        declared = shape_of(special_type)
        if declared is None:
            raise TypeError(f"{special_type!r} is not a special op shape or capability class")
        shapes.add(declared)
    return frozenset(shapes)
