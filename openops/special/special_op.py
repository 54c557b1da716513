"""
Special op base classes.

A *special* op is one intended to be used repeatedly from other ops, e.g. once
per pixel inside a mapper. Resolving it once through the matcher and then
calling it directly avoids the matching cost on every call.

Capabilities are composed from small mixins instead of a deep interface tree:

- ComputerOp:  compute0(out) / compute1(in, out) / compute2(in1, in2, out)
- FunctionOp:  calculate0() / calculate1(in) / calculate2(in1, in2)
- InplaceOp:   mutate(arg) / mutate1(arg, in2) / mutate2(in1, arg)

Each capability forwards a lower-arity call to the next higher arity, filling
the missing inputs from the bound input slots. A leaf implements only the
method matching its declared arity; the lower-arity views come for free.

Contract violations (aliasing a computer's output with one of its inputs,
mutating the input of a computer or function) are undefined behavior and are
not checked at runtime.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from openops.constants.constants import Flavor
from openops.special import taxonomy
from openops.special.taxonomy import OperationShape

logger = logging.getLogger(__name__)


class Initializable:
    """Ops that need a one-time setup after their inputs are bound."""

    _initialized = False

    def initialize(self) -> None:
        """Hook for building internal helpers (e.g. sub-ops). Runs once, before first use."""
        pass

    def ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()
            self._initialized = True


class Threadable:
    """
    Ops that can hand out an instance safe for use from another thread.

    The default assumes the op carries no per-call mutable state and returns
    the same instance. Ops owning scratch state (buffers, lazily built sub-ops)
    must override get_independent_instance() and return a fresh clone.
    """

    def get_independent_instance(self) -> "Threadable":
        return self


class Contingent(ABC):
    """Ops that can reject a binding once their inputs and output are known."""

    @abstractmethod
    def conforms(self) -> bool:
        """Return False if the bound arguments cannot be processed by this op."""
        pass


class SpecialOp(Initializable, Threadable):
    """
    Base class of all special ops.

    Bound state is a set of slots: up to two typed inputs, one output and the
    owning environment (used for sub-op lookups). Slots default to None at
    class level, so leaf ops only need an __init__ for their own parameters.
    """

    SHAPE: Optional[OperationShape] = None

    _in1: Any = None
    _in2: Any = None
    _out: Any = None
    _env: Any = None
    _lazy_output = False

    @property
    def shape(self) -> OperationShape:
        if self.SHAPE is None:
            raise TypeError(f"{type(self).__name__} does not declare a SHAPE")
        return self.SHAPE

    @property
    def arity(self) -> int:
        """
        The op's number of typed inputs.

        This is the declared arity, which can be larger than expected: a binary
        computer used through its unary view still reports 2.
        """
        return int(self.shape.arity)

    # -- Slots --

    def in1(self) -> Any:
        return self._in1

    def in2(self) -> Any:
        return self._in2

    def out(self) -> Any:
        return self._out

    def set_input1(self, value: Any) -> None:
        self._in1 = value

    def set_input2(self, value: Any) -> None:
        self._in2 = value

    def set_output(self, value: Any) -> None:
        self._out = value

    def inputs(self) -> List[Any]:
        return [self._in1, self._in2][:self.arity]

    def bind(self, inputs: Sequence[Any], output: Any = None, lazy_output: bool = False) -> None:
        """
        Populate the input slots positionally and the output slot.

        Args:
            inputs: One value per declared input
            output: Preallocated output, or None
            lazy_output: Allocate the output on first run() and keep it
        """
        if len(inputs) != self.arity:
            raise ValueError(
                f"{type(self).__name__} takes {self.arity} inputs, got {len(inputs)}"
            )
        if self.arity >= 1:
            self._in1 = inputs[0]
        if self.arity >= 2:
            self._in2 = inputs[1]
        self._out = output
        self._lazy_output = lazy_output and output is None

    # -- Environment --

    def set_environment(self, env: Any) -> None:
        self._env = env

    def ops(self) -> Any:
        """The environment used for sub-op lookups; the default one when unset."""
        if self._env is None:
            from openops.core.environment import get_default_environment
            self._env = get_default_environment()
        return self._env

    # -- Runnable --

    def run(self) -> Any:
        """
        Re-invoke the op on whatever is bound to its slots.

        Computers write into the bound output. When no output is bound, an op
        that can also act as a function allocates one; a hybrid marked for
        lazy allocation keeps that output in its slot. Pure inplace ops mutate
        their first input.

        Returns:
            The output (or the mutated argument)
        """
        self.ensure_initialized()
        flavors = self.shape.flavors
        inputs = self.inputs()

        if Flavor.COMPUTER in flavors and self._out is not None:
            self.compute_into(*inputs, self._out)
            return self._out

        if Flavor.FUNCTION in flavors:
            if Flavor.COMPUTER not in flavors:
                self._out = self.compute_new(*inputs)
                return self._out
            if self._lazy_output:
                self._out = self.create_output(*inputs)
                self._lazy_output = False
                self.compute_into(*inputs, self._out)
                return self._out
            return self.compute_new(*inputs)

        if Flavor.INPLACE in flavors:
            self.mutate(self._in1)
            return self._in1

        raise ValueError(f"{type(self).__name__} has no output bound")

    def __call__(self, *args: Any) -> Any:
        """
        Shorthand for compute_new(), compute_into() or mutate().

        Function-capable ops treat up to `arity` arguments as inputs (missing
        ones come from the bound slots), so an input is never mistaken for the
        output. Otherwise computers treat the last argument as the output, and
        pure inplace ops mutate the first argument.
        """
        flavors = self.shape.flavors
        if Flavor.FUNCTION in flavors and len(args) <= self.arity:
            return self.compute_new(*args)
        if Flavor.COMPUTER in flavors:
            return self.compute_into(*args)
        self.mutate(*args)
        return args[0]

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{self.shape.name}]"


class ComputerOp(SpecialOp):
    """Capability: compute into a caller-supplied output."""

    SHAPE = taxonomy.NULLARY_COMPUTER

    def compute0(self, output: Any) -> None:
        if self.arity < 1:
            raise NotImplementedError(f"{type(self).__name__} must implement compute0")
        self.compute1(self.in1(), output)

    def compute1(self, input: Any, output: Any) -> None:
        if self.arity < 2:
            raise NotImplementedError(f"{type(self).__name__} must implement compute1")
        self.compute2(input, self.in2(), output)

    def compute2(self, input1: Any, input2: Any, output: Any) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement compute2")

    def compute_into(self, *args: Any) -> Any:
        """compute{n}(*inputs, output) where n is the number of inputs given."""
        if not args:
            raise TypeError("compute_into() needs at least an output")
        *inputs, output = args
        _method(self, "compute", len(inputs))(*inputs, output)
        return output


class FunctionOp(SpecialOp):
    """Capability: compute and return a newly allocated output."""

    SHAPE = taxonomy.NULLARY_FUNCTION

    def calculate0(self) -> Any:
        if self.arity < 1:
            raise NotImplementedError(f"{type(self).__name__} must implement calculate0")
        return self.calculate1(self.in1())

    def calculate1(self, input: Any) -> Any:
        if self.arity < 2:
            raise NotImplementedError(f"{type(self).__name__} must implement calculate1")
        return self.calculate2(input, self.in2())

    def calculate2(self, input1: Any, input2: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__} must implement calculate2")

    def compute_new(self, *inputs: Any) -> Any:
        """calculate{n}(*inputs) where n is the number of inputs given."""
        return _method(self, "calculate", len(inputs))(*inputs)


class InplaceOp(SpecialOp):
    """Capability: mutate an argument in place."""

    SHAPE = taxonomy.UNARY_INPLACE

    def mutate(self, arg: Any) -> None:
        if self.arity < 2:
            raise NotImplementedError(f"{type(self).__name__} must implement mutate")
        self.mutate1(arg, self.in2())

    def mutate1(self, arg: Any, input2: Any) -> None:
        """Mutate the first input, reading the second."""
        raise NotImplementedError(f"{type(self).__name__} must implement mutate1")

    def mutate2(self, input1: Any, arg: Any) -> None:
        """Mutate the second input, reading the first."""
        raise NotImplementedError(f"{type(self).__name__} must implement mutate2")


class HybridCF(ComputerOp, FunctionOp):
    """
    Computer + function. A new output is created with create_output() and
    filled by the computer method, so both call shapes give identical results.
    """

    SHAPE = taxonomy.NULLARY_HYBRID_CF

    @abstractmethod
    def create_output(self, *inputs: Any) -> Any:
        """Allocate an output suitable for the given inputs."""
        pass

    def _create_and_compute(self, *inputs: Any) -> Any:
        output = self.create_output(*inputs)
        self.compute_into(*inputs, output)
        return output

    def calculate0(self) -> Any:
        if self.arity == 0:
            return self._create_and_compute()
        return super().calculate0()

    def calculate1(self, input: Any) -> Any:
        if self.arity == 1:
            return self._create_and_compute(input)
        return super().calculate1(input)

    def calculate2(self, input1: Any, input2: Any) -> Any:
        return self._create_and_compute(input1, input2)


def _method(op: SpecialOp, prefix: str, n: int):
    if n > op.arity:
        raise TypeError(f"{type(op).__name__} takes at most {op.arity} inputs, got {n}")
    return getattr(op, f"{prefix}{n}")


def independent_copy(op: SpecialOp, **reset: Any) -> SpecialOp:
    """
    Shallow-copy an op for use from another thread, resetting scratch attributes.

    Args:
        op: The op to copy
        **reset: Attribute values to assign on the copy (e.g. buffer=None)
    """
    clone = copy.copy(op)
    for name, value in reset.items():
        setattr(clone, name, value)
    return clone


# -- Abstract bases, one per shape --

class AbstractNullaryComputerOp(ComputerOp, ABC):
    SHAPE = taxonomy.NULLARY_COMPUTER


class AbstractNullaryFunctionOp(FunctionOp, ABC):
    SHAPE = taxonomy.NULLARY_FUNCTION


class AbstractNullaryHybridCF(HybridCF, ABC):
    SHAPE = taxonomy.NULLARY_HYBRID_CF


class AbstractUnaryComputerOp(ComputerOp, ABC):
    SHAPE = taxonomy.UNARY_COMPUTER


class AbstractUnaryFunctionOp(FunctionOp, ABC):
    SHAPE = taxonomy.UNARY_FUNCTION


class AbstractUnaryInplaceOp(InplaceOp, ABC):
    SHAPE = taxonomy.UNARY_INPLACE


class AbstractUnaryHybridCF(HybridCF, ABC):
    SHAPE = taxonomy.UNARY_HYBRID_CF


class AbstractUnaryHybridCI(ComputerOp, InplaceOp, ABC):
    SHAPE = taxonomy.UNARY_HYBRID_CI


class AbstractUnaryHybridCFI(HybridCF, InplaceOp, ABC):
    SHAPE = taxonomy.UNARY_HYBRID_CFI


class AbstractBinaryComputerOp(ComputerOp, ABC):
    SHAPE = taxonomy.BINARY_COMPUTER


class AbstractBinaryFunctionOp(FunctionOp, ABC):
    SHAPE = taxonomy.BINARY_FUNCTION


class AbstractBinaryInplaceOp(InplaceOp, ABC):
    SHAPE = taxonomy.BINARY_INPLACE


class AbstractBinaryHybridCF(HybridCF, ABC):
    SHAPE = taxonomy.BINARY_HYBRID_CF


class AbstractBinaryHybridCFI1(HybridCF, InplaceOp, ABC):
    SHAPE = taxonomy.BINARY_HYBRID_CFI1


class AbstractBinaryHybridCFI(HybridCF, InplaceOp, ABC):
    SHAPE = taxonomy.BINARY_HYBRID_CFI
