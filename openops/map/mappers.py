"""
Element-wise mappers.

Every mapper takes the element op as its `op` parameter and walks the
image(s) with cursors, handing one element accessor per image to the op.
Accessors are reused while walking, so element ops must not keep references
to their arguments.

Threaded mappers split the flat index range into one chunk per worker and
give every chunk its own independent instance of the element op.
"""

import logging
from typing import Any, Optional

from openops.constants.constants import Arity, Flavor, Priority
from openops.data.img import ArrayImg, equal_dimensions
from openops.map.chunker import run_chunks
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.special_op import (AbstractBinaryComputerOp, AbstractUnaryComputerOp,
                                        AbstractUnaryInplaceOp, Contingent, SpecialOp)

logger = logging.getLogger(__name__)


def _exposes(op: Any, flavor: Flavor, arity: Arity) -> bool:
    return isinstance(op, SpecialOp) and op.shape.has(flavor) and op.arity >= arity


class _MapperBase(Contingent):
    """
    Shared parameters of all mappers.

    Args:
        op: The element op
        num_workers: Worker count for threaded mappers; defaults to the
            environment's mapper config
    """

    def __init__(self, op: Optional[SpecialOp] = None, num_workers: Optional[int] = None):
        if num_workers is not None and num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")
        self.op = op
        self.num_workers = num_workers

    def workers(self) -> int:
        if self.num_workers is not None:
            return self.num_workers
        return self.ops().config.mapper.num_workers

    def _images_conform(self, *images: Any) -> bool:
        bound = [img for img in images if img is not None]
        return all(equal_dimensions(bound[0], img) for img in bound[1:])


# -- Unary computer --

@plugin(Ops.Map, priority=Priority.LOW, inputs=(ArrayImg,), output=ArrayImg)
class Mapper(_MapperBase, AbstractUnaryComputerOp):
    """Applies a unary computer to every element: op.compute1(in, out)."""

    def compute1(self, input: ArrayImg, output: ArrayImg) -> None:
        _map_unary(self.op, input, output, 0, input.size)

    def conforms(self) -> bool:
        if not _exposes(self.op, Flavor.COMPUTER, Arity.UNARY):
            return False
        if self.in1() is not None and self.out() is None:
            return False
        return self._images_conform(self.in1(), self.out())


@plugin(Ops.Map, priority=Priority.NORMAL, inputs=(ArrayImg,), output=ArrayImg)
class ThreadedMapper(Mapper):

    def compute1(self, input: ArrayImg, output: ArrayImg) -> None:
        def task(start: int, count: int) -> None:
            _map_unary(self.op.get_independent_instance(), input, output, start, count)

        run_chunks(task, input.size, self.workers())


def _map_unary(op: Any, input: ArrayImg, output: ArrayImg, start: int, count: int) -> None:
    source = input.cursor(start, count)
    target = output.cursor(start, count)
    while source.has_next():
        op.compute1(source.next(), target.next())


# -- Unary inplace --

@plugin(Ops.Map, priority=Priority.LOW, inputs=(ArrayImg,), output=ArrayImg)
class InplaceMapper(_MapperBase, AbstractUnaryInplaceOp):
    """Mutates every element of an image: op.mutate(element)."""

    def mutate(self, arg: ArrayImg) -> None:
        _map_inplace(self.op, arg, 0, arg.size)

    def conforms(self) -> bool:
        return _exposes(self.op, Flavor.INPLACE, Arity.UNARY)


@plugin(Ops.Map, priority=Priority.NORMAL, inputs=(ArrayImg,), output=ArrayImg)
class ThreadedInplaceMapper(InplaceMapper):

    def mutate(self, arg: ArrayImg) -> None:
        def task(start: int, count: int) -> None:
            _map_inplace(self.op.get_independent_instance(), arg, start, count)

        run_chunks(task, arg.size, self.workers())


def _map_inplace(op: Any, arg: ArrayImg, start: int, count: int) -> None:
    cursor = arg.cursor(start, count)
    while cursor.has_next():
        op.mutate(cursor.next())


# -- Binary computer --

@plugin(Ops.Map, priority=Priority.LOW, inputs=(ArrayImg, ArrayImg), output=ArrayImg)
class BinaryMapper(_MapperBase, AbstractBinaryComputerOp):
    """Combines two images element-wise: op.compute2(in1, in2, out)."""

    def compute2(self, input1: ArrayImg, input2: ArrayImg, output: ArrayImg) -> None:
        _map_binary(self.op, input1, input2, output, 0, input1.size)

    def conforms(self) -> bool:
        if not _exposes(self.op, Flavor.COMPUTER, Arity.BINARY):
            return False
        if self.in1() is not None and self.out() is None:
            return False
        return self._images_conform(self.in1(), self.in2(), self.out())


@plugin(Ops.Map, priority=Priority.NORMAL, inputs=(ArrayImg, ArrayImg), output=ArrayImg)
class ThreadedBinaryMapper(BinaryMapper):

    def compute2(self, input1: ArrayImg, input2: ArrayImg, output: ArrayImg) -> None:
        def task(start: int, count: int) -> None:
            _map_binary(self.op.get_independent_instance(), input1, input2, output, start, count)

        run_chunks(task, input1.size, self.workers())


def _map_binary(op: Any, input1: ArrayImg, input2: ArrayImg, output: ArrayImg,
                start: int, count: int) -> None:
    first = input1.cursor(start, count)
    second = input2.cursor(start, count)
    target = output.cursor(start, count)
    while first.has_next():
        op.compute2(first.next(), second.next(), target.next())
