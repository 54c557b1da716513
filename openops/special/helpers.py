"""
Typed lookup helpers.

These are thin wrappers over OpEnvironment.special_op() that fix the special
shape to request, so callers inside other ops can write e.g.
``Computers.unary(self.ops(), Ops.Stats.Mean, DoubleType, neighborhood)``
and get back an op that is guaranteed to expose compute1().

Outputs and inputs may be given as values or as classes; a class only takes
part in matching.

Unary lookups accept trailing ``other_args``: they select higher-arity ops
through their unary view, with the extra inputs held fixed. For example
``Computers.unary(ops, Ops.Math.Subtract, DoubleType, DoubleType, DoubleType(1.0))``
returns a subtract op whose compute1(x, out) computes x - 1.
"""

import logging
from typing import Any, Optional

from openops.special import taxonomy

logger = logging.getLogger(__name__)


class Computers:
    """Lookups restricted to computer-capable ops."""

    @staticmethod
    def nullary(ops: Any, op_type: Any, out: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.NULLARY_COMPUTER, None, arity=0,
                              output=out, **params)

    @staticmethod
    def unary(ops: Any, op_type: Any, out: Any, input: Any, *other_args: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.UNARY_COMPUTER, None, input, *other_args,
                              output=out, **params)

    @staticmethod
    def binary(ops: Any, op_type: Any, out: Any, input1: Any, input2: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.BINARY_COMPUTER, None, input1, input2,
                              output=out, **params)


class Functions:
    """Lookups restricted to function-capable ops."""

    @staticmethod
    def nullary(ops: Any, op_type: Any, out_type: Optional[type], **params: Any):
        return ops.special_op(op_type, taxonomy.NULLARY_FUNCTION, out_type, arity=0, **params)

    @staticmethod
    def unary(ops: Any, op_type: Any, out_type: Optional[type], input: Any, *other_args: Any,
              **params: Any):
        return ops.special_op(op_type, taxonomy.UNARY_FUNCTION, out_type, input, *other_args,
                              **params)

    @staticmethod
    def binary(ops: Any, op_type: Any, out_type: Optional[type], input1: Any, input2: Any,
               **params: Any):
        return ops.special_op(op_type, taxonomy.BINARY_FUNCTION, out_type, input1, input2,
                              **params)


class Inplaces:
    """Lookups restricted to inplace-capable ops."""

    @staticmethod
    def unary(ops: Any, op_type: Any, arg: Any, *other_args: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.UNARY_INPLACE, None, arg, *other_args, **params)

    @staticmethod
    def binary(ops: Any, op_type: Any, arg1: Any, arg2: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.BINARY_INPLACE, None, arg1, arg2, **params)


class Hybrids:
    """Lookups restricted to hybrid ops."""

    @staticmethod
    def nullary_cf(ops: Any, op_type: Any, out: Any = None, **params: Any):
        return ops.special_op(op_type, taxonomy.NULLARY_HYBRID_CF, None, arity=0,
                              output=out, **params)

    @staticmethod
    def unary_cf(ops: Any, op_type: Any, out: Any, input: Any, *other_args: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.UNARY_HYBRID_CF, None, input, *other_args,
                              output=out, **params)

    @staticmethod
    def unary_ci(ops: Any, op_type: Any, arg: Any, *other_args: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.UNARY_HYBRID_CI, None, arg, *other_args, **params)

    @staticmethod
    def unary_cfi(ops: Any, op_type: Any, arg: Any, *other_args: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.UNARY_HYBRID_CFI, None, arg, *other_args,
                              **params)

    @staticmethod
    def binary_cf(ops: Any, op_type: Any, out: Any, input1: Any, input2: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.BINARY_HYBRID_CF, None, input1, input2,
                              output=out, **params)

    @staticmethod
    def binary_cfi1(ops: Any, op_type: Any, arg: Any, input2: Any, **params: Any):
        return ops.special_op(op_type, taxonomy.BINARY_HYBRID_CFI1, None, arg, input2, **params)
