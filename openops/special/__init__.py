"""
Special ops: statically typed op handles for repeated invocation.

Typed lookup helpers (Computers, Functions, Inplaces, Hybrids) live in
openops.special.helpers.
"""

from openops.special import taxonomy
from openops.special.special_op import (AbstractBinaryComputerOp,
                                        AbstractBinaryFunctionOp,
                                        AbstractBinaryHybridCF,
                                        AbstractBinaryHybridCFI,
                                        AbstractBinaryHybridCFI1,
                                        AbstractBinaryInplaceOp,
                                        AbstractNullaryComputerOp,
                                        AbstractNullaryFunctionOp,
                                        AbstractNullaryHybridCF,
                                        AbstractUnaryComputerOp,
                                        AbstractUnaryFunctionOp,
                                        AbstractUnaryHybridCF,
                                        AbstractUnaryHybridCFI,
                                        AbstractUnaryHybridCI,
                                        AbstractUnaryInplaceOp, ComputerOp,
                                        Contingent, FunctionOp, HybridCF,
                                        InplaceOp, SpecialOp, Threadable)
from openops.special.taxonomy import OperationShape

__all__ = [
    "taxonomy", "OperationShape",
    "SpecialOp", "ComputerOp", "FunctionOp", "InplaceOp", "HybridCF",
    "Contingent", "Threadable",
    "AbstractNullaryComputerOp", "AbstractNullaryFunctionOp", "AbstractNullaryHybridCF",
    "AbstractUnaryComputerOp", "AbstractUnaryFunctionOp", "AbstractUnaryInplaceOp",
    "AbstractUnaryHybridCF", "AbstractUnaryHybridCI", "AbstractUnaryHybridCFI",
    "AbstractBinaryComputerOp", "AbstractBinaryFunctionOp", "AbstractBinaryInplaceOp",
    "AbstractBinaryHybridCF", "AbstractBinaryHybridCFI1", "AbstractBinaryHybridCFI",
]
