"""
Built-in ops.

Every module below this package is imported by the default registry on first
use, which registers the @plugin decorated implementations.
"""

from openops.ops.op_types import Op, Ops

__all__ = ["Op", "Ops"]
