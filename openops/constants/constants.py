"""
Consolidated constants for openops.

This module defines the enums that tag special op shapes (arity and flavor),
the plugin priority scale and a handful of defaults.
"""

import os
from enum import Enum, IntEnum


class Arity(IntEnum):
    """Number of strongly-typed inputs an op declares."""
    NULLARY = 0
    UNARY = 1
    BINARY = 2


class Flavor(Enum):
    """The primary kinds of special ops."""
    COMPUTER = "computer"
    FUNCTION = "function"
    INPLACE = "inplace"


class Priority:
    """
    Plugin priority scale.

    Higher values win. The scale leaves room between the named levels so that
    a plugin can be nudged slightly above or below a neighbour.
    """
    FIRST = float("inf")
    EXTREMELY_HIGH = 1000000.0
    VERY_HIGH = 10000.0
    HIGH = 100.0
    NORMAL = 0.0
    LOW = -100.0
    VERY_LOW = -10000.0
    EXTREMELY_LOW = -1000000.0
    LAST = float("-inf")


# Any arity; used by the candidate query to disable the arity filter
ANY_ARITY = -1

DEFAULT_NUM_WORKERS = os.cpu_count() or 1

# Packages scanned by the default registry for @plugin decorated ops
DEFAULT_PLUGIN_PACKAGES = ("openops.ops", "openops.map")
