"""
OpenOps: special ops for N-dimensional image processing.

Ops are plugins registered by op type and name. The matcher picks the best
implementation for a set of arguments, and the returned special op can then
be called repeatedly (e.g. once per pixel) without matching again.

This module does not import internal modules, so importing the package
triggers no op registration. Start from openops.core:

    from openops.core import get_default_environment
    ops = get_default_environment()
    mean = ops.op("stats.mean", img)
"""

import logging

__version__ = "0.1.0"


def _ensure_basic_logging():
    """Ensure basic logging is configured if no configuration exists."""
    root_logger = logging.getLogger()

    # Only configure if no handlers exist and level is too high
    if not root_logger.handlers and root_logger.level > logging.INFO:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


_ensure_basic_logging()

__all__ = ["__version__"]
