"""
Global configuration dataclasses for openops.

Configuration is immutable and provided as Python objects. A thread-local
"current" config lets an environment pick up settings without threading them
through every call.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type

from openops.constants.constants import DEFAULT_NUM_WORKERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatcherConfig:
    """Configuration for op resolution."""
    strict_instantiation: bool = False
    """
    Raise InstantiationFailure when a candidate's constructor fails instead of
    logging the failure and skipping the candidate.
    """


@dataclass(frozen=True)
class MapperConfig:
    """Configuration for the mappers."""
    num_workers: int = DEFAULT_NUM_WORKERS
    """Number of worker threads (and chunks) used by the threaded mappers."""

    def __post_init__(self):
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be positive, got {self.num_workers}")



@dataclass(frozen=True)
class GlobalOpsConfig:
    """
    Root configuration object for an openops session.
    This object is intended to be instantiated at application startup and treated as immutable.
    """
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    """Configuration for the matcher."""

    mapper: MapperConfig = field(default_factory=MapperConfig)
    """Configuration for the mappers."""


# Generic thread-local storage for any global config type
_global_config_contexts: Dict[Type, threading.local] = {}


def set_current_global_config(config_type: Type, config_instance: Any) -> None:
    """Set current global config for any dataclass type."""
    if config_type not in _global_config_contexts:
        _global_config_contexts[config_type] = threading.local()
    _global_config_contexts[config_type].value = config_instance


def get_current_global_config(config_type: Type) -> Optional[Any]:
    """Get current global config for any dataclass type."""
    context = _global_config_contexts.get(config_type)
    return getattr(context, 'value', None) if context else None


def get_current_ops_config() -> GlobalOpsConfig:
    """Get the current GlobalOpsConfig, falling back to defaults."""
    current_config = get_current_global_config(GlobalOpsConfig)
    if current_config is None:
        return GlobalOpsConfig()
    return current_config
