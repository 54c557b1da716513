"""
Core matching machinery for openops.

The data flow is: caller builds an OperationReference, the candidate query
narrows the registry down, and the matcher selects, instantiates and binds
the best op.
"""

# These imports are re-exported through __all__; order matters for cycles
from openops.core.exceptions import (AmbiguousMatchError, ConformanceRejection,
                                     InstantiationFailure, NoMatchError,
                                     OpenOpsError, RegistryError)
from openops.core.config import (GlobalOpsConfig, MapperConfig, MatcherConfig)
from openops.core.op_ref import OperationReference
from openops.core.candidates import Candidate, filter_arity, query
from openops.core.matcher import OpMatcher
from openops.core.environment import OpEnvironment, get_default_environment

__all__ = [
    "Candidate", "query", "filter_arity",
    "GlobalOpsConfig", "MatcherConfig", "MapperConfig",
    "OpEnvironment", "get_default_environment",
    "OpMatcher", "OperationReference",
    "OpenOpsError", "RegistryError", "NoMatchError", "AmbiguousMatchError",
    "ConformanceRejection", "InstantiationFailure",
]
