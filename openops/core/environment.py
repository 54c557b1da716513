"""
Op environment.

The environment ties a registry and a matcher together and is the entry point
for callers: build a reference, resolve it, and either call the returned op
directly or run it once. Ops keep a handle on their environment for sub-op
lookups; the registry behind it is read-only after discovery, so one
environment can be shared by all threads.
"""

import logging
import threading
from typing import Any, List, Optional

from openops.constants.constants import ANY_ARITY, Flavor
from openops.core.candidates import Candidate, query
from openops.core.config import GlobalOpsConfig, get_current_ops_config
from openops.core.matcher import OpMatcher
from openops.core.op_ref import OperationReference
from openops.special.special_op import SpecialOp
from openops.special.taxonomy import FLAVOR_SHAPES

logger = logging.getLogger(__name__)


class OpEnvironment:
    """
    Facade over a registry and a matcher.

    Args:
        registry: The op registry; defaults to the global OP_REGISTRY
        config: Session configuration; defaults to the current global config
    """

    def __init__(self, registry: Any = None, config: Optional[GlobalOpsConfig] = None):
        if registry is None:
            from openops.processing.op_registry import OP_REGISTRY
            registry = OP_REGISTRY
        self.registry = registry
        self.config = config or get_current_ops_config()
        self.matcher = OpMatcher(self.config.matcher)

    def op(self, ref_or_op: Any, *args: Any, special_type: Any = None,
           output_type: Optional[type] = None, output: Any = None, **params: Any) -> SpecialOp:
        """
        Resolve an op, bound to the given arguments.

        Args:
            ref_or_op: An OperationReference, an op name or an op type
            *args: Typed inputs (values or classes)
            special_type: Required shape(s) or capability class(es)
            output_type: Expected output type
            output: Explicit output
            **params: Named op parameters

        Returns:
            The bound, initialized op
        """
        ref = self._ref(ref_or_op, args, special_type, output_type, output, params)
        return self.matcher.resolve(self, ref)

    def special_op(self, op_type: Any, special_type: Any, output_type: Optional[type],
                   *args: Any, arity: int = ANY_ARITY, output: Any = None, **params: Any) -> SpecialOp:
        """
        Get the best op of a given special shape for the given types and arguments.

        Raises:
            NoMatchError: If nothing matches with the requested arity
        """
        ref = OperationReference.create(
            op_type, *args, special_type=special_type, output_type=output_type,
            output=output, **params,
        )
        return self.matcher.resolve(self, ref, arity)

    def run(self, ref_or_op: Any, *args: Any, output: Any = None, **params: Any) -> Any:
        """
        Resolve an op by name/type and run it once.

        Returns:
            The op's output, or the mutated argument for inplace ops
        """
        op = self.op(ref_or_op, *args, output=output, **params)
        return op.run()

    def candidates(self, name: Optional[str] = None, op_type: Optional[type] = None,
                   arity: int = ANY_ARITY, flavor: Optional[Flavor] = None) -> List[Candidate]:
        """
        List the candidates for an op with a particular arity and flavor.

        Args:
            name: Op name, or None
            op_type: Op type, or None
            arity: Required declared arity, or ANY_ARITY
            flavor: Required flavor, or None for any
        """
        special_types = () if flavor is None else (FLAVOR_SHAPES[flavor],)
        ref = OperationReference(name=name, op_type=op_type, special_types=special_types)
        return query(self, ref, arity)

    def _ref(self, ref_or_op: Any, args, special_type, output_type, output, params) -> OperationReference:
        if isinstance(ref_or_op, OperationReference):
            if args or special_type or output_type or output is not None or params:
                raise ValueError("Pass either an OperationReference or arguments, not both")
            return ref_or_op
        return OperationReference.create(
            ref_or_op, *args, special_type=special_type, output_type=output_type,
            output=output, **params,
        )

    def __repr__(self) -> str:
        return f"OpEnvironment(registry={type(self.registry).__name__})"


_default_environment: Optional[OpEnvironment] = None
_default_lock = threading.Lock()


def get_default_environment() -> OpEnvironment:
    """Get the process-wide environment over the global registry."""
    global _default_environment
    with _default_lock:
        if _default_environment is None:
            _default_environment = OpEnvironment()
            logger.debug("Created default op environment")
        return _default_environment
