"""
Candidate registry query.

Given an OperationReference, the query asks the environment's registry for
every implementation whose name/op type match, then narrows them down with
three stable filters: special shape, arity and output type. The registry's
priority order is preserved; an empty result is not an error at this stage.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from openops.constants.constants import ANY_ARITY
from openops.core.op_ref import OperationReference
from openops.core.utils import is_assignable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """
    A registered implementation considered for a reference.

    Attributes:
        info: The plugin metadata (class identity, declared shape and types)
        ref: The reference the candidate was matched against
    """
    info: Any
    ref: OperationReference

    @property
    def priority(self) -> float:
        return self.info.priority

    @property
    def op_class(self) -> type:
        return self.info.op_class

    @property
    def arity(self) -> int:
        return self.info.arity

    def __str__(self) -> str:
        return f"{self.info} as {self.info.shape.name}"


def query(env: Any, ref: OperationReference, arity: int = ANY_ARITY) -> List[Candidate]:
    """
    Find the candidates for a reference, in registry priority order.

    Args:
        env: The environment whose registry is queried
        ref: The reference to match
        arity: Required declared arity, or ANY_ARITY

    Returns:
        The candidates that survive the shape, arity and output-type filters
    """
    candidates = [Candidate(info, ref) for info in env.registry.find_candidates(ref)]
    found = len(candidates)

    candidates = filter_special_types(candidates, ref.special_types)
    candidates = filter_arity(candidates, arity)
    candidates = filter_output_type(candidates, ref.output_type)

    logger.debug("Query %s: %d registered, %d candidates", ref.label(), found, len(candidates))
    return candidates


def filter_special_types(candidates: Iterable[Candidate], special_types) -> List[Candidate]:
    """Keep candidates satisfying at least one of the shapes; all when there are none."""
    if not special_types:
        return list(candidates)
    return [
        c for c in candidates
        if any(c.info.shape.satisfies(required) for required in special_types)
    ]


def filter_arity(candidates: Iterable[Candidate], arity: int) -> List[Candidate]:
    """
    Extract the candidates with a particular declared arity.

    Arity comes from each plugin's declared shape; ANY_ARITY (or any negative
    value) disables the filter.
    """
    if arity < 0:
        return list(candidates)
    return [c for c in candidates if c.info.arity == arity]


def filter_output_type(candidates: Iterable[Candidate], output_type: Optional[type]) -> List[Candidate]:
    """
    Keep candidates whose declared output is assignable to `output_type`.

    Candidates that declare no output type are kept; their output is checked
    when an explicit output is bound.
    """
    if output_type is None:
        return list(candidates)
    return [
        c for c in candidates
        if c.info.output_type is None or is_assignable(c.info.output_type, output_type)
    ]
