"""
Op matcher.

Resolves an OperationReference to a single bound special op:

1. query the registry for candidates (name/type, shape, arity, output type)
2. score each candidate by (priority, specificity) against the supplied args
3. walk the score levels best-first; at each level instantiate and bind every
   candidate and drop those whose conforms() rejects the binding
4. exactly one survivor wins; several survivors are ambiguous; none falls
   through to the next level
5. the winner gets its environment injected and is initialized once

Candidates whose constructor fails are logged and skipped unless the matcher
config asks for strict instantiation.
"""

import inspect
import itertools
import logging
from typing import Any, List, Optional, Tuple

from openops.constants.constants import ANY_ARITY, Flavor
from openops.core.candidates import Candidate, query
from openops.core.config import MatcherConfig
from openops.core.exceptions import (AmbiguousMatchError, ConformanceRejection,
                                     InstantiationFailure, NoMatchError)
from openops.core.op_ref import OperationReference
from openops.core.utils import concrete_type, specificity, type_distance
from openops.special.special_op import Contingent, SpecialOp

logger = logging.getLogger(__name__)

Score = Tuple[float, int]


class OpMatcher:
    """Selects, instantiates and binds the best op for a reference."""

    def __init__(self, config: Optional[MatcherConfig] = None):
        self.config = config or MatcherConfig()

    def resolve(self, env: Any, ref: OperationReference, arity: int = ANY_ARITY) -> SpecialOp:
        """
        Resolve a reference to a bound, initialized op.

        Args:
            env: The environment providing the registry (and injected into the op)
            ref: What to look for
            arity: Required declared arity, or ANY_ARITY

        Returns:
            The bound op

        Raises:
            NoMatchError: If no candidate matches, or all of them were rejected
            AmbiguousMatchError: If several candidates tie on priority and specificity
            InstantiationFailure: If a constructor fails and strict_instantiation is set
        """
        candidates = query(env, ref, arity)
        if not candidates:
            raise NoMatchError(ref)

        reasons: List[str] = []
        scored = self.score_candidates(candidates, ref, reasons)

        for score, level in itertools.groupby(scored, key=lambda item: item[1]):
            survivors = []
            for candidate, _ in level:
                op = self._bind(env, candidate, ref, reasons)
                if op is not None:
                    survivors.append((candidate, op))

            if len(survivors) > 1:
                raise AmbiguousMatchError(ref, [c for c, _ in survivors])
            if survivors:
                candidate, op = survivors[0]
                logger.debug("Resolved %s to %s (score=%s)", ref.label(), candidate, score)
                op.ensure_initialized()
                return op

        raise NoMatchError(ref, reasons)

    def score_candidates(self, candidates: List[Candidate], ref: OperationReference,
                         reasons: Optional[List[str]] = None) -> List[Tuple[Candidate, Score]]:
        """
        Score candidates against the reference's arguments, best first.

        Sorting is stable, so candidates with equal scores keep registry order.
        """
        scored = []
        for candidate in candidates:
            score = self.score(candidate, ref)
            if score is None:
                if reasons is not None:
                    reasons.append(f"{candidate}: arguments {_describe(ref)} do not fit "
                                   f"declared inputs {_describe_types(candidate.info.input_types)}")
                continue
            scored.append((candidate, score))
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored

    def score(self, candidate: Candidate, ref: OperationReference) -> Optional[Score]:
        """
        Combined (priority, specificity) score, or None if the arguments do not fit.

        Specificity is the negated sum of type distances between the supplied
        arguments (and explicit output) and the candidate's declared types.
        """
        info = candidate.info
        args_score = specificity(ref.arg_types, info.input_types)
        if args_score is None:
            return None

        if ref.output is not None:
            if not (info.shape.has(Flavor.COMPUTER)):
                return None
            out_distance = type_distance(concrete_type(ref.output), info.output_type)
            if out_distance is None:
                return None
            args_score -= out_distance

        return (info.priority, args_score)

    def _bind(self, env: Any, candidate: Candidate, ref: OperationReference,
              reasons: List[str]) -> Optional[SpecialOp]:
        try:
            op = env.registry.instantiate(candidate.info, **ref.params)
        except Exception as e:
            if self.config.strict_instantiation:
                raise InstantiationFailure(candidate, e) from e
            logger.warning("Skipping op candidate %s: %s", candidate, e)
            reasons.append(str(InstantiationFailure(candidate, e)))
            return None

        inputs = [None if inspect.isclass(a) else a for a in ref.args]
        output = None if inspect.isclass(ref.output) else ref.output
        lazy = (output is None
                and candidate.info.shape.has(Flavor.FUNCTION)
                and candidate.info.shape.has(Flavor.COMPUTER))

        op.set_environment(env)
        op.bind(inputs, output, lazy_output=lazy)

        if isinstance(op, Contingent) and not op.conforms():
            rejection = ConformanceRejection(candidate)
            logger.debug("%s", rejection)
            reasons.append(str(rejection))
            return None
        return op


def _describe(ref: OperationReference) -> str:
    return _describe_types(ref.arg_types)


def _describe_types(types) -> str:
    return "(" + ", ".join("?" if t is None else t.__name__ for t in types) + ")"
