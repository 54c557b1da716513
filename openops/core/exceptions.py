"""
Custom exceptions for the openops core.

Matching failures are user-facing and carry enough context to diagnose the
request: the reference that was being resolved and the candidates involved.
"""

from typing import Any, List, Optional, Sequence


class OpenOpsError(Exception):
    """Base class for all openops custom exceptions."""
    pass


class RegistryError(OpenOpsError, ValueError):
    """Raised when an op cannot be registered or looked up in a registry."""
    pass


class NoMatchError(OpenOpsError, LookupError):
    """
    Raised when no registered candidate satisfies an operation reference.

    Attributes:
        ref: The reference that was being resolved
        reasons: Why each considered candidate was rejected (may be empty)
    """

    def __init__(self, ref: Any, reasons: Optional[Sequence[str]] = None):
        self.ref = ref
        self.reasons: List[str] = list(reasons or [])

        message = f"No matching op for {ref.label()}"
        if self.reasons:
            message += "\nRejected candidates:\n" + "\n".join(f"  - {r}" for r in self.reasons)
        super().__init__(message)


class AmbiguousMatchError(OpenOpsError, LookupError):
    """
    Raised when two or more candidates tie on both priority and specificity.

    Attributes:
        ref: The reference that was being resolved
        candidates: The tied candidates
    """

    def __init__(self, ref: Any, candidates: Sequence[Any]):
        self.ref = ref
        self.candidates = list(candidates)

        listing = "\n".join(f"  - {c}" for c in self.candidates)
        super().__init__(
            f"Multiple ops of equal priority and specificity match {ref.label()}:\n{listing}"
        )


class ConformanceRejection(OpenOpsError):
    """Raised inside the matcher when a bound op's conforms() returns False."""

    def __init__(self, candidate: Any):
        self.candidate = candidate
        super().__init__(f"{candidate} does not conform to the bound arguments")


class InstantiationFailure(OpenOpsError, RuntimeError):
    """Raised when a candidate's constructor fails."""

    def __init__(self, candidate: Any, cause: BaseException):
        self.candidate = candidate
        self.cause = cause
        super().__init__(f"Cannot instantiate {candidate}: {cause!r}")
