"""
Operation references.

An OperationReference is the immutable matching key describing a desired op:
its name and/or op type, the special shapes it must satisfy, the expected
output type and the arguments it will be bound to.
"""

import inspect
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple, Type

from openops.special.taxonomy import OperationShape, normalize_shapes

logger = logging.getLogger(__name__)


def _type_name(value: Any) -> str:
    if value is None:
        return "None"
    if inspect.isclass(value):
        return value.__name__
    return type(value).__name__


@dataclass(frozen=True)
class OperationReference:
    """
    Immutable descriptor of a desired operation.

    Attributes:
        name: Op name (e.g. "copy.rai"), or None to match by op type only
        op_type: Op type class; candidates must declare it or a subclass of it
        special_types: Shapes the op must satisfy (any one of them); empty means any
        output_type: Type the op's output must be assignable to, or None
        args: Typed inputs, in order. A class stands for "an input of this type"
        output: Explicit output (value or class), or None
        params: Named op parameters passed to the op constructor
    """
    name: Optional[str] = None
    op_type: Optional[Type] = None
    special_types: FrozenSet[OperationShape] = frozenset()
    output_type: Optional[Type] = None
    args: Tuple[Any, ...] = ()
    output: Any = None
    params: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if self.name is None and self.op_type is None:
            raise ValueError("An operation reference needs a name or an op type")
        # Frozen dataclass: normalise fields through object.__setattr__
        object.__setattr__(self, "special_types", normalize_shapes(self.special_types))
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def create(cls, name_or_type: Any, *args: Any, special_type: Any = None,
               output_type: Optional[Type] = None, output: Any = None,
               **params: Any) -> "OperationReference":
        """
        Build a reference from either an op name or an op type.

        Args:
            name_or_type: A name string or an op type class
            *args: The typed inputs
            special_type: A shape, capability class, or collection of those
            output_type: Expected output type
            output: Explicit output
            **params: Named op parameters
        """
        if isinstance(name_or_type, str):
            name, op_type = name_or_type, None
        else:
            name, op_type = getattr(name_or_type, "NAME", None), name_or_type
        return cls(
            name=name,
            op_type=op_type,
            special_types=normalize_shapes(special_type),
            output_type=output_type,
            args=args,
            output=output,
            params=params,
        )

    @property
    def arg_types(self) -> Tuple[Optional[type], ...]:
        """Concrete type of each argument; None for wildcard (None) arguments."""
        return tuple(
            None if a is None else (a if inspect.isclass(a) else type(a))
            for a in self.args
        )

    def label(self) -> str:
        """Human-readable summary used in error messages."""
        target = self.name or getattr(self.op_type, "__name__", str(self.op_type))
        if self.op_type is not None and self.name is not None:
            target = f"{self.name} ({self.op_type.__name__})"
        parts = [f"{target}({', '.join(_type_name(a) for a in self.args)})"]
        if self.special_types:
            parts.append("as " + " | ".join(sorted(s.name for s in self.special_types)))
        if self.output is not None:
            parts.append(f"into {_type_name(self.output)}")
        if self.output_type is not None:
            parts.append(f"-> {self.output_type.__name__}")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.label()
