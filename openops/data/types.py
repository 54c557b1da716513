"""
Element types.

Mutable scalar element types in the style of an N-dimensional image library.
An element is either a standalone variable (backed by its own one-element
array) or an accessor into a container's flat storage, moved by a cursor.

The class hierarchy is the type-compatibility order used for specificity:

    NumericType
    └── ComplexType
        ├── ComplexDoubleType
        └── RealType
            ├── DoubleType
            └── IntegerType
                ├── ByteType
                ├── UnsignedByteType
                └── BitType

Integer types clamp on assignment.
"""

import logging
import math
from typing import Any, Optional

import numpy as np

logger = logging.getLogger(__name__)


class NumericType:
    """Base element type."""

    DTYPE: np.dtype = np.dtype(np.float64)

    __slots__ = ("_data", "_index")

    def __init__(self, value: Any = 0, data: Optional[np.ndarray] = None, index: int = 0):
        if data is None:
            data = np.zeros(1, dtype=self.DTYPE)
            self._data = data
            self._index = 0
            self.set(value)
        else:
            self._data = data
            self._index = index

    @classmethod
    def accessor(cls, flat_data: np.ndarray, index: int = 0) -> "NumericType":
        """An element viewing position `index` of a flat array."""
        return cls(data=flat_data, index=index)

    def update_index(self, index: int) -> None:
        """Move an accessor to another position of its backing array."""
        self._index = index

    def get(self) -> Any:
        return self._data[self._index].item()

    def set(self, value: Any) -> None:
        if isinstance(value, NumericType):
            value = value.get()
        self._data[self._index] = value

    def create_variable(self) -> "NumericType":
        """A new standalone element of the same type, set to zero."""
        return type(self)()

    def copy(self) -> "NumericType":
        """A standalone element of the same type holding the same value."""
        return type(self)(self.get())

    def value_equals(self, other: "NumericType") -> bool:
        return self.get() == other.get()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get()!r})"


class ComplexType(NumericType):
    """Element with a real and an imaginary part."""

    DTYPE = np.dtype(np.complex128)
    __slots__ = ()

    def get_real_double(self) -> float:
        return float(np.real(self._data[self._index]))

    def get_imaginary_double(self) -> float:
        return float(np.imag(self._data[self._index]))

    def set_complex_number(self, real: float, imaginary: float) -> None:
        self._data[self._index] = complex(real, imaginary)

    def get_power_double(self) -> float:
        return math.hypot(self.get_real_double(), self.get_imaginary_double())

    def get_phase_double(self) -> float:
        return math.atan2(self.get_imaginary_double(), self.get_real_double())


class ComplexDoubleType(ComplexType):
    DTYPE = np.dtype(np.complex128)
    __slots__ = ()


class RealType(ComplexType):
    """Element with a real value only."""

    DTYPE = np.dtype(np.float64)
    __slots__ = ()

    def get_real_double(self) -> float:
        return float(self._data[self._index])

    def get_imaginary_double(self) -> float:
        return 0.0

    def set_real(self, value: float) -> None:
        self._data[self._index] = value

    def set_complex_number(self, real: float, imaginary: float) -> None:
        self.set_real(real)

    def get_min_value(self) -> float:
        return float(np.finfo(self._data.dtype).min)

    def get_max_value(self) -> float:
        return float(np.finfo(self._data.dtype).max)


class DoubleType(RealType):
    DTYPE = np.dtype(np.float64)
    __slots__ = ()


class IntegerType(RealType):
    """Integer element; assignments are clamped to the type range and rounded, NaN stores 0."""

    DTYPE = np.dtype(np.int64)
    __slots__ = ()

    def get_min_value(self) -> float:
        return float(np.iinfo(self._data.dtype).min)

    def get_max_value(self) -> float:
        return float(np.iinfo(self._data.dtype).max)

    def set_real(self, value: float) -> None:
        if math.isnan(value):
            value = 0.0
        clamped = min(max(value, self.get_min_value()), self.get_max_value())
        self._data[self._index] = int(round(clamped))

    def set(self, value: Any) -> None:
        if isinstance(value, NumericType):
            value = value.get()
        self.set_real(float(value))

    def get_integer(self) -> int:
        return int(self._data[self._index])


class ByteType(IntegerType):
    DTYPE = np.dtype(np.int8)
    __slots__ = ()


class UnsignedByteType(IntegerType):
    DTYPE = np.dtype(np.uint8)
    __slots__ = ()


class BitType(IntegerType):
    """Boolean element."""

    DTYPE = np.dtype(np.bool_)
    __slots__ = ()

    def get_min_value(self) -> float:
        return 0.0

    def get_max_value(self) -> float:
        return 1.0

    def get(self) -> bool:
        return bool(self._data[self._index])

    def set_real(self, value: float) -> None:
        self._data[self._index] = value >= 0.5

    def set(self, value: Any) -> None:
        if isinstance(value, NumericType):
            value = value.get()
        self._data[self._index] = bool(value)


_DTYPE_TO_TYPE = {
    np.dtype(np.int8): ByteType,
    np.dtype(np.uint8): UnsignedByteType,
    np.dtype(np.bool_): BitType,
    np.dtype(np.float64): DoubleType,
    np.dtype(np.complex128): ComplexDoubleType,
}


def type_for_dtype(dtype: Any) -> type:
    """
    Get the element type for a numpy dtype.

    Raises:
        TypeError: If the dtype has no element type
    """
    dtype = np.dtype(dtype)
    element_type = _DTYPE_TO_TYPE.get(dtype)
    if element_type is None:
        if np.issubdtype(dtype, np.integer):
            return IntegerType
        raise TypeError(f"No element type for dtype {dtype}")
    return element_type
