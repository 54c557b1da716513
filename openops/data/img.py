"""
Array-backed images.

ArrayImg is the addressable-element container ops read from and write into.
It wraps a C-contiguous numpy array together with an element type, and
exposes cursors (iteration in a stable, flat C order), random access by
coordinate, and a factory for same-shape containers.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence, Tuple

import numpy as np

from openops.data.types import NumericType, type_for_dtype

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """Axis-aligned integer interval with inclusive bounds."""
    min: Tuple[int, ...]
    max: Tuple[int, ...]

    def __post_init__(self):
        if len(self.min) != len(self.max):
            raise ValueError(f"Interval bounds differ in dimensionality: {self.min} vs {self.max}")

    @classmethod
    def from_dimensions(cls, dimensions: Sequence[int]) -> "Interval":
        return cls(tuple(0 for _ in dimensions), tuple(int(d) - 1 for d in dimensions))

    def num_dimensions(self) -> int:
        return len(self.min)

    def dimension(self, d: int) -> int:
        return self.max[d] - self.min[d] + 1

    def dimensions(self) -> Tuple[int, ...]:
        return tuple(self.dimension(d) for d in range(self.num_dimensions()))


def equal_dimensions(a: Any, b: Any) -> bool:
    """Whether two intervals (or images) have the same size along every axis."""
    return tuple(a.dimensions()) == tuple(b.dimensions())


class Cursor:
    """
    Forward iterator over (a contiguous range of) an image's elements.

    The cursor starts *before* its first element; call fwd() before get().
    get() returns a single accessor that is moved along, so values must be
    read before advancing.

    Args:
        img: The image to iterate
        start: First flat index of the range
        count: Number of elements in the range; defaults to the rest of the image
    """

    def __init__(self, img: "ArrayImg", start: int = 0, count: Optional[int] = None):
        if count is None:
            count = img.size - start
        if start < 0 or count < 0 or start + count > img.size:
            raise ValueError(f"Range [{start}, {start + count}) outside image of size {img.size}")
        self._img = img
        self._start = start
        self._end = start + count
        self._index = start - 1
        self._element = img.element_type.accessor(img.flat, max(start, 0) if img.size else 0)

    def fwd(self) -> None:
        self._index += 1
        self._element.update_index(self._index)

    def jump_fwd(self, steps: int) -> None:
        self._index += steps
        self._element.update_index(self._index)

    def has_next(self) -> bool:
        return self._index + 1 < self._end

    def get(self) -> NumericType:
        return self._element

    def next(self) -> NumericType:
        self.fwd()
        return self._element

    def reset(self) -> None:
        self._index = self._start - 1

    def get_index(self) -> int:
        return self._index

    def position(self) -> Tuple[int, ...]:
        return tuple(int(i) for i in np.unravel_index(self._index, self._img.shape))

    def __iter__(self) -> Iterator[NumericType]:
        while self.has_next():
            yield self.next()


class RandomAccess:
    """Accessor positioned by coordinate."""

    def __init__(self, img: "ArrayImg"):
        self._img = img
        self._position: Tuple[int, ...] = tuple(0 for _ in img.shape)
        self._element = img.element_type.accessor(img.flat, 0)

    def set_position(self, position: Sequence[int]) -> None:
        self._position = tuple(int(p) for p in position)
        self._element.update_index(int(np.ravel_multi_index(self._position, self._img.shape)))

    def position(self) -> Tuple[int, ...]:
        return self._position

    def get(self) -> NumericType:
        return self._element


class ArrayImgFactory:
    """Creates zero-filled array images."""

    def create(self, dimensions: Sequence[int], element_type: type) -> "ArrayImg":
        return ArrayImg(np.zeros(tuple(dimensions), dtype=element_type.DTYPE), element_type)


class ArrayImg:
    """
    N-dimensional image backed by a numpy array.

    Args:
        data: The pixel array; copied only if it is not C-contiguous or not
            of the element type's dtype
        element_type: Element type; inferred from the dtype when omitted
    """

    def __init__(self, data: np.ndarray, element_type: Optional[type] = None):
        if element_type is None:
            element_type = type_for_dtype(np.asarray(data).dtype)
            data = np.ascontiguousarray(data)
        else:
            data = np.ascontiguousarray(data, dtype=element_type.DTYPE)
        self._data = data
        self._flat = data.reshape(-1)
        self.element_type = element_type

    @classmethod
    def create(cls, dimensions: Sequence[int], element_type: type) -> "ArrayImg":
        return ArrayImgFactory().create(dimensions, element_type)

    # -- Array access --

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def flat(self) -> np.ndarray:
        return self._flat

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._data.shape

    @property
    def ndim(self) -> int:
        return self._data.ndim

    @property
    def size(self) -> int:
        return int(self._data.size)

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def __array__(self, dtype=None, copy=None):
        return np.asarray(self._data, dtype=dtype)

    # -- Interval --

    def num_dimensions(self) -> int:
        return self._data.ndim

    def dimension(self, d: int) -> int:
        return int(self._data.shape[d])

    def dimensions(self) -> Tuple[int, ...]:
        return tuple(int(s) for s in self._data.shape)

    def min(self, d: int) -> int:
        return 0

    def max(self, d: int) -> int:
        return self.dimension(d) - 1

    def interval(self) -> Interval:
        return Interval.from_dimensions(self.dimensions())

    # -- Iteration --

    def cursor(self, start: int = 0, count: Optional[int] = None) -> Cursor:
        return Cursor(self, start, count)

    def random_access(self) -> RandomAccess:
        return RandomAccess(self)

    def first_element(self) -> NumericType:
        return self.element_type.accessor(self._flat, 0)

    def __iter__(self) -> Iterator[NumericType]:
        for index in range(self.size):
            yield self.element_type.accessor(self._flat, index)

    def __len__(self) -> int:
        return self.size

    # -- Creation --

    def factory(self) -> ArrayImgFactory:
        return ArrayImgFactory()

    def copy(self) -> "ArrayImg":
        return ArrayImg(self._data.copy(), self.element_type)

    def __repr__(self) -> str:
        return f"ArrayImg({self.element_type.__name__}, shape={self.shape})"
