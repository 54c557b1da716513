"""
Labelings.

An ImgLabeling assigns each pixel a *set* of labels. Sets are interned in a
LabelingMapping; the pixels of the index image hold the index of their set
in that mapping (index 0 is always the empty set).
"""

import logging
from typing import Any, FrozenSet, Hashable, Iterable, List, Optional, Sequence

import numpy as np

from openops.data.img import ArrayImg

logger = logging.getLogger(__name__)


class LabelingMapping:
    """Ordered, interned collection of label sets."""

    def __init__(self, label_sets: Optional[Iterable[Iterable[Hashable]]] = None):
        self._sets: List[FrozenSet[Hashable]] = [frozenset()]
        self._indices = {frozenset(): 0}
        for label_set in label_sets or ():
            self.index_of(label_set)

    def index_of(self, labels: Iterable[Hashable]) -> int:
        """Index of a label set, interning it if needed."""
        key = frozenset(labels)
        index = self._indices.get(key)
        if index is None:
            index = len(self._sets)
            self._sets.append(key)
            self._indices[key] = index
        return index

    def labels_at_index(self, index: int) -> FrozenSet[Hashable]:
        return self._sets[index]

    def labels(self) -> FrozenSet[Hashable]:
        """All labels used by any set."""
        return frozenset().union(*self._sets)

    def num_sets(self) -> int:
        return len(self._sets)

    def set_label_sets(self, label_sets: Sequence[FrozenSet[Hashable]]) -> None:
        """Replace the interned sets (the first must be the empty set)."""
        if not label_sets or label_sets[0]:
            raise ValueError("The first label set of a mapping must be the empty set")
        self._sets = [frozenset(s) for s in label_sets]
        self._indices = {s: i for i, s in enumerate(self._sets)}

    def label_sets(self) -> List[FrozenSet[Hashable]]:
        return list(self._sets)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, LabelingMapping) and self._sets == other._sets

    def __repr__(self) -> str:
        return f"LabelingMapping({self._sets[1:]!r})"


class ImgLabeling:
    """
    Labeling over an integer index image.

    Args:
        index_img: Integer image of label-set indices
        mapping: The label-set mapping; a new empty one when omitted
    """

    def __init__(self, index_img: ArrayImg, mapping: Optional[LabelingMapping] = None):
        if not np.issubdtype(index_img.dtype, np.integer):
            raise TypeError(f"Index image must be of an integer type, got {index_img.dtype}")
        self.index_img = index_img
        self.mapping = mapping if mapping is not None else LabelingMapping()

    @classmethod
    def create(cls, dimensions: Sequence[int], index_type: type) -> "ImgLabeling":
        return cls(ArrayImg.create(dimensions, index_type))

    def get_index_img(self) -> ArrayImg:
        return self.index_img

    def get_mapping(self) -> LabelingMapping:
        return self.mapping

    def labels_at(self, position: Sequence[int]) -> FrozenSet[Hashable]:
        return self.mapping.labels_at_index(int(self.index_img.data[tuple(position)]))

    def set_labels(self, position: Sequence[int], labels: Iterable[Hashable]) -> None:
        self.index_img.data[tuple(position)] = self.mapping.index_of(labels)

    # -- Interval --

    def num_dimensions(self) -> int:
        return self.index_img.num_dimensions()

    def dimension(self, d: int) -> int:
        return self.index_img.dimension(d)

    def dimensions(self):
        return self.index_img.dimensions()

    def __repr__(self) -> str:
        return f"ImgLabeling({self.index_img!r}, {self.mapping.num_sets() - 1} label sets)"
