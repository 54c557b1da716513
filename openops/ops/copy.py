"""
Copy ops.

Copies of images, labeling mappings and whole labelings. All of them can
either copy into a preallocated output or allocate a same-shape one.
"""

import logging
from typing import Any

import numpy as np

from openops.data.img import ArrayImg, equal_dimensions
from openops.data.labeling import ImgLabeling, LabelingMapping
from openops.ops.op_types import Ops
from openops.processing.op_registry import plugin
from openops.special.helpers import Computers
from openops.special.special_op import AbstractUnaryHybridCF, Contingent

logger = logging.getLogger(__name__)


@plugin(Ops.Copy.RAI, inputs=(ArrayImg,), output=ArrayImg)
class CopyRAI(AbstractUnaryHybridCF, Contingent):
    """Copies an image into another image of the same dimensions."""

    def create_output(self, input: ArrayImg) -> ArrayImg:
        return input.factory().create(input.dimensions(), input.element_type)

    def compute1(self, input: ArrayImg, output: ArrayImg) -> None:
        np.copyto(output.data, input.data, casting="unsafe")

    def conforms(self) -> bool:
        if self.in1() is None or self.out() is None:
            return True
        return equal_dimensions(self.in1(), self.out())


@plugin(Ops.Copy.LabelingMapping, inputs=(LabelingMapping,), output=LabelingMapping)
class CopyLabelingMapping(AbstractUnaryHybridCF):

    def create_output(self, input: LabelingMapping) -> LabelingMapping:
        return LabelingMapping()

    def compute1(self, input: LabelingMapping, output: LabelingMapping) -> None:
        output.set_label_sets(input.label_sets())


@plugin(Ops.Copy.ImgLabeling, inputs=(ImgLabeling,), output=ImgLabeling)
class CopyImgLabeling(AbstractUnaryHybridCF, Contingent):
    """
    Copies a labeling by copying its index image and its mapping.

    Both parts are copied by sub-ops looked up once in initialize(). The
    output must have the same dimensions and index element type as the input.
    """

    _index_copy: Any = None
    _mapping_copy: Any = None

    def initialize(self) -> None:
        labeling = self.in1()
        index_img = labeling.get_index_img() if labeling is not None else ArrayImg
        mapping = labeling.get_mapping() if labeling is not None else LabelingMapping
        self._index_copy = Computers.unary(self.ops(), Ops.Copy.RAI, ArrayImg, index_img)
        self._mapping_copy = Computers.unary(self.ops(), Ops.Copy.LabelingMapping,
                                             LabelingMapping, mapping)

    def create_output(self, input: ImgLabeling) -> ImgLabeling:
        index_img = input.get_index_img()
        return ImgLabeling(index_img.factory().create(index_img.dimensions(), index_img.element_type))

    def compute1(self, input: ImgLabeling, output: ImgLabeling) -> None:
        self.ensure_initialized()
        self._index_copy.compute1(input.get_index_img(), output.get_index_img())
        self._mapping_copy.compute1(input.get_mapping(), output.get_mapping())

    def conforms(self) -> bool:
        labeling, out = self.in1(), self.out()
        if labeling is None or out is None:
            return True
        return (equal_dimensions(labeling, out)
                and labeling.get_index_img().element_type is out.get_index_img().element_type)
