"""Tests for the copy ops."""
import numpy as np
import pytest

from openops.core import NoMatchError
from openops.data import ArrayImg, ByteType, ImgLabeling, LabelingMapping, UnsignedByteType
from openops.ops import Ops
from openops.ops.copy import CopyImgLabeling, CopyRAI


class TestCopyRAI:

    def test_copy_new(self, ops, byte_img):
        copy = ops.run(Ops.Copy.RAI, byte_img)
        assert copy is not byte_img
        assert copy.element_type is ByteType
        np.testing.assert_array_equal(copy.data, byte_img.data)

        copy.data[0, 0] = 0 if byte_img.data[0, 0] else 1
        assert copy.data[0, 0] != byte_img.data[0, 0]

    def test_copy_into(self, ops, byte_img):
        out = ArrayImg.create(byte_img.dimensions(), ByteType)
        op = ops.op(Ops.Copy.RAI, byte_img, output=out)
        assert isinstance(op, CopyRAI)
        assert op.run() is out
        np.testing.assert_array_equal(out.data, byte_img.data)

    def test_compute_into_equals_compute_new(self, ops, byte_img):
        op = ops.op(Ops.Copy.RAI, ArrayImg)
        out = ArrayImg.create(byte_img.dimensions(), ByteType)
        op.compute_into(byte_img, out)
        np.testing.assert_array_equal(out.data, op.compute_new(byte_img).data)

    def test_dimension_mismatch_is_rejected(self, ops, byte_img):
        with pytest.raises(NoMatchError):
            ops.op(Ops.Copy.RAI, byte_img, output=ArrayImg.create((3, 3), ByteType))


class TestCopyLabeling:

    def setup_method(self):
        self.labeling = ImgLabeling.create((4, 5), UnsignedByteType)
        self.labeling.set_labels((0, 0), {"a"})
        self.labeling.set_labels((1, 2), {"a", "b"})
        self.labeling.set_labels((3, 4), {"c"})

    def test_copy_mapping(self, ops):
        mapping = self.labeling.get_mapping()
        copy = ops.run(Ops.Copy.LabelingMapping, mapping)
        assert copy is not mapping
        assert copy == mapping
        copy.index_of({"z"})
        assert copy != mapping

    def test_copy_labeling(self, ops):
        copy = ops.run(Ops.Copy.ImgLabeling, self.labeling)
        assert copy.get_index_img() is not self.labeling.get_index_img()
        assert copy.get_mapping() == self.labeling.get_mapping()
        np.testing.assert_array_equal(copy.get_index_img().data, self.labeling.get_index_img().data)
        assert copy.labels_at((1, 2)) == frozenset({"a", "b"})
        assert copy.labels_at((2, 2)) == frozenset()

        copy.set_labels((2, 2), {"d"})
        assert self.labeling.labels_at((2, 2)) == frozenset()

    def test_copy_labeling_into(self, ops):
        out = ImgLabeling.create((4, 5), UnsignedByteType)
        op = ops.op(Ops.Copy.ImgLabeling, self.labeling, output=out)
        assert isinstance(op, CopyImgLabeling)
        op.run()
        assert out.labels_at((3, 4)) == frozenset({"c"})

    def test_index_type_must_match(self, ops):
        out = ImgLabeling.create((4, 5), ByteType)
        with pytest.raises(NoMatchError):
            ops.op(Ops.Copy.ImgLabeling, self.labeling, output=out)

    def test_dimensions_must_match(self, ops):
        out = ImgLabeling.create((5, 4), UnsignedByteType)
        with pytest.raises(NoMatchError):
            ops.op(Ops.Copy.ImgLabeling, self.labeling, output=out)

    def test_unbound_op_builds_sub_ops_on_first_use(self):
        op = CopyImgLabeling()
        copy = op.compute_new(self.labeling)
        assert copy.labels_at((0, 0)) == frozenset({"a"})
