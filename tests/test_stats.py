"""Tests for the statistics ops."""
import math

import numpy as np
import pytest

from openops.data import ArrayImg, DoubleType
from openops.ops import Ops
from openops.ops.stats import ImgMean, ImgStdDev, IterableMean, IterableStdDev


class TestMean:

    def test_image_variant_is_preferred(self, ops, byte_img):
        assert isinstance(ops.op(Ops.Stats.Mean, byte_img), ImgMean)
        assert isinstance(ops.op(Ops.Stats.Mean, [1.0, 2.0]), IterableMean)

    def test_image_mean(self, ops, byte_img):
        mean = ops.run(Ops.Stats.Mean, byte_img)
        assert mean.get_real_double() == pytest.approx(byte_img.data.astype(float).mean())

    def test_iterable_of_numbers(self, ops):
        assert ops.run(Ops.Stats.Mean, [1, 2, 3, 4]).get() == 2.5

    def test_iterable_of_elements(self, ops):
        values = [DoubleType(1.0), DoubleType(2.0), DoubleType(6.0)]
        assert ops.run(Ops.Stats.Mean, values).get() == 3.0

    def test_image_elements_as_iterable(self, ops, byte_img):
        mean = IterableMean().compute_new(byte_img)
        assert mean.get() == pytest.approx(ops.run(Ops.Stats.Mean, byte_img).get())

    def test_empty(self, ops):
        assert math.isnan(ops.run(Ops.Stats.Mean, []).get())

    def test_into_existing_output(self, ops):
        out = DoubleType()
        ops.op(Ops.Stats.Mean, np.array([2.0, 4.0]), output=out).run()
        assert out.get() == 3.0


class TestStdDev:

    def test_sample_standard_deviation(self, ops):
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        result = ops.run(Ops.Stats.StdDev, values)
        assert result.get() == pytest.approx(np.std(values, ddof=1))

    def test_image_and_iterable_agree(self, ops, byte_img):
        assert isinstance(ops.op(Ops.Stats.StdDev, byte_img), ImgStdDev)
        from_img = ops.run(Ops.Stats.StdDev, byte_img).get()
        from_iterable = IterableStdDev().compute_new(list(byte_img.data.ravel())).get()
        assert from_img == pytest.approx(from_iterable)

    def test_single_value_has_no_spread(self, ops):
        assert ops.run(Ops.Stats.StdDev, [3.0]).get() == 0.0
        img = ArrayImg(np.array([[7.0]]))
        assert ops.run(Ops.Stats.StdDev, img).get() == 0.0
