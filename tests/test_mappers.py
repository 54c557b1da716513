"""Tests for the sequential and threaded mappers."""
import threading

import numpy as np
import pytest

from openops.core import MapperConfig, NoMatchError
from openops.data import ArrayImg, ByteType
from openops.map import (BinaryMapper, InplaceMapper, Mapper, ThreadedBinaryMapper,
                         ThreadedInplaceMapper, ThreadedMapper, chunk, run_chunks)
from openops.ops import Ops
from openops.special import AbstractUnaryComputerOp
from openops.special.helpers import Computers, Inplaces


def clamped(values):
    return np.clip(values, -128, 127).astype(np.int8)


class Exploding(AbstractUnaryComputerOp):
    """Fails on negative elements."""

    def compute1(self, x, out):
        if x.get_real_double() < 0:
            raise ValueError(f"negative element {x.get()}")
        out.set(x)


class Recording(AbstractUnaryComputerOp):
    """Copies elements and records every independent instance handed out."""

    clones = []
    lock = threading.Lock()

    def compute1(self, x, out):
        out.set(x)

    def get_independent_instance(self):
        clone = Recording()
        with self.lock:
            Recording.clones.append(clone)
        return clone


class TestChunk:

    def test_even_split(self):
        assert chunk(10, 2) == [(0, 5), (5, 5)]

    def test_remainder_goes_to_first_chunks(self):
        assert chunk(10, 3) == [(0, 4), (4, 3), (7, 3)]

    def test_more_chunks_than_elements(self):
        assert chunk(2, 5) == [(0, 1), (1, 1)]

    def test_empty(self):
        assert chunk(0, 4) == []

    def test_invalid(self):
        with pytest.raises(ValueError):
            chunk(10, 0)
        with pytest.raises(ValueError):
            chunk(-1, 2)

    def test_run_chunks_covers_range(self):
        seen = []
        lock = threading.Lock()

        def task(start, count):
            with lock:
                seen.extend(range(start, start + count))

        run_chunks(task, 17, 4)
        assert sorted(seen) == list(range(17))

    def test_run_chunks_reraises_first_failure(self):
        def task(start, count):
            if start > 0:
                raise RuntimeError(f"chunk at {start}")

        with pytest.raises(RuntimeError, match="chunk at 25"):
            run_chunks(task, 100, 4)


class TestUnaryMappers:
    """Subtracting 5 from a byte image, element by element."""

    def test_sequential_threaded_and_inplace_agree(self, ops, byte_img):
        expected = clamped(byte_img.data.astype(np.int64) - 5)

        add = Computers.unary(ops, Ops.Math.Add, ByteType, ByteType, value=-5)
        sequential = ArrayImg.create(byte_img.dimensions(), ByteType)
        Mapper(op=add).compute1(byte_img, sequential)

        threaded = ArrayImg.create(byte_img.dimensions(), ByteType)
        mapper = ops.op(Ops.Map, byte_img, output=threaded, op=add)
        assert isinstance(mapper, ThreadedMapper)
        mapper.run()

        in_place = byte_img.copy()
        add_in_place = Inplaces.unary(ops, Ops.Math.Add, ByteType, value=-5)
        inplace_mapper = ops.op(Ops.Map, in_place, op=add_in_place)
        assert isinstance(inplace_mapper, ThreadedInplaceMapper)
        inplace_mapper.run()

        np.testing.assert_array_equal(sequential.data, expected)
        np.testing.assert_array_equal(threaded.data, expected)
        np.testing.assert_array_equal(in_place.data, expected)

    def test_sequential_inplace(self, ops, byte_img):
        expected = clamped(byte_img.data.astype(np.int64) + 100)
        add = Inplaces.unary(ops, Ops.Math.Add, ByteType, value=100)
        InplaceMapper(op=add).mutate(byte_img)
        np.testing.assert_array_equal(byte_img.data, expected)

    def test_threaded_worker_count_from_config(self, ops, byte_img, num_workers):
        Recording.clones = []
        out = ArrayImg.create(byte_img.dimensions(), ByteType)
        ThreadedMapper(op=Recording()).compute1(byte_img, out)
        np.testing.assert_array_equal(out.data, byte_img.data)

        Recording.clones = []
        mapper = ops.op(Ops.Map, byte_img, output=out, op=Recording())
        mapper.run()
        assert len(Recording.clones) == min(num_workers, byte_img.size)

    def test_threaded_independent_instance_per_chunk(self, byte_img):
        Recording.clones = []
        out = ArrayImg.create(byte_img.dimensions(), ByteType)
        ThreadedMapper(op=Recording(), num_workers=3).compute1(byte_img, out)
        assert len(Recording.clones) == 3
        assert len({id(c) for c in Recording.clones}) == 3

    def test_threaded_failure_propagates(self, byte_img):
        out = ArrayImg.create(byte_img.dimensions(), ByteType)
        byte_img.data[-1, -1] = -1
        with pytest.raises(ValueError, match="negative element"):
            ThreadedMapper(op=Exploding(), num_workers=4).compute1(byte_img, out)

    def test_element_op_must_be_a_computer(self, ops, byte_img):
        padding = ops.op(Ops.Filter.PaddingIntervalCentered, byte_img, (12, 12))
        out = ArrayImg.create(byte_img.dimensions(), ByteType)
        with pytest.raises(NoMatchError):
            ops.op(Ops.Map, byte_img, output=out, op=padding)

    def test_dimensions_must_agree(self, ops, byte_img):
        add = Computers.unary(ops, Ops.Math.Add, ByteType, ByteType, value=1)
        out = ArrayImg.create((5, 5), ByteType)
        with pytest.raises(NoMatchError):
            ops.op(Ops.Map, byte_img, output=out, op=add)

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            ThreadedMapper(op=Recording(), num_workers=0)
        with pytest.raises(ValueError):
            MapperConfig(num_workers=0)


class TestBinaryMappers:

    def test_sequential_and_threaded_agree(self, ops, byte_img):
        other = ArrayImg(np.flip(byte_img.data), ByteType)
        expected = clamped(byte_img.data.astype(np.int64) - other.data.astype(np.int64))

        subtract = Computers.binary(ops, Ops.Math.Subtract, ByteType, ByteType, ByteType)
        sequential = ArrayImg.create(byte_img.dimensions(), ByteType)
        BinaryMapper(op=subtract).compute2(byte_img, other, sequential)

        threaded = ArrayImg.create(byte_img.dimensions(), ByteType)
        mapper = ops.op(Ops.Map, byte_img, other, output=threaded, op=subtract)
        assert isinstance(mapper, ThreadedBinaryMapper)
        mapper.run()

        np.testing.assert_array_equal(sequential.data, expected)
        np.testing.assert_array_equal(threaded.data, expected)
