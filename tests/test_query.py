"""Tests for operation references and the candidate query."""
import pytest

from openops.constants import ANY_ARITY, Flavor, Priority
from openops.core import OperationReference, filter_arity, query
from openops.core.utils import specificity, type_distance
from openops.data import ByteType, DoubleType, IntegerType, RealType
from openops.ops import Op
from openops.special import (AbstractBinaryComputerOp, AbstractUnaryComputerOp,
                             AbstractUnaryFunctionOp, AbstractUnaryHybridCFI)
from openops.special import taxonomy


class Shift(Op):
    NAME = "test.shift"


class ShiftComputer(AbstractUnaryComputerOp):
    def compute1(self, x, out):
        out.set_real(x.get_real_double() + 1)


class ShiftFunction(AbstractUnaryFunctionOp):
    def calculate1(self, x):
        return DoubleType(x.get_real_double() + 1)


class ShiftEverything(AbstractUnaryHybridCFI):
    def create_output(self, x):
        return x.create_variable()

    def compute1(self, x, out):
        out.set_real(x.get_real_double() + 1)

    def mutate(self, arg):
        arg.set_real(arg.get_real_double() + 1)


class ShiftBy(AbstractBinaryComputerOp):
    def compute2(self, x, amount, out):
        out.set_real(x.get_real_double() + amount.get_real_double())


class TestOperationReference:

    def test_needs_name_or_type(self):
        with pytest.raises(ValueError):
            OperationReference()

    def test_create_from_type(self):
        ref = OperationReference.create(Shift, DoubleType(1.0))
        assert ref.name == "test.shift"
        assert ref.op_type is Shift
        assert ref.arg_types == (DoubleType,)

    def test_create_from_name(self):
        ref = OperationReference.create("test.shift", DoubleType, None,
                                        special_type=taxonomy.UNARY_COMPUTER)
        assert ref.op_type is None
        assert ref.arg_types == (DoubleType, None)
        assert ref.special_types == frozenset({taxonomy.UNARY_COMPUTER})

    def test_params_are_read_only(self):
        ref = OperationReference.create("test.shift", amount=2)
        assert ref.params["amount"] == 2
        with pytest.raises(TypeError):
            ref.params["amount"] = 3

    def test_label(self):
        ref = OperationReference.create("test.shift", DoubleType(1.0),
                                        special_type=taxonomy.UNARY_COMPUTER,
                                        output=DoubleType)
        label = ref.label()
        assert label.startswith("test.shift(DoubleType)")
        assert "UnaryComputerOp" in label
        assert "into DoubleType" in label


class TestTypeDistance:

    def test_exact_and_inherited(self):
        assert type_distance(DoubleType, DoubleType) == 0
        assert type_distance(DoubleType, RealType) == 1
        assert type_distance(ByteType, RealType) == 2

    def test_not_assignable(self):
        assert type_distance(DoubleType, IntegerType) is None

    def test_wildcards(self):
        assert type_distance(None, IntegerType) == 0
        assert type_distance(DoubleType, None) == len(DoubleType.__mro__) - 1

    def test_specificity_is_negated_total(self):
        assert specificity((ByteType, DoubleType), (RealType, RealType)) == -3
        assert specificity((ByteType,), (RealType, RealType)) is None


class TestQuery:

    @pytest.fixture(autouse=True)
    def register(self, registry):
        registry.register(ShiftComputer, Shift, priority=Priority.LOW)
        registry.register(ShiftFunction, Shift)
        registry.register(ShiftEverything, Shift, priority=Priority.HIGH)
        registry.register(ShiftBy, Shift)

    def _classes(self, candidates):
        return [c.op_class for c in candidates]

    def test_priority_order(self, env):
        candidates = env.candidates("test.shift")
        assert self._classes(candidates) == [ShiftEverything, ShiftFunction, ShiftBy, ShiftComputer]

    def test_idempotent(self, env):
        ref = OperationReference.create("test.shift", DoubleType)
        assert self._classes(query(env, ref)) == self._classes(query(env, ref))

    def test_by_arity(self, env):
        assert self._classes(env.candidates("test.shift", arity=2)) == [ShiftBy]
        assert len(env.candidates("test.shift", arity=1)) == 3
        assert env.candidates("test.shift", arity=0) == []
        assert len(env.candidates("test.shift", arity=ANY_ARITY)) == 4

    def test_by_flavor(self, env):
        assert self._classes(env.candidates("test.shift", flavor=Flavor.INPLACE)) == [ShiftEverything]
        assert self._classes(env.candidates("test.shift", flavor=Flavor.COMPUTER)) == \
            [ShiftEverything, ShiftBy, ShiftComputer]

    def test_by_special_type(self, env):
        ref = OperationReference.create("test.shift", special_type=taxonomy.UNARY_FUNCTION)
        assert self._classes(query(env, ref)) == [ShiftEverything, ShiftFunction]

    def test_higher_arity_satisfies_lower_shape(self, env):
        ref = OperationReference.create("test.shift", special_type=taxonomy.UNARY_COMPUTER)
        assert ShiftBy in self._classes(query(env, ref))

    def test_filter_arity_keeps_order(self, env):
        candidates = env.candidates("test.shift")
        assert self._classes(filter_arity(candidates, 1)) == [ShiftEverything, ShiftFunction, ShiftComputer]

    def test_by_op_type(self, env):
        ref = OperationReference(op_type=Shift)
        assert len(query(env, ref)) == 4

    def test_unknown_name_is_empty(self, env):
        assert env.candidates("test.unknown") == []
