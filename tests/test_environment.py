"""Tests for the op environment, its configuration and the typed lookup helpers."""
import pytest

from openops.core import (GlobalOpsConfig, MapperConfig, MatcherConfig, NoMatchError,
                          OpEnvironment, OperationReference, get_default_environment)
from openops.core.config import get_current_ops_config, set_current_global_config
from openops.data import DoubleType, RealType
from openops.ops import Op
from openops.processing import OP_REGISTRY
from openops.special import (AbstractBinaryHybridCFI1, AbstractNullaryHybridCF,
                             AbstractUnaryFunctionOp, AbstractUnaryHybridCI)
from openops.special.helpers import Computers, Functions, Hybrids, Inplaces


class Scale(Op):
    NAME = "test.env.scale"


class ScaleInPlace(AbstractUnaryHybridCI):
    """x * factor, into an output or in place."""

    def __init__(self, factor=2.0):
        self.factor = factor

    def compute1(self, x, out):
        out.set_real(x.get_real_double() * self.factor)

    def mutate(self, arg):
        arg.set_real(arg.get_real_double() * self.factor)


class ScaleBy(AbstractBinaryHybridCFI1):
    """x * factor with the factor as second input; mutates only x."""

    def create_output(self, x, factor):
        return DoubleType()

    def compute2(self, x, factor, out):
        out.set_real(x.get_real_double() * factor.get_real_double())

    def mutate1(self, arg, factor):
        arg.set_real(arg.get_real_double() * factor.get_real_double())


class Describe(AbstractUnaryFunctionOp):

    def calculate1(self, x):
        return DoubleType(x.get_real_double())


class Fill(Op):
    NAME = "test.env.fill"


class Constant(AbstractNullaryHybridCF):
    """Produces a constant, with no inputs."""

    def __init__(self, value=0.0):
        self.value = value

    def create_output(self):
        return DoubleType()

    def compute0(self, out):
        out.set_real(self.value)


class TestEnvironment:

    def test_defaults(self):
        env = OpEnvironment()
        assert env.registry is OP_REGISTRY
        assert env.config == GlobalOpsConfig()

    def test_default_environment_is_shared(self):
        assert get_default_environment() is get_default_environment()

    def test_reference_or_arguments(self, registry, env):
        registry.register(Describe, Scale, inputs=(RealType,))
        ref = OperationReference.create(Scale, DoubleType(1.0))
        assert isinstance(env.op(ref), Describe)
        with pytest.raises(ValueError):
            env.op(ref, DoubleType(1.0))

    def test_current_config_is_thread_local_default(self):
        config = GlobalOpsConfig(matcher=MatcherConfig(strict_instantiation=True),
                                 mapper=MapperConfig(num_workers=3))
        set_current_global_config(GlobalOpsConfig, config)
        try:
            assert get_current_ops_config() is config
            env = OpEnvironment()
            assert env.config is config
            assert env.matcher.config.strict_instantiation
        finally:
            set_current_global_config(GlobalOpsConfig, None)
        assert get_current_ops_config() == GlobalOpsConfig()


class TestHelpers:

    @pytest.fixture(autouse=True)
    def register(self, registry):
        registry.register(ScaleInPlace, Scale, inputs=(RealType,), output=RealType)
        registry.register(ScaleBy, Scale, inputs=(RealType, RealType), output=RealType)

    def test_computers(self, env):
        op = Computers.unary(env, Scale, DoubleType, DoubleType, factor=3.0)
        assert isinstance(op, ScaleInPlace)
        out = DoubleType()
        op.compute1(DoubleType(2.0), out)
        assert out.get() == 6.0

        op = Computers.binary(env, Scale, DoubleType, DoubleType, DoubleType)
        assert isinstance(op, ScaleBy)

    def test_functions_exclude_pure_computers(self, env):
        op = Functions.binary(env, Scale, None, DoubleType, DoubleType)
        assert op.compute_new(DoubleType(2.0), DoubleType(4.0)).get() == 8.0
        with pytest.raises(NoMatchError):
            Functions.unary(env, Scale, None, DoubleType)

    def test_inplaces(self, env):
        arg = DoubleType(5.0)
        Inplaces.unary(env, Scale, arg).mutate(arg)
        assert arg.get() == 10.0
        # First-input-only mutation does not satisfy a full binary inplace request
        with pytest.raises(NoMatchError):
            Inplaces.binary(env, Scale, DoubleType, DoubleType)

    def test_hybrids(self, env):
        assert isinstance(Hybrids.unary_ci(env, Scale, DoubleType), ScaleInPlace)
        assert isinstance(Hybrids.binary_cf(env, Scale, None, DoubleType, DoubleType), ScaleBy)

        op = Hybrids.binary_cfi1(env, Scale, DoubleType(3.0), DoubleType(2.0))
        assert op.run().get() == 6.0
        arg = DoubleType(1.5)
        op.mutate1(arg, DoubleType(4.0))
        assert arg.get() == 6.0
        with pytest.raises(NoMatchError):
            Hybrids.unary_cfi(env, Scale, DoubleType)

    def test_unary_lookups_hold_extra_inputs_fixed(self, env):
        op = Functions.unary(env, Scale, None, DoubleType, DoubleType(4.0))
        assert isinstance(op, ScaleBy)
        assert op.calculate1(DoubleType(2.0)).get() == 8.0

        op = Inplaces.unary(env, Scale, DoubleType, DoubleType(3.0))
        assert isinstance(op, ScaleBy)
        arg = DoubleType(2.0)
        op.mutate(arg)
        assert arg.get() == 6.0

        out = DoubleType()
        Hybrids.unary_cf(env, Scale, out, DoubleType, DoubleType(0.5)).compute1(DoubleType(6.0), out)
        assert out.get() == 3.0

    def test_nullary_lookups(self, registry, env):
        registry.register(Constant, Fill, output=RealType)

        op = Hybrids.nullary_cf(env, Fill, value=4.0)
        assert isinstance(op, Constant)
        first = op.run()
        assert first.get() == 4.0
        assert op.run() is first

        out = DoubleType()
        Computers.nullary(env, Fill, out, value=1.5).compute0(out)
        assert out.get() == 1.5

        assert Functions.nullary(env, Fill, RealType, value=-2.0).calculate0().get() == -2.0
        with pytest.raises(NoMatchError):
            Computers.nullary(env, Scale, DoubleType())
