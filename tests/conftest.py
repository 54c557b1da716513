"""Global pytest configuration for openops tests."""
import os

import numpy as np
import pytest

from openops.core import GlobalOpsConfig, MapperConfig, OpEnvironment, get_default_environment
from openops.data import ArrayImg, ByteType
from openops.processing import OpRegistry


def pytest_addoption(parser):
    """Add command-line options for the threaded tests."""

    # Helper function to get default from environment variable
    def env_default(env_var, default_value):
        return os.getenv(env_var, default_value)

    parser.addoption(
        "--ops-workers",
        action="store",
        default=env_default("OPENOPS_WORKERS", "4"),
        help="Number of worker threads used by threaded mapper tests (default: 4)."
    )


def pytest_configure(config):
    """Validate configuration options."""
    value = config.getoption("--ops-workers")
    if not value.isdigit() or int(value) < 1:
        raise pytest.UsageError(f"Invalid value '{value}' for --ops-workers: expected a positive integer")


@pytest.fixture
def num_workers(request):
    """Worker count for threaded mappers."""
    return int(request.config.getoption("--ops-workers"))


@pytest.fixture
def registry():
    """An empty registry for ops defined inside a test."""
    return OpRegistry()


@pytest.fixture
def env(registry):
    """An environment over the empty test registry."""
    return OpEnvironment(registry=registry)


@pytest.fixture
def ops(num_workers):
    """An environment over the global registry of built-in ops."""
    return OpEnvironment(config=GlobalOpsConfig(mapper=MapperConfig(num_workers=num_workers)))


@pytest.fixture
def default_ops():
    return get_default_environment()


@pytest.fixture
def byte_img():
    """A 10x10 ByteType image covering the whole int8 range, with a fixed seed."""
    rng = np.random.default_rng(1234)
    data = rng.integers(-128, 127, size=(10, 10), dtype=np.int8, endpoint=True)
    return ArrayImg(data, ByteType)
