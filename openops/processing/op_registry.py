"""
Op registry with automatic plugin registration for openops.

This module provides the @plugin class decorator, which records an op's
declared metadata (op type, name, priority, shape, input and output types) in
a registry for runtime matching. Shapes are read from the class' declared
SHAPE, so no trial instantiation is needed to learn an op's arity or flavor.

The default registry is a global singleton that auto-initializes on first use
by importing every module of the plugin packages, after which it is treated as
read-only and may be shared freely across threads.

Thread Safety:
    Registration and initialization are guarded by a lock. Lookups work on a
    snapshot of the registered entries.
"""
from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from openops.constants.constants import DEFAULT_PLUGIN_PACKAGES, Priority
from openops.core.exceptions import RegistryError
from openops.special.taxonomy import OperationShape, shape_of

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=type)


@dataclass(frozen=True)
class PluginInfo:
    """
    Declared metadata of a registered op.

    Attributes:
        op_class: The op implementation (also its factory)
        op_type: The op type the implementation provides
        name: The op name
        priority: Rank among implementations; higher wins
        shape: Declared special shape
        input_types: Declared type of each typed input
        output_type: Declared output type, or None if unknown
    """
    op_class: type
    op_type: type
    name: str
    priority: float
    shape: OperationShape
    input_types: Tuple[Optional[type], ...]
    output_type: Optional[type] = None
    order: int = field(default=0, compare=False)

    @property
    def arity(self) -> int:
        return int(self.shape.arity)

    def create(self, **params: Any) -> Any:
        return self.op_class(**params)

    def __str__(self) -> str:
        return f"{self.op_class.__module__}.{self.op_class.__qualname__} [priority={self.priority:g}]"


class OpRegistry:
    """
    Registry of op plugins.

    Candidates come back in the registry's native order: descending priority,
    then registration order.
    """

    def __init__(self, plugin_packages: Sequence[str] = ()):
        self._plugins: List[PluginInfo] = []
        self._lock = threading.Lock()
        self._init_lock = threading.RLock()
        self._initializing = False
        self._plugin_packages = tuple(plugin_packages)
        self._initialized = not self._plugin_packages
        self._counter = 0

    # -- Registration --

    def register(self, op_class: type, op_type: Optional[type] = None, name: Optional[str] = None,
                 priority: float = Priority.NORMAL, inputs: Sequence[Optional[type]] = (),
                 output: Optional[type] = None) -> PluginInfo:
        """
        Register an op class.

        Args:
            op_class: The op implementation
            op_type: The op type; defaults to the op class itself
            name: The op name; defaults to the op type's NAME
            priority: Rank among implementations
            inputs: Declared type of each typed input (one per arity)
            output: Declared output type

        Returns:
            The registered PluginInfo

        Raises:
            RegistryError: If the class declares no shape, or its inputs do not match its arity
        """
        op_type = op_type or op_class
        name = name or getattr(op_type, "NAME", None)
        if not name:
            raise RegistryError(f"Cannot register {op_class.__name__}: no name and op type declares no NAME")

        declared_shape = shape_of(op_class)
        if declared_shape is None:
            raise RegistryError(f"Cannot register {op_class.__name__}: it declares no SHAPE")

        inputs = tuple(inputs) if inputs else (None,) * int(declared_shape.arity)
        if len(inputs) != declared_shape.arity:
            raise RegistryError(
                f"Cannot register {op_class.__name__}: {declared_shape.name} takes "
                f"{int(declared_shape.arity)} inputs, {len(inputs)} input types declared"
            )

        with self._lock:
            for existing in self._plugins:
                if existing.op_class is op_class and existing.name == name:
                    logger.debug("Op '%s' already registered as '%s'", op_class.__name__, name)
                    return existing

            self._counter += 1
            info = PluginInfo(
                op_class=op_class,
                op_type=op_type,
                name=name,
                priority=float(priority),
                shape=declared_shape,
                input_types=inputs,
                output_type=output,
                order=self._counter,
            )
            self._plugins.append(info)

        logger.debug("Registered op %s as '%s' (%s)", op_class.__name__, name, declared_shape.name)
        return info

    def unregister(self, op_class: type) -> int:
        """Remove all registrations of an op class. Returns how many were removed."""
        with self._lock:
            before = len(self._plugins)
            self._plugins = [p for p in self._plugins if p.op_class is not op_class]
            removed = before - len(self._plugins)
        if removed:
            logger.debug("Unregistered %d entries for %s", removed, op_class.__name__)
        return removed

    # -- Lookup --

    def plugins(self) -> List[PluginInfo]:
        """All registered plugins, in native (priority) order."""
        self._ensure_initialized()
        with self._lock:
            snapshot = list(self._plugins)
        return sorted(snapshot, key=lambda p: (-p.priority, p.order))

    def find_candidates(self, ref: Any) -> List[PluginInfo]:
        """
        Find plugins whose name and op type match a reference.

        Args:
            ref: An OperationReference

        Returns:
            Matching plugins in native (priority) order
        """
        matches = []
        for info in self.plugins():
            if ref.name is not None and info.name != ref.name:
                continue
            if ref.op_type is not None and not _is_subtype(info.op_type, ref.op_type):
                continue
            matches.append(info)
        return matches

    def instantiate(self, info: PluginInfo, **params: Any) -> Any:
        """Construct an op from its plugin info."""
        return info.create(**params)

    def names(self) -> List[str]:
        return sorted({p.name for p in self.plugins()})

    def __len__(self) -> int:
        return len(self.plugins())

    # -- Initialization --

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            # Re-entry from the same thread happens while scanning imports modules
            if self._initialized or self._initializing:
                return
            self._initializing = True
            try:
                for package_name in self._plugin_packages:
                    _scan_and_register(package_name)
            finally:
                self._initializing = False
            self._initialized = True
        logger.info(
            "Op registry auto-initialized with %d ops from %s",
            len(self._plugins), ", ".join(self._plugin_packages),
        )

    def is_initialized(self) -> bool:
        return self._initialized


def _is_subtype(candidate: Any, wanted: Any) -> bool:
    return inspect.isclass(candidate) and inspect.isclass(wanted) and issubclass(candidate, wanted)


def _scan_and_register(package_name: str) -> None:
    """
    Import every module below a package so that @plugin decorators run.

    Modules that fail to import are logged and skipped.
    """
    package = importlib.import_module(package_name)
    for module_info in pkgutil.walk_packages(package.__path__, prefix=package.__name__ + "."):
        try:
            importlib.import_module(module_info.name)
        except ImportError as e:
            logger.warning("Skipping op module %s: %s", module_info.name, e)


# Global registry of ops, populated from the default plugin package on first use
OP_REGISTRY = OpRegistry(plugin_packages=DEFAULT_PLUGIN_PACKAGES)


def plugin(op_type: Optional[type] = None, *, name: Optional[str] = None,
           priority: float = Priority.NORMAL, inputs: Sequence[Optional[type]] = (),
           output: Optional[type] = None, registry: Optional[OpRegistry] = None) -> Callable[[T], T]:
    """
    Class decorator registering an op in the global (or a given) registry.

    Args:
        op_type: The op type the class provides; defaults to the class itself
        name: The op name; defaults to op_type.NAME
        priority: Rank among implementations of the same op
        inputs: Declared type of each typed input
        output: Declared output type
        registry: Registry to use instead of OP_REGISTRY

    Returns:
        A decorator returning the class unchanged
    """
    def decorator(op_class: T) -> T:
        target = registry if registry is not None else OP_REGISTRY
        target.register(op_class, op_type=op_type, name=name, priority=priority,
                        inputs=inputs, output=output)
        return op_class

    return decorator


def get_plugin_info(op_class: type, registry: Optional[OpRegistry] = None) -> List[PluginInfo]:
    """Get the registrations of an op class."""
    target = registry if registry is not None else OP_REGISTRY
    return [p for p in target.plugins() if p.op_class is op_class]
