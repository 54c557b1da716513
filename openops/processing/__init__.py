"""
Op plugin registry for openops.

Ops are registered with the @plugin class decorator and discovered by the
default registry, which scans the openops.ops and openops.map packages on
first use.
"""

from openops.processing.op_registry import (OP_REGISTRY, OpRegistry,
                                            PluginInfo, get_plugin_info,
                                            plugin)

__all__ = ["OP_REGISTRY", "OpRegistry", "PluginInfo", "plugin", "get_plugin_info"]
