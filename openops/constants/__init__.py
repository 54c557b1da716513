from openops.constants.constants import (ANY_ARITY, DEFAULT_NUM_WORKERS, Arity,
                                         Flavor, Priority)

__all__ = ["Arity", "Flavor", "Priority", "ANY_ARITY", "DEFAULT_NUM_WORKERS"]
