"""
Configuration for hierarchy resolution.

Defines the defaults used by relationship stores and hierarchy resolvers.
"""

HIERARCHY_CONFIG = {
    "memoize_closures": True,            # Cache interface closures per node
    "allow_multiple_superclasses": False,  # Accept a second superclass edge (first one wins)
}
