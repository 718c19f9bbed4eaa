"""
Resolution package: hierarchy queries over the relationship store.

Provides parent class lookup, interface closures, child discovery and the
subtype predicate.
"""

from .facade import (
    get_parent_class,
    get_implemented_interfaces,
    get_parent_interfaces,
    get_child_classes,
    get_child_interfaces,
    get_implementing_classes,
    get_class_ancestors,
    get_class_descendants,
    is_subtype_of,
    summarize_type,
    get_hierarchy_stats,
)
from .hierarchy_resolver import HierarchyResolver
from .config import HIERARCHY_CONFIG

__all__ = [
    "get_parent_class",
    "get_implemented_interfaces",
    "get_parent_interfaces",
    "get_child_classes",
    "get_child_interfaces",
    "get_implementing_classes",
    "get_class_ancestors",
    "get_class_descendants",
    "is_subtype_of",
    "summarize_type",
    "get_hierarchy_stats",
    "HierarchyResolver",
    "HIERARCHY_CONFIG",
]
