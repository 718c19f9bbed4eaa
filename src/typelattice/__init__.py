"""
typelattice: type hierarchy resolution for static code models.
"""

__version__ = "0.1.0"

from typelattice.model import (
    TypeKind,
    TypeNode,
    ClassNode,
    InterfaceNode,
    Property,
    Method,
    NodeVisitor,
)
from typelattice.store import RelationshipStore
from typelattice.resolution import HierarchyResolver

__all__ = [
    "__version__",
    "TypeKind",
    "TypeNode",
    "ClassNode",
    "InterfaceNode",
    "Property",
    "Method",
    "NodeVisitor",
    "RelationshipStore",
    "HierarchyResolver",
]
