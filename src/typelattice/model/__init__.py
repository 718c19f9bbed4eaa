"""Type node model and visitor capability."""

from .nodes import (
    TypeKind,
    TypeNode,
    ClassNode,
    InterfaceNode,
    Member,
    Property,
    Method,
)
from .visitor import NodeVisitor

__all__ = [
    "TypeKind",
    "TypeNode",
    "ClassNode",
    "InterfaceNode",
    "Member",
    "Property",
    "Method",
    "NodeVisitor",
]
