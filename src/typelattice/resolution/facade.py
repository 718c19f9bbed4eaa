"""
Public API for hierarchy resolution.

Provides module-level query functions over a RelationshipStore plus
summaries for downstream reporting.
"""

from typing import List, Optional

from typelattice.logging_config import logger
from typelattice.model.nodes import ClassNode, InterfaceNode, TypeNode
from typelattice.model.visitor import NodeVisitor
from typelattice.schemas import HierarchyStats, TypeSummary
from typelattice.store import RelationshipStore


def get_parent_class(store: RelationshipStore, cls: ClassNode) -> Optional[ClassNode]:
    """Superclass of ``cls``, or None."""
    return store.resolver.get_parent_class(cls)


def get_implemented_interfaces(store: RelationshipStore, cls: ClassNode) -> List[InterfaceNode]:
    """Every interface ``cls`` implements, directly or through its superclasses."""
    return store.resolver.get_implemented_interfaces(cls)


def get_parent_interfaces(store: RelationshipStore, iface: InterfaceNode) -> List[InterfaceNode]:
    return store.resolver.get_parent_interfaces(iface)


def get_child_classes(store: RelationshipStore, cls: ClassNode) -> List[ClassNode]:
    return store.resolver.get_child_classes(cls)


def get_child_interfaces(store: RelationshipStore, iface: InterfaceNode) -> List[InterfaceNode]:
    return store.resolver.get_child_interfaces(iface)


def get_implementing_classes(store: RelationshipStore, iface: InterfaceNode) -> List[ClassNode]:
    return store.resolver.get_implementing_classes(iface)


def get_class_ancestors(store: RelationshipStore, cls: ClassNode) -> List[ClassNode]:
    return store.resolver.get_class_ancestors(cls)


def get_class_descendants(store: RelationshipStore, cls: ClassNode) -> List[ClassNode]:
    """
    Get all classes that inherit from the given class, directly or indirectly.

    Args:
        store: Relationship store
        cls: Base class

    Returns:
        Descendant classes, breadth-first
    """
    return store.resolver.get_class_descendants(cls)


def is_subtype_of(store: RelationshipStore, node: TypeNode, other: TypeNode) -> bool:
    """True if ``node`` is ``other`` or reaches it through extends/implements."""
    return store.resolver.is_subtype_of(node, other)


class _SummaryVisitor(NodeVisitor):
    """Builds a TypeSummary for whichever kind of node it visits."""

    def __init__(self, store: RelationshipStore):
        self.resolver = store.resolver

    def _base(self, node: TypeNode) -> dict:
        return {
            "node_id": node.node_id,
            "name": node.name,
            "kind": node.kind.value,
            "abstract": node.is_abstract(),
            "methods": [m.name for m in node.get_methods()],
        }

    def visit_class(self, node: ClassNode) -> TypeSummary:
        parent = self.resolver.get_parent_class(node)
        return TypeSummary(
            **self._base(node),
            parent_class=parent.name if parent is not None else None,
            interfaces=[i.name for i in self.resolver.get_implemented_interfaces(node)],
            children=[c.name for c in self.resolver.get_child_classes(node)],
            properties=[p.name for p in node.get_properties()],
        )

    def visit_interface(self, node: InterfaceNode) -> TypeSummary:
        return TypeSummary(
            **self._base(node),
            interfaces=[i.name for i in self.resolver.get_parent_interfaces(node)],
            children=[c.name for c in node.children],
        )


class _StatsVisitor(NodeVisitor):
    """Accumulates HierarchyStats over visited nodes."""

    def __init__(self, store: RelationshipStore):
        self.resolver = store.resolver
        self.stats = HierarchyStats(total_edges=store.edge_count())

    def _count_abstract(self, node: TypeNode) -> None:
        if node.is_abstract():
            self.stats.abstract_types += 1

    def visit_class(self, node: ClassNode) -> None:
        self.stats.total_classes += 1
        self._count_abstract(node)
        depth = len(self.resolver.get_class_ancestors(node))
        if depth == 0:
            self.stats.root_classes += 1
        self.stats.max_inheritance_depth = max(self.stats.max_inheritance_depth, depth)

    def visit_interface(self, node: InterfaceNode) -> None:
        self.stats.total_interfaces += 1
        self._count_abstract(node)


def summarize_type(store: RelationshipStore, node: TypeNode) -> TypeSummary:
    """
    Summarize a type and its resolved hierarchy.

    Args:
        store: Relationship store holding the node
        node: Class or interface to summarize

    Returns:
        TypeSummary with names of related types
    """
    store.require(node)
    return node.accept(_SummaryVisitor(store))


def get_hierarchy_stats(store: RelationshipStore) -> HierarchyStats:
    """
    Get statistics about the type graph.

    Args:
        store: Relationship store

    Returns:
        HierarchyStats for every registered node
    """
    visitor = _StatsVisitor(store)
    visitor.visit_all(store.nodes())
    logger.debug(
        f"Hierarchy stats: {visitor.stats.total_classes} classes, "
        f"{visitor.stats.total_interfaces} interfaces, {visitor.stats.total_edges} edges"
    )
    return visitor.stats
