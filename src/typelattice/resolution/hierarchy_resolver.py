"""
Hierarchy resolution over a RelationshipStore.

Answers parent class, interface closure, child and subtype queries. All
queries are read-only; interface closures are memoized per node and dropped
whenever the store's generation changes.
"""

import threading
from typing import Callable, Dict, List, Optional, Set, Tuple

from typelattice.logging_config import logger
from typelattice.model.nodes import ClassNode, InterfaceNode, TypeKind, TypeNode
from typelattice.store import RelationshipStore


class HierarchyResolver:
    """
    Resolves type hierarchy questions against a relationship store.

    Interface closures are depth-first, in edge-insertion order and
    deduplicated by identity. The identity check before descending into an
    interface also guards against malformed cyclic graphs.
    """

    def __init__(self, store: RelationshipStore, config: Optional[Dict[str, bool]] = None):
        """
        Initialize the resolver.

        Args:
            store: Relationship store to query
            config: Hierarchy settings; defaults to the store's settings
        """
        self.store = store
        self.config = config if config is not None else store.config
        self._cache: Dict[Tuple[str, str], List[TypeNode]] = {}
        self._cache_generation = store.generation
        self._lock = threading.Lock()

    # Memoization

    def _memoized(
        self,
        query: str,
        node: TypeNode,
        compute: Callable[[TypeNode], List[TypeNode]],
    ) -> List[TypeNode]:
        if not self.config.get("memoize_closures", True):
            return compute(node)

        key = (query, node.node_id)
        with self._lock:
            if self._cache_generation != self.store.generation:
                if self._cache:
                    logger.debug(
                        f"Store generation {self.store.generation} != "
                        f"{self._cache_generation}, dropping {len(self._cache)} cached closures"
                    )
                self._cache.clear()
                self._cache_generation = self.store.generation
            cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        generation = self.store.generation
        result = compute(node)
        with self._lock:
            if generation == self._cache_generation == self.store.generation:
                self._cache[key] = result
        return list(result)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
            self._cache_generation = self.store.generation

    # Traversal helpers

    def _walk_super_interfaces(
        self,
        start: TypeNode,
        result: List[TypeNode],
        seen: Set[TypeNode],
    ) -> None:
        """Append the super-interfaces of ``start`` depth-first, skipping seen ones."""
        stack = [iter(self.store.interface_dependencies(start))]
        while stack:
            for parent in stack[-1]:
                if parent in seen:
                    continue
                seen.add(parent)
                result.append(parent)
                stack.append(iter(self.store.interface_dependencies(parent)))
                break
            else:
                stack.pop()

    def _superclass_chain(self, cls: TypeNode) -> List[TypeNode]:
        """The class itself followed by its superclasses, stopping at a cycle."""
        chain = [cls]
        visited = {cls}
        current = self.store.superclass(cls)
        while current is not None:
            if current in visited:
                logger.debug(f"Superclass cycle detected at '{current.name}'")
                break
            visited.add(current)
            chain.append(current)
            current = self.store.superclass(current)
        return chain

    def _compute_implemented_interfaces(self, cls: TypeNode) -> List[TypeNode]:
        result: List[TypeNode] = []
        seen: Set[TypeNode] = set()
        # Own interfaces first, then each superclass's in chain order
        for current in self._superclass_chain(cls):
            for iface in self.store.interface_dependencies(current):
                if iface in seen:
                    continue
                seen.add(iface)
                result.append(iface)
                self._walk_super_interfaces(iface, result, seen)
        return result

    def _compute_parent_interfaces(self, iface: TypeNode) -> List[TypeNode]:
        result: List[TypeNode] = []
        self._walk_super_interfaces(iface, result, {iface})
        return result

    # Queries

    def get_parent_class(self, cls: TypeNode) -> Optional[ClassNode]:
        """
        Returns the superclass of ``cls`` or None.

        If several superclass edges were allowed in, the first one recorded
        wins. Interfaces never have a parent class.
        """
        return self.store.superclass(cls)

    def get_implemented_interfaces(self, cls: TypeNode) -> List[InterfaceNode]:
        """
        Returns every interface ``cls`` implements, directly or inherited.

        Order: each directly declared interface followed by its ancestors
        (depth-first, declaration order), then the interfaces inherited from
        the superclass chain. Each interface appears once.
        """
        if cls.kind is TypeKind.INTERFACE:
            self.store.require(cls)
            return []
        return self._memoized("implemented", cls, self._compute_implemented_interfaces)

    def get_parent_interfaces(self, iface: TypeNode) -> List[InterfaceNode]:
        """
        Returns the transitive super-interfaces of ``iface``, never including
        ``iface`` itself.
        """
        if iface.kind is TypeKind.CLASS:
            self.store.require(iface)
            return []
        return self._memoized("parents", iface, self._compute_parent_interfaces)

    def get_interface_closure(self, node: TypeNode) -> List[InterfaceNode]:
        """Interface closure of either kind of node."""
        if node.kind is TypeKind.CLASS:
            return self.get_implemented_interfaces(node)
        return self.get_parent_interfaces(node)

    def get_child_classes(self, cls: TypeNode) -> List[ClassNode]:
        """Direct subclasses of ``cls``, in the order their edges were added."""
        return [
            child for child in self.store.dependents(cls)
            if child.kind is TypeKind.CLASS and self.store.superclass(child) is cls
        ]

    def get_child_interfaces(self, iface: TypeNode) -> List[InterfaceNode]:
        """Interfaces directly extending ``iface``."""
        return [
            child for child in self.store.dependents(iface)
            if child.kind is TypeKind.INTERFACE
        ]

    def get_implementing_classes(self, iface: TypeNode) -> List[ClassNode]:
        """Classes directly declaring that they implement ``iface``."""
        if iface.kind is TypeKind.CLASS:
            self.store.require(iface)
            return []
        return [
            child for child in self.store.dependents(iface)
            if child.kind is TypeKind.CLASS
        ]

    def get_class_ancestors(self, cls: TypeNode) -> List[ClassNode]:
        """Superclass chain of ``cls``, nearest first."""
        return self._superclass_chain(cls)[1:]

    def get_class_descendants(self, cls: TypeNode) -> List[ClassNode]:
        """All transitive subclasses, breadth-first in edge order."""
        descendants: List[TypeNode] = []
        seen = {cls}
        queue = [cls]
        while queue:
            current = queue.pop(0)
            for child in self.get_child_classes(current):
                if child in seen:
                    continue
                seen.add(child)
                descendants.append(child)
                queue.append(child)
        return descendants

    def is_subtype_of(self, node: TypeNode, other: TypeNode) -> bool:
        """
        Checks that ``node`` is ``other`` or one of its subtypes.

        A missing relationship is a plain False, never an error.
        """
        if node is other:
            return True
        if other.kind is TypeKind.INTERFACE:
            return any(iface is other for iface in self.get_interface_closure(node))
        if node.kind is TypeKind.CLASS:
            return any(ancestor is other for ancestor in self.get_class_ancestors(node))
        return False
