"""
Relationship store for the type graph.

Single source of truth for "depends on" edges between registered type
nodes. Keeps, per node, the ordered list of outgoing edges, the ordered list
of incoming edges and a superclass slot, all updated together on every
mutation.
"""

from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

from typelattice.exceptions import (
    InvalidEdgeError,
    MultipleSuperclassError,
    SelfReferenceError,
    TypeLatticeError,
    UnregisteredNodeError,
)
from typelattice.logging_config import logger
from typelattice.model.nodes import TypeKind, TypeNode

if TYPE_CHECKING:
    from typelattice.resolution.hierarchy_resolver import HierarchyResolver


class RelationshipStore:
    """
    Holds registered type nodes and the edges between them.

    Every structural mutation increments ``generation`` so that derived
    caches can tell when they are stale. The store does no locking; graph
    construction must finish (or be externally synchronized) before queries
    run.
    """

    def __init__(self, config: Optional[Dict[str, bool]] = None):
        """
        Initialize an empty store.

        Args:
            config: Hierarchy settings; defaults to the merged user config
        """
        if config is None:
            from typelattice.user_config import get_hierarchy_config
            config = get_hierarchy_config()
        self.config = config
        self._nodes: Dict[str, TypeNode] = {}
        self._outgoing: Dict[str, List[TypeNode]] = {}
        self._incoming: Dict[str, List[TypeNode]] = {}
        self._superclass: Dict[str, TypeNode] = {}
        self._generation = 0
        from typelattice.resolution.hierarchy_resolver import HierarchyResolver
        self._resolver: "HierarchyResolver" = HierarchyResolver(self)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def resolver(self) -> "HierarchyResolver":
        """Resolver bound to this store."""
        return self._resolver

    def _bump(self) -> None:
        self._generation += 1

    # Nodes

    def register(self, node: TypeNode) -> TypeNode:
        """
        Register a node. Registering an already registered node is a no-op.

        Raises:
            TypeLatticeError: If the node belongs to another store or its id is taken
        """
        if node.store is self:
            return node
        if node.store is not None:
            raise TypeLatticeError(f"Type '{node.name}' is already registered in another store")
        if node.node_id in self._nodes:
            raise TypeLatticeError(f"Node id '{node.node_id}' is already in use")

        self._nodes[node.node_id] = node
        self._outgoing[node.node_id] = []
        self._incoming[node.node_id] = []
        node._store = self
        self._bump()
        logger.debug(f"Registered {node.kind.value} '{node.name}'")
        return node

    def register_all(self, nodes) -> List[TypeNode]:
        return [self.register(node) for node in nodes]

    def unregister(self, node: TypeNode) -> None:
        """Remove a node together with every edge that touches it."""
        self.require(node)

        for target in list(self._outgoing[node.node_id]):
            self.remove_edge(node, target)
        for source in list(self._incoming[node.node_id]):
            self.remove_edge(source, node)

        del self._nodes[node.node_id]
        del self._outgoing[node.node_id]
        del self._incoming[node.node_id]
        node._store = None
        self._bump()
        logger.debug(f"Unregistered {node.kind.value} '{node.name}'")

    def get(self, node_id: str) -> Optional[TypeNode]:
        return self._nodes.get(node_id)

    def nodes(self) -> List[TypeNode]:
        """All registered nodes in registration order."""
        return list(self._nodes.values())

    def classes(self) -> List[TypeNode]:
        return [n for n in self._nodes.values() if n.kind is TypeKind.CLASS]

    def interfaces(self) -> List[TypeNode]:
        return [n for n in self._nodes.values() if n.kind is TypeKind.INTERFACE]

    def find(self, name: str) -> List[TypeNode]:
        """Nodes with the given display name; names are not unique."""
        return [n for n in self._nodes.values() if n.name == name]

    def __contains__(self, node: object) -> bool:
        return isinstance(node, TypeNode) and node.store is self

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TypeNode]:
        return iter(self.nodes())

    def require(self, node: TypeNode) -> None:
        """Raise UnregisteredNodeError unless ``node`` is registered here."""
        if node.store is not self:
            raise UnregisteredNodeError(node)

    # Edges

    def add_edge(self, source: TypeNode, target: TypeNode) -> bool:
        """
        Record that ``source`` depends on (extends/implements) ``target``.

        Returns:
            True if the edge was added, False if it already existed

        Raises:
            UnregisteredNodeError: If either endpoint is not registered here
            SelfReferenceError: For an edge from a node to itself
            InvalidEdgeError: For an interface depending on a class
            MultipleSuperclassError: For a second superclass edge, unless allowed
        """
        self.require(source)
        self.require(target)

        if source is target:
            logger.warning(f"Rejected self edge on '{source.name}'")
            raise SelfReferenceError(source)

        if source.kind is TypeKind.INTERFACE and target.kind is TypeKind.CLASS:
            logger.warning(f"Rejected edge interface '{source.name}' -> class '{target.name}'")
            raise InvalidEdgeError(
                source, target,
                f"Interface '{source.name}' cannot extend class '{target.name}'",
            )

        outgoing = self._outgoing[source.node_id]
        if any(existing is target for existing in outgoing):
            return False

        if source.kind is TypeKind.CLASS and target.kind is TypeKind.CLASS:
            existing = self._superclass.get(source.node_id)
            if existing is None:
                self._superclass[source.node_id] = target
            elif not self.config.get("allow_multiple_superclasses", False):
                logger.warning(
                    f"Rejected second superclass '{target.name}' for '{source.name}'"
                )
                raise MultipleSuperclassError(source, existing, target)
            else:
                logger.warning(
                    f"Class '{source.name}' has several superclasses, "
                    f"keeping '{existing.name}'"
                )

        outgoing.append(target)
        self._incoming[target.node_id].append(source)
        self._bump()
        logger.debug(f"Edge {source.name} -> {target.name}")
        return True

    def remove_edge(self, source: TypeNode, target: TypeNode) -> bool:
        """
        Remove the edge ``source -> target``.

        Returns:
            True if an edge was removed, False if none existed
        """
        self.require(source)
        self.require(target)

        outgoing = self._outgoing[source.node_id]
        for index, existing in enumerate(outgoing):
            if existing is target:
                del outgoing[index]
                break
        else:
            return False

        incoming = self._incoming[target.node_id]
        for index, existing in enumerate(incoming):
            if existing is source:
                del incoming[index]
                break

        if self._superclass.get(source.node_id) is target:
            del self._superclass[source.node_id]
            # Next class edge in insertion order takes the slot
            for candidate in outgoing:
                if candidate.kind is TypeKind.CLASS:
                    self._superclass[source.node_id] = candidate
                    break

        self._bump()
        logger.debug(f"Removed edge {source.name} -> {target.name}")
        return True

    def has_edge(self, source: TypeNode, target: TypeNode) -> bool:
        self.require(source)
        return any(existing is target for existing in self._outgoing[source.node_id])

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._outgoing.values())

    def dependencies(self, node: TypeNode) -> List[TypeNode]:
        """Outgoing edge targets of ``node`` in insertion order."""
        self.require(node)
        return list(self._outgoing[node.node_id])

    def dependents(self, node: TypeNode) -> List[TypeNode]:
        """Sources of edges pointing at ``node``, in the order they were added."""
        self.require(node)
        return list(self._incoming[node.node_id])

    def superclass(self, node: TypeNode) -> Optional[TypeNode]:
        """The superclass slot of a class; always None for interfaces."""
        self.require(node)
        return self._superclass.get(node.node_id)

    def interface_dependencies(self, node: TypeNode) -> List[TypeNode]:
        """Outgoing edge targets of ``node`` that are interfaces, in insertion order."""
        self.require(node)
        return [t for t in self._outgoing[node.node_id] if t.kind is TypeKind.INTERFACE]
