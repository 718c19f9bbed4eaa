"""Visitor capability for type nodes."""

from typing import Iterable, Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from typelattice.model.nodes import ClassNode, InterfaceNode, TypeNode


class NodeVisitor:
    """
    Base visitor with no-op callbacks.

    Nodes call back into exactly one of these methods from ``accept``;
    walking children is left to the subclass.
    """

    def visit(self, node: "TypeNode") -> Any:
        return node.accept(self)

    def visit_all(self, nodes: Iterable["TypeNode"]) -> List[Any]:
        return [node.accept(self) for node in nodes]

    def visit_class(self, node: "ClassNode") -> Any:
        return None

    def visit_interface(self, node: "InterfaceNode") -> Any:
        return None
