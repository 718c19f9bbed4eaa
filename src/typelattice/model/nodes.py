"""
Type node model: classes, interfaces and their member declarations.

Nodes carry identity, a display name and a kind tag. Every relationship
view (dependencies, children, parent class, interface closure) is read from
the RelationshipStore the node is registered in; nodes never keep their own
copy of an edge.
"""

import uuid
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from typelattice.exceptions import UnregisteredNodeError

if TYPE_CHECKING:
    from typelattice.model.visitor import NodeVisitor
    from typelattice.resolution.hierarchy_resolver import HierarchyResolver
    from typelattice.store import RelationshipStore


class TypeKind(str, Enum):
    """Closed set of declared type kinds."""
    CLASS = "class"
    INTERFACE = "interface"


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class Member:
    """
    A declaration owned by a type (property or method).

    The owner is held as a weak reference so a member never keeps its type
    alive on its own.
    """
    name: str
    node_id: str = field(default_factory=_new_id)
    _parent_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)

    @property
    def parent(self) -> Optional["TypeNode"]:
        """The type currently owning this member, if any."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def set_parent(self, parent: Optional["TypeNode"]) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None


@dataclass(eq=False)
class Property(Member):
    """A member property declared on a class."""


@dataclass(eq=False)
class Method(Member):
    """A method declared on a class or interface."""


def _attach(owner: "TypeNode", members: List[Member], member: Member, detach_name: str) -> Member:
    # Identity check, not name equality
    if any(existing is member for existing in members):
        return member

    previous = member.parent
    if previous is not None and previous is not owner:
        getattr(previous, detach_name)(member)

    members.append(member)
    member.set_parent(owner)
    return member


def _detach(members: List[Member], member: Member) -> bool:
    for index, existing in enumerate(members):
        if existing is member:
            del members[index]
            member.set_parent(None)
            return True
    return False


class TypeNode:
    """
    Abstract base for a declared type.

    Equality and hashing are inherited from object, so two nodes are only
    ever equal to themselves, whatever their names.
    """

    kind: TypeKind

    def __init__(self, name: str, abstract: bool = False, node_id: Optional[str] = None):
        if type(self) is TypeNode:
            raise TypeError("TypeNode is abstract, use ClassNode or InterfaceNode")
        self.name = name
        self.node_id = node_id or _new_id()
        self._abstract = abstract
        self._methods: List[Method] = []
        self._store: Optional["RelationshipStore"] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, id={self.node_id[:8]})"

    @property
    def store(self) -> Optional["RelationshipStore"]:
        """The store this node is registered in, or None."""
        return self._store

    def _require_store(self) -> "RelationshipStore":
        if self._store is None:
            raise UnregisteredNodeError(self)
        return self._store

    @property
    def resolver(self) -> "HierarchyResolver":
        return self._require_store().resolver

    def is_abstract(self) -> bool:
        """Returns True for interfaces and for classes marked abstract."""
        return self._abstract

    def is_class(self) -> bool:
        return self.kind is TypeKind.CLASS

    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    # Relationship views

    @property
    def dependencies(self) -> List["TypeNode"]:
        """Direct supertypes, in edge-insertion order."""
        return self._require_store().dependencies(self)

    @property
    def children(self) -> List["TypeNode"]:
        """Direct subtypes, in edge-insertion order."""
        return self._require_store().dependents(self)

    def is_subtype_of(self, other: "TypeNode") -> bool:
        if other is self:
            return True
        return self.resolver.is_subtype_of(self, other)

    # Methods

    def get_methods(self) -> List[Method]:
        return list(self._methods)

    def add_method(self, method: Method) -> Method:
        """Add a method; adding a method already present is a no-op."""
        if not isinstance(method, Method):
            raise TypeError(f"add_method expects a Method, got {type(method).__name__}")
        return _attach(self, self._methods, method, "remove_method")

    def remove_method(self, method: Method) -> None:
        """Remove a method; removing an absent method is a no-op."""
        _detach(self._methods, method)

    # Visitor

    def accept(self, visitor: "NodeVisitor"):
        """Dispatch to the visitor method for this node's kind."""
        return getattr(visitor, _VISIT_METHODS[self.kind])(self)


class ClassNode(TypeNode):
    """A declared class with an optional superclass and member properties."""

    kind = TypeKind.CLASS

    def __init__(self, name: str, abstract: bool = False, node_id: Optional[str] = None):
        super().__init__(name, abstract=abstract, node_id=node_id)
        self._properties: List[Property] = []

    def set_abstract(self, abstract: bool) -> None:
        self._abstract = abstract

    def get_parent_class(self) -> Optional["ClassNode"]:
        return self.resolver.get_parent_class(self)

    def get_implemented_interfaces(self) -> List["InterfaceNode"]:
        return self.resolver.get_implemented_interfaces(self)

    def get_child_classes(self) -> List["ClassNode"]:
        return self.resolver.get_child_classes(self)

    def get_class_ancestors(self) -> List["ClassNode"]:
        return self.resolver.get_class_ancestors(self)

    def get_class_descendants(self) -> List["ClassNode"]:
        return self.resolver.get_class_descendants(self)

    def get_properties(self) -> List[Property]:
        return list(self._properties)

    def add_property(self, prop: Property) -> Property:
        """
        Add a property to this class and make this class its parent.

        Adding a property that is already present is a no-op. A property
        owned by another class is moved here.
        """
        if not isinstance(prop, Property):
            raise TypeError(f"add_property expects a Property, got {type(prop).__name__}")
        return _attach(self, self._properties, prop, "remove_property")

    def remove_property(self, prop: Property) -> None:
        """Remove a property and clear its parent; absent properties are ignored."""
        _detach(self._properties, prop)


class InterfaceNode(TypeNode):
    """A declared interface; may extend any number of interfaces."""

    kind = TypeKind.INTERFACE

    def __init__(self, name: str, node_id: Optional[str] = None):
        super().__init__(name, abstract=True, node_id=node_id)

    def get_parent_interfaces(self) -> List["InterfaceNode"]:
        return self.resolver.get_parent_interfaces(self)

    def get_child_interfaces(self) -> List["InterfaceNode"]:
        return self.resolver.get_child_interfaces(self)

    def get_implementing_classes(self) -> List[ClassNode]:
        return self.resolver.get_implementing_classes(self)


_VISIT_METHODS = {
    TypeKind.CLASS: "visit_class",
    TypeKind.INTERFACE: "visit_interface",
}
