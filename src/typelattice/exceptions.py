# Custom exceptions for typelattice

class TypeLatticeError(Exception):
    """Base exception for all application-specific errors."""
    pass


class GraphContractError(TypeLatticeError):
    """Raised when an edge would break an invariant of the type graph."""

    def __init__(self, source, target, message: str):
        self.source = source
        self.target = target
        self.message = message
        super().__init__(message)


class SelfReferenceError(GraphContractError):
    """Raised for an edge from a type to itself."""

    def __init__(self, node):
        super().__init__(node, node, f"Type '{node.name}' cannot depend on itself")


class MultipleSuperclassError(GraphContractError):
    """Raised when a class would get a second superclass edge."""

    def __init__(self, source, existing, target):
        self.existing = existing
        super().__init__(
            source,
            target,
            f"Class '{source.name}' already extends '{existing.name}', "
            f"cannot also extend '{target.name}'",
        )


class InvalidEdgeError(GraphContractError):
    """Raised for an edge shape the type system does not allow."""
    pass


class UnregisteredNodeError(TypeLatticeError):
    """Raised when a node is used with a store it is not registered in."""

    def __init__(self, node):
        self.node = node
        super().__init__(f"Type '{node.name}' is not registered in this store")


class ConfigError(TypeLatticeError):
    """Raised for configuration-related problems."""
    pass
