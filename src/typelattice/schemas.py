from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class TypeSummary(BaseModel):
    """
    Flat, serializable view of one type node and its resolved hierarchy.
    """
    node_id: str
    name: str
    kind: Literal["class", "interface"]
    abstract: bool
    parent_class: Optional[str] = None  # Classes only
    interfaces: List[str] = Field(default_factory=list)  # Full interface closure
    children: List[str] = Field(default_factory=list)  # Direct subtypes
    properties: List[str] = Field(default_factory=list)
    methods: List[str] = Field(default_factory=list)


class HierarchyStats(BaseModel):
    """
    Aggregate statistics for a type graph.
    """
    total_classes: int = 0
    total_interfaces: int = 0
    total_edges: int = 0
    abstract_types: int = 0
    root_classes: int = 0  # Classes without a superclass
    max_inheritance_depth: int = 0  # Longest superclass chain
