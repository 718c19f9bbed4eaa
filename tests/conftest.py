"""
Pytest configuration for the typelattice test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Stores with explicit hierarchy settings
- Small prebuilt type graphs shared by the resolution tests
"""

import os

import pytest

from typelattice.logging_config import reset_logging, setup_logging
from typelattice.model import ClassNode, InterfaceNode
from typelattice.resolution.config import HIERARCHY_CONFIG
from typelattice.store import RelationshipStore


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep test output free of log noise."""
    os.environ.setdefault("TYPELATTICE_MACHINE_MODE", "1")
    # The import above already configured sinks; redo it in machine mode
    reset_logging()


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True)


# ============================================================================
# STORE FIXTURES
# ============================================================================

@pytest.fixture
def store():
    """Empty store with the default hierarchy settings."""
    return RelationshipStore(config=dict(HIERARCHY_CONFIG))


@pytest.fixture
def uncached_store():
    """Empty store whose resolver never memoizes closures."""
    return RelationshipStore(config={**HIERARCHY_CONFIG, "memoize_closures": False})


@pytest.fixture
def permissive_store():
    """Store that tolerates a second superclass edge."""
    return RelationshipStore(config={**HIERARCHY_CONFIG, "allow_multiple_superclasses": True})


@pytest.fixture
def make(store):
    """
    Factory registering nodes in the ``store`` fixture.

    Usage:
        def test_something(make):
            base = make.cls("Base")
            printable = make.iface("Printable")
            make.edge(base, printable)
    """

    class _Maker:
        def cls(self, name, abstract=False):
            return store.register(ClassNode(name, abstract=abstract))

        def iface(self, name):
            return store.register(InterfaceNode(name))

        def edge(self, source, *targets):
            for target in targets:
                store.add_edge(source, target)
            return source

    return _Maker()


# ============================================================================
# GRAPH FIXTURES
# ============================================================================

@pytest.fixture
def diamond(make):
    """
    Interface I extended by J and K; class C implements J, K.

    Returns:
        Dict of name -> node
    """
    i = make.iface("I")
    j = make.edge(make.iface("J"), i)
    k = make.edge(make.iface("K"), i)
    c = make.edge(make.cls("C"), j, k)
    return {"I": i, "J": j, "K": k, "C": c}


@pytest.fixture
def printable_chain(make):
    """
    Base implements Printable; Derived extends Base; Leaf extends Derived.

    Returns:
        Dict of name -> node
    """
    printable = make.iface("Printable")
    base = make.edge(make.cls("Base"), printable)
    derived = make.edge(make.cls("Derived"), base)
    leaf = make.edge(make.cls("Leaf"), derived)
    return {"Printable": printable, "Base": base, "Derived": derived, "Leaf": leaf}
