"""
Unit tests for hierarchy resolution.

Tests parent lookup, interface closures, child discovery and the subtype
predicate, including malformed (cyclic) graphs.
"""

import threading

import pytest

from typelattice.model import ClassNode, InterfaceNode
from typelattice.resolution import HierarchyResolver


class TestParentClass:
    """Test superclass lookup"""

    def test_no_parent(self, make):
        """A class without a superclass edge has no parent."""
        lone = make.cls("Lone")
        assert lone.get_parent_class() is None

    def test_parent_ignores_interfaces(self, make):
        """Interface edges are never returned as the parent class."""
        iface = make.iface("Runnable")
        base = make.cls("Base")
        child = make.edge(make.cls("Child"), iface, base)
        assert child.get_parent_class() is base

    def test_first_superclass_wins(self, permissive_store):
        """With several superclass edges the first recorded one is the parent."""
        first = permissive_store.register(ClassNode("First"))
        second = permissive_store.register(ClassNode("Second"))
        child = permissive_store.register(ClassNode("Child"))
        permissive_store.add_edge(child, first)
        permissive_store.add_edge(child, second)

        assert child.get_parent_class() is first
        assert first.get_child_classes() == [child]
        assert second.get_child_classes() == []

    def test_interface_has_no_parent_class(self, store, make):
        """Interfaces never have a parent class."""
        iface = make.iface("Thing")
        assert store.resolver.get_parent_class(iface) is None


class TestImplementedInterfaces:
    """Test the transitive interface closure of classes"""

    def test_no_interfaces(self, make):
        """A class without edges implements nothing."""
        assert make.cls("Plain").get_implemented_interfaces() == []

    def test_diamond_counts_shared_interface_once(self, diamond):
        """I is reachable through J and K but appears once."""
        result = diamond["C"].get_implemented_interfaces()
        assert result == [diamond["J"], diamond["I"], diamond["K"]]
        assert sum(1 for iface in result if iface is diamond["I"]) == 1

    def test_inherited_through_superclass(self, printable_chain):
        """Derived picks up Printable from Base."""
        derived = printable_chain["Derived"]
        assert derived.get_implemented_interfaces() == [printable_chain["Printable"]]
        assert printable_chain["Leaf"].get_implemented_interfaces() == [printable_chain["Printable"]]

    def test_declaration_order(self, make):
        """A's closure comes before B's when declared as [A, B]."""
        a_parent = make.iface("AParent")
        a = make.edge(make.iface("A"), a_parent)
        b_parent = make.iface("BParent")
        b = make.edge(make.iface("B"), b_parent)
        cls = make.edge(make.cls("Impl"), a, b)

        expected = [a, a_parent, b, b_parent]
        assert cls.get_implemented_interfaces() == expected
        # Stable across calls
        assert cls.get_implemented_interfaces() == expected

    def test_depth_first_order(self, make):
        """Ancestors of an interface are appended before the next declared interface."""
        root = make.iface("Root")
        mid = make.edge(make.iface("Mid"), root)
        top = make.edge(make.iface("Top"), mid)
        other = make.iface("Other")
        cls = make.edge(make.cls("Impl"), top, other)

        assert cls.get_implemented_interfaces() == [top, mid, root, other]

    def test_own_interfaces_before_inherited(self, make):
        """The class's own closure precedes the superclass closure."""
        inherited = make.iface("Inherited")
        own = make.iface("Own")
        base = make.edge(make.cls("Base"), inherited)
        child = make.edge(make.cls("Child"), base, own)

        assert child.get_implemented_interfaces() == [own, inherited]

    def test_reimplemented_interface_not_duplicated(self, make):
        """An interface declared again on a subclass appears once, in the subclass position."""
        shared = make.iface("Shared")
        extra = make.iface("Extra")
        base = make.edge(make.cls("Base"), extra, shared)
        child = make.edge(make.cls("Child"), base, shared)

        assert child.get_implemented_interfaces() == [shared, extra]

    def test_interface_cycle_terminates(self, make):
        """X extends Y extends X must not loop."""
        x = make.iface("X")
        y = make.iface("Y")
        make.edge(x, y)
        make.edge(y, x)
        cls = make.edge(make.cls("Impl"), x)

        assert cls.get_implemented_interfaces() == [x, y]

    def test_superclass_cycle_terminates(self, make):
        """A extends B extends A must not loop."""
        iface = make.iface("Marker")
        a = make.cls("A")
        b = make.edge(make.cls("B"), iface)
        make.edge(a, b)
        make.edge(b, a)

        assert a.get_implemented_interfaces() == [iface]
        assert a.get_class_ancestors() == [b]

    def test_interface_node_implements_nothing(self, store, make):
        """Implemented interfaces are a class query; interfaces get an empty list."""
        iface = make.iface("Thing")
        assert store.resolver.get_implemented_interfaces(iface) == []


class TestParentInterfaces:
    """Test the super-interface closure of interfaces"""

    def test_transitive(self, make):
        """Parent interfaces include grandparents, depth-first."""
        a = make.iface("A")
        b = make.edge(make.iface("B"), a)
        c = make.iface("C")
        d = make.edge(make.iface("D"), b, c)

        assert d.get_parent_interfaces() == [b, a, c]

    def test_cycle_excludes_self(self, make):
        """A cyclic interface does not list itself."""
        x = make.iface("X")
        y = make.iface("Y")
        make.edge(x, y)
        make.edge(y, x)

        assert x.get_parent_interfaces() == [y]
        assert y.get_parent_interfaces() == [x]


class TestChildren:
    """Test derived child views"""

    def test_child_classes_in_edge_order(self, make):
        """Children are listed in the order their edges were added."""
        base = make.cls("Base")
        second = make.cls("Second")
        first = make.cls("First")
        make.edge(first, base)
        make.edge(second, base)

        assert base.get_child_classes() == [first, second]

    def test_child_classes_not_recursive(self, printable_chain):
        """Grandchildren are not direct children."""
        base = printable_chain["Base"]
        assert base.get_child_classes() == [printable_chain["Derived"]]
        assert base.get_class_descendants() == [printable_chain["Derived"], printable_chain["Leaf"]]

    def test_child_parent_inverse(self, make):
        """Every class whose parent is P shows up in P's children."""
        parent = make.cls("P")
        children = [make.edge(make.cls(f"C{i}"), parent) for i in range(3)]
        for child in children:
            assert child.get_parent_class() is parent
            assert child in parent.get_child_classes()

    def test_interface_children(self, diamond):
        """Child interfaces and implementing classes are split by kind."""
        assert diamond["I"].get_child_interfaces() == [diamond["J"], diamond["K"]]
        assert diamond["I"].get_implementing_classes() == []
        assert diamond["J"].get_implementing_classes() == [diamond["C"]]

    def test_descendants_survive_cycle(self, make):
        """Descendant discovery terminates on a superclass cycle."""
        a = make.cls("A")
        b = make.cls("B")
        make.edge(a, b)
        make.edge(b, a)

        assert a.get_class_descendants() == [b]


class TestIsSubtypeOf:
    """Test the subtype predicate"""

    def test_reflexive(self, diamond):
        """Every type is a subtype of itself."""
        for node in diamond.values():
            assert node.is_subtype_of(node)

    def test_same_name_distinct_nodes(self, store, make):
        """Two nodes sharing a name are unrelated without an edge."""
        first = make.cls("Widget")
        second = make.cls("Widget")
        iface_a = make.iface("Shape")
        iface_b = make.iface("Shape")

        assert not first.is_subtype_of(second)
        assert not second.is_subtype_of(first)
        assert not iface_a.is_subtype_of(iface_b)

    def test_interface_through_superclass(self, printable_chain):
        """Derived is a Printable because Base is."""
        assert printable_chain["Derived"].is_subtype_of(printable_chain["Printable"])
        assert printable_chain["Leaf"].is_subtype_of(printable_chain["Printable"])

    def test_class_chain(self, printable_chain):
        """Subtyping walks the superclass chain, not down it."""
        assert printable_chain["Leaf"].is_subtype_of(printable_chain["Base"])
        assert not printable_chain["Base"].is_subtype_of(printable_chain["Leaf"])

    def test_interface_extends_interface(self, diamond):
        """Interfaces are subtypes of their super-interfaces only."""
        assert diamond["J"].is_subtype_of(diamond["I"])
        assert not diamond["I"].is_subtype_of(diamond["J"])
        assert not diamond["J"].is_subtype_of(diamond["K"])

    def test_interface_never_subtype_of_class(self, diamond):
        """Interfaces cannot reach classes."""
        assert not diamond["I"].is_subtype_of(diamond["C"])

    def test_transitive(self, make):
        """A <: B and B <: C imply A <: C across kinds."""
        top = make.iface("Top")
        mid = make.edge(make.iface("Mid"), top)
        base = make.edge(make.cls("Base"), mid)
        leaf = make.edge(make.cls("Leaf"), base)

        nodes = [top, mid, base, leaf]
        for a in nodes:
            for b in nodes:
                for c in nodes:
                    if a.is_subtype_of(b) and b.is_subtype_of(c):
                        assert a.is_subtype_of(c)

    def test_cycle_returns_false(self, make):
        """An unrelated class is not found inside a superclass cycle."""
        a = make.cls("A")
        b = make.cls("B")
        stranger = make.cls("Stranger")
        make.edge(a, b)
        make.edge(b, a)

        assert a.is_subtype_of(b)
        assert not a.is_subtype_of(stranger)

    def test_other_store_node(self, store, make):
        """A node from another store is simply unrelated."""
        from typelattice.store import RelationshipStore

        other_store = RelationshipStore(config=dict(store.config))
        foreign = other_store.register(InterfaceNode("Foreign"))
        local = make.cls("Local")

        assert not local.is_subtype_of(foreign)


class TestMemoization:
    """Test closure caching against store generations"""

    def test_cache_invalidated_on_mutation(self, store, make):
        """Adding an edge after a query is reflected by the next query."""
        first = make.iface("First")
        cls = make.edge(make.cls("Impl"), first)
        assert cls.get_implemented_interfaces() == [first]

        second = make.iface("Second")
        store.add_edge(cls, second)
        assert cls.get_implemented_interfaces() == [first, second]

        store.remove_edge(cls, first)
        assert cls.get_implemented_interfaces() == [second]

    def test_cached_results_are_copies(self, make):
        """Mutating a returned list does not affect later results."""
        iface = make.iface("Only")
        cls = make.edge(make.cls("Impl"), iface)
        cls.get_implemented_interfaces().clear()
        assert cls.get_implemented_interfaces() == [iface]

    def test_memoized_matches_uncached(self, store, uncached_store):
        """Both modes produce the same closures."""
        results = []
        for target in (store, uncached_store):
            i = target.register(InterfaceNode("I"))
            j = target.register(InterfaceNode("J"))
            k = target.register(InterfaceNode("K"))
            base = target.register(ClassNode("Base"))
            child = target.register(ClassNode("Child"))
            target.add_edge(j, i)
            target.add_edge(k, i)
            target.add_edge(base, k)
            target.add_edge(child, base)
            target.add_edge(child, j)
            results.append([n.name for n in child.get_implemented_interfaces()])
            results.append([n.name for n in child.get_implemented_interfaces()])

        assert results[0] == results[1] == results[2] == results[3] == ["J", "I", "K"]

    def test_concurrent_readers_match_serial(self, store, make):
        """Parallel readers filling the cache get the single-threaded closures."""
        interfaces = [make.iface("I0")]
        for depth in range(1, 50):
            interfaces.append(make.edge(make.iface(f"I{depth}"), interfaces[-1]))
        classes = [make.edge(make.cls("C0"), interfaces[0])]
        for depth in range(1, 200):
            classes.append(make.edge(make.cls(f"C{depth}"), classes[-1], interfaces[depth % 50]))

        serial = HierarchyResolver(store, config={"memoize_closures": False})
        expected = {
            node.node_id: serial.get_interface_closure(node)
            for node in classes + interfaces
        }
        store.resolver.clear_cache()

        workers = 8
        barrier = threading.Barrier(workers)
        results = [None] * workers
        errors = []

        def read(index):
            try:
                barrier.wait()
                nodes = classes + interfaces
                if index % 2:
                    nodes = list(reversed(nodes))
                results[index] = {
                    node.node_id: store.resolver.get_interface_closure(node)
                    for node in nodes
                }
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=read, args=(i,)) for i in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        for result in results:
            assert result == expected
        assert classes[-1].get_implemented_interfaces()[0] is interfaces[199 % 50]

    def test_explicit_resolver(self, store, make):
        """A resolver can be created with its own settings."""
        iface = make.iface("Only")
        cls = make.edge(make.cls("Impl"), iface)
        resolver = HierarchyResolver(store, config={"memoize_closures": False})

        assert resolver.get_implemented_interfaces(cls) == [iface]
        resolver.clear_cache()
        assert resolver.is_subtype_of(cls, iface)


def test_unregistered_node_query_raises():
    """Derived views need the node to be registered."""
    from typelattice.exceptions import UnregisteredNodeError

    with pytest.raises(UnregisteredNodeError):
        ClassNode("Floating").get_parent_class()
