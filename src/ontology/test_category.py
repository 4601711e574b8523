"""
Unit test for the category resolver.

HOW TO RUN:
The virtual environment .venv should be activated before running the tests.

From the src directory, run:
    python -m ontology.test_category

Or from the project root:
    cd src; python -m ontology.test_category
"""

from typing import List

from rdflib import Literal, Namespace, RDF, RDFS

# Import statements using relative imports
from .category import CategoryResolver, assign_categories, category_label
from .config import VocabularyConfig
from .domain import Statement
from .filtering import build_domain_graph
from .store import EntityTable

EX = Namespace("http://example.org/onto#")


def make_vocabulary() -> VocabularyConfig:
    return VocabularyConfig(
        domain_types={EX.Thing},
        semantic_predicates={RDFS.subClassOf},
        abstract_roots={EX.Root},
    )


def build(statements: List[Statement], cache=None):
    """Build table, graph and resolver for a statement list."""
    vocabulary = make_vocabulary()
    table = EntityTable.from_statements(statements)
    graph = build_domain_graph(table, vocabulary)
    resolver = CategoryResolver(graph.node_ids(), graph.links, vocabulary, cache=cache)
    return table, graph, resolver


def typed(*names) -> List[Statement]:
    return [Statement(EX[name], RDF.type, EX.Thing) for name in names]


def test_three_statement_scenario():
    """Test category(A) = B and category(B) = B."""
    print("Testing three-statement scenario...")

    _, _, resolver = build(typed("A", "B") + [Statement(EX.A, RDFS.subClassOf, EX.B)])
    assert resolver.resolve(EX.A) == EX.B
    assert resolver.resolve(EX.B) == EX.B
    assert not resolver.cycle_detected

    print("✓ Three-statement scenario working correctly")


def test_walks_to_topmost_ancestor():
    """Test that the walk continues through several levels."""
    print("Testing deep hierarchy...")

    _, _, resolver = build(typed("A", "B", "C", "D") + [
        Statement(EX.A, RDFS.subClassOf, EX.B),
        Statement(EX.B, RDFS.subClassOf, EX.C),
        Statement(EX.C, RDFS.subClassOf, EX.D),
    ])
    assert resolver.resolve(EX.A) == EX.D
    # Intermediate nodes were memoized on the way up
    assert resolver.cache[EX.B] == EX.D
    assert resolver.cache[EX.C] == EX.D

    print("✓ Deep hierarchy working correctly")


def test_abstract_roots_and_non_domain_parents_are_skipped():
    """Test that abstract roots and parents outside the graph never become categories."""
    print("Testing abstract roots...")

    _, _, resolver = build(typed("A", "B", "Root") + [
        Statement(EX.A, RDFS.subClassOf, EX.Root),
        Statement(EX.B, RDFS.subClassOf, EX.External),
    ])
    assert resolver.resolve(EX.A) == EX.A
    assert resolver.resolve(EX.B) == EX.B
    # An abstract root that is itself a domain node has no category
    assert resolver.resolve(EX.Root) is None

    print("✓ Abstract roots working correctly")


def test_first_declared_parent_wins():
    """Test the deterministic tie-break on multiple qualifying parents."""
    print("Testing first-parent tie-break...")

    _, _, resolver = build(typed("A", "B", "C") + [
        Statement(EX.A, RDFS.subClassOf, EX.C),
        Statement(EX.A, RDFS.subClassOf, EX.B),
    ])
    assert resolver.resolve(EX.A) == EX.C

    print("✓ First-parent tie-break working correctly")


def test_skips_abstract_first_parent():
    """Test that the first qualifying parent is used, not the first declared one."""
    print("Testing qualifying parent selection...")

    _, _, resolver = build(typed("A", "B", "Root") + [
        Statement(EX.A, RDFS.subClassOf, EX.Root),
        Statement(EX.A, RDFS.subClassOf, EX.B),
    ])
    assert resolver.resolve(EX.A) == EX.B

    print("✓ Qualifying parent selection working correctly")


def test_cycle_resolution_order():
    """Test the observed behavior on A subClassOf B, B subClassOf A."""
    print("Testing cyclic hierarchy...")

    cycle = typed("A", "B") + [
        Statement(EX.A, RDFS.subClassOf, EX.B),
        Statement(EX.B, RDFS.subClassOf, EX.A),
    ]

    # Resolving A first: A -> B, B's parent A is already visited, so B is the category
    _, _, resolver = build(cycle)
    assert resolver.resolve(EX.A) == EX.B
    assert resolver.resolve(EX.B) == EX.B
    assert resolver.cycle_detected

    # Resolving B first gives the mirror result
    _, _, resolver = build(cycle)
    assert resolver.resolve(EX.B) == EX.A
    assert resolver.resolve(EX.A) == EX.A
    assert resolver.cycle_detected

    print("✓ Cyclic hierarchy working correctly")


def test_self_loop():
    """Test that a node declared as its own subclass terminates."""
    print("Testing self loop...")

    _, _, resolver = build(typed("A") + [Statement(EX.A, RDFS.subClassOf, EX.A)])
    assert resolver.resolve(EX.A) == EX.A
    assert resolver.cycle_detected

    print("✓ Self loop working correctly")


def test_idempotence_and_external_cache():
    """Test memoization through a caller-owned cache."""
    print("Testing memoization...")

    cache = {}
    statements = typed("A", "B", "C") + [
        Statement(EX.A, RDFS.subClassOf, EX.B),
        Statement(EX.B, RDFS.subClassOf, EX.C),
    ]
    _, _, resolver = build(statements, cache=cache)

    first = resolver.resolve(EX.A)
    second = resolver.resolve(EX.A)
    assert first == second == EX.C
    assert cache == {EX.A: EX.C, EX.B: EX.C, EX.C: EX.C}

    # A second resolver sharing the cache answers from it
    _, _, other = build(statements, cache=cache)
    assert other.resolve(EX.B) == EX.C

    print("✓ Memoization working correctly")


def test_category_closure():
    """Test that categories are domain nodes and never abstract roots."""
    print("Testing category closure...")

    _, graph, resolver = build(typed("A", "B", "C", "D", "Root") + [
        Statement(EX.A, RDFS.subClassOf, EX.B),
        Statement(EX.B, RDFS.subClassOf, EX.Root),
        Statement(EX.C, RDFS.subClassOf, EX.D),
        Statement(EX.D, RDFS.subClassOf, EX.C),
        Statement(EX.D, RDFS.subClassOf, EX.A),
    ])
    node_ids = graph.node_ids()
    for node in graph.nodes:
        category = resolver.resolve(node.id)
        if node.id == EX.Root:
            assert category is None
            continue
        assert category in node_ids
        assert category != EX.Root

    print("✓ Category closure working correctly")


def test_assign_categories():
    """Test annotation of graph nodes with category and category label."""
    print("Testing assign_categories...")

    table, graph, resolver = build(typed("Hot_Water_Loop", "B") + [
        Statement(EX.B, RDFS.subClassOf, EX.Hot_Water_Loop),
        Statement(EX.B, RDFS.label, Literal("Bee")),
    ])
    assign_categories(graph, table, resolver)

    by_id = {node.id: node for node in graph.nodes}
    assert by_id[EX.B].category == EX.Hot_Water_Loop
    assert by_id[EX.B].category_label == "Hot Water Loop"
    assert by_id[EX.Hot_Water_Loop].category == EX.Hot_Water_Loop

    assert category_label(EX.B, table) == "Bee"
    assert category_label(EX.Nowhere_Land, table) == "Nowhere Land"

    print("✓ assign_categories working correctly")


def run_all_tests():
    """Run all category tests."""
    print("=" * 50)
    print("Running Category Resolver Tests")
    print("=" * 50)

    test_functions = [
        test_three_statement_scenario,
        test_walks_to_topmost_ancestor,
        test_abstract_roots_and_non_domain_parents_are_skipped,
        test_first_declared_parent_wins,
        test_skips_abstract_first_parent,
        test_cycle_resolution_order,
        test_self_loop,
        test_idempotence_and_external_cache,
        test_category_closure,
        test_assign_categories,
    ]

    passed = 0
    failed = 0

    for test_func in test_functions:
        try:
            test_func()
            passed += 1
        except Exception as e:
            print(f"✗ {test_func.__name__} FAILED: {e}")
            failed += 1

    print("=" * 50)
    print(f"Test Results: {passed} passed, {failed} failed")
    print("=" * 50)

    return failed == 0


def main():
    """Main function to run the tests."""
    success = run_all_tests()
    if success:
        print("All tests passed!")
        return 0
    else:
        print("Some tests failed!")
        return 1


if __name__ == "__main__":
    exit(main())
