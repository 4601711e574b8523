"""
Tests for label search and category clusters.

HOW TO RUN:
From the src directory, run:
    python -m pytest explorer/test_search.py
"""

import pytest
from rdflib import Namespace, OWL

from ontology.config import BRICK
from ontology.domain import DomainGraph, Entity, GraphClass
from explorer.search import build_clusters, normalize_for_search, search

EX = Namespace("http://example.org/onto#")


@pytest.fixture
def graph():
    nodes = [
        Entity(id=BRICK.Air_Handling_Unit, label="Air_Handling_Unit", type=OWL.Class),
        Entity(id=BRICK["Air-Flow_Sensor"], label="Air-Flow_Sensor", type=OWL.Class),
        Entity(id=BRICK.Temperature, label="Temperature", type=BRICK.Quantity),
        Entity(id=BRICK.Zone, label="Zone"),
    ]
    classes = [
        GraphClass(uri=OWL.Class, label="OWL Class"),
        GraphClass(uri=BRICK.Quantity, label="Quantity"),
    ]
    return DomainGraph(nodes=nodes, links=[], classes=classes)


class TestSearch:
    """Test cases for search."""

    def test_normalization(self):
        assert normalize_for_search("Air_Handling-Unit") == "air handling unit"

    def test_underscores_and_case_are_ignored(self, graph):
        results = search(graph, "air handling")
        assert [hit.label for hit in results.nodes] == ["Air_Handling_Unit"]
        assert results.nodes[0].id == str(BRICK.Air_Handling_Unit)
        assert results.nodes[0].type == str(OWL.Class)

    def test_hyphen_matches_space(self, graph):
        results = search(graph, "AIR FLOW")
        assert [hit.label for hit in results.nodes] == ["Air-Flow_Sensor"]

    def test_class_matches_on_label_or_uri(self, graph):
        assert [hit.label for hit in search(graph, "quant").classes] == ["Quantity"]
        assert [hit.uri for hit in search(graph, "owl").classes] == [str(OWL.Class)]
        assert [hit.uri for hit in search(graph, "2002/07").classes] == [str(OWL.Class)]

    def test_untyped_node(self, graph):
        results = search(graph, "zone")
        assert results.nodes[0].type is None

    def test_blank_query_returns_nothing(self, graph):
        for query in ("", "   "):
            results = search(graph, query)
            assert results.nodes == []
            assert results.classes == []
            assert not results

    def test_no_match(self, graph):
        results = search(graph, "chiller")
        assert len(results) == 0
        assert results.query == "chiller"

    def test_node_results_are_capped(self):
        nodes = [Entity(id=EX["Sensor_%d" % i], label="Sensor_%d" % i) for i in range(80)]
        big = DomainGraph(nodes=nodes, links=[], classes=[])

        assert len(search(big, "sensor").nodes) == 50
        results = search(big, "sensor", max_results=5)
        assert [hit.label for hit in results.nodes] == ["Sensor_%d" % i for i in range(5)]


class TestClusters:
    """Test cases for build_clusters."""

    def make_nodes(self, counts):
        nodes = []
        for category, count in counts:
            for i in range(count):
                nodes.append(Entity(
                    id=EX["%s_%d" % (category, i)],
                    label="%s_%d" % (category, i),
                    category=EX[category] if category != "none" else None,
                    category_label=category if category != "none" else None,
                ))
        return nodes

    def test_small_groups_are_dropped(self):
        nodes = self.make_nodes([("Equipment", 6), ("Point", 4), ("none", 9)])
        clusters = build_clusters(nodes)
        assert [cluster.id for cluster in clusters] == [EX.Equipment]
        assert clusters[0].label == "Equipment"
        assert len(clusters[0].nodes) == 6

    def test_min_size_is_configurable(self):
        nodes = self.make_nodes([("Point", 4), ("Equipment", 6)])
        clusters = build_clusters(nodes, min_size=2)
        assert [cluster.id for cluster in clusters] == [EX.Point, EX.Equipment]

    def test_exact_min_size_is_kept(self):
        clusters = build_clusters(self.make_nodes([("Point", 5)]))
        assert len(clusters) == 1

    def test_empty_input(self):
        assert build_clusters([]) == []
