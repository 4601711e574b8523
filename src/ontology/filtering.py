"""
Domain filter: reduces the full entity table to the graph of named domain things.

This is a pure allow-list filter. Unknown types and predicates are excluded
without being reported.
"""

from typing import Dict, List

from rdflib import URIRef

from .config import VocabularyConfig
from .domain import DomainGraph, Entity, GraphClass, Identifier, is_anonymous, label_from_uri
from .store import EntityTable


def is_domain_node(entity: Entity, vocabulary: VocabularyConfig) -> bool:
    if entity.type is None or entity.type not in vocabulary.domain_types:
        return False
    return not is_anonymous(entity.id)


def build_domain_graph(table: EntityTable, vocabulary: VocabularyConfig) -> DomainGraph:
    """Select domain nodes, the semantic links between them and the classes they use."""
    graph_nodes: Dict[Identifier, Entity] = {}
    class_uris: List[URIRef] = []

    for entity in table.entities:
        if not is_domain_node(entity, vocabulary):
            continue
        graph_nodes[entity.id] = entity
        if entity.type not in class_uris:
            class_uris.append(entity.type)

    links = [
        relation for relation in table.iter_relations()
        if relation.predicate in vocabulary.semantic_predicates
        and relation.source in graph_nodes
        and relation.target in graph_nodes
    ]

    classes = [
        GraphClass(uri=uri, label=vocabulary.class_labels.get(uri) or label_from_uri(uri))
        for uri in class_uris
    ]

    return DomainGraph(nodes=list(graph_nodes.values()), links=links, classes=classes)
