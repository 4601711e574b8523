"""
High-level ontology service providing the public interface for the ontology module.

This is the only public interface into the ontology module. All other components
are private implementation details. The graph and detail views are snapshots
computed once after ingest.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union
from rdflib import URIRef, BNode

from .category import CategoryResolver, assign_categories
from .config import VocabularyConfig, default_vocabulary
from .domain import DetailIndex, DomainGraph, Entity, Identifier, OntologyStats, Statement
from .filtering import build_domain_graph
from .loader import parse_statements
from .store import EntityTable

logger = logging.getLogger(__name__)


class OntologyService:
    """High-level interface over one loaded ontology document."""

    def __init__(self, table: EntityTable, vocabulary: Optional[VocabularyConfig] = None,
                 category_cache: Optional[Dict[Identifier, Optional[Identifier]]] = None):
        """Build the derived views for an already populated entity table.

        Args:
            table: Entity table produced by the ingest pass
            vocabulary: Allow-lists and lookup tables. If None, uses the default vocabulary.
            category_cache: Optional memo table for the category resolver
        """
        self.table = table
        self.vocabulary = vocabulary if vocabulary is not None else default_vocabulary()

        self.graph: DomainGraph = build_domain_graph(self.table, self.vocabulary)
        self.detail = DetailIndex(all_nodes=self.table.entities, all_links=self.table.relations)

        self.category_resolver = CategoryResolver(
            node_ids=self.graph.node_ids(),
            relations=self.table.relations,
            vocabulary=self.vocabulary,
            cache=category_cache,
        )
        assign_categories(self.graph, self.table, self.category_resolver)
        if self.category_resolver.cycle_detected:
            logger.debug("Hierarchy cycles were tolerated during category assignment")

        logger.info(
            "Parsed %d total nodes -> %d named things, %d semantic links, %d classes",
            len(self.detail.all_nodes), len(self.graph.nodes),
            len(self.graph.links), len(self.graph.classes),
        )

    @classmethod
    def from_statements(cls, statements: Iterable[Statement],
                        vocabulary: Optional[VocabularyConfig] = None) -> "OntologyService":
        vocabulary = vocabulary if vocabulary is not None else default_vocabulary()
        table = EntityTable.from_statements(statements, type_predicate=vocabulary.type_predicate)
        return cls(table, vocabulary)

    @classmethod
    def from_file(cls, path: Union[str, Path], format: Optional[str] = None,
                  vocabulary: Optional[VocabularyConfig] = None) -> "OntologyService":
        """Parse an RDF document and build the derived views.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        return cls.from_statements(parse_statements(path, format), vocabulary)

    def get_graph(self) -> Dict[str, Any]:
        """Get the domain graph payload (nodes, links, classes)."""
        return self.graph.to_dict()

    def get_detail(self) -> Dict[str, Any]:
        """Get the detail payload (allNodes, allLinks)."""
        return self.detail.to_dict()

    def get_entity(self, entity_id: Union[str, Identifier]) -> Entity:
        """Get any entity from the full table.

        Args:
            entity_id: Identifier term, or its string form

        Returns:
            The entity

        Raises:
            ValueError: If entity not found
        """
        entity = self.find_entity(entity_id)
        if entity is None:
            raise ValueError(f"Entity not found: {entity_id}")
        return entity

    def find_entity(self, entity_id: Union[str, Identifier]) -> Optional[Entity]:
        """Look up an entity, accepting plain strings for named or anonymous ids."""
        if isinstance(entity_id, (URIRef, BNode)):
            return self.table.get(entity_id)
        return self.table.get(URIRef(entity_id)) or self.table.get(BNode(entity_id))

    def get_graph_node(self, node_id: Union[str, Identifier]) -> Entity:
        """Get a domain node.

        Raises:
            ValueError: If the id is not a node of the domain graph
        """
        entity = self.find_entity(node_id)
        node = self.graph.get_node(entity.id) if entity is not None else None
        if node is None:
            raise ValueError(f"Graph node not found: {node_id}")
        return node

    def get_stats(self) -> OntologyStats:
        categories = {node.category for node in self.graph.nodes if node.category is not None}
        return OntologyStats(
            total_statements=self.table.statement_count,
            total_entities=len(self.table),
            total_relations=len(self.detail.all_links),
            domain_nodes=len(self.graph.nodes),
            domain_links=len(self.graph.links),
            classes=len(self.graph.classes),
            categories=len(categories),
        )
