"""
Category resolution by walking the hierarchy predicate upwards.

A node's category is its topmost ancestor that is still a domain node and is
not one of the configured abstract roots. When a node has several qualifying
parents only the first one in source order is followed, which gives every
node a single deterministic cluster label.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from .config import VocabularyConfig
from .domain import DomainGraph, Identifier, Relation, humanize, label_from_uri
from .store import EntityTable

logger = logging.getLogger(__name__)


class CategoryResolver:
    """Memoizing resolver of node categories.

    The memo table is owned by the caller and passed in, so it can be shared
    across resolvers for the same dataset or dropped when the dataset changes.
    Entries are only ever added.
    """

    def __init__(self, node_ids: Iterable[Identifier], relations: Iterable[Relation],
                 vocabulary: VocabularyConfig, cache: Optional[Dict[Identifier, Optional[Identifier]]] = None):
        self.node_ids: Set[Identifier] = set(node_ids)
        self.abstract_roots = set(vocabulary.abstract_roots)
        self.cache: Dict[Identifier, Optional[Identifier]] = cache if cache is not None else {}
        self.cycle_detected = False

        # Parents in source declaration order, only for nodes in the graph
        self._parents: Dict[Identifier, List[Identifier]] = {}
        for relation in relations:
            if relation.predicate != vocabulary.hierarchy_predicate:
                continue
            if relation.source not in self.node_ids:
                continue
            self._parents.setdefault(relation.source, []).append(relation.target)

    def resolve(self, node_id: Identifier) -> Optional[Identifier]:
        """Return the category of a node; abstract roots themselves have none."""
        if node_id in self.cache:
            return self.cache[node_id]
        if node_id in self.abstract_roots:
            self.cache[node_id] = None
            return None
        return self._resolve(node_id, set())

    def _resolve(self, node_id: Identifier, visited: Set[Identifier]) -> Identifier:
        if node_id in self.cache:
            return self.cache[node_id]
        visited.add(node_id)

        parents = []
        for parent in self._parents.get(node_id, []):
            if parent not in self.node_ids or parent in self.abstract_roots:
                continue
            if parent in visited:
                self.cycle_detected = True
                logger.debug("Hierarchy cycle through %s while resolving category", parent)
                continue
            parents.append(parent)

        if not parents:
            self.cache[node_id] = node_id
            return node_id

        category = self._resolve(parents[0], visited)
        self.cache[node_id] = category
        return category


def category_label(category_id: Identifier, table: EntityTable) -> str:
    entity = table.get(category_id)
    if entity is not None:
        labels = entity.properties.get("label")
        if labels:
            return labels[0]
        return humanize(entity.label)
    return humanize(label_from_uri(category_id))


def assign_categories(graph: DomainGraph, table: EntityTable, resolver: CategoryResolver) -> None:
    """Annotate every domain node with its category and category label, in graph order."""
    for node in graph.nodes:
        category = resolver.resolve(node.id)
        node.category = category
        node.category_label = category_label(category, table) if category is not None else None
