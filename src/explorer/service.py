"""
Explorer service providing navigation views over a loaded ontology.

Developer Guide
===============
All views are pure derivations of the ontology snapshot and a few inputs:

    window(options)          Nodes/links to render for a class filter, focus node and node limit
    forest()                 Parent/child forest for the ontology browser
    expansion_path(node_id)  Ancestors to expand so a selected node becomes visible
    reveal(node_id)          Expanded set with the selected node made visible
    next_limit_step()        Preset node limit that shows more of a truncated window
    node_relations(node_id)  Grouped relations + inherited-from chain for the detail view
    node_summary(node_id)    Literal properties for the detail view
    search(query)            Label search over nodes and classes
    clusters()               Category clusters for visual grouping

Results are cached keyed by their inputs. The snapshot does not change after
ingest, so cached entries stay valid until reset() is called for a new dataset.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple, Union

from rdflib import URIRef

from ontology.domain import Identifier
from ontology.service import OntologyService

from .domain import (
    LARGE_DATASET_THRESHOLD, MIN_CLUSTER_SIZE, MAX_SEARCH_RESULTS,
    AncestorWalk, Cluster, Forest, NodeRelations, NodeSummary, RenderWindow, SearchResults, WindowOptions,
)
from .relations import RelationIndex, node_summary, resolve_relations
from .search import build_clusters, search
from .tree import build_forest, expansion_path, reveal
from .windowing import compute_window, next_limit_step

logger = logging.getLogger(__name__)


class ExplorerService:
    """Navigation views (windowing, tree, detail, search) over one OntologyService."""

    def __init__(self, ontology: OntologyService):
        self.ontology = ontology
        self._windows: Dict[Tuple[Optional[str], Optional[str], int], RenderWindow] = {}
        self._relations: Dict[Identifier, NodeRelations] = {}
        self._forest: Optional[Forest] = None
        self._relation_index: Optional[RelationIndex] = None

    @property
    def hierarchy_predicate(self) -> URIRef:
        return self.ontology.vocabulary.hierarchy_predicate

    @property
    def is_large_dataset(self) -> bool:
        return len(self.ontology.graph.nodes) > LARGE_DATASET_THRESHOLD

    def reset(self) -> None:
        """Drop cached views, e.g. after the underlying dataset was replaced."""
        self._windows.clear()
        self._relations.clear()
        self._forest = None
        self._relation_index = None

    def window(self, options: Optional[WindowOptions] = None) -> RenderWindow:
        """Get the nodes and links to render for the given options."""
        options = options or WindowOptions()
        key = options.cache_key()
        cached = self._windows.get(key)
        if cached is not None:
            return cached

        focus_id = None
        if options.focus_id:
            entity = self.ontology.find_entity(options.focus_id)
            focus_id = entity.id if entity is not None else URIRef(options.focus_id)

        result = compute_window(
            self.ontology.graph,
            class_filter=URIRef(options.class_filter) if options.class_filter else None,
            focus_id=focus_id,
            limit=options.node_limit,
        )
        logger.debug("Window %s -> %d nodes, %d links", key, len(result.nodes), len(result.links))
        self._windows[key] = result
        return result

    def forest(self) -> Forest:
        if self._forest is None:
            self._forest = build_forest(self.ontology.graph, self.hierarchy_predicate)
        return self._forest

    def expansion_path(self, node_id: Union[str, Identifier]) -> AncestorWalk:
        """Get the ancestors to expand for a selected graph node.

        Raises:
            ValueError: If the node is not part of the domain graph
        """
        node = self.ontology.get_graph_node(node_id)
        return expansion_path(self.ontology.graph, node.id, self.hierarchy_predicate)

    def reveal(self, node_id: Union[str, Identifier], expanded: Optional[Set[Identifier]] = None) -> Set[Identifier]:
        """Expanded set after selecting a graph node; existing expansions are kept.

        Raises:
            ValueError: If the node is not part of the domain graph
        """
        node = self.ontology.get_graph_node(node_id)
        return reveal(self.ontology.graph, node.id, expanded, self.hierarchy_predicate)

    def next_limit_step(self, options: Optional[WindowOptions] = None) -> Optional[int]:
        """Preset node limit that would show more nodes, or None when the limit cut nothing."""
        options = options or WindowOptions()
        window = self.window(options)
        if len(window.nodes) < options.node_limit:
            return None
        return next_limit_step(options.node_limit, window.total_nodes)

    def node_relations(self, node_id: Union[str, Identifier]) -> NodeRelations:
        """Get grouped relations for any entity of the ontology.

        Raises:
            ValueError: If the entity is not found
        """
        entity = self.ontology.get_entity(node_id)
        cached = self._relations.get(entity.id)
        if cached is not None:
            return cached

        if self._relation_index is None:
            self._relation_index = RelationIndex(self.ontology.detail.all_links, self.hierarchy_predicate)
        result = resolve_relations(entity.id, self.ontology.table, self._relation_index)
        self._relations[entity.id] = result
        return result

    def node_summary(self, node_id: Union[str, Identifier]) -> NodeSummary:
        return node_summary(self.ontology.get_entity(node_id))

    def search(self, query: str, max_results: int = MAX_SEARCH_RESULTS) -> SearchResults:
        return search(self.ontology.graph, query, max_results)

    def clusters(self, min_size: int = MIN_CLUSTER_SIZE, window: Optional[RenderWindow] = None) -> List[Cluster]:
        """Category clusters over the whole graph, or over a rendered window."""
        nodes = window.nodes if window is not None else self.ontology.graph.nodes
        return build_clusters(nodes, min_size)
