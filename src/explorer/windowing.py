"""
Focus-preserving windowing of the domain graph.

Large ontologies cannot be rendered whole, so the windower picks the subset
of nodes to draw from a class filter, a focus node and a node limit. The
focus node and its direct neighbors are never dropped, and the returned
links always connect two returned nodes.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Set

from ontology.domain import DomainGraph, Entity, Identifier, Relation

from .domain import DEFAULT_NODE_LIMIT, LIMIT_STEPS, RenderWindow


def neighbors_of(node_id: Identifier, links: Iterable[Relation]) -> Set[Identifier]:
    """Undirected one-hop neighborhood of a node, including the node itself."""
    neighborhood = {node_id}
    for link in links:
        if link.source == node_id:
            neighborhood.add(link.target)
        if link.target == node_id:
            neighborhood.add(link.source)
    return neighborhood


def degree_counts(links: Iterable[Relation]) -> Dict[Identifier, int]:
    counts: Counter = Counter()
    for link in links:
        counts[link.source] += 1
        counts[link.target] += 1
    return counts


def apply_class_filter(nodes: List[Entity], links: List[Relation], class_filter: Identifier) -> List[Entity]:
    """Keep nodes of the given type plus every node one hop away from them."""
    matching = {node.id for node in nodes if node.type == class_filter}
    expanded = set(matching)
    for link in links:
        if link.source in matching:
            expanded.add(link.target)
        if link.target in matching:
            expanded.add(link.source)
    return [node for node in nodes if node.id in expanded]


def rank_by_degree(nodes: List[Entity], links: List[Relation]) -> List[Entity]:
    """Sort by degree descending; sorted() is stable so ties keep input order."""
    counts = degree_counts(links)
    return sorted(nodes, key=lambda node: counts.get(node.id, 0), reverse=True)


def compute_window(graph: DomainGraph, class_filter: Optional[Identifier] = None,
                   focus_id: Optional[Identifier] = None, limit: int = DEFAULT_NODE_LIMIT) -> RenderWindow:
    """Compute the nodes and links to render.

    Args:
        graph: The full domain graph
        class_filter: Optional type URI; nodes of that type and their neighbors are kept
        focus_id: Optional node that must stay visible together with its neighbors
        limit: Node-count limit; may only be exceeded by the focus neighborhood

    Returns:
        RenderWindow with the selected nodes and the links between them

    Raises:
        ValueError: If limit is lower than 1
    """
    if limit < 1:
        raise ValueError(f"Node limit must be at least 1, got {limit}")

    nodes = list(graph.nodes)
    all_links = graph.links

    if class_filter is not None:
        nodes = apply_class_filter(nodes, all_links, class_filter)

    focus_neighborhood: Set[Identifier] = set()
    if focus_id is not None:
        # Neighborhood comes from the unfiltered link list
        focus_neighborhood = neighbors_of(focus_id, all_links)
        present = {node.id for node in nodes}
        if not focus_neighborhood <= present:
            nodes = nodes + [
                node for node in graph.nodes
                if node.id in focus_neighborhood and node.id not in present
            ]

    if len(nodes) > limit:
        ranked = rank_by_degree(nodes, all_links)
        if focus_id is not None:
            kept = [node for node in ranked if node.id in focus_neighborhood]
            rest = [node for node in ranked if node.id not in focus_neighborhood]
            nodes = kept + rest[:max(0, limit - len(kept))]
        else:
            nodes = ranked[:limit]

    node_ids = {node.id for node in nodes}
    links = [link for link in all_links if link.source in node_ids and link.target in node_ids]

    return RenderWindow(nodes=nodes, links=links,
                        total_nodes=len(graph.nodes), total_links=len(graph.links))


def next_limit_step(limit: int, total_nodes: int) -> Optional[int]:
    """Next preset node limit above the current one, or None when every node already fits."""
    if limit >= total_nodes:
        return None
    for step in LIMIT_STEPS:
        if step > limit:
            return step
    return None
