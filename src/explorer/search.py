"""
Label search over the domain graph and its classes.
"""

from typing import List

from ontology.domain import DomainGraph, Entity

from .domain import MAX_SEARCH_RESULTS, ClassHit, Cluster, NodeHit, SearchResults, MIN_CLUSTER_SIZE


def normalize_for_search(text: str) -> str:
    return text.lower().replace("_", " ").replace("-", " ")


def search(graph: DomainGraph, query: str, max_results: int = MAX_SEARCH_RESULTS) -> SearchResults:
    """Substring search on node labels (capped) and on class labels or URIs."""
    if not query.strip():
        return SearchResults(query=query)
    needle = normalize_for_search(query)

    nodes: List[NodeHit] = []
    for node in graph.nodes:
        if needle in normalize_for_search(node.label):
            nodes.append(NodeHit(
                id=str(node.id),
                label=node.label,
                type=str(node.type) if node.type is not None else None,
            ))
            if len(nodes) >= max_results:
                break

    classes = [
        ClassHit(uri=str(graph_class.uri), label=graph_class.label)
        for graph_class in graph.classes
        if needle in normalize_for_search(graph_class.label)
        or needle in normalize_for_search(str(graph_class.uri))
    ]

    return SearchResults(query=query, nodes=nodes, classes=classes)


def build_clusters(nodes: List[Entity], min_size: int = MIN_CLUSTER_SIZE) -> List[Cluster]:
    """Group nodes by category, keeping groups with at least min_size members."""
    groups = {}
    for node in nodes:
        if node.category is None:
            continue
        cluster = groups.get(node.category)
        if cluster is None:
            cluster = Cluster(id=node.category, label=node.category_label, nodes=[])
            groups[node.category] = cluster
        cluster.nodes.append(node)
    return [cluster for cluster in groups.values() if len(cluster.nodes) >= min_size]
