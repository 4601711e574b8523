"""
Parent/child forest for the ontology browser.

Each domain node is placed under its first-declared hierarchy parent, so a
node appears exactly once even in multiply-inherited ontologies. Nodes that
can only be reached through a hierarchy cycle are promoted to roots.
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from rdflib import URIRef, RDFS

from ontology.domain import DomainGraph, Entity, Identifier, Relation

from .domain import AncestorWalk, Forest

logger = logging.getLogger(__name__)


def hierarchy_parents(links: Iterable[Relation],
                      hierarchy_predicate: URIRef = RDFS.subClassOf) -> Dict[Identifier, List[Identifier]]:
    """All hierarchy parents per node, in source declaration order."""
    parents: Dict[Identifier, List[Identifier]] = {}
    for link in links:
        if link.predicate == hierarchy_predicate:
            parents.setdefault(link.source, []).append(link.target)
    return parents


def walk_ancestors(start: Identifier, parents: Dict[Identifier, List[Identifier]]) -> AncestorWalk:
    """Breadth-first walk over every hierarchy parent, nearest ancestors first.

    Each ancestor is listed once. Reaching the start node again marks a cycle.
    """
    ancestors: List[Identifier] = []
    visited: Set[Identifier] = {start}
    cycle_detected = False
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for parent in parents.get(current, []):
            if parent == start:
                cycle_detected = True
            if parent in visited:
                continue
            visited.add(parent)
            ancestors.append(parent)
            queue.append(parent)
    return AncestorWalk(ancestors=ancestors, cycle_detected=cycle_detected)


def expansion_path(graph: DomainGraph, node_id: Identifier,
                   hierarchy_predicate: URIRef = RDFS.subClassOf) -> AncestorWalk:
    """Ancestors to expand in the browser so the selected node becomes visible."""
    return walk_ancestors(node_id, hierarchy_parents(graph.links, hierarchy_predicate))


def _sort_key(entity: Entity) -> str:
    return entity.display_label.lower()


def build_forest(graph: DomainGraph, hierarchy_predicate: URIRef = RDFS.subClassOf) -> Forest:
    """Build the browser forest over the domain graph's hierarchy links."""
    nodes_by_id = {node.id: node for node in graph.nodes}

    parent: Dict[Identifier, Identifier] = {}
    for link in graph.links:
        if link.predicate != hierarchy_predicate:
            continue
        if link.source in nodes_by_id and link.target in nodes_by_id and link.source not in parent:
            parent[link.source] = link.target

    def child_ids() -> Dict[Identifier, List[Identifier]]:
        mapping: Dict[Identifier, List[Identifier]] = {}
        for child, parent_id in parent.items():
            mapping.setdefault(parent_id, []).append(child)
        return mapping

    roots = [node for node in graph.nodes if node.id not in parent]

    # Mark everything reachable from the natural roots
    children_map = child_ids()
    reached: Set[Identifier] = set()

    def mark(start: Identifier) -> None:
        stack = [start]
        while stack:
            current = stack.pop()
            if current in reached:
                continue
            reached.add(current)
            stack.extend(children_map.get(current, []))

    for root in roots:
        mark(root.id)

    cycle_detected = False
    for node in graph.nodes:
        if node.id in reached:
            continue
        # Unreached nodes hang below a cycle; promote the node where the cycle closes
        seen: Set[Identifier] = set()
        current = node.id
        while current in parent and current not in seen:
            seen.add(current)
            current = parent[current]
        cycle_detected = True
        logger.debug("Promoting %s to a root to break a hierarchy cycle", current)
        del parent[current]
        roots.append(nodes_by_id[current])
        children_map = child_ids()
        mark(current)

    children: Dict[Identifier, List[Entity]] = {
        parent_id: sorted((nodes_by_id[child] for child in kids), key=_sort_key)
        for parent_id, kids in child_ids().items()
    }

    forest = Forest(roots=[], children=children, parent=parent, cycle_detected=cycle_detected)
    descendant_counts = {root.id: forest.descendant_count(root.id) for root in roots}
    forest.roots = sorted(roots, key=lambda root: descendant_counts[root.id], reverse=True)
    return forest


def reveal(graph: DomainGraph, node_id: Identifier, expanded: Optional[Set[Identifier]] = None,
           hierarchy_predicate: URIRef = RDFS.subClassOf) -> Set[Identifier]:
    """Return the expanded set after revealing a selected node (existing expansions are kept)."""
    result = set(expanded or ())
    result.update(expansion_path(graph, node_id, hierarchy_predicate).ancestors)
    return result
