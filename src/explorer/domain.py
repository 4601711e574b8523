"""
Explorer domain models for navigation views over the domain graph.

Options and search results are pydantic models (they cross the CLI/JSON
boundary); views that hold Entity objects are plain dataclasses.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field

from ontology.domain import Entity, Identifier, Relation


DEFAULT_NODE_LIMIT = 500
LARGE_DATASET_THRESHOLD = 1000
LIMIT_STEPS = [100, 250, 500, 1000, 2000, 5000, 10000]
MAX_SEARCH_RESULTS = 50
MIN_CLUSTER_SIZE = 5


class WindowOptions(BaseModel):
    """Inputs of the focus-preserving windower."""

    class_filter: Optional[str] = Field(default=None, description="Type URI whose nodes (plus one hop) are shown")
    focus_id: Optional[str] = Field(default=None, description="Node kept visible together with its neighbors")
    node_limit: int = Field(default=DEFAULT_NODE_LIMIT, ge=1, description="Maximum number of nodes to render")

    def cache_key(self) -> Tuple[Optional[str], Optional[str], int]:
        return (self.class_filter, self.focus_id, self.node_limit)


class NodeHit(BaseModel):
    """A node matching a search query."""

    id: str = Field(..., description="Node identifier")
    label: str = Field(..., description="Derived node label")
    type: Optional[str] = Field(None, description="Node type URI")


class ClassHit(BaseModel):
    """A graph class matching a search query."""

    uri: str = Field(..., description="Class URI")
    label: str = Field(..., description="Friendly class label")


class SearchResults(BaseModel):
    """Container for node and class search results."""

    query: str = Field(..., description="Original search query")
    nodes: List[NodeHit] = Field(default_factory=list, description="Matching nodes, capped at max_results")
    classes: List[ClassHit] = Field(default_factory=list, description="Matching classes")

    def __len__(self) -> int:
        return len(self.nodes) + len(self.classes)

    def __bool__(self) -> bool:
        return len(self) > 0


@dataclass
class RenderWindow:
    """Nodes and links selected for rendering."""

    nodes: List[Entity]
    links: List[Relation]
    total_nodes: int
    total_links: int

    def node_ids(self) -> set:
        return {node.id for node in self.nodes}


@dataclass
class Forest:
    """Parent/child forest over the domain graph, each node placed exactly once."""

    roots: List[Entity]
    children: Dict[Identifier, List[Entity]]
    parent: Dict[Identifier, Identifier]
    cycle_detected: bool = False

    def children_of(self, node_id: Identifier) -> List[Entity]:
        return self.children.get(node_id, [])

    def descendant_count(self, node_id: Identifier) -> int:
        count = 0
        stack = list(self.children_of(node_id))
        while stack:
            child = stack.pop()
            count += 1
            stack.extend(self.children_of(child.id))
        return count

    def walk(self, expanded: Optional[set] = None):
        """Yield (entity, depth) in display order; only descends into expanded nodes when given."""
        stack = [(root, 0) for root in reversed(self.roots)]
        while stack:
            entity, depth = stack.pop()
            yield entity, depth
            if expanded is not None and entity.id not in expanded:
                continue
            for child in reversed(self.children_of(entity.id)):
                stack.append((child, depth + 1))


@dataclass
class AncestorWalk:
    """Result of a breadth-first walk up the hierarchy predicate."""

    ancestors: List[Identifier]
    cycle_detected: bool = False


@dataclass
class ResolvedRelation:
    """A relation seen from the selected node, with the other endpoint's label resolved."""

    predicate: str          # predicate label, e.g. "subClassOf"
    predicate_uri: str
    other_id: Identifier
    other_label: str
    direction: str          # "out" | "in"


@dataclass
class RelationGroups:
    """Semantic buckets for a node's relations."""

    parents: List[ResolvedRelation] = field(default_factory=list)
    children: List[ResolvedRelation] = field(default_factory=list)
    equivalents: List[ResolvedRelation] = field(default_factory=list)
    tags: List[ResolvedRelation] = field(default_factory=list)
    quantities: List[ResolvedRelation] = field(default_factory=list)
    substances: List[ResolvedRelation] = field(default_factory=list)
    units: List[ResolvedRelation] = field(default_factory=list)
    other_out: List[ResolvedRelation] = field(default_factory=list)
    other_in: List[ResolvedRelation] = field(default_factory=list)

    def other_out_by_predicate(self) -> Dict[str, List[ResolvedRelation]]:
        return _group_by_predicate(self.other_out)

    def other_in_by_predicate(self) -> Dict[str, List[ResolvedRelation]]:
        return _group_by_predicate(self.other_in)


@dataclass
class NodeRelations:
    """Everything the detail view needs about one node's relations."""

    node_id: Identifier
    outgoing: List[ResolvedRelation]
    incoming: List[ResolvedRelation]
    groups: RelationGroups
    inherited_from: List[Tuple[Identifier, str]]   # (ancestor id, label), nearest first
    cycle_detected: bool = False


@dataclass
class NodeSummary:
    """Literal-property summary of a node for the detail view."""

    display_name: str
    type_label: Optional[str]
    definition: Optional[str]
    comment: Optional[str]
    deprecated: bool
    deprecation_message: Optional[str]
    see_also: List[str]
    extra_properties: Dict[str, List[str]]


@dataclass
class Cluster:
    """Nodes grouped under one category."""

    id: Identifier
    label: Optional[str]
    nodes: List[Entity]


def _group_by_predicate(relations: List[ResolvedRelation]) -> Dict[str, List[ResolvedRelation]]:
    groups: Dict[str, List[ResolvedRelation]] = {}
    for relation in relations:
        groups.setdefault(relation.predicate, []).append(relation)
    return groups
