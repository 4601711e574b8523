"""
Domain models for the ontology module.

These models represent the statements delivered by the RDF parser and the
entities and relations derived from them, together with the two read-only
views built after ingest: the domain graph and the detail index.

Identifiers are rdflib terms. A URIRef is a named identifier, a BNode is an
anonymous (document-local) one, so anonymity is carried by the term type
produced at the ingest boundary and never re-derived from string shape.
"""

import re
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Union
from rdflib import URIRef, BNode, Literal


Identifier = Union[URIRef, BNode]


def label_from_uri(uri: Optional[str]) -> Optional[str]:
    """Return the last segment after '#' or '/', or the raw value if neither is present."""
    if not uri:
        return uri
    value = str(uri)
    hash_index = value.rfind("#")
    if hash_index != -1:
        return value[hash_index + 1:]
    slash_index = value.rfind("/")
    if slash_index != -1:
        return value[slash_index + 1:]
    return value


def humanize(text: str) -> str:
    """Turn 'Air_Handling_Unit' or 'hasQuantity' into readable words."""
    spaced = text.replace("_", " ")
    return re.sub(r"([a-z])([A-Z])", r"\1 \2", spaced)


def is_anonymous(term: Any) -> bool:
    return isinstance(term, BNode)


@dataclass(frozen=True)
class Statement:
    """A single parsed subject-predicate-object fact."""

    subject: Identifier
    predicate: URIRef
    object: Union[URIRef, BNode, Literal]

    @property
    def object_kind(self) -> str:
        return "literal" if isinstance(self.object, Literal) else "resource"


@dataclass
class Entity:
    """One record per distinct identifier seen as subject or resource object."""

    id: Identifier
    label: str
    type: Optional[URIRef] = None
    properties: Dict[str, List[str]] = field(default_factory=dict)  # predicate label -> literal values
    category: Optional[Identifier] = None
    category_label: Optional[str] = None

    @property
    def display_label(self) -> str:
        """Preferred literal label, falling back to the humanized derived label."""
        labels = self.properties.get("label")
        if labels:
            return labels[0]
        return humanize(self.label)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": str(self.id),
            "label": self.label,
            "type": str(self.type) if self.type is not None else None,
            "properties": {key: list(values) for key, values in self.properties.items()},
        }
        if self.category is not None:
            data["category"] = str(self.category)
            data["categoryLabel"] = self.category_label
        return data


@dataclass(frozen=True)
class Relation:
    """A directed edge derived from one non-literal statement."""

    source: Identifier
    target: Identifier
    predicate: URIRef
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "source": str(self.source),
            "target": str(self.target),
            "predicate": str(self.predicate),
            "label": self.label,
        }


@dataclass(frozen=True)
class GraphClass:
    """A distinct entity type present in the domain graph, with its friendly label."""

    uri: URIRef
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {"uri": str(self.uri), "label": self.label}


@dataclass
class DomainGraph:
    """Reduced view of named domain things and the semantic links between them."""

    nodes: List[Entity]
    links: List[Relation]
    classes: List[GraphClass]

    def node_ids(self) -> set:
        return {node.id for node in self.nodes}

    def get_node(self, node_id: Identifier) -> Optional[Entity]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
            "classes": [graph_class.to_dict() for graph_class in self.classes],
        }


@dataclass
class DetailIndex:
    """Unfiltered entities and relations, used for reference resolution."""

    all_nodes: List[Entity]
    all_links: List[Relation]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allNodes": [node.to_dict() for node in self.all_nodes],
            "allLinks": [link.to_dict() for link in self.all_links],
        }


@dataclass
class OntologyStats:
    """Statistics about the loaded ontology."""

    total_statements: int
    total_entities: int
    total_relations: int
    domain_nodes: int
    domain_links: int
    classes: int
    categories: int
