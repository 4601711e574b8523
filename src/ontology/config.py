"""
Static vocabulary configuration for building the domain graph.

The defaults target Brick-style building ontologies expressed with SHACL node
shapes and OWL/RDFS classes.
"""

from typing import Dict, Set
from pydantic import BaseModel, Field
from rdflib import URIRef, Namespace, RDF, RDFS, OWL, SKOS


BRICK = Namespace("https://brickschema.org/schema/Brick#")
SH = Namespace("http://www.w3.org/ns/shacl#")


class VocabularyConfig(BaseModel):
    """Allow-lists and lookup tables used by the domain filter and category resolver."""

    model_config = {"arbitrary_types_allowed": True}

    domain_types: Set[URIRef] = Field(default_factory=set, description="Entity types kept as graph nodes")
    semantic_predicates: Set[URIRef] = Field(default_factory=set, description="Predicates rendered as graph edges")
    class_labels: Dict[URIRef, str] = Field(default_factory=dict, description="Friendly labels for entity types")
    abstract_roots: Set[URIRef] = Field(default_factory=set, description="Ancestors too generic to be a category")
    hierarchy_predicate: URIRef = Field(default=RDFS.subClassOf, description="Predicate expressing 'is a more specific kind of'")
    type_predicate: URIRef = Field(default=RDF.type, description="Predicate consumed into Entity.type")

    @property
    def hierarchy_label(self) -> str:
        value = str(self.hierarchy_predicate)
        return value[max(value.rfind("#"), value.rfind("/")) + 1:]


def default_vocabulary() -> VocabularyConfig:
    """Vocabulary for Brick, SHACL, RDFS and OWL ontologies."""
    return VocabularyConfig(
        domain_types={
            SH.NodeShape,      # Brick concepts (equipment, points, locations)
            BRICK.Quantity,
            BRICK.Substance,
            RDFS.Class,
            OWL.Class,
        },
        # Tag associations are too dense for the graph and only shown in node details
        semantic_predicates={
            RDFS.subClassOf,
            OWL.equivalentClass,
            OWL.disjointWith,
            OWL.sameAs,
            BRICK.aliasOf,
            BRICK.isReplacedBy,
            BRICK.hasQuantity,
            BRICK.hasSubstance,
            SKOS.broader,
            SKOS.narrower,
        },
        class_labels={
            SH.NodeShape: "Brick Concept",
            BRICK.Quantity: "Quantity",
            BRICK.Substance: "Substance",
            RDFS.Class: "Class",
            OWL.Class: "OWL Class",
        },
        abstract_roots={
            BRICK.Entity,
            BRICK.Class,
            BRICK.Measurable,
            RDFS.Resource,
            OWL.Thing,
        },
    )
