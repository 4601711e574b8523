"""
Relation resolver for the node detail view.

Partitions a selected node's incoming and outgoing relations into semantic
groups and computes its inherited-from chain. Lookups run against the full
entity table, not the filtered domain graph, so references to tags, units
and other non-graph entities still resolve to readable labels.
"""

from typing import Dict, List, Optional

from rdflib import URIRef, RDFS

from ontology.domain import Entity, Identifier, Relation, humanize, is_anonymous, label_from_uri
from ontology.store import EntityTable

from .domain import NodeRelations, NodeSummary, RelationGroups, ResolvedRelation
from .tree import hierarchy_parents, walk_ancestors


HIERARCHY_PREDICATES = {"subClassOf", "subPropertyOf"}
EQUIVALENT_PREDICATES = {"equivalentClass", "aliasOf", "sameAs"}
TAG_PREDICATES = {"hasAssociatedTag"}
QUANTITY_PREDICATES = {"hasQuantity", "hasQuantityKind"}
SUBSTANCE_PREDICATES = {"hasSubstance"}
UNIT_PREDICATES = {"applicableUnit"}

# Literal properties shown in dedicated sections of the detail view
SPECIAL_PROPERTIES = {
    "label", "definition", "description", "comment", "deprecated", "seeAlso",
    "deprecatedInVersion", "deprecationMitigationMessage",
}


class RelationIndex:
    """Outgoing/incoming adjacency over the full relation list, built once per dataset."""

    def __init__(self, relations: List[Relation], hierarchy_predicate: URIRef = RDFS.subClassOf):
        self.outgoing: Dict[Identifier, List[Relation]] = {}
        self.incoming: Dict[Identifier, List[Relation]] = {}
        for relation in relations:
            self.outgoing.setdefault(relation.source, []).append(relation)
            self.incoming.setdefault(relation.target, []).append(relation)
        self.parents = hierarchy_parents(relations, hierarchy_predicate)


def resolve_label(entity_id: Identifier, table: EntityTable) -> str:
    """Literal label, else the humanized derived label (also for ids outside the table)."""
    entity = table.get(entity_id)
    if entity is not None:
        return entity.display_label
    return humanize(label_from_uri(entity_id))


def organize_relations(outgoing: List[ResolvedRelation], incoming: List[ResolvedRelation]) -> RelationGroups:
    """Sort relations into semantic buckets, leaving anonymous endpoints out."""
    groups = RelationGroups()

    for relation in outgoing:
        if is_anonymous(relation.other_id):
            continue
        predicate = relation.predicate
        if predicate in HIERARCHY_PREDICATES:
            groups.parents.append(relation)
        elif predicate in EQUIVALENT_PREDICATES:
            groups.equivalents.append(relation)
        elif predicate in TAG_PREDICATES:
            groups.tags.append(relation)
        elif predicate in QUANTITY_PREDICATES:
            groups.quantities.append(relation)
        elif predicate in SUBSTANCE_PREDICATES:
            groups.substances.append(relation)
        elif predicate in UNIT_PREDICATES:
            groups.units.append(relation)
        else:
            groups.other_out.append(relation)

    for relation in incoming:
        if is_anonymous(relation.other_id):
            continue
        predicate = relation.predicate
        if predicate in HIERARCHY_PREDICATES:
            groups.children.append(relation)
        elif predicate in EQUIVALENT_PREDICATES:
            # Skip equivalences already captured from the outgoing side
            if not any(existing.other_id == relation.other_id for existing in groups.equivalents):
                groups.equivalents.append(relation)
        else:
            groups.other_in.append(relation)

    return groups


def resolve_relations(node_id: Identifier, table: EntityTable,
                      index: Optional[RelationIndex] = None) -> NodeRelations:
    """Resolve, group and walk the relations of one node.

    Args:
        node_id: Selected node
        table: Full entity table used for label resolution
        index: Prebuilt adjacency; built from the table's relations when omitted

    Returns:
        NodeRelations with raw outgoing/incoming lists, semantic groups and the
        inherited-from chain (ancestors beyond the direct parents, nearest first)
    """
    if index is None:
        index = RelationIndex(table.relations)

    outgoing = [
        ResolvedRelation(
            predicate=relation.label,
            predicate_uri=str(relation.predicate),
            other_id=relation.target,
            other_label=resolve_label(relation.target, table),
            direction="out",
        )
        for relation in index.outgoing.get(node_id, [])
    ]
    incoming = [
        ResolvedRelation(
            predicate=relation.label,
            predicate_uri=str(relation.predicate),
            other_id=relation.source,
            other_label=resolve_label(relation.source, table),
            direction="in",
        )
        for relation in index.incoming.get(node_id, [])
    ]

    walk = walk_ancestors(node_id, index.parents)
    direct_parents = set(index.parents.get(node_id, []))
    inherited_from = [
        (ancestor, resolve_label(ancestor, table))
        for ancestor in walk.ancestors
        if ancestor not in direct_parents and not is_anonymous(ancestor)
    ]

    return NodeRelations(
        node_id=node_id,
        outgoing=outgoing,
        incoming=incoming,
        groups=organize_relations(outgoing, incoming),
        inherited_from=inherited_from,
        cycle_detected=walk.cycle_detected,
    )


def node_summary(entity: Entity) -> NodeSummary:
    """Collect the literal properties the detail view shows in dedicated sections."""
    properties = entity.properties

    def first(key: str) -> Optional[str]:
        values = properties.get(key)
        return values[0] if values else None

    return NodeSummary(
        display_name=entity.display_label,
        type_label=humanize(label_from_uri(entity.type)) if entity.type is not None else None,
        definition=first("definition") or first("description"),
        comment=first("comment"),
        deprecated=first("deprecated") == "true",
        deprecation_message=first("deprecationMitigationMessage"),
        see_also=list(properties.get("seeAlso", [])),
        extra_properties={
            key: list(values) for key, values in properties.items() if key not in SPECIAL_PROPERTIES
        },
    )
