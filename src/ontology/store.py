"""
In-memory entity table built from parsed RDF statements.

The table holds one Entity per distinct identifier and one Relation per
non-literal statement. It is built in a single pass and is the only place
where entities are created; later stages only filter or annotate them.
"""

from typing import Dict, Iterable, Iterator, List, Optional
from rdflib import URIRef, Literal, RDF

from .domain import Entity, Identifier, Relation, Statement, label_from_uri


class EntityTable:
    """Simple in-memory store of entities and relations for one ontology document."""

    def __init__(self, type_predicate: URIRef = RDF.type):
        self.type_predicate = type_predicate
        self._entities: Dict[Identifier, Entity] = {}
        self._relations: List[Relation] = []
        self.statement_count = 0

    @classmethod
    def from_statements(cls, statements: Iterable[Statement],
                        type_predicate: URIRef = RDF.type) -> "EntityTable":
        """Build the table from an ordered statement sequence in one linear pass."""
        table = cls(type_predicate=type_predicate)
        for statement in statements:
            table.add_statement(statement)
        return table

    def add_statement(self, statement: Statement) -> None:
        self.statement_count += 1
        subject = self.ensure_entity(statement.subject)
        obj = statement.object

        if isinstance(obj, Literal):
            predicate_label = label_from_uri(statement.predicate)
            subject.properties.setdefault(predicate_label, []).append(str(obj))
            return

        self.ensure_entity(obj)
        if statement.predicate == self.type_predicate:
            # Last writer wins when the source repeats the type
            subject.type = obj
            return

        self._relations.append(Relation(
            source=statement.subject,
            target=obj,
            predicate=statement.predicate,
            label=label_from_uri(statement.predicate),
        ))

    def ensure_entity(self, entity_id: Identifier) -> Entity:
        entity = self._entities.get(entity_id)
        if entity is None:
            entity = Entity(id=entity_id, label=label_from_uri(entity_id))
            self._entities[entity_id] = entity
        return entity

    def get(self, entity_id: Identifier) -> Optional[Entity]:
        return self._entities.get(entity_id)

    @property
    def entities(self) -> List[Entity]:
        return list(self._entities.values())

    @property
    def relations(self) -> List[Relation]:
        return list(self._relations)

    def iter_relations(self) -> Iterator[Relation]:
        return iter(self._relations)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)
