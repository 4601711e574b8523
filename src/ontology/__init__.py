"""
Ontology Ingest & Domain Graph Module

This module turns a parsed RDF document into an in-memory entity table and
derives the views used for exploration: the filtered domain graph and the
complete detail index.

Public Interface:
- OntologyService: High-level service for loading and querying an ontology
- VocabularyConfig / default_vocabulary: Static allow-list configuration

Private Components:
- EntityTable: Single-pass entity and relation builder
- CategoryResolver: Hierarchy walk assigning visual categories
- Domain models: Entity, Relation, DomainGraph, DetailIndex, etc.
"""

from .config import VocabularyConfig, default_vocabulary
from .service import OntologyService

__all__ = ["OntologyService", "VocabularyConfig", "default_vocabulary"]
