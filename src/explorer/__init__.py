"""
Explorer module providing navigation views over a loaded ontology.

This module provides a unified interface for windowing, tree browsing, node
details and search through ExplorerService.
"""

# Main public interface
from .service import ExplorerService
from .domain import WindowOptions

# Export only the public interface
__all__ = ['ExplorerService', 'WindowOptions']
