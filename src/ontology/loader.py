"""
Ingest boundary: turns an RDF document into a sequence of statements.

Syntax parsing is delegated to rdflib. The resulting terms already carry the
named/anonymous distinction (URIRef vs BNode), which downstream components
rely on instead of inspecting identifier strings.

rdflib's memory store iterates triples in hash order, so the graph used for
parsing records each triple as the parser emits it. Statements are produced
from that record and keep document order.
"""

from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple, Union
from rdflib import Graph
from rdflib.util import guess_format

from .domain import Statement


class OrderedGraph(Graph):
    """Graph that remembers the order in which triples were first added."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.emitted: List[Tuple] = []
        self._seen: Set[Tuple] = set()

    def _record(self, triple) -> None:
        # Repeated triples collapse, as they do in the store
        if triple not in self._seen:
            self._seen.add(triple)
            self.emitted.append(triple)

    def add(self, triple):
        self._record(triple)
        return super().add(triple)

    def addN(self, quads):
        quads = list(quads)
        for s, p, o, _ in quads:
            self._record((s, p, o))
        return super().addN(quads)


def parse_graph(path: Union[str, Path], format: Optional[str] = None) -> OrderedGraph:
    """Parse an RDF file into an rdflib graph (Turtle unless the suffix says otherwise)."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"RDF file not found: {file_path}")

    rdf_format = format or guess_format(str(file_path)) or "turtle"
    graph = OrderedGraph()
    graph.parse(str(file_path), format=rdf_format)
    return graph


def statements_from_graph(graph: Graph) -> Iterator[Statement]:
    """Yield statements in document order for an OrderedGraph, else in store order."""
    triples = graph.emitted if isinstance(graph, OrderedGraph) else graph.triples((None, None, None))
    for subject, predicate, obj in triples:
        yield Statement(subject=subject, predicate=predicate, object=obj)


def parse_statements(path: Union[str, Path], format: Optional[str] = None) -> List[Statement]:
    return list(statements_from_graph(parse_graph(path, format)))
