#!/usr/bin/env python3
"""
CLI tool for exploring an RDF ontology from the terminal.

This script provides functionality to:
1. Summarize the domain graph derived from a Turtle file
2. Export the graph and detail snapshots as JSON
3. Show the grouped relations of a single node
4. Compute a focus-preserving render window
5. Print the ontology browser tree
6. Search node and class labels

Usage:
    cd src
    python explorer_cli.py -f data/Brick.ttl
    python explorer_cli.py -f data/Brick.ttl export --output-dir ./out
    python explorer_cli.py -f data/Brick.ttl node https://brickschema.org/schema/Brick#AHU
    python explorer_cli.py -f data/Brick.ttl window --focus https://brickschema.org/schema/Brick#AHU --limit 100

The -f/--file option may be omitted when RDF_FILE_PATH is set (a .env file is honored).
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rdflib.plugins.parsers.notation3 import BadSyntax

# Add the src directory to the path so the packages resolve when run as a script
src_dir = Path(__file__).parent
sys.path.insert(0, str(src_dir))

from ontology import OntologyService
from explorer import ExplorerService, WindowOptions
from explorer.domain import DEFAULT_NODE_LIMIT


def cmd_summary(ontology: OntologyService, explorer: ExplorerService, args: argparse.Namespace) -> int:
    stats = ontology.get_stats()
    print(f"Statements:       {stats.total_statements}")
    print(f"Entities:         {stats.total_entities}")
    print(f"Relations:        {stats.total_relations}")
    print(f"Domain nodes:     {stats.domain_nodes}")
    print(f"Semantic links:   {stats.domain_links}")
    print(f"Categories:       {stats.categories}")
    print(f"Large dataset:    {'yes' if explorer.is_large_dataset else 'no'}")
    print("Classes:")
    for graph_class in ontology.graph.classes:
        count = sum(1 for node in ontology.graph.nodes if node.type == graph_class.uri)
        print(f"  {graph_class.label:<20} {count:>6}  {graph_class.uri}")
    return 0


def cmd_export(ontology: OntologyService, explorer: ExplorerService, args: argparse.Namespace) -> int:
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    graph_path = output_dir / "graph.json"
    detail_path = output_dir / "detail.json"
    graph_path.write_text(json.dumps(ontology.get_graph(), ensure_ascii=False, indent=2), encoding="utf-8")
    detail_path.write_text(json.dumps(ontology.get_detail(), ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Graph snapshot saved to: {graph_path.resolve()}")
    print(f"Detail snapshot saved to: {detail_path.resolve()}")
    return 0


def cmd_node(ontology: OntologyService, explorer: ExplorerService, args: argparse.Namespace) -> int:
    summary = explorer.node_summary(args.node_id)
    relations = explorer.node_relations(args.node_id)
    groups = relations.groups

    print(summary.display_name + (f" [{summary.type_label}]" if summary.type_label else ""))
    if summary.deprecated:
        print(f"  DEPRECATED {summary.deprecation_message or ''}".rstrip())
    if summary.definition or summary.comment:
        print(f"  {summary.definition or summary.comment}")

    sections = [
        ("Extends", groups.parents),
        ("Subtypes", groups.children),
        ("Also known as", groups.equivalents),
        ("Tags", groups.tags),
        ("Quantities", groups.quantities),
        ("Substances", groups.substances),
        ("Units", groups.units),
    ]
    for title, items in sections:
        if items:
            print(f"{title}: " + ", ".join(item.other_label for item in items))
    if relations.inherited_from:
        print("Inherited from: " + " > ".join(label for _, label in relations.inherited_from))
    for title, grouped in (("Relations", groups.other_out_by_predicate()),
                           ("Referenced by", groups.other_in_by_predicate())):
        if grouped:
            print(f"{title}:")
            for predicate, items in grouped.items():
                print(f"  {predicate}: " + ", ".join(item.other_label for item in items))
    for key, values in summary.extra_properties.items():
        print(f"  {key} = {'; '.join(values)}")
    return 0


def cmd_window(ontology: OntologyService, explorer: ExplorerService, args: argparse.Namespace) -> int:
    options = WindowOptions(class_filter=args.filter, focus_id=args.focus, node_limit=args.limit)
    window = explorer.window(options)
    print(f"Showing {len(window.nodes)}/{window.total_nodes} nodes, "
          f"{len(window.links)}/{window.total_links} links")
    for node in window.nodes:
        print(f"  {node.display_label}  <{node.id}>")
    step = explorer.next_limit_step(options)
    if step is not None:
        print(f"Use --limit {step} to show more")
    if args.clusters:
        for cluster in explorer.clusters(window=window):
            print(f"Cluster {cluster.label}: {len(cluster.nodes)} nodes")
    return 0


def cmd_tree(ontology: OntologyService, explorer: ExplorerService, args: argparse.Namespace) -> int:
    forest = explorer.forest()
    expanded = None
    if args.select:
        expanded = explorer.reveal(args.select)
    for entity, depth in forest.walk(expanded):
        if args.max_depth is not None and depth > args.max_depth:
            continue
        count = len(forest.children_of(entity.id))
        marker = "*" if args.select and str(entity.id) == args.select else " "
        suffix = f" ({count})" if count else ""
        print(f"{marker}{'  ' * depth}{entity.display_label}{suffix}")
    return 0


def cmd_search(ontology: OntologyService, explorer: ExplorerService, args: argparse.Namespace) -> int:
    results = explorer.search(args.query, max_results=args.max_results)
    if not results:
        print("No results")
        return 0
    for class_hit in results.classes:
        print(f"[class] {class_hit.label}  <{class_hit.uri}>")
    for node_hit in results.nodes:
        print(f"{node_hit.label}  <{node_hit.id}>")
    return 0


COMMANDS = {
    "summary": cmd_summary,
    "export": cmd_export,
    "node": cmd_node,
    "window": cmd_window,
    "tree": cmd_tree,
    "search": cmd_search,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Explore the domain graph of an RDF (Turtle) ontology",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summary of the parsed ontology
  python explorer_cli.py -f Brick.ttl

  # Export graph.json and detail.json
  python explorer_cli.py -f Brick.ttl export --output-dir ./out

  # Render window around a focus node
  python explorer_cli.py -f Brick.ttl window --focus https://brickschema.org/schema/Brick#AHU --limit 50
        """
    )
    parser.add_argument("-f", "--file", help="Turtle file to load (defaults to RDF_FILE_PATH)")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("summary", help="Show ontology statistics")

    export_parser = subparsers.add_parser("export", help="Write graph.json and detail.json")
    export_parser.add_argument("--output-dir", required=True, help="Directory for the JSON snapshots")

    node_parser = subparsers.add_parser("node", help="Show grouped relations of a node")
    node_parser.add_argument("node_id", help="IRI of the node")

    window_parser = subparsers.add_parser("window", help="Compute a render window")
    window_parser.add_argument("--filter", help="Class URI to filter by")
    window_parser.add_argument("--focus", help="IRI of the focus node")
    window_parser.add_argument("--limit", type=int, default=DEFAULT_NODE_LIMIT, help="Node limit")
    window_parser.add_argument("--clusters", action="store_true", help="Also list category clusters")

    tree_parser = subparsers.add_parser("tree", help="Print the ontology browser tree")
    tree_parser.add_argument("--select", help="IRI of a node to reveal (only its ancestors are expanded)")
    tree_parser.add_argument("--max-depth", type=int, default=None, help="Maximum depth to print")

    search_parser = subparsers.add_parser("search", help="Search node and class labels")
    search_parser.add_argument("query", help="Search text")
    search_parser.add_argument("--max-results", type=int, default=50, help="Maximum node hits")

    return parser


def resolve_input_file(file_arg: Optional[str]) -> Path:
    """Resolve and validate the input file.

    Raises:
        ValueError: If no file was given or it is not a .ttl file
        FileNotFoundError: If the file does not exist
    """
    file_path = file_arg or os.getenv("RDF_FILE_PATH")
    if not file_path:
        raise ValueError("Usage: explorer_cli.py -f <file.ttl> [command] (or set RDF_FILE_PATH)")
    resolved = Path(file_path).resolve()
    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    if resolved.suffix != ".ttl":
        raise ValueError("File must be a .ttl (Turtle RDF) file")
    return resolved


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    try:
        input_file = resolve_input_file(args.file)
        ontology = OntologyService.from_file(input_file)
        explorer = ExplorerService(ontology)
        command = COMMANDS[args.command or "summary"]
        return command(ontology, explorer, args)
    except (ValueError, FileNotFoundError, BadSyntax) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
