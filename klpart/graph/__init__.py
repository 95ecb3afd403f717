"""Undirected CSR graph substrate: construction, validation, text I/O, generation."""

from klpart.graph.cache import (
    generate_or_load_graph,
    graph_cache_key,
    load_cached_graph,
    save_graph,
)
from klpart.graph.generator import (
    GraphGenerationError,
    edges_to_graph,
    generate_graph,
    generate_random_graph,
    sample_edges,
)
from klpart.graph.io import GraphFile, format_graph, parse_graph, read_graph, write_graph
from klpart.graph.types import Graph, graph_from_edges, load_graph
from klpart.graph.validation import (
    connected_components,
    count_self_loops,
    is_connected,
    is_symmetric,
    validate_graph,
)

__all__ = [
    "Graph",
    "GraphFile",
    "GraphGenerationError",
    "connected_components",
    "count_self_loops",
    "edges_to_graph",
    "format_graph",
    "generate_graph",
    "generate_or_load_graph",
    "generate_random_graph",
    "graph_cache_key",
    "graph_from_edges",
    "is_connected",
    "is_symmetric",
    "load_cached_graph",
    "load_graph",
    "parse_graph",
    "read_graph",
    "sample_edges",
    "save_graph",
    "validate_graph",
    "write_graph",
]
