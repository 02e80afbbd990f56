"""
Tests for dependency ordering with cycle breaking.
"""

import pytest

from openapi_to_dto.errors import DependencyCycleError
from openapi_to_dto.pipeline.analyzer import DependencyGraph, TopologicalSorter


def graph_of(edges: dict) -> DependencyGraph:
    graph = DependencyGraph()
    for name, dependencies in edges.items():
        graph.add(name, dependencies)
    return graph


class TestTopologicalSorter:
    def test_dependencies_precede_dependents(self):
        graph = graph_of({"OrderDto": ["CustomerDto", "LineDto"], "LineDto": ["ProductDto"], "CustomerDto": [], "ProductDto": []})
        result = TopologicalSorter().sort(graph)
        assert result.order == ["CustomerDto", "ProductDto", "LineDto", "OrderDto"]
        assert result.broken_edges == []

    def test_unknown_dependencies_are_ignored(self):
        result = TopologicalSorter().sort(graph_of({"OrderDto": ["StatusEnum", "SharedDto"]}))
        assert result.order == ["OrderDto"]

    def test_cycle_is_broken_at_closing_edge(self):
        graph = graph_of({"ADto": ["BDto"], "BDto": ["CDto"], "CDto": ["ADto"]})
        result = TopologicalSorter().sort(graph)
        assert result.order == ["CDto", "BDto", "ADto"]
        assert result.broken_edges == [("CDto", "ADto")]

    def test_order_is_valid_except_broken_edges(self):
        graph = graph_of({"ADto": ["BDto", "DDto"], "BDto": ["ADto", "CDto"], "CDto": [], "DDto": ["CDto"]})
        result = TopologicalSorter().sort(graph)
        position = {name: i for i, name in enumerate(result.order)}
        for name in graph.nodes:
            for dependency in graph.dependencies(name):
                if (name, dependency) not in result.broken_edges:
                    assert position[dependency] < position[name]
        assert sorted(result.order) == sorted(graph.nodes)

    def test_strict_mode_raises(self):
        graph = graph_of({"ADto": ["BDto"], "BDto": ["ADto"]})
        with pytest.raises(DependencyCycleError) as excinfo:
            TopologicalSorter(strict=True).sort(graph)
        assert excinfo.value.edges == [("BDto", "ADto")]
        assert "BDto -> ADto" in str(excinfo.value)

    def test_strict_mode_accepts_acyclic_graph(self):
        result = TopologicalSorter(strict=True).sort(graph_of({"ADto": ["BDto"], "BDto": []}))
        assert result.order == ["BDto", "ADto"]

    def test_duplicate_edges_collapse(self):
        graph = DependencyGraph()
        graph.add("ADto", ["BDto", "BDto"])
        graph.add("ADto", ["BDto"])
        assert graph.to_dict() == {"ADto": ["BDto"]}

    def test_long_chain(self):
        names = [f"N{i}Dto" for i in range(300)]
        graph = graph_of({name: ([names[i + 1]] if i + 1 < len(names) else []) for i, name in enumerate(names)})
        assert TopologicalSorter().sort(graph).order == list(reversed(names))


if __name__ == "__main__":
    pytest.main([__file__])
