"""Pytest configuration and shared fixtures for daglayer tests."""

import pytest

from daglayer import DagLayoutGenerator, InputEdge, InputNode, build_index
from daglayer.models import DagLayout, Point, PositionedEdge, PositionedNode


@pytest.fixture
def fan_out_nodes():
    """Three nodes: one source feeding two sinks."""
    return [
        InputNode("10", "ten"),
        InputNode("20", "twenty"),
        InputNode("30", "thirty"),
    ]


@pytest.fixture
def fan_out_edges():
    return [InputEdge("10", "20"), InputEdge("10", "30")]


@pytest.fixture
def diamond_nodes():
    """Start branches into two paths that merge again at End."""
    return [
        InputNode("Start", "Start"),
        InputNode("Left", "Left"),
        InputNode("Right", "Right"),
        InputNode("End", "End"),
    ]


@pytest.fixture
def diamond_edges():
    return [
        InputEdge("Start", "Left"),
        InputEdge("Start", "Right"),
        InputEdge("Left", "End"),
        InputEdge("Right", "End"),
    ]


@pytest.fixture
def cyclic_nodes():
    return [InputNode("A", "A"), InputNode("B", "B")]


@pytest.fixture
def cyclic_edges():
    return [InputEdge("A", "B"), InputEdge("B", "A")]


@pytest.fixture
def fan_out_graph(fan_out_nodes, fan_out_edges):
    """Pre-built fan-out graph index."""
    return build_index(fan_out_nodes, fan_out_edges)


@pytest.fixture
def generator():
    """Default DagLayoutGenerator instance (500x500 canvas, 40x20 nodes)."""
    return DagLayoutGenerator()


@pytest.fixture
def fan_out_layout(generator, fan_out_nodes, fan_out_edges):
    return generator.layout(fan_out_nodes, fan_out_edges)


@pytest.fixture
def two_node_layout():
    """
    Factory for a hand-placed layout with one horizontal edge.

    The source's outgoing anchor is at (50, 50) and the target's incoming
    anchor ``edge_length`` to its right. The target has no label.
    """

    def make(edge_length, clearance=3):
        source = PositionedNode("s", "S", 0, Point(10, 50), Point(50, 50))
        target_x = 50 + edge_length
        target = PositionedNode("t", "", 1, Point(target_x, 50), Point(target_x + 40, 50))
        edge = PositionedEdge(source, target)
        edge = PositionedEdge(source, target, end_point=edge.end_coordinates(clearance))
        return DagLayout(
            layers={0: [InputNode("s", "S")], 1: [InputNode("t", "")]},
            nodes=[source, target],
            node_index={"s": source, "t": target},
            edges=[edge],
            canvas_width=target_x + 60,
            canvas_height=100,
            node_width=40,
            node_height=20,
            clearance=clearance,
        )

    return make
