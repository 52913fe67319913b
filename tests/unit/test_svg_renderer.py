"""Tests for the SVG renderer module."""

import xml.etree.ElementTree as ET

from daglayer import DagLayoutGenerator, InputEdge, InputNode
from daglayer.svg_renderer import SVGRenderer

SVG_NS = "{http://www.w3.org/2000/svg}"


def _parse(svg):
    return ET.fromstring(svg)


class TestSVGRenderer:
    """Tests for SVGRenderer class."""

    def test_document_size(self, fan_out_layout):
        root = _parse(SVGRenderer().render(fan_out_layout))
        assert root.tag == f"{SVG_NS}svg"
        assert root.get("width") == "500"
        assert root.get("height") == "500"

    def test_one_rect_and_label_per_node(self, fan_out_layout):
        root = _parse(SVGRenderer().render(fan_out_layout))
        rects = root.findall(f".//{SVG_NS}rect")
        texts = root.findall(f".//{SVG_NS}text")
        assert len(rects) == 3
        assert [t.text for t in texts] == ["ten", "twenty", "thirty"]

    def test_rect_position(self, fan_out_layout):
        root = _parse(SVGRenderer().render(fan_out_layout))
        rect = root.findall(f".//{SVG_NS}rect")[0]
        assert float(rect.get("x")) == 166.67
        assert float(rect.get("y")) == 240
        assert rect.get("width") == "40"
        assert rect.get("height") == "20"

    def test_lines_end_at_trimmed_points(self, fan_out_layout):
        root = _parse(SVGRenderer().render(fan_out_layout))
        lines = root.findall(f".//{SVG_NS}line")
        assert [line.get("id") for line in lines] == ["edge_10_20", "edge_10_30"]
        for line, edge in zip(lines, fan_out_layout.edges):
            assert abs(float(line.get("x2")) - edge.end_point.x) < 0.01
            assert abs(float(line.get("y2")) - edge.end_point.y) < 0.01
            assert line.get("marker-end") == f"url(#marker_{edge.edge_id})"

    def test_markers(self, fan_out_layout):
        root = _parse(SVGRenderer().render(fan_out_layout))
        markers = root.findall(f".//{SVG_NS}marker")
        assert [m.get("id") for m in markers] == ["marker_edge_10_20", "marker_edge_10_30"]
        assert markers[0].get("orient") == "auto"

    def test_parallel_edges_share_marker(self):
        layout = DagLayoutGenerator().layout(
            [InputNode("A", "A"), InputNode("B", "B")],
            [InputEdge("A", "B"), InputEdge("A", "B")],
        )
        root = _parse(SVGRenderer().render(layout))
        assert len(root.findall(f".//{SVG_NS}marker")) == 1
        assert len(root.findall(f".//{SVG_NS}line")) == 2

    def test_selected_nodes_highlighted(self, fan_out_layout):
        root = _parse(SVGRenderer().render(fan_out_layout, selected={"20"}))
        groups = {g.get("data-node-id"): g for g in root.findall(f"{SVG_NS}g")}
        assert groups["20"].get("data-selected") == "true"
        assert groups["10"].get("data-selected") == "false"
        assert groups["20"].find(f"{SVG_NS}rect").get("fill") == "orange"
        assert groups["10"].find(f"{SVG_NS}rect").get("fill") == "blue"

    def test_scaled_font(self, generator, fan_out_layout):
        fan_out_layout.get_node("10").scale = 2
        root = _parse(SVGRenderer().render(fan_out_layout))
        assert root.findall(f".//{SVG_NS}text")[0].get("font-size") == "26px"

    def test_labels_escaped(self):
        layout = DagLayoutGenerator().layout([InputNode("x", "<a & b>")], [])
        svg = SVGRenderer().render(layout)
        assert "&lt;a &amp; b&gt;" in svg
        assert _parse(svg).find(f".//{SVG_NS}text").text == "<a & b>"

    def test_save(self, fan_out_layout, tmp_path):
        path = tmp_path / "dag.svg"
        result = SVGRenderer().save(fan_out_layout, str(path))
        assert result == str(path)
        assert path.read_text(encoding="utf-8").startswith("<svg")

    def test_no_marker_end_when_nodes_too_close(self, two_node_layout):
        root = _parse(SVGRenderer().render(two_node_layout(2)))
        line = root.find(f".//{SVG_NS}line")
        assert line.get("marker-end") is None
        assert float(line.get("x2")) == 52

    def test_marker_end_when_gap_left(self, two_node_layout):
        root = _parse(SVGRenderer().render(two_node_layout(30)))
        line = root.find(f".//{SVG_NS}line")
        assert line.get("marker-end") == "url(#marker_edge_s_t)"
        assert float(line.get("x2")) == 77
