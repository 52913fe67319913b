"""
Debug tracing infrastructure for daglayer.

When debug mode is enabled, the generator records a snapshot of the data
produced by each pipeline stage so that a surprising picture can be traced
back to the stage that caused it.

Usage:
    >>> generator = DagLayoutGenerator()
    >>> layout = generator.layout(nodes, edges, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")

The trace captures these stages, in order:
- index: node and edge counts, successor lists
- layers: layer index -> node ids
- positions: node id -> incoming/outgoing anchors
- edges: edge id -> start and trimmed end point
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of a layout computation.

    Attributes:
        stages: List of pipeline stages with their data
        node_count: Number of input nodes
        edge_count: Number of input edges
    """

    stages: List[PipelineStage] = field(default_factory=list)
    node_count: int = 0
    edge_count: int = 0

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "layers")
            data: Dictionary of relevant data at this stage
        """
        self.stages.append(PipelineStage(name, data.copy()))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def summary(self) -> str:
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Nodes: {self.node_count}",
            f"Edges: {self.edge_count}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  - {stage.name} ({len(stage.data)} entries)")
        return "\n".join(lines)

    def dump(self) -> str:
        """Complete human-readable dump of every stage."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
