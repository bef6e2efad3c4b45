"""
Mermaid diagram generation for component graphs.

This module renders the result of a recursive analysis as a Mermaid flowchart:
components and services as nodes, discovery relations as labelled edges.
"""

from pathlib import Path
from typing import Dict, List, Tuple

from .graph.models import REASON_ROOT, GraphNode, RecursiveAnalysisResult


class MermaidVisualizer:
    """Generate Mermaid diagrams from recursive analysis results.

    Creates visual representations of component/service reachability
    using Mermaid syntax for rendering in documentation or tools.
    """

    def __init__(self, result: RecursiveAnalysisResult):
        """Initialize visualizer.

        Args:
            result: Traversal result to visualize
        """
        self.result = result

    def generate_graph(self, show_methods: bool = True) -> str:
        """Generate a Mermaid diagram of the whole traversal.

        Args:
            show_methods: Include the methods each component uses in its label

        Returns:
            Mermaid markdown string ready for rendering

        Example:
            ```mermaid
            graph TB
                root_cmp_RootComponent["RootComponent"] -->|template-tag| child_cmp_ChildComponent["ChildComponent"]
                classDef component fill:#9cf
            ```
        """
        lines = ["graph TB"]
        ids = self._assign_node_ids()

        for node in self.result.nodes:
            node_id = ids[(node.file, node.class_name)]
            label = self._make_node_label(node, show_methods)
            if node.is_component:
                lines.append(f'    {node_id}["{label}"]')
            else:
                lines.append(f'    {node_id}(["{label}"])')

        for edge in self.result.edges:
            src_id = ids.get((edge.source.file, edge.source.class_name))
            dst_id = ids.get((edge.target.file, edge.target.class_name))
            # Targets cut off by the ceilings have no node
            if src_id is None or dst_id is None:
                continue
            lines.append(f"    {src_id} -->|{edge.reason}| {dst_id}")

        lines.append("")
        lines.append("    classDef component fill:#9cf,stroke:#333,stroke-width:2px")
        lines.append("    classDef service fill:#f96,stroke:#333,stroke-width:1px")
        lines.append("    classDef root fill:#ff9,stroke:#333,stroke-width:3px")

        components = self._ids_where(ids, lambda n: n.is_component and n.reason != REASON_ROOT)
        services = self._ids_where(ids, lambda n: not n.is_component and n.reason != REASON_ROOT)
        roots = self._ids_where(ids, lambda n: n.reason == REASON_ROOT)
        if components:
            lines.append(f"    class {','.join(components)} component")
        if services:
            lines.append(f"    class {','.join(services)} service")
        if roots:
            lines.append(f"    class {','.join(roots)} root")

        return "\n".join(lines)

    def save_to_file(self, mermaid_code: str, output_path: Path) -> None:
        """Save Mermaid diagram to a markdown file.

        Args:
            mermaid_code: Mermaid diagram code
            output_path: Path where to save the .md file
        """
        content = f"""# Component Graph

```mermaid
{mermaid_code}
```
"""
        output_path.write_text(content, encoding="utf-8")

    def _ids_where(self, ids: Dict[Tuple[str, str], str], predicate) -> List[str]:
        return [ids[(n.file, n.class_name)] for n in self.result.nodes if predicate(n)]

    def _assign_node_ids(self) -> Dict[Tuple[str, str], str]:
        """Map each node identity to a distinct Mermaid ID.

        Identities whose readable ID is already taken get their node index
        appended, e.g. two ``index.ts#Foo`` classes in different folders.
        """
        ids: Dict[Tuple[str, str], str] = {}
        taken = set()
        for index, node in enumerate(self.result.nodes):
            node_id = self._make_node_id(node.file, node.class_name)
            while node_id in taken:
                node_id = f"{node_id}_{index}"
            taken.add(node_id)
            ids[(node.file, node.class_name)] = node_id
        return ids

    def _make_node_id(self, file: str, class_name: str) -> str:
        """Create a valid Mermaid node ID from file and class.

        Args:
            file: File path
            class_name: Class name

        Returns:
            Valid node ID for Mermaid
        """
        filename = Path(file).stem
        node_id = f"{filename}_{class_name}".replace("-", "_").replace(".", "_")
        return "".join(c if c.isalnum() or c == "_" else "_" for c in node_id)

    def _make_node_label(self, node: GraphNode, show_methods: bool) -> str:
        """Create a human-readable label for a node.

        Args:
            node: Graph node
            show_methods: Append the methods the component uses

        Returns:
            Display label for the node
        """
        label = node.class_name
        if node.selector:
            label += f"<br/><small>&lt;{node.selector}&gt;</small>"
        else:
            label += f"<br/><small>{Path(node.file).name}</small>"
        if show_methods and node.direct is not None and node.direct.all_methods_used:
            label += f"<br/><small>{', '.join(node.direct.all_methods_used)}</small>"
        return label
