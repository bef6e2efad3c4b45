"""
Tests for Mermaid rendering of traversal results.
"""

from pathlib import Path

from ng_explorer.analyzer.dependency_extractor import ClassRef
from ng_explorer.graph.models import (
    DirectSummary,
    GraphEdge,
    GraphNode,
    RecursiveAnalysisResult,
)
from ng_explorer.visualizer import MermaidVisualizer


def sample_result() -> RecursiveAnalysisResult:
    shell = GraphNode(
        kind="component",
        file="/app/shell.component.ts",
        class_name="ShellComponent",
        selector="app-shell",
        direct=DirectSummary(all_methods_used=["ping"]),
    )
    card = GraphNode(
        kind="component",
        file="/app/user-card.component.ts",
        class_name="UserCardComponent",
        depth=1,
        reason="template-tag",
        selector="app-user-card",
        direct=DirectSummary(),
    )
    service = GraphNode(
        kind="service",
        file="/app/session.service.ts",
        class_name="SessionService",
        depth=1,
        reason="injects",
        service_heuristics=["decorator"],
    )
    return RecursiveAnalysisResult(
        nodes=[shell, card, service],
        edges=[
            GraphEdge(shell.ref, card.ref, "template-tag"),
            GraphEdge(shell.ref, service.ref, "injects"),
            GraphEdge(service.ref, ClassRef("/app/dropped.service.ts", "Dropped"), "injects"),
        ],
        all_methods_used=["ping"],
    )


class TestMermaidVisualizer:
    def test_generate_graph(self):
        mermaid = MermaidVisualizer(sample_result()).generate_graph()
        lines = mermaid.splitlines()

        assert lines[0] == "graph TB"
        assert '    shell_component_ShellComponent["ShellComponent<br/><small>&lt;app-shell&gt;</small><br/><small>ping</small>"]' in lines
        assert '    session_service_SessionService(["SessionService<br/><small>session.service.ts</small>"])' in lines
        assert "    shell_component_ShellComponent -->|template-tag| user_card_component_UserCardComponent" in lines
        assert "    shell_component_ShellComponent -->|injects| session_service_SessionService" in lines
        assert "Dropped" not in mermaid

        assert "    class user_card_component_UserCardComponent component" in lines
        assert "    class session_service_SessionService service" in lines
        assert "    class shell_component_ShellComponent root" in lines

    def test_methods_can_be_hidden(self):
        mermaid = MermaidVisualizer(sample_result()).generate_graph(show_methods=False)
        assert "ping" not in mermaid

    def test_save_to_file(self, temp_dir: Path):
        visualizer = MermaidVisualizer(sample_result())
        output = temp_dir / "graph.md"
        visualizer.save_to_file(visualizer.generate_graph(), output)

        content = output.read_text(encoding="utf-8")
        assert content.startswith("# Component Graph")
        assert "```mermaid\ngraph TB" in content

    def test_same_stem_and_class_get_distinct_ids(self):
        first = GraphNode(kind="service", file="/app/a/index.ts", class_name="Foo", reason="root")
        second = GraphNode(kind="service", file="/app/b/index.ts", class_name="Foo", depth=1, reason="injects")
        result = RecursiveAnalysisResult(
            nodes=[first, second],
            edges=[GraphEdge(first.ref, second.ref, "injects")],
        )
        lines = MermaidVisualizer(result).generate_graph().splitlines()

        assert '    index_Foo(["Foo<br/><small>index.ts</small>"])' in lines
        assert '    index_Foo_1(["Foo<br/><small>index.ts</small>"])' in lines
        assert "    index_Foo -->|injects| index_Foo_1" in lines
        assert "    class index_Foo_1 service" in lines
        assert "    class index_Foo root" in lines

    def test_make_node_id(self):
        visualizer = MermaidVisualizer(RecursiveAnalysisResult())
        assert visualizer._make_node_id("/a/b/my-list.component.ts", "MyList") == "my_list_component_MyList"
