#!/usr/bin/env python3
"""
Command-line interface for NG Explorer.

Provides commands for analyzing Angular components, tracing the components
and services reachable from them, and indexing a whole project.
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich import markup
from rich.console import Console

from .console_styles import (
    StyleGuide,
    create_data_table,
    create_header_panel,
    create_summary_table,
    format_count,
    format_list,
)

console = Console()


def split_modules(values: Tuple[str, ...]) -> List[str]:
    """Flatten repeated and comma-separated module options."""
    modules: List[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part and part not in modules:
                modules.append(part)
    return modules


def parse_root(value: str) -> Tuple[str, str]:
    """Parse a ``path:ClassName`` root argument.

    Raises:
        click.BadParameter: If the value has no class name
    """
    path, sep, class_name = value.rpartition(":")
    if not sep or not path or not class_name:
        raise click.BadParameter(f"Invalid root {value!r}, expected <file>:<ClassName>")
    return path, class_name


def write_json(data: dict, out: Optional[str]) -> None:
    text = json.dumps(data, indent=2)
    if out:
        Path(out).write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote JSON to [cyan]{out}[/cyan]")
    else:
        click.echo(text)


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """NG Explorer - Angular component reachability analysis.

    Find the components and services reachable from a component, and the
    service methods each component actually calls.

    Examples:
        ng-explorer analyze src/app/user-list.component.ts -m @app/api
        ng-explorer graph --root src/app/shell.component.ts:ShellComponent --target-mods @app/api
        ng-explorer class-index src/app --catalog services.json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("-c", "--class-name", default=None, help="Component class (default: the only @Component in the file)")
@click.option(
    "-m",
    "--module",
    "modules",
    multiple=True,
    help="Target module specifier(s), comma-separated or repeated",
)
@click.option("--json", "as_json", is_flag=True, help="Emit the analysis as JSON")
def analyze(file: str, class_name: Optional[str], modules: Tuple[str, ...], as_json: bool) -> None:
    """Analyze a single component.

    Reports its template and, for target modules, the injected instances
    and the methods called on them.

    FILE: Component source file

    Examples:
        ng-explorer analyze src/app/user-list.component.ts
        ng-explorer analyze src/app/user-list.component.ts -m @app/api,@app/store
    """
    from .analyzer import ComponentAnalyzer, SourceProject

    project = SourceProject()
    unit = project.load(file)
    if unit is None:
        console.print(f"[red]Error:[/red] Cannot read {file}")
        sys.exit(1)

    if class_name is None:
        candidates = [cls.name for cls in unit.classes if cls.is_component]
        if len(candidates) != 1:
            hint = (
                f"Found multiple component classes: {', '.join(candidates)}"
                if candidates
                else "Found no component classes (@Component) in the file."
            )
            console.print(f"[red]Error:[/red] Cannot determine a single component class. {hint}")
            sys.exit(1)
        class_name = candidates[0]

    target_modules = split_modules(modules)
    analysis = ComponentAnalyzer(project).analyze(file, class_name, target_modules)
    if analysis is None:
        console.print(f"[red]Error:[/red] No @Component class {class_name} in {file}")
        sys.exit(1)

    if as_json:
        write_json(analysis.to_dict(), None)
        return

    console.print(create_header_panel(analysis.class_name, analysis.file_path))
    if analysis.selector:
        console.print(f"[{StyleGuide.label}]Selector:[/{StyleGuide.label}] {analysis.selector}")
    if analysis.template.template_file_path:
        console.print(f"[{StyleGuide.label}]Template file:[/{StyleGuide.label}] {analysis.template.template_file_path}")
    elif analysis.template.inline_template is not None:
        preview = analysis.template.inline_template
        if len(preview) > 200:
            preview = preview[:200] + " ..."
        console.print(f"[{StyleGuide.label}]Inline template:[/{StyleGuide.label}]")
        console.print(markup.escape(preview))
    else:
        console.print(f"[{StyleGuide.dim}]Template: (not found)[/{StyleGuide.dim}]")

    if not target_modules:
        return

    console.print(f"[{StyleGuide.label}]Target modules:[/{StyleGuide.label}] {', '.join(target_modules)}")
    console.print(f"[{StyleGuide.label}]Matched specifiers:[/{StyleGuide.label}] {format_list(analysis.matched_module_specifiers)}")
    console.print(f"[{StyleGuide.label}]Imports from targets:[/{StyleGuide.label}] {format_list(analysis.imports_from_target_modules)}")

    if analysis.instances:
        table = create_data_table(
            "Instances from target modules",
            [("Property", "left", "cyan"), ("Type", "left", "yellow"), ("Methods used", "left", "green")],
        )
        for instance in analysis.instances:
            table.add_row(instance.property_name, instance.type_name, format_list(instance.methods_used))
        console.print(table)
    console.print(f"[{StyleGuide.label}]All methods used:[/{StyleGuide.label}] {format_list(analysis.all_methods_used)}")


@cli.command()
@click.option("--root", "roots", multiple=True, required=True, help="Root component as <file>:<ClassName> (repeatable)")
@click.option("--target-mods", "modules", multiple=True, help="Target module specifiers, comma-separated")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Limit traversal depth (default: unbounded)")
@click.option("--max-nodes", type=click.IntRange(min=1), default=500, show_default=True, help="Limit total nodes")
@click.option("--audit", is_flag=True, help="Report type references that do not resolve to project classes")
@click.option("--json", "as_json", is_flag=True, help="Emit the full graph as JSON")
@click.option("--out", type=click.Path(dir_okay=False), default=None, help="Write JSON output to a file")
@click.option("--mermaid", type=click.Path(dir_okay=False), default=None, help="Write a Mermaid diagram to a markdown file")
def graph(
    roots: Tuple[str, ...],
    modules: Tuple[str, ...],
    max_depth: Optional[int],
    max_nodes: int,
    audit: bool,
    as_json: bool,
    out: Optional[str],
    mermaid: Optional[str],
) -> None:
    """Trace the components and services reachable from root components.

    Follows custom element tags in templates and injected constructor or
    field types, breadth-first.

    Examples:
        ng-explorer graph --root src/app/shell.component.ts:ShellComponent
        ng-explorer graph --root a.component.ts:A --root b.component.ts:B --target-mods @app/api --json
        ng-explorer graph --root src/app/shell.component.ts:ShellComponent --mermaid graph.md
    """
    from .graph import AnalysisRoot, RecursiveAnalysisRequest, RecursiveGraphAnalyzer
    from .visualizer import MermaidVisualizer

    try:
        request = RecursiveAnalysisRequest(
            roots=[AnalysisRoot(*parse_root(value)) for value in roots],
            target_modules=split_modules(modules),
            max_depth=max_depth,
            max_nodes=max_nodes,
            audit_unresolved=audit,
        )
    except click.BadParameter as e:
        console.print(f"[red]Error:[/red] {markup.escape(str(e))}")
        sys.exit(1)

    try:
        result = RecursiveGraphAnalyzer().analyze(request)
    except Exception as e:
        console.print(f"[red]Error during analysis:[/red] {markup.escape(str(e))}")
        sys.exit(1)

    if mermaid:
        visualizer = MermaidVisualizer(result)
        visualizer.save_to_file(visualizer.generate_graph(), Path(mermaid))
        console.print(f"[green]✓[/green] Wrote Mermaid diagram to [cyan]{mermaid}[/cyan]")

    if as_json or out:
        write_json(result.to_dict(), out)
        if not out:
            return

    summary = create_summary_table("Graph Summary")
    summary.add_row("Components", format_count(sum(1 for n in result.nodes if n.is_component)))
    summary.add_row("Services", format_count(sum(1 for n in result.nodes if not n.is_component)))
    summary.add_row("Edges", format_count(len(result.edges)))
    summary.add_row("Diagnostics", format_count(len(result.diagnostics)))
    console.print(summary)

    table = create_data_table(
        "Nodes",
        [("Kind", "left", "magenta"), ("Class", "left", "cyan"), ("Depth", "right", "yellow"), ("Methods / heuristics", "left", "green")],
    )
    for node in result.nodes:
        if node.is_component:
            detail = format_list(node.direct.all_methods_used if node.direct else [])
        else:
            detail = ", ".join(node.service_heuristics)
        table.add_row(node.kind, node.class_name, str(node.depth), detail)
    console.print(table)

    console.print(f"[{StyleGuide.label}]All methods used:[/{StyleGuide.label}] {format_list(result.all_methods_used)}")
    for diagnostic in result.diagnostics:
        console.print(f"{StyleGuide.warning_icon} {markup.escape(diagnostic)}")
    if result.truncated:
        console.print(f"[{StyleGuide.warning}]Traversal truncated at {result.max_nodes} nodes[/{StyleGuide.warning}]")


@cli.command("class-index")
@click.argument("root", type=click.Path(exists=True, file_okay=False, dir_okay=True))
@click.option("--catalog", type=click.Path(exists=True, dir_okay=False), default=None, help="Service catalog JSON file")
@click.option("--service-glob", "service_globs", multiple=True, help="Build the service catalog from files matching a glob under ROOT (repeatable)")
@click.option("--no-templates", is_flag=True, help="Do not record component templates")
@click.option("--out", type=click.Path(dir_okay=False), default=None, help="Write JSON output to a file")
def class_index(
    root: str,
    catalog: Optional[str],
    service_globs: Tuple[str, ...],
    no_templates: bool,
    out: Optional[str],
) -> None:
    """Index every class under ROOT with its injections and service calls.

    Type references that do not resolve to a project class are reported as
    unresolved-import diagnostics.

    ROOT: Project directory

    Examples:
        ng-explorer class-index src/app --catalog services.json
        ng-explorer class-index src/app --service-glob "api/**/*.service.ts" --out index.json
    """
    from .class_index import build_class_index, build_service_catalog, load_service_catalog

    try:
        if catalog:
            service_catalog = load_service_catalog(catalog)
        elif service_globs:
            service_catalog = build_service_catalog(root, service_globs)
        else:
            service_catalog = None
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[red]Error:[/red] Invalid service catalog: {markup.escape(str(e))}")
        sys.exit(1)

    result = build_class_index(root, service_catalog, capture_templates=not no_templates)
    write_json(result.to_dict(), out)
