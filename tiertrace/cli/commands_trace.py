"""CLI commands for trace operations."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from tiertrace.cli.validation import load_trace_file
from tiertrace.config import Settings
from tiertrace.trace.span import STATUS_SUCCESS, Span

console = Console(stderr=True)

_STATUS_STYLE = {
    "success": "[green]success[/green]",
    "failed": "[red]failed[/red]",
    "pending": "[yellow]pending[/yellow]",
}


def _label(span: Span) -> str:
    status = _STATUS_STYLE.get(span.status, span.status)
    elapsed = span.duration_ms
    duration = f" {elapsed:.1f}ms" if elapsed is not None else ""
    extras = []
    if span.artifacts:
        extras.append(f"{len(span.artifacts)} artifact(s)")
    if span.evidence:
        extras.append(f"{len(span.evidence)} evidence")
    suffix = f" [dim]({', '.join(extras)})[/dim]" if extras else ""
    return f"[bold]{span.tier}[/bold] {escape(span.name)} [dim]{span.span_id[:8]}[/dim] {status}{duration}{suffix}"


def _render(span: Span, node: Tree) -> None:
    for child in span.children:
        _render(child, node.add(_label(child)))


@click.group("trace")
def trace() -> None:
    """Trace-related commands."""


@trace.command("demo")
@click.option("--core-name", default=None, help="Core span name (defaults to the configured core_name).")
@click.option("--repo", "repo_name", default="LLM-Inference-Gateway", show_default=True,
              help="Repo span name.")
@click.option("--agent", "agent_name", default="inference-gateway:infer", show_default=True,
              help="Agent span name.")
@click.option("--omit-agent", is_flag=True, default=False,
              help="Leave the repo span without an agent child.")
@click.option("--out", "-o", "output", type=click.Path(dir_okay=False), default=None,
              help="Write the result JSON here instead of stdout.")
@click.pass_obj
def trace_demo(
    settings: Settings | None,
    core_name: str | None,
    repo_name: str,
    agent_name: str,
    omit_agent: bool,
    output: str | None,
) -> None:
    """Record a one-repo execution and emit its result."""
    from tiertrace.api import run_demo
    from tiertrace.trace.exporters import export_json

    settings = settings or Settings()
    result = run_demo(
        core_name=core_name or settings.core_name,
        repo_name=repo_name,
        agent_name=agent_name,
        include_agent=not omit_agent,
    )

    mark = "[green]✓[/green]" if result.status == STATUS_SUCCESS else "[red]✗[/red]"
    console.print(f"{mark} {escape(result.core_name)}: {result.status} "
                  f"({len(result.execution_graph.all_spans)} spans)")
    for reason in result.failure_reasons:
        console.print(f"  [red]-[/red] {escape(reason)}")

    if output:
        export_json(result, output)
        console.print(f"  Result written: {output}")
    else:
        click.echo(json.dumps(result.to_dict(), indent=2))

    if settings.strict and result.status != STATUS_SUCCESS:
        raise SystemExit(1)


@trace.command("show")
@click.argument("trace_file", type=click.Path(exists=True, dir_okay=False))
def trace_show(trace_file: str) -> None:
    """Render the span tree stored in TRACE_FILE."""
    result = load_trace_file(trace_file)
    root = result.execution_graph.root_span

    tree = Tree(_label(root))
    _render(root, tree)
    out = Console()
    out.print(tree)
    if result.failure_reasons:
        out.print(f"[red]{len(result.failure_reasons)} structural failure(s)[/red]")
