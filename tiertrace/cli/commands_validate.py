"""``tiertrace validate`` — re-check the structure of a serialised trace."""

from __future__ import annotations

import json
import logging

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tiertrace.cli.validation import load_trace_file
from tiertrace.config import Settings
from tiertrace.trace.span import STATUS_SUCCESS

logger = logging.getLogger("tiertrace.cli")


@click.command("validate")
@click.argument("trace_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table",
              help="Output format.")
@click.option("--core-name", default=None, help="Override the core name recorded in the file.")
@click.option("--strict/--no-strict", default=None,
              help="Exit with non-zero status if the execution is failed.")
@click.pass_obj
def validate(
    settings: Settings | None,
    trace_file: str,
    fmt: str,
    core_name: str | None,
    strict: bool | None,
) -> None:
    """Validate TRACE_FILE (a span tree, execution graph or execution result)."""
    settings = settings or Settings()
    strict = settings.strict if strict is None else strict
    result = load_trace_file(trace_file, core_name=core_name)
    graph = result.execution_graph
    logger.debug("validate file=%s status=%s failures=%d", trace_file, result.status, len(result.failure_reasons))

    if fmt == "json":
        click.echo(json.dumps({
            "core_name": result.core_name,
            "execution_id": result.execution_id,
            "status": result.status,
            "valid": graph.valid,
            "span_count": len(graph.all_spans),
            "failure_reasons": list(result.failure_reasons),
        }, indent=2))
    else:
        err_console = Console(stderr=True)
        table = Table(title=f"Trace Validation: {escape(result.core_name)}")
        table.add_column("Tier", style="cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Span", style="dim")
        table.add_column("Parent", style="dim")
        table.add_column("Status")

        for span in graph.all_spans:
            status_style = {
                "success": "[green]success[/green]",
                "failed": "[red]failed[/red]",
                "pending": "[yellow]pending[/yellow]",
            }.get(span.status, span.status)
            table.add_row(
                span.tier,
                escape(span.name),
                span.span_id[:8],
                (span.parent_span_id or "—")[:8],
                status_style,
            )

        err_console.print(table)
        if result.failure_reasons:
            err_console.print(f"\n[red]{len(result.failure_reasons)} structural failure(s):[/red]")
            for reason in result.failure_reasons:
                err_console.print(f"  - {escape(reason)}")
        else:
            err_console.print("\n[green]Trace structure is valid.[/green]")
        err_console.print(f"Execution status: {result.status}")

    if strict and result.status != STATUS_SUCCESS:
        raise SystemExit(1)
