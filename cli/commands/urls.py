"""URL list commands: merge saved lists and inspect them."""

from __future__ import annotations

from pathlib import Path
from typing import List

import typer

from backend.scanner.url_list import dump_url_list, merge_url_lists, parse_url_list

urls_app = typer.Typer(help="Manage saved URL lists.", no_args_is_help=True)


@urls_app.command("merge")
def urls_merge(
    sources: List[Path] = typer.Argument(..., help="URL lists (.txt or .json) to merge, in order."),
    output: Path = typer.Option(..., "--output", help="Merged list destination."),
    fmt: str = typer.Option("json", "--format", help="Output format: json | text."),
) -> None:
    """Merge URL lists by canonical URL; later files win on conflicts."""
    merged = []
    for source in sources:
        if not source.exists():
            typer.echo(f"❌ {source} not found.")
            raise typer.Exit(code=1)
        parsed = parse_url_list(source.read_text(encoding="utf-8"))
        if not parsed:
            typer.echo(f"⚠️  No valid URLs found in {source}.")
        merged = merge_url_lists(merged, parsed)

    output.write_text(dump_url_list(merged, fmt=fmt), encoding="utf-8")
    typer.echo(f"✅ {len(merged)} URL(s) written to {output}")


@urls_app.command("show")
def urls_show(
    path: Path = typer.Argument(..., help="Saved URL list."),
) -> None:
    """List the URLs in a saved list with depth and status."""
    if not path.exists():
        typer.echo(f"❌ {path} not found.")
        raise typer.Exit(code=1)
    records = parse_url_list(path.read_text(encoding="utf-8"))
    if not records:
        typer.echo("No URLs found.")
        return
    for record in records:
        typer.echo(f" - [{record.status.value}] {record.url} (depth {record.depth})")
