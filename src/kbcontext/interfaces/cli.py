"""Command-line interface for the knowledge bank context assembler.

Commands:
- assemble: Build the context block for a snapshot and query
- rank: Show relevance scores of entries and documents for a query
- groups: Show how a snapshot splits into documents and standalone entries
- chunk: Split a text file into chunks (optionally writing entries)
- info: Show the effective configuration
"""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from kbcontext.config.loader import get_default_config_path, load_config
from kbcontext.config.schema import AppConfig, GenerationType
from kbcontext.core.chunking import chunk_document
from kbcontext.core.document_relevance import score_document_group
from kbcontext.core.grouping import get_display_title, group_entries_by_document
from kbcontext.core.relevance import score_entry, tokenize
from kbcontext.entities import KnowledgeBankEntry
from kbcontext.observability.logging import configure_from_config, get_logger
from kbcontext.pipelines.assembly import ContextAssembler
from kbcontext.service import SnapshotError, build_document_entries, dump_entries, load_entries

app = typer.Typer(
    name="kbcontext",
    help="Assemble size-bounded knowledge bank context for LLM prompts",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def _load_config(config_file: Optional[Path], profile: Optional[str] = None) -> AppConfig:
    """Load configuration and setup logging."""
    if config_file is None:
        config_file = get_default_config_path()

    try:
        config = load_config(config_file, profile=profile)
    except ValidationError as e:
        logger.error("config_error", path=str(config_file), error=str(e))
        err_console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    configure_from_config(config.logging)
    return config


def _load_snapshot(snapshot: Path) -> list[KnowledgeBankEntry]:
    try:
        return load_entries(snapshot)
    except SnapshotError as e:
        logger.error("snapshot_error", path=str(snapshot), error=str(e))
        err_console.print(f"[red]Error loading snapshot: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def assemble(
    snapshot: Path = typer.Argument(..., help="JSON snapshot of knowledge bank entries"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="User prompt used for ranking"),
    generation_type: Optional[GenerationType] = typer.Option(
        None, "--type", "-t", help="Generation type (single, chain, transform)"
    ),
    stats: bool = typer.Option(False, "--stats", help="Show budget and section statistics"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Config profile to apply"),
):
    """Print the knowledge bank context block for a snapshot."""
    config = _load_config(config_file, profile)
    entries = _load_snapshot(snapshot)

    assembler = ContextAssembler(config)
    context = assembler.assemble(entries, query=query, generation_type=generation_type)

    if context:
        console.print(context, markup=False, highlight=False, soft_wrap=True)
    else:
        err_console.print("[yellow]No knowledge bank context fits the budget[/yellow]")

    if stats:
        budget = assembler.budget_for(generation_type)
        table = Table(title="Assembly Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        table.add_row("Entries", str(len(entries)))
        table.add_row("Generation type", generation_type.value if generation_type else "default")
        table.add_row("Character budget", str(budget))
        table.add_row("Output characters", str(len(context)))
        table.add_row("Document groups", str(len(group_entries_by_document(entries).documents)))
        err_console.print(table)


@app.command()
def rank(
    snapshot: Path = typer.Argument(..., help="JSON snapshot of knowledge bank entries"),
    query: str = typer.Option(..., "--query", "-q", help="User prompt used for ranking"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Show relevance scores for standalone entries and document groups."""
    config = _load_config(config_file)
    entries = _load_snapshot(snapshot)
    assembler = ContextAssembler(config)

    keywords = tokenize(query, config.scoring.min_token_length)
    console.print(f"[cyan]Keywords:[/cyan] {', '.join(keywords) or '(none)'}\n")

    grouped = group_entries_by_document(assembler.order_entries(entries, query))

    entry_table = Table(title="Standalone Entries")
    entry_table.add_column("#", justify="right")
    entry_table.add_column("Title", style="cyan")
    entry_table.add_column("Pinned", justify="center")
    entry_table.add_column("Keyword score", style="green", justify="right")
    for position, entry in enumerate(grouped.standalone, start=1):
        entry_table.add_row(
            str(position),
            entry.title,
            "yes" if entry.pinned else "",
            f"{score_entry(entry, keywords, config.scoring):.2f}",
        )
    console.print(entry_table)

    if grouped.documents:
        doc_table = Table(title="Documents")
        doc_table.add_column("#", justify="right")
        doc_table.add_column("Document", style="cyan")
        doc_table.add_column("Parts", justify="right")
        doc_table.add_column("Score", style="green", justify="right")
        for position, group in enumerate(assembler.order_documents(grouped.documents, query), start=1):
            score = score_document_group(group, keywords, config.document_scoring, config.scoring)
            doc_table.add_row(
                str(position), get_display_title(group.parent), str(group.total_parts), f"{score:.2f}"
            )
        console.print(doc_table)


@app.command()
def groups(
    snapshot: Path = typer.Argument(..., help="JSON snapshot of knowledge bank entries"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Show documents and standalone entries in a snapshot."""
    _load_config(config_file)
    entries = _load_snapshot(snapshot)
    grouped = group_entries_by_document(entries)

    table = Table(title=f"Knowledge Bank ({len(entries)} entries)")
    table.add_column("Kind", style="magenta")
    table.add_column("Title", style="cyan")
    table.add_column("Parts", justify="right")
    table.add_column("Summary", justify="center")

    for group in grouped.documents:
        table.add_row(
            "Document group",
            get_display_title(group.parent),
            str(group.total_parts),
            group.parent.document_summary_status.value
            if group.parent.document_summary_status
            else ("yes" if group.parent.effective_summary else ""),
        )
    for entry in grouped.standalone:
        kind = entry.kind_label + (" (orphan chunk)" if entry.is_chunk else "")
        table.add_row(kind, entry.title, "1", "yes" if entry.effective_summary else "")

    console.print(table)


@app.command()
def chunk(
    file: Path = typer.Argument(..., help="Text file to chunk"),
    title: Optional[str] = typer.Option(None, "--title", help="Document title (defaults to file name)"),
    workspace: str = typer.Option("default", "--workspace", "-w", help="Workspace id for written entries"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write parent/child entries as a snapshot"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Split a text file into chunks the way ingestion does."""
    config = _load_config(config_file)

    try:
        content = file.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        err_console.print(f"[yellow]Skipping non-text file: {file}[/yellow]")
        raise typer.Exit(1)
    except OSError as e:
        logger.error("chunk_error", file=str(file), error=str(e))
        err_console.print(f"[red]Error reading file: {e}[/red]")
        raise typer.Exit(1)

    if not content.strip():
        err_console.print("[yellow]Document is empty, no chunks created[/yellow]")
        raise typer.Exit(1)

    doc_title = title or file.stem
    chunks = chunk_document(content, doc_title, config.chunking)

    if not chunks:
        console.print(
            f"[green]{len(content)} characters fit in a single entry "
            f"(threshold {config.chunking.threshold})[/green]"
        )
    else:
        table = Table(title=f"Chunks for '{doc_title}'")
        table.add_column("#", justify="right")
        table.add_column("Title", style="cyan")
        table.add_column("Chars", justify="right", style="green")
        table.add_column("Range", justify="right")
        for c in chunks:
            table.add_row(str(c.index), c.title, str(len(c.content)), f"{c.start_char}-{c.end_char}")
        console.print(table)

    if output is not None:
        entries = build_document_entries(
            content, doc_title, workspace, original_file_name=file.name, config=config.chunking
        )
        dump_entries(entries, output)
        logger.info("document_entries_written", path=str(output), entry_count=len(entries))
        console.print(f"[green]Wrote {len(entries)} entries to {output}[/green]")


@app.command()
def info(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Config profile to apply"),
):
    """Show the effective configuration."""
    config = _load_config(config_file, profile)

    table = Table(title="Knowledge Bank Context Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Log Level", config.logging.level.value)
    table.add_row("Default Token Budget", str(config.budget.default_tokens))
    for generation_type in GenerationType:
        table.add_row(
            f"Token Budget ({generation_type.value})",
            str(config.budget.token_budgets[generation_type]),
        )
    table.add_row("Chars per Token", str(config.budget.chars_per_token))
    table.add_row("Chunk Threshold", str(config.chunking.threshold))
    table.add_row("TF-IDF Boost", str(config.scoring.use_tfidf))
    table.add_row(
        "Level Tiers",
        ", ".join(
            f"{t.name}(<={t.max_documents})" if t.max_documents is not None else t.name
            for t in config.levels.tiers
        ),
    )

    console.print(table)


if __name__ == "__main__":
    app()
