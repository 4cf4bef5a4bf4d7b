"""CLI interface for zenreview using Typer"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from zenreview import __version__
from zenreview.core.config import (
    add_to_whitelist,
    config_exists,
    create_config,
    get_config_path,
    load_config_or_default,
    remove_from_whitelist,
    ConfigInvalidError,
)
from zenreview.core.issue_state import derive_current, new_review_state
from zenreview.core.report import EXPORT_FORMATS, export_report, export_text, export_word, save_export
from zenreview.core.sidecar import (
    SidecarError,
    check_source_changed,
    compute_file_hash,
    load_review,
)
from zenreview.core.stream_parser import MalformedResultError, enforce_whitelist, parse_final
from zenreview.models.config import ZenConfig
from zenreview.models.issue import ProofreadResult
from zenreview.presets import CHECK_MODES, get_mode_by_id

app = typer.Typer(
    name="zenreview",
    help="zenreview - stream, review and export Chinese proofreading results",
    no_args_is_help=True,
)
console = Console()

whitelist_app = typer.Typer(help="Manage whitelisted words")
app.add_typer(whitelist_app, name="whitelist")


def version_callback(value: bool):
    if value:
        console.print(f"zenreview version {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    version: bool = typer.Option(
        False, "--version", callback=version_callback, is_eager=True, help="Show version"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Show debug logging"),
):
    """zenreview - Chinese proofreading review in the terminal"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _load_config() -> ZenConfig:
    try:
        return load_config_or_default()
    except ConfigInvalidError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _read_document(document: Path) -> str:
    if not document.exists():
        console.print(f"[red]Error:[/red] File does not exist: {document}")
        raise typer.Exit(1)
    return document.read_text(encoding="utf-8")


def _load_result(result_file: Path, config: ZenConfig) -> ProofreadResult:
    """Recover a result from a saved raw model output"""
    if not result_file.exists():
        console.print(f"[red]Error:[/red] File does not exist: {result_file}")
        raise typer.Exit(1)
    try:
        result = parse_final(result_file.read_text(encoding="utf-8"))
    except MalformedResultError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    return enforce_whitelist(result, config.whitelist)


@app.command()
def init():
    """Create .zenreview/config.yaml configuration file"""
    if config_exists():
        if not typer.confirm("Config file already exists. Overwrite?"):
            raise typer.Exit(0)

    console.print("[bold]zenreview Configuration Setup[/bold]\n")

    mode = typer.prompt("Default check mode", default="fast")
    if get_mode_by_id(mode) is None:
        console.print(f"[red]Error:[/red] Unknown check mode: {mode}")
        raise typer.Exit(1)

    command = typer.prompt("Model command (reads the prompt on stdin)", default="claude --print")

    try:
        create_config(default_mode=mode, command=command.split())
    except ValueError as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[green]Created:[/green] {get_config_path()}")
    console.print("\nRun [bold]zenreview check FILE[/bold] to proofread a document.")


@app.command()
def modes():
    """List available check modes"""
    table = Table(title="Check Modes")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Description")

    for mode in CHECK_MODES:
        table.add_row(mode.id, mode.name, mode.description)

    console.print(table)


@whitelist_app.command("list")
def whitelist_list():
    """List whitelisted words"""
    config = _load_config()
    if not config.whitelist:
        console.print("[yellow]Whitelist is empty[/yellow]")
        return
    for word in config.whitelist:
        console.print(f"  - {word}")


@whitelist_app.command("add")
def whitelist_add(word: str = typer.Argument(..., help="Word to keep unchanged")):
    """Add a word to the whitelist"""
    try:
        config = add_to_whitelist(word)
    except ConfigInvalidError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Whitelist:[/green] {len(config.whitelist)} word(s)")


@whitelist_app.command("remove")
def whitelist_remove(word: str = typer.Argument(..., help="Word to remove")):
    """Remove a word from the whitelist"""
    try:
        removed = remove_from_whitelist(word)
    except ConfigInvalidError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if not removed:
        console.print(f"[yellow]Not in whitelist:[/yellow] {word}")
        raise typer.Exit(1)
    console.print(f"[green]Removed:[/green] {word}")


@app.command()
def check(
    document: Path = typer.Argument(..., help="Text file to proofread"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Check mode id"),
):
    """Proofread a document with live streaming output, then review it"""
    config = _load_config()
    _read_document(document)

    mode = mode or config.default_mode
    if get_mode_by_id(mode) is None:
        console.print(f"[red]Error:[/red] Unknown check mode: {mode}")
        raise typer.Exit(1)

    _run_app(document, config, mode=mode)


@app.command()
def review(
    document: Path = typer.Argument(..., help="The proofread text file"),
    result_file: Path = typer.Argument(..., help="Saved raw model output"),
):
    """Review a saved result; a saved sidecar resumes earlier decisions"""
    config = _load_config()
    original = _read_document(document)

    try:
        state = load_review(document)
    except SidecarError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if state is not None and check_source_changed(document, state):
        console.print("[yellow]Warning:[/yellow] Document changed since the review was saved; starting over")
        state = None

    if state is None:
        result = _load_result(result_file, config)
        state = new_review_state(
            original,
            result,
            source_file=str(document),
            source_hash=compute_file_hash(document),
        )
    else:
        resolved, total = state.get_review_progress()
        console.print(f"[dim]Resuming review: {resolved}/{total} resolved[/dim]")

    _run_app(document, config, state=state)


def _run_app(document: Path, config: ZenConfig, state=None, mode: Optional[str] = None):
    """Launch the TUI app"""
    from zenreview.tui.app import ZenReviewApp

    app_instance = ZenReviewApp(document, config, state=state, mode=mode)
    result = app_instance.run()

    if result:
        console.print(f"[green]{result}[/green]")


@app.command()
def parse(result_file: Path = typer.Argument(..., help="Raw model output, complete or truncated")):
    """Recover and print the structured record from raw model output"""
    result = _load_result(result_file, _load_config())

    console.print(f"[bold]Score:[/bold] {result.score:g}")
    console.print(f"[bold]Summary:[/bold] {escape(result.summary)}")

    table = Table(title=f"Issues ({len(result.issues)})")
    table.add_column("#", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Original", style="red")
    table.add_column("Suggestion", style="green")
    table.add_column("Reason")

    for issue in result.issues:
        table.add_row(
            str(issue.index + 1),
            issue.label,
            escape(issue.original),
            escape(issue.suggestion),
            escape(issue.reason),
        )

    console.print(table)


@app.command()
def report(
    document: Path = typer.Argument(..., help="The proofread text file"),
    result_file: Path = typer.Argument(..., help="Saved raw model output"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path"),
    fmt: str = typer.Option("md", "--format", "-f", help="md, txt or doc"),
):
    """Export the report or the corrected text.

    Uses the saved review decisions when a sidecar exists.
    """
    if fmt not in EXPORT_FORMATS:
        console.print(f"[red]Error:[/red] Unknown format: {fmt}")
        raise typer.Exit(1)

    config = _load_config()
    original = _read_document(document)

    try:
        state = load_review(document)
    except SidecarError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if state is not None and check_source_changed(document, state):
        console.print("[yellow]Warning:[/yellow] Document changed since the review was saved; ignoring it")
        state = None
    if state is None:
        state = new_review_state(original, _load_result(result_file, config), source_file=str(document))

    current = derive_current(state)
    if fmt == "md":
        content = export_report(current, state.issues, state.disposition, state.summary, state.score)
    elif fmt == "txt":
        content = export_text(current)
    else:
        content = export_word(current)

    path = save_export(content, document, fmt, output)
    console.print(f"[green]Written:[/green] {path}")


def main():
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    main()
