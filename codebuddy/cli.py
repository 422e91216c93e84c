"""
Code Buddy command line.

    codebuddy check hello.py        show diagnostics with explanations
    codebuddy fix hello.c --write   apply the suggested fix for the first problem
    codebuddy explain "NameError: name 'x' is not defined" -l python
    codebuddy serve                 start the API server
"""
import json
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .checker import check_code
from .config import get_files_dir, get_port, print_config, setup_logging
from .edits import apply_edit
from .knowledge_base import explain as explain_message
from .languages import LANGUAGES, language_for_path, normalize_language
from .storage import FileStorage

app = typer.Typer(help="Kid-friendly code checking and the Code Buddy server.", no_args_is_help=True)
console = Console()


def _resolve_language(path: Path, language: Optional[str]) -> str:
    resolved = normalize_language(language) if language else language_for_path(path)
    if not resolved:
        console.print(f"[red]Can't tell the language of {path.name}. Use --language ({', '.join(LANGUAGES)}).[/red]")
        raise typer.Exit(code=2)
    return resolved


def _read(path: Path) -> str:
    if not path.is_file():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(code=2)
    return path.read_text(encoding="utf-8")


@app.command()
def check(
    path: Path = typer.Argument(..., help="Source file to check"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language id (default: from extension)"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Show problems in a file with kid-friendly explanations."""
    lang = _resolve_language(path, language)
    report = check_code(_read(path), lang)

    if as_json:
        console.print_json(json.dumps(report.to_dict()))
    elif not report.diagnostics:
        console.print(f"[green]✓ No problems found in {path.name}[/green]")
    else:
        table = Table(title=f"{path.name} ({lang})")
        table.add_column("Line", justify="right")
        table.add_column("Col", justify="right")
        table.add_column("Problem", style="red")
        table.add_column("What it means")
        table.add_column("Try this", style="cyan")
        for diagnostic, explanation in zip(report.diagnostics, report.explanations):
            table.add_row(
                str(diagnostic.start_line),
                str(diagnostic.start_column),
                diagnostic.message,
                explanation.explanation,
                explanation.suggestion,
            )
        console.print(table)
        if report.fix:
            console.print(f"[yellow]Suggested fix:[/yellow] {report.fix.to_dict()}")

    if report.has_errors:
        raise typer.Exit(code=1)


@app.command()
def fix(
    path: Path = typer.Argument(..., help="Source file to fix"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language id (default: from extension)"),
    write: bool = typer.Option(False, "--write", "-w", help="Write the fixed code back to the file"),
):
    """Apply the suggested fix for the first problem in a file."""
    lang = _resolve_language(path, language)
    text = _read(path)
    report = check_code(text, lang)

    if not report.diagnostics:
        console.print(f"[green]✓ No problems found in {path.name}[/green]")
        return
    if report.fix is None:
        first = report.diagnostics[0]
        console.print(f"[yellow]No automatic fix for line {first.start_line}: {first.message}[/yellow]")
        raise typer.Exit(code=1)

    fixed = apply_edit(text, report.fix)
    if fixed is None:
        console.print("[red]The suggested fix no longer applies to this file.[/red]")
        raise typer.Exit(code=1)

    if write:
        path.write_text(fixed, encoding="utf-8")
        console.print(f"[green]✓ Fixed line {report.diagnostics[0].start_line} of {path.name}[/green]")
    else:
        console.print(fixed, markup=False, highlight=False)


@app.command()
def explain(
    message: str = typer.Argument(..., help="Error message from a compiler or interpreter"),
    language: str = typer.Option(..., "--language", "-l", help="Language id"),
):
    """Explain an error message in kid-friendly words."""
    result = explain_message(message, language)
    console.print(f"[bold]{result.explanation}[/bold]")
    console.print(f"[cyan]{result.suggestion}[/cyan]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, help="Port (default: $PORT or 5002)"),
    open_browser: bool = typer.Option(False, "--open-browser", help="Open the API in a browser"),
):
    """Start the Code Buddy API server."""
    from .server import create_app

    setup_logging()
    port = port or get_port()
    url = f"http://localhost:{port}"

    def open_browser_delayed():
        time.sleep(2)
        console.print(f"[*] Opening browser at {url}")
        webbrowser.open(url)

    if open_browser:
        threading.Thread(target=open_browser_delayed, daemon=True).start()

    console.print(f"[bold]🚀 Starting server at {url}[/bold] (Ctrl+C to stop)")
    create_app().run(host=host, port=port, debug=False, use_reloader=False)


@app.command()
def config():
    """Show the current configuration."""
    print_config(console)


@app.command()
def clean(
    files_dir: Optional[Path] = typer.Option(None, help="Directory of saved files (default: $FILES_DIR)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
):
    """Delete all saved user files."""
    target = files_dir or Path(get_files_dir())
    if not target.exists():
        console.print("✓ Files directory doesn't exist - nothing to clean")
        return
    if not yes:
        typer.confirm(f"Delete every file in {target}?", abort=True)
    count = FileStorage(target).clear()
    console.print(f"✓ Cleaned {count} file(s) from {target}/")


def main():
    app()


if __name__ == "__main__":
    main()
