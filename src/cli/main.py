"""
Typer CLI for Animal Academy.

Commands:
    academy generate TOPIC        - Generate a lesson and print it
    academy generate TOPIC --document notes.txt --grounding supplementary
    academy generate TOPIC --output-json lesson.json --output-md lesson.md
    academy config                - Show active configuration
    academy version               - Show version information

Usage:
    academy --help
    academy generate "Photosynthesis"
    academy generate "Fotosíntesis" --language secondary
"""

from __future__ import annotations

import os
import sys

# Fix Windows encoding issues for Unicode characters (accents, box drawing)
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    if hasattr(sys.stderr, "reconfigure"):
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from pathlib import Path

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from config import get_settings
from src.content import DocumentReadError, read_source_document
from src.core.errors import LessonGenerationError
from src.core.logging_setup import configure_logging
from src.core.models import GroundingMode, Lesson, LessonLanguage, LessonRequest, MindMapNode
from src.export import write_lesson_json, write_lesson_markdown
from src.generation import generate_lesson_sync

app = typer.Typer(
    help="Animal Academy: illustrated lessons explained by animal professors",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback() -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)


# ========================================
# RENDERING
# ========================================


def _add_branches(tree: Tree, node: MindMapNode) -> None:
    for child in node.children:
        _add_branches(tree.add(escape(child.title)), child)


def render_lesson(lesson: Lesson) -> None:
    """Print a lesson to the console."""
    console.print(f"\n[bold cyan]{escape(lesson.topic)}[/bold cyan]")
    if lesson.source_file_name:
        console.print(f"[dim]Grounded in: {escape(lesson.source_file_name)}[/dim]")

    console.print(
        Panel(
            f'[italic]"{escape(lesson.quote.text)}"[/italic]\n- {escape(lesson.quote.author)}',
            title="Quote",
            border_style="magenta",
        )
    )

    console.print("\n[bold]Explanation[/bold]")
    for paragraph in lesson.paragraphs:
        console.print(Markdown(paragraph))
        console.print()

    console.print("[bold]Comic[/bold]")
    for number, panel in enumerate(lesson.comic_panels, start=1):
        console.print(f"  [yellow]Panel {number}:[/yellow] {escape(panel.narrative)}")

    table = Table(title=f"Flashcards ({len(lesson.flashcards)})")
    table.add_column("Term", style="cyan")
    table.add_column("Definition")
    for card in lesson.flashcards:
        table.add_row(escape(card.term), Markdown(card.definition))
    console.print()
    console.print(table)

    tree = Tree(f"[bold]{escape(lesson.mind_map.title)}[/bold]")
    _add_branches(tree, lesson.mind_map)
    console.print("\n[bold]Mind Map[/bold]")
    console.print(tree)

    console.print("\n[bold]Recommended Reading[/bold]")
    for citation in lesson.recommended_reading:
        console.print(f"  - {escape(citation)}")


# ========================================
# LESSON COMMANDS
# ========================================


@app.command("generate")
def generate(
    topic: str = typer.Argument(..., help="Concept for the animal professors to explain"),
    language: LessonLanguage = typer.Option(
        LessonLanguage.PRIMARY, "--language", "-l", help="Target language of the lesson"
    ),
    document: Path = typer.Option(None, "--document", "-d", help="Ground the lesson in a .txt/.md file"),
    grounding: GroundingMode = typer.Option(
        GroundingMode.PRIMARY_SOURCE, "--grounding", "-g", help="How the document is used"
    ),
    output_json: Path = typer.Option(None, "--output-json", "-o", help="Save the lesson as JSON"),
    output_md: Path = typer.Option(None, "--output-md", "-m", help="Save the lesson as Markdown"),
) -> None:
    """
    Generate an illustrated lesson.

    Examples:
        academy generate "Photosynthesis"
        academy generate "Photosynthesis" --document notes.txt --output-md lesson.md
    """
    settings = get_settings()

    try:
        request = LessonRequest(topic=topic, language=language, grounding=grounding)
        if document is not None:
            request.source_document = read_source_document(document)
    except (ValueError, DocumentReadError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    try:
        with console.status(f"[cyan]The professors are preparing '{escape(request.topic)}'...[/cyan]"):
            lesson = generate_lesson_sync(
                request.topic,
                language=request.language,
                source_document=request.source_document,
                grounding=request.grounding,
                settings=settings,
            )
    except LessonGenerationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    saved = []
    if output_json:
        saved.append(("JSON", write_lesson_json(lesson, output_json)))
    if output_md:
        saved.append(("Markdown", write_lesson_markdown(lesson, output_md)))

    render_lesson(lesson)

    for label, path in saved:
        console.print(f"[green]Saved {label}:[/green] {escape(str(path))}")

    logger.debug(f"Lesson {lesson.id} rendered")


# ========================================
# INFO COMMANDS
# ========================================


def _mask(secret: str | None) -> str:
    if not secret or not secret.strip():
        return "Not set"
    if len(secret) <= 8:
        return "***"
    return f"{secret[:4]}...{secret[-4:]}"


@app.command("config")
def show_config() -> None:
    """Show the active configuration."""
    settings = get_settings()

    table = Table(title="Animal Academy Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Gemini API Key", _mask(settings.gemini_api_key))
    table.add_row("Text Model", settings.text_model)
    table.add_row("Image Model", settings.image_model)
    table.add_row("Primary Language", settings.primary_language)
    table.add_row("Secondary Language", settings.secondary_language)
    table.add_row("Max Document Chars", str(settings.max_document_chars))
    table.add_row(
        "Request Timeout",
        f"{settings.request_timeout_seconds}s" if settings.request_timeout_seconds else "SDK default",
    )
    table.add_row("Playground Size", str(settings.playground_max_lessons))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Log File", settings.log_file or "-")

    console.print(table)

    if not settings.has_ai_configured():
        rprint("[yellow]![/yellow] No API key configured: set GEMINI_API_KEY to generate lessons")


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint("[bold]animal-academy[/bold] v0.1.0")
    rprint("  Gemini lessons + Imagen comics")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
