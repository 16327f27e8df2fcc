"""Command-line interface for Synaptic RAG."""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from .config.logging import cli_logger, setup_logging
from .config.settings import Settings
from .core.exceptions import SynapticError
from .core.module import RAGModule, coerce_retrieval_options

T = TypeVar("T")

app = typer.Typer(
    name="synaptic-rag",
    help="Synaptic RAG - document ingestion and retrieval over Qdrant",
    add_completion=False,
)
console = Console()


def parse_pairs(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Parse ``key=value`` arguments, converting numbers and booleans."""
    result: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'")
        result[key] = _coerce(raw)
    return result


def _coerce(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    return raw


def _load_settings(debug: bool) -> Settings:
    settings = Settings()
    if debug:
        settings.DEBUG = True
        settings.LOG_LEVEL = "DEBUG"
    setup_logging(settings)
    return settings


def _run(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning package errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except SynapticError as e:
        cli_logger.error("Command failed", error=e.to_dict())
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command("init")
def init_project(
    directory: Path = typer.Argument(Path("."), help="Directory to initialize"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files"),
) -> None:
    """Write a .env template for a new project."""
    directory = directory.resolve()
    directory.mkdir(parents=True, exist_ok=True)

    config_file = directory / ".env"
    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration file already exists: {config_file}[/yellow]")
        console.print("Use --force to overwrite")
        return

    config_content = """# Synaptic RAG Configuration
DEBUG=false
LOG_LEVEL=INFO

# Vector store
RAG_PROVIDER=qdrant
QDRANT_URL=http://localhost:6333
QDRANT_API_KEY=
QDRANT_COLLECTION_NAME=documents
QDRANT_VECTOR_SIZE=384
QDRANT_DISTANCE_METRIC=Cosine

# Embeddings ('local' or 'api')
EMBEDDING_PROVIDER=local
EMBEDDING_MODEL=all-MiniLM-L6-v2
# EMBEDDING_API_BASE=http://localhost:4000
# EMBEDDING_API_KEY=

# Chunking (optional)
# CHUNKING_STRATEGY=fixed
# CHUNK_SIZE=300
# CHUNK_OVERLAP=50

# Retrieval
DEFAULT_RETRIEVAL_LIMIT=5
# DEFAULT_SCORE_THRESHOLD=0.7
"""

    config_file.write_text(config_content)
    console.print(f"[green]Initialized Synaptic RAG project in {directory}[/green]")
    console.print(f"Configuration file: {config_file}")


@app.command("index")
def index_documents(
    directory: Path = typer.Argument(..., help="Directory containing documents"),
    pattern: str = typer.Option("*.md", "--pattern", help="Glob pattern of files to index"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Index every matching file, tagging chunks with source=<file name>."""
    settings = _load_settings(debug)

    if not directory.is_dir():
        console.print(f"[red]Directory not found: {directory}[/red]")
        raise typer.Exit(code=1)

    files = sorted(path for path in directory.glob(pattern) if path.is_file())
    if not files:
        console.print(f"[yellow]No files matching {pattern} in {directory}[/yellow]")
        return

    async def _index() -> int:
        indexed = 0
        async with await RAGModule.create(settings.to_rag_config()) as rag:
            for path in files:
                try:
                    content = path.read_text(encoding="utf-8")
                    ids = await rag.add_document(content, {"source": path.name})
                except (OSError, UnicodeDecodeError, SynapticError) as e:
                    cli_logger.error("Failed to index file", file=str(path), error=str(e))
                    console.print(f"[red]Failed to index {path.name}: {e}[/red]")
                    continue
                indexed += 1
                console.print(f"Indexed {path.name} ({len(ids)} chunks)")
        return indexed

    indexed = _run(_index())
    console.print(f"[green]Indexed {indexed}/{len(files)} files[/green]")


@app.command("query")
def query_documents(
    text: str = typer.Argument(..., help="Query text"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum chunks to return"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Minimum score"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="key=value metadata filter"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Show the chunks most similar to a query."""
    settings = _load_settings(debug)
    filter_dict = parse_pairs(filters) or None

    async def _query():
        options = coerce_retrieval_options(
            {"limit": limit, "score_threshold": threshold, "filter": filter_dict}
        )
        async with await RAGModule.create(settings.to_rag_config()) as rag:
            return await rag.retrieve_context(text, options)

    chunks = _run(_query())
    if not chunks:
        console.print("[yellow]No matching chunks[/yellow]")
        return

    table = Table(title=f"Results for: {text}")
    table.add_column("Score", justify="right")
    table.add_column("Source")
    table.add_column("Content")
    for chunk in chunks:
        source = (chunk.metadata or {}).get("source", "")
        table.add_row(f"{chunk.score:.4f}", str(source), chunk.content)
    console.print(table)


@app.command("documents")
def list_documents(
    filters: List[str] = typer.Argument(..., help="key=value metadata filter"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """List stored chunks whose metadata matches every key=value pair."""
    settings = _load_settings(debug)
    filter_dict = parse_pairs(filters)

    async def _list():
        async with await RAGModule.create(settings.to_rag_config()) as rag:
            return await rag.get_documents_by_metadata(filter_dict)

    points = _run(_list())
    table = Table(title=f"{len(points)} stored chunks")
    table.add_column("Id")
    table.add_column("Chunk", justify="right")
    table.add_column("Content")
    for point in points:
        table.add_row(point.id, str(point.metadata.get("chunkIndex", "")), point.content or "")
    console.print(table)


@app.command("delete")
def delete_documents(
    ids: Optional[List[str]] = typer.Option(None, "--id", help="Chunk id to delete"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="key=value metadata filter"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Delete chunks by id or by metadata."""
    if not ids and not filters:
        console.print("[yellow]Nothing to delete: pass --id or --filter[/yellow]")
        raise typer.Exit(code=2)

    settings = _load_settings(debug)
    filter_dict = parse_pairs(filters)

    async def _delete() -> None:
        async with await RAGModule.create(settings.to_rag_config()) as rag:
            if ids:
                await rag.delete_documents_by_ids(list(ids))
            if filter_dict:
                await rag.delete_documents_by_metadata(filter_dict)

    _run(_delete())
    console.print("[green]Deletion request accepted[/green]")


@app.command("clear-storage")
def clear_storage(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Delete the whole collection."""
    settings = _load_settings(debug)
    collection = settings.QDRANT_COLLECTION_NAME
    if not yes:
        typer.confirm(f"Delete collection '{collection}' and every stored chunk?", abort=True)

    async def _clear() -> None:
        async with await RAGModule.create(settings.to_rag_config()) as rag:
            await rag.delete_storage()

    _run(_clear())
    console.print(f"[green]Deleted storage for collection '{collection}'[/green]")


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from . import __version__
    console.print(f"Synaptic RAG version {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
