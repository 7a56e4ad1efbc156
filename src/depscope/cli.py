"""CLI entry point for depscope."""

import asyncio
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from depscope.adapters.npm import NpmAdapter
from depscope.analyzers.pipeline import AnalysisPipeline
from depscope.cache import DiskCache
from depscope.config import Settings
from depscope.manifest import ManifestError, load_manifest
from depscope.models.schemas import Manifest, ProjectResult
from depscope.reporters import json as json_reporter
from depscope.reporters import terminal as terminal_reporter
from depscope.reporters.options import ReportOptions

app = typer.Typer(
    help="Health check for your npm dependencies - find abandoned, bloated, and declining packages."
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ValidationError as e:
        err_console.print(f"[red]✗[/red] Invalid configuration: {e}")
        raise typer.Exit(1)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client shared by every registry request of a run."""
    return httpx.AsyncClient(timeout=settings.timeout, follow_redirects=True)


@app.command()
def scan(
    path: Path = typer.Argument(Path("."), help="Project directory or package.json"),
    as_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
    dev: bool = typer.Option(False, "--dev", help="Include devDependencies in analysis"),
    fix: bool = typer.Option(False, "--fix", help="Show alternative package suggestions"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip cache, make fresh API calls"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output (score + issues only)"),
    limit: int = typer.Option(0, "--limit", "-n", min=0, help="Only show the N worst-scoring dependencies"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log registry requests"),
) -> None:
    """Scan a project's dependencies and grade their health.

    Exits with status 1 if any in-scope dependency is graded F.
    """
    _configure_logging(verbose)
    settings = _load_settings()

    try:
        manifest = load_manifest(path)
    except ManifestError as e:
        err_console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    if not manifest.production and not (dev and manifest.dev):
        err_console.print("[red]✗[/red] No dependencies found in package.json.")
        if manifest.dev and not dev:
            err_console.print(
                f"[dim]ℹ Found {len(manifest.dev)} devDependencies. Use --dev to include them.[/dim]"
            )
        raise typer.Exit(1)

    options = ReportOptions(dev=dev, fix=fix, limit=limit, quiet=quiet)
    show_progress = not (as_json or quiet)

    result = asyncio.run(_scan(manifest, settings, dev, no_cache, show_progress))

    if as_json:
        typer.echo(json_reporter.render(result, options))
    else:
        terminal_reporter.render(result, options, console)

    if result.has_failing(dev):
        raise typer.Exit(1)


async def _scan(
    manifest: Manifest,
    settings: Settings,
    include_dev: bool,
    no_cache: bool,
    show_progress: bool,
) -> ProjectResult:
    """Async implementation of scan."""
    cache = DiskCache(settings.cache_file)
    if no_cache:
        cache.clear()

    total = len(manifest.production) + (len(manifest.dev) if include_dev else 0)
    if show_progress:
        console.print()
        console.print(f"  [bold]Scanning [cyan]{manifest.name}[/cyan] ({total} dependencies)[/bold]")

    async with create_http_client(settings) as client:
        adapter = NpmAdapter(
            client=client,
            cache=cache,
            registry_url=settings.registry_url,
            downloads_url=settings.downloads_url,
            timeout=settings.timeout,
            cache_ttl=settings.cache_ttl,
        )
        pipeline = AnalysisPipeline(adapter=adapter, max_concurrency=settings.max_concurrency)

        if not show_progress:
            return await pipeline.analyze_project(manifest, include_dev=include_dev)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Analyzing dependencies...", total=total)

            def on_progress(completed: int, total: int, name: str) -> None:
                progress.update(task, completed=completed, description=f"Analyzed {name} ({completed}/{total})")

            result = await pipeline.analyze_project(
                manifest, include_dev=include_dev, progress_callback=on_progress
            )

    console.print(f"  [green]✓[/green] Analysis complete ({total} packages scanned)")
    return result


@app.command()
def cache_clear() -> None:
    """Delete all cached registry responses."""
    settings = _load_settings()
    DiskCache(settings.cache_file).clear()
    console.print(f"[green]Cleared cache at {settings.cache_file}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from depscope import __version__

    console.print(f"depscope v{__version__}")


if __name__ == "__main__":
    app()
