"""Main CLI interface for the photo gallery."""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.table import Table

from ..core.config import COLLISION_POLICIES, Config, get_config, set_config
from ..core.exceptions import ConfigurationError, ReconciliationConflict, ValidationError
from ..core.logger import get_logger, setup_logging
from ..models.manifest import manifest_json_schema
from ..pipeline.manifest import GenerationResult, ManifestGenerator, write_manifest
from ..utils.file_utils import atomic_write

console = Console()
logger = get_logger(__name__)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config-file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to a YAML or TOML configuration file')
@click.pass_context
def main(ctx: click.Context, debug: bool, config_file: Optional[Path]):
    """Photo Gallery - password-protected gallery server and manifest tools.

    \b
    Quick Start:
    1. Put photos under assets/photos (name pairs like beach_small.jpg / beach_large.jpg)
    2. Generate the manifest: photo-gallery generate
    3. Serve the site: GALLERY_PASSWORD=secret photo-gallery serve

    \b
    Examples:
    photo-gallery generate --hero-title "Our Wedding" --archive photos/all.zip
    photo-gallery generate assets/gallery.json --thumbnail-suffix=-thumb
    photo-gallery serve --port 8080
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    try:
        config = Config.load_from_file(config_file) if config_file else get_config()
    except (ValueError, OSError) as e:
        console.print(f"[red]Failed to load configuration: {e}[/red]")
        ctx.exit(1)

    set_config(config)
    ctx.obj['config'] = config

    setup_logging(
        log_level="DEBUG" if debug else config.log_level,
        log_dir=config.log_dir,
        enable_color=not debug,
    )


def _generator_overrides(
    thumbnail_suffix: Optional[str],
    full_suffix: Optional[str],
    texts: Dict[str, Optional[str]],
) -> Dict[str, Any]:
    """Collect CLI values that take precedence over the environment.

    A suffix given as an empty string disables that suffix; blank text options
    fall back to the configured value.
    """
    overrides: Dict[str, Any] = {}
    if thumbnail_suffix is not None:
        overrides['thumbnail_suffix'] = thumbnail_suffix.strip()
    if full_suffix is not None:
        overrides['full_suffix'] = full_suffix.strip()
    for name, value in texts.items():
        if value is not None and value.strip():
            overrides[name] = value.strip()
    return overrides


@main.command()
@click.argument('output', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option('--thumbnail-suffix', default=None, help='Filename marker for thumbnails [env GALLERY_THUMBNAIL_SUFFIX, default _small]')
@click.option('--full-suffix', default=None, help='Filename marker for full-size images [env GALLERY_FULL_SUFFIX, default _large]')
@click.option('--archive', default=None, help='Download archive path or URL [env GALLERY_ARCHIVE]')
@click.option('--hero-eyebrow', default=None, help='Hero eyebrow text [env GALLERY_HERO_EYEBROW]')
@click.option('--hero-title', default=None, help='Hero title [env GALLERY_HERO_TITLE]')
@click.option('--hero-subtitle', default=None, help='Hero subtitle [env GALLERY_HERO_SUBTITLE]')
@click.option('--hero-image', default=None, help='Hero image path or URL [env GALLERY_HERO_IMAGE]')
@click.option('--assets-dir', default=None, type=click.Path(file_okay=False, path_type=Path),
              help='Directory containing photos/ [env GALLERY_ASSETS_DIR, default assets]')
@click.option('--collisions', type=click.Choice(COLLISION_POLICIES), default=None,
              help='What to do when two files claim the same photo role')
@click.pass_context
def generate(ctx: click.Context, output: Optional[Path], thumbnail_suffix: Optional[str],
             full_suffix: Optional[str], archive: Optional[str], hero_eyebrow: Optional[str],
             hero_title: Optional[str], hero_subtitle: Optional[str], hero_image: Optional[str],
             assets_dir: Optional[Path], collisions: Optional[str]):
    """Scan the photo directory and write the gallery manifest.

    OUTPUT defaults to <assets-dir>/gallery.generated.json so a hand-maintained
    gallery.json is never overwritten. Review the file and rename it when ready.
    """
    config: Config = ctx.obj['config']

    overrides = _generator_overrides(thumbnail_suffix, full_suffix, {
        'archive': archive,
        'hero_eyebrow': hero_eyebrow,
        'hero_title': hero_title,
        'hero_subtitle': hero_subtitle,
        'hero_image': hero_image,
    })
    if assets_dir is not None:
        overrides['assets_dir'] = assets_dir
    if collisions is not None:
        overrides['collision_policy'] = collisions

    run_config = config.model_copy(update=overrides)
    output_path = output or run_config.default_manifest_path

    try:
        result = asyncio.run(ManifestGenerator(run_config).generate())
    except ValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        ctx.exit(1)
    except ReconciliationConflict as e:
        console.print(f"[red]✗ Conflicting files: {e}[/red]")
        ctx.exit(1)

    for warning in result.report.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    if not write_manifest(result.manifest, output_path):
        console.print("[red]✗ Failed to write gallery manifest[/red]")
        ctx.exit(1)

    display_generation_summary(result)
    console.print(f"[green]✓ Gallery manifest written to {output_path}[/green]")


@main.command()
@click.argument('output', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def schema(ctx: click.Context, output: Optional[Path]):
    """Write the JSON Schema of the manifest (default <assets-dir>/gallery.schema.json)."""
    config: Config = ctx.obj['config']
    output_path = output or config.assets_dir / "gallery.schema.json"

    content = json.dumps(manifest_json_schema(), indent=2) + "\n"
    if not atomic_write(output_path, content):
        console.print("[red]✗ Failed to write manifest schema[/red]")
        ctx.exit(1)

    console.print(f"[green]✓ Manifest schema written to {output_path}[/green]")


@main.command()
@click.option('--host', default=None, help='Host to bind to [env GALLERY_HOST, default 127.0.0.1]')
@click.option('--port', default=None, type=int, help='Port to bind to [env PORT, default 8000]')
@click.option('--reload', is_flag=True, help='Enable auto-reload for development')
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool):
    """Start the password-protected gallery server.

    \b
    Environment:
    GALLERY_PASSWORD   shared password (required)
    SESSION_SECRET     optional secret mixed into the session token
    GALLERY_SITE_ROOT  directory holding index.html, assets/ and friends
    """
    from ..web.server import run_server

    config: Config = ctx.obj['config']
    if not config.password:
        console.print("[red]✗ Environment variable GALLERY_PASSWORD is not set.[/red]")
        ctx.exit(1)

    console.print(f"[green]Starting Photo Gallery server...[/green]")
    console.print(f"[blue]Site root: {config.site_root}[/blue]")
    console.print(f"[cyan]Gallery: http://{host or config.host}:{port or config.port}[/cyan]")
    console.print("[yellow]Press Ctrl+C to stop the server[/yellow]")

    try:
        run_server(config, host=host, port=port, reload=reload)
    except ConfigurationError as e:
        console.print(f"[red]✗ {e}[/red]")
        ctx.exit(1)
    except KeyboardInterrupt:
        console.print("[yellow]Server stopped by user[/yellow]")


def display_generation_summary(result: GenerationResult):
    """Display a short summary of the generated manifest."""
    photos = result.manifest.photos
    measured = sum(1 for photo in photos if photo.width and photo.height)

    table = Table(title="Gallery Manifest")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Image files scanned", str(result.files_scanned))
    table.add_row("Photos", str(len(photos)))
    table.add_row("With dimensions", str(measured))
    table.add_row("Warnings", str(len(result.report.warnings)))
    if result.manifest.hero_image:
        table.add_row("Hero image", result.manifest.hero_image)
    if result.manifest.download_archive:
        table.add_row("Download archive", result.manifest.download_archive)

    console.print(table)


if __name__ == '__main__':
    main()
