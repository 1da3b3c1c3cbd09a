#!/usr/bin/env python3
"""
BiomeCraft CLI
Generate biome datapacks, check biome files and run the API server.
"""
import sys
import json
import asyncio
import logging
from pathlib import Path
from datetime import datetime

import click

from biomecraft.errors import BiomeCraftError

LOGS_DIR = Path.cwd() / "logs"


def setup_logging(debug: bool = False, logs_dir: Path = LOGS_DIR) -> Path:
    """Configure logging to both console and file.

    Returns:
        Path to the log file
    """
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file = logs_dir / f"biomecraft_{timestamp}.log"

    # File handler - always verbose
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    ))

    # Console handler - respects debug flag
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Keep third-party clients quiet
    logging.getLogger("litellm").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return log_file


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--logs-dir', type=click.Path(file_okay=False, path_type=Path),
              default=LOGS_DIR, help='Directory for log files')
@click.pass_context
def cli(ctx: click.Context, debug: bool, logs_dir: Path):
    """Generate Minecraft biome datapacks from descriptions."""
    log_file = setup_logging(debug=debug, logs_dir=logs_dir)
    logging.getLogger(__name__).info(f"BiomeCraft starting (debug={debug}, log={log_file})")
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument('description')
@click.option('--name', 'biome_name', default=None, help='Biome name (derived from the description if omitted)')
@click.option('--output-dir', type=click.Path(file_okay=False, path_type=Path),
              default=Path('.'), help='Where to write the datapack ZIP')
def generate(description: str, biome_name: str | None, output_dir: Path):
    """Generate a datapack from DESCRIPTION."""
    from biomecraft.datapack.generator import generate_complete_datapack
    from biomecraft.datapack.naming import derive_biome_name, sanitize_biome_name
    from biomecraft.llm.biome_generator import BiomeGenerator

    name = sanitize_biome_name(biome_name) if biome_name else derive_biome_name(description)
    if not name:
        raise click.BadParameter(
            "must contain at least one alphanumeric character", param_hint="--name"
        )

    try:
        biome = asyncio.run(BiomeGenerator().generate(description))
        data = generate_complete_datapack(biome, name, description)
    except BiomeCraftError as e:
        raise click.ClickException(f"[{e.code}] {e}")

    output_dir.mkdir(parents=True, exist_ok=True)
    output = output_dir / f"{name}_datapack.zip"
    output.write_bytes(data)

    click.echo(f"Wrote {output} ({len(data)} bytes)")
    click.echo(json.dumps(biome.preview(), indent=2))


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--no-normalize', is_flag=True, help='Check the file exactly as written')
def validate(path: Path, no_normalize: bool):
    """Check a biome JSON file and print every problem found."""
    from biomecraft.minecraft.normalize import normalize_biome
    from biomecraft.minecraft.validator import validate_biome_structure
    from biomecraft.models.validation import format_validation_errors

    try:
        document = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}")

    if not no_normalize and isinstance(document, dict):
        document = normalize_biome(document, merge_defaults=False)

    report = validate_biome_structure(document)
    for warning in report.warnings:
        click.echo(f"warning: {warning.field}: {warning.message}", err=True)

    if report.valid:
        click.echo(f"{path}: valid")
        return

    click.echo(f"{path}: {len(report.errors)} error(s)")
    click.echo(format_validation_errors(report.errors))
    sys.exit(1)


@cli.command()
@click.option('--host', default='127.0.0.1', help='Interface to bind')
@click.option('--port', default=8000, type=int, help='Port to listen on')
@click.option('--reload', is_flag=True, help='Reload on code changes')
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("biomecraft.main:app", host=host, port=port, reload=reload)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
