"""
Datapack generator - bundles a validated biome into a Minecraft datapack ZIP.
"""

import io
import json
import logging
import zipfile
from pathlib import Path
from typing import Any

from biomecraft.config import get_namespace, get_pack_format
from biomecraft.datapack.naming import DEFAULT_BIOME_NAME, sanitize_biome_name
from biomecraft.errors import DatapackError
from biomecraft.minecraft.colors import int_to_hex
from biomecraft.models.biome import BiomeConfig

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

DatapackFiles = dict[str, str | dict[str, Any]]


def create_pack_mcmeta(pack_name: str, description: str | None = None) -> dict[str, Any]:
    """pack.mcmeta must sit at the root of every datapack"""
    return {
        "pack": {
            "pack_format": get_pack_format(),
            "description": description or f"{pack_name} - AI Generated Biome Datapack",
        }
    }


def create_folder_structure(namespace: str | None = None) -> dict[str, str]:
    """Conventional datapack directories under a (non-vanilla) namespace"""
    namespace = namespace or get_namespace()
    return {
        "biome": f"data/{namespace}/worldgen/biome/",
        "configured_feature": f"data/{namespace}/worldgen/configured_feature/",
        "placed_feature": f"data/{namespace}/worldgen/placed_feature/",
        "dimension": f"data/{namespace}/dimension/",
        "dimension_type": f"data/{namespace}/dimension_type/",
    }


def render_readme(
    biome: BiomeConfig,
    biome_name: str,
    resource_location: str,
    description: str,
) -> str:
    template = (TEMPLATES_DIR / "README.md.txt").read_text(encoding="utf-8")
    return template.format(
        biome_name=biome_name,
        description=description,
        resource_location=resource_location,
        pack_format=get_pack_format(),
        temperature=biome.temperature,
        downfall=biome.downfall,
        precipitation="Yes" if biome.has_precipitation else "No",
        sky_color=int_to_hex(biome.effects.sky_color),
        water_color=int_to_hex(biome.effects.water_color),
    )


def build_datapack_files(
    biome: BiomeConfig,
    biome_name: str,
    description: str | None = None,
    namespace: str | None = None,
) -> DatapackFiles:
    """
    Lay out every file of the datapack.

    Returns:
        Mapping of archive path to content; dicts are written as JSON
    """
    name = sanitize_biome_name(biome_name) or DEFAULT_BIOME_NAME
    namespace = namespace or get_namespace()
    folders = create_folder_structure(namespace)
    description = description or f"Custom {biome_name} biome generated by AI"

    files: DatapackFiles = {
        "pack.mcmeta": create_pack_mcmeta(f"{name}_datapack", description),
        f"{folders['biome']}{name}.json": biome.to_minecraft_json(),
        "README.md": render_readme(biome, biome_name, f"{namespace}:{name}", description),
    }
    return files


def bundle_datapack(files: DatapackFiles) -> bytes:
    """Write the files into a DEFLATE-compressed ZIP archive"""
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(
            buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
        ) as archive:
            for path, content in files.items():
                if not isinstance(content, str):
                    content = json.dumps(content, indent=2)
                archive.writestr(path, content)
    except (TypeError, ValueError, zipfile.BadZipFile) as e:
        raise DatapackError(f"Failed to bundle datapack: {e}") from e
    return buffer.getvalue()


def generate_complete_datapack(
    biome: BiomeConfig,
    biome_name: str,
    description: str | None = None,
) -> bytes:
    """Full pipeline: lay out, check and zip a datapack for one biome"""
    files = build_datapack_files(biome, biome_name, description)
    if not validate_datapack_structure(files):
        raise DatapackError("Generated datapack structure is invalid")

    data = bundle_datapack(files)
    logger.info(
        f"Datapack generated: biome={biome_name}, files={len(files)}, "
        f"size={round(len(data) / 1024)}KB"
    )
    return data


def validate_datapack_structure(files: DatapackFiles) -> bool:
    """Check for pack.mcmeta, at least one biome file and serializable JSON"""
    if "pack.mcmeta" not in files:
        logger.error("Missing pack.mcmeta")
        return False

    if not any("/worldgen/biome/" in path and path.endswith(".json") for path in files):
        logger.error("No biome files found")
        return False

    for path, content in files.items():
        if path.endswith((".json", ".mcmeta")) and not isinstance(content, str):
            try:
                json.dumps(content)
            except (TypeError, ValueError):
                logger.error(f"Invalid JSON in {path}")
                return False

    return True


def get_datapack_metadata(files: DatapackFiles) -> dict[str, Any]:
    """Count biomes, features and files, and read the pack format"""
    biome_count = sum(
        1 for path in files if "/worldgen/biome/" in path and path.endswith(".json")
    )
    feature_count = sum(
        1
        for path in files
        if ("/worldgen/configured_feature/" in path or "/worldgen/placed_feature/" in path)
        and path.endswith(".json")
    )

    pack_format = None
    mcmeta = files.get("pack.mcmeta")
    if isinstance(mcmeta, dict):
        pack = mcmeta.get("pack")
        if isinstance(pack, dict) and isinstance(pack.get("pack_format"), int):
            pack_format = pack["pack_format"]

    return {
        "biome_count": biome_count,
        "feature_count": feature_count,
        "total_files": len(files),
        "pack_format": pack_format,
    }
