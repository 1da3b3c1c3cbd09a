"""Datapack assembly: naming rules and the ZIP bundler."""

from biomecraft.datapack.naming import (
    sanitize_biome_name,
    derive_biome_name,
    is_valid_resource_location,
)
from biomecraft.datapack.generator import (
    create_pack_mcmeta,
    create_folder_structure,
    build_datapack_files,
    bundle_datapack,
    generate_complete_datapack,
    validate_datapack_structure,
    get_datapack_metadata,
)

__all__ = [
    "sanitize_biome_name",
    "derive_biome_name",
    "is_valid_resource_location",
    "create_pack_mcmeta",
    "create_folder_structure",
    "build_datapack_files",
    "bundle_datapack",
    "generate_complete_datapack",
    "validate_datapack_structure",
    "get_datapack_metadata",
]
