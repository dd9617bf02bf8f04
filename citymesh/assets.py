"""Shared tree species meshes and building wall textures."""

import logging
from dataclasses import dataclass, field

import trimesh
from PIL import Image

from .config import CityConfig
from .constants import TREE_SPECIES, TEXTURE_KEYS
from .errors import AssetLoadError
from .models import PathManager

logger = logging.getLogger(__name__)


def species_mesh_path(config: CityConfig, species: str):
    return PathManager.get_asset_path(config, "shapes", "tree", f"{species}.ply")


def texture_path(config: CityConfig, key: str):
    return PathManager.get_asset_path(config, "textures", f"{key}.jpg")


def load_species_mesh(path) -> trimesh.Trimesh:
    if not path.is_file():
        raise AssetLoadError(f"Tree mesh not found: {path}")
    try:
        mesh = trimesh.load(str(path), force='mesh')
    except Exception as e:
        raise AssetLoadError(f"Failed to load tree mesh {path}: {e}") from e
    if mesh.is_empty:
        raise AssetLoadError(f"Tree mesh {path} has no geometry")
    return mesh


def load_texture(path) -> Image.Image:
    if not path.is_file():
        raise AssetLoadError(f"Texture not found: {path}")
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except OSError as e:
        raise AssetLoadError(f"Failed to load texture {path}: {e}") from e


@dataclass
class AssetLibrary:
    species_meshes: dict = field(default_factory=dict)
    textures: dict = field(default_factory=dict)

    @classmethod
    def load(cls, config: CityConfig) -> "AssetLibrary":
        """Load every species mesh and texture; any failure is fatal."""
        library = cls()
        for species in TREE_SPECIES:
            library.species_meshes[species] = load_species_mesh(
                species_mesh_path(config, species))
        for key in TEXTURE_KEYS:
            library.textures[key] = load_texture(texture_path(config, key))
        logger.info(f"Loaded {len(library.species_meshes)} tree meshes and "
                    f"{len(library.textures)} textures from {config.asset_dir}")
        return library
