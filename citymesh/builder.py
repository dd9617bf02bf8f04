"""CityBuilder: thin orchestrator over extraction, normalization and meshing."""

import logging
import pathlib
from typing import Optional

from tqdm import tqdm

from .assets import AssetLibrary
from .config import CityConfig
from .errors import CitymeshError
from .extractor import extract_features, iter_geojson_files, load_geojson
from .geometry import normalize_objects
from .meshes import assign_heights, build_city
from .models import BoundingBox, CityScene, PathManager
from . import glb as glb_mod

logger = logging.getLogger(__name__)


class CityBuilder:
    def __init__(self, config: Optional[CityConfig] = None, assets: Optional[AssetLibrary] = None):
        """
        config: pipeline configuration; read from the environment when omitted.
        assets: preloaded species meshes and textures; loaded from
            ``config.asset_dir`` on ``build()`` when omitted.
        """
        self.config = config or CityConfig.from_env()
        self.assets = assets
        self.bbox = BoundingBox()
        self.objects = []
        self.scene: Optional[CityScene] = None
        self._normalized = False

    def add_collection(self, collection: dict) -> int:
        """Extract one feature collection.  Returns the number of new objects."""
        if self._normalized:
            raise RuntimeError("Cannot add features after normalization")
        objects = extract_features(collection, self.bbox, self.config)
        self.objects.extend(objects)
        return len(objects)

    def load_files(self, paths) -> int:
        total = 0
        for path in tqdm(list(paths), desc="Reading GeoJSON", unit="file"):
            logger.info(f"Reading {path}")
            total += self.add_collection(load_geojson(path))
        return total

    def load_directory(self, directory) -> int:
        """Extract every ``*.geojson`` file of *directory*."""
        paths = list(iter_geojson_files(directory))
        if not paths:
            logger.warning(f"No .geojson files found in {directory}")
        return self.load_files(paths)

    def normalize(self) -> None:
        """Rescale all objects into scene space and assign their heights.

        Runs once, after every file has been read.
        """
        if self._normalized:
            return
        normalize_objects(self.objects, self.bbox, self.config.scale)
        assign_heights(self.objects, self.config.scale)
        self._normalized = True

    def build(self) -> bool:
        """Build the city meshes.  Returns False if construction failed."""
        self.scene = None
        try:
            self.normalize()
            if self.assets is None:
                self.assets = AssetLibrary.load(self.config)
            self.scene = build_city(self.objects, self.assets)
        except CitymeshError as e:
            logger.error(f"City not created: {e}")
            self.scene = None
            return False
        return True

    def export(self, output_path: str) -> str:
        """Write the built scene as GLB.  Returns the absolute path."""
        if self.scene is None:
            raise RuntimeError("No scene to export; call build() first")
        path = PathManager.get_output_path(self.config, output_path)
        return glb_mod.export_glb(self.scene, pathlib.Path(path).absolute())
