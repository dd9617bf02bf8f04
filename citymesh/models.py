"""Data classes and path management."""

import enum
import math
import pathlib
from dataclasses import dataclass, field
from typing import Optional

import numpy as np


class PathManager:
    """Resolve asset and output paths against a config."""

    @staticmethod
    def get_output_path(config, filename: str) -> pathlib.Path:
        """Get the output file path, creating the output directory."""
        path = pathlib.Path(filename)
        if not path.is_absolute():
            path = pathlib.Path(config.output_dir) / path
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def get_asset_path(config, *parts: str) -> pathlib.Path:
        """Get the path of a file under the asset directory."""
        return pathlib.Path(config.asset_dir).joinpath(*parts)


class RoofShape(str, enum.Enum):
    flat = "flat"
    gabled = "gabled"
    none = "none"


@dataclass
class BoundingBox:
    """Running extent of every raw coordinate seen by the extractor.

    The box only ever widens.  Once ``freeze`` is called (before the
    normalization pass) further updates are rejected.
    """
    x_min: float = math.inf
    x_max: float = -math.inf
    y_min: float = math.inf
    y_max: float = -math.inf
    frozen: bool = False

    def update(self, x: float, y: float) -> None:
        if self.frozen:
            raise RuntimeError("BoundingBox is frozen; no more updates allowed")
        if x < self.x_min:
            self.x_min = x
        if x > self.x_max:
            self.x_max = x
        if y < self.y_min:
            self.y_min = y
        if y > self.y_max:
            self.y_max = y

    def update_ring(self, ring) -> None:
        for x, y in ring:
            self.update(x, y)

    def freeze(self) -> "BoundingBox":
        self.frozen = True
        return self

    @property
    def is_empty(self) -> bool:
        return self.x_min > self.x_max

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min


@dataclass
class CityObject:
    """A classified footprint, ribbon or point on its way to the mesh builder."""
    name: str
    source_id: str = ""
    type: Optional[str] = None
    category: Optional[str] = None
    level: int = 1
    height: float = 0.0
    roof_height: float = 0.109
    roof_shape: RoofShape = RoofShape.none
    historic: bool = False
    colour: Optional[str] = None
    thickness: float = 0.0
    outer_ring: list = field(default_factory=list)
    hole_rings: list = field(default_factory=list)
    normalized_outer_ring: list = field(default_factory=list)
    normalized_hole_rings: list = field(default_factory=list)

    @property
    def has_holes(self) -> bool:
        return len(self.hole_rings) > 0


@dataclass
class Material:
    color: tuple
    texture: Optional[str] = None
    roughness: Optional[float] = None
    specular: Optional[float] = None
    metallic: Optional[float] = None
    transmission: Optional[float] = None


@dataclass
class MeshRecord:
    """One named mesh: positions plus either triangles or quads."""
    name: str
    object_name: str
    role: str
    positions: np.ndarray
    material: Material
    triangles: Optional[np.ndarray] = None
    quads: Optional[np.ndarray] = None

    @property
    def face_count(self) -> int:
        faces = self.triangles if self.triangles is not None else self.quads
        return 0 if faces is None else len(faces)


@dataclass
class TreeInstance:
    name: str
    species: str
    position: tuple
    material: Material


@dataclass
class CityScene:
    meshes: list = field(default_factory=list)
    trees: list = field(default_factory=list)
    species_meshes: dict = field(default_factory=dict)
    textures: dict = field(default_factory=dict)

    def meshes_for(self, object_name: str) -> list:
        """Return the meshes generated for one city object."""
        return [m for m in self.meshes if m.object_name == object_name]

    def summary(self) -> dict:
        return {
            'meshes': len(self.meshes),
            'triangles': sum(len(m.triangles) for m in self.meshes
                             if m.triangles is not None),
            'quads': sum(len(m.quads) for m in self.meshes
                         if m.quads is not None),
            'trees': len(self.trees),
        }
