"""Mesh generation for normalized city objects.

Every polygonal object gets a triangulated floor at its height.  Buildings
also get vertical wall quads and, when the footprint has no holes, a
pitched roof made of a flat cap and a centroid fan.  Trees become
instances of a shared species mesh.
"""

import logging

from .classifier import building_color, is_grass_type
from .constants import (
    BUILDING, TYPE_COLORS, GRASS_COLOR, FLOOR_COLOR, ROOF_COLOR,
    HISTORIC_LOW_COLOR, SURFACE_PROPERTIES, LANDMARKS, TREE_STYLES,
    WALL_TEXTURE_BREAKPOINTS, TALLEST_WALL_TEXTURE, FLAT_HEIGHTS,
    DEFAULT_FLAT_HEIGHT, DEFAULT_SCALE,
)
from .errors import AssetLoadError
from .geometry import extrude_walls, lift_rings, pitched_roof, triangulate
from .models import CityObject, CityScene, Material, MeshRecord, RoofShape, TreeInstance

logger = logging.getLogger(__name__)


def generate_height(obj: CityObject, scale: float = DEFAULT_SCALE) -> float:
    """Scene-space height of an object's floor (or building top)."""
    if obj.type == BUILDING and obj.level > 0:
        return (obj.level + scale / 20.0) / 20.0
    return FLAT_HEIGHTS.get(obj.type, DEFAULT_FLAT_HEIGHT)


def assign_heights(objects, scale: float = DEFAULT_SCALE) -> None:
    for obj in objects:
        obj.height = generate_height(obj, scale)


def effective_roof_shape(obj: CityObject) -> RoofShape:
    """Roof actually built: hole-free flat or untagged roofs become gabled."""
    if obj.type != BUILDING:
        return RoofShape.none
    if not obj.has_holes and obj.roof_shape in (RoofShape.flat, RoofShape.none):
        return RoofShape.gabled
    return obj.roof_shape


def wall_texture_for_level(level: int) -> str:
    for upper, key in WALL_TEXTURE_BREAKPOINTS:
        if level <= upper:
            return key
    return TALLEST_WALL_TEXTURE


def type_color(object_type) -> tuple:
    if object_type in TYPE_COLORS:
        return TYPE_COLORS[object_type]
    if is_grass_type(object_type):
        return GRASS_COLOR
    return FLOOR_COLOR


# ── Materials ───────────────────────────────────────────────────────────

def floor_material(obj: CityObject) -> Material:
    landmark = LANDMARKS.get(obj.source_id)
    if landmark is not None:
        color = landmark['color']
    elif obj.type == BUILDING and obj.level < 3 and obj.historic:
        color = HISTORIC_LOW_COLOR
    elif obj.historic and obj.colour:
        color = building_color(obj.colour)
    else:
        color = type_color(obj.type)
    return Material(color=color, **SURFACE_PROPERTIES.get(obj.type, {}))


def wall_material(obj: CityObject) -> Material:
    color = type_color(obj.type)
    if not obj.historic:
        return Material(color=color, texture=wall_texture_for_level(obj.level))

    landmark = LANDMARKS.get(obj.source_id)
    if landmark is not None:
        return Material(color=color, texture=landmark['texture'])
    if obj.colour:
        return Material(color=building_color(obj.colour))
    return Material(color=color)


# ── Meshes ──────────────────────────────────────────────────────────────

def build_floor(obj: CityObject) -> MeshRecord:
    rings = [obj.normalized_outer_ring, *obj.normalized_hole_rings]
    return MeshRecord(
        name=obj.name,
        object_name=obj.name,
        role='floor',
        positions=lift_rings(rings, obj.height),
        triangles=triangulate(obj.normalized_outer_ring,
                              obj.normalized_hole_rings),
        material=floor_material(obj),
    )


def build_walls(obj: CityObject) -> MeshRecord:
    verts, quads = extrude_walls(obj.normalized_outer_ring, obj.height)
    return MeshRecord(
        name=f"{obj.name}_1",
        object_name=obj.name,
        role='walls',
        positions=verts,
        quads=quads,
        material=wall_material(obj),
    )


def build_roof(obj: CityObject) -> list:
    """Cap and pitch meshes for a gabled roof; empty for holed footprints."""
    if obj.has_holes or effective_roof_shape(obj) is not RoofShape.gabled:
        return []

    ring = obj.normalized_outer_ring
    cap = MeshRecord(
        name=f"{obj.name}_roof_cap",
        object_name=obj.name,
        role='roof_cap',
        positions=lift_rings([ring], obj.height),
        triangles=triangulate(ring),
        material=Material(color=ROOF_COLOR),
    )
    verts, faces = pitched_roof(ring, obj.height, obj.roof_height)
    pitch = MeshRecord(
        name=f"{obj.name}_roof",
        object_name=obj.name,
        role='roof_pitch',
        positions=verts,
        triangles=faces,
        material=Material(color=ROOF_COLOR),
    )
    return [cap, pitch]


def place_trees(obj: CityObject) -> list:
    """One instance per normalized point, offset per species."""
    color, (dx, dz) = TREE_STYLES[obj.type]
    instances = []
    for i, (x, y) in enumerate(obj.normalized_outer_ring):
        name = obj.name if i == 0 else f"{obj.name}_{i}"
        instances.append(TreeInstance(
            name=name,
            species=obj.type,
            position=(x + dx, 0.0, y + dz),
            material=Material(color=color),
        ))
    return instances


def build_object(obj: CityObject) -> tuple:
    """Return ``(meshes, trees)`` for a single normalized object."""
    if obj.type is None:
        raise ValueError(f"Unclassified object {obj.name} reached the mesh builder")
    if obj.type in TREE_STYLES:
        return [], place_trees(obj)

    meshes = [build_floor(obj)]
    if obj.type == BUILDING:
        meshes.append(build_walls(obj))
        meshes.extend(build_roof(obj))
    return meshes, []


def _check_assets(scene: CityScene) -> None:
    for tree in scene.trees:
        if tree.species not in scene.species_meshes:
            raise AssetLoadError(f"No mesh loaded for tree species {tree.species!r}")
    for mesh in scene.meshes:
        key = mesh.material.texture
        if key is not None and key not in scene.textures:
            raise AssetLoadError(f"No texture loaded for {key!r}")


def build_city(objects, assets) -> CityScene:
    """Build every mesh and tree instance of a normalized object list."""
    scene = CityScene(
        species_meshes=dict(assets.species_meshes),
        textures=dict(assets.textures),
    )
    holed = 0
    for obj in objects:
        meshes, trees = build_object(obj)
        scene.meshes.extend(meshes)
        scene.trees.extend(trees)
        if obj.has_holes:
            holed += 1

    _check_assets(scene)
    stats = scene.summary()
    logger.info(f"Built {stats['meshes']} meshes ({stats['triangles']} triangles, "
                f"{stats['quads']} quads) and {stats['trees']} trees; "
                f"{holed} objects with holes")
    return scene
