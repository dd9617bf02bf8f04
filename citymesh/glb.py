"""GLB export of a built city scene."""

import logging

import numpy as np
import trimesh

from .constants import TREE_STYLES
from .models import CityScene, MeshRecord

logger = logging.getLogger(__name__)


def quads_to_triangles(quads) -> np.ndarray:
    """Split each quad ``(a, b, c, d)`` into ``(a, b, c)`` and ``(a, c, d)``."""
    quads = np.asarray(quads, dtype=np.int64).reshape(-1, 4)
    first = quads[:, [0, 1, 2]]
    second = quads[:, [0, 2, 3]]
    return np.stack([first, second], axis=1).reshape(-1, 3)


def _rgba(color) -> list:
    return [int(round(c * 255)) for c in color] + [255]


def record_to_trimesh(record: MeshRecord) -> trimesh.Trimesh:
    if record.triangles is not None:
        faces = np.asarray(record.triangles, dtype=np.int64).reshape(-1, 3)
    else:
        faces = quads_to_triangles(record.quads)
    mesh = trimesh.Trimesh(
        vertices=np.asarray(record.positions, dtype=np.float64),
        faces=faces,
        process=False,
    )
    mesh.visual.vertex_colors = np.tile(_rgba(record.material.color),
                                        (len(mesh.vertices), 1))
    mesh.metadata['role'] = record.role
    if record.material.texture is not None:
        mesh.metadata['texture'] = record.material.texture
    return mesh


def scene_to_trimesh(scene: CityScene) -> trimesh.Scene:
    """Convert meshes and tree instances into a single trimesh scene."""
    tm_scene = trimesh.Scene()
    for record in scene.meshes:
        if record.face_count == 0:
            continue
        tm_scene.add_geometry(record_to_trimesh(record),
                              node_name=record.name, geom_name=record.name)

    species_geometry = {}
    for species, mesh in scene.species_meshes.items():
        colored = mesh.copy()
        colored.visual.vertex_colors = np.tile(
            _rgba(TREE_STYLES[species][0]), (len(colored.vertices), 1))
        species_geometry[species] = colored

    # species geometry is stored once; later trees only add graph nodes
    added = set()
    for tree in scene.trees:
        transform = trimesh.transformations.translation_matrix(tree.position)
        geom_name = f"tree_{tree.species}"
        if geom_name not in added:
            tm_scene.add_geometry(species_geometry[tree.species],
                                  node_name=tree.name,
                                  geom_name=geom_name,
                                  transform=transform)
            added.add(geom_name)
        else:
            tm_scene.graph.update(frame_to=tree.name,
                                  frame_from=tm_scene.graph.base_frame,
                                  matrix=transform,
                                  geometry=geom_name)
    return tm_scene


def export_glb(scene: CityScene, output_path) -> str:
    """Write *scene* as a binary glTF file and return its path."""
    tm_scene = scene_to_trimesh(scene)
    tm_scene.export(str(output_path), file_type='glb')
    logger.info(f"GLB file generated successfully: {output_path}")
    return str(output_path)
