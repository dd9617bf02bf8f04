import pytest
import trimesh
from PIL import Image

from citymesh.config import CityConfig
from citymesh.constants import TREE_SPECIES, TEXTURE_KEYS


def make_feature(geometry_type, coordinates, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": geometry_type, "coordinates": coordinates},
        "properties": properties,
    }


def make_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


@pytest.fixture
def square_building():
    return make_feature(
        "Polygon",
        [[[10.0, 45.0], [10.001, 45.0], [10.001, 45.001], [10.0, 45.001], [10.0, 45.0]]],
        **{"@id": "way/100", "building": "yes"},
    )


@pytest.fixture
def courtyard_building():
    return make_feature(
        "Polygon",
        [
            [[0.0, 0.0], [4.0, 0.0], [4.0, 4.0], [0.0, 4.0], [0.0, 0.0]],
            [[1.0, 1.0], [1.0, 3.0], [3.0, 3.0], [3.0, 1.0], [1.0, 1.0]],
        ],
        **{"@id": "way/200", "building": "yes"},
    )


@pytest.fixture
def asset_dir(tmp_path):
    """A complete asset directory with tiny placeholder meshes and textures."""
    root = tmp_path / "assets"
    tree_dir = root / "shapes" / "tree"
    tree_dir.mkdir(parents=True)
    for species in TREE_SPECIES:
        trimesh.creation.icosphere(subdivisions=1, radius=0.1).export(
            str(tree_dir / f"{species}.ply"))
    texture_dir = root / "textures"
    texture_dir.mkdir()
    for key in TEXTURE_KEYS:
        Image.new("RGB", (4, 4), (200, 180, 150)).save(texture_dir / f"{key}.jpg")
    return root


@pytest.fixture
def config(asset_dir, tmp_path):
    return CityConfig(asset_dir=asset_dir, output_dir=tmp_path / "output")
