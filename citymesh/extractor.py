"""GeoJSON reading and extraction of typed city objects."""

import json
import logging
import pathlib

from shapely.geometry import shape

from .classifier import (
    classify, classify_line, classify_tree, generate_building_level,
)
from .config import CityConfig
from .constants import (
    RENDERABLE_TYPES, WATER,
    LINE_RIBBON_WIDTH, MULTILINE_RIBBON_WIDTH,
    LINE_THICKNESS, DEFAULT_LINE_THICKNESS,
)
from .geometry import compute_ribbon
from .models import BoundingBox, CityObject

logger = logging.getLogger(__name__)


def load_geojson(path) -> dict:
    """Read a GeoJSON feature collection from disk."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def iter_geojson_files(directory):
    """Yield the ``*.geojson`` files of a directory in name order."""
    directory = pathlib.Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"GeoJSON directory not found: {directory}")
    yield from sorted(p for p in directory.iterdir()
                      if p.suffix == '.geojson' and p.is_file())


def feature_id(feature: dict, index: int) -> str:
    """Stable id of a feature with ``/`` replaced so it can name meshes."""
    properties = feature.get('properties') or {}
    fid = properties.get('@id') or feature.get('id')
    if fid is None:
        fid = str(index)
    return str(fid).replace('/', '_')


def _source_id(feature: dict) -> str:
    properties = feature.get('properties') or {}
    return str(properties.get('@id') or feature.get('id') or '')


def _ring_points(ring) -> list:
    """Ring coordinates without the closing duplicate vertex."""
    coords = list(ring.coords)
    if len(coords) > 1 and coords[0] == coords[-1]:
        coords = coords[:-1]
    return [(float(c[0]), float(c[1])) for c in coords]


def line_thickness(object_type) -> float:
    return LINE_THICKNESS.get(object_type, DEFAULT_LINE_THICKNESS)


# ── Per-geometry extraction ─────────────────────────────────────────────

def _extract_polygon(polygon, name, source_id, tags, bbox, config):
    info = classify(tags, config.scale)
    if info.type is None:
        return None

    outer = _ring_points(polygon.exterior)
    holes = [_ring_points(interior) for interior in polygon.interiors]
    for ring in (outer, *holes):
        bbox.update_ring(ring)

    if info.type not in RENDERABLE_TYPES:
        logger.debug(f"Skipping {name}: type {info.type!r} is not rendered")
        return None

    return CityObject(
        name=name,
        source_id=source_id,
        type=info.type,
        category=info.category,
        level=generate_building_level(info.type, tags),
        roof_height=info.roof_height,
        roof_shape=info.roof_shape,
        historic=info.historic,
        colour=info.colour,
        outer_ring=outer,
        hole_rings=holes,
    )


def _extract_ribbons(coords, prefix, start, object_type, width, thickness,
                     source_id, bbox):
    """One ribbon object per consecutive coordinate pair."""
    objects = []
    count = start
    for (x, y, *_), (next_x, next_y, *_) in zip(coords, coords[1:]):
        ribbon = compute_ribbon(x, y, next_x, next_y, width)
        bbox.update_ring(ribbon)
        objects.append(CityObject(
            name=f"{prefix}_{count}",
            source_id=source_id,
            type=object_type,
            thickness=thickness,
            outer_ring=ribbon,
        ))
        count += 1
    return objects


def extract_feature(feature: dict, index: int, bbox: BoundingBox,
                    config: CityConfig) -> list:
    """Turn one GeoJSON feature into zero or more city objects."""
    geometry = feature.get('geometry')
    if not geometry:
        return []
    tags = feature.get('properties') or {}
    fid = feature_id(feature, index)
    source_id = _source_id(feature)
    geom_type = geometry.get('type')
    geom = shape(geometry)

    if geom_type == 'Polygon':
        obj = _extract_polygon(geom, f"building_{fid}", source_id, tags,
                               bbox, config)
        return [obj] if obj is not None else []

    if geom_type == 'MultiPolygon':
        objects = []
        for k, polygon in enumerate(geom.geoms):
            obj = _extract_polygon(polygon, f"building_{fid}_{k}", source_id,
                                   tags, bbox, config)
            if obj is not None:
                objects.append(obj)
        return objects

    if geom_type == 'LineString':
        object_type = classify_line(tags)
        if object_type is None:
            return []
        return _extract_ribbons(list(geom.coords), f"line_{fid}", 0,
                                object_type, LINE_RIBBON_WIDTH,
                                line_thickness(object_type), source_id, bbox)

    if geom_type == 'MultiLineString':
        if not tags.get('waterway'):
            return []
        objects = []
        for line in geom.geoms:
            objects.extend(_extract_ribbons(
                list(line.coords), f"multiline_{fid}", len(objects),
                WATER, MULTILINE_RIBBON_WIDTH, MULTILINE_RIBBON_WIDTH,
                source_id, bbox))
        return objects

    if geom_type == 'Point':
        species = classify_tree(tags)
        if species is None:
            return []
        point = (float(geom.x), float(geom.y))
        bbox.update(*point)
        return [CityObject(
            name=f"point_{fid}",
            source_id=source_id,
            type=species,
            outer_ring=[point],
        )]

    logger.debug(f"Unsupported geometry type {geom_type!r} for feature {fid}")
    return []


def extract_features(collection: dict, bbox: BoundingBox,
                     config: CityConfig) -> list:
    """Extract every feature of a collection, widening *bbox* as it goes."""
    objects = []
    features = collection.get('features') or []
    for index, feature in enumerate(features):
        objects.extend(extract_feature(feature, index, bbox, config))
    logger.info(f"Extracted {len(objects)} objects from {len(features)} features")
    return objects
