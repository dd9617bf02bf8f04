"""Tag classification: object type, levels, roof and historic attributes."""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional

from .constants import (
    BUILDING, WATER, HIGHWAY, PEDESTRIAN, FOREST,
    GRASS_TYPES, PEDESTRIAN_HIGHWAYS, HIGH_BUILDINGS,
    METERS_PER_LEVEL, DEFAULT_ROOF_HEIGHT, DEFAULT_SCALE,
    GABLED_ROOF_TAGS, TREE_TYPE_TAGS, TREE_GENUS_TAGS,
    BUILDING_PALETTE, WHITE,
)
from .models import RoofShape

logger = logging.getLogger(__name__)


class TagSource(enum.Enum):
    """Which tag decided the type of a feature."""
    BUILDING = 'building'
    WATER = 'water'
    LANDUSE = 'landuse'
    NATURAL = 'natural'
    LEISURE = 'leisure'
    HIGHWAY = 'highway'
    UNCLASSIFIED = None


# First present tag wins.
TAG_PRIORITY = (
    TagSource.BUILDING,
    TagSource.WATER,
    TagSource.LANDUSE,
    TagSource.NATURAL,
    TagSource.LEISURE,
    TagSource.HIGHWAY,
)


@dataclass
class Classification:
    type: Optional[str]
    source: TagSource
    category: Optional[str] = None
    roof_shape: RoofShape = RoofShape.none
    roof_height: float = DEFAULT_ROOF_HEIGHT
    historic: bool = False
    colour: Optional[str] = None


def _tag(tags: dict, key: str):
    """Return a tag value, treating missing, null and empty values alike."""
    value = tags.get(key)
    if value is None or value == "":
        return None
    return value


# ── Numeric tag parsing ─────────────────────────────────────────────────

def is_numeric_tag(value: str) -> bool:
    """Reject values containing letters or list separators (``;`` ``,``)."""
    return not any(ch.isalpha() or ch in ';,' for ch in value)


def _parse_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        value = str(value).strip()
        if not is_numeric_tag(value):
            return None
        try:
            number = float(value) if '.' in value else int(value)
        except ValueError:
            return None
    try:
        number = float(number)
    except OverflowError:
        return None
    # NaN and Infinity are valid JSON numbers for Python's json module
    if not math.isfinite(number):
        return None
    return number


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def is_high_building(tags: dict) -> bool:
    return _tag(tags, 'building') in HIGH_BUILDINGS


def generate_building_level(object_type: Optional[str], tags: dict) -> int:
    """Infer a building's floor count from its tags.

    Later rules override earlier ones:

    1. ``building:levels`` gives ``round(levels) + 1`` (ground floor
       included); anything non-numeric leaves the default of 1.
    2. ``height`` / ``building:height`` gives ``floor(height / 3.2)``.
    3. apartments, residential, tower and hotel buildings get 3.
    """
    level = 1

    levels = _tag(tags, 'building:levels')
    if levels is not None:
        n_levels = _parse_number(levels)
        if n_levels is None:
            logger.debug(f"Ignoring malformed building:levels {levels!r}")
        else:
            level = _round_half_away(n_levels) + 1

    if object_type == BUILDING:
        height = None
        for key in ('height', 'building:height'):
            raw = _tag(tags, key)
            if raw is None:
                continue
            parsed = _parse_number(raw)
            if parsed is None:
                logger.debug(f"Ignoring malformed {key} {raw!r}")
            else:
                height = parsed
        if height is not None:
            level = int(height / METERS_PER_LEVEL)

        if is_high_building(tags):
            level = 3

        level = max(1, level)

    return level


def generate_roof_height(value, scale: float = DEFAULT_SCALE) -> float:
    """Convert a ``roof:height`` tag to scene units."""
    if value is None:
        return DEFAULT_ROOF_HEIGHT
    parsed = _parse_number(value)
    if parsed is None:
        logger.debug(f"Ignoring malformed roof:height {value!r}")
        return DEFAULT_ROOF_HEIGHT
    return parsed / scale


def normalize_roof_shape(value) -> RoofShape:
    if value in GABLED_ROOF_TAGS:
        return RoofShape.gabled
    if value == 'flat':
        return RoofShape.flat
    return RoofShape.none


def is_pedestrian(tags: dict) -> bool:
    return _tag(tags, 'highway') in PEDESTRIAN_HIGHWAYS


def is_grass_type(object_type: Optional[str]) -> bool:
    return object_type in GRASS_TYPES


def building_color(name: Optional[str]) -> tuple:
    """Map a ``building:colour`` value to RGB; unknown colours are white."""
    return BUILDING_PALETTE.get(name, WHITE)


def match_tag_source(tags: dict) -> TagSource:
    for source in TAG_PRIORITY:
        if _tag(tags, source.value) is not None:
            return source
    return TagSource.UNCLASSIFIED


def _type_for_source(source: TagSource, tags: dict) -> Optional[str]:
    if source is TagSource.BUILDING:
        return BUILDING
    if source is TagSource.WATER:
        return WATER
    if source is TagSource.NATURAL:
        natural = _tag(tags, 'natural')
        return FOREST if natural == 'wood' else natural
    if source is TagSource.HIGHWAY:
        return PEDESTRIAN if is_pedestrian(tags) else HIGHWAY
    if source is TagSource.UNCLASSIFIED:
        return None
    # landuse and leisure values pass through unchanged
    return _tag(tags, source.value)


def classify(tags: dict, scale: float = DEFAULT_SCALE) -> Classification:
    """Classify a polygon feature from its tags."""
    source = match_tag_source(tags)
    result = Classification(
        type=_type_for_source(source, tags),
        source=source,
        category=_tag(tags, source.value) if source.value else None,
    )
    if source is not TagSource.BUILDING:
        return result

    result.roof_shape = normalize_roof_shape(_tag(tags, 'roof:shape'))
    result.roof_height = generate_roof_height(_tag(tags, 'roof:height'), scale)

    if (_tag(tags, 'historic') is not None
            or _tag(tags, 'tourism') == 'attraction'):
        result.historic = True
        result.colour = _tag(tags, 'building:colour')

    return result


def classify_line(tags: dict) -> Optional[str]:
    """Type of a LineString feature; only highway and natural lines count."""
    if _tag(tags, 'highway') is not None:
        return PEDESTRIAN if is_pedestrian(tags) else HIGHWAY
    return _tag(tags, 'natural')


def classify_tree(tags: dict) -> Optional[str]:
    """Species of a ``natural=tree`` point, or None for other points."""
    if _tag(tags, 'natural') != 'tree':
        return None
    tree_type = _tag(tags, 'type')
    if tree_type is not None:
        return TREE_TYPE_TAGS.get(tree_type, 'standard')
    if _tag(tags, 'tree') is not None:
        return 'standard'
    genus = _tag(tags, 'genus')
    if genus is not None:
        return TREE_GENUS_TAGS.get(genus, 'standard')
    return 'standard'
