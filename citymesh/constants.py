"""Configuration constants, lookup tables, and logging setup."""

import pathlib
import logging

from dotenv import load_dotenv

# ── Scene sizing ─────────────────────────────────────────────────────────
# Raw coordinates are rescaled into a SCALE x SCALE window centred on the
# origin.  Building heights and roof heights are derived from it too.
DEFAULT_SCALE = 50

# ── Object types ─────────────────────────────────────────────────────────
BUILDING = 'building'
WATER = 'water'
HIGHWAY = 'highway'
PEDESTRIAN = 'pedestrian'
FOREST = 'forest'
SAND = 'sand'

GRASS_TYPES = frozenset({
    'park', 'pitch', 'garden', 'playground', 'greenfield', 'scrub',
    'heath', 'farmyard', 'grass', 'farmland', 'village_green', 'meadow',
    'orchard', 'vineyard', 'recreation_ground', 'grassland',
})

# Polygon objects whose type is outside this set are discarded.
RENDERABLE_TYPES = frozenset({
    BUILDING, WATER, SAND, HIGHWAY, PEDESTRIAN, FOREST,
}) | GRASS_TYPES

TREE_SPECIES = ('standard', 'palm', 'pine', 'cypress', 'oak')

PEDESTRIAN_HIGHWAYS = frozenset({
    'footway', 'pedestrian', 'track', 'steps', 'path', 'living_street',
    'pedestrian_area', 'pedestrian_line',
})

# Building categories forced to three levels regardless of other tags.
HIGH_BUILDINGS = frozenset({'apartments', 'residential', 'tower', 'hotel'})

# ── Tag heuristics ───────────────────────────────────────────────────────
METERS_PER_LEVEL = 3.2
DEFAULT_ROOF_HEIGHT = 0.109

GABLED_ROOF_TAGS = frozenset({'gabled', 'onion', 'pyramid'})

TREE_TYPE_TAGS = {
    'palm': 'palm',
    'pine': 'pine',
    'cypress': 'cypress',
}
TREE_GENUS_TAGS = {
    'Quercus': 'oak',
    'Cupressus': 'cypress',
    'Pinus': 'pine',
}

# ── Ribbon half-widths ───────────────────────────────────────────────────
LINE_RIBBON_WIDTH = 0.00005        # LineString segments
MULTILINE_RIBBON_WIDTH = 0.0004    # MultiLineString (waterway) segments

LINE_THICKNESS = {
    WATER: 1.0,
}
DEFAULT_LINE_THICKNESS = 0.00005

# ── Flat-object heights (scene units) ────────────────────────────────────
FLAT_HEIGHTS = {
    WATER: 0.0001,
    HIGHWAY: 0.0005,
    PEDESTRIAN: 0.0004,
}
DEFAULT_FLAT_HEIGHT = 0.0001

# ── Materials ────────────────────────────────────────────────────────────
TYPE_COLORS = {
    BUILDING: (0.79, 0.74, 0.62),
    HIGHWAY: (0.26, 0.26, 0.28),
    PEDESTRIAN: (0.45, 0.40, 0.27),
    WATER: (0.72, 0.95, 1.00),
    SAND: (0.69, 0.58, 0.43),
    FOREST: (0.004, 0.25, 0.16),
}
GRASS_COLOR = (0.337, 0.49, 0.274)
FLOOR_COLOR = (0.725, 0.71, 0.68)
ROOF_COLOR = (0.351, 0.096, 0.091)         # brown/red
HISTORIC_LOW_COLOR = (0.538, 0.426, 0.347)  # light brown

# Surface characteristics on top of the base color.
SURFACE_PROPERTIES = {
    WATER: {'specular': 1.0, 'transmission': 0.99,
            'metallic': 0.8, 'roughness': 0.1},
    HIGHWAY: {'roughness': 0.9, 'specular': 0.7},
}

# building:colour values understood for historic buildings.
BUILDING_PALETTE = {
    'yellow': (0.882, 0.741, 0.294),
    'light yellow': (0.922, 0.925, 0.498),
    'brown': (0.808, 0.431, 0.271),
    'light brown': (0.8, 0.749, 0.596),
    'light orange': (0.933, 0.753, 0.416),
}
WHITE = (1.0, 1.0, 1.0)

# Individually styled landmarks, keyed by source feature id.
LANDMARKS = {
    'relation/1834818': {                  # Colosseum
        'color': (0.725, 0.463, 0.361),
        'texture': 'colosseo',
    },
}

# ── Trees ────────────────────────────────────────────────────────────────
# species -> (color, planar offset).  The standard species is shifted by
# (0.09, 0.09) in existing scenes; kept for output parity.
TREE_STYLES = {
    'standard': ((0.002, 0.187, 0.008), (0.09, 0.09)),
    'palm': ((0.224, 0.5, 0.06), (0.0, 0.0)),
    'pine': ((0.145, 0.182, 0.036), (0.0, 0.0)),
    'cypress': ((0.019, 0.175, 0.039), (0.0, 0.0)),
    'oak': ((0.084, 0.193, 0.005), (0.0, 0.0)),
}

# ── Wall textures ────────────────────────────────────────────────────────
# (upper level bound inclusive, texture key), checked in order.
WALL_TEXTURE_BREAKPOINTS = (
    (1, '1'), (2, '2'), (3, '3'), (4, '4'),
    (5, '5'), (6, '6'), (7, '7'), (8, '8'),
    (10, '8_11'),
    (40, '10_41'),
    (70, '40_71'),
    (100, '70_101'),
)
TALLEST_WALL_TEXTURE = 'more_101'

TEXTURE_KEYS = tuple(key for _, key in WALL_TEXTURE_BREAKPOINTS) + (
    TALLEST_WALL_TEXTURE,
) + tuple(lm['texture'] for lm in LANDMARKS.values())

# Load environment variables
load_dotenv()

# Configure base paths
BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
ASSET_DIR = BASE_DIR / "assets"
OUTPUT_DIR = BASE_DIR / "output"

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)
