"""citymesh: 3D city meshes from tagged GeoJSON features.

Import constants FIRST so logging and the .env file are configured
before any other module logs.
"""

from citymesh import constants as _constants  # noqa: F401

from citymesh.builder import CityBuilder
from citymesh.config import CityConfig
from citymesh.models import BoundingBox, CityObject, CityScene
