"""Pipeline configuration threaded through every stage."""

import os
import pathlib
from dataclasses import dataclass, field

from .constants import ASSET_DIR, DEFAULT_SCALE, OUTPUT_DIR


@dataclass(frozen=True)
class CityConfig:
    scale: float = DEFAULT_SCALE
    asset_dir: pathlib.Path = field(default=ASSET_DIR)
    output_dir: pathlib.Path = field(default=OUTPUT_DIR)

    @classmethod
    def from_env(cls, **overrides) -> "CityConfig":
        """Build a config from CITYMESH_* environment variables.

        Keyword arguments win over the environment.
        """
        values = {}
        asset_dir = os.environ.get("CITYMESH_ASSET_DIR", "").strip()
        if asset_dir:
            values['asset_dir'] = pathlib.Path(asset_dir)
        output_dir = os.environ.get("CITYMESH_OUTPUT_DIR", "").strip()
        if output_dir:
            values['output_dir'] = pathlib.Path(output_dir)
        for key, value in overrides.items():
            if value is None:
                continue
            if key in ('asset_dir', 'output_dir'):
                value = pathlib.Path(value)
            values[key] = value
        return cls(**values)
