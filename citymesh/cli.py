"""Click CLI commands for citymesh."""

import logging

import click

from .builder import CityBuilder
from .config import CityConfig

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """citymesh CLI for turning GeoJSON city data into 3D meshes."""
    pass


@cli.command()
@click.argument('geojson_dir', type=click.Path(exists=True, file_okay=False))
@click.option('--output', '-o', default='city.glb', help='Output GLB file path')
@click.option('--assets', '-a', default=None, type=click.Path(file_okay=False),
              help='Directory holding shapes/tree/*.ply and textures/*.jpg')
def build(geojson_dir: str, output: str, assets: str):
    """Build a 3D city scene from every .geojson file in GEOJSON_DIR."""
    config = CityConfig.from_env(asset_dir=assets)
    builder = CityBuilder(config)
    try:
        builder.load_directory(geojson_dir)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading GeoJSON: {e}")
        raise click.ClickException(str(e))

    if not builder.build():
        raise click.ClickException("City not created!")

    path = builder.export(output)
    stats = builder.scene.summary()
    click.echo(f"Generated {stats['meshes']} meshes "
               f"({stats['triangles']} triangles, {stats['quads']} quads) "
               f"and {stats['trees']} trees")
    click.echo(f"Scene: {path}")


if __name__ == '__main__':
    cli()
