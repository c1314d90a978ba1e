""" Bake GeoJSON features into a pyramid of Mapbox Vector Tiles.

TileBaker reads a GeoJSON document and writes every tile that has something in
it, for a range of zoom levels, as one layer of MVT (Mapbox Vector Tile) data.
Tiles come back as (coordinate, path, bytes) tuples with paths like
"5/28/12.pbf", ready to be written to a directory, a zip archive or an MBTiles
file with TileBaker.Outputs. A metadata summary gives the zoom range, layer
name, and the bounds and center of the input.

    import TileBaker

    geojson = open('places.geojson', 'rb').read()
    tiles, metadata = TileBaker.generateTilesWithMetadata(geojson, 0, 5, 'places')

Features are assigned to every tile covered by their bounding box and are not
clipped or simplified.
"""
import os.path

__version__ = open(os.path.join(os.path.dirname(__file__), 'VERSION')).read().strip()

from os.path import dirname, realpath
from time import time

import logging

from simplejson import load as json_load

from . import Core
from . import Config
from . import Geography
from . import Tiler
from .VecTiles import geojson, mvt

# layer name used when none is given
default_layer_name = 'default'

# deepest zoom level with an unsigned 32-bit tile column
max_zoom_level = 30

def _checkZooms(min_zoom, max_zoom):
    """ Raise KnownUnknown unless 0 <= min_zoom <= max_zoom <= max_zoom_level.
    """
    for zoom in (min_zoom, max_zoom):
        if isinstance(zoom, bool) or not isinstance(zoom, int):
            raise Core.KnownUnknown('Zoom levels must be integers, not %s' % repr(zoom))

    if not (0 <= min_zoom <= max_zoom <= max_zoom_level):
        raise Core.KnownUnknown('Bad zoom range %d-%d, expected 0 <= min <= max <= %d' % (min_zoom, max_zoom, max_zoom_level))

def generateTilesFromFeatures(features, min_zoom, max_zoom, layer_name=None):
    """ Generate tiles and metadata from a list of parsed Features.

        Arguments:
        - features: list of Core.Feature, e.g. from VecTiles.geojson.parse().
        - min_zoom, max_zoom: inclusive range of zoom levels.
        - layer_name: name of the single MVT layer in every tile.

        Returns a list of Core.EncodedTile in zoom, column, row order
        and a Core.TileSetMetadata.
    """
    _checkZooms(min_zoom, max_zoom)
    layer_name = layer_name or default_layer_name

    bounds = Geography.calculateBounds(features)

    if bounds is None:
        raise Core.EmptyFeatureSet('No features with coordinates')

    center = Geography.calculateCenter(bounds)
    metadata = Core.TileSetMetadata(min_zoom, max_zoom, layer_name, bounds, center)

    tiles = []

    for zoom in range(min_zoom, max_zoom + 1):
        start_time = time()
        assignment = Tiler.tileFeatures(features, zoom)

        for coord in sorted(assignment.keys()):
            data = mvt.tile_bytes(assignment[coord], layer_name)
            tiles.append(Core.EncodedTile(coord, coord.path(), data))

        logging.info('TileBaker.generateTilesFromFeatures() %s zoom %d: %d tiles in %.3f', layer_name, zoom, len(assignment), time() - start_time)

    return tiles, metadata

def generateTilesWithMetadata(geojson_bytes, min_zoom, max_zoom, layer_name=None):
    """ Generate tiles and metadata from GeoJSON bytes.

        This is the main entry point. Any failure, in parsing, tiling or
        encoding, raises a Core.KnownUnknown subclass and nothing is returned.

        Bounds and center in the metadata cover the whole input and
        do not depend on the zoom range.
    """
    features = geojson.parse(geojson_bytes)
    return generateTilesFromFeatures(features, min_zoom, max_zoom, layer_name)

def generateTiles(geojson_bytes, min_zoom, max_zoom, layer_name=None):
    """ Generate tiles from GeoJSON bytes, like generateTilesWithMetadata() without the metadata.
    """
    tiles, metadata = generateTilesWithMetadata(geojson_bytes, min_zoom, max_zoom, layer_name)
    return tiles

def renderConfiguration(config):
    """ Generate the tile set described by a Config.Configuration and save it.

        Returns the same tiles and metadata that were saved.
    """
    try:
        with open(config.source, 'rb') as file:
            features = geojson.decode(file)
    except IOError as e:
        raise Core.KnownUnknown('Failed to read source %s: %s' % (config.source, e))

    tiles, metadata = generateTilesFromFeatures(features, config.min_zoom, config.max_zoom, config.layer_name)
    config.output.save(tiles, metadata)

    return tiles, metadata

def parseConfig(configHandle):
    """ Parse a configuration file and return a Configuration object.

        Configuration could be a Python dictionary or a path to a file formatted
        as JSON, see TileBaker.Config for the details:

          {
            "source": "places.geojson",
            "layer": "places",
            "zooms": {"min": 0, "max": 5},
            "output": {"name": "Disk", "path": "tiles"}
          }

        The full path to the file is significant, used to
        resolve any relative paths found in the configuration.
    """
    if isinstance(configHandle, dict):
        config_dict = configHandle
        dirpath = '.'
    else:
        path = realpath(configHandle)

        try:
            with open(path) as file:
                config_dict = json_load(file)
        except (IOError, ValueError) as e:
            raise Core.KnownUnknown('Failed to read configuration in %s: %s' % (path, e))

        dirpath = dirname(path)

    return Config.buildConfiguration(config_dict, dirpath)
