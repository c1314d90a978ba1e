""" Assignment of features to tiles.

tileFeatures() takes a list of geographic Features and one zoom level, and
returns a dictionary of TileCoord keys to lists of TileFeatures whose vertices
are integers in the tile's own coordinate space, 0 to 4096 across.

A point lands in the one tile that contains it. Lines and polygons land in
every tile covered by their bounding box, even tiles that the geometry itself
never touches:

    >>> line = Core.LineString(((-10.0, -10.0), (10.0, 10.0)))
    >>> sorted(tileFeatures([Core.Feature(line, {})], 1).keys())
    [TileCoord(z=1, x=0, y=0), TileCoord(z=1, x=0, y=1), TileCoord(z=1, x=1, y=0), TileCoord(z=1, x=1, y=1)]

Geometry is not clipped, so tile coordinates go below 0 or past 4096 where a
feature crosses the tile edge. Downstream renderers expect this output shape.
"""

import logging
from copy import deepcopy
from math import floor, copysign

from . import Core
from .Geography import lonLatToTile, lonLatToMeters, metersToPixelInTile, geometryBounds, tile_size

# coordinates are scaled to this range within tile
extent = 4096

def _round(value):
    """ Round half away from zero.
    """
    return int(copysign(floor(abs(value) + 0.5), value))

def projectCoordinate(lon, lat, tx, ty, zoom):
    """ Convert one geographic coordinate to integer coordinates within a tile.
    """
    mx, my = lonLatToMeters(lon, lat)
    px, py = metersToPixelInTile(mx, my, tx, ty, zoom)

    return _round(px / tile_size * extent), _round(py / tile_size * extent)

def projectGeometry(geometry, tx, ty, zoom):
    """ Convert a whole geographic geometry to coordinates within a tile.
    """
    geom_type = Core.checkGeometry(geometry)

    def project(coords):
        return tuple([projectCoordinate(lon, lat, tx, ty, zoom) for (lon, lat) in coords])

    if geom_type == 'Point':
        return Core.Point(*projectCoordinate(geometry.x, geometry.y, tx, ty, zoom))

    elif geom_type == 'LineString':
        return Core.LineString(project(geometry.coords))

    else:
        return Core.Polygon(tuple([project(ring) for ring in geometry.rings]))

def coveringTiles(geometry, zoom):
    """ List tile coordinates where a geometry should be drawn, possibly empty.

        Tiles are listed west to east, then north to south.
    """
    bbox = geometryBounds(geometry)

    if bbox is None:
        return []

    min_lon, min_lat, max_lon, max_lat = bbox

    # south-west corner has the highest row, north-east corner the lowest.
    tx_min, ty_max = lonLatToTile(min_lon, min_lat, zoom)
    tx_max, ty_min = lonLatToTile(max_lon, max_lat, zoom)

    return [Core.TileCoord(zoom, tx, ty)
            for tx in range(tx_min, tx_max + 1)
            for ty in range(ty_min, ty_max + 1)]

def tileFeatures(features, zoom):
    """ Assign a list of features to tiles at one zoom level.

        Returns a dictionary of TileCoord to list of TileFeature, with
        features in their input order within each tile. Features with
        empty geometries are skipped.
    """
    tiles = {}

    for feature in features:
        coords = coveringTiles(feature.geometry, zoom)

        if not coords:
            logging.debug('TileBaker.Tiler.tileFeatures() skipped empty %s', feature.geometry.type)
            continue

        for coord in coords:
            geometry = projectGeometry(feature.geometry, coord.x, coord.y, zoom)
            tile_feature = Core.TileFeature(geometry, deepcopy(feature.properties))
            tiles.setdefault(coord, []).append(tile_feature)

    logging.debug('TileBaker.Tiler.tileFeatures() assigned %d features to %d tiles at zoom %d', len(features), len(tiles), zoom)

    return tiles
