""" The geography bits of TileBaker.

Tiles use the "spherical mercator" projection of most web maps, described in
greater detail at http://trac.openlayers.org/wiki/SphericalMercator. Three
coordinate spaces are involved:

- geographic longitude and latitude in degrees,
- planar spherical mercator meters, EPSG:900913,
- tile pixels, 256 to a tile, with the origin at the top-left of the world
  and y growing southward.

Two formulas find the tile containing a location. lonLatToTile() works
directly from degrees and is used to pick tiles for a feature; the meter-based
metersToTile() and metersToPixelInTile() place vertices within a tile. For any
finite location away from the poles both agree on the tile index:

    >>> lonLatToTile(139.7671, 35.6812, 5)
    (28, 12)
    >>> metersToTile(*lonLatToMeters(139.7671, 35.6812), zoom=5)
    (28, 12)

Latitudes of 90 degrees or more are outside the projection and are not checked
here; TileBaker.VecTiles.geojson refuses them on the way in.
"""

from math import pi, log, tan, asinh, floor

from . import Core

# Earth radius in meters
radius = 6378137.0

# half the circumference of the earth in meters
origin_shift = 2 * pi * radius / 2

# tile edge in pixels
tile_size = 256

# meters per pixel at zoom 0
initial_resolution = 2 * pi * radius / tile_size

def lonLatToMeters(lon, lat):
    """ Convert a longitude and latitude in degrees to spherical mercator meters.
    """
    mx = lon * origin_shift / 180.0
    my = log(tan((90.0 + lat) * pi / 360.0)) / (pi / 180.0)
    my = my * origin_shift / 180.0

    return mx, my

def tileCount(zoom):
    """ Number of tile columns (and rows) at a zoom level.
    """
    return 2 ** zoom

def _clamp(index, zoom):
    return min(max(index, 0), tileCount(zoom) - 1)

def lonLatToTile(lon, lat, zoom):
    """ Tile column and row containing a longitude and latitude.

        Result is clamped to the tile grid, so a finite location
        always lands on some tile.
    """
    n = tileCount(zoom)
    lat_rad = lat * pi / 180.0

    tx = int(floor((lon + 180.0) / 360.0 * n))
    ty = int(floor((1.0 - asinh(tan(lat_rad)) / pi) / 2.0 * n))

    return _clamp(tx, zoom), _clamp(ty, zoom)

def resolution(zoom):
    """ Meters per pixel at a zoom level.
    """
    return initial_resolution / tileCount(zoom)

def metersToTile(mx, my, zoom):
    """ Tile column and row containing a point in spherical mercator meters.
    """
    res = resolution(zoom)
    px = (mx + origin_shift) / res
    py = (origin_shift - my) / res

    tx = int(floor(px / tile_size))
    ty = int(floor(py / tile_size))

    return _clamp(tx, zoom), _clamp(ty, zoom)

def tileBounds(tx, ty, zoom):
    """ Spherical mercator bounds of a tile: (minx, miny, maxx, maxy).
    """
    res = resolution(zoom)

    min_x = tx * tile_size * res - origin_shift
    max_y = origin_shift - ty * tile_size * res
    max_x = (tx + 1) * tile_size * res - origin_shift
    min_y = origin_shift - (ty + 1) * tile_size * res

    return min_x, min_y, max_x, max_y

def metersToPixelInTile(mx, my, tx, ty, zoom):
    """ Pixel offset of a point from the top-left corner of a tile.

        Pixel y grows downward while mercator y grows upward.
    """
    min_x, min_y, max_x, max_y = tileBounds(tx, ty, zoom)
    res = resolution(zoom)

    px = (mx - min_x) / res
    py = (max_y - my) / res

    return px, py

def geometryBounds(geometry):
    """ Geographic bounds of a geometry: (min_lon, min_lat, max_lon, max_lat).

        Polygon holes are inside the exterior ring and do not count.
        Return None for an empty geometry.
    """
    geom_type = Core.checkGeometry(geometry)

    if geom_type == 'Point':
        return geometry.x, geometry.y, geometry.x, geometry.y

    elif geom_type == 'LineString':
        coords = geometry.coords

    else:
        coords = geometry.exterior()

    if not coords:
        return None

    xs = [x for (x, y) in coords]
    ys = [y for (x, y) in coords]

    return min(xs), min(ys), max(xs), max(ys)

def calculateBounds(features):
    """ Geographic bounds of a whole list of features.

        Return None if no feature has any coordinates.
    """
    bounds = [geometryBounds(feature.geometry) for feature in features]
    bounds = [bbox for bbox in bounds if bbox is not None]

    if not bounds:
        return None

    return (min([b[0] for b in bounds]), min([b[1] for b in bounds]),
            max([b[2] for b in bounds]), max([b[3] for b in bounds]))

def calculateCenter(bounds):
    """ Midpoint of a bounding box, as (lon, lat).
    """
    min_lon, min_lat, max_lon, max_lat = bounds

    return (min_lon + max_lon) / 2.0, (min_lat + max_lat) / 2.0
