""" The core class bits of TileBaker.

Features are parsed from GeoJSON into a small set of immutable tuples. Each
Feature pairs a geometry with an ordered dictionary of properties:

    Feature(geometry=Point(139.7671, 35.6812), properties={'name': 'Tokyo'})

Geometry is one of exactly three shapes, each with a "type" discriminator:

- Point(x, y)
- LineString(coords), coords a tuple of (x, y) pairs.
- Polygon(rings), rings a tuple of rings, exterior first then holes. Rings
  are closed, first vertex equal to last.

The same three shapes hold geographic coordinates in degrees when parsed, and
signed integer tile coordinates once a feature has been assigned to a tile by
TileBaker.Tiler. In that second form a feature is a TileFeature.

A TileCoord is a zoom, column and row in the usual slippy map numbering, with
the origin in the top-left corner:

    >>> TileCoord(5, 28, 12).path()
    '5/28/12.pbf'

Generated tiles come back as EncodedTile tuples of coordinate, relative path
and MVT bytes. TileSetMetadata describes the whole pyramid: zoom range, layer
name, and the geographic bounds and center of the input features.
"""

from collections import namedtuple
from sys import modules

class KnownUnknown(Exception):
    """ There are known unknowns. That is to say, there are things that we now know we don't know.

        This exception gets thrown in a couple places where common mistakes are made.
    """
    pass

class DecodeError(KnownUnknown):
    """ Input bytes are not text, not JSON, or not a usable GeoJSON document.
    """
    pass

class UnsupportedGeometry(KnownUnknown):
    """ A geometry other than Point, LineString or Polygon.
    """
    pass

class EmptyFeatureSet(KnownUnknown):
    """ No usable features, either after parsing or when encoding a tile.
    """
    pass

class EmptyGeometry(KnownUnknown):
    """ A line with no points or a polygon with no rings reached the encoder.
    """
    pass

class EncodeOutputError(KnownUnknown):
    """ The protocol buffer framing step failed.
    """
    pass

class Point(namedtuple('Point', ('x', 'y'))):
    __slots__ = ()
    type = 'Point'

class LineString(namedtuple('LineString', ('coords', ))):
    __slots__ = ()
    type = 'LineString'

class Polygon(namedtuple('Polygon', ('rings', ))):
    __slots__ = ()
    type = 'Polygon'

    def exterior(self):
        return self.rings[0] if self.rings else ()

    def interiors(self):
        return self.rings[1:]

geometry_types = Point, LineString, Polygon

Feature = namedtuple('Feature', ('geometry', 'properties'))

TileFeature = namedtuple('TileFeature', ('geometry', 'properties'))

class TileCoord(namedtuple('TileCoord', ('z', 'x', 'y'))):
    """ Zoom, column and row of a single tile.
    """
    __slots__ = ()

    def path(self):
        """ Relative output path for this tile, e.g. "5/28/12.pbf".
        """
        return '%d/%d/%d.pbf' % (self.z, self.x, self.y)

    def __str__(self):
        return '%d/%d/%d' % (self.z, self.x, self.y)

EncodedTile = namedtuple('EncodedTile', ('coord', 'path', 'data'))

TileSetMetadata = namedtuple('TileSetMetadata', ('min_zoom', 'max_zoom', 'layer_name', 'bounds', 'center'))

def checkGeometry(geometry):
    """ Return a geometry's type name, or raise UnsupportedGeometry.
    """
    if not isinstance(geometry, geometry_types):
        raise UnsupportedGeometry('Unsupported geometry: %s' % repr(geometry))

    return geometry.type

def loadClassPath(classpath):
    """ Load external class based on a path.

        Example classpath: "Module.Submodule:Classname".

        Equivalent classpath: "Module.Submodule.Classname".
    """
    if ':' in classpath:
        modname, objname = classpath.split(':', 1)

        try:
            __import__(modname)
            module = modules[modname]
            _class = getattr(module, objname)

        except (ImportError, AttributeError, KeyError) as e:
            raise KnownUnknown('Tried to import %s, but: %s' % (classpath, e))

    else:
        classpath = classpath.split('.')

        try:
            module = __import__('.'.join(classpath[:-1]), fromlist=str(classpath[-1]))
        except (ImportError, ValueError) as e:
            raise KnownUnknown('Tried to import %s, but: %s' % ('.'.join(classpath), e))

        try:
            _class = getattr(module, classpath[-1])
        except AttributeError as e:
            raise KnownUnknown('Tried to import %s, but: %s' % ('.'.join(classpath), e))

    return _class
