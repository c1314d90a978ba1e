''' Implementation of MVT (Mapbox Vector Tiles) data format.

Each tile holds a single layer of features in tile coordinates, 0 to 4096
across, encoded as described in https://github.com/mapbox/vector-tile-spec:

- Geometry is a stream of 32-bit integers. Each command integer packs a
  command id in the low three bits and a repeat count above them: MoveTo (1),
  LineTo (2) and ClosePath (7). MoveTo and LineTo are followed by pairs of
  parameters, each a zig-zag encoded delta from the previous point.

- Properties become "tags", pairs of indexes into the layer's keys and values.
  Keys and values are shared by all features in a layer, so a repeated
  property costs only its two indexes.

A point at tile coordinates (25, 17) encodes to three integers:

    >>> from TileBaker.Core import Point
    >>> encode_geometry(Point(25, 17))
    (1, [9, 50, 34])

Polygon rings repeat their first vertex at the end, but MVT closes rings with
ClosePath instead, so the last vertex is dropped. Rings with fewer than four
vertices can't describe an area and are left out entirely.

Property values are stored as strings, 64-bit integers, doubles or booleans.
Two values share a slot in the values list when they have the same type and
the same content; floating point values are compared by their repr() so that
every value, NaN included, has a stable dictionary key. Anything else, such as
JSON null, gets an empty placeholder value.
'''
from collections import namedtuple

import logging

from ..Core import EmptyFeatureSet, EmptyGeometry, EncodeOutputError, checkGeometry
from . import pbf

# coordindates are scaled to this range within tile
extents = 4096

# version of the vector tile specification
version = 2

MOVE_TO, LINE_TO, CLOSE_PATH = 1, 2, 7

geom_types = {'Point': pbf.POINT, 'LineString': pbf.LINESTRING, 'Polygon': pbf.POLYGON}

_int64_min, _int64_max = -(1 << 63), (1 << 63) - 1

ValueKey = namedtuple('ValueKey', ('tag', 'canonical'))

def command(id, count):
    ''' Pack a command id and repeat count into one command integer.
    '''
    return (id & 0x7) | (count << 3)

def zigzag(n):
    ''' Zig-zag encode a signed 32-bit integer, so that small negative
        numbers stay small: 0, -1, 1, -2, 2 ... become 0, 1, 2, 3, 4 ...
    '''
    n = ((n + 0x80000000) & 0xFFFFFFFF) - 0x80000000
    return ((n << 1) ^ (n >> 31)) & 0xFFFFFFFF

def unzigzag(z):
    ''' Inverse of zigzag().
    '''
    return (z >> 1) ^ -(z & 1)

def _parameters(points, cursor):
    ''' Delta-encode points from a cursor position, return parameters and new cursor.
    '''
    parameters = []
    x0, y0 = cursor

    for (x, y) in points:
        parameters.append(zigzag(x - x0))
        parameters.append(zigzag(y - y0))
        x0, y0 = x, y

    return parameters, (x0, y0)

def _path(points, cursor):
    ''' MoveTo the first point and LineTo the rest.
    '''
    parameters, cursor = _parameters(points[:1], cursor)
    geometry = [command(MOVE_TO, 1)] + parameters

    if len(points) > 1:
        parameters, cursor = _parameters(points[1:], cursor)
        geometry += [command(LINE_TO, len(points) - 1)] + parameters

    return geometry, cursor

def encode_geometry(geometry):
    ''' Encode a tile geometry, return an MVT GeomType and list of integers.

        The cursor carries over from ring to ring within a polygon,
        so each ring's MoveTo is relative to the end of the last one.
    '''
    geom_type = checkGeometry(geometry)
    cursor = 0, 0

    if geom_type == 'Point':
        parameters, cursor = _parameters([(geometry.x, geometry.y)], cursor)
        return geom_types[geom_type], [command(MOVE_TO, 1)] + parameters

    elif geom_type == 'LineString':
        if not geometry.coords:
            raise EmptyGeometry('LineString is empty')

        commands, cursor = _path(geometry.coords, cursor)
        return geom_types[geom_type], commands

    if not geometry.rings:
        raise EmptyGeometry('Polygon is empty')

    commands = []

    for ring in geometry.rings:
        if len(ring) < 4:
            # too short to close, even counting the repeated first vertex.
            continue

        path, cursor = _path(ring[:-1], cursor)
        commands += path + [command(CLOSE_PATH, 1)]

    return geom_types[geom_type], commands

def value_key(value):
    ''' Build a hashable ValueKey that identifies a property value by type and content.
    '''
    if isinstance(value, bool):
        return ValueKey('bool', value)

    if isinstance(value, int):
        if _int64_min <= value <= _int64_max:
            return ValueKey('int', value)

        # too big for int_value.
        try:
            number = float(value)
        except OverflowError:
            number = float('inf') if value > 0 else float('-inf')

        return ValueKey('double', repr(number))

    if isinstance(value, float):
        return ValueKey('double', repr(value))

    if isinstance(value, str):
        return ValueKey('string', value)

    if value is None:
        return ValueKey('null', None)

    return ValueKey('other', repr(value))

def _fill_value(message, key, value):
    ''' Set the one field of a Tile.value message that matches a ValueKey.
    '''
    if key.tag == 'string':
        message.string_value = value

    elif key.tag == 'int':
        message.int_value = value

    elif key.tag == 'double':
        message.double_value = float(key.canonical)

    elif key.tag == 'bool':
        message.bool_value = value

def encode_tile(features, layer_name):
    ''' Build a Tile message with one layer from a list of TileFeatures.

        Raise EmptyFeatureSet for an empty list, there is no empty tile.
    '''
    if not features:
        raise EmptyFeatureSet('Cannot encode a tile with no features')

    tile = pbf.Tile()
    layer = tile.layers.add()
    layer.version = version
    layer.name = layer_name
    layer.extent = extents

    key_index, value_index = {}, {}

    for (index, feature) in enumerate(features):
        tags = []

        for (key, value) in feature.properties.items():
            if key not in key_index:
                key_index[key] = len(layer.keys)
                layer.keys.append(key)

            vkey = value_key(value)

            if vkey not in value_index:
                value_index[vkey] = len(layer.values)
                _fill_value(layer.values.add(), vkey, value)

            tags.extend((key_index[key], value_index[vkey]))

        geom_type, geometry = encode_geometry(feature.geometry)

        encoded = layer.features.add()
        encoded.id = index
        encoded.tags.extend(tags)
        encoded.type = geom_type

        try:
            encoded.geometry.extend(geometry)
        except ValueError as e:
            raise EncodeOutputError('Failed to encode geometry of feature %d: %s' % (index, e))

    logging.debug('TileBaker.VecTiles.mvt.encode_tile() encoded %d features, %d keys, %d values', len(features), len(layer.keys), len(layer.values))

    return tile

def tile_bytes(features, layer_name):
    ''' Encode a list of TileFeatures to MVT bytes.
    '''
    return pbf.serialize(encode_tile(features, layer_name))

def encode(file, features, layer_name=''):
    ''' Encode a list of TileFeatures into an MVT stream.
    '''
    file.write(tile_bytes(features, layer_name))

def decode(file):
    ''' Decode an MVT file into a dictionary of layers, see pbf.decode().
    '''
    return pbf.decode(file)
