''' Protocol buffer framing for Mapbox Vector Tiles.

The Tile message class is the compiled version 2.1 schema from
https://github.com/mapbox/vector-tile-spec, as shipped with mapbox_vector_tile:

    message tile {
        enum GeomType { UNKNOWN = 0; POINT = 1; LINESTRING = 2; POLYGON = 3; }

        message value { string_value, float_value, double_value,
                        int_value, uint_value, sint_value, bool_value }

        message feature { id, repeated packed tags, type, repeated packed geometry }

        message layer { required version = 15, required name, repeated features,
                        repeated keys, repeated values, extent [ default = 4096 ] }

        repeated layer layers = 3;
    }

TileBaker.VecTiles.mvt fills in Tile messages; serialize() and parse() turn
them into bytes and back, and decode() reads a whole tile into plain Python
dictionaries with mapbox_vector_tile for inspection.
'''
from google.protobuf.message import EncodeError, DecodeError as ProtobufDecodeError

import mapbox_vector_tile
from mapbox_vector_tile.Mapbox import vector_tile_pb2

from ..Core import EncodeOutputError, DecodeError

Tile = vector_tile_pb2.tile

UNKNOWN, POINT, LINESTRING, POLYGON = Tile.Unknown, Tile.Point, Tile.LineString, Tile.Polygon

def serialize(tile):
    ''' Serialize a Tile message to bytes.

        Raise EncodeOutputError if the message can't be framed,
        e.g. when a layer is missing its required name.
    '''
    try:
        return tile.SerializeToString()
    except EncodeError as e:
        raise EncodeOutputError('Failed to encode tile: %s' % e)

def parse(data):
    ''' Parse bytes into a Tile message.
    '''
    try:
        return Tile.FromString(data)
    except ProtobufDecodeError as e:
        raise DecodeError('Failed to parse tile: %s' % e)

def decode(file):
    ''' Decode an MVT file into a dictionary of layers keyed by layer name.

        Feature geometries come back as GeoJSON-like dictionaries in tile
        coordinates, with y increasing downward as it was encoded.
    '''
    data = file.read()

    try:
        return mapbox_vector_tile.decode(data, default_options={'y_coord_down': True})
    except ProtobufDecodeError as e:
        raise DecodeError('Failed to decode tile: %s' % e)
