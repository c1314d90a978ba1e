''' Parse GeoJSON into TileBaker features.

Accepts a FeatureCollection or a single Feature, with Point, LineString or
Polygon geometries in longitude, latitude order. Extra position values such as
altitude are ignored.

Within a FeatureCollection a bad feature is logged and skipped, as long as at
least one good feature remains. A bad single Feature is an error.
'''
import logging
from math import isfinite

from simplejson import loads as json_loads, JSONDecodeError

from ..Core import Feature, Point, LineString, Polygon, DecodeError, UnsupportedGeometry, EmptyFeatureSet, KnownUnknown

# furthest longitude accepted, a full turn either way
max_longitude = 360.0

def _position(position):
    ''' Convert a GeoJSON position to a (lon, lat) pair of floats.

        Latitude must be inside the poles, where spherical mercator is
        defined. Longitude may wander past the antimeridian, up to a full
        turn either way.
    '''
    if not isinstance(position, (list, tuple)) or len(position) < 2:
        raise DecodeError('Bad position: %s' % repr(position))

    lon, lat = position[:2]

    for number in (lon, lat):
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            raise DecodeError('Bad position: %s' % repr(position))

    try:
        lon, lat = float(lon), float(lat)
    except OverflowError:
        raise DecodeError('Position out of range: %s' % repr(position)[:64])

    if not (isfinite(lon) and isfinite(lat)):
        raise DecodeError('Position is not finite: %s' % repr(position))

    if not -90.0 < lat < 90.0:
        raise DecodeError('Latitude out of range: %s' % repr(position))

    if not -max_longitude <= lon <= max_longitude:
        raise DecodeError('Longitude out of range: %s' % repr(position))

    return lon, lat

def _positions(positions):
    '''
    '''
    if not isinstance(positions, (list, tuple)):
        raise DecodeError('Bad list of positions: %s' % repr(positions))

    return tuple([_position(position) for position in positions])

def parse_geometry(geometry):
    ''' Convert a GeoJSON geometry dictionary to a Point, LineString or Polygon.
    '''
    if not isinstance(geometry, dict) or 'type' not in geometry:
        raise DecodeError('Bad geometry: %s' % repr(geometry))

    geom_type = geometry['type']
    coordinates = geometry.get('coordinates')

    if geom_type == 'Point':
        return Point(*_position(coordinates))

    elif geom_type == 'LineString':
        return LineString(_positions(coordinates))

    elif geom_type == 'Polygon':
        if not isinstance(coordinates, (list, tuple)):
            raise DecodeError('Bad polygon rings: %s' % repr(coordinates))

        return Polygon(tuple([_positions(ring) for ring in coordinates]))

    raise UnsupportedGeometry('Unsupported geometry type: %s' % geom_type)

def parse_feature(feature):
    ''' Convert a GeoJSON feature dictionary to a Feature.

        Null properties become an empty dictionary.
    '''
    if not isinstance(feature, dict) or feature.get('type') != 'Feature':
        raise DecodeError('Not a GeoJSON Feature: %s' % repr(feature)[:64])

    if feature.get('geometry') is None:
        raise DecodeError('No geometry')

    geometry = parse_geometry(feature['geometry'])
    properties = feature.get('properties')

    if properties is None:
        properties = {}

    elif not isinstance(properties, dict):
        raise DecodeError('Bad properties: %s' % repr(properties)[:64])

    return Feature(geometry, properties)

def parse_collection(collection):
    ''' Convert a GeoJSON feature collection dictionary to a list of Features.
    '''
    features = []

    if not isinstance(collection.get('features'), list):
        raise DecodeError('FeatureCollection has no list of features')

    for (index, feature) in enumerate(collection['features']):
        try:
            features.append(parse_feature(feature))
        except KnownUnknown as e:
            logging.warning('TileBaker.VecTiles.geojson.parse_collection() skipped feature %d: %s', index, e)

    if not features:
        raise EmptyFeatureSet('No valid features found')

    return features

def parse(data):
    ''' Parse GeoJSON bytes or text into a list of Features.
    '''
    if isinstance(data, bytes):
        try:
            data = data.decode('utf8')
        except UnicodeDecodeError as e:
            raise DecodeError('UTF-8 conversion error: %s' % e)

    try:
        document = json_loads(data)
    except JSONDecodeError as e:
        raise DecodeError('GeoJSON parse error: %s' % e)

    if not isinstance(document, dict):
        raise DecodeError('Unsupported GeoJSON format')

    if document.get('type') == 'FeatureCollection':
        features = parse_collection(document)

    elif document.get('type') == 'Feature':
        features = [parse_feature(document)]

    else:
        raise DecodeError('Unsupported GeoJSON format: %s' % document.get('type'))

    logging.debug('TileBaker.VecTiles.geojson.parse() found %d features', len(features))

    return features

def decode(file):
    ''' Decode a GeoJSON file into a list of Features.
    '''
    return parse(file.read())
