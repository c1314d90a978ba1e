from tempfile import mkstemp, mkdtemp
from io import BytesIO
import os

from simplejson import dumps as json_dumps

from TileBaker.VecTiles import mvt

def feature(geometry_type, coordinates, **properties):
    '''
    Helper method to build one GeoJSON feature dictionary
    '''
    return {'type': 'Feature', 'properties': properties,
            'geometry': {'type': geometry_type, 'coordinates': coordinates}}

def collection(*features):
    '''
    Helper method to serialize GeoJSON features to bytes
    '''
    return json_dumps({'type': 'FeatureCollection', 'features': list(features)}).encode('utf8')

def decode_tile(data):
    '''
    Helper method to decode MVT bytes into a dictionary of layers
    '''
    return mvt.decode(BytesIO(data))

def create_temp_file(buffer, suffix=''):
    '''
    Helper method to create temp file on disk. Caller is responsible
    for deleting file once done
    '''
    fd, absolute_file_name = mkstemp(suffix=suffix)
    file = os.fdopen(fd, 'w+b')
    file.write(buffer)
    file.close()
    return absolute_file_name

def create_temp_dir():
    '''
    Helper method to create temp directory on disk. Caller is responsible
    for deleting it once done
    '''
    return mkdtemp(prefix='tilebaker-')
