""" The output bits of TileBaker.

An Output writes a finished pyramid of tiles somewhere, along with a
metadata.json document in the style of tippecanoe that map viewers use to find
the layer, zoom range and bounds. A few outputs are found here, and it's
possible to define your own and name it by class in a configuration file.

All outputs have a save(tiles, metadata) method, with a list of
Core.EncodedTile and a Core.TileSetMetadata.

Example configuration:

    "output": {
      "name": "Disk",
      "path": "/tmp/tiles",
      "umask": "0000"
    }

Disk writes a directory tree of {z}/{x}/{y}.pbf files with metadata.json at the
top, Zip writes the same tree into a zip archive inside a folder named after
the layer, and MBTiles writes an MBTiles 1.1 tileset.

Custom outputs are named by class and keyword arguments:

    "output": {
      "class": "Module:Classname",
      "kwargs": {"frob": "yes"}
    }
"""

import os
import logging

from tempfile import mkstemp
from os.path import dirname, exists, join as pathjoin
from zipfile import ZipFile, ZIP_DEFLATED

from simplejson import dumps as json_dumps

from . import __version__
from . import MBTiles
from .Core import KnownUnknown

def metadataJSON(metadata):
    """ Build a tippecanoe-style metadata dictionary for a tile set.

        Numbers other than the zoom levels in the embedded "json"
        are given as strings, as tippecanoe does.
    """
    layer_name = metadata.layer_name
    min_zoom, max_zoom = metadata.min_zoom, metadata.max_zoom
    center_zoom = (min_zoom + max_zoom) // 2

    vector_layers = [dict(id=layer_name, description='', minzoom=min_zoom, maxzoom=max_zoom, fields={})]
    tilestats = dict(layerCount=1, layers=[dict(layer=layer_name, count=0, geometry='Unknown', attributeCount=0, attributes=[])])

    return {
        'name': layer_name,
        'description': layer_name,
        'version': '1',
        'minzoom': str(min_zoom),
        'maxzoom': str(max_zoom),
        'center': '%s,%s,%d' % (metadata.center[0], metadata.center[1], center_zoom),
        'bounds': '%s,%s,%s,%s' % tuple(metadata.bounds),
        'type': 'overlay',
        'format': 'pbf',
        'generator': 'TileBaker v%s' % __version__,
        'generator_options': 'Tile generation from GeoJSON',
        'json': json_dumps(dict(vector_layers=vector_layers, tilestats=tilestats)),
        }

def metadataBody(metadata):
    """ Serialized metadata.json, as bytes.
    """
    return json_dumps(metadataJSON(metadata), indent=2).encode('utf8')

class Disk:
    """ Writes tiles to a directory.

        Example configuration:

            "output": {
              "name": "Disk",
              "path": "/tmp/tiles",
              "umask": "0000"
            }

        Extra parameters:
        - path: required local directory path where files should be stored.
        - umask: optional string representation of octal permission mask
          for stored files. Defaults to 0022.
    """
    def __init__(self, path, umask=0o022):
        self.path = path
        self.umask = int(umask)

    def _write(self, relpath, body):
        """ Write one file, creating directories as needed.
        """
        fullpath = pathjoin(self.path, *relpath.split('/'))

        umask_old = os.umask(self.umask)

        try:
            os.makedirs(dirname(fullpath), 0o777&~self.umask, exist_ok=True)
        finally:
            os.umask(umask_old)

        fh, tmp_path = mkstemp(dir=dirname(fullpath), suffix='.tmp')

        try:
            with os.fdopen(fh, 'wb') as file:
                file.write(body)

            os.replace(tmp_path, fullpath)
        finally:
            # only left over if writing or replacing failed
            if exists(tmp_path):
                os.remove(tmp_path)

        os.chmod(fullpath, 0o666&~self.umask)

    def save(self, tiles, metadata):
        """ Save tiles and metadata.json under the output path.
        """
        for tile in tiles:
            self._write(tile.path, tile.data)

        self._write('metadata.json', metadataBody(metadata))

        logging.info('TileBaker.Outputs.Disk.save() wrote %d tiles to %s', len(tiles), self.path)

class Zip:
    """ Writes tiles to a zip archive.

        Example configuration:

            "output": {
              "name": "Zip",
              "filename": "/tmp/tiles.zip"
            }

        Extra parameters:
        - filename: required local path of the zip file, replaced if it exists.
        - folder: optional name of the folder inside the archive.
          Defaults to the layer name.
    """
    def __init__(self, filename, folder=None):
        self.filename = filename
        self.folder = folder

    def save(self, tiles, metadata):
        """ Save tiles and metadata.json into the archive.
        """
        folder = self.folder or metadata.layer_name

        with ZipFile(self.filename, 'w', ZIP_DEFLATED) as archive:
            archive.writestr('%s/metadata.json' % folder, metadataBody(metadata))

            for tile in tiles:
                archive.writestr('%s/%s' % (folder, tile.path), tile.data)

        logging.info('TileBaker.Outputs.Zip.save() wrote %d tiles to %s', len(tiles), self.filename)

class MBTilesOutput:
    """ Writes tiles to an MBTiles tileset.

        Example configuration:

            "output": {
              "name": "MBTiles",
              "filename": "/tmp/tiles.mbtiles"
            }

        Extra parameters:
        - filename: required local path of the tileset. An existing tileset
          is added to, anything else at that path is an error.
    """
    def __init__(self, filename):
        self.filename = filename

    def save(self, tiles, metadata):
        """ Save tiles into the tileset, creating it first if needed.
        """
        if not MBTiles.tileset_exists(self.filename):
            if exists(self.filename):
                raise KnownUnknown('"%s" exists and is not an MBTiles tileset' % self.filename)

            info = metadataJSON(metadata)
            extra = dict([(key, info[key]) for key in ('minzoom', 'maxzoom', 'center', 'json', 'generator')])

            MBTiles.create_tileset(self.filename, info['name'], info['type'], info['version'],
                                   info['description'], info['format'], info['bounds'], extra)

        MBTiles.put_tiles(self.filename, tiles)

        logging.info('TileBaker.Outputs.MBTilesOutput.save() wrote %d tiles to %s', len(tiles), self.filename)

def getOutputByName(name):
    """ Retrieve an output class by name.

        Raise an exception if the name doesn't work out.
    """
    if name.lower() == 'disk':
        return Disk

    elif name.lower() == 'zip':
        return Zip

    elif name.lower() == 'mbtiles':
        return MBTilesOutput

    raise KnownUnknown('Unknown output: "%s"' % name)
