from unittest import TestCase, mock
from zipfile import ZipFile
from os.path import exists, join as pathjoin
import shutil
import os

from simplejson import loads as json_loads

import TileBaker
from TileBaker import Core, Outputs, MBTiles

from . import utils

def sample_tiles():
    data = utils.collection(utils.feature('Point', [139.7671, 35.6812], name='Tokyo'),
                            utils.feature('Point', [-0.1276, 51.5072], name='London'))

    return TileBaker.generateTilesWithMetadata(data, 0, 2, 'places')

class MetadataTests(TestCase):

    def test_metadata(self):
        '''Metadata looks like tippecanoe's'''
        metadata = Core.TileSetMetadata(0, 5, 'places', (-10.0, -20.0, 30.0, 40.0), (10.0, 10.0))
        info = Outputs.metadataJSON(metadata)

        self.assertEqual(info['name'], 'places')
        self.assertEqual(info['format'], 'pbf')
        self.assertEqual(info['minzoom'], '0')
        self.assertEqual(info['maxzoom'], '5')
        self.assertEqual(info['bounds'], '-10.0,-20.0,30.0,40.0')
        self.assertEqual(info['center'], '10.0,10.0,2')
        self.assertEqual(info['generator'], 'TileBaker v%s' % TileBaker.__version__)

        layers = json_loads(info['json'])['vector_layers']

        self.assertEqual(layers, [dict(id='places', description='', minzoom=0, maxzoom=5, fields={})])

    def test_metadata_body(self):
        '''Serialized metadata is JSON bytes'''
        metadata = Core.TileSetMetadata(1, 2, 'places', (0.0, 0.0, 1.0, 1.0), (0.5, 0.5))
        body = Outputs.metadataBody(metadata)

        self.assertTrue(isinstance(body, bytes))
        self.assertEqual(json_loads(body.decode('utf8'))['center'], '0.5,0.5,1')

    def test_output_names(self):
        '''Outputs can be found by name, in any case'''
        self.assertTrue(Outputs.getOutputByName('Disk') is Outputs.Disk)
        self.assertTrue(Outputs.getOutputByName('ZIP') is Outputs.Zip)
        self.assertTrue(Outputs.getOutputByName('mbtiles') is Outputs.MBTilesOutput)

        with self.assertRaises(Core.KnownUnknown):
            Outputs.getOutputByName('S3')

class OutputTests(TestCase):

    def setUp(self):
        self.dirpath = utils.create_temp_dir()
        self.tiles, self.metadata = sample_tiles()

    def tearDown(self):
        shutil.rmtree(self.dirpath)

    def test_disk(self):
        '''Write tiles to a directory'''
        path = pathjoin(self.dirpath, 'tiles')
        Outputs.Disk(path, umask=0o022).save(self.tiles, self.metadata)

        for tile in self.tiles:
            with open(pathjoin(path, *tile.path.split('/')), 'rb') as file:
                self.assertEqual(file.read(), tile.data)

        with open(pathjoin(path, 'metadata.json')) as file:
            self.assertEqual(json_loads(file.read())['name'], 'places')

        self.assertEqual(os.stat(pathjoin(path, '0', '0', '0.pbf')).st_mode & 0o777, 0o644)
        self.assertEqual([name for name in os.listdir(pathjoin(path, '0', '0')) if name.endswith('.tmp')], [])

    def test_disk_failed_write(self):
        '''A failed write leaves no temporary files behind'''
        disk = Outputs.Disk(pathjoin(self.dirpath, 'tiles'))

        with self.assertRaises(TypeError):
            disk._write('0/0/0.pbf', 'not bytes')

        with mock.patch('os.replace', side_effect=OSError('disk full')):
            with self.assertRaises(OSError):
                disk._write('0/0/0.pbf', b'bytes')

        self.assertEqual(os.listdir(pathjoin(self.dirpath, 'tiles', '0', '0')), [])

    def test_zip(self):
        '''Write tiles to a zip archive'''
        filename = pathjoin(self.dirpath, 'tiles.zip')
        Outputs.Zip(filename).save(self.tiles, self.metadata)

        with ZipFile(filename) as archive:
            names = archive.namelist()

            self.assertTrue('places/metadata.json' in names)
            self.assertEqual(len(names), len(self.tiles) + 1)

            for tile in self.tiles:
                self.assertEqual(archive.read('places/' + tile.path), tile.data)

    def test_zip_folder(self):
        '''Zip archive folder can be named'''
        filename = pathjoin(self.dirpath, 'tiles.zip')
        Outputs.Zip(filename, 'layer').save(self.tiles, self.metadata)

        with ZipFile(filename) as archive:
            self.assertTrue('layer/0/0/0.pbf' in archive.namelist())

    def test_mbtiles(self):
        '''Write tiles to an MBTiles tileset'''
        filename = pathjoin(self.dirpath, 'tiles.mbtiles')
        Outputs.MBTilesOutput(filename).save(self.tiles, self.metadata)

        self.assertTrue(MBTiles.tileset_exists(filename))

        info = MBTiles.tileset_info(filename)

        self.assertEqual(info['name'], 'places')
        self.assertEqual(info['format'], 'pbf')
        self.assertEqual(info['minzoom'], '0')
        self.assertEqual(info['maxzoom'], '2')

        self.assertEqual(MBTiles.list_tiles(filename), [tuple(tile.coord) for tile in self.tiles])

        for tile in self.tiles:
            self.assertEqual(MBTiles.get_tile(filename, tile.coord), tile.data)

        self.assertIsNone(MBTiles.get_tile(filename, Core.TileCoord(2, 0, 3)))

    def test_mbtiles_again(self):
        '''Saving twice replaces tiles'''
        filename = pathjoin(self.dirpath, 'tiles.mbtiles')
        Outputs.MBTilesOutput(filename).save(self.tiles, self.metadata)
        Outputs.MBTilesOutput(filename).save(self.tiles, self.metadata)

        self.assertEqual(len(MBTiles.list_tiles(filename)), len(self.tiles))

    def test_mbtiles_not_a_tileset(self):
        '''Something else in the way of a tileset is an error'''
        filename = utils.create_temp_file(b'not a tileset', '.mbtiles')

        try:
            with self.assertRaises(Core.KnownUnknown):
                Outputs.MBTilesOutput(filename).save(self.tiles, self.metadata)
        finally:
            os.remove(filename)

    def test_mbtiles_format(self):
        '''Tileset formats are limited to known ones'''
        filename = pathjoin(self.dirpath, 'bad.mbtiles')

        with self.assertRaises(Core.KnownUnknown):
            MBTiles.create_tileset(filename, 'bad', 'overlay', '1', 'bad', 'gif')

        self.assertFalse(exists(filename))
