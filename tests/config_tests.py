from unittest import TestCase
from os.path import dirname, join as pathjoin
import shutil
import os

from simplejson import dumps as json_dumps

from TileBaker import Core, Outputs, Config, parseConfig, renderConfiguration

from . import utils

class ConfigTests(TestCase):

    def test_config(self):
        '''Read configuration and verify successful read'''

        config_content = {
            "source": "places.geojson",
            "layer": "places",
            "zooms": {"min": 2, "max": 7},
            "output": {"name": "Disk", "path": "tiles", "umask": "0002"}
        }

        config = Config.buildConfiguration(config_content, '/var/data')

        self.assertEqual(config.source, '/var/data/places.geojson')
        self.assertEqual(config.layer_name, 'places')
        self.assertEqual((config.min_zoom, config.max_zoom), (2, 7))
        self.assertTrue(isinstance(config.output, Outputs.Disk))
        self.assertEqual(config.output.path, '/var/data/tiles')
        self.assertEqual(config.output.umask, 0o002)

    def test_config_defaults(self):
        '''Layer and zooms are optional'''
        config = parseConfig({"source": "/tmp/places.geojson", "output": {"name": "zip", "filename": "out.zip"}})

        self.assertEqual(config.source, '/tmp/places.geojson')
        self.assertEqual(config.layer_name, 'default')
        self.assertEqual((config.min_zoom, config.max_zoom), (0, 5))
        self.assertTrue(isinstance(config.output, Outputs.Zip))
        self.assertEqual(config.output.filename, './out.zip')
        self.assertIsNone(config.output.folder)

    def test_config_outputs(self):
        '''Outputs by name and by class'''
        config = parseConfig({"source": "x", "output": {"name": "MBTiles", "filename": "file:///tmp/x.mbtiles"}})
        self.assertTrue(isinstance(config.output, Outputs.MBTilesOutput))
        self.assertEqual(config.output.filename, '/tmp/x.mbtiles')

        config = parseConfig({"source": "x", "output": {"class": "TileBaker.Outputs:Zip", "kwargs": {"filename": "/tmp/x.zip", "folder": "f"}}})
        self.assertTrue(isinstance(config.output, Outputs.Zip))
        self.assertEqual(config.output.folder, 'f')

        config = parseConfig({"source": "x", "output": {"class": "TileBaker.Outputs.Disk", "kwargs": {"path": "/tmp/x"}}})
        self.assertTrue(isinstance(config.output, Outputs.Disk))

    def test_config_errors(self):
        '''Missing or bad settings are known unknowns'''
        output = {"name": "Disk", "path": "tiles"}

        for config_content in (
            {"output": output},
            {"source": "x"},
            {"source": "x", "output": {"name": "S3"}},
            {"source": "x", "output": {"name": "Disk"}},
            {"source": "x", "output": {"path": "tiles"}},
            {"source": "x", "output": {"class": "TileBaker.Nothing:Here"}},
            {"source": "x", "output": output, "zooms": {"min": 4, "max": 2}},
            {"source": "x", "output": output, "zooms": {"min": "zero"}},
            {"source": "x", "output": output, "zooms": {"min": -1}},
            ):
            with self.assertRaises(Core.KnownUnknown):
                parseConfig(config_content)

    def test_local_path(self):
        '''Relative paths are relative to the configuration'''
        self.assertEqual(Config.localPath('a/b.json', '/c'), '/c/a/b.json')
        self.assertEqual(Config.localPath('/a/b.json', '/c'), '/a/b.json')
        self.assertEqual(Config.localPath('file:///a/b.json', '/c'), '/a/b.json')

class ConfigFileTests(TestCase):

    def setUp(self):
        self.dirpath = utils.create_temp_dir()

        with open(pathjoin(self.dirpath, 'places.geojson'), 'wb') as file:
            file.write(utils.collection(utils.feature('Point', [139.7671, 35.6812], name='Tokyo')))

    def tearDown(self):
        shutil.rmtree(self.dirpath)

    def test_config_file(self):
        '''Read a configuration file and render it'''
        config_content = {
            "source": "places.geojson",
            "layer": "places",
            "zooms": {"min": 0, "max": 2},
            "output": {"name": "Disk", "path": "tiles"},
        }

        with open(pathjoin(self.dirpath, 'config.json'), 'w') as file:
            file.write(json_dumps(config_content))

        config = parseConfig(pathjoin(self.dirpath, 'config.json'))

        self.assertEqual(dirname(config.source), os.path.realpath(self.dirpath))

        tiles, metadata = renderConfiguration(config)

        self.assertEqual(len(tiles), 3)
        self.assertTrue(os.path.exists(pathjoin(self.dirpath, 'tiles', '0', '0', '0.pbf')))
        self.assertTrue(os.path.exists(pathjoin(self.dirpath, 'tiles', 'metadata.json')))

    def test_bad_config_file(self):
        '''Broken or missing configuration files are known unknowns'''
        with open(pathjoin(self.dirpath, 'config.json'), 'w') as file:
            file.write('{"source": ')

        with self.assertRaises(Core.KnownUnknown):
            parseConfig(pathjoin(self.dirpath, 'config.json'))

        with self.assertRaises(Core.KnownUnknown):
            parseConfig(pathjoin(self.dirpath, 'missing.json'))

    def test_missing_source(self):
        '''A missing source file is a known unknown'''
        config = parseConfig({"source": pathjoin(self.dirpath, 'missing.geojson'),
                              "output": {"name": "Disk", "path": pathjoin(self.dirpath, 'tiles')}})

        with self.assertRaises(Core.KnownUnknown):
            renderConfiguration(config)

    def test_bad_source(self):
        '''A source that isn't GeoJSON is a decode error'''
        with open(pathjoin(self.dirpath, 'bad.geojson'), 'wb') as file:
            file.write(b'{"type": "Topology"}')

        config = parseConfig({"source": pathjoin(self.dirpath, 'bad.geojson'),
                              "output": {"name": "Disk", "path": pathjoin(self.dirpath, 'tiles')}})

        with self.assertRaises(Core.DecodeError):
            renderConfiguration(config)

        self.assertFalse(os.path.exists(pathjoin(self.dirpath, 'tiles')))
