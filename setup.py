#!/usr/bin/env python

from setuptools import setup


version = open('TileBaker/VERSION', 'r').read().strip()


requires = ['protobuf >=4.22', 'mapbox-vector-tile >=2.0', 'simplejson', 'Werkzeug']


setup(name='TileBaker',
      version=version,
      description='Bake GeoJSON features into a pyramid of Mapbox Vector Tiles.',
      install_requires=requires,
      extras_require={'test': ['pytest']},
      packages=['TileBaker',
                'TileBaker.VecTiles'],
      scripts=['scripts/tilebaker-render.py', 'scripts/tilebaker-inspect.py', 'scripts/tilebaker-server.py'],
      package_data={'TileBaker': ['VERSION']},
      license='BSD')
