#!/usr/bin/env python
"""tilebaker-inspect.py will show you what's in your tiles.

This script is intended to be run directly. This example prints the layers
and features of one tile written by tilebaker-render.py:

    tilebaker-inspect.py tiles/5/28/12.pbf

Output for this sample might look like this:

    tiles/5/28/12.pbf
      layer "places", extent 4096, 1 features
        0 Point {"name": "Tokyo"}

See `tilebaker-inspect.py --help` for more information.
"""

from optparse import OptionParser

from simplejson import dumps as json_dumps

from TileBaker.Core import KnownUnknown
from TileBaker.VecTiles import mvt

parser = OptionParser(usage="""%prog [options] <tile.pbf>...

Each tile in the argument list is decoded and its layers and features are
printed to stdout, in order.

See `%prog --help` for info.""")

parser.add_option('-g', '--geometry', dest='geometry', action='store_true',
                  help='Print feature coordinates, not just geometry types.')

def describeTile(layers, show_geometry):
    """ Generate lines of text for a decoded tile.
    """
    for (name, layer) in sorted(layers.items()):
        yield '  layer %s, extent %d, %d features' % (json_dumps(name), layer['extent'], len(layer['features']))

        for feature in layer['features']:
            geometry = feature['geometry']
            properties = json_dumps(feature['properties'], sort_keys=True)

            if show_geometry:
                yield '    %s %s %s %s' % (feature.get('id'), geometry['type'], json_dumps(geometry['coordinates']), properties)
            else:
                yield '    %s %s %s' % (feature.get('id'), geometry['type'], properties)

if __name__ == '__main__':
    options, paths = parser.parse_args()

    if not paths:
        parser.error('Need at least one tile to inspect.')

    for path in paths:
        try:
            with open(path, 'rb') as file:
                layers = mvt.decode(file)
        except IOError as e:
            parser.error('Failed to read %s: %s' % (path, e))
        except KnownUnknown as e:
            parser.error(str(e))

        print(path)

        for line in describeTile(layers, options.geometry):
            print(line)
