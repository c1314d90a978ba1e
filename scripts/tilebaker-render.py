#!/usr/bin/env python
"""tilebaker-render.py will bake your tiles.

This script is intended to be run directly. This example will write MVT tiles
for zoom levels 0 through 5 from a GeoJSON file of places to a directory:

    tilebaker-render.py places.geojson ./tiles 0 5 places

The same tiles can go into an MBTiles tileset or a zip archive instead:

    tilebaker-render.py --to-mbtiles places.geojson places.mbtiles 0 5 places
    tilebaker-render.py --to-zip places.geojson places.zip 0 5 places

Or everything can be read from a configuration file, see TileBaker.Config:

    tilebaker-render.py -c ./config.json

See `tilebaker-render.py --help` for more information.
"""

import logging
from sys import stderr
from optparse import OptionParser

from TileBaker import parseConfig, renderConfiguration, Config
from TileBaker.Core import KnownUnknown
from TileBaker import Outputs

parser = OptionParser(usage="""%prog [options] <geojson> <output> <minzoom> <maxzoom> [layer]

Every tile from minzoom to maxzoom that has something in it is written to the
output, a directory of {z}/{x}/{y}.pbf files by default, along with a
metadata.json file. Layer name defaults to "default".

With a configuration file (-c), no positional arguments are needed.

See `%prog --help` for info.""")

defaults = dict(quiet=False, output_name='disk')

parser.set_defaults(**defaults)

parser.add_option('-c', '--config', dest='config',
                  help='Path to configuration file.')

parser.add_option('--to-mbtiles', dest='output_name', action='store_const', const='mbtiles',
                  help='Write tiles to an MBTiles 1.1 tileset. See http://mbtiles.org for more information.')

parser.add_option('--to-zip', dest='output_name', action='store_const', const='zip',
                  help='Write tiles to a zip archive.')

parser.add_option('-q', action='store_true', dest='quiet',
                  help='Suppress chatty output.')

parser.add_option('--logging', dest='logging',
                  help='Logging level: debug, info, warning, error or critical.')

def buildOutput(name, location):
    """ Build an output from a short name and a local path.
    """
    return Outputs.getOutputByName(name)(location)

if __name__ == '__main__':
    options, args = parser.parse_args()

    if options.logging:
        logging.basicConfig(level=getattr(logging, options.logging.upper(), logging.WARNING))

    try:
        if options.config is not None:
            if args:
                raise KnownUnknown('Unexpected arguments with a configuration file: %s' % ' '.join(args))

            config = parseConfig(options.config)

        elif len(args) in (4, 5):
            source, location, min_zoom, max_zoom = args[:4]
            layer = (args[4:] or [None])[0]

            try:
                min_zoom, max_zoom = int(min_zoom), int(max_zoom)
            except ValueError:
                raise KnownUnknown('"%s" and "%s" are not zoom levels I understand.' % (min_zoom, max_zoom))

            output = buildOutput(options.output_name, location)
            config = Config.Configuration(source, layer or 'default', min_zoom, max_zoom, output, '.')

        else:
            raise KnownUnknown('Need a configuration file (-c) or GeoJSON, output, minzoom and maxzoom arguments.')

        tiles, metadata = renderConfiguration(config)

    except KnownUnknown as e:
        parser.error(str(e))

    if not options.quiet:
        print('%d tiles for layer "%s", zooms %d-%d, bounds %s' % (len(tiles), metadata.layer_name,
              metadata.min_zoom, metadata.max_zoom, ','.join(map(str, metadata.bounds))), file=stderr)
