#!/usr/bin/env python
"""tilebaker-server.py will preview your tiles.

This script is intended to be run directly from the command line.

It is intended for direct use only during development or for debugging
TileBaker. Tiles are generated once at startup and held in memory; to publish
them, write them out with tilebaker-render.py instead.

To use this built-in server, install werkzeug and then run tilebaker-server.py
with a GeoJSON file:

    tilebaker-server.py -z 0 8 -l places places.geojson

By default the script serves zoom levels 0 through 5 on http://127.0.0.1:8080/.

You can then open your browser and view a map of the layer at:

    http://localhost:8080/preview.html

Check tilebaker-server.py --help to change these defaults.
"""

if __name__ == '__main__':
    from optparse import OptionParser
    import logging, sys

    parser = OptionParser(usage="%prog [options] <geojson>")
    parser.add_option("-i", "--ip", dest="ip", default="127.0.0.1",
        help="the IP address to listen on")
    parser.add_option("-p", "--port", dest="port", type="int", default=8080,
        help="the port number to listen on")
    parser.add_option("-z", "--zooms", dest="zooms", type="int", nargs=2, default=(0, 5),
        help="the minimum and maximum zoom levels to generate")
    parser.add_option("-l", "--layer", dest="layer", default=None,
        help="the layer name, \"default\" if omitted")
    parser.add_option("--logging", dest="logging", default="info",
        help="logging level: debug, info, warning, error or critical")
    (options, args) = parser.parse_args()

    if len(args) != 1:
        parser.error("Need exactly one GeoJSON file to serve.")

    logging.basicConfig(level=getattr(logging, options.logging.upper(), logging.INFO))

    from werkzeug.serving import run_simple
    from TileBaker.Core import KnownUnknown
    from TileBaker.Preview import WSGIPreviewServer
    import TileBaker

    try:
        with open(args[0], 'rb') as file:
            geojson_bytes = file.read()
    except IOError as e:
        print("Failed to read %s: %s" % (args[0], e), file=sys.stderr)
        sys.exit(1)

    try:
        min_zoom, max_zoom = options.zooms
        tiles, metadata = TileBaker.generateTilesWithMetadata(geojson_bytes, min_zoom, max_zoom, options.layer)
    except KnownUnknown as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    app = WSGIPreviewServer(tiles, metadata)
    run_simple(options.ip, options.port, app)
