""" A preview server for a freshly generated tile set.

WSGIPreviewServer holds one pyramid of tiles in memory and serves it for
a quick look in a browser, during development or debugging. It is not meant
for serving tiles in production; write them out with TileBaker.Outputs and
use a static file server instead.

    tiles, metadata = TileBaker.generateTilesWithMetadata(geojson, 0, 5, 'places')
    app = WSGIPreviewServer(tiles, metadata)
    werkzeug.serving.run_simple('localhost', 8080, app)

Paths:
- /{z}/{x}/{y}.pbf: one tile, or 404 if there is nothing there.
- /metadata.json: tippecanoe-style metadata, see TileBaker.Outputs.
- / or /preview.html: a MapLibre map of the layer.
"""

import re
import logging

from simplejson import dumps as json_dumps
from werkzeug.wrappers import Request, Response

from .Core import TileCoord
from .Outputs import metadataBody

_pathinfo_pat = re.compile(r'^/(?P<z>\d+)/(?P<x>\d+)/(?P<y>\d+)\.pbf$')
_preview_pat = re.compile(r'^/(preview\.html)?$')

class WSGIPreviewServer:
    """ Create a WSGI application that serves one tile set from memory.
    """

    def __init__(self, tiles, metadata):
        """ Initialize a callable WSGI instance.

            Arguments are a list of Core.EncodedTile and the
            Core.TileSetMetadata they were generated with.
        """
        self.tiles = dict([(tile.coord, tile.data) for tile in tiles])
        self.metadata = metadata

    def __call__(self, environ, start_response):
        """
        """
        request = Request(environ)
        response = self.respond(request.path)

        logging.debug('TileBaker.Preview.WSGIPreviewServer() %s %d', request.path, response.status_code)

        return response(environ, start_response)

    def respond(self, path_info):
        """ Build a Response for a PATH_INFO string.
        """
        if _pathinfo_pat.match(path_info):
            path = _pathinfo_pat.match(path_info)
            coord = TileCoord(*[int(path.group(p)) for p in 'zxy'])

            if coord not in self.tiles:
                return Response('No tile at %s\n' % coord, status=404, mimetype='text/plain')

            response = Response(self.tiles[coord], mimetype='application/x-protobuf')
            response.headers['Access-Control-Allow-Origin'] = '*'

            return response

        elif path_info == '/metadata.json':
            return Response(metadataBody(self.metadata), mimetype='application/json')

        elif _preview_pat.match(path_info):
            return Response(_preview(self.metadata), mimetype='text/html')

        return Response('Nothing at %s\n' % path_info, status=404, mimetype='text/plain')

def _preview(metadata):
    """ Get an HTML preview page for a tile set.
    """
    layername = json_dumps(metadata.layer_name).replace('</', '<\\/')
    title = metadata.layer_name.replace('&', '&amp;').replace('<', '&lt;')
    lon, lat = metadata.center
    zoom = metadata.min_zoom
    minzoom, maxzoom = metadata.min_zoom, metadata.max_zoom
    west, south, east, north = metadata.bounds

    return """<!DOCTYPE html>
<html>
<head>
    <title>TileBaker Preview: %(title)s</title>
    <link rel="stylesheet" href="https://unpkg.com/maplibre-gl@4.7.1/dist/maplibre-gl.css" />
    <script src="https://unpkg.com/maplibre-gl@4.7.1/dist/maplibre-gl.js"></script>
    <meta name="viewport" content="width=device-width, initial-scale=1.0, maximum-scale=1.0, user-scalable=0">
    <style type="text/css">
        html, body, #map {
            position: absolute;
            width: 100%%;
            height: 100%%;
            margin: 0;
            padding: 0;
        }
    </style>
</head>
<body>
    <div id="map"></div>
    <script type="text/javascript">
        var layer = %(layername)s,
            tiles = window.location.origin + '/{z}/{x}/{y}.pbf';

        var map = new maplibregl.Map({
            container: 'map',
            center: [%(lon).6f, %(lat).6f],
            zoom: %(zoom)d,
            style: {
                version: 8,
                sources: {
                    preview: {type: 'vector', tiles: [tiles], minzoom: %(minzoom)d, maxzoom: %(maxzoom)d}
                },
                layers: [
                    {id: 'background', type: 'background', paint: {'background-color': '#f8f8f8'}},
                    {id: 'fill', type: 'fill', source: 'preview', 'source-layer': layer,
                     filter: ['==', '$type', 'Polygon'], paint: {'fill-color': '#3388ff', 'fill-opacity': 0.4}},
                    {id: 'line', type: 'line', source: 'preview', 'source-layer': layer,
                     filter: ['!=', '$type', 'Point'], paint: {'line-color': '#1f5fbf', 'line-width': 1.5}},
                    {id: 'point', type: 'circle', source: 'preview', 'source-layer': layer,
                     filter: ['==', '$type', 'Point'], paint: {'circle-color': '#d33', 'circle-radius': 4}}
                ]
            }
        });

        map.fitBounds([[%(west).6f, %(south).6f], [%(east).6f, %(north).6f]], {maxZoom: %(maxzoom)d, animate: false});
    </script>
</body>
</html>
""" % locals()
