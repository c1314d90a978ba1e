""" The configuration bits of TileBaker.

A TileBaker configuration describes one tile set: where the GeoJSON comes
from, what to call the layer, which zoom levels to generate, and where to put
the results. It is stored in a JSON file like this one:

    {
      "source": "places.geojson",
      "layer": "places",
      "zooms": {"min": 0, "max": 5},
      "output": {"name": "Disk", "path": "tiles"}
    }

- "source" is a required path to a GeoJSON file, relative to the location of
  the configuration file.
- "layer" is an optional layer name, "default" if omitted.
- "zooms" is an optional dictionary of "min" and "max" zoom levels, both
  inclusive. Defaults to zoom 0 through 5.
- "output" is a required output, explained in detail in TileBaker.Outputs.

Configuration also supports these additional settings:

- "logging": one of "debug", "info", "warning", "error" or "critical", as
  described in Python's logging module: http://docs.python.org/howto/logging.html
"""

import logging
from os.path import join as pathjoin, isabs

from simplejson import dumps as json_dumps

from . import Core
from . import Outputs

class Configuration:
    """ A complete tile set configuration.

        Attributes:

          source:
            Local filesystem path of the GeoJSON source.

          layer_name:
            Name of the single layer in every tile.

          min_zoom, max_zoom:
            Inclusive range of zoom levels to generate.

          output:
            Output instance, e.g. TileBaker.Outputs.Disk etc.
            See TileBaker.Outputs for details on what makes
            a usable output.

          dirpath:
            Local filesystem path for this configuration,
            useful for expanding relative paths.
    """
    def __init__(self, source, layer_name, min_zoom, max_zoom, output, dirpath):
        self.source = source
        self.layer_name = layer_name
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.output = output
        self.dirpath = dirpath

def buildConfiguration(config_dict, dirpath='.'):
    """ Build a configuration dictionary into a Configuration object.

        The second argument is an optional dirpath that specifies where in the
        local filesystem the parsed dictionary originated, to make it possible
        to resolve relative paths.
    """
    if 'logging' in config_dict:
        level = config_dict['logging'].upper()

        if hasattr(logging, level):
            logging.basicConfig(level=getattr(logging, level))

    if 'source' not in config_dict:
        raise Core.KnownUnknown('Missing required source in configuration: %s' % json_dumps(config_dict))

    source = localPath(config_dict['source'], dirpath)
    layer_name = str(config_dict.get('layer') or 'default')

    zooms_dict = config_dict.get('zooms', {})

    try:
        min_zoom = int(zooms_dict.get('min', 0))
        max_zoom = int(zooms_dict.get('max', 5))
    except (TypeError, ValueError, AttributeError):
        raise Core.KnownUnknown('Bad zooms in configuration, need integer min and max: %s' % json_dumps(zooms_dict))

    if not (0 <= min_zoom <= max_zoom):
        raise Core.KnownUnknown('Bad zooms in configuration, min must not exceed max: %s' % json_dumps(zooms_dict))

    if 'output' not in config_dict:
        raise Core.KnownUnknown('Missing required output in configuration: %s' % json_dumps(config_dict))

    output = _parseConfigOutput(config_dict['output'], dirpath)

    return Configuration(source, layer_name, min_zoom, max_zoom, output, dirpath)

def localPath(relpath, dirpath):
    """ Return a local path, relative to a directory unless already absolute.
    """
    if relpath.startswith('file://'):
        relpath = relpath[len('file://'):]

    if isabs(relpath):
        return relpath

    return pathjoin(dirpath, relpath)

def _parseConfigOutput(output_dict, dirpath):
    """ Used by buildConfiguration() to parse just the output parts of a config.
    """
    if 'name' in output_dict:
        _class = Outputs.getOutputByName(output_dict['name'])
        kwargs = {}

        try:
            if _class is Outputs.Disk:
                kwargs['path'] = localPath(output_dict['path'], dirpath)

                if 'umask' in output_dict:
                    kwargs['umask'] = int(output_dict['umask'], 8)

            elif _class is Outputs.Zip:
                kwargs['filename'] = localPath(output_dict['filename'], dirpath)

                if 'folder' in output_dict:
                    kwargs['folder'] = str(output_dict['folder'])

            elif _class is Outputs.MBTilesOutput:
                kwargs['filename'] = localPath(output_dict['filename'], dirpath)

        except KeyError as e:
            raise Core.KnownUnknown('Missing required %s in %s output: %s' % (e, output_dict['name'], json_dumps(output_dict)))

    elif 'class' in output_dict:
        _class = Core.loadClassPath(output_dict['class'])
        kwargs = output_dict.get('kwargs', {})
        kwargs = dict( [(str(k), v) for (k, v) in kwargs.items()] )

    else:
        raise Core.KnownUnknown('Missing required output name or class: %s' % json_dumps(output_dict))

    return _class(**kwargs)
