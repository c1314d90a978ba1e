""" Support for MBTiles file format, version 1.1.

MBTiles (http://mbtiles.org) is a specification for storing tiled map data in
SQLite databases for immediate use and for transfer. The files are designed for
portability of thousands, hundreds of thousands, or even millions of standard
map tile images in a single file.

Vector tiles are stored with the format "pbf" and a "json" metadata row that
lists the vector layers, as written by tippecanoe. Rows are numbered from the
bottom in the TMS manner, so tile_row is flipped from the slippy map row.
"""

from sqlite3 import connect, OperationalError, DatabaseError
from os.path import exists

from .Core import KnownUnknown

def create_tileset(filename, name, type, version, description, format, bounds=None, extra=None):
    """ Create a tileset 1.1 with the given filename and metadata.

        From the documentation:

        The metadata table is used as a key/value store for settings.
        Five keys are required:

        name:
          The plain-english name of the tileset.

        type:
          overlay or baselayer

        version:
          The version of the tileset, as a plain number.

        description:
          A description of the layer as plain text.

        format:
          The file format of the tile data: png, jpg or pbf

        One row in metadata is suggested and, if provided, may enhance performance.

        bounds:
          The maximum extent of the rendered map area. Bounds must define
          an area covered by all zoom levels. The bounds are represented in
          WGS:84 - latitude and longitude values, in the OpenLayers Bounds
          format - left, bottom, right, top. Example of the full earth:
          -180.0,-85,180,85.

        Other rows, such as minzoom, maxzoom, center and json, can be passed
        in an optional dictionary of extra metadata.
    """
    if format not in ('png', 'jpg', 'pbf'):
        raise KnownUnknown('Format must be one of "png", "jpg" or "pbf", not "%s"' % format)

    db = connect(filename)

    db.execute('CREATE TABLE metadata (name TEXT, value TEXT, PRIMARY KEY (name))')
    db.execute('CREATE TABLE tiles (zoom_level INTEGER, tile_column INTEGER, tile_row INTEGER, tile_data BLOB)')
    db.execute('CREATE UNIQUE INDEX coord ON tiles (zoom_level, tile_column, tile_row)')

    db.execute('INSERT INTO metadata VALUES (?, ?)', ('name', name))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('type', type))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('version', version))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('description', description))
    db.execute('INSERT INTO metadata VALUES (?, ?)', ('format', format))

    if bounds is not None:
        db.execute('INSERT INTO metadata VALUES (?, ?)', ('bounds', bounds))

    for (key, value) in sorted((extra or {}).items()):
        db.execute('INSERT OR REPLACE INTO metadata VALUES (?, ?)', (key, value))

    db.commit()
    db.close()

def tileset_exists(filename):
    """ Return true if the tileset exists and appears to have the right tables.
    """
    if not exists(filename):
        return False

    db = connect(filename)

    try:
        db.execute('SELECT name, value FROM metadata LIMIT 1')
        db.execute('SELECT zoom_level, tile_column, tile_row, tile_data FROM tiles LIMIT 1')
    except (OperationalError, DatabaseError):
        return False
    finally:
        db.close()

    return True

def tileset_info(filename):
    """ Return the metadata of a tileset as a dictionary.
    """
    db = connect(filename)

    try:
        return dict(db.execute('SELECT name, value FROM metadata').fetchall())
    finally:
        db.close()

def list_tiles(filename):
    """ Get a list of (zoom, column, row) tuples for the tiles in a tileset.

        Rows are given in the slippy map numbering, not the TMS numbering
        used inside the file.
    """
    db = connect(filename)

    try:
        rows = db.execute('SELECT zoom_level, tile_column, tile_row FROM tiles')
        return sorted([(z, x, (2**z - 1) - y) for (z, x, y) in rows])
    finally:
        db.close()

def get_tile(filename, coord):
    """ Get the content of one tile, or None if it's not there.
    """
    db = connect(filename)

    try:
        tile_row = (2**coord.z - 1) - coord.y # Hello, Paul Ramsey.
        q = 'SELECT tile_data FROM tiles WHERE zoom_level=? AND tile_column=? AND tile_row=?'
        content = db.execute(q, (coord.z, coord.x, tile_row)).fetchone()
    finally:
        db.close()

    return content and bytes(content[0]) or None

def put_tiles(filename, tiles):
    """ Add a list of EncodedTile to a tileset, replacing any already there.
    """
    db = connect(filename)

    try:
        for tile in tiles:
            coord = tile.coord
            tile_row = (2**coord.z - 1) - coord.y # Hello, Paul Ramsey.
            q = 'REPLACE INTO tiles (zoom_level, tile_column, tile_row, tile_data) VALUES (?, ?, ?, ?)'
            db.execute(q, (coord.z, coord.x, tile_row, memoryview(tile.data)))

        db.commit()
    finally:
        db.close()
