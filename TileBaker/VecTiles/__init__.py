''' VecTiles implements reading of GeoJSON features and writing of vector tiles.

- geojson parses FeatureCollection or Feature documents into TileBaker features.
- mvt encodes the features of one tile into a Mapbox Vector Tile.
- pbf holds the vector_tile.proto schema and the protocol buffer framing.
'''
