"""Top-level package for Laertes.

Laertes answers Layar getPOIs requests: given a position, a radius and
a layer, it gathers nearby hotspots from the layer's KML map documents
and from geotagged tweets, and returns them nearest first.
"""
