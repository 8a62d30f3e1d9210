"""
The projection package turns source images into maps.

Each projection is a :class:`~planetmap.projection.factory.MapFactory`
which knows the latitude and longitude of every pixel of a map with a
given size. The factory reads the source image at these coordinates
and assembles the map array. Latitude/longitude grids can be created
separately and overlaid when drawing.

Available projections:

- :class:`~planetmap.projection.cylindrical.SimpleCylindrical`
- :class:`~planetmap.projection.mercator.Mercator`
- :class:`~planetmap.projection.stereographic.PolarStereographic`
- :class:`~planetmap.projection.orthographic.Orthographic`

Maps are returned as arrays of shape (lines, samples) whose first line
is the bottom line of the map, as in FITS images. Use ``origin='lower'``
when displaying them with matplotlib, as :mod:`planetmap.draw` does.
"""
