"""
The source package provides the data that is mapped by the projections.

A source image returns a datum for a given planetocentric latitude and
longitude, or None if it has no data there. Sources are:

- :class:`~planetmap.source.image.PhotoImage`, a photo of the body whose
  pixels are located with a :class:`~planetmap.camera.geometry.ViewingGeometry`
- virtual images in :mod:`planetmap.source.virtual` which compute
  quantities like the cosine of the emission angle directly from the geometry
- :class:`~planetmap.source.mosaic.MosaicImage` combining several sources
"""
