"""
The planetmap package is split up in several packages and modules each covering
different aspects of its functionality.

The :mod:`planetmap.coordinates` package contains the body shape model
(:mod:`~planetmap.coordinates.body`), axis rotations
(:mod:`~planetmap.coordinates.rotation`) and ray-ellipsoid intersection
(:mod:`~planetmap.coordinates.intersection`). It does not depend on the other
packages and can be re-used for other purposes.

The :mod:`planetmap.camera` package relates pixels of a photo to body
coordinates, given the viewing geometry at the time the photo was taken and
an optional lens distortion model.

The :mod:`planetmap.source` package contains the data sources maps are made
from: photos, virtual images computed from the geometry alone, and mosaics
of other sources.

The :mod:`planetmap.projection` package contains the map projections. Each
projection is a :class:`~planetmap.projection.factory.MapFactory` which
walks over all map pixels and reads the data for each one from a source.

The :mod:`planetmap` package also contains the numeric root finder used
by the projections (:mod:`planetmap.rootfind`), input validation helpers
(:mod:`planetmap.validate`), progress reporting (:mod:`planetmap.progress`)
and a simple way to look at the resulting maps (:mod:`planetmap.draw`).
"""

from ._version import __version__, __version_info__
