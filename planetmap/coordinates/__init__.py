"""
This package contains the shape model of the mapped body
(:mod:`~planetmap.coordinates.body`), rotations about the coordinate axes
(:mod:`~planetmap.coordinates.rotation`) and functions to calculate
intersection points between a ray and an ellipsoid
(:mod:`~planetmap.coordinates.intersection`).

This package does not depend on the camera or projection parts of
the :mod:`planetmap` package and can therefore be re-used generically for
other purposes.
"""
