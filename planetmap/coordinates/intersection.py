# Copyright European Space Agency, 2013

"""
Intersection of lines with an ellipsoid of revolution centered at (0,0,0)
whose symmetry axis is the z-axis.

A line is given by an origin and a direction, its points are
``lineOrigin + k*lineDirection``. The intersection returned is the one with
the smaller `k`, i.e. the first one seen by an observer at `lineOrigin`
looking along `lineDirection`.
"""

import numpy as np

try:
    from numexpr import evaluate as ne
except ImportError:
    ne = None

def _quadraticCoefficients(a, b, lineOrigin, lineDirection):
    lineOrigin = np.require(lineOrigin, dtype=np.float64)
    lineDirection = np.require(lineDirection, dtype=np.float64)

    radius = np.array([1/a, 1/a, 1/b])
    directionTimesRadius = np.atleast_2d(lineDirection) * radius
    originTimesRadius = lineOrigin * radius

    # coefficients of qa*k**2 + qb*k + qc = 0
    qa = np.einsum("ij,ij->i", directionTimesRadius, directionTimesRadius)
    qb = 2*np.dot(directionTimesRadius, originTimesRadius)
    qc = np.dot(originTimesRadius, originTimesRadius) - 1
    return qa, qb, qc

def _nearRoot_np(a, b, lineOrigin, lineDirection):
    qa, qb, qc = _quadraticCoefficients(a, b, lineOrigin, lineDirection)
    with np.errstate(invalid='ignore', divide='ignore'): # negative root term = no intersection
        k = (-qb - np.sqrt(qb*qb - 4*qa*qc)) / (2*qa)
    k[~(qa > 0)] = np.nan
    return k

def _nearRoot_ne(a, b, lineOrigin, lineDirection):
    qa, qb, qc = _quadraticCoefficients(a, b, lineOrigin, lineDirection)
    k = ne('where(qa > 0, (-qb - sqrt(qb**2 - 4*qa*qc)) / (2*qa), nan)',
           local_dict={'qa': qa, 'qb': qb, 'qc': qc, 'nan': np.nan})
    return k

def ellipsoidLineRoots(a, b, lineOrigin, lineDirection):
    """
    Return the line parameter `k` of the first intersection point of each line.

    :param a: equatorial axis of the ellipsoid of revolution
    :param b: polar axis of the ellipsoid of revolution
    :param lineOrigin: x,y,z vector
    :param lineDirection: x,y,z vector or array of vectors; not required to be unit vectors
    :rtype: array of shape (n,), NaN where the line misses the ellipsoid
            or has a null direction
    """
    if ne:
        return _nearRoot_ne(a, b, lineOrigin, lineDirection)
    else:
        return _nearRoot_np(a, b, lineOrigin, lineDirection)

def ellipsoidLineIntersection(a, b, lineOrigin, lineDirection):
    """
    Return the ellipsoid-line intersection points.

    :param a: equatorial axis of the ellipsoid of revolution
    :param b: polar axis of the ellipsoid of revolution
    :param lineOrigin: x,y,z vector
    :param lineDirection: x,y,z vector or array of vectors; not required to be unit vectors
    :rtype: array of shape (n,3), NaN rows where there is no intersection
    """
    k = ellipsoidLineRoots(a, b, lineOrigin, lineDirection)
    return np.asarray(lineOrigin, dtype=np.float64) + k[:,None]*np.atleast_2d(lineDirection)

def ellipsoidLineIntersects(a, b, lineOrigin, lineDirection):
    """
    As :func:`ellipsoidLineIntersection` but returns an array of booleans instead
    of the intersection points.
    """
    return ~np.isnan(ellipsoidLineRoots(a, b, lineOrigin, lineDirection))

def cartesianToLatLon(points):
    """
    Convert body-fixed points to planetocentric latitude and longitude.

    Longitudes are measured from the negative y-axis towards the positive x-axis.

    :param points: array of shape (n,3)
    :rtype: tuple (lat, lon) of arrays in radians, lon within [-pi,pi]
    """
    points = np.atleast_2d(points)
    x, y, z = points[:,0], points[:,1], points[:,2]
    with np.errstate(invalid='ignore', divide='ignore'):
        lat = np.arctan(z / np.hypot(x, y))
    lon = np.arctan2(x, -y)
    return lat, lon
