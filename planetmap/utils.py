# Copyright European Space Agency, 2013

"""
A collection of numeric helper functions shared by the other modules.

Vectors are plain numpy arrays of shape (3,), arrays of vectors have
shape (n,3).
"""

import numpy as np

_eps = np.finfo(np.float64).eps
_tiny = np.finfo(np.float64).tiny

def vectorLengths(vectors):
    """ `np.linalg.norm(vectors, axis=1)` for arrays of vectors. """
    vectors = np.asarray(vectors)
    return np.sqrt((vectors*vectors).sum(axis=1))

def unitVectors(vectors):
    """ Return the unit vectors of an array of vectors. """
    vectors = np.asarray(vectors)
    return vectors / vectorLengths(vectors)[...,None]

def magnitude(v):
    """
    Return the length of a single 3D vector.

    Uses nested hypot calls instead of the square root of the sum of
    squares so that large or tiny components don't overflow or underflow.
    """
    x, y, z = v
    return np.hypot(np.hypot(x, y), z)

def unitVector(v):
    """
    Return `v` scaled to unit length.

    :raises ValueError: if `v` has zero length
    """
    v = np.asarray(v, dtype=np.float64)
    length = magnitude(v)
    if length == 0:
        raise ValueError('Cannot normalize a vector of zero length')
    return v / length

def almostEqual(x, y, ulps):
    """
    Return whether `x` and `y` are equal within `ulps` units in the last place.

    Numbers whose difference is subnormal are considered equal.
    """
    diff = abs(x - y)
    return diff <= _eps * abs(x + y) * ulps or diff < _tiny

def almostZero(x, n):
    """ Return whether `x` is within `n` machine epsilons of zero. """
    return abs(x) < _eps * n

def quadraticRoots(a, b, c):
    """
    Return the real roots of ``a*x**2 + b*x + c = 0``.

    The roots are computed in a way that avoids the cancellation of
    the textbook formula when `b` is large compared to `a*c`.

    :rtype: tuple (root1, root2) or None if there are no real roots
    """
    discriminant = b*b - 4*a*c
    if discriminant < 0:
        return None
    sgn = -1 if b < 0 else 1
    q = -(b + sgn*np.sqrt(discriminant)) / 2
    if q == 0:
        # b == c == 0
        return 0.0, 0.0
    return q/a, c/q
