# Copyright European Space Agency, 2013

"""
Rotations about the axes of a right-handed coordinate system.

All functions rotate the coordinate frame, not the vector, by `angle` radians,
i.e. a positive angle turns the axes counter-clockwise when looking down
the rotation axis towards the origin. The vector forms are equivalent to
multiplying with the corresponding matrix::

    np.dot(rotXMatrix(angle), v) == rotX(angle, v)
"""

import numpy as np

__all__ = ['rotX', 'rotY', 'rotZ', 'rotXMatrix', 'rotYMatrix', 'rotZMatrix']

def rotX(angle, v):
    """
    Rotate the vector `v` about the x-axis.

    :param angle: rotation angle in radians
    :param v: x,y,z vector
    :rtype: ndarray of shape (3,)
    """
    c, s = np.cos(angle), np.sin(angle)
    x, y, z = v
    return np.array([x, y*c + z*s, -y*s + z*c])

def rotY(angle, v):
    """ As :func:`rotX` but about the y-axis. """
    c, s = np.cos(angle), np.sin(angle)
    x, y, z = v
    return np.array([x*c - z*s, y, x*s + z*c])

def rotZ(angle, v):
    """ As :func:`rotX` but about the z-axis. """
    c, s = np.cos(angle), np.sin(angle)
    x, y, z = v
    return np.array([x*c + y*s, -x*s + y*c, z])

def rotXMatrix(angle):
    """
    Return the matrix of a rotation about the x-axis.

    :param angle: rotation angle in radians
    :rtype: ndarray of shape (3,3)
    """
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1,  0, 0],
                     [0,  c, s],
                     [0, -s, c]], dtype=np.float64)

def rotYMatrix(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0, -s],
                     [0, 1,  0],
                     [s, 0,  c]], dtype=np.float64)

def rotZMatrix(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[ c, s, 0],
                     [-s, c, 0],
                     [ 0, 0, 1]], dtype=np.float64)
