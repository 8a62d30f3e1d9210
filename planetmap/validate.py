# Copyright European Space Agency, 2013

"""
Validation of user supplied angles and lengths.

Angles are accepted in degrees and returned in radians.
"""

import numpy as np
from astropy.coordinates import Angle
import astropy.units as u

def _validateAngle(value, limit, what):
    if value is None or np.isnan(value) or value < -limit or value > limit:
        raise ValueError('invalid ' + what + ': ' + str(value) +
                         ' (must be within [-' + str(limit) + ',' + str(limit) + '] degrees)')
    return Angle(value, u.deg).radian

def validateLatitude(lat):
    """
    :param lat: latitude in degrees, within [-90,90]
    :raises ValueError: if `lat` is NaN or out of range
    :rtype: latitude in radians
    """
    return _validateAngle(lat, 90, 'latitude')

def validateLongitude(lon):
    """
    :param lon: longitude in degrees, within [-360,360]
    :raises ValueError: if `lon` is NaN or out of range
    :rtype: longitude in radians
    """
    return _validateAngle(lon, 360, 'longitude')

def validatePositionAngle(north):
    """
    :param north: position angle of the body's north pole in degrees,
                  within [-360,360]
    :raises ValueError: if `north` is NaN or out of range
    :rtype: position angle in radians
    """
    return _validateAngle(north, 360, 'position angle')

def validatePositive(value, what):
    """
    :raises ValueError: if `value` is not a number greater than zero
    """
    if value is None or not value > 0:
        raise ValueError(what + ' must be greater than zero (got ' + str(value) + ')')
    return value

def wrapLongitude(lon):
    """
    Return `lon` (radians) wrapped into [0,2pi).
    """
    return Angle(lon, u.rad).wrap_at(360*u.deg).radian
