# Copyright European Space Agency, 2013

"""
Viewing geometry of a photo of a planetary body.

The geometry relates pixels of a photo to planetocentric latitudes and
longitudes on the body. It is configured with the observer position
(sub-observation point and range), the orientation of the camera (position
angle of the body's north pole) and either the pixel position of the
body center or the latitude and longitude seen at the optical axis.
Once all parameters are set, :meth:`ViewingGeometry.finalizeSetup` computes
the rotation between observer and body coordinates. The geometry cannot
be changed afterwards.

Body coordinates are cartesian with the origin in the body center, the
z-axis along the rotation axis and the observer in the y-z plane at
negative y. Observer coordinates have the same origin, the y-axis
pointing along the optical axis away from the observer, the x-axis
towards increasing samples and the z-axis towards decreasing lines.
"""

import logging

import numpy as np

from planetmap.camera.correction import GeometricCorrection, NullGeometricCorrection
from planetmap.coordinates.intersection import ellipsoidLineRoots, cartesianToLatLon
from planetmap.coordinates.rotation import rotX, rotY, rotXMatrix, rotYMatrix, rotZMatrix
from planetmap.utils import magnitude, unitVector, quadraticRoots
from planetmap.validate import validateLatitude, validateLongitude, validatePositionAngle,\
    validatePositive

_logger = logging.getLogger(__name__)

__all__ = ['ViewingGeometry', 'MissingParameterError', 'GeometryFrozenError']

class MissingParameterError(ValueError):
    pass

class GeometryFrozenError(RuntimeError):
    pass

# largest residual (in percent of the reference vector) of the observer-body
# rotation before a warning is logged
ROTATION_TOLERANCE = 1e-8

_maxRange = np.sqrt(np.finfo(np.float64).max)

def _validatePixel(value, what):
    try:
        sample, line = value
    except (TypeError, ValueError):
        raise ValueError(what + ' must be a (sample, line) pair')
    if np.isnan(sample) or np.isnan(line):
        raise ValueError('invalid ' + what + ': ' + str(value))
    return float(sample), float(line)

def _positiveLongitude(lon):
    return lon + 2*np.pi if lon < 0 else lon

class ViewingGeometry(object):
    """
    Geometry of a single photo of a body.

    Angles are given and returned in degrees.
    """
    def __init__(self, body, logger=None):
        """
        :param body: the photographed body
        :type body: :class:`~planetmap.coordinates.body.OblateSpheroid`
        :param logger: :class:`logging.Logger` receiving warnings about
                       inconsistent geometries; defaults to the module logger
        """
        self.body = body
        self.logger = logger or _logger

        self._subObservLat = None
        self._subObservLon = None
        self._subSolarLat = None
        self._subSolarLon = None
        self._range = None
        self._positionAngle = None
        self._focalLength = None
        self._scale = None
        self._kmPerPixel = None
        self._focalLengthPixels = None
        self._bodyCenter = None
        self._opticalAxis = None
        self._latLonCenter = None
        self._muLimit = 0.0 # emission angle limit of 90 degrees
        self._useTerminator = False
        self._geometricCorrection = NullGeometricCorrection()

        self._finalized = False
        self._rangeB = None
        self._observ2body = None
        self._body2observ = None
        self._normalRange = None

    def _checkNotFinalized(self):
        if self._finalized:
            raise GeometryFrozenError('The viewing geometry cannot be changed after finalizeSetup()')

    def _require(self, value, what):
        if value is None:
            raise MissingParameterError(what + ' not set')
        return value

    @property
    def finalized(self):
        return self._finalized

    @property
    def subObservLat(self):
        """ Planetocentric latitude of the sub-observation point. """
        return None if self._subObservLat is None else np.rad2deg(self._subObservLat)

    @subObservLat.setter
    def subObservLat(self, lat):
        self._checkNotFinalized()
        self._subObservLat = validateLatitude(lat)

    @property
    def subObservLon(self):
        """ Longitude of the sub-observation point, within [0,360). """
        return None if self._subObservLon is None else np.rad2deg(self._subObservLon)

    @subObservLon.setter
    def subObservLon(self, lon):
        self._checkNotFinalized()
        self._subObservLon = _positiveLongitude(validateLongitude(lon))

    @property
    def subSolarLat(self):
        return None if self._subSolarLat is None else np.rad2deg(self._subSolarLat)

    @subSolarLat.setter
    def subSolarLat(self, lat):
        self._checkNotFinalized()
        self._subSolarLat = validateLatitude(lat)

    @property
    def subSolarLon(self):
        return None if self._subSolarLon is None else np.rad2deg(self._subSolarLon)

    @subSolarLon.setter
    def subSolarLon(self, lon):
        self._checkNotFinalized()
        self._subSolarLon = _positiveLongitude(validateLongitude(lon))

    def setSubObserv(self, lat, lon):
        self.subObservLat = lat
        self.subObservLon = lon

    def setSubSolar(self, lat, lon):
        self.subSolarLat = lat
        self.subSolarLon = lon

    @property
    def positionAngle(self):
        """ Position angle of the body's north pole, counter-clockwise positive. """
        return None if self._positionAngle is None else np.rad2deg(self._positionAngle)

    @positionAngle.setter
    def positionAngle(self, north):
        self._checkNotFinalized()
        self._positionAngle = validatePositionAngle(north)

    @property
    def range(self):
        """ Distance from the observer to the body center in kilometers. """
        return self._range

    @range.setter
    def range(self, r):
        self._checkNotFinalized()
        minRange = min(self.body.eqRad, self.body.polRad)
        # range**2 must not overflow
        if r is None or not minRange < r < _maxRange:
            raise ValueError('invalid range: ' + str(r) + ' (must be within (' + str(minRange) + ',' +
                             str(_maxRange) + '))')
        self._range = float(r)

    @property
    def focalLength(self):
        """ Camera focal length in millimeters. """
        return self._focalLength

    @focalLength.setter
    def focalLength(self, length):
        self._checkNotFinalized()
        self._focalLength = float(validatePositive(length, 'focal length'))

    @property
    def scale(self):
        """ Image scale in pixels per millimeter. """
        return self._scale

    @scale.setter
    def scale(self, s):
        self._checkNotFinalized()
        self._scale = float(validatePositive(s, 'image scale'))

    @property
    def kmPerPixel(self):
        return self._kmPerPixel

    @kmPerPixel.setter
    def kmPerPixel(self, value):
        self._checkNotFinalized()
        self._kmPerPixel = float(validatePositive(value, 'kilometers per pixel'))

    def setArcsecPerPixel(self, arcsec):
        """
        Set the image resolution from its angular size.

        Uses the small angle approximation which holds if the range is much larger
        than the distance covered by the image. The range must have been set before.

        :raises MissingParameterError: if the range is not set yet
        """
        self._checkNotFinalized()
        validatePositive(arcsec, 'arcseconds per pixel')
        r = self._require(self._range, 'range')
        # 648000 arcseconds per pi radians
        self._kmPerPixel = np.pi / 648000 * arcsec * r

    @property
    def focalLengthPixels(self):
        """ Focal length in pixels, available after :meth:`finalizeSetup`. """
        return self._focalLengthPixels

    @property
    def bodyCenter(self):
        """ (sample, line) of the body center. """
        return self._bodyCenter

    @bodyCenter.setter
    def bodyCenter(self, value):
        self._checkNotFinalized()
        self._bodyCenter = _validatePixel(value, 'body center')

    @property
    def opticalAxis(self):
        """ (sample, line) of the optical axis, defaults to the image center. """
        return self._opticalAxis

    @opticalAxis.setter
    def opticalAxis(self, value):
        self._checkNotFinalized()
        self._opticalAxis = _validatePixel(value, 'optical axis')

    @property
    def latLonCenter(self):
        """ (lat, lon) of the point on the body seen at the optical axis. """
        if self._latLonCenter is None:
            return None
        lat, lon = self._latLonCenter
        return np.rad2deg(lat), np.rad2deg(lon)

    @latLonCenter.setter
    def latLonCenter(self, value):
        self._checkNotFinalized()
        lat, lon = value
        self._latLonCenter = (validateLatitude(lat), _positiveLongitude(validateLongitude(lon)))

    @property
    def emiAngLimit(self):
        """ Largest emission angle at which points count as visible. """
        return np.rad2deg(np.arccos(self._muLimit))

    @emiAngLimit.setter
    def emiAngLimit(self, angle):
        self._checkNotFinalized()
        # anything beyond 90 degrees is on the far side anyway
        if angle is None or not -90 <= angle <= 90:
            raise ValueError('invalid emission angle limit: ' + str(angle) +
                             ' (must be within [-90,90] degrees)')
        self._muLimit = np.cos(np.deg2rad(angle))

    @property
    def muLimit(self):
        return self._muLimit

    @property
    def useTerminator(self):
        """ Whether points on the night side count as not visible. """
        return self._useTerminator

    @useTerminator.setter
    def useTerminator(self, value):
        self._checkNotFinalized()
        self._useTerminator = bool(value)

    @property
    def geometricCorrection(self):
        return self._geometricCorrection

    @geometricCorrection.setter
    def geometricCorrection(self, strategy):
        if not isinstance(strategy, GeometricCorrection):
            raise ValueError('geometric correction must be a GeometricCorrection instance')
        self._geometricCorrection = strategy

    @property
    def normalRange(self):
        """ Distance from the observer to the body center along the optical axis. """
        return self._normalRange

    @property
    def observ2body(self):
        return self._observ2body

    @property
    def body2observ(self):
        return self._body2observ

    @property
    def rangeB(self):
        """ Observer position in body coordinates. """
        return self._rangeB

    def finalizeSetup(self, samples, lines):
        """
        Compute the transformation between observer and body coordinates
        for a photo of the given size and freeze the geometry.

        :raises MissingParameterError: if a required parameter is not set
        :raises ValueError: if the parameters do not describe a possible geometry
        """
        self._checkNotFinalized()
        r = self._require(self._range, 'range')
        subObservLat = self._require(self._subObservLat, 'sub-observation latitude')
        self._require(self._subObservLon, 'sub-observation longitude')
        self._require(self._positionAngle, 'position angle')

        if self._opticalAxis is None:
            self._opticalAxis = (samples / 2, lines / 2)
        oaSample, oaLine = self._opticalAxis

        self._rangeB = np.array([0, -r * np.cos(subObservLat), r * np.sin(subObservLat)])

        if self._latLonCenter is None:
            sampleCenter, lineCenter = self._require(self._bodyCenter, 'body center')
            if self._kmPerPixel is None:
                self._setKmPerPixelFromFocalLength()
            kmpp = self._kmPerPixel

            inPlane = magnitude([(oaSample - sampleCenter) * kmpp, 0, (lineCenter - oaLine) * kmpp])
            radicand = r*r - inPlane*inPlane
            if radicand < 0:
                raise ValueError('The body center is further away from the optical axis (' +
                                 str(inPlane) + ' km) than the observer range (' + str(r) + ' km)')
            self._normalRange = np.sqrt(radicand)

            rangeO = np.array([(oaSample - sampleCenter) * kmpp,
                               -self._normalRange,
                               (lineCenter - oaLine) * kmpp])
            self._rotMatricesFromRange(rangeO)
        else:
            latC, lonC = self._latLonCenter
            if self.body.prograde:
                lon = self._subObservLon - lonC
            else:
                lon = lonC - self._subObservLon
            r0 = self.body.surfacePoint(latC, lon)

            oaPrime = r0 - self._rangeB
            oaHat = unitVector(oaPrime)
            # the part of r0 orthogonal to the line of sight
            opticalAxis = oaPrime - np.dot(r0, oaHat) * oaHat
            self._rotMatricesFromOpticalAxis(opticalAxis)

            self._normalRange = -np.dot(self._body2observ, self._rangeB)[1]

            if self._kmPerPixel is None:
                if self._focalLength is None or self._scale is None:
                    raise MissingParameterError('Either kilometers per pixel or focal length and '
                                                'scale must be set')
                self._focalLengthPixels = self._focalLength * self._scale
                self._kmPerPixel = self._normalRange / self._focalLengthPixels

            if self._bodyCenter is None:
                fpx = self._focalLengthPixels or self._normalRange / self._kmPerPixel
                x, y, z = -np.dot(self._body2observ, self._rangeB)
                self._bodyCenter = (x / y * fpx + oaSample, oaLine - z / y * fpx)

        if self._focalLengthPixels is None:
            self._focalLengthPixels = self._normalRange / self._kmPerPixel

        self._finalized = True

    def _setKmPerPixelFromFocalLength(self):
        if self._focalLength is None or self._scale is None:
            raise MissingParameterError('Cannot set kilometers per pixel without focal length and scale')
        sampleCenter, lineCenter = self._bodyCenter
        oaSample, oaLine = self._opticalAxis
        self._focalLengthPixels = self._focalLength * self._scale
        self._kmPerPixel = self._range / magnitude([oaSample - sampleCenter,
                                                    self._focalLengthPixels,
                                                    oaLine - lineCenter])

    def _checkResidual(self, residual, reference):
        percentDiff = residual / reference * 100
        if percentDiff > ROTATION_TOLERANCE:
            self.logger.warning('Results may be incorrect since a suitable transformation matrix '
                                'was not found for the given image. There was a %g%% difference '
                                'between the two test vectors (tolerance is %g%%).',
                                percentDiff, ROTATION_TOLERANCE)

    def _rotMatricesFromRange(self, rangeO):
        """
        Determine the observer to body rotation when the body center pixel is known.

        The rotation is ``Rz(twist) Rx(subLatMod) Ry(-positionAngle)`` where sin(subLatMod)
        is one of the two roots of a quadratic. Both candidates are tried and the one
        which maps `rangeO` closest onto the body frame range vector is kept.
        """
        pa = self._positionAngle
        rO = rotY(-pa, unitVector(rangeO))

        sinLat = np.sin(self._subObservLat)
        a = rO[2]**2 + rO[1]**2
        b = 2 * rO[1] * sinLat
        c = sinLat**2 - rO[2]**2
        roots = quadraticRoots(a, b, c)
        if roots is None:
            raise ValueError('Unable to find roots corresponding to sub-observation latitudes '
                             'when calculating the rotation between observer and body coordinates')

        best = None
        for sinSubLatMod in roots:
            subLatMod = np.arcsin(np.clip(sinSubLatMod, -1, 1))
            rotated = rotX(subLatMod, rO)
            zTwist = np.arctan2(rotated[0], -rotated[1])
            o2b = np.dot(rotZMatrix(zTwist), np.dot(rotXMatrix(subLatMod), rotYMatrix(-pa)))
            residual = magnitude(self._rangeB - np.dot(o2b, rangeO))
            if best is None or residual < best[0]:
                best = (residual, o2b)

        residual, o2b = best
        self._checkResidual(residual, magnitude(self._rangeB))
        self._observ2body = o2b
        self._body2observ = o2b.T

    def _rotMatricesFromOpticalAxis(self, opticalAxis):
        """
        Determine the observer to body rotation when the point seen at the optical
        axis is known.

        The rotation has the same form as in :meth:`_rotMatricesFromRange` and
        maps the observer y-axis onto the optical axis. Of the two angles between
        equatorial plane and optical axis only the one within [-pi/2,pi/2] shows
        the north pole at the position angle.
        """
        pa = self._positionAngle
        unitOpticalAxis = unitVector(opticalAxis)

        # north pole is (0,0,1)
        subLatMod = np.arcsin(np.clip(-unitOpticalAxis[2], -1, 1))
        zTwist = np.arctan2(unitOpticalAxis[0], unitOpticalAxis[1])
        o2b = np.dot(rotZMatrix(zTwist), np.dot(rotXMatrix(subLatMod), rotYMatrix(-pa)))

        residual = magnitude(unitOpticalAxis - np.dot(o2b, [0, 1, 0]))
        self._checkResidual(residual, 1.0)
        self._observ2body = o2b
        self._body2observ = o2b.T

    def _checkFinalized(self):
        if not self._finalized:
            raise MissingParameterError('finalizeSetup() must be called first')

    def isVisible(self, lat, lon):
        """
        Return whether the point at (lat,lon) faces the observer within the emission
        angle limit and, if the terminator is used, is illuminated.

        :param lat: planetocentric latitude in radians
        :param lon: longitude in radians
        """
        visible = self.body.mu(self._subObservLat, self._subObservLon, lat, lon, self._range) > self._muLimit
        if visible and self._useTerminator:
            subSolarLat = self._require(self._subSolarLat, 'sub-solar latitude')
            subSolarLon = self._require(self._subSolarLon, 'sub-solar longitude')
            visible = self.body.mu0(subSolarLat, subSolarLon, lat, lon) > 0
        return bool(visible)

    def latlon2pix(self, lat, lon):
        """
        Return the photo pixel coordinates of the point at (lat,lon).

        :param lat: planetocentric latitude in radians
        :param lon: longitude in radians
        :rtype: tuple (sample, line) or None if the point is not visible
        """
        self._checkFinalized()
        if not self.isVisible(lat, lon):
            return None

        if self.body.prograde:
            lon = self._subObservLon - lon
        else:
            lon = lon - self._subObservLon

        obs = self.body.surfacePoint(lat, lon) - self._rangeB
        rotated = np.dot(self._body2observ, obs)

        # behind the plane through the body center
        if rotated[1] > self._normalRange:
            return None

        x = rotated[0] / rotated[1] * self._focalLengthPixels
        z = rotated[2] / rotated[1] * self._focalLengthPixels
        oaSample, oaLine = self._opticalAxis
        x += oaSample
        z = oaLine - z # line numbers increase top to bottom

        z, x = self._geometricCorrection.objectToImage(z, x)
        return x, z

    def _lineOfSight(self, samples, lines):
        """
        Return the body frame directions from the observer through the given pixels.

        :param samples: array of sample coordinates
        :param lines: array of line coordinates, same shape as `samples`
        :rtype: array of shape (n,3)
        """
        lines, samples = self._geometricCorrection.imageToObject(lines, samples)
        sampleCenter, lineCenter = self._bodyCenter
        x = np.ravel(samples - sampleCenter)
        z = np.ravel(lines - lineCenter)

        coord = np.column_stack((x, np.zeros_like(x), -z))
        rotated = np.dot(coord, self._observ2body.T) * self._kmPerPixel
        return rotated - self._rangeB

    def _longitude(self, lonB):
        if self.body.prograde:
            lon = self._subObservLon - lonB
        else:
            lon = lonB + self._subObservLon
        return np.mod(lon, 2*np.pi)

    def pix2latlon(self, sample, line):
        """
        Return the planetocentric latitude and longitude seen at a photo pixel.

        :rtype: tuple (lat, lon) in radians with lon within [0,2pi),
                or None if the pixel does not see the body
        """
        self._checkFinalized()
        dVec = self._lineOfSight(np.array([sample], dtype=np.float64),
                                 np.array([line], dtype=np.float64))[0]
        intersection = self.body.ellipseIntersection(self._rangeB, dVec)
        if intersection is None:
            return None
        lat, lonB = intersection
        return lat, self._longitude(lonB)

    def bodyMask(self, samples, lines):
        """
        Return which pixels of a photo see the body.

        :rtype: boolean array of shape (lines, samples)
        """
        self._checkFinalized()
        k, i = np.mgrid[0:lines, 0:samples].astype(np.float64)
        dVecs = self._lineOfSight(i, k)
        hits = ~np.isnan(ellipsoidLineRoots(self.body.eqRad, self.body.polRad, self._rangeB, dVecs))
        return hits.reshape(lines, samples)

    def pix2latlonArray(self, samples, lines):
        """
        Vectorized :meth:`pix2latlon`.

        :param samples: array of sample coordinates
        :param lines: array of line coordinates, same shape as `samples`
        :rtype: tuple (lat, lon) of arrays shaped like `samples`, NaN where
                the body is not seen
        """
        self._checkFinalized()
        samples = np.asarray(samples, dtype=np.float64)
        lines = np.asarray(lines, dtype=np.float64)
        dVecs = self._lineOfSight(samples, lines)
        k = ellipsoidLineRoots(self.body.eqRad, self.body.polRad, self._rangeB, dVecs)
        lat, lonB = cartesianToLatLon(self._rangeB + k[:,None]*dVecs)
        return lat.reshape(samples.shape), self._longitude(lonB).reshape(samples.shape)
