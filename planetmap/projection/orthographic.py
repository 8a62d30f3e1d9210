# Copyright European Space Agency, 2013

"""
Orthographic projection, the view of the body from an observer at
infinite distance.
"""

import logging

import numpy as np

from planetmap.coordinates.rotation import rotXMatrix, rotYMatrix, rotZMatrix
from planetmap.projection.factory import MapFactory, GRID_VALUE
from planetmap.utils import almostEqual
from planetmap.validate import validateLatitude, validateLongitude, validatePositionAngle,\
    validatePositive, wrapLongitude

_logger = logging.getLogger(__name__)

__all__ = ['Orthographic', 'OrthographicCenter', 'NotVisibleError']

# largest body axis as fraction of the smaller map dimension
# if the resolution is not given
MAP_FRACTION = 0.9

# number of points per latitude line and per longitude line
LAT_LINE_STEPS = 2000
LON_LINE_STEPS = 1000

class NotVisibleError(ValueError):
    pass

class OrthographicCenter(object):
    """
    Position of the body in an orthographic map.

    Use :meth:`bodyCenter` or :meth:`latLon` to create instances,
    the default instance puts the body center into the map center.
    """
    DEFAULT = 'default'
    CENTER_GIVEN = 'center'
    LAT_LON_GIVEN = 'latlon'

    def __init__(self, geometry=DEFAULT, sampleLatCenter=None, lineLonCenter=None):
        if geometry not in (self.DEFAULT, self.CENTER_GIVEN, self.LAT_LON_GIVEN):
            raise ValueError('unknown center geometry: ' + str(geometry))
        if geometry != self.DEFAULT and (sampleLatCenter is None or lineLonCenter is None):
            raise ValueError('both center coordinates must be given')
        self.geometry = geometry
        self.sampleLatCenter = sampleLatCenter
        self.lineLonCenter = lineLonCenter

    @classmethod
    def bodyCenter(cls, sample, line):
        """ The body center is at the given map pixel. """
        return cls(cls.CENTER_GIVEN, sample, line)

    @classmethod
    def latLon(cls, lat, lon):
        """ The point at (lat,lon), in degrees, is in the map center. """
        return cls(cls.LAT_LON_GIVEN, lat, lon)

class Orthographic(MapFactory):
    """
    Orthographic projection.

    Pixels which don't see the body are left empty.
    """
    def __init__(self, body, subObservLat, subObservLon, positionAngle, kmPerPixel=None,
                 center=None):
        """
        :param body: the mapped body
        :type body: :class:`~planetmap.coordinates.body.OblateSpheroid`
        :param subObservLat: planetocentric latitude in degrees of the point
                             seen in the direction of the body center
        :param subObservLon: longitude of that point in degrees
        :param positionAngle: position angle of the north pole in degrees,
                              counter-clockwise positive
        :param kmPerPixel: map resolution, defaults to a resolution
                           at which the body covers 90% of the smaller map dimension
        :param center: position of the body in the map
        :type center: :class:`OrthographicCenter`
        :raises NotVisibleError: if the point requested to be at the map center
                                 is on the far side of the body
        """
        self.body = body
        self.subObservLat = validateLatitude(subObservLat)
        self.subObservLon = wrapLongitude(validateLongitude(subObservLon))
        self.positionAngle = validatePositionAngle(positionAngle)
        self.polar = False

        if almostEqual(abs(subObservLat), 90., 4):
            _logger.info('assuming polar orthographic projection')
            # the prime meridian points towards increasing lines, as in the polar stereographic projection
            if (subObservLat > 0) == body.prograde:
                self.positionAngle = np.pi if body.prograde else 0.
            else:
                self.positionAngle = 0. if body.prograde else np.pi
            self.subObservLat = np.pi/2 if subObservLat > 0 else -np.pi/2
            self.subObservLon = 0.
            self.polar = True

        self.kmPerPixel = None if kmPerPixel is None else validatePositive(kmPerPixel, 'kilometers per pixel')

        if center is None:
            center = OrthographicCenter()
        self.center = center
        self._centerKm = None

        if center.geometry == OrthographicCenter.LAT_LON_GIVEN:
            lat = validateLatitude(center.sampleLatCenter)
            lon = validateLongitude(center.lineLonCenter)
            if not self.isVisible(lat, lon):
                raise NotVisibleError('Desired latitude and longitude (' + str(center.sampleLatCenter) +
                                      ', ' + str(center.lineLonCenter) + ') at center of image '
                                      'is not visible')
            x, _, z = np.dot(self.observ2body.T, self._surfacePoint(lat, lon))
            self._centerKm = (x, z)

    @property
    def projectionName(self):
        return 'Orthographic'

    @property
    def observ2body(self):
        """
        Rotation from map coordinates, with x and z in the map plane and y pointing
        away from the observer, to body coordinates.
        """
        if self.polar:
            return self._tilt
        else:
            return np.dot(self._tilt, rotYMatrix(-self.positionAngle))

    @property
    def _tilt(self):
        # map plane already turned by the position angle, to body coordinates
        if self.polar:
            return np.dot(rotZMatrix(-self.positionAngle), rotXMatrix(self.subObservLat))
        else:
            return rotXMatrix(self.subObservLat)

    def isVisible(self, lat, lon):
        """
        Return whether the point at (lat,lon) in radians faces the observer.
        """
        # the sun direction also comes from infinity, so mu0 applies
        return self.body.mu0(self.subObservLat, self.subObservLon, lat, lon) >= 0

    def _surfacePoint(self, lat, lon):
        if self.body.prograde:
            lon = self.subObservLon - lon
        else:
            lon = lon - self.subObservLon
        return self.body.surfacePoint(lat, lon)

    def mapParameters(self, samples, lines):
        """
        Return the resolution and the position of the body center of a map.

        :rtype: tuple (kmPerPixel, sampleCenter, lineCenter)
        """
        if self.kmPerPixel is None:
            kmPerPixel = (2 * max(self.body.eqRad, self.body.polRad) /
                          (MAP_FRACTION * min(samples, lines)))
        else:
            kmPerPixel = self.kmPerPixel

        if self._centerKm is not None:
            # resolution may depend on the map size, so convert to pixels here
            sampleCenter = samples/2 - self._centerKm[0] / kmPerPixel
            lineCenter = lines/2 - self._centerKm[1] / kmPerPixel
        elif self.center.geometry == OrthographicCenter.CENTER_GIVEN:
            sampleCenter = self.center.sampleLatCenter
            lineCenter = self.center.lineLonCenter
        else:
            sampleCenter = samples/2
            lineCenter = lines/2
        return kmPerPixel, sampleCenter, lineCenter

    def latLons(self, samples, lines):
        """
        Return the planetocentric latitude and longitude of each map pixel.

        :rtype: tuple (lat, lon) of arrays of shape (lines, samples) in radians,
                NaN where the pixel does not see the body
        """
        kmPerPixel, sampleCenter, lineCenter = self.mapParameters(samples, lines)
        _logger.debug('Body center in orthographic projection (line, sample): (%g, %g)',
                      lineCenter, sampleCenter)

        k, i = np.mgrid[0:lines, 0:samples]
        x = (i + 0.5 - sampleCenter) * kmPerPixel
        z = (k + 0.5 - lineCenter) * kmPerPixel
        if not self.polar:
            rotY = rotYMatrix(-self.positionAngle)
            x, z = rotY[0,0]*x + rotY[0,2]*z, rotY[2,0]*x + rotY[2,2]*z

        a2 = self.body.eqRad**2
        c2 = self.body.polRad**2
        # (a-c)(a+c) instead of a*a-c*c avoids catastrophic cancellation
        diff = (self.body.eqRad - self.body.polRad) * (self.body.eqRad + self.body.polRad)
        sinLat2 = np.sin(self.subObservLat)**2

        # ellipsoid seen along y, solved for the depth y
        CA = diff * sinLat2 + c2
        CB = -diff * z * np.sin(2*self.subObservLat)
        CC = a2*z*z + c2*x*x - a2*c2 - diff*z*z*sinLat2

        discriminant = CB*CB - 4*CA*CC
        positive = CB >= 0
        with np.errstate(invalid='ignore', divide='ignore'):
            q = -(CB + np.where(positive, 1, -1) * np.sqrt(discriminant)) / 2
            # the root closer to the observer
            y = np.where(positive, q/CA, CC/q)
        y[discriminant < 0] = np.nan

        points = np.stack([x, y, z], axis=-1)
        bx, by, bz = np.rollaxis(np.dot(points, self._tilt.T), -1)

        lat = np.arctan2(bz, np.hypot(bx, by))
        if self.body.prograde:
            lon = self.subObservLon - np.arctan2(-bx, by) + np.pi
        else:
            lon = self.subObservLon + np.arctan2(-bx, by) - np.pi
        return lat, np.mod(lon, 2*np.pi)

    def plotMap(self, samples, lines, plot):
        lat, lon = self.latLons(samples, lines)
        lat, lon = lat.ravel(), lon.ravel()
        for offset in np.flatnonzero(~np.isnan(lat)):
            plot(lat[offset], lon[offset], offset)

    def plotGrid(self, samples, lines, latInterval, lonInterval, grid):
        grid = grid.reshape(lines, samples)
        kmPerPixel, sampleCenter, lineCenter = self.mapParameters(samples, lines)
        body2observ = self.observ2body.T

        def plotPoints(lat, lon):
            visible = self.isVisible(lat, lon)
            lat, lon = lat[visible], lon[visible]
            x, _, z = np.dot(body2observ, self._surfacePoint(lat, lon))
            i = np.round(x / kmPerPixel + sampleCenter - 0.5)
            k = np.round(z / kmPerPixel + lineCenter - 0.5)
            inside = (i >= 0) & (i < samples) & (k >= 0) & (k < lines)
            grid[k[inside].astype(int), i[inside].astype(int)] = GRID_VALUE

        lons = np.arange(LAT_LINE_STEPS) * 2*np.pi / LAT_LINE_STEPS
        lats = np.arange(-90 + latInterval, 90 + latInterval, latInterval)
        for lat in np.deg2rad(lats[lats <= 90]):
            plotPoints(np.full_like(lons, lat), lons)

        lats = np.arange(LON_LINE_STEPS) * np.pi / LON_LINE_STEPS - np.pi/2
        lons = np.arange(lonInterval, 360 + lonInterval, lonInterval)
        for lon in np.deg2rad(lons[lons <= 360]):
            plotPoints(lats, np.full_like(lats, lon))
