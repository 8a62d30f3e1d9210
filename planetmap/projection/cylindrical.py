# Copyright European Space Agency, 2013

"""
Simple cylindrical (plate carree) projection.
"""

import logging

import numpy as np

from planetmap.projection.factory import MapFactory, GRID_VALUE
from planetmap.utils import almostEqual, almostZero
from planetmap.validate import validateLatitude, validateLongitude

_logger = logging.getLogger(__name__)

class SimpleCylindrical(MapFactory):
    """
    Maps latitudes and longitudes linearly to lines and samples.

    The first map line is the southernmost. Longitudes increase to the left
    for prograde bodies and to the right for retrograde bodies.
    """
    def __init__(self, body, loLat=-90, hiLat=90, loLon=0, hiLon=360, graphicLat=False):
        """
        :param body: the mapped body
        :type body: :class:`~planetmap.coordinates.body.BodyData`
        :param loLat: lower latitude bound in degrees
        :param hiLat: upper latitude bound in degrees
        :param loLon: lower longitude bound in degrees
        :param hiLon: upper longitude bound in degrees, the range wraps
                      around 0 if smaller than `loLon` and spans 360 degrees
                      if equal to `loLon`
        :param bool graphicLat: if True, lines are spaced by planetographic
                                instead of planetocentric latitude
        """
        self.body = body
        self.graphicLat = graphicLat
        self.loLat = self._boundaryLatitude(loLat)
        self.hiLat = self._boundaryLatitude(hiLat)
        self.loLon = validateLongitude(loLon)
        self.hiLon = validateLongitude(hiLon)

        if self.loLon > self.hiLon:
            self.loLon -= 2*np.pi
        elif (almostEqual(self.loLon, self.hiLon, 2) or
              (almostZero(self.loLon, 2) and almostZero(self.hiLon, 2))):
            self.hiLon += 2*np.pi
            _logger.info('lower and upper map longitudes are the same, '
                         'assuming 360 degree longitude range')

    def _boundaryLatitude(self, degrees):
        lat = validateLatitude(degrees)
        if self.graphicLat:
            lat = self.body.graphicLatitude(lat)
        return lat

    @property
    def projectionName(self):
        return 'Simple Cylindrical'

    def _longitude(self, i, samples):
        lon = (i + 0.5) * (self.hiLon - self.loLon) / samples
        if self.body.prograde:
            return self.hiLon - lon
        else:
            return self.loLon + lon

    def plotMap(self, samples, lines, plot):
        latPerLine = (self.hiLat - self.loLat) / lines
        lons = [self._longitude(i, samples) for i in range(samples)]
        offset = 0
        for k in range(lines):
            lat = (k + 0.5) * latPerLine + self.loLat
            if self.graphicLat:
                lat = self.body.centricLatitude(lat)
            for lon in lons:
                plot(lat, lon, offset)
                offset += 1

    def plotGrid(self, samples, lines, latInterval, lonInterval, grid):
        grid = grid.reshape(lines, samples)

        loLat, hiLat = np.rad2deg(self.loLat), np.rad2deg(self.hiLat)
        loLon, hiLon = np.rad2deg(self.loLon), np.rad2deg(self.hiLon)

        linesPerDegree = lines / (hiLat - loLat)
        for n in np.arange(-90 + latInterval, 90, latInterval):
            k = int(round((n - loLat) * linesPerDegree))
            if 0 <= k < lines:
                grid[k,:] = GRID_VALUE

        samplesPerDegree = samples / (hiLon - loLon)
        for m in np.arange(360, 0, -lonInterval):
            # longitude ranges crossing 0 start below 0
            loLon2 = loLon + 360 if m - loLon > 360 else loLon
            i = int(round((m - loLon2) * samplesPerDegree))
            if self.body.prograde:
                i = samples - i
            if 0 <= i < samples:
                grid[:,i] = GRID_VALUE

    def distortion(self, lat):
        """
        Return the scale distortion along parallels at planetocentric latitude `lat`.
        """
        return 1 / np.cos(lat)
