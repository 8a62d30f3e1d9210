# Copyright European Space Agency, 2013

"""
Polar stereographic projection of an oblate spheroid.
"""

import numpy as np

from planetmap.projection.factory import MapFactory, GRID_VALUE
from planetmap.projection.mercator import isometricLatitude, graphicFromIsometric
from planetmap.validate import validateLatitude

# number of points per grid line
GRID_STEPS = 2000

class PolarStereographic(MapFactory):
    """
    Conformal azimuthal projection centered on one of the poles.

    The pole is in the center of the map. Longitude 0 points towards
    increasing lines and, in a north polar map of a prograde body, longitude
    90 towards increasing samples.
    """
    def __init__(self, body, maxLat=None, northPole=True):
        """
        :param body: the mapped body
        :type body: :class:`~planetmap.coordinates.body.OblateSpheroid`
        :param maxLat: planetocentric latitude in degrees at the map edge
                       closest to the center, defaults to the equator
        :param bool northPole: whether the north or south pole is at the map center
        :raises ValueError: if the absolute value of `maxLat` is not smaller than 90 degrees
        """
        self.body = body
        if maxLat is None:
            self.maxLat = 0.0
        else:
            self.maxLat = validateLatitude(maxLat)
            if abs(maxLat) >= 90:
                raise ValueError('Maximum Polar Stereographic projection latitude (' + str(maxLat) +
                                 ') >= 90')
        self.northPole = northPole

        a = body.eqRad
        e = body.firstEccentricity
        self._rhoCoeff = 2 * a * (1 + e)**(-(1 - e) / 2) * (1 - e)**(-(1 + e) / 2)
        self._distortionCoeff = (1 + e)**(1 - 2*e) * (1 - e)**(1 + 2*e) / (4*a*a)

    @property
    def projectionName(self):
        return 'Polar Stereographic'

    def _rho(self, latg):
        return self._rhoCoeff * np.exp(-isometricLatitude(self.body.firstEccentricity, latg))

    def stereoRho(self, latg):
        """
        Return the distance from the map center, in kilometers on the body,
        of the parallel at planetographic latitude `latg`.
        """
        if not self.northPole:
            latg = -latg
        return self._rho(latg)

    def distortion(self, latg):
        """
        Return the scale factor of the map at planetographic latitude `latg`,
        1 at the pole.
        """
        return 1 + self._distortionCoeff * self.stereoRho(latg)**2

    def _kmPerPixel(self, samples, lines):
        rhoMax = self.stereoRho(self.body.graphicLatitude(self.maxLat))
        return 2 * rhoMax / min(samples, lines)

    @property
    def _counterClockwise(self):
        return self.northPole == self.body.prograde

    def plotMap(self, samples, lines, plot):
        kmPerPixel = self._kmPerPixel(samples, lines)
        e = self.body.firstEccentricity
        sign = 1 if self._counterClockwise else -1

        offset = 0
        for k in range(lines):
            X = k + 0.5 - lines/2
            for i in range(samples):
                Y = i + 0.5 - samples/2
                rho = kmPerPixel * np.hypot(Y, X)
                if rho == 0:
                    latg = np.pi/2
                else:
                    # rho = rhoCoeff*exp(-psi) with psi the isometric latitude
                    latg = graphicFromIsometric(e, np.log(self._rhoCoeff / rho))
                lat = self.body.centricLatitude(latg if self.northPole else -latg)
                lon = np.mod(np.arctan2(sign*Y, X), 2*np.pi)
                plot(lat, lon, offset)
                offset += 1

    def _plotPoints(self, samples, lines, rho, lon, grid):
        kmPerPixel = self._kmPerPixel(samples, lines)
        sign = 1 if self._counterClockwise else -1
        k = np.round(rho * np.cos(lon) / kmPerPixel + lines/2 - 0.5)
        i = np.round(sign * rho * np.sin(lon) / kmPerPixel + samples/2 - 0.5)
        inside = (i >= 0) & (i < samples) & (k >= 0) & (k < lines)
        grid[k[inside].astype(int), i[inside].astype(int)] = GRID_VALUE

    def plotGrid(self, samples, lines, latInterval, lonInterval, grid):
        grid = grid.reshape(lines, samples)
        sweep = np.arange(GRID_STEPS) / GRID_STEPS

        for n in np.arange(-90 + latInterval, 90, latInterval):
            rho = self.stereoRho(self.body.graphicLatitude(np.deg2rad(n)))
            self._plotPoints(samples, lines, rho, sweep * 2*np.pi, grid)

        # rho grows without bound towards the opposite pole
        latgs = (sweep * 2 - 1) * np.pi/2
        with np.errstate(invalid='ignore', over='ignore', divide='ignore'):
            rhos = self.stereoRho(latgs)
        rhos = rhos[np.isfinite(rhos)]
        for m in np.arange(360, 0, -lonInterval):
            self._plotPoints(samples, lines, rhos, np.deg2rad(m), grid)
