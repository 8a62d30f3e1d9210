# Copyright European Space Agency, 2013

"""
Mercator projection of an oblate spheroid.
"""

import numpy as np

from planetmap.projection.factory import MapFactory, GRID_VALUE
from planetmap.rootfind import rootFind
from planetmap.validate import validateLatitude

def isometricLatitude(e, latg):
    """
    Return the isometric latitude of planetographic latitude `latg` on a
    spheroid with first eccentricity `e`.

    This is the distance of the parallel from the equator in a Mercator map,
    in units of the equatorial radius.
    """
    # asinh(tan(latg)) == log(tan(pi/4 + latg/2)) without the cancellation near the poles
    return np.arcsinh(np.tan(latg)) - e*np.arctanh(e*np.sin(latg))

def graphicFromIsometric(e, psi):
    """
    Inverse of :func:`isometricLatitude`.

    The root is searched for in terms of the isometric latitude `s` of a
    sphere, where the equation is almost linear. The spherical solution
    ``s = psi`` is the initial guess.
    """
    # on the sphere, sin(latg) == tanh(s)
    s = rootFind(psi, psi, lambda s: s - e*np.arctanh(e*np.tanh(s)))
    return np.arctan(np.sinh(s))

class Mercator(MapFactory):
    """
    Conformal cylindrical projection covering all longitudes.

    Without `maxLat` the map spans the latitudes for which a pixel has the
    same extent in both directions at the equator, so the latitude range
    grows with the ratio of lines to samples.
    """
    def __init__(self, body, maxLat=None):
        """
        :param body: the mapped body
        :type body: :class:`~planetmap.coordinates.body.OblateSpheroid`
        :param maxLat: highest planetocentric latitude in degrees shown at the
                       upper and lower map edge
        :raises ValueError: if `maxLat` is not smaller than 90 degrees
        """
        self.body = body
        if maxLat is None:
            self.maxLat = None
        else:
            lat = validateLatitude(maxLat)
            if abs(maxLat) >= 90:
                raise ValueError('Maximum Mercator projection latitude (' + str(maxLat) + ') >= 90')
            self.maxLat = abs(lat)

    @property
    def projectionName(self):
        return 'Mercator'

    def mercatorX(self, latg):
        """
        Return the distance from the equator in the map, in units of the
        equatorial radius, at planetographic latitude `latg`.
        """
        return isometricLatitude(self.body.firstEccentricity, latg)

    def _xmax(self, samples, lines):
        if self.maxLat is None:
            return lines / samples * np.pi
        return self.mercatorX(self.body.graphicLatitude(self.maxLat))

    def plotMap(self, samples, lines, plot):
        xmax = self._xmax(samples, lines)
        lons = (np.arange(samples) + 0.5) / samples * 2*np.pi
        if self.body.prograde:
            lons = 2*np.pi - lons

        offset = 0
        for k in range(lines):
            x = (k + 0.5) / lines * 2*xmax - xmax
            latg = graphicFromIsometric(self.body.firstEccentricity, x)
            lat = self.body.centricLatitude(latg)
            for lon in lons:
                plot(lat, lon, offset)
                offset += 1

    def plotGrid(self, samples, lines, latInterval, lonInterval, grid):
        grid = grid.reshape(lines, samples)
        xmax = self._xmax(samples, lines)
        pixelsPerX = lines / (2*xmax)

        for n in np.arange(-90 + latInterval, 90, latInterval):
            latg = self.body.graphicLatitude(np.deg2rad(n))
            k = int(round(self.mercatorX(latg) * pixelsPerX + lines/2))
            if 0 <= k < lines:
                grid[k,:] = GRID_VALUE

        for m in np.arange(360, 0, -lonInterval):
            i = int(round(m * samples / 360))
            if self.body.prograde:
                i = samples - i
            if 0 <= i < samples:
                grid[:,i] = GRID_VALUE

    def distortion(self, latg):
        """
        Return the scale factor of the map at planetographic latitude `latg`,
        1 at the equator.
        """
        return self.body.eqRad / self.body.N(self.body.centricLatitude(latg)) / np.cos(latg)
