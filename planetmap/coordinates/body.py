# Copyright European Space Agency, 2013

"""
Shape models of the mapped body.

All angles are in radians. Latitudes are planetocentric unless named
otherwise, longitudes are east longitudes. The body-fixed cartesian frame
has its z-axis along the rotation axis and its negative y-axis pointing
towards longitude 0.
"""

from abc import ABCMeta, abstractmethod

import numpy as np

from planetmap.coordinates.intersection import ellipsoidLineRoots, cartesianToLatLon

class BodyData(metaclass=ABCMeta):
    """
    Base class of body shape models.

    Instances are immutable and are usually shared between the viewing
    geometries, projections and sources working on the same body.
    """
    def __init__(self, prograde):
        """
        :param bool prograde: True if the body rotates in the same direction
                              as it orbits
        """
        self._prograde = bool(prograde)

    @property
    def prograde(self):
        return self._prograde

    @abstractmethod
    def centricRadius(self, lat):
        """ Distance from the body center to the surface at latitude `lat`. """

    @abstractmethod
    def centricLatitude(self, latg):
        """ Convert planetographic to planetocentric latitude. """

    @abstractmethod
    def graphicLatitude(self, lat):
        """ Convert planetocentric to planetographic latitude. """

    @abstractmethod
    def mu(self, subObservLat, subObservLon, lat, lon, range):
        """ Cosine of the emission angle at (lat,lon). """

    @abstractmethod
    def mu0(self, subSolarLat, subSolarLon, lat, lon):
        """ Cosine of the incidence angle at (lat,lon), with the sun at infinity. """

    @abstractmethod
    def cosPhase(self, subObservLat, subObservLon, subSolarLat, subSolarLon, lat, lon, range):
        """ Cosine of the phase angle at (lat,lon). """


class OblateSpheroid(BodyData):
    """
    A body shaped as an ellipsoid of revolution flattened at the poles.
    """
    def __init__(self, prograde, eqRad, polRad):
        """
        :param bool prograde: True if the body rotates in the same direction
                              as it orbits
        :param eqRad: equatorial radius
        :param polRad: polar radius, not larger than `eqRad`
        :raises ValueError: on non-positive radii or if `polRad` > `eqRad`
        """
        BodyData.__init__(self, prograde)
        if not eqRad > 0:
            raise ValueError('Equatorial radius must be greater than zero (got ' + str(eqRad) + ')')
        if not polRad > 0:
            raise ValueError('Polar radius must be greater than zero (got ' + str(polRad) + ')')
        if eqRad < polRad:
            raise ValueError('Equatorial radius (' + str(eqRad) + ') is less than polar radius (' +
                             str(polRad) + ')')
        self._eqRad = float(eqRad)
        self._polRad = float(polRad)
        self._firstEccentricity = np.sqrt(1 - (self._polRad / self._eqRad)**2)

    def __repr__(self):
        return ('OblateSpheroid(prograde=' + str(self.prograde) + ', eqRad=' + str(self.eqRad) +
                ', polRad=' + str(self.polRad) + ')')

    @property
    def eqRad(self):
        return self._eqRad

    @property
    def polRad(self):
        return self._polRad

    @property
    def flattening(self):
        return (self._eqRad - self._polRad) / self._eqRad

    @property
    def firstEccentricity(self):
        return self._firstEccentricity

    def centricRadius(self, lat):
        # hypot avoids the overflow of the squared radii in the textbook formula
        return 1 / np.hypot(np.cos(lat) / self._eqRad, np.sin(lat) / self._polRad)

    def centricLatitude(self, latg):
        """
        :note: undefined at exactly +-pi/2
        """
        return np.arctan((self._polRad / self._eqRad)**2 * np.tan(latg))

    def graphicLatitude(self, lat):
        """
        :note: undefined at exactly +-pi/2
        """
        return np.arctan((self._eqRad / self._polRad)**2 * np.tan(lat))

    def _observerDistance(self, subObservLat, subObservLon, lat, lon, range, r):
        # law of cosines for the distance between observer and surface point
        return np.sqrt(range*range + r*r
                       - 2*range*r*(np.sin(subObservLat) * np.sin(lat) +
                                    np.cos(subObservLat) * np.cos(lat) * np.cos(subObservLon - lon)))

    def mu(self, subObservLat, subObservLon, lat, lon, range):
        """
        Cosine of the emission angle, the angle between the surface normal at
        (lat,lon) and the direction to the observer.

        :param subObservLat: planetocentric latitude of the sub-observation point
        :param subObservLon: longitude of the sub-observation point
        :param lat: planetocentric latitude
        :param lon: longitude
        :param range: distance from the body center to the observer
        :rtype: float within [-1,1], negative if the point faces away from the observer
        """
        latg = self.graphicLatitude(lat)
        r = self.centricRadius(lat)
        return ((range * np.sin(subObservLat) * np.sin(latg) - r * np.cos(lat - latg)
                 + range * np.cos(subObservLat) * np.cos(latg) * np.cos(subObservLon - lon)) /
                self._observerDistance(subObservLat, subObservLon, lat, lon, range, r))

    def mu0(self, subSolarLat, subSolarLon, lat, lon):
        """
        Cosine of the incidence angle, the angle between the surface normal at
        (lat,lon) and the direction to the sun, which is assumed to be
        infinitely far away.

        :rtype: float within [-1,1], negative if the point is not illuminated
        """
        latg = self.graphicLatitude(lat)
        return (np.sin(subSolarLat) * np.sin(latg) +
                np.cos(subSolarLat) * np.cos(latg) * np.cos(subSolarLon - lon))

    def cosPhase(self, subObservLat, subObservLon, subSolarLat, subSolarLon, lat, lon, range):
        """
        Cosine of the phase angle, the angle between the directions from the
        surface point at (lat,lon) to the sun and to the observer.
        """
        r = self.centricRadius(lat)
        return ((range * (np.cos(subObservLat) * np.cos(subSolarLat) * np.cos(subObservLon - subSolarLon) +
                          np.sin(subObservLat) * np.sin(subSolarLat))
                 - r * (np.cos(lat) * np.cos(subSolarLat) * np.cos(lon - subSolarLon) +
                        np.sin(lat) * np.sin(subSolarLat))) /
                self._observerDistance(subObservLat, subObservLon, lat, lon, range, r))

    def M(self, lat):
        """
        Meridional radius of curvature at planetocentric latitude `lat`.
        """
        e2 = self._firstEccentricity**2
        sinLatg = np.sin(self.graphicLatitude(lat))
        return self._eqRad * (1 - e2) / (1 - e2 * sinLatg**2)**1.5

    def N(self, lat):
        """
        Prime vertical radius of curvature at planetocentric latitude `lat`.
        """
        e2 = self._firstEccentricity**2
        sinLatg = np.sin(self.graphicLatitude(lat))
        return self._eqRad / np.sqrt(1 - e2 * sinLatg**2)

    def surfacePoint(self, lat, lon):
        """
        Return the body-fixed cartesian coordinates of the surface point at
        planetocentric latitude `lat` and longitude `lon`.
        """
        r = self.centricRadius(lat)
        return np.array([r * np.cos(lat) * np.sin(lon),
                         -r * np.cos(lat) * np.cos(lon),
                         r * np.sin(lat)])

    def ellipseIntersection(self, vec, dvec):
        """
        Return the first point where the line ``vec + k*dvec`` meets the surface.

        :param vec: line origin in body-fixed coordinates
        :param dvec: line direction, not required to be a unit vector
        :raises ValueError: if `dvec` is a null vector
        :rtype: tuple (lat, lon) in radians, or None if the line misses the body
        """
        dvec = np.asarray(dvec, dtype=np.float64)
        if not np.any(dvec):
            raise ValueError('Line direction must not be a null vector')
        k = ellipsoidLineRoots(self._eqRad, self._polRad, vec, dvec)[0]
        if np.isnan(k):
            return None
        lat, lon = cartesianToLatLon(np.asarray(vec) + k*dvec)
        return lat[0], lon[0]
