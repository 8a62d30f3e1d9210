# Copyright European Space Agency, 2013

"""
Virtual images compute their data from the position on the body instead
of reading it from a photo. Mapped on their own they show the geometry of
an observation, and they are useful to check projections.

Constructor angles are in degrees. Each datum is returned as
``datum*scale + offset`` which allows to stretch the data into the range
of an integer map type.
"""

from abc import abstractmethod

import numpy as np

from planetmap.source.image import SourceImage
from planetmap.validate import validateLatitude, validateLongitude, validatePositive

__all__ = ['VirtualImage', 'MuImage', 'Mu0Image', 'CosPhaseImage', 'LatitudeImage', 'LongitudeImage']

class VirtualImage(SourceImage):
    def __init__(self, scale=1, offset=0):
        self.scale = scale
        self.offset = offset

    @abstractmethod
    def _readData(self, lat, lon):
        """
        Return the unscaled datum at (lat,lon), or None.
        """

    def readData(self, lat, lon):
        datum = self._readData(lat, lon)
        if datum is None:
            return None
        return float(datum * self.scale + self.offset)

class MuImage(VirtualImage):
    """
    Cosine of the emission angle. Negative on the far side of the body.
    """
    def __init__(self, body, subObservLat, subObservLon, range, scale=1, offset=0):
        VirtualImage.__init__(self, scale, offset)
        self.body = body
        self.subObservLat = validateLatitude(subObservLat)
        self.subObservLon = validateLongitude(subObservLon)
        self.range = validatePositive(range, 'range')

    def _readData(self, lat, lon):
        return self.body.mu(self.subObservLat, self.subObservLon, lat, lon, self.range)

class Mu0Image(VirtualImage):
    """
    Cosine of the incidence angle. Negative on the night side of the body.
    """
    def __init__(self, body, subSolarLat, subSolarLon, scale=1, offset=0):
        VirtualImage.__init__(self, scale, offset)
        self.body = body
        self.subSolarLat = validateLatitude(subSolarLat)
        self.subSolarLon = validateLongitude(subSolarLon)

    def _readData(self, lat, lon):
        return self.body.mu0(self.subSolarLat, self.subSolarLon, lat, lon)

class CosPhaseImage(VirtualImage):
    """
    Cosine of the phase angle.
    """
    def __init__(self, body, subObservLat, subObservLon, subSolarLat, subSolarLon, range,
                 scale=1, offset=0):
        VirtualImage.__init__(self, scale, offset)
        self.body = body
        self.subObservLat = validateLatitude(subObservLat)
        self.subObservLon = validateLongitude(subObservLon)
        self.subSolarLat = validateLatitude(subSolarLat)
        self.subSolarLon = validateLongitude(subSolarLon)
        self.range = validatePositive(range, 'range')

    def _readData(self, lat, lon):
        return self.body.cosPhase(self.subObservLat, self.subObservLon,
                                  self.subSolarLat, self.subSolarLon,
                                  lat, lon, self.range)

class LatitudeImage(VirtualImage):
    """
    Latitude in degrees, planetocentric unless `graphicLatitudes` is set.
    """
    def __init__(self, body, graphicLatitudes=False, scale=1, offset=0):
        VirtualImage.__init__(self, scale, offset)
        self.body = body
        self.graphicLatitudes = graphicLatitudes

    @property
    def unit(self):
        return 'deg'

    def _readData(self, lat, lon):
        if not -np.pi/2 <= lat <= np.pi/2:
            return None
        if self.graphicLatitudes:
            lat = self.body.graphicLatitude(lat)
        return np.rad2deg(lat)

class LongitudeImage(VirtualImage):
    """
    Longitude in degrees within [0,360].
    """
    @property
    def unit(self):
        return 'deg'

    def _readData(self, lat, lon):
        lon = np.rad2deg(np.fmod(lon, 2*np.pi))
        if lon < 0:
            lon += 360
        return lon
