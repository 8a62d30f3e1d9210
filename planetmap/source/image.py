# Copyright European Space Agency, 2013

"""
Images whose data is mapped by the projections.
"""

from abc import ABCMeta, abstractmethod
import numbers

import numpy as np
from scipy.ndimage import map_coordinates

__all__ = ['SourceImage', 'PhotoImage']

class SourceImage(metaclass=ABCMeta):
    """
    Base class of everything that can be mapped.
    """

    @abstractmethod
    def readData(self, lat, lon):
        """
        Return the datum at the given point on the body.

        :param lat: planetocentric latitude in radians
        :param lon: longitude in radians
        :rtype: float, or None if there is no data at this point
        """

    @property
    def unit(self):
        """ Physical unit of the data, an empty string if dimensionless. """
        return ''

class PhotoImage(SourceImage):
    """
    A photo of the body whose pixels are located by a viewing geometry.

    The image array is indexed as ``image[line, sample]``. Pixel (i,k)
    covers the photo coordinates [i,i+1) x [k,k+1).
    """
    def __init__(self, image, geometry, nibble=0, removeSky=False, interpolate=False, unit=None):
        """
        :param image: 2D array of shape (lines, samples)
        :param geometry: geometry of the photo, finalized here for the image
                         size if not done already
        :type geometry: :class:`~planetmap.camera.geometry.ViewingGeometry`
        :param nibble: number of pixels to ignore at the image edges, either
                       a single number or a tuple (left, right, top, bottom)
        :param bool removeSky: ignore pixels which don't see the body
        :param bool interpolate: interpolate bilinearly between pixels; there is
                                 no data if any of the four neighbouring pixels is NaN
        :param str unit: physical unit of the image data
        :raises ValueError: if the image is too small or the nibble values
                            leave no pixel
        """
        image = np.asarray(image, dtype=np.float64)
        if image.ndim != 2:
            raise ValueError('Source image must be two-dimensional (got shape ' + str(image.shape) + ')')
        lines, samples = image.shape
        if samples < 2 or lines < 2:
            raise ValueError('Source image samples (' + str(samples) + ') and lines (' + str(lines) +
                             ') must both be greater than one')
        self.image = image
        self.samples = samples
        self.lines = lines

        if isinstance(nibble, numbers.Integral):
            nibble = (nibble,)*4
        left, right, top, bottom = (int(n) for n in nibble)
        if min(left, right, top, bottom) < 0:
            raise ValueError('Nibble values must not be negative (got ' + str(nibble) + ')')
        if samples - right <= left:
            raise ValueError('Left and/or right nibble values (' + str(left) + ', ' + str(right) +
                             ') are too large for source image samples ' + str(samples))
        if lines - bottom <= top:
            raise ValueError('Top and/or bottom nibble values (' + str(top) + ', ' + str(bottom) +
                             ') are too large for source image lines ' + str(lines))
        self.nibble = (left, right, top, bottom)

        if not geometry.finalized:
            geometry.finalizeSetup(samples, lines)
        self.geometry = geometry

        self.bodyMask = geometry.bodyMask(samples, lines) if removeSky else None
        self.interpolate = interpolate
        self._unit = unit or ''

    @property
    def unit(self):
        return self._unit

    def _pixel(self, lat, lon):
        pix = self.geometry.latlon2pix(lat, lon)
        if pix is None:
            return None
        x, z = pix
        if x < 0 or z < 0:
            return None
        i, k = int(np.floor(x)), int(np.floor(z))
        left, right, top, bottom = self.nibble
        if i < left or i >= self.samples - right or k < top or k >= self.lines - bottom:
            return None
        if self.bodyMask is not None and not self.bodyMask[k,i]:
            return None
        return x, z, i, k

    def _interpolated(self, x, z, i, k):
        left, right, top, bottom = self.nibble
        if i + 1 >= self.samples - right or k + 1 >= self.lines - bottom:
            return np.nan
        # a NaN in one of the four neighbours spreads to the result
        return map_coordinates(self.image, [[z], [x]], order=1, prefilter=False)[0]

    def readData(self, lat, lon):
        pixel = self._pixel(lat, lon)
        if pixel is None:
            return None
        return self._datum(*pixel)

    def _datum(self, x, z, i, k):
        if self.interpolate:
            datum = self._interpolated(x, z, i, k)
        else:
            datum = self.image[k,i]
        if np.isnan(datum):
            return None
        return float(datum)

    def readDataWeighted(self, lat, lon):
        """
        As :meth:`readData` but also returns the weight of the datum when
        combined with other photos.

        The weight is the distance in pixels to the nearest image edge or,
        if the sky is removed, to the nearest sky pixel in the same line or
        sample, whichever is shorter.

        :rtype: tuple (datum, weight), or None if there is no data
        """
        pixel = self._pixel(lat, lon)
        if pixel is None:
            return None
        datum = self._datum(*pixel)
        if datum is None:
            return None
        _, _, i, k = pixel
        return datum, self._weight(i, k)

    def _weight(self, i, k):
        distance = min(i, self.samples - i, k, self.lines - k)
        if self.bodyMask is None:
            return distance

        left, right, top, bottom = self.nibble
        line = self.bodyMask[k, left:self.samples - right]
        column = self.bodyMask[top:self.lines - bottom, i]
        for sky, pos in [(np.flatnonzero(~line), i - left), (np.flatnonzero(~column), k - top)]:
            if len(sky) > 0:
                distance = min(distance, np.min(np.abs(sky - pos)))
        return int(distance)
