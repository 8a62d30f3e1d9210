# Copyright European Space Agency, 2013

"""
Mosaics of several source images.

How the data of overlapping images is combined is decided by a compositor,
a callable ``compositor(images, lat, lon)`` returning the combined datum
or None. :func:`firstRead`, :func:`unweightedAverage` and
:func:`weightedAverage` are provided.
"""

import numpy as np

from planetmap.source.image import SourceImage

__all__ = ['MosaicImage', 'firstRead', 'unweightedAverage', 'weightedAverage']

def firstRead(images, lat, lon):
    """
    Return the datum of the first image that has data at (lat,lon).
    """
    for image in images:
        datum = image.readData(lat, lon)
        if datum is not None:
            return datum
    return None

def unweightedAverage(images, lat, lon):
    """
    Return the mean of the data of all images that have data at (lat,lon).
    """
    data = [image.readData(lat, lon) for image in images]
    data = [datum for datum in data if datum is not None]
    if not data:
        return None
    return float(np.mean(data))

def weightedAverage(images, lat, lon):
    """
    Return the mean of the data of all images that have data at (lat,lon),
    weighted by the distance of the datum to the image edges.

    Images without a `readDataWeighted` method, like virtual images,
    have the weight 1.
    """
    dataSum = 0.0
    weightSum = 0
    for image in images:
        if hasattr(image, 'readDataWeighted'):
            result = image.readDataWeighted(lat, lon)
            if result is None:
                continue
            datum, weight = result
        else:
            datum = image.readData(lat, lon)
            if datum is None:
                continue
            weight = 1
        dataSum += weight * datum
        weightSum += weight
    if weightSum > 0:
        return dataSum / weightSum
    return None

class MosaicImage(SourceImage):
    """
    Combines the data of several source images.
    """
    def __init__(self, images, compositor=firstRead):
        """
        :param images: list of :class:`~planetmap.source.image.SourceImage`
        :param compositor: callable ``compositor(images, lat, lon)``
        """
        if not images:
            raise ValueError('A mosaic needs at least one image')
        self.images = list(images)
        self.compositor = compositor

    @property
    def unit(self):
        return self.images[0].unit

    def readData(self, lat, lon):
        return self.compositor(self.images, lat, lon)
