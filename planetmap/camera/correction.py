# Copyright European Space Agency, 2013

"""
Geometric (lens distortion) corrections of photo pixel coordinates.

A correction maps between image space, the pixel coordinates in the photo
as taken, and object space, the coordinates the pixel would have with an
ideal pinhole camera. All methods accept scalars or numpy arrays.
"""

from abc import ABCMeta, abstractmethod

import numpy as np

class GeometricCorrection(metaclass=ABCMeta):
    @abstractmethod
    def imageToObject(self, line, sample):
        """
        Convert distorted image coordinates to object space.

        :rtype: tuple (line, sample)
        """

    @abstractmethod
    def objectToImage(self, line, sample):
        """
        Convert object space coordinates to distorted image coordinates.

        :rtype: tuple (line, sample)
        """

class NullGeometricCorrection(GeometricCorrection):
    """ Identity correction for distortion-free images. """
    def imageToObject(self, line, sample):
        return line, sample

    def objectToImage(self, line, sample):
        return line, sample

class GLLGeometricCorrection(GeometricCorrection):
    """
    Radial distortion of the Galileo solid state imaging camera.

    Object space radii `ro` and image space radii `ri`, both measured from
    the optical axis, are related by ``ri = ro*(1 + D*ro**2)``.
    Images of up to 400 samples were taken in summation mode where
    each pixel covers 2x2 detector pixels.
    """
    DISTORTION = 6.58e-9
    OA_LINE = 400
    OA_SAMPLE = 400

    def __init__(self, samples):
        """
        :param samples: number of samples of the corrected image
        """
        self.summationMode = samples <= self.OA_SAMPLE

    def _toOpticalAxis(self, line, sample):
        if self.summationMode:
            return sample*2 - self.OA_SAMPLE, line*2 - self.OA_LINE
        else:
            return sample - self.OA_SAMPLE, line - self.OA_LINE

    def _fromOpticalAxis(self, x, y):
        line = y + self.OA_LINE
        sample = x + self.OA_SAMPLE
        if self.summationMode:
            line /= 2
            sample /= 2
        return line, sample

    def imageToObject(self, line, sample):
        x, y = self._toOpticalAxis(np.asarray(line, dtype=np.float64),
                                   np.asarray(sample, dtype=np.float64))
        isRad = np.hypot(x, y)

        # Cardano's solution of D*ro**3 + ro - ri = 0
        D = self.DISTORTION
        commonTerm1 = isRad / (2*D)
        commonTerm2 = np.sqrt(commonTerm1**2 + (1 / (3*D))**3)
        osRad = np.cbrt(commonTerm1 + commonTerm2) + np.cbrt(commonTerm1 - commonTerm2)

        with np.errstate(invalid='ignore', divide='ignore'):
            scale = np.where(isRad != 0, osRad / isRad, 1.0)
        line, sample = self._fromOpticalAxis(x*scale, y*scale)
        return line[()], sample[()]

    def objectToImage(self, line, sample):
        x, y = self._toOpticalAxis(np.asarray(line, dtype=np.float64),
                                   np.asarray(sample, dtype=np.float64))
        commonTerm = 1 + self.DISTORTION * (x*x + y*y)
        line, sample = self._fromOpticalAxis(x*commonTerm, y*commonTerm)
        return line[()], sample[()]
