# Copyright European Space Agency, 2013

import unittest
import numpy as np
from numpy.testing import assert_allclose

from planetmap.coordinates.body import OblateSpheroid
from planetmap.camera.geometry import ViewingGeometry
from planetmap.source.image import PhotoImage

def getGeometry(finalize=True):
    """
    A sphere with a radius of 20 pixels in the center of a 100x100 photo,
    seen from above its equator at longitude 0.
    """
    geometry = ViewingGeometry(OblateSpheroid(True, 1000, 1000))
    geometry.setSubObserv(0, 0)
    geometry.positionAngle = 0
    geometry.range = 1e6
    geometry.bodyCenter = (50.5, 50.5)
    geometry.kmPerPixel = 50
    if finalize:
        geometry.finalizeSetup(100, 100)
    return geometry

def getImage():
    k, i = np.mgrid[0:100, 0:100]
    return (i + 100*k).astype(np.float64)

class Test(unittest.TestCase):

    def testReadData(self):
        photo = PhotoImage(getImage(), getGeometry(finalize=False))
        self.assertTrue(photo.geometry.finalized)
        self.assertEqual(photo.readData(0, 0), 5050)
        # far side
        self.assertIsNone(photo.readData(0, np.pi))

    def testNorthIsUp(self):
        photo = PhotoImage(getImage(), getGeometry())
        self.assertLess(photo.readData(np.deg2rad(30), 0), 5050)

    def testInterpolation(self):
        photo = PhotoImage(getImage(), getGeometry(), interpolate=True)
        assert_allclose(photo.readData(0, 0), 5100.5, rtol=1e-9)

    def testNaN(self):
        image = getImage()
        image[50,50] = np.nan
        photo = PhotoImage(image, getGeometry())
        self.assertIsNone(photo.readData(0, 0))

        # NaN neighbour of an interpolated pixel
        image = getImage()
        image[51,51] = np.nan
        photo = PhotoImage(image, getGeometry(), interpolate=True)
        self.assertIsNone(photo.readData(0, 0))

    def testNibble(self):
        geometry = getGeometry()
        photo = PhotoImage(getImage(), geometry, nibble=(0, 0, 0, 0))
        self.assertIsNotNone(photo.readData(0, 0))
        photo = PhotoImage(getImage(), geometry, nibble=(51, 0, 0, 0))
        self.assertIsNone(photo.readData(0, 0))
        photo = PhotoImage(getImage(), geometry, nibble=(0, 0, 0, 49))
        self.assertEqual(photo.readData(0, 0), 5050)
        photo = PhotoImage(getImage(), geometry, nibble=(0, 0, 0, 50))
        self.assertIsNone(photo.readData(0, 0))

    def testInvalidNibble(self):
        geometry = getGeometry()
        with self.assertRaises(ValueError):
            PhotoImage(getImage(), geometry, nibble=50)
        with self.assertRaises(ValueError):
            PhotoImage(getImage(), geometry, nibble=-1)
        with self.assertRaises(ValueError):
            PhotoImage(getImage(), geometry, nibble=(0, 0, 60, 40))

    def testInvalidImage(self):
        geometry = getGeometry()
        with self.assertRaises(ValueError):
            PhotoImage(np.zeros(100), geometry)
        with self.assertRaises(ValueError):
            PhotoImage(np.zeros((1, 100)), geometry)

    def testWeight(self):
        photo = PhotoImage(getImage(), getGeometry())
        self.assertEqual(photo.readDataWeighted(0, 0), (5050, 50))
        self.assertIsNone(photo.readDataWeighted(0, np.pi))

    def testRemoveSky(self):
        photo = PhotoImage(getImage(), getGeometry(), removeSky=True)
        self.assertEqual(photo.bodyMask.shape, (100, 100))
        # the nearest sky pixels are 20 pixels away in the same line
        self.assertEqual(photo.readDataWeighted(0, 0), (5050, 20))

    def testUnit(self):
        photo = PhotoImage(getImage(), getGeometry(), unit='DN')
        self.assertEqual(photo.unit, 'DN')
        self.assertEqual(PhotoImage(getImage(), getGeometry()).unit, '')

    def testWeightLocatesPixelOnce(self):
        geometry = getGeometry()
        photo = PhotoImage(getImage(), geometry)
        calls = []
        latlon2pix = geometry.latlon2pix
        def countingLatlon2pix(lat, lon):
            calls.append((lat, lon))
            return latlon2pix(lat, lon)
        geometry.latlon2pix = countingLatlon2pix

        self.assertEqual(photo.readDataWeighted(0, 0), (5050, 50))
        self.assertEqual(len(calls), 1)
