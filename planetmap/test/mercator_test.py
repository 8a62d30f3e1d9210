# Copyright European Space Agency, 2013

import unittest
import numpy as np
from numpy.testing import assert_allclose, assert_equal

from planetmap.coordinates.body import OblateSpheroid
from planetmap.projection.mercator import Mercator, isometricLatitude, graphicFromIsometric
from planetmap.projection.factory import GRID_VALUE
from planetmap.source.virtual import LatitudeImage, LongitudeImage

jupiter = OblateSpheroid(True, 71492, 66854)
# strongly flattened body
flat = OblateSpheroid(True, 1234567, 1234567/2)

class Test(unittest.TestCase):

    def testName(self):
        self.assertEqual(Mercator(jupiter).projectionName, 'Mercator')

    def testInvalidMaxLat(self):
        with self.assertRaises(ValueError):
            Mercator(jupiter, maxLat=90)
        with self.assertRaises(ValueError):
            Mercator(jupiter, maxLat=-95)

    def testIsometricLatitude(self):
        # sphere
        assert_allclose(isometricLatitude(0, np.pi/4), np.log(np.tan(3*np.pi/8)))
        e = flat.firstEccentricity
        latgs = np.deg2rad([-89.5, -60, -10, 0, 1e-3, 45, 80, 89.9])
        for latg in latgs:
            assert_allclose(graphicFromIsometric(e, isometricLatitude(e, latg)), latg, rtol=1e-12, atol=1e-14)

    def testEquator(self):
        mapData = Mercator(flat).makeMap(LatitudeImage(flat), 50, 61)
        assert_equal(mapData.shape, (61, 50))
        assert_allclose(mapData[30], 0, atol=1e-9)
        # southern latitudes in the first lines
        self.assertLess(mapData[0,0], 0)
        assert_allclose(mapData[0], -mapData[-1], rtol=1e-9)
        self.assertTrue(np.all(np.diff(mapData[:,0]) > 0))

    def testMaxLat(self):
        mapData = Mercator(flat, maxLat=60).makeMap(LatitudeImage(flat), 50, 61)
        self.assertTrue(-60 < mapData[0,0] < -50)
        self.assertTrue(50 < mapData[-1,0] < 60)

    def testLongitudes(self):
        mapData = Mercator(jupiter).makeMap(LongitudeImage(), 50, 11)
        assert_allclose(mapData[:,0], 360 - 3.6)
        assert_allclose(mapData[:,-1], 3.6)

    def testConformal(self):
        # pixels are square at the equator
        samples, lines = 100, 51
        projection = Mercator(jupiter)
        xmax = projection._xmax(samples, lines)
        assert_allclose(2*xmax / lines, 2*np.pi / samples)

    def testGrid(self):
        grid = Mercator(jupiter).makeGrid(36, 36, 30, 30)
        assert_equal(grid.shape, (36, 36))
        # equator
        assert_equal(grid[18], GRID_VALUE)
        assert_equal(grid[:,0], GRID_VALUE)
        self.assertEqual(grid[1,1], 0)

    def testDistortion(self):
        projection = Mercator(jupiter)
        assert_allclose(projection.distortion(0), 1)
        self.assertGreater(projection.distortion(0.5), 1)
        self.assertGreater(projection.distortion(1.0), projection.distortion(0.5))
