# Copyright European Space Agency, 2013

import unittest
import numpy as np
from numpy.testing import assert_allclose, assert_equal

from planetmap.coordinates.body import OblateSpheroid
from planetmap.projection.cylindrical import SimpleCylindrical
from planetmap.projection.factory import GRID_VALUE
from planetmap.source.virtual import LatitudeImage, LongitudeImage

jupiter = OblateSpheroid(True, 71492, 66854)
retrograde = OblateSpheroid(False, 71492, 66854)

def collectPlots(projection, samples, lines):
    plots = []
    projection.plotMap(samples, lines, lambda lat, lon, offset: plots.append((lat, lon, offset)))
    return plots

class Test(unittest.TestCase):

    def testName(self):
        self.assertEqual(SimpleCylindrical(jupiter).projectionName, 'Simple Cylindrical')

    def testPlotMap(self):
        plots = collectPlots(SimpleCylindrical(jupiter), 36, 18)
        assert_equal([offset for _, _, offset in plots], list(range(36*18)))
        lat, lon, _ = plots[0]
        assert_allclose(np.rad2deg([lat, lon]), [-85, 355])
        lat, lon, _ = plots[-1]
        assert_allclose(np.rad2deg([lat, lon]), [85, 5])

    def testRetrograde(self):
        plots = collectPlots(SimpleCylindrical(retrograde), 36, 18)
        assert_allclose(np.rad2deg(plots[0][1]), 5)
        assert_allclose(np.rad2deg(plots[35][1]), 355)

    def testLongitudeWrap(self):
        projection = SimpleCylindrical(jupiter, loLon=270, hiLon=90)
        plots = collectPlots(projection, 18, 1)
        lons = np.rad2deg([lon for _, lon, _ in plots])
        assert_allclose(lons[0], 85)
        assert_allclose(lons[-1], -85)

    def testFullLongitudeRange(self):
        with self.assertLogs('planetmap.projection.cylindrical', level='INFO'):
            projection = SimpleCylindrical(jupiter, loLon=20, hiLon=20)
        assert_allclose(projection.hiLon - projection.loLon, 2*np.pi)

    def testInvalidLatitude(self):
        with self.assertRaises(ValueError):
            SimpleCylindrical(jupiter, loLat=-100)

    def testGraphicLatitudes(self):
        projection = SimpleCylindrical(jupiter, loLat=-60, hiLat=60, graphicLat=True)
        plots = collectPlots(projection, 1, 2)
        lat, _, _ = plots[1]
        # half way between 0 and 60 degrees planetographic latitude
        assert_allclose(jupiter.graphicLatitude(lat), jupiter.graphicLatitude(np.deg2rad(60)) / 2)

    def testLatitudeMap(self):
        mapData = SimpleCylindrical(jupiter).makeMap(LatitudeImage(jupiter), 36, 18)
        assert_equal(mapData.shape, (18, 36))
        assert_allclose(mapData[0], -85)
        assert_allclose(mapData[-1], 85)

    def testLongitudeMap(self):
        mapData = SimpleCylindrical(jupiter).makeMap(LongitudeImage(), 36, 18)
        # longitudes increase to the left
        assert_allclose(mapData[:,0], 355)
        assert_allclose(mapData[:,-1], 5)

    def testGrid(self):
        grid = SimpleCylindrical(jupiter).makeGrid(36, 18, 30, 30)
        for k in [3, 6, 9, 12, 15]:
            assert_equal(grid[k], GRID_VALUE)
        for i in range(0, 36, 3):
            assert_equal(grid[:,i], GRID_VALUE)
        self.assertEqual(grid[1,1], 0)
        self.assertEqual(np.count_nonzero(grid), 5*36 + 12*18 - 5*12)

    def testDistortion(self):
        projection = SimpleCylindrical(jupiter)
        assert_allclose(projection.distortion(0), 1)
        assert_allclose(projection.distortion(np.pi/3), 2)
