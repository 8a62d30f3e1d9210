# Copyright European Space Agency, 2013

import logging
import unittest
import numpy as np
from numpy.testing import assert_allclose, assert_equal

from planetmap.coordinates.body import OblateSpheroid
from planetmap.camera.geometry import ViewingGeometry, MissingParameterError, GeometryFrozenError
from planetmap.camera.correction import GLLGeometricCorrection

jupiter = OblateSpheroid(True, 71492, 66854)

sampleCenter = 2807.61
lineCenter = 1200.67
subObservLat = -5.63
subObservLon = 144.37

def getJupiterGeometry(finalize=True):
    """
    Jupiter seen from 1.2 million km, with the body center outside of the photo.
    """
    geometry = ViewingGeometry(jupiter)
    geometry.bodyCenter = (sampleCenter, lineCenter)
    geometry.setSubObserv(subObservLat, subObservLon)
    geometry.positionAngle = 27.175
    geometry.setSubSolar(0.22, 75.33)
    geometry.range = 1211230
    geometry.focalLength = 1501.039
    geometry.scale = 32.8084
    if finalize:
        geometry.finalizeSetup(400, 200)
    return geometry

def getSphereGeometry():
    """
    A sphere with a radius of 20 pixels in the center of a 100x100 photo.
    """
    geometry = ViewingGeometry(OblateSpheroid(True, 1000, 1000))
    geometry.setSubObserv(0, 0)
    geometry.positionAngle = 0
    geometry.range = 1e6
    geometry.bodyCenter = (50.5, 50.5)
    geometry.kmPerPixel = 50
    geometry.finalizeSetup(100, 100)
    return geometry

class Test(unittest.TestCase):

    def testSubObservationPointIsBodyCenter(self):
        geometry = getJupiterGeometry()
        sample, line = geometry.latlon2pix(np.deg2rad(subObservLat), np.deg2rad(subObservLon))
        assert_allclose([sample, line], [sampleCenter, lineCenter], rtol=1e-9)

    def testBodyCenterIsSubObservationPoint(self):
        geometry = getJupiterGeometry()
        lat, lon = geometry.pix2latlon(sampleCenter, lineCenter)
        assert_allclose(np.rad2deg(lat), subObservLat, rtol=1e-9)
        assert_allclose(np.rad2deg(lon), subObservLon, rtol=1e-9)

    def testNegativeSubObservationLongitude(self):
        geometry = getJupiterGeometry(finalize=False)
        geometry.setSubObserv(-15.63, -144.37)
        geometry.finalizeSetup(400, 200)
        lat, lon = np.deg2rad(-15.63), np.deg2rad(215.63)
        sample, line = geometry.latlon2pix(lat, lon)
        assert_allclose([sample, line], [sampleCenter, lineCenter], rtol=1e-9)
        lat, lon = geometry.pix2latlon(sampleCenter, lineCenter)
        assert_allclose(np.rad2deg(lat), -15.63, rtol=1e-9)
        assert_allclose(np.rad2deg(lon), 215.63, rtol=1e-9)

    def testRoundTrip(self):
        geometry = getJupiterGeometry()
        for dSample, dLine in [(50, 30), (-120, 80), (300, -200), (-1000, 400)]:
            sample, line = sampleCenter + dSample, lineCenter + dLine
            latLon = geometry.pix2latlon(sample, line)
            self.assertIsNotNone(latLon)
            lat, lon = latLon
            self.assertTrue(0 <= lon < 2*np.pi)
            assert_allclose(geometry.latlon2pix(lat, lon), (sample, line), rtol=1e-8)

    def testSky(self):
        geometry = getJupiterGeometry()
        self.assertIsNone(geometry.pix2latlon(sampleCenter + 5000, lineCenter))

    def testFarSide(self):
        geometry = getJupiterGeometry()
        lat, lon = np.deg2rad(-subObservLat), np.deg2rad(subObservLon + 180)
        self.assertFalse(geometry.isVisible(lat, lon))
        self.assertIsNone(geometry.latlon2pix(lat, lon))

    def testRotationIsOrthonormal(self):
        geometry = getJupiterGeometry()
        assert_allclose(np.dot(geometry.observ2body, geometry.body2observ), np.eye(3), atol=1e-14)
        assert_allclose(np.linalg.norm(geometry.rangeB), geometry.range)

    def testResolution(self):
        geometry = getJupiterGeometry()
        assert_allclose(geometry.focalLengthPixels, 1501.039 * 32.8084)
        assert_allclose(geometry.kmPerPixel, geometry.normalRange / geometry.focalLengthPixels)
        self.assertEqual(geometry.opticalAxis, (200, 100))

    def testLatLonCenter(self):
        geometry = ViewingGeometry(jupiter)
        geometry.setSubObserv(subObservLat, subObservLon)
        geometry.positionAngle = 27.175
        geometry.range = 1211230
        geometry.latLonCenter = (subObservLat, subObservLon)
        geometry.kmPerPixel = 25
        geometry.finalizeSetup(400, 200)

        assert_allclose(geometry.bodyCenter, (200, 100), rtol=1e-9)
        lat, lon = geometry.pix2latlon(200, 100)
        assert_allclose(np.rad2deg(lat), subObservLat, rtol=1e-9)
        assert_allclose(np.rad2deg(lon), subObservLon, rtol=1e-9)

    def testLatLonCenterOffAxis(self):
        geometry = ViewingGeometry(jupiter)
        geometry.setSubObserv(subObservLat, subObservLon)
        geometry.positionAngle = 27.175
        geometry.range = 1211230
        geometry.latLonCenter = (10, 150)
        geometry.focalLength = 1501.039
        geometry.scale = 32.8084
        geometry.finalizeSetup(400, 200)

        lat, lon = geometry.pix2latlon(200, 100)
        assert_allclose(np.rad2deg(lat), 10, rtol=1e-9)
        assert_allclose(np.rad2deg(lon), 150, rtol=1e-9)

        # the body center is consistent with the sub-observation point
        sample, line = geometry.latlon2pix(np.deg2rad(subObservLat), np.deg2rad(subObservLon))
        assert_allclose((sample, line), geometry.bodyCenter, rtol=1e-9)

    def testMissingParameters(self):
        geometry = ViewingGeometry(jupiter)
        geometry.setSubObserv(subObservLat, subObservLon)
        geometry.positionAngle = 0
        geometry.bodyCenter = (200, 100)
        with self.assertRaises(MissingParameterError):
            geometry.finalizeSetup(400, 200)

        geometry.range = 1211230
        # neither kmPerPixel nor focal length and scale
        with self.assertRaises(MissingParameterError):
            geometry.finalizeSetup(400, 200)

        with self.assertRaises(MissingParameterError):
            geometry.pix2latlon(200, 100)

    def testArcsecPerPixel(self):
        geometry = ViewingGeometry(jupiter)
        with self.assertRaises(MissingParameterError):
            geometry.setArcsecPerPixel(1)
        geometry.range = 1e6
        geometry.setArcsecPerPixel(1)
        assert_allclose(geometry.kmPerPixel, 1e6 * np.deg2rad(1/3600))

    def testFrozen(self):
        geometry = getJupiterGeometry()
        self.assertTrue(geometry.finalized)
        with self.assertRaises(GeometryFrozenError):
            geometry.range = 2e6
        with self.assertRaises(GeometryFrozenError):
            geometry.setSubObserv(0, 0)
        with self.assertRaises(GeometryFrozenError):
            geometry.finalizeSetup(400, 200)

    def testValidation(self):
        geometry = ViewingGeometry(jupiter)
        with self.assertRaises(ValueError):
            geometry.subObservLat = 91
        with self.assertRaises(ValueError):
            geometry.range = 1000
        with self.assertRaises(ValueError):
            geometry.bodyCenter = (np.nan, 3)
        with self.assertRaises(ValueError):
            geometry.emiAngLimit = 95
        with self.assertRaises(ValueError):
            geometry.geometricCorrection = object()

    def testPositiveLongitudes(self):
        geometry = ViewingGeometry(jupiter)
        geometry.subObservLon = -144.37
        assert_allclose(geometry.subObservLon, 215.63)
        geometry.latLonCenter = (0, -90)
        assert_allclose(geometry.latLonCenter, (0, 270))

    def testEmissionAngleLimit(self):
        geometry = getJupiterGeometry(finalize=False)
        geometry.emiAngLimit = 30
        geometry.finalizeSetup(400, 200)
        assert_allclose(geometry.emiAngLimit, 30)
        self.assertTrue(geometry.isVisible(np.deg2rad(subObservLat), np.deg2rad(subObservLon)))
        self.assertFalse(geometry.isVisible(np.deg2rad(subObservLat), np.deg2rad(subObservLon + 45)))

    def testTerminator(self):
        geometry = getJupiterGeometry(finalize=False)
        geometry.useTerminator = True
        geometry.finalizeSetup(400, 200)
        # visible from the observer but on the night side
        lat, lon = np.deg2rad(0), np.deg2rad(75.33 + 120)
        self.assertGreater(jupiter.mu(np.deg2rad(subObservLat), np.deg2rad(subObservLon),
                                      lat, lon, geometry.range), 0)
        self.assertFalse(geometry.isVisible(lat, lon))
        self.assertTrue(geometry.isVisible(np.deg2rad(0), np.deg2rad(120)))

    def testBodyMask(self):
        geometry = getSphereGeometry()
        mask = geometry.bodyMask(100, 100)
        assert_equal(mask.shape, (100, 100))
        self.assertTrue(mask[50,50])
        self.assertTrue(mask[50,65])
        self.assertFalse(mask[50,76])
        self.assertFalse(mask[0,0])

    def testPix2LatLonArray(self):
        geometry = getSphereGeometry()
        samples = np.array([[52, 60], [0, 45]])
        lines = np.array([[50.5, 55], [0, 40]])
        lat, lon = geometry.pix2latlonArray(samples, lines)
        assert_equal(lat.shape, (2, 2))
        for idx in [(0,0), (0,1), (1,1)]:
            assert_allclose((lat[idx], lon[idx]), geometry.pix2latlon(samples[idx], lines[idx]),
                            rtol=1e-12, atol=1e-12)
        self.assertTrue(np.isnan(lat[1,0]))

    def testOrientation(self):
        geometry = getSphereGeometry()
        # north is up, longitudes of a prograde body increase to the left
        lat, _ = geometry.pix2latlon(50.5, 40)
        self.assertGreater(lat, 0)
        _, lon = geometry.pix2latlon(40, 50.5)
        self.assertLess(lon, np.pi)
        self.assertGreater(lon, 0)

    def testGeometricCorrection(self):
        geometry = getJupiterGeometry(finalize=False)
        geometry.geometricCorrection = GLLGeometricCorrection(400)
        geometry.finalizeSetup(400, 200)
        lat, lon = geometry.pix2latlon(390, 190)
        assert_allclose(geometry.latlon2pix(lat, lon), (390, 190), rtol=1e-8)

    def testInjectedLogger(self):
        logger = logging.getLogger('planetmap.test.geometry')
        geometry = ViewingGeometry(jupiter, logger=logger)
        self.assertIs(geometry.logger, logger)

    def testBodyCenterOnOpticalAxis(self):
        geometry = ViewingGeometry(OblateSpheroid(True, 1000, 1000))
        geometry.setSubObserv(0, 0)
        geometry.positionAngle = 0
        geometry.range = 1e6
        geometry.bodyCenter = (50, 50)
        geometry.kmPerPixel = 50
        # both candidate rotations coincide
        with np.errstate(all='raise'):
            geometry.finalizeSetup(100, 100)
        assert_allclose(geometry.latlon2pix(0, 0), (50, 50), rtol=1e-12)

    def testBodyCenterBeyondRange(self):
        geometry = ViewingGeometry(OblateSpheroid(True, 1000, 1000))
        geometry.setSubObserv(0, 0)
        geometry.positionAngle = 0
        geometry.range = 1500
        geometry.kmPerPixel = 50
        # 100 pixels or 5000 km away from the optical axis
        geometry.bodyCenter = (150, 50)
        with self.assertRaises(ValueError):
            geometry.finalizeSetup(100, 100)

    def testNoRotation(self):
        geometry = ViewingGeometry(OblateSpheroid(True, 1000, 1000))
        geometry.setSubObserv(60, 0)
        geometry.positionAngle = 0
        geometry.range = 1e6
        geometry.kmPerPixel = 50
        # body center 36.9 degrees to the side of and slightly above the optical axis
        geometry.bodyCenter = (-11950, 49)
        with self.assertRaises(ValueError):
            geometry.finalizeSetup(100, 100)

    def testRotationResidualWarning(self):
        geometry = ViewingGeometry(OblateSpheroid(True, 1000, 1000))
        geometry.setSubObserv(80, 0)
        geometry.positionAngle = 0
        geometry.range = 1e6
        geometry.kmPerPixel = 50
        # body center 20 degrees from the optical axis along the lines
        geometry.bodyCenter = (50, -6790)
        with self.assertLogs('planetmap.camera.geometry', 'WARNING'):
            geometry.finalizeSetup(100, 100)
        self.assertTrue(geometry.finalized)
