# Copyright European Space Agency, 2013

import unittest
import numpy as np
from numpy.testing import assert_allclose

from planetmap.coordinates.rotation import rotX, rotY, rotZ, rotXMatrix, rotYMatrix, rotZMatrix

class Test(unittest.TestCase):

    def testRotZ(self):
        assert_allclose(rotZ(np.pi/2, [1, 0, 0]), [0, -1, 0], atol=1e-15)

    def testRotX(self):
        assert_allclose(rotX(np.pi/2, [0, 1, 0]), [0, 0, -1], atol=1e-15)

    def testRotY(self):
        assert_allclose(rotY(np.pi/2, [0, 0, 1]), [-1, 0, 0], atol=1e-15)

    def testMatricesMatchVectorForms(self):
        v = np.array([0.3, -1.2, 2.5])
        for angle in [-2.1, 0.0, 0.4, np.pi]:
            assert_allclose(np.dot(rotXMatrix(angle), v), rotX(angle, v), atol=1e-15)
            assert_allclose(np.dot(rotYMatrix(angle), v), rotY(angle, v), atol=1e-15)
            assert_allclose(np.dot(rotZMatrix(angle), v), rotZ(angle, v), atol=1e-15)

    def testInverseIsTranspose(self):
        for matrix in [rotXMatrix(0.7), rotYMatrix(-1.3), rotZMatrix(2.9)]:
            assert_allclose(np.dot(matrix, matrix.T), np.eye(3), atol=1e-15)

    def testLengthIsPreserved(self):
        v = [1.0, 2.0, 3.0]
        assert_allclose(np.linalg.norm(rotX(0.3, rotY(1.1, rotZ(-0.5, v)))), np.linalg.norm(v))
