"""
The camera package relates the pixels of photos to points on the body.

:mod:`planetmap.camera.geometry` computes the orientation of the camera
relative to the body, :mod:`planetmap.camera.correction` removes the
lens distortion of a camera.
"""
