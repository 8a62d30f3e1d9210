# Copyright European Space Agency, 2013

"""
This module provides the base class of all map projections together
with the bookkeeping used while a map is made.
"""

import logging
from abc import ABCMeta, abstractproperty, abstractmethod

import numpy as np

from planetmap.progress import Notifier

_logger = logging.getLogger(__name__)

__all__ = ['MapFactory', 'Extrema', 'PlotInfo', 'emptyValue', 'clampMinimum', 'clampMaximum',
           'GRID_VALUE']

# value of grid line pixels in the arrays returned by MapFactory.makeGrid
GRID_VALUE = np.iinfo(np.uint8).max

def _typeLimits(dtype):
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
    elif np.issubdtype(dtype, np.floating):
        info = np.finfo(dtype)
    else:
        raise ValueError('unsupported map data type: ' + str(dtype))
    return info.min, info.max

def emptyValue(dtype):
    """
    Return the value of map pixels without data.

    :rtype: NaN for floating point types, 0 for integer types
    """
    dtype = np.dtype(dtype)
    _typeLimits(dtype)
    if np.issubdtype(dtype, np.floating):
        return dtype.type(np.nan)
    return dtype.type(0)

def clampMinimum(dtype, m):
    """
    Return the larger of `m` and the lowest value representable by `dtype`.
    """
    if np.dtype(dtype) == np.float64:
        return m
    return max(m, float(_typeLimits(dtype)[0]))

def clampMaximum(dtype, m):
    """
    Return the smaller of `m` and the highest value representable by `dtype`.
    """
    if np.dtype(dtype) == np.float64:
        return m
    return min(m, float(_typeLimits(dtype)[1]))

def _validateExtremum(value):
    if value is not None and np.isnan(value):
        raise ValueError('Extremum should not be NaN')
    return value

class Extrema(object):
    """
    A pair of minimum and maximum data values.

    Without arguments the extrema are invalid until the first call of
    :meth:`update`. If only one extremum is given, the other one is open.
    """
    def __init__(self, minimum=None, maximum=None):
        """
        :raises ValueError: if an extremum is NaN or `minimum` > `maximum`
        """
        _validateExtremum(minimum)
        _validateExtremum(maximum)
        if minimum is None and maximum is None:
            self.reset()
        else:
            self.minimum = -np.inf if minimum is None else minimum
            self.maximum = np.inf if maximum is None else maximum
            if not self.isValid():
                raise ValueError('Initial minimum (' + str(minimum) + ') greater than maximum (' +
                                 str(maximum) + ')')

    def __repr__(self):
        return 'Extrema(minimum=' + str(self.minimum) + ', maximum=' + str(self.maximum) + ')'

    def isValid(self):
        return self.minimum <= self.maximum

    def update(self, datum):
        if datum < self.minimum:
            self.minimum = datum
        if datum > self.maximum:
            self.maximum = datum

    def reset(self):
        self.minimum = np.inf
        self.maximum = -np.inf

class PlotInfo(object):
    """
    Parameters and results of a single :meth:`MapFactory.makeMap` call.

    After the map was made, :attr:`extrema` holds the minimum and maximum
    of the data written to the map.
    """
    def __init__(self, source, samples, lines, minimum=None, maximum=None, blank=None):
        """
        :param source: the image to map
        :param samples: number of samples of the map
        :param lines: number of lines of the map
        :param minimum: smallest datum to write to the map
        :param maximum: largest datum to write to the map
        :param blank: value of pixels without data in integer maps,
                      floating point maps always use NaN
        :raises ValueError: if `minimum` or `maximum` is NaN
        """
        self.source = source
        self.samples = samples
        self.lines = lines
        self.desiredMinimum = _validateExtremum(minimum)
        self.desiredMaximum = _validateExtremum(maximum)
        self.blank = blank
        self.extrema = Extrema()
        self.notifier = Notifier()

    @property
    def dataMapped(self):
        """ Whether any data was written to the map. """
        return self.extrema.isValid()

class MapFactory(metaclass=ABCMeta):
    """
    Base class for all map projections.

    Subclasses define the latitude and longitude of each map pixel
    by implementing :meth:`plotMap` and draw latitude/longitude lines in
    :meth:`plotGrid`.
    """

    @abstractproperty
    def projectionName(self):
        """ Human readable name of the projection. """

    @abstractmethod
    def plotMap(self, samples, lines, plot):
        """
        Call ``plot(lat, lon, offset)`` for every map pixel.

        Pixels are visited row by row, `offset` is the index of the pixel
        in the flattened (lines, samples) map. Pixels without a
        corresponding point on the body may be skipped.

        :param lat: planetocentric latitude in radians
        :param lon: longitude in radians
        """

    @abstractmethod
    def plotGrid(self, samples, lines, latInterval, lonInterval, grid):
        """
        Set all pixels of `grid` that lie on a latitude or longitude line
        to :data:`GRID_VALUE`.

        :param grid: flat uint8 array of size samples*lines
        :param latInterval: latitude line spacing in degrees
        :param lonInterval: longitude line spacing in degrees
        """

    def makeMap(self, source, samples, lines, dtype=np.float64, minmax=None, info=None):
        """
        Map `source` with this projection.

        :param source: the image to map
        :type source: :class:`~planetmap.source.image.SourceImage`
        :param int samples: map width
        :param int lines: map height
        :param dtype: numpy data type of the map
        :param minmax: data outside of this range is not mapped,
                       defaults to the extrema given in `info` or,
                       if these are not set, to the range of `dtype`
        :type minmax: :class:`Extrema`
        :param info: receives the extrema of the mapped data and
                     holds the notifier which reports the progress
        :type info: :class:`PlotInfo`
        :rtype: array of shape (lines, samples), or an empty array
                if no data was mapped at all
        :raises ValueError: if the blank value does not fit into `dtype`
        """
        _validateSize(samples, lines)
        dtype = np.dtype(dtype)
        if info is None:
            info = PlotInfo(source, samples, lines)
        elif info.source is not source or info.samples != samples or info.lines != lines:
            raise ValueError('plot info was created for a different map')

        blank = emptyValue(dtype)
        if np.issubdtype(dtype, np.integer) and info.blank is not None:
            lowest, highest = _typeLimits(dtype)
            if not lowest <= info.blank <= highest:
                raise ValueError('Blank map value (' + str(info.blank) + ') does not fit within map '
                                 'data type ' + str(dtype))
            blank = dtype.type(info.blank)

        if minmax is None:
            minmax = Extrema(info.desiredMinimum, info.desiredMaximum)
        if minmax.isValid():
            minimum = clampMinimum(dtype, minmax.minimum)
            maximum = clampMaximum(dtype, minmax.maximum)
        else:
            minimum, maximum = _typeLimits(dtype)

        mapData = np.full(samples * lines, blank, dtype=dtype)
        mapSize = mapData.size

        def plot(lat, lon, offset):
            datum = source.readData(lat, lon)
            if datum is not None and minimum <= datum <= maximum:
                mapData[offset] = datum
                info.extrema.update(mapData[offset])
            info.notifier.notifyPlotted(mapSize)

        self.plotMap(samples, lines, plot)

        info.notifier.notifyDone(mapSize)

        if not info.dataMapped:
            _logger.info('no data was mapped with the %s projection', self.projectionName)
            return np.empty((0, 0), dtype=dtype)
        return mapData.reshape(lines, samples)

    def makeGrid(self, samples, lines, latInterval, lonInterval):
        """
        Return a latitude/longitude grid matching the maps of this projection.

        :param latInterval: latitude line spacing in degrees
        :param lonInterval: longitude line spacing in degrees
        :rtype: uint8 array of shape (lines, samples), 0 for background
                and :data:`GRID_VALUE` for grid lines
        """
        _validateSize(samples, lines)
        if not latInterval > 0 or not lonInterval > 0:
            raise ValueError('Grid intervals must be greater than zero (got ' + str(latInterval) +
                             ', ' + str(lonInterval) + ')')
        grid = np.zeros(samples * lines, dtype=np.uint8)
        self.plotGrid(samples, lines, latInterval, lonInterval, grid)
        return grid.reshape(lines, samples)

def _validateSize(samples, lines):
    if samples < 1 or lines < 1:
        raise ValueError('invalid map size: ' + str(samples) + 'x' + str(lines))
