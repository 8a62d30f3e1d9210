# Copyright European Space Agency, 2013

"""
Progress reporting for map generation.

A :class:`Notifier` is informed by the map factories each time a map pixel
was plotted and forwards the current count to all subscribed observers.
"""

from abc import ABCMeta, abstractmethod
import logging

_logger = logging.getLogger(__name__)

class Observer(metaclass=ABCMeta):
    @abstractmethod
    def notify(self, mapSize, plotCount):
        """
        Called after each plotted pixel.

        :param int mapSize: total number of pixels of the map
        :param int plotCount: number of pixels plotted so far; increases
                              monotonically but observers may not see every value
        """

    @abstractmethod
    def reset(self):
        """ Called after a map is done, before the next one is started. """

class Notifier(object):
    """
    Keeps track of the number of plotted pixels and informs observers.
    Not thread-safe.
    """
    def __init__(self):
        self.plotCount = 0
        self.observers = []

    def subscribe(self, observer):
        self.observers.append(observer)

    def notifyPlotted(self, mapSize):
        assert mapSize > 0
        assert self.plotCount < mapSize
        self.plotCount += 1
        for observer in self.observers:
            observer.notify(mapSize, self.plotCount)

    def notifyDone(self, mapSize):
        """
        Tell all observers that the map is complete and reset them.
        """
        assert mapSize > 0
        for observer in self.observers:
            observer.notify(mapSize, mapSize)
            observer.reset()
        self.plotCount = 0

class LoggingObserver(Observer):
    """
    Logs the percentage of plotted pixels in steps of `step` percent.
    """
    def __init__(self, step=10, logger=None):
        self.step = step
        self.logger = logger or _logger
        self._lastPercent = 0

    def notify(self, mapSize, plotCount):
        percent = int(plotCount / mapSize * 100)
        if percent >= self._lastPercent + self.step:
            self._lastPercent = percent - percent % self.step
            self.logger.info('%d%% of %d map pixels plotted', self._lastPercent, mapSize)

    def reset(self):
        self._lastPercent = 0
