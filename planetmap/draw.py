# Copyright European Space Agency, 2013

"""
This module provides functions for visualizing maps.

The return value is a tuple consisting of a matplotlib figure and axes
object. This can then be further modified or saved as an image file with
:func:`saveFig`.
"""

import numpy as np
import numpy.ma as ma

import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from mpl_toolkits.axes_grid1 import make_axes_locatable

from planetmap.projection.factory import GRID_VALUE

def drawMap(mapData, grid=None, cmap='gray', title=None, cbLabel=None, gridColor='yellow', figax=None):
    """
    Draws a map as returned by :meth:`~planetmap.projection.factory.MapFactory.makeMap`.

    The first map line is drawn at the bottom.

    :param mapData: 2D array, pixels without data (NaN) are left transparent
    :param grid: uint8 array of the same shape as returned by
                 :meth:`~planetmap.projection.factory.MapFactory.makeGrid`,
                 drawn on top of the map
    :param cmap: matplotlib colormap of the map data
    :param title: figure title
    :param cbLabel: data label, written alongside the colorbar;
                    if None, no colorbar is drawn
    :param gridColor: color of the grid lines
    :param figax: a (Figure,Axes) tuple to reuse
    :rtype: tuple(Figure,Axes)
    """
    mapData = ma.masked_invalid(np.asarray(mapData, dtype=np.float64), copy=False)
    if mapData.size == 0:
        raise ValueError('The map is empty')
    if grid is not None and grid.shape != mapData.shape:
        raise ValueError('Grid shape ' + str(grid.shape) + ' does not match map shape ' +
                         str(mapData.shape))

    fig, ax = plt.subplots() if figax is None else figax
    im = ax.imshow(mapData, cmap=cmap, origin='lower', interpolation='nearest')

    if grid is not None:
        gridOverlay = ma.masked_not_equal(grid, GRID_VALUE)
        ax.imshow(gridOverlay, cmap=_singleColorMap(gridColor), origin='lower',
                  interpolation='nearest', vmin=0, vmax=GRID_VALUE)

    if cbLabel is not None:
        divider = make_axes_locatable(ax)
        cax = divider.append_axes("right", size="5%", pad=0.05)
        cb = fig.colorbar(im, cax=cax)
        cb.set_label(cbLabel)

    if title:
        ax.set_title(title)
    ax.set_xlabel('Sample')
    ax.set_ylabel('Line')
    return fig, ax

def _singleColorMap(color):
    return ListedColormap([color])

def saveFig(outputFile, figax, widthPx=None, dpi=None, format_=None, dontClose=False):
    """
    Saves a matplotlib `Figure` to a path on disk or a `File`-like object.

    :note: Only one of `widthPx` and `dpi` must be defined. If none is given, then default
           values from matplotlib are used.
    :param outputFile: path to file, or `File`-like object
    :param figax: `Figure` object, or array-like with `Figure`,`Axes` as first two elements
    :param int widthPx: width in pixels
    :param number dpi: dpi in inches
    :param str format_: file format, e.g. 'jpg', 'png', 'svg'; will be derived from extension if `outputFile`
                        is a path name
    :param bool dontClose: whether to close the `Figure` or leave it open for further processing;
                           default is to close it; use `plt.close(fig)` for manual closing
    """
    assert not(widthPx and dpi), 'Either specify dpi OR widthPx'
    fig = figax[0] if isinstance(figax, (tuple, list)) else figax

    if widthPx:
        dpi = widthPx / fig.get_figwidth()
    elif dpi is None:
        dpi = fig.get_dpi()

    fig.savefig(outputFile, dpi=dpi, facecolor=fig.get_facecolor(), format=format_)

    if not dontClose:
        plt.close(fig)
