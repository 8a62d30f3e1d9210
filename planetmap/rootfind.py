# Copyright European Space Agency, 2013

"""
Root finding for functions of one variable.

The map projections use this module to invert their forward equations
when no closed-form inverse exists. Both functions find `x` such that
``f(x) == y``. The derivative of `f` is approximated numerically, so `f`
only needs to be evaluable, not differentiable in closed form.
"""

import numpy as np

from planetmap.utils import almostEqual, almostZero

__all__ = ['rootFind', 'rootFindBracketed', 'RootFindingError']

class RootFindingError(RuntimeError):
    pass

_eps = np.finfo(np.float64).eps

# maximum number of Newton-Raphson iterations for a single initial guess
NEWTON_MAX_ITERATIONS = 20
# number of alternative initial guesses tried if the given one fails
RETRY_MAX_ATTEMPTS = 10
RETRY_STEP = 1e-3
BRACKETED_MAX_ITERATIONS = 100
# successive iterates closer than this are considered converged
CONVERGENCE_ULPS = 4

def _firstDerivative(x, f):
    # five-point central difference, error is O(h**4)
    h = 2 * np.cbrt(_eps)
    if abs(x) >= 1:
        h *= abs(x)
    return (f(x - 2*h) - 8*f(x - h) + 8*f(x + h) - f(x + 2*h)) / (12*h)

def _isAlmostEqual(a, b):
    return (almostEqual(a, b, CONVERGENCE_ULPS) or
            (almostZero(a, CONVERGENCE_ULPS) and almostZero(b, CONVERGENCE_ULPS)))

def _newtonRaphson(y, x0, f):
    """
    Return the root of f(x) - y = 0 reached from `x0`, or None if the
    iteration did not converge.
    """
    with np.errstate(all='ignore'):
        for _ in range(NEWTON_MAX_ITERATIONS):
            df = _firstDerivative(x0, f)
            if df == 0 or not np.isfinite(df):
                return None
            x = x0 - (f(x0) - y) / df
            if not np.isfinite(x):
                return None
            if _isAlmostEqual(x, x0):
                return x
            x0 = x
    return None

def rootFind(y, x0, f):
    """
    Find `x` such that ``f(x) == y`` using the Newton-Raphson method.

    If the iteration starting at `x0` does not converge, further initial guesses
    spaced by 1e-3 are tried, starting at ``x0 - 2*x0``.

    :param float y: target value
    :param float x0: initial guess
    :param f: callable taking and returning a float
    :raises RootFindingError: if no attempt converged
    :rtype: float
    """
    x = _newtonRaphson(y, x0, f)
    if x is not None:
        return x

    begin = x0 - 2*x0
    end = x0 + 2*x0
    guess = begin
    for _ in range(RETRY_MAX_ATTEMPTS):
        x = _newtonRaphson(y, guess, f)
        if x is not None:
            return x
        guess += RETRY_STEP
        if guess >= end:
            break

    raise RootFindingError('Root finding process seems to be diverging '
                           '(y=' + str(y) + ', initial guess ' + str(x0) + ')')

def rootFindBracketed(y, xl, xh, f):
    """
    Find `x` in the interval [`xl`, `xh`] such that ``f(x) == y``.

    Newton-Raphson steps are combined with bisection: a Newton step is only
    taken if it stays within the bracket and reduces the residual quickly
    enough, otherwise the bracket is halved.

    :param float y: target value
    :param float xl: one end of the bracket
    :param float xh: other end of the bracket
    :param f: callable taking and returning a float
    :raises ValueError: if f(xl) and f(xh) lie on the same side of `y`
    :raises RootFindingError: if the iteration did not converge
    :rtype: float
    """
    yl = f(xl)
    yh = f(xh)

    if (yl > y and yh > y) or (yl < y and yh < y):
        raise ValueError('Root finding brackets are not suitable: f(' + str(xl) + ')=' +
                         str(yl) + ' and f(' + str(xh) + ')=' + str(yh) +
                         ' lie on the same side of ' + str(y))

    if _isAlmostEqual(yl, y):
        return xl
    elif _isAlmostEqual(yh, y):
        return xh

    # orient the search so that f(xl) < y
    if yl > y:
        xl, xh = xh, xl

    dxold = abs(xh - xl)
    dx = dxold
    x0 = (xl + xh) / 2
    y0 = f(x0)

    for _ in range(BRACKETED_MAX_ITERATIONS):
        df = _firstDerivative(x0, f)
        outOfRange = ((x0 - xh)*df - y0 + y) * ((x0 - xl)*df - y0 + y) > 0
        tooSlow = abs(2*(y0 - y)) > abs(dxold*df)
        dxold = dx
        if outOfRange or tooSlow:
            dx = (xh - xl) / 2
            x0 = xl + dx
            if _isAlmostEqual(x0, xl):
                return x0
        else:
            dx = (y0 - y) / df
            xPrev = x0
            x0 -= dx
            if _isAlmostEqual(x0, xPrev):
                return x0

        y0 = f(x0)
        if y0 < y:
            xl = x0
        else:
            xh = x0

    raise RootFindingError('Root finding process is diverging '
                           '(y=' + str(y) + ', bracket [' + str(xl) + ',' + str(xh) + '])')
