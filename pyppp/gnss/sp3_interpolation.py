# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Polynomial interpolation of precise ephemeris samples

Neville's algorithm over unevenly spaced nodes, evaluated at offset zero so
that the nodes can be given directly as time offsets from the request time.
"""

import numpy as np
from numba import njit


@njit(cache=True)
def _neville(x, y):
    p = y.copy()
    n = x.shape[0]
    for j in range(1, n):
        for i in range(n - j):
            p[i] = (x[i + j] * p[i] - x[i] * p[i + 1]) / (x[i + j] - x[i])
    return p[0]


def interppol(x: np.ndarray, y: np.ndarray) -> float:
    """
    Value at offset 0 of the polynomial through (x[i], y[i])

    Parameters
    ----------
    x : np.ndarray
        Node offsets, distinct (e.g. sample time - request time)
    y : np.ndarray
        Sample values

    Returns
    -------
    float
        Interpolated value at x = 0

    Notes
    -----
    The polynomial has degree len(x)-1. Coinciding nodes divide by zero.
    ``y`` is not modified.
    """
    x = np.ascontiguousarray(x, dtype=np.float64)
    y = np.ascontiguousarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValueError(f"node/value size mismatch: {x.shape} vs {y.shape}")
    if x.shape[0] == 0:
        raise ValueError("no interpolation nodes")
    return float(_neville(x, y))


def neville_interpolation(x: np.ndarray, y: np.ndarray, x0: float) -> float:
    """
    Neville's algorithm for polynomial interpolation at an arbitrary point

    Parameters
    ----------
    x : np.ndarray
        Array of x values (time points)
    y : np.ndarray
        Array of y values (position/clock values)
    x0 : float
        Point at which to interpolate

    Returns
    -------
    float
        Interpolated value at x0
    """
    return interppol(np.asarray(x, dtype=np.float64) - x0, y)
