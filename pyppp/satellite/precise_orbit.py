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

"""Satellite position by precise ephemeris (SP3)

The orbit is interpolated with a polynomial of order ``NMAX`` (11 samples)
centered on the request time. Samples are rotated into the Earth-fixed frame
of the request time before interpolation, the Z axis being unaffected by
Earth rotation.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..core.constants import EXTERR_EPH, MAXDTE, MAXSAT, NMAX, OMGE
from ..core.data_structures import NavigationData
from ..core.errors import EphemerisOutage, NoEphemerisData
from ..core.time import time_str
from ..gnss.sp3_interpolation import interppol
from .precise_clock import bracket_index, linear_clock

logger = logging.getLogger(__name__)


@dataclass
class PrecisePosition:
    """Result of precise orbit interpolation

    Attributes
    ----------
    rs : np.ndarray
        Satellite position, ECEF (m)
    dts : float
        Clock bias from the orbit product (s), 0.0 if unavailable
    vare : float
        Orbit error variance (m^2)
    varc : float
        Clock error variance of the orbit product clock (m^2)
    """
    rs: np.ndarray
    dts: float = 0.0
    vare: float = 0.0
    varc: float = 0.0


def window_start(index: int, ne: int, order: int = NMAX) -> int:
    """First sample of the (order+1)-sample window around bracket ``index``"""
    start = index - (order + 1) // 2
    if start < 0:
        return 0
    if start + order >= ne:
        return ne - order - 1
    return start


def earth_rotation_correction(pos: np.ndarray, dt: np.ndarray) -> np.ndarray:
    """
    Rotate sample positions by Earth rotation over ``dt``

    Parameters
    ----------
    pos : np.ndarray
        Sample positions, shape (n, 3) or more columns
    dt : np.ndarray
        Sample time minus request time (s), shape (n,)

    Returns
    -------
    np.ndarray
        Rotated X, Y, Z, shape (3, n)
    """
    sinl = np.sin(OMGE * dt)
    cosl = np.cos(OMGE * dt)
    return np.vstack((cosl * pos[:, 0] - sinl * pos[:, 1],
                      sinl * pos[:, 0] + cosl * pos[:, 1],
                      pos[:, 2]))


def pephpos(time: float, sat: int, nav: NavigationData, order: int = NMAX,
            need_var: bool = True) -> PrecisePosition:
    """
    Satellite position and orbit-product clock by precise ephemeris

    Parameters
    ----------
    time : float
        Time (GPS seconds)
    sat : int
        Satellite number
    nav : NavigationData
        Navigation data holding ``peph``
    order : int
        Polynomial order, order+1 samples are used
    need_var : bool
        Compute orbit and clock variances

    Returns
    -------
    PrecisePosition
        Position, orbit clock and variances

    Raises
    ------
    NoEphemerisData
        Fewer than order+1 samples, or ``time`` more than MAXDTE outside
        the product span
    EphemerisOutage
        A sample of the interpolation window has no position for ``sat``
    """
    logger.trace(f"pephpos : time={time_str(time, 3)} sat={sat:2d}")

    if not 1 <= sat <= MAXSAT:
        raise NoEphemerisData(f"invalid satellite {sat}", sat, time)

    ne = nav.ne
    if ne < order + 1 or \
            time - nav.peph[0].time < -MAXDTE or \
            time - nav.peph[-1].time > MAXDTE:
        logger.debug(f"no prec ephem {time_str(time)} sat={sat:2d}")
        raise NoEphemerisData(f"no precise ephemeris sat={sat}", sat, time)

    index = bracket_index(nav.peph, time)
    start = window_start(index, ne, order)
    window = nav.peph[start:start + order + 1]

    t = np.array([s.time - time for s in window])
    pos = np.array([s.pos[sat - 1] for s in window])

    if np.any(np.linalg.norm(pos[:, :3], axis=1) <= 0.0):
        logger.debug(f"prec ephem outage {time_str(time)} sat={sat:2d}")
        raise EphemerisOutage(f"precise ephemeris outage sat={sat}", sat, time)

    p = earth_rotation_correction(pos, t)
    rs = np.array([interppol(t, p[i]) for i in range(3)])

    vare = 0.0
    if need_var:
        std = np.linalg.norm(nav.peph[index].std[sat - 1, :3])

        # extrapolation error for orbit
        if t[0] > 0.0:
            std += EXTERR_EPH * t[0] ** 2 / 2.0
        elif t[-1] < 0.0:
            std += EXTERR_EPH * t[-1] ** 2 / 2.0
        vare = std ** 2

    s0, s1 = nav.peph[index], nav.peph[index + 1]
    clock = linear_clock(time, s0.time, s1.time,
                         s0.pos[sat - 1, 3], s1.pos[sat - 1, 3],
                         s0.std[sat - 1, 3], s1.std[sat - 1, 3])
    dts, varc = 0.0, 0.0
    if clock is not None:
        dts = clock[0]
        if need_var:
            varc = clock[1] ** 2

    return PrecisePosition(rs=rs, dts=dts, vare=vare, varc=varc)
