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

"""Satellite antenna phase center offset"""

import logging
from typing import Optional

import numpy as np
from cssrlib.peph import sunmoonpos

from ..core.constants import SYS_GAL, SYS_SBS, sat2sys, sat_frequency
from ..core.data_structures import SatelliteAntenna
from ..core.time import gpst2utc_gtime, time_str

logger = logging.getLogger(__name__)


def sun_position(time: float) -> np.ndarray:
    """Sun position in ECEF (m) at GPS time ``time``"""
    rsun, _, _ = sunmoonpos(gpst2utc_gtime(time), np.zeros(5), rsun=True)
    return np.asarray(rsun, dtype=float)


def _unit(v: np.ndarray) -> Optional[np.ndarray]:
    r = np.linalg.norm(v)
    if r <= 0.0:
        return None
    return v / r


def satellite_body_axes(rs: np.ndarray, rsun: np.ndarray) -> Optional[np.ndarray]:
    """
    Unit vectors of the satellite body frame in ECEF

    z points to the Earth center, y is perpendicular to the satellite-sun
    direction and z, x completes the right-handed frame.

    Returns
    -------
    np.ndarray or None
        Rows ex, ey, ez, shape (3, 3); None for degenerate geometry
    """
    ez = _unit(-np.asarray(rs, dtype=float))
    if ez is None:
        return None
    es = _unit(np.asarray(rsun, dtype=float) - rs)
    if es is None:
        return None
    ey = _unit(np.cross(ez, es))
    if ey is None:
        return None
    ex = np.cross(ey, ez)
    return np.vstack((ex, ey, ez))


def _ionosphere_free_offset(sat: int, pcv: SatelliteAntenna) -> Optional[np.ndarray]:
    i, j = 0, 1
    if sat2sys(sat) & (SYS_GAL | SYS_SBS):
        j = 2
    f1, f2 = sat_frequency(sat, i), sat_frequency(sat, j)
    if f1 == 0.0 or f2 == 0.0:
        return None
    gamma = (f1 / f2) ** 2
    c1 = gamma / (gamma - 1.0)
    c2 = -1.0 / (gamma - 1.0)
    return c1 * pcv.off[i] + c2 * pcv.off[j]


def satantoff(time: float, rs: np.ndarray, sat: int, pcv: SatelliteAntenna,
              rsun: Optional[np.ndarray] = None,
              ionosphere_free: bool = False) -> np.ndarray:
    """
    Satellite antenna phase center offset in ECEF

    Parameters
    ----------
    time : float
        Time (GPS seconds)
    rs : np.ndarray
        Satellite position, ECEF (m)
    sat : int
        Satellite number
    pcv : SatelliteAntenna
        Satellite antenna parameters
    rsun : np.ndarray, optional
        Sun position, ECEF (m); computed with cssrlib when omitted
    ionosphere_free : bool
        Use the ionosphere-free combination of two frequencies' offsets
        instead of the first frequency's offset

    Returns
    -------
    np.ndarray
        Phase center offset, ECEF (m). Zero when the body frame is
        degenerate or the frequency pair is unavailable.
    """
    logger.trace(f"satantoff: time={time_str(time, 3)} sat={sat:2d}")

    rs = np.asarray(rs, dtype=float)
    if rsun is None:
        rsun = sun_position(time)

    axes = satellite_body_axes(rs, rsun)
    if axes is None:
        logger.debug(f"satantoff: degenerate geometry sat={sat:2d}")
        return np.zeros(3)

    if ionosphere_free:
        off = _ionosphere_free_offset(sat, pcv)
        if off is None:
            logger.debug(f"satantoff: no frequency pair sat={sat:2d}")
            return np.zeros(3)
    else:
        off = pcv.off[0]

    return off @ axes
