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

"""Satellite position/velocity/clock by precise ephemeris and clock"""

import logging
from typing import Iterable, Optional

import numpy as np

from ..core.constants import CLIGHT, DT_VELOCITY, NMAX
from ..core.data_structures import NavigationData, Observation, SatelliteState
from ..core.errors import NoClockData, PreciseEphemerisError
from ..core.options import SatellitePositionMode
from ..core.time import time_str
from .antenna import satantoff
from .precise_clock import pephclk
from .precise_orbit import PrecisePosition, pephpos

logger = logging.getLogger(__name__)


def _precise_clock(time: float, sat: int, nav: NavigationData, orbit: PrecisePosition,
                   need_var: bool) -> tuple[float, float]:
    """Precise clock, or the orbit product clock when no clock product covers ``time``"""
    try:
        return pephclk(time, sat, nav, need_var)
    except NoClockData:
        return orbit.dts, orbit.varc


def peph2pos(time: float, sat: int, nav: NavigationData,
             opt: SatellitePositionMode = SatellitePositionMode.CENTER_OF_MASS,
             order: int = NMAX, ionosphere_free: bool = False,
             rsun: Optional[np.ndarray] = None) -> SatelliteState:
    """
    Satellite position, velocity and clock by precise ephemeris/clock

    Velocity and clock drift are differences over ``DT_VELOCITY`` (1 ms).
    The clock bias includes the relativistic correction but no code bias.
    If no precise clock product covers ``time`` the orbit product clock is
    used instead.

    Parameters
    ----------
    time : float
        Time (GPS seconds)
    sat : int
        Satellite number
    nav : NavigationData
        Navigation data with ``peph``, ``pclk`` and ``pcvs``
    opt : SatellitePositionMode
        CENTER_OF_MASS or ANTENNA_PHASE_CENTER
    order : int
        Orbit interpolation order
    ionosphere_free : bool
        Ionosphere-free antenna offset (phase center mode only)
    rsun : np.ndarray, optional
        Sun position, ECEF (m), for the antenna offset

    Returns
    -------
    SatelliteState
        Position, velocity, clock bias/drift and variance

    Raises
    ------
    PreciseEphemerisError
        Orbit or clock unavailable at ``time`` or ``time + DT_VELOCITY``
    """
    logger.trace(f"peph2pos: time={time_str(time, 3)} sat={sat:2d} opt={int(opt)}")

    tt = DT_VELOCITY

    orbit = pephpos(time, sat, nav, order)
    dtss, varc = _precise_clock(time, sat, nav, orbit, need_var=True)

    orbit_tt = pephpos(time + tt, sat, nav, order, need_var=False)
    dtst, _ = _precise_clock(time + tt, sat, nav, orbit_tt, need_var=False)

    dant = np.zeros(3)
    if opt == SatellitePositionMode.ANTENNA_PHASE_CENTER:
        pcv = nav.pcvs.get(sat)
        if pcv is None:
            logger.debug(f"no satellite antenna parameters sat={sat:2d}")
        else:
            dant = satantoff(time, orbit.rs, sat, pcv, rsun, ionosphere_free)

    rs = orbit.rs + dant
    vs = (orbit_tt.rs - orbit.rs) / tt

    if dtss != 0.0:
        # relativistic effect correction
        dts = dtss - 2.0 * np.dot(rs, vs) / CLIGHT / CLIGHT
        ddts = (dtst - dtss) / tt
    else:
        dts = ddts = 0.0

    return SatelliteState(sat=sat, time=time, rs=rs, vs=vs, dts=dts, ddts=ddts,
                          var=orbit.vare + varc)


def satposs(observations: Iterable[Observation], nav: NavigationData,
            opt: SatellitePositionMode = SatellitePositionMode.CENTER_OF_MASS,
            order: int = NMAX, ionosphere_free: bool = False) -> list:
    """
    Satellite states at signal transmission time for each observation

    The transmission time is the reception time minus pseudorange/c minus
    the satellite clock bias.

    Parameters
    ----------
    observations : iterable of Observation
        Observations of one epoch
    nav : NavigationData
        Navigation data
    opt : SatellitePositionMode
        Satellite position reference point

    Returns
    -------
    list[SatelliteState or None]
        One entry per observation; None when the observation has no
        pseudorange or the satellite cannot be resolved
    """
    states = []
    for obs in observations:
        pr = obs.pseudorange
        if pr == 0.0:
            logger.debug(f"no pseudorange {time_str(obs.time)} sat={obs.sat:2d}")
            states.append(None)
            continue

        time = obs.time - pr / CLIGHT
        try:
            orbit = pephpos(time, obs.sat, nav, order, need_var=False)
            dt, _ = _precise_clock(time, obs.sat, nav, orbit, need_var=False)
            states.append(peph2pos(time - dt, obs.sat, nav, opt, order, ionosphere_free))
        except PreciseEphemerisError as e:
            logger.debug(f"no satellite state {time_str(obs.time)} sat={obs.sat:2d}: {e}")
            states.append(None)

    return states
