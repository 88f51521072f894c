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

"""Satellite clock by precise clock products"""

import bisect
import logging
from operator import attrgetter
from typing import Optional

from ..core.constants import CLIGHT, EXTERR_CLK, MAXDTE, MAXSAT
from ..core.data_structures import NavigationData
from ..core.errors import ClockOutage, NoClockData
from ..core.time import time_str

logger = logging.getLogger(__name__)


def bracket_index(samples: list, time: float) -> int:
    """Index of the sample starting the bracket around ``time``

    Binary search for the first sample not earlier than ``time`` (the last
    sample if all are earlier), then step back one sample.
    """
    i = bisect.bisect_left(samples, time, key=attrgetter('time'))
    i = min(i, len(samples) - 1)
    return 0 if i <= 0 else i - 1


def linear_clock(time: float, t0: float, t1: float, c0: float, c1: float,
                 std0: float, std1: float) -> Optional[tuple[float, float]]:
    """
    Linear interpolation/extrapolation of a clock between two samples

    Parameters
    ----------
    time : float
        Request time
    t0, t1 : float
        Sample times, t0 < t1
    c0, c1 : float
        Clock biases (s), 0.0 = no data
    std0, std1 : float
        Clock standard deviations (s)

    Returns
    -------
    tuple[float, float] or None
        (clock bias (s), standard deviation (m)), None when the samples
        needed at ``time`` have no data
    """
    dt0 = time - t0
    dt1 = time - t1

    if dt0 <= 0.0:
        if c0 == 0.0:
            return None
        return c0, std0 * CLIGHT - EXTERR_CLK * dt0
    if dt1 >= 0.0:
        if c1 == 0.0:
            return None
        return c1, std1 * CLIGHT + EXTERR_CLK * dt1
    if c0 == 0.0 or c1 == 0.0:
        return None

    dts = (c1 * dt0 - c0 * dt1) / (dt0 - dt1)
    if dt0 < -dt1:
        return dts, std0 * CLIGHT + EXTERR_CLK * abs(dt0)
    return dts, std1 * CLIGHT + EXTERR_CLK * abs(dt1)


def pephclk(time: float, sat: int, nav: NavigationData,
            need_var: bool = True) -> tuple[float, float]:
    """
    Satellite clock bias by precise clock

    Parameters
    ----------
    time : float
        Time (GPS seconds)
    sat : int
        Satellite number
    nav : NavigationData
        Navigation data holding ``pclk``
    need_var : bool
        Compute the clock variance

    Returns
    -------
    dts : float
        Satellite clock bias (s), no relativistic correction
    varc : float
        Clock error variance (m^2), 0.0 if not requested

    Raises
    ------
    NoClockData
        No clock product, or ``time`` outside the product span. The orbit
        product clock should be used instead.
    ClockOutage
        The clock product has no value for ``sat`` at ``time``
    """
    logger.trace(f"pephclk : time={time_str(time, 3)} sat={sat:2d}")

    if not 1 <= sat <= MAXSAT:
        raise NoClockData(f"invalid satellite {sat}", sat, time)

    if nav.nc < 2 or \
            time - nav.pclk[0].time < -MAXDTE or \
            time - nav.pclk[-1].time > MAXDTE:
        logger.debug(f"no prec clock {time_str(time)} sat={sat:2d}")
        raise NoClockData(f"no precise clock sat={sat}", sat, time)

    index = bracket_index(nav.pclk, time)
    s0, s1 = nav.pclk[index], nav.pclk[index + 1]

    clock = linear_clock(time, s0.time, s1.time,
                         s0.clk[sat - 1], s1.clk[sat - 1],
                         s0.std[sat - 1], s1.std[sat - 1])
    if clock is None:
        logger.debug(f"prec clock outage {time_str(time)} sat={sat:2d}")
        raise ClockOutage(f"precise clock outage sat={sat}", sat, time)

    dts, std = clock
    return dts, std ** 2 if need_var else 0.0
