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

"""GPS time helpers

All times in pyppp are GPS seconds since the GPS epoch (1980-01-06 00:00:00
GPST) stored as ``float``. cssrlib routines take ``gtime_t`` values, so the
conversion lives here.
"""

import math
from datetime import datetime, timedelta, timezone

from cssrlib.gnss import gpst2time, gpst2utc

__all__ = [
    'WEEK_SECONDS', 'GPS_EPOCH', 'timediff', 'timeadd', 'gps_seconds_to_week_tow', 'gpst2gtime',
    'gpst2utc_gtime', 'time_str', 'datetime_to_gps_seconds',
]

WEEK_SECONDS = 604800.0
GPS_EPOCH = datetime(1980, 1, 6)


def timediff(t1: float, t2: float) -> float:
    """Time difference t1 - t2 (s)"""
    return t1 - t2


def timeadd(t: float, sec: float) -> float:
    """Add seconds to a time"""
    return t + sec


def gps_seconds_to_week_tow(gps_seconds: float) -> tuple[int, float]:
    """Split GPS seconds into GPS week and time of week"""
    week = int(math.floor(gps_seconds / WEEK_SECONDS))
    return week, gps_seconds - week * WEEK_SECONDS


def gpst2gtime(gps_seconds: float):
    """Convert GPS seconds to a cssrlib ``gtime_t`` (GPST)"""
    week, tow = gps_seconds_to_week_tow(gps_seconds)
    return gpst2time(week, tow)


def gpst2utc_gtime(gps_seconds: float):
    """Convert GPS seconds to a cssrlib ``gtime_t`` in UTC"""
    return gpst2utc(gpst2gtime(gps_seconds))


def time_str(gps_seconds: float, ndec: int = 0) -> str:
    """Format GPS seconds as 'YYYY/MM/DD hh:mm:ss' (GPST)"""
    ndec = min(ndec, 6)
    dt = GPS_EPOCH + timedelta(seconds=round(gps_seconds, ndec))
    text = dt.strftime("%Y/%m/%d %H:%M:%S")
    if ndec > 0:
        text += "." + f"{dt.microsecond:06d}"[:ndec]
    return text


def datetime_to_gps_seconds(dt) -> float:
    """Convert a GPST datetime (or pandas Timestamp) to GPS seconds

    Timezone-aware values are converted to naive UTC first; no leap
    seconds are applied, observation epochs being in GPST already.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    if dt < GPS_EPOCH:
        raise ValueError(f"Datetime must be after GPS epoch {GPS_EPOCH}")
    return (dt - GPS_EPOCH).total_seconds()
