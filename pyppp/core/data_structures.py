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

"""Core data structures for precise-product processing"""

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from functools import cmp_to_key
from typing import Callable, Iterator, Optional

import numpy as np

from .constants import *
from .errors import EpochOverflowError
from .options import OverflowPolicy

__all__ = [
    'ROVER', 'REFERENCE', 'SolutionStatus', 'STATUS_PRIORITY', 'Observation', 'ObservationData',
    'PreciseEphemeris', 'PreciseClock', 'SatelliteAntenna', 'NavigationData', 'EpochBatch',
    'SatelliteState', 'Solution',
]

logger = logging.getLogger(__name__)

ROVER = 1      # receiver id of the rover
REFERENCE = 2  # receiver id of the reference station


class SolutionStatus(IntEnum):
    """Solution quality, lower values are not necessarily better.

    See ``STATUS_PRIORITY`` for the ranking used to pick a static solution.
    """
    NONE = SOLQ_NONE
    FIX = SOLQ_FIX
    FLOAT = SOLQ_FLOAT
    SBAS = SOLQ_SBAS
    DGPS = SOLQ_DGPS
    SINGLE = SOLQ_SINGLE
    PPP = SOLQ_PPP
    DR = SOLQ_DR


# lower is better; NONE ranks last and is never aggregated
STATUS_PRIORITY = {
    SolutionStatus.FIX: 1,
    SolutionStatus.FLOAT: 2,
    SolutionStatus.SBAS: 3,
    SolutionStatus.DGPS: 4,
    SolutionStatus.SINGLE: 5,
    SolutionStatus.PPP: 1,
    SolutionStatus.DR: 6,
    SolutionStatus.NONE: 7,
}


@dataclass
class Observation:
    """GNSS observation data for a single satellite at a specific epoch.

    Attributes
    ----------
    time : float
        Reception time in GPS seconds
    sat : int
        Satellite number (unified numbering)
    system : int
        Satellite system ID (derived from sat in __post_init__)
    rcv : int
        Receiver id: 1 = rover, 2 = reference
    L : np.ndarray
        Carrier phase (cycles), shape (NFREQ,)
    P : np.ndarray
        Pseudorange (m), shape (NFREQ,)
    D : np.ndarray
        Doppler (Hz), shape (NFREQ,)
    SNR : np.ndarray
        Signal strength (dB-Hz), shape (NFREQ,)
    LLI : np.ndarray
        Loss of lock indicators, shape (NFREQ,)
    code : np.ndarray
        Code indicators, shape (NFREQ,)

    Notes
    -----
    Zero values indicate no observation for that frequency.
    """
    time: float
    sat: int
    system: int = SYS_NONE
    rcv: int = ROVER
    L: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ))
    P: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ))
    D: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ))
    SNR: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ))
    LLI: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ, dtype=int))
    code: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ, dtype=int))

    def __post_init__(self):
        self.system = sat2sys(self.sat)

    @property
    def prn(self):
        return sat2prn(self.sat)

    @property
    def pseudorange(self) -> float:
        """First non-zero pseudorange (m), 0.0 if none"""
        for p in self.P:
            if p != 0.0:
                return float(p)
        return 0.0


def _compare_observations(dttol: float):
    def compare(a: Observation, b: Observation) -> int:
        tt = a.time - b.time
        if abs(tt) > dttol:
            return -1 if tt < 0.0 else 1
        if a.rcv != b.rcv:
            return a.rcv - b.rcv
        return a.sat - b.sat
    return compare


@dataclass
class ObservationData:
    """Observations of all receivers merged into one time-sorted sequence"""
    data: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, i) -> Observation:
        return self.data[i]

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.data)

    @property
    def n(self) -> int:
        return len(self.data)

    def extend(self, observations):
        self.data.extend(observations)

    def sort(self, dttol: float = DTTOL) -> int:
        """Sort by time, receiver and satellite, drop duplicates

        Observations closer than ``dttol`` in time are ordered by receiver
        and satellite, so one receiver's epoch is never split by jitter.

        Returns
        -------
        int
            Number of observation epochs
        """
        if not self.data:
            return 0
        ordered = sorted(self.data, key=cmp_to_key(_compare_observations(dttol)))

        unique = [ordered[0]]
        for obs in ordered[1:]:
            last = unique[-1]
            if obs.sat != last.sat or obs.rcv != last.rcv or obs.time != last.time:
                unique.append(obs)
        if len(unique) < len(ordered):
            logger.debug(f"Removed {len(ordered) - len(unique)} duplicated observations")
        self.data = unique

        nepoch = 0
        i = 0
        while i < len(unique):
            j = i + 1
            while j < len(unique) and unique[j].time - unique[i].time <= dttol:
                j += 1
            nepoch += 1
            i = j
        return nepoch


@dataclass
class PreciseEphemeris:
    """Precise orbit sample of all satellites at one epoch

    Attributes
    ----------
    time : float
        Sample time (GPS seconds)
    pos : np.ndarray
        Satellite position and clock, shape (MAXSAT, 4): x, y, z (m), clock (s).
        All-zero x/y/z marks a satellite without data at this epoch.
    std : np.ndarray
        Standard deviations, shape (MAXSAT, 4): position (m), clock (s)
    index : int
        Product index, used to order samples of the same time when merging
    """
    time: float
    pos: np.ndarray = field(default_factory=lambda: np.zeros((MAXSAT, 4)))
    std: np.ndarray = field(default_factory=lambda: np.zeros((MAXSAT, 4)))
    index: int = 0


@dataclass
class PreciseClock:
    """Precise clock sample of all satellites at one epoch

    A clock bias of exactly zero marks a satellite without data.
    """
    time: float
    clk: np.ndarray = field(default_factory=lambda: np.zeros(MAXSAT))  # clock bias (s)
    std: np.ndarray = field(default_factory=lambda: np.zeros(MAXSAT))  # std (s)
    index: int = 0


@dataclass
class SatelliteAntenna:
    """Satellite antenna phase center offsets in the satellite body frame

    Attributes
    ----------
    sat : int
        Satellite number
    type : str
        Antenna/block type
    off : np.ndarray
        Offsets (m) per frequency slot, shape (NFREQ, 3), body axes x, y, z
    ts, te : float
        Validity window (GPS seconds), 0.0 means unbounded
    """
    sat: int
    type: str = ''
    off: np.ndarray = field(default_factory=lambda: np.zeros((NFREQ, 3)))
    ts: float = 0.0
    te: float = 0.0

    def __post_init__(self):
        off = np.zeros((NFREQ, 3))
        given = np.atleast_2d(np.asarray(self.off, dtype=float))
        off[:given.shape[0], :] = given[:NFREQ, :3]
        self.off = off

    def valid_at(self, time: float) -> bool:
        if self.ts != 0.0 and self.ts - time > 0.0:
            return False
        if self.te != 0.0 and self.te - time < 0.0:
            return False
        return True


def _merge_ephemeris(samples):
    merged = []
    for p in sorted(samples, key=lambda s: (s.time, s.index)):
        if merged and abs(p.time - merged[-1].time) < 1E-9:
            last = merged[-1]
            have = np.linalg.norm(p.pos, axis=1) > 0.0
            last.pos[have] = p.pos[have]
            last.std[have] = p.std[have]
        else:
            merged.append(replace(p, pos=p.pos.copy(), std=p.std.copy()))
    return merged


def _merge_clocks(samples):
    merged = []
    for c in sorted(samples, key=lambda s: (s.time, s.index)):
        if merged and abs(c.time - merged[-1].time) < 1E-9:
            last = merged[-1]
            have = c.clk != 0.0
            last.clk[have] = c.clk[have]
            last.std[have] = c.std[have]
        else:
            merged.append(replace(c, clk=c.clk.copy(), std=c.std.copy()))
    return merged


@dataclass
class NavigationData:
    """Precise navigation products of a run

    Attributes
    ----------
    peph : list[PreciseEphemeris]
        Time-ordered precise orbit samples
    pclk : list[PreciseClock]
        Time-ordered precise clock samples
    pcvs : dict[int, SatelliteAntenna]
        Antenna parameters of each satellite for this run
    """
    peph: list = field(default_factory=list)
    pclk: list = field(default_factory=list)
    pcvs: dict = field(default_factory=dict)

    @property
    def ne(self) -> int:
        return len(self.peph)

    @property
    def nc(self) -> int:
        return len(self.pclk)

    def combine_precise(self):
        """Sort precise products by time and merge samples of the same epoch

        When several products carry the same epoch, satellites present in a
        later product (by ``index``) overwrite the earlier values.
        """
        ne, nc = self.ne, self.nc
        self.peph = _merge_ephemeris(self.peph)
        self.pclk = _merge_clocks(self.pclk)
        logger.debug(f"Combined precise products: ne={ne}->{self.ne} nc={nc}->{self.nc}")

    def set_satellite_antennas(self, antennas, time: float) -> int:
        """Select for each satellite the antenna entry valid at ``time``

        Returns
        -------
        int
            Number of satellites with antenna parameters
        """
        self.pcvs = {}
        for pcv in antennas:
            if not 1 <= pcv.sat <= MAXSAT or pcv.sat in self.pcvs:
                continue
            if pcv.valid_at(time):
                self.pcvs[pcv.sat] = pcv
        return len(self.pcvs)


class EpochBatch:
    """Observations of one synchronized epoch, rover first then reference

    The batch holds at most ``capacity`` observations. Observations beyond
    the capacity are dropped with a warning (``OverflowPolicy.TRUNCATE``) or
    raise ``EpochOverflowError`` (``OverflowPolicy.RAISE``).
    """

    def __init__(self, capacity: int = MAXOBS,
                 overflow: OverflowPolicy = OverflowPolicy.TRUNCATE):
        self.capacity = capacity
        self.overflow = overflow
        self._obs = []
        self.dropped = 0

    def __len__(self) -> int:
        return len(self._obs)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self._obs)

    def __getitem__(self, i) -> Observation:
        return self._obs[i]

    def __bool__(self) -> bool:
        return bool(self._obs)

    @property
    def time(self) -> Optional[float]:
        """Time of the first (rover) observation"""
        return self._obs[0].time if self._obs else None

    @property
    def rover(self) -> list:
        return [o for o in self._obs if o.rcv == ROVER]

    @property
    def reference(self) -> list:
        return [o for o in self._obs if o.rcv == REFERENCE]

    def extend(self, observations) -> int:
        """Append observations up to capacity, returns the number added"""
        added = dropped = 0
        for obs in observations:
            if len(self._obs) >= self.capacity:
                dropped += 1
                continue
            self._obs.append(obs)
            added += 1
        if dropped:
            self.dropped += dropped
            if self.overflow is OverflowPolicy.RAISE:
                raise EpochOverflowError(
                    f"epoch batch overflow: capacity={self.capacity} dropped={dropped}")
            logger.warning(f"Epoch batch full (capacity={self.capacity}), "
                           f"dropped {dropped} observations")
        return added

    def select(self, predicate: Callable[[Observation], bool]) -> "EpochBatch":
        """New batch with the observations satisfying ``predicate``"""
        batch = EpochBatch(self.capacity, self.overflow)
        batch._obs = [o for o in self._obs if predicate(o)]
        return batch


@dataclass
class SatelliteState:
    """Satellite position, velocity and clock at one time

    Attributes
    ----------
    sat : int
        Satellite number
    time : float
        Time of the state (GPS seconds)
    rs : np.ndarray
        Position, ECEF (m)
    vs : np.ndarray
        Velocity, ECEF (m/s)
    dts : float
        Clock bias including relativistic correction (s)
    ddts : float
        Clock drift (s/s)
    var : float
        Orbit plus clock error variance (m^2)
    """
    sat: int
    time: float
    rs: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vs: np.ndarray = field(default_factory=lambda: np.zeros(3))
    dts: float = 0.0
    ddts: float = 0.0
    var: float = 0.0


@dataclass
class Solution:
    """Positioning solution of one epoch

    Attributes
    ----------
    time : float
        Solution time (GPS seconds)
    stat : SolutionStatus
        Solution quality
    rr : np.ndarray
        Position, ECEF (m)
    vv : np.ndarray
        Velocity, ECEF (m/s)
    qr : np.ndarray
        Position covariance (m^2), shape (3, 3)
    ns : int
        Number of satellites used
    age : float
        Age of differential (s)
    ratio : float
        Ambiguity ratio test value
    """
    time: float
    stat: SolutionStatus = SolutionStatus.NONE
    rr: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vv: np.ndarray = field(default_factory=lambda: np.zeros(3))
    qr: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
    ns: int = 0
    age: float = 0.0
    ratio: float = 0.0

    def __post_init__(self):
        self.stat = SolutionStatus(self.stat)

    @property
    def priority(self) -> int:
        return STATUS_PRIORITY[self.stat]
