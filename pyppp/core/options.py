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

"""Processing options for post-processed precise positioning"""

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum

from .constants import DTTOL, MAXOBS, NMAX, SYS_ALL, id2sat

__all__ = [
    'PositioningMode', 'EphemerisOption', 'SatellitePositionMode', 'ReferenceAlignment',
    'SolveDirection', 'OverflowPolicy', 'ProcessingOptions',
]


class PositioningMode(Enum):
    """Positioning mode"""
    SINGLE = 0
    DGPS = 1
    KINEMATIC = 2
    STATIC = 3
    PPP_KINEMATIC = 6
    PPP_STATIC = 7

    @property
    def is_static(self) -> bool:
        return self in (PositioningMode.STATIC, PositioningMode.PPP_STATIC)


class EphemerisOption(Enum):
    """Source of satellite orbits and clocks"""
    BROADCAST = 0
    PRECISE = 1


class SatellitePositionMode(IntEnum):
    """Reference point of the returned satellite position"""
    CENTER_OF_MASS = 0
    ANTENNA_PHASE_CENTER = 1


class ReferenceAlignment(Enum):
    """How the reference stream is aligned to each rover epoch.

    INTERPOLATED advances the reference cursor to the first reference epoch
    with ``t_ref - t_rover > -dttol`` (strict: a reference epoch exactly
    ``dttol`` before the rover epoch is skipped).

    NEAREST_PRECEDING keeps the last reference epoch with
    ``t_ref - t_rover <= dttol`` (a reference epoch exactly ``dttol`` after
    the rover epoch is still accepted).
    """
    NEAREST_PRECEDING = 0
    INTERPOLATED = 1


class SolveDirection(Enum):
    """Time direction of processing"""
    FORWARD = 0
    BACKWARD = 1


class OverflowPolicy(Enum):
    """What to do when an epoch holds more observations than the batch capacity"""
    TRUNCATE = 0
    RAISE = 1


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        return enum_cls[value.upper()]
    return enum_cls(value)


@dataclass
class ProcessingOptions:
    """Options of one processing run

    Attributes
    ----------
    mode : PositioningMode
        Positioning mode; static modes allow a single aggregated solution
    navsys : int
        Bit mask of satellite systems to use (SYS_GPS | SYS_GAL ...)
    exsats : set[int]
        Satellite numbers excluded from processing
    sateph : EphemerisOption
        Orbit/clock source
    satpos_mode : SatellitePositionMode
        Satellite position reference point for precise orbits
    alignment : ReferenceAlignment
        Reference-stream alignment policy
    direction : SolveDirection
        Processing direction
    solstatic : bool
        Emit only one aggregated solution in static modes
    dttol : float
        Tolerance (s) grouping observations into one epoch
    max_obs : int
        Capacity of an epoch batch
    overflow : OverflowPolicy
        Epoch batch overflow policy
    interp_order : int
        Polynomial order of orbit interpolation
    ionosphere_free_pco : bool
        Combine satellite antenna offsets of two frequencies

    ``satpos_mode``, ``interp_order`` and ``ionosphere_free_pco`` configure
    ``RunContext.satellite_states``; the estimator also receives them
    through ``reset(options)``.
    """
    mode: PositioningMode = PositioningMode.PPP_KINEMATIC
    navsys: int = SYS_ALL
    exsats: set = field(default_factory=set)
    sateph: EphemerisOption = EphemerisOption.PRECISE
    satpos_mode: SatellitePositionMode = SatellitePositionMode.ANTENNA_PHASE_CENTER
    alignment: ReferenceAlignment = ReferenceAlignment.NEAREST_PRECEDING
    direction: SolveDirection = SolveDirection.FORWARD
    solstatic: bool = False
    dttol: float = DTTOL
    max_obs: int = MAXOBS
    overflow: OverflowPolicy = OverflowPolicy.TRUNCATE
    interp_order: int = NMAX
    ionosphere_free_pco: bool = False

    def __post_init__(self):
        self.mode = _coerce_enum(PositioningMode, self.mode)
        self.sateph = _coerce_enum(EphemerisOption, self.sateph)
        self.satpos_mode = _coerce_enum(SatellitePositionMode, self.satpos_mode)
        self.alignment = _coerce_enum(ReferenceAlignment, self.alignment)
        self.direction = _coerce_enum(SolveDirection, self.direction)
        self.overflow = _coerce_enum(OverflowPolicy, self.overflow)
        self.exsats = {id2sat(s) if isinstance(s, str) else int(s) for s in self.exsats}
        if self.dttol <= 0.0:
            raise ValueError(f"dttol must be positive: {self.dttol}")
        if self.max_obs <= 0:
            raise ValueError(f"max_obs must be positive: {self.max_obs}")
        if self.interp_order < 1:
            raise ValueError(f"interp_order must be at least 1: {self.interp_order}")

    @property
    def aggregate_static(self) -> bool:
        """True when only one aggregated solution is emitted"""
        return self.solstatic and self.mode.is_static

    @classmethod
    def from_dict(cls, config: dict) -> "ProcessingOptions":
        """Create options from a configuration dictionary

        Enum options accept member names ('PPP_STATIC') or values, excluded
        satellites accept numbers or RINEX ids ('G05').

        Example config:
        {
            'mode': 'PPP_STATIC',
            'navsys': 0x05,
            'exsats': ['G05', 'E11'],
            'alignment': 'INTERPOLATED',
            'solstatic': True
        }
        """
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown processing options: {sorted(unknown)}")
        return cls(**config)
