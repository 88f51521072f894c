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
Satellite states from precise products.

Modules
-------
precise_orbit : module
    Polynomial orbit interpolation of SP3 samples with Earth rotation
    correction and orbit error variance
precise_clock : module
    Linear interpolation of precise clock samples
antenna : module
    Satellite antenna phase center offset in ECEF
satellite_position : module
    Position, velocity, relativistic clock bias, drift and variance

Usage Examples
--------------
    >>> from pyppp.satellite import peph2pos, SatellitePositionMode
    >>> state = peph2pos(time, sat, nav, SatellitePositionMode.ANTENNA_PHASE_CENTER)
    >>> state.rs, state.dts, state.var

Notes
-----
Times are GPS seconds. Failures raise ``PreciseEphemerisError`` subclasses
and only concern the requested satellite.
"""

from ..core.options import SatellitePositionMode
from .antenna import satantoff, satellite_body_axes, sun_position
from .precise_clock import pephclk
from .precise_orbit import PrecisePosition, pephpos
from .satellite_position import peph2pos, satposs

__all__ = [
    'PrecisePosition',
    'SatellitePositionMode',
    'peph2pos',
    'pephclk',
    'pephpos',
    'satantoff',
    'satellite_body_axes',
    'satposs',
    'sun_position',
]
