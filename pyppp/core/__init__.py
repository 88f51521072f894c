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

"""Core module: constants, satellite numbering, time, data structures,
processing options and exceptions.

Example Usage:
    >>> from pyppp.core import *
    >>>
    >>> obs = Observation(time=1234567.0, sat=5, rcv=ROVER)
    >>> obs.P[0] = 23456789.1
    >>>
    >>> eph = PreciseEphemeris(time=1234500.0)
    >>> eph.pos[4, :3] = [15e6, 10e6, 20e6]  # satellite 5
"""

from .constants import *
from .data_structures import *
from .errors import *
from .options import *
from .time import *
