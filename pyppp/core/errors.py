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

"""Exceptions raised by precise-product evaluation and run setup

Satellite-level errors (``PreciseEphemerisError`` and subclasses) only
exclude one satellite from one epoch. Run-level errors (``RunSetupError``)
stop a run before the first epoch is processed.
"""


class PyPPPError(Exception):
    """Base class of all pyppp errors"""


class PreciseEphemerisError(PyPPPError):
    """Satellite state cannot be computed at the requested time"""

    def __init__(self, message: str, sat: int = 0, time: float = 0.0):
        super().__init__(message)
        self.sat = sat
        self.time = time


class NoEphemerisData(PreciseEphemerisError):
    """Too few orbit samples, or the time is outside the product span"""


class EphemerisOutage(PreciseEphemerisError):
    """A sample inside the interpolation window has no position"""


class NoClockData(PreciseEphemerisError):
    """No precise clock product covers the time; use the orbit clock"""


class ClockOutage(PreciseEphemerisError):
    """The precise clock product has a gap at the time"""


class EpochOverflowError(PyPPPError):
    """More observations in one epoch than the batch capacity"""


class RunSetupError(PyPPPError):
    """Inputs are unusable, the run cannot start"""


class NoObservationData(RunSetupError):
    """No observation data loaded"""


class NoNavigationData(RunSetupError):
    """No precise ephemeris loaded"""
