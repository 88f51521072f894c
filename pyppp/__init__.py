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
PyPPP - Precise Point Positioning post-processing library

Satellite orbits and clocks from precise ephemeris (SP3) and clock
products, and synchronization of rover/reference observation streams for
a positioning estimator. Inspired by RTKLIB.
"""

__version__ = "1.0.0"
__author__ = "PyPPP Development Team"
__title__ = "pyppp"
__description__ = "Precise ephemeris interpolation and PPP post-processing"

# registers the TRACE level and Logger.trace before any module logs
from .logger import get_logger, setup_logger

from .core import *
from .gnss import *
from .satellite import *
from .rtk import *
from .io import *
