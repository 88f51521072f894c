#!/usr/bin/env python3
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

"""Test suite for processing options"""

import unittest
from pyppp.core.constants import DTTOL, MAXOBS, NMAX, SYS_ALL
from pyppp.core.options import (
    EphemerisOption, OverflowPolicy, PositioningMode, ProcessingOptions,
    ReferenceAlignment, SatellitePositionMode, SolveDirection,
)


class TestProcessingOptions(unittest.TestCase):
    """Test processing options"""

    def test_defaults(self):
        """Test default options"""
        opt = ProcessingOptions()

        self.assertIs(opt.mode, PositioningMode.PPP_KINEMATIC)
        self.assertEqual(opt.navsys, SYS_ALL)
        self.assertEqual(opt.exsats, set())
        self.assertIs(opt.sateph, EphemerisOption.PRECISE)
        self.assertIs(opt.satpos_mode, SatellitePositionMode.ANTENNA_PHASE_CENTER)
        self.assertIs(opt.alignment, ReferenceAlignment.NEAREST_PRECEDING)
        self.assertIs(opt.direction, SolveDirection.FORWARD)
        self.assertEqual(opt.dttol, DTTOL)
        self.assertEqual(opt.max_obs, MAXOBS)
        self.assertEqual(opt.interp_order, NMAX)
        self.assertFalse(opt.aggregate_static)

    def test_from_dict(self):
        """Test configuration from a dictionary"""
        opt = ProcessingOptions.from_dict({
            'mode': 'ppp_static',
            'navsys': 0x05,
            'exsats': ['G05', 'E11', 12],
            'alignment': 1,
            'direction': 'BACKWARD',
            'overflow': 'raise',
            'solstatic': True,
        })

        self.assertIs(opt.mode, PositioningMode.PPP_STATIC)
        self.assertEqual(opt.navsys, 0x05)
        self.assertEqual(opt.exsats, {5, 107, 12})
        self.assertIs(opt.alignment, ReferenceAlignment.INTERPOLATED)
        self.assertIs(opt.direction, SolveDirection.BACKWARD)
        self.assertIs(opt.overflow, OverflowPolicy.RAISE)
        self.assertTrue(opt.aggregate_static)

    def test_unknown_key(self):
        """Test rejection of unknown options"""
        with self.assertRaises(ValueError):
            ProcessingOptions.from_dict({'elmask': 15.0})

    def test_invalid_values(self):
        """Test validation of numeric options"""
        with self.assertRaises(ValueError):
            ProcessingOptions(dttol=0.0)
        with self.assertRaises(ValueError):
            ProcessingOptions(max_obs=0)
        with self.assertRaises(ValueError):
            ProcessingOptions(interp_order=0)
        with self.assertRaises(KeyError):
            ProcessingOptions(mode='rtk')

    def test_static_modes(self):
        """Test static aggregation only in static modes"""
        self.assertTrue(PositioningMode.STATIC.is_static)
        self.assertFalse(PositioningMode.KINEMATIC.is_static)
        self.assertFalse(ProcessingOptions(mode='PPP_KINEMATIC', solstatic=True).aggregate_static)
        self.assertTrue(ProcessingOptions(mode='STATIC', solstatic=True).aggregate_static)


if __name__ == '__main__':
    unittest.main()
