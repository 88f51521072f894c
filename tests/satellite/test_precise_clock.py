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

"""Test suite for precise clock interpolation"""

import unittest
from pyppp.core.constants import CLIGHT, EXTERR_CLK
from pyppp.core.data_structures import NavigationData, PreciseClock
from pyppp.core.errors import ClockOutage, NoClockData
from pyppp.satellite.precise_clock import bracket_index, linear_clock, pephclk

SAT = 5


def clock_nav(times, biases, stds=None, sat=SAT):
    pclk = []
    for i, (t, c) in enumerate(zip(times, biases)):
        s = PreciseClock(time=t)
        s.clk[sat - 1] = c
        if stds is not None:
            s.std[sat - 1] = stds[i]
        pclk.append(s)
    return NavigationData(pclk=pclk)


class TestBracketIndex(unittest.TestCase):
    """Test bracketing sample search"""

    def test_bracket(self):
        """Test index of the earlier bracket sample"""
        samples = [PreciseClock(time=t) for t in (0.0, 30.0, 60.0)]

        self.assertEqual(bracket_index(samples, -5.0), 0)
        self.assertEqual(bracket_index(samples, 0.0), 0)
        self.assertEqual(bracket_index(samples, 15.0), 0)
        self.assertEqual(bracket_index(samples, 30.0), 0)
        self.assertEqual(bracket_index(samples, 45.0), 1)
        self.assertEqual(bracket_index(samples, 100.0), 1)


class TestLinearClock(unittest.TestCase):
    """Test two-sample clock model"""

    def test_endpoints(self):
        """Test values at and beyond the samples"""
        bias, std = linear_clock(-10.0, 0.0, 30.0, 1e-6, 2e-6, 1e-10, 2e-10)
        self.assertEqual(bias, 1e-6)
        self.assertAlmostEqual(std, 1e-10 * CLIGHT + EXTERR_CLK * 10.0, places=12)

        bias, std = linear_clock(40.0, 0.0, 30.0, 1e-6, 2e-6, 1e-10, 2e-10)
        self.assertEqual(bias, 2e-6)
        self.assertAlmostEqual(std, 2e-10 * CLIGHT + EXTERR_CLK * 10.0, places=12)

    def test_nearer_sample_error(self):
        """Test the error term of the nearer sample"""
        _, std = linear_clock(10.0, 0.0, 30.0, 1e-6, 2e-6, 1e-10, 2e-10)
        self.assertAlmostEqual(std, 1e-10 * CLIGHT + EXTERR_CLK * 10.0, places=12)

        _, std = linear_clock(25.0, 0.0, 30.0, 1e-6, 2e-6, 1e-10, 2e-10)
        self.assertAlmostEqual(std, 2e-10 * CLIGHT + EXTERR_CLK * 5.0, places=12)

    def test_missing(self):
        """Test zero bias as missing data"""
        self.assertIsNone(linear_clock(10.0, 0.0, 30.0, 0.0, 2e-6, 0.0, 0.0))
        self.assertIsNone(linear_clock(10.0, 0.0, 30.0, 1e-6, 0.0, 0.0, 0.0))
        self.assertIsNone(linear_clock(35.0, 0.0, 30.0, 1e-6, 0.0, 0.0, 0.0))
        self.assertEqual(linear_clock(0.0, 0.0, 30.0, 1e-6, 0.0, 0.0, 0.0)[0], 1e-6)


class TestPephclk(unittest.TestCase):
    """Test precise clock evaluation"""

    def test_midpoint(self):
        """Test linear interpolation between two samples"""
        nav = clock_nav([0.0, 30.0], [1e-6, 2e-6])

        dts, varc = pephclk(15.0, SAT, nav)

        self.assertAlmostEqual(dts, 1.5e-6, places=18)
        self.assertAlmostEqual(varc, (EXTERR_CLK * 15.0) ** 2, places=12)

    def test_extrapolation(self):
        """Test values before the first and after the last sample"""
        nav = clock_nav([0.0, 30.0], [1e-6, 2e-6], stds=[1e-11, 1e-11])

        dts, varc = pephclk(-10.0, SAT, nav)
        self.assertEqual(dts, 1e-6)
        self.assertAlmostEqual(varc, (1e-11 * CLIGHT + 0.01) ** 2, places=12)

        dts, varc = pephclk(40.0, SAT, nav)
        self.assertEqual(dts, 2e-6)
        self.assertAlmostEqual(varc, (1e-11 * CLIGHT + 0.01) ** 2, places=12)

    def test_no_variance(self):
        """Test variance not requested"""
        nav = clock_nav([0.0, 30.0], [1e-6, 2e-6])
        _, varc = pephclk(15.0, SAT, nav, need_var=False)
        self.assertEqual(varc, 0.0)

    def test_no_clock_data(self):
        """Test missing product and times out of the product span"""
        with self.assertRaises(NoClockData):
            pephclk(0.0, SAT, clock_nav([0.0], [1e-6]))

        nav = clock_nav([0.0, 30.0], [1e-6, 2e-6])
        with self.assertRaises(NoClockData):
            pephclk(-901.0, SAT, nav)
        with self.assertRaises(NoClockData):
            pephclk(931.0, SAT, nav)
        with self.assertRaises(NoClockData):
            pephclk(15.0, 0, nav)

    def test_outage(self):
        """Test clock gap of the satellite"""
        nav = clock_nav([0.0, 30.0], [1e-6, 0.0])

        with self.assertRaises(ClockOutage):
            pephclk(15.0, SAT, nav)
        with self.assertRaises(ClockOutage):
            pephclk(15.0, 6, nav)

        dts, _ = pephclk(0.0, SAT, nav)
        self.assertEqual(dts, 1e-6)


if __name__ == '__main__':
    unittest.main()
