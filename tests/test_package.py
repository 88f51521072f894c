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

"""Test suite for the top-level package namespace"""

import inspect
import logging
import subprocess
import sys
import textwrap
import unittest
import pyppp

# runs in a fresh interpreter so no other test has imported pyppp.logger
CLOCK_SCRIPT = textwrap.dedent("""
    import logging
    import pyppp

    logging.basicConfig(level=5)
    nav = pyppp.NavigationData(pclk=[pyppp.PreciseClock(time=0.0), pyppp.PreciseClock(time=30.0)])
    nav.pclk[0].clk[4] = 1e-6
    nav.pclk[1].clk[4] = 2e-6
    dts, varc = pyppp.pephclk(15.0, 5, nav)
    print(repr(dts))
""")


class TestPackage(unittest.TestCase):
    """Test names exported by ``import pyppp``"""

    def test_logger_module(self):
        """Test pyppp.logger is the logging module, not a module logger"""
        self.assertTrue(inspect.ismodule(pyppp.logger))
        self.assertEqual(pyppp.logger.__name__, 'pyppp.logger')
        self.assertTrue(hasattr(logging.Logger, 'trace'))

    def test_no_leaked_names(self):
        """Test helper imports stay out of the package namespace"""
        self.assertFalse(hasattr(pyppp, 'np'))
        self.assertFalse(hasattr(pyppp, 'cmp_to_key'))

    def test_clock_after_plain_import(self):
        """Test precise clock interpolation with only ``import pyppp``"""
        result = subprocess.run([sys.executable, '-c', CLOCK_SCRIPT],
                                capture_output=True, text=True)

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertAlmostEqual(float(result.stdout.strip()), 1.5e-6, places=18)
        self.assertIn('pephclk', result.stderr)


if __name__ == '__main__':
    unittest.main()
