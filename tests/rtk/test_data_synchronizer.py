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

"""Test suite for rover/reference observation synchronization"""

import unittest
from pyppp.core.data_structures import REFERENCE, ROVER, Observation, ObservationData
from pyppp.core.errors import EpochOverflowError
from pyppp.core.options import OverflowPolicy, ReferenceAlignment, SolveDirection
from pyppp.rtk.data_synchronizer import ObservationSynchronizer


def make_data(rover_times, ref_times, sats=(1, 2), dttol=0.025):
    data = []
    for t in rover_times:
        data += [Observation(time=t, sat=s, rcv=ROVER) for s in sats]
    for t in ref_times:
        data += [Observation(time=t, sat=s, rcv=REFERENCE) for s in sats]
    obs = ObservationData(data)
    obs.sort(dttol)
    return obs


def epoch_times(batch):
    rover = sorted({o.time for o in batch.rover})
    reference = sorted({o.time for o in batch.reference})
    return rover, reference


class TestScan(unittest.TestCase):
    """Test receiver run search"""

    def setUp(self):
        self.obs = make_data([100.0, 101.0], [100.01])
        self.sync = ObservationSynchronizer(self.obs)

    def test_scan(self):
        """Test forward search of receiver runs"""
        self.assertEqual(self.sync.scan(0, ROVER), (0, 2))
        self.assertEqual(self.sync.scan(0, REFERENCE), (2, 2))
        self.assertEqual(self.sync.scan(2, ROVER), (4, 2))
        self.assertEqual(self.sync.scan(4, REFERENCE), (6, 0))

    def test_scan_backward(self):
        """Test backward search of receiver runs"""
        self.assertEqual(self.sync.scan_backward(5, ROVER), (5, 2))
        self.assertEqual(self.sync.scan_backward(5, REFERENCE), (3, 2))
        self.assertEqual(self.sync.scan_backward(3, ROVER), (1, 2))
        self.assertEqual(self.sync.scan_backward(1, REFERENCE), (-1, 0))


class TestForward(unittest.TestCase):
    """Test forward synchronization"""

    def test_interpolated_single_epoch(self):
        """Test rover and reference runs 10 ms apart"""
        obs = make_data([100.0], [100.01])
        sync = ObservationSynchronizer(obs, ReferenceAlignment.INTERPOLATED)

        batch = sync.next_epoch()

        self.assertEqual(len(batch), 4)
        self.assertEqual([o.rcv for o in batch], [ROVER, ROVER, REFERENCE, REFERENCE])
        self.assertEqual(batch.time, 100.0)
        self.assertEqual(sync.rover_cursor, 2)
        self.assertEqual(sync.ref_cursor, 2)

        self.assertIsNone(sync.next_epoch())
        self.assertEqual(sync.rover_cursor, len(obs))

    def test_co_timed_streams(self):
        """Test each rover epoch paired with the same reference epoch"""
        obs = make_data([100.0, 101.0, 102.0], [100.0, 101.0, 102.0])

        for alignment in ReferenceAlignment:
            sync = ObservationSynchronizer(obs, alignment)
            batches = list(sync)

            self.assertEqual(len(batches), 3)
            for batch, t in zip(batches, (100.0, 101.0, 102.0)):
                self.assertEqual(epoch_times(batch), ([t], [t]))
                self.assertEqual(len(batch), 4)

    def test_reference_tail_outage(self):
        """Test rover-only batches after the reference stream ends"""
        obs = make_data([100.0, 101.0, 102.0], [100.0])
        sync = ObservationSynchronizer(obs, ReferenceAlignment.INTERPOLATED)

        batches = list(sync)

        self.assertEqual(len(batches), 3)
        self.assertEqual(epoch_times(batches[0]), ([100.0], [100.0]))
        self.assertEqual(epoch_times(batches[1]), ([101.0], []))
        self.assertEqual(len(batches[2].rover), 2)
        self.assertEqual(len(batches[2].reference), 0)

    def test_reference_gap(self):
        """Test alignment policies across a missing reference epoch"""
        obs = make_data([100.0, 101.0, 102.0], [100.0, 102.0])

        nearest = list(ObservationSynchronizer(obs, ReferenceAlignment.NEAREST_PRECEDING))
        interpolated = list(ObservationSynchronizer(obs, ReferenceAlignment.INTERPOLATED))

        self.assertEqual(epoch_times(nearest[1]), ([101.0], [100.0]))
        self.assertEqual(epoch_times(interpolated[1]), ([101.0], [102.0]))
        self.assertEqual(epoch_times(nearest[2]), ([102.0], [102.0]))
        self.assertEqual(epoch_times(interpolated[2]), ([102.0], [102.0]))

    def test_alignment_boundary(self):
        """Test reference epoch exactly one tolerance before the rover epoch"""
        obs = make_data([100.0], [99.75, 100.5], sats=(1,), dttol=0.25)

        nearest = ObservationSynchronizer(
            obs, ReferenceAlignment.NEAREST_PRECEDING, dttol=0.25).next_epoch()
        interpolated = ObservationSynchronizer(
            obs, ReferenceAlignment.INTERPOLATED, dttol=0.25).next_epoch()

        self.assertEqual(epoch_times(nearest), ([100.0], [99.75]))
        self.assertEqual(epoch_times(interpolated), ([100.0], [100.5]))

    def test_rover_only(self):
        """Test stream without reference observations"""
        obs = make_data([100.0, 101.0], [])

        batches = list(ObservationSynchronizer(obs))

        self.assertEqual(len(batches), 2)
        self.assertTrue(all(not b.reference for b in batches))

    def test_no_rover(self):
        """Test end of data without rover observations"""
        obs = make_data([], [100.0])
        self.assertIsNone(ObservationSynchronizer(obs).next_epoch())
        self.assertIsNone(ObservationSynchronizer(ObservationData()).next_epoch())

    def test_reset(self):
        """Test rewinding the cursors"""
        obs = make_data([100.0, 101.0], [100.0, 101.0])
        sync = ObservationSynchronizer(obs)

        self.assertEqual(len(list(sync)), 2)
        self.assertIsNone(sync.next_epoch())
        sync.reset()
        self.assertEqual(len(list(sync)), 2)

    def test_cursors_monotonic(self):
        """Test cursors never move backwards"""
        obs = make_data([100.0, 101.0, 102.0, 103.0], [100.0, 101.5, 103.0])
        sync = ObservationSynchronizer(obs)

        last = (sync.rover_cursor, sync.ref_cursor)
        count = 0
        while sync.next_epoch() is not None:
            self.assertGreater(sync.rover_cursor, last[0])
            self.assertGreaterEqual(sync.ref_cursor, last[1])
            last = (sync.rover_cursor, sync.ref_cursor)
            count += 1
        self.assertEqual(count, 4)


class TestBackward(unittest.TestCase):
    """Test backward synchronization"""

    def test_co_timed_streams(self):
        """Test epochs returned from the last to the first"""
        obs = make_data([100.0, 101.0, 102.0], [100.0, 101.0, 102.0])

        for alignment in ReferenceAlignment:
            sync = ObservationSynchronizer(obs, alignment, SolveDirection.BACKWARD)
            self.assertEqual(sync.rover_cursor, len(obs) - 1)

            batches = list(sync)

            self.assertEqual([b.time for b in batches], [102.0, 101.0, 100.0])
            for batch in batches:
                self.assertEqual(epoch_times(batch), ([batch.time], [batch.time]))
                self.assertEqual([o.sat for o in batch.rover], [1, 2])
            self.assertLess(sync.rover_cursor, 0)

    def test_reference_gap(self):
        """Test alignment policies across a missing reference epoch"""
        obs = make_data([100.0, 101.0, 102.0], [100.0, 102.0])

        nearest = list(ObservationSynchronizer(
            obs, ReferenceAlignment.NEAREST_PRECEDING, SolveDirection.BACKWARD))
        interpolated = list(ObservationSynchronizer(
            obs, ReferenceAlignment.INTERPOLATED, SolveDirection.BACKWARD))

        self.assertEqual(epoch_times(nearest[1]), ([101.0], [102.0]))
        self.assertEqual(epoch_times(interpolated[1]), ([101.0], [100.0]))


class TestOverflow(unittest.TestCase):
    """Test batch capacity"""

    def test_truncate(self):
        """Test truncation keeps rover observations first"""
        obs = make_data([100.0], [100.0])
        sync = ObservationSynchronizer(obs, max_obs=3)

        with self.assertLogs('pyppp.core.data_structures', level='WARNING'):
            batch = sync.next_epoch()

        self.assertEqual(len(batch), 3)
        self.assertEqual(len(batch.rover), 2)
        self.assertEqual(batch.dropped, 1)

    def test_raise(self):
        """Test hard failure on overflow"""
        obs = make_data([100.0], [100.0])
        sync = ObservationSynchronizer(obs, max_obs=3, overflow=OverflowPolicy.RAISE)

        with self.assertRaises(EpochOverflowError):
            sync.next_epoch()


if __name__ == '__main__':
    unittest.main()
