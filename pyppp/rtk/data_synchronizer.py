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

"""Data synchronization of rover and reference observation streams"""

import logging
from typing import Iterator, Optional, Tuple

from ..core.constants import DTTOL, MAXOBS
from ..core.data_structures import REFERENCE, ROVER, EpochBatch, ObservationData
from ..core.options import OverflowPolicy, ReferenceAlignment, SolveDirection
from ..core.time import time_str

logger = logging.getLogger(__name__)


class ObservationSynchronizer:
    """Pair each rover epoch with the reference epoch to process it with

    Walks the merged, time-sorted observations of both receivers with two
    cursors, one per receiver, and yields one ``EpochBatch`` per rover epoch:
    the rover observations followed by the aligned reference observations.
    A rover epoch without reference data still yields a rover-only batch.

    Parameters
    ----------
    obs : ObservationData
        Sorted observations of rover (rcv=1) and reference (rcv=2)
    alignment : ReferenceAlignment
        Reference alignment policy
    direction : SolveDirection
        FORWARD walks from the first epoch, BACKWARD from the last
    dttol : float
        Tolerance (s) grouping observations into one epoch
    max_obs : int
        Batch capacity
    overflow : OverflowPolicy
        Batch overflow policy

    Examples
    --------
        >>> sync = ObservationSynchronizer(obs, ReferenceAlignment.INTERPOLATED)
        >>> for batch in sync:
        ...     process(batch.rover, batch.reference)
    """

    def __init__(self, obs: ObservationData,
                 alignment: ReferenceAlignment = ReferenceAlignment.NEAREST_PRECEDING,
                 direction: SolveDirection = SolveDirection.FORWARD,
                 dttol: float = DTTOL, max_obs: int = MAXOBS,
                 overflow: OverflowPolicy = OverflowPolicy.TRUNCATE):
        self.obs = obs
        self.alignment = alignment
        self.direction = direction
        self.dttol = dttol
        self.max_obs = max_obs
        self.overflow = overflow
        self.reset()

    def reset(self):
        """Rewind both cursors to the start of the configured direction"""
        start = 0 if self.direction is SolveDirection.FORWARD else self.obs.n - 1
        self.rover_cursor = start
        self.ref_cursor = start

    def scan(self, cursor: int, rcv: int) -> Tuple[int, int]:
        """
        Find the next run of observations of receiver ``rcv``

        Parameters
        ----------
        cursor : int
            Index to start from
        rcv : int
            Receiver id

        Returns
        -------
        cursor : int
            Index of the first observation of ``rcv`` at or after ``cursor``
        n : int
            Number of consecutive observations of ``rcv`` within ``dttol``
            of that one, 0 if there is none
        """
        data = self.obs.data
        while cursor < len(data) and data[cursor].rcv != rcv:
            cursor += 1

        n = 0
        while cursor + n < len(data):
            o = data[cursor + n]
            if o.rcv != rcv or o.time - data[cursor].time > self.dttol:
                break
            n += 1
        return cursor, n

    def scan_backward(self, cursor: int, rcv: int) -> Tuple[int, int]:
        """Mirror of ``scan``: the run of ``rcv`` ending at or before ``cursor``

        The returned cursor is the last observation of the run, which spans
        ``cursor - n + 1 .. cursor``.
        """
        data = self.obs.data
        while cursor >= 0 and data[cursor].rcv != rcv:
            cursor -= 1

        n = 0
        while cursor - n >= 0:
            o = data[cursor - n]
            if o.rcv != rcv or o.time - data[cursor].time < -self.dttol:
                break
            n += 1
        return cursor, n

    def _new_batch(self) -> EpochBatch:
        return EpochBatch(self.max_obs, self.overflow)

    def _next_forward(self) -> Optional[EpochBatch]:
        data = self.obs.data

        self.rover_cursor, nu = self.scan(self.rover_cursor, ROVER)
        if nu <= 0:
            return None
        t_rov = data[self.rover_cursor].time

        if self.alignment is ReferenceAlignment.INTERPOLATED:
            while True:
                self.ref_cursor, nr = self.scan(self.ref_cursor, REFERENCE)
                if nr <= 0 or data[self.ref_cursor].time - t_rov > -self.dttol:
                    break
                self.ref_cursor += nr
        else:
            i = self.ref_cursor
            while True:
                i, nr = self.scan(i, REFERENCE)
                if nr <= 0 or data[i].time - t_rov > self.dttol:
                    break
                self.ref_cursor = i
                i += nr

        self.ref_cursor, nr = self.scan(self.ref_cursor, REFERENCE)

        batch = self._new_batch()
        batch.extend(data[self.rover_cursor:self.rover_cursor + nu])
        batch.extend(data[self.ref_cursor:self.ref_cursor + nr])
        self.rover_cursor += nu
        return batch

    def _next_backward(self) -> Optional[EpochBatch]:
        data = self.obs.data

        self.rover_cursor, nu = self.scan_backward(self.rover_cursor, ROVER)
        if nu <= 0:
            return None
        t_rov = data[self.rover_cursor].time

        if self.alignment is ReferenceAlignment.INTERPOLATED:
            while True:
                self.ref_cursor, nr = self.scan_backward(self.ref_cursor, REFERENCE)
                if nr <= 0 or data[self.ref_cursor].time - t_rov < self.dttol:
                    break
                self.ref_cursor -= nr
        else:
            i = self.ref_cursor
            while True:
                i, nr = self.scan_backward(i, REFERENCE)
                if nr <= 0 or data[i].time - t_rov < -self.dttol:
                    break
                self.ref_cursor = i
                i -= nr

        self.ref_cursor, nr = self.scan_backward(self.ref_cursor, REFERENCE)

        batch = self._new_batch()
        batch.extend(data[self.rover_cursor - nu + 1:self.rover_cursor + 1])
        batch.extend(data[self.ref_cursor - nr + 1:self.ref_cursor + 1])
        self.rover_cursor -= nu
        return batch

    def next_epoch(self) -> Optional[EpochBatch]:
        """
        Next synchronized epoch

        Returns
        -------
        EpochBatch or None
            Rover observations then reference observations; None at end of
            data. The reference part is empty when no reference epoch aligns.
        """
        if self.direction is SolveDirection.FORWARD:
            batch = self._next_forward()
        else:
            batch = self._next_backward()

        if batch is None:
            logger.debug("End of observation data")
        else:
            logger.trace(f"epoch {time_str(batch.time, 3)}: "
                         f"rover={len(batch.rover)} reference={len(batch.reference)}")
        return batch

    def __iter__(self) -> Iterator[EpochBatch]:
        while True:
            batch = self.next_epoch()
            if batch is None:
                return
            yield batch
