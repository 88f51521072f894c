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

"""Post-processing loop driving an external positioning estimator"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

import numpy as np

from ..core.data_structures import (
    EpochBatch,
    NavigationData,
    Observation,
    ObservationData,
    Solution,
    SolutionStatus,
)
from ..core.errors import NoNavigationData, NoObservationData
from ..core.options import EphemerisOption, ProcessingOptions
from ..core.time import time_str
from ..satellite.satellite_position import satposs
from .data_synchronizer import ObservationSynchronizer

logger = logging.getLogger(__name__)


@runtime_checkable
class PositionEstimator(Protocol):
    """Sequential estimator consuming one epoch batch at a time

    The estimator owns its filter state: ``reset`` is called once before
    the first epoch and ``close`` once after the last one.
    """

    base_position: np.ndarray

    def reset(self, options: ProcessingOptions) -> None:
        ...

    def update(self, batch: EpochBatch, nav: NavigationData) -> Optional[Solution]:
        """Solution of the epoch; None or status NONE when no usable fix was obtained"""
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class SolutionOutput(Protocol):
    """Sink of solutions"""

    def write_header(self, infiles: list, options: ProcessingOptions) -> None:
        ...

    def write_solution(self, sol: Solution, rb: np.ndarray) -> None:
        ...


class ProgressSink(Protocol):
    """Receives a status line per epoch, returns True to abort the run"""

    def __call__(self, message: str) -> bool:
        ...


class SolutionBuffer:
    """In-memory solution output"""

    def __init__(self):
        self.infiles = []
        self.options = None
        self.solutions = []
        self.base_positions = []

    def write_header(self, infiles: list, options: ProcessingOptions):
        self.infiles = list(infiles)
        self.options = options

    def write_solution(self, sol: Solution, rb: np.ndarray):
        self.solutions.append(sol)
        self.base_positions.append(np.array(rb, dtype=float))

    def __len__(self) -> int:
        return len(self.solutions)


class LoggingProgress:
    """Progress sink writing status lines to the logger

    Set ``abort`` (or call ``request_abort``) to stop the run at the next
    epoch boundary.
    """

    def __init__(self, level: int = logging.DEBUG):
        self.level = level
        self.abort = False

    def request_abort(self):
        self.abort = True

    def __call__(self, message: str) -> bool:
        if message.startswith('error'):
            logger.error(message)
        else:
            logger.log(self.level, message)
        return self.abort


@dataclass
class ProcessingResult:
    """Summary of a processing run

    Attributes
    ----------
    nepoch : int
        Number of observation epochs in the input
    epochs : int
        Synchronized epochs pulled
    processed : int
        Epochs passed to the estimator after filtering
    solutions : int
        Solutions written to the output
    aborted : bool
        The progress sink stopped the run
    """
    nepoch: int = 0
    epochs: int = 0
    processed: int = 0
    solutions: int = 0
    aborted: bool = False


@dataclass
class RunContext:
    """State of one processing run

    Parameters
    ----------
    obs : ObservationData
        Observations of rover and reference
    nav : NavigationData
        Precise orbit/clock products and satellite antennas
    options : ProcessingOptions
        Processing options
    infiles : list[str]
        Input product identifiers written to the output header
    antennas : list[SatelliteAntenna]
        Satellite antenna table; the entry valid at the first observation
        is selected per satellite. Empty keeps ``nav.pcvs`` as given.
    """
    obs: ObservationData
    nav: NavigationData
    options: ProcessingOptions = field(default_factory=ProcessingOptions)
    infiles: list = field(default_factory=list)
    antennas: list = field(default_factory=list)
    nepoch: int = 0
    synchronizer: Optional[ObservationSynchronizer] = None

    def prepare(self, progress: ProgressSink):
        """
        Validate inputs, sort observations and set up the synchronizer

        Raises
        ------
        NoObservationData
            No observation at all
        NoNavigationData
            No precise orbit or clock product at all
        """
        if self.obs.n <= 0:
            progress("error : no obs data")
            raise NoObservationData("no observation data")
        if self.nav.ne <= 0 and self.nav.nc <= 0:
            progress("error : no nav data")
            raise NoNavigationData("no navigation data")

        opt = self.options
        self.nepoch = self.obs.sort(opt.dttol)
        self.nav.combine_precise()

        if opt.sateph is EphemerisOption.PRECISE and self.antennas:
            nsat = self.nav.set_satellite_antennas(self.antennas, self.obs[0].time)
            logger.info(f"Satellite antenna parameters set for {nsat} satellites")

        self.synchronizer = ObservationSynchronizer(
            self.obs, opt.alignment, opt.direction, opt.dttol, opt.max_obs, opt.overflow)
        logger.info(f"Run prepared: {self.obs.n} observations, {self.nepoch} epochs, "
                    f"ne={self.nav.ne} nc={self.nav.nc}")

    def accepts(self, obs: Observation) -> bool:
        """Observation passes the system mask and the exclusion set"""
        return bool(obs.system & self.options.navsys) and obs.sat not in self.options.exsats

    def satellite_states(self, batch: EpochBatch) -> list:
        """Satellite states of one epoch with the run's position options"""
        opt = self.options
        return satposs(batch, self.nav, opt.satpos_mode, opt.interp_order,
                       opt.ionosphere_free_pco)


def process_positions(ctx: RunContext, estimator: PositionEstimator,
                      output: Optional[SolutionOutput] = None,
                      progress: Optional[ProgressSink] = None) -> ProcessingResult:
    """
    Process all epochs of a run

    Parameters
    ----------
    ctx : RunContext
        Run inputs and options
    estimator : PositionEstimator
        Positioning estimator
    output : SolutionOutput, optional
        Solution sink, a ``SolutionBuffer`` if omitted
    progress : ProgressSink, optional
        Progress sink, a ``LoggingProgress`` if omitted

    Returns
    -------
    ProcessingResult
        Run summary

    Raises
    ------
    RunSetupError
        No observation or no navigation data

    Notes
    -----
    With ``solstatic`` in a static mode only one solution is written: the
    last one whose status priority is not worse than the kept one, stamped
    with the earliest time among the accepted solutions. Solutions with
    status NONE carry no usable fix and are never written.
    """
    if output is None:
        output = SolutionBuffer()
    if progress is None:
        progress = LoggingProgress()

    ctx.prepare(progress)
    opt = ctx.options
    sync = ctx.synchronizer

    output.write_header(ctx.infiles, opt)
    estimator.reset(opt)

    result = ProcessingResult(nepoch=ctx.nepoch)
    stat = SolutionStatus.NONE
    static_sol = None
    static_rb = None
    static_time = None

    try:
        while True:
            if 0 <= sync.rover_cursor < ctx.obs.n:
                time = ctx.obs[sync.rover_cursor].time
                if progress(f"processing : {time_str(time)} Q={int(stat)}"):
                    result.aborted = True
                    progress("aborted")
                    logger.info(f"Processing aborted at {time_str(time)}")
                    break

            batch = sync.next_epoch()
            if batch is None:
                break
            result.epochs += 1

            batch = batch.select(ctx.accepts)
            if not batch:
                continue

            result.processed += 1
            sol = estimator.update(batch, ctx.nav)
            if sol is None or sol.stat is SolutionStatus.NONE:
                continue
            stat = sol.stat

            if not opt.aggregate_static:
                output.write_solution(sol, estimator.base_position)
                result.solutions += 1
            elif static_sol is None or sol.priority <= static_sol.priority:
                static_sol = copy.deepcopy(sol)
                static_rb = np.array(estimator.base_position, dtype=float)
                if static_time is None or sol.time < static_time:
                    static_time = sol.time

        if static_sol is not None:
            static_sol.time = static_time
            output.write_solution(static_sol, static_rb)
            result.solutions += 1
    finally:
        estimator.close()

    logger.info(f"Processed {result.processed}/{result.epochs} epochs, "
                f"{result.solutions} solutions")
    return result
