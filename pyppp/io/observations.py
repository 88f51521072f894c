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

"""Conversion of observation tables into pyppp observations"""

import logging
from dataclasses import replace
from typing import List

import numpy as np
import pandas as pd

from ..core.constants import DTTOL, NFREQ, id2sat
from ..core.data_structures import REFERENCE, ROVER, Observation, ObservationData
from ..core.time import datetime_to_gps_seconds

logger = logging.getLogger(__name__)

# RINEX 3 band/attribute codes tried for each frequency slot, in order
SIGNAL_CODES = {
    'G': (('1C', '1W'), ('2W', '2L', '2X', '2S'), ('5Q', '5X', '5I')),
    'J': (('1C', '1X'), ('2L', '2X'), ('5Q', '5X')),
    'R': (('1C', '1P'), ('2C', '2P'), ()),
    'E': (('1C', '1X'), ('7Q', '7X'), ('5Q', '5X')),
    'C': (('2I', '1I'), ('6I', '6X'), ('5P', '5X')),
    'S': (('1C',), (), ('5I', '5X')),
    'I': ((), (), ('5A',)),
}

# observation array of Observation for each RINEX observation type
_OBS_TYPES = (('C', 'P'), ('L', 'L'), ('D', 'D'), ('S', 'SNR'))


def _value(row: pd.Series, column: str) -> float:
    value = row.get(column, np.nan)
    if pd.isna(value):
        return 0.0
    return float(value)


def _fill_slot(obs: Observation, row: pd.Series, slot: int, codes):
    for obs_type, attr in _OBS_TYPES:
        array = getattr(obs, attr)
        for code in codes:
            value = _value(row, obs_type + code)
            if value != 0.0:
                array[slot] = value
                break


def observations_from_dataframe(df: pd.DataFrame, rcv: int = ROVER) -> List[Observation]:
    """
    Convert an observation DataFrame into observations of one receiver

    Parameters
    ----------
    df : pd.DataFrame
        Observations indexed by ('Epoch', 'SV') with RINEX 3 observation
        code columns ('C1C', 'L1C', 'S1C', 'C2W' ...), epochs in GPST
    rcv : int
        Receiver id, ROVER or REFERENCE

    Returns
    -------
    List[Observation]
        Observations with at least one pseudorange, in table order
    """
    observations = []
    skipped = 0
    epoch_times = {}

    for (epoch, sv_id), row in df.iterrows():
        sv_id = str(sv_id)
        sat = id2sat(sv_id)
        codes = SIGNAL_CODES.get(sv_id[:1].upper())
        if sat == 0 or codes is None:
            skipped += 1
            continue

        if epoch not in epoch_times:
            epoch_times[epoch] = datetime_to_gps_seconds(pd.Timestamp(epoch))

        obs = Observation(time=epoch_times[epoch], sat=sat, rcv=rcv)
        for slot in range(NFREQ):
            _fill_slot(obs, row, slot, codes[slot])

        # Only add if we have a valid pseudorange
        if obs.pseudorange > 0.0:
            observations.append(obs)
        else:
            skipped += 1

    logger.info(f"Converted {len(observations)} observations of receiver {rcv} "
                f"from {len(epoch_times)} epochs (skipped {skipped})")
    return observations


def merge_receivers(rover, base, dttol: float = DTTOL) -> ObservationData:
    """
    Merge rover and reference observations into one sorted sequence

    Parameters
    ----------
    rover : iterable of Observation
        Rover observations, receiver id set to ROVER
    base : iterable of Observation
        Reference station observations, receiver id set to REFERENCE
    dttol : float
        Epoch grouping tolerance (s)

    Returns
    -------
    ObservationData
        Sorted observations without duplicates
    """
    data = [o if o.rcv == ROVER else replace(o, rcv=ROVER) for o in rover]
    data += [o if o.rcv == REFERENCE else replace(o, rcv=REFERENCE) for o in base]

    obs = ObservationData(data)
    nepoch = obs.sort(dttol)
    logger.info(f"Merged {obs.n} observations in {nepoch} epochs")
    return obs
