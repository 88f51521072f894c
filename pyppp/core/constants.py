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

"""GNSS constants and precise-product processing parameters"""

import numpy as np

from .satellite_numbering import (
    MAXSAT, SYS_NONE, SYS_GPS, SYS_GLO, SYS_GAL, SYS_BDS, SYS_QZS, SYS_SBS,
    SYS_IRN, SYS_ALL, sat_to_sys, sat_to_prn, prn_to_sat, SYS_TO_CHAR, CHAR_TO_SYS,
)

__all__ = [
    'MAXSAT', 'SYS_NONE', 'SYS_GPS', 'SYS_GLO', 'SYS_GAL', 'SYS_BDS', 'SYS_QZS', 'SYS_SBS',
    'SYS_IRN', 'SYS_ALL', 'SYS_TO_CHAR', 'CHAR_TO_SYS', 'sat_to_sys', 'sat_to_prn', 'prn_to_sat',
    'CLIGHT', 'RE_WGS84', 'FE_WGS84', 'OMGE', 'AU',
    'FREQ_L1', 'FREQ_L2', 'FREQ_L5', 'FREQ_G1', 'FREQ_G2', 'FREQ_E1', 'FREQ_E5a', 'FREQ_E5b',
    'FREQ_B1I', 'FREQ_B3', 'FREQ_B2a', 'SYSTEM_FREQUENCIES',
    'NFREQ', 'MAXOBS', 'NMAX', 'MAXDTE', 'EXTERR_CLK', 'EXTERR_EPH', 'DT_VELOCITY', 'DTTOL',
    'R2D', 'D2R',
    'SOLQ_NONE', 'SOLQ_FIX', 'SOLQ_FLOAT', 'SOLQ_SBAS', 'SOLQ_DGPS', 'SOLQ_SINGLE', 'SOLQ_PPP',
    'SOLQ_DR',
    'sat2sys', 'sat2prn', 'prn2sat', 'sat2id', 'id2sat', 'sat_frequency',
]

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# Earth Parameters (WGS84)
RE_WGS84 = 6378137.0           # earth semimajor axis (m)
FE_WGS84 = 1.0 / 298.257223563 # earth flattening
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)
AU = 149597870691.0            # 1 AU (m)

# GPS/QZSS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)
FREQ_L5 = 1.17645E9   # L5 frequency (Hz)

# GLONASS frequencies (FDMA channel 0)
FREQ_G1 = 1.60200E9
FREQ_G2 = 1.24600E9

# Galileo frequencies
FREQ_E1 = 1.57542E9
FREQ_E5a = 1.17645E9
FREQ_E5b = 1.20714E9

# BeiDou frequencies
FREQ_B1I = 1.561098E9
FREQ_B3 = 1.26852E9
FREQ_B2a = 1.17645E9

NFREQ = 3            # number of carrier frequencies per satellite
MAXOBS = 96          # max number of observations in an epoch

# Precise ephemeris/clock interpolation
NMAX = 10            # order of polynomial interpolation
MAXDTE = 900.0       # max time difference to ephemeris time (s)
EXTERR_CLK = 1E-3    # extrapolation error for clock (m/s)
EXTERR_EPH = 5E-7    # extrapolation error for ephemeris (m/s^2)
DT_VELOCITY = 1E-3   # time step for numerical velocity (s)

# Observation synchronisation
DTTOL = 0.025        # tolerance of time difference (s)

# Unit conversions
R2D = 180.0 / np.pi
D2R = np.pi / 180.0

# Solution status codes
SOLQ_NONE = 0       # no solution
SOLQ_FIX = 1        # fixed solution
SOLQ_FLOAT = 2      # float solution
SOLQ_SBAS = 3       # SBAS solution
SOLQ_DGPS = 4       # DGPS solution
SOLQ_SINGLE = 5     # single point positioning
SOLQ_PPP = 6        # PPP solution
SOLQ_DR = 7         # dead reckoning

# Carrier frequencies (Hz) by system, indexed by frequency slot
SYSTEM_FREQUENCIES = {
    SYS_GPS: (FREQ_L1, FREQ_L2, FREQ_L5),
    SYS_QZS: (FREQ_L1, FREQ_L2, FREQ_L5),
    SYS_GLO: (FREQ_G1, FREQ_G2, 0.0),
    SYS_GAL: (FREQ_E1, FREQ_E5b, FREQ_E5a),
    SYS_BDS: (FREQ_B1I, FREQ_B3, FREQ_B2a),
    SYS_SBS: (FREQ_L1, 0.0, FREQ_L5),
    SYS_IRN: (0.0, 0.0, FREQ_L5),
}


def sat2sys(sat):
    """Get satellite system from satellite number"""
    return sat_to_sys(sat)


def sat2prn(sat):
    """Get PRN number from satellite number"""
    return sat_to_prn(sat)


def prn2sat(prn, sys):
    """Get satellite number from PRN and system

    Parameters:
    -----------
    prn : int
        PRN number
    sys : int
        Satellite system (SYS_GPS, SYS_GLO, etc.)

    Returns:
    --------
    int
        Satellite number, 0 if invalid
    """
    sys_char = SYS_TO_CHAR.get(sys)
    if sys_char is None:
        return 0
    return prn_to_sat(sys_char, prn)


def sat2id(sat):
    """Satellite number to RINEX id such as 'G05'"""
    sys_char = SYS_TO_CHAR.get(sat2sys(sat))
    if sys_char is None:
        return ''
    return f"{sys_char}{sat2prn(sat):02d}"


def id2sat(sat_id):
    """RINEX satellite id such as 'E11' to satellite number (0 if invalid)"""
    sat_id = sat_id.strip()
    if len(sat_id) < 2:
        return 0
    try:
        prn = int(sat_id[1:])
    except ValueError:
        return 0
    return prn_to_sat(sat_id[0].upper(), prn)


def sat_frequency(sat, freq_idx):
    """Carrier frequency (Hz) of a satellite's frequency slot, 0.0 if unknown"""
    freqs = SYSTEM_FREQUENCIES.get(sat2sys(sat), ())
    return freqs[freq_idx] if freq_idx < len(freqs) else 0.0
