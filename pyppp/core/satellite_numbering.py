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

"""Unified satellite numbering for precise products and observations.

Precise ephemeris and clock tables are indexed by ``sat - 1``, so every
satellite of every constellation maps to one number in ``1..MAXSAT``:

- GPS (G): 1-32
- SBAS (S): 33-64, 133-140
- GLONASS (R): 65-88
- Galileo (E): 97-132
- BeiDou (C): 141-203
- QZSS (J): 210-216
- IRNSS (I): 230-243
"""

SYS_NONE = 0x00
SYS_GPS = 0x01
SYS_GLO = 0x02
SYS_GAL = 0x04
SYS_BDS = 0x08
SYS_QZS = 0x10
SYS_SBS = 0x20
SYS_IRN = 0x40
SYS_ALL = 0xFF

MAXSAT = 255  # size of per-satellite product tables

# (first satellite number, first PRN, last PRN) per block
_BLOCKS = {
    'G': [(1, 1, 32)],
    'S': [(33, 120, 151), (133, 152, 159)],
    'R': [(65, 1, 24)],
    'E': [(97, 1, 36)],
    'C': [(141, 1, 63)],
    'J': [(210, 1, 7)],
    'I': [(230, 1, 14)],
}

SYS_TO_CHAR = {
    SYS_GPS: 'G',
    SYS_GLO: 'R',
    SYS_GAL: 'E',
    SYS_BDS: 'C',
    SYS_QZS: 'J',
    SYS_SBS: 'S',
    SYS_IRN: 'I',
}

CHAR_TO_SYS = {v: k for k, v in SYS_TO_CHAR.items()}


def prn_to_sat(system_char, prn):
    """Convert system character and PRN to internal satellite number.

    Returns 0 for an unknown system or a PRN outside the system's range.

    Examples
    --------
    >>> prn_to_sat('G', 5)
    5
    >>> prn_to_sat('E', 11)
    107
    >>> prn_to_sat('S', 152)
    133
    """
    for first_sat, first_prn, last_prn in _BLOCKS.get(system_char, []):
        if first_prn <= prn <= last_prn:
            return first_sat + prn - first_prn
    return 0


def _locate(sat):
    for system_char, blocks in _BLOCKS.items():
        for first_sat, first_prn, last_prn in blocks:
            if first_sat <= sat <= first_sat + last_prn - first_prn:
                return system_char, sat - first_sat + first_prn
    return None, 0


def sat_to_prn(sat):
    """Convert internal satellite number to PRN (0 if invalid)"""
    return _locate(sat)[1]


def sat_to_sys(sat):
    """Convert internal satellite number to system ID (SYS_NONE if invalid)"""
    system_char, _ = _locate(sat)
    return CHAR_TO_SYS.get(system_char, SYS_NONE)
