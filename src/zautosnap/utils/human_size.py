# Copyright 2022 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Parser for sizes as printed by `zfs list`, e.g. '1.25T' or '512G'.

Units are powers of 1024. A number without unit is in bytes.
E.g. parse_to_gb('1.5T')  # Returns 1536.0.
"""

import re

# Unit suffix to its power of 1024.
_UNIT_POWERS = {"B": 0, "": 0, "K": 1, "M": 2, "G": 3, "T": 4, "P": 5, "E": 6, "Z": 7}
_GB_POWER = _UNIT_POWERS["G"]


def parse_to_gb(human_size: str) -> float:
    # Also accept "GiB", "GB" or "G".
    m = re.match(
        r"^\s*(?P<value>[0-9]+\.?[0-9]*|\.[0-9]+)\s*(?P<unit>[BKMGTPEZ]?)(i?B)?\s*$",
        human_size,
        flags=re.IGNORECASE,
    )
    if not m:
        raise ValueError(f"Could not parse {human_size!r} as a size.")
    power = _UNIT_POWERS[m.group("unit").upper()]
    return float(m.group("value")) * 1024.0 ** (power - _GB_POWER)


def to_whole_gb(human_size: str) -> int:
    """Normalizes to whole gigabytes, rounding to the nearest."""
    return int(round(parse_to_gb(human_size)))
