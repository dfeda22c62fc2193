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

import dataclasses

# Format of the label given to new snapshots, e.g. tank/home@2024-05-01T13:00:00.
TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclasses.dataclass
class _Flags:
    # If True, no snapshot is created or destroyed.
    dryrun: bool = False


FLAGS = _Flags()
