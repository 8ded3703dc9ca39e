# SPDX-FileCopyrightText: Copyright (c) 2023 - 2026 NVIDIA CORPORATION & AFFILIATES.
# SPDX-FileCopyrightText: All rights reserved.
# SPDX-License-Identifier: Apache-2.0
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

"""Storage of derived mesh quantities under the ``"_cache"`` key.

Face and vertex normals are cached next to the user's data in the mesh's
``TensorDict`` containers so they travel with the mesh under ``.to()``.
"""

import torch
from tensordict import TensorDict

CACHE_KEY = "_cache"


def get_cached(data: TensorDict, key: str) -> torch.Tensor | None:
    """Return ``data["_cache", key]``, or None if it was never stored."""
    return data.get((CACHE_KEY, key), None)


def set_cached(data: TensorDict, key: str, value: torch.Tensor) -> None:
    """Store ``value`` under ``data["_cache", key]``, creating the sub-dict."""
    if CACHE_KEY not in data.keys():
        data[CACHE_KEY] = TensorDict({}, batch_size=data.batch_size, device=data.device)
    data[(CACHE_KEY, key)] = value


def without_cache(data: TensorDict) -> TensorDict:
    """Shallow copy of ``data`` with the cache sub-dict dropped.

    Subdivision changes the geometry, so cached quantities of the parent
    mesh must not be interpolated onto the child mesh.
    """
    if CACHE_KEY in data.keys():
        return data.exclude(CACHE_KEY)
    return data
