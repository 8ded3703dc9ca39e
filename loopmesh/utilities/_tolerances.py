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

"""Dtype-aware numerical tolerances for subdivision geometry.

Normal accumulation and interior angles divide by vector lengths that are
exactly zero on degenerate triangles. A fixed floor such as ``1e-10`` would
be far above machine precision for float64 and would flatten small-scale
geometry, so the floor is derived from the dtype instead. It is the smaller
of ``tiny ** 0.25`` and ``eps ** 2``. The resolution term keeps float16,
whose ``tiny ** 0.25`` is ~0.09, from erasing real normals of small meshes:

==========  =============
dtype       ``safe_eps``
==========  =============
float16     ~9.5e-7
bfloat16    ~1.0e-10
float32     ~1.4e-14
float64     ~1.2e-77
==========  =============
"""

import torch


def safe_eps(dtype: torch.dtype) -> float:
    """Return a dtype-aware floor for guarding divisions by a vector length.

    Parameters
    ----------
    dtype : torch.dtype
        The floating-point dtype (e.g. ``torch.float32``, ``torch.float64``).

    Returns
    -------
    float
        ``min(finfo.tiny ** 0.25, finfo.eps ** 2)``. Far below the length of
        any edge cross product the dtype can resolve, so it never activates on
        a non-degenerate mesh.
    """
    finfo = torch.finfo(dtype)
    return min(finfo.tiny ** 0.25, finfo.eps ** 2)


def is_degenerate_length(lengths: torch.Tensor) -> torch.Tensor:
    """Mask of lengths that fall below :func:`safe_eps` for their dtype."""
    return lengths < safe_eps(lengths.dtype)
