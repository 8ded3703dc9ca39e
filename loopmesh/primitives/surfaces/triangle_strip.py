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

"""Flat strip of triangles in the z=0 plane.

Dimensional: 2D manifold in 3D space (open, with boundary).
"""

import torch

from loopmesh.mesh import Mesh


def load(
    n_segments: int = 2,
    device: torch.device | str = "cpu",
) -> Mesh:
    """Create a strip of ``n_segments`` unit squares, each split in two.

    Points ``0 .. n_segments`` run along ``y = 0`` and points
    ``n_segments + 1 .. 2 n_segments + 1`` along ``y = 1``. All triangles are
    wound counter-clockwise seen from ``+z``.

    Parameters
    ----------
    n_segments : int
        Number of squares along the x axis.
    device : torch.device or str
        Compute device ('cpu' or 'cuda').

    Returns
    -------
    Mesh
        Mesh with ``2 * (n_segments + 1)`` points and ``2 * n_segments``
        cells.

    Examples
    --------
    >>> from loopmesh.primitives.surfaces import triangle_strip
    >>> mesh = triangle_strip.load(n_segments=3)
    >>> mesh.n_points, mesh.n_cells
    (8, 6)
    """
    if n_segments < 1:
        raise ValueError(f"n_segments must be at least 1, got {n_segments=}")

    x = torch.arange(n_segments + 1, dtype=torch.float32, device=device)
    bottom = torch.stack([x, torch.zeros_like(x), torch.zeros_like(x)], dim=-1)
    top = torch.stack([x, torch.ones_like(x), torch.zeros_like(x)], dim=-1)
    points = torch.cat([bottom, top], dim=0)

    i = torch.arange(n_segments, dtype=torch.int64, device=device)
    b0, b1 = i, i + 1
    t0, t1 = i + n_segments + 1, i + n_segments + 2

    # Two triangles per square, interleaved so square k owns rows 2k and 2k+1
    lower = torch.stack([b0, b1, t1], dim=-1)
    upper = torch.stack([b0, t1, t0], dim=-1)
    cells = torch.stack([lower, upper], dim=1).reshape(-1, 3)

    return Mesh(points=points, cells=cells)
