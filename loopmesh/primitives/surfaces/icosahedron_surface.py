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

"""Regular icosahedron surface in 3D space.

Dimensional: 2D manifold in 3D space (closed, no boundary).
"""

import torch

from loopmesh.mesh import Mesh


def load(
    radius: float = 1.0,
    device: torch.device | str = "cpu",
) -> Mesh:
    """Create a regular icosahedron inscribed in a sphere.

    Parameters
    ----------
    radius : float
        Circumradius (distance from the origin to every vertex).
    device : torch.device or str
        Compute device ('cpu' or 'cuda').

    Returns
    -------
    Mesh
        Mesh with 12 points and 20 outward-wound cells.

    Examples
    --------
    >>> from loopmesh.primitives.surfaces import icosahedron_surface
    >>> mesh = icosahedron_surface.load(radius=2.0)
    >>> mesh.n_points, mesh.n_cells
    (12, 20)
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius=}")

    phi = (1.0 + 5.0**0.5) / 2.0
    points = torch.tensor(
        [
            [-1.0, phi, 0.0],
            [1.0, phi, 0.0],
            [-1.0, -phi, 0.0],
            [1.0, -phi, 0.0],
            [0.0, -1.0, phi],
            [0.0, 1.0, phi],
            [0.0, -1.0, -phi],
            [0.0, 1.0, -phi],
            [phi, 0.0, -1.0],
            [phi, 0.0, 1.0],
            [-phi, 0.0, -1.0],
            [-phi, 0.0, 1.0],
        ],
        dtype=torch.float32,
        device=device,
    )
    points = points / points.norm(dim=-1, keepdim=True) * radius

    cells = torch.tensor(
        [
            # 5 faces around vertex 0
            [0, 11, 5],
            [0, 5, 1],
            [0, 1, 7],
            [0, 7, 10],
            [0, 10, 11],
            # 5 adjacent faces
            [1, 5, 9],
            [5, 11, 4],
            [11, 10, 2],
            [10, 7, 6],
            [7, 1, 8],
            # 5 faces around vertex 3
            [3, 9, 4],
            [3, 4, 2],
            [3, 2, 6],
            [3, 6, 8],
            [3, 8, 9],
            # 5 adjacent faces
            [4, 9, 5],
            [2, 4, 11],
            [6, 2, 10],
            [8, 6, 7],
            [9, 8, 1],
        ],
        dtype=torch.int64,
        device=device,
    )
    return Mesh(points=points, cells=cells)
