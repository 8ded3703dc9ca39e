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

"""Regular tetrahedron surface in 3D space.

Dimensional: 2D manifold in 3D space (closed, no boundary).
"""

import torch

from loopmesh.mesh import Mesh


def load(
    size: float = 1.0,
    device: torch.device | str = "cpu",
) -> Mesh:
    """Create a regular tetrahedron centered at the origin.

    The vertices are alternate corners of the cube ``[-size, size]^3``, and
    every face is wound so that its normal points outward.

    Parameters
    ----------
    size : float
        Half the edge length of the enclosing cube.
    device : torch.device or str
        Compute device ('cpu' or 'cuda').

    Returns
    -------
    Mesh
        Mesh with 4 points and 4 cells.

    Examples
    --------
    >>> from loopmesh.primitives.surfaces import tetrahedron_surface
    >>> mesh = tetrahedron_surface.load()
    >>> mesh.n_points, mesh.n_cells
    (4, 4)
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size=}")

    points = size * torch.tensor(
        [
            [1.0, 1.0, 1.0],
            [1.0, -1.0, -1.0],
            [-1.0, 1.0, -1.0],
            [-1.0, -1.0, 1.0],
        ],
        dtype=torch.float32,
        device=device,
    )
    cells = torch.tensor(
        [[0, 1, 2], [0, 3, 1], [0, 2, 3], [1, 3, 2]],
        dtype=torch.int64,
        device=device,
    )
    return Mesh(points=points, cells=cells)
