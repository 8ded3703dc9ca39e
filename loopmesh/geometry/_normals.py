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

"""Face normals and angle-weighted vertex normals for triangle surfaces."""

import warnings

import torch
import torch.nn.functional as F

from loopmesh.geometry._angles import compute_vertex_angles
from loopmesh.utilities._tolerances import is_degenerate_length, safe_eps


def compute_face_normals(points: torch.Tensor, cells: torch.Tensor) -> torch.Tensor:
    """Compute the unit normal of each triangle.

    The normal of ``(v1, v2, v3)`` is ``normalize((v2 - v1) x (v3 - v1))``,
    so it points towards the side from which the winding appears
    counter-clockwise. Reversing the winding flips the normal.

    Parameters
    ----------
    points : torch.Tensor
        Vertex positions, shape (n_points, 3).
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    torch.Tensor
        Shape (n_cells, 3). Zero for degenerate (zero-area) triangles.
    """
    corners = points[cells]  # (n_cells, 3, 3)
    raw_normals = torch.linalg.cross(
        corners[:, 1] - corners[:, 0],
        corners[:, 2] - corners[:, 0],
        dim=-1,
    )
    return F.normalize(raw_normals, dim=-1, eps=safe_eps(points.dtype))


def compute_angle_weighted_point_normals(
    points: torch.Tensor,
    cells: torch.Tensor,
) -> torch.Tensor:
    """Compute vertex normals as the angle-weighted sum of incident face normals.

    Every triangle adds ``theta_k * n_face`` to each of its three vertices,
    where ``theta_k`` is its interior angle at that vertex. The sums are then
    scaled to unit length.

    Parameters
    ----------
    points : torch.Tensor
        Vertex positions, shape (n_points, 3).
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    torch.Tensor
        Shape (n_points, 3). Unit vectors, except at vertices whose summed
        contribution vanishes (isolated vertices, fully degenerate
        neighbourhoods, or exactly cancelling faces); those get the zero
        vector and a :class:`UserWarning` is issued.
    """
    n_points = points.shape[0]

    face_normals = compute_face_normals(points, cells)  # (n_cells, 3)
    angles = compute_vertex_angles(points, cells)  # (n_cells, 3)

    ### Scatter angle * face normal onto each corner's vertex
    contributions = angles.unsqueeze(-1) * face_normals.unsqueeze(1)
    accumulated = torch.zeros(
        (n_points, points.shape[-1]), dtype=points.dtype, device=points.device
    )
    accumulated.index_add_(
        0, cells.reshape(-1), contributions.reshape(-1, points.shape[-1])
    )

    ### Normalize, leaving vanishing sums as exact zeros rather than NaN
    lengths = accumulated.norm(dim=-1, keepdim=True)
    degenerate = is_degenerate_length(lengths)
    normals = torch.where(
        degenerate,
        torch.zeros_like(accumulated),
        accumulated / lengths.clamp(min=safe_eps(points.dtype)),
    )

    n_degenerate = int(degenerate.sum().item())
    if n_degenerate > 0:
        warnings.warn(
            f"{n_degenerate} of {n_points} vertices have a vanishing normal sum; "
            f"their normals are set to the zero vector.",
            stacklevel=2,
        )

    return normals
