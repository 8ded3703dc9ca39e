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

"""Interior angles at the corners of triangles in 3D."""

import torch


def compute_vertex_angles(points: torch.Tensor, cells: torch.Tensor) -> torch.Tensor:
    """Compute the interior angle at each corner of each triangle.

    The angle at corner ``k`` is the angle between the edges running to the
    next and previous corners::

        theta_k = atan2(|u x w|, u . w),   u = v_{k+1} - v_k,  w = v_{k-1} - v_k

    Parameters
    ----------
    points : torch.Tensor
        Vertex positions, shape (n_points, 3).
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    torch.Tensor
        Shape (n_cells, 3), in the dtype of ``points``. The three angles of a
        non-degenerate triangle sum to pi. A corner with a zero-length edge
        gets angle 0.

    Notes
    -----
    ``atan2`` stays accurate for angles near 0 and pi, where ``acos`` of a
    normalized dot product loses most of its digits. Intermediates are kept
    in float64 for the same reason.

    Examples
    --------
    >>> pts = torch.tensor([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    >>> angles = compute_vertex_angles(pts, torch.tensor([[0, 1, 2]]))
    >>> round(angles[0, 0].item(), 6)  # right angle at the origin
    1.570796
    """
    corners = points[cells].double()  # (n_cells, 3, 3)

    ### Edge vectors leaving each corner towards its two neighbours
    to_next = torch.roll(corners, shifts=-1, dims=1) - corners
    to_prev = torch.roll(corners, shifts=1, dims=1) - corners

    sin_term = torch.linalg.cross(to_next, to_prev, dim=-1).norm(dim=-1)
    cos_term = (to_next * to_prev).sum(dim=-1)

    return torch.atan2(sin_term, cos_term).to(points.dtype)
