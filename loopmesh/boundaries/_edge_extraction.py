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

"""Extraction of the half-edges of a triangle mesh.

Each triangle ``(v1, v2, v3)`` contributes its three edges in winding order,
``(v1, v2)``, ``(v2, v3)``, ``(v3, v1)``, together with the vertex across
from each edge. Shared edges therefore appear once per incident triangle.
"""

import torch

# Local corner indices of each triangle edge, and of the corner across from it
_EDGE_CORNERS = ((0, 1), (1, 2), (2, 0))
_OPPOSITE_CORNER = (2, 0, 1)


def extract_candidate_edges(
    cells: torch.Tensor,  # shape: (n_cells, 3)
) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """Extract every half-edge of a triangle mesh.

    Parameters
    ----------
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    candidate_edges : torch.Tensor
        Shape (n_cells * 3, 2). Rows ``3i, 3i+1, 3i+2`` are the edges
        ``(v1, v2), (v2, v3), (v3, v1)`` of triangle ``i``, oriented as in
        the triangle.
    opposite_vertices : torch.Tensor
        Shape (n_cells * 3,). Vertex of the same triangle not on the edge.
    parent_cell_indices : torch.Tensor
        Shape (n_cells * 3,). Triangle each half-edge came from.

    Examples
    --------
    >>> edges, opposite, parents = extract_candidate_edges(torch.tensor([[4, 5, 6]]))
    >>> edges.tolist(), opposite.tolist()
    ([[4, 5], [5, 6], [6, 4]], [6, 4, 5])
    """
    n_cells = cells.shape[0]
    device = cells.device

    edge_corners = torch.tensor(_EDGE_CORNERS, dtype=torch.int64, device=device)
    opposite_corner = torch.tensor(_OPPOSITE_CORNER, dtype=torch.int64, device=device)

    # (n_cells, 3, 2) -> (n_cells * 3, 2)
    candidate_edges = cells[:, edge_corners].reshape(-1, 2)
    opposite_vertices = cells[:, opposite_corner].reshape(-1)
    parent_cell_indices = torch.arange(
        n_cells, dtype=torch.int64, device=device
    ).repeat_interleave(3)

    return candidate_edges, opposite_vertices, parent_cell_indices


def extract_unique_edges(
    cells: torch.Tensor,
) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """Deduplicate the half-edges of a triangle mesh.

    Returns
    -------
    unique_edges : torch.Tensor
        Shape (n_edges, 2), each row sorted so that ``[:, 0] < [:, 1]``.
    inverse_indices : torch.Tensor
        Shape (n_cells * 3,). Unique edge of each half-edge.
    counts : torch.Tensor
        Shape (n_edges,). Number of triangles incident to each edge.
    """
    candidate_edges, _, _ = extract_candidate_edges(cells)

    if len(candidate_edges) == 0:
        empty = torch.zeros(0, dtype=torch.int64, device=cells.device)
        return candidate_edges, empty, empty

    canonical, _ = torch.sort(candidate_edges, dim=1)
    return torch.unique(canonical, dim=0, return_inverse=True, return_counts=True)
