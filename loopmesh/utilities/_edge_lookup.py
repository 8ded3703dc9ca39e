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

"""Vectorized matching of undirected edges against a reference edge table."""

import torch


def edge_hash(edges: torch.Tensor, n_vertices: int) -> torch.Tensor:
    """Integer key of each undirected edge, ``min * n_vertices + max``.

    Parameters
    ----------
    edges : torch.Tensor
        Edge connectivity, shape (n_edges, 2), in any orientation.
    n_vertices : int
        Strict upper bound on the vertex indices in ``edges``.

    Returns
    -------
    torch.Tensor
        Shape (n_edges,). Equal for ``[a, b]`` and ``[b, a]``.
    """
    canonical, _ = torch.sort(edges, dim=-1)
    return canonical[:, 0] * n_vertices + canonical[:, 1]


def match_edges(
    reference_edges: torch.Tensor,
    query_edges: torch.Tensor,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Locate each query edge in a reference edge table.

    Orientation is ignored on both sides. Cost is O(n log n) to sort the
    reference table and O(m log n) for the queries.

    Parameters
    ----------
    reference_edges : torch.Tensor
        Reference table, shape (n_ref, 2).
    query_edges : torch.Tensor
        Edges to locate, shape (n_query, 2).

    Returns
    -------
    indices : torch.Tensor
        Shape (n_query,). Row of ``reference_edges`` holding each query edge;
        undefined where ``found`` is False.
    found : torch.Tensor
        Shape (n_query,) bool.

    Examples
    --------
    >>> ref = torch.tensor([[0, 1], [1, 2], [2, 0]])
    >>> indices, found = match_edges(ref, torch.tensor([[0, 2], [3, 4]]))
    >>> indices[0].item(), found.tolist()
    (2, [True, False])
    """
    device = reference_edges.device

    if len(reference_edges) == 0 or len(query_edges) == 0:
        return (
            torch.zeros(len(query_edges), dtype=torch.long, device=device),
            torch.zeros(len(query_edges), dtype=torch.bool, device=device),
        )

    n_vertices = int(max(reference_edges.max().item(), query_edges.max().item())) + 1
    reference_hash = edge_hash(reference_edges, n_vertices)
    query_hash = edge_hash(query_edges, n_vertices)

    ### Binary search the sorted reference keys
    sorted_hash, sort_perm = torch.sort(reference_hash)
    positions = torch.searchsorted(sorted_hash, query_hash)
    positions = positions.clamp(max=len(sorted_hash) - 1)

    # searchsorted returns insertion points, so confirm exact hits
    found = sorted_hash[positions] == query_hash
    return sort_perm[positions], found
