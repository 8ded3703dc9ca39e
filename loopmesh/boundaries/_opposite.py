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

"""Boundary classification and opposite-vertex lookup for triangle edges.

An edge of a 2-manifold triangle mesh is incident to one triangle (a
boundary edge) or two (an interior edge). For interior edges the Loop
midpoint stencil needs the vertex across the edge in each incident
triangle.

Two equivalent lookups are provided:

- :func:`find_opposite_vertices` scans every triangle for a single edge.
  O(n_cells) per edge.
- :func:`build_edge_adjacency` indexes every edge of the mesh at once, after
  which :meth:`EdgeAdjacency.lookup` answers batches of edges in
  O(log n_edges) each.

Both treat an incidence count other than 1 or 2 as malformed input and
raise ``ValueError``.
"""

from typing import NamedTuple

import torch

from loopmesh.boundaries._edge_extraction import (
    extract_candidate_edges,
    extract_unique_edges,
)
from loopmesh.utilities._edge_lookup import match_edges

NO_VERTEX = -1


class OppositeVertices(NamedTuple):
    """Result of :func:`find_opposite_vertices` for one edge."""

    is_boundary: bool
    opposite: tuple[int, int]  # second entry is NO_VERTEX on boundary edges


class EdgeAdjacency(NamedTuple):
    """Opposite vertices of every edge of a triangle mesh.

    Attributes
    ----------
    edges : torch.Tensor
        Canonical unique edges, shape (n_edges, 2), ``[:, 0] < [:, 1]``.
    opposite : torch.Tensor
        Shape (n_edges, 2). Opposite vertex in each incident triangle;
        ``opposite[:, 1]`` is ``NO_VERTEX`` for boundary edges.
    """

    edges: torch.Tensor
    opposite: torch.Tensor

    @property
    def is_boundary(self) -> torch.Tensor:
        return self.opposite[:, 1] == NO_VERTEX

    def lookup(self, query_edges: torch.Tensor) -> torch.Tensor:
        """Opposite vertices of ``query_edges`` (any orientation), shape (n, 2).

        Raises
        ------
        KeyError
            If a query edge is not an edge of the indexed mesh.
        """
        indices, found = match_edges(self.edges, query_edges)
        if not bool(found.all()):
            missing = query_edges[~found]
            raise KeyError(
                f"{len(missing)} queried edges are not edges of the mesh, "
                f"e.g. {missing[:5].tolist()}."
            )
        return self.opposite[indices]


def _check_incidence(edges: torch.Tensor, counts: torch.Tensor) -> None:
    bad = (counts < 1) | (counts > 2)
    if bool(bad.any()):
        raise ValueError(
            f"Found {int(bad.sum())} edges incident to a number of triangles "
            f"other than 1 or 2; the mesh is not a 2-manifold.\n"
            f"Offending edges (edge, count): "
            f"{list(zip(edges[bad].tolist()[:10], counts[bad].tolist()[:10]))}"
        )


def find_opposite_vertices(
    edge: tuple[int, int],
    cells: torch.Tensor,
) -> OppositeVertices:
    """Find the triangles incident to ``edge`` and their opposite vertices.

    Parameters
    ----------
    edge : tuple[int, int]
        Edge endpoints ``(v_a, v_b)``, in either order.
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    OppositeVertices
        ``is_boundary`` is True when exactly one triangle contains the edge;
        ``opposite`` then holds that triangle's third vertex and
        ``NO_VERTEX``. Otherwise both opposite vertices, in the order their
        triangles appear in ``cells``.

    Raises
    ------
    ValueError
        If the edge lies on no triangle or on more than two.

    Examples
    --------
    >>> cells = torch.tensor([[0, 1, 2], [2, 1, 3]])
    >>> find_opposite_vertices((1, 2), cells)
    OppositeVertices(is_boundary=False, opposite=(0, 3))
    >>> find_opposite_vertices((0, 1), cells)
    OppositeVertices(is_boundary=True, opposite=(2, -1))
    """
    v_a, v_b = int(edge[0]), int(edge[1])

    has_both = (cells == v_a).any(dim=1) & (cells == v_b).any(dim=1)
    incident_cells = cells[has_both]
    n_incident = len(incident_cells)

    if n_incident not in (1, 2):
        raise ValueError(
            f"Edge {(v_a, v_b)} is incident to {n_incident} triangles; "
            f"a 2-manifold edge must be incident to 1 or 2."
        )

    is_opposite = (incident_cells != v_a) & (incident_cells != v_b)
    opposite = incident_cells[is_opposite].tolist()
    if len(opposite) != n_incident:
        raise ValueError(
            f"Triangles {incident_cells.tolist()} incident to edge {(v_a, v_b)} "
            f"do not each have exactly one vertex off the edge."
        )

    if n_incident == 1:
        return OppositeVertices(is_boundary=True, opposite=(opposite[0], NO_VERTEX))
    return OppositeVertices(is_boundary=False, opposite=(opposite[0], opposite[1]))


def build_edge_adjacency(cells: torch.Tensor) -> EdgeAdjacency:
    """Index the opposite vertices of every edge of a triangle mesh.

    Parameters
    ----------
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    EdgeAdjacency
        One row per distinct edge. For interior edges the opposite vertices
        are ordered by the position of their triangles in ``cells``, matching
        :func:`find_opposite_vertices`.

    Raises
    ------
    ValueError
        If any edge is incident to more than two triangles.
    """
    device = cells.device
    unique_edges, inverse, counts = extract_unique_edges(cells)

    if len(unique_edges) == 0:
        return EdgeAdjacency(
            edges=torch.zeros((0, 2), dtype=torch.int64, device=device),
            opposite=torch.zeros((0, 2), dtype=torch.int64, device=device),
        )

    _check_incidence(unique_edges, counts)

    _, opposite_vertices, _ = extract_candidate_edges(cells)

    ### Group half-edges by unique edge, keeping triangle order within a group
    order = torch.argsort(inverse, stable=True)
    grouped_opposite = opposite_vertices[order]
    offsets = torch.cumsum(counts, dim=0) - counts

    first = grouped_opposite[offsets]
    second_position = (offsets + 1).clamp(max=len(grouped_opposite) - 1)
    second = torch.where(
        counts == 2,
        grouped_opposite[second_position],
        torch.full_like(first, NO_VERTEX),
    )

    return EdgeAdjacency(
        edges=unique_edges,
        opposite=torch.stack([first, second], dim=1),
    )
