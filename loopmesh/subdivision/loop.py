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

"""Loop subdivision for triangle meshes.

Loop subdivision is an approximating scheme: every edge receives a new
vertex, every triangle is split into four, and the original vertices are
moved towards the average of their neighbours. One pass consists of

1. Midpoint resolution. Faces are visited in order, and their edges in the
   order ``(v1, v2), (v2, v3), (v3, v1)``. The first visit of an edge appends
   a vertex at

   - ``3/8 (V_a + V_b) + 1/8 (opp_A + opp_B)`` for an interior edge, where
     ``opp_A`` and ``opp_B`` are the vertices across the edge, or
   - ``1/2 (V_a + V_b)`` for a boundary edge.

   Later visits reuse that vertex through an :class:`EdgeRegistry`.
2. Face splitting into ``(v1, a, c)``, ``(a, b, c)``, ``(c, b, v3)``,
   ``(a, v2, b)``.
3. Repositioning of each original vertex ``i`` referenced by ``n_i``
   triangles::

       V_i' = 5/8 V_i + 3 / (16 n_i) * sum over incident triangles of
              (sum of the other two corners)

   Each ring neighbour of an interior vertex is reached through two
   triangles, which is where the ``16`` comes from. Boundary vertices use the
   same rule.
4. Vertex normals of the refined mesh, weighted by interior angle.

Midpoints are computed from the original vertex positions.
"""

import logging
from typing import TYPE_CHECKING, Literal, NamedTuple

import torch

from loopmesh.boundaries._opposite import (
    NO_VERTEX,
    build_edge_adjacency,
    find_opposite_vertices,
)
from loopmesh.geometry._normals import compute_angle_weighted_point_normals
from loopmesh.subdivision._data import (
    interpolate_point_data_to_edges,
    propagate_cell_data_to_children,
)
from loopmesh.subdivision._topology import generate_child_cells
from loopmesh.utilities._cache import set_cached
from loopmesh.utilities._edge_registry import EdgeRegistry
from loopmesh.validation.validate import validate_loop_input

if TYPE_CHECKING:
    from loopmesh.mesh import Mesh

logger = logging.getLogger(__name__)

OppositeVertexLookup = Literal["indexed", "scan"]
_VALID_LOOKUPS = ("indexed", "scan")

### Loop weights
INTERIOR_EDGE_WEIGHT = 3.0 / 8.0
OPPOSITE_VERTEX_WEIGHT = 1.0 / 8.0
BOUNDARY_EDGE_WEIGHT = 1.0 / 2.0
ORIGINAL_VERTEX_WEIGHT = 5.0 / 8.0
NEIGHBOR_WEIGHT_NUMERATOR = 3.0
NEIGHBOR_WEIGHT_DENOMINATOR = 16.0


class LoopSubdivisionResult(NamedTuple):
    """Output of one Loop subdivision pass.

    Attributes
    ----------
    points : torch.Tensor
        Shape (n_points + n_edges, 3). Repositioned original vertices
        followed by the edge midpoint vertices, in creation order.
    cells : torch.Tensor
        Shape (4 * n_cells, 3). Children of parent ``i`` are rows
        ``4i .. 4i + 3``.
    normals : torch.Tensor
        Shape (n_points + n_edges, 3). Angle-weighted unit vertex normals.
    """

    points: torch.Tensor
    cells: torch.Tensor
    normals: torch.Tensor


def resolve_midpoint_vertices(
    cells: torch.Tensor,
    n_points: int,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Assign a midpoint vertex index to every edge of every triangle.

    Indices are handed out in order of first visit, starting at ``n_points``;
    an edge shared by two triangles gets a single index.

    Parameters
    ----------
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).
    n_points : int
        Number of original vertices.

    Returns
    -------
    midpoint_indices : torch.Tensor
        Shape (n_cells, 3). Midpoint vertex of ``(v1, v2)``, ``(v2, v3)``,
        ``(v3, v1)`` for each triangle.
    new_edges : torch.Tensor
        Shape (n_edges, 2). Row ``k`` is the edge (as first visited) of
        vertex ``n_points + k``.

    Examples
    --------
    >>> midpoints, edges = resolve_midpoint_vertices(torch.tensor([[0, 1, 2], [2, 1, 3]]), 4)
    >>> midpoints.tolist()
    [[4, 5, 6], [5, 7, 8]]
    >>> edges.tolist()
    [[0, 1], [1, 2], [2, 0], [1, 3], [3, 2]]
    """
    registry = EdgeRegistry()
    new_edges: list[tuple[int, int]] = []
    midpoint_indices: list[list[int]] = []

    for v1, v2, v3 in cells.tolist():
        row = []
        for edge in ((v1, v2), (v2, v3), (v3, v1)):
            if registry.contains(edge):
                row.append(registry.get_index(edge))
                continue
            new_index = n_points + len(new_edges)
            registry.add(edge, new_index)
            new_edges.append(edge)
            row.append(new_index)
        midpoint_indices.append(row)

    device = cells.device
    return (
        torch.tensor(midpoint_indices, dtype=torch.int64, device=device).reshape(-1, 3),
        torch.tensor(new_edges, dtype=torch.int64, device=device).reshape(-1, 2),
    )


def lookup_opposite_vertices(
    edges: torch.Tensor,
    cells: torch.Tensor,
    method: OppositeVertexLookup = "indexed",
) -> torch.Tensor:
    """Opposite vertices of each edge, shape (n_edges, 2).

    ``"indexed"`` builds an :class:`EdgeAdjacency` once for the whole mesh;
    ``"scan"`` runs :func:`find_opposite_vertices` per edge. The second
    column is ``NO_VERTEX`` for boundary edges.
    """
    if method == "indexed":
        return build_edge_adjacency(cells).lookup(edges)

    opposite = [find_opposite_vertices(edge, cells).opposite for edge in edges.tolist()]
    return torch.tensor(opposite, dtype=torch.int64, device=cells.device).reshape(-1, 2)


def compute_edge_midpoints(
    points: torch.Tensor,
    edges: torch.Tensor,
    opposite: torch.Tensor,
) -> torch.Tensor:
    """Position the new vertex of each edge with the Loop edge stencil.

    Parameters
    ----------
    points : torch.Tensor
        Original vertex positions, shape (n_points, 3).
    edges : torch.Tensor
        Shape (n_edges, 2).
    opposite : torch.Tensor
        Shape (n_edges, 2), ``NO_VERTEX`` in the second column for boundary
        edges.

    Returns
    -------
    torch.Tensor
        Shape (n_edges, 3).
    """
    endpoint_sum = points[edges[:, 0]] + points[edges[:, 1]]
    is_boundary = (opposite[:, 1] == NO_VERTEX).unsqueeze(-1)

    # Boundary rows index vertex 0 here; the value is discarded below
    opposite_sum = points[opposite[:, 0]] + points[opposite[:, 1].clamp(min=0)]

    interior = INTERIOR_EDGE_WEIGHT * endpoint_sum + OPPOSITE_VERTEX_WEIGHT * opposite_sum
    boundary = BOUNDARY_EDGE_WEIGHT * endpoint_sum
    return torch.where(is_boundary, boundary, interior)


def reposition_original_vertices(
    points: torch.Tensor,
    cells: torch.Tensor,
) -> torch.Tensor:
    """Move each original vertex with the per-face Loop vertex rule.

    Parameters
    ----------
    points : torch.Tensor
        Original vertex positions, shape (n_points, 3).
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3).

    Returns
    -------
    torch.Tensor
        Shape (n_points, 3).

    Raises
    ------
    ValueError
        If a vertex is referenced by no triangle.
    """
    n_points = points.shape[0]
    flat_cells = cells.reshape(-1)

    ### Per corner: sum of the other two corners of its triangle
    corners = points[cells]  # (n_cells, 3, 3)
    other_corners = torch.roll(corners, shifts=-1, dims=1) + torch.roll(
        corners, shifts=1, dims=1
    )

    accumulated = torch.zeros_like(points)
    accumulated.index_add_(0, flat_cells, other_corners.reshape(-1, points.shape[-1]))
    occurrences = torch.bincount(flat_cells, minlength=n_points)

    if bool((occurrences == 0).any()):
        unused = torch.where(occurrences == 0)[0]
        raise ValueError(
            f"Cannot reposition {len(unused)} vertices that belong to no "
            f"triangle: {unused.tolist()[:10]}"
        )

    neighbor_weight = NEIGHBOR_WEIGHT_NUMERATOR / (
        NEIGHBOR_WEIGHT_DENOMINATOR * occurrences.to(points.dtype)
    )
    return ORIGINAL_VERTEX_WEIGHT * points + neighbor_weight.unsqueeze(-1) * accumulated


def _loop_pass(
    points: torch.Tensor,
    cells: torch.Tensor,
    validate: bool,
    opposite_vertex_lookup: OppositeVertexLookup,
) -> tuple[LoopSubdivisionResult, torch.Tensor, torch.Tensor]:
    """Run one pass; also return the new edges and each child's parent."""
    if opposite_vertex_lookup not in _VALID_LOOKUPS:
        raise ValueError(
            f"Invalid {opposite_vertex_lookup=}. Must be one of {_VALID_LOOKUPS}."
        )

    if validate:
        validate_loop_input(points, cells)

    cells = cells.to(torch.int64)
    n_points = points.shape[0]

    ### Handle empty mesh
    if cells.shape[0] == 0:
        empty = torch.zeros((0, 2), dtype=torch.int64, device=cells.device)
        result = LoopSubdivisionResult(
            points=points.clone(),
            cells=cells.clone(),
            normals=torch.zeros_like(points),
        )
        return result, empty, empty[:, 0]

    ### New vertices on edges
    midpoint_indices, new_edges = resolve_midpoint_vertices(cells, n_points)
    opposite = lookup_opposite_vertices(new_edges, cells, method=opposite_vertex_lookup)
    edge_midpoints = compute_edge_midpoints(points, new_edges, opposite)

    ### Split faces
    child_cells, parent_indices = generate_child_cells(cells, midpoint_indices)

    ### Move original vertices and assemble
    repositioned = reposition_original_vertices(points, cells)
    new_points = torch.cat([repositioned, edge_midpoints], dim=0)

    ### Vertex normals of the refined mesh
    normals = compute_angle_weighted_point_normals(new_points, child_cells)

    logger.debug(
        "Loop subdivision: %d points / %d cells -> %d points / %d cells "
        "(%d edges, %d on the boundary, lookup=%s)",
        n_points,
        cells.shape[0],
        new_points.shape[0],
        child_cells.shape[0],
        len(new_edges),
        int((opposite[:, 1] == NO_VERTEX).sum()),
        opposite_vertex_lookup,
    )

    result = LoopSubdivisionResult(points=new_points, cells=child_cells, normals=normals)
    return result, new_edges, parent_indices


def loop_subdivide(
    points: torch.Tensor,
    cells: torch.Tensor,
    *,
    validate: bool = True,
    opposite_vertex_lookup: OppositeVertexLookup = "indexed",
) -> LoopSubdivisionResult:
    """Perform one Loop subdivision pass on a triangle mesh.

    Parameters
    ----------
    points : torch.Tensor
        Vertex positions, shape (n_points, 3), floating point.
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3), integer. Must describe a
        2-manifold, possibly with boundary, in which every vertex belongs to
        some triangle.
    validate : bool, optional
        Check the input with :func:`validate_loop_input` first.
    opposite_vertex_lookup : {"indexed", "scan"}, optional
        How interior edges find their opposite vertices. ``"indexed"`` indexes
        all edges once; ``"scan"`` scans every triangle for every edge. Both
        give the same result.

    Returns
    -------
    LoopSubdivisionResult
        ``points`` has ``n_points + n_edges`` rows, ``cells`` has
        ``4 * n_cells`` rows, and ``normals`` matches ``points``.

    Raises
    ------
    ValueError
        On malformed input or an unknown ``opposite_vertex_lookup``.
    TypeError
        If ``points`` is not floating point or ``cells`` is.

    Examples
    --------
    >>> points = torch.tensor([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    >>> result = loop_subdivide(points, torch.tensor([[0, 1, 2]]))
    >>> result.points.shape, result.cells.shape
    (torch.Size([6, 3]), torch.Size([4, 3]))
    >>> result.points[3:].tolist()  # boundary midpoints
    [[0.5, 0.0, 0.0], [0.5, 0.5, 0.0], [0.0, 0.5, 0.0]]
    """
    result, _, _ = _loop_pass(points, cells, validate, opposite_vertex_lookup)
    return result


def subdivide_loop(
    mesh: "Mesh",
    *,
    validate: bool = True,
    opposite_vertex_lookup: OppositeVertexLookup = "indexed",
) -> "Mesh":
    """Perform one Loop subdivision pass on a :class:`Mesh`.

    Geometry and connectivity follow :func:`loop_subdivide`. Attached data is
    carried over as well:

    - point_data is kept on the original vertices and averaged from the edge
      endpoints onto the new ones
    - cell_data is inherited by the four children of each triangle
    - global_data is preserved unchanged

    The computed vertex normals are stored as the result's cached
    ``point_normals``.

    Parameters
    ----------
    mesh : Mesh
        Triangle surface in 3D.
    validate : bool, optional
        Check the input before subdividing.
    opposite_vertex_lookup : {"indexed", "scan"}, optional
        See :func:`loop_subdivide`.

    Returns
    -------
    Mesh
        Subdivided mesh with ``n_points + n_edges`` points and
        ``4 * n_cells`` cells.

    Examples
    --------
    >>> from loopmesh.primitives.surfaces import tetrahedron_surface
    >>> mesh = tetrahedron_surface.load()
    >>> refined = subdivide_loop(mesh)
    >>> refined.n_points, refined.n_cells
    (10, 16)
    """
    from loopmesh.mesh import Mesh

    result, new_edges, parent_indices = _loop_pass(
        mesh.points, mesh.cells, validate, opposite_vertex_lookup
    )

    subdivided = Mesh(
        points=result.points,
        cells=result.cells,
        point_data=interpolate_point_data_to_edges(
            point_data=mesh.point_data,
            edges=new_edges,
            n_original_points=mesh.n_points,
        ),
        cell_data=propagate_cell_data_to_children(
            cell_data=mesh.cell_data,
            parent_indices=parent_indices,
        ),
        global_data=mesh.global_data,
    )
    set_cached(subdivided.point_data, "normals", result.normals)
    return subdivided
