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

"""Precondition checks for Loop subdivision input.

Loop subdivision assumes a 2-manifold triangle mesh in 3D (possibly with
boundary) in which every vertex belongs to at least one triangle. Input that
breaks any of these assumptions is rejected here, before any output is
produced. Nothing is repaired.
"""

import logging

import torch

from loopmesh.boundaries._edge_extraction import extract_unique_edges

logger = logging.getLogger(__name__)


def _fail(error_type: type[Exception], error_msg: str) -> None:
    logger.error(error_msg)
    raise error_type(error_msg)


def validate_loop_input(points: torch.Tensor, cells: torch.Tensor) -> None:
    """Check that ``(points, cells)`` is a valid input for Loop subdivision.

    Checks run cheapest first; topology checks are only reached once every
    index is known to be in range.

    Parameters
    ----------
    points : torch.Tensor
        Vertex positions, expected shape (n_points, 3), floating point.
    cells : torch.Tensor
        Triangle connectivity, expected shape (n_cells, 3), integer.

    Raises
    ------
    TypeError
        If ``points`` is not floating point or ``cells`` is.
    ValueError
        If shapes or devices are wrong, an index is out of range, a triangle
        repeats a vertex, an edge belongs to more than two triangles, or a
        vertex belongs to no triangle.

    Examples
    --------
    >>> points = torch.tensor([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    >>> validate_loop_input(points, torch.tensor([[0, 1, 2]]))
    >>> validate_loop_input(points, torch.tensor([[0, 1, 3]]))  # doctest: +ELLIPSIS
    Traceback (most recent call last):
        ...
    ValueError: Found 1 triangles with out-of-bounds indices...
    """
    ### Shapes and dtypes
    if points.ndim != 2 or points.shape[-1] != 3:
        _fail(
            ValueError,
            f"`points` must have shape (n_points, 3), but got {points.shape=}.",
        )
    if cells.ndim != 2 or cells.shape[-1] != 3:
        _fail(
            ValueError,
            f"`cells` must have shape (n_cells, 3), but got {cells.shape=}.",
        )
    if not torch.is_floating_point(points):
        _fail(
            TypeError,
            f"`points` must have a floating-point dtype, but got {points.dtype=}.",
        )
    if torch.is_floating_point(cells):
        _fail(
            TypeError,
            f"`cells` must have an int-like dtype, but got {cells.dtype=}.",
        )
    if points.device != cells.device:
        _fail(
            ValueError,
            f"`points` and `cells` must be on the same device, "
            f"but got {points.device=} and {cells.device=}.",
        )

    n_points = points.shape[0]
    if cells.shape[0] == 0:
        if n_points > 0:
            _fail(
                ValueError,
                f"Mesh has {n_points} points but no triangles; "
                f"every vertex must belong to at least one triangle.",
            )
        return

    ### Index range
    out_of_bounds = ((cells < 0) | (cells >= n_points)).any(dim=1)
    if bool(out_of_bounds.any()):
        bad_cells = torch.where(out_of_bounds)[0]
        _fail(
            ValueError,
            f"Found {len(bad_cells)} triangles with out-of-bounds indices. "
            f"Indices must be in range [0, {n_points}).\n"
            f"Problem triangles: {bad_cells.tolist()[:10]}",
        )

    ### Repeated vertex within a triangle
    repeats = (
        (cells[:, 0] == cells[:, 1])
        | (cells[:, 1] == cells[:, 2])
        | (cells[:, 2] == cells[:, 0])
    )
    if bool(repeats.any()):
        bad_cells = torch.where(repeats)[0]
        _fail(
            ValueError,
            f"Found {len(bad_cells)} triangles that repeat a vertex index.\n"
            f"Problem triangles: {bad_cells.tolist()[:10]}",
        )

    ### Edge manifoldness
    unique_edges, _, counts = extract_unique_edges(cells)
    non_manifold = counts > 2
    if bool(non_manifold.any()):
        _fail(
            ValueError,
            f"Found {int(non_manifold.sum())} edges shared by more than two "
            f"triangles; the mesh is not a 2-manifold.\n"
            f"Problem edges: {unique_edges[non_manifold].tolist()[:10]}",
        )

    ### Every vertex is used
    occurrences = torch.bincount(cells.reshape(-1), minlength=n_points)
    unreferenced = occurrences == 0
    if bool(unreferenced.any()):
        bad_points = torch.where(unreferenced)[0]
        _fail(
            ValueError,
            f"Found {len(bad_points)} vertices not referenced by any triangle.\n"
            f"Problem vertices: {bad_points.tolist()[:10]}",
        )
