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

"""Tests for boundary classification and opposite-vertex lookup."""

import pytest
import torch

from loopmesh.boundaries import (
    NO_VERTEX,
    build_edge_adjacency,
    find_opposite_vertices,
)
from loopmesh.primitives.surfaces import icosahedron_surface, triangle_strip


class TestFindOppositeVertices:
    def test_interior_edge(self, device):
        cells = torch.tensor([[0, 1, 2], [2, 1, 3]], device=device)

        result = find_opposite_vertices((1, 2), cells)

        assert not result.is_boundary
        assert result.opposite == (0, 3)

    def test_edge_orientation_irrelevant(self, device):
        cells = torch.tensor([[0, 1, 2], [2, 1, 3]], device=device)

        assert find_opposite_vertices((2, 1), cells) == find_opposite_vertices(
            (1, 2), cells
        )

    def test_boundary_edge(self, device):
        cells = torch.tensor([[0, 1, 2], [2, 1, 3]], device=device)

        result = find_opposite_vertices((1, 3), cells)

        assert result.is_boundary
        assert result.opposite == (2, NO_VERTEX)

    def test_single_triangle_all_boundary(self, triangle):
        _, cells = triangle

        for edge, expected in [((0, 1), 2), ((1, 2), 0), ((2, 0), 1)]:
            result = find_opposite_vertices(edge, cells)
            assert result.is_boundary
            assert result.opposite[0] == expected

    def test_closed_surface_has_no_boundary(self, tetrahedron):
        _, cells = tetrahedron

        for edge in [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]:
            result = find_opposite_vertices(edge, cells)
            assert not result.is_boundary
            assert set(result.opposite) == {0, 1, 2, 3} - set(edge)

    def test_edge_not_in_mesh_raises(self, triangle):
        _, cells = triangle

        with pytest.raises(ValueError, match="incident to 0 triangles"):
            find_opposite_vertices((0, 5), cells)

    def test_non_manifold_edge_raises(self, device):
        cells = torch.tensor([[0, 1, 2], [0, 1, 3], [1, 0, 4]], device=device)

        with pytest.raises(ValueError, match="incident to 3 triangles"):
            find_opposite_vertices((0, 1), cells)


class TestBuildEdgeAdjacency:
    def test_two_triangles(self, device):
        cells = torch.tensor([[0, 1, 2], [2, 1, 3]], device=device)

        adjacency = build_edge_adjacency(cells)

        assert adjacency.edges.tolist() == [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]
        assert adjacency.opposite.tolist() == [
            [2, NO_VERTEX],
            [1, NO_VERTEX],
            [0, 3],
            [2, NO_VERTEX],
            [1, NO_VERTEX],
        ]
        assert adjacency.is_boundary.tolist() == [True, True, False, True, True]

    def test_lookup_any_orientation(self, device):
        cells = torch.tensor([[0, 1, 2], [2, 1, 3]], device=device)
        adjacency = build_edge_adjacency(cells)

        opposite = adjacency.lookup(torch.tensor([[2, 1], [3, 1]], device=device))

        assert opposite.tolist() == [[0, 3], [2, NO_VERTEX]]

    def test_lookup_unknown_edge_raises(self, triangle):
        _, cells = triangle
        adjacency = build_edge_adjacency(cells)

        with pytest.raises(KeyError, match="not edges of the mesh"):
            adjacency.lookup(torch.tensor([[0, 7]], device=cells.device))

    def test_non_manifold_raises(self, device):
        cells = torch.tensor([[0, 1, 2], [0, 1, 3], [1, 0, 4]], device=device)

        with pytest.raises(ValueError, match="not a 2-manifold"):
            build_edge_adjacency(cells)

    def test_empty(self, device):
        cells = torch.zeros((0, 3), dtype=torch.int64, device=device)

        adjacency = build_edge_adjacency(cells)

        assert adjacency.edges.shape == (0, 2)
        assert adjacency.opposite.shape == (0, 2)

    @pytest.mark.parametrize(
        "mesh_loader",
        [icosahedron_surface.load, lambda device: triangle_strip.load(4, device=device)],
        ids=["icosahedron", "strip"],
    )
    def test_matches_linear_scan(self, mesh_loader, device):
        """The index agrees with the per-edge scan on every edge."""
        cells = mesh_loader(device=device).cells

        adjacency = build_edge_adjacency(cells)

        for edge, opposite in zip(adjacency.edges.tolist(), adjacency.opposite.tolist()):
            scanned = find_opposite_vertices(tuple(edge), cells)
            assert scanned.opposite == tuple(opposite)
            assert scanned.is_boundary == (opposite[1] == NO_VERTEX)
