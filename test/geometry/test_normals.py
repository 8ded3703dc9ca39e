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

"""Tests for face normals and angle-weighted vertex normals."""

import math

import pytest
import torch

from loopmesh.geometry import (
    compute_angle_weighted_point_normals,
    compute_face_normals,
)


class TestFaceNormals:
    def test_counter_clockwise_points_up(self, triangle):
        points, cells = triangle

        normals = compute_face_normals(points, cells)

        torch.testing.assert_close(
            normals, torch.tensor([[0.0, 0.0, 1.0]], dtype=points.dtype, device=points.device)
        )

    def test_reversed_winding_flips_normal(self, triangle):
        points, cells = triangle

        normals = compute_face_normals(points, cells)
        flipped = compute_face_normals(points, cells[:, [0, 2, 1]])

        torch.testing.assert_close(flipped, -normals)

    def test_tetrahedron_normals_point_outward(self, tetrahedron):
        points, cells = tetrahedron

        normals = compute_face_normals(points, cells)
        outward = points[cells].mean(dim=1) - points.mean(dim=0)

        assert ((normals * outward).sum(dim=-1) > 0).all()

    def test_unit_length(self, device):
        points = torch.randn(30, 3, dtype=torch.float64, device=device)
        cells = torch.arange(30, device=device).reshape(10, 3)

        normals = compute_face_normals(points, cells)

        torch.testing.assert_close(
            normals.norm(dim=-1),
            torch.ones(10, dtype=torch.float64, device=device),
        )

    def test_degenerate_triangle_gives_zero(self, device):
        points = torch.tensor(
            [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]], device=device
        )
        cells = torch.tensor([[0, 1, 2]], device=device)

        normals = compute_face_normals(points, cells)

        assert torch.equal(normals, torch.zeros_like(normals))


class TestAngleWeightedPointNormals:
    def test_flat_mesh_normals_are_parallel(self, triangle):
        points, cells = triangle

        normals = compute_angle_weighted_point_normals(points, cells)

        expected = torch.tensor([0.0, 0.0, 1.0], dtype=points.dtype, device=points.device)
        torch.testing.assert_close(normals, expected.expand(3, 3))

    def test_cube_corner_weighting(self, device):
        """Three right-angled faces meeting at a corner give the diagonal."""
        points = torch.tensor(
            [
                [0.0, 0.0, 0.0],
                [1.0, 0.0, 0.0],
                [0.0, 1.0, 0.0],
                [0.0, 0.0, 1.0],
            ],
            dtype=torch.float64,
            device=device,
        )
        cells = torch.tensor([[0, 1, 2], [0, 2, 3], [0, 3, 1]], device=device)

        normals = compute_angle_weighted_point_normals(points, cells)

        expected = torch.ones(3, dtype=torch.float64, device=device) / math.sqrt(3)
        torch.testing.assert_close(normals[0], expected)

    def test_angle_weights_differ_from_uniform(self, device):
        """A vertex seeing one wide and one narrow face leans to the wide one."""
        points = torch.tensor(
            [
                [0.0, 0.0, 0.0],
                [1.0, 0.0, 0.0],
                [0.0, 1.0, 0.0],  # wide face in z = 0, right angle at 0
                [1.0, 0.0, 0.1],  # narrow face in the y = 0 plane
            ],
            dtype=torch.float64,
            device=device,
        )
        cells = torch.tensor([[0, 1, 2], [0, 3, 1]], device=device)

        normals = compute_angle_weighted_point_normals(points, cells)
        face_normals = compute_face_normals(points, cells)

        toward_wide = (normals[0] * face_normals[0]).sum()
        toward_narrow = (normals[0] * face_normals[1]).sum()
        assert toward_wide > toward_narrow

    def test_isolated_vertex_warns_and_is_zero(self, triangle):
        points, cells = triangle
        points = torch.cat([points, points.new_tensor([[5.0, 5.0, 5.0]])])

        with pytest.warns(UserWarning, match="1 of 4 vertices"):
            normals = compute_angle_weighted_point_normals(points, cells)

        assert torch.equal(normals[3], torch.zeros_like(normals[3]))
        torch.testing.assert_close(
            normals[:3].norm(dim=-1),
            torch.ones(3, dtype=points.dtype, device=points.device),
        )

    def test_degenerate_geometry_has_no_nan(self, device):
        points = torch.tensor(
            [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]], device=device
        )
        cells = torch.tensor([[0, 1, 2]], device=device)

        with pytest.warns(UserWarning):
            normals = compute_angle_weighted_point_normals(points, cells)

        assert not torch.isnan(normals).any()
        assert torch.equal(normals, torch.zeros_like(normals))
