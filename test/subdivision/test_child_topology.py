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

"""Tests for the 1-to-4 triangle split."""

import torch

from loopmesh.subdivision._topology import (
    LOOP_CHILD_PATTERN,
    N_CHILDREN,
    generate_child_cells,
)


def test_pattern_covers_each_corner_once():
    corners = [index for child in LOOP_CHILD_PATTERN for index in child if index < 3]
    assert sorted(corners) == [0, 1, 2]
    assert N_CHILDREN == 4


def test_single_parent(device):
    parents = torch.tensor([[10, 11, 12]], device=device)
    midpoints = torch.tensor([[20, 21, 22]], device=device)

    children, parent_indices = generate_child_cells(parents, midpoints)

    assert children.tolist() == [
        [10, 20, 22],
        [20, 21, 22],
        [22, 21, 12],
        [20, 11, 21],
    ]
    assert parent_indices.tolist() == [0, 0, 0, 0]


def test_children_grouped_by_parent(device):
    parents = torch.tensor([[0, 1, 2], [2, 1, 3], [3, 1, 4]], device=device)
    midpoints = torch.tensor([[5, 6, 7], [6, 8, 9], [8, 10, 11]], device=device)

    children, parent_indices = generate_child_cells(parents, midpoints)

    assert children.shape == (12, 3)
    assert parent_indices.tolist() == [0] * 4 + [1] * 4 + [2] * 4
    for i in range(3):
        block = set(children[4 * i : 4 * i + 4].reshape(-1).tolist())
        assert block == set(parents[i].tolist()) | set(midpoints[i].tolist())


def test_children_wound_like_parent(device):
    points = torch.tensor(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.5, 0.0, 0.0],
            [0.5, 0.5, 0.0],
            [0.0, 0.5, 0.0],
        ],
        device=device,
    )
    parents = torch.tensor([[0, 1, 2]], device=device)
    midpoints = torch.tensor([[3, 4, 5]], device=device)

    children, _ = generate_child_cells(parents, midpoints)

    a, b, c = points[children].unbind(dim=1)
    signed_area = torch.linalg.cross(b - a, c - a)[:, 2]
    assert (signed_area > 0).all()
    torch.testing.assert_close(signed_area.sum(), torch.tensor(1.0, device=device))


def test_empty(device):
    parents = torch.zeros((0, 3), dtype=torch.int64, device=device)

    children, parent_indices = generate_child_cells(parents, parents.clone())

    assert children.shape == (0, 3)
    assert parent_indices.shape == (0,)
