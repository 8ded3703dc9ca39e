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

"""Tests for half-edge extraction from triangle connectivity."""

import torch

from loopmesh.boundaries import extract_candidate_edges, extract_unique_edges


class TestExtractCandidateEdges:
    def test_winding_order_and_opposites(self, device):
        cells = torch.tensor([[4, 5, 6], [6, 5, 7]], device=device)

        edges, opposite, parents = extract_candidate_edges(cells)

        assert edges.tolist() == [[4, 5], [5, 6], [6, 4], [6, 5], [5, 7], [7, 6]]
        assert opposite.tolist() == [6, 4, 5, 7, 6, 5]
        assert parents.tolist() == [0, 0, 0, 1, 1, 1]

    def test_empty(self, device):
        cells = torch.zeros((0, 3), dtype=torch.int64, device=device)

        edges, opposite, parents = extract_candidate_edges(cells)

        assert edges.shape == (0, 2)
        assert opposite.shape == (0,)
        assert parents.shape == (0,)


class TestExtractUniqueEdges:
    def test_shared_edge_counted_twice(self, device):
        cells = torch.tensor([[0, 1, 2], [2, 1, 3]], device=device)

        unique_edges, inverse, counts = extract_unique_edges(cells)

        assert unique_edges.tolist() == [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]
        assert counts.tolist() == [1, 1, 2, 1, 1]
        assert torch.equal(
            unique_edges[inverse],
            torch.sort(extract_candidate_edges(cells)[0], dim=1)[0],
        )

    def test_closed_surface_all_edges_shared(self, tetrahedron):
        _, cells = tetrahedron

        unique_edges, _, counts = extract_unique_edges(cells)

        assert len(unique_edges) == 6
        assert (counts == 2).all()
