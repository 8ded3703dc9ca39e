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

"""Pytest configuration and shared fixtures for loopmesh tests.

Fixtures and helpers defined here are available to every test module without
explicit imports.
"""

import random

import pytest
import torch

### Pytest Hooks ###


def pytest_collection_modifyitems(config, items):
    """Skip tests marked with 'cuda' if CUDA is not available."""
    if torch.cuda.is_available():
        return

    skip_cuda = pytest.mark.skip(reason="CUDA not available")
    for item in items:
        if "cuda" in item.keywords:
            item.add_marker(skip_cuda)


### Fixtures ###


@pytest.fixture(params=["cpu"] + (["cuda:0"] if torch.cuda.is_available() else []))
def device(request):
    """Device fixture that automatically skips CUDA tests when not available."""
    return request.param


@pytest.fixture(autouse=True, scope="function")
def seed_random_state():
    """Reset random number generators to a fixed seed before each test."""
    SEED = 95051

    random.seed(SEED)
    torch.manual_seed(SEED)

    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(SEED)

    yield


### Mesh Builders ###


def single_triangle(device: torch.device | str = "cpu") -> tuple[torch.Tensor, torch.Tensor]:
    """A right triangle in the z=0 plane, wound counter-clockwise from +z."""
    points = torch.tensor(
        [[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 2.0, 0.0]],
        dtype=torch.float64,
        device=device,
    )
    cells = torch.tensor([[0, 1, 2]], dtype=torch.int64, device=device)
    return points, cells


def unit_tetrahedron(device: torch.device | str = "cpu") -> tuple[torch.Tensor, torch.Tensor]:
    """Corner tetrahedron with outward-wound faces."""
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
    cells = torch.tensor(
        [
            [0, 2, 1],  # z = 0 face, normal -z
            [0, 1, 3],  # y = 0 face, normal -y
            [0, 3, 2],  # x = 0 face, normal -x
            [1, 2, 3],  # slanted face, normal +(1, 1, 1)
        ],
        dtype=torch.int64,
        device=device,
    )
    return points, cells


@pytest.fixture
def triangle(device):
    return single_triangle(device)


@pytest.fixture
def tetrahedron(device):
    return unit_tetrahedron(device)
