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

"""Connectivity of the four children of a subdivided triangle.

Each parent ``(v1, v2, v3)`` with edge midpoints ``a = mid(v1, v2)``,
``b = mid(v2, v3)`` and ``c = mid(v3, v1)`` is split as::

                v2
                /\\
               /  \\
              a----b
             / \\  / \\
            /   \\/   \\
          v1----c-----v3

into ``(v1, a, c)``, ``(a, b, c)``, ``(c, b, v3)``, ``(a, v2, b)``. Every
child keeps the winding of its parent.
"""

import torch

# Local indices into [v1, v2, v3, a, b, c]
LOOP_CHILD_PATTERN = (
    (0, 3, 5),  # (v1, a, c)
    (3, 4, 5),  # (a, b, c)
    (5, 4, 2),  # (c, b, v3)
    (3, 1, 4),  # (a, v2, b)
)
N_CHILDREN = len(LOOP_CHILD_PATTERN)


def generate_child_cells(
    parent_cells: torch.Tensor,
    midpoint_indices: torch.Tensor,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Split every parent triangle into its four children.

    Parameters
    ----------
    parent_cells : torch.Tensor
        Parent connectivity, shape (n_cells, 3).
    midpoint_indices : torch.Tensor
        Shape (n_cells, 3). Midpoint vertex of the edges ``(v1, v2)``,
        ``(v2, v3)`` and ``(v3, v1)`` of each parent.

    Returns
    -------
    child_cells : torch.Tensor
        Shape (n_cells * 4, 3). Children of parent ``i`` are rows
        ``4i .. 4i + 3``, in the order listed in the module docstring.
    parent_indices : torch.Tensor
        Shape (n_cells * 4,). Parent of each child.

    Examples
    --------
    >>> children, parents = generate_child_cells(
    ...     torch.tensor([[0, 1, 2]]), torch.tensor([[3, 4, 5]])
    ... )
    >>> children.tolist()
    [[0, 3, 5], [3, 4, 5], [5, 4, 2], [3, 1, 4]]
    """
    device = parent_cells.device
    pattern = torch.tensor(LOOP_CHILD_PATTERN, dtype=torch.int64, device=device)

    # (n_cells, 6): the three corners followed by the three edge midpoints
    extended = torch.cat([parent_cells, midpoint_indices.to(parent_cells.dtype)], dim=1)
    child_cells = extended[:, pattern].reshape(-1, 3)

    parent_indices = torch.arange(
        parent_cells.shape[0], dtype=torch.int64, device=device
    ).repeat_interleave(N_CHILDREN)

    return child_cells, parent_indices
