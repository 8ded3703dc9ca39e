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

"""Carrying point_data and cell_data through a subdivision pass.

Original vertices keep their point data; each new midpoint vertex receives
the average of its edge endpoints. Each child triangle inherits the cell data
of its parent.
"""

import torch
from tensordict import TensorDict

from loopmesh.utilities._cache import without_cache


def interpolate_point_data_to_edges(
    point_data: TensorDict,
    edges: torch.Tensor,
    n_original_points: int,
) -> TensorDict:
    """Extend point_data onto the midpoint vertices of ``edges``.

    Parameters
    ----------
    point_data : TensorDict
        Original point data, batch_size=(n_original_points,). Cached entries
        are dropped.
    edges : torch.Tensor
        Shape (n_edges, 2). Row ``k`` is the edge whose midpoint is vertex
        ``n_original_points + k``.
    n_original_points : int
        Number of vertices before subdivision.

    Returns
    -------
    TensorDict
        batch_size=(n_original_points + n_edges,). Floating-point and complex
        fields are averaged from the endpoints; other dtypes (IDs, flags) have
        no meaningful average and are zero on the midpoints.

    Examples
    --------
    >>> point_data = TensorDict({"temperature": torch.tensor([100., 200., 300.])}, batch_size=[3])
    >>> new_data = interpolate_point_data_to_edges(point_data, torch.tensor([[0, 1], [2, 1]]), 3)
    >>> new_data["temperature"].tolist()
    [100.0, 200.0, 300.0, 150.0, 250.0]
    """
    point_data = without_cache(point_data)
    n_total_points = n_original_points + len(edges)

    if len(point_data.keys()) == 0:
        return TensorDict(
            {},
            batch_size=torch.Size([n_total_points]),
            device=edges.device,
        )

    def extend(tensor: torch.Tensor) -> torch.Tensor:
        if tensor.dtype.is_floating_point or tensor.dtype.is_complex:
            midpoint_values = tensor[edges].mean(dim=1)
        else:
            midpoint_values = torch.zeros(
                (len(edges), *tensor.shape[1:]),
                dtype=tensor.dtype,
                device=tensor.device,
            )
        return torch.cat([tensor, midpoint_values], dim=0)

    return point_data.apply(extend, batch_size=torch.Size([n_total_points]))


def propagate_cell_data_to_children(
    cell_data: TensorDict,
    parent_indices: torch.Tensor,
) -> TensorDict:
    """Give every child triangle a copy of its parent's cell data.

    Parameters
    ----------
    cell_data : TensorDict
        Parent cell data, batch_size=(n_parent_cells,). Cached entries are
        dropped.
    parent_indices : torch.Tensor
        Shape (n_children,). Parent of each child.

    Returns
    -------
    TensorDict
        batch_size=(n_children,).
    """
    cell_data = without_cache(cell_data)
    n_children = len(parent_indices)

    if len(cell_data.keys()) == 0:
        return TensorDict(
            {},
            batch_size=torch.Size([n_children]),
            device=parent_indices.device,
        )

    return cell_data.apply(
        lambda tensor: tensor[parent_indices],
        batch_size=torch.Size([n_children]),
    )
