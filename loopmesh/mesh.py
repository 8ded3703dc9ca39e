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

from typing import TYPE_CHECKING, Any, Self

import torch
from tensordict import TensorDict, tensorclass

from loopmesh.geometry._normals import (
    compute_angle_weighted_point_normals,
    compute_face_normals,
)
from loopmesh.utilities._cache import get_cached, set_cached

if TYPE_CHECKING:
    from loopmesh.subdivision.loop import OppositeVertexLookup


def _as_tensordict(
    data: TensorDict | dict[str, torch.Tensor] | None,
    batch_size: torch.Size,
    device: torch.device,
) -> TensorDict:
    if isinstance(data, TensorDict):
        data.batch_size = batch_size
        return data
    return TensorDict(
        {} if data is None else dict(data),
        batch_size=batch_size,
        device=device,
    )


@tensorclass(tensor_only=True)
class Mesh:
    r"""A triangle surface in 3D with attached field data.

    A mesh is defined by two tensors:

    - ``points``: Vertex coordinates with shape :math:`(N_p, 3)`. The row
      index of a vertex is its identity.
    - ``cells``: Triangle connectivity with shape :math:`(N_c, 3)`. The order
      of the three indices fixes the triangle's winding, and with it the
      direction of its normal.

    Tensor data of any shape can be attached per point (``point_data``), per
    cell (``cell_data``), or to the whole mesh (``global_data``). All of it
    moves together with the geometry under ``.to(device)``.

    Parameters
    ----------
    points : torch.Tensor
        Vertex coordinates, shape (n_points, 3). Must be floating-point.
    cells : torch.Tensor
        Triangle connectivity, shape (n_cells, 3). Must be integer dtype.
    point_data : TensorDict or dict[str, torch.Tensor], optional
        Per-vertex data.
    cell_data : TensorDict or dict[str, torch.Tensor], optional
        Per-triangle data.
    global_data : TensorDict or dict[str, torch.Tensor], optional
        Mesh-level data.

    Raises
    ------
    ValueError
        If ``points`` or ``cells`` is not 2D, or they live on different
        devices.
    TypeError
        If ``cells`` has a floating-point dtype.

    Examples
    --------
    >>> import torch
    >>> from loopmesh import Mesh
    >>> points = torch.tensor([
    ...     [0.0, 0.0, 0.0],
    ...     [1.0, 0.0, 0.0],
    ...     [1.0, 1.0, 0.0],
    ...     [0.0, 1.0, 0.0],
    ... ])
    >>> cells = torch.tensor([[0, 1, 2], [0, 2, 3]])
    >>> mesh = Mesh(points=points, cells=cells)
    >>> mesh.n_points, mesh.n_cells
    (4, 2)
    >>> mesh.subdivide().n_cells
    8

    Notes
    -----
    Face and vertex normals are cached under the ``"_cache"`` key of
    ``cell_data`` and ``point_data`` on first access. Subdivision never
    carries a parent's cache over to the child mesh.
    """

    points: torch.Tensor  # shape: (n_points, 3)
    cells: torch.Tensor  # shape: (n_cells, 3)
    point_data: TensorDict
    cell_data: TensorDict
    global_data: TensorDict

    def __init__(
        self,
        points: torch.Tensor,
        cells: torch.Tensor,
        point_data: TensorDict | dict[str, torch.Tensor] | None = None,
        cell_data: TensorDict | dict[str, torch.Tensor] | None = None,
        global_data: TensorDict | dict[str, torch.Tensor] | None = None,
    ) -> None:
        self.points = points
        self.cells = cells
        self.point_data = _as_tensordict(
            point_data, torch.Size([self.n_points]), self.points.device
        )
        self.cell_data = _as_tensordict(
            cell_data, torch.Size([self.n_cells]), self.cells.device
        )
        self.global_data = _as_tensordict(
            global_data, torch.Size([]), self.points.device
        )

        ### Validate shapes and dtypes
        if self.points.ndim != 2:
            raise ValueError(
                f"`points` must have shape (n_points, 3), but got {self.points.shape=}."
            )
        if self.cells.ndim != 2:
            raise ValueError(
                f"`cells` must have shape (n_cells, 3), but got {self.cells.shape=}."
            )
        if torch.is_floating_point(self.cells):
            raise TypeError(
                f"`cells` must have an int-like dtype, but got {self.cells.dtype=}."
            )
        if self.points.device != self.cells.device:
            raise ValueError(
                f"`points` and `cells` must be on the same device, "
                f"but got {self.points.device=} and {self.cells.device=}."
            )

    if TYPE_CHECKING:

        def to(self, *args: Any, **kwargs: Any) -> Self:
            """Move the mesh and all attached data to a device and/or dtype."""
            ...

    @property
    def n_points(self) -> int:
        return self.points.shape[0]

    @property
    def n_cells(self) -> int:
        return self.cells.shape[0]

    @property
    def cell_normals(self) -> torch.Tensor:
        """Unit normal of each triangle, following its winding.

        Cached in ``cell_data["_cache", "normals"]``.

        Returns
        -------
        torch.Tensor
            Shape (n_cells, 3). Zero for degenerate triangles.
        """
        cached = get_cached(self.cell_data, "normals")
        if cached is None:
            cached = compute_face_normals(self.points, self.cells)
            set_cached(self.cell_data, "normals", cached)
        return cached

    @property
    def point_normals(self) -> torch.Tensor:
        """Angle-weighted unit normal at each vertex.

        Cached in ``point_data["_cache", "normals"]``. A mesh produced by
        :meth:`subdivide` already carries the normals computed during the
        pass.

        Returns
        -------
        torch.Tensor
            Shape (n_points, 3). Zero vectors at vertices whose weighted sum
            of face normals vanishes (e.g. isolated vertices).
        """
        cached = get_cached(self.point_data, "normals")
        if cached is None:
            cached = compute_angle_weighted_point_normals(self.points, self.cells)
            set_cached(self.point_data, "normals", cached)
        return cached

    def validate(self) -> None:
        """Raise if this mesh is not a valid Loop subdivision input.

        See :func:`loopmesh.validation.validate_loop_input`.
        """
        from loopmesh.validation import validate_loop_input

        validate_loop_input(self.points, self.cells)

    def subdivide(
        self,
        validate: bool = True,
        opposite_vertex_lookup: "OppositeVertexLookup" = "indexed",
    ) -> "Mesh":
        """Apply one pass of Loop subdivision.

        Parameters
        ----------
        validate : bool, optional
            Check the mesh before subdividing.
        opposite_vertex_lookup : {"indexed", "scan"}, optional
            See :func:`loopmesh.subdivision.loop_subdivide`.

        Returns
        -------
        Mesh
            Mesh with one vertex added per edge and each triangle split in
            four. Point data is interpolated onto the new vertices, cell data
            is inherited by child triangles, and global data is preserved.
        """
        from loopmesh.subdivision import subdivide_loop

        return subdivide_loop(
            self,
            validate=validate,
            opposite_vertex_lookup=opposite_vertex_lookup,
        )
