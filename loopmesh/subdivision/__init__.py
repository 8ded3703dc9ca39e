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

"""Loop subdivision of triangle meshes.

One pass:
1. Adds one vertex per edge (Loop edge stencil, or the plain midpoint on
   boundary edges)
2. Splits each triangle into 4 children with the parent's winding
3. Repositions the original vertices
4. Recomputes angle-weighted vertex normals

Example:
    >>> from loopmesh.subdivision import subdivide_loop
    >>> from loopmesh.primitives.surfaces import icosahedron_surface
    >>> mesh = icosahedron_surface.load()
    >>> subdivided = subdivide_loop(mesh)
    >>> assert subdivided.n_cells == mesh.n_cells * 4
"""

from loopmesh.subdivision.loop import (
    LoopSubdivisionResult,
    loop_subdivide,
    subdivide_loop,
)
