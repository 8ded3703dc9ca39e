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

"""Edge extraction and boundary classification for triangle meshes.

This module provides:
1. Edge extraction: half-edges of each triangle and the distinct edges
2. Boundary classification: whether an edge has one or two incident triangles
3. Opposite-vertex lookup: the vertex across an edge in each incident triangle
"""

from loopmesh.boundaries._edge_extraction import (
    extract_candidate_edges,
    extract_unique_edges,
)
from loopmesh.boundaries._opposite import (
    NO_VERTEX,
    EdgeAdjacency,
    OppositeVertices,
    build_edge_adjacency,
    find_opposite_vertices,
)
