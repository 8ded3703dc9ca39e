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

"""Geometric primitives for triangle surfaces in 3D.

- :func:`compute_vertex_angles`: interior angle at each triangle corner
- :func:`compute_face_normals`: unit normal of each triangle, following winding
- :func:`compute_angle_weighted_point_normals`: per-vertex normals
"""

from loopmesh.geometry._angles import compute_vertex_angles
from loopmesh.geometry._normals import (
    compute_angle_weighted_point_normals,
    compute_face_normals,
)
