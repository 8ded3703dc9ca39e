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

"""Registry of edge midpoint vertices created during one subdivision pass.

The registry maps an undirected edge to the index of the vertex inserted on
it, so that two faces sharing an edge resolve to the same midpoint vertex.
"""

from collections.abc import Iterator

Edge = tuple[int, int]


def canonical_edge(edge: tuple[int, int]) -> Edge:
    """Return ``edge`` as ``(min_vertex, max_vertex)``.

    Examples
    --------
    >>> canonical_edge((5, 2))
    (2, 5)
    """
    v0, v1 = int(edge[0]), int(edge[1])
    return (v0, v1) if v0 <= v1 else (v1, v0)


class EdgeRegistry:
    """Insert-only mapping from undirected edges to midpoint vertex indices.

    Edges are canonicalized on every access, so ``(1, 4)`` and ``(4, 1)`` are
    the same key. Entries are never removed or overwritten.

    Examples
    --------
    >>> registry = EdgeRegistry()
    >>> registry.add((3, 1), 7)
    >>> registry.contains((1, 3))
    True
    >>> registry.get_index((1, 3))
    7
    """

    def __init__(self) -> None:
        self._index_of: dict[Edge, int] = {}

    def contains(self, edge: tuple[int, int]) -> bool:
        return canonical_edge(edge) in self._index_of

    def add(self, edge: tuple[int, int], vertex_index: int) -> None:
        """Register the midpoint vertex of ``edge``.

        Raises
        ------
        KeyError
            If ``edge`` (in either orientation) is already registered.
        """
        key = canonical_edge(edge)
        if key in self._index_of:
            raise KeyError(
                f"Edge {key} is already registered with midpoint vertex "
                f"{self._index_of[key]}; got {vertex_index=}."
            )
        self._index_of[key] = int(vertex_index)

    def get_index(self, edge: tuple[int, int]) -> int:
        """Return the midpoint vertex index of ``edge``.

        Raises
        ------
        KeyError
            If ``edge`` has not been registered.
        """
        key = canonical_edge(edge)
        try:
            return self._index_of[key]
        except KeyError:
            raise KeyError(f"Edge {key} has no registered midpoint vertex.") from None

    def edges(self) -> list[Edge]:
        """Registered canonical edges, in insertion order."""
        return list(self._index_of)

    def __contains__(self, edge: object) -> bool:
        return isinstance(edge, tuple) and len(edge) == 2 and self.contains(edge)

    def __len__(self) -> int:
        return len(self._index_of)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._index_of)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_edges={len(self)})"
