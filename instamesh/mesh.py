"""
Mesh sinks: the receiving end of a generation call.

``MeshSink`` is the interface the assembler talks to. ``Mesh`` is a small
in-memory implementation that copies whatever it is handed, so it never
shares memory with the generator's scratch buffers.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Tuple

import numpy as np

from .types import MAX_UV_CHANNELS, IndexFormat, MeshTopology

Vec3 = Tuple[float, float, float]
Tri = Tuple[int, int, int]


class MeshSink(Protocol):
    def clear(self) -> None: ...

    def set_index_format(self, index_format: IndexFormat) -> None: ...

    def set_vertices(self, vertices: np.ndarray) -> None: ...

    def set_normals(self, normals: np.ndarray) -> None: ...

    def set_uvs(self, channel: int, uvs: np.ndarray) -> None: ...

    def set_colors(self, colors: np.ndarray) -> None: ...

    def set_indices(self, indices: np.ndarray, topology: MeshTopology) -> None: ...


_INDEX_DTYPES = {
    IndexFormat.UINT16: np.uint16,
    IndexFormat.UINT32: np.uint32,
}


class Mesh:
    def __init__(self, name: str = "InstaMesh") -> None:
        self.name = name
        self.clear()

    def clear(self) -> None:
        self.vertices = np.empty((0, 3), dtype=np.float32)
        self.normals: Optional[np.ndarray] = None
        self.uvs: Dict[int, np.ndarray] = {}
        self.colors: Optional[np.ndarray] = None
        self.indices = np.empty((0,), dtype=np.uint16)
        self.index_format = IndexFormat.UINT16
        self.topology: Optional[MeshTopology] = None

    # ---- sink interface ----
    def set_index_format(self, index_format: IndexFormat) -> None:
        if index_format not in _INDEX_DTYPES:
            raise ValueError(f"unsupported index format: {index_format!r}")
        self.index_format = index_format

    def set_vertices(self, vertices: np.ndarray) -> None:
        self.vertices = np.array(vertices, dtype=np.float32, copy=True).reshape(-1, 3)

    def set_normals(self, normals: np.ndarray) -> None:
        self.normals = np.array(normals, dtype=np.float32, copy=True).reshape(-1, 3)

    def set_uvs(self, channel: int, uvs: np.ndarray) -> None:
        if not 0 <= channel < MAX_UV_CHANNELS:
            raise ValueError(f"uv channel must be in [0, {MAX_UV_CHANNELS}) (got {channel})")
        self.uvs[channel] = np.array(uvs, dtype=np.float32, copy=True).reshape(-1, 2)

    def set_colors(self, colors: np.ndarray) -> None:
        self.colors = np.array(colors, dtype=np.uint8, copy=True).reshape(-1, 4)

    def set_indices(self, indices: np.ndarray, topology: MeshTopology) -> None:
        if topology is not MeshTopology.TRIANGLES:
            raise ValueError(f"unsupported topology: {topology!r}")
        indices = np.asarray(indices)
        if indices.size % 3:
            raise ValueError("triangle index count must be a multiple of 3")
        if indices.size and (indices.min() < 0 or indices.max() >= len(self.vertices)):
            raise ValueError("triangle index out of range")
        if self.index_format is IndexFormat.UINT16 and indices.size and indices.max() > 0xFFFF:
            raise ValueError("index exceeds 16-bit range; set IndexFormat.UINT32 first")
        self.indices = indices.astype(_INDEX_DTYPES[self.index_format], copy=True)
        self.topology = topology

    # ---- analysis ----
    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.size // 3)

    @property
    def faces(self) -> List[Tri]:
        return [tuple(int(i) for i in tri) for tri in self.indices.reshape(-1, 3)]  # type: ignore[misc]

    def bounds(self) -> Tuple[Vec3, Vec3]:
        if not self.vertex_count:
            raise ValueError("mesh has no vertices")
        lo = self.vertices.min(axis=0)
        hi = self.vertices.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(lo[2])), (float(hi[0]), float(hi[1]), float(hi[2]))
