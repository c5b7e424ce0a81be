"""Per-call scratch buffers for the disc generator."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from .types import DiscParameters

logger = logging.getLogger(__name__)


@dataclass
class GeometryBuffers:
    vertices: np.ndarray
    normals: np.ndarray
    radial_uv: np.ndarray
    top_projected_uv: np.ndarray
    colors: Optional[np.ndarray]
    indices: np.ndarray

    @classmethod
    def allocate(cls, vertex_count: int, index_count: int, with_colors: bool = True) -> "GeometryBuffers":
        # uninitialized: the kernel writes every slot
        return cls(
            vertices=np.empty((vertex_count, 3), dtype=np.float32),
            normals=np.empty((vertex_count, 3), dtype=np.float32),
            radial_uv=np.empty((vertex_count, 2), dtype=np.float32),
            top_projected_uv=np.empty((vertex_count, 2), dtype=np.float32),
            colors=np.empty((vertex_count, 4), dtype=np.uint8) if with_colors else None,
            indices=np.empty((index_count,), dtype=np.int32),
        )

    @property
    def released(self) -> bool:
        return self.vertices.size == 0 and self.indices.size == 0

    def release(self) -> None:
        empty3 = np.empty((0, 3), dtype=np.float32)
        empty2 = np.empty((0, 2), dtype=np.float32)
        self.vertices = empty3
        self.normals = empty3
        self.radial_uv = empty2
        self.top_projected_uv = empty2
        self.colors = None
        self.indices = np.empty((0,), dtype=np.int32)


@contextmanager
def scratch_buffers(params: DiscParameters, with_colors: bool = True) -> Iterator[GeometryBuffers]:
    """Allocate buffers sized for ``params``; they are released when the block exits."""
    buffers = GeometryBuffers.allocate(params.vertex_count, params.index_count, with_colors)
    logger.debug("allocated scratch buffers: %d vertices, %d indices", params.vertex_count, params.index_count)
    try:
        yield buffers
    finally:
        buffers.release()
