"""
Buffer assembly: runs one generation call and hands the result to a sink.

    mesh = Mesh()
    generate(DiscParameters(inner_radius=0.5, segments_u=64, segments_v=4), mesh)

Parameters flow one way: gradient LUT (when vertex coloring is on) -> kernel
-> sink. Nothing is read back from the sink, and no buffer survives the call.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .buffers import GeometryBuffers, scratch_buffers
from .disc import generate_disc_buffers
from .gradient import build_lut
from .mesh import MeshSink
from .settings import get_settings
from .types import (
    MAX_UV_CHANNELS,
    ColorSpace,
    ConfigurationError,
    DiscParameters,
    GeneratorType,
    IndexFormat,
    MeshTopology,
    UVType,
)

logger = logging.getLogger(__name__)

MAX_UINT16_VERTICES = 65535


def index_format_for(vertex_count: int) -> IndexFormat:
    return IndexFormat.UINT16 if vertex_count <= MAX_UINT16_VERTICES else IndexFormat.UINT32


def select_uv(uv_type: UVType, buffers: GeometryBuffers) -> np.ndarray:
    if uv_type is UVType.RADIAL:
        return buffers.radial_uv
    if uv_type is UVType.TOP_PROJECTED:
        return buffers.top_projected_uv
    raise ConfigurationError(f"unknown UV type: {uv_type!r}")


def _check_uv_channels(uv_channels: Sequence[UVType]) -> None:
    if not 1 <= len(uv_channels) <= MAX_UV_CHANNELS:
        raise ConfigurationError(
            f"between 1 and {MAX_UV_CHANNELS} UV channels are supported (got {len(uv_channels)})"
        )
    for channel, uv_type in enumerate(uv_channels):
        if not isinstance(uv_type, UVType):
            raise ConfigurationError(f"unknown UV type for channel {channel}: {uv_type!r}")


def generate(params: DiscParameters, sink: MeshSink, color_space: Optional[ColorSpace] = None) -> bool:
    """Generate a disc into ``sink``.

    Returns False without touching the sink when the grid is degenerate
    (``segments_u < 3`` or ``segments_v < 1``).
    """
    if params.is_degenerate:
        logger.debug("skipping disc generation: segments_u=%d segments_v=%d",
                     params.segments_u, params.segments_v)
        return False

    _check_uv_channels(params.uv_channels)
    if color_space is None:
        color_space = get_settings().default_color_space

    lut = build_lut(params.gradient, color_space) if params.gradient is not None else None
    index_format = index_format_for(params.vertex_count)

    with scratch_buffers(params, with_colors=lut is not None) as buffers:
        generate_disc_buffers(params, buffers, lut)

        sink.clear()
        sink.set_index_format(index_format)
        sink.set_vertices(buffers.vertices)
        sink.set_normals(buffers.normals)
        for channel, uv_type in enumerate(params.uv_channels):
            sink.set_uvs(channel, select_uv(uv_type, buffers))
        if buffers.colors is not None:
            sink.set_colors(buffers.colors)
        sink.set_indices(buffers.indices, MeshTopology.TRIANGLES)

    logger.debug("generated disc: %d vertices, %d triangles, %s indices",
                 params.vertex_count, params.triangle_count, index_format.name)
    return True


def generate_mesh(generator_type: GeneratorType, params: DiscParameters, sink: Optional[MeshSink],
                  color_space: Optional[ColorSpace] = None) -> bool:
    """Dispatch on generator type. A missing sink is a no-op."""
    if sink is None:
        return False
    if generator_type is GeneratorType.DISC:
        return generate(params, sink, color_space)
    raise ConfigurationError(f"unknown generator type: {generator_type!r}")
