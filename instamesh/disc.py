"""
disc: the geometry kernel of the disc generator.

Builds a revolved vertex grid: U sweeps the angle around the sweep axis and V
walks the radius from ``inner_radius`` to ``outer_radius``. For every grid
vertex the kernel writes a position, a normal, two UV families (radial and
top-projected) and optionally a color looked up in a baked gradient table.
Triangles follow a fixed winding table; a double-sided disc appends a
mirrored shell with opposite winding and negated normals.

Everything runs on numpy arrays. Rings (vertices sharing a U index) are
independent, so each pass is evaluated for all rings at once; a ring's
normal only depends on that ring's own first two vertices.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from .buffers import GeometryBuffers
from .gradient import LUT_SIZE, LUT_STEP
from .types import Axis, ConfigurationError, DiscParameters, UVAxis, UVType

Basis = Tuple[np.ndarray, np.ndarray, np.ndarray]

# -----------------------------
# Small vector utilities
# -----------------------------

def v_norm(v: np.ndarray) -> np.ndarray:
    """Normalize along the last axis; zero-length vectors stay zero."""
    length = np.linalg.norm(v, axis=-1, keepdims=True)
    out = np.zeros_like(v, dtype=np.float64)
    np.divide(v, length, out=out, where=length > 0.0)
    return out


def axis_basis(axis: Axis) -> Basis:
    """Return ``(x_axis, y_axis, sweep_axis)`` for the given sweep axis.

    The radial basis is a cyclic rotation of the world axes: Z sweeps in XY,
    X sweeps in YZ and Y sweeps in ZX.
    """
    if not isinstance(axis, Axis):
        raise ConfigurationError(f"unknown axis: {axis!r}")
    k = int(axis)
    eye = np.eye(3)
    return eye[(k + 1) % 3], eye[(k + 2) % 3], eye[k]


# -----------------------
# Vertex color mapping
# -----------------------

def select_color_source(radial_uv: np.ndarray, top_projected_uv: np.ndarray,
                        uv_type: UVType, map_type: UVAxis) -> np.ndarray:
    if uv_type is UVType.RADIAL:
        family = radial_uv
    elif uv_type is UVType.TOP_PROJECTED:
        family = top_projected_uv
    else:
        raise ConfigurationError(f"unknown vertex color UV type: {uv_type!r}")

    if map_type is UVAxis.U:
        return family[..., 0]
    if map_type is UVAxis.V:
        return family[..., 1]
    raise ConfigurationError(f"unknown vertex color map axis: {map_type!r}")


def sample_lut(values: np.ndarray, lut: np.ndarray) -> np.ndarray:
    """Look up ``values`` (clamped to [0, 1]) in a baked table, blending neighbouring entries."""
    t = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    idx_f = t / LUT_STEP
    idx = np.clip(np.floor(idx_f).astype(np.intp), 0, LUT_SIZE - 1)
    right_w = np.where(idx + 1 < LUT_SIZE, idx_f - idx, 0.0)[..., None]
    left = lut[idx].astype(np.float64)
    right = lut[np.minimum(idx + 1, LUT_SIZE - 1)].astype(np.float64)
    return np.rint(left * (1.0 - right_w) + right * right_w).astype(np.uint8)


# ---------------
# Triangulation
# ---------------

def cell_corners(segments_u: int, segments_v: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Corner indices ``(a, b, c, d)`` of every grid cell, in index-buffer slot order."""
    i = np.repeat(np.arange(segments_u, dtype=np.int32), segments_v)
    j = np.tile(np.arange(segments_v, dtype=np.int32), segments_u)
    a = i * (segments_v + 1) + j
    b = a + 1
    c = a + segments_v + 1
    d = c + 1
    return a, b, c, d


def populate_quads(dest: np.ndarray, a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray,
                   flip: bool) -> None:
    """Write two triangles per cell into ``dest`` (six indices per cell)."""
    quads = dest.reshape(-1, 6)
    if not flip:
        quads[:] = np.stack((a, c, b, c, d, b), axis=1)
    else:
        quads[:] = np.stack((a, b, c, c, b, d), axis=1)


# -----------------------
# Kernel
# -----------------------

def generate_disc_buffers(params: DiscParameters, buffers: GeometryBuffers,
                          lut: Optional[np.ndarray] = None) -> None:
    """Fill ``buffers`` for ``params``. Colors are written only when ``lut`` is given.

    ``buffers`` must be sized for ``params.vertex_count`` / ``params.index_count``;
    the degenerate guard (``segments_u < 3`` or ``segments_v < 1``) is the
    caller's job.
    """
    seg_u, seg_v = params.segments_u, params.segments_v
    x_axis, y_axis, sweep_axis = axis_basis(params.axis)
    n = params.side_vertex_count

    u = np.arange(seg_u + 1, dtype=np.float64) / seg_u
    v = np.arange(seg_v + 1, dtype=np.float64) / seg_v

    phi = 2.0 * math.pi * params.angle * u
    cos_phi, sin_phi = np.cos(phi), np.sin(phi)
    radial_dir = cos_phi[:, None] * x_axis + sin_phi[:, None] * y_axis  # (U, 3)

    # may cross zero, which turns the cross-section into an X shape
    outer_rate = (params.outer_radius - params.inner_radius) * v + params.inner_radius  # (V,)
    extrusion_rate = params.extrusion * (1.0 - v)

    pos = (radial_dir[:, None, :] * outer_rate[None, :, None]
           + sweep_axis * extrusion_rate[None, :, None])  # (U, V, 3)

    extent = max(abs(params.inner_radius), abs(params.outer_radius))
    if extent > 0.0:
        top_uv = np.stack((pos @ x_axis, pos @ y_axis), axis=-1) / extent / 2.0 + 0.5
    else:
        top_uv = np.full(pos.shape[:2] + (2,), 0.5)
    radial_uv = np.stack(np.broadcast_arrays(u[:, None], v[None, :]), axis=-1)

    # normals: one direction per ring, signed per vertex
    binormal = v_norm(pos[:, 1] - pos[:, 0])
    tangent = sin_phi[:, None] * x_axis - cos_phi[:, None] * y_axis
    ring_normal = v_norm(np.cross(tangent, binormal))
    sign = np.where(outer_rate < 0.0, -1.0, 1.0)
    if params.flipped:
        sign = -sign
    normals = ring_normal[:, None, :] * sign[None, :, None]

    buffers.vertices[:n] = pos.reshape(-1, 3)
    buffers.normals[:n] = normals.reshape(-1, 3)
    buffers.radial_uv[:n] = radial_uv.reshape(-1, 2)
    buffers.top_projected_uv[:n] = top_uv.reshape(-1, 2)

    if lut is not None:
        if buffers.colors is None:
            raise ValueError("buffers were allocated without a color channel")
        source = select_color_source(buffers.radial_uv[:n], buffers.top_projected_uv[:n],
                                     params.vertex_color_uv_type, params.vertex_color_map_type)
        buffers.colors[:n] = sample_lut(source, lut)

    if params.double_sided:
        buffers.vertices[n:] = buffers.vertices[:n]
        buffers.normals[n:] = -buffers.normals[:n]
        buffers.radial_uv[n:] = buffers.radial_uv[:n]
        buffers.top_projected_uv[n:] = buffers.top_projected_uv[:n]
        if lut is not None:
            buffers.colors[n:] = buffers.colors[:n]

    a, b, c, d = cell_corners(seg_u, seg_v)
    side = params.side_index_count
    populate_quads(buffers.indices[:side], a, b, c, d, not params.flipped)
    if params.double_sided:
        populate_quads(buffers.indices[side:], a + n, b + n, c + n, d + n, params.flipped)
