"""File writers for a filled ``Mesh``: Wavefront OBJ and binary glTF 2.0 (GLB)."""
from __future__ import annotations

import json
import logging
import struct
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .mesh import Mesh
from .types import IndexFormat

logger = logging.getLogger(__name__)

# glTF enums
ARRAY_BUFFER = 34962
ELEMENT_ARRAY_BUFFER = 34963
UNSIGNED_BYTE = 5121
UNSIGNED_SHORT = 5123
UNSIGNED_INT = 5125
FLOAT = 5126
TRIANGLES = 4


def _require_filled(mesh: Mesh) -> None:
    if not mesh.vertex_count or not mesh.triangle_count:
        raise ValueError(f"mesh {mesh.name!r} has no geometry to export")


def save_obj(path: str, mesh: Mesh, uv_channel: int = 0) -> None:
    """Save OBJ. Vertex colors go on the ``v`` lines (r g b after x y z)."""
    _require_filled(mesh)
    uvs = mesh.uvs.get(uv_channel)
    colors = None if mesh.colors is None else mesh.colors[:, :3] / 255.0
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"o {mesh.name}\n")
        for i, (x, y, z) in enumerate(mesh.vertices):
            if colors is not None:
                r, g, b = colors[i]
                f.write(f"v {x:.6f} {y:.6f} {z:.6f} {r:.6f} {g:.6f} {b:.6f}\n")
            else:
                f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        if uvs is not None:
            for u, v in uvs:
                f.write(f"vt {u:.6f} {v:.6f}\n")
        if mesh.normals is not None:
            for nx, ny, nz in mesh.normals:
                f.write(f"vn {nx:.6f} {ny:.6f} {nz:.6f}\n")

        if uvs is not None and mesh.normals is not None:
            fmt = "{0}/{0}/{0}"
        elif uvs is not None:
            fmt = "{0}/{0}"
        elif mesh.normals is not None:
            fmt = "{0}//{0}"
        else:
            fmt = "{0}"
        for a, b, c in mesh.faces:
            f.write(f"f {fmt.format(a + 1)} {fmt.format(b + 1)} {fmt.format(c + 1)}\n")
    logger.debug("wrote %s (%d vertices)", path, mesh.vertex_count)


@dataclass
class _GltfBuffers:
    bin: bytearray = field(default_factory=bytearray)
    views: List[Dict[str, Any]] = field(default_factory=list)
    accessors: List[Dict[str, Any]] = field(default_factory=list)

    def add(self, data: np.ndarray, target: int, component_type: int, type_str: str, *,
            normalized: bool = False, minv: Optional[List[float]] = None,
            maxv: Optional[List[float]] = None) -> int:
        blob = np.ascontiguousarray(data).astype(data.dtype.newbyteorder("<"), copy=False).tobytes()
        offset = len(self.bin)
        self.bin.extend(blob)
        self.bin.extend(b"\x00" * (_pad4(len(self.bin)) - len(self.bin)))
        self.views.append({"buffer": 0, "byteOffset": offset, "byteLength": len(blob), "target": target})

        acc: Dict[str, Any] = {
            "bufferView": len(self.views) - 1,
            "componentType": component_type,
            "count": int(data.shape[0]),
            "type": type_str,
        }
        if normalized:
            acc["normalized"] = True
        if minv is not None:
            acc["min"] = minv
        if maxv is not None:
            acc["max"] = maxv
        self.accessors.append(acc)
        return len(self.accessors) - 1


def _pad4(n: int) -> int:
    return (n + 3) & ~3


def build_gltf(mesh: Mesh) -> Tuple[Dict[str, Any], bytes]:
    """Return the glTF JSON document and its binary buffer for ``mesh``."""
    _require_filled(mesh)
    buffers = _GltfBuffers()

    lo, hi = mesh.bounds()
    attrs: Dict[str, int] = {
        "POSITION": buffers.add(mesh.vertices.astype(np.float32), ARRAY_BUFFER, FLOAT, "VEC3",
                                minv=list(lo), maxv=list(hi)),
    }
    if mesh.normals is not None:
        attrs["NORMAL"] = buffers.add(mesh.normals.astype(np.float32), ARRAY_BUFFER, FLOAT, "VEC3")
    for channel in sorted(mesh.uvs):
        attrs[f"TEXCOORD_{channel}"] = buffers.add(mesh.uvs[channel].astype(np.float32),
                                                   ARRAY_BUFFER, FLOAT, "VEC2")
    if mesh.colors is not None:
        attrs["COLOR_0"] = buffers.add(mesh.colors.astype(np.uint8), ARRAY_BUFFER, UNSIGNED_BYTE, "VEC4",
                                       normalized=True)

    if mesh.index_format is IndexFormat.UINT32:
        idx_acc = buffers.add(mesh.indices.astype(np.uint32), ELEMENT_ARRAY_BUFFER, UNSIGNED_INT, "SCALAR")
    else:
        idx_acc = buffers.add(mesh.indices.astype(np.uint16), ELEMENT_ARRAY_BUFFER, UNSIGNED_SHORT, "SCALAR")

    gltf: Dict[str, Any] = {
        "asset": {"version": "2.0", "generator": "instamesh"},
        "scene": 0,
        "scenes": [{"nodes": [0]}],
        "nodes": [{"mesh": 0, "name": mesh.name}],
        "meshes": [{
            "name": mesh.name,
            "primitives": [{
                "attributes": attrs,
                "indices": idx_acc,
                "mode": TRIANGLES,
            }],
        }],
        "buffers": [{"byteLength": len(buffers.bin)}],
        "bufferViews": buffers.views,
        "accessors": buffers.accessors,
    }
    return gltf, bytes(buffers.bin)


def save_glb(path: str, mesh: Mesh) -> None:
    """Save GLB (binary glTF 2.0) in one file."""
    gltf, bin_bytes = build_gltf(mesh)

    json_bytes = json.dumps(gltf, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    json_chunk = json_bytes + b" " * (_pad4(len(json_bytes)) - len(json_bytes))
    bin_chunk = bin_bytes + b"\x00" * (_pad4(len(bin_bytes)) - len(bin_bytes))
    total_len = 12 + 8 + len(json_chunk) + 8 + len(bin_chunk)

    with open(path, "wb") as f:
        f.write(b"glTF")
        f.write(struct.pack("<II", 2, total_len))
        f.write(struct.pack("<I", len(json_chunk)))
        f.write(b"JSON")
        f.write(json_chunk)
        f.write(struct.pack("<I", len(bin_chunk)))
        f.write(b"BIN\x00")
        f.write(bin_chunk)
    logger.debug("wrote %s (%d bytes)", path, total_len)
