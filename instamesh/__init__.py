"""
instamesh: procedural revolved disc meshes.

A disc is an annulus or fan swept through an angular range around one world
axis, optionally extruded along that axis and optionally double-sided. The
generator writes positions, normals, up to eight UV channels and gradient
driven vertex colors into any ``MeshSink``:

    from instamesh import DiscParameters, Mesh, generate

    mesh = Mesh()
    generate(DiscParameters(inner_radius=0.5, outer_radius=1.0, segments_u=64, segments_v=1), mesh)
"""
from .assembler import generate, generate_mesh, index_format_for, select_uv
from .buffers import GeometryBuffers, scratch_buffers
from .disc import axis_basis, generate_disc_buffers
from .export import save_glb, save_obj
from .gradient import LUT_SIZE, LUT_STEP, Gradient, GradientKey, GradientMode, build_lut
from .mesh import Mesh, MeshSink
from .settings import InstaMeshSettings, get_settings, set_settings
from .types import (
    Axis,
    ColorSpace,
    ConfigurationError,
    DiscParameters,
    GeneratorType,
    IndexFormat,
    MeshTopology,
    UVAxis,
    UVType,
)

__all__ = [
    "Axis",
    "ColorSpace",
    "ConfigurationError",
    "DiscParameters",
    "GeneratorType",
    "GeometryBuffers",
    "Gradient",
    "GradientKey",
    "GradientMode",
    "IndexFormat",
    "InstaMeshSettings",
    "LUT_SIZE",
    "LUT_STEP",
    "Mesh",
    "MeshSink",
    "MeshTopology",
    "UVAxis",
    "UVType",
    "axis_basis",
    "build_lut",
    "generate",
    "generate_disc_buffers",
    "generate_mesh",
    "get_settings",
    "index_format_for",
    "save_glb",
    "save_obj",
    "scratch_buffers",
    "select_uv",
    "set_settings",
]
