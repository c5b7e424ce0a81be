"""
Shared types for the disc generator: enums, the parameter record and the
counts derived from it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .gradient import Gradient


class ConfigurationError(ValueError):
    """Raised for enum values or settings the generator does not recognize."""


class Axis(IntEnum):
    X = 0
    Y = 1
    Z = 2


class UVType(Enum):
    RADIAL = "radial"
    TOP_PROJECTED = "top_projected"


class UVAxis(Enum):
    U = "u"
    V = "v"


class ColorSpace(Enum):
    LINEAR = "linear"
    GAMMA = "gamma"


class GeneratorType(Enum):
    DISC = "disc"


class MeshTopology(Enum):
    TRIANGLES = "triangles"


class IndexFormat(Enum):
    UINT16 = 16
    UINT32 = 32


MAX_UV_CHANNELS = 8


@dataclass(frozen=True)
class DiscParameters:
    inner_radius: float = 0.0
    outer_radius: float = 1.0
    extrusion: float = 0.0
    angle: float = 1.0  # fraction of a full turn
    segments_u: int = 32
    segments_v: int = 32
    axis: Axis = Axis.Z
    flipped: bool = False
    double_sided: bool = False
    vertex_color_uv_type: UVType = UVType.RADIAL
    vertex_color_map_type: UVAxis = UVAxis.U
    gradient: Optional["Gradient"] = None
    uv_channels: Tuple[UVType, ...] = (UVType.RADIAL,)

    # ---- derived counts ----
    @property
    def is_degenerate(self) -> bool:
        return self.segments_u < 3 or self.segments_v < 1

    @property
    def side_vertex_count(self) -> int:
        return (self.segments_u + 1) * (self.segments_v + 1)

    @property
    def side_triangle_count(self) -> int:
        return self.segments_u * self.segments_v * 2

    @property
    def side_index_count(self) -> int:
        return self.side_triangle_count * 3

    @property
    def vertex_count(self) -> int:
        return self.side_vertex_count * (2 if self.double_sided else 1)

    @property
    def triangle_count(self) -> int:
        return self.side_triangle_count * (2 if self.double_sided else 1)

    @property
    def index_count(self) -> int:
        return self.triangle_count * 3
