"""
Color gradients and the baked lookup table used for vertex colors.

A ``Gradient`` is an ordered list of ``GradientKey`` control points. The
geometry kernel never evaluates a gradient directly; it samples a fixed
256-entry table built once per generation call by ``build_lut``:

    lut = build_lut(Gradient([GradientKey(0.0, (0, 0, 0)), GradientKey(1.0, (1, 1, 1))]),
                    ColorSpace.GAMMA)
    lut.shape  # (256, 4), uint8 RGBA
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .colorspace import gamma_to_linear, to_color32
from .types import ColorSpace, ConfigurationError

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float, float]

LUT_SIZE = 256
LUT_STEP = 1.0 / (LUT_SIZE - 1)

WHITE: Color = (1.0, 1.0, 1.0, 1.0)


class GradientMode(Enum):
    BLEND = "blend"
    FIXED = "fixed"


def _as_rgba(color: Sequence[float]) -> Color:
    if len(color) == 3:
        r, g, b = color
        return (float(r), float(g), float(b), 1.0)
    if len(color) == 4:
        r, g, b, a = color
        return (float(r), float(g), float(b), float(a))
    raise ValueError(f"color must have 3 or 4 components (got {len(color)})")


@dataclass(frozen=True)
class GradientKey:
    position: float
    color: Color

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", float(self.position))
        object.__setattr__(self, "color", _as_rgba(self.color))


class Gradient:
    """Piecewise color ramp over [0, 1].

    Outside the span of the keys the boundary colors are held. A gradient
    with no keys evaluates to opaque white everywhere.
    """

    def __init__(self, keys: Iterable[GradientKey] = (), mode: GradientMode = GradientMode.BLEND) -> None:
        # stable sort keeps insertion order for keys sharing a position
        self.keys: List[GradientKey] = sorted(keys, key=lambda k: k.position)
        self.mode = mode

    def __repr__(self) -> str:
        return f"Gradient({self.keys!r}, mode={self.mode})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gradient):
            return NotImplemented
        return self.keys == other.keys and self.mode == other.mode

    def __hash__(self) -> int:
        return hash((tuple(self.keys), self.mode))

    def evaluate(self, t: float) -> Color:
        keys = self.keys
        if not keys:
            return WHITE
        if t <= keys[0].position:
            return keys[0].color
        if t >= keys[-1].position:
            return keys[-1].color

        for k0, k1 in zip(keys, keys[1:]):
            if t > k1.position:
                continue
            if self.mode is GradientMode.FIXED:
                return k1.color
            span = k1.position - k0.position
            if span <= 0.0:
                return k1.color
            w = (t - k0.position) / span
            return tuple(a + (b - a) * w for a, b in zip(k0.color, k1.color))  # type: ignore[return-value]
        return keys[-1].color


def build_lut(gradient: Gradient, color_space: ColorSpace) -> np.ndarray:
    """Bake ``gradient`` into a ``(LUT_SIZE, 4)`` uint8 RGBA table sampled at i/255."""
    if color_space is not ColorSpace.LINEAR and color_space is not ColorSpace.GAMMA:
        raise ConfigurationError(f"unknown color space: {color_space!r}")

    table = np.empty((LUT_SIZE, 4), dtype=np.float64)
    for i in range(LUT_SIZE):
        table[i] = gradient.evaluate(i / (LUT_SIZE - 1))
    if color_space is ColorSpace.LINEAR:
        table = gamma_to_linear(table)

    logger.debug("baked %d-key gradient into %s LUT", len(gradient.keys), color_space.value)
    return to_color32(table)
