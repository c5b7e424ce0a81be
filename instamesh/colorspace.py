"""Gamma/linear color conversion and 8-bit color quantization.

Colors are RGBA float arrays with the channels in the last axis. Only the
RGB channels are converted; alpha is always stored linearly.
"""
from __future__ import annotations

import numpy as np


def gamma_to_linear(rgba: np.ndarray) -> np.ndarray:
    """sRGB transfer function, encoded -> linear."""
    out = np.array(rgba, dtype=np.float64, copy=True)
    c = out[..., :3]
    out[..., :3] = np.where(c <= 0.04045, c / 12.92, (np.maximum(c + 0.055, 0.0) / 1.055) ** 2.4)
    return out


def linear_to_gamma(rgba: np.ndarray) -> np.ndarray:
    """sRGB transfer function, linear -> encoded."""
    out = np.array(rgba, dtype=np.float64, copy=True)
    c = np.clip(out[..., :3], 0.0, None)
    out[..., :3] = np.where(c <= 0.0031308, c * 12.92, 1.055 * c ** (1.0 / 2.4) - 0.055)
    return out


def to_color32(rgba: np.ndarray) -> np.ndarray:
    """Quantize float colors in [0, 1] to one byte per channel."""
    return np.rint(np.clip(rgba, 0.0, 1.0) * 255.0).astype(np.uint8)
