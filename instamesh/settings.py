"""Project-wide defaults for mesh generation."""
from __future__ import annotations

from dataclasses import dataclass

from .types import ColorSpace


@dataclass
class InstaMeshSettings:
    # color space the vertex color gradient is baked in when a caller does not pick one
    default_color_space: ColorSpace = ColorSpace.LINEAR


_settings = InstaMeshSettings()


def get_settings() -> InstaMeshSettings:
    return _settings


def set_settings(settings: InstaMeshSettings) -> InstaMeshSettings:
    """Replace the process-wide settings; returns the previous ones."""
    global _settings
    previous, _settings = _settings, settings
    return previous
