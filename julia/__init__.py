"""Escape-time Julia set rendering with interchangeable CPU and GPU backends."""

from .colors import colorize, hsl_to_rgb, julia_color
from .complex import Complex
from .coordinator import RedrawCoordinator
from .escape import escape_time, escape_time_grid, pixel_to_complex
from .params import PRESET_NAMES, PRESETS, ColorMode, ConfigurationError, ViewParams
from .renderer import BackendUnavailable, CpuRenderer, Renderer, create_renderer

__all__ = [
    "BackendUnavailable",
    "ColorMode",
    "Complex",
    "ConfigurationError",
    "CpuRenderer",
    "PRESETS",
    "PRESET_NAMES",
    "RedrawCoordinator",
    "Renderer",
    "ViewParams",
    "colorize",
    "create_renderer",
    "escape_time",
    "escape_time_grid",
    "hsl_to_rgb",
    "julia_color",
    "pixel_to_complex",
]
