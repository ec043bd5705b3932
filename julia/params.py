"""View and parameter state for the Julia set viewer.

A single ``ViewParams`` instance lives for the whole session. Interaction
handlers mutate it through the methods below; every setter validates first so
a rejected value leaves the previous one untouched.
"""

import enum
import math
from dataclasses import dataclass, field, replace

from .complex import Complex

DEFAULT_C = (-0.8, 0.156)
DEFAULT_SCALE = 300.0
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_ESCAPE_RADIUS = 2.0

# Scale is in pixels per unit of the complex plane
SCALE_MIN = 50.0
SCALE_MAX = 5000.0
ZOOM_IN_FACTOR = 1.2
ZOOM_OUT_FACTOR = 0.8

# Also the compile-time loop bound of the GPU kernel
MAX_ITERATIONS_LIMIT = 1000

# Named values of c
# Format: (name, re, im)
PRESETS = [
    ("default", -0.8, 0.156),
    ("dendrite", 0.0, 1.0),
    ("spiral", -0.75, 0.11),
    ("rabbit", -0.123, 0.745),
    ("siegel disk", -0.391, -0.587),
]
PRESET_NAMES = [name for name, _re, _im in PRESETS]


class ColorMode(enum.Enum):
    COLORFUL = "colorful"
    BLACK_WHITE = "blackwhite"


DEFAULT_COLOR_MODE = ColorMode.COLORFUL


class ConfigurationError(ValueError):
    """Raised when a parameter value is not usable for rendering."""


def _clamp(value, low, high):
    return max(low, min(high, value))


def _as_float(value, name):
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


def _check_c(re, im):
    c = Complex(_as_float(re, "c.re"), _as_float(im, "c.im"))
    if not c.is_finite():
        raise ConfigurationError(f"c must be finite, got {c!r}")
    return c


def _check_max_iterations(value):
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError):
        as_int = None
    if as_int is None or isinstance(value, bool) or as_int != value:
        raise ConfigurationError(f"max_iterations must be an integer, got {value!r}")
    value = as_int
    if value < 0:
        raise ConfigurationError(f"max_iterations must not be negative, got {value}")
    return min(value, MAX_ITERATIONS_LIMIT)


def _check_scale(value):
    value = _as_float(value, "scale")
    if math.isnan(value):
        raise ConfigurationError("scale must be a number")
    return _clamp(value, SCALE_MIN, SCALE_MAX)


def _check_escape_radius(value):
    value = _as_float(value, "escape_radius")
    if not math.isfinite(value) or value <= 0.0:
        raise ConfigurationError(f"escape_radius must be a positive finite number, got {value!r}")
    return value


def _check_color_mode(mode):
    try:
        return ColorMode(mode)
    except ValueError:
        raise ConfigurationError(f"unknown color mode {mode!r}") from None


def preset_value(name):
    """Return c for a preset name."""
    for preset_name, re, im in PRESETS:
        if preset_name == name:
            return Complex(re, im)
    raise ConfigurationError(f"unknown preset {name!r}")


@dataclass
class ViewParams:
    """Everything the escape-time evaluator and color mapper need for a frame."""

    c: Complex = field(default_factory=lambda: Complex(*DEFAULT_C))
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    scale: float = DEFAULT_SCALE
    escape_radius: float = DEFAULT_ESCAPE_RADIUS
    center: tuple = (0.0, 0.0)
    color_mode: ColorMode = DEFAULT_COLOR_MODE

    def __post_init__(self):
        if isinstance(self.c, Complex):
            self.c = _check_c(self.c.re, self.c.im)
        else:
            self.c = _check_c(*self.c)
        self.max_iterations = _check_max_iterations(self.max_iterations)
        self.scale = _check_scale(self.scale)
        self.escape_radius = _check_escape_radius(self.escape_radius)
        self.center = (float(self.center[0]), float(self.center[1]))
        self.color_mode = _check_color_mode(self.color_mode)

    # ── Transitions ───────────────────────────────────────────

    def set_center(self, x, y):
        self.center = (float(x), float(y))

    def zoom(self, delta):
        """Negative wheel delta zooms in, anything else zooms out."""
        factor = ZOOM_IN_FACTOR if delta < 0 else ZOOM_OUT_FACTOR
        self.scale = _clamp(self.scale * factor, SCALE_MIN, SCALE_MAX)

    def set_scale(self, scale):
        self.scale = _check_scale(scale)

    def set_c(self, re, im):
        self.c = _check_c(re, im)

    def set_max_iterations(self, value):
        self.max_iterations = _check_max_iterations(value)

    def set_escape_radius(self, value):
        self.escape_radius = _check_escape_radius(value)

    def set_color_mode(self, mode):
        self.color_mode = _check_color_mode(mode)

    def toggle_color_mode(self):
        if self.color_mode is ColorMode.COLORFUL:
            self.color_mode = ColorMode.BLACK_WHITE
        else:
            self.color_mode = ColorMode.COLORFUL

    def select_preset(self, name):
        """Set c from the preset table. Scale and iterations are kept."""
        self.c = preset_value(name)

    def reset(self, width, height):
        """Restore c, scale and iterations to defaults and recenter on the viewport."""
        self.c = Complex(*DEFAULT_C)
        self.scale = DEFAULT_SCALE
        self.max_iterations = DEFAULT_MAX_ITERATIONS
        self.center = (width / 2, height / 2)

    def copy(self):
        return replace(self)
