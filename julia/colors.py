"""Iteration count to RGBA color mapping."""

import math

import numpy as np

from .params import ColorMode

OPAQUE_BLACK = (0, 0, 0, 255)
OPAQUE_WHITE = (255, 255, 255, 255)

# Colorful mode walks the hue circle at full saturation, mid lightness
SATURATION = 100.0
LIGHTNESS = 50.0


def _to_byte(value):
    # Round half up, the way browsers' Math.round does
    return int(math.floor(value * 255.0 + 0.5))


def _hue_to_channel(p, q, t):
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h, s, l):
    """Convert hue in degrees, saturation and lightness in percent to 0-255 RGB."""
    h /= 360.0
    s /= 100.0
    l /= 100.0

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)

    return _to_byte(r), _to_byte(g), _to_byte(b)


def julia_color(iterations, max_iterations, mode):
    """RGBA tuple for one pixel."""
    mode = ColorMode(mode)
    inside = iterations == max_iterations
    if mode is ColorMode.BLACK_WHITE:
        return OPAQUE_WHITE if inside else OPAQUE_BLACK

    # The filled set is always black in colorful mode
    if inside:
        return OPAQUE_BLACK
    hue = 360.0 * iterations / max_iterations
    return hsl_to_rgb(hue, SATURATION, LIGHTNESS) + (255,)


# ── Vectorized variants used by the CPU renderer ─────────────


def _hue_to_channel_array(p, q, t):
    t = np.where(t < 0, t + 1, t)
    t = np.where(t > 1, t - 1, t)
    return np.select(
        [t < 1 / 6, t < 1 / 2, t < 2 / 3],
        [p + (q - p) * 6 * t, np.full_like(t, q), p + (q - p) * (2 / 3 - t) * 6],
        default=p,
    )


def hsl_to_rgb_array(h, s, l):
    """Array form of :func:`hsl_to_rgb` for an array of hues.

    Returns a uint8 array with a trailing axis of 3 channels.
    """
    h = np.asarray(h, dtype=np.float64) / 360.0
    s /= 100.0
    l /= 100.0

    if s == 0:
        channels = [np.full_like(h, l)] * 3
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        channels = [
            _hue_to_channel_array(p, q, h + 1 / 3),
            _hue_to_channel_array(p, q, h),
            _hue_to_channel_array(p, q, h - 1 / 3),
        ]

    rgb = np.stack(channels, axis=-1)
    return np.floor(rgb * 255.0 + 0.5).astype(np.uint8)


def colorize(iterations, max_iterations, mode):
    """Turn a (height, width) array of escape counts into an RGBA frame buffer."""
    mode = ColorMode(mode)
    iterations = np.asarray(iterations)
    inside = iterations == max_iterations

    rgba = np.empty(iterations.shape + (4,), dtype=np.uint8)
    rgba[..., 3] = 255

    if mode is ColorMode.BLACK_WHITE:
        rgba[..., :3] = np.where(inside, 255, 0)[..., np.newaxis]
        return rgba

    if max_iterations == 0:
        rgba[..., :3] = 0
        return rgba

    hue = 360.0 * iterations / max_iterations
    rgb = hsl_to_rgb_array(hue, SATURATION, LIGHTNESS)
    rgb[inside] = 0
    rgba[..., :3] = rgb
    return rgba
