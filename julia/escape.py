"""Escape-time evaluation of z -> z^2 + c.

``escape_time`` is the reference per-pixel loop. ``escape_time_grid`` runs the
same arithmetic in the same order over numpy arrays, so both return identical
counts for the same pixel.
"""

import numpy as np

from .complex import Complex


def pixel_to_complex(px, py, params):
    """Map a pixel to the starting point z0 in the complex plane."""
    cx, cy = params.center
    return Complex((px - cx) / params.scale, (py - cy) / params.scale)


def escape_time(px, py, params):
    """Return the iteration at which the orbit of pixel (px, py) escapes.

    ``params.max_iterations`` is returned when the orbit stays bounded for the
    whole budget. A nan or inf magnitude counts as escaped.
    """
    c = params.c
    radius = params.escape_radius
    z = pixel_to_complex(px, py, params)
    for i in range(params.max_iterations):
        z = z.multiply(z).add(c)
        # nan fails this comparison too
        if not z.magnitude() <= radius:
            return i
    return params.max_iterations


def escape_time_grid(params, width, height):
    """Escape counts for every pixel of a width x height viewport.

    Returns an int32 array of shape (height, width), row 0 at the top.
    """
    max_iter = params.max_iterations
    counts = np.full(width * height, max_iter, dtype=np.int32)
    if width == 0 or height == 0 or max_iter == 0:
        return counts.reshape(height, width)

    cx, cy = params.center
    xs = (np.arange(width, dtype=np.float64) - cx) / params.scale
    ys = (np.arange(height, dtype=np.float64) - cy) / params.scale
    zr = np.tile(xs, height)
    zi = np.repeat(ys, width)

    c_re = params.c.re
    c_im = params.c.im
    radius = params.escape_radius

    # Flat indices of orbits still iterating; zr/zi are compacted alongside
    active = np.arange(width * height)
    with np.errstate(all="ignore"):
        for i in range(max_iter):
            if active.size == 0:
                break
            zr, zi = zr * zr - zi * zi + c_re, zr * zi + zi * zr + c_im
            escaped = ~(np.sqrt(zr * zr + zi * zi) <= radius)
            counts[active[escaped]] = i
            bounded = ~escaped
            active = active[bounded]
            zr = zr[bounded]
            zi = zi[bounded]

    return counts.reshape(height, width)
