"""Request-driven redraw coordination.

The image only changes when the view does, so instead of drawing every frame
the coordinator keeps a dirty flag. Any number of transitions between two
``render_if_needed`` calls collapse into one render.
"""

import logging
import time

from .params import ViewParams

logger = logging.getLogger(__name__)


class RedrawCoordinator:
    """Owns the view state, the viewport size and the active renderer."""

    def __init__(self, renderer, width, height, params=None):
        self.renderer = renderer
        self.width = max(int(width), 1)
        self.height = max(int(height), 1)
        self.params = params if params is not None else ViewParams()
        self.params.set_center(self.width / 2, self.height / 2)

        self.needs_render = True
        self.last_render_time = 0.0
        self.frames_rendered = 0

    @property
    def backend_name(self):
        return self.renderer.name

    def invalidate(self):
        self.needs_render = True

    # ── Transitions ───────────────────────────────────────────

    def recenter(self, px, py):
        self.params.set_center(px, py)
        self.invalidate()

    def zoom(self, delta):
        """At the scale clamp the image cannot change, so no redraw is requested."""
        before = self.params.scale
        self.params.zoom(delta)
        if self.params.scale != before:
            self.invalidate()

    def set_scale(self, scale):
        self.params.set_scale(scale)
        self.invalidate()

    def set_c(self, re, im):
        self.params.set_c(re, im)
        self.invalidate()

    def set_max_iterations(self, value):
        self.params.set_max_iterations(value)
        self.invalidate()

    def set_escape_radius(self, value):
        self.params.set_escape_radius(value)
        self.invalidate()

    def set_color_mode(self, mode):
        self.params.set_color_mode(mode)
        self.invalidate()

    def toggle_color_mode(self):
        self.params.toggle_color_mode()
        self.invalidate()

    def select_preset(self, name):
        self.params.select_preset(name)
        self.invalidate()

    def reset(self):
        self.params.reset(self.width, self.height)
        self.invalidate()

    def resize(self, width, height):
        self.width = max(int(width), 1)
        self.height = max(int(height), 1)
        self.invalidate()

    # ── Rendering ─────────────────────────────────────────────

    def render_if_needed(self):
        """Render a frame if anything changed since the last one, else return None."""
        if not self.needs_render:
            return None

        # Snapshot so edits made while the frame is in flight can't tear it
        params = self.params.copy()
        self.needs_render = False

        start = time.perf_counter()
        frame = self.renderer.render(params, self.width, self.height)
        self.last_render_time = time.perf_counter() - start
        self.frames_rendered += 1
        logger.debug(
            "Rendered %dx%d on %s in %.3fs",
            self.width, self.height, self.renderer.name, self.last_render_time,
        )
        return frame
