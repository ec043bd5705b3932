"""Frame renderers and backend selection."""

import logging

from .colors import colorize
from .escape import escape_time_grid

logger = logging.getLogger(__name__)


class BackendUnavailable(RuntimeError):
    """The requested backend cannot run on this machine."""


class Renderer:
    """Common interface of the CPU and GPU backends.

    Renderers are stateless with respect to the view: every call gets the
    parameters to draw.
    """

    name = "abstract"

    def iterations(self, params, width, height):
        """Escape counts as an int32 array of shape (height, width)."""
        raise NotImplementedError

    def render(self, params, width, height):
        """RGBA frame as a uint8 array of shape (height, width, 4)."""
        raise NotImplementedError

    def close(self):
        pass


class CpuRenderer(Renderer):
    """Synchronous sweep over the full pixel grid with numpy."""

    name = "cpu"

    def iterations(self, params, width, height):
        return escape_time_grid(params, width, height)

    def render(self, params, width, height):
        counts = self.iterations(params, width, height)
        return colorize(counts, params.max_iterations, params.color_mode)


def create_renderer(prefer_gpu=True):
    """Pick the backend for this session, falling back to the CPU."""
    if prefer_gpu:
        from .gpu import GpuRenderer

        try:
            renderer = GpuRenderer()
        except BackendUnavailable as exc:
            logger.warning("GPU backend unavailable, using CPU: %s", exc)
        else:
            logger.info("Using GPU backend on %s", renderer.device_name)
            return renderer

    logger.info("Using CPU backend")
    return CpuRenderer()
