"""GPU backend: the escape-time loop and coloring as a PyCUDA kernel.

One thread evaluates one pixel. The kernel is compiled once when the renderer
is created; any failure to load PyCUDA, create a context or compile raises
``BackendUnavailable`` so the caller can fall back to the CPU.
"""

import logging
import math

import numpy as np

from .params import MAX_ITERATIONS_LIMIT, ColorMode
from .renderer import BackendUnavailable, Renderer

logger = logging.getLogger(__name__)

CUDA_KERNEL = r"""
#include <math.h>

// ============================================================
// Escape-time loop. The loop bound is fixed at compile time;
// max_iter is honoured through the early break.
// ============================================================
__device__ int escape_time(
    int px, int py,
    double c_re, double c_im,
    double center_x, double center_y,
    double scale, double escape_radius,
    int max_iter
)
{
    double zx = ((double)px - center_x) / scale;
    double zy = ((double)py - center_y) / scale;
    int iter = max_iter;

    for (int i = 0; i < MAX_ITERATION_BOUND; i++) {
        if (i >= max_iter) break;

        double nx = zx * zx - zy * zy + c_re;
        double ny = zx * zy + zy * zx + c_im;
        zx = nx;
        zy = ny;

        // nan fails the comparison too
        if (!(sqrt(zx * zx + zy * zy) <= escape_radius)) {
            iter = i;
            break;
        }
    }
    return iter;
}

// ============================================================
// HSL -> RGB, chroma form. h in [0, 1), s and l in [0, 1].
// ============================================================
__device__ void hsl_to_rgb(double h, double s, double l,
                           double *r, double *g, double *b)
{
    double c = (1.0 - fabs(2.0 * l - 1.0)) * s;
    double x = c * (1.0 - fabs(fmod(h * 6.0, 2.0) - 1.0));
    double m = l - c / 2.0;

    if (h < 1.0 / 6.0)      { *r = c; *g = x; *b = 0.0; }
    else if (h < 2.0 / 6.0) { *r = x; *g = c; *b = 0.0; }
    else if (h < 3.0 / 6.0) { *r = 0.0; *g = c; *b = x; }
    else if (h < 4.0 / 6.0) { *r = 0.0; *g = x; *b = c; }
    else if (h < 5.0 / 6.0) { *r = x; *g = 0.0; *b = c; }
    else                    { *r = c; *g = 0.0; *b = x; }

    *r += m;
    *g += m;
    *b += m;
}

__device__ unsigned char to_byte(double v)
{
    return (unsigned char)floor(v * 255.0 + 0.5);
}

__global__ void julia_iterations(
    int *iter_buf,
    int width, int height,
    double c_re, double c_im,
    double center_x, double center_y,
    double scale, double escape_radius,
    int max_iter
)
{
    int px = blockIdx.x * blockDim.x + threadIdx.x;
    int py = blockIdx.y * blockDim.y + threadIdx.y;
    if (px >= width || py >= height) return;

    iter_buf[py * width + px] = escape_time(
        px, py, c_re, c_im, center_x, center_y, scale, escape_radius, max_iter);
}

// color_mode: 0 = colorful, 1 = black and white
__global__ void julia_render(
    unsigned char *output,
    int width, int height,
    double c_re, double c_im,
    double center_x, double center_y,
    double scale, double escape_radius,
    int max_iter,
    int color_mode
)
{
    int px = blockIdx.x * blockDim.x + threadIdx.x;
    int py = blockIdx.y * blockDim.y + threadIdx.y;
    if (px >= width || py >= height) return;

    int iter = escape_time(
        px, py, c_re, c_im, center_x, center_y, scale, escape_radius, max_iter);

    int idx = (py * width + px) * 4;
    unsigned char r, g, b;

    if (iter >= max_iter) {
        // Filled set: black when colorful, white in black and white
        r = g = b = (color_mode == 0) ? 0 : 255;
    } else if (color_mode == 0) {
        double fr, fg, fb;
        hsl_to_rgb((double)iter / (double)max_iter, 1.0, 0.5, &fr, &fg, &fb);
        r = to_byte(fr);
        g = to_byte(fg);
        b = to_byte(fb);
    } else {
        r = g = b = 0;
    }

    output[idx]     = r;
    output[idx + 1] = g;
    output[idx + 2] = b;
    output[idx + 3] = 255;
}
"""

BLOCK_SIZE = (16, 16, 1)

# Contraction into fma would change rounding relative to the CPU loop
COMPILE_OPTIONS = [
    f"-DMAX_ITERATION_BOUND={MAX_ITERATIONS_LIMIT}",
    "--fmad=false",
]

COLOR_MODE_FLAGS = {
    ColorMode.COLORFUL: 0,
    ColorMode.BLACK_WHITE: 1,
}


def _load_cuda():
    try:
        import pycuda.driver as cuda
        from pycuda.compiler import SourceModule
    except ImportError as exc:
        raise BackendUnavailable(f"PyCUDA is not installed ({exc})") from exc

    try:
        import pycuda.autoinit  # noqa: F401
    except (cuda.Error, RuntimeError) as exc:
        raise BackendUnavailable(f"no usable CUDA device ({exc})") from exc

    return cuda, SourceModule


class GpuRenderer(Renderer):
    """Evaluates every pixel in parallel on a CUDA device."""

    name = "gpu"

    def __init__(self):
        self._cuda, SourceModule = _load_cuda()
        try:
            self.module = SourceModule(CUDA_KERNEL, options=COMPILE_OPTIONS)
        except (self._cuda.Error, OSError) as exc:
            raise BackendUnavailable(f"kernel compilation failed ({exc})") from exc

        self.k_iterations = self.module.get_function("julia_iterations")
        self.k_render = self.module.get_function("julia_render")
        self.device_name = self._cuda.Context.get_device().name()

        self._buffer_shape = None
        self.gpu_rgb = None
        self.gpu_iter = None

    def _alloc_gpu_buffers(self, width, height):
        if self._buffer_shape == (width, height):
            return
        self._free_gpu_buffers()
        self.gpu_rgb = self._cuda.mem_alloc(width * height * 4)
        self.gpu_iter = self._cuda.mem_alloc(width * height * np.dtype(np.int32).itemsize)
        self._buffer_shape = (width, height)
        logger.debug("Allocated GPU buffers for %dx%d", width, height)

    def _free_gpu_buffers(self):
        if self.gpu_rgb is not None:
            self.gpu_rgb.free()
            self.gpu_iter.free()
        self.gpu_rgb = None
        self.gpu_iter = None
        self._buffer_shape = None

    @staticmethod
    def _grid(width, height):
        grid_x = math.ceil(width / BLOCK_SIZE[0])
        grid_y = math.ceil(height / BLOCK_SIZE[1])
        return (grid_x, grid_y, 1)

    @staticmethod
    def _view_args(params, width, height):
        center_x, center_y = params.center
        return (
            np.int32(width), np.int32(height),
            np.float64(params.c.re), np.float64(params.c.im),
            np.float64(center_x), np.float64(center_y),
            np.float64(params.scale), np.float64(params.escape_radius),
            np.int32(params.max_iterations),
        )

    def iterations(self, params, width, height):
        host_buf = np.empty((height, width), dtype=np.int32)
        if host_buf.size == 0:
            return host_buf
        self._alloc_gpu_buffers(width, height)
        self.k_iterations(
            self.gpu_iter,
            *self._view_args(params, width, height),
            block=BLOCK_SIZE, grid=self._grid(width, height),
        )
        self._cuda.memcpy_dtoh(host_buf, self.gpu_iter)
        return host_buf

    def render(self, params, width, height):
        host_buf = np.empty((height, width, 4), dtype=np.uint8)
        if host_buf.size == 0:
            return host_buf
        self._alloc_gpu_buffers(width, height)
        self.k_render(
            self.gpu_rgb,
            *self._view_args(params, width, height),
            np.int32(COLOR_MODE_FLAGS[params.color_mode]),
            block=BLOCK_SIZE, grid=self._grid(width, height),
        )
        self._cuda.memcpy_dtoh(host_buf, self.gpu_rgb)
        return host_buf

    def close(self):
        self._free_gpu_buffers()
