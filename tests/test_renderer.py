import logging

import numpy as np
import pytest

import julia.gpu
from julia.colors import julia_color
from julia.escape import escape_time
from julia.params import ColorMode, ViewParams
from julia.renderer import BackendUnavailable, CpuRenderer, Renderer, create_renderer


@pytest.fixture
def params():
    return ViewParams(center=(20, 12), scale=50)


def test_cpu_frame_layout(params):
    frame = CpuRenderer().render(params, 40, 24)
    assert frame.shape == (24, 40, 4)
    assert frame.dtype == np.uint8
    assert frame.flags["C_CONTIGUOUS"]

    flat = frame.ravel()
    for x, y in [(0, 0), (39, 0), (5, 17), (39, 23)]:
        offset = (y * 40 + x) * 4
        expected = julia_color(escape_time(x, y, params), params.max_iterations, params.color_mode)
        assert tuple(flat[offset:offset + 4]) == expected


def test_cpu_black_and_white_frame_only_has_two_colors(params):
    params.set_color_mode(ColorMode.BLACK_WHITE)
    frame = CpuRenderer().render(params, 40, 24)
    colors = {tuple(pixel) for pixel in frame.reshape(-1, 4)}
    assert colors <= {(0, 0, 0, 255), (255, 255, 255, 255)}
    assert len(colors) == 2


def test_cpu_zero_iterations_renders_filled_set(params):
    params.set_max_iterations(0)
    frame = CpuRenderer().render(params, 8, 8)
    assert np.all(frame == np.array([0, 0, 0, 255], dtype=np.uint8))


def test_cpu_iterations(params):
    counts = CpuRenderer().iterations(params, 10, 6)
    assert counts.shape == (6, 10)
    assert counts[3, 7] == escape_time(7, 3, params)


def test_base_renderer_is_abstract(params):
    with pytest.raises(NotImplementedError):
        Renderer().render(params, 1, 1)


def test_create_renderer_cpu_when_gpu_not_wanted():
    assert isinstance(create_renderer(prefer_gpu=False), CpuRenderer)


def test_create_renderer_falls_back_when_gpu_fails(monkeypatch, caplog):
    def unavailable():
        raise BackendUnavailable("no device")

    monkeypatch.setattr(julia.gpu, "GpuRenderer", unavailable)
    with caplog.at_level(logging.WARNING, logger="julia.renderer"):
        renderer = create_renderer(prefer_gpu=True)

    assert isinstance(renderer, CpuRenderer)
    assert renderer.name == "cpu"
    assert "no device" in caplog.text


def test_create_renderer_uses_gpu_when_available(monkeypatch):
    class FakeGpu(Renderer):
        name = "gpu"
        device_name = "fake"

    monkeypatch.setattr(julia.gpu, "GpuRenderer", FakeGpu)
    assert create_renderer(prefer_gpu=True).name == "gpu"
