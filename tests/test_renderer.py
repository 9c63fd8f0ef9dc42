import numpy as np
import pytest

from zenfractal.camera import Camera
from zenfractal.config import Settings
from zenfractal.errors import ExpressionSyntaxError
from zenfractal.escape import CustomRecurrence
from zenfractal.fractals import FractalId
from zenfractal.renderer import FractalRenderer


@pytest.fixture
def renderer():
    return FractalRenderer(16, 10, max_iterations=24)


@pytest.fixture
def camera():
    return Camera.centered(16, 10, 5.0)


def test_render(renderer, camera):
    counts, rgba = renderer.render(camera)
    assert counts.shape == (10, 16)
    assert rgba.shape == (10, 16, 4)
    assert counts[5, 8] == 24
    # Inside points use the last (black) palette entry
    assert list(rgba[5, 8]) == [0, 0, 0, 255]


def test_invalid_expression_keeps_previous(renderer):
    assert renderer.update_settings(recurrence='z*z+c') is True
    assert renderer.formula_error is None

    assert renderer.update_settings(recurrence='z*z+') is False
    assert isinstance(renderer.recurrence, CustomRecurrence)
    assert renderer.recurrence.source == 'z*z+c'
    assert 'end of input' in renderer.formula_error


def test_update_settings(renderer):
    assert renderer.update_settings(recurrence='mandelbrot') is False
    assert renderer.update_settings(max_iterations=24) is False
    assert renderer.update_settings(max_iterations=32) is True
    assert renderer.max_iterations == 32
    assert renderer.update_settings(recurrence='octopus') is True
    assert renderer.recurrence.name == 'octopus'


def test_custom_matches_builtin(renderer, camera):
    builtin_counts, _ = renderer.render(camera)
    renderer.update_settings(recurrence='z * z + c')
    custom_counts, _ = renderer.render(camera)
    np.testing.assert_array_equal(custom_counts, builtin_counts)


def test_compute_async(renderer, camera):
    assert renderer.get_result() == (None, None, None)
    renderer.compute_async(camera)
    renderer.wait(timeout=60)

    rgba, counts, result_camera = renderer.get_result()
    assert rgba.shape == (10, 16, 4)
    assert counts.shape == (10, 16)
    assert result_camera == camera
    assert renderer.get_result() == (None, None, None)


def test_initial_expression_must_parse():
    with pytest.raises(ExpressionSyntaxError):
        FractalRenderer(4, 4, 8, recurrence='(z')


def test_from_settings():
    settings = Settings(width=6, height=4, fractal='custom', custom_expression='z*z*z+c',
                        palette='grayscale', workers=2)
    renderer = FractalRenderer.from_settings(settings)
    assert renderer.recurrence.source == 'z*z*z+c'
    assert renderer.palette.shape == (256, 4)
    counts, _ = renderer.render(Camera.centered(6, 4, 2.0))
    assert counts.shape == (4, 6)


def test_custom_fractal_id_is_ignored(renderer):
    assert renderer.update_settings(recurrence=FractalId.CUSTOM) is False
    assert renderer.recurrence.name == 'mandelbrot'
    assert renderer.update_settings(recurrence=FractalId.OCTOPUS) is True
    assert renderer.recurrence.name == 'octopus'


def test_deeply_nested_expression_keeps_previous(renderer):
    source = '(' * 2000 + 'z' + ')' * 2000
    assert renderer.update_settings(recurrence=source) is False
    assert renderer.recurrence.name == 'mandelbrot'
    assert 'nested too deeply' in renderer.formula_error
