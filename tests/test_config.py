import json
import logging

from zenfractal.config import Settings, load_settings


def test_packaged_settings():
    settings = load_settings()
    assert settings == Settings()
    assert settings.max_iterations == 64
    assert settings.zoom == 100.0


def test_missing_file_uses_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger='zenfractal.config'):
        settings = load_settings(tmp_path / 'nope.json')
    assert settings == Settings()
    assert "Could not load" in caplog.text


def test_malformed_file_uses_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('{"max_iterations": ')
    assert load_settings(path) == Settings()


def test_partial_file(tmp_path, caplog):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'fractal': 'octopus', 'workers': 4, 'colour': 'red'}))
    with caplog.at_level(logging.WARNING, logger='zenfractal.config'):
        settings = load_settings(path)
    assert settings.fractal == 'octopus'
    assert settings.workers == 4
    assert settings.max_iterations == 64
    assert "colour" in caplog.text


def test_max_iterations_clamped():
    assert Settings.from_dict({'max_iterations': 5000}).max_iterations == 2048
    assert Settings.from_dict({'max_iterations': 0}).max_iterations == 1
