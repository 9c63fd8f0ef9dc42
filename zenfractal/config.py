"""
Settings for a render session, loaded from settings.json.

The file next to this module holds the defaults. A different file can be
passed to load_settings(); missing keys fall back to the defaults below.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)


SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


@dataclass(frozen=True)
class Settings:
    width: int = 1280
    height: int = 720
    max_iterations: int = 64
    max_iterations_limit: int = 2048
    zoom: float = 100.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    fractal: str = 'mandelbrot'
    custom_expression: str = 'z*z+c'
    scalar_type: str = 'float64'
    palette: str = 'ember'
    workers: int = 1

    @classmethod
    def from_dict(cls, data):
        """Build settings from a dict, ignoring (and warning about) unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        settings = cls(**{k: v for k, v in data.items() if k in known})
        return settings.clamped()

    def clamped(self):
        """Copy with max_iterations kept within [1, max_iterations_limit]."""
        limit = max(1, self.max_iterations_limit)
        max_iterations = min(max(1, self.max_iterations), limit)
        if max_iterations != self.max_iterations:
            logger.warning("max_iterations %d out of range, using %d",
                           self.max_iterations, max_iterations)
            return replace(self, max_iterations=max_iterations)
        return self


def load_settings(path=None):
    """
    Load settings from a JSON file (the packaged settings.json by default).

    A missing or malformed file is reported and the defaults are used.
    """
    settings_path = path or SETTINGS_PATH
    try:
        with open(settings_path, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", settings_path, e)
        return Settings()

    if not isinstance(data, dict):
        logger.warning("Could not load %s: expected a JSON object", settings_path)
        return Settings()
    return Settings.from_dict(data)
