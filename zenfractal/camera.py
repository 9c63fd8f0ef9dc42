"""
Camera transform between screen pixels and fractal space.

    world  = screen / zoom + camera
    screen = (world - camera) * zoom

The camera position is the world coordinate of the top-left pixel, and
zoom is pixels per world unit.
"""

from dataclasses import dataclass, field, replace


ZOOM_IN_FACTOR = 1.1
ZOOM_OUT_FACTOR = 0.9


@dataclass(frozen=True)
class Camera:
    x: float = 0.0
    y: float = 0.0
    zoom: float = 100.0
    zoom_in_factor: float = field(default=ZOOM_IN_FACTOR, compare=False)
    zoom_out_factor: float = field(default=ZOOM_OUT_FACTOR, compare=False)

    def __post_init__(self):
        if not self.zoom > 0:
            raise ValueError(f"zoom must be > 0, got {self.zoom}")

    @classmethod
    def centered(cls, width, height, zoom=100.0, **factors):
        """Camera placing the origin in the middle of a width x height view."""
        return cls((-width / 2.0) / zoom, (-height / 2.0) / zoom, zoom, **factors)

    @classmethod
    def from_settings(cls, settings):
        """Centered camera using the viewport, zoom and zoom factors of a config.Settings."""
        return cls.centered(settings.width, settings.height, settings.zoom,
                            zoom_in_factor=settings.zoom_in_factor,
                            zoom_out_factor=settings.zoom_out_factor)

    def screen_to_world(self, screen_x, screen_y):
        return screen_x / self.zoom + self.x, screen_y / self.zoom + self.y

    def world_to_screen(self, world_x, world_y):
        return (world_x - self.x) * self.zoom, (world_y - self.y) * self.zoom

    def pan(self, dx, dy):
        """Move by a mouse drag of (dx, dy) screen pixels."""
        return replace(self, x=self.x - dx / self.zoom, y=self.y - dy / self.zoom)

    def zoom_at(self, screen_x, screen_y, direction,
                zoom_in_factor=None, zoom_out_factor=None):
        """
        Zoom in (direction > 0) or out (direction < 0), keeping the world
        point under (screen_x, screen_y) where it is on screen.

        The factors default to the camera's own.
        """
        if direction == 0:
            return self

        if direction > 0:
            factor = zoom_in_factor if zoom_in_factor is not None else self.zoom_in_factor
        else:
            factor = zoom_out_factor if zoom_out_factor is not None else self.zoom_out_factor

        before_x, before_y = self.screen_to_world(screen_x, screen_y)
        zoomed = replace(self, zoom=self.zoom * factor)

        after_x, after_y = zoomed.screen_to_world(screen_x, screen_y)
        return replace(zoomed, x=zoomed.x + (before_x - after_x),
                       y=zoomed.y + (before_y - after_y))
