"""
Camera module for generating primary rays.

Supports:
- Perspective projection
- Depth of field (defocus blur)
- Configurable field of view
- Arbitrary positioning via look-at
- Antialiasing by jittering samples within each pixel
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import math
import numbers

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray

logger = logging.getLogger(__name__)


@dataclass
class CameraSettings:
    """Configuration for the camera and its sampling budget.

    Invalid values raise ValueError here, before any rendering starts.
    """
    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 400
    samples_per_pixel: int = 100
    max_depth: int = 50
    vfov: float = 90.0
    lookfrom: Point3 = field(default_factory=lambda: Point3(0, 0, 0))
    lookat: Point3 = field(default_factory=lambda: Point3(0, 0, -1))
    vup: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    defocus_angle: float = 0.0
    focus_distance: float = 1.0

    def __post_init__(self):
        for name in ('image_width', 'samples_per_pixel', 'max_depth'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if not math.isfinite(self.aspect_ratio) or not self.aspect_ratio > 0:
            raise ValueError(f"aspect_ratio must be positive and finite, got {self.aspect_ratio}")
        if self.image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {self.image_width}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if not math.isfinite(self.vfov) or not 0 < self.vfov < 180:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if not self.defocus_angle >= 0:
            raise ValueError(f"defocus_angle must not be negative, got {self.defocus_angle}")
        if not math.isfinite(self.focus_distance) or not self.focus_distance > 0:
            raise ValueError(f"focus_distance must be positive and finite, got {self.focus_distance}")

        view = self.lookfrom - self.lookat
        if view.near_zero():
            raise ValueError("lookfrom and lookat must be distinct points")
        if self.vup.cross(view).near_zero():
            raise ValueError("vup must not be parallel to the viewing direction")


class Camera:
    """A camera with perspective projection and depth of field.

    All geometry is derived once from the settings and never changes
    afterwards, so one camera can be shared by every render worker.
    """

    def __init__(self, settings: CameraSettings = None):
        """Create a camera.

        Args:
            settings: Camera configuration (uses defaults if None)
        """
        self.settings = settings if settings else CameraSettings()
        s = self.settings

        self.image_width = s.image_width
        self.image_height = max(1, int(s.image_width / s.aspect_ratio))
        self.samples_per_pixel = s.samples_per_pixel
        self.max_depth = s.max_depth
        self.defocus_angle = s.defocus_angle
        self.center = s.lookfrom

        # Viewport dimensions at the focus plane
        theta = math.radians(s.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * s.focus_distance
        viewport_width = viewport_height * (self.image_width / self.image_height)

        # Compute orthonormal camera basis
        self.w = (s.lookfrom - s.lookat).normalize()  # Points backward from camera
        self.u = s.vup.cross(self.w).normalize()       # Points right
        self.v = self.w.cross(self.u)                  # Points up

        # Vectors across the horizontal and down the vertical viewport edges
        viewport_u = self.u * viewport_width
        viewport_v = -self.v * viewport_height

        self.pixel_delta_u = viewport_u / self.image_width
        self.pixel_delta_v = viewport_v / self.image_height

        viewport_upper_left = (
            self.center
            - self.w * s.focus_distance
            - viewport_u / 2
            - viewport_v / 2
        )
        self.pixel00_loc = viewport_upper_left + (self.pixel_delta_u + self.pixel_delta_v) * 0.5

        defocus_radius = s.focus_distance * math.tan(math.radians(s.defocus_angle / 2))
        self.defocus_disk_u = self.u * defocus_radius
        self.defocus_disk_v = self.v * defocus_radius

        logger.debug(
            "camera %dx%d center=%s pixel00=%s defocus_radius=%.4f",
            self.image_width, self.image_height, self.center, self.pixel00_loc, defocus_radius
        )

    def get_ray(self, i: int, j: int, rng: np.random.Generator) -> Ray:
        """Generate a ray through a random point around pixel (i, j).

        Args:
            i: Column index, 0 at the left edge
            j: Row index, 0 at the top edge
            rng: Source of uniform random numbers

        Returns:
            A ray from the camera center (or the defocus disk) through
            the sampled point on the focus plane
        """
        offset_x, offset_y = self.sample_square(rng)
        pixel_sample = (
            self.pixel00_loc
            + self.pixel_delta_u * (i + offset_x)
            + self.pixel_delta_v * (j + offset_y)
        )

        ray_origin = self.center if self.defocus_angle <= 0 else self.defocus_disk_sample(rng)
        return Ray(ray_origin, pixel_sample - ray_origin)

    @staticmethod
    def sample_square(rng: np.random.Generator) -> tuple[float, float]:
        """Return a random offset in the [-0.5, 0.5) x [-0.5, 0.5) square."""
        dx, dy = rng.random(2) - 0.5
        return float(dx), float(dy)

    def defocus_disk_sample(self, rng: np.random.Generator) -> Point3:
        """Return a random point on the camera defocus disk."""
        p = Vec3.random_in_unit_disk(rng)
        return self.center + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    def __repr__(self) -> str:
        return f"Camera({self.image_width}x{self.image_height}, center={self.center})"
