"""
Renderer module - the heart of the ray tracer.

Implements:
- Path tracing with a hard bounce limit
- Monte Carlo averaging of jittered samples per pixel
- Multi-threaded row-parallel rendering with per-row random streams
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional
import logging
import math
import os
import threading
import time

import numpy as np

from .vec3 import Color
from .ray import Ray
from .interval import Interval
from .camera import Camera
from .shapes import Hittable, HitRecord
from .materials import scatter

logger = logging.getLogger(__name__)

# t_min > 0 keeps roundoff from re-hitting the surface a ray just left
HIT_RANGE = Interval(0.001, math.inf)

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)


@dataclass
class RenderSettings:
    """Configuration for the renderer.

    Attributes:
        num_threads: Worker threads, 0 = one per CPU
        seed: Seed for the random streams, None = fresh entropy
    """
    num_threads: int = 0
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_threads < 0:
            raise ValueError(f"num_threads must not be negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0).
                Calls are serialized and arrive in increasing order.
        """
        self._progress_callback = callback

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            world: The scene to render (a Sphere or HittableList)
            camera: The camera to render from

        Returns:
            Linear RGB image as numpy array of shape (height, width, 3),
            rows ordered top to bottom
        """
        width = camera.image_width
        height = camera.image_height

        # One independent stream per row: the image depends on the seed only,
        # never on how rows are spread over threads.
        row_seeds = np.random.SeedSequence(self.settings.seed).spawn(height)

        lock = threading.Lock()
        completed_rows = [0]

        def render_row(j: int) -> np.ndarray:
            rng = np.random.default_rng(row_seeds[j])
            row = np.empty((width, 3), dtype=np.float64)
            for i in range(width):
                row[i] = self.render_pixel(camera, world, i, j, rng).to_array()

            with lock:
                completed_rows[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_rows[0] / height)
            return row

        logger.info(
            "rendering %dx%d, %d samples/pixel, max depth %d, %d thread(s)",
            width, height, camera.samples_per_pixel, camera.max_depth, self.settings.num_threads
        )
        start = time.perf_counter()

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                rows = list(executor.map(render_row, range(height)))
        else:
            rows = [render_row(j) for j in range(height)]

        logger.info("render finished in %.2fs", time.perf_counter() - start)
        return np.stack(rows)

    def render_pixel(
        self,
        camera: Camera,
        world: Hittable,
        i: int,
        j: int,
        rng: np.random.Generator
    ) -> Color:
        """Estimate the color of pixel (i, j) as the mean of its samples."""
        pixel_color = Color(0, 0, 0)
        for _ in range(camera.samples_per_pixel):
            ray = camera.get_ray(i, j, rng)
            pixel_color = pixel_color + self.ray_color(ray, camera.max_depth, world, rng)
        return pixel_color / camera.samples_per_pixel

    def ray_color(self, ray: Ray, depth: int, world: Hittable, rng: np.random.Generator) -> Color:
        """Compute the color for a ray using path tracing.

        The bounce recursion is unrolled into a loop that carries the
        product of attenuations; each pass spends one unit of depth.

        Args:
            ray: The ray to trace
            depth: Maximum number of bounces, 0 gathers no light
            world: The scene to trace against
            rng: Source of uniform random numbers

        Returns:
            The computed color for this ray
        """
        throughput = WHITE
        for _ in range(depth):
            hit_record = world.hit(ray, HIT_RANGE)

            if hit_record is None:
                return throughput * self._sky_color(ray)

            # No material - return normal as color (for debugging)
            if hit_record.material is None:
                return throughput * self._normal_color(hit_record)

            scatter_result = scatter(hit_record.material, ray, hit_record, rng)
            if scatter_result is None:
                return BLACK

            throughput = throughput * scatter_result.attenuation
            ray = scatter_result.scattered_ray

        # Bounce limit exceeded, no more light is gathered
        return BLACK

    @staticmethod
    def _sky_color(ray: Ray) -> Color:
        """Blend white to sky blue by the ray's vertical direction."""
        unit_direction = ray.direction.normalize()
        a = 0.5 * (unit_direction.y + 1.0)
        return WHITE * (1.0 - a) + SKY_BLUE * a

    @staticmethod
    def _normal_color(hit_record: HitRecord) -> Color:
        return (hit_record.normal + WHITE) * 0.5
