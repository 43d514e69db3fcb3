"""
Renderer module - the heart of the path tracer.

Implements:
- A recursive one-sample path estimator (`ray_color`)
- Per-pixel Monte Carlo averaging with jittered camera rays
- Scanline-parallel rendering on a thread or process pool, with one
  independently seeded random generator per scanline
"""

from __future__ import annotations
import logging
import math
import os
import time
from concurrent.futures import Executor, ThreadPoolExecutor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np

from . import sampling
from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .image import to_ldr, save_image

logger = logging.getLogger(__name__)

# Lower bound of the hit range; avoids re-hitting the surface a ray leaves from
SHADOW_ACNE_EPSILON = 0.001

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)


def sky_color(ray: Ray) -> Color:
    """Blend white and sky blue by the height of the unit ray direction."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def ray_color(ray: Ray, world: Hittable, depth: int, background: Optional[Color] = None) -> Color:
    """Estimate the light arriving along a ray.

    Args:
        ray: The ray to trace
        world: The scene (usually a BVH root)
        depth: Remaining bounce budget; zero returns black without tracing
        background: Solid color for escaping rays; None uses the sky gradient

    Returns:
        The (unclamped) color carried by this path sample
    """
    if depth <= 0:
        return BLACK

    hit_record = world.hit(ray, SHADOW_ACNE_EPSILON, math.inf)

    if hit_record is None:
        return sky_color(ray) if background is None else background

    if hit_record.material is None:
        # No material - shade by normal (for debugging)
        return (hit_record.normal + WHITE) * 0.5

    result = hit_record.material.scatter(ray, hit_record)
    if result is None:
        return BLACK

    return result.attenuation * ray_color(result.scattered_ray, world, depth - 1, background)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 800
    height: int = 600
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0  # 0 = auto-detect
    use_processes: bool = False
    seed: Optional[int] = None
    background_color: Optional[Color] = None
    use_sky_gradient: bool = True
    gamma: float = 2.0

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.background_color is None:
            self.background_color = Color(0.0, 0.0, 0.0)
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def background(self) -> Optional[Color]:
        """Color for escaping rays, or None when the sky gradient is used."""
        return None if self.use_sky_gradient else self.background_color


class Renderer:
    """Path tracing renderer that parallelises over scanlines."""

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
            callback: Function that takes progress as float (0.0 to 1.0);
                always invoked from the thread that called `render`
        """
        self._progress_callback = callback

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the averaged pixel colors.

        Args:
            world: The scene to render (any Hittable, typically a BVH root)
            camera: The camera to render from

        Returns:
            Linear image as numpy array of shape (height, width, 3), row 0 at the top
        """
        settings = self.settings
        height = settings.height
        image = np.zeros((height, settings.width, 3), dtype=np.float64)
        row_seeds = sampling.spawn_seeds(settings.seed, height)

        workers = min(settings.num_threads, height)
        logger.info(
            "Rendering %dx%d, %d spp, depth %d on %d %s",
            settings.width, height, settings.samples_per_pixel, settings.max_depth,
            workers, "process(es)" if settings.use_processes and workers > 1 else "thread(s)"
        )
        start = time.perf_counter()

        if workers <= 1:
            for row in range(height):
                image[row] = self.render_scanline(world, camera, row, row_seeds[row])
                self._report_progress(row + 1, height)
        else:
            with self._make_executor(workers, world, camera) as executor:
                if settings.use_processes:
                    futures = {
                        executor.submit(_render_scanline_in_worker, row, row_seeds[row]): row
                        for row in range(height)
                    }
                else:
                    futures = {
                        executor.submit(self.render_scanline, world, camera, row, row_seeds[row]): row
                        for row in range(height)
                    }
                for done, future in enumerate(as_completed(futures), start=1):
                    image[futures[future]] = future.result()
                    self._report_progress(done, height)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return image

    def render_scanline(
        self,
        world: Hittable,
        camera: Camera,
        row: int,
        seed: sampling.SeedLike = None
    ) -> np.ndarray:
        """Render one image row (0 = top) with its own random generator.

        Returns:
            Array of shape (width, 3) with the averaged color of each pixel
        """
        sampling.seed(seed)
        scanline = np.empty((self.settings.width, 3), dtype=np.float64)
        for col in range(self.settings.width):
            scanline[col] = self.render_pixel(world, camera, col, row).to_array()
        return scanline

    def render_pixel(self, world: Hittable, camera: Camera, col: int, row: int) -> Color:
        """Average `samples_per_pixel` jittered path samples for one pixel.

        Draws from the calling thread's generator; seed it first for
        reproducible results.
        """
        settings = self.settings
        # Guard single-pixel-wide images against a zero denominator
        u_scale = max(settings.width - 1, 1)
        v_scale = max(settings.height - 1, 1)
        flipped_row = settings.height - 1 - row
        rng = sampling.get_rng()

        total = np.zeros(3, dtype=np.float64)
        for _ in range(settings.samples_per_pixel):
            u = (col + rng.random()) / u_scale
            v = (flipped_row + rng.random()) / v_scale
            ray = camera.get_ray(u, v)
            total += ray_color(ray, world, settings.max_depth, settings.background).to_array()

        return Color.from_array(total / settings.samples_per_pixel)

    def to_ldr(self, hdr_image: np.ndarray) -> np.ndarray:
        """Convert a rendered image to 8-bit with this renderer's gamma."""
        return to_ldr(hdr_image, self.settings.gamma)

    def save_image(self, image: np.ndarray, filename: Union[str, Path]) -> None:
        """Save image to file (extension determines format)."""
        save_image(image, filename, self.settings.gamma)

    def _make_executor(self, workers: int, world: Hittable, camera: Camera) -> Executor:
        if self.settings.use_processes:
            # The scene is pickled once per worker process, not once per task
            return ProcessPoolExecutor(
                max_workers=workers,
                initializer=_init_worker,
                initargs=(self.settings, world, camera)
            )
        return ThreadPoolExecutor(max_workers=workers)

    def _report_progress(self, done: int, total: int) -> None:
        if self._progress_callback:
            self._progress_callback(done / total)


# State installed in each worker process by _init_worker
_worker_state: dict = {}


def _init_worker(settings: RenderSettings, world: Hittable, camera: Camera) -> None:
    _worker_state['renderer'] = Renderer(settings)
    _worker_state['world'] = world
    _worker_state['camera'] = camera


def _render_scanline_in_worker(row: int, seed: np.random.SeedSequence) -> np.ndarray:
    renderer = _worker_state['renderer']
    return renderer.render_scanline(_worker_state['world'], _worker_state['camera'], row, seed)
