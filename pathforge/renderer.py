"""
Renderer module - the heart of the path tracer.

Implements:
- The radiance integrator (ray_color)
- Per-pixel Monte Carlo sampling with gamma 2 correction
- Full-frame rendering in row-major order
- Multi-threaded rendering over independent sample batches
"""

from __future__ import annotations
import logging
import math
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Tuple

import numpy as np

from .vec3 import Color, lerp
from .ray import Ray
from .shapes import Hittable
from .sampling import resolve_rng, spawn_generators

logger = logging.getLogger(__name__)

# Lower bound on hit distances; keeps a scattered ray from re-hitting the
# surface it starts on because of floating point error.
SHADOW_EPSILON = 0.001

WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


class RayGenerator(Protocol):
    """Anything with a ``get_ray(s, t, rng)`` method, i.e. every camera."""

    def get_ray(self, s: float, t: float, rng: Optional[np.random.Generator] = None) -> Ray:
        ...


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 384
    height: int = 216
    samples_per_pixel: int = 50
    max_depth: int = 50
    samples_per_batch: int = 1
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None
    t_min: float = SHADOW_EPSILON

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Image must be at least 2x2 pixels, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.samples_per_batch < 1:
            raise ValueError(f"samples_per_batch must be positive, got {self.samples_per_batch}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def sky_color(ray: Ray) -> Color:
    """Vertical white-to-blue gradient seen by rays that escape the scene."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return lerp(t, WHITE, SKY_BLUE)


def ray_color(
    ray: Ray,
    world: Hittable,
    depth: int,
    rng: Optional[np.random.Generator] = None,
    t_min: float = SHADOW_EPSILON
) -> Color:
    """Compute the radiance carried back along a ray.

    Follows the path bounce by bounce, multiplying in each material's
    attenuation, until the path escapes to the sky, is absorbed, or runs
    out of depth.

    Args:
        ray: The ray to trace
        world: The scene to trace against
        depth: Maximum number of bounces
        rng: Random source for material scattering
        t_min: Smallest accepted hit distance

    Returns:
        The computed color for this ray (black when depth is exhausted)
    """
    attenuation = WHITE
    while depth > 0:
        hit_record = world.hit(ray, t_min, math.inf)

        if hit_record is None:
            return attenuation * sky_color(ray)

        scatter_result = hit_record.material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return BLACK

        attenuation = attenuation * scatter_result.attenuation
        ray = scatter_result.scattered_ray
        depth -= 1

    return BLACK


def check_pixel(x: int, y: int, width: int, height: int) -> None:
    if width < 2 or height < 2:
        raise ValueError(f"Image must be at least 2x2 pixels, got {width}x{height}")
    if not 0 <= x < width:
        raise ValueError(f"x = {x} is out of range, max is {width - 1}")
    if not 0 <= y < height:
        raise ValueError(f"y = {y} is out of range, max is {height - 1}")


def sample_pixel(
    camera: RayGenerator,
    world: Hittable,
    x: int,
    y: int,
    width: int,
    height: int,
    max_depth: int,
    rng: Optional[np.random.Generator] = None,
    t_min: float = SHADOW_EPSILON
) -> Color:
    """Trace one jittered camera ray through pixel (x, y).

    ``y`` counts rows from the bottom of the image. The result is linear
    radiance, before averaging and gamma correction.
    """
    rng = resolve_rng(rng)
    u = (x + rng.random()) / (width - 1)
    v = (y + rng.random()) / (height - 1)
    ray = camera.get_ray(u, v, rng)
    return ray_color(ray, world, max_depth, rng, t_min)


def render_pixel(
    camera: RayGenerator,
    world: Hittable,
    x: int,
    y: int,
    width: int,
    height: int,
    samples: int,
    max_depth: int,
    rng: Optional[np.random.Generator] = None,
    t_min: float = SHADOW_EPSILON
) -> Tuple[float, float, float]:
    """Average ``samples`` samples of pixel (x, y) and gamma correct.

    Args:
        camera: Camera generating the primary rays
        world: The scene
        x: Column, 0 = left
        y: Row, 0 = bottom
        width: Image width in pixels
        height: Image height in pixels
        samples: Number of samples to average
        max_depth: Maximum bounces per path
        rng: Random source

    Returns:
        Gamma corrected (r, g, b)

    Raises:
        ValueError: If (x, y) lies outside the image or samples < 1
    """
    check_pixel(x, y, width, height)
    if samples < 1:
        raise ValueError(f"samples must be positive, got {samples}")
    rng = resolve_rng(rng)

    pixel_color = BLACK
    for _ in range(samples):
        pixel_color = pixel_color + sample_pixel(camera, world, x, y, width, height, max_depth, rng, t_min)

    r, g, b = (pixel_color / samples).sqrt()
    return r, g, b


def render_all(
    camera: RayGenerator,
    world: Hittable,
    width: int,
    height: int,
    samples: int,
    max_depth: int,
    rng: Optional[np.random.Generator] = None,
    t_min: float = SHADOW_EPSILON
) -> np.ndarray:
    """Render every pixel in row-major order, top row first.

    Returns:
        Gamma corrected image of shape (height, width, 3); row 0 is the top
    """
    rng = resolve_rng(rng)
    image = np.zeros((height, width, 3), dtype=np.float64)

    for row in range(height):
        y = height - 1 - row
        for x in range(width):
            image[row, x] = render_pixel(camera, world, x, y, width, height, samples, max_depth, rng, t_min)

    return image


def accumulate_samples(
    camera: RayGenerator,
    world: Hittable,
    width: int,
    height: int,
    samples: int,
    max_depth: int,
    rng: Optional[np.random.Generator] = None,
    t_min: float = SHADOW_EPSILON
) -> np.ndarray:
    """Sum ``samples`` full passes over the image into one buffer.

    Each pass traces one sample for every pixel. The buffer holds linear
    radiance sums with row 0 at the top; buffers from independent batches
    can be added together before :func:`finalize_pixels`.
    """
    rng = resolve_rng(rng)
    buffer = np.zeros((height, width, 3), dtype=np.float64)

    for _ in range(samples):
        for row in range(height):
            y = height - 1 - row
            for x in range(width):
                color = sample_pixel(camera, world, x, y, width, height, max_depth, rng, t_min)
                buffer[row, x] += color.to_array()

    return buffer


def finalize_pixels(buffer: np.ndarray, samples: int) -> np.ndarray:
    """Turn summed radiance into averaged, gamma 2 corrected colors."""
    return np.sqrt(buffer / samples)


class Renderer:
    """Path tracing renderer that spreads sample batches over threads.

    Every batch traces the whole frame into its own buffer with its own
    random generator, so batches share nothing but the read-only scene
    and camera. With a fixed seed the result does not depend on the
    number of threads.
    """

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
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def _batch_sizes(self) -> list[int]:
        total = self.settings.samples_per_pixel
        per_batch = self.settings.samples_per_batch
        sizes = [per_batch] * (total // per_batch)
        if total % per_batch:
            sizes.append(total % per_batch)
        return sizes

    def accumulate(self, world: Hittable, camera: RayGenerator) -> np.ndarray:
        """Render all batches and return the summed linear radiance."""
        s = self.settings
        sizes = self._batch_sizes()
        generators = spawn_generators(s.seed, len(sizes))
        completed = [0]

        logger.debug("Rendering %d batch(es) on %d thread(s)", len(sizes), s.num_threads)

        def render_batch(index: int) -> np.ndarray:
            buffer = accumulate_samples(
                camera, world, s.width, s.height, sizes[index], s.max_depth,
                generators[index], s.t_min
            )
            completed[0] += 1
            logger.debug("Batch %d finished (%d sample(s))", index, sizes[index])
            if self._progress_callback:
                self._progress_callback(completed[0] / len(sizes))
            return buffer

        if s.num_threads > 1 and len(sizes) > 1:
            with ThreadPoolExecutor(max_workers=s.num_threads) as executor:
                buffers = list(executor.map(render_batch, range(len(sizes))))
        else:
            buffers = [render_batch(i) for i in range(len(sizes))]

        # Sum in batch order so the result is independent of scheduling
        total = np.zeros((s.height, s.width, 3), dtype=np.float64)
        for buffer in buffers:
            total += buffer
        return total

    def render(self, world: Hittable, camera: RayGenerator) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            world: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Gamma corrected image of shape (height, width, 3), top row first
        """
        start = time.perf_counter()
        image = finalize_pixels(self.accumulate(world, camera), self.settings.samples_per_pixel)
        logger.info(
            "Rendered %dx%d at %d spp in %.2fs",
            self.settings.width, self.settings.height,
            self.settings.samples_per_pixel, time.perf_counter() - start
        )
        return image
