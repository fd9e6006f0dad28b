"""
Interactive rendering session.

An InteractiveScene owns a scene, an exposure camera and a running
per-pixel accumulation of samples. A front end (a window, a notebook, a
web page) calls :meth:`InteractiveScene.accumulate` repeatedly to refine
the image and :meth:`InteractiveScene.process_keyboard` to move the
camera, which discards the samples gathered from the old viewpoint.
Moving and rendering never overlap: both take the session lock.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional, Tuple, Union

import numpy as np

from .vec3 import Color
from .camera import ExposureCamera, MoveDirection
from .shapes import HittableList
from .renderer import SHADOW_EPSILON, sample_pixel, finalize_pixels, check_pixel
from .scenes import random_scene, exposure_camera

logger = logging.getLogger(__name__)


class InteractiveScene:
    """A progressively refined render of one scene from a movable camera."""

    def __init__(
        self,
        width: int,
        height: int,
        max_depth: int = 50,
        camera: Optional[ExposureCamera] = None,
        world: Optional[HittableList] = None,
        seed: Optional[int] = None
    ):
        """Create a session.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            max_depth: Maximum bounces per path
            camera: Camera to render from (defaults to the cover scene framing)
            world: Scene to render (empty if omitted)
            seed: Seed for the session's random generator
        """
        check_pixel(0, 0, width, height)
        self.width = width
        self.height = height
        self.max_depth = max_depth
        self.camera = camera if camera is not None else exposure_camera(width / height)
        self.world = world if world is not None else HittableList()
        self.rng = np.random.default_rng(seed)
        self.t_min = SHADOW_EPSILON

        self._lock = threading.Lock()
        self._sums = np.zeros((height, width, 3), dtype=np.float64)
        self._passes = 0

    @property
    def sample_count(self) -> int:
        """Number of full passes accumulated since the last reset."""
        return self._passes

    def reset(self) -> None:
        """Discard all accumulated samples."""
        self._sums.fill(0.0)
        self._passes = 0

    def random_scene(self, small_sphere_count: int) -> None:
        """Replace the scene with a random scene where some spheres move."""
        with self._lock:
            self.world = random_scene(self.rng, small_sphere_count, moving_fraction=0.3)
            self.reset()

    def process_keyboard(self, direction: Union[MoveDirection, int]) -> None:
        """Move the camera one step and restart accumulation."""
        with self._lock:
            self.camera.process_keyboard(direction)
            self.reset()

    def render_by_position(self, x: int, y: int) -> Tuple[float, float, float]:
        """Trace one sample through pixel (x, y), y counted from the bottom.

        Returns:
            Linear (r, g, b) radiance of the sample
        """
        check_pixel(x, y, self.width, self.height)
        with self._lock:
            color = self._sample(x, y)
        r, g, b = color
        return r, g, b

    def render(self) -> np.ndarray:
        """Trace one sample for every pixel, top row first.

        Returns:
            Linear radiance of shape (height, width, 3)
        """
        with self._lock:
            return self._render_frame()

    def accumulate(self) -> int:
        """Add one sample per pixel to the running accumulation.

        Returns:
            The number of passes accumulated so far
        """
        with self._lock:
            self._sums += self._render_frame()
            self._passes += 1
            passes = self._passes
        logger.debug("Accumulated pass %d", passes)
        return passes

    def image(self) -> np.ndarray:
        """Gamma corrected mean of the accumulated samples (black if none)."""
        with self._lock:
            return finalize_pixels(self._sums, max(self._passes, 1))

    def _render_frame(self) -> np.ndarray:
        pixels = np.zeros((self.height, self.width, 3), dtype=np.float64)
        for row in range(self.height):
            y = self.height - 1 - row
            for x in range(self.width):
                pixels[row, x] = self._sample(x, y).to_array()
        return pixels

    def _sample(self, x: int, y: int) -> Color:
        return sample_pixel(
            self.camera, self.world, x, y, self.width, self.height,
            self.max_depth, self.rng, self.t_min
        )
