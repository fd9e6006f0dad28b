"""
Camera module for generating primary rays.

Four camera models, each adding one capability to the previous:
- ViewportCamera: fixed viewport given directly by its corner and edges
- LookAtCamera: viewport oriented by look-from / look-at / up and a field of view
- LensCamera: thin lens depth of field (defocus blur)
- ExposureCamera: shutter time window (motion blur) and keyboard repositioning
"""

from __future__ import annotations
import logging
import math
from enum import IntEnum
from typing import Optional, Union

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .sampling import random_double

logger = logging.getLogger(__name__)

# Distance look_from moves per keyboard step
MOVE_STEP = 1.2


class MoveDirection(IntEnum):
    """Discrete movement codes understood by ExposureCamera.process_keyboard."""
    FORWARD = 0
    BACKWARD = 1
    LEFT = 2
    RIGHT = 3

    @classmethod
    def from_key(cls, key: str) -> Optional[MoveDirection]:
        """Map a w/a/s/d or arrow key name to a direction, or None."""
        return _KEY_BINDINGS.get(key)


_KEY_BINDINGS = {
    'w': MoveDirection.FORWARD,
    'ArrowUp': MoveDirection.FORWARD,
    's': MoveDirection.BACKWARD,
    'ArrowDown': MoveDirection.BACKWARD,
    'a': MoveDirection.LEFT,
    'ArrowLeft': MoveDirection.LEFT,
    'd': MoveDirection.RIGHT,
    'ArrowRight': MoveDirection.RIGHT,
}


class ViewportCamera:
    """A pinhole camera with an explicitly specified viewport rectangle."""

    def __init__(
        self,
        origin: Point3,
        lower_left_corner: Point3,
        horizontal: Vec3,
        vertical: Vec3
    ):
        """Create a camera from its viewport geometry.

        Args:
            origin: Eye position
            lower_left_corner: Lower-left corner of the viewport in world space
            horizontal: Vector spanning the viewport from left to right
            vertical: Vector spanning the viewport from bottom to top
        """
        self.origin = origin
        self.lower_left_corner = lower_left_corner
        self.horizontal = horizontal
        self.vertical = vertical

    @classmethod
    def axis_aligned(
        cls,
        aspect_ratio: float,
        viewport_height: float = 2.0,
        focal_length: float = 1.0,
        origin: Point3 = Point3(0, 0, 0)
    ) -> ViewportCamera:
        """Build a camera at ``origin`` looking down -Z with +Y up."""
        horizontal = Vec3(aspect_ratio * viewport_height, 0, 0)
        vertical = Vec3(0, viewport_height, 0)
        lower_left_corner = origin - horizontal / 2 - vertical / 2 - Vec3(0, 0, focal_length)
        return cls(origin, lower_left_corner, horizontal, vertical)

    def _viewport_point(self, s: float, t: float) -> Point3:
        return self.lower_left_corner + self.horizontal * s + self.vertical * t

    def get_ray(self, s: float, t: float, rng: Optional[np.random.Generator] = None) -> Ray:
        """Generate a ray for the given UV coordinates on the image plane.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)
            rng: Random source (unused by pinhole cameras)

        Returns:
            A ray from the camera through the specified viewport point
        """
        return Ray(self.origin, self._viewport_point(s, t) - self.origin)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(origin={self.origin}, lower_left_corner={self.lower_left_corner})"


class LookAtCamera(ViewportCamera):
    """A pinhole camera positioned with look-from / look-at / up."""

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
        """
        self.look_from = look_from
        self.look_at = look_at
        self.vup = vup
        self.vfov = vfov
        self.aspect_ratio = aspect_ratio
        self._update_camera()

    def _focus_distance(self) -> float:
        return 1.0

    def _update_camera(self) -> None:
        """Derive the basis and viewport from the positioning parameters."""
        theta = math.radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = self.aspect_ratio * viewport_height
        focus_dist = self._focus_distance()

        # Compute orthonormal camera basis
        self.w = (self.look_from - self.look_at).normalize()  # Points backward from camera
        self.u = self.vup.cross(self.w).normalize()            # Points right
        self.v = self.w.cross(self.u)                          # Points up

        self.origin = self.look_from
        self.horizontal = self.u * viewport_width * focus_dist
        self.vertical = self.v * viewport_height * focus_dist
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - self.w * focus_dist
        )


class LensCamera(LookAtCamera):
    """A look-at camera with a thin lens for depth of field.

    Points at ``focus_dist`` from the camera stay sharp; everything else
    blurs in proportion to the aperture.
    """

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            aperture: Lens aperture for depth of field (0 = pinhole)
            focus_dist: Distance to the focus plane
        """
        self.aperture = aperture
        self.focus_dist = focus_dist
        self.lens_radius = aperture / 2
        super().__init__(look_from, look_at, vup, vfov, aspect_ratio)

    def _focus_distance(self) -> float:
        return self.focus_dist

    def get_ray(self, s: float, t: float, rng: Optional[np.random.Generator] = None) -> Ray:
        # Depth of field: random point on lens
        if self.lens_radius > 0:
            rd = Vec3.random_in_unit_disk(rng) * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y
        else:
            offset = Vec3(0, 0, 0)

        direction = self._viewport_point(s, t) - self.origin - offset
        return Ray(self.origin + offset, direction)


class ExposureCamera(LensCamera):
    """A thin lens camera whose rays are spread over a shutter interval.

    The camera position can be moved with :meth:`process_keyboard`. Moving
    re-derives the whole camera, so it must not happen while a render
    using this camera is in flight.
    """

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0,
        exposure_start: float = 0.0,
        exposure_end: float = 1.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            aperture: Lens aperture for depth of field (0 = pinhole)
            focus_dist: Distance to the focus plane
            exposure_start: Time when shutter opens (for motion blur)
            exposure_end: Time when shutter closes (for motion blur)
        """
        self.exposure_start = exposure_start
        self.exposure_end = exposure_end
        super().__init__(look_from, look_at, vup, vfov, aspect_ratio, aperture, focus_dist)

    def get_ray(self, s: float, t: float, rng: Optional[np.random.Generator] = None) -> Ray:
        ray = super().get_ray(s, t, rng)

        # Motion blur: random time within shutter interval
        time = self.exposure_start + random_double(rng) * (self.exposure_end - self.exposure_start)
        return Ray(ray.origin, ray.direction, time)

    def process_keyboard(self, direction: Union[MoveDirection, int]) -> None:
        """Step the camera position and re-derive the camera.

        Args:
            direction: A MoveDirection (or its integer code). Unknown codes
                are ignored.
        """
        try:
            direction = MoveDirection(direction)
        except ValueError:
            logger.debug("Ignoring unknown movement code %r", direction)
            return

        front = (self.look_from - self.look_at).normalize()
        right = self.u

        if direction is MoveDirection.FORWARD:
            offset = front * -MOVE_STEP
        elif direction is MoveDirection.BACKWARD:
            offset = front * MOVE_STEP
        elif direction is MoveDirection.LEFT:
            offset = right * -MOVE_STEP
        else:
            offset = right * MOVE_STEP

        self.look_from = self.look_from + offset
        self._update_camera()
        logger.debug("Camera moved %s to %s", direction.name.lower(), self.look_from)
