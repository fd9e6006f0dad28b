"""Tests for the camera models."""

import pytest
import numpy as np

from pathforge.vec3 import Vec3, Point3
from pathforge.camera import (
    ViewportCamera, LookAtCamera, LensCamera, ExposureCamera, MoveDirection, MOVE_STEP
)


def close(a, b, tol=1e-9):
    return (a - b).length() < tol


class TestViewportCamera:
    """Test the axis-aligned viewport camera."""

    def test_axis_aligned_geometry(self):
        cam = ViewportCamera.axis_aligned(aspect_ratio=2.0)
        assert cam.origin == Point3(0, 0, 0)
        assert cam.horizontal == Vec3(4, 0, 0)
        assert cam.vertical == Vec3(0, 2, 0)
        assert cam.lower_left_corner == Point3(-2, -1, -1)

    def test_center_ray(self):
        cam = ViewportCamera.axis_aligned(aspect_ratio=2.0)
        ray = cam.get_ray(0.5, 0.5)
        assert ray.origin == Point3(0, 0, 0)
        assert ray.direction == Vec3(0, 0, -1)

    def test_corner_rays(self):
        cam = ViewportCamera.axis_aligned(aspect_ratio=1.0)
        assert cam.get_ray(0, 0).direction == Vec3(-1, -1, -1)
        assert cam.get_ray(1, 1).direction == Vec3(1, 1, -1)

    def test_offset_origin(self):
        cam = ViewportCamera.axis_aligned(aspect_ratio=1.0, origin=Point3(1, 2, 3))
        ray = cam.get_ray(0.5, 0.5)
        assert ray.origin == Point3(1, 2, 3)
        assert close(ray.direction, Vec3(0, 0, -1))

    def test_time_is_zero(self):
        cam = ViewportCamera.axis_aligned(aspect_ratio=1.0)
        assert cam.get_ray(0.3, 0.7).time == 0.0


class TestLookAtCamera:
    """Test the oriented pinhole camera."""

    def test_camera_basis_vectors(self):
        cam = LookAtCamera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -1),
            vup=Vec3(0, 1, 0),
            vfov=90,
            aspect_ratio=1.0
        )
        # w points backward, u right, v up
        assert close(cam.w, Vec3(0, 0, 1))
        assert close(cam.u, Vec3(1, 0, 0))
        assert close(cam.v, Vec3(0, 1, 0))

    def test_basis_is_orthonormal(self):
        cam = LookAtCamera(
            look_from=Point3(13, 2, 3),
            look_at=Point3(0, 0, 0),
            vup=Vec3(0, 1, 0),
            vfov=20,
            aspect_ratio=16 / 9
        )
        for axis in (cam.u, cam.v, cam.w):
            assert abs(axis.length() - 1.0) < 1e-12
        assert abs(cam.u.dot(cam.v)) < 1e-12
        assert abs(cam.u.dot(cam.w)) < 1e-12
        assert abs(cam.v.dot(cam.w)) < 1e-12

    def test_viewport_size_from_fov(self):
        cam = LookAtCamera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -1),
            vfov=90,
            aspect_ratio=2.0
        )
        # tan(45 deg) = 1 so the viewport is 2 high and 4 wide at distance 1
        assert abs(cam.vertical.length() - 2.0) < 1e-12
        assert abs(cam.horizontal.length() - 4.0) < 1e-12

    def test_center_ray_points_at_target(self):
        cam = LookAtCamera(
            look_from=Point3(5, 5, 5),
            look_at=Point3(0, 0, 0),
            vup=Vec3(0, 1, 0),
            vfov=60,
            aspect_ratio=1.0
        )
        ray = cam.get_ray(0.5, 0.5)
        target = (Point3(0, 0, 0) - cam.origin).normalize()
        assert abs(ray.direction.normalize().dot(target) - 1.0) < 1e-12

    def test_narrow_fov(self):
        narrow = LookAtCamera(Point3(0, 0, 0), Point3(0, 0, -1), vfov=20, aspect_ratio=1.0)
        wide = LookAtCamera(Point3(0, 0, 0), Point3(0, 0, -1), vfov=90, aspect_ratio=1.0)

        center = Vec3(0, 0, -1)
        assert (narrow.get_ray(1, 1).direction.normalize().dot(center)
                > wide.get_ray(1, 1).direction.normalize().dot(center))

    def test_looking_down(self):
        cam = LookAtCamera(
            look_from=Point3(0, 10, 0),
            look_at=Point3(0, 0, 0),
            vup=Vec3(0, 0, -1),
            vfov=90,
            aspect_ratio=1.0
        )
        assert cam.get_ray(0.5, 0.5).direction.y < 0


class TestLensCamera:
    """Test depth of field."""

    def test_pinhole_fixed_origin(self):
        cam = LensCamera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -10),
            vfov=90,
            aspect_ratio=1.0,
            aperture=0.0,
            focus_dist=10.0
        )
        for _ in range(10):
            assert cam.get_ray(0.5, 0.5).origin == cam.origin

    def test_dof_varies_origin_within_lens(self):
        cam = LensCamera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -10),
            vfov=90,
            aspect_ratio=1.0,
            aperture=2.0,
            focus_dist=10.0
        )
        rng = np.random.default_rng(5)
        origins = [cam.get_ray(0.5, 0.5, rng).origin for _ in range(100)]

        xs = [o.x for o in origins]
        assert max(xs) - min(xs) > 0.1
        for o in origins:
            # Offsets stay on the lens disk in the u/v plane
            assert (o - cam.origin).length() < cam.lens_radius + 1e-12
            assert abs(o.z) < 1e-12

    def test_focus_plane_stays_sharp(self):
        cam = LensCamera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -1),
            vfov=60,
            aspect_ratio=1.5,
            aperture=1.0,
            focus_dist=4.0
        )
        rng = np.random.default_rng(9)
        expected = cam.lower_left_corner + cam.horizontal * 0.25 + cam.vertical * 0.75
        for _ in range(50):
            ray = cam.get_ray(0.25, 0.75, rng)
            # Every lens sample passes through the same point on the focus plane
            assert close(ray.at(1.0), expected, 1e-9)

    def test_viewport_scaled_by_focus_distance(self):
        near = LensCamera(Point3(0, 0, 0), Point3(0, 0, -1), vfov=90, aspect_ratio=1.0, focus_dist=1.0)
        far = LensCamera(Point3(0, 0, 0), Point3(0, 0, -1), vfov=90, aspect_ratio=1.0, focus_dist=3.0)
        assert abs(far.vertical.length() - 3 * near.vertical.length()) < 1e-12
        assert close(far.lower_left_corner, Point3(-3, -3, -3))


class TestExposureCamera:
    """Test shutter time and keyboard repositioning."""

    def make_camera(self, **kwargs):
        params = dict(
            look_from=Point3(13, 2, 3),
            look_at=Point3(0, 0, 0),
            vup=Vec3(0, 1, 0),
            vfov=20,
            aspect_ratio=2.0,
            aperture=0.0,
            focus_dist=10.0,
            exposure_start=0.0,
            exposure_end=1.0
        )
        params.update(kwargs)
        return ExposureCamera(**params)

    def test_ray_times_within_exposure(self):
        cam = self.make_camera(exposure_start=0.25, exposure_end=0.75)
        rng = np.random.default_rng(0)
        times = [cam.get_ray(0.5, 0.5, rng).time for _ in range(200)]
        assert all(0.25 <= t <= 0.75 for t in times)
        assert max(times) - min(times) > 0.3

    def test_zero_length_exposure(self):
        cam = self.make_camera(exposure_start=0.5, exposure_end=0.5)
        assert cam.get_ray(0.5, 0.5).time == 0.5

    def test_move_forward_and_back(self):
        cam = self.make_camera()
        start = cam.look_from
        front = (cam.look_from - cam.look_at).normalize()

        cam.process_keyboard(MoveDirection.FORWARD)
        assert close(cam.look_from, start - front * MOVE_STEP)
        assert (cam.look_from - cam.look_at).length() < (start - cam.look_at).length()

        cam.process_keyboard(MoveDirection.BACKWARD)
        assert close(cam.look_from, start)

    def test_move_sideways_uses_right_vector(self):
        cam = self.make_camera()
        start = cam.look_from
        right = cam.u

        cam.process_keyboard(MoveDirection.RIGHT)
        assert close(cam.look_from, start + right * MOVE_STEP)

    def test_move_left_accepts_integer_code(self):
        cam = self.make_camera()
        start = cam.look_from
        right = cam.u

        cam.process_keyboard(2)
        assert close(cam.look_from, start - right * MOVE_STEP)

    def test_move_rederives_camera(self):
        cam = self.make_camera()
        old_w = cam.w
        cam.process_keyboard(MoveDirection.RIGHT)

        assert cam.origin == cam.look_from
        assert close(cam.w, (cam.look_from - cam.look_at).normalize())
        assert not close(cam.w, old_w, 1e-6)
        # Still looking at the target
        ray = cam.get_ray(0.5, 0.5)
        assert abs(ray.direction.normalize().dot((cam.look_at - cam.look_from).normalize()) - 1) < 1e-9

    def test_unknown_code_is_ignored(self):
        cam = self.make_camera()
        start = cam.look_from
        cam.process_keyboard(7)
        assert cam.look_from == start

    @pytest.mark.parametrize("key,direction", [
        ('w', MoveDirection.FORWARD),
        ('ArrowUp', MoveDirection.FORWARD),
        ('s', MoveDirection.BACKWARD),
        ('a', MoveDirection.LEFT),
        ('ArrowRight', MoveDirection.RIGHT),
    ])
    def test_key_bindings(self, key, direction):
        assert MoveDirection.from_key(key) is direction

    def test_unbound_key(self):
        assert MoveDirection.from_key('q') is None
