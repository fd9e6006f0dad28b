"""
Demo scenes and matching camera presets.
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3, Color
from .shapes import Hittable, HittableList, Sphere, MovingSphere
from .materials import Material, Lambertian, Metal, Dielectric
from .camera import ViewportCamera, LensCamera, ExposureCamera
from .sampling import resolve_rng, random_in


def two_spheres() -> HittableList:
    """A diffuse sphere resting on a large ground sphere."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.5, 0.5, 0.5))))
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.5, 0.5, 0.5))))
    return world


def three_spheres() -> HittableList:
    """Diffuse, fuzzy metal and glass spheres side by side on the ground."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(1, 0, -1), 0.5, Metal(Color(0.8, 0.6, 0.2), 0.5)))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, Dielectric(1.5)))
    return world


def random_scene(
    rng: Optional[np.random.Generator] = None,
    small_sphere_count: int = 484,
    moving_fraction: float = 0.0
) -> HittableList:
    """The classic cover scene: many small random spheres around three large ones.

    Args:
        rng: Random source for placement and materials
        small_sphere_count: Approximate number of small spheres; they are
            laid out on a square grid of this many cells
        moving_fraction: Fraction of small spheres that bounce upwards
            over the time interval [0, 1]

    Returns:
        The scene
    """
    rng = resolve_rng(rng)
    world = HittableList()
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    half = int(math.sqrt(small_sphere_count) / 2)
    clearance = 2.0 if moving_fraction > 0 else 0.9
    keep_clear = Point3(4, 0.2, 0)

    for a in range(-half, half):
        for b in range(-half, half):
            choose_material = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - keep_clear).length() <= clearance:
                continue

            material: Material
            if choose_material < 0.8:
                material = Lambertian(Vec3.random(rng=rng) * Vec3.random(rng=rng))
            elif choose_material < 0.95:
                material = Metal(Vec3.random(rng=rng), random_in(0.0, 0.5, rng))
            else:
                material = Dielectric(1.5)

            world.add(_small_sphere(center, material, moving_fraction, rng))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def _small_sphere(
    center: Point3,
    material: Material,
    moving_fraction: float,
    rng: np.random.Generator
) -> Hittable:
    if moving_fraction > 0 and rng.random() < moving_fraction:
        center1 = center + Vec3(0, 0.5 * rng.random(), 0)
        return MovingSphere(center, center1, 0.0, 1.0, 0.2, material)
    return Sphere(center, 0.2, material)


def viewport_camera(aspect_ratio: float) -> ViewportCamera:
    """Axis-aligned camera for the two and three sphere scenes."""
    return ViewportCamera.axis_aligned(aspect_ratio)


def cover_camera(
    aspect_ratio: float,
    vfov: float = 20.0,
    aperture: float = 0.1,
    focus_dist: float = 10.0
) -> LensCamera:
    """Thin lens camera framing the random scene."""
    return LensCamera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=vfov,
        aspect_ratio=aspect_ratio,
        aperture=aperture,
        focus_dist=focus_dist
    )


def exposure_camera(
    aspect_ratio: float,
    vfov: float = 20.0,
    aperture: float = 0.0,
    focus_dist: float = 10.0,
    exposure_start: float = 0.0,
    exposure_end: float = 1.0
) -> ExposureCamera:
    """Motion blur camera framing the random scene."""
    return ExposureCamera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=vfov,
        aspect_ratio=aspect_ratio,
        aperture=aperture,
        focus_dist=focus_dist,
        exposure_start=exposure_start,
        exposure_end=exposure_end
    )
