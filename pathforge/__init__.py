"""
pathforge - A Python Monte Carlo Path Tracer

A compact path tracing core with support for:
- Diffuse, metal and glass materials
- Static and moving spheres
- Pinhole, thin lens (depth of field) and exposure (motion blur) cameras
- Multi-threaded, seed-reproducible sample accumulation
- Progressive interactive rendering with a movable camera
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color, lerp
from .ray import Ray
from .shapes import HitRecord, Hittable, Sphere, MovingSphere, HittableList
from .materials import ScatterResult, Material, DefaultMaterial, Lambertian, Metal, Dielectric
from .camera import ViewportCamera, LookAtCamera, LensCamera, ExposureCamera, MoveDirection, MOVE_STEP
from .renderer import (
    SHADOW_EPSILON, RenderSettings, Renderer,
    sky_color, ray_color, sample_pixel, render_pixel, render_all,
    accumulate_samples, finalize_pixels
)
from .session import InteractiveScene
from .image import to_rgb8, write_ppm, save_image
