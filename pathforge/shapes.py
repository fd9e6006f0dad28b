"""
Geometric shapes for the path tracer.

Each shape implements the Hittable protocol with a `hit` method. The
scene itself is a HittableList, which answers the same query by
reducing over its members.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material, DefaultMaterial


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The material of the object that was hit
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool = True
    material: Material = field(default_factory=DefaultMaterial)

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


def _check_interval(t_min: float, t_max: float) -> None:
    if t_min > t_max:
        raise ValueError(f"Expected t_max >= t_min, got t_min={t_min}, t_max={t_max}")


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Lower bound of the open interval of accepted t values
            t_max: Upper bound of the open interval of accepted t values

        Returns:
            HitRecord for the nearest accepted intersection, None otherwise

        Raises:
            ValueError: If t_min > t_max
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (must be positive)
            material: Material for shading (absorbs everything if omitted)
        """
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = radius
        self.material = material if material is not None else DefaultMaterial()

    def center_at(self, time: float) -> Point3:
        """Center position at the given time."""
        return self.center

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0, solved here with b = 2·half_b.
        """
        _check_interval(t_min, t_max)

        center = self.center_at(ray.time)
        oc = ray.origin - center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (-half_b - sqrtd) / a
        if not t_min < root < t_max:
            root = (-half_b + sqrtd) / a
            if not t_min < root < t_max:
                return None

        point = ray.at(root)
        outward_normal = (point - center) / self.radius

        hit_record = HitRecord(
            point=point,
            normal=outward_normal,
            t=root,
            material=self.material
        )
        hit_record.set_face_normal(ray, outward_normal)

        return hit_record

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class MovingSphere(Sphere):
    """A sphere that moves linearly between two positions over time.

    Used for motion blur effects. The position is extrapolated for times
    outside [time0, time1].
    """

    def __init__(
        self,
        center0: Point3,
        center1: Point3,
        time0: float,
        time1: float,
        radius: float,
        material: Optional[Material] = None
    ):
        """Create a moving sphere.

        Args:
            center0: Center position at time0
            center1: Center position at time1
            time0: Start time
            time1: End time (must differ from time0)
            radius: Radius of the sphere
            material: Material for shading
        """
        if time1 == time0:
            raise ValueError(f"MovingSphere needs distinct times, got time0=time1={time0}")
        super().__init__(center0, radius, material)
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1

    def center_at(self, time: float) -> Point3:
        """Get the center position at a given time."""
        t = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * t

    def __repr__(self) -> str:
        return (f"MovingSphere(center0={self.center0}, center1={self.center1}, "
                f"time0={self.time0}, time1={self.time1}, radius={self.radius})")


class HittableList(Hittable):
    """An unordered collection of hittable objects.

    Objects are added while the scene is being built; the list is treated
    as read-only while it is being rendered.
    """

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        _check_interval(t_min, t_max)

        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
