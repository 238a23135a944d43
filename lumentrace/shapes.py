"""
Geometric shapes for the ray tracer.

The set of hittable kinds is closed: a ``Sphere`` or a ``HittableList`` of
them. ``HittableList.hit`` dispatches on the variant with ``match``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Optional, TYPE_CHECKING, Union
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .interval import Interval

if TYPE_CHECKING:
    from .materials import Material


@dataclass(frozen=True)
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The material at the hit point (None renders the normal)
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Optional[Material] = None

    @classmethod
    def from_outward_normal(
        cls,
        ray: Ray,
        t: float,
        outward_normal: Vec3,
        material: Optional[Material] = None
    ) -> HitRecord:
        """Build a record whose normal opposes the incoming ray.

        Args:
            ray: The incoming ray
            t: Ray parameter of the hit
            outward_normal: Unit geometric normal pointing out of the surface
            material: Material of the surface that was hit
        """
        front_face = ray.direction.dot(outward_normal) < 0
        return cls(
            point=ray.at(t),
            normal=outward_normal if front_face else -outward_normal,
            t=t,
            front_face=front_face,
            material=material
        )


@dataclass(frozen=True)
class Sphere:
    """A sphere defined by center and radius.

    A negative radius is floored to zero; a zero-radius sphere never hits.
    """
    center: Point3
    radius: float
    material: Optional[Material] = None

    def __post_init__(self):
        object.__setattr__(self, 'radius', max(0.0, float(self.radius)))

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        return hit_sphere(self, ray, ray_t)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


def hit_sphere(sphere: Sphere, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
    """Test ray-sphere intersection using the quadratic formula.

    With oc = C - O, the equation |O + tD - C|² = r² becomes
    (D·D)t² - 2(D·oc)t + (oc·oc - r²) = 0. Using h = D·oc (the half-b
    form) the roots are (h ± sqrt(h² - ac)) / a.

    The nearer root is tried first and the farther one only if the nearer
    falls outside ``ray_t``, so a ray starting inside the sphere still
    finds its exit point.
    """
    if sphere.radius == 0.0:
        return None

    oc = sphere.center - ray.origin
    a = ray.direction.length_squared()
    h = ray.direction.dot(oc)
    c = oc.length_squared() - sphere.radius * sphere.radius

    discriminant = h * h - a * c
    if discriminant < 0:
        return None

    sqrtd = math.sqrt(discriminant)

    # Find the nearest root in the acceptable range
    root = (h - sqrtd) / a
    if not ray_t.surrounds(root):
        root = (h + sqrtd) / a
        if not ray_t.surrounds(root):
            return None

    outward_normal = (ray.at(root) - sphere.center) / sphere.radius
    return HitRecord.from_outward_normal(ray, root, outward_normal, sphere.material)


@dataclass
class HittableList:
    """A collection of hittable objects.

    Order only matters for ties at exactly equal t.
    """
    objects: list[Hittable] = field(default_factory=list)

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        closest_hit: Optional[HitRecord] = None
        closest_t = ray_t.max

        for obj in self.objects:
            window = Interval(ray_t.min, closest_t)
            match obj:
                case Sphere():
                    hit_record = hit_sphere(obj, ray, window)
                case HittableList():
                    hit_record = obj.hit(ray, window)
                case _:
                    raise TypeError(f"not a hittable: {type(obj).__name__}")

            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)


Hittable = Union[Sphere, HittableList]
