"""
Surface materials and their scattering models.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

Materials are immutable values. ``scatter`` dispatches over the closed set
of variants and draws all randomness from the generator it is given.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING, Union
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


@dataclass(frozen=True)
class Lambertian:
    """Diffuse material with Lambertian (ideal matte) scattering.

    Attributes:
        albedo: The base color (RGB, each component 0-1)
    """
    albedo: Color


@dataclass(frozen=True)
class Metal:
    """Metallic material with specular reflection.

    Attributes:
        albedo: The reflection color
        fuzz: Perturbation radius of the reflected ray, clamped into [0, 1]
    """
    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'fuzz', min(max(float(self.fuzz), 0.0), 1.0))


@dataclass(frozen=True)
class Dielectric:
    """Dielectric (glass-like) material with refraction.

    Attributes:
        refractive_index: Index of refraction relative to the enclosing
            medium (1.0 = air, 1.5 = glass, 2.4 = diamond)
    """
    refractive_index: float = 1.5


Material = Union[Lambertian, Metal, Dielectric]

WHITE = Color(1.0, 1.0, 1.0)


def scatter(
    material: Material,
    ray_in: Ray,
    rec: HitRecord,
    rng: np.random.Generator
) -> Optional[ScatterResult]:
    """Compute the scattered ray and attenuation.

    Args:
        material: The material that was hit
        ray_in: The incoming ray
        rec: The hit record produced by the intersection test
        rng: Source of uniform random numbers

    Returns:
        ScatterResult if ray scatters, None if absorbed
    """
    match material:
        case Lambertian():
            return _scatter_lambertian(material, rec, rng)
        case Metal():
            return _scatter_metal(material, ray_in, rec, rng)
        case Dielectric():
            return _scatter_dielectric(material, ray_in, rec, rng)
        case _:
            raise TypeError(f"not a material: {type(material).__name__}")


def _scatter_lambertian(mat: Lambertian, rec: HitRecord, rng: np.random.Generator) -> ScatterResult:
    scatter_direction = rec.normal + Vec3.random_unit_vector(rng)

    # Catch degenerate scatter direction
    if scatter_direction.near_zero():
        scatter_direction = rec.normal

    return ScatterResult(Ray(rec.point, scatter_direction), mat.albedo)


def _scatter_metal(
    mat: Metal,
    ray_in: Ray,
    rec: HitRecord,
    rng: np.random.Generator
) -> Optional[ScatterResult]:
    reflected = ray_in.direction.reflect(rec.normal).normalize()
    reflected = reflected + Vec3.random_unit_vector(rng) * mat.fuzz

    # Fuzz pushed the ray below the surface: absorb it
    if reflected.dot(rec.normal) <= 0:
        return None
    return ScatterResult(Ray(rec.point, reflected), mat.albedo)


def _scatter_dielectric(
    mat: Dielectric,
    ray_in: Ray,
    rec: HitRecord,
    rng: np.random.Generator
) -> ScatterResult:
    # Entering the medium from outside vs. leaving it
    refraction_ratio = 1.0 / mat.refractive_index if rec.front_face else mat.refractive_index

    unit_direction = ray_in.direction.normalize()
    cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

    cannot_refract = refraction_ratio * sin_theta > 1.0

    if cannot_refract or rng.random() < reflectance(cos_theta, refraction_ratio):
        direction = unit_direction.reflect(rec.normal)
    else:
        direction = unit_direction.refract(rec.normal, refraction_ratio)

    return ScatterResult(Ray(rec.point, direction), WHITE)


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance.

    A ratio of exactly 1 means there is no optical interface, so nothing is
    reflected at any angle.
    """
    if ref_idx == 1.0:
        return 0.0
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)
