"""
Lumentrace - A Python Path Tracer

A compact Monte Carlo path tracer with support for:
- Analytic sphere primitives
- Lambertian, metal and dielectric materials
- Antialiasing and depth of field
- Multi-threaded, seed-reproducible rendering
- PPM and Pillow image output
"""

__version__ = "0.1.0"
__author__ = "Lumentrace Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .interval import Interval, EMPTY, UNIVERSE
from .shapes import Sphere, HittableList, HitRecord, Hittable, hit_sphere
from .materials import Material, Lambertian, Metal, Dielectric, ScatterResult, scatter, reflectance
from .camera import Camera, CameraSettings
from .renderer import Renderer, RenderSettings
from .color import linear_to_gamma, quantize, write_color, write_ppm, to_ldr, save_image
