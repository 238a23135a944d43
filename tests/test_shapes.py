"""Tests for geometric shapes."""

import pytest
import math
import numpy as np

from lumentrace.vec3 import Vec3, Point3, Color
from lumentrace.ray import Ray
from lumentrace.interval import Interval
from lumentrace.shapes import Sphere, HittableList, HitRecord, hit_sphere
from lumentrace.materials import Lambertian, Metal

FORWARD = Interval(0.001, math.inf)


class TestHitRecord:
    """Test HitRecord construction."""

    def test_front_face_keeps_outward_normal(self):
        ray = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))
        rec = HitRecord.from_outward_normal(ray, 4.0, Vec3(0, 0, 1))
        assert rec.front_face is True
        assert rec.normal == Vec3(0, 0, 1)
        assert rec.point == Point3(0, 0, 1)

    def test_back_face_flips_normal(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        rec = HitRecord.from_outward_normal(ray, 1.0, Vec3(0, 0, -1))
        assert rec.front_face is False
        assert rec.normal == Vec3(0, 0, 1)


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0
        assert sphere.material is None

    def test_negative_radius_is_floored(self):
        assert Sphere(Point3(0, 0, 0), -2.0).radius == 0.0

    def test_zero_radius_never_hits(self):
        sphere = Sphere(Point3(0, 0, 0), -1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))  # Straight through the center
        assert sphere.hit(ray, FORWARD) is None

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, FORWARD)

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert abs(hit.point.z - (-1.0)) < 1e-9

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, FORWARD)

        assert hit.t > 0
        assert hit.front_face is True
        # Normal should point outward (against ray)
        assert hit.normal.z < 0

    def test_t_uses_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))
        hit = sphere.hit(ray, FORWARD)
        assert abs(hit.t - 2.0) < 1e-9

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        hit = sphere.hit(ray, FORWARD)

        assert hit is not None
        assert abs(hit.t - 1.0) < 1e-9
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))  # Ray passes above sphere
        assert sphere.hit(ray, FORWARD) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))  # Ray points away from sphere
        assert sphere.hit(ray, FORWARD) is None

    def test_near_root_outside_range_falls_back_to_far_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        # Hit is at t=4, exclude it with t_min
        hit = sphere.hit(ray, Interval(4.5, math.inf))
        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-9

    def test_both_roots_outside_range(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, Interval(0.001, 3.0)) is None

    def test_root_on_boundary_is_rejected(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        # Near root exactly at t_max and far root beyond it
        assert sphere.hit(ray, Interval(0.001, 4.0)) is None

    def test_with_material(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, FORWARD)
        assert hit.material is material

    def test_method_matches_function(self):
        sphere = Sphere(Point3(0.2, 0.1, -3), 0.7)
        ray = Ray(Point3(0, 0, 0), Vec3(0.05, 0.02, -1))
        assert sphere.hit(ray, FORWARD) == hit_sphere(sphere, ray, FORWARD)

    def test_negative_radius_bubble_shell(self):
        """A ray starting inside a sphere resolves its exit hit."""
        sphere = Sphere(Point3(0, 0, -1), 0.4)
        ray = Ray(Point3(0, 0, -1.2), Vec3(0, 0, -1))
        hit = sphere.hit(ray, FORWARD)
        assert hit is not None
        assert abs(hit.point.z - (-1.4)) < 1e-9
        assert hit.front_face is False

    def test_spheres_are_hashable(self):
        material = Lambertian(Color(0.5, 0.5, 0.5))
        a = Sphere(Point3(0, 0, -1), 0.5, material)
        b = Sphere(Point3(0, 0, -1), 0.5, material)
        assert hash(a) == hash(b)
        assert len({a, b}) == 1


class TestSphereNormals:
    """Properties of normals over many random rays."""

    def test_normals_unit_and_opposing(self):
        rng = np.random.default_rng(7)
        sphere = Sphere(Point3(0.3, -0.2, -2), 1.1)
        hits = 0
        for _ in range(300):
            origin = Point3.from_array(rng.uniform(-3, 3, 3))
            direction = Vec3.from_array(rng.uniform(-1, 1, 3))
            ray = Ray(origin, direction)
            hit = sphere.hit(ray, FORWARD)
            if hit is None:
                continue
            hits += 1
            assert abs(hit.normal.length() - 1.0) < 1e-9
            assert ray.direction.dot(hit.normal) <= 1e-12
            assert abs((hit.point - sphere.center).length() - sphere.radius) < 1e-9
        assert hits > 0


class TestHittableList:
    """Test HittableList class."""

    def test_empty_list(self):
        world = HittableList()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, FORWARD) is None
        assert len(world) == 0

    def test_add_and_iterate(self):
        a = Sphere(Point3(0, 0, -1), 0.5)
        b = Sphere(Point3(0, 0, -3), 0.5)
        world = HittableList()
        world.add(a)
        world.add(b)
        assert len(world) == 2
        assert list(world) == [a, b]

    def test_clear(self):
        world = HittableList([Sphere(Point3(0, 0, -1), 0.5)])
        world.clear()
        assert len(world) == 0

    def test_returns_nearest(self):
        # Roots at t=2 and t=5 along the same ray
        near = Sphere(Point3(0, 0, -3), 1.0, Lambertian(Color(1, 0, 0)))
        far = Sphere(Point3(0, 0, -6), 1.0, Metal(Color(0, 1, 0)))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for order in ([near, far], [far, near]):
            hit = HittableList(order).hit(ray, FORWARD)
            assert abs(hit.t - 2.0) < 1e-9
            assert hit.material is near.material

    def test_respects_query_interval(self):
        world = HittableList([
            Sphere(Point3(0, 0, -3), 1.0),
            Sphere(Point3(0, 0, -6), 1.0),
        ])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = world.hit(ray, Interval(4.5, math.inf))
        assert abs(hit.t - 5.0) < 1e-9

    def test_nested_lists(self):
        inner = HittableList([Sphere(Point3(0, 0, -3), 1.0)])
        world = HittableList([Sphere(Point3(0, 0, -10), 1.0), inner])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert abs(world.hit(ray, FORWARD).t - 2.0) < 1e-9

    def test_unknown_member_raises(self):
        world = HittableList([object()])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        with pytest.raises(TypeError):
            world.hit(ray, FORWARD)
