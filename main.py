#!/usr/bin/env python3
"""
Lumentrace - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import math
import sys
import time
from pathlib import Path

from lumentrace.vec3 import Vec3, Color, Point3
from lumentrace.camera import Camera, CameraSettings
from lumentrace.shapes import Sphere, HittableList
from lumentrace.materials import Lambertian, Metal, Dielectric
from lumentrace.renderer import Renderer, RenderSettings
from lumentrace.color import save_image, write_ppm


def create_two_sphere_scene() -> HittableList:
    """Two touching diffuse spheres, blue on the left and red on the right."""
    world = HittableList()

    r = math.cos(math.pi / 4)
    world.add(Sphere(Point3(-r, 0, -1), r, Lambertian(Color(0, 0, 1))))
    world.add(Sphere(Point3(r, 0, -1), r, Lambertian(Color(1, 0, 0))))

    return world


def create_materials_scene() -> HittableList:
    """Create a demo scene with one sphere of each material."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    bubble = Dielectric(1.0 / 1.5)
    metal = Metal(Color(0.8, 0.6, 0.2), 1.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100, ground))
    world.add(Sphere(Point3(0, 0, -1.2), 0.5, center))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    # Air bubble inside the glass sphere
    world.add(Sphere(Point3(-1, 0, -1), 0.4, bubble))
    world.add(Sphere(Point3(1, 0, -1), 0.5, metal))

    return world


def create_normals_scene() -> HittableList:
    """Spheres without materials, shaded by their surface normals."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5))
    world.add(Sphere(Point3(0, -100.5, -1), 100))
    return world


SCENES = {
    'spheres': create_two_sphere_scene,
    'materials': create_materials_scene,
    'normals': create_normals_scene,
}


def camera_settings_for(scene: str, args: argparse.Namespace) -> CameraSettings:
    """Camera placement for each built-in scene."""
    common = dict(
        aspect_ratio=args.aspect_ratio,
        image_width=args.width,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
    )
    if scene == 'materials':
        return CameraSettings(
            vfov=20,
            lookfrom=Point3(-2, 2, 1),
            lookat=Point3(0, 0, -1),
            vup=Vec3(0, 1, 0),
            defocus_angle=args.defocus_angle,
            focus_distance=3.4,
            **common
        )
    return CameraSettings(
        vfov=90,
        lookfrom=Point3(0, 0, 0),
        lookat=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        defocus_angle=args.defocus_angle,
        focus_distance=1.0,
        **common
    )


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Lumentrace - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene spheres > image.ppm
  python main.py --scene materials --samples 50 --output render.png
  python main.py --scene normals --width 200 --samples 1 --output normals.ppm
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--aspect-ratio', type=float, default=16.0 / 9.0, help='Width / height (default: 16/9)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--defocus-angle', type=float, default=0.0, help='Defocus cone angle in degrees (default: 0)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible renders')
    parser.add_argument('--output', type=str, default='-', help='Output filename, - for PPM on stdout (default: -)')
    parser.add_argument('--scene', type=str, default='spheres', choices=sorted(SCENES),
                        help='Scene to render (default: spheres)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        stream=sys.stderr
    )

    # Validate everything before any rendering starts
    try:
        camera = Camera(camera_settings_for(args.scene, args))
        renderer = Renderer(RenderSettings(num_threads=args.threads, seed=args.seed))
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    log = sys.stderr
    print("=" * 60, file=log)
    print("Lumentrace Path Tracer", file=log)
    print("=" * 60, file=log)
    print(f"  Scene: {args.scene}", file=log)
    print(f"  Resolution: {camera.image_width}x{camera.image_height}", file=log)
    print(f"  Samples: {camera.samples_per_pixel}", file=log)
    print(f"  Max Depth: {camera.max_depth}", file=log)
    print(f"  Threads: {renderer.settings.num_threads}", file=log)

    world = SCENES[args.scene]()

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', file=log, flush=True)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    image = renderer.render(world, camera)
    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds", file=log)

    if args.output == '-':
        write_ppm(sys.stdout, image)
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        print(f"Saving to: {args.output}", file=log)
        save_image(image, output_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
