#!/usr/bin/env python3
"""
pathforge - A Python Monte Carlo Path Tracer

Main entry point for rendering the demo scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np

from pathforge.renderer import Renderer, RenderSettings
from pathforge.image import save_image
from pathforge import scenes


SCENES = ('cover', 'motion', 'three', 'two')


def build_scene(args, aspect_ratio: float):
    """Create the world and camera selected on the command line."""
    if args.scene == 'two':
        return scenes.two_spheres(), scenes.viewport_camera(aspect_ratio)
    if args.scene == 'three':
        return scenes.three_spheres(), scenes.viewport_camera(aspect_ratio)

    rng = np.random.default_rng(args.seed)
    if args.scene == 'motion':
        world = scenes.random_scene(rng, args.spheres, moving_fraction=0.3)
        camera = scenes.exposure_camera(
            aspect_ratio,
            vfov=args.vfov,
            aperture=args.aperture,
            focus_dist=args.focus_dist,
            exposure_start=args.exposure[0],
            exposure_end=args.exposure[1]
        )
        return world, camera

    world = scenes.random_scene(rng, args.spheres)
    camera = scenes.cover_camera(
        aspect_ratio,
        vfov=args.vfov,
        aperture=args.aperture,
        focus_dist=args.focus_dist
    )
    return world, camera


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='pathforge - A Python Monte Carlo Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene three --output three.png
  python main.py --scene cover --width 384 --height 216 --samples 50 --output cover.ppm
  python main.py --scene motion --exposure 0 1 --seed 7 --output motion.png
        '''
    )

    parser.add_argument('--width', type=int, default=384, help='Image width (default: 384)')
    parser.add_argument('--height', type=int, default=216, help='Image height (default: 216)')
    parser.add_argument('--samples', type=int, default=50, help='Samples per pixel (default: 50)')
    parser.add_argument('--depth', type=int, default=50, help='Max bounce depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--batch', type=int, default=1, help='Samples per batch (default: 1)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible render')
    parser.add_argument('--scene', type=str, default='cover', choices=SCENES,
                        help='Scene to render (default: cover)')
    parser.add_argument('--spheres', type=int, default=484,
                        help='Small sphere count for the random scenes (default: 484)')
    parser.add_argument('--vfov', type=float, default=20.0, help='Vertical field of view in degrees')
    parser.add_argument('--aperture', type=float, default=0.1, help='Lens aperture (0 = pinhole)')
    parser.add_argument('--focus-dist', type=float, default=10.0, help='Distance to the focus plane')
    parser.add_argument('--exposure', type=float, nargs=2, default=(0.0, 1.0), metavar=('START', 'END'),
                        help='Shutter open and close times for the motion scene')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            samples_per_batch=args.batch,
            num_threads=args.threads,
            seed=args.seed
        )
    except ValueError as exc:
        parser.error(str(exc))

    # Print header
    print("=" * 60)
    print("pathforge Path Tracer")
    print("=" * 60)

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")

    print(f"\nCreating scene: {args.scene}")
    world, camera = build_scene(args, settings.aspect_ratio)
    print(f"  Objects in scene: {len(world)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    save_image(image, output_path)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
