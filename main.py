#!/usr/bin/env python3
"""
Pathforge - A Monte Carlo path tracer in Python

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from pathforge.bvh import build_bvh
from pathforge.image import write_ppm
from pathforge.renderer import Renderer, RenderSettings
from pathforge.scene_parser import SceneParseError, load_scene
from pathforge.scenes import SCENES, default_camera

logger = logging.getLogger('pathforge')


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Pathforge - A Monte Carlo path tracer in Python',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene random --output render.png
  python main.py --scene fog --width 640 --height 360 --samples 200 --processes
  python main.py --scene-file scene.yaml --seed 7 --output scene.ppm
  python main.py --scene three --output - > three.ppm
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=225, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of workers (0=auto)')
    parser.add_argument('--processes', action='store_true',
                        help='Render on a process pool instead of threads')
    parser.add_argument('--seed', type=int, default=None, help='Seed for reproducible renders')
    parser.add_argument('--output', type=str, default='output/render.png',
                        help="Output filename, or '-' for a P3 PPM on stdout")
    parser.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Built-in scene to render (default: random)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML/JSON scene description (overrides --scene and size options)')
    parser.add_argument('--no-bvh', action='store_true',
                        help='Intersect the flat object list instead of a BVH')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        stream=sys.stderr
    )

    # The image itself may be going to stdout; keep chatter on stderr
    out = sys.stderr

    print("=" * 60, file=out)
    print("Pathforge Path Tracer", file=out)
    print("=" * 60, file=out)

    try:
        if args.scene_file:
            print(f"\nLoading scene file: {args.scene_file}", file=out)
            world, camera, settings = load_scene(args.scene_file)
            if args.seed is not None:
                settings.seed = args.seed
            settings.use_processes = settings.use_processes or args.processes
        else:
            settings = RenderSettings(
                width=args.width,
                height=args.height,
                samples_per_pixel=args.samples,
                max_depth=args.depth,
                num_threads=args.threads,
                use_processes=args.processes,
                seed=args.seed
            )
            print(f"\nCreating scene: {args.scene}", file=out)
            if args.scene == 'random':
                world = SCENES[args.scene](args.seed)
            else:
                world = SCENES[args.scene]()
            camera = default_camera(args.scene, settings.width / settings.height)
    except (SceneParseError, ValueError) as e:
        logger.error("%s", e)
        return 1

    print(f"\nRender Settings:", file=out)
    print(f"  Resolution: {settings.width}x{settings.height}", file=out)
    print(f"  Samples: {settings.samples_per_pixel}", file=out)
    print(f"  Max Depth: {settings.max_depth}", file=out)
    print(f"  Workers: {settings.num_threads} ({'processes' if settings.use_processes else 'threads'})",
          file=out)
    print(f"  Seed: {settings.seed}", file=out)
    print(f"  Objects in scene: {len(world)}", file=out)

    # An empty scene renders as pure background; there is nothing to accelerate
    if not args.no_bvh and len(world) > 0:
        try:
            world = build_bvh(world, camera.shutter_open, camera.shutter_close)
        except ValueError as e:
            logger.error("Cannot accelerate scene: %s", e)
            return 1

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True, file=out)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...", file=out)
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds", file=out)
    print(f"  Samples per second: "
          f"{(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}", file=out)

    if args.output == '-':
        write_ppm(renderer.to_ldr(image), sys.stdout)
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        print(f"\nSaving to: {args.output}", file=out)
        renderer.save_image(image, output_path)

    print("\nDone!", file=out)
    return 0


if __name__ == '__main__':
    sys.exit(main())
