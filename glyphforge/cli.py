"""
Command line entry point: render a scene once or interactively.
"""

from __future__ import annotations
import argparse
import logging
import re
import signal
import sys
import time
from typing import Optional, Sequence

from .camera import Camera
from .controls import CameraController, CancellationToken
from .display import DisplayError
from .log import setup_logging
from .palette import get_palette, PALETTES
from .renderer import (
    Renderer, RenderSettings, RenderMode, RenderDimensions,
    ConcreteSize, RelativeToTermSize, get_platform_info
)
from .scene import Scene
from .scenes import SCENES, load_demo
from .terminal import StreamDisplay, TerminalDisplay

logger = logging.getLogger(__name__)

MODES = {mode.value: mode for mode in RenderMode}


def parse_size(text: str) -> ConcreteSize:
    match = re.fullmatch(r"(\d+)[xX](\d+)", text)
    if not match or int(match.group(1)) < 1 or int(match.group(2)) < 1:
        raise argparse.ArgumentTypeError(f"expected COLSxROWS, got {text!r}")
    return ConcreteSize(int(match.group(1)), int(match.group(2)))


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='glyphforge',
        description='GlyphForge - path-traced scenes drawn with characters',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  glyphforge --once --size 80x24
  glyphforge --scene cornell --mode color+brightness --samples 20
  glyphforge --once --size 120x40 --snapshot out/frame.png

Interactive keys:
  w/s forward/back, a/d left/right, r/f up/down,
  arrow left/right turn, q or Esc quit
        '''
    )

    parser.add_argument('--scene', type=str, default='demo', choices=sorted(SCENES),
                        help='Scene to render (default: demo)')
    parser.add_argument('--size', type=parse_size, default=None,
                        help='Fixed output size as COLSxROWS (default: terminal size)')
    parser.add_argument('--offset-cols', type=int, default=0,
                        help='Columns added to the terminal width (default: 0)')
    parser.add_argument('--offset-rows', type=int, default=-1,
                        help='Rows added to the terminal height (default: -1)')
    parser.add_argument('--samples', type=positive_int, default=10, help='Samples per pixel (default: 10)')
    parser.add_argument('--depth', type=positive_int, default=15, help='Max ray depth (default: 15)')
    parser.add_argument('--gamma', type=float, default=2.0, help='Gamma (default: 2.0)')
    parser.add_argument('--mode', type=str, default='brightness', choices=list(MODES),
                        help='What each cell shows (default: brightness)')
    parser.add_argument('--palette', type=str, default='detailed', choices=sorted(PALETTES),
                        help='Glyph ramp (default: detailed)')
    parser.add_argument('--invert', action='store_true',
                        help='Reverse the glyph ramp for dark-on-light terminals')
    parser.add_argument('--fov', type=float, default=None, help='Override vertical field of view')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for reproducible frames')
    parser.add_argument('--once', action='store_true',
                        help='Render a single frame to stdout and exit')
    parser.add_argument('--fps', type=float, default=10.0,
                        help='Frame rate cap for interactive mode (default: 10)')
    parser.add_argument('--step', type=float, default=0.1,
                        help='Camera movement per key press (default: 0.1)')
    parser.add_argument('--snapshot', type=str, default=None,
                        help='Also save the last frame as an image')
    parser.add_argument('--log-file', type=str, default=None, help='Write logs to this file')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')

    return parser


def settings_from_args(args: argparse.Namespace) -> RenderSettings:
    return RenderSettings(
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        gamma=args.gamma,
        mode=MODES[args.mode],
        num_threads=args.threads,
        seed=args.seed,
        palette=get_palette(args.palette, args.invert),
    )


def run_once(
    renderer: Renderer,
    scene: Scene,
    camera: Camera,
    dimensions: RenderDimensions,
    out=None
):
    """Render one frame and print it."""
    return renderer.render_to(StreamDisplay(out), scene, camera, dimensions)


def run_interactive(
    renderer: Renderer,
    scene: Scene,
    camera: Camera,
    dimensions: RenderDimensions,
    token: CancellationToken,
    fps: float,
    step: float
):
    """Render frames until the token is cancelled, steering with the keyboard."""
    frame_interval = 1.0 / fps if fps > 0 else 0.0
    controller = CameraController(camera, token, step=step, turn=step)
    frame = None
    frames = 0

    with TerminalDisplay() as display:
        while not token.cancelled:
            started = time.perf_counter()
            frame = renderer.render_to(display, scene, camera, dimensions)
            frames += 1

            controller.handle_all(display.poll_keys())

            remaining = frame_interval - (time.perf_counter() - started)
            if remaining > 0:
                token.wait(remaining)

    logger.info("interactive session ended after %d frames", frames)
    return frame


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.info:
        info = get_platform_info()
        print("GlyphForge Platform Info:")
        print(f"  System: {info['system']}")
        print(f"  Machine: {info['machine']}")
        print(f"  Python: {info['python_version']}")
        print(f"  NumPy: {info['numpy_version']}")
        print(f"  CPU Cores: {info['cpu_count']}")
        return 0

    # Log lines would land on top of the frame in interactive mode
    setup_logging(log_file=args.log_file, debug=args.debug, console=args.once)

    settings = settings_from_args(args)
    scene, camera = load_demo(args.scene)
    if args.fov is not None:
        camera.vfov = args.fov

    dimensions: RenderDimensions = args.size or RelativeToTermSize(args.offset_cols, args.offset_rows)

    logger.info(
        "scene=%s objects=%d samples=%d depth=%d threads=%d mode=%s",
        args.scene, len(scene), settings.samples_per_pixel, settings.max_depth,
        settings.num_threads, settings.mode.value
    )

    renderer = Renderer(settings)
    token = CancellationToken()

    def on_signal(signum, _frame):
        token.cancel()

    try:
        if args.once:
            frame = run_once(renderer, scene, camera, dimensions)
        else:
            previous = signal.signal(signal.SIGINT, on_signal)
            try:
                frame = run_interactive(renderer, scene, camera, dimensions, token, args.fps, args.step)
            finally:
                signal.signal(signal.SIGINT, previous)
    except DisplayError as e:
        logger.error("%s", e)
        print(f"glyphforge: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    if args.snapshot and frame is not None:
        frame.save_image(args.snapshot)
        logger.info("saved snapshot to %s", args.snapshot)

    return 0


if __name__ == '__main__':
    sys.exit(main())
