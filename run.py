"""
Main runner for the worm-like chain DNA animation.

Two modes:
1. Interactive (default): animated 3D chain with parameter sliders
2. Export (--gif N): drive N frame ticks headless and save them as a GIF

Example:
    $ python run.py
    $ python run.py --gif 300 --force-x 2 --bending-rigidity 1.5
"""

import argparse
from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt

from wlcsim import (
    SimulationConfig,
    SimulationParameters,
    ParameterStore,
    ParameterValidationError,
    AnimationDriver,
    ChainPlotter,
    InteractiveViewer,
)
from wlcsim.animation import Timer


def run_export(
    config: SimulationConfig,
    store: ParameterStore,
    n_frames: int,
    name: str = "wlc_chain",
) -> Optional[Path]:
    """
    Render n_frames ticks off screen and save them as an animated GIF.

    Args:
        config:   Simulation configuration
        store:    Parameter store read once per tick
        n_frames: Number of frame ticks to record
        name:     Base name of the output file

    Returns:
        Path of the written GIF, or None if no frame was captured
    """
    timer = Timer()
    driver = AnimationDriver.from_config(store, config)

    fig = plt.figure(figsize=(6, 6))
    plotter = ChainPlotter(fig, dpi=config.frame_dpi)
    plotter.setup_camera(config.focal_length)

    def record(chain, time):
        plotter.plot(chain, time)
        plotter.capture_frame()

    driver.subscribe(record)

    print(f"🎬 Generating {n_frames} animation frames...")
    try:
        driver.run(n_frames)
        if config.verbose:
            print()  # newline after progress bar
    finally:
        # Save GIF even if interrupted mid-run
        print(f"💾 Saving GIF after {driver.frame_count} frames "
              f"({timer.total:.2f}s)...")
        output_file = plotter.save_gif(
            config.output_path(name),
            duration=config.gif_duration,
            loop=0
        )
        plotter.close()

    return output_file


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = SimulationParameters()
    parser = argparse.ArgumentParser(description="Worm-like chain DNA animation")
    parser.add_argument("--gif", type=int, default=0, metavar="N",
                        help="export N frames to a GIF instead of opening a window")
    parser.add_argument("--output-dir", type=Path, default=Path("./local/outputs/gifs"))
    parser.add_argument("--device", default="cpu")
    parser.add_argument("--force-mode", choices=["compounding", "constant"],
                        default="compounding")
    parser.add_argument("--verbose", action="store_true")

    parser.add_argument("--length", type=int, default=defaults.length)
    parser.add_argument("--persistence-length", type=float,
                        default=defaults.persistence_length)
    parser.add_argument("--temperature", type=float, default=defaults.temperature)
    parser.add_argument("--bending-rigidity", type=float,
                        default=defaults.bending_rigidity)
    parser.add_argument("--noise-level", type=float, default=defaults.noise_level)
    parser.add_argument("--force-x", type=float, default=0.0)
    parser.add_argument("--force-y", type=float, default=0.0)
    parser.add_argument("--force-z", type=float, default=0.0)
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the animation."""
    args = parse_args(argv)

    config = SimulationConfig(
        device=args.device,
        force_mode=args.force_mode,
        output_dir=args.output_dir,
        verbose=args.verbose,
    )

    try:
        store = ParameterStore(SimulationParameters(
            length=args.length,
            persistence_length=args.persistence_length,
            temperature=args.temperature,
            bending_rigidity=args.bending_rigidity,
            noise_level=args.noise_level,
            external_force=(args.force_x, args.force_y, args.force_z),
        ))
    except ParameterValidationError as e:
        print(f"❌ {e}")
        return 2

    print(f"\n{'='*60}")
    print(f"🧬 Worm-Like Chain DNA Animation")
    print(f"{'='*60}")
    print(config)
    print(store.snapshot())
    print(f"{'='*60}\n")

    if args.gif > 0:
        run_export(config, store, args.gif)
    else:
        InteractiveViewer(config, store).show()

    print(f"✅ Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
