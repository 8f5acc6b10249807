"""Headless host: run a ROM for a fixed number of frames without a window."""

import argparse
import os
import sys
from typing import Iterable, Optional, Sequence

import jax

from jaxchip.config import EmulatorConfig
from jaxchip.emulator import create_machine, run_frame, set_key, sound_active
from jaxchip.errors import Chip8Error
from jaxchip.logging import EmulatorLogger, frame_progress_bar
from jaxchip.rendering import save_frame
from jaxchip.state import EmulatorState


def run(
    rom_path: str,
    frames: int,
    config: EmulatorConfig = EmulatorConfig(),
    held_keys: Iterable[int] = (),
    seed: Optional[int] = None,
    logger: Optional[EmulatorLogger] = None,
    progress: bool = False,
) -> EmulatorState:
    """Load `rom_path` and drive it for `frames` host frames.

    Each frame runs `config.instructions_per_frame` instructions followed by
    one timer tick. Faults propagate as `Chip8Error` after being logged.
    """
    logger = logger or EmulatorLogger(log_level=config.log_level)
    rng = jax.random.PRNGKey(seed) if seed is not None else None

    try:
        state = create_machine(rom_path, rng=rng, increment_index=config.increment_index)
    except Chip8Error as e:
        logger.log_fault(e)
        raise
    logger.log_rom_loaded(rom_path, os.path.getsize(rom_path))

    for key in held_keys:
        state = set_key(state, key, True)

    beeping_frames = 0
    with frame_progress_bar(frames, disable=not progress) as bar:
        for _ in range(frames):
            try:
                next_state = run_frame(state, config.instructions_per_frame)
            except Chip8Error as e:
                logger.log_fault(e, state)
                raise
            state = next_state
            beeping_frames += sound_active(state)
            bar.update(1)

    logger.log_registers(state)
    if beeping_frames:
        logger.debug(f"Sound timer active for {beeping_frames} frames")
    logger.log_run_end(frames, frames * config.instructions_per_frame)
    return state


def reset(
    state: EmulatorState,
    rom_path: str,
    config: EmulatorConfig,
    logger: EmulatorLogger,
) -> EmulatorState:
    """Reload `rom_path` into a fresh machine, keeping `state` if that fails."""
    try:
        new_state = create_machine(rom_path, increment_index=config.increment_index)
    except Chip8Error as e:
        logger.log_fault(e)
        logger.warning("Reset failed, continuing with the current machine")
        return state
    logger.info("Reset")
    return new_state


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a CHIP-8 ROM headlessly"
    )
    parser.add_argument("rom", type=str, help="Path to the CHIP-8 ROM")
    parser.add_argument(
        "--frames",
        type=int,
        default=600,
        help="Number of 1/fps frames to run (default: 600)",
    )
    parser.add_argument(
        "--instruction_frequency",
        type=int,
        default=540,
        help="CPU clock rate in Hz (default: 540)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Frame and timer rate (default: 60)",
    )
    parser.add_argument(
        "--keys",
        type=str,
        default="",
        help="Hex keys held for the whole run, e.g. '5A' (default: none)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random instruction (default: clock)",
    )
    parser.add_argument(
        "--increment_index",
        action="store_true",
        help="FX55/FX65 advance I past the copied registers",
    )
    parser.add_argument(
        "--screenshot",
        type=str,
        default=None,
        help="Save the final frame to this image file",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=8,
        help="Screenshot upscaling factor (default: 8)",
    )
    parser.add_argument(
        "--color_scheme",
        type=str,
        default="classic",
        help="Screenshot color scheme (default: classic)",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default="INFO",
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = EmulatorConfig(
        instruction_frequency=args.instruction_frequency,
        fps=args.fps,
        render_scale=args.scale,
        color_scheme=args.color_scheme,
        increment_index=args.increment_index,
        log_level=args.log_level,
    )
    logger = EmulatorLogger(log_level=config.log_level)
    logger.log_config(config.as_dict())

    try:
        held_keys = [int(k, 16) for k in args.keys]
    except ValueError:
        logger.error(f"Invalid key list: {args.keys!r}")
        return 2

    try:
        state = run(args.rom, args.frames, config, held_keys, args.seed, logger, args.progress)
    except Chip8Error:
        return 1

    if args.screenshot:
        save_frame(state.framebuffer, args.screenshot, config.render_scale, config.color_scheme)
        logger.info(f"Saved frame to {args.screenshot}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
