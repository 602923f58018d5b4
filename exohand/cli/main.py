from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from tqdm import tqdm

from exohand.animation import KinematicAnimation
from exohand.constants import ANIMATION_FPS
from exohand.devices.base import BaseAngleSource, ConstantAngleSource, parse_angle_line
from exohand.devices.replay import AngleRecorder, H5AngleSource, ReplayAngleSource
from exohand.processing.angles import AngleMapper
from exohand.processing.hand import HandAssembly
from exohand.schema import (
    ConfigurationError,
    InputContractError,
    load_hand_config,
)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _setup_validate_parser(subparsers):
    """Set up the validate command parser."""
    parser_validate = subparsers.add_parser(
        "validate", help="Validates a hand configuration file."
    )
    parser_validate.add_argument(
        "config", type=Path, help="The path to the YAML or JSON hand configuration."
    )


def _setup_animate_parser(subparsers):
    """Set up the animate command parser."""
    parser_animate = subparsers.add_parser(
        "animate", help="Replay recorded joint angles in the Rerun viewer."
    )
    parser_animate.add_argument(
        "--angles",
        required=True,
        type=Path,
        help="Recorded angles: a text file of comma-delimited lines or an .h5 file.",
    )
    parser_animate.add_argument(
        "--config", type=Path, help="Optional hand configuration file."
    )
    parser_animate.add_argument(
        "--output-rrd",
        type=Path,
        help="Optional path to save the RRD data to instead of spawning the viewer.",
    )
    parser_animate.add_argument(
        "--max-ticks", type=int, help="Optional maximum number of ticks to animate."
    )
    parser_animate.add_argument(
        "--fps",
        type=float,
        default=ANIMATION_FPS,
        help="Tick rate; 0 replays as fast as possible.",
    )
    parser_animate.add_argument(
        "--loop", action="store_true", help="Restart the recording when it ends."
    )


def _setup_pose_parser(subparsers):
    """Set up the pose command parser."""
    parser_pose = subparsers.add_parser(
        "pose", help="Compute a single pose and print the fingertip positions."
    )
    parser_pose.add_argument(
        "--angles",
        required=True,
        type=str,
        help="Comma-delimited joint angles in radians (e.g. '0.1,0,...').",
    )
    parser_pose.add_argument(
        "--config", type=Path, help="Optional hand configuration file."
    )


def _setup_record_parser(subparsers):
    """Set up the record command parser."""
    parser_record = subparsers.add_parser(
        "record", help="Convert a text angle recording into an HDF5 recording."
    )
    parser_record.add_argument(
        "--angles",
        required=True,
        type=Path,
        help="Text file of comma-delimited joint-angle lines.",
    )
    parser_record.add_argument(
        "--output", required=True, type=Path, help="Path of the HDF5 file to write."
    )
    parser_record.add_argument(
        "--max-samples", type=int, help="Optional maximum number of samples to write."
    )


def _open_angle_source(path: Path, loop: bool) -> BaseAngleSource:
    """Pick a replay source from the file extension."""
    if path.suffix in (".h5", ".hdf5"):
        return H5AngleSource(path, loop=loop)
    return ReplayAngleSource(path, loop=loop)


def _handle_validate_command(args) -> int:
    """Handle the validate command."""
    logging.info(f"Validating {args.config}...")
    try:
        config = load_hand_config(args.config)
        config.validate_frames(AngleMapper().num_frames)
    except (ConfigurationError, FileNotFoundError) as e:
        logging.error(f"Validation Failed: {e}")
        return 1

    for finger in config.fingers:
        logging.info(
            f"{finger.name}: {finger.num_links} links, frames {finger.frames}"
        )
    logging.info("Validation successful.")
    return 0


def _handle_animate_command(args) -> int:
    """Handle the animate command."""
    # Imported here so that the other commands do not require a viewer
    from exohand.exporters.rerun import RerunSink

    try:
        config = load_hand_config(args.config)
        source = _open_angle_source(args.angles, args.loop)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        logging.error(f"Failed to set up the animation: {e}")
        return 1

    with source:
        try:
            animation = KinematicAnimation(source, config=config)
        except ConfigurationError as e:
            logging.error(f"Failed to set up the animation: {e}")
            return 1

        animation.sink = RerunSink(output_path=args.output_rrd)
        try:
            animation.run(num_ticks=args.max_ticks, fps=args.fps)
        except InputContractError as e:
            logging.error(f"Animation stopped at tick {animation.frame_idx}: {e}")
            return 1
        finally:
            animation.sink.close()
    return 0


def _handle_pose_command(args) -> int:
    """Handle the pose command."""
    try:
        config = load_hand_config(args.config)
        sample = parse_angle_line(args.angles)
        animation = KinematicAnimation(ConstantAngleSource(sample), config=config)
        animation.tick()
    except (ConfigurationError, InputContractError, FileNotFoundError, ValueError) as e:
        logging.error(f"Failed to compute the pose: {e}")
        return 1

    np.set_printoptions(precision=4, suppress=True)
    for hand_name, hand in animation.hands.items():
        logging.info(f"{hand_name} hand piece offsets: {_describe_hand(hand)}")
        for finger, tip in hand.fingertip_positions().items():
            print(f"{hand_name:5s} {finger:8s} {tip}")
    return 0


def _handle_record_command(args) -> int:
    """Handle the record command."""
    num_angles = AngleMapper().num_angles
    try:
        source = ReplayAngleSource(args.angles)
    except (FileNotFoundError, ValueError) as e:
        logging.error(f"Failed to read {args.angles}: {e}")
        return 1

    written = 0
    with source, AngleRecorder(args.output, num_angles=num_angles) as recorder:
        for _ in tqdm(range(len(source)), desc="Recording", unit="sample"):
            if args.max_samples is not None and written >= args.max_samples:
                break
            sample = source.get_joint_angles()
            try:
                recorder.record(sample)
            except ValueError as e:
                logging.error(f"Sample {written} of {args.angles} rejected: {e}")
                return 1
            written += 1

    logging.info(f"Wrote {written} samples to {args.output}")
    return 0


def _describe_hand(hand: HandAssembly) -> str:
    return ", ".join(
        f"{name}@{offset}" for name, offset in hand.piece_offsets.items()
    )


def main(argv=None) -> int:
    """The main entry point for the exohand command-line interface."""
    parser = argparse.ArgumentParser(
        description="Kinematic hand animation driven by exoskeleton joint angles."
    )
    subparsers = parser.add_subparsers(
        dest="command", required=True, help="Available commands"
    )

    # Set up command parsers
    _setup_validate_parser(subparsers)
    _setup_animate_parser(subparsers)
    _setup_pose_parser(subparsers)
    _setup_record_parser(subparsers)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    # Handle commands
    if args.command == "validate":
        return _handle_validate_command(args)
    elif args.command == "animate":
        return _handle_animate_command(args)
    elif args.command == "pose":
        return _handle_pose_command(args)
    elif args.command == "record":
        return _handle_record_command(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
