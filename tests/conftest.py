import json
from pathlib import Path

import numpy as np
import pytest
import yaml

from exohand.schema import HandConfig


def _reference_config_dict() -> dict:
    return {
        "Thumb": {
            "Lengths": [0.045, 0.035, 0.03],
            "Frames": [0, 1, 2],
            "Origin": {"Position": [0.02, 0.035, 0.0], "Euler": [0.0, 0.0, 0.8]},
        },
        "Index": {
            "Lengths": [0.045, 0.03, 0.025],
            "Frames": [3, 4, 5],
            "Origin": {"Position": [0.09, 0.02, 0.0], "Euler": [0.0, 0.0, 0.0]},
        },
        "Middle": {
            "Lengths": [0.05, 0.033, 0.027],
            "Frames": [6, 7, 8],
            "Origin": {"Position": [0.09, 0.0, 0.0], "Euler": [0.0, 0.0, 0.0]},
        },
    }


@pytest.fixture
def config_dict():
    """A raw hand configuration, as parsed from a file."""
    return _reference_config_dict()


@pytest.fixture
def hand_config(config_dict):
    """A validated three-finger hand configuration."""
    return HandConfig.from_dict(config_dict)


@pytest.fixture
def config_file_factory(tmpdir_factory):
    """
    A pytest fixture that returns a factory function for writing hand
    configuration files.

    Usage:
        def test_something(config_file_factory):
            path = config_file_factory({"Index": {...}}, fmt="json")
    """

    def _create_file(data=None, fmt: str = "yaml") -> Path:
        temp_dir = Path(tmpdir_factory.mktemp("configs"))
        data = _reference_config_dict() if data is None else data
        if fmt == "json":
            file_path = temp_dir / "hand_config.json"
            file_path.write_text(json.dumps(data))
        else:
            file_path = temp_dir / "hand_config.yaml"
            file_path.write_text(yaml.safe_dump(data, sort_keys=False))
        return file_path

    return _create_file


@pytest.fixture
def angle_file_factory(tmpdir_factory):
    """
    A pytest fixture that returns a factory function for writing joint-angle
    replay files, one comma-delimited sample per line.
    """

    def _create_file(samples, header: bool = True) -> Path:
        temp_dir = Path(tmpdir_factory.mktemp("angles"))
        file_path = temp_dir / "angles.txt"
        lines = ["# recorded joint angles"] if header else []
        for sample in samples:
            lines.append(",".join(f"{value:.6f}" for value in sample))
        file_path.write_text("\n".join(lines) + "\n")
        return file_path

    return _create_file


@pytest.fixture
def random_frame_rotations():
    """Reproducible frame rotations for the nine reference frames."""
    rng = np.random.default_rng(seed=7)
    return rng.uniform(-0.8, 0.8, size=(9, 3))
