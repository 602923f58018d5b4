from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import h5py
import numpy as np

from exohand.constants import NUM_JOINT_ANGLES
from exohand.devices.base import BaseAngleSource, parse_angle_line

logger = logging.getLogger(__name__)


class ReplayAngleSource(BaseAngleSource):
    """
    Replays joint angles captured from the device's serial stream.

    The file holds one comma-delimited sample per line. Blank lines and lines
    starting with '#' are skipped.
    """

    def __init__(self, path: Path, loop: bool = False):
        self.path = Path(path)
        self.loop = loop
        self.samples = self._read_samples()
        self._index = 0
        logger.info(f"Loaded {len(self.samples)} samples from {self.path}")

    def _read_samples(self) -> List[np.ndarray]:
        if not self.path.exists():
            raise FileNotFoundError(f"Angle file not found: {self.path}")

        samples = []
        with open(self.path) as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    samples.append(parse_angle_line(line))
                except ValueError as e:
                    raise ValueError(f"{self.path}:{line_no}: {e}") from e
        return samples

    def __len__(self) -> int:
        return len(self.samples)

    def get_joint_angles(self) -> np.ndarray:
        if self._index >= len(self.samples):
            if not self.loop or not self.samples:
                raise EOFError(f"No more samples in {self.path}")
            self._index = 0

        sample = self.samples[self._index]
        self._index += 1
        return sample.copy()


class H5AngleSource(BaseAngleSource):
    """Replays the `angles` dataset of a recording made by `AngleRecorder`."""

    def __init__(self, path: Path, loop: bool = False):
        self.path = Path(path)
        self.loop = loop
        if not self.path.exists():
            raise FileNotFoundError(f"Recording not found: {self.path}")

        with h5py.File(self.path, "r") as f:
            angles_dset = f.get("angles")
            if not isinstance(angles_dset, h5py.Dataset):
                raise ValueError(f"No 'angles' dataset in {self.path}")
            self.angles = np.asarray(angles_dset[:], dtype=np.float64)

        if self.angles.ndim != 2:
            raise ValueError(
                f"Expected 'angles' of shape (num_samples, num_angles), "
                f"got {self.angles.shape}"
            )
        self._index = 0
        logger.info(f"Loaded {len(self.angles)} samples from {self.path}")

    def __len__(self) -> int:
        return self.angles.shape[0]

    def get_joint_angles(self) -> np.ndarray:
        if self._index >= len(self):
            if not self.loop or len(self) == 0:
                raise EOFError(f"No more samples in {self.path}")
            self._index = 0

        sample = self.angles[self._index]
        self._index += 1
        return sample.copy()


class AngleRecorder:
    """
    Appends joint-angle samples to an HDF5 file.

    Layout:
        angles         (num_samples, num_angles) float64
        timestamps_ns  (num_samples,)            uint64
    """

    def __init__(self, path: Path, num_angles: int = NUM_JOINT_ANGLES):
        self.path = Path(path)
        self.num_angles = num_angles
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[h5py.File] = h5py.File(self.path, "w")
        self._angles = self._file.create_dataset(
            "angles",
            shape=(0, num_angles),
            maxshape=(None, num_angles),
            dtype=np.float64,
            chunks=True,
        )
        self._timestamps = self._file.create_dataset(
            "timestamps_ns", shape=(0,), maxshape=(None,), dtype=np.uint64, chunks=True
        )

    def record(self, sample: np.ndarray, timestamp_ns: Optional[int] = None) -> None:
        if self._file is None:
            raise RuntimeError(f"Recorder for {self.path} is closed")

        sample = np.asarray(sample, dtype=np.float64)
        if sample.shape != (self.num_angles,):
            raise ValueError(
                f"Expected a sample of shape ({self.num_angles},), got {sample.shape}"
            )

        n = self._angles.shape[0]
        self._angles.resize(n + 1, axis=0)
        self._timestamps.resize(n + 1, axis=0)
        self._angles[n] = sample
        self._timestamps[n] = time.time_ns() if timestamp_ns is None else timestamp_ns

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.info(f"Recording saved to {self.path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
