from typing import List, Optional, Sequence

import numpy as np

from exohand.constants import HAND_MAP, NUM_HAND_FRAMES, Axis, MappingEntry
from exohand.schema import ConfigurationError, SampleLengthError


class AngleMapper:
    """
    Distributes a flat joint-angle sample onto the Euler vectors of the hand
    frames.

    Every sensor reading is routed by one `MappingEntry` to a single axis of a
    single frame. The result is rebuilt from zeros on every call, so a frame or
    axis not referenced by the table always stays at zero rotation.
    """

    def __init__(
        self,
        entries: Optional[Sequence[MappingEntry]] = None,
        num_frames: int = NUM_HAND_FRAMES,
    ):
        """
        Initializes the AngleMapper.

        Args:
            entries: The mapping table. Defaults to the reference exoskeleton.
            num_frames: Number of hand frames the table writes into.
        """
        self.entries: List[MappingEntry] = list(
            entries if entries is not None else HAND_MAP
        )
        self.num_frames = num_frames
        self._validate()

    def _validate(self) -> None:
        if self.num_frames <= 0:
            raise ConfigurationError(
                f"Mapping: num_frames must be positive, got {self.num_frames}"
            )

        sources = sorted(entry.source_index for entry in self.entries)
        if sources != list(range(len(self.entries))):
            raise ConfigurationError(
                "Mapping: source indices must be a permutation of "
                f"[0, {len(self.entries)}), got {sources}"
            )

        for entry in self.entries:
            if not 0 <= entry.target_frame < self.num_frames:
                raise ConfigurationError(
                    f"Mapping: target frame {entry.target_frame} of source "
                    f"{entry.source_index} is outside [0, {self.num_frames})"
                )
            if entry.axis not in tuple(Axis):
                raise ConfigurationError(
                    f"Mapping: invalid axis {entry.axis} for source {entry.source_index}"
                )
            if entry.sign not in (1, -1):
                raise ConfigurationError(
                    f"Mapping: sign must be +1 or -1, got {entry.sign} for "
                    f"source {entry.source_index}"
                )

    @property
    def num_angles(self) -> int:
        """Number of readings a joint-angle sample must have."""
        return len(self.entries)

    def map(self, sample: Sequence[float]) -> np.ndarray:
        """
        Maps a joint-angle sample to per-frame Euler vectors.

        If two entries target the same (frame, axis) slot the later one wins.

        Args:
            sample: The joint angles, one per table entry, in radians.

        Returns:
            np.ndarray: Array of shape (num_frames, 3), indexed by frame id and
            `Axis`.
        """
        sample = np.asarray(sample, dtype=np.float64)
        if sample.ndim != 1 or sample.shape[0] != self.num_angles:
            raise SampleLengthError(
                f"Expected a joint-angle sample of length {self.num_angles}, "
                f"got shape {sample.shape}"
            )

        rotations = np.zeros((self.num_frames, 3), dtype=np.float64)
        for entry in self.entries:
            rotations[entry.target_frame, int(entry.axis)] = (
                entry.sign * sample[entry.source_index]
            )

        return rotations
