import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import rerun as rr

from exohand.exporters.base import BaseGeometrySink

logger = logging.getLogger(__name__)

JOINT_COLOR = np.array([230, 120, 40], dtype=np.uint8)
BONE_COLOR = np.array([220, 220, 220], dtype=np.uint8)


class RerunSink(BaseGeometrySink):
    """Streams hand geometry to the Rerun viewer, or to an .rrd file."""

    def __init__(
        self,
        application_id: str = "exohand-viewer",
        output_path: Optional[Path] = None,
        radius: float = 0.002,
    ):
        self.output_path = output_path
        self.radius = radius

        if output_path:
            rr.init(application_id, spawn=False)
            rr.save(str(output_path))
            logger.info(f"Saving Rerun recording to {output_path}")
        else:
            rr.init(application_id, spawn=True)

        rr.log("world", rr.ViewCoordinates.RIGHT_HAND_Z_UP, static=True)

    def consume(self, name: str, geometry: List[np.ndarray], frame_idx: int) -> None:
        rr.set_time("frame", sequence=frame_idx)
        for i, vertices in enumerate(geometry):
            # Pieces alternate joint, bone along every finger
            color = JOINT_COLOR if i % 2 == 0 else BONE_COLOR
            rr.log(
                f"world/{name}/piece_{i:03d}",
                rr.Points3D(positions=vertices, colors=color, radii=self.radius),
            )

    def close(self) -> None:
        # Flushes pending data to the viewer or the .rrd file
        rr.disconnect()
