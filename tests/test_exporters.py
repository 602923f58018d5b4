from unittest.mock import patch

import numpy as np

from exohand.exporters.base import RecordingSink
from exohand.exporters.rerun import BONE_COLOR, JOINT_COLOR, RerunSink


class TestRecordingSink:
    def test_keeps_latest_geometry(self):
        sink = RecordingSink()
        geometry = [np.zeros((3, 3)), np.ones((2, 3))]

        sink.consume("left", geometry, 0)
        geometry[0][:] = 5.0
        sink.consume("right", [np.ones((1, 3))], 1)

        assert set(sink.latest) == {"left", "right"}
        assert np.allclose(sink.latest["left"][0], 0.0)
        assert sink.num_frames == 2


class TestRerunSink:
    """Test the Rerun exporter with the SDK mocked out."""

    @patch("exohand.exporters.rerun.rr")
    def test_spawns_viewer_by_default(self, mock_rr):
        RerunSink()

        mock_rr.init.assert_called_once_with("exohand-viewer", spawn=True)
        mock_rr.save.assert_not_called()
        mock_rr.log.assert_called_once()

    @patch("exohand.exporters.rerun.rr")
    def test_saves_to_file(self, mock_rr, tmp_path):
        output = tmp_path / "hands.rrd"

        RerunSink(output_path=output)

        mock_rr.init.assert_called_once_with("exohand-viewer", spawn=False)
        mock_rr.save.assert_called_once_with(str(output))

    @patch("exohand.exporters.rerun.rr")
    def test_close_disconnects(self, mock_rr):
        RerunSink().close()
        mock_rr.disconnect.assert_called_once()

    @patch("exohand.exporters.rerun.rr")
    def test_logs_one_entity_per_piece(self, mock_rr):
        sink = RerunSink()
        mock_rr.log.reset_mock()
        geometry = [np.zeros((4, 3)), np.ones((6, 3)), np.zeros((4, 3))]

        sink.consume("right", geometry, frame_idx=7)

        mock_rr.set_time.assert_called_once_with("frame", sequence=7)
        paths = [call.args[0] for call in mock_rr.log.call_args_list]
        assert paths == [
            "world/right/piece_000",
            "world/right/piece_001",
            "world/right/piece_002",
        ]

        colors = [call.kwargs["colors"] for call in mock_rr.Points3D.call_args_list]
        assert colors[0] is JOINT_COLOR
        assert colors[1] is BONE_COLOR
        assert colors[2] is JOINT_COLOR
