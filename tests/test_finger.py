import numpy as np
import pytest

from exohand.geometry import bone_reference_points
from exohand.processing.finger import LinkChain, LinkPose
from exohand.schema import ConfigurationError, FingerConfig, FrameIndexError


def _yaw(angle):
    return np.array([0.0, 0.0, angle])


class TestLinkChainKinematics:
    """Test the forward kinematics of a LinkChain."""

    def test_composition_order(self):
        """Two straight links end at the sum of their lengths."""
        l1, l2 = 0.04, 0.03
        chain = LinkChain("finger", [l1, l2], [0, 1])

        global_transforms, _ = chain.update(np.zeros((2, 3)))

        assert global_transforms.shape == (3, 4, 4)
        assert np.allclose(global_transforms[1][:3, 3], [l1, 0.0, 0.0])
        assert np.allclose(global_transforms[2][:3, 3], [l1 + l2, 0.0, 0.0])
        assert np.allclose(global_transforms[2][:3, :3], np.eye(3))

    def test_yaw_rotates_the_link(self):
        """A single link yawed by 90 degrees ends on +Y."""
        length = 0.05
        chain = LinkChain("finger", [length], [0])

        global_transforms, _ = chain.update(np.array([_yaw(np.pi / 2)]))

        assert np.allclose(global_transforms[1][:3, 3], [0.0, length, 0.0], atol=1e-12)
        assert np.allclose(chain.tip_position, [0.0, length, 0.0], atol=1e-12)

    def test_rotations_compound_along_the_chain(self):
        l1, l2 = 0.04, 0.03
        chain = LinkChain("finger", [l1, l2], [0, 1])

        global_transforms, _ = chain.update(np.array([_yaw(np.pi / 2), _yaw(np.pi / 2)]))

        assert np.allclose(global_transforms[1][:3, 3], [0.0, l1, 0.0])
        assert np.allclose(global_transforms[2][:3, 3], [-l2, l1, 0.0])

    def test_global_is_product_of_locals(self):
        chain = LinkChain("finger", [0.04, 0.03, 0.02], [0, 1, 2])
        rotations = np.random.default_rng(3).uniform(-1, 1, size=(3, 3))

        global_transforms, _ = chain.update(rotations)
        local_transforms = chain.local_transforms

        expected = local_transforms[0]
        for i in range(1, 4):
            expected = expected @ local_transforms[i]
            assert np.allclose(global_transforms[i], expected)

    def test_origin_offset(self):
        origin = LinkPose(position=np.array([1.0, 2.0, 3.0]))
        chain = LinkChain("finger", [0.04], [0], origin=origin)

        chain.update(np.zeros((1, 3)))

        assert np.allclose(chain.tip_position, [1.04, 2.0, 3.0])

    def test_origin_orientation(self):
        origin = LinkPose(position=np.array([0.1, 0.0, 0.0]), euler=_yaw(np.pi / 2))
        chain = LinkChain("finger", [0.04, 0.03], [0, 1], origin=origin)

        chain.update(np.zeros((2, 3)))

        assert np.allclose(chain.tip_position, [0.1, 0.07, 0.0])

    def test_state_layout(self):
        origin = LinkPose(position=np.array([0.1, 0.2, 0.0]), euler=_yaw(0.3))
        chain = LinkChain("finger", [0.04, 0.03], [5, 6], origin=origin)

        chain.update(np.array([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]))
        state = chain.state

        assert len(state) == 3
        assert np.allclose(state[0].position, [0.1, 0.2, 0.0])
        assert np.allclose(state[0].euler, [0.0, 0.0, 0.3])
        assert np.allclose(state[1].position, [0.04, 0.0, 0.0])
        assert np.allclose(state[2].position, [0.03, 0.0, 0.0])
        assert np.allclose(state[2].euler, [0.4, 0.5, 0.6])

    def test_state_is_a_copy(self):
        chain = LinkChain("finger", [0.04], [0])
        state = chain.state
        state[1].position[0] = 10.0

        assert chain.state[1].position[0] == pytest.approx(0.04)

    def test_update_replaces_previous_results(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1])
        rest_transforms, rest_vertices = chain.update(np.zeros((2, 3)))

        chain.update(np.full((2, 3), 0.5))
        transforms, vertices = chain.update(np.zeros((2, 3)))

        assert np.allclose(transforms, rest_transforms)
        for actual, expected in zip(vertices, rest_vertices):
            assert np.allclose(actual, expected)

    def test_rest_pose_available_after_construction(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1])
        assert np.allclose(chain.tip_position, [0.07, 0.0, 0.0])
        assert len(chain.vertices) == 4


class TestLinkChainGeometry:
    """Test the geometry produced by a LinkChain."""

    def test_piece_order(self):
        chain = LinkChain("finger", [0.04, 0.03, 0.02], [0, 1, 2])

        assert chain.num_pieces == 6
        assert [p.kind for p in chain.pieces] == ["joint", "bone"] * 3
        assert [p.link_index for p in chain.pieces] == [0, 0, 1, 1, 2, 2]

    def test_piece_scales(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1], joint_scale=0.05)
        assert [p.scale for p in chain.pieces] == [0.05, 0.04, 0.05, 0.03]

    def test_output_shapes(self):
        joint_points = np.random.default_rng(1).normal(size=(10, 3))
        bone_points = np.random.default_rng(2).normal(size=(7, 3))
        chain = LinkChain(
            "finger", [0.04, 0.03], [0, 1], joint_points=joint_points, bone_points=bone_points
        )

        _, vertices = chain.update(np.zeros((2, 3)))

        assert [v.shape for v in vertices] == [(10, 3), (7, 3), (10, 3), (7, 3)]

    def test_joints_sit_on_the_joint_frames(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1])

        _, vertices = chain.update(np.zeros((2, 3)))

        assert np.allclose(vertices[0].mean(axis=0), [0.0, 0.0, 0.0], atol=1e-12)
        assert np.allclose(vertices[2].mean(axis=0), [0.04, 0.0, 0.0], atol=1e-12)

    def test_joint_size(self):
        chain = LinkChain("finger", [0.04], [0], joint_scale=0.05)

        _, vertices = chain.update(np.zeros((1, 3)))

        # Reference sphere has radius 0.2
        radii = np.linalg.norm(vertices[0], axis=1)
        assert np.allclose(radii, 0.01)

    def test_bone_reaches_the_next_joint(self):
        length = 0.05
        chain = LinkChain("finger", [length], [0])

        _, vertices = chain.update(np.array([_yaw(np.pi / 2)]))

        # Last reference point of the bone is the axis end at x=1
        assert np.allclose(bone_reference_points()[-1], [1.0, 0.0, 0.0])
        assert np.allclose(vertices[1][-1], [0.0, length, 0.0], atol=1e-12)
        assert np.allclose(vertices[1][0], [0.0, 0.0, 0.0], atol=1e-12)

    def test_bones_follow_the_chain(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1])
        rotations = np.random.default_rng(5).uniform(-1, 1, size=(2, 3))

        global_transforms, vertices = chain.update(rotations)

        for k in range(2):
            bone = vertices[2 * k + 1]
            assert np.allclose(bone[0], global_transforms[k][:3, 3])
            assert np.allclose(bone[-1], global_transforms[k + 1][:3, 3])

    def test_returned_vertices_are_copies(self):
        chain = LinkChain("finger", [0.04], [0])
        _, vertices = chain.update(np.zeros((1, 3)))
        vertices[0][:] = 42.0

        assert not np.allclose(chain.vertices[0], 42.0)


class TestLinkChainErrors:
    """Test the contract checks of a LinkChain."""

    def test_wrong_number_of_rotations(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1])
        with pytest.raises(FrameIndexError, match=r"\(2, 3\)"):
            chain.update(np.zeros((3, 3)))

    def test_wrong_rotation_width(self):
        chain = LinkChain("finger", [0.04, 0.03], [0, 1])
        with pytest.raises(FrameIndexError):
            chain.update(np.zeros((2, 2)))

    def test_no_links(self):
        with pytest.raises(ConfigurationError, match="at least one link"):
            LinkChain("finger", [], [])

    def test_non_positive_length(self):
        with pytest.raises(ConfigurationError, match="positive"):
            LinkChain("finger", [0.04, 0.0], [0, 1])

    def test_frame_count_mismatch(self):
        with pytest.raises(ConfigurationError, match="2 links but 1 frame ids"):
            LinkChain("finger", [0.04, 0.03], [0])

    def test_bad_origin(self):
        origin = LinkPose(position=np.zeros(2))
        with pytest.raises(ConfigurationError, match="origin"):
            LinkChain("finger", [0.04], [0], origin=origin)


def test_from_config():
    config = FingerConfig(
        name="Index",
        lengths=[0.045, 0.03],
        frames=[3, 4],
        origin_position=np.array([0.09, 0.02, 0.0]),
        origin_euler=np.zeros(3),
    )

    chain = LinkChain.from_config(config)

    assert chain.name == "Index"
    assert chain.frame_ids == [3, 4]
    assert np.allclose(chain.tip_position, [0.165, 0.02, 0.0])
