from exohand import constants
from exohand.schema import load_hand_config


def test_reference_table_size():
    assert constants.NUM_JOINT_ANGLES == len(constants.HAND_MAP) == 13
    assert constants.NUM_HAND_FRAMES == 9


def test_axis_indices():
    assert [int(axis) for axis in constants.Axis] == [0, 1, 2]
    assert constants.Axis.YAW.name == "YAW"


def test_packaged_config_matches_finger_order():
    config = load_hand_config(finger_names=constants.FINGER_NAMES)
    assert config.finger_names == constants.FINGER_NAMES


def test_hand_origins_are_mirrored():
    left, right = constants.LEFT_HAND_ORIGIN, constants.RIGHT_HAND_ORIGIN
    assert left[0] == right[0] and left[2] == right[2]
    assert left[1] == -right[1]
