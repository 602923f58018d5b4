# exohand/constants/hand_model.py
"""
This file contains constants of the rendered hand model and the animation.
"""

# Fingers in the order they are registered on a hand. The order fixes the
# position of every piece in the output geometry sequence.
FINGER_NAMES: list[str] = ["Thumb", "Index", "Middle"]

# Uniform scale applied to the joint reference geometry.
JOINT_SCALE: float = 0.05

# Hand origins with respect to the world frame. Both hands are driven by the
# same exoskeleton, the right one is the mirrored copy.
LEFT_HAND_ORIGIN: tuple[float, float, float] = (0.0, 0.2, 0.0)
RIGHT_HAND_ORIGIN: tuple[float, float, float] = (0.0, -0.2, 0.0)

# Animation cadence of the viewer.
ANIMATION_FPS: float = 30.0
