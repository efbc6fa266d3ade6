"""Define names of the reference frames used during a pick-and-place task."""

DEFAULT_FRAME = "base"
"""Frame attached to the base of the robot arm, in which object poses are specified."""

GRIPPER_FRAME = "gripper"
"""Frame attached to the gripper's grasp point (+z points out of the gripper)."""
