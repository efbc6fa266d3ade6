"""Import classes and definitions representing coordinate frames, poses, and rotations."""

from .frames import DEFAULT_FRAME as DEFAULT_FRAME
from .frames import GRIPPER_FRAME as GRIPPER_FRAME
from .points import Point3D as Point3D
from .poses import Axis as Axis
from .poses import Pose3D as Pose3D
from .poses import TaskPose as TaskPose
from .rotations import EulerRPY as EulerRPY
from .rotations import Quaternion as Quaternion
