"""Define functions and data structures to compute grasp, approach, and depart frames."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pick_and_place.spatial import EulerRPY, Point3D, Pose3D

if TYPE_CHECKING:
    from pick_and_place.spatial import Axis, TaskPose


@dataclass(frozen=True)
class GraspOffset:
    """Pose of the gripper relative to the pose of an object (or of its destination)."""

    dx: float
    dy: float
    dz: float
    """Translation (mm) of the grasp point w.r.t. the object frame."""

    theta_deg: float
    """Rotation (degrees) of the gripper about the object frame's horizontal (y) axis."""

    def to_pose3d(self) -> Pose3D:
        """Convert the offset into the relative pose of the gripper w.r.t. the object."""
        orientation = EulerRPY(0.0, math.radians(self.theta_deg), 0.0).to_quaternion()
        return Pose3D(Point3D(self.dx, self.dy, self.dz), orientation)


@dataclass(frozen=True)
class GraspModel:
    """Derives the gripper frames used to pick an object up from (or place it at) a pose."""

    offset: GraspOffset

    approach_axis: Axis = "z"
    """Gripper axis pointing from the grasp point into the object."""

    def grasp_frame(self, pose: TaskPose) -> Pose3D:
        """Compute the gripper pose at which the object at the given pose is grasped.

        :param pose: Pose of an object or destination
        :return: Grasp frame, i.e. pose_base_object @ pose_object_gripper
        """
        return pose.to_pose3d() @ self.offset.to_pose3d()

    def frame_at(self, grasp_frame: Pose3D, distance: float) -> Pose3D:
        """Move a grasp frame back by the given distance along the gripper's approach axis.

        :param grasp_frame: Gripper pose at the grasp point
        :param distance: Distance (mm) from the grasp point (0 gives the grasp frame itself)
        :return: Gripper pose `distance` mm "behind" the grasp point
        """
        if distance == 0:
            return grasp_frame
        return grasp_frame.translate_along_local_axis(self.approach_axis, -distance)

    def approach_frame(self, pose: TaskPose, distance: float) -> Pose3D:
        """Compute the frame from which the gripper approaches its grasp frame."""
        return self.frame_at(self.grasp_frame(pose), distance)

    def depart_frame(self, pose: TaskPose, distance: float) -> Pose3D:
        """Compute the frame to which the gripper departs after grasping or releasing.

        This is the same composition as the approach frame, reached in the opposite direction.
        """
        return self.frame_at(self.grasp_frame(pose), distance)
