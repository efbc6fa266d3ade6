"""Define classes to represent task-level poses and rigid poses in 3D space."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal

import numpy as np

from pick_and_place.spatial.frames import DEFAULT_FRAME
from pick_and_place.spatial.points import Point3D
from pick_and_place.spatial.rotations import EulerRPY, Quaternion

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

Axis = Literal["x", "y", "z"]
"""Name of a coordinate axis of a frame."""

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


@dataclass(frozen=True)
class TaskPose:
    """A position (mm) and rotation about the vertical axis (degrees) on the task plane.

    This is the pose of an object or destination as supplied by an operator or vision system.
    """

    x: float
    y: float
    z: float
    phi_deg: float

    def __iter__(self) -> Iterator[float]:
        """Provide an iterator over the (x, y, z, phi) values of the pose."""
        yield from (self.x, self.y, self.z, self.phi_deg)

    def __str__(self) -> str:
        """Return a human-readable string representation of the TaskPose."""
        return f"({self.x:.2f} {self.y:.2f} {self.z:.2f} {self.phi_deg:.2f})"

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> TaskPose:
        """Construct a TaskPose from a sequence of [x, y, z, phi] values.

        :raises ValueError: If the sequence doesn't hold four finite values
        """
        if len(values) != 4:
            raise ValueError(f"TaskPose expects 4 values, got {len(values)}")

        x, y, z, phi = (float(v) for v in values)
        if not all(math.isfinite(v) for v in (x, y, z, phi)):
            raise ValueError(f"TaskPose expects finite values, got {list(values)}")

        return TaskPose(x, y, z, phi)

    def with_z(self, z: float) -> TaskPose:
        """Return a copy of this pose moved to the given height (mm)."""
        return replace(self, z=z)

    def to_pose3d(self, ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Convert the task pose into an equivalent rigid Pose3D."""
        return Pose3D.from_xyz_rpy(
            x=self.x,
            y=self.y,
            z=self.z,
            yaw_rad=math.radians(self.phi_deg),
            ref_frame=ref_frame,
        )


@dataclass(frozen=True)
class Pose3D:
    """A position and orientation in 3D space."""

    position: Point3D
    orientation: Quaternion
    ref_frame: str = DEFAULT_FRAME

    def __matmul__(self, other: Pose3D) -> Pose3D:
        """Multiply the homogeneous transformation matrix of this pose with another pose.

        Consider: pose_A_B @ pose_B_C = pose_A_C, meaning the pose of 'C' relative to frame A.
            Therefore, we see that the resulting pose takes the "left-side" reference frame.

        :param other: Pose defining the right-side matrix in the multiplication
        :return: Pose3D resulting from the matrix multiplication
        :raises TypeError: If `other` is not a Pose3D
        """
        if not isinstance(other, Pose3D):
            raise TypeError(f"Cannot matrix-multiply Pose3D with: {other}")

        left_m = self.to_homogeneous_matrix()
        right_m = other.to_homogeneous_matrix()
        result_ref_frame = self.ref_frame  # Result takes the "leftmost" reference frame
        return Pose3D.from_homogeneous_matrix(left_m @ right_m, result_ref_frame)

    def __str__(self) -> str:
        """Return a human-readable string representation of the Pose3D."""
        x, y, z, roll, pitch, yaw = self.to_xyz_rpy()
        rpy_deg = ", ".join(f"{math.degrees(a):.1f}" for a in (roll, pitch, yaw))
        xyz = f"{x:.2f}, {y:.2f}, {z:.2f}"
        return f'Pose3D(xyz=[{xyz}], rpy_deg=[{rpy_deg}], frame="{self.ref_frame}")'

    @classmethod
    def identity(cls, ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D corresponding to the identity transformation."""
        return Pose3D(Point3D.identity(), Quaternion.identity(), ref_frame)

    @classmethod
    def from_xyz_rpy(
        cls,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        roll_rad: float = 0.0,
        pitch_rad: float = 0.0,
        yaw_rad: float = 0.0,
        ref_frame: str = DEFAULT_FRAME,
    ) -> Pose3D:
        """Construct a Pose3D from the given XYZ coordinates and Euler RPY angles.

        :param x: Translation along the x-axis
        :param y: Translation along the y-axis
        :param z: Translation along the z-axis
        :param roll_rad: Fixed-frame roll angle (radians) about the x-axis
        :param pitch_rad: Fixed-frame pitch angle (radians) about the y-axis
        :param yaw_rad: Fixed-frame yaw angle (radians) about the z-axis
        :param ref_frame: Reference frame of the constructed pose
        :return: Constructed Pose3D instance
        """
        position = Point3D(float(x), float(y), float(z))
        orientation = EulerRPY(roll_rad, pitch_rad, yaw_rad).to_quaternion()

        return Pose3D(position, orientation, ref_frame)

    @classmethod
    def translation(cls, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Pose3D:
        """Construct a pure translation (identity rotation)."""
        return Pose3D(Point3D(float(x), float(y), float(z)), Quaternion.identity())

    def to_xyz_rpy(self) -> tuple[float, ...]:
        """Convert the pose into a tuple of its (x, y, z, roll, pitch, yaw) values.

        :return: 6-tuple of (x, y, z, roll, pitch, yaw) values with angles in radians
        """
        return (*self.position.to_tuple(), *self.orientation.to_euler_rpy().to_tuple())

    @classmethod
    def from_homogeneous_matrix(cls, matrix: np.ndarray, ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D from a 4x4 homogeneous transformation matrix."""
        if matrix.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix but received shape {matrix.shape}")

        position = Point3D(float(matrix[0, 3]), float(matrix[1, 3]), float(matrix[2, 3]))
        orientation = Quaternion.from_homogeneous_matrix(matrix)
        return Pose3D(position, orientation, ref_frame)

    def to_homogeneous_matrix(self) -> np.ndarray:
        """Convert the Pose3D into a 4x4 homogeneous transformation matrix."""
        matrix = self.orientation.to_homogeneous_matrix()
        matrix[:3, 3] = self.position.to_array()
        return matrix

    def inverse(self, pose_frame: str) -> Pose3D:
        """Return a pose representing the inverse transformation of this pose.

        :param pose_frame: Name of the reference frame represented by this pose
        """
        inverse_matrix = np.linalg.inv(self.to_homogeneous_matrix())
        return Pose3D.from_homogeneous_matrix(inverse_matrix, pose_frame)

    def local_axis(self, axis: Axis) -> np.ndarray:
        """Retrieve the unit vector of one of this pose's local axes, expressed in its ref frame."""
        return self.orientation.to_homogeneous_matrix()[:3, _AXIS_INDEX[axis]]

    def translate_along_local_axis(self, axis: Axis, distance: float) -> Pose3D:
        """Translate the pose along one of its own axes, keeping its orientation.

        Equivalent to `self @ trans(distance along axis)`.

        :param axis: Local axis ("x", "y", or "z") along which the pose is moved
        :param distance: Signed distance (mm) moved along the axis
        :return: Translated pose in the same reference frame
        """
        offset = self.local_axis(axis) * distance
        new_position = Point3D.from_array(self.position.to_array() + offset)
        return replace(self, position=new_position)

    def approx_equal(self, other: Pose3D, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Pose3D is approximately equal to this one."""
        return (
            self.ref_frame == other.ref_frame
            and self.position.approx_equal(other.position, rtol=rtol, atol=atol)
            and self.orientation.approx_equal(other.orientation, rtol=rtol, atol=atol)
        )
