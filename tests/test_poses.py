"""Unit tests for TaskPose and Pose3D, the classes representing poses in 3D space."""

from __future__ import annotations

import math
from dataclasses import FrozenInstanceError

import hypothesis.strategies as st
import numpy as np
import pytest
from hypothesis import given

from pick_and_place.spatial import Point3D, Pose3D, Quaternion, TaskPose

from .strategies.spatial_strategies import finite_floats, poses_3d, task_poses


@given(poses_3d())
def test_pose3d_to_homogeneous_matrix_and_back(pose: Pose3D) -> None:
    """Verify that any Pose3D is unchanged after converting to and from a homogeneous matrix."""
    # Arrange/Act - Given a 3D pose, convert to and from a homogeneous transformation matrix
    matrix = pose.to_homogeneous_matrix()
    result_pose = Pose3D.from_homogeneous_matrix(matrix, ref_frame=pose.ref_frame)

    # Assert - Expect that the matrix is 4x4 and the resulting Pose3D equals the original
    assert matrix.shape == (4, 4)
    assert pose.approx_equal(result_pose)


@given(poses_3d())
def test_pose3d_identity_multiplication(pose: Pose3D) -> None:
    """Verify that any Pose3D is unchanged after multiplication by the identity pose."""
    # Arrange - Create a pose representing the identity transformation
    identity_pose = Pose3D.identity()

    # Act - Compute left-side and right-side multiplications by the identity pose
    left_result = identity_pose @ pose
    right_result = pose @ identity_pose

    # Assert - Expect that both multiplication results equal the original pose
    assert pose.approx_equal(left_result)
    assert pose.approx_equal(right_result)


@given(poses_3d(), st.text())
def test_pose3d_inverse_multiplication(pose: Pose3D, pose_frame: str) -> None:
    """Verify that multiplying any Pose3D by its inverse gives the identity transform."""
    # Arrange/Act - Given a 3D pose, find its inverse and the result of multiplying the two
    inverse_pose = pose.inverse(pose_frame)
    left_product = inverse_pose @ pose
    right_product = pose @ inverse_pose

    # Assert - Expect that left-multiplying results in the pose's frame as the reference frame
    assert Pose3D.identity(pose_frame).approx_equal(left_product, atol=1e-06)
    assert Pose3D.identity(pose.ref_frame).approx_equal(right_product, atol=1e-06)


@given(poses_3d(), st.sampled_from(["x", "y", "z"]), finite_floats(-500.0, 500.0))
def test_translate_along_local_axis_matches_composition(
    pose: Pose3D,
    axis: str,
    distance: float,
) -> None:
    """Verify that translating along a local axis equals right-multiplying by a translation."""
    # Arrange - Express the same translation as a relative pose
    translation = Pose3D.translation(**{axis: distance})

    # Act - Translate the pose both ways
    translated = pose.translate_along_local_axis(axis, distance)
    composed = pose @ translation

    # Assert - Expect that the results agree and the orientation is unchanged
    assert translated.approx_equal(composed, atol=1e-06)
    assert translated.orientation.approx_equal(pose.orientation)


@given(poses_3d())
def test_local_axes_are_orthonormal(pose: Pose3D) -> None:
    """Verify that a pose's local axes form a right-handed orthonormal basis."""
    # Arrange/Act - Retrieve the pose's local axes
    x_axis, y_axis, z_axis = (pose.local_axis(a) for a in ("x", "y", "z"))

    # Assert - Expect unit vectors satisfying x cross y = z
    for axis in (x_axis, y_axis, z_axis):
        assert np.linalg.norm(axis) == pytest.approx(1.0)
    assert np.allclose(np.cross(x_axis, y_axis), z_axis, atol=1e-07)


@given(task_poses())
def test_task_pose_to_pose3d(pose: TaskPose) -> None:
    """Verify that a task pose converts into a pose rotated only about the vertical axis."""
    # Arrange/Act - Convert the task pose into a rigid pose
    pose_3d = pose.to_pose3d()

    # Assert - Expect the same position and a vertical z-axis
    assert pose_3d.position.approx_equal(Point3D(pose.x, pose.y, pose.z))
    assert np.allclose(pose_3d.local_axis("z"), [0.0, 0.0, 1.0], atol=1e-07)

    expected_x_axis = [math.cos(math.radians(pose.phi_deg)), math.sin(math.radians(pose.phi_deg))]
    assert np.allclose(pose_3d.local_axis("x")[:2], expected_x_axis, atol=1e-07)


def test_task_pose_from_sequence() -> None:
    """Verify that a task pose is constructed from exactly four finite values."""
    # Arrange/Act - Construct a pose from four values
    pose = TaskPose.from_sequence([-40, 150, 0, -90])

    # Assert - Expect the values in (x, y, z, phi) order, and errors for invalid sequences
    assert tuple(pose) == (-40.0, 150.0, 0.0, -90.0)
    assert str(pose) == "(-40.00 150.00 0.00 -90.00)"

    with pytest.raises(ValueError):
        TaskPose.from_sequence([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        TaskPose.from_sequence([1.0, math.nan, 3.0, 4.0])


def test_task_pose_with_z() -> None:
    """Verify that changing a task pose's height leaves its other values unchanged."""
    # Arrange/Act - Raise a pose by a brick height
    pose = TaskPose(40.0, 150.0, 0.0, -90.0).with_z(11.4)

    # Assert - Expect only z to change
    assert pose == TaskPose(40.0, 150.0, 11.4, -90.0)


def test_pose3d_composes_only_with_poses() -> None:
    """Verify that composing a pose with anything other than a pose raises a TypeError."""
    pose = Pose3D.identity()

    with pytest.raises(TypeError):
        pose @ Point3D(1.0, 2.0, 3.0)
    with pytest.raises(TypeError):
        pose @ np.eye(4)


def test_quaternion_is_normalized_on_construction() -> None:
    """Verify that quaternions are normalized when built and that a zero quaternion is rejected."""
    # Arrange/Act - Construct a non-unit quaternion
    quaternion = Quaternion(0.0, 0.0, 0.0, 2.0)

    # Assert - Expect the identity rotation, and an error for the zero quaternion
    assert quaternion == Quaternion.identity()
    assert quaternion.w == 1.0

    with pytest.raises(ValueError):
        Quaternion(0.0, 0.0, 0.0, 0.0)


def test_equal_poses_are_hashable_and_immutable() -> None:
    """Verify that equal poses hash equally and that their orientations cannot be mutated."""
    # Arrange - Construct the same pose twice
    pose = TaskPose(120.0, 60.0, 11.4, 30.0).to_pose3d()
    replica = TaskPose(120.0, 60.0, 11.4, 30.0).to_pose3d()

    # Act/Assert - Expect equal hashes, so a set keeps one copy of the pose
    assert pose == replica
    assert hash(pose) == hash(replica)
    assert len({pose, replica}) == 1

    # Assert - Expect the orientation to reject in-place changes
    with pytest.raises(FrozenInstanceError):
        pose.orientation.x = 0.0
    assert pose.orientation == replica.orientation
