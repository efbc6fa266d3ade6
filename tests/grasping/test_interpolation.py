"""Unit tests for the motion profiles generating approach and depart waypoints."""

from __future__ import annotations

import math

import pytest
from hypothesis import given

from pick_and_place.grasping import (
    DirectProfile,
    GraspModel,
    InterpolatedProfile,
    PathInterpolator,
    interpolate_distances,
    profile_from_config,
)
from pick_and_place.spatial import Point3D, TaskPose

from ..strategies.spatial_strategies import approach_intervals


@given(approach_intervals())
def test_interpolated_approach_is_monotonic(interval: tuple[float, float, float]) -> None:
    """Verify that approach distances strictly decrease and end exactly at the final distance."""
    # Arrange - Given an approach from `initial` down to `final` in steps of `delta`
    initial, final, delta = interval

    # Act - Generate the distances visited during the approach
    distances = list(interpolate_distances(initial, final, delta))

    # Assert - Expect a strictly decreasing sequence from initial to final (reached only once)
    assert distances[0] == initial
    assert distances[-1] == final
    assert distances.count(final) == 1
    assert all(a > b for a, b in zip(distances, distances[1:]))

    # Expect every step but the last to be exactly `delta` (up to rounding) and none longer
    steps = [a - b for a, b in zip(distances, distances[1:])]
    assert all(step == pytest.approx(delta, abs=1e-06) for step in steps[:-1])
    assert steps[-1] <= delta + 1e-06


@given(approach_intervals())
def test_interpolated_depart_mirrors_approach(interval: tuple[float, float, float]) -> None:
    """Verify that a departure strictly increases from its initial to its final distance."""
    # Arrange - Reverse the interval to describe a departure
    far, near, delta = interval

    # Act - Generate the distances visited during the departure
    distances = list(interpolate_distances(near, far, delta))

    # Assert - Expect a strictly increasing sequence ending exactly at the far distance
    assert distances[0] == near
    assert distances[-1] == far
    assert all(a < b for a, b in zip(distances, distances[1:]))


def test_interpolated_distances_when_delta_divides_span() -> None:
    """Verify the distances visited when the step evenly divides the distance travelled."""
    # Arrange/Act - Approach from 50 mm to 0 mm in 10 mm steps
    distances = list(interpolate_distances(50.0, 0.0, 10.0))

    # Assert - Expect ceil(50 / 10) segments, hence six waypoints
    assert distances == [50.0, 40.0, 30.0, 20.0, 10.0, 0.0]


def test_interpolated_distances_when_delta_exceeds_span() -> None:
    """Verify that a step longer than the distance travelled still gives both boundaries."""
    # Arrange/Act - Approach from 1 mm to 0 mm in 10 mm steps
    distances = list(interpolate_distances(1.0, 0.0, 10.0))

    # Assert - Expect a single segment between the two boundary distances
    assert distances == [1.0, 0.0]


def test_interpolated_distances_with_partial_final_step() -> None:
    """Verify that a final partial step is kept when the step doesn't divide the span."""
    # Arrange/Act - Depart from 0 mm to 25 mm in 10 mm steps
    distances = list(interpolate_distances(0.0, 25.0, 10.0))

    # Assert - Expect the final distance appended after the last full step
    assert distances == [0.0, 10.0, 20.0, 25.0]


def test_interpolated_distances_for_equal_boundaries() -> None:
    """Verify that no motion is interpolated between coincident distances."""
    assert list(interpolate_distances(0.0, 0.0, 10.0)) == [0.0]


@pytest.mark.parametrize("delta", [0.0, -1.0, math.inf, math.nan])
def test_interpolation_rejects_invalid_delta(delta: float) -> None:
    """Verify that non-positive or non-finite steps are rejected before any waypoint is made."""
    with pytest.raises(ValueError):
        interpolate_distances(50.0, 0.0, delta)
    with pytest.raises(ValueError):
        InterpolatedProfile(delta)


def test_interpolation_rejects_non_finite_distances() -> None:
    """Verify that non-finite boundary distances are rejected."""
    with pytest.raises(ValueError):
        interpolate_distances(math.inf, 0.0, 10.0)


def test_direct_profile_visits_only_boundaries() -> None:
    """Verify that the direct profile visits just the initial and final distances."""
    # Arrange - A profile moving directly between boundaries
    profile = DirectProfile()

    # Act/Assert - Expect only the boundaries (once, if they coincide)
    assert list(profile.distances(50.0, 0.0)) == [50.0, 0.0]
    assert list(profile.distances(0.0, 0.0)) == [0.0]


def test_profile_from_config() -> None:
    """Verify that the continuous-path flag selects the motion profile."""
    # Arrange/Act - Select profiles with continuous-path motion enabled and disabled
    interpolated = profile_from_config(continuous_path=True, delta=5.0)
    direct = profile_from_config(continuous_path=False, delta=None)

    # Assert - Expect an interpolated profile only with continuous-path motion
    assert interpolated == InterpolatedProfile(5.0)
    assert isinstance(direct, DirectProfile)
    with pytest.raises(ValueError):
        profile_from_config(continuous_path=True, delta=None)


def test_path_interpolator_ends_at_grasp_frame(brick_grasp_model: GraspModel) -> None:
    """Verify that an interpolated approach descends onto the grasp frame."""
    # Arrange - Interpolate the approach onto a brick in 10 mm steps
    interpolator = PathInterpolator(brick_grasp_model, InterpolatedProfile(10.0))
    grasp_frame = brick_grasp_model.grasp_frame(TaskPose(-40.0, 150.0, 0.0, -90.0))

    # Act - Generate the waypoints of a 50 mm approach
    waypoints = list(interpolator.waypoints(grasp_frame, 50.0, 0.0))

    # Assert - Expect six waypoints descending 10 mm at a time, the last being the grasp frame
    assert len(waypoints) == 6
    assert waypoints[-1] == grasp_frame
    heights = [w.position.z for w in waypoints]
    assert heights == pytest.approx([55.0, 45.0, 35.0, 25.0, 15.0, 5.0])
    assert waypoints[0].position.approx_equal(Point3D(-40.0, 150.0, 55.0), atol=1e-09)
