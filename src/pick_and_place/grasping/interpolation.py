"""Define motion profiles that approximate straight-line approach and depart motions.

Distances are measured from the grasp frame "back" along the gripper's approach axis, so a
distance of zero is the grasp frame itself. Approaching the grasp frame runs from a large
distance down to zero; departing from it runs from zero up to a large distance.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pick_and_place.grasping.grasp_model import GraspModel
    from pick_and_place.spatial import Pose3D

_STEP_TOLERANCE = 1e-9
"""Fraction of a step below which a final partial step is merged into the boundary."""


def interpolate_distances(initial: float, final: float, delta: float) -> Iterator[float]:
    """Generate distances stepping from `initial` toward `final` in increments of `delta`.

    The final distance is always generated exactly once, as the last element, whether or not
    `delta` evenly divides the total distance travelled.

    :param initial: Distance (mm) at which the motion begins
    :param final: Distance (mm) at which the motion ends
    :param delta: Positive step size (mm) between consecutive distances
    :return: Lazy iterator over the distances, strictly monotonic toward `final`
    :raises ValueError: If `delta` is not positive or any value is not finite
    """
    if not (math.isfinite(initial) and math.isfinite(final)):
        raise ValueError(f"Cannot interpolate between non-finite distances {initial} and {final}")
    if not math.isfinite(delta) or delta <= 0:
        raise ValueError(f"Interpolation step must be positive and finite, got {delta}")

    return _generate_distances(initial, final, delta)


def _generate_distances(initial: float, final: float, delta: float) -> Iterator[float]:
    span = final - initial
    if span != 0:
        direction = math.copysign(1.0, span)
        num_steps = math.ceil(abs(span) / delta - _STEP_TOLERANCE)

        # Each step is computed from the start, so rounding error never accumulates
        for k in range(num_steps):
            yield initial + direction * k * delta

    yield final


class MotionProfile(ABC):
    """A strategy deciding which intermediate frames a gripper passes through."""

    @abstractmethod
    def distances(self, initial: float, final: float) -> Iterator[float]:
        """Generate the distances (from the grasp frame) visited when moving initial -> final."""
        ...


class DirectProfile(MotionProfile):
    """Move directly between the two boundary frames."""

    def distances(self, initial: float, final: float) -> Iterator[float]:
        """Generate only the two boundary distances (just one if they coincide)."""
        if initial == final:
            return iter((final,))
        return iter((initial, final))

    def __repr__(self) -> str:
        """Return a string representation of the direct profile."""
        return "DirectProfile()"


@dataclass(frozen=True)
class InterpolatedProfile(MotionProfile):
    """Approximate continuous straight-line motion using evenly spaced waypoints."""

    delta: float
    """Distance (mm) between consecutive waypoints."""

    def __post_init__(self) -> None:
        """Verify that the step size can produce a finite sequence of waypoints."""
        if not math.isfinite(self.delta) or self.delta <= 0:
            raise ValueError(f"Interpolation step must be positive and finite, got {self.delta}")

    def distances(self, initial: float, final: float) -> Iterator[float]:
        """Generate distances from `initial` to `final` in steps of `delta`."""
        return interpolate_distances(initial, final, self.delta)


def profile_from_config(continuous_path: bool, delta: float | None) -> MotionProfile:
    """Select the motion profile matching a continuous-path setting.

    :param continuous_path: Whether continuous-path motion is approximated
    :param delta: Step (mm) between waypoints (required if `continuous_path` is True)
    :return: Interpolated profile if continuous-path is enabled, else a direct profile
    """
    if not continuous_path:
        return DirectProfile()
    if delta is None:
        raise ValueError("Continuous-path motion requires an interpolation step (delta).")
    return InterpolatedProfile(delta)


@dataclass(frozen=True)
class PathInterpolator:
    """Generates the gripper frames visited while approaching or departing a grasp frame."""

    model: GraspModel
    profile: MotionProfile

    def waypoints(self, grasp_frame: Pose3D, initial: float, final: float) -> Iterator[Pose3D]:
        """Generate waypoint frames between two distances from the given grasp frame.

        :param grasp_frame: Gripper pose at the grasp point
        :param initial: Distance (mm) from the grasp frame where the motion begins
        :param final: Distance (mm) from the grasp frame where the motion ends
        :return: Lazy iterator over waypoint frames; the last is the `final` boundary frame
        """
        for distance in self.profile.distances(initial, final):
            yield self.model.frame_at(grasp_frame, distance)
