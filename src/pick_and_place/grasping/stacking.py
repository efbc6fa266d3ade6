"""Define a planner assigning stacked destination poses to objects sharing a destination."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pick_and_place.spatial import TaskPose

BRICK_HEIGHT_MM = 11.4
"""Height (mm) of the bricks handled by the Lynxmotion AL5D demonstration task."""


@dataclass(frozen=True)
class StackEntry:
    """The destination assigned to one object within a stack."""

    object_index: int
    destination: TaskPose

    @property
    def destination_z(self) -> float:
        """Retrieve the height (mm) at which the object is placed."""
        return self.destination.z


@dataclass(frozen=True)
class StackPlanner:
    """Stacks objects at one (x, y, phi) destination by raising each by the object height.

    Object i is placed i-th from the bottom, so objects must be placed in index order: placing
    an object before the objects beneath it leaves it without support.
    """

    object_height: float = BRICK_HEIGHT_MM

    def __post_init__(self) -> None:
        """Verify that the object height separates the stacked objects."""
        if not math.isfinite(self.object_height) or self.object_height <= 0:
            raise ValueError(f"Stacked objects need a positive height, got {self.object_height}")

    def plan(self, destination: TaskPose, count: int) -> list[StackEntry]:
        """Compute the destination of each of `count` objects stacked at the given pose.

        :param destination: Pose of the bottom of the stack
        :param count: Number of objects placed on the stack
        :return: Stack entries in placement order, with z = base_z + i * object_height
        """
        if count < 0:
            raise ValueError(f"Cannot plan a stack of {count} objects")

        return [
            StackEntry(i, destination.with_z(destination.z + i * self.object_height))
            for i in range(count)
        ]
