"""Define data structures describing the objects and motion phases of a pick-and-place task."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import cycle
from typing import TYPE_CHECKING

from pick_and_place.robots.gripper import GripperCommand

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pick_and_place.spatial import Pose3D, TaskPose

DEFAULT_COLORS = ("red", "green", "blue")
"""Colors cycled through when simulated objects are not given explicit colors."""


class MotionPhase(Enum):
    """The phases of one object's pick-and-place operation, in execution order."""

    APPROACH = "approach"
    GRASP = "grasp"
    DEPART = "depart"
    TRANSPORT = "transport"
    PLACE_APPROACH = "place_approach"
    RELEASE = "release"
    PLACE_DEPART = "place_depart"

    @property
    def gripper_command(self) -> GripperCommand | None:
        """Retrieve the gripper command issued by the phase (None for motion phases)."""
        return _PHASE_GRIPPER_COMMANDS.get(self)


_PHASE_GRIPPER_COMMANDS = {
    MotionPhase.GRASP: GripperCommand.CLOSE,
    MotionPhase.RELEASE: GripperCommand.OPEN,
}

PHASE_ORDER: tuple[MotionPhase, ...] = tuple(MotionPhase)
"""Every phase, in the strict order in which each object passes through them."""


@dataclass(frozen=True)
class ObjectDescriptor:
    """An object to be picked up, with the name and color used to simulate it."""

    name: str
    color: str
    pose: TaskPose


def describe_objects(
    poses: Sequence[TaskPose],
    names: Sequence[str] = (),
    colors: Sequence[str] = DEFAULT_COLORS,
) -> list[ObjectDescriptor]:
    """Name and color each of the given object poses.

    :param poses: Poses of the objects, in pick order
    :param names: Optional object names; objects beyond the given names are named "brick<i>"
    :param colors: Colors assigned to the objects, cycled if fewer than the objects
    :return: Object descriptors in pick order
    :raises ValueError: If the names are not unique or no colors are given
    """
    if not colors:
        raise ValueError("Cannot describe objects without at least one color.")
    if len(set(names)) != len(names):
        raise ValueError(f"Object names must be unique, got {list(names)}")

    all_names = [names[i] if i < len(names) else f"brick{i + 1}" for i in range(len(poses))]
    if len(set(all_names)) != len(all_names):
        raise ValueError(f"Generated object names collide with given names: {all_names}")

    return [
        ObjectDescriptor(name, color, pose)
        for name, color, pose in zip(all_names, cycle(colors), poses)
    ]


@dataclass(frozen=True)
class PhasePlan:
    """The frames visited during one motion phase (no frames for gripper-only phases)."""

    phase: MotionPhase
    waypoints: tuple[Pose3D, ...] = ()

    @property
    def gripper_command(self) -> GripperCommand | None:
        """Retrieve the gripper command issued by the phase, if any."""
        return self.phase.gripper_command

    @property
    def target(self) -> Pose3D | None:
        """Retrieve the final frame reached by the phase (None for gripper-only phases)."""
        return self.waypoints[-1] if self.waypoints else None


@dataclass(frozen=True)
class ObjectPlan:
    """The complete, ordered list of phases used to pick and place one object."""

    obj: ObjectDescriptor
    placement: TaskPose
    phases: tuple[PhasePlan, ...]

    def __post_init__(self) -> None:
        """Verify that the plan passes through every phase in order."""
        phases = tuple(p.phase for p in self.phases)
        if phases != PHASE_ORDER:
            raise ValueError(f"Plan for '{self.obj.name}' has phases out of order: {phases}")
