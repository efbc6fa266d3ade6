"""Define the interface through which a pick-and-place task commands a robot arm."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Dict, Optional

if TYPE_CHECKING:
    from pick_and_place.robots.gripper import GripperCommand
    from pick_and_place.robots.outcome import Outcome
    from pick_and_place.robots.simulator import Simulator
    from pick_and_place.spatial import Pose3D

Configuration = Dict[str, float]
"""A map from joint names to positions (rad or m)."""

IKSolver = Callable[["Pose3D"], Optional[Configuration]]
"""Maps a target gripper pose to joint positions reaching it, or None if it's unreachable."""


class RobotBackend(ABC):
    """A robot arm (physical or simulated) that executes gripper poses and gripper commands.

    Every call blocks until the command has finished, failed, or timed out.
    """

    @abstractmethod
    def execute_motion(self, target: Pose3D, timeout_s: float) -> Outcome:
        """Move the gripper to the given target pose.

        :param target: Target pose of the gripper w.r.t. the robot base
        :param timeout_s: Duration (seconds) after which the motion times out
        :return: Boolean success of the motion and an outcome message
        """
        ...

    @abstractmethod
    def actuate_gripper(self, command: GripperCommand, timeout_s: float) -> Outcome:
        """Open or close the gripper.

        :param command: Whether the gripper is opened or closed
        :param timeout_s: Duration (seconds) after which the actuation times out
        :return: Boolean success of the actuation and an outcome message
        """
        ...

    @property
    def simulator(self) -> Simulator | None:
        """Retrieve the simulator in which objects can be spawned (None for physical robots)."""
        return None
