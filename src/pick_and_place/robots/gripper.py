"""Define an interface for an angular robot gripper."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from pick_and_place.robots.outcome import Outcome


class GripperCommand(Enum):
    """A command opening or closing the gripper."""

    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class GripperAngleLimits:
    """Specifies joint limits (in radians) for a robot gripper."""

    open_rad: float
    """Angle (radians) at which the gripper is fully open."""

    closed_rad: float
    """Angle (radians) at which the gripper is fully closed."""


class AngularGripper(ABC):
    """An interface for an angular robot gripper."""

    def __init__(self, limits: GripperAngleLimits) -> None:
        """Initialize the angular gripper with its joint limits."""
        self.joint_limits = limits

    @abstractmethod
    def move_to_angle_rad(self, target_rad: float, timeout_s: float) -> bool:
        """Move the gripper to a target angle (radians).

        :param target_rad: Target angle (radians) for the gripper
        :param timeout_s: Duration (seconds) after which the motion times out
        :return: True if the gripper reached the target angle in time, else False
        """
        ...

    def actuate(self, command: GripperCommand, timeout_s: float = 10.0) -> Outcome:
        """Fully open or fully close the gripper."""
        target_rad = (
            self.joint_limits.open_rad
            if command is GripperCommand.OPEN
            else self.joint_limits.closed_rad
        )
        if self.move_to_angle_rad(target_rad, timeout_s):
            return Outcome(success=True, message=f"Gripper reached '{command.value}' position.")

        return Outcome(
            success=False,
            message=f"Gripper failed to {command.value} within {timeout_s:.1f} s.",
        )
