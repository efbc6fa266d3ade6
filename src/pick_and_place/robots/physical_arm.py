"""Implement a robot backend commanding a physical arm through inverse kinematics."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from pick_and_place.robots.backend import Configuration, IKSolver, RobotBackend
from pick_and_place.robots.outcome import Outcome

if TYPE_CHECKING:
    from pick_and_place.robots.gripper import AngularGripper, GripperCommand
    from pick_and_place.spatial import Pose3D

logger = logging.getLogger(__name__)


class JointDriver(Protocol):
    """An actuator driver moving the arm's joints to commanded positions."""

    def move_to(self, configuration: Configuration, timeout_s: float) -> bool:
        """Move the arm's joints to the given configuration.

        :return: True if the configuration was reached before the timeout, else False
        """
        ...


class PhysicalArm(RobotBackend):
    """A physical robot arm whose gripper poses are converted into joint commands."""

    def __init__(self, ik_solver: IKSolver, driver: JointDriver, gripper: AngularGripper) -> None:
        """Initialize the arm with its kinematics, its joint driver, and its gripper.

        :param ik_solver: Robot-specific inverse kinematics (built from its calibration data)
        :param driver: Driver commanding the arm's joint actuators
        :param gripper: Gripper mounted on the arm
        """
        self.ik_solver = ik_solver
        self.driver = driver
        self.gripper = gripper

    def execute_motion(self, target: Pose3D, timeout_s: float) -> Outcome:
        """Move the gripper to the target pose via an inverse kinematics solution."""
        configuration = self.ik_solver(target)
        if configuration is None:
            return Outcome(success=False, message=f"No IK solution reaches the pose {target}.")

        logger.debug(f"Joint command {configuration} for target {target}")
        if not self.driver.move_to(configuration, timeout_s):
            return Outcome(
                success=False,
                message=f"Arm did not reach {target} within {timeout_s:.1f} s.",
            )

        return Outcome(success=True, message=f"Moved gripper to {target}.", output=configuration)

    def actuate_gripper(self, command: GripperCommand, timeout_s: float) -> Outcome:
        """Open or close the arm's gripper."""
        return self.gripper.actuate(command, timeout_s)
