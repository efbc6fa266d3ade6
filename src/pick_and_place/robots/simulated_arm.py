"""Implement a robot backend for an arm whose motion is simulated kinematically."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pick_and_place.robots.backend import RobotBackend
from pick_and_place.robots.gripper import GripperCommand
from pick_and_place.robots.outcome import Outcome
from pick_and_place.spatial import GRIPPER_FRAME, Pose3D

if TYPE_CHECKING:
    from pick_and_place.robots.backend import IKSolver
    from pick_and_place.robots.simulator import Simulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeldObject:
    """An object held by the closed gripper."""

    name: str
    pose_g_o: Pose3D
    """Pose of the object (frame o) w.r.t. the gripper (frame g)."""


class SimulatedArm(RobotBackend):
    """A simulated arm that moves instantly and carries the objects it grasps."""

    def __init__(
        self,
        simulator: Simulator,
        ik_solver: IKSolver | None = None,
        grasp_tolerance_mm: float = 15.0,
    ) -> None:
        """Initialize the simulated arm in the given simulated workspace.

        :param simulator: Simulator holding the objects the arm can grasp
        :param ik_solver: Optional inverse kinematics used to reject unreachable poses
        :param grasp_tolerance_mm: Maximum distance (mm) between the gripper and a grasped object
        """
        self._simulator = simulator
        self.ik_solver = ik_solver
        self.grasp_tolerance_mm = grasp_tolerance_mm

        self.gripper_pose = Pose3D.identity()
        self.gripper_closed = False
        self.held_object: HeldObject | None = None

        self.motion_history: list[Pose3D] = []
        """Every pose the gripper has been moved to, in order."""

        self.gripper_history: list[GripperCommand] = []
        """Every command sent to the gripper, in order."""

    @property
    def simulator(self) -> Simulator:
        """Retrieve the simulator in which the arm operates."""
        return self._simulator

    def execute_motion(self, target: Pose3D, timeout_s: float) -> Outcome:
        """Move the gripper (and any object it holds) to the target pose."""
        if self.ik_solver is not None and self.ik_solver(target) is None:
            return Outcome(success=False, message=f"No IK solution reaches the pose {target}.")

        self.gripper_pose = target
        self.motion_history.append(target)

        if self.held_object is not None:
            name = self.held_object.name
            if self._simulator.get_object_pose(name) is None:
                logger.debug(f"Held object '{name}' was removed from the simulator")
                self.held_object = None
            else:
                self._simulator.set_object_pose(name, target @ self.held_object.pose_g_o)

        return Outcome(success=True, message=f"Moved gripper to {target}.")

    def actuate_gripper(self, command: GripperCommand, timeout_s: float) -> Outcome:
        """Close the gripper on the nearest object, or open it to release what it holds."""
        self.gripper_history.append(command)

        if command is GripperCommand.OPEN:
            if self.held_object is not None:
                logger.debug(f"Released object '{self.held_object.name}'")
            self.held_object = None
            self.gripper_closed = False
            return Outcome(success=True, message="Opened the gripper.")

        self.gripper_closed = True
        self.held_object = self._find_graspable_object()
        if self.held_object is None:
            return Outcome(success=True, message="Closed the gripper on nothing.")

        return Outcome(success=True, message=f"Grasped object '{self.held_object.name}'.")

    def _find_graspable_object(self) -> HeldObject | None:
        """Find the object nearest to the gripper within the grasp tolerance."""
        closest: tuple[float, str, Pose3D] | None = None

        for name in self._simulator.object_names:
            object_pose = self._simulator.get_object_pose(name)
            if object_pose is None:
                continue

            distance = object_pose.position.distance_to(self.gripper_pose.position)
            if distance <= self.grasp_tolerance_mm and (closest is None or distance < closest[0]):
                closest = (distance, name, object_pose)

        if closest is None:
            return None

        _, name, pose_b_o = closest
        pose_g_b = self.gripper_pose.inverse(GRIPPER_FRAME)
        return HeldObject(name, pose_g_b @ pose_b_o)
