"""Define simulators and arms that record (or fail) the commands dispatched to them."""

from __future__ import annotations

import threading
from typing import Any

from pick_and_place.robots import (
    AngularGripper,
    Configuration,
    GripperAngleLimits,
    GripperCommand,
    IKSolver,
    InMemorySimulator,
    Outcome,
    SimulatedArm,
)
from pick_and_place.spatial import Point3D, Pose3D, TaskPose


class RecordingSimulator(InMemorySimulator):
    """An in-memory simulator logging every spawn and kill request into a shared event list."""

    def __init__(self, events: list[tuple[str, Any]], failing_kills: tuple[str, ...] = ()) -> None:
        """Initialize the simulator with the event log and the names whose removal fails."""
        super().__init__()
        self.events = events
        self.failing_kills = failing_kills

    def spawn_object(self, name: str, color: str, pose: TaskPose) -> Outcome:
        """Record and perform a spawn request."""
        self.events.append(("spawn", name))
        return super().spawn_object(name, color, pose)

    def kill_object(self, name: str) -> Outcome:
        """Record and perform a kill request, failing for the configured names."""
        self.events.append(("kill", name))
        if name in self.failing_kills:
            return Outcome(success=False, message=f"Simulator refused to remove '{name}'.")
        return super().kill_object(name)

    @property
    def kill_requests(self) -> list[str]:
        """Retrieve the names given to every kill request, in order."""
        return [name for kind, name in self.events if kind == "kill"]

    @property
    def spawn_requests(self) -> list[str]:
        """Retrieve the names given to every spawn request, in order."""
        return [name for kind, name in self.events if kind == "spawn"]


class RecordingArm(SimulatedArm):
    """A simulated arm logging its commands and optionally faulting near a given position.

    The arm faults on any motion made with a closed gripper toward a target within 1 mm (in x
    and y) of the fault position, so a fault at an object's position fails the departure from it.
    """

    def __init__(
        self,
        simulator: RecordingSimulator,
        fault_xy: tuple[float, float] | None = None,
        cancel_event: threading.Event | None = None,
        cancel_after_moves: int | None = None,
    ) -> None:
        """Initialize the arm with an optional fault position and cancellation trigger."""
        super().__init__(simulator)
        self.events = simulator.events
        self.fault_xy = fault_xy
        self.cancel_event = cancel_event
        self.cancel_after_moves = cancel_after_moves
        self.timeouts: list[float] = []

    def _faults_toward(self, target: Pose3D) -> bool:
        if self.fault_xy is None or not self.gripper_closed:
            return False
        fault = Point3D(self.fault_xy[0], self.fault_xy[1], target.position.z)
        return target.position.distance_to(fault) < 1.0

    def execute_motion(self, target: Pose3D, timeout_s: float) -> Outcome:
        """Record the motion, then fail it or pass it to the simulated arm."""
        self.events.append(("move", target))
        self.timeouts.append(timeout_s)
        if self._faults_toward(target):
            return Outcome(success=False, message="Simulated servo fault.")

        outcome = super().execute_motion(target, timeout_s)
        if self.cancel_event is not None and len(self.motion_history) == self.cancel_after_moves:
            self.cancel_event.set()
        return outcome

    def actuate_gripper(self, command: GripperCommand, timeout_s: float) -> Outcome:
        """Record the gripper command and pass it to the simulated arm."""
        self.events.append(("gripper", command))
        self.timeouts.append(timeout_s)
        return super().actuate_gripper(command, timeout_s)


class FakeGripper(AngularGripper):
    """A gripper reaching (or failing to reach) every commanded angle instantly."""

    def __init__(self, reaches_target: bool = True) -> None:
        """Initialize the gripper with fixed joint limits."""
        super().__init__(GripperAngleLimits(open_rad=0.0, closed_rad=1.2))
        self.reaches_target = reaches_target
        self.commanded_angles: list[float] = []

    def move_to_angle_rad(self, target_rad: float, timeout_s: float) -> bool:
        """Record the commanded angle and report whether it was reached."""
        self.commanded_angles.append(target_rad)
        return self.reaches_target


class FakeJointDriver:
    """A joint driver recording every configuration it is commanded to reach."""

    def __init__(self, reaches_target: bool = True) -> None:
        """Initialize the driver with whether its commands succeed."""
        self.reaches_target = reaches_target
        self.commands: list[tuple[Configuration, float]] = []

    def move_to(self, configuration: Configuration, timeout_s: float) -> bool:
        """Record the commanded configuration and report whether it was reached."""
        self.commands.append((configuration, timeout_s))
        return self.reaches_target


def planar_ik(max_reach_mm: float = 400.0) -> IKSolver:
    """Create an IK solver which rejects poses beyond a radius from the base."""

    def solve(pose: Pose3D) -> Configuration | None:
        x, y, z = pose.position
        if (x**2 + y**2 + z**2) ** 0.5 > max_reach_mm:
            return None
        return {"x": x, "y": y, "z": z}

    return solve
