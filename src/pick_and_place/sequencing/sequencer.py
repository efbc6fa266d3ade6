"""Define the sequencer that moves a robot arm through the phases of a pick-and-place task."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from rich.markup import escape

from pick_and_place.grasping import PathInterpolator, StackPlanner
from pick_and_place.io.logging import console, log_info
from pick_and_place.sequencing.task_structs import MotionPhase, ObjectPlan, PhasePlan

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence

    from pick_and_place.grasping import GraspModel, MotionProfile
    from pick_and_place.robots import GripperCommand, RobotBackend
    from pick_and_place.sequencing.lifecycle import LifecycleFailure, SimObjectLifecycle
    from pick_and_place.sequencing.task_structs import ObjectDescriptor
    from pick_and_place.spatial import Pose3D, TaskPose

logger = logging.getLogger(__name__)


class FailurePolicy(Enum):
    """What the sequencer does with the remaining objects after one object fails."""

    ABORT = "abort"
    """Stop the batch; later objects would be stacked on a missing object."""

    CONTINUE = "continue"
    """Proceed to the next object."""


class DispatchFailure(Exception):
    """An error raised when a command dispatched to the robot fails."""

    def __init__(self, object_name: str, phase: MotionPhase, message: str) -> None:
        """Initialize the failure with the object and phase during which it occurred."""
        super().__init__(f"'{object_name}' failed during {phase.name}: {message}")
        self.object_name = object_name
        self.phase = phase
        self.message = message


class MotionFailure(DispatchFailure):
    """An error raised when the arm cannot reach a frame (e.g., no IK solution or a fault)."""


class ActuationFailure(DispatchFailure):
    """An error raised when the gripper fails to open or close."""


class SequenceCancelled(Exception):
    """An error raised when the sequence is cancelled before a dispatch."""


@dataclass(frozen=True)
class SequencerSettings:
    """Distances and limits shared by every object's pick-and-place sequence."""

    initial_approach_distance: float
    """Distance (mm) back from the grasp frame at which each approach begins."""

    final_depart_distance: float
    """Distance (mm) back from the grasp frame at which each departure ends."""

    dispatch_timeout_s: float = 60.0
    """Duration (seconds) after which any single motion or gripper command times out."""

    failure_policy: FailurePolicy = FailurePolicy.ABORT

    def __post_init__(self) -> None:
        """Verify that the distances and timeout are valid."""
        for name in ("initial_approach_distance", "final_depart_distance"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and non-negative, got {value}")
        if not self.dispatch_timeout_s > 0:
            raise ValueError(f"Dispatch timeout must be positive, got {self.dispatch_timeout_s}")


@dataclass(frozen=True)
class ObjectFailure:
    """A failure that stopped one object's sequence."""

    object_name: str
    phase: MotionPhase | None
    kind: str
    message: str


@dataclass
class RunReport:
    """A summary of a pick-and-place run over a batch of objects."""

    completed: list[str] = field(default_factory=list)
    failures: list[ObjectFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    """Objects never attempted because the batch was aborted or cancelled."""

    cancelled: bool = False
    executed_phases: list[tuple[str, MotionPhase]] = field(default_factory=list)
    spawn_failures: list[LifecycleFailure] = field(default_factory=list)
    kill_failures: list[LifecycleFailure] = field(default_factory=list)
    spawn_count: int = 0
    kill_count: int = 0

    @property
    def orphaned_objects(self) -> list[str]:
        """Retrieve the simulated objects left behind because their removal failed."""
        return [failure.name for failure in self.kill_failures]

    @property
    def succeeded(self) -> bool:
        """Check whether every object was placed without failures or cancellation."""
        return not (self.failures or self.skipped or self.cancelled)

    def phases_of(self, object_name: str) -> list[MotionPhase]:
        """Retrieve the phases completed for the named object, in order."""
        return [phase for name, phase in self.executed_phases if name == object_name]


class TaskSequencer:
    """Moves a robot arm through the pick-and-place phases of each object in turn."""

    def __init__(
        self,
        backend: RobotBackend,
        grasp_model: GraspModel,
        profile: MotionProfile,
        settings: SequencerSettings,
        stack_planner: StackPlanner | None = None,
        lifecycle: SimObjectLifecycle | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Initialize the sequencer with the robot it commands and the frames it computes.

        :param backend: Robot arm (physical or simulated) executing the dispatched commands
        :param grasp_model: Model computing grasp frames from object and destination poses
        :param profile: Motion profile used for approach and depart motions
        :param settings: Approach/depart distances, timeouts, and the failure policy
        :param stack_planner: Planner stacking the objects at the destination (default: bricks)
        :param lifecycle: Optional registry spawning and removing simulated objects
        :param cancel_event: Optional event which, once set, stops the run before its next dispatch
        """
        self.backend = backend
        self.grasp_model = grasp_model
        self.interpolator = PathInterpolator(grasp_model, profile)
        self.settings = settings
        self.stack_planner = StackPlanner() if stack_planner is None else stack_planner
        self.lifecycle = lifecycle
        self.cancel_event = cancel_event

    def plan_object(self, obj: ObjectDescriptor, placement: TaskPose) -> ObjectPlan:
        """Compute the frames of every phase used to move an object to its placement.

        :param obj: Object to be picked up
        :param placement: Pose at which the object is released
        :return: Plan listing each phase in execution order
        """
        approach = self.settings.initial_approach_distance
        depart = self.settings.final_depart_distance

        pick_grasp = self.grasp_model.grasp_frame(obj.pose)
        place_grasp = self.grasp_model.grasp_frame(placement)

        def path(grasp_frame: Pose3D, initial: float, final: float) -> tuple[Pose3D, ...]:
            return tuple(self.interpolator.waypoints(grasp_frame, initial, final))

        # Every path includes both of its boundary frames, so each phase begins at the frame where
        # the previous phase ended (execute_plan does not re-send that frame)
        phases = (
            PhasePlan(MotionPhase.APPROACH, path(pick_grasp, approach, 0.0)),
            PhasePlan(MotionPhase.GRASP),
            PhasePlan(MotionPhase.DEPART, path(pick_grasp, 0.0, depart)),
            PhasePlan(MotionPhase.TRANSPORT, (self.grasp_model.frame_at(place_grasp, approach),)),
            PhasePlan(MotionPhase.PLACE_APPROACH, path(place_grasp, approach, 0.0)),
            PhasePlan(MotionPhase.RELEASE),
            PhasePlan(MotionPhase.PLACE_DEPART, path(place_grasp, 0.0, depart)),
        )
        return ObjectPlan(obj, placement, phases)

    def plan(self, objects: Sequence[ObjectDescriptor], destination: TaskPose) -> list[ObjectPlan]:
        """Plan every object's sequence, stacking the objects at the destination in order."""
        stack = self.stack_planner.plan(destination, len(objects))
        return [self.plan_object(obj, entry.destination) for obj, entry in zip(objects, stack)]

    def _check_cancelled(self, object_name: str, phase: MotionPhase) -> None:
        """Raise a SequenceCancelled error if cancellation was requested."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise SequenceCancelled(f"Run cancelled before {phase.name} of '{object_name}'.")

    def _move(self, object_name: str, phase: MotionPhase, target: Pose3D) -> None:
        """Dispatch one motion command and wait for it to finish.

        :raises MotionFailure: If the arm fails to reach the target
        """
        self._check_cancelled(object_name, phase)
        outcome = self.backend.execute_motion(target, self.settings.dispatch_timeout_s)
        if not outcome.success:
            raise MotionFailure(object_name, phase, outcome.message)

    def _actuate(self, object_name: str, phase: MotionPhase, command: GripperCommand) -> None:
        """Dispatch one gripper command and wait for it to finish.

        :raises ActuationFailure: If the gripper fails to open or close
        """
        self._check_cancelled(object_name, phase)
        outcome = self.backend.actuate_gripper(command, self.settings.dispatch_timeout_s)
        if not outcome.success:
            raise ActuationFailure(object_name, phase, outcome.message)

    def execute_plan(self, plan: ObjectPlan, report: RunReport) -> None:
        """Dispatch every phase of one object's plan, strictly in order.

        A waypoint equal to the frame last sent to the arm is not sent again.

        :raises DispatchFailure: If any command fails (the remaining phases are abandoned)
        :raises SequenceCancelled: If cancellation was requested before a dispatch
        """
        name = plan.obj.name
        current: Pose3D | None = None
        for phase_plan in plan.phases:
            logger.debug(f"'{name}': {phase_plan.phase.name} ({len(phase_plan.waypoints)} frames)")

            for waypoint in phase_plan.waypoints:
                if waypoint == current:
                    continue  # The arm is already at the frame where the previous phase ended
                self._move(name, phase_plan.phase, waypoint)
                current = waypoint

            command = phase_plan.gripper_command
            if command is not None:
                self._actuate(name, phase_plan.phase, command)

            report.executed_phases.append((name, phase_plan.phase))

    def _record_failure(self, report: RunReport, failure: ObjectFailure) -> None:
        """Report a failed object and remove its simulated counterpart, if any."""
        console.print(f"[red]{failure.kind}: {escape(failure.message)}[/]")
        report.failures.append(failure)
        if self.lifecycle is not None:
            self.lifecycle.kill(failure.object_name)

    def run(self, objects: Sequence[ObjectDescriptor], destination: TaskPose) -> RunReport:
        """Pick up each object in order and stack it at the destination.

        Every frame is computed before the first command is dispatched.

        :param objects: Objects to be moved, in pick order (the first ends up at the bottom)
        :param destination: Pose of the bottom of the stack
        :return: Report of the completed, failed, and skipped objects
        """
        plans = self.plan(objects, destination)
        report = RunReport()

        try:
            if self.lifecycle is not None:
                self.lifecycle.spawn_all(objects)

            for index, plan in enumerate(plans):
                name = plan.obj.name
                log_info(f"Picking '{name}' and placing it at {plan.placement}")

                try:
                    self.execute_plan(plan, report)
                except DispatchFailure as failure:
                    kind = type(failure).__name__
                    failed = ObjectFailure(name, failure.phase, kind, str(failure))
                    self._record_failure(report, failed)
                    if self.settings.failure_policy is FailurePolicy.ABORT:
                        report.skipped.extend(p.obj.name for p in plans[index + 1 :])
                        break
                    continue
                except SequenceCancelled as cancelled:
                    report.cancelled = True
                    failed = ObjectFailure(name, None, "Cancelled", str(cancelled))
                    self._record_failure(report, failed)
                    report.skipped.extend(p.obj.name for p in plans[index + 1 :])
                    break

                report.completed.append(name)
                if self.lifecycle is not None:
                    self.lifecycle.on_object_completed(name)
        finally:
            if self.lifecycle is not None:
                self.lifecycle.kill_all()
                report.spawn_failures = list(self.lifecycle.spawn_failures)
                report.kill_failures = list(self.lifecycle.kill_failures)
                report.spawn_count = self.lifecycle.spawn_count
                report.kill_count = self.lifecycle.kill_count

        if report.orphaned_objects:
            console.print(f"[red]Objects left in the simulator: {report.orphaned_objects}[/]")

        return report
