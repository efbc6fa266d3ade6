"""Define a command-line interface for planning and dry-running pick-and-place tasks."""

from __future__ import annotations

import signal
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.markup import escape
from rich.table import Table

from pick_and_place.io.config import ConfigError, TaskConfigSchema
from pick_and_place.io.logging import configure_logging, console
from pick_and_place.io.task_file import TaskSpec, load_task_file
from pick_and_place.robots import InMemorySimulator, SimulatedArm
from pick_and_place.sequencing import SimObjectLifecycle, TaskSequencer, describe_objects

if TYPE_CHECKING:
    from types import FrameType

    from pick_and_place.robots import RobotBackend
    from pick_and_place.sequencing import ObjectPlan, RunReport


def _load_inputs(
    task_file: Path,
    config_file: Path,
    check_calibration: bool,
) -> tuple[TaskSpec, TaskConfigSchema]:
    """Load the task and its configuration, exiting with a readable message on errors."""
    try:
        config = TaskConfigSchema.validate_yaml(config_file)
        task = load_task_file(task_file, check_calibration=check_calibration)
    except ConfigError as error:
        console.print(f"[red]Configuration error:[/] {escape(str(error))}")
        raise SystemExit(1) from error

    return task, config


def _build_sequencer(
    config: TaskConfigSchema,
    backend: RobotBackend,
    lifecycle: SimObjectLifecycle | None = None,
    cancel_event: threading.Event | None = None,
) -> TaskSequencer:
    """Construct a sequencer configured by the given task configuration."""
    return TaskSequencer(
        backend=backend,
        grasp_model=config.grasp_model(),
        profile=config.motion_profile(),
        settings=config.sequencer_settings(),
        stack_planner=config.stack_planner(),
        lifecycle=lifecycle,
        cancel_event=cancel_event,
    )


def _render_plan_table(plan: ObjectPlan) -> Table:
    """Render a table listing the phases of one object's plan."""
    title = f"{plan.obj.name} ({plan.obj.color}): {plan.obj.pose} -> {plan.placement}"
    table = Table(title=title)
    table.add_column("Phase", style="bold")
    table.add_column("Frames", justify="right", style="cyan")
    table.add_column("Target")

    for phase_plan in plan.phases:
        command = phase_plan.gripper_command
        target = f"{command.value} gripper" if command is not None else str(phase_plan.target)
        table.add_row(phase_plan.phase.name, str(len(phase_plan.waypoints)), target)
    return table


def _render_report_table(report: RunReport) -> Table:
    """Render a table summarizing a run report."""
    table = Table(title="Run report", show_header=False)
    table.add_column("Item", style="bold")
    table.add_column("Value")

    table.add_row("Completed", ", ".join(report.completed) or "-")
    table.add_row("Failed", "\n".join(f.message for f in report.failures) or "-")
    table.add_row("Skipped", ", ".join(report.skipped) or "-")
    table.add_row("Spawned / removed", f"{report.spawn_count} / {report.kill_count}")
    table.add_row("Spawn failures", ", ".join(f.name for f in report.spawn_failures) or "-")
    table.add_row("Orphaned objects", ", ".join(report.orphaned_objects) or "-")
    return table


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every pose read and every dispatch.")
def cli(verbose: bool) -> None:
    """Plan and run task-level pick-and-place operations."""
    configure_logging(verbose)


task_file_argument = click.argument(
    "task_file",
    type=click.Path(path_type=Path, dir_okay=False),
)
config_option = click.option(
    "--config",
    "config_file",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="YAML file configuring the grasp offset, distances, and motion profile.",
)
calibration_option = click.option(
    "--check-calibration/--no-check-calibration",
    default=True,
    help="Require the robot calibration file named by the task file to exist.",
)


@cli.command()
@task_file_argument
@config_option
@calibration_option
def plan(task_file: Path, config_file: Path, check_calibration: bool) -> None:
    """Compute and display the frames of every object's pick-and-place sequence."""
    task, config = _load_inputs(task_file, config_file, check_calibration)
    objects = describe_objects(task.object_poses, config.objects.names, config.objects.colors)

    sequencer = _build_sequencer(config, SimulatedArm(InMemorySimulator()))
    for object_plan in sequencer.plan(objects, task.destination):
        console.print(_render_plan_table(object_plan))


@cli.command()
@task_file_argument
@config_option
@calibration_option
@click.option(
    "--spawn/--no-spawn",
    default=None,
    help="Spawn and remove simulated objects (defaults to the config's 'create_objects').",
)
def run(task_file: Path, config_file: Path, check_calibration: bool, spawn: bool | None) -> None:
    """Run the pick-and-place task against a simulated arm."""
    task, config = _load_inputs(task_file, config_file, check_calibration)
    objects = describe_objects(task.object_poses, config.objects.names, config.objects.colors)

    arm = SimulatedArm(InMemorySimulator())
    create_objects = config.create_objects if spawn is None else spawn
    lifecycle = (
        SimObjectLifecycle(arm.simulator, config.object_kill_mode) if create_objects else None
    )

    cancel_event = threading.Event()

    def request_cancel(signum: int, frame: FrameType | None) -> None:
        console.print("[yellow]Cancelling after the current command...[/]")
        cancel_event.set()

    previous_handler = signal.signal(signal.SIGINT, request_cancel)
    try:
        sequencer = _build_sequencer(config, arm, lifecycle, cancel_event)
        report = sequencer.run(objects, task.destination)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    console.print(_render_report_table(report))
    if not report.succeeded:
        raise SystemExit(1)
