"""Define functions to read the object and destination poses of a pick-and-place task.

A task file is whitespace-separated text:

    <calibration data identifier>
    x y z phi          # one line per object to be picked
    ...
    x y z phi          # the last pose line is the common destination

Positions are in millimeters and phi is the rotation (degrees) about the vertical axis. The
calibration identifier names a robot calibration file located beside the task file.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

from pick_and_place.io.config import ConfigError
from pick_and_place.spatial import TaskPose

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


@dataclass(frozen=True)
class TaskSpec:
    """Poses read from a task file, with the robot calibration data they refer to."""

    calibration_id: str
    calibration_path: Path
    object_poses: tuple[TaskPose, ...]
    destination: TaskPose

    @property
    def num_objects(self) -> int:
        """Retrieve the number of objects to be picked and placed."""
        return len(self.object_poses)


def _parse_pose_line(line: str, line_number: int, filepath: Path) -> TaskPose:
    """Parse one line of four floats into a TaskPose.

    :raises ConfigError: If the line doesn't hold exactly four finite numbers
    """
    fields = line.split()
    if len(fields) != 4:
        raise ConfigError(
            f"{filepath}:{line_number}: expected 4 values (x y z phi), got {len(fields)}: '{line}'",
        )

    try:
        values = [float(f) for f in fields]
    except ValueError as error:
        message = f"{filepath}:{line_number}: non-numeric pose value in '{line}'"
        raise ConfigError(message) from error

    if not all(math.isfinite(v) for v in values):
        raise ConfigError(f"{filepath}:{line_number}: pose values must be finite, got '{line}'")

    return TaskPose.from_sequence(values)


def parse_task_lines(lines: list[str], filepath: Path) -> tuple[str, list[TaskPose]]:
    """Parse the calibration identifier and pose lines of a task file.

    :param lines: Raw lines of the task file
    :param filepath: Path of the task file (used in error messages)
    :return: Calibration identifier and every pose, in file order
    :raises ConfigError: If the content is malformed or short
    """
    numbered = [
        (number, line.strip())
        for number, line in enumerate(lines, start=1)
        if line.strip() and not line.strip().startswith(COMMENT_PREFIX)
    ]
    if not numbered:
        raise ConfigError(f"{filepath}: unable to read the robot calibration identifier")

    _, calibration_id = numbered[0]
    if len(calibration_id.split()) != 1:
        raise ConfigError(
            f"{filepath}: first line must name the calibration data, got '{calibration_id}'",
        )

    poses = [_parse_pose_line(line, number, filepath) for number, line in numbered[1:]]
    if len(poses) < 2:
        raise ConfigError(
            f"{filepath}: expected at least one object pose and a destination pose, "
            f"found {len(poses)} pose line(s)",
        )

    return calibration_id, poses


def load_task_file(filepath: Path, check_calibration: bool = True) -> TaskSpec:
    """Load the poses of a pick-and-place task from the given file.

    The number of objects is derived from the file: every pose line but the last is an object.

    :param filepath: Path to the task file
    :param check_calibration: Whether to verify that the named calibration file is readable
    :return: Parsed task specification
    :raises ConfigError: If the file (or its calibration file) is missing or malformed
    """
    try:
        lines = filepath.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as error:
        raise ConfigError(f"Unable to open task file {filepath}: {error}") from error

    calibration_id, poses = parse_task_lines(lines, filepath)
    logger.debug(f"Robot calibration identifier: {calibration_id}")

    calibration_path = filepath.parent / calibration_id
    if check_calibration and not (
        calibration_path.is_file() and os.access(calibration_path, os.R_OK)
    ):
        raise ConfigError(f"Robot calibration file is missing or unreadable: {calibration_path}")

    *object_poses, destination = poses
    for pose in object_poses:
        logger.debug(f"Object pose {pose}")
    logger.debug(f"Destination pose {destination}")

    return TaskSpec(calibration_id, calibration_path, tuple(object_poses), destination)
