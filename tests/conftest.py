"""Define test fixtures shared by the pick-and-place test modules."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from pick_and_place.grasping import GraspModel, GraspOffset
from pick_and_place.sequencing import ObjectDescriptor, SequencerSettings, describe_objects
from pick_and_place.spatial import TaskPose

CALIBRATION_ID = "simulatorConfiguration.txt"


@pytest.fixture
def brick_grasp_model() -> GraspModel:
    """Return the grasp model used for bricks: 5 mm above the object, rotated 180 deg about y."""
    return GraspModel(GraspOffset(0.0, 0.0, 5.0, 180.0))


@pytest.fixture
def settings() -> SequencerSettings:
    """Return sequencer settings approaching from 50 mm and departing to 30 mm."""
    return SequencerSettings(initial_approach_distance=50.0, final_depart_distance=30.0)


@pytest.fixture
def three_bricks() -> list[ObjectDescriptor]:
    """Return three bricks lying in a row, 40 mm apart."""
    poses = [TaskPose(-40.0, 150.0, 0.0, -90.0), TaskPose(0.0, 150.0, 0.0, -90.0)]
    poses.append(TaskPose(40.0, 150.0, 0.0, -90.0))
    return describe_objects(poses)


@pytest.fixture
def stack_destination() -> TaskPose:
    """Return the pose at the bottom of the stack, away from every brick."""
    return TaskPose(120.0, 60.0, 0.0, 0.0)


@pytest.fixture
def task_dir(tmp_path: Path) -> Path:
    """Return a directory holding a robot calibration file."""
    (tmp_path / CALIBRATION_ID).write_text("# AL5D calibration\n")
    return tmp_path


@pytest.fixture
def task_file(task_dir: Path) -> Path:
    """Return a task file listing three bricks and their common destination."""
    path = task_dir / "pickAndPlaceInput.txt"
    path.write_text(
        dedent(f"""\
               {CALIBRATION_ID}
               # x y z phi
               -40 150 0 -90
                 0 150 0 -90

                40 150 0 -90
               120  60 0   0
               """),
    )
    return path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Return a task configuration enabling continuous-path motion."""
    path = tmp_path / "task_config.yaml"
    path.write_text(
        dedent("""\
               grasp_offset:
                 dx: 0.0
                 dy: 0.0
                 dz: 5.0
                 theta_deg: 180.0
               initial_approach_distance: 50.0
               final_depart_distance: 30.0
               delta: 10.0
               continuous_path: true
               create_objects: true
               """),
    )
    return path
