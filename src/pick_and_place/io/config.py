"""Define Pydantic models for validating pick-and-place task configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from typing_extensions import Annotated

from pick_and_place.grasping import (
    BRICK_HEIGHT_MM,
    GraspModel,
    GraspOffset,
    MotionProfile,
    StackPlanner,
    profile_from_config,
)
from pick_and_place.io.yaml_utils import load_yaml_data
from pick_and_place.sequencing.lifecycle import KillMode
from pick_and_place.sequencing.sequencer import FailurePolicy, SequencerSettings
from pick_and_place.sequencing.task_structs import DEFAULT_COLORS

NonNegativeMM = Annotated[float, Field(ge=0, allow_inf_nan=False)]
"""A finite, non-negative distance (millimeters)."""


class ConfigError(Exception):
    """An error raised when a task's input or configuration is missing or malformed."""


class GraspOffsetSchema(BaseModel):
    """Schema for the pose of the gripper relative to an object."""

    dx: float = Field(default=0.0, allow_inf_nan=False)
    dy: float = Field(default=0.0, allow_inf_nan=False)
    dz: float = Field(default=5.0, allow_inf_nan=False)
    theta_deg: float = Field(default=180.0, allow_inf_nan=False)

    model_config = ConfigDict(extra="forbid")

    def to_offset(self) -> GraspOffset:
        """Convert the schema into a GraspOffset."""
        return GraspOffset(self.dx, self.dy, self.dz, self.theta_deg)


class ObjectNamingSchema(BaseModel):
    """Schema for the names and colors given to simulated objects."""

    names: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=lambda: list(DEFAULT_COLORS), min_length=1)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_unique_names(self) -> ObjectNamingSchema:
        """Verify that no two objects share a name."""
        if len(set(self.names)) != len(self.names):
            raise ValueError(f"Object names must be unique, got {self.names}")
        return self


class TaskConfigSchema(BaseModel):
    """Schema for the configuration of a pick-and-place task."""

    grasp_offset: GraspOffsetSchema = Field(default_factory=GraspOffsetSchema)
    initial_approach_distance: NonNegativeMM
    final_depart_distance: NonNegativeMM
    delta: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    continuous_path: bool = True
    object_height: float = Field(default=BRICK_HEIGHT_MM, gt=0, allow_inf_nan=False)
    create_objects: bool = False
    kill_mode: Literal["batch", "per_object"] = "batch"
    failure_policy: Literal["abort", "continue"] = "abort"
    dispatch_timeout_s: float = Field(default=60.0, gt=0)
    objects: ObjectNamingSchema = Field(default_factory=ObjectNamingSchema)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_delta(self) -> TaskConfigSchema:
        """Verify that continuous-path motion is given an interpolation step."""
        if self.continuous_path and self.delta is None:
            raise ValueError("'delta' is required when 'continuous_path' is true")
        return self

    @classmethod
    def validate_yaml(cls, yaml_path: Path) -> TaskConfigSchema:
        """Validate a task configuration YAML file and return the resulting schema.

        :param yaml_path: Path to a YAML file to be validated by the schema
        :return: Validated TaskConfigSchema instance
        :raises ConfigError: If the file is missing, unreadable, not UTF-8, or invalid
        """
        try:
            yaml_data = load_yaml_data(yaml_path)
        except (OSError, UnicodeDecodeError, RuntimeError) as error:
            raise ConfigError(f"Unable to read configuration file {yaml_path}: {error}") from error

        try:
            return TaskConfigSchema.model_validate(yaml_data)
        except ValidationError as v_err:
            raise ConfigError(f"Validation error in {yaml_path}: {v_err}") from v_err

    def grasp_model(self) -> GraspModel:
        """Construct the grasp model described by the configuration."""
        return GraspModel(self.grasp_offset.to_offset())

    def motion_profile(self) -> MotionProfile:
        """Construct the approach/depart motion profile described by the configuration."""
        return profile_from_config(self.continuous_path, self.delta)

    def stack_planner(self) -> StackPlanner:
        """Construct the planner stacking objects of the configured height."""
        return StackPlanner(self.object_height)

    def sequencer_settings(self) -> SequencerSettings:
        """Construct the settings shared by every object's sequence."""
        return SequencerSettings(
            initial_approach_distance=self.initial_approach_distance,
            final_depart_distance=self.final_depart_distance,
            dispatch_timeout_s=self.dispatch_timeout_s,
            failure_policy=FailurePolicy(self.failure_policy),
        )

    @property
    def object_kill_mode(self) -> KillMode:
        """Retrieve when spawned objects are removed from the simulator."""
        return KillMode(self.kill_mode)
