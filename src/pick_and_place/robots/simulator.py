"""Define an interface to spawn and remove objects in a simulator, and an in-memory simulator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from pick_and_place.robots.outcome import Outcome

if TYPE_CHECKING:
    from pick_and_place.spatial import Pose3D, TaskPose

logger = logging.getLogger(__name__)


class Simulator(Protocol):
    """An interface to control the objects in a simulated robot workspace."""

    @property
    def object_names(self) -> list[str]:
        """Retrieve the names of the objects currently in the simulator."""
        ...

    def spawn_object(self, name: str, color: str, pose: TaskPose) -> Outcome:
        """Add a named, colored object to the simulator at the given pose.

        :return: Boolean success of the spawn and an outcome message
        """
        ...

    def kill_object(self, name: str) -> Outcome:
        """Remove the named object from the simulator.

        :return: Boolean success of the removal and an outcome message
        """
        ...

    def get_object_pose(self, name: str) -> Pose3D | None:
        """Retrieve the pose of the named object (None if it doesn't exist)."""
        ...

    def set_object_pose(self, name: str, pose: Pose3D) -> None:
        """Update the pose of the named object.

        :raises KeyError: If the named object doesn't exist in the simulator
        """
        ...


@dataclass
class SimulatedBody:
    """The state of one object in the in-memory simulator."""

    color: str
    pose: Pose3D


class InMemorySimulator:
    """A simulator that keeps object poses in memory, used for dry runs and testing."""

    def __init__(self) -> None:
        """Initialize an empty simulated workspace."""
        self.bodies: dict[str, SimulatedBody] = {}

    @property
    def object_names(self) -> list[str]:
        """Retrieve the names of the objects currently in the simulator."""
        return list(self.bodies)

    def spawn_object(self, name: str, color: str, pose: TaskPose) -> Outcome:
        """Add a named, colored object to the workspace (names must be unique)."""
        if name in self.bodies:
            return Outcome(success=False, message=f"An object named '{name}' already exists.")

        self.bodies[name] = SimulatedBody(color, pose.to_pose3d())
        logger.debug(f"Spawned {color} object '{name}' at {pose}")
        return Outcome(success=True, message=f"Spawned object '{name}'.")

    def kill_object(self, name: str) -> Outcome:
        """Remove the named object from the workspace."""
        if self.bodies.pop(name, None) is None:
            return Outcome(success=False, message=f"Cannot remove unknown object '{name}'.")

        logger.debug(f"Removed object '{name}'")
        return Outcome(success=True, message=f"Removed object '{name}'.")

    def get_object_pose(self, name: str) -> Pose3D | None:
        """Retrieve the pose of the named object (None if it doesn't exist)."""
        body = self.bodies.get(name)
        return None if body is None else body.pose

    def set_object_pose(self, name: str, pose: Pose3D) -> None:
        """Update the pose of the named object."""
        if name not in self.bodies:
            raise KeyError(f"Cannot set the pose of unknown object '{name}'.")
        self.bodies[name].pose = pose
