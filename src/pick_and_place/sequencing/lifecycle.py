"""Define a registry ensuring every object spawned in a simulator is removed exactly once."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from rich.markup import escape

from pick_and_place.io.logging import console

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from pick_and_place.robots import Simulator
    from pick_and_place.sequencing.task_structs import ObjectDescriptor
    from pick_and_place.spatial import TaskPose

logger = logging.getLogger(__name__)


class KillMode(Enum):
    """When spawned objects are removed from the simulator after being placed."""

    BATCH = "batch"
    """Remove every object once the whole task set has completed."""

    PER_OBJECT = "per_object"
    """Remove each object as soon as its own pick-and-place sequence has completed."""


@dataclass
class SimulatedObject:
    """An object spawned (or to be spawned) in the simulator."""

    name: str
    color: str
    pose: TaskPose
    alive: bool = False
    """True if a spawn has completed and no kill has completed for the object."""

    kill_attempted: bool = False


@dataclass(frozen=True)
class LifecycleFailure:
    """A spawn or kill request rejected by the simulator."""

    name: str
    message: str


class SimObjectLifecycle:
    """Spawns one simulated object per task object and guarantees each is later removed."""

    def __init__(self, simulator: Simulator, kill_mode: KillMode = KillMode.BATCH) -> None:
        """Initialize an empty registry of simulated objects.

        :param simulator: Simulator in which objects are spawned and killed
        :param kill_mode: Whether objects are removed after the whole batch or one at a time
        """
        self.simulator = simulator
        self.kill_mode = kill_mode
        self.objects: dict[str, SimulatedObject] = {}
        self.spawn_failures: list[LifecycleFailure] = []
        self.kill_failures: list[LifecycleFailure] = []

    def __enter__(self) -> SimObjectLifecycle:
        """Enter a context after which every spawned object is removed."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Remove every object still alive, even if the context exits with an exception."""
        self.kill_all()

    @property
    def spawn_count(self) -> int:
        """Retrieve the number of objects successfully spawned."""
        return sum(1 for obj in self.objects.values() if obj.alive or obj.kill_attempted)

    @property
    def kill_count(self) -> int:
        """Retrieve the number of spawned objects for which a kill has been attempted."""
        return sum(1 for obj in self.objects.values() if obj.kill_attempted)

    @property
    def orphaned_names(self) -> list[str]:
        """Retrieve the names of the objects left in the simulator because their kill failed."""
        return [failure.name for failure in self.kill_failures]

    def spawn(self, obj: ObjectDescriptor) -> bool:
        """Spawn a simulated object for the given task object.

        :return: True if the object was spawned, else False (the failure is recorded)
        """
        if obj.name in self.objects:
            raise ValueError(f"Simulated object '{obj.name}' was already registered.")

        sim_object = SimulatedObject(obj.name, obj.color, obj.pose)
        self.objects[obj.name] = sim_object

        logger.debug(f"Spawning {obj.color} object '{obj.name}' at {obj.pose}")
        outcome = self.simulator.spawn_object(obj.name, obj.color, obj.pose)
        if not outcome.success:
            console.print(f"[yellow]Failed to spawn '{obj.name}': {escape(outcome.message)}[/]")
            self.spawn_failures.append(LifecycleFailure(obj.name, outcome.message))
            return False

        sim_object.alive = True
        return True

    def spawn_all(self, objects: Iterable[ObjectDescriptor]) -> None:
        """Spawn a simulated object for each of the given task objects."""
        for obj in objects:
            self.spawn(obj)

    def kill(self, name: str) -> bool:
        """Remove the named object from the simulator, unless it was never spawned or is gone.

        :return: True if a kill was issued and succeeded, else False
        """
        sim_object = self.objects.get(name)
        if sim_object is None or not sim_object.alive or sim_object.kill_attempted:
            return False

        logger.debug(f"Killing object '{name}'")
        sim_object.kill_attempted = True
        outcome = self.simulator.kill_object(name)
        if not outcome.success:
            console.print(f"[yellow]Failed to remove '{name}': {escape(outcome.message)}[/]")
            self.kill_failures.append(LifecycleFailure(name, outcome.message))
            return False

        sim_object.alive = False
        return True

    def on_object_completed(self, name: str) -> None:
        """Remove the named object now if objects are removed one at a time."""
        if self.kill_mode is KillMode.PER_OBJECT:
            self.kill(name)

    def kill_all(self) -> None:
        """Remove every spawned object whose kill has not yet been attempted."""
        for name in list(self.objects):
            self.kill(name)
