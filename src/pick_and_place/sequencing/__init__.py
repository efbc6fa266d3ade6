"""Import classes and definitions used to sequence pick-and-place tasks."""

from .lifecycle import KillMode as KillMode
from .lifecycle import SimObjectLifecycle as SimObjectLifecycle
from .lifecycle import SimulatedObject as SimulatedObject
from .sequencer import ActuationFailure as ActuationFailure
from .sequencer import DispatchFailure as DispatchFailure
from .sequencer import FailurePolicy as FailurePolicy
from .sequencer import MotionFailure as MotionFailure
from .sequencer import RunReport as RunReport
from .sequencer import SequenceCancelled as SequenceCancelled
from .sequencer import SequencerSettings as SequencerSettings
from .sequencer import TaskSequencer as TaskSequencer
from .task_structs import MotionPhase as MotionPhase
from .task_structs import ObjectDescriptor as ObjectDescriptor
from .task_structs import ObjectPlan as ObjectPlan
from .task_structs import PhasePlan as PhasePlan
from .task_structs import describe_objects as describe_objects
