"""Import classes defining the robot backends used to execute pick-and-place tasks."""

from .backend import Configuration as Configuration
from .backend import IKSolver as IKSolver
from .backend import RobotBackend as RobotBackend
from .gripper import AngularGripper as AngularGripper
from .gripper import GripperAngleLimits as GripperAngleLimits
from .gripper import GripperCommand as GripperCommand
from .outcome import Outcome as Outcome
from .physical_arm import JointDriver as JointDriver
from .physical_arm import PhysicalArm as PhysicalArm
from .simulated_arm import SimulatedArm as SimulatedArm
from .simulator import InMemorySimulator as InMemorySimulator
from .simulator import Simulator as Simulator
