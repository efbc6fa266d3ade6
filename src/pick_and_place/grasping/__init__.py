"""Import classes and definitions used to compute grasp frames, paths, and stacks."""

from .grasp_model import GraspModel as GraspModel
from .grasp_model import GraspOffset as GraspOffset
from .interpolation import DirectProfile as DirectProfile
from .interpolation import InterpolatedProfile as InterpolatedProfile
from .interpolation import MotionProfile as MotionProfile
from .interpolation import PathInterpolator as PathInterpolator
from .interpolation import interpolate_distances as interpolate_distances
from .interpolation import profile_from_config as profile_from_config
from .stacking import BRICK_HEIGHT_MM as BRICK_HEIGHT_MM
from .stacking import StackEntry as StackEntry
from .stacking import StackPlanner as StackPlanner
