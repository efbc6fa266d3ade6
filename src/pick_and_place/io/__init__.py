"""Import definitions used for input/output and operator-facing logging."""

from .logging import console as console
from .logging import log_info as log_info
