"""Define a minimal dataclass to represent the outcome of a dispatched robot command."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

OutputT = TypeVar("OutputT")
"""Type variable representing output data associated with an outcome."""


@dataclass(frozen=True)
class Outcome(Iterable, Generic[OutputT]):
    """An outcome (and optional output value) from a motion, gripper, or simulator command."""

    success: bool
    message: str
    output: OutputT | None = None
    """Optional output value resulting from the command (defaults to None)."""

    def __iter__(self) -> Iterator:
        """Return an iterator over the values of the outcome (skips its output if it's None)."""
        if self.output is not None:
            return iter((self.success, self.message, self.output))

        return iter((self.success, self.message))
