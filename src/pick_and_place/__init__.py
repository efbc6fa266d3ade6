"""Sequence a manipulator through task-level pick-and-place operations using composed frames."""
