from __future__ import annotations
from typing import Optional


class ColorMeError(Exception):
    """Base class for puzzle-core errors."""


class InvalidGrid(ColorMeError, ValueError):
    """Grid is empty, not square, or holds a color outside [0, colors)."""


class InvalidLevelParameters(ColorMeError, ValueError):
    """A level mapped to parameters that break the scramble-move budget."""


class GenerationExhausted(ColorMeError):
    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class SolverExhausted(ColorMeError):
    """Search budget (states, deadline or cancellation) ran out first."""
    def __init__(self, message: str, result: Optional[dict] = None):
        super().__init__(message)
        self.result = result


class SolverUnsolvable(ColorMeError):
    """The whole reachable state space was explored without a goal."""
    def __init__(self, message: str, result: Optional[dict] = None):
        super().__init__(message)
        self.result = result
