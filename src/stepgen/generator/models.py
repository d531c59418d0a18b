"""Data models and error types for the generator runtime."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class GeneratorState(str, Enum):
    """Generator lifecycle enumeration."""

    CREATED = "created"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"


class IterationMode(str, Enum):
    """Iteration dispatch mode enumeration."""

    SEQUENCE = "sequence"
    GENERATOR = "generator"


class GeneratorError(RuntimeError):
    """Raised when a generator is driven in a way its protocol forbids."""


class InvalidRangeError(ValueError):
    """Raised by counting() when the step cannot reach stop."""


class GeneratorRelease(BaseException):
    """Raised inside a suspended body when its generator is closed.

    Derives from BaseException so that ``except Exception`` in a body does
    not swallow it.
    """


@dataclass(frozen=True)
class StepResult:
    """Result of a single step: a yielded value, or the completion sentinel."""

    value: Any = None
    done: bool = False

    @classmethod
    def of(cls, value: Any) -> "StepResult":
        """Wrap a yielded value."""
        return cls(value=value, done=False)

    def __repr__(self) -> str:
        if self.done:
            return "StepResult(done=True)"
        return f"StepResult(value={self.value!r})"


DONE = StepResult(value=None, done=True)


@dataclass
class IterationFrame:
    """State of one running for_each loop."""

    binding: str
    mode: IterationMode
    value: Any = None
    index: int = -1
    # bodies that returned without raising
    completed: int = 0

    def bind(self, value: Any) -> dict:
        """Bind the loop variable and return the keyword arguments for the body."""
        self.value = value
        self.index += 1
        return {self.binding: value}


@dataclass
class IterationStatistics:
    """Statistics for a completed iteration."""

    mode: Optional[IterationMode] = None
    iterations: int = 0
    elapsed_time: float = 0.0
