"""Protocol definitions for dependency inversion."""

from typing import Any, Callable, Protocol

from .models import StepResult

YieldFunc = Callable[[Any], None]


class Body(Protocol):
    """A suspendable computation that hands values out through ``yield_``."""

    def __call__(self, yield_: YieldFunc) -> Any:
        ...


class Steppable(Protocol):
    """Anything that can be advanced one yield point at a time."""

    def step(self) -> StepResult:
        """Advance by one yield point."""
        ...

    def close(self) -> None:
        """Release any execution resources."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging."""

    def info(self, message: str) -> None:
        """Log info message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...
