"""Generator runtime: suspendable bodies, stepping, and the for_each loop."""

from .core import Generator, from_iterable, make_generator, step
from .counting import counting
from .dispatch import (
    GeneratorSource,
    IterationDispatcher,
    SequenceSource,
    for_each,
    resolve_source,
)
from .models import (
    DONE,
    GeneratorError,
    GeneratorRelease,
    GeneratorState,
    InvalidRangeError,
    IterationFrame,
    IterationMode,
    IterationStatistics,
    StepResult,
)
from .processors import FrameTransformer, GeneratorBatcher, to_table
from .protocols import Body, LoggerProtocol, Steppable
from .utils import FiberMonitor

__all__ = [
    # Models
    "StepResult",
    "DONE",
    "GeneratorState",
    "IterationMode",
    "IterationFrame",
    "IterationStatistics",
    "GeneratorError",
    "GeneratorRelease",
    "InvalidRangeError",
    # Protocols
    "Body",
    "Steppable",
    "LoggerProtocol",
    # Core
    "Generator",
    "make_generator",
    "from_iterable",
    "step",
    "counting",
    # Dispatch
    "SequenceSource",
    "GeneratorSource",
    "IterationDispatcher",
    "resolve_source",
    "for_each",
    # Processors
    "GeneratorBatcher",
    "FrameTransformer",
    "to_table",
    # Utils
    "FiberMonitor",
]
