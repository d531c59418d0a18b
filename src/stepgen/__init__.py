"""stepgen - cooperative generators and a unified iteration construct."""

__version__ = "0.1.0"

from .generator import (
    DONE,
    Generator,
    GeneratorSource,
    SequenceSource,
    StepResult,
    counting,
    for_each,
    from_iterable,
    make_generator,
    step,
)

__all__ = [
    "DONE",
    "Generator",
    "GeneratorSource",
    "SequenceSource",
    "StepResult",
    "counting",
    "for_each",
    "from_iterable",
    "make_generator",
    "step",
]
