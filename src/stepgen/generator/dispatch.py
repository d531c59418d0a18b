"""Iteration dispatcher: one loop construct over sequences and generators."""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from .core import Generator
from .models import GeneratorError, IterationFrame, IterationMode, IterationStatistics
from .protocols import LoggerProtocol


@dataclass(frozen=True)
class SequenceSource:
    """A finite, already materialised sequence, iterated eagerly."""

    items: tuple

    mode = IterationMode.SEQUENCE

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class GeneratorSource:
    """A generator, or a zero-argument factory called once when the loop starts."""

    generator: Union[Generator, Callable[[], Generator]]

    mode = IterationMode.GENERATOR

    def open(self) -> Generator:
        """Return the generator to drive."""
        if isinstance(self.generator, Generator):
            return self.generator
        generator = self.generator()
        if not isinstance(generator, Generator):
            raise TypeError(
                f"generator factory returned {type(generator).__name__}, not Generator"
            )
        return generator


Source = Union[SequenceSource, GeneratorSource]


def resolve_source(source: Any) -> Source:
    """
    Decide once how a loop source is iterated.

    Explicit sources are returned as is; a Generator becomes a
    GeneratorSource; any other collections.abc.Sequence becomes a
    SequenceSource.

    Raises:
        TypeError: For anything else, e.g. a bare iterator of unknown length
    """
    if isinstance(source, (SequenceSource, GeneratorSource)):
        return source
    if isinstance(source, Generator):
        return GeneratorSource(source)
    if isinstance(source, Sequence):
        return SequenceSource(source)
    raise TypeError(
        f"cannot iterate over {type(source).__name__}: "
        "expected a sequence or a Generator"
    )


class IterationDispatcher:
    """
    Runs a loop body once per value of a sequence or generator.

    Single Responsibility: Drive a source and bind each value for the body.
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        """
        Initialize dispatcher.

        Args:
            logger: Logger instance
        """
        self._logger = logger or logging.getLogger(__name__)
        self.last_statistics = IterationStatistics()

    def run(self, binding: str, source: Any, body: Callable[..., Any]) -> Optional[List[Any]]:
        """
        Execute ``body`` once per produced value, bound to ``binding``.

        Args:
            binding: Name of the loop variable, passed to body as a keyword
            source: Sequence, Generator, or an explicit source
            body: Loop body

        Returns:
            The list of body results for a sequence; None for a generator

        last_statistics.iterations counts only the bodies that returned.
        """
        if not isinstance(binding, str) or not binding.isidentifier():
            raise ValueError(f"binding must be an identifier, got {binding!r}")

        resolved = resolve_source(source)
        frame = IterationFrame(binding=binding, mode=resolved.mode)
        start_time = time.time()
        try:
            if resolved.mode is IterationMode.SEQUENCE:
                return self._run_sequence(frame, resolved, body)
            self._run_generator(frame, resolved, body)
            return None
        finally:
            self.last_statistics = IterationStatistics(
                mode=frame.mode,
                iterations=frame.completed,
                elapsed_time=time.time() - start_time,
            )
            self._logger.debug(
                f"for {binding} in {frame.mode.value}: "
                f"{self.last_statistics.iterations} iterations"
            )

    def _run_sequence(
        self, frame: IterationFrame, source: SequenceSource, body: Callable[..., Any]
    ) -> List[Any]:
        results = []
        for item in source.items:
            results.append(body(**frame.bind(item)))
            frame.completed += 1
        return results

    def _run_generator(
        self, frame: IterationFrame, source: GeneratorSource, body: Callable[..., Any]
    ) -> None:
        generator = source.open()
        while True:
            result = generator.step()
            if result.done:
                return
            try:
                body(**frame.bind(result.value))
            except BaseException:
                self._release(generator)
                raise
            frame.completed += 1

    def _release(self, generator: Generator) -> None:
        """Close a generator abandoned by a failing loop body."""
        try:
            generator.close()
        except GeneratorError as exc:
            self._logger.warning(f"Closing {generator.name} after a loop body failure: {exc}")


def for_each(binding: str, source: Any, body: Callable[..., Any]) -> Optional[List[Any]]:
    """
    Loop construct over a sequence or a generator.

    ``body`` receives each value as the keyword argument named ``binding``,
    so it must accept that keyword: ``for_each("i", counting(2, 10, 3),
    lambda i: print(i))`` prints 2, 5 and 8, while passing ``print`` itself
    fails. Over a sequence the body results are returned in order.
    """
    return IterationDispatcher().run(binding, source, body)
