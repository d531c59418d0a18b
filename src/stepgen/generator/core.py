"""Generator core: turn a suspendable body into a pull-based step interface."""

import logging
import queue
import threading
import weakref
from typing import Any, Iterable, Optional, Tuple

from ..config import RuntimeConfig, get_runtime_config
from .models import DONE, GeneratorError, GeneratorRelease, GeneratorState, StepResult
from .protocols import Body, LoggerProtocol

# Rendezvous messages. Body -> driver:
_YIELD = "yield"
_RETURN = "return"
_RAISE = "raise"
# Driver -> body:
_RESUME = "resume"
_RELEASE = "release"

Outcome = Tuple[str, Any]


class _Fiber:
    """
    Runs a body on a dedicated thread, one yield point per advance.

    The driver and the body hand control back and forth over two queues, so
    only one of them runs at any time. The fiber keeps no reference to the
    Generator that owns it: an abandoned handle can still be collected while
    its thread is parked inside yield_.
    """

    def __init__(
        self,
        body: Body,
        name: str,
        join_timeout: float,
        logger: LoggerProtocol,
    ):
        self._body = body
        self._join_timeout = join_timeout
        self._logger = logger
        self._outbox: "queue.Queue[Outcome]" = queue.Queue()
        self._inbox: "queue.Queue[str]" = queue.Queue()
        self._started = False
        self._finished = False
        self._releasing = False
        self.thread = threading.Thread(target=self._run, name=name, daemon=True)

    def advance(self) -> Outcome:
        """Run the body up to its next yield_ or its end."""
        if not self._started:
            self._started = True
            self._logger.debug(f"Starting fiber {self.thread.name}")
            self.thread.start()
        else:
            self._inbox.put(_RESUME)
        return self._outbox.get()

    def finish(self) -> None:
        """Wait for a fiber whose body has already ended to exit."""
        self._finished = True
        if not self._started:
            return
        self.thread.join(self._join_timeout)
        if self.thread.is_alive():
            self._logger.warning(
                f"Fiber {self.thread.name} still alive {self._join_timeout}s after its body ended"
            )
        else:
            self._logger.debug(f"Fiber {self.thread.name} finished")

    def release(self, wait: bool = False) -> Optional[Outcome]:
        """
        Wake a parked body with a release request.

        Args:
            wait: Block until the body has unwound and the thread has exited

        Returns:
            The body's final outcome when waiting, otherwise None
        """
        if not self._started or self._finished:
            self._finished = True
            return None
        self._inbox.put(_RELEASE)
        if not wait:
            self._finished = True
            return None
        outcome = self._outbox.get()
        self.finish()
        return outcome

    def yield_(self, value: Any) -> None:
        """Hand ``value`` to the driver and park until the next step."""
        if threading.current_thread() is not self.thread:
            raise GeneratorError("yield_ called outside its generator's body")
        if self._releasing:
            raise GeneratorError("generator ignored release")
        self._outbox.put((_YIELD, value))
        if self._inbox.get() == _RELEASE:
            self._releasing = True
            raise GeneratorRelease()

    def _run(self) -> None:
        try:
            self._body(self.yield_)
        except GeneratorRelease:
            self._outbox.put((_RETURN, None))
        except BaseException as exc:
            # Re-raised by the driver from the step that observes it
            self._outbox.put((_RAISE, exc))
        else:
            self._outbox.put((_RETURN, None))


class _NativeFrame:
    """Steps a Python iterable using the interpreter's own resumable frames."""

    def __init__(self, iterable: Iterable):
        self._iterable = iterable
        self._iterator = None

    def advance(self) -> Outcome:
        if self._iterator is None:
            self._iterator = iter(self._iterable)
        try:
            value = next(self._iterator)
        except StopIteration:
            return _RETURN, None
        except Exception as exc:
            return _RAISE, exc
        return _YIELD, value

    def finish(self) -> None:
        self._iterator = None

    def release(self, wait: bool = False) -> Optional[Outcome]:
        close = getattr(self._iterator, "close", None)
        self._iterator = None
        if close is None:
            return None
        try:
            close()
        except Exception as exc:
            return _RAISE, exc
        return _RETURN, None


class Generator:
    """
    Handle on a suspendable computation.

    Each call to step() advances the computation by exactly one yield point.
    Once the body has returned, raised, or been closed, every further step
    returns DONE without running anything.

    A handle must be driven by one caller at a time; it has no internal
    locking.
    """

    def __init__(self, frame, name: str = "generator", logger: Optional[LoggerProtocol] = None):
        """
        Initialize generator handle.

        Args:
            frame: Execution backend (fiber or native frame)
            name: Name used in logs and repr
            logger: Logger instance (defaults to module logger)
        """
        self.name = name
        self.state = GeneratorState.CREATED
        self._frame = frame
        self._logger = logger or logging.getLogger(__name__)
        self._finalizer = weakref.finalize(self, frame.release)

    @property
    def completed(self) -> bool:
        """True once no further values will be produced."""
        return self.state is GeneratorState.COMPLETED

    def step(self) -> StepResult:
        """
        Advance to the next yield point.

        Returns:
            StepResult with the yielded value, or DONE on completion

        Raises:
            GeneratorError: If called while the body is executing
            Exception: Whatever the body raised during this step
        """
        if self.state is GeneratorState.COMPLETED:
            return DONE
        if self.state is GeneratorState.RUNNING:
            raise GeneratorError("generator already executing")

        self.state = GeneratorState.RUNNING
        try:
            kind, payload = self._frame.advance()
        except BaseException:
            self._complete()
            raise

        if kind == _YIELD:
            self.state = GeneratorState.SUSPENDED
            return StepResult.of(payload)

        self._complete()
        if kind == _RAISE:
            self._logger.debug(f"{self.name} failed: {payload!r}")
            raise payload
        self._logger.debug(f"{self.name} completed")
        return DONE

    def close(self) -> None:
        """
        Stop the generator and release its execution unit.

        A body suspended in yield_ sees GeneratorRelease raised from that call
        so its finally blocks run. Safe to call more than once.

        Raises:
            GeneratorError: If the body yields again after the release, or if
                called while the body is executing
        """
        if self.state is GeneratorState.COMPLETED:
            return
        if self.state is GeneratorState.RUNNING:
            raise GeneratorError("generator already executing")

        self.state = GeneratorState.COMPLETED
        self._finalizer.detach()
        outcome = self._frame.release(wait=True)
        self._logger.debug(f"{self.name} closed")
        if outcome is not None and outcome[0] == _RAISE:
            raise outcome[1]

    def _complete(self) -> None:
        self.state = GeneratorState.COMPLETED
        self._finalizer.detach()
        self._frame.finish()

    def __iter__(self):
        return self

    def __next__(self):
        result = self.step()
        if result.done:
            raise StopIteration
        return result.value

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and release the generator."""
        self.close()

    def __repr__(self) -> str:
        return f"<Generator {self.name} {self.state.value}>"


def make_generator(
    body: Body,
    config: Optional[RuntimeConfig] = None,
    logger: Optional[LoggerProtocol] = None,
    name: Optional[str] = None,
) -> Generator:
    """
    Build a generator from a body that yields through a capability.

    ``body`` is called with a single argument, ``yield_``; each call to
    ``yield_(v)`` suspends the body and hands ``v`` to whoever called step().
    Nothing runs until the first step.

    Args:
        body: Callable taking the yield_ capability
        config: Runtime configuration (defaults to environment)
        logger: Logger instance
        name: Name for logs; defaults to the body's name

    Returns:
        Generator handle
    """
    config = config or get_runtime_config()
    logger = logger or logging.getLogger(__name__)
    name = name or getattr(body, "__name__", "generator")
    fiber = _Fiber(
        body,
        name=f"{config.thread_prefix}-{name}",
        join_timeout=config.join_timeout,
        logger=logger,
    )
    return Generator(fiber, name=name, logger=logger)


def from_iterable(
    iterable: Iterable,
    logger: Optional[LoggerProtocol] = None,
    name: Optional[str] = None,
) -> Generator:
    """
    Wrap a Python iterable, such as a native generator, as a Generator.

    No thread is used; the iterable is not touched until the first step.
    """
    name = name or type(iterable).__name__
    return Generator(_NativeFrame(iterable), name=name, logger=logger)


def step(generator: Generator) -> StepResult:
    """Advance ``generator`` by one yield point."""
    return generator.step()
