"""Built-in counting generator."""

import logging
from typing import Optional, Tuple

from ..config import RuntimeConfig, get_runtime_config
from .core import Generator, make_generator
from .models import InvalidRangeError
from .protocols import LoggerProtocol


def _parse_bounds(args: tuple) -> Tuple[int, int, int]:
    """Expand counting()'s positional overloads into (start, stop, step)."""
    if len(args) == 1:
        return 0, args[0], 1
    if len(args) == 2:
        return args[0], args[1], 1
    if len(args) == 3:
        return args[0], args[1], args[2]
    raise TypeError(f"counting expected 1 to 3 arguments, got {len(args)}")


def counting(
    *args,
    config: Optional[RuntimeConfig] = None,
    logger: Optional[LoggerProtocol] = None,
) -> Generator:
    """
    Generator counting from start towards an exclusive stop.

    Accepts ``counting(stop)``, ``counting(start, stop)`` and
    ``counting(start, stop, step)``; ``start`` defaults to 0 and ``step`` to 1.
    Yields ``start, start + step, ...`` while the value is below ``stop``.

    A step that cannot reach ``stop`` (zero or negative while
    ``start < stop``) would never terminate. Depending on
    ``config.invalid_range_policy`` it either yields nothing (``"empty"``,
    the default) or raises InvalidRangeError here (``"raise"``).

    Args:
        *args: stop | start, stop | start, stop, step
        config: Runtime configuration
        logger: Logger instance

    Returns:
        Generator handle; nothing runs until the first step

    Raises:
        TypeError: On a wrong number of positional arguments
        InvalidRangeError: On a non-terminating range under the raise policy
    """
    start, stop, step = _parse_bounds(args)
    config = config or get_runtime_config()
    log = logger or logging.getLogger(__name__)

    exhausted = start < stop and step <= 0
    if exhausted:
        message = f"counting({start}, {stop}, {step}) never reaches stop"
        if config.invalid_range_policy == "raise":
            raise InvalidRangeError(message)
        log.warning(f"{message}; treating it as empty")

    def count(yield_):
        if exhausted:
            return
        current = start
        while current < stop:
            yield_(current)
            current += step

    return make_generator(
        count, config=config, logger=logger, name=f"counting({start},{stop},{step})"
    )
