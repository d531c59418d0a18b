"""Demo entry point for the stepgen runtime."""

import logging
import sys

from .config import get_runtime_config
from .generator import FiberMonitor, counting, for_each, make_generator

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", verbose: bool = False):
    """Configure logging.

    Args:
        level: Root log level name
        verbose: Force DEBUG regardless of level
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def fibonacci(limit: int):
    """Body yielding Fibonacci numbers below ``limit``."""

    def body(yield_):
        a, b = 0, 1
        while a < limit:
            yield_(a)
            a, b = b, a + b

    return body


def main():
    """Run the demo."""
    config = get_runtime_config()
    setup_logging(config.log_level, verbose="-v" in sys.argv[1:])
    monitor = FiberMonitor(config.thread_prefix)
    monitor.snapshot()

    print("for i in counting(2, 10, 3):")
    for_each("i", counting(2, 10, 3, config=config), lambda i: print(f"  {i}"))

    print("squares over a sequence:")
    squares = for_each("n", [1, 2, 3, 4], lambda n: n * n)
    print(f"  {squares}")

    print("first three Fibonacci numbers, then abandoned:")
    with make_generator(fibonacci(1000), config=config) as fib:
        for _ in range(3):
            print(f"  {fib.step().value}")

    leaked = monitor.leaked()
    if leaked:
        logger.error(f"{len(leaked)} fiber(s) still alive")
        return 1
    logger.info("All fibers released")
    return 0


if __name__ == "__main__":
    sys.exit(main())
