"""Configuration management for the generator runtime."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

INVALID_RANGE_POLICIES = ("empty", "raise")


@dataclass
class RuntimeConfig:
    """Generator runtime configuration parameters."""

    thread_prefix: str = "stepgen-fiber"
    join_timeout: float = 1.0
    invalid_range_policy: str = "empty"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load runtime configuration from environment variables.

        - STEPGEN_THREAD_PREFIX: name prefix for fiber threads
        - STEPGEN_JOIN_TIMEOUT: seconds close() waits for a fiber to exit
        - STEPGEN_INVALID_RANGE: ``empty`` or ``raise`` for non-terminating ranges
        - STEPGEN_LOG_LEVEL: root log level used by the demo entry point
        """
        return cls(
            thread_prefix=os.getenv("STEPGEN_THREAD_PREFIX", "stepgen-fiber"),
            join_timeout=float(os.getenv("STEPGEN_JOIN_TIMEOUT", "1.0")),
            invalid_range_policy=os.getenv("STEPGEN_INVALID_RANGE", "empty").lower(),
            log_level=os.getenv("STEPGEN_LOG_LEVEL", "INFO").upper(),
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.thread_prefix:
            raise ValueError("thread_prefix must not be empty")
        if self.join_timeout <= 0:
            raise ValueError("join_timeout must be positive")
        if self.invalid_range_policy not in INVALID_RANGE_POLICIES:
            raise ValueError(
                f"invalid_range_policy must be one of {INVALID_RANGE_POLICIES}, "
                f"got {self.invalid_range_policy!r}"
            )


def get_runtime_config() -> RuntimeConfig:
    """Get runtime configuration."""
    return RuntimeConfig.from_env()
