"""
Client configuration.

Settings are plain values fixed at construction:
- API key and base URL (required / defaulted)
- per-request timeout and retry budget
- debug toggle for verbose request/response logging

CercaliaConfig.from_environment() reads the same values from CERCALIA_*
environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

import structlog

from cercalia_client.core.retry import (
    DEFAULT_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MULTIPLIER,
    RetryPolicy,
)

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://lb.cercalia.com/services/v2/json"
DEFAULT_TIMEOUT = 30.0

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CercaliaConfig:
    """
    Immutable Cercalia client settings.

    Args:
        api_key: Cercalia API key, sent as the "key" query parameter
        base_url: Service endpoint
        timeout: Per-request timeout in seconds
        max_attempts: Attempts per logical operation
        retry_delay: Wait after the first failed attempt, in seconds
        backoff_multiplier: Growth factor of the wait between attempts
        debug: Log composed URLs and response bodies
    """
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_DELAY
    backoff_multiplier: float = DEFAULT_MULTIPLIER
    debug: bool = False

    def __post_init__(self):
        if not self.api_key or not self.api_key.strip():
            raise ValueError("API key cannot be empty")
        if not self.base_url or not self.base_url.strip():
            raise ValueError("Base URL cannot be empty")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        # Fail early on an invalid retry budget
        self.retry_policy

    def __repr__(self) -> str:
        return (
            f"CercaliaConfig(api_key='***', base_url={self.base_url!r}, "
            f"timeout={self.timeout}, max_attempts={self.max_attempts}, "
            f"debug={self.debug})"
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            delay=self.retry_delay,
            multiplier=self.backoff_multiplier,
        )

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "CercaliaConfig":
        """
        Build config from environment variables.

        Reads:
        - CERCALIA_API_KEY (required)
        - CERCALIA_BASE_URL
        - CERCALIA_TIMEOUT
        - CERCALIA_MAX_ATTEMPTS
        - CERCALIA_DEBUG

        Raises:
            ValueError: If the API key is missing or a number is malformed
        """
        env = os.environ if environ is None else environ

        api_key = (env.get("CERCALIA_API_KEY") or "").strip()
        if not api_key:
            raise ValueError("CERCALIA_API_KEY environment variable is not set")

        base_url = (env.get("CERCALIA_BASE_URL") or "").strip() or DEFAULT_BASE_URL

        timeout = DEFAULT_TIMEOUT
        if env.get("CERCALIA_TIMEOUT"):
            timeout = float(env["CERCALIA_TIMEOUT"])

        max_attempts = DEFAULT_MAX_ATTEMPTS
        if env.get("CERCALIA_MAX_ATTEMPTS"):
            max_attempts = int(env["CERCALIA_MAX_ATTEMPTS"])

        debug = (env.get("CERCALIA_DEBUG") or "").strip().lower() in TRUTHY

        logger.debug("config_from_environment", base_url=base_url, debug=debug)

        return cls(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_attempts=max_attempts,
            debug=debug,
        )
