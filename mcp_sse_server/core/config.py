"""
Server Configuration

Module: core.config
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - ServerConfig dataclass with conservative defaults
  - Loading from environment variables
  - Validation of numeric settings at startup

ARCHITECTURE:
Configuration is read once by the entry point and handed to the core as
plain values. Nothing below the entry point reads the environment.

SECURITY NOTES:
- The search API key is optional: a missing key only fails the search tool
- The key is excluded from repr() so it never reaches the logs
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_CONTENT_DIR,
    DEFAULT_INVOCATION_TIMEOUT,
    DEFAULT_SEARCH_TIMEOUT,
    DEFAULT_KEEPALIVE_INTERVAL,
    ENV_HOST,
    ENV_PORT,
    ENV_BRAVE_API_KEY,
    ENV_CONTENT_DIR,
    ENV_INVOCATION_TIMEOUT,
    ENV_SEARCH_TIMEOUT,
    ENV_KEEPALIVE_INTERVAL,
    ENV_LOG_LEVEL,
)


@dataclass
class ServerConfig:
    """
    Runtime configuration of the server

    Attributes:
        host: Interface the HTTP server binds to
        port: TCP port of the HTTP server
        brave_api_key: Credential of the search capability (optional)
        content_dir: Root directory of file-backed resources
        invocation_timeout: Default deadline for one invocation (None = unbounded)
        search_timeout: Deadline of one outbound search request
        keepalive_interval: Seconds between SSE keepalive comments
        log_level: Logging level name
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    brave_api_key: Optional[str] = field(default=None, repr=False)
    content_dir: str = DEFAULT_CONTENT_DIR
    invocation_timeout: Optional[float] = DEFAULT_INVOCATION_TIMEOUT
    search_timeout: float = DEFAULT_SEARCH_TIMEOUT
    keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings"""
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}")
        if self.invocation_timeout is not None and self.invocation_timeout <= 0:
            self.invocation_timeout = None
        if self.search_timeout <= 0:
            raise ValueError(f"Invalid search timeout: {self.search_timeout}")
        if self.keepalive_interval <= 0:
            raise ValueError(
                f"Invalid keepalive interval: {self.keepalive_interval}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ServerConfig: Loaded configuration

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        return cls(
            host=env.get(ENV_HOST, DEFAULT_HOST),
            port=_parse_int(env, ENV_PORT, DEFAULT_PORT),
            brave_api_key=env.get(ENV_BRAVE_API_KEY) or None,
            content_dir=env.get(ENV_CONTENT_DIR, DEFAULT_CONTENT_DIR),
            invocation_timeout=_parse_float(
                env, ENV_INVOCATION_TIMEOUT, DEFAULT_INVOCATION_TIMEOUT
            ),
            search_timeout=_parse_float(
                env, ENV_SEARCH_TIMEOUT, DEFAULT_SEARCH_TIMEOUT
            ),
            keepalive_interval=_parse_float(
                env, ENV_KEEPALIVE_INTERVAL, DEFAULT_KEEPALIVE_INTERVAL
            ),
            log_level=env.get(ENV_LOG_LEVEL, "INFO").upper(),
        )


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
