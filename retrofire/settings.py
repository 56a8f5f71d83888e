"""Runtime configuration for the transport layer.

Architectural role:
    Centralizes timeout, worker-pool and header defaults for
    `retrofire.transport.client` and the debug switch consumed by
    `retrofire.remote.call`.

Determinism:
    Deterministic for a fixed process environment. Values are resolved at
    import time after `load_dotenv()` has populated the environment.

Relevant environment variables:
    - `RETROFIRE_TIMEOUT_SECONDS`
    - `RETROFIRE_MAX_WORKERS`
    - `RETROFIRE_USER_AGENT`
    - `DEBUG`
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Request/response bodies are only logged when this is enabled.
DEBUG = os.getenv("DEBUG") == "true"

TIMEOUT_SECONDS = float(os.getenv("RETROFIRE_TIMEOUT_SECONDS", "30"))
MAX_WORKERS = int(os.getenv("RETROFIRE_MAX_WORKERS", "4"))
USER_AGENT = os.getenv("RETROFIRE_USER_AGENT", "retrofire/1.0").strip()


@dataclass(frozen=True)
class TransportConfig:
    """Settings applied to one `HttpTransport` instance.

    Defaults come from the module-level values above so a bare
    `TransportConfig()` follows the environment.
    """

    timeout_seconds: float = TIMEOUT_SECONDS
    max_workers: int = MAX_WORKERS
    user_agent: str = USER_AGENT

    def __post_init__(self):
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
