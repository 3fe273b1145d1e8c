"""Registry configuration.

Settings are read from environment variables so the process default registry
can be tuned without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

_TRUE_VALUES = ("1", "true", "yes")


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().strip('"').strip("'").lower() in _TRUE_VALUES


@dataclass(frozen=True)
class RegistrySettings:
    """Behavioural switches for a Registry."""

    # Lock every operation; when off the registry is confined to its creating thread
    thread_safe: bool = True
    # Check implementations against their contract type at registration
    validate_contracts: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> RegistrySettings:
        """Load settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``

        Returns:
            RegistrySettings instance
        """
        if env is None:
            env = os.environ
        return cls(
            thread_safe=_env_flag(env, "GIMME_THREAD_SAFE", True),
            validate_contracts=_env_flag(env, "GIMME_VALIDATE_CONTRACTS", True),
            log_level=(env.get("GIMME_LOG_LEVEL") or "INFO").strip().upper(),
            log_json=_env_flag(env, "GIMME_LOG_JSON", False),
        )
