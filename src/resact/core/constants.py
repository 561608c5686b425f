"""
resact process-wide defaults.

Defines the global defaults consumed by resact.interface.config. This module is
zero-IO and uses only the Python standard library.

Notes:
    - InterfaceSettings reads these as its dataclass defaults; change them here.
    - Per-definition and per-call options take precedence over these values.
"""

from __future__ import annotations

__all__ = [
    "NOT_FOUND_ERROR",
    "AUTHORIZE",
    "ENV_PREFIX",
    "CONFIG_FILENAME",
]

# A get-style read with no match raises NotFoundError unless told otherwise.
NOT_FOUND_ERROR: bool = True

# When the authorization gate runs for executing entry points ("always" | "when_actor" | "never").
AUTHORIZE: str = "always"

# Environment variable prefix for InterfaceSettings.from_env().
ENV_PREFIX: str = "RESACT_"

# TOML file searched in the working directory before pyproject.toml.
CONFIG_FILENAME: str = "resact.toml"
