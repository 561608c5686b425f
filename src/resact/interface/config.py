"""
Configuration for the resact.interface module.

Defines InterfaceSettings, a frozen dataclass carrying the process-wide defaults used
when dispatching generated entry points. Defaults are sourced from
resact.core.constants (the single source of truth).

Precedence
- environment (RESACT_*) > TOML (./resact.toml, else ./pyproject.toml [tool.resact.interface]) > defaults.
- Per-call keywords and per-definition flags override whatever is loaded here.

Notes
- not_found_error: global default for get-style reads with no match.
- authorize: when executing entry points run the authorization gate:
  "always", "when_actor" (only if an actor was given) or "never". can_* forms always run it.
- log_calls: log each dispatch at INFO instead of DEBUG.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from resact.core.constants import AUTHORIZE as CORE_AUTHORIZE
from resact.core.constants import CONFIG_FILENAME, ENV_PREFIX
from resact.core.constants import NOT_FOUND_ERROR as CORE_NOT_FOUND_ERROR

__all__ = ["InterfaceSettings", "AuthorizeMode"]

AuthorizeMode = Literal["always", "when_actor", "never"]
_AUTHORIZE_MODES: frozenset[str] = frozenset({"always", "when_actor", "never"})


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class InterfaceSettings:
    """
    Runtime settings for generated entry points.

    Attributes:
        not_found_error (bool): Raise NotFoundError when a get-style read matches nothing.
        authorize (Literal["always","when_actor","never"]): When executing forms run the gate.
        log_calls (bool): Emit one INFO record per dispatched call.

    Examples:
        >>> from resact.interface.config import InterfaceSettings
        >>> InterfaceSettings(not_found_error=False)  # doctest: +ELLIPSIS
        InterfaceSettings(...)
    """

    not_found_error: bool = CORE_NOT_FOUND_ERROR
    authorize: AuthorizeMode = CORE_AUTHORIZE  # type: ignore[assignment]
    log_calls: bool = False

    @classmethod
    def _apply_mapping(cls, base: InterfaceSettings, cfg: dict[str, Any] | None) -> InterfaceSettings:
        """Apply a loose config mapping onto InterfaceSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        if "not_found_error" in cfg:
            s = replace(s, not_found_error=_bool(cfg["not_found_error"]))
        if "authorize" in cfg and isinstance(cfg["authorize"], str):
            mode = cfg["authorize"].strip().lower()
            if mode in _AUTHORIZE_MODES:
                s = replace(s, authorize=mode)  # type: ignore[arg-type]
        if "log_calls" in cfg:
            s = replace(s, log_calls=_bool(cfg["log_calls"]))
        return s

    @classmethod
    def from_env(
        cls, base: InterfaceSettings | None = None, prefix: str = ENV_PREFIX
    ) -> InterfaceSettings:
        """
        Build InterfaceSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - RESACT_NOT_FOUND_ERROR (1/0/true/false/yes/no/on/off)
            - RESACT_AUTHORIZE ("always" | "when_actor" | "never")
            - RESACT_LOG_CALLS (1/0/true/false/yes/no/on/off)
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("not_found_error", "authorize", "log_calls"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> InterfaceSettings:
        """
        Build InterfaceSettings from a TOML file.

        Search order when `path` is None:
            1) ./resact.toml (with either an [interface] table or top-level keys)
            2) ./pyproject.toml under [tool.resact.interface]

        Returns defaults if no file is present.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / CONFIG_FILENAME)
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            with p.open("rb") as fh:
                data = tomllib.load(fh)
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("resact", {}).get("interface") if isinstance(tool, dict) else None
            elif isinstance(data.get("interface"), dict):
                cfg = data["interface"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> InterfaceSettings:
        """
        Load InterfaceSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search resact.toml then pyproject.toml.
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
