"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``TRANSFER_RECS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The recommendation pipeline itself never reads configuration.  The CLI loads
an ``AppConfig`` once per invocation and passes the relevant sections down
as explicit arguments.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class MatchingConfig(BaseModel):
    """Classification and pairing thresholds."""

    model_config = ConfigDict(frozen=True)

    shortage_risks: list[str] = ["Critical", "High"]
    excess_risk: str = "Overstocked"
    reserve_days: int = 30           # days of 30d-rate sales held back at the excess store
    min_excess_available: float = 10.0
    max_transfer_qty: float = 100.0

    @field_validator("reserve_days")
    @classmethod
    def validate_reserve_days(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"reserve_days must be >= 0, got {v}.")
        return v

    @field_validator("max_transfer_qty")
    @classmethod
    def validate_cap(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"max_transfer_qty must be positive, got {v}.")
        return v


class RankingConfig(BaseModel):
    """Deduplication and ordering settings."""

    model_config = ConfigDict(frozen=True)

    priority_risk: str = "Critical"
    dedup_key: Literal["name", "key"] = "name"


class DisplayConfig(BaseModel):
    """Which ranked position to show, and how to lay out terminal output."""

    model_config = ConfigDict(frozen=True)

    card_index: int = 1
    indent: int = 2

    @field_validator("card_index")
    @classmethod
    def validate_card_index(cls, v: int) -> int:
        if not 1 <= v <= 10:
            raise ValueError(f"card_index must be in [1, 10], got {v}.")
        return v

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"indent must be >= 0, got {v}.")
        return v


class ActionConfig(BaseModel):
    """Values emitted when a transfer request is initiated."""

    model_config = ConfigDict(frozen=True)

    status_label: str = "Warehouse Review"
    transfer_id_prefix: str = "TR"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    matching: MatchingConfig = MatchingConfig()
    ranking: RankingConfig = RankingConfig()
    display: DisplayConfig = DisplayConfig()
    action: ActionConfig = ActionConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            absent the built-in model defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicitly given ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            config_path = default_path
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        # Also merge local.toml if present (gitignored local overrides)
        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    # 3. Apply TRANSFER_RECS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply TRANSFER_RECS_* env vars to the raw config dict.

    Supported overrides:
      TRANSFER_RECS_LOG_LEVEL   → raw["logging"]["level"]
      TRANSFER_RECS_CARD_INDEX  → raw["display"]["card_index"]
      TRANSFER_RECS_DEBUG       → raw["debug"]
    """
    if log_level := os.environ.get("TRANSFER_RECS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if card_index := os.environ.get("TRANSFER_RECS_CARD_INDEX"):
        raw.setdefault("display", {})["card_index"] = card_index

    if debug := os.environ.get("TRANSFER_RECS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        matching=MatchingConfig(**raw.get("matching", {})),
        ranking=RankingConfig(**raw.get("ranking", {})),
        display=DisplayConfig(**raw.get("display", {})),
        action=ActionConfig(**raw.get("action", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
