"""Configuration loading from YAML + environment overrides."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

TYPE_POLICIES = frozenset({"lenient", "strict"})
LTV_MODELS = frozenset({"fee_margin", "net_value_projection"})


def _load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


class AppSettings(BaseSettings):
    """App-level settings with env override."""

    model_config = SettingsConfigDict(
        env_prefix="BANKING_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_path: str = Field(default="config/default.yaml", alias="BANKING_CONFIG_PATH")
    log_level: str | None = Field(default=None, alias="BANKING_LOG_LEVEL")


def validate_config(config: dict[str, Any]) -> None:
    """Raise ValueError when a section holds a value the pipeline cannot run with."""
    cleaning = config.get("cleaning") or {}
    policy = cleaning.get("type_policy", "lenient")
    if policy not in TYPE_POLICIES:
        raise ValueError(
            f"cleaning.type_policy must be one of {sorted(TYPE_POLICIES)}, got {policy!r}"
        )

    validation = config.get("validation") or {}
    min_age = int(validation.get("min_age", 18))
    max_age = int(validation.get("max_age", 120))
    if min_age > max_age:
        raise ValueError(f"validation.min_age ({min_age}) must not exceed max_age ({max_age})")
    if float(validation.get("balance_tolerance", 0.01)) < 0:
        raise ValueError("validation.balance_tolerance must not be negative")

    model = (config.get("ltv") or {}).get("model", "fee_margin")
    if model not in LTV_MODELS:
        raise ValueError(f"ltv.model must be one of {sorted(LTV_MODELS)}, got {model!r}")

    segments = config.get("segments") or {}
    for key in ("high_value_share", "active_share"):
        share = float(segments.get(key, 0.2 if key == "high_value_share" else 0.3))
        if not 0 < share <= 1:
            raise ValueError(f"segments.{key} must be in (0, 1], got {share}")


def get_config(config_path: str | None = None) -> dict[str, Any]:
    """Load merged config from YAML and apply env overrides via AppSettings."""
    settings = AppSettings()
    path = config_path or settings.config_path
    if not Path(path).exists():
        cfg = _default_config()
        if settings.log_level:
            cfg["app"]["log_level"] = settings.log_level
        validate_config(cfg)
        return cfg
    base = _deep_merge(_default_config(), _load_yaml(path))
    config_dir = Path(path).parent
    dev_path = config_dir / "dev.yaml"
    if dev_path.exists() and os.environ.get("BANKING_ENV") == "dev":
        base = _deep_merge(base, _load_yaml(dev_path))
    tuned_path = config_dir / "tuned.yaml"
    if tuned_path.exists():
        base = _deep_merge(base, _load_yaml(tuned_path))
    if settings.log_level:
        base.setdefault("app", {})["log_level"] = settings.log_level
    validate_config(base)
    return base


def _default_config() -> dict[str, Any]:
    return {
        "app": {"name": "banking-analytics", "env": "default", "log_level": "INFO"},
        "ingest": {"csv_encoding": "utf-8"},
        "cleaning": {"type_policy": "lenient", "day_first": False, "aliases": {}},
        "corrections": {"reconcile_balances": False},
        "validation": {
            "min_age": 18,
            "max_age": 120,
            "balance_tolerance": 0.01,
            "require_transaction_id": False,
        },
        "anomaly": {
            "signals": {},
            "thresholds": {"low": 33, "medium": 66},
            "customer_z_threshold": 3.0,
        },
        "ltv": {"model": "fee_margin"},
        "branches": {"window_days": 90},
        "segments": {"high_value_share": 0.2, "active_share": 0.3},
        "reporting": {"output_dir": "./reports"},
    }


def get_config_hash(config: dict[str, Any]) -> str:
    """SHA256 of resolved config for report reproducibility (canonical key order)."""
    canonical = yaml.dump(config, default_flow_style=False, sort_keys=True, allow_unicode=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
