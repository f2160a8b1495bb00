# This file defines runtime configuration for the protection fee policy.
# The loader merges YAML defaults with environment overrides and validates every amount.
# Values are kept as Decimal so currency arithmetic never passes through binary floats.

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "protection_policy.yaml"

DEFAULT_THRESHOLD = "100"
DEFAULT_PERCENT_RATE = "0.03"
DEFAULT_BASE_INCREMENT = "0.01"
DEFAULT_FIXED_PRICE = "2.17"


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config at {path} must be a mapping, got: {type(loaded).__name__}")
    return dict(loaded)


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _as_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a decimal amount, got: {value!r}")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} must be a decimal amount, got: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"{field_name} must be finite, got: {value!r}")
    return parsed


@dataclass(frozen=True)
class ProtectionPolicyConfig:
    threshold: Decimal = Decimal(DEFAULT_THRESHOLD)
    percent_rate: Decimal = Decimal(DEFAULT_PERCENT_RATE)
    base_increment: Decimal = Decimal(DEFAULT_BASE_INCREMENT)
    fixed_price: Decimal = Decimal(DEFAULT_FIXED_PRICE)

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError("threshold must be >= 0")
        if self.percent_rate < 0:
            raise ValueError("percent_rate must be >= 0")
        if self.base_increment < 0:
            raise ValueError("base_increment must be >= 0")
        if self.fixed_price <= 0:
            raise ValueError("fixed_price must be > 0")

    def to_dict(self) -> dict[str, str]:
        return {
            "threshold": str(self.threshold),
            "percent_rate": str(self.percent_rate),
            "base_increment": str(self.base_increment),
            "fixed_price": str(self.fixed_price),
        }


def load_policy_config(*, config_path: str | Path | None = None) -> ProtectionPolicyConfig:
    explicit_path = config_path or _env_str("PROTECTION_POLICY_CONFIG_PATH")
    if explicit_path is not None:
        cfg = _load_yaml(Path(explicit_path))
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = _load_yaml(DEFAULT_CONFIG_PATH)
    else:
        cfg = {}

    threshold = _env_str("PROTECTION_THRESHOLD", str(cfg.get("threshold", DEFAULT_THRESHOLD)))
    percent_rate = _env_str("PROTECTION_PERCENT", str(cfg.get("percent_rate", DEFAULT_PERCENT_RATE)))
    base_increment = _env_str(
        "PROTECTION_BASE_INCREMENT", str(cfg.get("base_increment", DEFAULT_BASE_INCREMENT))
    )
    fixed_price = _env_str("PROTECTION_FIXED_PRICE", str(cfg.get("fixed_price", DEFAULT_FIXED_PRICE)))

    return ProtectionPolicyConfig(
        threshold=_as_decimal(threshold, "threshold"),
        percent_rate=_as_decimal(percent_rate, "percent_rate"),
        base_increment=_as_decimal(base_increment, "base_increment"),
        fixed_price=_as_decimal(fixed_price, "fixed_price"),
    )
