"""
Configuration Loader (``ops_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``ops_config.schema`` dataclasses.  Services never call this directly;
the single runtime entry point is ``ops_config.get_active_config()``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required keys (``config_id``, ``version``) have no defaults.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range rates, bad prefixes, unknown currency  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from ops_config.schema import HubConfig, NumberingPolicy, PaymentPolicy, TaxPolicy
from ops_kernel.domain.currency import CurrencyRegistry
from ops_kernel.domain.validation import to_decimal

_HUNDRED = Decimal("100")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return data


def parse_rate(value: Any, name: str) -> Decimal:
    """Parse a percentage in [0, 100]."""
    rate = to_decimal(value)
    if rate is None:
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not (Decimal("0") <= rate <= _HUNDRED):
        raise ValueError(f"{name} must be between 0 and 100, got {rate}")
    return rate


def parse_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def parse_tax_policy(data: dict[str, Any]) -> TaxPolicy:
    """Parse a TaxPolicy from a dict."""
    defaults = TaxPolicy()
    return TaxPolicy(
        enabled_by_default=parse_bool(
            data.get("enabled_by_default", defaults.enabled_by_default),
            "tax.enabled_by_default",
        ),
        labor_tax_rate=parse_rate(
            data.get("labor_tax_rate", defaults.labor_tax_rate), "tax.labor_tax_rate"
        ),
        default_item_tax_rate=parse_rate(
            data.get("default_item_tax_rate", defaults.default_item_tax_rate),
            "tax.default_item_tax_rate",
        ),
    )


def _parse_prefix(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string, got {value!r}")
    prefix = value.strip().upper()
    if not prefix.isalnum():
        raise ValueError(f"{name} must be alphanumeric, got {value!r}")
    return prefix


def parse_numbering_policy(data: dict[str, Any]) -> NumberingPolicy:
    """Parse a NumberingPolicy from a dict."""
    defaults = NumberingPolicy()
    width = data.get("width", defaults.width)
    if isinstance(width, bool) or not isinstance(width, int) or not (1 <= width <= 10):
        raise ValueError(f"numbering.width must be an integer in [1, 10], got {width!r}")

    policy = NumberingPolicy(
        quotation_prefix=_parse_prefix(
            data.get("quotation_prefix", defaults.quotation_prefix),
            "numbering.quotation_prefix",
        ),
        invoice_prefix=_parse_prefix(
            data.get("invoice_prefix", defaults.invoice_prefix),
            "numbering.invoice_prefix",
        ),
        purchase_order_prefix=_parse_prefix(
            data.get("purchase_order_prefix", defaults.purchase_order_prefix),
            "numbering.purchase_order_prefix",
        ),
        width=width,
    )
    prefixes = (policy.quotation_prefix, policy.invoice_prefix, policy.purchase_order_prefix)
    if len(set(prefixes)) != len(prefixes):
        raise ValueError(f"Document prefixes must be distinct, got {prefixes}")
    return policy


def parse_payment_policy(data: dict[str, Any]) -> PaymentPolicy:
    """Parse a PaymentPolicy from a dict."""
    defaults = PaymentPolicy()
    timeout = to_decimal(data.get("lock_timeout_seconds", defaults.lock_timeout_seconds))
    if timeout is None or timeout <= 0:
        raise ValueError(
            "payments.lock_timeout_seconds must be a positive number, "
            f"got {data.get('lock_timeout_seconds')!r}"
        )
    return PaymentPolicy(
        allow_overpayment=parse_bool(
            data.get("allow_overpayment", defaults.allow_overpayment),
            "payments.allow_overpayment",
        ),
        lock_timeout_seconds=float(timeout),
    )


def parse_hub_config(data: dict[str, Any]) -> HubConfig:
    """
    Parse a complete HubConfig from the YAML root mapping.

    Raises:
        KeyError: if ``config_id`` or ``version`` is missing.
        ValueError: if any value is out of range.
    """
    version = data["version"]
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise ValueError(f"version must be a positive integer, got {version!r}")

    return HubConfig(
        config_id=str(data["config_id"]),
        version=version,
        currency=CurrencyRegistry.validate(data.get("currency", "INR")),
        tax=parse_tax_policy(data.get("tax") or {}),
        numbering=parse_numbering_policy(data.get("numbering") or {}),
        payments=parse_payment_policy(data.get("payments") or {}),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
