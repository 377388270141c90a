"""
ops_config -- single public entrypoint for hub configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Services receive the returned ``HubConfig``
    instead of reading files or environment variables themselves.

Architecture position:
    Configuration -- YAML-driven, validated at load time.  Sits above
    ``ops_kernel`` and below ``ops_modules``.  The kernel and the engines
    MUST NEVER import from ``ops_config``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` -- a required key is missing.
    - ``ValueError`` -- a value is out of range.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``OPS_CONFIG_TRACE`` log entry with the config id, version, checksum and
    the tax settings that will govern new documents.
"""

from __future__ import annotations

from pathlib import Path

from ops_config.loader import load_yaml_file, parse_hub_config
from ops_config.schema import HubConfig, NumberingPolicy, PaymentPolicy, TaxPolicy
from ops_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration set
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | str | None = None) -> HubConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Override path to a YAML configuration file.  Defaults to
            ``ops_config/sets/default.yaml``.

    Returns:
        HubConfig -- frozen and validated.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If a required key is missing.
        ValueError: If validation fails.
    """
    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    config = parse_hub_config(load_yaml_file(config_path))

    _logger.info(
        "OPS_CONFIG_TRACE",
        extra={
            "trace_type": "OPS_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "currency": config.currency,
            "tax_enabled_by_default": config.tax.enabled_by_default,
            "labor_tax_rate": config.tax.labor_tax_rate,
            "source": str(config_path),
        },
    )
    return config


__all__ = [
    "HubConfig",
    "NumberingPolicy",
    "PaymentPolicy",
    "TaxPolicy",
    "get_active_config",
]
