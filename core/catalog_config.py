"""Catalog extraction configuration.

Settings come from an optional YAML file, then environment overrides. In
non-strict mode problems fall back to defaults with a warning; in strict mode
they raise ``ConfigValidationError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

UNSAFE_POLICY_TRUNCATE = "truncate"
UNSAFE_POLICY_SKIP = "skip"
UNSAFE_POLICIES = (UNSAFE_POLICY_TRUNCATE, UNSAFE_POLICY_SKIP)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


@dataclass(frozen=True)
class CatalogConfig:
    """Extraction settings."""

    failure_type_name: str = "error"
    unsafe_pointer_policy: str = UNSAFE_POLICY_TRUNCATE
    log_level: str = "INFO"
    report_dir: str = "output/catalog_reports"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _reject(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; using default", msg)


def _read_yaml(config_path: str, strict: bool) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Catalog config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse catalog config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        msg = f"Catalog config file is empty: {config_path}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if not isinstance(payload, dict):
        msg = f"Unexpected catalog config payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    return payload


def _validated(values: dict[str, Any], strict: bool) -> dict[str, Any]:
    known = {f.name for f in fields(CatalogConfig)}
    accepted: dict[str, Any] = {}

    for key, value in values.items():
        if key not in known:
            _reject(f"Unknown catalog config key '{key}'", strict)
            continue
        if not isinstance(value, str) or not value.strip():
            _reject(f"Catalog config key '{key}' must be a non-empty string", strict)
            continue
        value = value.strip()
        if key == "unsafe_pointer_policy" and value not in UNSAFE_POLICIES:
            _reject(
                f"unsafe_pointer_policy must be one of {', '.join(UNSAFE_POLICIES)}, got '{value}'",
                strict,
            )
            continue
        if key == "log_level":
            value = value.upper()
            if value not in LOG_LEVELS:
                _reject(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'", strict)
                continue
        accepted[key] = value

    return accepted


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    policy = os.getenv("GOCATALOG_UNSAFE_POINTER_POLICY")
    if policy is not None:
        overrides["unsafe_pointer_policy"] = policy
    level = os.getenv("GOCATALOG_LOG_LEVEL")
    if level is not None:
        overrides["log_level"] = level
    return overrides


def load_catalog_config(
    config_path: Optional[str] = None,
    strict: bool = False,
) -> CatalogConfig:
    """Load extraction settings.

    Args:
        config_path: Optional YAML file with ``CatalogConfig`` keys.
        strict: Raise instead of falling back to defaults.

    Returns:
        The effective CatalogConfig (file values, then environment overrides).

    Raises:
        ConfigValidationError: In strict mode, on a missing/malformed file or
            invalid keys and values.
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_validated(_read_yaml(config_path, strict), strict))
    values.update(_validated(_env_overrides(), strict))

    config = replace(CatalogConfig(), **values)
    logger.debug("Effective catalog config: %s", config)
    return config
