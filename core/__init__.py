"""Core shared configuration, logging and reporting utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    package_scope,
    phase_scope,
    set_run_id,
)
from core.catalog_config import (
    CatalogConfig,
    ConfigValidationError,
    load_catalog_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_catalog_report

__all__ = [
    "configure_structured_logging",
    "get_run_id",
    "package_scope",
    "phase_scope",
    "set_run_id",
    "CatalogConfig",
    "ConfigValidationError",
    "load_catalog_config",
    "resolve_strict_config_validation",
    "write_catalog_report",
]
