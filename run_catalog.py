#!/usr/bin/env python3
"""
Command-line driver for Go exposed-function catalog extraction.

Loads one Go package directory, extracts the catalog of exported functions
with command-invocable signatures and writes it as JSON.

Usage:
    python run_catalog.py --package-dir ./cmd/tools
    python run_catalog.py --package-dir ./pkg/ops --output-file out/catalog.json
    python run_catalog.py --package-dir ./pkg/ops --config catalog.yaml --report
"""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from catalog.extractor import extract_catalog_to_dict_list
from core.catalog_config import (
    ConfigValidationError,
    load_catalog_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_catalog_report
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from goparse.errors import CatalogError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Go exposed-function catalog extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_catalog.py --package-dir ./pkg/ops\n"
            "  python run_catalog.py --package-dir ./pkg/ops --output-file out/catalog.json --report\n"
        )
    )

    parser.add_argument(
        "--package-dir",
        required=True,
        help="Path to the Go package directory to inspect."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML file with catalog settings."
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Write the catalog JSON here instead of stdout."
    )
    parser.add_argument(
        "--report",
        action="store_true",
        default=False,
        help="Also write a run report under the configured report directory."
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=None,
        help="Fail on configuration problems instead of using defaults."
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = parse_args(argv)
    configure_structured_logging(logging.INFO)
    run_id = set_run_id()

    strict = args.strict_config if args.strict_config is not None else resolve_strict_config_validation()

    try:
        with phase_scope("config"):
            config = load_catalog_config(args.config, strict=strict)
        configure_structured_logging(config.log_level)

        t0 = time.time()
        functions = extract_catalog_to_dict_list(args.package_dir, config)
        logger.info(
            "Catalog extraction completed in %.2fs, %d functions",
            time.time() - t0,
            len(functions),
        )

        with phase_scope("output"):
            encoded = json.dumps(functions, indent=2, ensure_ascii=False)
            if args.output_file:
                with open(args.output_file, "w", encoding="utf-8") as f:
                    f.write(encoded + "\n")
                logger.info("Wrote catalog to %s", args.output_file)
            else:
                sys.stdout.write(encoded + "\n")

            if args.report:
                path = write_catalog_report(
                    functions,
                    package_dir=args.package_dir,
                    run_id=run_id,
                    output_dir=config.report_dir,
                )
                logger.info("Wrote run report to %s", path)

    except ConfigValidationError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except FileNotFoundError as e:
        logger.error("File error: %s", e)
        return 1
    except CatalogError as e:
        logger.error("Catalog extraction failed: %s", e)
        return 1
    except Exception as e:
        logger.error("Unexpected failure: %s", e, exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
