"""Logging helpers shared by the commands and the rebuild cycle."""

import logging

from devserver.manifest.types import ManifestValidationResult


def log_validation_errors(logger: logging.Logger, result: ManifestValidationResult) -> None:
    """Log each manifest error as "instancePath - message"."""
    logger.error("Add-on manifest validation failed.")
    for error in result.error_details or []:
        if not error.message or not error.message.strip():
            continue
        prefix = f"{error.instance_path} - " if error.instance_path and error.instance_path.strip() else ""
        logger.error(f"{prefix}{error.message}")
