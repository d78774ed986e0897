"""Load reporter options from YAML configuration files."""

import os
from pathlib import Path

import yaml

from runreport.email_reporter.models.reporter_config import ReporterOptions

SMTP_PASS_ENV = "RUNREPORT_SMTP_PASS"
MAILGUN_API_KEY_ENV = "RUNREPORT_MAILGUN_API_KEY"


class ConfigurationError(ValueError):
    """Raised when reporter configuration is missing or unusable."""


def load_reporter_config(config_file: Path) -> ReporterOptions:
    """Load reporter options from a YAML file.

    Secrets can be kept out of the file: ``RUNREPORT_SMTP_PASS`` and
    ``RUNREPORT_MAILGUN_API_KEY`` override the matching settings.

    Args:
        config_file: Path to the YAML configuration

    Returns:
        Validated reporter options

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, or
            doesn't match the schema

    """
    if not config_file.exists():
        raise ConfigurationError(f"Config file not found: {config_file}")

    try:
        with config_file.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Empty or non-mapping config file: {config_file}")

    if SMTP_PASS_ENV in os.environ and isinstance(data.get("smtp"), dict):
        data["smtp"]["pass"] = os.environ[SMTP_PASS_ENV]
    if MAILGUN_API_KEY_ENV in os.environ and isinstance(data.get("mailgun"), dict):
        data["mailgun"]["apiKey"] = os.environ[MAILGUN_API_KEY_ENV]

    try:
        return ReporterOptions.model_validate(data)
    except Exception as e:
        raise ConfigurationError(
            f"Invalid reporter configuration in {config_file}: {e}"
        ) from e
