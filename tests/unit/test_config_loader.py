"""Tests for reporter configuration loader."""

from pathlib import Path
from unittest.mock import patch

import pytest

from runreport.email_reporter.config_loader import (
    ConfigurationError,
    load_reporter_config,
)

CONFIG = """
reportLink: https://ci.example.com/runs/1
reportName: Nightly regression
mailOnSuccess: true
nameFormat: title-first
from: ci@example.com
to: qa@example.com
smtp:
  host: smtp.example.com
  port: 465
  secure: true
  user: ci
  pass: from-file
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a valid configuration file."""
    path = tmp_path / "reporter.yaml"
    path.write_text(CONFIG)
    return path


def test_load_reporter_config(config_file: Path) -> None:
    """load_reporter_config parses a valid YAML file."""
    options = load_reporter_config(config_file)

    assert options.report_link == "https://ci.example.com/runs/1"
    assert options.report_name == "Nightly regression"
    assert options.mail_on_success is True
    assert options.name_format == "title-first"
    assert options.smtp is not None
    assert options.smtp.port == 465
    assert options.smtp.password == "from-file"


def test_load_reporter_config_env_password(config_file: Path) -> None:
    """RUNREPORT_SMTP_PASS overrides the password in the file."""
    with patch.dict("os.environ", {"RUNREPORT_SMTP_PASS": "from-env"}):
        options = load_reporter_config(config_file)

    assert options.smtp is not None
    assert options.smtp.password == "from-env"


def test_load_reporter_config_env_mailgun_key(tmp_path: Path) -> None:
    """RUNREPORT_MAILGUN_API_KEY supplies the Mailgun key."""
    path = tmp_path / "reporter.yaml"
    path.write_text(
        "from: ci@example.com\n"
        "to: qa@example.com\n"
        "transport: mailgun\n"
        "mailgun:\n"
        "  domain: mg.example.com\n"
    )

    with patch.dict("os.environ", {"RUNREPORT_MAILGUN_API_KEY": "key-env"}):
        options = load_reporter_config(path)

    assert options.mailgun is not None
    assert options.mailgun.api_key == "key-env"


def test_load_reporter_config_missing_file(tmp_path: Path) -> None:
    """Missing files raise ConfigurationError."""
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_reporter_config(tmp_path / "missing.yaml")


def test_load_reporter_config_invalid_yaml(tmp_path: Path) -> None:
    """Malformed YAML raises ConfigurationError."""
    path = tmp_path / "reporter.yaml"
    path.write_text("from: [unclosed")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_reporter_config(path)


def test_load_reporter_config_empty(tmp_path: Path) -> None:
    """Empty files raise ConfigurationError."""
    path = tmp_path / "reporter.yaml"
    path.write_text("")

    with pytest.raises(ConfigurationError, match="Empty or non-mapping"):
        load_reporter_config(path)


def test_load_reporter_config_missing_delivery_settings(tmp_path: Path) -> None:
    """Missing recipients or transport settings fail fast."""
    path = tmp_path / "reporter.yaml"
    path.write_text("from: ci@example.com\n")

    with pytest.raises(ConfigurationError, match="Invalid reporter configuration"):
        load_reporter_config(path)
