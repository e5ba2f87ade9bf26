"""Check configuration, loaded from an optional YAML file."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ValidationError

from api_contract_check.verification.issue import IssueSeverity


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""


class CheckConfig(BaseModel):
    max_severity: IssueSeverity = IssueSeverity.ERROR
    check_reverse: bool = True
    reverse_max_severity: IssueSeverity = IssueSeverity.WARNING
    fail_on: Literal["error", "warning", "never"] = "error"
    checkers: list[str] = ["query_parameters"]


def load_config(file_path: Path | None = None) -> CheckConfig:
    """Load a CheckConfig from YAML. Missing path or empty file yields defaults."""
    if file_path is None:
        return CheckConfig()
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {file_path}: {e}") from e
    if data is None:
        return CheckConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {file_path} must be a mapping")
    # Severities are written in lower case in config files.
    for key in ("max_severity", "reverse_max_severity"):
        if isinstance(data.get(key), str):
            data[key] = data[key].upper()
    try:
        return CheckConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {file_path}: {e}") from e
