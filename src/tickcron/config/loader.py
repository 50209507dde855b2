"""
Configuration file loading.

Loads config.yaml (plus an optional config.{env}.yaml overlay) for a
tickcron project.

Example::

    scheduler:
      timezone: utc          # or "local"
      stop_on_error: true
      jobs_dir: jobs
    jobs:
      report:
        schedule: "0 6 * * 1-5"
      cleanup:
        enabled: false
    logging:
      level: INFO
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from tickcron.config.resolver import resolve_config
from tickcron.exceptions import ConfigurationError

VALID_TIMEZONES = {"utc", "local"}


class Config:
    """tickcron configuration container with dict-like access."""

    def __init__(self, data: dict[str, Any]):
        self.data = data
        # Convenience properties for common config sections
        sections = data if isinstance(data, dict) else {}
        self.scheduler = sections.get("scheduler") or {}
        self.jobs = sections.get("jobs") or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.data
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Dict-like access: config['key'] or config['nested.key']."""
        if isinstance(key, str) and "." in key:
            return self.get(key)
        if key in self.data:
            value = self.data[key]
            # Return nested dicts as Config objects for chaining
            if isinstance(value, dict):
                return Config(value)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        """Check if key exists in config."""
        if isinstance(key, str) and "." in key:
            value = self.data
            for k in key.split("."):
                if not isinstance(value, dict) or k not in value:
                    return False
                value = value[k]
            return True
        return key in self.data

    def __iter__(self) -> "Iterator[str]":
        """Iterate over top-level keys."""
        return iter(self.data)

    def keys(self):
        return self.data.keys()

    def values(self):
        return self.data.values()

    def items(self):
        return self.data.items()

    @property
    def timezone(self) -> str:
        return str(self.get("scheduler.timezone", "utc")).lower()

    @property
    def stop_on_error(self) -> bool:
        return bool(self.get("scheduler.stop_on_error", True))

    @property
    def jobs_dir(self) -> str:
        return str(self.get("scheduler.jobs_dir", "jobs"))

    def validate(self) -> None:
        """Validate configuration structure and content."""
        if not isinstance(self.data, dict):
            raise ConfigurationError(f"Configuration must be a dictionary/mapping, got {type(self.data).__name__}")

        errors = []

        scheduler = self.data.get("scheduler")
        if scheduler is not None and not isinstance(scheduler, dict):
            errors.append(f"Configuration 'scheduler' must be a dictionary, got {type(scheduler).__name__}")
        elif self.timezone not in VALID_TIMEZONES:
            errors.append(
                f"Configuration 'scheduler.timezone' must be one of {sorted(VALID_TIMEZONES)}, got {self.timezone!r}"
            )

        jobs = self.data.get("jobs")
        if jobs is not None and not isinstance(jobs, dict):
            errors.append(f"Configuration 'jobs' must be a dictionary, got {type(jobs).__name__}")
        elif jobs:
            for name, job_config in jobs.items():
                if not isinstance(job_config, dict):
                    errors.append(f"Configuration 'jobs.{name}' must be a dictionary, got {type(job_config).__name__}")

        if errors:
            raise ConfigurationError("\n".join(errors), details={"errors": errors})


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load tickcron configuration.

    Loads config.yaml and config.{env}.yaml, then resolves ${VAR_NAME} and
    {env} placeholders.

    Args:
        project_path: Path to project root (default: current directory)
        env: Environment name (dev, staging, prod)

    Returns:
        Config instance with merged configuration

    Raises:
        FileNotFoundError: If config.yaml does not exist
        ConfigurationError: If a config file is not valid YAML, or a scheduler
            setting references an unset environment variable
    """
    if project_path is None:
        project_path = Path.cwd()

    base_config_path = project_path / "config.yaml"
    if not base_config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a config.yaml file in your project root"
        )
    if not base_config_path.is_file():
        raise FileNotFoundError(f"Configuration path is not a file: {base_config_path}")

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = project_path / f"config.{env}.yaml"
        if env_config_path.exists():
            _merge_dict(config_data, _read_yaml(env_config_path))

    config_data = resolve_config(config_data, env or "dev")

    return Config(config_data)


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                raise ConfigurationError(
                    f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                    f"  {e}\n"
                    f"  File: {path}\n"
                    f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes"
                ) from e
            raise ConfigurationError(f"Error parsing {path.name}: {e}\n  File: {path}") from e


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
