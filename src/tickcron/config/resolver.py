"""
Placeholder substitution for loaded configuration.

String values may reference environment variables as ``${NAME}`` and the
active environment name as ``{env}``. An unset variable is left as written,
except under ``scheduler.*`` and ``jobs.<name>.schedule``: there it raises
ConfigurationError, listing every unset reference.
"""

import os
import re
from typing import Any

from tickcron.exceptions import ConfigurationError

_PLACEHOLDER_RE = re.compile(r"\$\{(?P<var>[A-Za-z_][A-Za-z0-9_]*)\}|\{env\}")


def resolve_config(config_data: dict[str, Any], env: str = "dev") -> dict[str, Any]:
    """
    Substitute ``${NAME}`` and ``{env}`` placeholders in every string value.

    Args:
        config_data: Configuration dictionary (not modified)
        env: Current environment name

    Returns:
        New dictionary with placeholders substituted

    Raises:
        ConfigurationError: If a scheduler setting or job schedule references
            an unset environment variable
    """
    unset: list[str] = []
    resolved = _resolve(config_data, (), env, unset)
    if unset:
        raise ConfigurationError(
            "Unset environment variable(s) in scheduler settings:\n  " + "\n  ".join(unset),
            details={"unset": unset},
        )
    return resolved


def _resolve(value: Any, path: tuple[str, ...], env: str, unset: list[str]) -> Any:
    if isinstance(value, dict):
        return {key: _resolve(item, (*path, str(key)), env, unset) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve(item, (*path, str(i)), env, unset) for i, item in enumerate(value)]
    if isinstance(value, str):
        return _substitute(value, path, env, unset)
    return value


def _is_scheduler_setting(path: tuple[str, ...]) -> bool:
    if path[:1] == ("scheduler",):
        return True
    return len(path) == 3 and path[0] == "jobs" and path[2] == "schedule"


def _substitute(text: str, path: tuple[str, ...], env: str, unset: list[str]) -> str:
    strict = _is_scheduler_setting(path)

    def replace(match: re.Match) -> str:
        name = match.group("var")
        if name is None:
            return env
        value = os.environ.get(name)
        if value is None:
            if strict:
                unset.append(f"{'.'.join(path)}: ${{{name}}}")
            return match.group(0)
        return value

    return _PLACEHOLDER_RE.sub(replace, text)
