from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

CONFIG_DEFAULT = "jiracli.config.yaml"
DEFAULT_MAX_RESULTS = 50
DEFAULT_ISSUE_TYPE = "Task"
DEFAULT_TIMEOUT = 30.0


class ConfigError(RuntimeError):
    pass


@dataclass
class CliConfig:
    source_file: Path | None = None
    api_version: str = "3"
    request_timeout: float = DEFAULT_TIMEOUT
    default_max_results: int = DEFAULT_MAX_RESULTS
    default_issue_type: str = DEFAULT_ISSUE_TYPE
    # Logging configuration
    logging_json_enabled: bool = False
    logging_level: str = "WARNING"
    # Environment authentication configuration
    env_auth_load_dotenv: bool = True
    env_auth_dotenv_path: str | None = None
    env_email_var: str = "JIRA_EMAIL"
    env_token_var: str = "JIRA_API_TOKEN"


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:], value)
    return value


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {}) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return cast(dict[str, Any], value)


def load_config(path: str | Path | None = None) -> CliConfig:
    """Load ``CliConfig`` from YAML.

    With no ``path`` the default file in the working directory is used when it
    exists, otherwise built-in defaults. An explicit ``path`` must exist.
    """
    if path is None:
        p = Path(CONFIG_DEFAULT)
        if not p.exists():
            return CliConfig()
    else:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f'Configuration file not found: {p}')
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if not isinstance(raw, dict):
        raise ConfigError(f'Configuration root must be a mapping: {p}')

    jira = _section(raw, 'jira')
    defaults = _section(raw, 'defaults')
    logging_config = _section(raw, 'logging')
    env_auth = _section(raw, 'environment')

    try:
        return CliConfig(
            source_file=p,
            api_version=str(_resolve_env_var(jira.get('api_version', '3'))),
            request_timeout=float(_resolve_env_var(jira.get('timeout', DEFAULT_TIMEOUT))),
            default_max_results=int(defaults.get('max_results', DEFAULT_MAX_RESULTS)),
            default_issue_type=str(defaults.get('issue_type', DEFAULT_ISSUE_TYPE)),
            logging_json_enabled=bool(logging_config.get('json_enabled', False)),
            logging_level=str(logging_config.get('level', 'WARNING')),
            env_auth_load_dotenv=bool(env_auth.get('load_dotenv', True)),
            env_auth_dotenv_path=_resolve_env_var(env_auth.get('dotenv_path')),
            env_email_var=str(env_auth.get('email_var', 'JIRA_EMAIL')),
            env_token_var=str(env_auth.get('token_var', 'JIRA_API_TOKEN')),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'Invalid value in {p}: {exc}') from exc


__all__ = ["CONFIG_DEFAULT", "CliConfig", "ConfigError", "load_config"]
