"""Environment-based credentials for jiracli.

Reads ``JIRA_EMAIL`` and ``JIRA_API_TOKEN`` from the process environment,
optionally after loading a ``.env`` file with python-dotenv.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .logging import get_logger

TOKEN_HELP_URL = "https://id.atlassian.com/manage-profile/security/api-tokens"


@dataclass
class EnvAuthConfig:
    """Configuration for environment-based authentication."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    email_var: str = "JIRA_EMAIL"
    token_var: str = "JIRA_API_TOKEN"


@dataclass(frozen=True)
class EnvCredentials:
    email: str
    api_token: str


class EnvironmentAuthManager:
    """Looks up Jira credentials in the environment and ``.env`` files."""

    def __init__(self, config: EnvAuthConfig):
        self.config = config
        self.logger = get_logger()
        self._dotenv_loaded = False

    def load_dotenv(self) -> bool:
        """Load the configured ``.env`` file, or the first default one found.

        Existing environment variables are not overridden. Returns whether a
        file was loaded.
        """
        if not self.config.load_dotenv:
            return False
        if self.config.dotenv_path:
            candidates = [self.config.dotenv_path]
        else:
            candidates = ['.env', '.env.local']
        for location in candidates:
            env_path = Path(location)
            if env_path.is_file():
                load_dotenv(str(env_path))
                self._dotenv_loaded = True
                self.logger.debug(f"Loaded environment variables from {env_path}")
                return True
        if self.config.dotenv_path:
            self.logger.warning(
                f"Configured .env file not found: {self.config.dotenv_path}",
                operation="load_dotenv",
            )
        else:
            self.logger.debug("No .env file found", candidates=candidates)
        return False

    def get_email(self) -> str | None:
        value = os.getenv(self.config.email_var)
        return value.strip() if value and value.strip() else None

    def get_api_token(self) -> str | None:
        value = os.getenv(self.config.token_var)
        return value.strip() if value and value.strip() else None

    def get_credentials(self) -> EnvCredentials | None:
        """Return both values, loading ``.env`` first; ``None`` if either is absent."""
        if not self._dotenv_loaded:
            self.load_dotenv()
        email = self.get_email()
        token = self.get_api_token()
        if email and token:
            self.logger.log_operation("env_credentials_found", email_var=self.config.email_var)
            return EnvCredentials(email=email, api_token=token)
        return None

    def get_authentication_recommendations(self) -> list[str]:
        recommendations: list[str] = []
        missing = [
            name
            for name, value in (
                (self.config.email_var, self.get_email()),
                (self.config.token_var, self.get_api_token()),
            )
            if not value
        ]
        if missing:
            recommendations.append(
                f"Create a .env file with {self.config.email_var} and {self.config.token_var}"
            )
            recommendations.append(f"Missing: {', '.join(missing)}")
        if not self.get_api_token():
            recommendations.append(f"Create an API token at {TOKEN_HELP_URL}")
        return recommendations

    def create_sample_env_file(self, path: str = '.env') -> bool:
        """Write a sample ``.env`` file; never overwrites an existing one."""
        sample_content = f"""# jiracli Environment Configuration

# Atlassian account email (the part before @ selects https://<name>.atlassian.net)
{self.config.email_var}=you@example.com

# API token from {TOKEN_HELP_URL}
{self.config.token_var}=your_api_token_here

# Optional: Debug logging
# JIRACLI_DEBUG=1
"""
        env_path = Path(path)
        if env_path.exists():
            self.logger.debug(f"Environment file already exists: {env_path}")
            return False
        env_path.write_text(sample_content, encoding="utf-8")
        self.logger.log_operation("sample_env_created", file_path=str(env_path))
        return True


__all__ = [
    "EnvAuthConfig",
    "EnvCredentials",
    "EnvironmentAuthManager",
    "TOKEN_HELP_URL",
]
