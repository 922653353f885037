"""Credential session shared by the REST client and the interactive workflow."""

from __future__ import annotations

from dataclasses import dataclass

API_PREFIX = "/rest/api"
DEFAULT_API_VERSION = "3"


def derive_base_url(email: str) -> str:
    """Map an Atlassian account email to a Jira Cloud site URL.

    The local part of the address is used as the site subdomain, so
    ``alice@example.com`` maps to ``https://alice.atlassian.net``. This is an
    approximation: organisations whose site name differs from the user's
    mailbox name get the wrong URL. Returns ``""`` when ``email`` is empty or
    has no ``@``.
    """
    if not email or "@" not in email:
        return ""
    local_part = email.split("@")[0]
    return f"https://{local_part}.atlassian.net"


@dataclass
class Session:
    """Email, API token and the base URL derived from the email.

    ``base_url`` is only ever written by :meth:`set_credentials`.
    """

    email: str = ""
    api_token: str = ""
    base_url: str = ""
    api_version: str = DEFAULT_API_VERSION

    def set_credentials(self, email: str, api_token: str) -> None:
        self.email = email
        self.api_token = api_token
        self.base_url = derive_base_url(email)

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.api_token)

    @property
    def api_root(self) -> str:
        return f"{self.base_url}{API_PREFIX}/{self.api_version}"

    def browse_url(self, issue_key: str) -> str:
        return f"{self.base_url}/browse/{issue_key}"


__all__ = ["Session", "derive_base_url"]
