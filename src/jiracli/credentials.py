"""Decide whether a credential session can be used.

A Jira site accepts valid credentials for accounts that cannot see any
project, and such a session is useless for this tool, so the check calls
the user endpoint and then the project list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .jira_issues import JiraIssuesClient
from .logging import get_logger
from .session import Session


class CredentialStatus(str, Enum):
    READY = "ready"
    MISSING = "missing"
    USER_REJECTED = "user_rejected"
    PROJECTS_FAILED = "projects_failed"
    NO_PROJECTS = "no_projects"


@dataclass(frozen=True)
class CredentialCheck:
    status: CredentialStatus
    message: str
    tip: str | None = None
    project_count: int = 0

    @property
    def ok(self) -> bool:
        return self.status is CredentialStatus.READY


def _run_checks(issues: JiraIssuesClient) -> CredentialCheck:
    user = issues.get_current_user()
    if not user.success:
        get_logger().info("credential check rejected", operation="check_credentials")
        return CredentialCheck(
            CredentialStatus.USER_REJECTED,
            f"Credentials test failed: {user.error}",
            tip="Please check your email and API token and try again.",
        )

    projects = issues.get_projects_list()
    if not projects.success:
        return CredentialCheck(
            CredentialStatus.PROJECTS_FAILED,
            f"Error accessing projects: {projects.error}",
            tip="You may not have permission to access projects.",
        )

    count = len(projects.data) if isinstance(projects.data, list) else 0
    if count == 0:
        return CredentialCheck(
            CredentialStatus.NO_PROJECTS,
            "User exists but no projects found.",
            tip="You may need to be added to a project or create one.",
        )
    return CredentialCheck(
        CredentialStatus.READY, "Credentials verified", project_count=count
    )


def check_credentials(session: Session, issues: JiraIssuesClient) -> CredentialCheck:
    if not session.has_credentials:
        return CredentialCheck(CredentialStatus.MISSING, "Please setup credentials first")
    with get_logger().timed_operation("check_credentials", base_url=session.base_url):
        return _run_checks(issues)


__all__ = ["CredentialCheck", "CredentialStatus", "check_credentials"]
