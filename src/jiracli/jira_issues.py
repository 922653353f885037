"""Jira project & issue operations on top of :class:`JiraRestClient`.

Each operation checks its required arguments before touching the network and
returns a :class:`~jiracli.models.Result`.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from .adf import paragraph_document
from .config import DEFAULT_ISSUE_TYPE, DEFAULT_MAX_RESULTS
from .jira_rest import JiraRestClient
from .models import Result

# Characters JavaScript's encodeURIComponent leaves unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


def build_issues_jql(project_key: str) -> str:
    return f"project = {project_key} ORDER BY created ASC"


class JiraIssuesClient:
    def __init__(
        self,
        rest: JiraRestClient,
        *,
        default_max_results: int = DEFAULT_MAX_RESULTS,
        default_issue_type: str = DEFAULT_ISSUE_TYPE,
    ) -> None:
        self.rest = rest
        self.default_max_results = default_max_results
        self.default_issue_type = default_issue_type

    # ---- users & projects ----------------------------------------------
    def get_current_user(self) -> Result:
        return self.rest.call("/myself")

    def get_projects_list(self) -> Result:
        return self.rest.call("/project")

    def get_project(self, project_key: str) -> Result:
        if _blank(project_key):
            return Result.fail("Project key is required")
        return self.rest.call(f"/project/{project_key.strip()}")

    # ---- issues ---------------------------------------------------------
    def get_issues_list(self, project_key: str, max_results: int | None = None) -> Result:
        if _blank(project_key):
            return Result.fail("Project key is required")
        limit = self.default_max_results if max_results is None else max_results
        jql = quote(build_issues_jql(project_key.strip()), safe=_URI_COMPONENT_SAFE)
        return self.rest.call(f"/search?jql={jql}&maxResults={limit}")

    def get_issue(self, issue_key: str) -> Result:
        if _blank(issue_key):
            return Result.fail("Issue key is required (e.g., BTS-1)")
        return self.rest.call(f"/issue/{issue_key.strip()}")

    def create_issue(
        self,
        project_key: str,
        summary: str,
        description: str | None = None,
        issue_type: str | None = None,
    ) -> Result:
        if _blank(project_key):
            return Result.fail("Project key is required")
        if _blank(summary):
            return Result.fail("Summary is required")
        key = project_key.strip()

        project_check = self.get_project(key)
        if not project_check.success:
            return Result.fail(
                f"Project '{key}' not found or you don't have access to it. "
                f"{project_check.error}"
            )

        fields: dict[str, Any] = {
            "project": {"key": key},
            "summary": summary.strip(),
            "issuetype": {"name": issue_type or self.default_issue_type},
        }
        document = paragraph_document(description)
        if document is not None:
            fields["description"] = document
        return self.rest.call("/issue", method="POST", body={"fields": fields})

    def delete_issue(self, issue_key: str) -> Result:
        if _blank(issue_key):
            return Result.fail("Issue key is required (e.g., BTS-1)")
        return self.rest.call(f"/issue/{issue_key.strip()}", method="DELETE")


__all__ = ["JiraIssuesClient", "build_issues_jql"]
