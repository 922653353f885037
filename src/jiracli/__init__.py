"""jiracli - interactive Jira Cloud issue client.

Library use:

from jiracli import Session, JiraRestClient, JiraIssuesClient

session = Session()
session.set_credentials("alice@example.com", "api-token")
issues = JiraIssuesClient(JiraRestClient(session=session))
result = issues.get_issues_list("BTS")
if result.success:
    print([i["key"] for i in result.data["issues"]])
else:
    print(result.error)

Every operation returns a ``Result``; API failures never raise.
"""

from __future__ import annotations

from .config import CliConfig, load_config
from .credentials import CredentialCheck, CredentialStatus, check_credentials
from .jira_issues import JiraIssuesClient
from .jira_rest import JiraRestClient
from .models import Result
from .session import Session, derive_base_url

__version__ = "0.2.0"

__all__ = [
    "CliConfig",
    "CredentialCheck",
    "CredentialStatus",
    "JiraIssuesClient",
    "JiraRestClient",
    "Result",
    "Session",
    "check_credentials",
    "derive_base_url",
    "load_config",
    "__version__",
]
