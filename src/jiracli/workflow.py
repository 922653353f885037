"""Interactive menu workflow.

The menus are a small finite-state machine. :func:`transition` is pure and
maps ``(state, menu input)`` to the next state plus the side effect the
controller should run; :class:`Workflow` owns the session and the terminal
and performs those effects.

    SETUP_MENU --verified--> MAIN_MENU --1/2/3--> GET/CREATE/DELETE flow
        ^  |                     ^                       |
        +--+ (retry)             +-----------------------+
                                 MAIN_MENU --4--> EXIT
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import requests

from .adf import document_text
from .config import CliConfig
from .credentials import CredentialStatus, check_credentials
from .env_auth import TOKEN_HELP_URL, EnvAuthConfig, EnvironmentAuthManager
from .errors import mask_secret
from .jira_issues import JiraIssuesClient
from .jira_rest import JiraRestClient
from .logging import get_logger
from .session import Session
from .ux import Terminal


class State(str, Enum):
    SETUP_MENU = "setup_menu"
    MAIN_MENU = "main_menu"
    SELECT_PROJECT = "select_project"
    SELECT_ISSUE = "select_issue"
    CREATE_FLOW = "create_flow"
    DELETE_FLOW = "delete_flow"
    GET_FLOW = "get_flow"
    EXIT = "exit"


class Effect(str, Enum):
    NONE = "none"
    USE_ENV_CREDENTIALS = "use_env_credentials"
    ENTER_CREDENTIALS = "enter_credentials"
    INVALID_CHOICE = "invalid_choice"
    GOODBYE = "goodbye"


@dataclass(frozen=True)
class Transition:
    state: State
    effect: Effect = Effect.NONE


HISTORY_LIMIT = 50
FLOW_STATES = frozenset({State.GET_FLOW, State.CREATE_FLOW, State.DELETE_FLOW})

_SETUP_CHOICES = {
    "1": Effect.USE_ENV_CREDENTIALS,
    "2": Effect.ENTER_CREDENTIALS,
}
_MAIN_CHOICES = {
    "1": State.GET_FLOW,
    "2": State.CREATE_FLOW,
    "3": State.DELETE_FLOW,
    "4": State.EXIT,
}


def transition(state: State, choice: str = "") -> Transition:
    """Next state for a menu input. Sub-flows always lead back to MAIN_MENU."""
    key = choice.strip()
    if state is State.SETUP_MENU:
        return Transition(State.SETUP_MENU, _SETUP_CHOICES.get(key, Effect.INVALID_CHOICE))
    if state is State.MAIN_MENU:
        target = _MAIN_CHOICES.get(key)
        if target is None:
            return Transition(State.MAIN_MENU, Effect.INVALID_CHOICE)
        if target is State.EXIT:
            return Transition(State.EXIT, Effect.GOODBYE)
        return Transition(target)
    if state in FLOW_STATES:
        return Transition(State.MAIN_MENU)
    raise ValueError(f"no menu transition from state {state.value!r}")


def setup_outcome(verified: bool) -> State:
    return State.MAIN_MENU if verified else State.SETUP_MENU


def parse_selection(raw: str, count: int) -> int | None:
    """Map a 1-based numeric answer to a 0-based index, or ``None`` if invalid.

    Only plain ASCII digits count; ``int()`` alone would also take ``+2``,
    ``1_0`` and full-width digits.
    """
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    number = int(text)
    if number < 1 or number > count:
        return None
    return number - 1


def is_confirmed(raw: str) -> bool:
    return raw.lower() == "yes"


def build_issues_client(
    config: CliConfig, session: Session, *, http: requests.Session | None = None
) -> JiraIssuesClient:
    rest = JiraRestClient(session=session, timeout=config.request_timeout, http=http)
    return JiraIssuesClient(
        rest,
        default_max_results=config.default_max_results,
        default_issue_type=config.default_issue_type,
    )


def build_auth_manager(config: CliConfig) -> EnvironmentAuthManager:
    return EnvironmentAuthManager(
        EnvAuthConfig(
            load_dotenv=config.env_auth_load_dotenv,
            dotenv_path=config.env_auth_dotenv_path,
            email_var=config.env_email_var,
            token_var=config.env_token_var,
        )
    )


def _fields(issue: dict[str, Any]) -> dict[str, Any]:
    fields = issue.get("fields")
    return fields if isinstance(fields, dict) else {}


def _name_of(value: Any, attr: str = "name", default: str = "") -> str:
    if isinstance(value, dict) and value.get(attr):
        return str(value[attr])
    return default


@dataclass
class Workflow:
    """Drives setup, the main menu and the get/create/delete flows."""

    terminal: Terminal
    issues: JiraIssuesClient
    session: Session
    auth_manager: EnvironmentAuthManager | None = None
    state: State = State.SETUP_MENU
    history: deque[State] = field(default_factory=lambda: deque(maxlen=HISTORY_LIMIT))

    @classmethod
    def from_config(
        cls,
        config: CliConfig,
        terminal: Terminal,
        *,
        http: requests.Session | None = None,
    ) -> Workflow:
        session = Session(api_version=config.api_version)
        return cls(
            terminal=terminal,
            issues=build_issues_client(config, session, http=http),
            session=session,
            auth_manager=build_auth_manager(config),
        )

    def _enter(self, state: State) -> None:
        self.state = state
        self.history.append(state)
        get_logger().debug(f"workflow state -> {state.value}", operation="workflow_state")

    # ---- top level ------------------------------------------------------
    def run(self) -> None:
        try:
            with self.terminal:
                self.terminal.header("🎯 Welcome to Jira CLI Tool!")
                self.setup_menu()
                self.show_welcome()
                self.main_menu()
        finally:
            self.issues.rest.close()

    def setup_menu(self) -> None:
        t = self.terminal
        while True:
            self._enter(State.SETUP_MENU)
            t.header("🔧 Jira Setup Menu")
            t.say("How would you like to configure your credentials?")
            t.say("1. 📁 Use .env file (if available)")
            t.say("2. ✏️  Enter credentials manually")
            t.rule(40)
            step = transition(State.SETUP_MENU, t.ask("Please enter your choice (1 or 2): "))
            if step.effect is Effect.INVALID_CHOICE:
                t.error("Invalid choice. Please enter 1 or 2.")
                continue
            if step.effect is Effect.USE_ENV_CREDENTIALS:
                verified = self.use_env_credentials()
            else:
                verified = self.enter_credentials_manually()
            if setup_outcome(verified) is State.MAIN_MENU:
                t.success("Credentials configured successfully!")
                return

    def show_welcome(self) -> None:
        t = self.terminal
        if self.session.has_credentials:
            t.success("Jira CLI Tool - Ready to use!")
            t.say(f"📧 Connected as: {self.session.email}")
            t.say(f"🌐 Jira URL: {self.session.base_url} (auto-generated from email)")
        else:
            t.warning("No credentials found. Please setup first.")

    def main_menu(self) -> None:
        t = self.terminal
        flows = {
            State.GET_FLOW: self.get_flow,
            State.CREATE_FLOW: self.create_flow,
            State.DELETE_FLOW: self.delete_flow,
        }
        while True:
            self._enter(State.MAIN_MENU)
            t.header("What would you like to do?")
            t.say("1. 🔍 Get an issue")
            t.say("2. ➕ Create an issue")
            t.say("3. 🗑️  Delete an issue")
            t.say("4. 🚪 Exit")
            t.rule(30)
            step = transition(
                State.MAIN_MENU, t.ask("Please enter your choice (1, 2, 3, or 4): ")
            )
            if step.effect is Effect.INVALID_CHOICE:
                t.error("Invalid choice. Please enter 1, 2, 3, or 4.")
                continue
            if step.effect is Effect.GOODBYE:
                self._enter(State.EXIT)
                t.say("👋 Goodbye!")
                return
            self._enter(step.state)
            flows[step.state]()

    # ---- credentials ----------------------------------------------------
    def verify_credentials(self) -> bool:
        t = self.terminal
        check = check_credentials(self.session, self.issues)
        if check.ok:
            return True
        if check.status is CredentialStatus.NO_PROJECTS:
            t.warning(check.message)
        else:
            t.error(check.message)
        if check.tip:
            t.tip(check.tip)
        return False

    def use_env_credentials(self) -> bool:
        t = self.terminal
        manager = self.auth_manager or EnvironmentAuthManager(EnvAuthConfig())
        creds = manager.get_credentials()
        if creds is None:
            t.error("No credentials found in .env file.")
            t.tip(
                f"Please create a .env file with {manager.config.email_var} "
                f"and {manager.config.token_var}"
            )
            t.say("   Or choose option 2 to enter credentials manually.")
            return False

        self.session.set_credentials(creds.email, creds.api_token)
        t.info("Testing credentials from .env file...")
        if not self.verify_credentials():
            t.error("Credentials from .env file are not valid.")
            return False

        t.success("Using credentials from .env file!")
        t.say(f"📧 Email: {self.session.email}")
        t.say(f"🔑 API Token: {mask_secret(self.session.api_token)}")
        t.say(f"🌐 Base URL: {self.session.base_url} (auto-generated from email)")
        return True

    def enter_credentials_manually(self) -> bool:
        t = self.terminal
        t.header("✏️  Manual Credentials Setup")
        t.say(f"You need your email and API token from: {TOKEN_HELP_URL}")
        email = t.ask("📧 Enter your email: ")
        token = t.ask("🔑 Enter your API token: ")
        if not email.strip() or not token.strip():
            t.error("Email and API token are required")
            return False

        t.info("Testing credentials...")
        self.session.set_credentials(email.strip(), token.strip())
        return self.verify_credentials()

    # ---- selection ------------------------------------------------------
    def select_project(self) -> dict[str, Any] | None:
        t = self.terminal
        self._enter(State.SELECT_PROJECT)
        t.info("Fetching available projects...")
        result = self.issues.get_projects_list()
        if not result.success:
            t.error(f"Error: {result.error}")
            return None

        projects = result.data if isinstance(result.data, list) else []
        if not projects:
            t.say("📭 No projects found")
            return None

        t.header("📋 Available Projects:")
        t.rule(40)
        t.numbered([f"{p.get('key')} - {p.get('name')}" for p in projects])
        index = parse_selection(
            t.ask(f"\nPlease select a project (1-{len(projects)}): "), len(projects)
        )
        if index is None:
            t.error("Invalid project choice.")
            return None

        selected: dict[str, Any] = projects[index]
        t.success(f"Selected project: {selected.get('key')} - {selected.get('name')}")
        return selected

    def select_issue(self) -> dict[str, Any] | None:
        t = self.terminal
        project = self.select_project()
        if project is None:
            return None

        self._enter(State.SELECT_ISSUE)
        project_key = str(project.get("key", ""))
        t.info(f"Fetching issues from project {project_key}...")
        result = self.issues.get_issues_list(project_key)
        if not result.success:
            t.error(f"Error: {result.error}")
            return None

        payload = result.data if isinstance(result.data, dict) else {}
        issues = payload.get("issues") or []
        if not issues:
            t.say(f"📭 No issues found in project {project_key}")
            return None

        t.header(f"📋 Found {len(issues)} issue(s) in project {project_key}:")
        t.rule(60)
        t.numbered([f"{i.get('key')} - {_fields(i).get('summary', '')}" for i in issues])
        index = parse_selection(
            t.ask(f"\nPlease select an issue (1-{len(issues)}): "), len(issues)
        )
        if index is None:
            t.error("Invalid issue choice.")
            return None
        selected: dict[str, Any] = issues[index]
        return selected

    # ---- flows ----------------------------------------------------------
    def get_flow(self) -> None:
        issue = self.select_issue()
        if issue is not None:
            self.display_issue(str(issue.get("key", "")))

    def display_issue(self, issue_key: str) -> None:
        t = self.terminal
        t.info(f"Fetching issue {issue_key}...")
        result = self.issues.get_issue(issue_key)
        if not result.success:
            t.error(f"Error: {result.error}")
            return

        issue = result.data if isinstance(result.data, dict) else {}
        fields = _fields(issue)
        t.success("Issue Found:")
        t.fields(
            [
                ("🔑 Key", str(issue.get("key", issue_key))),
                ("📝 Summary", str(fields.get("summary") or "")),
                ("📄 Description", document_text(fields.get("description")) or "No description"),
                ("👤 Assignee", _name_of(fields.get("assignee"), "displayName", "Unassigned")),
                ("📊 Status", _name_of(fields.get("status"))),
                ("🏷️  Type", _name_of(fields.get("issuetype"))),
            ]
        )

    def create_flow(self) -> None:
        t = self.terminal
        project = self.select_project()
        if project is None:
            return

        self._enter(State.CREATE_FLOW)
        summary = t.ask("\n📝 Enter issue summary: ")
        description = t.ask("📄 Enter description (optional): ")
        if not summary.strip():
            t.error("Summary is required")
            return

        t.info("Creating issue...")
        result = self.issues.create_issue(
            str(project.get("key", "")), summary.strip(), description.strip()
        )
        if result.success:
            new_key = str((result.data or {}).get("key", ""))
            t.success("Issue created successfully!")
            t.say(f"🔑 New Issue Key: {new_key}")
            t.say(f"🔗 URL: {self.session.browse_url(new_key)}")
        else:
            t.error(f"Error: {result.error}")
            t.tip("Make sure you have permission to create issues in this project.")

    def delete_flow(self) -> None:
        t = self.terminal
        issue = self.select_issue()
        if issue is None:
            return

        self._enter(State.DELETE_FLOW)
        issue_key = str(issue.get("key", ""))
        summary = _fields(issue).get("summary", "")
        t.warning(f"WARNING: You are about to delete issue {issue_key}")
        t.say(f"📝 Summary: {summary}")
        t.warning("This action cannot be undone!")

        answer = t.ask("\nAre you sure you want to delete this issue? (yes/no): ")
        if not is_confirmed(answer):
            t.error("Deletion cancelled.")
            return

        t.info(f"Deleting issue {issue_key}...")
        result = self.issues.delete_issue(issue_key)
        if result.success:
            get_logger().log_operation("issue_deleted", issue_key=issue_key)
            t.success("Issue deleted successfully!")
            t.say(f"🗑️  Deleted: {issue_key} - {summary}")
        else:
            t.error(f"Error: {result.error}")
            t.tip("Make sure you have permission to delete issues in this project.")


__all__ = [
    "Effect",
    "FLOW_STATES",
    "HISTORY_LIMIT",
    "State",
    "Transition",
    "Workflow",
    "build_auth_manager",
    "build_issues_client",
    "is_confirmed",
    "parse_selection",
    "setup_outcome",
    "transition",
]
