"""jiracli command line entry point.

Subcommands:
  interactive -> guided menu for getting, creating and deleting issues (default)
  setup       -> write a sample .env file or verify environment credentials
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Iterable
from typing import Any

import requests

from jiracli.config import CliConfig, ConfigError, load_config
from jiracli.credentials import check_credentials
from jiracli.env_auth import EnvironmentAuthManager
from jiracli.errors import redact
from jiracli.logging import configure_logging, get_logger
from jiracli.session import Session
from jiracli.ux import Terminal, print_error
from jiracli.workflow import Workflow, build_auth_manager, build_issues_client

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="jiracli", description="Interactive Jira Cloud issue client"
    )
    p.add_argument("--config", help="Path to jiracli.config.yaml (optional)")
    p.add_argument("--env-file", help="Load credentials from this .env file")
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity on stderr (env: JIRACLI_DEBUG=1 forces DEBUG)",
    )
    p.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")
    sub = p.add_subparsers(
        dest="cmd",
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )
    sub.add_parser("interactive", help="Run the interactive menu (default)")

    pst = sub.add_parser("setup", help="Credential helpers")
    pst.add_argument("--create-env", action="store_true", help="Create sample .env file")
    pst.add_argument(
        "--check-auth", action="store_true", help="Verify credentials from the environment"
    )
    return p


def _apply_overrides(cfg: CliConfig, args: argparse.Namespace) -> CliConfig:
    if args.env_file:
        cfg.env_auth_dotenv_path = args.env_file
    if args.log_level:
        cfg.logging_level = args.log_level
    if args.log_json:
        cfg.logging_json_enabled = True
    return cfg


def _print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def _cmd_interactive(cfg: CliConfig, terminal: Terminal | None = None) -> int:
    workflow = Workflow.from_config(cfg, terminal or Terminal())
    try:
        workflow.run()
    except (KeyboardInterrupt, EOFError):
        print("\n👋 Goodbye!")
        return EXIT_INTERRUPTED
    except Exception as exc:
        get_logger().log_error(
            "interactive session aborted", error=str(exc), operation="interactive"
        )
        print_error(f"Unexpected error: {redact(str(exc))}", sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def _setup_create_env(manager: EnvironmentAuthManager) -> None:
    path = manager.config.dotenv_path or ".env"
    if manager.create_sample_env_file(path):
        _print_lines([f"[setup] Created sample {path} file"])
    else:
        _print_lines([f"[setup] {path} already exists; left unchanged"])


def _setup_check_auth(
    cfg: CliConfig,
    manager: EnvironmentAuthManager,
    *,
    http: requests.Session | None = None,
) -> int:
    creds = manager.get_credentials()
    _print_lines(
        [
            f"[setup] {manager.config.email_var}: {'✓ Found' if manager.get_email() else '✗ Not found'}",
            f"[setup] {manager.config.token_var}: {'✓ Found' if manager.get_api_token() else '✗ Not found'}",
        ]
    )
    if creds is None:
        print("[setup] Recommendations:")
        for rec in manager.get_authentication_recommendations():
            print(f"  - {rec}")
        return EXIT_FAILURE

    session = Session(api_version=cfg.api_version)
    session.set_credentials(creds.email, creds.api_token)
    issues = build_issues_client(cfg, session, http=http)
    try:
        check = check_credentials(session, issues)
    finally:
        issues.rest.close()
    print(f"[setup] Jira URL: {session.base_url} (auto-generated from email)")
    if check.ok:
        print(f"[setup] Credentials: ✓ Ready ({check.project_count} project(s) visible)")
        return EXIT_OK
    print(f"[setup] Credentials: ✗ {check.message}")
    if check.tip:
        print(f"  - {check.tip}")
    return EXIT_FAILURE


def _setup_show_help() -> None:
    _print_lines(
        [
            "[setup] Use --help to see available setup options",
            "Available options:",
            "  --create-env    Create sample .env file",
            "  --check-auth    Verify JIRA_EMAIL / JIRA_API_TOKEN against Jira",
        ]
    )


def _cmd_setup(cfg: CliConfig, args: argparse.Namespace) -> int:
    manager = build_auth_manager(cfg)
    exit_code = EXIT_OK
    if args.create_env:
        _setup_create_env(manager)
    if args.check_auth:
        exit_code = _setup_check_auth(cfg, manager)
    if not any([args.create_env, args.check_auth]):
        _setup_show_help()
    return exit_code


def _build_handlers(args: argparse.Namespace, cfg: CliConfig) -> dict[str, Callable[[], int]]:
    return {
        "interactive": lambda: _cmd_interactive(cfg),
        "setup": lambda: _cmd_setup(cfg, args),
    }


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = _apply_overrides(load_config(args.config), args)
    except ConfigError as exc:
        print_error(str(exc), sys.stderr)
        return EXIT_FAILURE
    configure_logging(json_logging=cfg.logging_json_enabled, level=cfg.logging_level)
    handlers = _build_handlers(args, cfg)
    handler = handlers.get(args.cmd or "interactive")
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return EXIT_FAILURE
    return handler()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
