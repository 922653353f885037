import pytest

from jiracli.config import CONFIG_DEFAULT, CliConfig, ConfigError, load_config

CONFIG = """
jira:
  api_version: 2
  timeout: 10
defaults:
  max_results: 25
  issue_type: Bug
logging:
  json_enabled: true
  level: DEBUG
environment:
  load_dotenv: false
  dotenv_path: $JIRACLI_ENV_FILE
"""


def test_defaults_without_file():
    cfg = load_config()
    assert cfg == CliConfig()
    assert cfg.default_max_results == 50
    assert cfg.default_issue_type == "Task"
    assert cfg.logging_level == "WARNING"


def test_load_full_config(tmp_path, monkeypatch):
    monkeypatch.setenv("JIRACLI_ENV_FILE", "/secrets/jira.env")
    path = tmp_path / "custom.yaml"
    path.write_text(CONFIG)

    cfg = load_config(path)

    assert cfg.source_file == path
    assert cfg.api_version == "2"
    assert cfg.request_timeout == 10.0
    assert cfg.default_max_results == 25
    assert cfg.default_issue_type == "Bug"
    assert cfg.logging_json_enabled is True
    assert cfg.logging_level == "DEBUG"
    assert cfg.env_auth_load_dotenv is False
    assert cfg.env_auth_dotenv_path == "/secrets/jira.env"


def test_default_file_in_working_directory(tmp_path):
    (tmp_path / CONFIG_DEFAULT).write_text("defaults:\n  max_results: 10\n")
    assert load_config().default_max_results == 10


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path).default_issue_type == "Task"


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "defaults: [1, 2]\n",
        "defaults:\n  max_results: many\n",
        "jira: {timeout: [\n",
    ],
)
def test_invalid_config(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text)
    with pytest.raises(ConfigError):
        load_config(path)
