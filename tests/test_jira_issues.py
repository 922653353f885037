import pytest
from conftest import DummyResponse

from jiracli.errors import NOT_FOUND_MESSAGE
from jiracli.jira_issues import JiraIssuesClient, build_issues_jql
from jiracli.jira_rest import JiraRestClient
from jiracli.session import Session

API = "https://alice.atlassian.net/rest/api/3"


@pytest.fixture
def build(make_http):
    def _build(*responses, **kwargs):
        session = Session()
        session.set_credentials("alice@co", "tok")
        http = make_http(*responses)
        return JiraIssuesClient(JiraRestClient(session=session, http=http), **kwargs), http

    return _build


def test_simple_gets_hit_expected_paths(build):
    issues, http = build(
        DummyResponse(200, {"accountId": "1"}),
        DummyResponse(200, [{"key": "BTS", "name": "Bugs"}]),
        DummyResponse(200, {"key": "BTS"}),
        DummyResponse(200, {"key": "BTS-1"}),
    )

    assert issues.get_current_user().data == {"accountId": "1"}
    assert issues.get_projects_list().data[0]["key"] == "BTS"
    assert issues.get_project(" BTS ").success
    assert issues.get_issue("BTS-1 ").data == {"key": "BTS-1"}
    assert http.urls == [
        f"{API}/myself",
        f"{API}/project",
        f"{API}/project/BTS",
        f"{API}/issue/BTS-1",
    ]


def test_issue_search_url_is_uri_component_encoded(build):
    issues, http = build(DummyResponse(200, {"issues": []}))

    issues.get_issues_list("BTS")

    assert http.urls == [
        f"{API}/search?jql=project%20%3D%20BTS%20ORDER%20BY%20created%20ASC&maxResults=50"
    ]


def test_issue_search_respects_limits(build):
    issues, http = build(
        DummyResponse(200, {"issues": []}),
        DummyResponse(200, {"issues": []}),
        default_max_results=20,
    )
    issues.get_issues_list("BTS")
    issues.get_issues_list("BTS", max_results=5)
    assert http.urls[0].endswith("&maxResults=20")
    assert http.urls[1].endswith("&maxResults=5")


def test_build_issues_jql():
    assert build_issues_jql("ABC") == "project = ABC ORDER BY created ASC"


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_required_fields_short_circuit_without_network(build, blank):
    issues, http = build()

    results = {
        "get_project": issues.get_project(blank),
        "get_issues_list": issues.get_issues_list(blank),
        "get_issue": issues.get_issue(blank),
        "delete_issue": issues.delete_issue(blank),
        "create_no_project": issues.create_issue(blank, "Summary"),
        "create_no_summary": issues.create_issue("BTS", blank),
    }

    assert http.request_log == []
    assert all(r.success is False for r in results.values())
    assert results["get_project"].error == "Project key is required"
    assert results["get_issues_list"].error == "Project key is required"
    assert results["get_issue"].error == "Issue key is required (e.g., BTS-1)"
    assert results["delete_issue"].error == "Issue key is required (e.g., BTS-1)"
    assert results["create_no_project"].error == "Project key is required"
    assert results["create_no_summary"].error == "Summary is required"


def test_create_issue_checks_project_then_posts(build):
    issues, http = build(
        DummyResponse(200, {"key": "BTS"}),
        DummyResponse(201, {"id": "10001", "key": "BTS-3"}),
    )

    result = issues.create_issue("BTS", "Login broken", "  Steps to reproduce  ")

    assert result.success is True
    assert result.data["key"] == "BTS-3"
    assert [e["method"] for e in http.request_log] == ["GET", "POST"]
    assert http.urls == [f"{API}/project/BTS", f"{API}/issue"]
    assert http.request_log[1]["json"] == {
        "fields": {
            "project": {"key": "BTS"},
            "summary": "Login broken",
            "issuetype": {"name": "Task"},
            "description": {
                "type": "doc",
                "version": 1,
                "content": [
                    {
                        "type": "paragraph",
                        "content": [{"type": "text", "text": "Steps to reproduce"}],
                    }
                ],
            },
        }
    }


@pytest.mark.parametrize("description", [None, "", "   "])
def test_create_issue_omits_blank_description(build, description):
    issues, http = build(DummyResponse(200, {"key": "BTS"}), DummyResponse(201, {"key": "BTS-4"}))

    issues.create_issue("BTS", "Summary", description, issue_type="Bug")

    fields = http.request_log[1]["json"]["fields"]
    assert "description" not in fields
    assert fields["issuetype"] == {"name": "Bug"}


def test_create_issue_uses_configured_default_type(build):
    issues, http = build(
        DummyResponse(200, {"key": "BTS"}),
        DummyResponse(201, {"key": "BTS-5"}),
        default_issue_type="Story",
    )
    issues.create_issue("BTS", "Summary")
    assert http.request_log[1]["json"]["fields"]["issuetype"] == {"name": "Story"}


def test_create_issue_stops_when_project_check_fails(build):
    issues, http = build(DummyResponse(404, None))

    result = issues.create_issue("NOPE", "Summary", "Body")

    assert result.success is False
    assert result.error == (
        f"Project 'NOPE' not found or you don't have access to it. {NOT_FOUND_MESSAGE}"
    )
    assert len(http.request_log) == 1
    assert http.request_log[0]["method"] == "GET"


def test_create_issue_surfaces_field_errors(build):
    issues, _ = build(
        DummyResponse(200, {"key": "BTS"}),
        DummyResponse(400, {"errorMessages": [], "errors": {"issuetype": "Specify a valid issue type"}}),
    )
    result = issues.create_issue("BTS", "Summary")
    assert result.error == "Specify a valid issue type"


def test_delete_issue(build):
    issues, http = build(DummyResponse(204, None))

    result = issues.delete_issue("BTS-1")

    assert result.success is True
    assert result.data is None
    assert http.request_log[0]["method"] == "DELETE"
    assert http.urls == [f"{API}/issue/BTS-1"]
