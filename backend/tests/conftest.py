"""Shared fixtures for sprint report proxy tests."""

import pytest
from unittest.mock import Mock


def jira_response(status_code=200, payload=None, text=""):
    """Mock of a requests.Response as returned by requests.get."""
    return Mock(status_code=status_code, json=lambda: payload, text=text)


@pytest.fixture
def mock_jira_credentials():
    """Mock Jira credentials for testing."""
    return {
        "base_url": "https://test.atlassian.net",
        "email": "test@example.com",
        "api_token": "test-token-123"
    }


@pytest.fixture
def login_body():
    """Login request body."""
    return {
        "domain": "test",
        "email": "test@example.com",
        "apiToken": "test-token-123"
    }


@pytest.fixture
def myself_response():
    """Response of /rest/api/3/myself."""
    return {
        "accountId": "5b10ac8d82e05b22cc7d4ef5",
        "displayName": "Test User",
        "emailAddress": "test@example.com"
    }


@pytest.fixture
def sample_sprint_detail():
    """Response of /rest/agile/1.0/sprint/{id}."""
    return {
        "id": 100,
        "name": "Sprint 1",
        "state": "closed",
        "startDate": "2024-01-01T00:00:00.000Z",
        "completeDate": "2024-01-14T00:00:00.000Z",
        "originBoardId": 7
    }


@pytest.fixture
def sample_sprints():
    """Multiple sample sprints for testing."""
    return [
        {
            "id": 101,
            "name": "Sprint 2",
            "state": "closed",
            "startDate": "2024-01-15T00:00:00.000Z",
            "completeDate": "2024-01-28T00:00:00.000Z"
        },
        {
            "id": 103,
            "name": "Sprint 4",
            "state": "active",
            "startDate": "2024-02-12T00:00:00.000Z"
        },
        {
            "id": 104,
            "name": "Sprint 3",
            "state": "closed",
            "completeDate": "2024-02-11T00:00:00.000Z"
        },
        {
            "id": 105,
            "name": "Sprint 1",
            "state": "future",
            "createdDate": "2024-01-01T00:00:00.000Z"
        }
    ]


@pytest.fixture
def sample_sprint_report():
    """Greenhopper sprint report payload."""
    return {
        "contents": {
            "completedIssues": [
                {
                    "key": "PROJ-1",
                    "summary": "Implement feature X",
                    "typeName": "Story",
                    "priorityName": "High",
                    "statusName": "Done",
                    "assigneeDisplayName": "Alice",
                    "estimateStatistic": {"statFieldValue": {"value": 3.0}},
                    "currentEstimateStatistic": {"statFieldValue": {"value": 5.0}}
                },
                {
                    "key": "PROJ-2",
                    "summary": "Fix login bug",
                    "typeName": "Bug",
                    "priorityName": "Medium",
                    "statusName": "Done",
                    "assigneeName": "bob",
                    "estimateStatistic": {"statFieldValue": {}},
                    "currentEstimateStatistic": {"statFieldValue": {"value": 2.0}}
                }
            ],
            "issuesNotCompletedInCurrentSprint": [
                {
                    "key": "PROJ-3",
                    "summary": "Write docs",
                    "typeName": "Task",
                    "priorityName": "Low",
                    "statusName": "In Progress",
                    "estimateStatistic": {"statFieldValue": {"value": 8.0}},
                    "currentEstimateStatistic": {"statFieldValue": {"value": 5.0}}
                }
            ],
            "puntedIssues": [
                {
                    "key": "PROJ-4",
                    "summary": "Spike on caching",
                    "typeName": "Task",
                    "priorityName": "Low",
                    "statusName": "To Do",
                    "assignee": "carol",
                    "estimateStatistic": {"statFieldValue": {"value": "1"}},
                    "currentEstimateStatistic": {"statFieldValue": {"value": "n/a"}}
                }
            ],
            "issueKeysAddedDuringSprint": {"PROJ-2": True}
        },
        "sprintState": {
            "linkedPages": {"estimateStatisticFieldId": "customfield_10002"}
        }
    }


@pytest.fixture
def sample_search_response():
    """JQL search response for a sprint."""
    return {
        "issues": [
            {
                "key": "PROJ-10",
                "fields": {
                    "summary": "Ship it",
                    "status": {"name": "Done", "statusCategory": {"key": "done"}},
                    "assignee": {"displayName": "Alice"},
                    "issuetype": {"name": "Story"},
                    "priority": {"name": "High"},
                    "customfield_10016": 5
                }
            },
            {
                "key": "PROJ-11",
                "fields": {
                    "summary": "Close out",
                    "status": {"name": "Closed", "statusCategory": {"key": "done"}},
                    "assignee": None,
                    "issuetype": {"name": "Task"},
                    "priority": {"name": "Low"},
                    "customfield_10016": None
                }
            },
            {
                "key": "PROJ-12",
                "fields": {
                    "summary": "Still going",
                    "status": {"name": "In Progress", "statusCategory": {"key": "indeterminate"}},
                    "assignee": {"displayName": "Bob"},
                    "issuetype": {"name": "Bug"},
                    "priority": {"name": "Medium"},
                    "customfield_10016": 3.5
                }
            }
        ]
    }


@pytest.fixture
def mock_fields_response():
    """Mock response for Jira fields endpoint."""
    return [
        {"id": "summary", "name": "Summary", "schema": {"type": "string"}},
        {"id": "customfield_10028", "name": "Story  Points", "schema": {"type": "number"}},
        {"id": "customfield_10002", "name": "Story Points", "schema": {"type": "number"}},
        {"id": "status", "name": "Status", "schema": {"type": "status"}}
    ]


@pytest.fixture
def app():
    """Create Flask test app."""
    from app import create_app
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "CORS_ORIGINS": ["http://localhost:5173"],
        "STATIC_DIR": None
    })
    return app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()


@pytest.fixture
def logged_in_client(client, login_body, myself_response):
    """Test client holding an authenticated session."""
    from unittest.mock import patch

    with patch("services.jira_client.requests.get") as mock_get:
        mock_get.return_value = jira_response(payload=myself_response)
        response = client.post("/api/login", json=login_body)
    assert response.status_code == 200
    return client
