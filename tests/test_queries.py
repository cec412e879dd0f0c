import json

import pytest
import responses

from linctl.client import GraphQLError
from linctl.models import CommentCreateInput, IssueCreateInput
from linctl.queries import LinearClient

URL = "https://api.example.com/graphql"
AUTH = "Bearer token"


@pytest.fixture
def server():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return LinearClient(AUTH, URL)


def _sent(server, index=0):
    return json.loads(server.calls[index].request.body)


ISSUE_RESPONSE = {
    "data": {
        "issueCreate": {
            "issue": {
                "id": "issue-456",
                "identifier": "TEST-123",
                "title": "Test Issue",
                "teamId": "team-123",
            }
        }
    }
}


@pytest.mark.parametrize(
    "issue_input",
    [
        IssueCreateInput(title="Test Issue", team_id="team-123"),
        IssueCreateInput(
            title="Test Issue",
            team_id="team-123",
            create_as_user="AI Agent",
            display_icon_url="https://example.com/agent.png",
        ),
    ],
)
def test_create_issue_success(server, client, issue_input):
    server.add(responses.POST, URL, json=ISSUE_RESPONSE)
    issue = client.create_issue(issue_input)

    request = server.calls[0].request
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == AUTH
    body = _sent(server)
    assert "mutation CreateIssue" in body["query"]
    sent_input = body["variables"]["input"]
    assert sent_input["title"] == issue_input.title
    assert sent_input["teamId"] == issue_input.team_id
    if issue_input.create_as_user is not None:
        assert sent_input["createAsUser"] == issue_input.create_as_user
    if issue_input.display_icon_url is not None:
        assert sent_input["displayIconUrl"] == issue_input.display_icon_url

    assert issue.id == "issue-456"
    assert issue.identifier == "TEST-123"
    assert issue.title == "Test Issue"


def test_create_issue_server_error(server, client):
    server.add(responses.POST, URL, json={"errors": [{"message": "Team not found"}]})
    with pytest.raises(GraphQLError) as info:
        client.create_issue(IssueCreateInput(title="Test Issue", team_id="team-123"))
    assert "GraphQL errors" in str(info.value)
    assert info.value.errors[0].message == "Team not found"


def _comment_response(name, body="Test comment"):
    return {
        "data": {
            "commentCreate": {
                "comment": {
                    "id": "comment-456",
                    "body": body,
                    "user": {"id": "user-789", "name": name},
                }
            }
        }
    }


@pytest.mark.parametrize(
    "comment_input, user_name",
    [
        (CommentCreateInput(issue_id="issue-123", body="Test comment"), "Test User"),
        (
            CommentCreateInput(
                issue_id="issue-123",
                body="Test comment",
                create_as_user="AI Agent",
                display_icon_url="https://example.com/agent.png",
            ),
            "AI Agent",
        ),
    ],
)
def test_create_comment_success(server, client, comment_input, user_name):
    server.add(responses.POST, URL, json=_comment_response(user_name))
    comment = client.create_comment(comment_input)

    body = _sent(server)
    assert "mutation CreateComment" in body["query"]
    sent_input = body["variables"]["input"]
    assert sent_input["issueId"] == comment_input.issue_id
    assert sent_input["body"] == comment_input.body
    if comment_input.create_as_user is not None:
        assert sent_input["createAsUser"] == comment_input.create_as_user
    if comment_input.display_icon_url is not None:
        assert sent_input["displayIconUrl"] == comment_input.display_icon_url

    assert comment.id == "comment-456"
    assert comment.body == "Test comment"
    assert comment.user.name == user_name


def test_create_comment_server_error(server, client):
    server.add(responses.POST, URL, json={"errors": [{"message": "Issue not found"}]})
    with pytest.raises(GraphQLError, match="GraphQL errors"):
        client.create_comment(CommentCreateInput(issue_id="issue-123", body="Test comment"))


def test_create_comment_simple(server, client):
    server.add(responses.POST, URL, json=_comment_response("Test User", "Simple comment"))
    comment = client.create_comment_simple("issue-123", "Simple comment")
    assert comment.id == "comment-456"
    assert comment.body == "Simple comment"
    assert _sent(server)["variables"]["input"] == {
        "issueId": "issue-123",
        "body": "Simple comment",
    }


def test_issues_variables_and_decoding(server, client):
    server.add(
        responses.POST,
        URL,
        json={
            "data": {
                "issues": {
                    "nodes": [
                        {
                            "id": "i1",
                            "identifier": "ENG-1",
                            "title": "First",
                            "priority": 2,
                            "createdAt": "2024-01-02T03:04:05Z",
                            "state": {"id": "s1", "name": "Todo", "type": "unstarted"},
                        }
                    ],
                    "pageInfo": {"hasNextPage": True, "endCursor": "cursor-1"},
                }
            }
        },
    )
    page = client.issues(filter={"team": {"key": {"eq": "ENG"}}}, first=10)
    variables = _sent(server)["variables"]
    assert variables == {"first": 10, "filter": {"team": {"key": {"eq": "ENG"}}}}
    assert [issue.identifier for issue in page.nodes] == ["ENG-1"]
    assert page.nodes[0].state.name == "Todo"
    assert page.nodes[0].created_at.year == 2024
    assert page.page_info.has_next_page is True
    assert page.page_info.end_cursor == "cursor-1"


def test_teams_pagination_variables(server, client):
    server.add(
        responses.POST,
        URL,
        json={"data": {"teams": {"nodes": [{"id": "t1", "key": "ENG", "name": "Eng"}]}}},
    )
    teams = client.teams(first=5, after="abc", order_by="updatedAt")
    assert _sent(server)["variables"] == {"first": 5, "after": "abc", "orderBy": "updatedAt"}
    assert teams.nodes[0].key == "ENG"


def test_team_states(server, client):
    server.add(
        responses.POST,
        URL,
        json={
            "data": {
                "team": {
                    "states": {
                        "nodes": [
                            {"id": "a", "name": "Todo", "type": "unstarted", "position": 1},
                            {"id": "b", "name": "Done", "type": "completed", "position": 2.5},
                        ]
                    }
                }
            }
        },
    )
    states = client.team_states("ENG")
    assert _sent(server)["variables"] == {"key": "ENG"}
    assert [s.name for s in states] == ["Todo", "Done"]
    assert states[1].position == 2.5


def test_team_members_and_user(server, client):
    server.add(
        responses.POST,
        URL,
        json={"data": {"team": {"members": {"nodes": [{"id": "u1", "email": "a@example.com"}]}}}},
    )
    server.add(
        responses.POST,
        URL,
        json={"data": {"user": {"id": "u2", "name": "Bea", "email": "b@example.com", "admin": True}}},
    )
    members = client.team_members("ENG")
    user = client.user("b@example.com")
    assert members.nodes[0].email == "a@example.com"
    assert user.name == "Bea"
    assert user.admin is True
    assert _sent(server, 1)["variables"] == {"email": "b@example.com"}


def test_viewer(server, client):
    server.add(
        responses.POST,
        URL,
        json={"data": {"viewer": {"id": "123", "name": "Test User", "isMe": True}}},
    )
    viewer = client.viewer()
    assert viewer.id == "123"
    assert viewer.is_me is True
    assert "variables" not in _sent(server)


def test_update_issue(server, client):
    server.add(
        responses.POST,
        URL,
        json={"data": {"issueUpdate": {"issue": {"id": "i1", "title": "Renamed"}}}},
    )
    issue = client.update_issue("i1", {"title": "Renamed"})
    body = _sent(server)
    assert "mutation UpdateIssue" in body["query"]
    assert body["variables"] == {"id": "i1", "input": {"title": "Renamed"}}
    assert issue.title == "Renamed"


def test_issue_comments(server, client):
    server.add(
        responses.POST,
        URL,
        json={
            "data": {
                "issue": {
                    "comments": {
                        "nodes": [{"id": "c1", "body": "hello", "user": {"name": "Ann"}}],
                        "pageInfo": {"hasNextPage": False, "endCursor": ""},
                    }
                }
            }
        },
    )
    comments = client.issue_comments("i1", first=3)
    assert _sent(server)["variables"] == {"id": "i1", "first": 3}
    assert comments.nodes[0].body == "hello"
    assert comments.nodes[0].user.name == "Ann"


def test_project_detail(server, client):
    server.add(
        responses.POST,
        URL,
        json={
            "data": {
                "project": {
                    "id": "p1",
                    "name": "Launch",
                    "progress": 0.5,
                    "teams": {"nodes": [{"key": "ENG"}]},
                    "issues": {"nodes": [{"identifier": "ENG-7"}]},
                }
            }
        },
    )
    project = client.project("p1")
    assert project.name == "Launch"
    assert project.progress == 0.5
    assert project.teams.nodes[0].key == "ENG"
    assert project.issues.nodes[0].identifier == "ENG-7"