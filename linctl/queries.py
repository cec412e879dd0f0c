"""High-level Linear API operations built on the GraphQL client."""

from __future__ import annotations

from typing import Any, Mapping

from .client import Client
from .models import (
    Comment,
    CommentCreateInput,
    Comments,
    Issue,
    IssueCreateInput,
    Issues,
    Project,
    Projects,
    Team,
    Teams,
    User,
    Users,
    WorkflowState,
    decode,
)

DEFAULT_PAGE_SIZE = 50

_ISSUE_SUMMARY_FIELDS = """
    id
    identifier
    title
    description
    priority
    estimate
    createdAt
    updatedAt
    dueDate
    state {
        id
        name
        type
        color
    }
    assignee {
        id
        name
        email
    }
    team {
        id
        key
        name
    }
    labels {
        nodes {
            id
            name
            color
        }
    }
"""

_USER_FIELDS = """
    id
    name
    email
    avatarUrl
    isMe
    active
    admin
"""

_PAGE_INFO = """
    pageInfo {
        hasNextPage
        endCursor
    }
"""

VIEWER_QUERY = f"""
query Me {{
    viewer {{
{_USER_FIELDS}
    }}
}}
"""

ISSUES_QUERY = f"""
query Issues($filter: IssueFilter, $first: Int, $after: String, $orderBy: PaginationOrderBy) {{
    issues(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {{
        nodes {{
{_ISSUE_SUMMARY_FIELDS}
            url
        }}
{_PAGE_INFO}
    }}
}}
"""

ISSUE_QUERY = """
query Issue($id: String!) {
    issue(id: $id) {
        id
        identifier
        number
        title
        description
        priority
        priorityLabel
        estimate
        boardOrder
        subIssueSortOrder
        createdAt
        updatedAt
        dueDate
        url
        branchName
        snoozedUntilAt
        completedAt
        canceledAt
        archivedAt
        triagedAt
        customerTicketCount
        previousIdentifiers
        integrationSourceType
        state { id name type color description position }
        assignee { id name email avatarUrl displayName active admin createdAt }
        creator { id name email avatarUrl displayName active }
        team {
            id key name description icon color
            cyclesEnabled cycleStartDay cycleDuration upcomingCycleCount
        }
        labels {
            nodes { id name color description parent { id name } }
        }
        parent { id identifier title state { name type } }
        children {
            nodes {
                id identifier title priority createdAt
                state { name type color }
                assignee { name email }
            }
        }
        cycle {
            id number name description startsAt endsAt progress completedAt scopeHistory
        }
        project {
            id name description state progress startDate targetDate health
            lead { name email }
        }
        attachments(first: 20) {
            nodes {
                id title subtitle url metadata createdAt
                creator { name email }
            }
        }
        comments(first: 10) {
            nodes {
                id body createdAt updatedAt editedAt
                user { name email avatarUrl }
                parent { id }
                children { nodes { id body user { name } } }
            }
        }
        subscribers {
            nodes { id name email avatarUrl }
        }
        relations {
            nodes {
                id type
                relatedIssue { id identifier title state { name type } }
            }
        }
        history(first: 10) {
            nodes {
                id createdAt updatedAt
                actor { name email }
                fromAssignee { name }
                toAssignee { name }
                fromState { name }
                toState { name }
                fromPriority
                toPriority
                fromTitle
                toTitle
                fromCycle { name }
                toCycle { name }
                fromProject { name }
                toProject { name }
                addedLabelIds
                removedLabelIds
            }
        }
        reactions {
            id emoji
            user { name email }
            createdAt
        }
        externalUserCreator { id name email avatarUrl }
    }
}
"""

TEAMS_QUERY = f"""
query Teams($first: Int, $after: String, $orderBy: PaginationOrderBy) {{
    teams(first: $first, after: $after, orderBy: $orderBy) {{
        nodes {{
            id
            key
            name
            description
            private
            issueCount
        }}
{_PAGE_INFO}
    }}
}}
"""

PROJECTS_QUERY = f"""
query Projects($filter: ProjectFilter, $first: Int, $after: String, $orderBy: PaginationOrderBy) {{
    projects(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {{
        nodes {{
            id
            name
            description
            state
            progress
            startDate
            targetDate
            url
            createdAt
            updatedAt
            lead {{
                id
                name
                email
            }}
            teams {{
                nodes {{
                    id
                    key
                    name
                }}
            }}
        }}
{_PAGE_INFO}
    }}
}}
"""

PROJECT_QUERY = """
query Project($id: String!) {
    project(id: $id) {
        id slugId name description content state progress health scope
        startDate targetDate url icon color
        createdAt updatedAt completedAt canceledAt archivedAt
        slackNewIssue slackIssueComments slackIssueStatuses
        lead { id name email avatarUrl displayName active }
        creator { id name email avatarUrl active }
        convertedFromIssue { id identifier title }
        lastAppliedTemplate { id name description }
        teams {
            nodes { id key name description icon color cyclesEnabled }
        }
        members {
            nodes { id name email avatarUrl displayName active admin }
        }
        issues(first: 50, orderBy: updatedAt) {
            nodes {
                id identifier number title description priority estimate
                createdAt updatedAt completedAt
                state { name type color }
                assignee { name email }
                labels { nodes { name color } }
            }
        }
        projectUpdates(first: 10) {
            nodes {
                id body health createdAt updatedAt editedAt
                user { name email avatarUrl }
            }
        }
        documents(first: 20) {
            nodes {
                id title content icon color createdAt updatedAt
                creator { name email }
                updatedBy { name email }
            }
        }
    }
}
"""

UPDATE_ISSUE_MUTATION = f"""
mutation UpdateIssue($id: String!, $input: IssueUpdateInput!) {{
    issueUpdate(id: $id, input: $input) {{
        issue {{
{_ISSUE_SUMMARY_FIELDS}
        }}
    }}
}}
"""

CREATE_ISSUE_MUTATION = f"""
mutation CreateIssue($input: IssueCreateInput!) {{
    issueCreate(input: $input) {{
        issue {{
{_ISSUE_SUMMARY_FIELDS}
        }}
    }}
}}
"""

TEAM_QUERY = """
query Team($key: String!) {
    team(id: $key) {
        id
        key
        name
        description
        private
        issueCount
    }
}
"""

TEAM_STATES_QUERY = """
query TeamStates($key: String!) {
    team(id: $key) {
        states {
            nodes {
                id
                name
                type
                color
                description
                position
            }
        }
    }
}
"""

TEAM_MEMBERS_QUERY = f"""
query TeamMembers($key: String!) {{
    team(id: $key) {{
        members {{
            nodes {{
{_USER_FIELDS}
            }}
{_PAGE_INFO}
        }}
    }}
}}
"""

USERS_QUERY = f"""
query Users($first: Int, $after: String, $orderBy: PaginationOrderBy) {{
    users(first: $first, after: $after, orderBy: $orderBy) {{
        nodes {{
{_USER_FIELDS}
        }}
{_PAGE_INFO}
    }}
}}
"""

USER_QUERY = f"""
query User($email: String!) {{
    user(email: $email) {{
{_USER_FIELDS}
    }}
}}
"""

ISSUE_COMMENTS_QUERY = f"""
query IssueComments($id: String!, $first: Int, $after: String, $orderBy: PaginationOrderBy) {{
    issue(id: $id) {{
        comments(first: $first, after: $after, orderBy: $orderBy) {{
            nodes {{
                id
                body
                createdAt
                updatedAt
                user {{
                    id
                    name
                    email
                }}
            }}
{_PAGE_INFO}
        }}
    }}
}}
"""

CREATE_COMMENT_MUTATION = """
mutation CreateComment($input: CommentCreateInput!) {
    commentCreate(input: $input) {
        comment {
            id
            body
            createdAt
            updatedAt
            user {
                id
                name
                email
            }
        }
    }
}
"""


class LinearClient(Client):
    """Client exposing Linear's queries and mutations as typed methods."""

    def viewer(self) -> User:
        """The authenticated user."""
        return decode(User, _dig(self.execute(VIEWER_QUERY), "viewer"))

    def issues(
        self,
        filter: Mapping[str, Any] | None = None,
        first: int = DEFAULT_PAGE_SIZE,
        after: str | None = None,
        order_by: str | None = None,
    ) -> Issues:
        """A page of issues, optionally filtered."""
        variables = _page_variables(first, after, order_by, filter=filter)
        return decode(Issues, _dig(self.execute(ISSUES_QUERY, variables), "issues"))

    def issue(self, id: str) -> Issue:
        """One issue with its full detail."""
        data = self.execute(ISSUE_QUERY, {"id": id})
        return decode(Issue, _dig(data, "issue"))

    def teams(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        after: str | None = None,
        order_by: str | None = None,
    ) -> Teams:
        """A page of teams."""
        variables = _page_variables(first, after, order_by)
        return decode(Teams, _dig(self.execute(TEAMS_QUERY, variables), "teams"))

    def projects(
        self,
        filter: Mapping[str, Any] | None = None,
        first: int = DEFAULT_PAGE_SIZE,
        after: str | None = None,
        order_by: str | None = None,
    ) -> Projects:
        """A page of projects, optionally filtered."""
        variables = _page_variables(first, after, order_by, filter=filter)
        return decode(Projects, _dig(self.execute(PROJECTS_QUERY, variables), "projects"))

    def project(self, id: str) -> Project:
        """One project with its full detail."""
        data = self.execute(PROJECT_QUERY, {"id": id})
        return decode(Project, _dig(data, "project"))

    def update_issue(self, id: str, input: Mapping[str, Any]) -> Issue:
        """Apply field changes to an issue and return it as updated."""
        data = self.execute(UPDATE_ISSUE_MUTATION, {"id": id, "input": dict(input)})
        return decode(Issue, _dig(data, "issueUpdate", "issue"))

    def create_issue(self, input: IssueCreateInput) -> Issue:
        """Create an issue and return it."""
        data = self.execute(CREATE_ISSUE_MUTATION, {"input": input.to_dict()})
        return decode(Issue, _dig(data, "issueCreate", "issue"))

    def team(self, key: str) -> Team:
        """One team, looked up by key or id."""
        return decode(Team, _dig(self.execute(TEAM_QUERY, {"key": key}), "team"))

    def team_states(self, team_key: str) -> list[WorkflowState]:
        """The workflow states of a team."""
        data = self.execute(TEAM_STATES_QUERY, {"key": team_key})
        nodes = _dig(data, "team", "states", "nodes") or []
        return [decode(WorkflowState, node) for node in nodes]

    def team_members(self, team_key: str) -> Users:
        """The members of a team."""
        data = self.execute(TEAM_MEMBERS_QUERY, {"key": team_key})
        return decode(Users, _dig(data, "team", "members"))

    def users(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        after: str | None = None,
        order_by: str | None = None,
    ) -> Users:
        """A page of users."""
        variables = _page_variables(first, after, order_by)
        return decode(Users, _dig(self.execute(USERS_QUERY, variables), "users"))

    def user(self, email: str) -> User:
        """One user, looked up by e-mail address."""
        return decode(User, _dig(self.execute(USER_QUERY, {"email": email}), "user"))

    def issue_comments(
        self,
        issue_id: str,
        first: int = DEFAULT_PAGE_SIZE,
        after: str | None = None,
        order_by: str | None = None,
    ) -> Comments:
        """A page of comments on an issue."""
        variables = {"id": issue_id, **_page_variables(first, after, order_by)}
        data = self.execute(ISSUE_COMMENTS_QUERY, variables)
        return decode(Comments, _dig(data, "issue", "comments"))

    def create_comment(self, input: CommentCreateInput) -> Comment:
        """Create a comment and return it."""
        data = self.execute(CREATE_COMMENT_MUTATION, {"input": input.to_dict()})
        return decode(Comment, _dig(data, "commentCreate", "comment"))

    def create_comment_simple(self, issue_id: str, body: str) -> Comment:
        """Create a plain comment with no actor attribution."""
        return self.create_comment(CommentCreateInput(issue_id=issue_id, body=body))


def _page_variables(
    first: int,
    after: str | None,
    order_by: str | None,
    *,
    filter: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    variables: dict[str, Any] = {"first": first}
    if filter is not None:
        variables["filter"] = dict(filter)
    if after:
        variables["after"] = after
    if order_by:
        variables["orderBy"] = order_by
    return variables


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data