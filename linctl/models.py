"""Data types returned by the Linear API and inputs sent to it."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Mapping, TypeVar

T = TypeVar("T")


@dataclass
class User:
    id: str = ""
    name: str = ""
    email: str = ""
    avatar_url: str = ""
    display_name: str = ""
    is_me: bool = False
    active: bool = False
    admin: bool = False
    created_at: datetime | None = None


@dataclass
class Team:
    id: str = ""
    key: str = ""
    name: str = ""
    description: str = ""
    icon: str | None = None
    color: str = ""
    private: bool = False
    issue_count: int = 0
    cycles_enabled: bool = False
    cycle_start_day: int = 0
    cycle_duration: int = 0
    upcoming_cycle_count: int = 0


@dataclass
class State:
    id: str = ""
    name: str = ""
    type: str = ""
    color: str = ""
    description: str | None = None
    position: float = 0.0


@dataclass
class Label:
    id: str = ""
    name: str = ""
    color: str = ""
    description: str | None = None
    parent: Label | None = None


@dataclass
class Labels:
    nodes: list[Label] = field(default_factory=list)


@dataclass
class PageInfo:
    has_next_page: bool = False
    end_cursor: str = ""


@dataclass
class Cycle:
    id: str = ""
    number: int = 0
    name: str = ""
    description: str | None = None
    starts_at: str = ""
    ends_at: str = ""
    progress: float = 0.0
    completed_at: datetime | None = None
    scope_history: list[float] = field(default_factory=list)


@dataclass
class Attachment:
    id: str = ""
    title: str = ""
    subtitle: str | None = None
    url: str = ""
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    creator: User | None = None
    extra: dict[str, Any] | None = field(default=None, metadata={"skip": True})

    def _absorb_extra(self, data: Mapping[str, Any]) -> None:
        found = {key: data[key] for key in ("source", "sourceType") if data.get(key) is not None}
        if found:
            self.extra = found


@dataclass
class Attachments:
    nodes: list[Attachment] = field(default_factory=list)


@dataclass
class Initiative:
    id: str = ""
    name: str = ""
    description: str = ""


@dataclass
class Issue:
    id: str = ""
    identifier: str = ""
    title: str = ""
    description: str = ""
    priority: int = 0
    estimate: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    due_date: str | None = None
    state: State | None = None
    assignee: User | None = None
    team: Team | None = None
    labels: Labels | None = None
    children: Issues | None = None
    parent: Issue | None = None
    url: str = ""
    branch_name: str = ""
    cycle: Cycle | None = None
    project: Project | None = None
    attachments: Attachments | None = None
    comments: Comments | None = None
    snoozed_until_at: datetime | None = None
    completed_at: datetime | None = None
    canceled_at: datetime | None = None
    archived_at: datetime | None = None
    triaged_at: datetime | None = None
    customer_ticket_count: int = 0
    previous_identifiers: list[str] = field(default_factory=list)
    number: int = 0
    board_order: float = 0.0
    sub_issue_sort_order: float = 0.0
    priority_label: str = ""
    integration_source_type: str | None = None
    creator: User | None = None
    subscribers: Users | None = None
    relations: IssueRelations | None = None
    history: IssueHistory | None = None
    reactions: list[Reaction] = field(default_factory=list)
    slack_issue_comments: list[SlackComment] = field(default_factory=list)
    external_user_creator: ExternalUser | None = None
    customer_tickets: list[CustomerTicket] = field(default_factory=list)


@dataclass
class Issues:
    nodes: list[Issue] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass
class Teams:
    nodes: list[Team] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass
class Users:
    nodes: list[User] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass
class Project:
    id: str = ""
    name: str = ""
    description: str = ""
    state: str = ""
    progress: float = 0.0
    start_date: str | None = None
    target_date: str | None = None
    lead: User | None = None
    teams: Teams | None = None
    url: str = ""
    icon: str | None = None
    color: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    canceled_at: datetime | None = None
    archived_at: datetime | None = None
    creator: User | None = None
    members: Users | None = None
    issues: Issues | None = None
    slug_id: str = ""
    content: str = ""
    converted_from_issue: Issue | None = None
    last_applied_template: Template | None = None
    project_updates: ProjectUpdates | None = None
    documents: Documents | None = None
    health: str = ""
    scope: int = 0
    slack_new_issue: bool = False
    slack_issue_comments: bool = False
    slack_issue_statuses: bool = False


@dataclass
class Projects:
    nodes: list[Project] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass
class IssueRelation:
    id: str = ""
    type: str = ""
    issue: Issue | None = None
    related_issue: Issue | None = None


@dataclass
class IssueRelations:
    nodes: list[IssueRelation] = field(default_factory=list)


@dataclass
class IssueHistoryEntry:
    id: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    changes: str = ""
    actor: User | None = None
    from_assignee: User | None = None
    to_assignee: User | None = None
    from_state: State | None = None
    to_state: State | None = None
    from_priority: int | None = None
    to_priority: int | None = None
    from_title: str | None = None
    to_title: str | None = None
    from_cycle: Cycle | None = None
    to_cycle: Cycle | None = None
    from_project: Project | None = None
    to_project: Project | None = None
    added_label_ids: list[str] = field(default_factory=list)
    removed_label_ids: list[str] = field(default_factory=list)


@dataclass
class IssueHistory:
    nodes: list[IssueHistoryEntry] = field(default_factory=list)


@dataclass
class Reaction:
    id: str = ""
    emoji: str = ""
    user: User | None = None
    created_at: datetime | None = None


@dataclass
class SlackComment:
    id: str = ""
    body: str = ""


@dataclass
class ExternalUser:
    id: str = ""
    name: str = ""
    email: str = ""


@dataclass
class CustomerTicket:
    id: str = ""
    title: str = ""
    created_at: datetime | None = None
    external_id: str = ""


@dataclass
class Template:
    id: str = ""
    name: str = ""
    description: str = ""


@dataclass
class Milestone:
    id: str = ""
    name: str = ""
    description: str = ""
    target_date: str | None = None
    projects: Projects | None = None


@dataclass
class Roadmap:
    id: str = ""
    name: str = ""
    description: str = ""
    creator: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Roadmaps:
    nodes: list[Roadmap] = field(default_factory=list)


@dataclass
class ProjectUpdate:
    id: str = ""
    body: str = ""
    user: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    edited_at: datetime | None = None
    health: str = ""


@dataclass
class ProjectUpdates:
    nodes: list[ProjectUpdate] = field(default_factory=list)


@dataclass
class Document:
    id: str = ""
    title: str = ""
    content: str = ""
    icon: str | None = None
    color: str = ""
    creator: User | None = None
    updated_by: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Documents:
    nodes: list[Document] = field(default_factory=list)


@dataclass
class ProjectLink:
    id: str = ""
    url: str = ""
    label: str = ""
    creator: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ProjectLinks:
    nodes: list[ProjectLink] = field(default_factory=list)


@dataclass
class Comment:
    id: str = ""
    body: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    edited_at: datetime | None = None
    user: User | None = None
    parent: Comment | None = None
    children: Comments | None = None


@dataclass
class Comments:
    nodes: list[Comment] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass
class WorkflowState:
    id: str = ""
    name: str = ""
    type: str = ""
    color: str = ""
    description: str = ""
    position: float = 0.0


@dataclass
class IssueCreateInput:
    """Fields for creating an issue, optionally attributed to another actor."""

    title: str
    team_id: str
    description: str | None = None
    assignee_id: str | None = None
    priority: int | None = None
    state_id: str | None = None
    label_ids: list[str] = field(default_factory=list)
    project_id: str | None = None
    cycle_id: str | None = None
    estimate: float | None = None
    due_date: str | None = None
    create_as_user: str | None = None
    display_icon_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """The API's input object; unset optional fields are left out."""
        data: dict[str, Any] = {"title": self.title}
        _put(data, "description", self.description)
        data["teamId"] = self.team_id
        _put(data, "assigneeId", self.assignee_id)
        _put(data, "priority", self.priority)
        _put(data, "stateId", self.state_id)
        if self.label_ids:
            data["labelIds"] = list(self.label_ids)
        _put(data, "projectId", self.project_id)
        _put(data, "cycleId", self.cycle_id)
        _put(data, "estimate", self.estimate)
        _put(data, "dueDate", self.due_date)
        _put(data, "createAsUser", self.create_as_user)
        _put(data, "displayIconUrl", self.display_icon_url)
        return data


@dataclass
class CommentCreateInput:
    """Fields for creating a comment, optionally attributed to another actor."""

    issue_id: str
    body: str
    create_as_user: str | None = None
    display_icon_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """The API's input object; unset optional fields are left out."""
        data: dict[str, Any] = {"issueId": self.issue_id, "body": self.body}
        _put(data, "createAsUser", self.create_as_user)
        _put(data, "displayIconUrl", self.display_icon_url)
        return data


_MODELS: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        User,
        Team,
        State,
        Label,
        Labels,
        PageInfo,
        Cycle,
        Attachment,
        Attachments,
        Initiative,
        Issue,
        Issues,
        Teams,
        Users,
        Project,
        Projects,
        IssueRelation,
        IssueRelations,
        IssueHistoryEntry,
        IssueHistory,
        Reaction,
        SlackComment,
        ExternalUser,
        CustomerTicket,
        Template,
        Milestone,
        Roadmap,
        Roadmaps,
        ProjectUpdate,
        ProjectUpdates,
        Document,
        Documents,
        ProjectLink,
        ProjectLinks,
        Comment,
        Comments,
        WorkflowState,
        IssueCreateInput,
        CommentCreateInput,
    )
}


def decode(cls: type[T], data: Mapping[str, Any] | None) -> T:
    """Build a model from a JSON object with camelCase keys; unknown keys are ignored."""
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ValueError(f"cannot decode {type(data).__name__} into {cls.__name__}")
    values: dict[str, Any] = {}
    for item in fields(cls):
        if item.metadata.get("skip"):
            continue
        raw = data.get(_camel(item.name))
        if raw is None:
            continue
        spec = item.type if isinstance(item.type, str) else getattr(item.type, "__name__", str(item.type))
        values[item.name] = _convert(spec, raw)
    result = cls(**values)
    absorb = getattr(result, "_absorb_extra", None)
    if absorb is not None:
        absorb(data)
    return result


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _convert(spec: str, value: Any) -> Any:
    spec = spec.strip()
    if spec.endswith("| None"):
        if value is None:
            return None
        spec = spec[: -len("| None")].strip()
    if spec.startswith("list[") and spec.endswith("]"):
        if not isinstance(value, list):
            raise ValueError(f"expected a list, got {type(value).__name__}")
        item_spec = spec[len("list[") : -1]
        return [_convert(item_spec, item) for item in value]
    if spec == "dict" or spec.startswith("dict["):
        if not isinstance(value, dict):
            raise ValueError(f"expected an object, got {type(value).__name__}")
        return dict(value)
    if spec == "Any":
        return value
    model = _MODELS.get(spec)
    if model is not None:
        return decode(model, value)
    if spec == "datetime":
        return _parse_time(value)
    if spec == "bool":
        if not isinstance(value, bool):
            raise ValueError(f"expected a boolean, got {value!r}")
        return value
    if spec == "int":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"expected an integer, got {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    if spec == "float":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"expected a number, got {value!r}")
        return float(value)
    if spec == "str":
        if not isinstance(value, str):
            raise ValueError(f"expected a string, got {value!r}")
        return value
    return value


_TIMESTAMP = re.compile(
    r"(\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def _parse_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"expected a timestamp, got {value!r}")
    match = _TIMESTAMP.fullmatch(value)
    if not match:
        raise ValueError(f"invalid timestamp {value!r}")
    base, fraction, zone = match.groups()
    text = base.replace("t", "T").replace(" ", "T")
    if fraction:
        text += "." + fraction[:6].ljust(6, "0")
    text += "+00:00" if zone in ("Z", "z") else zone
    return datetime.fromisoformat(text)