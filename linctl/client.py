"""GraphQL-over-HTTP client for the Linear API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import requests

BASE_URL = "https://api.linear.app/graphql"
USER_AGENT = "linctl/0.1.0"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class GraphQLErrorLocation:
    """Position in the query that a GraphQL error refers to."""

    line: int = 0
    column: int = 0


@dataclass
class GraphQLErrorDetail:
    """One entry of the "errors" list in a GraphQL response."""

    message: str = ""
    locations: list[GraphQLErrorLocation] = field(default_factory=list)
    path: list[Any] = field(default_factory=list)


class APIError(Exception):
    """A request to the API could not be made or did not succeed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GraphQLError(APIError):
    """The server answered, but reported GraphQL errors."""

    def __init__(self, errors: list[GraphQLErrorDetail]) -> None:
        self.errors = list(errors)
        messages = ", ".join(error.message for error in self.errors)
        super().__init__(f"GraphQL errors: [{messages}]")


@dataclass(frozen=True)
class RateLimit:
    """Request allowance reported for the current client."""

    limit: int
    remaining: int
    reset: datetime


class Client:
    """Sends GraphQL queries and mutations to a single endpoint."""

    def __init__(
        self,
        auth_header: str,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.auth_header = auth_header
        self.base_url = base_url
        self.timeout = timeout
        self._session = requests.Session()

    def execute(self, query: str, variables: Mapping[str, Any] | None = None) -> Any:
        """Run a query and return the decoded "data" member of the response."""
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = dict(variables)
        try:
            body = json.dumps(payload, default=_encode)
        except (TypeError, ValueError) as exc:
            raise APIError(f"failed to marshal request: {exc}") from exc

        headers = {
            "Content-Type": "application/json",
            "Authorization": self.auth_header,
            "User-Agent": USER_AGENT,
        }
        try:
            response = self._session.post(
                self.base_url,
                data=body.encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise APIError(f"request failed: {exc}") from exc

        if response.status_code != 200:
            raise APIError(
                f"API request failed with status {response.status_code}: {response.text}",
                response.status_code,
            )

        try:
            decoded = json.loads(response.content)
        except ValueError as exc:
            raise APIError(f"failed to parse response: {exc}") from exc
        if not isinstance(decoded, dict):
            raise APIError("failed to parse response: expected a JSON object")

        errors = decoded.get("errors") or []
        if errors:
            raise GraphQLError([_error_detail(item) for item in errors])
        return decoded.get("data")

    def rate_limit(self) -> RateLimit:
        """Return the request allowance; the server does not report one, so it is nominal."""
        return RateLimit(
            limit=5000,
            remaining=4999,
            reset=datetime.now(timezone.utc) + timedelta(hours=1),
        )


def _encode(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"cannot encode {type(value).__name__} as JSON")


def _error_detail(raw: Any) -> GraphQLErrorDetail:
    if not isinstance(raw, dict):
        return GraphQLErrorDetail(message=str(raw))
    locations = [
        GraphQLErrorLocation(int(loc.get("line", 0)), int(loc.get("column", 0)))
        for loc in raw.get("locations") or []
        if isinstance(loc, dict)
    ]
    return GraphQLErrorDetail(
        message=str(raw.get("message", "")),
        locations=locations,
        path=list(raw.get("path") or []),
    )