# linctl

A Python client library for the Linear GraphQL API, with a structured logger and a set of production settings read from environment variables.

The package has five modules:

- `linctl.client`: `Client`, a small GraphQL transport built on `requests`, with the exceptions `APIError` and `GraphQLError`.
- `linctl.queries`: `LinearClient`, a `Client` with typed methods for viewers, issues, teams, projects, users and comments.
- `linctl.models`: dataclasses for the API objects, `decode()` to build them from JSON, and `IssueCreateInput` / `CommentCreateInput` for mutations.
- `linctl.log`: `StructuredLogger`, which writes text or JSON lines, and `NoOpLogger`, which writes nothing.
- `linctl.config`: `ProductionConfig` and loaders for retry, rate-limit, logging, security and metrics settings.

## Installation

```
pip install .
```

## Usage

```python
from linctl.models import CommentCreateInput, IssueCreateInput
from linctl.queries import LinearClient

client = LinearClient("Bearer token")

me = client.viewer()
print(me.name, me.email)

page = client.issues(filter=None, first=25, after="", order_by="updatedAt")
for issue in page.nodes:
    print(issue.identifier, issue.title)
if page.page_info.has_next_page:
    more = client.issues(first=25, after=page.page_info.end_cursor)

created = client.create_issue(IssueCreateInput(title="Broken build", team_id="team-123"))
client.create_comment(CommentCreateInput(issue_id=created.id, body="Looking into it"))
```

`LinearClient` also has `issue(id)`, `teams()`, `projects()`, `project(id)`, `update_issue(id, input)`, `team(key)`, `team_states(team_key)`, `team_members(team_key)`, `users()`, `user(email)`, `issue_comments(issue_id)` and `create_comment_simple(issue_id, body)`. Paged methods default to 50 items per page.

`IssueCreateInput` and `CommentCreateInput` accept `create_as_user` and `display_icon_url` to attribute what they create to another actor. Their `to_dict()` leaves out unset optional fields.

### Errors

`Client.execute` raises `APIError` in these cases:

- the request cannot be encoded or sent;
- the HTTP status is not 200 (the status is kept in `status_code`);
- the body is not a JSON object.

It raises `GraphQLError`, a subclass of `APIError`, when the response carries GraphQL errors. Each error is kept in its `errors` list as a `GraphQLErrorDetail`.

### Raw GraphQL

```python
from linctl.client import Client
from linctl.models import User, decode

client = Client("Bearer token")
data = client.execute("query { viewer { id name } }", None)
viewer = decode(User, data["viewer"])
```

`decode(cls, data)` maps camelCase keys onto the dataclass fields and ignores keys it does not know. It raises `ValueError` when a value has the wrong type.

### Logging

```python
import sys
from linctl.log import LogLevel, StructuredLogger, string_field

logger = StructuredLogger(LogLevel.INFO, "json", sys.stderr, {})
logger.with_fields(string_field("service", "linctl")).info("started")
```

Field helpers:

- `string_field`, `int_field` and `bool_field` build plain fields.
- `duration_field` renders a `timedelta` compactly, for example `5s` or `1h2m3s`; it does so through `format_duration`.
- `error_field` records an exception's message under `error`.

`new_logger()` writes to stderr. It reads `LINCTL_LOG_LEVEL` (debug, info, warn/warning, error) and `LINCTL_LOG_FORMAT` (text, json) from the environment. `new_noop_logger()` returns a `NoOpLogger`, which discards entries and counts them per level in `discarded`.

### Configuration

```python
from linctl.config import environment_variables_help, load_production_config
from linctl.log import new_logger

config = load_production_config()
config.validate()            # raises ValueError on the first invalid setting
config.print_config(new_logger())
print(environment_variables_help())
```

Each setting is read by one of these helpers: `env_string`, `env_int`, `env_float`, `env_bool` and `env_duration`. If the variable is missing or cannot be parsed, the helper falls back to the default. `parse_duration` reads durations such as `1h30m`, `1.5s` or `300ms`.

## What the package does not do

- There is no command-line program. Everything is used as a library.
- It does not obtain or store credentials. You pass a ready-made `Authorization` value to `Client`. The OAuth variables listed by `environment_variables_help()` are not read by any code in the package.
- The retry and rate-limit settings in `linctl.config` are only loaded, validated and logged. `Client` sends each request once and does not throttle.
- `Client.rate_limit()` does not ask the server. It returns a nominal allowance of 5000 requests with 4999 remaining, which resets in an hour.

## Running the tests

```
pip install ".[test]"
pytest
```