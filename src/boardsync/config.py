"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field

DEFAULT_OWNER = "Ailurotech"
DEFAULT_REPO = "ailurocamp"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_NOTICE_SECONDS = 3.0
DEFAULT_ERROR_NOTICE_SECONDS = 5.0

# Field names that usually hold the workflow stage
DEFAULT_STATUS_FIELD_KEYWORDS = ("status", "state", "stage", "progress", "kanban")
# Option names that usually belong to a workflow stage field
DEFAULT_STATUS_VALUE_KEYWORDS = ("todo", "to do", "in progress", "done", "complete", "ready")


def get_github_token() -> str:
    """Get GitHub token from environment or gh CLI."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return ""


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Settings shared by the remote client and the HTTP boundary.

    Attributes:
        github_token: Token sent upstream as a bearer credential.
        owner: Organization (or user) login that owns the projects.
        repo: Default repository for classic projects and new issues.
        api_url: REST API base URL.
        graphql_url: GraphQL endpoint.
        api_tokens: Bearer tokens accepted by the board endpoints.
        status_field_keywords: Field name hints for status discovery.
        status_value_keywords: Option name hints for status discovery.
        notice_seconds: Lifetime of a rolled back move banner.
        error_notice_seconds: Lifetime of load and create failure banners.
    """

    github_token: str = ""
    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    api_url: str = DEFAULT_API_URL
    graphql_url: str = DEFAULT_GRAPHQL_URL
    api_tokens: tuple[str, ...] = field(default_factory=tuple)
    status_field_keywords: tuple[str, ...] = DEFAULT_STATUS_FIELD_KEYWORDS
    status_value_keywords: tuple[str, ...] = DEFAULT_STATUS_VALUE_KEYWORDS
    notice_seconds: float = DEFAULT_NOTICE_SECONDS
    error_notice_seconds: float = DEFAULT_ERROR_NOTICE_SECONDS

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables."""
        env = os.environ
        return cls(
            github_token=get_github_token(),
            owner=env.get("GITHUB_OWNER") or DEFAULT_OWNER,
            repo=env.get("GITHUB_REPO") or DEFAULT_REPO,
            api_url=env.get("GITHUB_API_URL") or DEFAULT_API_URL,
            graphql_url=env.get("GITHUB_GRAPHQL_URL") or DEFAULT_GRAPHQL_URL,
            api_tokens=_split_csv(env.get("BOARDSYNC_API_TOKENS")),
            status_field_keywords=(
                _split_csv(env.get("BOARDSYNC_STATUS_FIELD_KEYWORDS"))
                or DEFAULT_STATUS_FIELD_KEYWORDS
            ),
            status_value_keywords=(
                _split_csv(env.get("BOARDSYNC_STATUS_VALUE_KEYWORDS"))
                or DEFAULT_STATUS_VALUE_KEYWORDS
            ),
            notice_seconds=float(env.get("BOARDSYNC_NOTICE_SECONDS") or DEFAULT_NOTICE_SECONDS),
            error_notice_seconds=float(
                env.get("BOARDSYNC_ERROR_NOTICE_SECONDS") or DEFAULT_ERROR_NOTICE_SECONDS
            ),
        )
