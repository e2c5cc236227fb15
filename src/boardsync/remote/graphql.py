"""ProjectsV2Adapter - Projects V2 boards over the GitHub GraphQL API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from boardsync.assembler import assemble_v2_board
from boardsync.board import (
    Board,
    CardKind,
    Field,
    FieldOption,
    FieldValue,
    Item,
    ItemContent,
    Project,
)
from boardsync.discovery import StatusKeywords, discover_status_field
from boardsync.logging import sanitize_for_log, truncate_output
from boardsync.remote.exceptions import GraphQLError, ProjectNotFoundError
from boardsync.remote.models import MoveOptions, ProjectSnapshot

logger = logging.getLogger("boardsync.remote.graphql")

LIST_PROJECTS_QUERY = """
query($owner: String!, $first: Int!) {
    organization(login: $owner) {
        projectsV2(first: $first) {
            nodes {
                id
                number
                title
            }
        }
    }
}
"""

PROJECT_QUERY = """
query($owner: String!, $number: Int!) {
    organization(login: $owner) {
        projectV2(number: $number) {
            id
            number
            title
            url
            closed
            fields(first: 50) {
                nodes {
                    ... on ProjectV2Field {
                        id
                        name
                        dataType
                    }
                    ... on ProjectV2IterationField {
                        id
                        name
                        dataType
                    }
                    ... on ProjectV2SingleSelectField {
                        id
                        name
                        dataType
                        options {
                            id
                            name
                        }
                    }
                }
            }
            items(first: 100) {
                nodes {
                    id
                    type
                    content {
                        ... on Issue {
                            title
                            body
                            number
                            url
                            state
                            createdAt
                        }
                        ... on PullRequest {
                            title
                            body
                            number
                            url
                            state
                            createdAt
                        }
                        ... on DraftIssue {
                            title
                            body
                            createdAt
                        }
                    }
                    fieldValues(first: 50) {
                        nodes {
                            ... on ProjectV2ItemFieldTextValue {
                                text
                                field {
                                    ... on ProjectV2FieldCommon {
                                        id
                                        name
                                    }
                                }
                            }
                            ... on ProjectV2ItemFieldDateValue {
                                date
                                field {
                                    ... on ProjectV2FieldCommon {
                                        id
                                        name
                                    }
                                }
                            }
                            ... on ProjectV2ItemFieldSingleSelectValue {
                                name
                                optionId
                                field {
                                    ... on ProjectV2FieldCommon {
                                        id
                                        name
                                    }
                                }
                            }
                        }
                    }
                }
            }
        }
    }
}
"""

ITEM_PROJECT_QUERY = """
query($itemId: ID!) {
    node(id: $itemId) {
        ... on ProjectV2Item {
            project {
                id
            }
        }
    }
}
"""

UPDATE_FIELD_MUTATION = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!) {
    updateProjectV2ItemFieldValue(
        input: {
            projectId: $projectId
            itemId: $itemId
            fieldId: $fieldId
            value: { singleSelectOptionId: $optionId }
        }
    ) {
        projectV2Item {
            id
        }
    }
}
"""


def _parse_field(node: dict[str, Any]) -> Field | None:
    # Field types outside the requested fragments come back as empty objects
    if not node or "id" not in node:
        return None
    return Field(
        id=node["id"],
        name=node.get("name") or "",
        data_type=node.get("dataType"),
        options=tuple(
            FieldOption(id=option["id"], name=option["name"])
            for option in node.get("options") or []
        ),
    )


def _parse_field_value(node: dict[str, Any]) -> FieldValue | None:
    field_info = (node or {}).get("field") or {}
    field_name = field_info.get("name")
    if not field_name:
        return None
    return FieldValue(
        field_name=field_name,
        field_id=field_info.get("id"),
        name=node.get("name"),
        option_id=node.get("optionId"),
        text=node.get("text"),
        date=node.get("date"),
    )


def _parse_item(node: dict[str, Any]) -> Item:
    content = node.get("content") or {}
    values = (node.get("fieldValues") or {}).get("nodes") or []
    return Item(
        id=node["id"],
        kind=CardKind.from_item_type(node.get("type")),
        content=ItemContent(
            title=content.get("title"),
            body=content.get("body"),
            number=content.get("number"),
            url=content.get("url"),
            state=content.get("state"),
            created_at=content.get("createdAt"),
        ),
        field_values=tuple(v for v in (_parse_field_value(n) for n in values) if v is not None),
    )


class ProjectsV2Adapter:
    """Adapter for organization-owned Projects V2 boards.

    Uses the GitHub GraphQL API. Columns are derived from whichever
    single-select field looks like a workflow status.
    """

    def __init__(
        self,
        owner: str,
        token: str,
        base_url: str = "https://api.github.com/graphql",
        keywords: StatusKeywords | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            owner: Organization login that owns the projects
            token: GitHub token with project scope
            base_url: GitHub GraphQL API URL (for testing/enterprise)
            keywords: Status discovery hints
        """
        self.owner = owner
        self.token = token
        self.base_url = base_url
        self.keywords = keywords or StatusKeywords()
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for GraphQL API."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=30.0,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            Response data

        Raises:
            GraphQLError: If the request or the query fails
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = await self.client.post(self.base_url, json=payload)
        except httpx.HTTPError as e:
            raise GraphQLError(f"GraphQL request failed: {e}") from e

        if response.status_code != 200:
            text = sanitize_for_log(truncate_output(response.text))
            raise GraphQLError(f"GraphQL request failed: {response.status_code} - {text}")

        try:
            data = response.json()
        except ValueError as e:
            raise GraphQLError(f"GraphQL response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise GraphQLError(f"Unexpected GraphQL payload: {type(data).__name__}")
        if data.get("errors"):
            raise GraphQLError(f"GraphQL errors: {sanitize_for_log(str(data['errors']))}")

        return dict(data.get("data") or {})

    async def list_projects(self, first: int = 10) -> list[Project]:
        """List the organization's V2 projects (first page only)."""
        data = await self._graphql(LIST_PROJECTS_QUERY, {"owner": self.owner, "first": first})
        nodes = ((data.get("organization") or {}).get("projectsV2") or {}).get("nodes") or []
        try:
            projects = [
                Project(
                    id=node["id"], title=node["title"], numeric_id=int(node["number"]), is_v2=True
                )
                for node in nodes
                if node
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise GraphQLError(f"Malformed project listing: {e}") from e
        logger.debug("Found %d V2 project(s) for %s", len(projects), self.owner)
        return projects

    async def fetch_project(self, number: int) -> ProjectSnapshot:
        """Fetch a project's fields and items.

        Raises:
            ProjectNotFoundError: If the organization has no such project
            GraphQLError: If the query fails
        """
        data = await self._graphql(PROJECT_QUERY, {"owner": self.owner, "number": number})
        node = (data.get("organization") or {}).get("projectV2")
        if not node:
            raise ProjectNotFoundError(f"Project #{number} not found for {self.owner}")

        try:
            fields = tuple(
                f for f in (_parse_field(n) for n in (node.get("fields") or {}).get("nodes") or [])
                if f is not None
            )
            items = tuple(
                _parse_item(n) for n in (node.get("items") or {}).get("nodes") or [] if n
            )
            snapshot = ProjectSnapshot(
                node_id=node["id"],
                number=int(node.get("number") or number),
                title=node.get("title") or "",
                url=node.get("url"),
                closed=bool(node.get("closed")),
                fields=fields,
                items=items,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GraphQLError(f"Malformed project #{number}: {e}") from e

        logger.info(
            "Fetched V2 project %r: %d field(s), %d item(s)",
            snapshot.title,
            len(snapshot.fields),
            len(snapshot.items),
        )
        return snapshot

    async def get_board(self, numeric_id: int) -> Board:
        """Fetch a project and assemble its board from the status-like field."""
        snapshot = await self.fetch_project(numeric_id)
        project = Project(
            id=snapshot.node_id,
            title=snapshot.title,
            numeric_id=snapshot.number,
            is_v2=True,
        )
        discovered = discover_status_field(snapshot.fields, snapshot.items, self.keywords)
        return assemble_v2_board(project, discovered, snapshot.items, snapshot.node_id)

    async def _resolve_project_id(self, item_id: str) -> str:
        data = await self._graphql(ITEM_PROJECT_QUERY, {"itemId": item_id})
        project_id = ((data.get("node") or {}).get("project") or {}).get("id")
        if not project_id:
            raise ProjectNotFoundError(f"No project found for item {item_id}")
        return str(project_id)

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> dict[str, Any]:
        """Set the item's status field to the destination column's option.

        Args:
            card_id: Project item node id
            column_id: Single-select option id of the destination column
            options: Move options; ``field_id`` is required

        Returns:
            The mutation payload

        Raises:
            GraphQLError: If the mutation fails
        """
        if not options.field_id:
            raise GraphQLError("A field id is required to move a V2 item")

        project_id = options.project_id or await self._resolve_project_id(card_id)
        logger.info("Moving item %s to option %s on field %s", card_id, column_id, options.field_id)

        data = await self._graphql(
            UPDATE_FIELD_MUTATION,
            {
                "projectId": project_id,
                "itemId": card_id,
                "fieldId": options.field_id,
                "optionId": str(column_id),
            },
        )
        return dict(data.get("updateProjectV2ItemFieldValue") or {})
