"""Data models for Schema Discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from boardsync.config import DEFAULT_STATUS_FIELD_KEYWORDS, DEFAULT_STATUS_VALUE_KEYWORDS

if TYPE_CHECKING:
    from boardsync.config import Settings


class DiscoveryRule(StrEnum):
    """Which heuristic selected the status field."""

    FIELD_NAME = "field_name"
    FIELD_VALUES = "field_values"
    FIRST_WITH_VALUES = "first_with_values"


@dataclass(frozen=True)
class StatusKeywords:
    """Keyword hints used to guess the status field.

    Attributes:
        field_keywords: Matched as substrings of field names.
        value_keywords: Matched as substrings of observed option names.
    """

    field_keywords: tuple[str, ...] = DEFAULT_STATUS_FIELD_KEYWORDS
    value_keywords: tuple[str, ...] = DEFAULT_STATUS_VALUE_KEYWORDS

    @classmethod
    def from_settings(cls, settings: Settings) -> StatusKeywords:
        return cls(
            field_keywords=settings.status_field_keywords,
            value_keywords=settings.status_value_keywords,
        )

    def matches_field(self, field_name: str) -> bool:
        lowered = field_name.lower()
        return any(keyword.lower() in lowered for keyword in self.field_keywords)

    def matches_value(self, value: str) -> bool:
        lowered = value.lower()
        return any(keyword.lower() in lowered for keyword in self.value_keywords)


@dataclass(frozen=True)
class DiscoveredField:
    """The chosen status field and the values it takes.

    Attributes:
        field_id: Field id, when the remote reported one.
        field_name: Field name.
        values: Distinct observed values in first-seen order.
        option_ids: Option id for each value name, where known.
        rule: The heuristic that picked the field.
    """

    field_id: str | None
    field_name: str
    values: tuple[str, ...]
    option_ids: dict[str, str] = field(default_factory=dict)
    rule: DiscoveryRule = DiscoveryRule.FIELD_NAME
