"""Unit tests for status field discovery."""

import pytest

from boardsync.board import CardKind, Field, FieldOption, FieldValue, Item
from boardsync.discovery import (
    DiscoveryRule,
    StatusKeywords,
    collect_field_values,
    discover_status_field,
)


def _item(item_id: str, *values: tuple[str, str], field_ids: dict[str, str] | None = None) -> Item:
    """Build an item holding single-select values given as (field, value) pairs."""
    field_ids = field_ids or {}
    return Item(
        id=item_id,
        kind=CardKind.ISSUE,
        field_values=tuple(
            FieldValue(
                field_name=field_name,
                field_id=field_ids.get(field_name),
                name=name,
                option_id=f"opt_{name.lower().replace(' ', '_')}",
            )
            for field_name, name in values
        ),
    )


@pytest.mark.unit
class TestCollectFieldValues:
    """Tests for collect_field_values."""

    def test_first_seen_order_without_duplicates(self) -> None:
        items = [
            _item("1", ("Status", "Done"), ("Size", "S")),
            _item("2", ("Status", "Todo")),
            _item("3", ("Status", "Done"), ("Size", "L")),
        ]

        observed = collect_field_values(items)

        assert list(observed) == ["Status", "Size"]
        assert list(observed["Status"]) == ["Done", "Todo"]
        assert list(observed["Size"]) == ["S", "L"]

    def test_ignores_text_and_date_values(self) -> None:
        item = Item(
            id="1",
            kind=CardKind.ISSUE,
            field_values=(
                FieldValue(field_name="Title", text="Fix login"),
                FieldValue(field_name="Due", date="2024-05-01"),
            ),
        )

        assert collect_field_values([item]) == {}


@pytest.mark.unit
class TestDiscoverStatusField:
    """Tests for discover_status_field."""

    def test_field_name_rule_wins(self) -> None:
        """A field named like a status is picked even if listed later."""
        items = [_item("1", ("Priority", "High"), ("Stage", "Backlog"))]

        discovered = discover_status_field([], items)

        assert discovered.field_name == "Stage"
        assert discovered.rule is DiscoveryRule.FIELD_NAME

    def test_field_values_rule(self) -> None:
        """Without a status-like name, values like 'In Progress' decide."""
        items = [
            _item("1", ("Priority", "High"), ("Lane", "In Progress")),
            _item("2", ("Lane", "Done")),
        ]

        discovered = discover_status_field([], items)

        assert discovered.field_name == "Lane"
        assert discovered.values == ("In Progress", "Done")
        assert discovered.rule is DiscoveryRule.FIELD_VALUES

    def test_first_field_with_values_fallback(self) -> None:
        """With no keyword match at all, the first field with values is used."""
        items = [
            _item("1", ("Priority", "Low")),
            _item("2", ("Priority", "High")),
        ]

        discovered = discover_status_field([], items)

        assert discovered.field_name == "Priority"
        assert discovered.values == ("Low", "High")
        assert discovered.rule is DiscoveryRule.FIRST_WITH_VALUES

    def test_no_values_returns_none(self) -> None:
        items = [Item(id="1", kind=CardKind.DRAFT_ISSUE)]

        assert discover_status_field([], items) is None

    def test_deterministic_for_same_input(self) -> None:
        items = [
            _item("1", ("Status", "Todo")),
            _item("2", ("Status", "Done")),
            _item("3", ("Status", "Todo")),
        ]

        first = discover_status_field([], items)
        second = discover_status_field([], items)

        assert first == second
        assert first.values == ("Todo", "Done")

    def test_field_id_and_options_from_definition(self) -> None:
        definition = Field(
            id="PVTSSF_1",
            name="Status",
            data_type="SINGLE_SELECT",
            options=(FieldOption(id="def_todo", name="Todo"),),
        )
        items = [_item("1", ("Status", "Todo")), _item("2", ("Status", "Done"))]

        discovered = discover_status_field([definition], items)

        assert discovered.field_id == "PVTSSF_1"
        # Definition options take precedence, values fill the gaps
        assert discovered.option_ids == {"Todo": "def_todo", "Done": "opt_done"}

    def test_field_id_from_values_without_definition(self) -> None:
        items = [_item("1", ("Status", "Todo"), field_ids={"Status": "PVTSSF_9"})]

        discovered = discover_status_field([], items)

        assert discovered.field_id == "PVTSSF_9"

    def test_custom_keywords(self) -> None:
        """Configured keywords replace the built-in hints."""
        items = [_item("1", ("Status", "Open"), ("Phase", "Build"))]
        keywords = StatusKeywords(field_keywords=("phase",), value_keywords=())

        discovered = discover_status_field([], items, keywords)

        assert discovered.field_name == "Phase"


@pytest.mark.unit
class TestStatusKeywords:
    """Tests for keyword matching."""

    def test_matching_is_case_insensitive_substring(self) -> None:
        keywords = StatusKeywords()

        assert keywords.matches_field("Workflow STATUS")
        assert keywords.matches_value("Ready for review")
        assert not keywords.matches_field("Priority")
        assert not keywords.matches_value("High")
