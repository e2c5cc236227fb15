"""Status field discovery for Projects V2 boards.

Project schemas are user defined, so the workflow field cannot be looked up
by a fixed name. It is guessed from field names first, then from the values
items actually hold, then by taking the first field with any values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from boardsync.board import Field, Item
from boardsync.discovery.models import DiscoveredField, DiscoveryRule, StatusKeywords

logger = logging.getLogger("boardsync.discovery")


def collect_field_values(items: Iterable[Item]) -> dict[str, dict[str, None]]:
    """Build, per field name, the ordered set of single-select values seen.

    Dicts keep insertion order, so both the field order and the value order
    are first-seen order.
    """
    observed: dict[str, dict[str, None]] = {}
    for item in items:
        for value in item.field_values:
            if not value.field_name or not value.name:
                continue
            observed.setdefault(value.field_name, {})[value.name] = None
    return observed


def _pick_field(
    observed: dict[str, dict[str, None]], keywords: StatusKeywords
) -> tuple[str, DiscoveryRule] | None:
    for field_name in observed:
        if keywords.matches_field(field_name):
            return field_name, DiscoveryRule.FIELD_NAME

    for field_name, values in observed.items():
        if any(keywords.matches_value(value) for value in values):
            return field_name, DiscoveryRule.FIELD_VALUES

    for field_name, values in observed.items():
        if values:
            return field_name, DiscoveryRule.FIRST_WITH_VALUES

    return None


def _option_ids(
    field_name: str,
    definition: Field | None,
    items: Iterable[Item],
) -> dict[str, str]:
    option_ids: dict[str, str] = {}
    if definition is not None:
        option_ids.update({option.name: option.id for option in definition.options})
    # Values carry their own option id; use it where the definition has none
    for item in items:
        for value in item.field_values:
            if value.field_name == field_name and value.name and value.option_id:
                option_ids.setdefault(value.name, value.option_id)
    return option_ids


def discover_status_field(
    fields: Sequence[Field],
    items: Sequence[Item],
    keywords: StatusKeywords | None = None,
) -> DiscoveredField | None:
    """Pick the field that represents workflow status.

    Args:
        fields: Field definitions of the project.
        items: Project items with their field values.
        keywords: Keyword hints; defaults to the built-in lists.

    Returns:
        The chosen field with its values in first-seen order, or None when
        no item holds any single-select value.
    """
    keywords = keywords or StatusKeywords()
    observed = collect_field_values(items)

    for field_name, values in observed.items():
        logger.debug("Observed field %s: %s", field_name, ", ".join(values))

    picked = _pick_field(observed, keywords)
    if picked is None:
        logger.info("No field with values found across %d item(s)", len(items))
        return None

    field_name, rule = picked
    definition = next((f for f in fields if f.name == field_name), None)

    field_id = definition.id if definition is not None else None
    if field_id is None:
        field_id = next(
            (
                value.field_id
                for item in items
                for value in item.field_values
                if value.field_name == field_name and value.field_id
            ),
            None,
        )

    values = tuple(observed[field_name])
    logger.info("Using field %r as status field (%s): %s", field_name, rule, ", ".join(values))

    return DiscoveredField(
        field_id=field_id,
        field_name=field_name,
        values=values,
        option_ids=_option_ids(field_name, definition, items),
        rule=rule,
    )
