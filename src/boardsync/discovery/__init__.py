"""Schema Discovery - finds the field that represents workflow status."""

from boardsync.discovery.discovery import collect_field_values, discover_status_field
from boardsync.discovery.models import DiscoveredField, DiscoveryRule, StatusKeywords

__all__ = [
    "DiscoveredField",
    "DiscoveryRule",
    "StatusKeywords",
    "collect_field_values",
    "discover_status_field",
]
