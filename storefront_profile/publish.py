"""Minimum content a storefront needs before it can go live."""

from typing import Any

from .models import PublishIssue


def check_publish_ready(state: dict[str, Any]) -> list[PublishIssue]:
    """
    List what blocks publishing, one issue per field.

    >>> check_publish_ready({"businessName": "  ", "breeds": []})[0].field
    'businessName'
    >>> check_publish_ready({"businessName": "Acme", "breeds": [{"name": "Labrador"}]})
    []
    """
    issues = []
    name = state.get("businessName")
    if not isinstance(name, str) or not name.strip():
        issues.append(PublishIssue("businessName", "Business name is required to publish"))
    if not state.get("breeds"):
        issues.append(PublishIssue("breeds", "At least one breed is required to publish"))
    return issues
