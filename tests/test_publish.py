from __future__ import annotations

import pytest

from storefront_profile.models import PublishStatus
from storefront_profile.publish import check_publish_ready


@pytest.mark.parametrize(
    "state, fields",
    [
        ({"businessName": "Acme", "breeds": [{"name": "Labrador"}]}, []),
        ({"businessName": "", "breeds": [{"name": "Labrador"}]}, ["businessName"]),
        ({"businessName": None, "breeds": [{"name": "Labrador"}]}, ["businessName"]),
        ({"businessName": "Acme", "breeds": []}, ["breeds"]),
        ({}, ["businessName", "breeds"]),
    ],
)
def test_publish_preconditions(state, fields):
    assert [issue.field for issue in check_publish_ready(state)] == fields


def test_status_from_published_at():
    assert PublishStatus.from_published_at(None) is PublishStatus.UNPUBLISHED
    assert PublishStatus.from_published_at("") is PublishStatus.UNPUBLISHED
    assert PublishStatus.from_published_at("2026-01-01T00:00:00Z") is PublishStatus.PUBLISHED
