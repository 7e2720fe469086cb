from __future__ import annotations

import copy

import pytest

from storefront_profile.client import ApiError
from storefront_profile.models import ProfileSnapshot, TenantContext


class FakeBackend:
    """In-memory stand-in for the portal API that records every call."""

    def __init__(
        self,
        published: dict | None = None,
        draft: dict | None = None,
        published_at: str | None = None,
        linked: set[str] | None = None,
    ):
        self.published = published
        self.draft = draft
        self.published_at = published_at
        self.linked = linked or set()
        self.calls: list[tuple] = []
        self.fail_with: dict[str, ApiError] = {}
        self.on_call = None

    def _maybe_fail(self, name: str) -> None:
        self.calls.append((name,))
        if self.on_call is not None:
            self.on_call(name)
        if name in self.fail_with:
            raise self.fail_with[name]

    async def fetch_profile(self, tenant_id):
        self._maybe_fail("fetch_profile")
        return ProfileSnapshot(
            published=copy.deepcopy(self.published),
            draft=copy.deepcopy(self.draft),
            published_at=self.published_at,
        )

    async def save_draft(self, tenant_id, profile):
        self._maybe_fail("save_draft")
        self.draft = copy.deepcopy(profile)

    async def publish(self, tenant_id, profile):
        self._maybe_fail("publish")
        self.published = copy.deepcopy(profile)
        self.published_at = "2026-10-17T12:00:00Z"

    async def unpublish(self, tenant_id):
        self._maybe_fail("unpublish")
        self.published_at = None

    async def fetch_breeding_program_references(self, tenant_id):
        self._maybe_fail("fetch_breeding_program_references")
        return set(self.linked)

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def context():
    return TenantContext(tenant_id="42", api_base_url="https://portal.test")


@pytest.fixture
def profile():
    return {
        "businessName": "Acme Kennels",
        "bio": "Family kennel",
        "logoUrl": "https://cdn.test/logo.png",
        "showLogo": True,
        "breeds": [
            {"name": "Labrador", "species": "Dog", "isPublic": True},
            {"name": "Poodle", "species": "Dog", "isPublic": True},
        ],
        "listedPrograms": [
            {"name": "Program A", "breedText": "Labrador", "species": "DOG"},
        ],
    }
