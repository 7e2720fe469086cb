from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from storefront_profile.client import ApiError, StorefrontClient


def _client(handler) -> StorefrontClient:
    return StorefrontClient("https://portal.test/", transport=httpx.MockTransport(handler))


def test_fetch_profile_sends_tenant_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["tenant"] = request.headers["X-Tenant-Id"]
        return httpx.Response(200, json={
            "published": {"businessName": "Acme"},
            "draft": None,
            "publishedAt": "2026-01-01T00:00:00Z",
            "draftUpdatedAt": None,
        })

    snapshot = asyncio.run(_client(handler).fetch_profile("42"))

    assert seen == {"url": "https://portal.test/api/v1/marketplace/profile", "tenant": "42"}
    assert snapshot.published == {"businessName": "Acme"}
    assert snapshot.draft is None
    assert snapshot.published_at == "2026-01-01T00:00:00Z"


def test_empty_profile_body_gives_empty_snapshot():
    snapshot = asyncio.run(_client(lambda request: httpx.Response(200)).fetch_profile("42"))

    assert snapshot.published is None
    assert snapshot.draft is None
    assert snapshot.published_at is None


@pytest.mark.parametrize(
    "method_name, args, http_method, path",
    [
        ("save_draft", ({"bio": "x"},), "PUT", "/api/v1/marketplace/profile/draft"),
        ("publish", ({"bio": "x"},), "POST", "/api/v1/marketplace/profile/publish"),
        ("unpublish", (), "POST", "/api/v1/marketplace/profile/unpublish"),
    ],
)
def test_persistence_calls(method_name, args, http_method, path):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler)
    asyncio.run(getattr(client, method_name)("42", *args))

    [request] = requests
    assert request.method == http_method
    assert request.url.path == path
    if args:
        assert json.loads(request.content) == args[0]


def test_server_message_is_surfaced():
    def handler(request):
        return httpx.Response(422, json={"error": "businessName_required"})

    with pytest.raises(ApiError) as info:
        asyncio.run(_client(handler).publish("42", {}))

    assert info.value.message == "businessName_required"
    assert info.value.status == 422


def test_generic_message_without_body():
    with pytest.raises(ApiError, match="Request failed with status 503"):
        asyncio.run(_client(lambda request: httpx.Response(503, text="oops")).save_draft("42", {}))


def test_transport_error_becomes_api_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as info:
        asyncio.run(_client(handler).unpublish("42"))

    assert info.value.status == 0


def test_breeding_program_references():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/breeding/programs"
        assert request.url.params["limit"] == "100"
        return httpx.Response(200, json={"items": [
            {"name": "Lab program", "breedText": "Labrador"},
            {"name": "Draft program", "breedText": None},
            {"name": "Goldens", "breedText": "Golden Retriever"},
        ]})

    linked = asyncio.run(_client(handler).fetch_breeding_program_references("42"))

    assert linked == {"labrador", "golden retriever"}
