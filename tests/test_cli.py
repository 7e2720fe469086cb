from __future__ import annotations

import json
import sys

import pytest

from storefront_profile import cli


def _run(monkeypatch, *argv) -> int:
    monkeypatch.setattr(sys, "argv", ["storefront-profile", *argv])
    with pytest.raises(SystemExit) as info:
        cli.main()
    return info.value.code


def test_check_ready_profile(tmp_path, monkeypatch, capsys):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({
        "published": {"businessName": "Acme", "listedBreeds": ["Labrador"]},
        "draft": {"bio": "Hello"},
        "publishedAt": None,
    }))

    assert _run(monkeypatch, "check", str(path)) == 0

    out = capsys.readouterr().out
    assert "Labrador" in out
    assert "Ready to publish" in out


def test_check_reports_missing_fields(tmp_path, monkeypatch, capsys):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"published": None, "draft": {"bio": "Hello"}}))

    assert _run(monkeypatch, "check", str(path)) == 1

    out = capsys.readouterr().out
    assert "Business name is required to publish" in out


def test_show_without_tenant_fails(monkeypatch):
    monkeypatch.delenv("STOREFRONT_TENANT_ID", raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr("storefront_profile.models.load_dotenv", lambda: None)

    assert _run(monkeypatch, "show") == 1
