from __future__ import annotations

import copy

from storefront_profile.changes import ChangeTracker, canonical_form
from storefront_profile.merger import merge_profiles


def test_no_changes_right_after_merge():
    form = merge_profiles({"businessName": "Acme", "breeds": ["Labrador"]}, None)
    tracker = ChangeTracker(form)

    assert tracker.has_changes(form) is False


def test_mutation_then_revert():
    form = merge_profiles({"businessName": "Acme", "bio": "Original"}, None)
    tracker = ChangeTracker(form)

    form["bio"] = "Edited"
    assert tracker.has_changes(form) is True

    form["bio"] = "Original"
    assert tracker.has_changes(form) is False


def test_key_order_is_ignored():
    tracker = ChangeTracker({"a": 1, "b": {"x": 1, "y": 2}})

    assert tracker.has_changes({"b": {"y": 2, "x": 1}, "a": 1}) is False


def test_sequence_order_matters():
    tracker = ChangeTracker({"breeds": [{"name": "A"}, {"name": "B"}]})

    assert tracker.has_changes({"breeds": [{"name": "B"}, {"name": "A"}]}) is True


def test_missing_key_differs_from_none():
    tracker = ChangeTracker({"bio": None})

    assert tracker.has_changes({}) is True


def test_baseline_is_a_snapshot():
    form = {"breeds": [{"name": "A"}]}
    tracker = ChangeTracker(form)

    form["breeds"][0]["name"] = "B"

    assert tracker.has_changes(form) is True


def test_reset_adopts_new_baseline():
    form = {"bio": "a"}
    tracker = ChangeTracker(form)
    edited = copy.deepcopy(form)
    edited["bio"] = "b"

    tracker.reset(edited)

    assert tracker.has_changes(edited) is False
    assert tracker.has_changes(form) is True


def test_canonical_form_handles_sets_and_tuples():
    assert canonical_form({"tags": {"b", "a"}}) == canonical_form({"tags": {"a", "b"}})
    assert canonical_form((1, 2)) == canonical_form([1, 2])
