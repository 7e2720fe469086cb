"""Combine the published and draft snapshots into one editable form state."""

import copy
from typing import Any

from .normalizer import normalize_profile


def merge_profiles(
    published: dict[str, Any] | None,
    draft: dict[str, Any] | None,
) -> dict[str, Any]:
    """
    Overlay the draft on the published profile, then normalize.

    A draft only holds the fields the breeder touched, so every field the
    draft lacks is taken from the published profile. Draft values win for
    any top-level key both sides carry, including explicit None.

    >>> merge_profiles({"businessName": "Acme", "bio": "Old"}, {"bio": "New"})["bio"]
    'New'
    """
    merged = {**copy.deepcopy(published or {}), **copy.deepcopy(draft or {})}
    return normalize_profile(merged)
