"""Bring stored profile fragments of any vintage into the current shape.

Older rows may store breeds as plain strings under ``listedBreeds``, programs
under ``programs``, and lack the show* flags that were added later. Every
default below is applied only when the target key is absent, so running the
normalizer over already-canonical data returns it unchanged.

Malformed breed or program rows are dropped rather than reported.
"""

import copy
from typing import Any

from .models import (
    CREDENTIAL_CATEGORIES,
    LEGACY_POLICY_FLAGS,
    breed_identity,
    to_ui_species,
)


# program field -> default applied when the key is missing
_PROGRAM_DEFAULTS: dict[str, Any] = {
    "species": "DOG",
    "breedText": None,
    "breedId": None,
    "description": None,
    "programStory": None,
    "coverImageUrl": None,
    "showCoverImage": True,
    "acceptInquiries": True,
    "openWaitlist": False,
    "acceptReservations": False,
    "comingSoon": False,
    "pricingTiers": None,
    "whatsIncluded": None,
    "typicalWaitTime": None,
    "showWhatsIncluded": True,
    "showWaitTime": True,
    "mediaAssetIds": [],
}


def normalize_breeds(raw: Any) -> list[dict[str, Any]]:
    """
    Convert a stored breed list into canonical breed entries.

    >>> normalize_breeds(["Labrador"])
    [{'name': 'Labrador', 'species': 'Dog', 'isPublic': True}]
    >>> normalize_breeds([{"name": "Arabian", "species": "HORSE"}, None, 7])
    [{'name': 'Arabian', 'species': 'Horse', 'isPublic': True}]
    """
    if not isinstance(raw, (list, tuple)):
        return []

    breeds = []
    for item in raw:
        if isinstance(item, str):
            breeds.append({"name": item, "species": "Dog", "isPublic": True})
            continue
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue

        entry: dict[str, Any] = {
            "name": item["name"],
            "species": to_ui_species(item.get("species")),
        }
        for key in ("breedId", "customBreedId", "source"):
            if key in item:
                entry[key] = item[key]
        is_public = item.get("isPublic")
        entry["isPublic"] = True if is_public is None else bool(is_public)
        breeds.append(entry)

    # first occurrence of a (name, species) identity wins
    unique = []
    seen = set()
    for entry in breeds:
        identity = breed_identity(entry)
        if identity not in seen:
            seen.add(identity)
            unique.append(entry)
    return unique


def normalize_programs(raw: Any) -> list[dict[str, Any]]:
    """Convert stored program listings, keeping unknown keys and filling defaults."""
    if not isinstance(raw, (list, tuple)):
        return []

    programs = []
    for item in raw:
        if isinstance(item, str):
            item = {"name": item}
        if not isinstance(item, dict) or "name" not in item:
            continue

        program = copy.deepcopy(item)
        # unnamed listings are kept as work in progress; they are never public-eligible
        if program["name"] is None:
            program["name"] = ""
        elif not isinstance(program["name"], str):
            program["name"] = str(program["name"])
        for key, default in _PROGRAM_DEFAULTS.items():
            if key not in program:
                program[key] = copy.deepcopy(default)
        programs.append(program)
    return programs


def normalize_credentials(raw: dict[str, Any]) -> dict[str, Any]:
    creds = copy.deepcopy(raw)
    for category, (show_flag, _note) in CREDENTIAL_CATEGORIES.items():
        if show_flag not in creds:
            creds[show_flag] = bool(creds.get(category))
    return creds


def normalize_policies(raw: dict[str, Any]) -> dict[str, Any]:
    policies = copy.deepcopy(raw)
    if "showPolicies" not in policies:
        policies["showPolicies"] = any(policies.get(flag) for flag in LEGACY_POLICY_FLAGS)
    return policies


def normalize_profile(raw: dict[str, Any] | None) -> dict[str, Any]:
    """
    Normalize a merged profile mapping into the current canonical shape.

    Never raises: unusable input produces an empty profile, and unusable
    breed or program rows are left out.

    Args:
        raw: Profile mapping as stored (any schema version), or None

    Returns:
        A new dict; the input is not modified.
    """
    profile = copy.deepcopy(raw) if isinstance(raw, dict) else {}

    legacy_breeds = profile.pop("listedBreeds", None)
    breeds = profile.get("breeds")
    profile["breeds"] = normalize_breeds(legacy_breeds if breeds is None else breeds)

    legacy_programs = profile.pop("programs", None)
    programs = profile.get("listedPrograms")
    profile["listedPrograms"] = normalize_programs(legacy_programs if programs is None else programs)

    if isinstance(profile.get("standardsAndCredentials"), dict):
        profile["standardsAndCredentials"] = normalize_credentials(profile["standardsAndCredentials"])

    if isinstance(profile.get("placementPolicies"), dict):
        profile["placementPolicies"] = normalize_policies(profile["placementPolicies"])

    return profile
