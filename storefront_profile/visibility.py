"""Public/unlisted toggles for profile fields, breeds and program media.

Hiding a breed is refused while a complete program listing names it, since
that listing would otherwise point at a breed the storefront no longer shows.
Every other toggle is a plain flip, except that a toggle cannot be turned on
while the content behind it is empty.
"""

import copy
from typing import Any

from .models import (
    ADDRESS_FIELDS,
    CREDENTIAL_CATEGORIES,
    LOCATION_MODES,
    POLICY_FLAGS,
    VISIBILITY_FLAGS,
    Outcome,
    is_blank,
    is_program_complete,
)


def is_breed_in_public_program(state: dict[str, Any], breed_name: str) -> bool:
    target = breed_name.lower()
    for program in state.get("listedPrograms") or []:
        if not is_program_complete(program):
            continue
        if str(program["breedText"]).lower() == target:
            return True
    return False


def set_breed_visibility(state: dict[str, Any], index: int, make_public: bool) -> Outcome:
    """Flip one breed's ``isPublic`` flag, leaving every other entry untouched."""
    breeds = state.get("breeds") or []
    if not 0 <= index < len(breeds):
        return Outcome(state, f"No breed at position {index}")

    breed = breeds[index]
    if not make_public and is_breed_in_public_program(state, breed["name"]):
        return Outcome(
            state,
            f'"{breed["name"]}" cannot be unlisted because it\'s used in a public Breeding Program.',
        )

    new_state = copy.deepcopy(state)
    new_state["breeds"][index]["isPublic"] = bool(make_public)
    return Outcome(new_state)


def _has_address(state: dict[str, Any]) -> bool:
    address = state.get("address") or {}
    return any(not is_blank(address.get(key)) for key in ADDRESS_FIELDS)


def _has_policy(state: dict[str, Any]) -> bool:
    policies = state.get("placementPolicies") or {}
    return any(policies.get(flag) for flag in POLICY_FLAGS) or not is_blank(policies.get("note"))


def can_make_public(state: dict[str, Any], flag: str) -> bool:
    """
    Whether the public side of a toggle is available.

    ``flag`` is a top-level show flag (``showLogo``), a credential category
    flag (``showHealthPractices``), ``showPolicies`` or ``publicLocationMode``.
    """
    if flag in VISIBILITY_FLAGS:
        return not is_blank(state.get(VISIBILITY_FLAGS[flag]))
    if flag == "publicLocationMode":
        return _has_address(state)
    if flag == "showPolicies":
        return _has_policy(state)
    for category, (show_flag, note_key) in CREDENTIAL_CATEGORIES.items():
        if flag == show_flag:
            creds = state.get("standardsAndCredentials") or {}
            return not is_blank(creds.get(category)) or not is_blank(creds.get(note_key))
    raise ValueError(f"Unknown visibility flag: {flag}")


def set_visibility(state: dict[str, Any], flag: str, value: bool) -> Outcome:
    """Set a profile-level, credential or policy show flag."""
    if value and not can_make_public(state, flag):
        return Outcome(state, f"{flag} needs content before it can be made public")

    new_state = copy.deepcopy(state)
    if flag in VISIBILITY_FLAGS:
        new_state[flag] = bool(value)
    elif flag == "showPolicies":
        new_state.setdefault("placementPolicies", {})
        new_state["placementPolicies"]["showPolicies"] = bool(value)
    elif flag == "publicLocationMode":
        new_state["publicLocationMode"] = "city_state" if value else "hidden"
    else:
        new_state.setdefault("standardsAndCredentials", {})
        new_state["standardsAndCredentials"][flag] = bool(value)
    return Outcome(new_state)


def set_location_mode(state: dict[str, Any], mode: str) -> Outcome:
    if mode not in LOCATION_MODES:
        return Outcome(state, f"Unknown location mode: {mode}")
    if mode != "hidden" and not can_make_public(state, "publicLocationMode"):
        return Outcome(state, "Add an address before showing a location")

    new_state = copy.deepcopy(state)
    new_state["publicLocationMode"] = mode
    return Outcome(new_state)


def set_program_cover_visibility(state: dict[str, Any], index: int, value: bool) -> Outcome:
    programs = state.get("listedPrograms") or []
    if not 0 <= index < len(programs):
        return Outcome(state, f"No program at position {index}")
    if value and is_blank(programs[index].get("coverImageUrl")):
        return Outcome(state, "Add a cover image before making it public")

    new_state = copy.deepcopy(state)
    new_state["listedPrograms"][index]["showCoverImage"] = bool(value)
    return Outcome(new_state)
