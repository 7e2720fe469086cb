"""Every form mutation goes through ``apply_edit``.

Actions are plain mappings with a ``type`` key, e.g.::

    {"type": "set_field", "field": "bio", "value": "Family kennel since 1998"}
    {"type": "set_policy", "flag": "requireDeposit", "value": True}
    {"type": "add_breed", "name": "Labrador", "species": "Dog", "breedId": 12}

Rules that span more than one field live here, so the editor never has to
remember them: deposit and reservation fee exclude each other, and free-text
notes are cut to their limits.
"""

import copy
from typing import Any, Iterable

from .breeds import add_breed, remove_breed
from .models import (
    ADDRESS_FIELDS,
    CREDENTIAL_CATEGORIES,
    CREDENTIAL_NOTE_LIMIT,
    POLICY_FLAGS,
    POLICY_NOTE_LIMIT,
    BreedEntry,
    Outcome,
    new_program,
    to_ui_species,
)
from .visibility import (
    set_breed_visibility,
    set_location_mode,
    set_program_cover_visibility,
    set_visibility,
)

# fields edited as plain values; visibility flags and nested sections have their own actions
EDITABLE_FIELDS = (
    "businessName",
    "bio",
    "yearEstablished",
    "logoUrl",
    "logoAssetId",
    "bannerImageUrl",
    "websiteUrl",
    "instagram",
    "facebook",
)

# policy flag -> flag it switches off when turned on
_EXCLUSIVE_POLICIES = {
    "requireDeposit": "requireReservationFee",
    "requireReservationFee": "requireDeposit",
}


def _set_field(state, action):
    field = action["field"]
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Field is not directly editable: {field}")
    new_state = copy.deepcopy(state)
    new_state[field] = action.get("value")
    return Outcome(new_state)


def _set_address(state, action):
    field = action["field"]
    if field not in ADDRESS_FIELDS:
        raise ValueError(f"Unknown address field: {field}")
    new_state = copy.deepcopy(state)
    address = new_state.get("address") or {}
    address[field] = action.get("value")
    new_state["address"] = address
    return Outcome(new_state)


def _add_breed(state, action):
    entry = BreedEntry(
        name=action["name"],
        species=to_ui_species(action.get("species")),
        breed_id=action.get("breedId"),
        custom_breed_id=action.get("customBreedId"),
        source=action.get("source", "canonical"),
    )
    return add_breed(state, entry)


def _credential_flag(category: str) -> str:
    if category not in CREDENTIAL_CATEGORIES:
        raise ValueError(f"Unknown credential category: {category}")
    return CREDENTIAL_CATEGORIES[category][0]


def _toggle_credential(state, action):
    category = action["category"]
    _credential_flag(category)
    new_state = copy.deepcopy(state)
    creds = new_state.get("standardsAndCredentials") or {}
    items = list(creds.get(category) or [])
    if action["item"] in items:
        items.remove(action["item"])
    else:
        items.append(action["item"])
    creds[category] = items
    new_state["standardsAndCredentials"] = creds
    return Outcome(new_state)


def _set_credential_note(state, action):
    category = action["category"]
    if category not in CREDENTIAL_CATEGORIES:
        raise ValueError(f"Unknown credential category: {category}")
    _show_flag, note_key = CREDENTIAL_CATEGORIES[category]
    new_state = copy.deepcopy(state)
    creds = new_state.get("standardsAndCredentials") or {}
    note = action.get("value")
    creds[note_key] = note[:CREDENTIAL_NOTE_LIMIT] if isinstance(note, str) else note
    new_state["standardsAndCredentials"] = creds
    return Outcome(new_state)


def _set_policy(state, action):
    flag = action["flag"]
    if flag not in POLICY_FLAGS:
        raise ValueError(f"Unknown placement policy: {flag}")
    value = bool(action.get("value"))
    new_state = copy.deepcopy(state)
    policies = new_state.get("placementPolicies") or {}
    policies[flag] = value
    if value and flag in _EXCLUSIVE_POLICIES:
        policies[_EXCLUSIVE_POLICIES[flag]] = False
    new_state["placementPolicies"] = policies
    return Outcome(new_state)


def _set_policy_note(state, action):
    new_state = copy.deepcopy(state)
    policies = new_state.get("placementPolicies") or {}
    note = action.get("value")
    policies["note"] = note[:POLICY_NOTE_LIMIT] if isinstance(note, str) else note
    new_state["placementPolicies"] = policies
    return Outcome(new_state)


def _add_program(state, action):
    new_state = copy.deepcopy(state)
    program = new_program()
    program.update(copy.deepcopy(action.get("values") or {}))
    new_state["listedPrograms"] = [*(new_state.get("listedPrograms") or []), program]
    return Outcome(new_state)


def _update_program(state, action):
    index = action["index"]
    programs = state.get("listedPrograms") or []
    if not 0 <= index < len(programs):
        return Outcome(state, f"No program at position {index}")
    new_state = copy.deepcopy(state)
    new_state["listedPrograms"][index].update(copy.deepcopy(action.get("values") or {}))
    return Outcome(new_state)


def _remove_program(state, action):
    index = action["index"]
    programs = state.get("listedPrograms") or []
    if not 0 <= index < len(programs):
        return Outcome(state, f"No program at position {index}")
    new_state = copy.deepcopy(state)
    del new_state["listedPrograms"][index]
    return Outcome(new_state)


def _set_visibility_action(state, action):
    return set_visibility(state, action["flag"], action["value"])


def _set_credential_visibility(state, action):
    return set_visibility(state, _credential_flag(action["category"]), action["value"])


def _set_location_mode_action(state, action):
    return set_location_mode(state, action["mode"])


def _set_breed_visibility_action(state, action):
    return set_breed_visibility(state, action["index"], action["value"])


def _set_program_cover_visibility_action(state, action):
    return set_program_cover_visibility(state, action["index"], action["value"])


_HANDLERS = {
    "set_field": _set_field,
    "set_address": _set_address,
    "set_visibility": _set_visibility_action,
    "set_credential_visibility": _set_credential_visibility,
    "set_location_mode": _set_location_mode_action,
    "add_breed": _add_breed,
    "set_breed_visibility": _set_breed_visibility_action,
    "toggle_credential": _toggle_credential,
    "set_credential_note": _set_credential_note,
    "set_policy": _set_policy,
    "set_policy_note": _set_policy_note,
    "add_program": _add_program,
    "update_program": _update_program,
    "remove_program": _remove_program,
    "set_program_cover_visibility": _set_program_cover_visibility_action,
}


def apply_edit(
    state: dict[str, Any],
    action: dict[str, Any],
    *,
    linked_breeds: Iterable[str] = (),
    is_published: bool = False,
) -> Outcome:
    """
    Apply one edit action to a form state without mutating it.

    Args:
        state: Current form state
        action: Mapping with a ``type`` and the action's arguments
        linked_breeds: Lower-cased breed names used by breeding programs
            (only consulted by ``remove_breed``)
        is_published: Whether the storefront is live (only consulted by
            ``remove_breed``)

    Returns:
        Outcome with the next state, or the original state and a reason when
        a constraint refused the edit.

    Raises:
        ValueError: for an unknown action type, field or category.
    """
    kind = action.get("type")
    if kind == "remove_breed":
        return remove_breed(
            state, action["index"], linked_breeds=linked_breeds, is_published=is_published
        )
    handler = _HANDLERS.get(kind)
    if handler is None:
        raise ValueError(f"Unknown edit action: {kind}")
    return handler(state, action)
