"""Breed roster edits: adding without duplicates, and guarded removal."""

import copy
from typing import Any, Iterable

from .models import BreedEntry, Outcome, RemovalCheck, breed_identity

LINKED_TO_PROGRAM = "Breed is linked to a breeding program. Remove the program first."
LAST_BREED_WHILE_PUBLISHED = "Cannot remove the last breed while storefront is published. Unpublish first."


def add_breed(state: dict[str, Any], entry: BreedEntry) -> Outcome:
    """
    Append a breed unless one with the same (name, species) is already listed.

    A duplicate is not an error: the state comes back unchanged and ``ok``.
    """
    breeds = state.get("breeds") or []
    if any(breed_identity(b) == entry.identity for b in breeds):
        return Outcome(state)

    new_state = copy.deepcopy(state)
    new_state["breeds"] = [*new_state.get("breeds", []), entry.to_dict()]
    return Outcome(new_state)


def can_remove_breed(
    state: dict[str, Any],
    name: str,
    *,
    linked_breeds: Iterable[str] = (),
    is_published: bool = False,
) -> RemovalCheck:
    """
    Decide whether ``name`` may be dropped from the roster.

    Checks run in order and the first failure wins:
        1. a breeding program (outside this profile) references the breed
        2. it is the last breed and the storefront is live

    Args:
        state: Current form state
        name: Breed name as listed
        linked_breeds: Lower-cased breed names referenced by breeding programs
        is_published: Whether the storefront currently has a publishedAt
    """
    if name.lower() in set(linked_breeds):
        return RemovalCheck(False, LINKED_TO_PROGRAM)
    if len(state.get("breeds") or []) <= 1 and is_published:
        return RemovalCheck(False, LAST_BREED_WHILE_PUBLISHED)
    return RemovalCheck(True)


def remove_breed(
    state: dict[str, Any],
    index: int,
    *,
    linked_breeds: Iterable[str] = (),
    is_published: bool = False,
) -> Outcome:
    breeds = state.get("breeds") or []
    if not 0 <= index < len(breeds):
        return Outcome(state, f"No breed at position {index}")

    check = can_remove_breed(
        state, breeds[index]["name"], linked_breeds=linked_breeds, is_published=is_published
    )
    if not check.allowed:
        return Outcome(state, check.reason)

    new_state = copy.deepcopy(state)
    del new_state["breeds"][index]
    return Outcome(new_state)
