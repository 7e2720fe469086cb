"""Orchestration: load -> merge -> edit -> save draft / publish / unpublish.

The editor owns the in-memory form state for one tenant. Edits are applied
synchronously through the reducer; only the persistence calls await the
backend. The baseline used for change detection moves forward only after the
backend confirms a save or publish, so a failed call leaves both the form
and the baseline exactly as they were.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from .breeds import can_remove_breed
from .changes import ChangeTracker
from .client import ApiError, StorefrontBackend, StorefrontClient
from .merger import merge_profiles
from .models import ActionResult, Outcome, PublishStatus, RemovalCheck, TenantContext
from .publish import check_publish_ready
from .reducer import apply_edit

logger = logging.getLogger(__name__)

UNPUBLISH_PROMPT = "This will remove your breeder listing from the marketplace. Continue?"


class StorefrontEditor:
    """
    Editable storefront profile for one tenant.

    Args:
        context: Tenant the editor works for
        backend: Persistence collaborator (``StorefrontClient`` or any object
            with the same coroutine methods)
    """

    def __init__(self, context: TenantContext, backend: StorefrontBackend):
        self.context = context
        self.backend = backend
        self.form: dict[str, Any] = {}
        self.published_at: str | None = None
        self.draft_updated_at: str | None = None
        self.linked_breeds: set[str] = set()
        self.error: str | None = None
        self.loading = False
        self.saving = False
        self.publishing = False
        self.cancelled = False
        self._tracker = ChangeTracker()

    @property
    def tenant_id(self) -> str:
        return self.context.tenant_id

    @property
    def status(self) -> PublishStatus:
        return PublishStatus.from_published_at(self.published_at)

    @property
    def is_published(self) -> bool:
        return self.status is PublishStatus.PUBLISHED

    @property
    def has_changes(self) -> bool:
        return self._tracker.has_changes(self.form)

    @property
    def can_save_draft(self) -> bool:
        return self.has_changes and not self.saving

    @property
    def can_publish(self) -> bool:
        return not self.publishing

    def close(self) -> None:
        """Stop applying responses; in-flight requests still complete."""
        self.cancelled = True

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> ActionResult:
        """Fetch both snapshots, merge them into the form and set the baseline."""
        self.loading = True
        self.error = None
        try:
            snapshot = await self.backend.fetch_profile(self.tenant_id)
        except ApiError as exc:
            if self.cancelled:
                return ActionResult(False, "Editor closed")
            self.error = exc.message or "Failed to load profile"
            logger.error("Loading profile for tenant %s failed: %s", self.tenant_id, self.error)
            return ActionResult(False, self.error)
        finally:
            if not self.cancelled:
                self.loading = False

        if self.cancelled:
            return ActionResult(False, "Editor closed")

        self.form = merge_profiles(snapshot.published, snapshot.draft)
        self._tracker.reset(self.form)
        self.published_at = snapshot.published_at
        self.draft_updated_at = snapshot.draft_updated_at

        await self.load_program_references()
        return ActionResult(True)

    async def load_program_references(self) -> None:
        """Fetch which breeds breeding programs use; on failure assume none."""
        try:
            linked = await self.backend.fetch_breeding_program_references(self.tenant_id)
        except ApiError as exc:
            logger.warning(
                "Breeding program lookup failed for tenant %s, breed removal unguarded: %s",
                self.tenant_id,
                exc.message,
            )
            linked = set()
        if not self.cancelled:
            self.linked_breeds = {name.lower() for name in linked}

    async def _refresh_status(self) -> None:
        try:
            snapshot = await self.backend.fetch_profile(self.tenant_id)
        except ApiError as exc:
            logger.warning("Could not refresh profile status: %s", exc.message)
            return
        if not self.cancelled:
            self.published_at = snapshot.published_at
            self.draft_updated_at = snapshot.draft_updated_at

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def edit(self, action: dict[str, Any]) -> Outcome:
        """Apply one reducer action; the form only changes when it is accepted."""
        outcome = apply_edit(
            self.form,
            action,
            linked_breeds=self.linked_breeds,
            is_published=self.is_published,
        )
        if outcome.ok:
            self.form = outcome.state
        return outcome

    def set_breed_visibility(self, index: int, make_public: bool) -> Outcome:
        return self.edit({"type": "set_breed_visibility", "index": index, "value": make_public})

    def can_remove_breed(self, name: str) -> RemovalCheck:
        return can_remove_breed(
            self.form, name, linked_breeds=self.linked_breeds, is_published=self.is_published
        )

    def remove_breed(self, index: int) -> Outcome:
        return self.edit({"type": "remove_breed", "index": index})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def save_draft(self) -> ActionResult:
        if self.saving:
            return ActionResult(False, "A save is already in progress")
        if not self.has_changes:
            return ActionResult(False, "No changes to save")

        self.saving = True
        submitted = copy.deepcopy(self.form)
        try:
            await self.backend.save_draft(self.tenant_id, submitted)
        except ApiError as exc:
            message = exc.message or "Failed to save draft"
            logger.error("Saving draft for tenant %s failed: %s", self.tenant_id, message)
            return ActionResult(False, message)
        finally:
            self.saving = False

        if self.cancelled:
            return ActionResult(True, "Draft saved")
        self._tracker.reset(submitted)
        logger.info("Saved draft for tenant %s", self.tenant_id)
        await self._refresh_status()
        return ActionResult(True, "Draft saved")

    async def publish(self) -> ActionResult:
        """
        Publish the current form, or republish it when already live.

        Blocked locally, without any request, when the form lacks a business
        name or breeds.
        """
        issues = check_publish_ready(self.form)
        if issues:
            return ActionResult(False, issues[0].message, issues)
        if self.publishing:
            return ActionResult(False, "Publishing is already in progress")

        self.publishing = True
        submitted = copy.deepcopy(self.form)
        try:
            await self.backend.publish(self.tenant_id, submitted)
        except ApiError as exc:
            message = exc.message or "Failed to publish profile"
            logger.error("Publishing profile for tenant %s failed: %s", self.tenant_id, message)
            return ActionResult(False, message)
        finally:
            self.publishing = False

        if self.cancelled:
            return ActionResult(True, "Profile published")
        self._tracker.reset(submitted)
        logger.info("Published profile for tenant %s", self.tenant_id)
        await self._refresh_status()
        if not self.published_at and not self.cancelled:
            self.published_at = datetime.now(timezone.utc).isoformat()
        return ActionResult(True, "Profile published")

    async def unpublish(self, confirm: Callable[[str], bool] | None = None) -> ActionResult:
        """
        Take the storefront off the marketplace. The draft and form are kept.

        Args:
            confirm: Called with the prompt text; unpublishing only proceeds
                when it returns True.
        """
        if confirm is None or not confirm(UNPUBLISH_PROMPT):
            return ActionResult(False, "Unpublish cancelled")
        if self.publishing:
            return ActionResult(False, "Publishing is already in progress")

        self.publishing = True
        try:
            await self.backend.unpublish(self.tenant_id)
        except ApiError as exc:
            message = exc.message or "Failed to unpublish profile"
            logger.error("Unpublishing profile for tenant %s failed: %s", self.tenant_id, message)
            return ActionResult(False, message)
        finally:
            self.publishing = False

        if self.cancelled:
            return ActionResult(True, "Profile unpublished")
        self.published_at = None
        logger.info("Unpublished profile for tenant %s", self.tenant_id)
        await self._refresh_status()
        return ActionResult(True, "Profile unpublished")


async def open_editor(
    context: TenantContext,
    backend: StorefrontBackend | None = None,
) -> tuple[StorefrontEditor, ActionResult]:
    """Build an editor for ``context`` (HTTP backend by default) and load it."""
    editor = StorefrontEditor(context, backend or StorefrontClient.from_context(context))
    result = await editor.load()
    return editor, result
