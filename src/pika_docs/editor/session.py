"""Editing sessions: the autosave call sites wired to their backends.

``AssignmentDocSession`` drives a student's response (autosave, history,
preview/restore, submit). ``InstructionsSession`` drives a teacher's
assignment instructions (autosave only). Both are thin configurations of the
same :class:`~pika_docs.autosave.scheduler.SaveScheduler`.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from pika_docs.autosave.scheduler import SaveScheduler
from pika_docs.autosave.status import SaveStatus
from pika_docs.editor.preview import PreviewRestoreWorkflow
from pika_docs.errors import PersistenceError
from pika_docs.history.log import HistoryLog
from pika_docs.models.history import SaveTrigger

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable, Callable

    from pika_docs.client.base import PersistenceClient, SaveResult
    from pika_docs.config import AutosaveProfile
    from pika_docs.models.assignment import Assignment
    from pika_docs.models.assignment_doc import AssignmentDoc
    from pika_docs.models.content import Content

logger = logging.getLogger(__name__)


class AssignmentDocSession:
    """A student's editing session on one assignment response."""

    def __init__(
        self,
        client: PersistenceClient,
        doc: AssignmentDoc,
        profile: AutosaveProfile,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self.doc = doc
        self.error = ""
        self.scheduler = SaveScheduler(
            client.save,
            profile,
            initial_content=doc.content,
            on_saved=self._on_saved,
            clock=clock,
            label=doc.id,
        )
        self.history = HistoryLog(client.list_history)
        self.workflow = PreviewRestoreWorkflow(
            self.scheduler,
            self.history,
            client.restore,
            is_locked=lambda: self.doc.is_submitted,
        )

    @classmethod
    async def open(
        cls,
        client: PersistenceClient,
        profile: AutosaveProfile,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> AssignmentDocSession:
        """Load the document and its history and start a session."""
        doc = await client.load()
        session = cls(client, doc, profile, clock=clock)
        await session.history.refresh()
        logger.info("Session opened: doc=%s history=%d", doc.id, len(session.history))
        return session

    @property
    def status(self) -> SaveStatus:
        return self.scheduler.status

    @property
    def content(self) -> Content:
        return self.scheduler.content

    @property
    def is_editable(self) -> bool:
        return self.doc.is_editable and not self.workflow.is_previewing

    def on_change(self, content: Content) -> None:
        """Editor change notification. Ignored while read-only or previewing."""
        if not self.is_editable:
            return
        self.scheduler.notify_edit(content)

    def on_blur(self) -> asyncio.Task[bool] | None:
        return self.scheduler.flush(SaveTrigger.BLUR)

    async def save_now(self) -> bool:
        """Flush pending edits and wait until nothing is in flight."""
        self.scheduler.flush(SaveTrigger.FORCE)
        await self.scheduler.drain()
        return self.scheduler.status == SaveStatus.SAVED

    async def submit(self) -> bool:
        """Save pending edits, then submit. The document becomes read-only."""
        self.error = ""
        if not await self.save_now():
            self.error = "Unsaved changes could not be saved"
            return False
        try:
            self.doc = await self._client.submit()
        except PersistenceError as exc:
            self.error = str(exc) or "Failed to submit"
            logger.warning("Submit failed: doc=%s error=%s", self.doc.id, self.error)
            return False
        self.workflow.exit_preview()
        logger.info("Submitted: doc=%s", self.doc.id)
        return True

    async def unsubmit(self) -> bool:
        self.error = ""
        try:
            self.doc = await self._client.unsubmit()
        except PersistenceError as exc:
            self.error = str(exc) or "Failed to unsubmit"
            return False
        logger.info("Unsubmitted: doc=%s", self.doc.id)
        return True

    async def close(self) -> bool:
        """End the session. Returns False when the last edit could not be saved."""
        self.workflow.exit_preview()
        saved = await self.save_now()
        self.scheduler.close()
        return saved

    def _on_saved(self, result: SaveResult) -> None:
        self.doc = result.doc
        entry = result.history_entry
        if entry is None:
            return
        self.history.merge(entry)
        if self.workflow.preview_entry is not None and self.workflow.preview_entry.id == entry.id:
            self.workflow.preview_entry = entry


class InstructionsSession:
    """A teacher's editing session on an assignment's instructions."""

    def __init__(
        self,
        save: Callable[[Content, SaveTrigger], Awaitable[Assignment]],
        assignment: Assignment,
        profile: AutosaveProfile,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.assignment = assignment
        self.scheduler = SaveScheduler(
            save,
            profile,
            initial_content=assignment.instructions,
            on_saved=self._on_saved,
            clock=clock,
            label=assignment.id,
        )

    @property
    def status(self) -> SaveStatus:
        return self.scheduler.status

    def on_change(self, content: Content) -> None:
        self.scheduler.notify_edit(content)

    def on_blur(self) -> asyncio.Task[bool] | None:
        return self.scheduler.flush(SaveTrigger.BLUR)

    async def close(self) -> bool:
        """Flush before the modal closes or the assignment is released."""
        self.scheduler.flush(SaveTrigger.FORCE)
        await self.scheduler.drain()
        self.scheduler.close()
        return self.scheduler.status == SaveStatus.SAVED

    def _on_saved(self, assignment: Assignment) -> None:
        self.assignment = assignment
