"""Preview and restore of past versions alongside the live draft."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from pika_docs.errors import DocumentLockedError, PersistenceError, StaleReferenceError
from pika_docs.models.content import clone_content

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime

    from pika_docs.autosave.scheduler import SaveScheduler
    from pika_docs.client.base import SaveResult
    from pika_docs.history.log import HistoryLog
    from pika_docs.models.content import Content
    from pika_docs.models.history import HistoryEntry

logger = logging.getLogger(__name__)

ENTRY_NOT_FOUND = "History entry not found"
LOCKED_MESSAGE = "Cannot restore a submitted document"


class WorkflowState(StrEnum):
    EDITING = "editing"
    PREVIEWING = "previewing"
    CONFIRMING_RESTORE = "confirming_restore"


@dataclass(frozen=True)
class RestoreConfirmation:
    """What the confirmation step shows before a restore overwrites the draft."""

    entry_id: str
    created_at: datetime
    char_count: int


class PreviewRestoreWorkflow:
    """editing -> previewing -> (editing | confirming_restore) -> editing.

    Previewing never touches the live draft. The draft is captured when
    preview starts and handed back unchanged when preview ends without a
    restore.
    """

    def __init__(
        self,
        scheduler: SaveScheduler,
        history: HistoryLog,
        restore: Callable[[str], Awaitable[SaveResult]],
        *,
        is_locked: Callable[[], bool],
    ) -> None:
        self._scheduler = scheduler
        self._history = history
        self._restore = restore
        self._is_locked = is_locked
        self.state = WorkflowState.EDITING
        self.preview_entry: HistoryEntry | None = None
        self.preview_content: Content | None = None
        self.error = ""
        self._draft_before_preview: Content | None = None

    @property
    def is_previewing(self) -> bool:
        return self.state != WorkflowState.EDITING

    def preview(self, entry_id: str) -> Content | None:
        """Show the content as of ``entry_id`` read-only.

        Returns None and records a message when the entry is unknown; the
        workflow state is left as it was.
        """
        if self.state == WorkflowState.CONFIRMING_RESTORE:
            return None
        entry = self._history.find(entry_id)
        content = self._history.content_at(entry_id) if entry else None
        if entry is None or content is None:
            self.error = ENTRY_NOT_FOUND
            logger.info("Preview target missing: entry=%s", entry_id)
            return None

        if self._draft_before_preview is None:
            self._draft_before_preview = clone_content(self._scheduler.content)
        self.error = ""
        self.preview_entry = entry
        self.preview_content = content
        self.state = WorkflowState.PREVIEWING
        return content

    def request_restore(self) -> RestoreConfirmation | None:
        """Ask for confirmation to restore the previewed entry."""
        if self.state != WorkflowState.PREVIEWING or self.preview_entry is None:
            return None
        if self._is_locked():
            self.error = LOCKED_MESSAGE
            return None
        self.state = WorkflowState.CONFIRMING_RESTORE
        entry = self.preview_entry
        return RestoreConfirmation(entry.id, entry.created_at, entry.char_count)

    def cancel_restore(self) -> None:
        if self.state == WorkflowState.CONFIRMING_RESTORE:
            self.state = WorkflowState.PREVIEWING

    async def confirm_restore(self) -> bool:
        """Restore the previewed entry. On failure stay in preview with an error.

        Pending timers are cancelled and saves already sent are awaited first,
        so no earlier save can land on the server after the restore.
        """
        if self.state != WorkflowState.CONFIRMING_RESTORE or self.preview_entry is None:
            return False
        entry_id = self.preview_entry.id
        self.error = ""
        try:
            if self._is_locked():
                raise DocumentLockedError(LOCKED_MESSAGE)
            self._scheduler.close()
            await self._scheduler.drain()
            result = await self._restore(entry_id)
        except StaleReferenceError:
            self.error = ENTRY_NOT_FOUND
            self.state = WorkflowState.PREVIEWING
            return False
        except PersistenceError as exc:
            self.error = str(exc) or "Failed to restore"
            self.state = WorkflowState.PREVIEWING
            logger.warning("Restore failed: entry=%s error=%s", entry_id, self.error)
            return False

        self._scheduler.replace_content(result.doc.content)
        if result.history_entry is not None:
            self._history.merge(result.history_entry)
        await self._history.refresh()
        logger.info("Restored version: entry=%s", entry_id)
        self._leave_preview(restore_draft=False)
        return True

    def exit_preview(self) -> None:
        """Return to editing with the draft exactly as it was before preview."""
        if self.state == WorkflowState.EDITING:
            return
        self._leave_preview(restore_draft=True)

    def _leave_preview(self, *, restore_draft: bool) -> None:
        if restore_draft and self._draft_before_preview is not None:
            self._scheduler.restore_draft(self._draft_before_preview)
        self.state = WorkflowState.EDITING
        self.preview_entry = None
        self.preview_content = None
        self._draft_before_preview = None
