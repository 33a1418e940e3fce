"""Autosave scheduler: debounce plus minimum-interval throttling with forced flush.

Turns a high-frequency stream of edit notifications into a low-frequency
stream of save calls without ever dropping the final edit. Timers are
cancellable ``loop.call_later`` handles owned by the scheduler instance, so
all scheduling logic for a document runs on one event loop.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import TYPE_CHECKING, Any

from pika_docs.autosave.draft import DraftState
from pika_docs.autosave.status import SaveStatus, SaveStatusMachine
from pika_docs.errors import PersistenceError
from pika_docs.models.content import Content, clone_content, contents_equal, empty_content
from pika_docs.models.history import SaveTrigger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pika_docs.config import AutosaveProfile

logger = logging.getLogger(__name__)


class SaveScheduler:
    """Decides when to call ``save`` for one document.

    ``save(content, trigger)`` is the persistence callback. It may raise a
    :class:`~pika_docs.errors.PersistenceError` for expected failures, which
    leave the draft ``unsaved`` until the next edit or flush. ``on_saved`` is
    called with the callback's result for every response that is applied.
    """

    def __init__(
        self,
        save: Callable[[Content, SaveTrigger], Awaitable[Any]],
        profile: AutosaveProfile,
        *,
        initial_content: Content | None = None,
        on_saved: Callable[[Any], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        label: str = "document",
    ) -> None:
        content = initial_content if initial_content is not None else empty_content()
        self._save = save
        self._debounce_s = profile.debounce_ms / 1000
        self._min_interval_s = profile.min_interval_ms / 1000
        self._on_saved = on_saved
        self._clock = clock
        self._label = label
        self._draft = DraftState(
            content=clone_content(content),
            last_saved_snapshot=clone_content(content),
            machine=SaveStatusMachine(),
        )
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._throttle_handle: asyncio.TimerHandle | None = None
        self._last_attempt_at: float | None = None
        self._last_sent: Content | None = None
        self._issued_seq = 0
        self._applied_seq = 0
        self._epoch_seq = 0
        self._in_flight: dict[int, asyncio.Task[bool]] = {}

    @property
    def draft(self) -> DraftState:
        return self._draft

    @property
    def status(self) -> SaveStatus:
        return self._draft.status

    @property
    def content(self) -> Content:
        return self._draft.content

    @property
    def last_saved_snapshot(self) -> Content:
        return self._draft.last_saved_snapshot

    @property
    def pending_value(self) -> Content | None:
        return self._draft.pending_value

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def has_pending_timers(self) -> bool:
        return self._debounce_handle is not None or self._throttle_handle is not None

    def notify_edit(self, content: Content) -> None:
        """Record a local edit and (re)arm the debounce timer."""
        self._draft.content = content
        self._draft.pending_value = content
        self._draft.machine.edit()
        self._cancel_debounce()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self._debounce_s, self._on_debounce)

    def schedule(
        self,
        content: Content,
        trigger: SaveTrigger = SaveTrigger.AUTOSAVE,
        *,
        force: bool = False,
    ) -> asyncio.Task[bool] | None:
        """Save now if allowed, otherwise arm the throttle timer.

        Returns the save task when a call was issued immediately.
        """
        self._draft.pending_value = content
        self._cancel_throttle()

        elapsed = (
            math.inf if self._last_attempt_at is None else self._clock() - self._last_attempt_at
        )
        if force or elapsed >= self._min_interval_s:
            return self._issue(content, trigger)

        wait = self._min_interval_s - elapsed
        loop = asyncio.get_running_loop()
        self._throttle_handle = loop.call_later(wait, self._on_throttle, trigger)
        logger.debug("Autosave throttled: doc=%s wait_ms=%.0f", self._label, wait * 1000)
        return None

    def flush(self, trigger: SaveTrigger = SaveTrigger.BLUR) -> asyncio.Task[bool] | None:
        """Send the pending edit right away, bypassing debounce and throttle waits.

        In-flight saves are left running; callers that need durability before
        a terminal action should ``await drain()`` afterwards.
        """
        pending = self._draft.pending_value
        if self.status != SaveStatus.UNSAVED or pending is None:
            return None
        self._cancel_debounce()
        self._cancel_throttle()
        return self.schedule(pending, trigger, force=True)

    async def drain(self) -> None:
        """Wait for every in-flight save to finish."""
        while self._in_flight:
            results = await asyncio.gather(*self._in_flight.values(), return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    raise result

    def replace_content(self, content: Content) -> None:
        """Adopt an authoritative server value (initial load, restore).

        Responses of saves issued before this call are ignored.
        """
        self._cancel_debounce()
        self._cancel_throttle()
        self._epoch_seq = self._issued_seq
        self._draft.content = clone_content(content)
        self._draft.last_saved_snapshot = clone_content(content)
        self._draft.pending_value = None
        self._last_sent = None
        self._draft.machine.transition(SaveStatus.SAVED)

    def restore_draft(self, content: Content) -> None:
        """Put back a draft captured earlier in this session, e.g. after a preview.

        A draft that differs from the durable snapshot is scheduled for saving
        like a fresh edit.
        """
        if not contents_equal(content, self._draft.last_saved_snapshot):
            self.notify_edit(content)
            return
        self._draft.content = content
        self._draft.pending_value = content
        if not self._in_flight:
            self._draft.machine.transition(SaveStatus.SAVED)

    def close(self) -> None:
        """Cancel timers. Saves already in flight keep running."""
        self._cancel_debounce()
        self._cancel_throttle()

    def _on_debounce(self) -> None:
        self._debounce_handle = None
        pending = self._draft.pending_value
        if pending is not None:
            self.schedule(pending, SaveTrigger.AUTOSAVE)

    def _on_throttle(self, trigger: SaveTrigger) -> None:
        self._throttle_handle = None
        latest = self._draft.pending_value
        if latest is not None:
            self._issue(latest, trigger)

    def _issue(self, content: Content, trigger: SaveTrigger) -> asyncio.Task[bool] | None:
        # While a save is outstanding the server will end up holding the
        # latest sent value, so that is what an unchanged check compares to.
        baseline = self._last_sent if self._in_flight else self._draft.last_saved_snapshot
        if contents_equal(content, baseline):
            if not self._in_flight and not self._draft.is_dirty:
                self._draft.machine.transition(SaveStatus.SAVED)
            logger.debug("Autosave skipped, content unchanged: doc=%s", self._label)
            return None

        self._issued_seq += 1
        seq = self._issued_seq
        self._draft.machine.issue()
        self._last_attempt_at = self._clock()
        sent = clone_content(content)
        self._last_sent = sent
        task = asyncio.create_task(self._run(seq, sent, trigger))
        self._in_flight[seq] = task
        logger.info("Autosave issued: doc=%s seq=%d trigger=%s", self._label, seq, trigger)
        return task

    async def _run(self, seq: int, content: Content, trigger: SaveTrigger) -> bool:
        try:
            result = await self._save(content, trigger)
        except PersistenceError as exc:
            self._in_flight.pop(seq, None)
            logger.warning("Autosave failed: doc=%s seq=%d error=%s", self._label, seq, exc)
            self._apply_failure(seq)
            return False
        except Exception:
            self._in_flight.pop(seq, None)
            self._apply_failure(seq)
            raise
        self._in_flight.pop(seq, None)
        self._apply_success(seq, content, result)
        return True

    def _apply_success(self, seq: int, content: Content, result: Any) -> None:
        if seq <= self._epoch_seq:
            logger.debug("Dropped response from before content reset: seq=%d", seq)
            self._settle()
            return
        if seq <= self._applied_seq:
            logger.debug(
                "Dropped out-of-order response: seq=%d applied=%d", seq, self._applied_seq
            )
            self._settle()
            return
        self._applied_seq = seq
        self._draft.last_saved_snapshot = content
        self._settle()
        logger.info("Autosave succeeded: doc=%s seq=%d status=%s", self._label, seq, self.status)
        if self._on_saved is not None:
            self._on_saved(result)

    def _apply_failure(self, seq: int) -> None:
        if seq <= self._epoch_seq:
            self._settle()
            return
        if not self._in_flight:
            self._draft.machine.fail()

    def _settle(self) -> None:
        if self._in_flight:
            return
        if self.status == SaveStatus.SAVING or not self._draft.is_dirty:
            self._draft.machine.resolve(matches_draft=not self._draft.is_dirty)

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _cancel_throttle(self) -> None:
        if self._throttle_handle is not None:
            self._throttle_handle.cancel()
            self._throttle_handle = None
