"""Tests for the autosave scheduler.

Timers are fired by hand so the tests never wait on the wall clock.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from pika_docs.autosave.scheduler import SaveScheduler
from pika_docs.autosave.status import SaveStatus
from pika_docs.config import AutosaveProfile
from pika_docs.errors import TransientPersistenceError
from pika_docs.models.history import SaveTrigger
from tests.support import FakeClock, GatedSave, doc

_PROFILE = AutosaveProfile(debounce_ms=5000, min_interval_ms=15000)


def _fire_debounce(scheduler: SaveScheduler) -> None:
    handle = scheduler._debounce_handle  # noqa: SLF001
    assert handle is not None
    handle.cancel()
    scheduler._on_debounce()  # noqa: SLF001


def _fire_throttle(scheduler: SaveScheduler, trigger: SaveTrigger = SaveTrigger.AUTOSAVE) -> None:
    handle = scheduler._throttle_handle  # noqa: SLF001
    assert handle is not None
    handle.cancel()
    scheduler._on_throttle(trigger)  # noqa: SLF001


@pytest.fixture
def save() -> AsyncMock:
    return AsyncMock(return_value="ok")


@pytest.fixture
def scheduler(save: AsyncMock, clock: FakeClock) -> SaveScheduler:
    return SaveScheduler(save, _PROFILE, clock=clock)


class TestDebounce:
    async def test_edit_marks_unsaved_without_saving(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        scheduler.notify_edit(doc("a"))

        assert scheduler.status == SaveStatus.UNSAVED
        assert scheduler.has_pending_timers
        save.assert_not_awaited()
        scheduler.close()

    async def test_quiet_period_saves_latest_edit(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        scheduler.notify_edit(doc("a"))
        scheduler.notify_edit(doc("ab"))
        _fire_debounce(scheduler)
        await scheduler.drain()

        save.assert_awaited_once_with(doc("ab"), SaveTrigger.AUTOSAVE)
        assert scheduler.status == SaveStatus.SAVED
        assert scheduler.last_saved_snapshot == doc("ab")

    async def test_each_edit_rearms_the_timer(self, scheduler: SaveScheduler) -> None:
        scheduler.notify_edit(doc("a"))
        first = scheduler._debounce_handle  # noqa: SLF001
        scheduler.notify_edit(doc("ab"))

        assert first is not None
        assert first.cancelled()
        scheduler.close()


class TestIdempotence:
    async def test_unchanged_content_is_not_sent_twice(
        self, scheduler: SaveScheduler, save: AsyncMock, clock: FakeClock
    ) -> None:
        scheduler.notify_edit(doc("a"))
        _fire_debounce(scheduler)
        await scheduler.drain()
        clock.advance(60)

        task = scheduler.schedule(doc("a"))

        assert task is None
        assert save.await_count == 1
        assert scheduler.status == SaveStatus.SAVED

    async def test_edit_back_to_saved_value_settles_saved(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        scheduler.notify_edit(doc("a"))
        scheduler.notify_edit(doc())
        _fire_debounce(scheduler)

        save.assert_not_awaited()
        assert scheduler.status == SaveStatus.SAVED


class TestThrottle:
    async def test_second_attempt_waits_for_min_interval(
        self, scheduler: SaveScheduler, save: AsyncMock, clock: FakeClock
    ) -> None:
        scheduler.notify_edit(doc("A"))
        _fire_debounce(scheduler)
        await scheduler.drain()

        clock.advance(5)
        scheduler.notify_edit(doc("B"))
        _fire_debounce(scheduler)

        assert save.await_count == 1
        handle = scheduler._throttle_handle  # noqa: SLF001
        assert handle is not None
        wait = handle.when() - asyncio.get_running_loop().time()
        assert wait == pytest.approx(10, abs=0.5)
        scheduler.close()

    async def test_throttled_save_sends_newest_edit(
        self, scheduler: SaveScheduler, save: AsyncMock, clock: FakeClock
    ) -> None:
        scheduler.notify_edit(doc("A"))
        _fire_debounce(scheduler)
        await scheduler.drain()

        clock.advance(5)
        scheduler.notify_edit(doc("B"))
        _fire_debounce(scheduler)
        scheduler.notify_edit(doc("C"))
        clock.advance(10)
        _fire_throttle(scheduler)
        await scheduler.drain()

        assert save.await_args_list == [
            call(doc("A"), SaveTrigger.AUTOSAVE),
            call(doc("C"), SaveTrigger.AUTOSAVE),
        ]
        _fire_debounce(scheduler)
        assert save.await_count == 2
        assert scheduler.status == SaveStatus.SAVED
        scheduler.close()

    async def test_force_bypasses_min_interval(
        self, scheduler: SaveScheduler, save: AsyncMock, clock: FakeClock
    ) -> None:
        scheduler.notify_edit(doc("A"))
        _fire_debounce(scheduler)
        await scheduler.drain()

        clock.advance(1)
        scheduler.notify_edit(doc("B"))
        task = scheduler.schedule(doc("B"), SaveTrigger.FORCE, force=True)

        assert task is not None
        assert await task is True
        assert save.await_count == 2
        scheduler.close()


class TestFlush:
    async def test_flush_sends_the_last_edit(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        for text in ("a", "ab", "abc"):
            scheduler.notify_edit(doc(text))

        task = scheduler.flush()

        assert task is not None
        await task
        save.assert_awaited_once_with(doc("abc"), SaveTrigger.BLUR)
        assert not scheduler.has_pending_timers
        assert scheduler.status == SaveStatus.SAVED

    async def test_flush_ignores_min_interval(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        scheduler.notify_edit(doc("a"))
        await scheduler.flush()
        scheduler.notify_edit(doc("b"))

        task = scheduler.flush(SaveTrigger.FORCE)

        assert task is not None
        await task
        assert save.await_args == call(doc("b"), SaveTrigger.FORCE)

    async def test_flush_with_nothing_pending_is_a_no_op(self, scheduler: SaveScheduler) -> None:
        assert scheduler.flush() is None

    async def test_flush_during_save_sends_newer_edit(self, clock: FakeClock) -> None:
        save = GatedSave()
        scheduler = SaveScheduler(save, _PROFILE, clock=clock)
        scheduler.notify_edit(doc("a"))
        first = scheduler.flush()
        scheduler.notify_edit(doc("ab"))

        second = scheduler.flush()
        await asyncio.sleep(0)

        assert first is not None
        assert second is not None
        assert [c[0] for c in save.calls] == [doc("a"), doc("ab")]
        save.release(0)
        save.release(1)
        await scheduler.drain()
        assert scheduler.status == SaveStatus.SAVED
        assert scheduler.last_saved_snapshot == doc("ab")


class TestFailures:
    async def test_expected_failure_leaves_draft_unsaved(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        save.side_effect = [TransientPersistenceError("offline"), "ok"]
        scheduler.notify_edit(doc("a"))

        assert await scheduler.flush() is False
        assert scheduler.status == SaveStatus.UNSAVED
        assert scheduler.content == doc("a")

        assert await scheduler.flush() is True
        assert scheduler.status == SaveStatus.SAVED

    async def test_unexpected_error_propagates_after_reset(
        self, scheduler: SaveScheduler, save: AsyncMock
    ) -> None:
        save.side_effect = RuntimeError("bug")
        scheduler.notify_edit(doc("a"))
        task = scheduler.flush()

        assert task is not None
        with pytest.raises(RuntimeError, match="bug"):
            await task
        assert scheduler.status == SaveStatus.UNSAVED
        assert scheduler.in_flight == 0


class TestResponseOrdering:
    async def test_older_response_never_overwrites_newer(self, clock: FakeClock) -> None:
        save = GatedSave()
        on_saved = MagicMock()
        scheduler = SaveScheduler(save, _PROFILE, clock=clock, on_saved=on_saved)
        scheduler.notify_edit(doc("a"))
        scheduler.flush()
        scheduler.notify_edit(doc("ab"))
        second = scheduler.flush()
        await asyncio.sleep(0)

        save.release(1, "second")
        assert second is not None
        await second
        assert scheduler.status == SaveStatus.SAVING

        save.release(0, "first")
        await scheduler.drain()

        assert scheduler.last_saved_snapshot == doc("ab")
        assert scheduler.status == SaveStatus.SAVED
        on_saved.assert_called_once_with("second")

    async def test_edit_while_saving_stays_unsaved_after_response(
        self, clock: FakeClock
    ) -> None:
        save = GatedSave()
        scheduler = SaveScheduler(save, _PROFILE, clock=clock)
        scheduler.notify_edit(doc("a"))
        scheduler.flush()
        scheduler.notify_edit(doc("ab"))
        await asyncio.sleep(0)

        save.release(0)
        await scheduler.drain()

        assert scheduler.status == SaveStatus.UNSAVED
        assert scheduler.last_saved_snapshot == doc("a")
        scheduler.close()

    async def test_replace_content_ignores_earlier_responses(self, clock: FakeClock) -> None:
        save = GatedSave()
        on_saved = MagicMock()
        scheduler = SaveScheduler(save, _PROFILE, clock=clock, on_saved=on_saved)
        scheduler.notify_edit(doc("draft"))
        scheduler.flush()
        await asyncio.sleep(0)

        scheduler.replace_content(doc("restored"))
        save.release(0, "late")
        await scheduler.drain()

        assert scheduler.content == doc("restored")
        assert scheduler.last_saved_snapshot == doc("restored")
        assert scheduler.status == SaveStatus.SAVED
        on_saved.assert_not_called()


class TestDraftRestore:
    async def test_dirty_draft_is_rescheduled(self, scheduler: SaveScheduler) -> None:
        scheduler.restore_draft(doc("kept"))

        assert scheduler.status == SaveStatus.UNSAVED
        assert scheduler.has_pending_timers
        scheduler.close()

    async def test_clean_draft_is_saved(self, scheduler: SaveScheduler) -> None:
        scheduler.restore_draft(doc())

        assert scheduler.status == SaveStatus.SAVED
        assert not scheduler.has_pending_timers


async def test_close_cancels_timers(scheduler: SaveScheduler, save: AsyncMock) -> None:
    scheduler.notify_edit(doc("a"))

    scheduler.close()

    assert not scheduler.has_pending_timers
    save.assert_not_awaited()
