"""Save status state machine: saved | saving | unsaved."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class SaveStatus(StrEnum):
    SAVED = "saved"
    SAVING = "saving"
    UNSAVED = "unsaved"


# A document never goes straight from saved to saving: a network call is only
# issued for content that differs from the last durable snapshot, which
# requires an edit first.
_TRANSITIONS: dict[SaveStatus, frozenset[SaveStatus]] = {
    SaveStatus.SAVED: frozenset({SaveStatus.SAVED, SaveStatus.UNSAVED}),
    SaveStatus.UNSAVED: frozenset({SaveStatus.UNSAVED, SaveStatus.SAVING, SaveStatus.SAVED}),
    SaveStatus.SAVING: frozenset({SaveStatus.SAVING, SaveStatus.SAVED, SaveStatus.UNSAVED}),
}


class InvalidTransitionError(RuntimeError):
    """Raised when code asks for a transition the machine does not allow."""


class SaveStatusMachine:
    """Tracks the save status of one draft.

    Only edits, scheduler decisions and network responses move it; nothing
    here depends on the passage of time.
    """

    def __init__(self, initial: SaveStatus = SaveStatus.SAVED) -> None:
        if initial == SaveStatus.SAVING:
            raise InvalidTransitionError("A draft cannot start in the saving state")
        self._state = initial
        self._listeners: list[Callable[[SaveStatus, SaveStatus], None]] = []

    @property
    def state(self) -> SaveStatus:
        return self._state

    def subscribe(self, listener: Callable[[SaveStatus, SaveStatus], None]) -> None:
        """Call ``listener(old, new)`` whenever the state changes."""
        self._listeners.append(listener)

    def can_transition(self, target: SaveStatus) -> bool:
        return target in _TRANSITIONS[self._state]

    def transition(self, target: SaveStatus) -> None:
        if not self.can_transition(target):
            raise InvalidTransitionError(f"{self._state} -> {target} is not allowed")
        previous, self._state = self._state, target
        if previous != target:
            logger.debug("Save status %s -> %s", previous, target)
            for listener in self._listeners:
                listener(previous, target)

    def edit(self) -> None:
        self.transition(SaveStatus.UNSAVED)

    def issue(self) -> None:
        self.transition(SaveStatus.SAVING)

    def resolve(self, *, matches_draft: bool) -> None:
        """Settle after the last outstanding response succeeded."""
        self.transition(SaveStatus.SAVED if matches_draft else SaveStatus.UNSAVED)

    def fail(self) -> None:
        self.transition(SaveStatus.UNSAVED)
