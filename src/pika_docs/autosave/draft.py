"""In-memory state of one editing session."""

from __future__ import annotations

from dataclasses import dataclass, field

from pika_docs.autosave.status import SaveStatus, SaveStatusMachine
from pika_docs.models.content import Content, contents_equal


@dataclass
class DraftState:
    """What the user sees, what is known to be durable, and what is still unsent.

    Whenever ``status`` is ``saved``, ``content`` equals ``last_saved_snapshot``.
    """

    content: Content
    last_saved_snapshot: Content
    pending_value: Content | None = None
    machine: SaveStatusMachine = field(default_factory=SaveStatusMachine)

    @property
    def status(self) -> SaveStatus:
        return self.machine.state

    @property
    def is_dirty(self) -> bool:
        return not contents_equal(self.content, self.last_saved_snapshot)
