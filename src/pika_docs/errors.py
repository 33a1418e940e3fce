"""Error taxonomy shared by the services, the HTTP layer and the persistence clients."""

from __future__ import annotations


class PersistenceError(Exception):
    """Base class for expected failures when reading or writing a document."""


class ValidationError(PersistenceError):
    """Malformed content or a missing identifier. Not retried."""


class TransientPersistenceError(PersistenceError):
    """Network or server failure. Retried only by a later edit or an explicit flush."""


class StaleReferenceError(PersistenceError):
    """A history entry that is no longer present in the document's history."""


class DocumentLockedError(PersistenceError):
    """The document is submitted and cannot be changed."""


class AccessDeniedError(PersistenceError):
    """The acting user may not read or change the document."""


class NotFoundError(PersistenceError):
    """The assignment or document does not exist."""
