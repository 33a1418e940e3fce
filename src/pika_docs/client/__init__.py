"""Persistence clients: the boundary between the editor core and the backend."""

from pika_docs.client.base import PersistenceClient, SaveResult
from pika_docs.client.http import (
    HttpAssignmentDocClient,
    HttpInstructionsClient,
    create_http_client,
)

__all__ = [
    "HttpAssignmentDocClient",
    "HttpInstructionsClient",
    "PersistenceClient",
    "SaveResult",
    "create_http_client",
]
