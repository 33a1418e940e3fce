"""Editor-facing sessions and the preview/restore workflow."""

from pika_docs.editor.preview import PreviewRestoreWorkflow, RestoreConfirmation, WorkflowState
from pika_docs.editor.session import AssignmentDocSession, InstructionsSession

__all__ = [
    "AssignmentDocSession",
    "InstructionsSession",
    "PreviewRestoreWorkflow",
    "RestoreConfirmation",
    "WorkflowState",
]
