"""Upload strategy selection and chunked upload sessions."""

from __future__ import annotations

from .decider import ChunkRange, Strategy, TransferPlan, plan
from .session import UPLOAD_ENDPOINT, SessionState, UploadSession

__all__ = [
    "ChunkRange",
    "Strategy",
    "TransferPlan",
    "plan",
    "UPLOAD_ENDPOINT",
    "SessionState",
    "UploadSession",
]
