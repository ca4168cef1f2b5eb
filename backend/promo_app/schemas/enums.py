from __future__ import annotations

from enum import Enum


class MessageType(str, Enum):
    START_GENERATION = "START_GENERATION"
    CANCEL_GENERATION = "CANCEL_GENERATION"
    PROGRESS_UPDATE = "PROGRESS_UPDATE"
    PARTIAL_FILE_GENERATED = "PARTIAL_FILE_GENERATED"
    GENERATION_COMPLETE = "GENERATION_COMPLETE"
    GENERATION_CANCELLED = "GENERATION_CANCELLED"
    ERROR = "ERROR"


class GenerationStatus(str, Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"
