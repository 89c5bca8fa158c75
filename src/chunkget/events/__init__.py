"""Event infrastructure - event emitter and event types."""

from .base import BaseEmitter
from .emitter import EventEmitter
from .models import (
    BaseEvent,
    ChunkCompletedEvent,
    ChunkEvent,
    ChunkFailedEvent,
    DownloadCompletedEvent,
    DownloadEvent,
    DownloadFailedEvent,
    DownloadStartedEvent,
)
from .null import NullEmitter

__all__ = [
    "BaseEmitter",
    "EventEmitter",
    "NullEmitter",
    "BaseEvent",
    "DownloadEvent",
    "DownloadStartedEvent",
    "DownloadCompletedEvent",
    "DownloadFailedEvent",
    "ChunkEvent",
    "ChunkCompletedEvent",
    "ChunkFailedEvent",
]
