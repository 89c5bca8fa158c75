"""Event models emitted during a chunked download."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class BaseEvent(BaseModel):
    """Immutable base for all events."""

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC timestamp when the event occurred",
    )


class DownloadEvent(BaseEvent):
    """Base class for whole-download lifecycle events."""

    url: str = Field(description="The URL being downloaded")
    event_type: str = Field(default="download.base")


class DownloadStartedEvent(DownloadEvent):
    """Emitted once the resource size is known and chunks are planned."""

    event_type: str = Field(default="download.started")
    total_bytes: int = Field(ge=0, description="Total resource size")
    chunk_count: int = Field(ge=0, description="Number of planned chunks")


class DownloadCompletedEvent(DownloadEvent):
    """Emitted after every chunk has been written."""

    event_type: str = Field(default="download.completed")
    total_bytes: int = Field(ge=0, description="Bytes written to the sink")
    elapsed_seconds: float = Field(ge=0)


class DownloadFailedEvent(DownloadEvent):
    """Emitted when the download stops on its first fatal error."""

    event_type: str = Field(default="download.failed")
    offset: int = Field(ge=0, description="Offset of the failing chunk")
    error_message: str = Field(default="")
    error_type: str = Field(default="")


class ChunkEvent(BaseEvent):
    """Base class for per-chunk events."""

    url: str
    offset: int = Field(ge=0)
    event_type: str = Field(default="chunk.base")


class ChunkCompletedEvent(ChunkEvent):
    """Emitted after a chunk's bytes reach the sink."""

    event_type: str = Field(default="chunk.completed")
    length: int = Field(ge=0, description="Bytes written for this chunk")


class ChunkFailedEvent(ChunkEvent):
    """Emitted when fetching, verifying or writing a chunk fails."""

    event_type: str = Field(default="chunk.failed")
    error_message: str = Field(default="")
    error_type: str = Field(default="")
