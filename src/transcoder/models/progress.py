"""Progress snapshot model."""

from pydantic import BaseModel, Field


class ProgressSnapshot(BaseModel):
    """One ``frame=... time=...`` status line from FFmpeg."""

    frame: int | None = None
    fps: int | None = None
    quality: int | None = None
    size: int | None = Field(default=None, description="Output size in bytes")
    time: int | None = Field(default=None, description="Elapsed media time in milliseconds")
    bitrate: int | None = Field(default=None, description="Bits per second")
    progress: float | None = Field(
        default=None, description="time / input duration, when the duration is known"
    )
