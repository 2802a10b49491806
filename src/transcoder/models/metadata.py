"""Media metadata models assembled from FFmpeg diagnostics."""

from pydantic import BaseModel, Field


class FrameSize(BaseModel):
    """Video frame dimensions in pixels."""

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class StreamInfo(BaseModel):
    """One elementary stream declared by a ``Stream #`` line.

    Only the fields that were actually recognised on the line are set.
    """

    type: str | None = Field(default=None, description="Stream kind: video, audio, data...")
    codec: str | None = None
    sample_rate: int | None = Field(default=None, description="Audio sample rate in Hz")
    channels: int | None = None
    bitrate: int | None = Field(default=None, description="Bits per second")
    fps: int | None = None
    size: FrameSize | None = None
    aspect_ratio: float | None = None
    colors: str | None = Field(default=None, description="Pixel format")
    metadata: dict[str, str] | None = None


class SectionInfo(BaseModel):
    """The input or output side of a transcode."""

    streams: list[StreamInfo] = Field(default_factory=list)
    duration: int | None = Field(default=None, ge=0, description="Duration in milliseconds")
    synched: bool | None = Field(default=None, description="True when the start offset is zero")
    metadata: dict[str, str] | None = None

    @property
    def last_stream(self) -> StreamInfo | None:
        return self.streams[-1] if self.streams else None


class Metadata(BaseModel):
    """Structure of both sides of a transcode."""

    input: SectionInfo = Field(default_factory=SectionInfo)
    output: SectionInfo = Field(default_factory=SectionInfo)
