"""Data models for the transcoder."""

from transcoder.models.errors import (
    CursorError,
    ParseError,
    TranscodeError,
    TranscoderError,
)
from transcoder.models.metadata import FrameSize, Metadata, SectionInfo, StreamInfo
from transcoder.models.phase import PhaseState, PhaseTrigger
from transcoder.models.progress import ProgressSnapshot

__all__ = [
    "CursorError",
    "FrameSize",
    "Metadata",
    "ParseError",
    "PhaseState",
    "PhaseTrigger",
    "ProgressSnapshot",
    "SectionInfo",
    "StreamInfo",
    "TranscodeError",
    "TranscoderError",
]
