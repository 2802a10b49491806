"""Shared test fixtures and sample FFmpeg output."""

import pytest

from transcoder.parsing.output_parser import OutputParser

FFMPEG_BANNER = [
    "ffmpeg version 4.4.2-0ubuntu0.22.04.1 Copyright (c) 2000-2021 the FFmpeg developers",
    "  built with gcc 11 (Ubuntu 11.2.0-19ubuntu1)",
    "  configuration: --prefix=/usr --enable-gpl --enable-libx264",
    "  libavutil      56. 70.100 / 56. 70.100",
    "  libavcodec     58.134.100 / 58.134.100",
]

FFMPEG_METADATA = [
    "Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'input.mp4':",
    "  Metadata:",
    "    major_brand     : isom",
    "    minor_version   : 512",
    "    encoder         : Lavf58.76.100",
    "  Duration: 00:00:10.00, start: 0.000000, bitrate: 1205 kb/s",
    "    Stream #0:0(und): Video: h264 (High) (avc1 / 0x31637661), yuv420p, 1280x720, "
    "1070 kb/s, 30 fps, 30 tbr, 15360 tbn, 60 tbc (default)",
    "    Metadata:",
    "      handler_name    : VideoHandler",
    "      vendor_id       : [0][0][0][0]",
    "    Stream #0:1(und): Audio: aac (LC) (mp4a / 0x6134706D), 44100 Hz, stereo, fltp, "
    "128 kb/s (default)",
    "    Metadata:",
    "      handler_name    : SoundHandler",
    "Stream mapping:",
    "  Stream #0:0 -> #0:0 (h264 (native) -> mpeg4 (native))",
    "  Stream #0:1 -> #0:1 (aac (native) -> mp3 (libmp3lame))",
    "Press [q] to stop, [?] for help",
    "Output #0, avi, to 'out.avi':",
    "  Metadata:",
    "    ISFT            : Lavf58.76.100",
]

FFMPEG_PROGRESS = [
    "frame=   75 fps= 75 q=4.0 size=     512kB time=00:00:02.50 bitrate=1677.7kbits/s speed=2.5x",
    "frame=  150 fps= 75 q=4.0 size=    1024kB time=00:00:05.00 bitrate=1677.7kbits/s speed=2.5x",
]


class EventRecorder:
    """Collects parser events in arrival order."""

    def __init__(self):
        self.events: list[tuple[str, object]] = []

    def on_metadata(self, metadata):
        self.events.append(("metadata", metadata))

    def on_progress(self, snapshot):
        self.events.append(("progress", snapshot))

    def on_parse_error(self, line):
        self.events.append(("parse_error", line))

    def on_finish(self):
        self.events.append(("finish", None))

    def on_error(self, error):
        self.events.append(("error", error))

    def of(self, kind: str) -> list:
        return [payload for name, payload in self.events if name == kind]

    @property
    def kinds(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def parser(recorder):
    """An OutputParser wired to the recorder."""
    return OutputParser(
        on_metadata=recorder.on_metadata,
        on_progress=recorder.on_progress,
        on_parse_error=recorder.on_parse_error,
    )


@pytest.fixture
def ffmpeg_output():
    """A complete stderr transcript of a successful run."""
    return FFMPEG_BANNER + FFMPEG_METADATA + FFMPEG_PROGRESS
