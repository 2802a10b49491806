"""Incremental parser for FFmpeg's stderr output.

FFmpeg first describes its inputs and outputs (the metadata phase), then
prints a ``frame=... size=... time=...`` status line for every interval it
encodes (the progress phase). :class:`OutputParser` is fed one line at a time,
assembles a :class:`~transcoder.models.metadata.Metadata` tree while the
metadata phase is open, and emits a
:class:`~transcoder.models.progress.ProgressSnapshot` for every status line.

The metadata is emitted exactly once, on whichever comes first:

* the ``Stream mapping:`` line,
* the first progress line,
* process exit (:meth:`OutputParser.process_exit`).

A line that fails to parse is reported through ``on_parse_error`` and the
session carries on with the next line.
"""

import logging
import re
import threading
from collections.abc import Callable, Iterable

from transcoder.models.errors import ParseError
from transcoder.models.metadata import Metadata, StreamInfo
from transcoder.models.phase import PhaseTrigger
from transcoder.models.progress import ProgressSnapshot
from transcoder.parsing.cursor import MetadataCursor
from transcoder.parsing.fields import (
    DURATION_PATTERN,
    METADATA_FIELDS,
    PROGRESS_FIELDS,
    apply_fields,
    parse_duration,
)
from transcoder.parsing.phase import PhaseController

logger = logging.getLogger(__name__)

_INPUT_LINE = re.compile(r"^input", re.IGNORECASE)
_OUTPUT_LINE = re.compile(r"^output", re.IGNORECASE)
_METADATA_BLOCK = re.compile(r"^Metadata:$", re.IGNORECASE)
_DURATION_LINE = re.compile(r"^duration", re.IGNORECASE)
_STREAM_MAPPING = re.compile(r"^stream mapping", re.IGNORECASE)
_STREAM_LINE = re.compile(r"^stream #", re.IGNORECASE)
_METADATA_ENTRY = re.compile(r"^(\S+?)\s*:\s*(.+?)$")
_PROGRESS_LINE = re.compile(r"^(frame|size)=", re.IGNORECASE)
_SYNCHED_START = re.compile(r"start: 0\.000000")


class OutputParser:
    """One parsing session over the stderr of a single FFmpeg run."""

    def __init__(
        self,
        on_metadata: Callable[[Metadata], None] | None = None,
        on_progress: Callable[[ProgressSnapshot], None] | None = None,
        on_parse_error: Callable[[str], None] | None = None,
    ):
        self.on_metadata = on_metadata
        self.on_progress = on_progress
        self.on_parse_error = on_parse_error
        self.metadata = Metadata()
        self.cursor = MetadataCursor(self.metadata)
        self.phase = PhaseController(on_close=self._emit_metadata)
        self.last_line: str | None = None
        # stderr pump and exit watcher run on different threads
        self._lock = threading.RLock()

    @property
    def ended(self) -> bool:
        return not self.phase.is_open

    def feed(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed_line(line)

    def feed_line(self, raw: str) -> ProgressSnapshot | None:
        """Process one diagnostic line; returns the progress snapshot it produced."""
        line = raw.strip()
        with self._lock:
            if line:
                self.last_line = line

            end_of_mapping = False
            snapshot = None
            try:
                if self.phase.is_open:
                    end_of_mapping = self._classify(line)
                if _PROGRESS_LINE.match(line):
                    snapshot = ProgressSnapshot(**apply_fields(line, PROGRESS_FIELDS))
            except Exception as e:
                logger.debug("Unparseable FFmpeg line %r: %s", raw, e)
                if self.on_parse_error:
                    self.on_parse_error(raw)
                return None

            if end_of_mapping:
                self.phase.close(PhaseTrigger.END_OF_MAPPING)
            if snapshot is None:
                return None
            if self.phase.is_open:
                self.phase.close(PhaseTrigger.PROGRESS)

            duration = self.metadata.input.duration
            if duration and snapshot.time is not None:
                snapshot.progress = snapshot.time / duration
            if self.on_progress:
                self.on_progress(snapshot)
            return snapshot

    def process_exit(self, returncode: int | None = None) -> bool:
        """Close the metadata phase because the process is gone."""
        with self._lock:
            logger.debug("FFmpeg exited with %s", returncode)
            return self.phase.close(PhaseTrigger.PROCESS_EXIT)

    def _classify(self, line: str) -> bool:
        """Apply one metadata-phase line. Returns True on the end-of-mapping marker."""
        if _INPUT_LINE.match(line):
            self.cursor.start_section("input")
        elif _OUTPUT_LINE.match(line):
            self.cursor.start_section("output")
        elif _METADATA_BLOCK.match(line):
            self.cursor.open_metadata_block()
        elif _DURATION_LINE.match(line):
            self._set_duration(line)
        elif _STREAM_MAPPING.match(line):
            return True
        elif _STREAM_LINE.match(line):
            self.cursor.add_stream(StreamInfo(**apply_fields(line, METADATA_FIELDS)))
        else:
            entry = _METADATA_ENTRY.match(line)
            if entry:
                self.cursor.set_metadata(entry.group(1), entry.group(2))
        return False

    def _set_duration(self, line: str) -> None:
        section = self.cursor.section
        match = DURATION_PATTERN.search(line)
        if match is None:
            raise ParseError("Duration line without a timestamp", line=line)
        section.duration = parse_duration(match.group(1))
        section.synched = _SYNCHED_START.search(line) is not None

    def _emit_metadata(self, trigger: PhaseTrigger) -> None:
        logger.debug("Metadata phase closed by %s", trigger)
        if self.on_metadata:
            self.on_metadata(self.metadata)
