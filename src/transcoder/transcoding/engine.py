"""Transcoding engine: runs FFmpeg and turns its stderr into events."""

import logging
import os
import subprocess
import threading
from collections.abc import Callable
from typing import BinaryIO

from transcoder.config import Settings, get_settings
from transcoder.models.errors import TranscodeError
from transcoder.models.metadata import Metadata
from transcoder.models.progress import ProgressSnapshot
from transcoder.parsing.output_parser import OutputParser
from transcoder.transcoding.arguments import FFmpegArgumentBuilder
from transcoder.transcoding.pipes import copy_to_stdin, iter_lines

logger = logging.getLogger(__name__)


class Transcoder(FFmpegArgumentBuilder):
    """Transcodes a file or a readable binary stream with FFmpeg.

    Options are set fluently, then one of :meth:`exec`, :meth:`stream` or
    :meth:`write_to_file` starts the process. Events are delivered through the
    callbacks from background threads:

    * ``on_metadata(Metadata)`` once the input/output description is complete
    * ``on_progress(ProgressSnapshot)`` for every FFmpeg status line
    * ``on_parse_error(line)`` for stderr lines that could not be parsed
    * ``on_finish()`` when FFmpeg exits with status 0
    * ``on_error(TranscodeError)`` when it exits with any other status
    """

    def __init__(
        self,
        source: str | os.PathLike | BinaryIO,
        *,
        settings: Settings | None = None,
        on_metadata: Callable[[Metadata], None] | None = None,
        on_progress: Callable[[ProgressSnapshot], None] | None = None,
        on_parse_error: Callable[[str], None] | None = None,
        on_finish: Callable[[], None] | None = None,
        on_error: Callable[[TranscodeError], None] | None = None,
    ):
        super().__init__()
        self.source = source
        self.settings = settings or get_settings()
        self.on_metadata = on_metadata
        self.on_progress = on_progress
        self.on_parse_error = on_parse_error
        self.on_finish = on_finish
        self.on_error = on_error
        self.parser: OutputParser | None = None
        self.process: subprocess.Popen | None = None
        self.returncode: int | None = None
        self._done = threading.Event()

    @property
    def reads_stdin(self) -> bool:
        """True when the source is a stream piped into FFmpeg's stdin."""
        return not isinstance(self.source, (str, os.PathLike))

    def build_command(self, args: list[str]) -> list[str]:
        """Prefix the compiled options with the executable and the input."""
        source = "-" if self.reads_stdin else os.fspath(self.source)
        return [self.settings.ffmpeg_bin_path, "-i", source, *args]

    def exec(self) -> subprocess.Popen:
        """Start FFmpeg with the configured options only."""
        return self._exec(self.compile_arguments())

    def stream(self) -> BinaryIO:
        """Make FFmpeg write to stdout and return that stream."""
        args = self.compile_arguments()
        args.append("pipe:1")
        return self._exec(args, capture_stdout=True).stdout

    def write_to_file(self, path: str | os.PathLike) -> "Transcoder":
        """Make FFmpeg write to ``path``, overwriting it."""
        args = self.compile_arguments()
        args.extend(["-y", os.fspath(path)])
        self._exec(args)
        return self

    def wait(self, timeout: float | None = None) -> int | None:
        """Block until exit has been handled; returns the exit status."""
        if self.process is None:
            raise TranscodeError("Transcoder has not been started")
        self._done.wait(timeout)
        return self.returncode

    def _exec(self, args: list[str], capture_stdout: bool = False) -> subprocess.Popen:
        if self.process is not None:
            raise TranscodeError("Transcoder has already been started")

        cmd = self.build_command(args)
        logger.info("Spawning %s", " ".join(cmd))
        try:
            process = subprocess.Popen(
                cmd,
                cwd=self.settings.working_dir,
                stdin=subprocess.PIPE if self.reads_stdin else subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError:
            raise TranscodeError(
                "FFmpeg not found. Please install FFmpeg.",
                details={
                    "command": self.settings.ffmpeg_bin_path,
                    "cwd": str(self.settings.working_dir),
                },
            )
        except OSError as e:
            raise TranscodeError(
                f"Failed to start FFmpeg: {e}",
                details={"command": cmd, "error": str(e)},
            )
        self.process = process
        self.parser = OutputParser(
            on_metadata=self.on_metadata,
            on_progress=self.on_progress,
            on_parse_error=self.on_parse_error,
        )

        pump = threading.Thread(
            target=self._pump_stderr, args=(process,), name="ffmpeg-stderr", daemon=True
        )
        pump.start()

        if self.reads_stdin:
            threading.Thread(
                target=copy_to_stdin,
                args=(self.source, process.stdin, self.settings.stdin_chunk_size),
                name="ffmpeg-stdin",
                daemon=True,
            ).start()

        threading.Thread(
            target=self._watch_exit, args=(process, pump), name="ffmpeg-exit", daemon=True
        ).start()
        return process

    def _pump_stderr(self, process: subprocess.Popen) -> None:
        try:
            for line in iter_lines(process.stderr, self.settings.stderr_encoding):
                try:
                    self.parser.feed_line(line)
                except Exception:
                    # Keep draining stderr so FFmpeg never blocks on a full pipe
                    logger.exception("Event handler failed on FFmpeg line %r", line)
        finally:
            process.stderr.close()

    def _watch_exit(self, process: subprocess.Popen, pump: threading.Thread) -> None:
        returncode = process.wait()
        pump.join(self.settings.exit_drain_timeout)
        if pump.is_alive():
            logger.warning(
                "FFmpeg stderr still open %.1fs after exit", self.settings.exit_drain_timeout
            )

        self.returncode = returncode
        try:
            self.parser.process_exit(returncode)
            if returncode == 0:
                if self.on_finish:
                    self.on_finish()
                return

            last_line = self.parser.last_line
            logger.error("FFmpeg failed (code %d): %s", returncode, last_line)
            error = TranscodeError(
                f"FFmpeg error: {last_line}",
                returncode=returncode,
                last_line=last_line,
            )
            if self.on_error:
                self.on_error(error)
        finally:
            self._done.set()
