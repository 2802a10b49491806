"""Plumbing between Python streams and the FFmpeg child process."""

import codecs
import logging
import re
from collections.abc import Iterator
from typing import BinaryIO

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def copy_to_stdin(source: BinaryIO, stdin: BinaryIO, chunk_size: int) -> int:
    """Copy ``source`` into the child's stdin until EOF. Returns bytes written.

    FFmpeg may stop reading before the source is exhausted (e.g. a single
    captured frame); the resulting broken pipe simply ends the copy.
    """
    written = 0
    try:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            stdin.write(chunk)
            written += len(chunk)
    except BrokenPipeError:
        logger.debug("FFmpeg closed stdin after %d bytes", written)
    finally:
        try:
            stdin.close()
        except BrokenPipeError:
            logger.debug("FFmpeg stdin was already closed")
    return written


def iter_lines(stream: BinaryIO, encoding: str = "utf-8", chunk_size: int = 8192) -> Iterator[str]:
    """Yield decoded lines from a binary stream without their terminators.

    ``\\r``, ``\\n`` and ``\\r\\n`` all end a line. FFmpeg overwrites its
    status line in place with a bare ``\\r``, so each segment is yielded as
    soon as its terminator is read, without waiting for the next chunk.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    read = getattr(stream, "read1", stream.read)
    buffer = ""
    after_cr = False
    while True:
        chunk = read(chunk_size)
        buffer += decoder.decode(chunk, final=not chunk)
        if after_cr and buffer:
            # The "\n" of a "\r\n" split across two reads
            if buffer[0] == "\n":
                buffer = buffer[1:]
            after_cr = False

        start = 0
        for match in _LINE_BREAK.finditer(buffer):
            yield buffer[start : match.start()]
            start = match.end()
        if start and start == len(buffer) and buffer.endswith("\r"):
            after_cr = True
        buffer = buffer[start:]

        if not chunk:
            if buffer:
                yield buffer
            return
