"""Error hierarchy for the transcoder."""


class TranscoderError(Exception):
    """Base error for all transcoder errors."""

    def __init__(self, message: str, component: str = "", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}


class ParseError(TranscoderError):
    """A single diagnostic line could not be classified."""

    def __init__(self, message: str, line: str = "", details: dict | None = None):
        super().__init__(message, component="parser", details=details)
        self.line = line


class CursorError(ParseError):
    """A section-scoped line arrived before any Input/Output header."""


class TranscodeError(TranscoderError):
    """The FFmpeg process failed or could not be started."""

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        last_line: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, component="process", details=details)
        self.returncode = returncode
        self.last_line = last_line
