"""Write cursor over the metadata tree being assembled."""

from enum import StrEnum

from transcoder.models.errors import CursorError
from transcoder.models.metadata import Metadata, SectionInfo, StreamInfo


class CursorTarget(StrEnum):
    """Where free-form ``key: value`` lines currently land."""

    NONE = "none"
    SECTION = "section"
    STREAM = "stream"


class MetadataCursor:
    """Tracks the section currently being described and its open metadata block."""

    def __init__(self, metadata: Metadata):
        self.metadata = metadata
        self._section: SectionInfo | None = None

    @property
    def section(self) -> SectionInfo:
        if self._section is None:
            raise CursorError("No Input or Output section has been started")
        return self._section

    @property
    def target(self) -> CursorTarget:
        if self._section is None:
            return CursorTarget.NONE
        last = self._section.last_stream
        if last is not None and last.metadata is not None:
            return CursorTarget.STREAM
        if self._section.metadata is not None:
            return CursorTarget.SECTION
        return CursorTarget.NONE

    def start_section(self, name: str) -> SectionInfo:
        """Replace ``metadata.<name>`` with a fresh section and point at it."""
        section = SectionInfo()
        setattr(self.metadata, name, section)
        self._section = section
        return section

    def add_stream(self, stream: StreamInfo) -> None:
        self.section.streams.append(stream)

    def open_metadata_block(self) -> CursorTarget:
        """Attach an empty metadata mapping to the last stream, or to the section."""
        section = self.section
        if section.streams:
            section.streams[-1].metadata = {}
            return CursorTarget.STREAM
        section.metadata = {}
        return CursorTarget.SECTION

    def set_metadata(self, key: str, value: str) -> bool:
        """Store a free-form entry on the open block; False when none is open."""
        target = self.target
        if target is CursorTarget.STREAM:
            self.section.streams[-1].metadata[key] = value
        elif target is CursorTarget.SECTION:
            self.section.metadata[key] = value
        else:
            return False
        return True
