"""Once-only transition from the metadata phase to the progress phase."""

import logging
from collections.abc import Callable

from transcoder.models.phase import PhaseState, PhaseTrigger

logger = logging.getLogger(__name__)


class PhaseController:
    """Two-state machine; any trigger closes it, only the first one counts.

    Process exit can race the last buffered stderr lines, so every trigger goes
    through :meth:`close` and the ``on_close`` callback runs at most once.
    """

    def __init__(self, on_close: Callable[[PhaseTrigger], None] | None = None):
        self.on_close = on_close
        self.state = PhaseState.OPEN
        self.closed_by: PhaseTrigger | None = None

    @property
    def is_open(self) -> bool:
        return self.state is PhaseState.OPEN

    def close(self, trigger: PhaseTrigger) -> bool:
        """Close the phase. Returns True only for the call that closed it."""
        if self.state is PhaseState.CLOSED:
            logger.debug("Phase already closed by %s; ignoring %s", self.closed_by, trigger)
            return False
        self.state = PhaseState.CLOSED
        self.closed_by = trigger
        if self.on_close:
            self.on_close(trigger)
        return True
