"""
Fan-out of one entry to every registered sink.
"""

import logging
from typing import Iterable, List, Tuple, Union

from ..exceptions import SinkError
from .entry import LogEntry
from .sinks import LevelFilteredSink, SinkRegistration

logger = logging.getLogger(__name__)


class SinkRouter:
    """Delivers entries to an ordered, fixed set of level-filtered sinks.

    Sinks are called in registration order and independently: a failing
    sink is recorded and the remaining sinks still receive the entry. The
    router holds no lock; each sink guards itself. A router with no
    registrations discards everything.
    """

    def __init__(self, registrations: Iterable[Union[SinkRegistration, LevelFilteredSink]] = ()):
        self._sinks: Tuple[LevelFilteredSink, ...] = tuple(
            reg.filtered() if isinstance(reg, SinkRegistration) else reg
            for reg in registrations
        )

    @property
    def sinks(self) -> Tuple[LevelFilteredSink, ...]:
        return self._sinks

    def __len__(self) -> int:
        return len(self._sinks)

    def dispatch(self, entry: LogEntry) -> List[SinkError]:
        """Deliver ``entry`` to every sink whose level gate accepts it.

        Returns the failures; never raises on a sink error.
        """
        errors = []
        for sink in self._sinks:
            try:
                sink.dispatch(entry)
            except Exception as e:
                errors.append(self._record(sink, e, "write"))
        return errors

    def flush(self) -> List[SinkError]:
        errors = []
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception as e:
                errors.append(self._record(sink, e, "flush"))
        return errors

    def close(self) -> List[SinkError]:
        errors = []
        for sink in self._sinks:
            try:
                sink.close()
            except Exception as e:
                errors.append(self._record(sink, e, "close"))
        return errors

    @staticmethod
    def _record(sink: LevelFilteredSink, cause: Exception, operation: str) -> SinkError:
        error = SinkError(sink.name, cause)
        logger.error(f"Log sink {operation} failed: {error}")
        return error
