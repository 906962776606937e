"""
The immutable log entry passed from the facade to every sink.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Mapping, NamedTuple, Optional, Tuple

from ..core.levels import Level

logger = logging.getLogger(__name__)


class Field(NamedTuple):
    """One key/value pair attached to an entry."""

    key: str
    value: Any


@dataclass(frozen=True)
class LogEntry:
    """A single log event.

    ``fields`` keeps insertion order and may contain repeated keys; sinks
    render them in order. The ``op`` and ``trace_id`` pairs are kept out of
    ``fields`` so every sink can rely on them being present.
    """

    timestamp: datetime
    level: Level
    message: str
    op: str
    trace_id: str
    fields: Tuple[Field, ...] = ()
    error: Optional[BaseException] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.trace_id:
            raise ValueError("LogEntry requires a non-empty trace_id")

    def pairs(self) -> Iterator[Field]:
        """Yield op, traceId and then the entry fields, in output order."""
        yield Field("op", self.op)
        yield Field("traceId", self.trace_id)
        yield from self.fields

    def context(self) -> dict:
        """Flatten the entry into a mapping; later duplicate keys win."""
        return {key: value for key, value in self.pairs()}


def to_fields(items) -> Tuple[Field, ...]:
    """Normalize Field instances, (key, value) pairs and mappings into Fields.

    Anything else is skipped and reported on the fallback logger; logging
    calls never raise because of a malformed field.
    """
    fields = []
    for item in items:
        if isinstance(item, Field):
            fields.append(item)
        elif isinstance(item, Mapping):
            fields.extend(Field(str(key), value) for key, value in item.items())
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            fields.append(Field(str(item[0]), item[1]))
        else:
            logger.warning(f"Ignoring malformed log field {item!r}, expected a (key, value) pair")
    return tuple(fields)
