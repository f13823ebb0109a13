from typing import Dict
from typing import Optional
from typing import Tuple

import attr


@attr.s(frozen=True, slots=True)
class Log(object):
    """A timestamped event logged on a span, ``timestamp`` is in epoch milliseconds."""

    event = attr.ib(type=str)
    timestamp = attr.ib(type=int)


@attr.s(frozen=True, slots=True)
class Span(object):
    """A finished (or still running) unit of work handed over by the instrumentation.

    ``begin`` and ``end`` are epoch milliseconds, ``end`` stays ``None`` while the
    span is running. ``remote`` is set when the span id was propagated by a caller,
    in which case the caller owns the timing of the span. ``exportable`` carries the
    upstream sampling decision.
    """

    name = attr.ib(type=str)
    begin = attr.ib(type=int)
    end = attr.ib(type=Optional[int], default=None)
    trace_id = attr.ib(type=int, default=0)
    span_id = attr.ib(type=int, default=0)
    tags = attr.ib(type=Dict[str, str], factory=dict, converter=dict)
    logs = attr.ib(type=Tuple[Log, ...], default=(), converter=tuple)
    parents = attr.ib(type=Tuple[int, ...], default=(), converter=tuple)
    remote = attr.ib(type=bool, default=False)
    exportable = attr.ib(type=bool, default=True)
    process_id = attr.ib(type=Optional[str], default=None)

    @property
    def running(self):
        # type: () -> bool
        return self.end is None

    @property
    def accumulated_micros(self):
        # type: () -> int
        if self.end is None:
            return 0
        return (self.end - self.begin) * 1000

    def evolve(self, **changes):
        # type: (...) -> Span
        """Return a copy of this span with ``changes`` applied."""
        return attr.evolve(self, **changes)

    def find_log(self, event):
        # type: (str) -> Optional[Log]
        for log in self.logs:
            if log.event == event:
                return log
        return None

    def __str__(self):
        return "[Trace: %s, Span: %s, Parent: %s, exportable: %s]" % (
            self.trace_id,
            self.span_id,
            self.parents[0] if self.parents else None,
            self.exportable,
        )
