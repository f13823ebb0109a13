import time
from typing import Dict
from typing import Optional
from typing import Tuple

import attr

from .endpoint import Endpoint


def _now_ms():
    # type: () -> int
    return int(time.time() * 1000)


@attr.s(frozen=True, slots=True)
class Annotation(object):
    """A timeline event on a segment, ``timestamp`` is in epoch microseconds."""

    timestamp = attr.ib(type=int)
    value = attr.ib(type=str)
    endpoint = attr.ib(type=Optional[Endpoint], default=None)


class BinaryAnnotationType(object):
    STRING = "STRING"
    BOOL = "BOOL"


@attr.s(frozen=True, slots=True)
class BinaryAnnotation(object):
    """A key/value entry on a segment. ``value`` holds UTF-8 encoded bytes."""

    key = attr.ib(type=str)
    value = attr.ib(type=bytes)
    endpoint = attr.ib(type=Optional[Endpoint], default=None)
    type = attr.ib(type=str, default=BinaryAnnotationType.STRING)

    @classmethod
    def string(cls, key, value, endpoint=None):
        # type: (str, str, Optional[Endpoint]) -> BinaryAnnotation
        return cls(key=key, value=value.encode("utf-8"), endpoint=endpoint)

    @classmethod
    def address(cls, key, endpoint):
        # type: (str, Endpoint) -> BinaryAnnotation
        """Address annotations carry their information in the endpoint, the value is always true."""
        return cls(key=key, value=b"\x01", endpoint=endpoint, type=BinaryAnnotationType.BOOL)

    @property
    def is_address(self):
        # type: () -> bool
        return self.type == BinaryAnnotationType.BOOL

    @property
    def text(self):
        # type: () -> str
        return self.value.decode("utf-8", errors="replace")


@attr.s(frozen=True, slots=True)
class Segment(object):
    """The X-Ray unit of work built from one span.

    ``start_time`` is in epoch milliseconds and defaults to the construction time,
    ``duration`` is in microseconds and stays ``None`` for segments still in progress.
    """

    name = attr.ib(type=str)
    id = attr.ib(type=Optional[str], default=None)
    trace_id = attr.ib(type=Optional[str], default=None)
    start_time = attr.ib(type=int, factory=_now_ms)
    duration = attr.ib(type=Optional[int], default=None)
    parent_id = attr.ib(type=Optional[str], default=None)
    annotations = attr.ib(type=Tuple[Annotation, ...], default=(), converter=tuple)
    binary_annotations = attr.ib(type=Tuple[BinaryAnnotation, ...], default=(), converter=tuple)

    @property
    def in_progress(self):
        # type: () -> bool
        return self.duration is None

    @property
    def metadata(self):
        # type: () -> Dict[str, str]
        # later entries overwrite earlier ones with the same key
        return {b.key: b.text for b in self.binary_annotations if not b.is_address}
