import json
import re
from typing import Any
from typing import Dict
from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover
    from ..segment import Segment


__all__ = ["SegmentEncoder", "PROTOCOL_HEADER", "format_segment_id", "format_trace_id", "normalize_annotation_key"]


PROTOCOL_HEADER = json.dumps({"format": "json", "version": 1})
PROTOCOL_DELIMITER = "\n"

# X-Ray rejects names longer than this
MAX_NAME_LENGTH = 200

TRACE_ID_VERSION = 1

_MAX_UINT_64BITS = (1 << 64) - 1
_MAX_UINT_96BITS = (1 << 96) - 1
_MAX_UINT_128BITS = (1 << 128) - 1

_INVALID_KEY_CHARS = re.compile(r"[^A-Za-z0-9_]")


def normalize_annotation_key(key):
    # type: (str) -> str
    """Indexed annotation keys may only hold alphanumerics and underscores."""
    return _INVALID_KEY_CHARS.sub("_", key)


def format_segment_id(value):
    # type: (str) -> str
    """Render a decimal span id as the 16 hex digits X-Ray expects, other values are kept as is."""
    if not value.isdigit():
        return value
    return "%016x" % (int(value) & _MAX_UINT_64BITS)


def format_trace_id(value):
    # type: (str) -> str
    """Render a decimal trace id as ``1-<8 hex>-<24 hex>``, from its high 32 and low 96 bits."""
    if not value.isdigit():
        return value
    trace_id = int(value) & _MAX_UINT_128BITS
    return "%d-%08x-%024x" % (TRACE_ID_VERSION, trace_id >> 96, trace_id & _MAX_UINT_96BITS)


class SegmentEncoder(json.JSONEncoder):
    """
    Encodes segments into the document format accepted by the X-Ray daemon.

    Binary annotations become indexed ``annotations`` with normalized keys; when two
    keys normalize to the same value the later one wins. Timeline annotations and
    address annotations are not indexable and are kept under ``metadata``.
    """

    def encode_segment(self, segment):
        # type: (Segment) -> str
        """Encode ``segment`` as a complete daemon message, protocol header included."""
        return PROTOCOL_HEADER + PROTOCOL_DELIMITER + self.encode(self._segment_to_dict(segment))

    @staticmethod
    def _segment_to_dict(segment):
        # type: (Segment) -> Dict[str, Any]
        start = segment.start_time / 1000.0
        d = {
            "name": segment.name[:MAX_NAME_LENGTH],
            "start_time": start,
        }  # type: Dict[str, Any]

        if segment.id is not None:
            d["id"] = format_segment_id(segment.id)

        if segment.trace_id is not None:
            d["trace_id"] = format_trace_id(segment.trace_id)

        if segment.in_progress:
            d["in_progress"] = True
        else:
            d["end_time"] = start + segment.duration / 1000000.0

        if segment.parent_id is not None:
            d["parent_id"] = format_segment_id(segment.parent_id)

        annotations = {}
        addresses = {}
        for b in segment.binary_annotations:
            if b.is_address:
                addresses[b.key] = b.endpoint.to_dict() if b.endpoint else None
            else:
                annotations[normalize_annotation_key(b.key)] = b.text
        if annotations:
            d["annotations"] = annotations

        metadata = {}
        if segment.annotations:
            metadata["annotations"] = [
                {"timestamp": a.timestamp, "value": a.value, "endpoint": a.endpoint.to_dict() if a.endpoint else None}
                for a in segment.annotations
            ]
        if addresses:
            metadata["addresses"] = addresses
        if metadata:
            d["metadata"] = metadata

        return d
