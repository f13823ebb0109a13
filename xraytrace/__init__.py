from ._version import __version__
from .adjuster import NoOpSpanAdjuster
from .adjuster import SpanAdjuster
from .bootstrap import build_listener
from .endpoint import Endpoint
from .exceptions import NoServiceInstanceAvailable
from .exceptions import XRayTraceError
from .listener import SegmentListener
from .segment import Annotation
from .segment import BinaryAnnotation
from .segment import Segment
from .settings import config
from .span import Log
from .span import Span


__all__ = [
    "__version__",
    "Annotation",
    "BinaryAnnotation",
    "Endpoint",
    "Log",
    "NoOpSpanAdjuster",
    "NoServiceInstanceAvailable",
    "Segment",
    "SegmentListener",
    "Span",
    "SpanAdjuster",
    "XRayTraceError",
    "build_listener",
    "config",
]
