import abc
from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover
    from .span import Span


class SpanAdjuster(metaclass=abc.ABCMeta):
    """Hook rewriting spans before they are converted, e.g. to redact tags."""

    @abc.abstractmethod
    def adjust(self, span):
        # type: (Span) -> Span
        pass


class NoOpSpanAdjuster(SpanAdjuster):
    def adjust(self, span):
        # type: (Span) -> Span
        return span


class FunctionSpanAdjuster(SpanAdjuster):
    def __init__(self, func):
        self._func = func

    def adjust(self, span):
        # type: (Span) -> Span
        return self._func(span)
