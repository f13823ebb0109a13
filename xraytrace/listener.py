from typing import Callable
from typing import List
from typing import Optional
from typing import Union

from .adjuster import FunctionSpanAdjuster
from .adjuster import NoOpSpanAdjuster
from .adjuster import SpanAdjuster
from .constants import CLIENT_RECV
from .constants import CLIENT_SEND
from .constants import INSTANCE_ID_TAG
from .constants import LOCAL_COMPONENT
from .constants import PEER_SERVICE_TAG
from .constants import RPC_EVENTS
from .constants import SERVER_ADDR
from .constants import START_EVENTS
from .constants import UNKNOWN_PROCESS_ID
from .endpoint import Endpoint
from .exceptions import NoServiceInstanceAvailable
from .internal.logger import get_logger
from .locator import EndpointLocator
from .reporter import SegmentReporter
from .segment import Annotation
from .segment import BinaryAnnotation
from .segment import Segment
from .span import Span


log = get_logger(__name__)


class SegmentListener(object):
    """Receives finished spans and reports them to X-Ray as segments.

    :param reporter: where converted segments are sent
    :param endpoint_locator: resolves the endpoint of the local service
    :param instance_id_source: callable returning the id of this instance, instance ids
        are not reported when omitted
    :param span_adjuster: a :class:`SpanAdjuster` or a plain callable applied to every
        span before conversion
    """

    def __init__(
        self,
        reporter,  # type: SegmentReporter
        endpoint_locator,  # type: EndpointLocator
        instance_id_source=None,  # type: Optional[Callable[[], Optional[str]]]
        span_adjuster=None,  # type: Optional[Union[SpanAdjuster, Callable[[Span], Span]]]
    ):
        # type: (...) -> None
        self.reporter = reporter
        self.endpoint_locator = endpoint_locator
        self.instance_id_source = instance_id_source
        if span_adjuster is None:
            span_adjuster = NoOpSpanAdjuster()
        elif not isinstance(span_adjuster, SpanAdjuster):
            span_adjuster = FunctionSpanAdjuster(span_adjuster)
        self.span_adjuster = span_adjuster

    def convert(self, span):
        # type: (Span) -> Segment
        """Converts a span to an X-Ray segment.

        Timeline annotations come from the span logs and binary annotations from its
        tags, plus markers synthesized from the RPC events found in the logs.
        """
        span = self.span_adjuster.adjust(span)
        endpoint = self.endpoint_locator.local()

        binary_annotations = self._process_logs(span, endpoint)
        annotations = [
            # X-Ray timeline events are in microseconds
            Annotation(timestamp=log_.timestamp * 1000, value=log_.event, endpoint=endpoint)
            for log_ in span.logs
        ]
        binary_annotations.extend(BinaryAnnotation.string(k, v, endpoint) for k, v in span.tags.items())

        fields = dict(
            name=span.name,
            id=str(span.span_id),
            trace_id=str(span.trace_id),
            annotations=annotations,
            binary_annotations=binary_annotations,
        )
        # In the RPC span model the client owns the timestamp and duration of the span. A
        # span whose id was propagated to us is reported without them.
        if not span.remote:
            fields["start_time"] = span.begin
            # duration is authoritative, only write when the span stopped
            if not span.running:
                fields["duration"] = self._duration_micros(span)
        if span.parents:
            if len(span.parents) > 1:
                # reported for every such span, not rate limited
                log.warning(
                    "X-Ray doesn't support spans with multiple parents. Omitting other parents for %s",
                    span,
                    extra={"no_rate_limit": True},
                )
            fields["parent_id"] = str(span.parents[0])
        return Segment(**fields)

    def _process_logs(self, span, endpoint):
        # type: (Span, Endpoint) -> List[BinaryAnnotation]
        # single pass over the logs
        not_client_or_server = True
        has_client_send = False
        instance_id_to_tag = False
        for log_ in span.logs:
            if log_.event in RPC_EVENTS:
                instance_id_to_tag = True
            if log_.event in START_EVENTS:
                not_client_or_server = False
            if log_.event == CLIENT_SEND:
                has_client_send = SERVER_ADDR not in span.tags

        result = []  # type: List[BinaryAnnotation]
        if not_client_or_server and LOCAL_COMPONENT not in span.tags:
            # A segment without any annotations cannot be queried
            process_id = span.process_id.lower() if span.process_id is not None else UNKNOWN_PROCESS_ID
            result.append(BinaryAnnotation.string(LOCAL_COMPONENT, process_id, endpoint))
        if has_client_send and PEER_SERVICE_TAG in span.tags:
            peer = endpoint.with_service_name(span.tags[PEER_SERVICE_TAG])
            result.append(BinaryAnnotation.address(SERVER_ADDR, peer))
        if instance_id_to_tag and self.instance_id_source is not None:
            instance_id = self.instance_id_source()
            if instance_id and instance_id.strip():
                result.append(BinaryAnnotation.string(INSTANCE_ID_TAG, instance_id, endpoint))
        return result

    @staticmethod
    def _duration_micros(span):
        # type: (Span) -> int
        """
        Instrumentation may start a span before the client send. Users expect the
        duration to be client receive - client send, so the absolute duration is
        truncated to the semantic one when both events were logged.
        """
        client_send = span.find_log(CLIENT_SEND)
        client_recv = span.find_log(CLIENT_RECV)
        if client_send is not None and client_recv is not None:
            return (client_recv.timestamp - client_send.timestamp) * 1000
        return span.accumulated_micros

    def report(self, span):
        # type: (Span) -> None
        if not span.exportable:
            log.debug("The span %s will not be sent to X-Ray due to sampling", span)
            return
        try:
            segment = self.convert(span)
        except NoServiceInstanceAvailable:
            log.warning("Cannot determine the local endpoint, dropping span %s", span, exc_info=True)
            return
        self.reporter.report(segment)

    on_span_finish = report
