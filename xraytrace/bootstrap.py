"""
Assembles a :class:`~xraytrace.listener.SegmentListener` from configuration::

    from xraytrace.bootstrap import build_listener

    listener = build_listener()
    tracer.on_span_finish(listener.on_span_finish)

With ``XRAY_LOCATOR_DISCOVERY_ENABLED=true`` and a registry client passed in,
the local endpoint is looked up in the registry first and built from static
settings when the registry has no record of this process.
"""
import functools
from typing import Callable
from typing import Optional
from typing import Union

from .adjuster import SpanAdjuster
from .internal.logger import get_logger
from .listener import SegmentListener
from .locator import DiscoveryClient
from .locator import DiscoveryClientEndpointLocator
from .locator import EndpointLocator
from .locator import FallbackHavingEndpointLocator
from .locator import ServerPropertiesEndpointLocator
from .reporter import LogSegmentReporter
from .reporter import SegmentReporter
from .reporter import UDPSegmentReporter
from .settings import Config
from .settings import config as global_config
from .settings import default_instance_id
from .settings._config import REPORTER_LOG
from .span import Span


log = get_logger(__name__)


def build_endpoint_locator(config, discovery_client=None):
    # type: (Config, Optional[DiscoveryClient]) -> EndpointLocator
    static = ServerPropertiesEndpointLocator(config)
    if not config.locator_discovery_enabled:
        return static
    discovery = None
    if discovery_client is not None:
        discovery = DiscoveryClientEndpointLocator(discovery_client, config)
    else:
        log.debug("Registry lookup enabled but no discovery client provided, using static settings")
    return FallbackHavingEndpointLocator(discovery, static)


def build_reporter(config):
    # type: (Config) -> SegmentReporter
    if config.reporter == REPORTER_LOG:
        return LogSegmentReporter()
    return UDPSegmentReporter()


def build_listener(
    config=None,  # type: Optional[Config]
    discovery_client=None,  # type: Optional[DiscoveryClient]
    reporter=None,  # type: Optional[SegmentReporter]
    span_adjuster=None,  # type: Optional[Union[SpanAdjuster, Callable[[Span], Span]]]
):
    # type: (...) -> Optional[SegmentListener]
    """Return a listener wired from ``config``, or ``None`` when reporting is disabled."""
    if config is None:
        config = global_config
    if not config.enabled:
        log.debug("X-Ray reporting is disabled")
        return None
    return SegmentListener(
        reporter=reporter if reporter is not None else build_reporter(config),
        endpoint_locator=build_endpoint_locator(config, discovery_client),
        instance_id_source=functools.partial(default_instance_id, config),
        span_adjuster=span_adjuster,
    )
