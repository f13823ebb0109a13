import mock

from xraytrace.bootstrap import build_endpoint_locator
from xraytrace.bootstrap import build_listener
from xraytrace.bootstrap import build_reporter
from xraytrace.locator import DiscoveryClient
from xraytrace.locator import DiscoveryClientEndpointLocator
from xraytrace.locator import FallbackHavingEndpointLocator
from xraytrace.locator import ServerPropertiesEndpointLocator
from xraytrace.locator import ServiceInstance
from xraytrace.reporter import LogSegmentReporter
from xraytrace.reporter import UDPSegmentReporter
from xraytrace.settings import Config
from xraytrace.span import Log
from xraytrace.span import Span
from tests.utils import DummyReporter
from tests.utils import override_env


def _config(**env):
    with override_env(env):
        return Config()


def test_disabled():
    assert build_listener(_config(XRAY_ENABLED="false")) is None


def test_static_locator_by_default():
    locator = build_endpoint_locator(_config(), discovery_client=mock.Mock(spec=DiscoveryClient))
    assert isinstance(locator, ServerPropertiesEndpointLocator)


def test_discovery_locator_with_fallback():
    config = _config(XRAY_LOCATOR_DISCOVERY_ENABLED="true")
    locator = build_endpoint_locator(config, discovery_client=mock.Mock(spec=DiscoveryClient))
    assert isinstance(locator, FallbackHavingEndpointLocator)
    assert isinstance(locator._discovery_locator, DiscoveryClientEndpointLocator)
    assert isinstance(locator._fallback, ServerPropertiesEndpointLocator)


def test_discovery_enabled_without_client():
    locator = build_endpoint_locator(_config(XRAY_LOCATOR_DISCOVERY_ENABLED="true"))
    assert isinstance(locator, FallbackHavingEndpointLocator)
    assert locator._discovery_locator is None


def test_reporter_choice():
    assert isinstance(build_reporter(_config()), UDPSegmentReporter)
    assert isinstance(build_reporter(_config(XRAY_REPORTER="log")), LogSegmentReporter)


@mock.patch("xraytrace.settings._config.get_hostname", return_value="host")
def test_listener_end_to_end(_get_hostname):
    client = mock.Mock(spec=DiscoveryClient)
    client.get_local_service_instance.return_value = ServiceInstance("orders-service", "10.0.0.7", 9000)
    config = _config(XRAY_LOCATOR_DISCOVERY_ENABLED="true", XRAY_APPLICATION_NAME="orders")
    reporter = DummyReporter()

    listener = build_listener(config, discovery_client=client, reporter=reporter)
    listener.on_span_finish(Span(name="GET /orders", begin=1000, end=1100, logs=[Log("sr", 1000), Log("ss", 1100)]))

    (segment,) = reporter.pop()
    assert segment.annotations[0].endpoint.service_name == "orders-service"
    assert segment.metadata["instance_id"] == "host:orders:8080"
