import pytest

from xraytrace.endpoint import Endpoint
from xraytrace.listener import SegmentListener
from xraytrace.span import Log
from xraytrace.span import Span

from .utils import DummyReporter
from .utils import StaticEndpointLocator


@pytest.fixture
def endpoint():
    return Endpoint(service_name="orders", ipv4=0x0A000001, port=8080)


@pytest.fixture
def locator(endpoint):
    return StaticEndpointLocator(endpoint)


@pytest.fixture
def reporter():
    return DummyReporter()


@pytest.fixture
def listener(reporter, locator):
    return SegmentListener(reporter, locator)


@pytest.fixture
def span():
    return Span(
        name="GET /orders",
        begin=1000,
        end=1250,
        trace_id=1,
        span_id=2,
        tags={"http.path": "/orders"},
        logs=[Log("cs", 1000)],
    )
