import io
import json
import socket

import mock
import pytest

from xraytrace.internal.encoding import PROTOCOL_HEADER
from xraytrace.reporter import LogSegmentReporter
from xraytrace.reporter import UDPSegmentReporter
from xraytrace.segment import Segment
from tests.utils import DummyOutput


@pytest.fixture
def daemon():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5)
    try:
        yield sock
    finally:
        sock.close()


def _decode(message):
    header, _, body = message.partition("\n")
    assert header == PROTOCOL_HEADER
    return json.loads(body)


def test_udp_reporter_sends_one_datagram(daemon):
    reporter = UDPSegmentReporter(*daemon.getsockname())
    try:
        reporter.report(Segment(name="GET /orders", id="2", trace_id="1", start_time=1000, duration=250000))
        data, _ = daemon.recvfrom(65535)
    finally:
        reporter.close()

    document = _decode(data.decode("utf-8"))
    assert document["name"] == "GET /orders"
    assert document["start_time"] == 1.0
    assert document["end_time"] == 1.25


def test_udp_reporter_swallows_socket_errors():
    reporter = UDPSegmentReporter("127.0.0.1", 2000)
    sock = mock.Mock()
    sock.sendto.side_effect = OSError("network unreachable")
    reporter._sock = sock
    with mock.patch("xraytrace.reporter.log") as log:
        reporter.report(Segment(name="s", start_time=1))
    assert log.warning.call_count == 1


def test_udp_reporter_defaults_to_daemon_config():
    with mock.patch("xraytrace.reporter.daemon_config") as config:
        config.daemon_host = "10.0.0.1"
        config.daemon_port = 3000
        reporter = UDPSegmentReporter()
    assert (reporter.host, reporter.port) == ("10.0.0.1", 3000)


def test_udp_reporter_close_is_idempotent():
    reporter = UDPSegmentReporter("127.0.0.1", 2000)
    reporter._get_socket()
    reporter.close()
    reporter.close()
    assert reporter._sock is None


def test_log_reporter():
    out = DummyOutput()
    reporter = LogSegmentReporter(out=out)
    reporter.report(Segment(name="s", start_time=1500))
    reporter.report(Segment(name="t", start_time=1500))

    assert len(out.entries) == 2
    assert _decode(out.entries[0].rstrip("\n"))["name"] == "s"
    assert _decode(out.entries[1].rstrip("\n"))["in_progress"] is True


@pytest.mark.parametrize(
    "host,family",
    [
        ("127.0.0.1", socket.AF_INET),
        ("localhost", socket.AF_INET),
        ("::1", socket.AF_INET6),
        ("fe80::1", socket.AF_INET6),
    ],
)
def test_udp_reporter_socket_family(host, family):
    reporter = UDPSegmentReporter(host, 2000)
    with mock.patch("xraytrace.reporter.socket.socket") as socket_cls:
        reporter._get_socket()
    socket_cls.assert_called_once_with(family, socket.SOCK_DGRAM)


def test_log_reporter_uses_current_stdout():
    out = DummyOutput()
    with mock.patch("sys.stdout", new=out):
        reporter = LogSegmentReporter()
        reporter.report(Segment(name="s", start_time=1500))
    assert reporter.out is out
    assert _decode(out.entries[0].rstrip("\n"))["name"] == "s"


def test_log_reporter_swallows_write_errors():
    out = io.StringIO()
    out.close()
    reporter = LogSegmentReporter(out=out)
    with mock.patch("xraytrace.reporter.log") as log:
        reporter.report(Segment(name="s", start_time=1))
    assert log.warning.call_count == 1
