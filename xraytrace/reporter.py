import abc
import socket
import sys
import threading
from typing import Optional
from typing import TYPE_CHECKING
from typing import TextIO

from .internal.encoding import SegmentEncoder
from .internal.logger import get_logger
from .settings import daemon_config
from .settings import is_ipv6_hostname


if TYPE_CHECKING:  # pragma: no cover
    from .segment import Segment


log = get_logger(__name__)


class SegmentReporter(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def report(self, segment):
        # type: (Segment) -> None
        """Submit a completed segment. Delivery is best effort."""

    def close(self):
        # type: () -> None
        pass


class LogSegmentReporter(SegmentReporter):
    """Writes each segment as a daemon message line to a text stream."""

    def __init__(
        self,
        out=None,  # type: Optional[TextIO]
    ):
        # type: (...) -> None
        self.encoder = SegmentEncoder()
        self.out = sys.stdout if out is None else out

    def report(self, segment):
        # type: (Segment) -> None
        encoded = self.encoder.encode_segment(segment)
        try:
            self.out.write(encoded + "\n")
            self.out.flush()
        except (OSError, ValueError):
            # ValueError is raised when writing to a closed stream
            log.warning("failed to write segment %r to %r", segment.name, self.out, exc_info=True)


class UDPSegmentReporter(SegmentReporter):
    """Sends one datagram per segment to the X-Ray daemon.

    Nothing is acknowledged or retried: a datagram that cannot be sent is logged
    and dropped.
    """

    def __init__(
        self,
        host=None,  # type: Optional[str]
        port=None,  # type: Optional[int]
    ):
        # type: (...) -> None
        self.host = daemon_config.daemon_host if host is None else host
        self.port = daemon_config.daemon_port if port is None else port
        self.encoder = SegmentEncoder()
        self._sock = None  # type: Optional[socket.socket]
        self._sock_lck = threading.Lock()

    def __repr__(self):
        return "%s(host=%r, port=%r)" % (self.__class__.__name__, self.host, self.port)

    def _get_socket(self):
        # type: () -> socket.socket
        if self._sock is None:
            family = socket.AF_INET6 if is_ipv6_hostname(self.host) else socket.AF_INET
            self._sock = socket.socket(family, socket.SOCK_DGRAM)
        return self._sock

    def report(self, segment):
        # type: (Segment) -> None
        payload = self.encoder.encode_segment(segment).encode("utf-8")
        try:
            with self._sock_lck:
                self._get_socket().sendto(payload, (self.host, self.port))
        except OSError:
            log.warning(
                "failed to send segment %r to the X-Ray daemon at %s:%s",
                segment.name,
                self.host,
                self.port,
                exc_info=True,
            )

    def close(self):
        # type: () -> None
        with self._sock_lck:
            if self._sock is not None:
                self._sock.close()
                self._sock = None
