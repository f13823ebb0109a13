import socket
from typing import Tuple
from typing import TypeVar
from typing import Union

from xraytrace.settings._core import XRayConfig


DEFAULT_DAEMON_HOST = "127.0.0.1"
DEFAULT_DAEMON_PORT = 2000
DEFAULT_DAEMON_ADDRESS = "%s:%d" % (DEFAULT_DAEMON_HOST, DEFAULT_DAEMON_PORT)

T = TypeVar("T")


# This method returns if a hostname is an IPv6 address
def is_ipv6_hostname(hostname: Union[T, str]) -> bool:
    if not isinstance(hostname, str):
        return False
    try:
        socket.inet_pton(socket.AF_INET6, hostname)
        return True
    except socket.error:  # not a valid address
        return False


def parse_daemon_address(address: str) -> Tuple[str, int]:
    """Split a daemon address into its UDP host and port.

    Accepts the plain ``host:port`` form as well as the ``tcp:host:port udp:host:port``
    pair used when the daemon listens on distinct addresses; only the UDP half is
    relevant for segment emission. IPv6 hosts must be bracketed, ``[::1]:2000``.
    """
    address = address.strip()
    if not address:
        return DEFAULT_DAEMON_HOST, DEFAULT_DAEMON_PORT

    parts = address.split()
    if len(parts) == 2:
        udp = [p for p in parts if p.startswith("udp:")]
        if not udp:
            raise ValueError("Invalid daemon address %r: missing udp address" % address)
        address = udp[0][len("udp:") :]
    elif len(parts) > 2:
        raise ValueError("Invalid daemon address %r" % address)

    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError("Invalid daemon address %r: expected host:port" % address)
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host or DEFAULT_DAEMON_HOST, int(port)


def _derive_daemon_host(config: "DaemonConfig") -> str:
    return parse_daemon_address(config._daemon_address)[0]


def _derive_daemon_port(config: "DaemonConfig") -> int:
    return parse_daemon_address(config._daemon_address)[1]


class DaemonConfig(XRayConfig):
    __prefix__ = "aws_xray"

    _daemon_address = XRayConfig.v(
        str,
        "daemon_address",
        default=DEFAULT_DAEMON_ADDRESS,
        help_type="String",
        help="Address of the X-Ray daemon, either ``host:port`` or ``tcp:host:port udp:host:port``",
    )

    # Effective daemon UDP endpoint (this is the one that will be used)
    daemon_host = XRayConfig.d(str, _derive_daemon_host)
    daemon_port = XRayConfig.d(int, _derive_daemon_port)


config = DaemonConfig()
