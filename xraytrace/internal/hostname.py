import ipaddress
import os
import socket
from typing import Optional

from xraytrace.internal.logger import get_logger


log = get_logger(__name__)

LOOPBACK_ADDRESS = "127.0.0.1"

# Any routable address works, nothing is sent when connecting a UDP socket.
_PROBE_ADDRESS = ("10.255.255.255", 1)

_hostname = os.getenv("XRAY_HOSTNAME", "")  # type: str


def get_hostname():
    # type: () -> str
    global _hostname
    if not _hostname:
        _hostname = socket.gethostname()
    return _hostname


def _reset():
    global _hostname
    _hostname = ""


def ip_address_as_int(host):
    # type: (str) -> int
    """Resolve ``host`` and pack its IPv4 address into an unsigned integer.

    Raises ``OSError`` when the name cannot be resolved and ``ValueError`` when it
    does not resolve to an IPv4 address.
    """
    return int(ipaddress.IPv4Address(socket.gethostbyname(host)))


def find_first_non_loopback_address():
    # type: () -> Optional[str]
    """Return an IPv4 address of this host that is not a loopback address, if any."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(_PROBE_ADDRESS)
        address = sock.getsockname()[0]
    except OSError:
        address = None
    finally:
        sock.close()

    if address and not ipaddress.IPv4Address(address).is_loopback:
        return address

    try:
        address = socket.gethostbyname(get_hostname())
    except OSError:
        log.debug("Cannot resolve local hostname %r", get_hostname(), exc_info=True)
        return None
    if ipaddress.IPv4Address(address).is_loopback:
        return None
    return address
