from typing import Optional

from envier import validators

from xraytrace.internal.hostname import get_hostname
from xraytrace.settings._core import XRayConfig


DEFAULT_APPLICATION_NAME = "unknown"
DEFAULT_SERVER_PORT = 8080

REPORTER_UDP = "udp"
REPORTER_LOG = "log"


class Config(XRayConfig):
    __prefix__ = "xray"

    enabled = XRayConfig.v(
        bool,
        "enabled",
        default=True,
        help_type="Boolean",
        help="Enables reporting of spans to the X-Ray daemon",
    )

    service_name = XRayConfig.v(
        Optional[str],
        "service_name",
        default=None,
        help_type="String",
        help="Explicit service name, overrides both the application name and the registry record",
    )

    application_name = XRayConfig.v(
        str,
        "application_name",
        default=DEFAULT_APPLICATION_NAME,
        help_type="String",
        help="Name of the instrumented application",
    )

    server_port = XRayConfig.v(
        int,
        "server_port",
        default=DEFAULT_SERVER_PORT,
        help_type="Int",
        help="Port the instrumented application listens on",
    )

    server_address = XRayConfig.v(
        Optional[str],
        "server_address",
        default=None,
        help_type="String",
        help="Address the instrumented application is bound to, detected when unset",
    )

    instance_id = XRayConfig.v(
        Optional[str],
        "instance_id",
        default=None,
        help_type="String",
        help="Explicit instance id reported on RPC spans",
    )

    instance_index = XRayConfig.v(
        Optional[str],
        "instance_index",
        default=None,
        help_type="String",
        help="Instance index used to build the default instance id, the server port when unset",
    )

    locator_discovery_enabled = XRayConfig.v(
        bool,
        "locator_discovery_enabled",
        default=False,
        help_type="Boolean",
        help="Resolve the local endpoint from the service registry before falling back to static settings",
    )

    reporter = XRayConfig.v(
        str,
        "reporter",
        default=REPORTER_UDP,
        parser=str.lower,
        validator=validators.choice([REPORTER_UDP, REPORTER_LOG]),
        help_type="String",
        help="Segment reporter to use, ``udp`` sends to the daemon and ``log`` writes to stdout",
    )


def _has_text(value):
    # type: (Optional[str]) -> bool
    return bool(value and value.strip())


def default_instance_id(config):
    # type: (Config) -> Optional[str]
    """Return the instance id of this process.

    The explicit ``XRAY_INSTANCE_ID`` wins. Otherwise the id is built from the
    host name, the application name and the instance index (or the server port),
    joined with ``:`` and skipping blank parts.
    """
    if _has_text(config.instance_id):
        return config.instance_id
    index = config.instance_index if _has_text(config.instance_index) else str(config.server_port)
    parts = [get_hostname(), config.application_name, index]
    return ":".join(p for p in parts if _has_text(p)) or None


config = Config()
