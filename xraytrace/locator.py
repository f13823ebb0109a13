"""
Endpoint locators resolve the identity of the local service: its name, the IPv4
address it is visible at and the port it listens on.

Three implementations are provided:

* :class:`ServerPropertiesEndpointLocator` builds the endpoint from static settings.
* :class:`DiscoveryClientEndpointLocator` asks a service registry for the
  instance registered by this process.
* :class:`FallbackHavingEndpointLocator` composes the two, trying the registry
  first and using the static settings when the registry cannot answer.
"""
import abc
import ipaddress
from typing import Optional

import attr

from .endpoint import Endpoint
from .exceptions import NoServiceInstanceAvailable
from .internal.hostname import LOOPBACK_ADDRESS
from .internal.hostname import find_first_non_loopback_address
from .internal.hostname import ip_address_as_int
from .internal.logger import get_logger
from .settings import Config


log = get_logger(__name__)


@attr.s(frozen=True, slots=True)
class ServiceInstance(object):
    service_id = attr.ib(type=str)
    host = attr.ib(type=str)
    port = attr.ib(type=int)


class DiscoveryClient(metaclass=abc.ABCMeta):
    """Read access to a service registry."""

    @abc.abstractmethod
    def get_local_service_instance(self):
        # type: () -> Optional[ServiceInstance]
        """Return the instance registered by this process, or ``None`` when it is not registered."""


class EndpointLocator(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def local(self):
        # type: () -> Endpoint
        """Return the local endpoint, raise :class:`NoServiceInstanceAvailable` when it cannot be determined."""


def _has_text(value):
    # type: (Optional[str]) -> bool
    return bool(value and value.strip())


class ServerPropertiesEndpointLocator(EndpointLocator):
    """Builds the local endpoint from the configured server port and address."""

    def __init__(self, config):
        # type: (Config) -> None
        self._config = config

    def local(self):
        # type: () -> Endpoint
        return Endpoint(
            service_name=self._service_name(),
            ipv4=self._address(),
            port=self._config.server_port,
        )

    def _service_name(self):
        # type: () -> str
        if _has_text(self._config.service_name):
            return self._config.service_name
        return self._config.application_name

    def _address(self):
        # type: () -> int
        if self._config.server_address:
            try:
                return ip_address_as_int(self._config.server_address)
            except (OSError, ValueError) as e:
                address = self._config.server_address
                raise NoServiceInstanceAvailable("Cannot resolve server address %r" % address) from e
        address = find_first_non_loopback_address() or LOOPBACK_ADDRESS
        return int(ipaddress.IPv4Address(address))


class DiscoveryClientEndpointLocator(EndpointLocator):
    """Finds the local endpoint in a service registry.

    The configured service name, when set, takes precedence over the service id
    of the registry record.
    """

    def __init__(self, client, config):
        # type: (DiscoveryClient, Config) -> None
        self._client = client
        self._config = config

    def local(self):
        # type: () -> Endpoint
        instance = self._client.get_local_service_instance()
        if instance is None:
            raise NoServiceInstanceAvailable()
        if _has_text(self._config.service_name):
            service_name = self._config.service_name
        else:
            service_name = instance.service_id
        log.debug("Span will contain serviceName [%s]", service_name)
        return Endpoint(service_name=service_name, ipv4=self._ip_address(instance), port=instance.port)

    @staticmethod
    def _ip_address(instance):
        # type: (ServiceInstance) -> int
        try:
            return ip_address_as_int(instance.host)
        except (OSError, ValueError):
            return 0


class FallbackHavingEndpointLocator(EndpointLocator):
    def __init__(self, discovery_locator, fallback):
        # type: (Optional[EndpointLocator], EndpointLocator) -> None
        self._discovery_locator = discovery_locator
        self._fallback = fallback

    def local(self):
        # type: () -> Endpoint
        if self._discovery_locator is None:
            return self._fallback.local()
        try:
            return self._discovery_locator.local()
        except NoServiceInstanceAvailable:
            return self._fallback.local()
