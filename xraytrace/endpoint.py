import ipaddress

import attr


@attr.s(frozen=True, slots=True)
class Endpoint(object):
    """Network identity of a service instance. ``ipv4`` is the address packed into an int."""

    service_name = attr.ib(type=str)
    ipv4 = attr.ib(type=int, default=0)
    port = attr.ib(type=int, default=0)

    @property
    def ipv4_string(self):
        # type: () -> str
        return str(ipaddress.IPv4Address(self.ipv4))

    def with_service_name(self, service_name):
        # type: (str) -> Endpoint
        return attr.evolve(self, service_name=service_name)

    def to_dict(self):
        return {"service_name": self.service_name, "ipv4": self.ipv4_string, "port": self.port}
