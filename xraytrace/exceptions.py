class XRayTraceError(Exception):
    pass


class NoServiceInstanceAvailable(XRayTraceError):
    """Raised by an endpoint locator that cannot determine the local service instance."""
