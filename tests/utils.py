import contextlib
import os

from xraytrace.endpoint import Endpoint
from xraytrace.locator import EndpointLocator


@contextlib.contextmanager
def override_env(env, replace_os_env=False):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with override_env(dict(XRAY_SERVICE_NAME="orders")):
            # Your test
    """
    # Copy the full original environment
    original = dict(os.environ)

    # We allow callers to clear out the environment to prevent leaking variables into the test
    if replace_os_env:
        os.environ.clear()

    for k in list(os.environ.keys()):
        if k.startswith(("XRAY_", "AWS_XRAY_")):
            del os.environ[k]

    # Update based on the passed in arguments
    os.environ.update(env)
    try:
        yield
    finally:
        # Full clear the environment out and reset back to the original
        os.environ.clear()
        os.environ.update(original)


class StaticEndpointLocator(EndpointLocator):
    def __init__(self, endpoint=None):
        self.endpoint = endpoint or Endpoint(service_name="orders", ipv4=0x7F000001, port=8080)
        self.calls = 0

    def local(self):
        self.calls += 1
        return self.endpoint


class DummyReporter(object):
    def __init__(self):
        self.segments = []

    def report(self, segment):
        self.segments.append(segment)

    def pop(self):
        segments = self.segments
        self.segments = []
        return segments


class DummyOutput:
    def __init__(self):
        self.entries = []

    def write(self, message):
        self.entries.append(message)

    def flush(self):
        pass
