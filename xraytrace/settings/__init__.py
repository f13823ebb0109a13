from ._config import Config
from ._config import config
from ._config import default_instance_id
from ._core import ValueSource
from ._core import XRayConfig
from ._daemon import DaemonConfig
from ._daemon import config as daemon_config
from ._daemon import is_ipv6_hostname


__all__ = [
    "Config",
    "DaemonConfig",
    "ValueSource",
    "XRayConfig",
    "config",
    "daemon_config",
    "default_instance_id",
    "is_ipv6_hostname",
]
