"""Init system specific service manager backends."""

from daemon_service_manager.backends.base import ServiceManagerBackend
from daemon_service_manager.backends.systemd import SystemdServiceManager
from daemon_service_manager.backends.upstart import UpstartServiceManager
from daemon_service_manager.backends.sysv import SysVServiceManager

__all__ = [
    'ServiceManagerBackend',
    'SystemdServiceManager',
    'UpstartServiceManager',
    'SysVServiceManager',
]
