"""Detection of the init system that governs the local host."""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Type

from daemon_service_manager.config import ServiceConfig
from daemon_service_manager.system import CommandRunner
from daemon_service_manager.backends.base import ServiceManagerBackend
from daemon_service_manager.backends.systemd import SystemdServiceManager
from daemon_service_manager.backends.upstart import UpstartServiceManager
from daemon_service_manager.backends.sysv import SysVServiceManager

logger = logging.getLogger(__name__)

SYSTEMD_MARKER = Path('run/systemd/system')
UPSTART_MARKER = Path('etc/init')
UPSTART_CONTROL = Path('sbin/initctl')


class InitSystem(Enum):
    """Init systems with a service manager backend."""
    SYSTEMD = 'systemd'
    UPSTART = 'upstart'
    SYSV = 'sysv'


BACKENDS = {
    InitSystem.SYSTEMD: SystemdServiceManager,
    InitSystem.UPSTART: UpstartServiceManager,
    InitSystem.SYSV: SysVServiceManager,
}


def detect_init_system(root: Path = Path('/')) -> InitSystem:
    """
    Decide which init system manages services on this host.

    systemd wins whenever its runtime directory exists, since upgraded hosts
    often keep upstart or SysV files around. Upstart needs both its config
    directory and initctl. Everything else is treated as SysV.
    """
    root = Path(root)
    if (root / SYSTEMD_MARKER).is_dir():
        logger.debug('Found %s, using systemd', root / SYSTEMD_MARKER)
        return InitSystem.SYSTEMD

    if (root / UPSTART_MARKER).is_dir() and (root / UPSTART_CONTROL).exists():
        logger.debug('Found %s and %s, using upstart', root / UPSTART_MARKER, root / UPSTART_CONTROL)
        return InitSystem.UPSTART

    logger.debug('No systemd or upstart markers under %s, using SysV init', root)
    return InitSystem.SYSV


def get_backend_class(init_system: InitSystem) -> Type[ServiceManagerBackend]:
    return BACKENDS[init_system]


def get_backend(
    config: ServiceConfig,
    runner: Optional[CommandRunner] = None,
    root: Path = Path('/'),
    init_system: Optional[InitSystem] = None
) -> ServiceManagerBackend:
    """Build the backend for ``init_system``, detecting it from ``root`` when not given."""
    if init_system is None:
        init_system = detect_init_system(root)
    logger.info('Using %s backend for service %s', init_system.value, config.service_name)
    return get_backend_class(init_system)(config, runner, root)
