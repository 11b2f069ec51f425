"""Service manager - init system independent service management."""

from pathlib import Path
from typing import Optional, Union

from daemon_service_manager.config import ServiceConfig
from daemon_service_manager.status import OperationResult, ServiceStatus
from daemon_service_manager.system import CommandRunner
from daemon_service_manager.backends.base import ServiceManagerBackend
from daemon_service_manager.detector import InitSystem, detect_init_system, get_backend


class ServiceManager:
    """
    Init system independent service manager.

    Provides a unified interface for managing a service on hosts running
    systemd, upstart or SysV init. The init system is detected once, when
    the manager is created. Operations and their errors are documented on
    ServiceManagerBackend.
    """

    def __init__(
        self,
        config: ServiceConfig,
        runner: Optional[CommandRunner] = None,
        root: Path = Path('/'),
        init_system: Optional[InitSystem] = None
    ):
        """
        Initialize the service manager.

        Args:
            config: Service configuration.
            runner: Runs init system commands. Defaults to a subprocess based runner.
            root: Filesystem root used for detection and definition files.
            init_system: Skip detection and use this init system.
        """
        self.config = config
        self._init_system = init_system or detect_init_system(root)
        self._backend: ServiceManagerBackend = get_backend(config, runner, root, self._init_system)

    def install(self) -> OperationResult:
        return self._backend.install()

    def install_from_path(self, path: Union[str, Path]) -> OperationResult:
        return self._backend.install_from_path(path)

    def remove(self) -> OperationResult:
        return self._backend.remove()

    def start(self) -> OperationResult:
        return self._backend.start()

    def stop(self) -> OperationResult:
        return self._backend.stop()

    def status(self) -> str:
        """Get a human-readable status line, e.g. "Service is stopped"."""
        return self._backend.status()

    @property
    def name(self) -> str:
        """Get the service name."""
        return self._backend.service_name

    @property
    def init_system(self) -> InitSystem:
        """Get the init system selected for this host."""
        return self._init_system

    @property
    def backend(self) -> ServiceManagerBackend:
        return self._backend

    @property
    def current_status(self) -> ServiceStatus:
        """Get the current installation and running status of the service."""
        return self._backend.current_status
