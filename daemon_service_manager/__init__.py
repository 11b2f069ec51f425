"""
Daemon Service Manager - init system independent service management.

This library provides a unified interface for installing, removing, starting,
stopping and querying a service on Linux hosts running systemd, upstart or
SysV init.
"""
__version__ = "0.1.0"

from daemon_service_manager.manager import ServiceManager
from daemon_service_manager.config import ServiceConfig
from daemon_service_manager.detector import InitSystem, detect_init_system, get_backend
from daemon_service_manager.system import CommandRunner, CommandResult
from daemon_service_manager.status import (
    ServiceStatus,
    InstallationStatus,
    RunningStatus,
    RunningState,
    OperationResult,
)
from daemon_service_manager.exceptions import (
    ServiceManagerError,
    ServicePrivilegeError,
    ServiceNotInstalledError,
    ServiceAlreadyInstalledError,
    ServiceAlreadyRunningError,
    ServiceAlreadyStoppedError,
    ServiceNotExecutableError,
    ServiceFileError,
    ServiceOperationError,
    ServiceReloadError,
    ServiceUnknownOutputError,
    ServiceOperation,
)

__all__ = [
    # Main classes
    "ServiceManager",
    "ServiceConfig",
    "InitSystem",
    "detect_init_system",
    "get_backend",
    "CommandRunner",
    "CommandResult",
    # Status types
    "ServiceStatus",
    "InstallationStatus",
    "RunningStatus",
    "RunningState",
    "OperationResult",
    # Exceptions
    "ServiceManagerError",
    "ServicePrivilegeError",
    "ServiceNotInstalledError",
    "ServiceAlreadyInstalledError",
    "ServiceAlreadyRunningError",
    "ServiceAlreadyStoppedError",
    "ServiceNotExecutableError",
    "ServiceFileError",
    "ServiceOperationError",
    "ServiceReloadError",
    "ServiceUnknownOutputError",
    "ServiceOperation",
]
