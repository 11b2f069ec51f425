"""Service status types and enums."""

from enum import Enum
from typing import NamedTuple, Optional

from daemon_service_manager.config import (
    SUCCESS_MARKER, FAILED_MARKER, STATUS_RUNNING_PID, STATUS_RUNNING, STATUS_STOPPED
)


class InstallationStatus(Enum):
    """Status indicating whether a service definition file exists."""
    INSTALLED = "INSTALLED"
    NOT_INSTALLED = "NOT_INSTALLED"


class RunningStatus(Enum):
    """Status indicating whether a service is currently running."""
    RUNNING = "RUNNING"
    NOT_RUNNING = "NOT_RUNNING"


class RunningState(NamedTuple):
    """Running state parsed from the output of an init system status command."""
    running: bool
    pid: Optional[int] = None

    def describe(self) -> str:
        """Human-readable status line."""
        if not self.running:
            return STATUS_STOPPED
        if self.pid:
            return STATUS_RUNNING_PID.format(pid=self.pid)
        return STATUS_RUNNING


class ServiceStatus:
    """Combined status of a service."""

    def __init__(
        self,
        installation_status: InstallationStatus,
        running_status: RunningStatus,
        pid: Optional[int] = None
    ):
        self.installation_status = installation_status
        self.running_status = running_status
        self.pid = pid

    def __str__(self) -> str:
        return (
            f'ServiceStatus('
            f'installation={self.installation_status.name}, '
            f'running={self.running_status.name}, '
            f'pid={self.pid})'
        )

    def __repr__(self) -> str:
        return self.__str__()


class OperationResult:
    """Outcome of a service operation."""

    def __init__(self, action: str, succeeded: bool, error: Optional[Exception] = None):
        self.action = action
        self.succeeded = succeeded
        self.error = error

    def __str__(self) -> str:
        return self.action + (SUCCESS_MARKER if self.succeeded else FAILED_MARKER)

    def __repr__(self) -> str:
        return f'OperationResult(action={self.action!r}, succeeded={self.succeeded}, error={self.error!r})'

    def __bool__(self) -> bool:
        return self.succeeded
