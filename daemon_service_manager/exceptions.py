"""Service manager exceptions."""

from enum import Enum
from typing import Optional

from daemon_service_manager.config import FAILED_MARKER, ROOT_PRIVILEGES_MESSAGE
from daemon_service_manager.status import OperationResult


class ServiceOperation(Enum):
    """Operations that can be performed on a service."""
    INSTALL = 'install'
    REMOVE = 'remove'
    START = 'start'
    STOP = 'stop'
    GET_STATUS = 'getStatus'


class ServiceManagerError(Exception):
    """Base exception for service manager errors.

    ``action`` is the label of the operation that failed, e.g. ``"Starting My Service:"``.
    """

    def __init__(self, message: str = '', action: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.action = action

    @property
    def result(self) -> OperationResult:
        """The failed OperationResult for this error."""
        return OperationResult(self.action or '', False, self)

    @property
    def display(self) -> str:
        """The failure line as shown to a user."""
        return (self.action or '') + FAILED_MARKER


class ServicePrivilegeError(ServiceManagerError):
    """Raised when the caller does not have root privileges."""

    def __init__(self, message: str = ROOT_PRIVILEGES_MESSAGE, action: Optional[str] = None):
        super().__init__(message, action)


class ServiceNotInstalledError(ServiceManagerError):
    """Raised when an operation requires the service to be installed."""
    pass


class ServiceAlreadyInstalledError(ServiceManagerError):
    """Raised when trying to install a service that is already installed."""
    pass


class ServiceAlreadyRunningError(ServiceManagerError):
    """Raised when trying to start a service that is already running."""
    pass


class ServiceAlreadyStoppedError(ServiceManagerError):
    """Raised when trying to stop a service that is already stopped."""
    pass


class ServiceNotExecutableError(ServiceManagerError):
    """Raised when the target program is missing or has no executable bit set."""
    pass


class ServiceFileError(ServiceManagerError):
    """Raised when a service definition file cannot be written or removed."""
    pass


class ServiceOperationError(ServiceManagerError):
    """Raised when an init system command fails."""

    def __init__(
        self,
        operation: ServiceOperation,
        message: str,
        output: str = '',
        action: Optional[str] = None
    ):
        super().__init__(f"Operation {operation.value} failed: {message}", action)
        self.operation = operation
        self.message = message
        self.output = output


class ServiceReloadError(ServiceOperationError):
    """Raised when the init system fails to reload its configuration."""
    pass


class ServiceUnknownOutputError(ServiceOperationError):
    """Raised when init system output matches none of the known patterns."""
    pass
