"""Abstract base class for init system specific service managers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, List, Union
import logging
import re

from daemon_service_manager.config import ServiceConfig
from daemon_service_manager.exceptions import (
    ServiceOperation, ServiceOperationError, ServicePrivilegeError,
    ServiceNotInstalledError, ServiceAlreadyInstalledError,
    ServiceNotExecutableError, ServiceFileError, ServiceUnknownOutputError
)
from daemon_service_manager.status import (
    OperationResult, RunningState, ServiceStatus, InstallationStatus, RunningStatus
)
from daemon_service_manager.system import (
    CommandResult, CommandRunner, check_privileges, executable_path, is_executable
)


class ServiceManagerBackend(ABC):
    """Abstract base class for init system specific service manager implementations.

    Subclasses translate install/remove/start/stop/status into the commands and
    definition files of one init system. Installed and running state are probed
    fresh on every call.
    """

    #: Output of a failed stop that means the init system no longer knows the service.
    UNKNOWN_SERVICE_PATTERN: Optional[str] = None

    def __init__(
        self,
        config: ServiceConfig,
        runner: Optional[CommandRunner] = None,
        root: Path = Path('/')
    ):
        """
        Initialize the service manager backend.

        Args:
            config: Identity of the service.
            runner: Runs external commands. Defaults to a plain CommandRunner.
            root: Filesystem root that definition file paths are relative to.
        """
        self.config = config
        self.runner = runner or CommandRunner()
        self.root = Path(root)
        self.logger = logging.getLogger(f'{self.__class__.__name__}.{config.service_name}')

    @property
    def service_name(self) -> str:
        return self.config.service_name

    @property
    def description(self) -> str:
        return self.config.description

    @property
    @abstractmethod
    def service_file_path(self) -> Path:
        """Location of the service definition file."""
        pass

    @abstractmethod
    def install_from_path(self, path: Union[str, Path]) -> OperationResult:
        """
        Install the service to run the executable at ``path``.

        Raises:
            ServicePrivilegeError: If not running as root.
            ServiceAlreadyInstalledError: If the definition file already exists.
            ServiceNotExecutableError: If ``path`` is missing or not executable.
            ServiceFileError: If the definition file cannot be written.
            ServiceReloadError: If the init system fails to pick up the new service.
        """
        pass

    @abstractmethod
    def remove(self) -> OperationResult:
        """
        Stop the service if it is running and delete its definition file.

        Raises:
            ServicePrivilegeError: If not running as root.
            ServiceNotInstalledError: If the service is not installed.
            ServiceOperationError: If the service cannot be stopped.
            ServiceFileError: If the definition file cannot be removed.
        """
        pass

    @abstractmethod
    def start(self) -> OperationResult:
        """
        Start the service.

        Raises:
            ServicePrivilegeError: If not running as root.
            ServiceNotInstalledError: If the service is not installed.
            ServiceAlreadyRunningError: If the service is already running.
            ServiceOperationError: If the start command fails.
        """
        pass

    @abstractmethod
    def stop(self) -> OperationResult:
        """
        Stop the service.

        Raises:
            ServicePrivilegeError: If not running as root.
            ServiceNotInstalledError: If the service is not installed.
            ServiceAlreadyStoppedError: If the service is not running.
            ServiceOperationError: If the stop command fails.
        """
        pass

    @abstractmethod
    def _status_command(self) -> List[str]:
        """Command whose output tells whether the service is running."""
        pass

    @staticmethod
    @abstractmethod
    def parse_running_state(returncode: int, output: str) -> RunningState:
        """Interpret the result of the status command.

        Raises:
            ServiceUnknownOutputError: If the output matches no known pattern.
        """
        pass

    def install(self) -> OperationResult:
        """Install the configured executable, looking it up by service name if none is set."""
        path = self.config.executable_path or executable_path(self.service_name)
        self.logger.debug('Resolved executable for %s: %s', self.service_name, path)
        return self.install_from_path(path)

    def status(self) -> str:
        """
        Get a human-readable status line for the service.

        Raises:
            ServicePrivilegeError: If not running as root.
            ServiceNotInstalledError: If the service is not installed.
        """
        self._require_privileges(None)
        self._require_installed(None)
        state = self.check_running()
        self.logger.info('Service %s: %s', self.service_name, state.describe())
        return state.describe()

    def is_installed(self) -> bool:
        return self.service_file_path.exists()

    def check_running(self, action: Optional[str] = None) -> RunningState:
        """Run the status command and parse its output.

        ``action`` labels a ServiceUnknownOutputError raised while parsing.
        """
        result = self.runner.run(self._status_command())
        try:
            state = self.parse_running_state(result.returncode, result.output)
        except ServiceUnknownOutputError as e:
            self.logger.error('Cannot parse status of %s: %s', self.service_name, result.output.strip())
            e.action = action
            raise
        self.logger.debug('Running state of %s: %s', self.service_name, state)
        return state

    @property
    def current_status(self) -> ServiceStatus:
        """Get the current status of the service without a privilege check."""
        if not self.is_installed():
            return ServiceStatus(InstallationStatus.NOT_INSTALLED, RunningStatus.NOT_RUNNING)
        state = self.check_running()
        return ServiceStatus(
            InstallationStatus.INSTALLED,
            RunningStatus.RUNNING if state.running else RunningStatus.NOT_RUNNING,
            state.pid
        )

    def _action(self, verb: str) -> str:
        return f'{verb} {self.description}:'

    def _require_privileges(self, action: Optional[str]) -> None:
        if not check_privileges(self.runner):
            self.logger.warning('Root privileges required for %s', self.service_name)
            raise ServicePrivilegeError(action=action)

    def _require_installed(self, action: Optional[str]) -> None:
        if not self.is_installed():
            self.logger.warning('Service %s is not installed', self.service_name)
            raise ServiceNotInstalledError(f'{self.description} is not installed', action)

    def _require_not_installed(self, action: str) -> None:
        if self.is_installed():
            self.logger.warning('Service %s is already installed', self.service_name)
            raise ServiceAlreadyInstalledError(f'{self.description} already installed', action)

    def _require_executable(self, path: Union[str, Path], action: str) -> None:
        try:
            executable = is_executable(path)
        except OSError as e:
            self.logger.error('Cannot stat target %s: %s', path, e)
            raise ServiceNotExecutableError(f'target is not accessible: {path}: {e}', action) from e
        if not executable:
            self.logger.error('Target is not executable: %s', path)
            raise ServiceNotExecutableError(f'target is not executable: {path}', action)

    def _write_service_file(self, content: str, action: str, mode: int = 0o644) -> None:
        self.logger.info('Creating service file at %s', self.service_file_path)
        try:
            self.service_file_path.parent.mkdir(parents=True, exist_ok=True)
            self.service_file_path.write_text(content)
            self.service_file_path.chmod(mode)
        except OSError as e:
            self.logger.error('Failed to write service file %s: %s', self.service_file_path, e)
            self._rollback_install()
            raise ServiceFileError(f'Failed to write {self.service_file_path}: {e}', action) from e

    def _rollback_install(self) -> None:
        """Undo a partial install so that it can be retried."""
        self.logger.info('Rolling back installation of %s', self.service_name)
        try:
            self.service_file_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning('Failed to remove %s during rollback: %s', self.service_file_path, e)

    def _delete_service_file(self, action: str) -> None:
        self.logger.info('Removing service file: %s', self.service_file_path)
        try:
            self.service_file_path.unlink()
        except OSError as e:
            self.logger.error('Failed to remove service file %s: %s', self.service_file_path, e)
            raise ServiceFileError(f'Failed to remove {self.service_file_path}: {e}', action) from e

    def _run_checked(
        self,
        args: List[str],
        operation: ServiceOperation,
        action: str,
        error_class=ServiceOperationError
    ) -> CommandResult:
        result = self.runner.run(args)
        if not result.ok:
            self.logger.error('Command %s failed (%d): %s', ' '.join(args), result.returncode, result.output.strip())
            raise error_class(
                operation,
                f'{" ".join(args)} exited with {result.returncode}: {result.output.strip()}',
                result.output, action
            )
        return result

    def _stop_for_removal(self, args: List[str], action: str) -> None:
        """Stop the service ahead of removal; an already unknown service counts as stopped."""
        self._check_removal_stop(self.runner.run(args), action)

    def _check_removal_stop(self, result: CommandResult, action: str) -> None:
        if result.ok:
            return
        if self.UNKNOWN_SERVICE_PATTERN and re.search(self.UNKNOWN_SERVICE_PATTERN, result.output):
            self.logger.info('Service %s is unknown to the init system, treating as stopped', self.service_name)
            return
        self.logger.error('Failed to stop service before removal: %s', result.output.strip())
        raise ServiceOperationError(
            ServiceOperation.REMOVE, f'unknown error: {result.output.strip()}', result.output, action
        )

    def _success(self, action: str) -> OperationResult:
        return OperationResult(action, True)
