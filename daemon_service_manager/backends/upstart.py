"""Linux upstart service manager backend."""

import re
from pathlib import Path
from typing import List, Union

from daemon_service_manager.backends.base import ServiceManagerBackend
from daemon_service_manager.backends.templates import UPSTART_CONF_TEMPLATE
from daemon_service_manager.status import OperationResult, RunningState
from daemon_service_manager.system import CommandResult
from daemon_service_manager.exceptions import (
    ServiceManagerError, ServiceOperation, ServiceReloadError,
    ServiceAlreadyRunningError, ServiceAlreadyStoppedError, ServiceUnknownOutputError
)

RUNNING_TOKEN = 'start/running'
STOPPED_TOKEN = 'stop/waiting'
PROCESS_PATTERN = re.compile(r'process ([0-9]+)')


class UpstartServiceManager(ServiceManagerBackend):
    """Linux upstart job manager, driven through initctl."""

    UNKNOWN_SERVICE_PATTERN = r'Unknown instance'

    def __init__(self, config, runner=None, root: Path = Path('/')):
        super().__init__(config, runner, root)
        self.upstart_conf_dir = self.root / 'etc' / 'init'

        self.logger.info('UpstartServiceManager initialized for service: %s', self.service_name)
        self.logger.debug('service_file_path: %s', self.service_file_path)

    @property
    def service_file_path(self) -> Path:
        return self.upstart_conf_dir / f'{self.service_name}.conf'

    def install_from_path(self, path: Union[str, Path]) -> OperationResult:
        action = self._action('Install')
        self.logger.info('Installing service: %s with executable: %s', self.service_name, path)

        self._require_privileges(action)
        self._require_not_installed(action)
        self._require_executable(path, action)

        self._write_service_file(UPSTART_CONF_TEMPLATE.format(
            name=self.service_name,
            description=self.description,
            path=path
        ), action)

        try:
            self._run_checked(['initctl', 'reload-configuration'], ServiceOperation.INSTALL, action, ServiceReloadError)
        except ServiceManagerError as e:
            self.logger.error('Installation failed, attempting cleanup: %s', e)
            self._rollback_install()
            raise

        self.logger.info('Successfully installed service: %s', self.service_name)
        return self._success(action)

    def remove(self) -> OperationResult:
        action = self._action('Removing')
        self.logger.info('Removing service: %s', self.service_name)

        self._require_privileges(action)
        self._require_installed(action)

        if self.check_running(action).running:
            self.logger.info('Service is running, stopping first')
            self._stop_for_removal(['initctl', 'stop', self.service_name], action)

        self._delete_service_file(action)
        self._run_checked(['initctl', 'reload-configuration'], ServiceOperation.REMOVE, action, ServiceReloadError)

        self.logger.info('Service %s successfully removed', self.service_name)
        return self._success(action)

    def start(self) -> OperationResult:
        action = self._action('Starting')
        self.logger.info('Starting service: %s', self.service_name)

        self._require_privileges(action)
        self._require_installed(action)
        if self.check_running(action).running:
            self.logger.warning('Service is already running')
            raise ServiceAlreadyRunningError('service already running', action)

        self._run_checked(['initctl', 'start', self.service_name], ServiceOperation.START, action)
        self.logger.info('Service %s successfully started', self.service_name)
        return self._success(action)

    def stop(self) -> OperationResult:
        action = self._action('Stopping')
        self.logger.info('Stopping service: %s', self.service_name)

        self._require_privileges(action)
        self._require_installed(action)
        if not self.check_running(action).running:
            self.logger.warning('Service is not running')
            raise ServiceAlreadyStoppedError('service already stopped', action)

        self._run_checked(['initctl', 'stop', self.service_name], ServiceOperation.STOP, action)
        self.logger.info('Service %s successfully stopped', self.service_name)
        return self._success(action)

    def _check_removal_stop(self, result: CommandResult, action: str) -> None:
        super()._check_removal_stop(result, action)
        # "Unknown instance" failures were accepted above; a successful stop must reach stop/waiting
        if result.ok and STOPPED_TOKEN not in result.output:
            self.logger.error('Unexpected output from initctl stop: %s', result.output.strip())
            raise ServiceUnknownOutputError(
                ServiceOperation.REMOVE, f'unknown output: {result.output.strip()}', result.output, action
            )

    def _status_command(self) -> List[str]:
        return ['initctl', 'status', self.service_name]

    @staticmethod
    def parse_running_state(returncode: int, output: str) -> RunningState:
        if returncode != 0 or RUNNING_TOKEN not in output:
            return RunningState(False)
        match = PROCESS_PATTERN.search(output)
        return RunningState(True, int(match.group(1)) if match else None)
