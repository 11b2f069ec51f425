"""Linux systemd service manager backend."""

import re
from pathlib import Path
from typing import List, Union

from daemon_service_manager.backends.base import ServiceManagerBackend
from daemon_service_manager.backends.templates import SYSTEMD_SERVICE_TEMPLATE
from daemon_service_manager.status import OperationResult, RunningState
from daemon_service_manager.exceptions import (
    ServiceManagerError, ServiceOperation, ServiceReloadError, ServiceAlreadyRunningError,
    ServiceAlreadyStoppedError, ServiceUnknownOutputError
)

ACTIVE_STATE_PATTERN = re.compile(r'^ActiveState=(\S*)', re.MULTILINE)
MAIN_PID_PATTERN = re.compile(r'^MainPID=([0-9]+)', re.MULTILINE)
RUNNING_ACTIVE_STATES = ('active', 'reloading')


class SystemdServiceManager(ServiceManagerBackend):
    """Linux systemd system service manager."""

    UNKNOWN_SERVICE_PATTERN = r'not loaded|not found'

    def __init__(self, config, runner=None, root: Path = Path('/')):
        super().__init__(config, runner, root)
        self.systemd_unit_dir = self.root / 'etc' / 'systemd' / 'system'
        self.unit_name = f'{self.service_name}.service'

        self.logger.info('SystemdServiceManager initialized for service: %s', self.service_name)
        self.logger.debug('service_file_path: %s', self.service_file_path)

    @property
    def service_file_path(self) -> Path:
        return self.systemd_unit_dir / self.unit_name

    def install_from_path(self, path: Union[str, Path]) -> OperationResult:
        action = self._action('Install')
        self.logger.info('Installing service: %s with executable: %s', self.service_name, path)

        self._require_privileges(action)
        self._require_not_installed(action)
        self._require_executable(path, action)

        self._write_service_file(SYSTEMD_SERVICE_TEMPLATE.format(
            name=self.service_name,
            description=self.description,
            path=path
        ), action)

        try:
            self._run_checked(['systemctl', 'daemon-reload'], ServiceOperation.INSTALL, action, ServiceReloadError)
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
            self._stop_for_removal(['systemctl', 'stop', self.unit_name], action)

        self._run_checked(['systemctl', 'disable', self.unit_name], ServiceOperation.REMOVE, action)
        self._delete_service_file(action)
        self._run_checked(['systemctl', 'daemon-reload'], ServiceOperation.REMOVE, action, ServiceReloadError)

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

        self._run_checked(['systemctl', 'enable', self.unit_name], ServiceOperation.START, action)
        self._run_checked(['systemctl', 'start', self.unit_name], ServiceOperation.START, action)
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

        self._run_checked(['systemctl', 'stop', self.unit_name], ServiceOperation.STOP, action)
        self.logger.info('Service %s successfully stopped', self.service_name)
        return self._success(action)

    def _status_command(self) -> List[str]:
        return ['systemctl', 'show', self.unit_name, '--property=ActiveState,MainPID']

    @staticmethod
    def parse_running_state(returncode: int, output: str) -> RunningState:
        if returncode != 0:
            return RunningState(False)

        match = ACTIVE_STATE_PATTERN.search(output)
        if not match:
            raise ServiceUnknownOutputError(ServiceOperation.GET_STATUS, f'unknown output: {output.strip()}', output)
        if match.group(1) not in RUNNING_ACTIVE_STATES:
            return RunningState(False)

        pid_match = MAIN_PID_PATTERN.search(output)
        pid = int(pid_match.group(1)) if pid_match else 0
        return RunningState(True, pid or None)
