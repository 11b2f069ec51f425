"""SysV init script service manager backend.

Services are plain ``/etc/init.d/<name>`` scripts enabled through ``rc<N>.d``
symlinks. The script is invoked directly with ``start``, ``stop`` or ``status``
and its exit code is read using the LSB conventions:

- ``status`` exits 0 when running, 1 or 2 when dead with a stale pid/lock file
  and 3 when stopped. Any other code means the state is unknown.
- ``start`` and ``stop`` exit 0 on success.

There is no central configuration to reload.
"""

import os
import re
from pathlib import Path
from typing import List, Union

from daemon_service_manager.backends.base import ServiceManagerBackend
from daemon_service_manager.backends.templates import SYSV_INIT_SCRIPT_TEMPLATE
from daemon_service_manager.status import OperationResult, RunningState
from daemon_service_manager.exceptions import (
    ServiceManagerError, ServiceOperation, ServiceFileError, ServiceAlreadyRunningError,
    ServiceAlreadyStoppedError, ServiceUnknownOutputError
)

LSB_STATUS_RUNNING = 0
LSB_STATUS_STOPPED = (1, 2, 3)
PID_PATTERN = re.compile(r'pid\s+([0-9]+)')

START_RUNLEVELS = ('2', '3', '4', '5')
STOP_RUNLEVELS = ('0', '1', '6')
START_PRIORITY = 'S87'
STOP_PRIORITY = 'K17'


class SysVServiceManager(ServiceManagerBackend):
    """SysV init script service manager."""

    UNKNOWN_SERVICE_PATTERN = r'not running|No such file or directory'

    def __init__(self, config, runner=None, root: Path = Path('/')):
        super().__init__(config, runner, root)
        self.init_dir = self.root / 'etc' / 'init.d'

        self.logger.info('SysVServiceManager initialized for service: %s', self.service_name)
        self.logger.debug('service_file_path: %s', self.service_file_path)

    @property
    def service_file_path(self) -> Path:
        return self.init_dir / self.service_name

    @property
    def runlevel_links(self) -> List[Path]:
        """The rc<N>.d symlinks that enable the service."""
        etc = self.root / 'etc'
        links = [etc / f'rc{level}.d' / f'{START_PRIORITY}{self.service_name}' for level in START_RUNLEVELS]
        links += [etc / f'rc{level}.d' / f'{STOP_PRIORITY}{self.service_name}' for level in STOP_RUNLEVELS]
        return links

    def install_from_path(self, path: Union[str, Path]) -> OperationResult:
        action = self._action('Install')
        self.logger.info('Installing service: %s with executable: %s', self.service_name, path)

        self._require_privileges(action)
        self._require_not_installed(action)
        self._require_executable(path, action)

        self._write_service_file(SYSV_INIT_SCRIPT_TEMPLATE.format(
            name=self.service_name,
            description=self.description,
            path=path
        ), action, mode=0o755)
        try:
            self._link_runlevels(action)
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
            self._stop_for_removal([str(self.service_file_path), 'stop'], action)

        self._unlink_runlevels(action)
        self._delete_service_file(action)

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

        self._run_checked([str(self.service_file_path), 'start'], ServiceOperation.START, action)
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

        self._run_checked([str(self.service_file_path), 'stop'], ServiceOperation.STOP, action)
        self.logger.info('Service %s successfully stopped', self.service_name)
        return self._success(action)

    def _link_runlevels(self, action: str) -> None:
        target = os.path.join('..', 'init.d', self.service_name)
        for link in self.runlevel_links:
            self.logger.debug('Linking %s -> %s', link, target)
            try:
                link.parent.mkdir(parents=True, exist_ok=True)
                if link.is_symlink():
                    link.unlink()
                link.symlink_to(target)
            except OSError as e:
                self.logger.error('Failed to create runlevel link %s: %s', link, e)
                raise ServiceFileError(f'Failed to create {link}: {e}', action) from e

    def _rollback_install(self) -> None:
        for link in self.runlevel_links:
            if link.is_symlink():
                try:
                    link.unlink()
                except OSError as e:
                    self.logger.warning('Failed to remove %s during rollback: %s', link, e)
        super()._rollback_install()

    def _unlink_runlevels(self, action: str) -> None:
        for link in self.runlevel_links:
            if not link.is_symlink():
                continue
            self.logger.debug('Removing runlevel link %s', link)
            try:
                link.unlink()
            except OSError as e:
                self.logger.error('Failed to remove runlevel link %s: %s', link, e)
                raise ServiceFileError(f'Failed to remove {link}: {e}', action) from e

    def _status_command(self) -> List[str]:
        return [str(self.service_file_path), 'status']

    @staticmethod
    def parse_running_state(returncode: int, output: str) -> RunningState:
        if returncode == LSB_STATUS_RUNNING:
            match = PID_PATTERN.search(output)
            return RunningState(True, int(match.group(1)) if match else None)
        if returncode in LSB_STATUS_STOPPED:
            return RunningState(False)
        raise ServiceUnknownOutputError(
            ServiceOperation.GET_STATUS,
            f'unknown status (exit {returncode}): {output.strip()}',
            output
        )
