"""Pytest configuration and fixtures for daemon-service-manager tests."""

import itertools
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from daemon_service_manager import (
    CommandResult,
    CommandRunner,
    InitSystem,
    ServiceConfig,
    ServiceManager,
)

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Test configuration
TEST_SERVICE_NAME = "demo"
TEST_SERVICE_DESCRIPTION = "Demo Service"

ALL_INIT_SYSTEMS = [InitSystem.SYSTEMD, InitSystem.UPSTART, InitSystem.SYSV]


class FakeHost(CommandRunner):
    """Command runner that simulates systemctl, initctl, SysV scripts and id.

    Running services are tracked in ``running`` (name -> pid). Every call is
    recorded in ``calls``. Entries in ``responses`` override the simulation
    for an exact argument list.
    """

    def __init__(self, privileged: bool = True):
        super().__init__()
        self.privileged = privileged
        self.running: Dict[str, int] = {}
        self.calls: List[List[str]] = []
        self.responses: Dict[tuple, CommandResult] = {}
        self._pids = itertools.count(4242)

    def respond(self, args: List[str], returncode: int, output: str = '') -> None:
        self.responses[tuple(args)] = CommandResult(list(args), returncode, output)

    def commands(self, program: Optional[str] = None) -> List[List[str]]:
        """Recorded calls, excluding privilege checks."""
        return [
            call for call in self.calls
            if call[0] != 'id' and (program is None or call[0] == program)
        ]

    def run(self, args: List[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        if tuple(args) in self.responses:
            return self.responses[tuple(args)]

        program = args[0]
        if program == 'id':
            return self._result(args, 0, '0\n' if self.privileged else '1000\n')
        if program == 'systemctl':
            return self._systemctl(args)
        if program == 'initctl':
            return self._initctl(args)
        if os.path.basename(os.path.dirname(program)) == 'init.d':
            return self._init_script(args)
        return self._result(args, 127, f'{program}: command not found\n')

    def _result(self, args: List[str], returncode: int, output: str = '') -> CommandResult:
        return CommandResult(args, returncode, output)

    def _systemctl(self, args: List[str]) -> CommandResult:
        verb = args[1]
        if verb in ('daemon-reload', 'enable', 'disable'):
            return self._result(args, 0)
        name = args[2][:-len('.service')]
        if verb == 'show':
            if name in self.running:
                return self._result(args, 0, f'MainPID={self.running[name]}\nActiveState=active\n')
            return self._result(args, 0, 'MainPID=0\nActiveState=inactive\n')
        if verb == 'start':
            self.running[name] = next(self._pids)
            return self._result(args, 0)
        if verb == 'stop':
            self.running.pop(name, None)
            return self._result(args, 0)
        return self._result(args, 1, f'Unknown command verb {verb}.\n')

    def _initctl(self, args: List[str]) -> CommandResult:
        verb = args[1]
        if verb == 'reload-configuration':
            return self._result(args, 0)
        name = args[2]
        if verb == 'status':
            if name in self.running:
                return self._result(args, 0, f'{name} start/running, process {self.running[name]}\n')
            return self._result(args, 0, f'{name} stop/waiting\n')
        if verb == 'start':
            self.running[name] = next(self._pids)
            return self._result(args, 0, f'{name} start/running, process {self.running[name]}\n')
        if verb == 'stop':
            if name not in self.running:
                return self._result(args, 1, 'initctl: Unknown instance: \n')
            del self.running[name]
            return self._result(args, 0, f'{name} stop/waiting\n')
        return self._result(args, 1, f'initctl: Invalid command: {verb}\n')

    def _init_script(self, args: List[str]) -> CommandResult:
        name = os.path.basename(args[0])
        verb = args[1]
        if verb == 'status':
            if name in self.running:
                return self._result(args, 0, f'{name} is running (pid {self.running[name]})\n')
            return self._result(args, 3, f'{name} is stopped\n')
        if verb == 'start':
            self.running[name] = next(self._pids)
            return self._result(args, 0, f'Starting {name}:\n')
        if verb == 'stop':
            if name not in self.running:
                return self._result(args, 1, f'{name} is not running\n')
            del self.running[name]
            return self._result(args, 0, f'Stopping {name}:\n')
        return self._result(args, 2, f'Usage: {args[0]} {{start|stop|restart|status}}\n')


@pytest.fixture
def host() -> FakeHost:
    """Fixture providing a privileged fake host."""
    return FakeHost()


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Fixture providing an empty filesystem root for definition files."""
    root_dir = tmp_path / "root"
    root_dir.mkdir()
    return root_dir


@pytest.fixture
def executable(tmp_path: Path) -> Path:
    """Fixture providing an executable program to install."""
    path = tmp_path / "bin" / TEST_SERVICE_NAME
    path.parent.mkdir()
    path.write_text("#!/bin/sh\nexec sleep 3600\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def service_config(executable: Path) -> ServiceConfig:
    """Fixture providing a ServiceConfig for tests."""
    return ServiceConfig(
        service_name=TEST_SERVICE_NAME,
        description=TEST_SERVICE_DESCRIPTION,
        executable_path=executable,
    )


@pytest.fixture(params=ALL_INIT_SYSTEMS, ids=lambda init_system: init_system.value)
def init_system(request) -> InitSystem:
    """Fixture parametrizing a test over every init system."""
    return request.param


@pytest.fixture
def service_manager(service_config: ServiceConfig, host: FakeHost, root: Path, init_system: InitSystem) -> ServiceManager:
    """Fixture providing a ServiceManager for each init system."""
    return ServiceManager(service_config, runner=host, root=root, init_system=init_system)


@pytest.fixture
def installed_service(service_manager: ServiceManager) -> ServiceManager:
    """Fixture providing a ServiceManager with the service already installed."""
    service_manager.install()
    return service_manager


def make_markers(root: Path, systemd: bool = False, upstart: bool = False, initctl: bool = False) -> Path:
    """Create init system marker paths under ``root``."""
    if systemd:
        (root / "run" / "systemd" / "system").mkdir(parents=True)
    if upstart:
        (root / "etc" / "init").mkdir(parents=True)
    if initctl:
        (root / "sbin").mkdir(parents=True, exist_ok=True)
        (root / "sbin" / "initctl").write_text("")
    return root
