"""End to end scenario on a host without systemd or upstart markers."""

import pytest

from daemon_service_manager import (
    InitSystem,
    ServiceAlreadyStoppedError,
    ServiceConfig,
    ServiceManager,
)
from daemon_service_manager.config import SUCCESS_MARKER, FAILED_MARKER


@pytest.fixture
def demo_executable(tmp_path):
    path = tmp_path / "usr" / "local" / "bin" / "demo"
    path.parent.mkdir(parents=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestLegacyScenario:
    """Install, status, stop, remove on a SysV host."""

    def test_install_status_stop_remove(self, host, root, demo_executable):
        config = ServiceConfig("demo", "Demo Service", demo_executable)
        manager = ServiceManager(config, runner=host, root=root)
        assert manager.init_system == InitSystem.SYSV

        assert str(manager.install()) == "Install Demo Service:" + SUCCESS_MARKER
        assert manager.status() == "Service is stopped"

        with pytest.raises(ServiceAlreadyStoppedError) as exc_info:
            manager.stop()
        assert str(exc_info.value) == "service already stopped"
        assert str(exc_info.value.result) == "Stopping Demo Service:" + FAILED_MARKER

        assert str(manager.remove()) == "Removing Demo Service:" + SUCCESS_MARKER
        assert not (root / "etc" / "init.d" / "demo").exists()
