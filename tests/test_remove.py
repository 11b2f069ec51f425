"""Tests for remove failure paths and stop tolerance."""

import pytest

from daemon_service_manager import (
    InitSystem,
    ServiceManager,
    ServiceOperation,
    ServiceOperationError,
    ServiceReloadError,
    ServiceUnknownOutputError,
)
from conftest import TEST_SERVICE_NAME


@pytest.fixture
def running_service(service_config, host, root, request):
    manager = ServiceManager(service_config, runner=host, root=root, init_system=request.param)
    manager.install()
    manager.start()
    return manager


class TestUpstartRemove:
    """initctl stop output handling during remove."""

    @pytest.mark.parametrize("running_service", [InitSystem.UPSTART], indirect=True)
    def test_unknown_instance_counts_as_stopped(self, running_service, host):
        """A job that vanished between status and stop does not block removal."""
        host.respond(["initctl", "stop", TEST_SERVICE_NAME], 1, "initctl: Unknown instance: \n")

        assert running_service.remove().succeeded
        assert not running_service.backend.service_file_path.exists()
        assert host.calls[-1] == ["initctl", "reload-configuration"]

    @pytest.mark.parametrize("running_service", [InitSystem.UPSTART], indirect=True)
    def test_other_stop_failure_is_fatal(self, running_service, host):
        host.respond(["initctl", "stop", TEST_SERVICE_NAME], 1, "initctl: Rejected send message\n")

        with pytest.raises(ServiceOperationError) as exc_info:
            running_service.remove()

        assert exc_info.value.operation == ServiceOperation.REMOVE
        assert "Rejected send message" in exc_info.value.message
        assert running_service.backend.service_file_path.exists()

    @pytest.mark.parametrize("running_service", [InitSystem.UPSTART], indirect=True)
    def test_stop_without_waiting_state_is_unknown_output(self, running_service, host):
        host.respond(["initctl", "stop", TEST_SERVICE_NAME], 0, "demo stop/killed, process 4242\n")

        with pytest.raises(ServiceUnknownOutputError):
            running_service.remove()

        assert running_service.backend.service_file_path.exists()


class TestSystemdRemove:
    """systemctl handling during remove."""

    @pytest.mark.parametrize("running_service", [InitSystem.SYSTEMD], indirect=True)
    def test_unit_not_loaded_counts_as_stopped(self, running_service, host):
        host.respond(
            ["systemctl", "stop", f"{TEST_SERVICE_NAME}.service"], 5,
            f"Failed to stop {TEST_SERVICE_NAME}.service: Unit {TEST_SERVICE_NAME}.service not loaded.\n",
        )

        assert running_service.remove().succeeded
        assert ["systemctl", "disable", f"{TEST_SERVICE_NAME}.service"] in host.calls
        assert host.calls[-1] == ["systemctl", "daemon-reload"]

    @pytest.mark.parametrize("running_service", [InitSystem.SYSTEMD], indirect=True)
    def test_stop_failure_is_fatal(self, running_service, host):
        host.respond(["systemctl", "stop", f"{TEST_SERVICE_NAME}.service"], 1, "Access denied\n")

        with pytest.raises(ServiceOperationError):
            running_service.remove()

        assert running_service.backend.service_file_path.exists()

    @pytest.mark.parametrize("running_service", [InitSystem.SYSTEMD], indirect=True)
    def test_reload_failure(self, running_service, host):
        host.respond(["systemctl", "daemon-reload"], 1, "Failed to reload daemon\n")

        with pytest.raises(ServiceReloadError):
            running_service.remove()

        # The unit file is already gone when the reload fails
        assert not running_service.backend.service_file_path.exists()


class TestSysVRemove:
    """Init script and runlevel link handling during remove."""

    @pytest.mark.parametrize("running_service", [InitSystem.SYSV], indirect=True)
    def test_remove_deletes_runlevel_links(self, running_service, host):
        links = running_service.backend.runlevel_links
        assert all(link.is_symlink() for link in links)

        running_service.remove()

        assert not any(link.is_symlink() for link in links)
        assert TEST_SERVICE_NAME not in host.running

    @pytest.mark.parametrize("running_service", [InitSystem.SYSV], indirect=True)
    def test_script_reporting_not_running_counts_as_stopped(self, running_service, host):
        script = str(running_service.backend.service_file_path)
        host.respond([script, "stop"], 1, f"{TEST_SERVICE_NAME} is not running\n")

        assert running_service.remove().succeeded
