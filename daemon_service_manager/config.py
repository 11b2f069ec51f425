"""Service configuration."""

from pathlib import Path
from typing import Optional, Union


ROOT_PRIVILEGES_MESSAGE = "You must have root user privileges. Possibly using 'sudo' command should help"

# Appended to an action label, e.g. "Install My Service:" + SUCCESS_MARKER
SUCCESS_MARKER = "\t\t\t\t\t[  \033[32mOK\033[0m  ]"
FAILED_MARKER = "\t\t\t\t\t[\033[31mFAILED\033[0m]"

STATUS_RUNNING_PID = "Service (pid  {pid}) is running..."
STATUS_RUNNING = "Service is running..."
STATUS_STOPPED = "Service is stopped"


class ServiceConfig:
    """Identity of the service being managed."""

    def __init__(
        self,
        service_name: str,
        description: str = '',
        executable_path: Optional[Union[str, Path]] = None
    ):
        """
        Initialize service configuration.

        Args:
            service_name: Name of the service, used for definition files and init commands.
            description: Human-readable description. Defaults to the service name.
            executable_path: Executable to run. If omitted, install() looks it up by name.

        Raises:
            ValueError: If service_name is empty or contains a path separator.
        """
        if not service_name:
            raise ValueError('Service name cannot be empty')
        if '/' in service_name:
            raise ValueError(f'Service name cannot contain "/": {service_name}')
        self._service_name = service_name
        self._description = description or service_name
        self._executable_path = Path(executable_path) if executable_path else None

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def description(self) -> str:
        return self._description

    @property
    def executable_path(self) -> Optional[Path]:
        return self._executable_path

    def __repr__(self) -> str:
        return (
            f'ServiceConfig(service_name={self._service_name!r}, '
            f'description={self._description!r}, '
            f'executable_path={self._executable_path!r})'
        )
