"""Command execution and host helpers used by the init system backends."""

import logging
import os
import shutil
import stat
import subprocess
import sys
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    """Exit status and combined stdout/stderr of an external command."""
    args: List[str]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external programs and captures their combined output.

    Commands block until they exit. No timeout is applied unless one is given.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, args: List[str]) -> CommandResult:
        logger.debug('Running command: %s', args)
        try:
            completed = subprocess.run(
                args,
                stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                text=True, check=False, timeout=self.timeout
            )
        except OSError as e:
            logger.error('Failed to execute %s: %s', args[0], e)
            return CommandResult(list(args), 127, str(e))

        logger.debug('Command %s exited with %d', args, completed.returncode)
        return CommandResult(list(args), completed.returncode, completed.stdout or '')


def check_privileges(runner: CommandRunner) -> bool:
    """Return True when the current user is root, as reported by ``id -u``."""
    result = runner.run(['id', '-u'])
    if not result.ok:
        logger.warning('Could not determine user id: %s', result.output.strip())
        return False
    try:
        return int(result.output.strip()) == 0
    except ValueError:
        logger.warning('Unexpected output from id -u: %r', result.output)
        return False


def current_executable() -> Path:
    """Path of the executable image running this process."""
    try:
        return Path(os.readlink('/proc/self/exe'))
    except OSError:
        return Path(os.path.realpath(sys.executable))


def executable_path(name: str) -> Path:
    """Look up ``name`` on PATH, falling back to the current program."""
    found = shutil.which(name)
    if found and os.path.exists(found):
        return Path(found)
    logger.debug('%s not found on PATH, using current executable', name)
    return current_executable()


def is_executable(path: Union[str, Path]) -> bool:
    """Return True if any execute bit is set on ``path``.

    Raises:
        OSError: If the path cannot be stat'ed.
    """
    mode = os.stat(path).st_mode
    return bool(mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
