"""Port ownership lookups and process termination."""

import os
import signal
from typing import Optional

from tak.services.command_runner import CommandRunner
from tak.utils.logging import get_logger

logger = get_logger(__name__)


class PortService:
    """Service for finding and stopping the process bound to a port."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def port_in_use(self, port: int) -> bool:
        """Check if any process has the port open."""
        return self.runner.run(["lsof", "-i", f":{port}"]).ok

    def pid_on_port(self, port: int) -> Optional[int]:
        """Get the first PID using the port, if any."""
        result = self.runner.run(["lsof", "-ti", f":{port}"])
        if not result.ok:
            return None

        for line in result.stdout.splitlines():
            line = line.strip()
            if line.isdigit():
                return int(line)
        return None

    def kill_port(self, port: int) -> bool:
        """Send SIGKILL to the process on the port.

        Returns:
            True when the port is free afterwards or nothing owned it
        """
        pid = self.pid_on_port(port)
        if pid is None:
            logger.debug(f"No process on port {port}")
            return True

        try:
            os.kill(pid, signal.SIGKILL)
            logger.info(f"Killed PID {pid} on port {port}")
            return True
        except ProcessLookupError:
            logger.debug(f"PID {pid} exited before it could be killed")
            return True
        except PermissionError as e:
            logger.warning(f"Could not kill PID {pid} on port {port}: {e}")
            return False
