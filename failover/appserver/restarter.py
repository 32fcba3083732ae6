"""
Application server restarter.
Runs the restart script and waits for it to finish.
"""
import subprocess
import structlog

from failover.appserver.errors import RestartError

logger = structlog.get_logger()


class ProcessRestarter:
    """Invokes the external restart script"""

    def __init__(self, command, wait_slice=0.5):
        """
        Args:
            command: Path of the restart script, run without arguments
            wait_slice: Seconds between checks of the cancel event while waiting
        """
        self.command = command
        self.wait_slice = wait_slice

    def restart(self, cancel_event=None):
        """
        Run the restart script and block until it exits.

        The exit code is logged only. When cancel_event is set while waiting,
        the child is terminated and the call returns normally.

        Raises:
            RestartError: If the script could not be started
        """
        logger.info("Invoking restart script", command=self.command)

        try:
            process = subprocess.Popen([self.command])
        except OSError as e:
            logger.error("Failed to start restart script", command=self.command, error=str(e))
            raise RestartError(f"Could not run restart script {self.command}: {e}") from e

        try:
            while True:
                try:
                    returncode = process.wait(timeout=self.wait_slice)
                    break
                except subprocess.TimeoutExpired:
                    if cancel_event is not None and cancel_event.is_set():
                        logger.info("Restart wait interrupted by shutdown", command=self.command)
                        return
        finally:
            if process.poll() is None:
                process.terminate()
                process.wait()

        logger.info("Restart script finished", command=self.command, returncode=returncode)
