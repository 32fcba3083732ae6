"""
Liveness probe for the monitored Valkey server.
Opens a short-lived connection, sends QUIT and checks for the +OK reply.
"""
import socket
import structlog

from failover.models import LivenessStatus

# Configure logger
logger = structlog.get_logger()

CHECK_COMMAND = b"quit\n"
EXPECTED_RESPONSE = b"+OK"


class LivenessProbe:
    """
    Classifies the Valkey server as reachable or unreachable.
    """
    def __init__(self, host, port, timeout=5.0):
        """
        Initialize the liveness probe.

        Args:
            host: Valkey host
            port: Valkey port
            timeout: Seconds allowed for connecting and for each read
        """
        self.host = host
        self.port = port
        self.timeout = timeout

    def check(self) -> LivenessStatus:
        """
        Probe the server once. Never raises.

        Returns:
            LivenessStatus.REACHABLE if the server answered +OK, otherwise UNREACHABLE
        """
        try:
            response = self._exchange()
        except (OSError, UnicodeError, ValueError) as e:
            # UnicodeError/ValueError come from malformed host names
            logger.debug("Valkey probe failed",
                         host=self.host,
                         port=self.port,
                         error=str(e))
            return LivenessStatus.UNREACHABLE

        if response == EXPECTED_RESPONSE:
            logger.debug("Valkey probe succeeded", host=self.host, port=self.port)
            return LivenessStatus.REACHABLE

        logger.debug("Valkey answered with an unexpected response",
                     host=self.host,
                     port=self.port,
                     response=response)
        return LivenessStatus.UNREACHABLE

    def _exchange(self) -> bytes:
        """
        Send the check command and read up to three bytes of the reply.
        """
        with socket.create_connection((self.host, self.port), timeout=self.timeout) as sock:
            sock.sendall(CHECK_COMMAND)

            response = b""
            while len(response) < len(EXPECTED_RESPONSE):
                chunk = sock.recv(len(EXPECTED_RESPONSE) - len(response))
                if not chunk:
                    break
                response += chunk

            return response
