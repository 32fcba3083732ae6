"""
Session manager configuration for the application server.

The Redisson session manager is declared by a single tag in context.xml.
Disabling it wraps that tag in an XML comment, enabling it removes the comment
again. Every change is preceded by a timestamped backup next to the file.
"""
import os
from datetime import datetime
from typing import Optional
import structlog

from failover.appserver.errors import (
    ConfigBackupError,
    ConfigFileError,
    ConfigParseError,
    ConfigWriteError,
)
from failover.models import ConfigStatus

logger = structlog.get_logger()

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
WHITESPACE = " \t\r\n"


class ConfigReconciler:
    """Reads and toggles the session manager block of the application server"""

    def __init__(self, config_path, marker, restarter=None):
        """
        Args:
            config_path: Absolute path of context.xml
            marker: Substring identifying the session manager tag
            restarter: ProcessRestarter used by restart_target()
        """
        self.config_path = config_path
        self.marker = marker
        self.restarter = restarter

    def current_status(self) -> ConfigStatus:
        """
        Read the file and report whether the marker sits inside a comment.

        Raises:
            ConfigFileError: If the file cannot be read
            ConfigParseError: If the marker is not in the file
        """
        document = self._read()
        return self._status_of(document)

    def set_status(self, target: ConfigStatus) -> None:
        """
        Bring the session manager block to the target status.
        Does nothing when the file already matches.
        """
        document = self._read()

        if self._status_of(document) == target:
            logger.debug("Session manager already in requested state", status=target.value)
            return

        if target == ConfigStatus.ENABLED:
            updated = self._uncomment(document)
        else:
            updated = self._comment(document)

        backup_path = self._backup(document)
        self._write(updated, backup_path)

        logger.info("Changed session manager configuration",
                    status=target.value,
                    path=self.config_path,
                    backup=os.path.basename(backup_path))

    def restart_target(self, cancel_event=None) -> None:
        """Restart the application server so it picks up the configuration."""
        self.restarter.restart(cancel_event=cancel_event)

    def _status_of(self, document: str) -> ConfigStatus:
        pivot = self._marker_index(document)
        comment_open = document.rfind(COMMENT_OPEN, 0, pivot)
        comment_close = document.rfind(COMMENT_CLOSE, 0, pivot)

        return ConfigStatus.DISABLED if comment_open > comment_close else ConfigStatus.ENABLED

    def _marker_index(self, document: str) -> int:
        pivot = document.find(self.marker)
        if pivot < 0:
            raise ConfigParseError(f"Marker {self.marker} not found in {self.config_path}")
        return pivot

    def _uncomment(self, document: str) -> str:
        """
        Remove the comment around the session manager tag.

        Two layouts are recognised:
            <!-- <Manager ... /> -->   comment wraps the whole tag
            <!--Manager ... /-->       delimiters share the tag's own brackets
        """
        pivot = self._marker_index(document)
        comment_open = document.rfind(COMMENT_OPEN, 0, pivot)
        comment_close = document.find(COMMENT_CLOSE, pivot)

        if comment_open < 0 or comment_close < 0:
            raise ConfigParseError(f"No comment delimiters around {self.marker} in {self.config_path}")

        inner_start = comment_open + len(COMMENT_OPEN)
        first = self._first_visible(document, inner_start, comment_close)
        last = self._last_visible(document, inner_start, comment_close)

        if first is None or last is None:
            raise ConfigParseError(f"Empty comment around {self.marker} in {self.config_path}")

        # the tag's '<' must be the only one between the comment opener and the marker
        if document[first] == "<" and document.find("<", first + 1, pivot) < 0:
            head = document[:comment_open] + document[first:comment_close]
        elif first == inner_start and document.find("<", inner_start, pivot) < 0:
            # keep the '<' of the comment opener as the tag's own bracket
            head = document[:comment_open + 1] + document[inner_start:comment_close]
        else:
            raise ConfigParseError(
                f"Unrecognised comment opening around {self.marker} in {self.config_path}")

        # likewise for the tag's '>' between the marker and the comment closer
        if document[last] == ">" and document.find(">", pivot, last) < 0:
            tail = document[comment_close + len(COMMENT_CLOSE):]
        elif last == comment_close - 1 and document.find(">", pivot, comment_close) < 0:
            # keep the '>' of the comment closer as the tag's own bracket
            tail = document[comment_close + 2:]
        else:
            raise ConfigParseError(
                f"Unrecognised comment closing around {self.marker} in {self.config_path}")

        return head + tail

    def _comment(self, document: str) -> str:
        """Wrap the tag enclosing the marker, turning <Manager .../> into <!--Manager .../-->."""
        pivot = self._marker_index(document)
        tag_open = document.rfind("<", 0, pivot)
        tag_close = document.find(">", pivot)

        if tag_open < 0 or tag_close < 0:
            raise ConfigParseError(f"No tag encloses {self.marker} in {self.config_path}")

        return (document[:tag_open + 1] + "!--"
                + document[tag_open + 1:tag_close] + "--"
                + document[tag_close:])

    @staticmethod
    def _first_visible(document, start, end) -> Optional[int]:
        for idx in range(start, end):
            if document[idx] not in WHITESPACE:
                return idx
        return None

    @staticmethod
    def _last_visible(document, start, end) -> Optional[int]:
        for idx in range(end - 1, start - 1, -1):
            if document[idx] not in WHITESPACE:
                return idx
        return None

    def _read(self) -> str:
        if not os.path.isfile(self.config_path):
            raise ConfigFileError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.error("Failed to read configuration file", path=self.config_path, error=str(e))
            raise ConfigFileError(f"Could not read {self.config_path}: {e}") from e

        if not data:
            raise ConfigFileError(f"Configuration file is empty: {self.config_path}")

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigFileError(f"Configuration file is not valid UTF-8: {self.config_path}") from e

    def _backup(self, document: str) -> str:
        """
        Write the current content to <path>_<YYYYmmddHHMMSS> and return that path.
        A second backup within the same second gets a _1, _2, ... suffix.
        """
        base_path = f"{self.config_path}_{datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)}"
        backup_path = base_path
        collisions = 0

        while True:
            try:
                with open(backup_path, "xb") as f:
                    f.write(document.encode("utf-8"))
                break
            except FileExistsError:
                collisions += 1
                backup_path = f"{base_path}_{collisions}"
            except OSError as e:
                raise ConfigBackupError(f"Could not write backup {backup_path}: {e}") from e

        logger.debug("Created configuration backup", backup=os.path.basename(backup_path))
        return backup_path

    def _write(self, document: str, backup_path: str) -> None:
        try:
            with open(self.config_path, "wb") as f:
                f.write(document.encode("utf-8"))
        except OSError as e:
            logger.error("Failed to write configuration file",
                         path=self.config_path,
                         backup=backup_path,
                         error=str(e))
            raise ConfigWriteError(f"Could not write {self.config_path}: {e}", backup_path) from e
