"""
Artifact writers.

Both writers leave exactly the artifact bytes on the remote host, so a file
written by one is recognized as unchanged by the next pass using the other.
"""
import shlex
import socket
from abc import ABC, abstractmethod

import paramiko

from ...core.constants import HEREDOC_DELIMITER
from ...core.exceptions import ConfigError, ConnectionError, RemoteCommandError, WriteError
from ...core.interfaces import RemoteSession
from ...core.logging import get_logger
from .models import TransportMode

logger = get_logger(__name__)


class Writer(ABC):
    """Writes one artifact to the remote host"""
    
    @abstractmethod
    def write(self, session: RemoteSession, path: str, content: str) -> None:
        """Write content to path, raising WriteError on failure"""
        pass


class SftpWriter(Writer):
    """Streams content through the SFTP subsystem"""
    
    def write(self, session: RemoteSession, path: str, content: str) -> None:
        sftp = session.open_sftp()
        try:
            with sftp.open(path, "w") as f:
                f.write(content.encode("utf-8"))
        except (paramiko.SSHException, EOFError, socket.timeout) as e:
            # transport died mid-write
            raise ConnectionError(f"SFTP session lost while writing {path}: {e}") from e
        except OSError as e:
            raise WriteError(f"sftp put {path}", message=f"Failed to write {path}: {e}") from e
        logger.debug(f"[sftp] wrote {path}")


class HeredocWriter(Writer):
    """
    Writes through a shell here-document.
    
    A here-document always ends with a newline, so the body is cut to the
    exact byte count with ``head -c``.
    """
    
    @staticmethod
    def build_command(path: str, content: str) -> str:
        data = content.encode("utf-8")
        
        lines = set(content.split("\n"))
        delimiter = HEREDOC_DELIMITER
        suffix = 0
        while delimiter in lines:
            suffix += 1
            delimiter = f"{HEREDOC_DELIMITER}_{suffix}"
        
        body = content if content.endswith("\n") else content + "\n"
        return f"head -c {len(data)} > {shlex.quote(path)} <<'{delimiter}'\n{body}{delimiter}"
    
    def write(self, session: RemoteSession, path: str, content: str) -> None:
        command = self.build_command(path, content)
        try:
            session.execute(command)
        except RemoteCommandError as e:
            raise WriteError(
                f"heredoc > {path}", exit_code=e.exit_code, stderr=e.stderr
            ) from e
        logger.debug(f"[command] wrote {path}")


def select_writer(transport: TransportMode) -> Writer:
    """Writer implementation for a transport mode"""
    if transport == "sftp":
        return SftpWriter()
    if transport == "command":
        return HeredocWriter()
    raise ConfigError(f"Unknown transport: {transport}")
