"""
Unified exception definitions
"""
from typing import Optional


class ProxySyncError(Exception):
    """Base exception class"""
    pass


class ConfigError(ProxySyncError):
    """Configuration error"""
    pass


class ConnectionError(ProxySyncError):
    """Connection error"""
    pass


class TopologyError(ProxySyncError):
    """Service topology error (duplicate names, colliding artifacts, bad ports)"""
    pass


class RemoteCommandError(ProxySyncError):
    """A remote command reported failure"""

    def __init__(
        self,
        command: str,
        exit_code: Optional[int] = None,
        stderr: str = "",
        message: Optional[str] = None,
    ):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        if message is None:
            message = f"Remote command failed (exit code: {exit_code}): {command}"
            if stderr.strip():
                message += f"\n{stderr.strip()}"
        super().__init__(message)


class WriteError(RemoteCommandError):
    """Artifact write error"""
    pass
