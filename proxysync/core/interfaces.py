"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Sequence


class RemoteSession(ABC):
    """
    Remote execution capability against a single host.
    
    Implementations must tolerate concurrent calls from several threads;
    the synchronizer issues fingerprint and write operations in parallel.
    """
    
    @abstractmethod
    def run_command(self, argv: Sequence[str]) -> str:
        """Run a command given as argument vector, return stdout.
        
        Raises RemoteCommandError on non-zero exit.
        """
        pass
    
    @abstractmethod
    def execute(self, command: str) -> str:
        """Run a raw shell command line, return stdout.
        
        Raises RemoteCommandError on non-zero exit.
        """
        pass
    
    @abstractmethod
    def open_sftp(self) -> Any:
        """Return an SFTP client exposing ``open(path, mode)``"""
        pass
    
    @abstractmethod
    def close(self) -> None:
        """Dispose the session"""
        pass


class ConnectionFactory(ABC):
    """SSH connection factory interface"""
    
    @abstractmethod
    def create(self, params: Dict[str, Any]) -> RemoteSession:
        """Create and connect SSH client"""
        pass
