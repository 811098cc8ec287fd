"""
Process-wide remote session management
"""
import threading
from typing import Dict, Any, Optional

from .interfaces import ConnectionFactory, RemoteSession
from .logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """
    Owns the single remote session.
    
    The session is created lazily on the first ``acquire()`` and cached
    until ``release()``. A failed connection attempt is not cached, so the
    next ``acquire()`` tries again. Dropped sessions are not detected here:
    they surface as errors on the next remote operation, and the caller
    releases the manager to force a reconnect.
    """
    
    def __init__(self, connection_factory: ConnectionFactory, params: Dict[str, Any]):
        """
        Initialize connection manager.
        
        Args:
            connection_factory: SSH connection factory
            params: Connection parameters handed to the factory
        """
        self.connection_factory = connection_factory
        self.params = params
        self._session: Optional[RemoteSession] = None
        self._lock = threading.Lock()
    
    @property
    def connected(self) -> bool:
        return self._session is not None
    
    def acquire(self) -> RemoteSession:
        """Return the live session, connecting on first use"""
        with self._lock:
            if self._session is None:
                logger.info(
                    f"Connecting to {self.params.get('user')}@{self.params.get('host')}:"
                    f"{self.params.get('port')}"
                )
                self._session = self.connection_factory.create(self.params)
            return self._session
    
    def release(self) -> None:
        """Dispose the cached session; no-op when none exists"""
        with self._lock:
            session, self._session = self._session, None
        if session is not None:
            logger.debug("Closing remote session")
            session.close()
