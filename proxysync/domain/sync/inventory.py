"""
Remote artifact inventory
"""
import threading
from typing import Iterable, List

from ...core.constants import MKDIR_COMMAND, LIST_COMMAND
from ...core.interfaces import RemoteSession
from ...core.logging import get_logger

logger = get_logger(__name__)


class Inventory:
    """
    Remote paths found at the start of a pass.
    
    Paths are claimed as artifacts consult them, so a pass never checks a
    path twice; whatever remains unclaimed at the end is not managed by the
    current topology.
    """
    
    def __init__(self, paths: Iterable[str] = ()):
        self._pending = set(paths)
        self._lock = threading.Lock()
    
    def claim(self, path: str) -> bool:
        """Remove path from the pending set; True if it was present"""
        with self._lock:
            if path in self._pending:
                self._pending.remove(path)
                return True
            return False
    
    def remaining(self) -> List[str]:
        with self._lock:
            return sorted(self._pending)
    
    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._pending
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class RemoteInventory:
    """Enumerates existing files under the remote target directory"""
    
    def __init__(self, session: RemoteSession):
        self.session = session
    
    def scan(self, remote_dir: str) -> Inventory:
        """
        Create remote_dir if needed and list every path below it.
        
        Args:
            remote_dir: Remote target directory
        
        Returns:
            Inventory of existing paths, excluding the directory itself
        
        Raises:
            RemoteCommandError: If mkdir or find fails
        """
        self.session.run_command([*MKDIR_COMMAND, remote_dir])
        stdout = self.session.run_command([*LIST_COMMAND, remote_dir])
        
        paths = {line.strip() for line in stdout.splitlines() if line.strip()}
        paths.discard(remote_dir)
        paths.discard(remote_dir.rstrip("/"))
        
        logger.debug(f"Found {len(paths)} existing paths under {remote_dir}")
        return Inventory(paths)
