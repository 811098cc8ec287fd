"""
Change detection between generated artifacts and remote files
"""
from ...core.constants import HASH_COMMAND
from ...core.exceptions import RemoteCommandError
from ...core.interfaces import RemoteSession
from ...core.logging import get_logger
from .fingerprint import fingerprint, parse_remote_fingerprint
from .inventory import Inventory

logger = get_logger(__name__)


class DiffEngine:
    """Decides per artifact whether a write is required"""
    
    def __init__(self, session: RemoteSession):
        self.session = session
    
    def remote_fingerprint(self, path: str) -> str:
        """Hash a remote file on the remote host"""
        argv = [*HASH_COMMAND, path]
        stdout = self.session.run_command(argv)
        try:
            return parse_remote_fingerprint(stdout)
        except ValueError as e:
            raise RemoteCommandError(" ".join(argv), message=str(e)) from e
    
    def should_write(self, path: str, content: str, inventory: Inventory) -> bool:
        """
        Compare content against the remote copy of path.
        
        Paths missing from the inventory always need a write. Consulted
        paths are claimed from the inventory.
        """
        if not inventory.claim(path):
            return True
        
        local = fingerprint(content)
        remote = self.remote_fingerprint(path)
        logger.debug(f"Fingerprint {path}: remote={remote} local={local}")
        return remote != local
