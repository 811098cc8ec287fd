"""
Sync domain service - reconciliation pass orchestration
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

from ...core.exceptions import ConnectionError
from ...core.interfaces import RemoteSession
from ...core.logging import get_logger
from ...core.session import ConnectionManager
from ..topology import Artifact, Topology, build
from .diff import DiffEngine
from .inventory import Inventory, RemoteInventory
from .models import SyncConfig, ReconcileResult
from .writers import Writer, select_writer

logger = get_logger(__name__)


class Synchronizer:
    """
    Reconciles the remote HAProxy configuration with a topology.
    
    One pass: build artifacts, connect, ensure the target directory,
    inventory it, diff and write every artifact, then reload once if
    anything was written. No rollback: writes committed before a failure
    stay on the remote host.
    """
    
    def __init__(
        self,
        config: SyncConfig,
        connections: ConnectionManager,
        writer: Optional[Writer] = None,
    ):
        """
        Initialize synchronizer.
        
        Args:
            config: Sync configuration
            connections: Owner of the remote session
            writer: Artifact writer (defaults to the configured transport)
        """
        self.config = config
        self.connections = connections
        self.writer = writer or select_writer(config.transport)
    
    def reconcile(self, topology: Topology, dry_run: bool = False) -> ReconcileResult:
        """
        Run one reconciliation pass.
        
        Args:
            topology: Desired service topology
            dry_run: Diff only; no writes and no reload
        
        Returns:
            ReconcileResult describing what changed
        
        Raises:
            ConfigError / TopologyError: Before any remote operation
            ConnectionError: If the session cannot be established or drops
            RemoteCommandError: If any remote command or write fails
        """
        # Generation is pure; input errors surface before touching the host
        artifacts = build(topology, self.config).artifacts
        
        try:
            session = self.connections.acquire()
            inventory = RemoteInventory(session).scan(self.config.remote_dir)
            changed = self._diff_and_write(session, artifacts, inventory, dry_run)
            
            result = ReconcileResult(dry_run=dry_run)
            for artifact in artifacts:
                if changed[artifact.path]:
                    result.written.append(artifact.path)
                else:
                    result.unchanged.append(artifact.path)
            result.orphans = inventory.remaining()
            for path in result.orphans:
                logger.info(f"[orphan] {path} is not produced by the current topology")
            
            if result.written and not dry_run:
                self._reload(session)
                result.reloaded = True
            elif not result.written:
                logger.info("No configuration change, skipping reload")
            
            return result
        
        except ConnectionError:
            # Drop the broken session; the next pass reconnects
            self.connections.release()
            raise
    
    def _diff_and_write(
        self,
        session: RemoteSession,
        artifacts: List[Artifact],
        inventory: Inventory,
        dry_run: bool,
    ) -> Dict[str, bool]:
        """Diff and write artifacts concurrently; first failure aborts"""
        diff = DiffEngine(session)
        changed: Dict[str, bool] = {}
        
        def sync_one(artifact: Artifact) -> bool:
            if not diff.should_write(artifact.path, artifact.content, inventory):
                logger.info(f"[unchanged] {artifact.path}")
                return False
            if dry_run:
                logger.info(f"[plan] {artifact.path} would be updated")
                return True
            logger.info(f"[update] {artifact.path}")
            self.writer.write(session, artifact.path, artifact.content)
            return True
        
        with ThreadPoolExecutor(max_workers=min(self.config.parallel, len(artifacts))) as executor:
            futures = {executor.submit(sync_one, artifact): artifact for artifact in artifacts}
            try:
                for future in as_completed(futures):
                    changed[futures[future].path] = future.result()
            except Exception:
                for future in futures:
                    future.cancel()
                raise
        
        return changed
    
    def _reload(self, session: RemoteSession) -> None:
        logger.info(f"[reload] {self.config.reload_command}")
        out = session.execute(self.config.reload_command)
        if out.strip():
            logger.debug(f"[reload] output:\n{out.rstrip()}")
    
    def stop(self) -> None:
        """Release the remote session"""
        self.connections.release()
    
    def __enter__(self) -> "Synchronizer":
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()
