"""
Sync domain module
"""
from .models import SyncConfig, ReconcileResult, TransportMode
from .fingerprint import fingerprint, parse_remote_fingerprint
from .inventory import Inventory, RemoteInventory
from .diff import DiffEngine
from .writers import Writer, SftpWriter, HeredocWriter, select_writer
from .service import Synchronizer

__all__ = [
    "SyncConfig",
    "ReconcileResult",
    "TransportMode",
    "fingerprint",
    "parse_remote_fingerprint",
    "Inventory",
    "RemoteInventory",
    "DiffEngine",
    "Writer",
    "SftpWriter",
    "HeredocWriter",
    "select_writer",
    "Synchronizer",
]
