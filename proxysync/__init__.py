"""
proxysync - HAProxy configuration reconciliation over SSH

Generates frontend/backend configuration files from a declarative service
topology, writes only the files whose content changed on a remote host, and
reloads HAProxy at most once per pass:
- Deterministic configuration generation
- Fingerprint-based change detection (remote sha256sum)
- SFTP or shell here-document write transports
- Single lazily-established SSH session
"""

__version__ = "0.1.0"

from .core import (
    RemoteClient,
    ClientConfig,
    ConnectionManager,
    RemoteSession,
    ConnectionFactory,
)

from .domain.topology import (
    Node,
    RoutingConstraint,
    Service,
    Topology,
    Artifact,
    BuildResult,
    build,
)

from .domain.sync import (
    SyncConfig,
    ReconcileResult,
    Synchronizer,
    fingerprint,
)

__all__ = [
    "__version__",
    # Client
    "RemoteClient",
    "ClientConfig",
    "ConnectionManager",
    "RemoteSession",
    "ConnectionFactory",
    # Topology
    "Node",
    "RoutingConstraint",
    "Service",
    "Topology",
    "Artifact",
    "BuildResult",
    "build",
    # Sync
    "SyncConfig",
    "ReconcileResult",
    "Synchronizer",
    "fingerprint",
]
