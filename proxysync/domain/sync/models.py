"""
Sync domain models
"""
from dataclasses import dataclass, field
from typing import Literal, Optional, List, Dict, Any

from ...core.constants import DEFAULT_SSH_PORT, DEFAULT_SSH_TIMEOUT, DEFAULT_PARALLEL
from ...core.exceptions import ConfigError
from ...core.utils import normalize_remote_dir

TransportMode = Literal["sftp", "command"]


@dataclass
class SyncConfig:
    """
    Reconciliation settings, read-only for the duration of a pass.
    
    transport selects how artifacts are written:
    - sftp: stream content through an SFTP channel
    - command: here-document redirection through a shell command
    """
    host: str
    user: str
    remote_dir: str
    http_port: int
    reload_command: str
    port: int = DEFAULT_SSH_PORT
    password: Optional[str] = None
    key_file: Optional[str] = None
    https_port: Optional[int] = None
    force_https: bool = False
    tls_cert_dir: Optional[str] = None
    transport: TransportMode = "sftp"
    timeout: int = DEFAULT_SSH_TIMEOUT
    parallel: int = DEFAULT_PARALLEL
    
    def __post_init__(self) -> None:
        if self.remote_dir:
            self.remote_dir = normalize_remote_dir(self.remote_dir)
    
    def validate(self) -> None:
        """Validate configuration"""
        for name in ("host", "user", "remote_dir", "reload_command"):
            if not getattr(self, name):
                raise ConfigError(f"Missing required configuration value: {name}")
        
        for name in ("port", "http_port", "https_port"):
            value = getattr(self, name)
            if value is None and name == "https_port":
                continue
            if not (1 <= value <= 65535):
                raise ConfigError(f"Invalid {name}: {value}")
        
        if self.transport not in ("sftp", "command"):
            raise ConfigError(
                f"Invalid transport: {self.transport}, must be 'sftp' or 'command'"
            )
        if self.parallel < 1:
            raise ConfigError(f"Invalid parallel: {self.parallel}, must be at least 1")
        if not self.password and not self.key_file:
            raise ConfigError("Either password or key_file must be configured")
    
    def connection_params(self) -> Dict[str, Any]:
        """Parameters for ConnectionFactory.create"""
        params: Dict[str, Any] = {
            "host": self.host,
            "user": self.user,
            "port": self.port,
            "timeout": self.timeout,
        }
        if self.key_file:
            params["key"] = self.key_file
        if self.password:
            params["password"] = self.password
        return params


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation pass"""
    written: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    orphans: List[str] = field(default_factory=list)
    reloaded: bool = False
    dry_run: bool = False
    
    @property
    def changed(self) -> bool:
        return bool(self.written)
