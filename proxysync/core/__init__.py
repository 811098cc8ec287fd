"""
Core infrastructure layer
"""
from .client import RemoteClient, ClientConfig
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import RemoteSession, ConnectionFactory
from .session import ConnectionManager
from .utils import load_ssh_config, normalize_remote_dir

__all__ = [
    "RemoteClient",
    "ClientConfig",
    "RemoteSession",
    "ConnectionFactory",
    "ConnectionManager",
    "ProxySyncError",
    "ConfigError",
    "ConnectionError",
    "TopologyError",
    "RemoteCommandError",
    "WriteError",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "load_ssh_config",
    "normalize_remote_dir",
]
