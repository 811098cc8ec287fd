"""
Core utility functions
"""
import paramiko
from pathlib import Path
from typing import Dict, Any

from .constants import SSH_CONFIG_PATH, DEFAULT_SSH_PORT
from .exceptions import ConfigError


# ============================================================
# SSH Config Management
# ============================================================

def load_ssh_config(hostname: str) -> Dict[str, Any]:
    """
    Load configuration for specified Host from ~/.ssh/config.
    
    Args:
        hostname: Host name in SSH configuration
    
    Returns:
        Dictionary containing host, user, port, key_file
    
    Raises:
        ConfigError: If ~/.ssh/config doesn't exist
    """
    config_path = Path(SSH_CONFIG_PATH).expanduser()
    if not config_path.exists():
        raise ConfigError(f"{SSH_CONFIG_PATH} does not exist")

    ssh_config = paramiko.SSHConfig.from_path(str(config_path))
    entry = ssh_config.lookup(hostname)

    result: Dict[str, Any] = {
        "host": entry.get("hostname", hostname),
        "port": int(entry.get("port", DEFAULT_SSH_PORT)),
    }
    if entry.get("user"):
        result["user"] = entry["user"]
    if entry.get("identityfile"):
        result["key_file"] = entry["identityfile"][0]
    return result


# ============================================================
# Remote Path Utilities
# ============================================================

def normalize_remote_dir(path: str) -> str:
    """Ensure remote directory ends with '/' so artifact paths concatenate cleanly"""
    return path if path.endswith("/") else path + "/"
