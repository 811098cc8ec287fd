"""
Sync configuration and topology parsers
"""
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Tuple

from ...core.constants import (
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_TIMEOUT,
    DEFAULT_PARALLEL,
    DEFAULT_TRANSPORT,
)
from ...core.exceptions import ConfigError, TopologyError
from ...core.utils import load_ssh_config
from ...domain.sync import SyncConfig
from ...domain.topology import Node, RoutingConstraint, Service, Topology


@dataclass(frozen=True)
class ConfigEntry:
    """A recognized configuration key"""
    name: str
    mandatory: bool
    type: type


CONFIG_ENTRIES: Tuple[ConfigEntry, ...] = (
    ConfigEntry("host", True, str),
    ConfigEntry("port", False, int),
    ConfigEntry("user", True, str),
    ConfigEntry("password", False, str),
    ConfigEntry("key_file", False, str),
    ConfigEntry("remote_dir", True, str),
    ConfigEntry("http_port", True, int),
    ConfigEntry("https_port", False, int),
    ConfigEntry("force_https", False, bool),
    ConfigEntry("tls_cert_dir", False, str),
    ConfigEntry("reload_command", True, str),
    ConfigEntry("transport", False, str),
    ConfigEntry("use_cat", False, bool),
    ConfigEntry("timeout", False, int),
    ConfigEntry("parallel", False, int),
)


def _check_type(name: str, value: Any, expected: type) -> None:
    # bool is an int subclass; keep them apart
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"Configuration value '{name}' must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(
            f"Configuration value '{name}' must be of type {expected.__name__}, got {value!r}"
        )


# ============================================================
# Sync configuration
# ============================================================

def parse_sync_config(cfg: Dict[str, Any]) -> SyncConfig:
    """
    Build a validated SyncConfig from a merged configuration dictionary.
    
    Supports ssh_config = "<Host>" to read host, user, port and key file
    from ~/.ssh/config; explicit keys take precedence.
    
    Raises:
        ConfigError: If a required value is missing or malformed
    """
    values: Dict[str, Any] = {}
    if "ssh_config" in cfg:
        values.update(load_ssh_config(cfg["ssh_config"]))
    values.update({k: v for k, v in cfg.items() if v is not None})
    if "key" in values and "key_file" not in values:
        values["key_file"] = values["key"]
    
    for entry in CONFIG_ENTRIES:
        if entry.name not in values:
            if entry.mandatory:
                raise ConfigError(f"Missing required configuration value: {entry.name}")
            continue
        _check_type(entry.name, values[entry.name], entry.type)
    
    transport = values.get("transport")
    if transport is None:
        transport = "command" if values.get("use_cat") else DEFAULT_TRANSPORT
    
    config = SyncConfig(
        host=values["host"],
        user=values["user"],
        remote_dir=values["remote_dir"],
        http_port=values["http_port"],
        reload_command=values["reload_command"],
        port=values.get("port", DEFAULT_SSH_PORT),
        password=values.get("password"),
        key_file=values.get("key_file"),
        https_port=values.get("https_port"),
        force_https=values.get("force_https", False),
        tls_cert_dir=values.get("tls_cert_dir"),
        transport=transport,
        timeout=values.get("timeout", DEFAULT_SSH_TIMEOUT),
        parallel=values.get("parallel", DEFAULT_PARALLEL),
    )
    config.validate()
    return config


# ============================================================
# Topology
# ============================================================

def _string_list(owner: str, key: str, value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TopologyError(f"{owner}: '{key}' must be a list of strings")
    return list(value)


def parse_node(owner: str, item: Any) -> Node:
    """Parse a node given as "10.0.0.5" or { ip = "10.0.0.5" }"""
    if isinstance(item, str):
        return Node(ip=item)
    if isinstance(item, dict) and isinstance(item.get("ip"), str):
        return Node(ip=item["ip"])
    raise TopologyError(f"{owner}: invalid node {item!r}")


def parse_route(owner: str, item: Any) -> RoutingConstraint:
    """Parse a [[service.route]] table"""
    if not isinstance(item, dict):
        raise TopologyError(f"{owner}: route must be a table, got {item!r}")
    order = item.get("order")
    if not isinstance(order, int) or isinstance(order, bool):
        raise TopologyError(f"{owner}: route 'order' must be an integer, got {order!r}")
    port = item.get("port")
    if not isinstance(port, str):
        raise TopologyError(f"{owner}: route {order} 'port' must name a port alias")
    
    return RoutingConstraint(
        order=order,
        port=port,
        domains=_string_list(owner, "domains", item.get("domains")),
        paths=_string_list(owner, "paths", item.get("paths")),
        auth=_string_list(owner, "auth", item.get("auth")),
    )


def parse_service(item: Any) -> Service:
    """Parse a [[service]] table"""
    if not isinstance(item, dict):
        raise TopologyError(f"Service must be a table, got {item!r}")
    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise TopologyError(f"Service without name: {item!r}")
    owner = f"Service '{name}'"
    
    ports = item.get("ports", {})
    if not isinstance(ports, dict):
        raise TopologyError(f"{owner}: 'ports' must be a table of alias = port")
    routes = item.get("route", [])
    if not isinstance(routes, list):
        raise TopologyError(f"{owner}: routes must be an array of tables ([[service.route]])")
    nodes = item.get("nodes", [])
    if not isinstance(nodes, list):
        raise TopologyError(f"{owner}: 'nodes' must be a list, got {nodes!r}")
    
    return Service(
        name=name,
        ports=dict(ports),
        routes=[parse_route(owner, route) for route in routes],
        nodes=[parse_node(owner, node) for node in nodes],
    )


def parse_topology(data: Dict[str, Any]) -> Topology:
    """Parse topology document: a list of [[service]] tables"""
    services = data.get("service", [])
    if isinstance(services, dict):
        services = [services]
    if not isinstance(services, list):
        raise TopologyError("'service' must be an array of tables")
    
    topology = Topology(services=[parse_service(item) for item in services])
    topology.validate()
    return topology


def load_topology(path: Path) -> Topology:
    """Load and parse a topology TOML file"""
    if not path.exists():
        raise TopologyError(f"Topology file not found: {path}")
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise TopologyError(f"Failed to parse topology {path}: {e}") from e
    return parse_topology(data)
