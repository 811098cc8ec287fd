"""
HAProxy configuration generation.

Turns a service topology into one backend file per routing constraint and a
single frontend file. Output must be byte-identical for identical input:
remote change detection compares content hashes, so every traversal below
walks an explicitly ordered list.
"""
from dataclasses import dataclass
from typing import List, TYPE_CHECKING

from ...core.constants import (
    BACKEND_FILENAME_TEMPLATE,
    BACKEND_NAME_TEMPLATE,
    FRONTEND_FILENAME,
    FRONTEND_NAME,
    FRONTEND_HTTP_NAME,
    FRONTEND_HTTPS_NAME,
)
from ...core.exceptions import ConfigError, TopologyError
from ...core.logging import get_logger
from .models import Artifact, BuildResult, RoutingConstraint, Service, Topology

if TYPE_CHECKING:
    from ..sync.models import SyncConfig

logger = get_logger(__name__)

INDENT = "\t"


@dataclass(frozen=True)
class _Route:
    """Routing inputs of one backend, in build order"""
    backend: str
    constraint: RoutingConstraint


def backend_name(service: Service, route: RoutingConstraint) -> str:
    return BACKEND_NAME_TEMPLATE.format(service=service.name, order=route.order)


def backend_filename(service: Service, route: RoutingConstraint) -> str:
    return BACKEND_FILENAME_TEMPLATE.format(service=service.name, order=route.order)


# ============================================================
# Backends
# ============================================================

def render_backend(service: Service, route: RoutingConstraint) -> str:
    """Render the backend stanza of one routing constraint"""
    name = backend_name(service, route)
    port = service.resolve_port(route.port)
    
    lines = [f"backend {name}"]
    
    for index, realm in enumerate(route.auth):
        # ACL names carry the backend name so realms never alias across files
        acl = f"AuthOK_{name}_{index}"
        lines.append(f"{INDENT}acl {acl} http_auth({realm})")
        lines.append(f"{INDENT}http-request auth realm {realm} if !{acl}")
    
    for index, node in enumerate(service.nodes):
        lines.append(f"{INDENT}server srv{index} {node.ip}:{port}")
    
    return "\n".join(lines) + "\n"


# ============================================================
# Frontend
# ============================================================

def collect_domains(routes: List[_Route]) -> List[str]:
    """Every domain across all routes, first occurrence order, no duplicates"""
    seen = set()
    domains = []
    for route in routes:
        for domain in route.constraint.domains:
            if domain not in seen:
                seen.add(domain)
                domains.append(domain)
    return domains


def _certificate_refs(config: "SyncConfig", domains: List[str]) -> str:
    if domains and not config.tls_cert_dir:
        raise ConfigError(
            "tls_cert_dir is required when https_port is set and routes declare domains"
        )
    base = (config.tls_cert_dir or "").rstrip("/")
    return "".join(f" crt {base}/{domain}/{domain}.pem" for domain in domains)


def _render_bindings(config: "SyncConfig", domains: List[str]) -> List[str]:
    if config.https_port and config.force_https:
        return [
            f"frontend {FRONTEND_HTTP_NAME}",
            f"{INDENT}bind *:{config.http_port}",
            f"{INDENT}http-request redirect scheme https",
            "",
            f"frontend {FRONTEND_HTTPS_NAME}",
            f"{INDENT}bind *:{config.https_port} ssl{_certificate_refs(config, domains)}",
        ]
    
    lines = [f"frontend {FRONTEND_NAME}", f"{INDENT}bind *:{config.http_port}"]
    if config.https_port:
        lines.append(
            f"{INDENT}bind *:{config.https_port} ssl{_certificate_refs(config, domains)}"
        )
    return lines


def _render_routing(routes: List[_Route]) -> List[str]:
    """
    ACLs and backend selection lines.
    
    Rule identifiers are indexed by backend position and rule position so
    they are unique across the whole frontend. Unconditional selections go
    after all conditional ones, keeping build order among themselves.
    """
    lines: List[str] = []
    defaults: List[str] = []
    
    for backend_index, route in enumerate(routes):
        rules = []
        rule_index = 0
        for domain in route.constraint.domains:
            rule = f"host-{backend_index}-{rule_index}"
            lines.append(f"{INDENT}acl {rule} hdr(host) -i {domain}")
            rules.append(rule)
            rule_index += 1
        for path in route.constraint.paths:
            rule = f"path-{backend_index}-{rule_index}"
            lines.append(f"{INDENT}acl {rule} path_beg {path}")
            rules.append(rule)
            rule_index += 1
        
        if rules:
            lines.append(f"{INDENT}use_backend {route.backend} if {' || '.join(rules)}")
        else:
            defaults.append(f"{INDENT}use_backend {route.backend}")
    
    return lines + defaults


def render_frontend(config: "SyncConfig", routes: List[_Route]) -> str:
    lines = _render_bindings(config, collect_domains(routes))
    lines.extend(_render_routing(routes))
    return "\n".join(lines) + "\n"


# ============================================================
# Entry point
# ============================================================

def build(topology: Topology, config: "SyncConfig") -> BuildResult:
    """
    Generate all artifacts for a topology.
    
    Args:
        topology: Desired service topology
        config: Sync configuration (ports, TLS directory, remote directory)
    
    Returns:
        BuildResult with the frontend and one backend per routing constraint
    
    Raises:
        TopologyError: If the topology is invalid or two artifacts collide
        ConfigError: If certificates are needed but tls_cert_dir is unset
    """
    topology.validate()
    
    backends: List[Artifact] = []
    routes: List[_Route] = []
    paths = set()
    
    for service in topology.services:
        for constraint in service.routes:
            path = config.remote_dir + backend_filename(service, constraint)
            if path in paths:
                raise TopologyError(f"Artifact path collision: {path}")
            paths.add(path)
            
            backends.append(Artifact(path=path, content=render_backend(service, constraint)))
            routes.append(_Route(backend=backend_name(service, constraint), constraint=constraint))
    
    frontend = Artifact(
        path=config.remote_dir + FRONTEND_FILENAME,
        content=render_frontend(config, routes),
        kind="frontend",
    )
    logger.debug(f"Built {len(backends)} backend artifacts and 1 frontend artifact")
    return BuildResult(frontend=frontend, backends=backends)
