"""
Topology domain models
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Literal

from ...core.exceptions import TopologyError

# Service names end up in remote file names and backend identifiers
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class Node:
    """A host serving a service on all of its ports"""
    ip: str


@dataclass
class RoutingConstraint:
    """
    One routing rule of a service; each constraint becomes its own backend.
    
    A constraint without domains and without paths is an unconditional
    default route for its backend.
    """
    order: int
    port: str
    domains: List[str] = field(default_factory=list)
    paths: List[str] = field(default_factory=list)
    auth: List[str] = field(default_factory=list)
    
    @property
    def is_default(self) -> bool:
        return not self.domains and not self.paths


@dataclass
class Service:
    """A named service: port aliases, routing constraints and nodes"""
    name: str
    ports: Dict[str, int]
    routes: List[RoutingConstraint] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)
    
    def resolve_port(self, alias: str) -> int:
        """Map an internal port alias to its numeric port"""
        try:
            return self.ports[alias]
        except KeyError:
            raise TopologyError(
                f"Service '{self.name}': unknown port alias '{alias}' "
                f"(known: {', '.join(self.ports) or 'none'})"
            ) from None
    
    def validate(self) -> None:
        """Validate service definition"""
        if not _NAME_PATTERN.match(self.name):
            raise TopologyError(f"Invalid service name: {self.name!r}")
        
        for alias, port in self.ports.items():
            if not isinstance(port, int) or isinstance(port, bool) or not (1 <= port <= 65535):
                raise TopologyError(f"Service '{self.name}': invalid port {alias}={port!r}")
        
        seen_orders = set()
        for route in self.routes:
            if route.order in seen_orders:
                raise TopologyError(
                    f"Service '{self.name}': duplicate route order {route.order}"
                )
            seen_orders.add(route.order)
            self.resolve_port(route.port)
        
        for node in self.nodes:
            if not node.ip:
                raise TopologyError(f"Service '{self.name}': node without IP address")


@dataclass
class Topology:
    """Desired state: ordered list of services"""
    services: List[Service] = field(default_factory=list)
    
    def validate(self) -> None:
        """Validate all services and name uniqueness"""
        names = set()
        for service in self.services:
            if service.name in names:
                raise TopologyError(f"Duplicate service name: {service.name}")
            names.add(service.name)
            service.validate()


@dataclass(frozen=True)
class Artifact:
    """One file to exist on the remote host"""
    path: str
    content: str
    kind: Literal["frontend", "backend"] = "backend"


@dataclass(frozen=True)
class BuildResult:
    """Artifacts generated for one reconciliation pass"""
    frontend: Artifact
    backends: List[Artifact]
    
    @property
    def artifacts(self) -> List[Artifact]:
        """All artifacts, backends first then the frontend"""
        return [*self.backends, self.frontend]
