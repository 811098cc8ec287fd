"""
Topology domain module
"""
from .models import Node, RoutingConstraint, Service, Topology, Artifact, BuildResult
from .builder import build, backend_name, backend_filename

__all__ = [
    "Node",
    "RoutingConstraint",
    "Service",
    "Topology",
    "Artifact",
    "BuildResult",
    "build",
    "backend_name",
    "backend_filename",
]
