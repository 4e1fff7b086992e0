"""
PORTS - Interfaces the infrastructure layer implements.
"""

from chatsync.domain.ports.backend import BackendPort

__all__ = ["BackendPort"]
